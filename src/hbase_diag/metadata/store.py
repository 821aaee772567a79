"""Look up projects and realizations in Kylin metadata."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Callable, Protocol

import httpx

from hbase_diag.metadata.models import (
    CUBE_KIND,
    CubeRealization,
    Project,
    Realization,
    UnsupportedRealization,
)

logger = logging.getLogger(__name__)


class MetadataStore(Protocol):
    """Read-only view over project and realization metadata."""

    def get_project(self, name: str) -> Project | None: ...

    def get_cube(self, name: str) -> Realization | None: ...

    def get_realization(self, kind: str, name: str) -> Realization | None: ...


def _same_name(candidate: str | None, name: str) -> bool:
    """Kylin project and cube names are case-insensitive."""
    return candidate is not None and candidate.casefold() == name.casefold()


def _realization_for_kind(
    kind: str, name: str, cube_lookup: Callable[[str], Realization | None]
) -> Realization | None:
    if kind.upper() == CUBE_KIND:
        return cube_lookup(name)
    return UnsupportedRealization(kind=kind, name=name)


class KylinRestMetadataStore:
    """Metadata served by a running Kylin instance over its REST API."""

    def __init__(self, client: httpx.Client) -> None:
        self._client = client

    @classmethod
    def connect(
        cls, base_url: str, username: str, password: str, timeout: float = 30.0
    ) -> KylinRestMetadataStore:
        """Build a store with its own client; the caller closes it via close()."""
        client = httpx.Client(
            base_url=base_url.rstrip("/") + "/",
            auth=(username, password),
            timeout=timeout,
            headers={"Accept": "application/json"},
        )
        return cls(client)

    def close(self) -> None:
        self._client.close()

    def get_project(self, name: str) -> Project | None:
        response = self._client.get("api/projects")
        response.raise_for_status()
        for item in response.json():
            if _same_name(item.get("name"), name):
                return Project.model_validate(item)
        return None

    def get_cube(self, name: str) -> Realization | None:
        # The server matches cubeName as a substring; keep the full-name match only.
        response = self._client.get("api/cubes", params={"cubeName": name})
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        response.raise_for_status()
        for item in response.json():
            if _same_name(item.get("name"), name):
                return CubeRealization.model_validate(item)
        return None

    def get_realization(self, kind: str, name: str) -> Realization | None:
        return _realization_for_kind(kind, name, self.get_cube)


class FileMetadataStore:
    """Metadata read from a dump laid out as project/<name>.json and cube/<name>.json."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def _find(self, folder: str, name: str) -> Path | None:
        path = self.root / folder / f"{name}.json"
        if path.is_file():
            return path
        if not path.parent.is_dir():
            return None
        for candidate in sorted(path.parent.glob("*.json")):
            if _same_name(candidate.stem, name):
                return candidate
        return None

    def _load(self, folder: str, name: str) -> dict[str, Any] | None:
        path = self._find(folder, name)
        if path is None:
            logger.debug("No %s metadata for %s under %s", folder, name, self.root)
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def get_project(self, name: str) -> Project | None:
        data = self._load("project", name)
        return Project.model_validate(data) if data is not None else None

    def get_cube(self, name: str) -> Realization | None:
        data = self._load("cube", name)
        return CubeRealization.model_validate(data) if data is not None else None

    def get_realization(self, kind: str, name: str) -> Realization | None:
        return _realization_for_kind(kind, name, self.get_cube)
