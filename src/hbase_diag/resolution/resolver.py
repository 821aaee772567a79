"""Resolve cube and project names into the HBase tables that store them."""

from __future__ import annotations

import logging
from enum import Enum
from functools import singledispatch
from typing import Iterable

from hbase_diag.metadata.models import CubeRealization, Realization, UnsupportedRealization
from hbase_diag.metadata.store import MetadataStore

logger = logging.getLogger(__name__)


class ResolveMode(str, Enum):
    """How the names given by the user are interpreted."""

    BY_CUBE = "cube"
    BY_PROJECT = "project"


class NotFoundError(LookupError):
    """A project or cube named by the user does not exist."""

    def __init__(self, subject: str, name: str) -> None:
        self.subject = subject
        self.name = name
        super().__init__(f"No {subject} found with name of {name}")


@singledispatch
def storage_identifiers(realization: Realization) -> list[str]:
    """Return the storage tables behind a realization, in segment order."""
    raise TypeError(f"Not a realization: {realization!r}")


@storage_identifiers.register
def _(realization: CubeRealization) -> list[str]:
    return [
        segment.storage_location_identifier
        for segment in realization.segments
        if segment.storage_location_identifier
    ]


@storage_identifiers.register
def _(realization: UnsupportedRealization) -> list[str]:
    logger.warning("Unknown realization type: %s (%s)", realization.kind, realization.name)
    return []


class RealizationResolver:
    """Turns cube or project names into a deduplicated, ordered list of table names."""

    def __init__(self, store: MetadataStore) -> None:
        self._store = store

    def resolve(self, mode: ResolveMode, names: Iterable[str]) -> list[str]:
        """
        Resolve every name in order. Raises NotFoundError on the first unknown
        project or cube; nothing is returned in that case.
        """
        tables: dict[str, None] = {}
        for name in names:
            for realization in self._realizations(mode, name):
                self._add(realization, tables)
        return list(tables)

    def _realizations(self, mode: ResolveMode, name: str) -> list[Realization]:
        if mode == ResolveMode.BY_PROJECT:
            project = self._store.get_project(name)
            if project is None:
                raise NotFoundError("project", name)
            realizations = []
            for entry in project.realizations:
                realization = self._store.get_realization(entry.kind, entry.name)
                if realization is None:
                    logger.warning(
                        "Project %s lists %s %s, which is not registered; skipping",
                        name,
                        entry.kind,
                        entry.name,
                    )
                    continue
                realizations.append(realization)
            return realizations

        cube = self._store.get_cube(name)
        if cube is None:
            raise NotFoundError("cube", name)
        return [cube]

    def _add(self, realization: Realization, tables: dict[str, None]) -> None:
        logger.info("Deal with realization %s of type %s", realization.name, realization.kind)
        for table in storage_identifiers(realization):
            if table in tables:
                logger.debug("%s already required, skipping duplicate", table)
                continue
            logger.info("Adding required resource %s", table)
            tables[table] = None
