"""Shared fakes for metadata, HTTP, ZooKeeper and shell collaborators."""

from __future__ import annotations

from typing import Callable

import httpx
import pytest

from hbase_diag.collection import AddressResolutionError
from hbase_diag.metadata import (
    CubeRealization,
    Project,
    Realization,
    RealizationEntry,
    Segment,
    UnsupportedRealization,
)

BASE_URL = "http://master.example:16010/"


def make_cube(name: str, *tables: str) -> CubeRealization:
    return CubeRealization(
        name=name,
        segments=[
            Segment(name=f"seg{i}", storage_location_identifier=t) for i, t in enumerate(tables)
        ],
    )


class FakeMetadataStore:
    def __init__(
        self,
        cubes: dict[str, CubeRealization] | None = None,
        projects: dict[str, list[tuple[str, str]]] | None = None,
    ) -> None:
        self.cubes = cubes or {}
        self.projects = {
            name: Project(
                name=name,
                realizations=[RealizationEntry(kind=k, name=n) for k, n in entries],
            )
            for name, entries in (projects or {}).items()
        }

    def get_project(self, name: str) -> Project | None:
        return self.projects.get(name)

    def get_cube(self, name: str) -> Realization | None:
        return self.cubes.get(name)

    def get_realization(self, kind: str, name: str) -> Realization | None:
        if kind == "CUBE":
            return self.cubes.get(name)
        return UnsupportedRealization(kind=kind, name=name)


class FakeExecutor:
    def __init__(self, output: str = "", error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.commands: list[str] = []

    def execute(self, command: str) -> bytes:
        self.commands.append(command)
        if self.error is not None:
            raise self.error
        return self.output.encode("utf-8")


class FakeTracker:
    def __init__(self, host: str | None = None, error: Exception | None = None) -> None:
        self.host = host
        self.error = error or AddressResolutionError("no master")
        self.calls = 0

    def get_master_hostname(self) -> str:
        self.calls += 1
        if self.host is None:
            raise self.error
        return self.host


def master_handler(
    failing: set[str] | None = None,
) -> Callable[[httpx.Request], httpx.Response]:
    """Serve every master page; paths (or table names) in `failing` fail."""
    failing = failing or set()

    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path.lstrip("/")
        if path == "table.jsp":
            table = request.url.params["name"]
            if table in failing:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, content=f"<html>{table}</html>".encode())
        if path in failing:
            return httpx.Response(500, content=b"boom")
        return httpx.Response(200, content=f"<{path}/>".encode())

    return handler


@pytest.fixture
def store() -> FakeMetadataStore:
    return FakeMetadataStore(
        cubes={
            "sales": make_cube("sales", "KYLIN_T1", "KYLIN_T2", "KYLIN_T1"),
            "orders": make_cube("orders", "KYLIN_T2", "KYLIN_T3"),
            "empty": make_cube("empty"),
        },
        projects={
            "retail": [("CUBE", "sales"), ("HYBRID", "sales_hybrid"), ("CUBE", "orders")],
            "archive": [("CUBE", "orders"), ("CUBE", "gone")],
        },
    )


@pytest.fixture
def http_client() -> httpx.Client:
    with httpx.Client(transport=httpx.MockTransport(master_handler())) as client:
        yield client
