"""Collect HBase master pages, configuration and HDFS listings into a bundle directory."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable

import httpx

from hbase_diag.collection.executor import CommandExecutor
from hbase_diag.collection.models import ArtifactOutcome, CollectionReport

logger = logging.getLogger(__name__)

HDFS_CHECK_COMMAND = "{list_cmd} -R {root_dir}/data/{namespace}/{prefix}*"

# (artifact name, URL path below the master base URL, file below the bundle root)
MASTER_PAGES: tuple[tuple[str, str, str], ...] = (
    ("master-status", "master-status", "master/master-status.html"),
    ("conf", "conf", "conf/hbase-conf.xml"),
    ("jmx", "jmx", "jmx/jmx.html"),
    ("dump", "dump", "dump/dump"),
)
HDFS_LISTING = "hdfs/hdfs-files.list"


@dataclass(frozen=True)
class StorageLayout:
    """Where cube tables live on HDFS."""

    root_dir: str
    namespace: str = "default"
    table_name_prefix: str = "KYLIN_"
    list_command: str = "hadoop fs -ls"

    def listing_command(self) -> str:
        return HDFS_CHECK_COMMAND.format(
            list_cmd=self.list_command,
            root_dir=self.root_dir.rstrip("/"),
            namespace=self.namespace,
            prefix=self.table_name_prefix,
        )


class BundleCollector:
    """
    Best-effort collector: every artifact is attempted independently and a
    failure is logged and recorded, never raised.
    """

    def __init__(
        self,
        http: httpx.Client,
        executor: CommandExecutor,
        layout: StorageLayout,
    ) -> None:
        self._http = http
        self._executor = executor
        self.layout = layout

    def collect(self, base_url: str, resources: Iterable[str], dest: Path) -> CollectionReport:
        """Fetch table pages for the given resources plus the cluster-wide artifacts into dest."""
        tables = tuple(resources)
        report = CollectionReport(base_url=base_url, destination=dest, resources=list(tables))

        logger.info("These htables are going to be extracted:")
        for table in tables:
            logger.info("%s is required", table)

        for table in tables:
            report.outcomes.append(
                self._attempt(
                    f"table {table}",
                    dest / "table" / f"{table}.html",
                    lambda table=table: self._get(base_url, "table.jsp", params={"name": table}),
                )
            )

        logger.info("The hbase master info/conf are going to be extracted...")
        for name, url_path, rel_path in MASTER_PAGES:
            report.outcomes.append(
                self._attempt(name, dest / rel_path, lambda url_path=url_path: self._get(base_url, url_path))
            )

        report.outcomes.append(
            self._attempt("hdfs-files", dest / HDFS_LISTING, self._list_table_files)
        )

        logger.info(
            "Collected %d of %d artifacts into %s",
            len(report.succeeded),
            len(report.outcomes),
            dest,
        )
        return report

    def _attempt(self, name: str, destination: Path, fetch: Callable[[], bytes]) -> ArtifactOutcome:
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_bytes(fetch())
        except Exception as e:
            logger.warning("HBase %s fetch failed: %s", name, e, exc_info=True)
            return ArtifactOutcome(name=name, path=destination, ok=False, error=str(e) or type(e).__name__)
        return ArtifactOutcome(name=name, path=destination, ok=True)

    def _get(self, base_url: str, path: str, params: dict[str, str] | None = None) -> bytes:
        response = self._http.get(base_url + path, params=params)
        response.raise_for_status()
        return response.content

    def _list_table_files(self) -> bytes:
        return self._executor.execute(self.layout.listing_command())
