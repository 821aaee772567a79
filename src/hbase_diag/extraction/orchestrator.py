"""Orchestrator: resolve → locate → collect → package."""

from __future__ import annotations

import logging
import shutil
from contextlib import ExitStack
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import httpx
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from hbase_diag.collection import (
    BundleCollector,
    CollectionReport,
    CommandExecutor,
    EndpointLocator,
    ShellCommandExecutor,
    StorageLayout,
    ZooKeeperMasterTracker,
)
from hbase_diag.config import ServiceConfig, Settings, get_settings, load_service_config
from hbase_diag.extraction.report import (
    REPORT_HEADER,
    REPORT_NO_ENDPOINT,
    REPORT_SECTION_COLLECTION,
    REPORT_SECTION_FAILURES,
    REPORT_SECTION_RESOURCES,
)
from hbase_diag.metadata import FileMetadataStore, KylinRestMetadataStore, MetadataStore
from hbase_diag.resolution import RealizationResolver, ResolveMode

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Result of a full extraction run."""

    mode: ResolveMode
    names: list[str]
    resources: list[str]
    destination: Path
    base_url: str | None = None
    collection: CollectionReport | None = None
    report: str = ""
    archive: Path | None = None

    @property
    def collected(self) -> bool:
        return self.collection is not None


def _open_store(settings: Settings, stack: ExitStack) -> MetadataStore:
    if settings.metadata_dir:
        logger.debug("Reading metadata from %s", settings.metadata_dir)
        return FileMetadataStore(settings.metadata_dir)
    store = KylinRestMetadataStore.connect(
        settings.kylin_url,
        settings.kylin_username,
        settings.kylin_password,
        timeout=settings.http_timeout,
    )
    stack.callback(store.close)
    return store


def _build_report(result: ExtractionResult) -> str:
    parts = [REPORT_HEADER]
    tables = "\n".join(f"- `{t}`" for t in result.resources) or "none"
    parts.append(
        REPORT_SECTION_RESOURCES.format(
            count=len(result.resources),
            subject=result.mode.value,
            names=", ".join(result.names),
            tables=tables,
        )
    )
    if result.collection is None:
        parts.append(REPORT_NO_ENDPOINT)
        return "\n".join(parts)
    report = result.collection
    parts.append(
        REPORT_SECTION_COLLECTION.format(
            base_url=report.base_url,
            ok=len(report.succeeded),
            total=len(report.outcomes),
            destination=report.destination,
        )
    )
    if report.failed:
        failures = "\n".join(f"- **{o.name}**: {o.error}" for o in report.failed)
        parts.append(REPORT_SECTION_FAILURES.format(failures=failures))
    return "\n".join(parts)


def run_extraction(
    mode: ResolveMode,
    names: Iterable[str],
    destination: Path,
    settings: Settings | None = None,
    *,
    store: MetadataStore | None = None,
    service_config: ServiceConfig | None = None,
    locator: EndpointLocator | None = None,
    http: httpx.Client | None = None,
    executor: CommandExecutor | None = None,
) -> ExtractionResult:
    """
    Resolve the names to HBase tables, locate the master and collect the bundle
    into destination. Raises NotFoundError before anything is written when a
    name does not resolve; a master that cannot be located skips collection.
    """
    opts = settings or get_settings()
    names = list(names)

    with ExitStack() as stack:
        # Resolve
        resolver = RealizationResolver(store or _open_store(opts, stack))
        resources = resolver.resolve(mode, names)
        result = ExtractionResult(mode=mode, names=names, resources=resources, destination=destination)

        # Locate
        cfg = service_config or load_service_config(opts)
        if locator is None:
            locator = EndpointLocator(ZooKeeperMasterTracker.from_service_config(cfg, opts.zookeeper_timeout))
        result.base_url = locator.locate(cfg)
        if result.base_url is None:
            logger.warning("HBase master not reachable; skipping collection")
            result.report = _build_report(result)
            return result

        # Collect
        if http is None:
            http = stack.enter_context(httpx.Client(timeout=opts.http_timeout, follow_redirects=True))
        collector = BundleCollector(
            http=http,
            executor=executor or ShellCommandExecutor(timeout=opts.command_timeout),
            layout=StorageLayout(
                root_dir=cfg.rootdir,
                namespace=opts.storage_namespace,
                table_name_prefix=opts.table_name_prefix,
                list_command=opts.hdfs_list_command,
            ),
        )
        result.collection = collector.collect(result.base_url, tuple(resources), destination)

    result.report = _build_report(result)
    return result


def package_bundle(bundle_dir: Path) -> Path:
    """Zip bundle_dir into <bundle_dir>.zip beside it and return the archive path."""
    bundle_dir = bundle_dir.resolve()
    archive = shutil.make_archive(
        str(bundle_dir),
        "zip",
        root_dir=bundle_dir.parent,
        base_dir=bundle_dir.name,
    )
    logger.info("Bundle packaged at %s", archive)
    return Path(archive)


def print_result(result: ExtractionResult, console: Console | None = None) -> None:
    """Print extraction result to console using Rich."""
    c = console or Console()
    c.print(Panel(Markdown(result.report), title="HBase Usage Extraction", border_style="blue"))
    if result.collection is not None and result.collection.outcomes:
        table = Table(title="Artifacts")
        table.add_column("Artifact")
        table.add_column("File")
        table.add_column("Status")
        for outcome in result.collection.outcomes:
            status = "[green]OK[/green]" if outcome.ok else "[red]Failed[/red]"
            table.add_row(outcome.name, str(outcome.path), status)
        c.print(table)
    if result.archive is not None:
        c.print(f"\n[bold]Archive:[/bold] {result.archive}")
