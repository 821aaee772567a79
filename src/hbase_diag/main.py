"""CLI entrypoint for hbase-diag."""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from hbase_diag import __version__
from hbase_diag.config import get_settings
from hbase_diag.extraction import package_bundle, print_result, run_extraction
from hbase_diag.resolution import NotFoundError, ResolveMode


def split_names(value: str) -> list[str]:
    """Split a comma-separated option value, dropping blanks."""
    names = [name.strip() for name in value.split(",") if name.strip()]
    if not names:
        raise argparse.ArgumentTypeError(f"expected at least one name, got {value!r}")
    return names


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hbase-diag",
        description="Collect HBase diagnostics for the tables behind Kylin cubes or projects.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
        "--cube",
        type=split_names,
        help="Comma-separated cube names to extract",
    )
    target.add_argument(
        "--project",
        type=split_names,
        help="Comma-separated project names whose realizations to extract",
    )
    parser.add_argument(
        "--dest-dir",
        type=Path,
        default=Path("."),
        help="Directory under which the bundle is written",
    )
    parser.add_argument(
        "--compress",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Zip the bundle directory when done",
    )
    parser.add_argument(
        "--metadata-dir",
        type=Path,
        default=None,
        help="Read Kylin metadata from a dump directory instead of the REST API",
    )
    parser.add_argument(
        "--hbase-conf-dir",
        type=Path,
        default=None,
        help="Directory holding hbase-site.xml (default: HBASE_CONF_DIR or /etc/hbase/conf)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def bundle_dir_name(now: datetime | None = None) -> str:
    return "hbase_" + (now or datetime.now()).strftime("%Y_%m_%d_%H_%M_%S")


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for hbase-diag CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True)],
    )
    logger = logging.getLogger("hbase_diag")
    logger.setLevel(logging.DEBUG if args.verbose else logging.INFO)

    if args.project is not None:
        mode, names = ResolveMode.BY_PROJECT, args.project
    else:
        mode, names = ResolveMode.BY_CUBE, args.cube

    try:
        settings = get_settings()
        if args.metadata_dir:
            settings.metadata_dir = args.metadata_dir
        if args.hbase_conf_dir:
            settings.hbase_conf_dir = args.hbase_conf_dir

        bundle_dir = args.dest_dir / bundle_dir_name()
        result = run_extraction(mode, names, bundle_dir, settings)
        if args.compress:
            bundle_dir.mkdir(parents=True, exist_ok=True)
            result.archive = package_bundle(bundle_dir)
            shutil.rmtree(bundle_dir)
        print_result(result, Console())
        return 0
    except NotFoundError as e:
        logger.error("%s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        logging.exception("Extraction failed")
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
