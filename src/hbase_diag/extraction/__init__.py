"""Extraction: resolve → locate → collect → package."""

from hbase_diag.extraction.orchestrator import (
    ExtractionResult,
    package_bundle,
    print_result,
    run_extraction,
)

__all__ = [
    "ExtractionResult",
    "package_bundle",
    "print_result",
    "run_extraction",
]
