"""Resolution layer: user-facing names to physical storage tables."""

from hbase_diag.resolution.resolver import (
    NotFoundError,
    RealizationResolver,
    ResolveMode,
    storage_identifiers,
)

__all__ = [
    "NotFoundError",
    "RealizationResolver",
    "ResolveMode",
    "storage_identifiers",
]
