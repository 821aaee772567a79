"""Metadata layer: projects, cubes and where their metadata comes from."""

from hbase_diag.metadata.models import (
    CUBE_KIND,
    CubeRealization,
    Project,
    Realization,
    RealizationEntry,
    Segment,
    UnsupportedRealization,
)
from hbase_diag.metadata.store import FileMetadataStore, KylinRestMetadataStore, MetadataStore

__all__ = [
    "CUBE_KIND",
    "CubeRealization",
    "FileMetadataStore",
    "KylinRestMetadataStore",
    "MetadataStore",
    "Project",
    "Realization",
    "RealizationEntry",
    "Segment",
    "UnsupportedRealization",
]
