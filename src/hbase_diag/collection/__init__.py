"""Collection layer: locate the HBase master and gather diagnostic artifacts."""

from hbase_diag.collection.collector import BundleCollector, StorageLayout
from hbase_diag.collection.executor import CommandError, CommandExecutor, ShellCommandExecutor
from hbase_diag.collection.locator import (
    AddressResolutionError,
    EndpointLocator,
    MasterAddressTracker,
    ZooKeeperMasterTracker,
    parse_master_znode,
)
from hbase_diag.collection.models import ArtifactOutcome, CollectionReport

__all__ = [
    "AddressResolutionError",
    "ArtifactOutcome",
    "BundleCollector",
    "CollectionReport",
    "CommandError",
    "CommandExecutor",
    "EndpointLocator",
    "MasterAddressTracker",
    "ShellCommandExecutor",
    "StorageLayout",
    "ZooKeeperMasterTracker",
    "parse_master_znode",
]
