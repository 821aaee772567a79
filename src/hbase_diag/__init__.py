"""Collect HBase diagnostics for the storage behind Kylin cubes and projects."""

__version__ = "0.1.0"
