"""Locate the HBase master web UI."""

from __future__ import annotations

import logging
import struct
from typing import Iterator, Protocol

from kazoo.client import KazooClient
from kazoo.exceptions import KazooException
from kazoo.handlers.threading import KazooTimeoutError

from hbase_diag.config import ServiceConfig

logger = logging.getLogger(__name__)

WILDCARD_ADDRESS = "0.0.0.0"

# Znode payload framing written by HBase's RecoverableZooKeeper
_ZNODE_MAGIC = 0xFF
_PB_MAGIC = b"PBUF"


class AddressResolutionError(RuntimeError):
    """The active master's address could not be determined."""


class MasterAddressTracker(Protocol):
    def get_master_hostname(self) -> str:
        """Return the host name of the active master."""
        ...


def _read_varint(buf: bytes, pos: int) -> tuple[int, int]:
    value = 0
    shift = 0
    while True:
        if pos >= len(buf):
            raise AddressResolutionError("Truncated varint in master znode")
        byte = buf[pos]
        pos += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, pos
        shift += 7


def _iter_fields(buf: bytes) -> Iterator[tuple[int, int, int | bytes]]:
    """Yield (field number, wire type, value) of a protobuf message."""
    pos = 0
    while pos < len(buf):
        key, pos = _read_varint(buf, pos)
        number, wire_type = key >> 3, key & 0x7
        if wire_type == 0:
            value, pos = _read_varint(buf, pos)
            yield number, wire_type, value
        elif wire_type == 2:
            length, pos = _read_varint(buf, pos)
            if pos + length > len(buf):
                raise AddressResolutionError("Truncated field in master znode")
            yield number, wire_type, buf[pos : pos + length]
            pos += length
        elif wire_type == 1:
            pos += 8
        elif wire_type == 5:
            pos += 4
        else:
            raise AddressResolutionError(f"Unsupported protobuf wire type {wire_type}")


def _first_bytes_field(buf: bytes, number: int) -> bytes | None:
    for field, wire_type, value in _iter_fields(buf):
        if field == number and wire_type == 2:
            return value  # type: ignore[return-value]
    return None


def parse_master_znode(data: bytes) -> str:
    """
    Extract the master host name from the content of the <parent>/master znode.

    Handles the protobuf encoding (Master.master -> ServerName.host_name) and
    the legacy "host,port,startcode" text form.
    """
    if not data:
        raise AddressResolutionError("Master znode is empty")
    payload = data
    if data[0] == _ZNODE_MAGIC:
        if len(data) < 5:
            raise AddressResolutionError("Master znode header is truncated")
        (id_length,) = struct.unpack(">i", data[1:5])
        payload = data[5 + id_length :]
    if payload.startswith(_PB_MAGIC):
        server_name = _first_bytes_field(payload[len(_PB_MAGIC) :], 1)
        host = _first_bytes_field(server_name, 1) if server_name is not None else None
        if not host:
            raise AddressResolutionError("Master znode carries no host name")
        return host.decode("utf-8")
    host = payload.decode("utf-8", errors="replace").split(",", 1)[0].strip()
    if not host:
        raise AddressResolutionError("Master znode carries no host name")
    return host


class ZooKeeperMasterTracker:
    """Reads the active master from ZooKeeper with kazoo."""

    def __init__(self, hosts: str, znode_parent: str = "/hbase", timeout: float = 10.0) -> None:
        self.hosts = hosts
        self.znode_parent = znode_parent.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_service_config(cls, cfg: ServiceConfig, timeout: float = 10.0) -> ZooKeeperMasterTracker:
        return cls(cfg.zookeeper_hosts, cfg.znode_parent, timeout)

    def get_master_hostname(self) -> str:
        path = f"{self.znode_parent}/master"
        zk = KazooClient(hosts=self.hosts, timeout=self.timeout, read_only=True)
        try:
            zk.start(timeout=self.timeout)
            data, _ = zk.get(path)
        except (KazooException, KazooTimeoutError) as e:
            raise AddressResolutionError(f"Cannot read {path} from {self.hosts}: {e}") from e
        finally:
            zk.stop()
            zk.close()
        return parse_master_znode(data)


class EndpointLocator:
    """Determines the base URL of the master web UI."""

    def __init__(self, tracker: MasterAddressTracker) -> None:
        self._tracker = tracker

    def locate(self, cfg: ServiceConfig) -> str | None:
        """
        Return http://<host>:<port>/ for the master info server, or None when a
        wildcard bind address cannot be resolved to the active master.
        """
        host = cfg.info_bind_address
        if host == WILDCARD_ADDRESS:
            try:
                host = self._tracker.get_master_hostname()
            except Exception:
                logger.warning("Could not resolve the active HBase master", exc_info=True)
                return None
            logger.debug("Active HBase master is %s", host)
        return f"http://{host}:{cfg.info_port}/"
