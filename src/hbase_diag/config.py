"""Configuration: tool settings and the HBase service configuration."""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from pydantic import AliasChoices, BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_HBASE_CONF_DIR = Path("/etc/hbase/conf")
HBASE_SITE_FILE = "hbase-site.xml"


class Settings(BaseSettings):
    """Tool settings loaded from environment and .env."""

    model_config = SettingsConfigDict(
        env_prefix="HBASE_DIAG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # HBase
    hbase_conf_dir: Path | None = Field(
        default=None,
        validation_alias=AliasChoices("HBASE_DIAG_HBASE_CONF_DIR", "HBASE_CONF_DIR"),
        description="Directory holding hbase-site.xml; defaults to /etc/hbase/conf",
    )
    master_info_bind_address: str | None = Field(
        default=None, description="Override for hbase.master.info.bindAddress"
    )
    master_info_port: int | None = Field(
        default=None, ge=1, le=65535, description="Override for hbase.master.info.port"
    )
    hbase_rootdir: str | None = Field(default=None, description="Override for hbase.rootdir")

    # Kylin storage
    storage_namespace: str = Field(default="default", description="HBase namespace holding cube tables")
    table_name_prefix: str = Field(default="KYLIN_", description="Prefix of cube table names")
    hdfs_list_command: str = Field(
        default="hadoop fs -ls",
        description="Command used to list the table directories on HDFS",
    )

    # Metadata
    kylin_url: str = Field(
        default="http://localhost:7070/kylin",
        description="Base URL of the Kylin server answering metadata queries",
    )
    kylin_username: str = Field(default="ADMIN", description="Kylin user for REST calls")
    kylin_password: str = Field(default="KYLIN", description="Kylin password for REST calls")
    metadata_dir: Path | None = Field(
        default=None,
        description="Read metadata from a dump directory instead of the REST API",
    )

    # Timeouts (seconds)
    http_timeout: float = Field(default=30.0, gt=0, description="Per-request HTTP timeout")
    command_timeout: float = Field(default=300.0, gt=0, description="Timeout of the HDFS listing")
    zookeeper_timeout: float = Field(default=10.0, gt=0, description="ZooKeeper connect/read timeout")


class ServiceConfig(BaseModel):
    """The parts of the HBase configuration this tool reads."""

    info_bind_address: str = "0.0.0.0"
    info_port: int = 16010
    rootdir: str = "/hbase"
    zookeeper_quorum: str = "localhost"
    zookeeper_client_port: int = 2181
    znode_parent: str = "/hbase"

    @property
    def zookeeper_hosts(self) -> str:
        """Quorum as a kazoo host string; hosts without a port get the client port."""
        hosts = []
        for host in self.zookeeper_quorum.split(","):
            host = host.strip()
            if not host:
                continue
            hosts.append(host if ":" in host else f"{host}:{self.zookeeper_client_port}")
        return ",".join(hosts)


def read_hadoop_xml(path: Path) -> dict[str, str]:
    """Parse a Hadoop-style <configuration><property> file into a dict."""
    props: dict[str, str] = {}
    root = ET.parse(path).getroot()
    for prop in root.iter("property"):
        name = prop.findtext("name")
        if not name:
            continue
        props[name.strip()] = (prop.findtext("value") or "").strip()
    return props


def load_service_config(settings: Settings) -> ServiceConfig:
    """Build the HBase service configuration from hbase-site.xml and settings overrides."""
    conf_dir = settings.hbase_conf_dir or DEFAULT_HBASE_CONF_DIR
    site = conf_dir / HBASE_SITE_FILE
    props: dict[str, str] = {}
    if site.is_file():
        props = read_hadoop_xml(site)
    else:
        logger.warning("%s not found, using HBase defaults", site)

    defaults = ServiceConfig()
    cfg = ServiceConfig(
        info_bind_address=props.get("hbase.master.info.bindAddress", defaults.info_bind_address),
        info_port=int(props.get("hbase.master.info.port", defaults.info_port)),
        rootdir=props.get("hbase.rootdir", defaults.rootdir),
        zookeeper_quorum=props.get("hbase.zookeeper.quorum", defaults.zookeeper_quorum),
        zookeeper_client_port=int(
            props.get("hbase.zookeeper.property.clientPort", defaults.zookeeper_client_port)
        ),
        znode_parent=props.get("zookeeper.znode.parent", defaults.znode_parent),
    )
    if settings.master_info_bind_address:
        cfg.info_bind_address = settings.master_info_bind_address
    if settings.master_info_port:
        cfg.info_port = settings.master_info_port
    if settings.hbase_rootdir:
        cfg.rootdir = settings.hbase_rootdir
    return cfg


def get_settings() -> Settings:
    """Return validated settings instance."""
    return Settings()
