"""Configuration schema for the storage server.

Defines every recognized option, grouped into one dataclass per document
section. Attribute names are the document keys. Field defaults here are the
construction defaults; numeric tunables left at zero are filled in by
``kvconf.components.adjuster``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType

from .types import MB

DEFAULT_ADDR = "127.0.0.1:6380"
DEFAULT_DB_NAME = "goleveldb"
DEFAULT_DATA_DIR = "./var"


@dataclass
class LevelDBConfig:
    """Tunables for the LevelDB-style engine."""

    compression: bool = False
    block_size: int = 0
    write_buffer_size: int = 0
    cache_size: int = 0
    max_open_files: int = 0


@dataclass
class RocksDBConfig:
    """Tunables for the RocksDB-style engine.

    ``compression`` is the engine's numeric compression type, 0 meaning none.
    """

    compression: int = 0
    block_size: int = 0
    write_buffer_size: int = 0
    cache_size: int = 0
    max_open_files: int = 0
    max_write_buffer_num: int = 0
    min_write_buffer_number_to_merge: int = 0
    num_levels: int = 0
    level0_file_num_compaction_trigger: int = 0
    level0_slowdown_writes_trigger: int = 0
    level0_stop_writes_trigger: int = 0
    target_file_size_base: int = 0
    target_file_size_multiplier: int = 0
    max_bytes_for_level_base: int = 0
    max_bytes_for_level_multiplier: int = 0
    disable_auto_compactions: bool = False
    disable_data_sync: bool = False
    use_fsync: bool = False
    max_background_compactions: int = 0
    max_background_flushes: int = 0
    allow_os_buffer: bool = True
    enable_statistics: bool = False
    stats_dump_period_sec: int = 0
    background_threads: int = 0
    high_priority_background_threads: int = 0
    disable_wal: bool = False


@dataclass
class LMDBConfig:
    """Tunables for the memory-mapped engine."""

    map_size: int = 20 * MB
    nosync: bool = True


@dataclass
class ReplicationConfig:
    """Replication log and acknowledgement policy.

    Attributes:
        path: Directory for replication logs
        sync: Wait for replica acks before acknowledging a write
        wait_sync_time: How long to wait for replica acks (ms)
        wait_max_slave_acks: Number of replica acks to wait for
        expired_log_days: Days to retain replication logs
        sync_log: Log fsync mode, 0 leaves syncing to the OS
        compression: Compress the replication stream
    """

    path: str = ""
    sync: bool = False
    wait_sync_time: int = 500
    wait_max_slave_acks: int = 2
    expired_log_days: int = 0
    sync_log: int = 0
    compression: bool = True


@dataclass
class SnapshotConfig:
    path: str = ""
    max_num: int = 1


# Engine name -> Config attribute holding its tunables
ENGINE_SECTIONS = MappingProxyType({
    "goleveldb": "leveldb",
    "leveldb": "leveldb",
    "rocksdb": "rocksdb",
    "lmdb": "lmdb",
})

# Misspelled keys accepted on load, per section ("" is the top level)
LEGACY_KEYS = MappingProxyType({
    "": MappingProxyType({"conn_keepavlie_interval": "conn_keepalive_interval"}),
    "rocksdb": MappingProxyType({"background_theads": "background_threads"}),
})


@dataclass
class Config:
    """Startup configuration for the storage server.

    All engine sections are carried at once; only the one named by
    ``db_name`` is read by the engine layer.

    Invariants:
        - ``file_name`` is set only when loaded from a file
        - ``file_name`` is never serialized and not part of equality
    """

    addr: str = DEFAULT_ADDR
    # Empty disables the HTTP diagnostics listener
    http_addr: str = ""
    slaveof: str = ""
    readonly: bool = False
    data_dir: str = DEFAULT_DATA_DIR
    db_name: str = DEFAULT_DB_NAME
    db_path: str = ""
    db_sync_commit: int = 0
    leveldb: LevelDBConfig = field(default_factory=LevelDBConfig)
    rocksdb: RocksDBConfig = field(default_factory=RocksDBConfig)
    lmdb: LMDBConfig = field(default_factory=LMDBConfig)
    # Empty disables the access log
    access_log: str = ""
    use_replication: bool = False
    replication: ReplicationConfig = field(default_factory=ReplicationConfig)
    snapshot: SnapshotConfig = field(default_factory=SnapshotConfig)
    conn_read_buffer_size: int = 0
    conn_write_buffer_size: int = 0
    conn_keepalive_interval: int = 0
    ttl_check_interval: int = 0

    file_name: str = field(default="", compare=False, metadata={"serialize": False})

    def engine_config(self) -> LevelDBConfig | RocksDBConfig | LMDBConfig | None:
        """Return the tunables of the engine selected by ``db_name``."""
        section = ENGINE_SECTIONS.get(self.db_name)
        if section is None:
            return None
        return getattr(self, section)
