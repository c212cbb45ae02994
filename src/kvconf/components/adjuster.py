"""Default normalization for loaded configurations.

Replaces every zero or negative tunable with its documented default. The
default tables are read-only and shared by all loads.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TypeVar

from ..core.config import (
    Config,
    LevelDBConfig,
    LMDBConfig,
    ReplicationConfig,
    RocksDBConfig,
    SnapshotConfig,
)
from ..core.types import KB, MB

logger = logging.getLogger(__name__)

_Section = TypeVar("_Section")

LEVELDB_DEFAULTS = MappingProxyType({
    "cache_size": 4 * MB,
    "block_size": 4 * KB,
    "write_buffer_size": 4 * MB,
    "max_open_files": 1024,
})

ROCKSDB_DEFAULTS = MappingProxyType({
    **LEVELDB_DEFAULTS,
    "max_write_buffer_num": 2,
    "min_write_buffer_number_to_merge": 1,
    "num_levels": 7,
    "level0_file_num_compaction_trigger": 4,
    "level0_slowdown_writes_trigger": 16,
    "level0_stop_writes_trigger": 64,
    "target_file_size_base": 32 * MB,
    "target_file_size_multiplier": 1,
    "max_bytes_for_level_base": 32 * MB,
    "max_bytes_for_level_multiplier": 1,
    "max_background_compactions": 1,
    "max_background_flushes": 1,
    "stats_dump_period_sec": 3600,
    "background_threads": 2,
    "high_priority_background_threads": 1,
})

LMDB_DEFAULTS = MappingProxyType({
    "map_size": 20 * MB,
})

REPLICATION_DEFAULTS = MappingProxyType({
    "expired_log_days": 7,
    "wait_sync_time": 500,
    "wait_max_slave_acks": 2,
})

SNAPSHOT_DEFAULTS = MappingProxyType({
    "max_num": 1,
})

ROOT_DEFAULTS = MappingProxyType({
    "conn_read_buffer_size": 4 * KB,
    "conn_write_buffer_size": 4 * KB,
    "ttl_check_interval": 1,
})


def default_for(default: int, value: int) -> int:
    """Return ``value`` if it is positive, else ``default``."""
    if value <= 0:
        return default
    return value


def _apply_defaults(section: _Section, defaults: Mapping[str, int]) -> _Section:
    changes = {}
    for name, default in defaults.items():
        value = getattr(section, name)
        adjusted = default_for(default, value)
        if adjusted != value:
            logger.debug(f"{type(section).__name__}.{name}: {value} -> {adjusted}")
            changes[name] = adjusted
    return dataclasses.replace(section, **changes)


def adjust_leveldb(cfg: LevelDBConfig) -> LevelDBConfig:
    return _apply_defaults(cfg, LEVELDB_DEFAULTS)


def adjust_rocksdb(cfg: RocksDBConfig) -> RocksDBConfig:
    return _apply_defaults(cfg, ROCKSDB_DEFAULTS)


def adjust_lmdb(cfg: LMDBConfig) -> LMDBConfig:
    return _apply_defaults(cfg, LMDB_DEFAULTS)


def adjust_replication(cfg: ReplicationConfig) -> ReplicationConfig:
    return _apply_defaults(cfg, REPLICATION_DEFAULTS)


def adjust_snapshot(cfg: SnapshotConfig) -> SnapshotConfig:
    return _apply_defaults(cfg, SNAPSHOT_DEFAULTS)


def adjust_config(cfg: Config) -> Config:
    """Return a fully populated copy of ``cfg``.

    Every section is normalized independently. The argument is never
    mutated and ``file_name`` is carried over, so applying this twice gives
    the same result as applying it once.
    """
    adjusted = _apply_defaults(cfg, ROOT_DEFAULTS)
    return dataclasses.replace(
        adjusted,
        leveldb=adjust_leveldb(cfg.leveldb),
        rocksdb=adjust_rocksdb(cfg.rocksdb),
        lmdb=adjust_lmdb(cfg.lmdb),
        replication=adjust_replication(cfg.replication),
        snapshot=adjust_snapshot(cfg.snapshot),
    )
