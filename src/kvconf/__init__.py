"""kvconf - startup configuration for a multi-engine storage server."""

from .core.config import (
    Config,
    LevelDBConfig,
    RocksDBConfig,
    LMDBConfig,
    ReplicationConfig,
    SnapshotConfig,
    DEFAULT_ADDR,
    DEFAULT_DB_NAME,
    DEFAULT_DATA_DIR,
)
from .core.errors import (
    ConfigError,
    NoConfigFileError,
    ConfigDecodeError,
    ConfigEncodeError,
)
from .core.types import KB, MB, GB
from .components.adjuster import adjust_config
from .components.loader import default_config, load_config_data, load_config_file
from .components.dumper import (
    config_to_dict,
    dumps_config,
    dump_config,
    dump_config_file,
    rewrite_config,
)

__all__ = [
    "Config",
    "LevelDBConfig",
    "RocksDBConfig",
    "LMDBConfig",
    "ReplicationConfig",
    "SnapshotConfig",
    "DEFAULT_ADDR",
    "DEFAULT_DB_NAME",
    "DEFAULT_DATA_DIR",
    "ConfigError",
    "NoConfigFileError",
    "ConfigDecodeError",
    "ConfigEncodeError",
    "KB",
    "MB",
    "GB",
    "adjust_config",
    "default_config",
    "load_config_data",
    "load_config_file",
    "config_to_dict",
    "dumps_config",
    "dump_config",
    "dump_config_file",
    "rewrite_config",
]
