"""Configuration serialization and atomic persistence.

Writes go through a temporary file in the destination directory followed by
a rename, so readers of the destination see either the old or the new
content and never a partial write.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TextIO

import tomli_w

from ..core.config import Config
from ..core.errors import ConfigEncodeError, NoConfigFileError
from ..core.types import PathLike

logger = logging.getLogger(__name__)

CONFIG_FILE_MODE = 0o644


def config_to_dict(cfg: Config) -> dict[str, Any]:
    """Return the serialized fields of ``cfg`` as nested plain dicts."""
    return _section_to_dict(cfg)


def _section_to_dict(section: Any) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for f in dataclasses.fields(section):
        if not f.metadata.get("serialize", True):
            continue
        value = getattr(section, f.name)
        out[f.name] = _section_to_dict(value) if dataclasses.is_dataclass(value) else value
    return out


def dumps_config(cfg: Config) -> str:
    """Encode ``cfg`` as an unindented TOML document."""
    try:
        return tomli_w.dumps(config_to_dict(cfg))
    except (TypeError, ValueError) as e:
        raise ConfigEncodeError(f"Failed to encode config: {e}") from e


def dump_config(cfg: Config, stream: TextIO) -> None:
    """Write ``cfg`` as TOML to a text stream."""
    stream.write(dumps_config(cfg))


def dump_config_file(cfg: Config, path: PathLike) -> None:
    """Atomically replace ``path`` with the TOML encoding of ``cfg``."""
    data = dumps_config(cfg).encode("utf-8")
    write_file_atomic(path, data, mode=CONFIG_FILE_MODE)
    logger.info(f"Dumped config to {path}")


def rewrite_config(cfg: Config) -> None:
    """Write ``cfg`` back to the file it was loaded from.

    Raises:
        NoConfigFileError: If ``cfg`` was not loaded from a file
    """
    if not cfg.file_name:
        raise NoConfigFileError()
    dump_config_file(cfg, cfg.file_name)


def write_file_atomic(path: PathLike, data: bytes, mode: int = CONFIG_FILE_MODE) -> None:
    """Write ``data`` to ``path`` via write-temp-then-rename.

    Invariants:
        - The temp file lives in the destination directory so the rename
          does not cross file systems
        - On failure the temp file is removed and ``path`` is untouched
        - Concurrent writers race; the last rename wins
    """
    path = Path(path)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    logger.debug(f"Writing {path} via {temp_name}")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
            os.fchmod(f.fileno(), mode)

        # Atomic rename
        os.replace(temp_name, path)
    except BaseException:
        try:
            os.unlink(temp_name)
        except FileNotFoundError:
            pass
        logger.debug(f"Removed temp file {temp_name} after failed write")
        raise
