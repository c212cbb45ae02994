"""Configuration loading.

Decodes a TOML document over the default configuration, then normalizes
the result. Keys absent from the document keep their default.
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib  # Python 3.11+
import typing
from pathlib import Path
from typing import Any

from ..core.config import LEGACY_KEYS, Config
from ..core.errors import ConfigDecodeError
from ..core.types import Document, PathLike
from .adjuster import adjust_config

logger = logging.getLogger(__name__)


def default_config() -> Config:
    """Return the adjusted default configuration."""
    return adjust_config(Config())


def load_config_data(data: bytes | str) -> Config:
    """Build a Config from a TOML document.

    Args:
        data: Raw document, bytes are decoded as UTF-8

    Raises:
        ConfigDecodeError: If the document is malformed or a value has the
            wrong type for its key
    """
    try:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        doc = tomllib.loads(text)
    except (UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.error(f"Failed to parse config: {e}")
        raise ConfigDecodeError(f"Malformed config document: {e}") from e

    cfg = _overlay(Config(), doc, "")
    return adjust_config(cfg)


def load_config_file(path: PathLike) -> Config:
    """Build a Config from a TOML file and remember where it came from.

    OSError from reading the file propagates unchanged.
    """
    data = Path(path).read_bytes()
    cfg = load_config_data(data)
    cfg.file_name = str(path)
    logger.info(f"Loaded config from {path}")
    return cfg


def _overlay(target: Any, table: Document, section: str) -> Any:
    """Return a copy of dataclass ``target`` with the keys of ``table`` applied."""
    table = _resolve_legacy_keys(table, section)
    hints = typing.get_type_hints(type(target))
    changes = {}

    for f in dataclasses.fields(target):
        if not f.metadata.get("serialize", True) or f.name not in table:
            continue
        key = f"{section}.{f.name}" if section else f.name
        value = table[f.name]
        expected = hints[f.name]

        if dataclasses.is_dataclass(expected):
            if not isinstance(value, dict):
                raise ConfigDecodeError(f"{key}: expected a table, got {type(value).__name__}")
            changes[f.name] = _overlay(getattr(target, f.name), value, key)
        else:
            changes[f.name] = _check_scalar(key, value, expected)

    known = {f.name for f in dataclasses.fields(target)}
    for name in table.keys() - known:
        logger.debug(f"Ignoring unknown config key {section + '.' if section else ''}{name}")

    return dataclasses.replace(target, **changes)


def _check_scalar(key: str, value: Any, expected: type) -> Any:
    # bool is an int subclass, so it must be ruled out explicitly
    if expected is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    else:
        ok = isinstance(value, expected)
    if not ok:
        raise ConfigDecodeError(
            f"{key}: expected {expected.__name__}, got {type(value).__name__}"
        )
    return value


def _resolve_legacy_keys(table: Document, section: str) -> Document:
    aliases = LEGACY_KEYS.get(section)
    if not aliases or not aliases.keys() & table.keys():
        return table

    resolved = dict(table)
    for old, new in aliases.items():
        if old in resolved:
            value = resolved.pop(old)
            if new not in resolved:
                logger.debug(f"Using legacy config key {old!r} for {new!r}")
                resolved[new] = value
    return resolved
