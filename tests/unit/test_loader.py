"""Unit tests for configuration loading."""

import shutil
import tempfile
from pathlib import Path

import pytest

from kvconf import (
    Config,
    ConfigDecodeError,
    DEFAULT_ADDR,
    DEFAULT_DATA_DIR,
    DEFAULT_DB_NAME,
    KB,
    MB,
    default_config,
    load_config_data,
    load_config_file,
)


@pytest.fixture
def temp_dir():
    """Create temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    yield tmpdir
    shutil.rmtree(tmpdir, ignore_errors=True)


def test_default_config_values():
    """Test the zero-configuration fallback."""
    cfg = default_config()

    assert cfg.addr == DEFAULT_ADDR == "127.0.0.1:6380"
    assert cfg.http_addr == ""
    assert cfg.data_dir == DEFAULT_DATA_DIR == "./var"
    assert cfg.db_name == DEFAULT_DB_NAME == "goleveldb"
    assert cfg.access_log == ""
    assert cfg.readonly is False
    assert cfg.lmdb.map_size == 20 * MB
    assert cfg.lmdb.nosync is True
    assert cfg.use_replication is False
    assert cfg.replication.wait_sync_time == 500
    assert cfg.replication.wait_max_slave_acks == 2
    assert cfg.replication.sync_log == 0
    assert cfg.replication.compression is True
    assert cfg.snapshot.max_num == 1
    assert cfg.rocksdb.allow_os_buffer is True
    assert cfg.rocksdb.disable_wal is False
    assert cfg.file_name == ""


def test_empty_document_equals_default():
    """Test an empty document yields the default config."""
    assert load_config_data(b"") == default_config()


def test_partial_override():
    """Test only the supplied key differs from the default."""
    cfg = load_config_data(b'addr = "0.0.0.0:9999"\n')

    assert cfg.addr == "0.0.0.0:9999"
    expected = default_config()
    expected.addr = "0.0.0.0:9999"
    assert cfg == expected


def test_nested_sections():
    """Test values inside sections are applied."""
    doc = """
db_name = "rocksdb"
use_replication = true

[rocksdb]
compression = 2
num_levels = 5
use_fsync = true

[replication]
path = "/data/rpl"
sync = true

[snapshot]
max_num = 3
"""
    cfg = load_config_data(doc)

    assert cfg.db_name == "rocksdb"
    assert cfg.use_replication is True
    assert cfg.rocksdb.compression == 2
    assert cfg.rocksdb.num_levels == 5
    assert cfg.rocksdb.use_fsync is True
    # Unset rocksdb fields still defaulted
    assert cfg.rocksdb.cache_size == 4 * MB
    assert cfg.replication.path == "/data/rpl"
    assert cfg.replication.sync is True
    assert cfg.replication.expired_log_days == 7
    assert cfg.snapshot.max_num == 3


def test_invalid_value_substituted():
    """Test a negative size becomes the default."""
    cfg = load_config_data(b"[leveldb]\ncache_size = -5\n")
    assert cfg.leveldb.cache_size == 4 * MB


def test_explicit_zero_substituted():
    """Test an explicit zero is treated like an absent key."""
    cfg = load_config_data(b"conn_read_buffer_size = 0\n")
    assert cfg.conn_read_buffer_size == 4 * KB


def test_explicit_false_overrides_true_default():
    """Test boolean keys present in the document override defaults."""
    cfg = load_config_data(b"[lmdb]\nnosync = false\n[replication]\ncompression = false\n")

    assert cfg.lmdb.nosync is False
    assert cfg.replication.compression is False


def test_unknown_keys_ignored():
    """Test unknown keys and sections do not fail the load."""
    doc = b'future_option = 1\n[leveldb]\nbloom_bits = 10\n[redis]\nport = 1\n'
    assert load_config_data(doc) == default_config()


def test_legacy_keys_accepted():
    """Test misspelled historical keys still load."""
    doc = b"conn_keepavlie_interval = 30\n[rocksdb]\nbackground_theads = 8\n"
    cfg = load_config_data(doc)

    assert cfg.conn_keepalive_interval == 30
    assert cfg.rocksdb.background_threads == 8


def test_canonical_key_wins_over_legacy():
    """Test the canonical spelling takes precedence."""
    doc = b"conn_keepalive_interval = 10\nconn_keepavlie_interval = 30\n"
    assert load_config_data(doc).conn_keepalive_interval == 10


def test_malformed_document():
    """Test TOML syntax errors raise ConfigDecodeError."""
    with pytest.raises(ConfigDecodeError):
        load_config_data(b"addr = \n[[[")


def test_invalid_utf8():
    """Test undecodable bytes raise ConfigDecodeError."""
    with pytest.raises(ConfigDecodeError):
        load_config_data(b"addr = \"\xff\xfe\"\n")


@pytest.mark.parametrize("doc, key", [
    (b'conn_read_buffer_size = "4k"\n', "conn_read_buffer_size"),
    (b"addr = 6380\n", "addr"),
    (b'readonly = "yes"\n', "readonly"),
    (b"ttl_check_interval = true\n", "ttl_check_interval"),
    (b"[leveldb]\ncompression = 1\n", "leveldb.compression"),
    (b"[rocksdb]\ncache_size = 1.5\n", "rocksdb.cache_size"),
    (b'leveldb = "fast"\n', "leveldb"),
])
def test_type_mismatch(doc, key):
    """Test mistyped values raise ConfigDecodeError naming the key."""
    with pytest.raises(ConfigDecodeError, match=key):
        load_config_data(doc)


def test_file_name_not_decoded():
    """Test the origin path cannot be set from the document."""
    cfg = load_config_data(b'file_name = "/tmp/x.toml"\n')
    assert cfg.file_name == ""


def test_load_file_records_origin(temp_dir):
    """Test loading from a file remembers its path."""
    path = Path(temp_dir) / "server.toml"
    path.write_text('addr = "10.0.0.1:6380"\n', encoding="utf-8")

    cfg = load_config_file(path)

    assert cfg.addr == "10.0.0.1:6380"
    assert cfg.file_name == str(path)


def test_load_missing_file(temp_dir):
    """Test read errors propagate unchanged."""
    with pytest.raises(FileNotFoundError):
        load_config_file(Path(temp_dir) / "missing.toml")


def test_load_file_decode_error(temp_dir):
    """Test decode errors from a file surface as ConfigDecodeError."""
    path = Path(temp_dir) / "bad.toml"
    path.write_text("addr = ", encoding="utf-8")

    with pytest.raises(ConfigDecodeError):
        load_config_file(path)


@pytest.mark.parametrize("name, section", [
    ("goleveldb", "leveldb"),
    ("leveldb", "leveldb"),
    ("rocksdb", "rocksdb"),
    ("lmdb", "lmdb"),
])
def test_engine_config(name, section):
    """Test the active engine section follows db_name."""
    cfg = load_config_data(f'db_name = "{name}"\n')
    assert cfg.engine_config() is getattr(cfg, section)


def test_engine_config_unknown_engine():
    """Test engines without tunables have no section."""
    assert Config(db_name="memory").engine_config() is None
