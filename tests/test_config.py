"""Tests for configuration resolution."""
from pathlib import Path

import pytest

from jsbin_export.config import DEFAULTS, load_config
from jsbin_export.errors import ConfigurationError


@pytest.fixture
def local_file(tmp_path):
    return tmp_path / "config.local.json"


def test_defaults(local_file):
    """Test built-in defaults when only credentials are given."""
    config = load_config({"username": "u", "password": "p"}, environ={}, local_file=local_file)
    assert config.folder == Path(DEFAULTS["folder"])
    assert config.delay == DEFAULTS["delay"]
    assert config.base_url == "https://jsbin.com"
    assert config.limit is None
    assert config.template is None
    assert config.timeout is None


def test_missing_password(local_file):
    """Test fail-fast on missing credentials."""
    with pytest.raises(ConfigurationError, match="Username or password are empty"):
        load_config({"username": "u"}, environ={}, local_file=local_file)


def test_empty_username(local_file):
    """Test that empty strings count as missing."""
    with pytest.raises(ConfigurationError, match="Username or password are empty"):
        load_config({"username": "", "password": "p"}, environ={}, local_file=local_file)


def test_priority_cli_over_env_over_file(local_file):
    """Test the order CLI > environment > local file > defaults."""
    local_file.write_text('{"username": "file", "password": "file", "folder": "file", "delay": 5}')
    environ = {"JSBIN_USERNAME": "env", "JSBIN_FOLDER": "env"}
    config = load_config({"username": "cli"}, environ=environ, local_file=local_file)
    assert config.username == "cli"
    assert config.folder == Path("env")
    assert config.password == "file"
    assert config.delay == 5
    assert config.base_url == DEFAULTS["base_url"]


def test_bare_env_keys(local_file):
    """Test unprefixed variable names."""
    environ = {"username": "u", "password": "p", "delay": "10"}
    config = load_config({}, environ=environ, local_file=local_file)
    assert (config.username, config.password, config.delay) == ("u", "p", 10)


def test_prefixed_env_wins_over_bare(local_file):
    """Test JSBIN_<KEY> before <key>."""
    environ = {"JSBIN_USERNAME": "prefixed", "username": "bare", "password": "p"}
    assert load_config({}, environ=environ, local_file=local_file).username == "prefixed"


def test_supplemental_keys_from_env(local_file):
    """Test limit, timeout, base URL and log level."""
    environ = {
        "JSBIN_USERNAME": "u",
        "JSBIN_PASSWORD": "p",
        "JSBIN_LIMIT": "2",
        "JSBIN_TIMEOUT": "7.5",
        "JSBIN_BASE_URL": "http://localhost:3000/",
        "JSBIN_LOG_LEVEL": "debug",
    }
    config = load_config({}, environ=environ, local_file=local_file)
    assert config.limit == 2
    assert config.timeout == 7.5
    assert config.base_url == "http://localhost:3000"
    assert config.log_level == "DEBUG"


def test_invalid_delay(local_file):
    """Test that a non-integer delay is rejected."""
    with pytest.raises(ConfigurationError, match="delay"):
        load_config({}, environ={"username": "u", "password": "p", "delay": "soon"}, local_file=local_file)


def test_negative_delay(local_file):
    """Test that a negative delay is rejected."""
    with pytest.raises(ConfigurationError, match="delay"):
        load_config({"username": "u", "password": "p", "delay": -1}, environ={}, local_file=local_file)


def test_local_file_must_be_object(local_file):
    """Test a JSON file that is not an object."""
    local_file.write_text("[1, 2]")
    with pytest.raises(ConfigurationError):
        load_config({"username": "u", "password": "p"}, environ={}, local_file=local_file)


def test_local_file_invalid_json(local_file):
    """Test a broken JSON file."""
    local_file.write_text("{username: u}")
    with pytest.raises(ConfigurationError):
        load_config({"username": "u", "password": "p"}, environ={}, local_file=local_file)


def test_password_not_in_repr(local_file):
    """Test that the password is not logged by accident."""
    config = load_config({"username": "u", "password": "hunter2"}, environ={}, local_file=local_file)
    assert "hunter2" not in repr(config)
