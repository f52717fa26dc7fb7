"""Configuration management from CLI arguments, environment and local files."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

import orjson
from dotenv import find_dotenv, load_dotenv

from jsbin_export.errors import ConfigurationError

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"

# Excluded from version control, read from the working directory
LOCAL_CONFIG_FILE = Path("config.local.json")
ENV_PREFIX = "JSBIN_"
# Also read from the environment without the prefix
BARE_ENV_KEYS = ("username", "password", "folder", "delay")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULTS: dict[str, Any] = {
    "username": None,
    "password": None,
    "folder": "export",
    "delay": 1000,
    "base_url": "https://jsbin.com",
    "limit": None,
    "template": None,
    "log_level": "INFO",
    "timeout": None,
}


@dataclass
class Config:
    """Resolved export configuration."""

    username: str
    password: str = field(repr=False)
    folder: Path = Path(DEFAULTS["folder"])
    delay: int = DEFAULTS["delay"]  # milliseconds
    base_url: str = DEFAULTS["base_url"]
    limit: Optional[int] = None
    template: Optional[Path] = None
    log_level: str = DEFAULTS["log_level"]
    timeout: Optional[float] = None

    def validate(self) -> None:
        """Validate required configuration."""
        if not self.username or not self.password:
            raise ConfigurationError("Username or password are empty")
        errors = []
        if self.delay < 0:
            errors.append("delay must not be negative")
        if self.limit is not None and self.limit < 0:
            errors.append("limit must not be negative")
        if self.timeout is not None and self.timeout <= 0:
            errors.append("timeout must be positive")
        if self.log_level not in LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        if errors:
            raise ConfigurationError(f"Configuration errors: {', '.join(errors)}")


def read_local_file(path: Path) -> dict[str, Any]:
    """Read the optional JSON settings file; a missing file yields no settings."""
    if not path.exists():
        return {}
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a JSON object")
    logger.debug(f"Loaded settings from {path}")
    return data


def _from_env(environ: Mapping[str, str], key: str) -> Optional[str]:
    """Look up JSBIN_<KEY> first, then the bare key name."""
    names = [ENV_PREFIX + key.upper()]
    if key in BARE_ENV_KEYS:
        names.append(key)
    for name in names:
        value = environ.get(name)
        if value:
            return value
    return None


def _to_int(key: str, value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from e


def _to_float(key: str, value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from e


def load_config(
    cli_args: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    local_file: Optional[Path] = None,
) -> Config:
    """
    Resolve the configuration, in order of priority:
    1. Command-line arguments
    2. Environment variables (a .env file is loaded when environ is not given)
    3. The local settings file, config.local.json by default
    4. Built-in defaults
    """
    cli_args = cli_args or {}
    if environ is None:
        load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ
    file_values = read_local_file(local_file or LOCAL_CONFIG_FILE)

    resolved: dict[str, Any] = {}
    for key, default in DEFAULTS.items():
        value = cli_args.get(key)
        if value is None:
            value = _from_env(environ, key)
        if value is None:
            value = file_values.get(key)
        resolved[key] = default if value is None else value

    delay = _to_int("delay", resolved["delay"])
    config = Config(
        username=resolved["username"] or "",
        password=resolved["password"] or "",
        folder=Path(resolved["folder"]),
        delay=DEFAULTS["delay"] if delay is None else delay,
        base_url=str(resolved["base_url"]).rstrip("/"),
        limit=_to_int("limit", resolved["limit"]),
        template=Path(resolved["template"]) if resolved["template"] else None,
        log_level=str(resolved["log_level"]).upper(),
        timeout=_to_float("timeout", resolved["timeout"]),
    )
    config.validate()
    return config
