"""
Settings for a link checker run.

Values are layered: defaults, then a YAML config file, then environment
variables, then command-line overrides.
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

from docs_link_checker.errors import ConfigError
from docs_link_checker.github import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = ".docs-link-checker.yaml"
TOKEN_ENV_VARS = ("GIT_REPO_TOKEN", "GITHUB_TOKEN")

DEFAULT_TIMEOUT = 5.0
DEFAULT_MAX_CONCURRENCY = 50
DEFAULT_DEADLINE = 10.0
DEFAULT_EXTENSIONS = (".rst", ".txt")

# YAML key -> Settings field
_KEY_ALIASES = {
    "git_repo_token": "github_token",
    "github_token": "github_token",
    "timeout": "timeout",
    "max_concurrency": "max_concurrency",
    "deadline": "deadline",
    "extensions": "extensions",
    "user_agent": "user_agent",
}


@dataclass(frozen=True)
class Settings:
    """Immutable configuration passed to the checker."""
    github_token: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    deadline: float = DEFAULT_DEADLINE
    extensions: Tuple[str, ...] = field(default=DEFAULT_EXTENSIONS)
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self):
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")

    def with_overrides(self, **overrides: Any) -> 'Settings':
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return replace(self, **_coerce(changes))


def _coerce(values: Mapping[str, Any]) -> Dict[str, Any]:
    coerced: Dict[str, Any] = {}
    for key, value in values.items():
        try:
            if key in ("timeout", "deadline"):
                coerced[key] = float(value)
            elif key == "max_concurrency":
                if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
                    raise ValueError(f"not an integer: {value!r}")
                coerced[key] = int(value)
            elif key == "extensions":
                if isinstance(value, str):
                    value = [value]
                coerced[key] = tuple(
                    ext if ext.startswith(".") else f".{ext}" for ext in (str(v) for v in value)
                )
            else:
                coerced[key] = None if value is None else str(value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"invalid value for {key}: {value!r}") from e
    return coerced


def default_config_path() -> Path:
    return Path.home() / DEFAULT_CONFIG_NAME


def read_config_file(path: Path) -> Dict[str, Any]:
    """
    Read a YAML config file into Settings field names.

    Args:
        path: Path of the YAML file

    Returns:
        Mapping of Settings fields to raw values

    Raises:
        ConfigError: If the file cannot be read or is not a YAML mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"config file {path} must contain a mapping")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        name = _KEY_ALIASES.get(str(key).lower())
        if name is None:
            logger.warning(f"Ignoring unknown config key {key!r} in {path}")
            continue
        values[name] = value
    return values


def token_from_env(environ: Mapping[str, str]) -> Optional[str]:
    for name in TOKEN_ENV_VARS:
        if environ.get(name):
            return environ[name]
    return None


def load_settings(
    config_file: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any
) -> Settings:
    """
    Build Settings from config file, environment and explicit overrides.

    Args:
        config_file: Explicit YAML config path; it must exist. When omitted
            ``~/.docs-link-checker.yaml`` is read if present.
        environ: Environment mapping (defaults to ``os.environ``)
        **overrides: Settings fields given on the command line; None means unset

    Returns:
        Resolved settings

    Raises:
        ConfigError: If the config file is unreadable or a value is invalid
    """
    if environ is None:
        environ = os.environ

    values: Dict[str, Any] = {}
    if config_file:
        values.update(read_config_file(Path(config_file)))
        logger.info(f"Using config file: {config_file}")
    else:
        path = default_config_path()
        if path.is_file():
            values.update(read_config_file(path))
            logger.info(f"Using config file: {path}")

    token = token_from_env(environ)
    if token:
        values["github_token"] = token

    settings = Settings().with_overrides(**values)
    return settings.with_overrides(**overrides)
