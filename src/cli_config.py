"""Runtime configuration for the gexreg CLI.

Settings are applied onto ``Constants`` in increasing precedence: YAML config
file, environment variables, then CLI flags.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from constants import Constants

logger = logging.getLogger(__name__)

# Config keys and the Constants attribute each one sets.
_CONFIG_KEYS = {
    "api_url": ("API_BASE_URL", str),
    "index": ("INDEX_FILE", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "retry_max": ("HTTP_RETRY_MAX", int),
    "retry_base_delay": ("HTTP_RETRY_BASE_DELAY_SEC", float),
    "cache_ttl": ("HTTP_CACHE_TTL_SEC", int),
}


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def load_config(path: Optional[str]) -> Dict[str, Any]:
    """Load the ``gexreg`` section of a YAML/JSON config file.

    The whole document is used when it has no ``gexreg`` section. A missing
    path returns an empty mapping.

    Raises:
        ConfigError: If the file does not exist or is not valid YAML.
    """
    if not path:
        return {}
    if not os.path.isfile(path):
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    section = data.get(Constants.CONFIG_SECTION, data)
    return section if isinstance(section, dict) else {}


def apply_config(config: Mapping[str, Any]) -> None:
    """Apply config file values onto Constants, ignoring unknown keys."""
    for key, value in config.items():
        target = _CONFIG_KEYS.get(key)
        if target is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, cast = target
        try:
            setattr(Constants, attr, cast(value) if value is not None else None)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for config key %s: %r", key, value)


def apply_env_overrides(environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply GEXREG_* environment variables onto Constants."""
    env = os.environ if environ is None else environ
    api_url = env.get(Constants.ENV_API_URL)
    if api_url and api_url.strip():
        Constants.API_BASE_URL = api_url.strip()
    index_file = env.get(Constants.ENV_INDEX_FILE)
    if index_file and index_file.strip():
        Constants.INDEX_FILE = index_file.strip()
    timeout = env.get(Constants.ENV_REQUEST_TIMEOUT)
    if timeout:
        try:
            Constants.REQUEST_TIMEOUT = int(timeout)
        except ValueError:
            logger.warning("Ignoring invalid %s: %r", Constants.ENV_REQUEST_TIMEOUT, timeout)


def apply_cli_overrides(args) -> None:
    """Apply CLI flags onto Constants (highest precedence)."""
    if getattr(args, "API_URL", None):
        Constants.API_BASE_URL = args.API_URL
        # An explicit API URL wins over an index file from config or env.
        Constants.INDEX_FILE = None
    if getattr(args, "INDEX_FILE", None):
        Constants.INDEX_FILE = args.INDEX_FILE
    if getattr(args, "REQUEST_TIMEOUT", None) is not None:
        Constants.REQUEST_TIMEOUT = int(args.REQUEST_TIMEOUT)


def configure(args, environ: Optional[Mapping[str, str]] = None) -> None:
    """Apply config file, environment and CLI settings in precedence order."""
    apply_config(load_config(getattr(args, "CONFIG", None)))
    apply_env_overrides(environ)
    apply_cli_overrides(args)
