"""
Menu loading.

Reads the profile registry from a YAML file once at startup:

    url: builds.example.com:2468
    host: 0.0.0.0
    port: 2468
    root: /srv/builds
    hash_algorithm: md5
    profiles:
      agent:
        source: /agent/
        destination: /usr/local/bin/
        github: https://github.com/example/agent/releases
        extra: [agent-plugins]
      agent-plugins:
        source: plugins
        destination: /usr/local/lib/agent/
        universal: true

Profiles keep the order they appear in the file.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from drivethru.core.exceptions import ConfigurationError
from drivethru.core.models import ArtifactProfile, Menu

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("/etc/drivethru/drivethru.yaml")
CONFIG_ENV_VAR = "DRIVETHRU_CONFIG"

# Environment variables that override top-level keys
ENV_OVERRIDES = {
    "DRIVETHRU_ROOT": "root",
    "DRIVETHRU_URL": "url",
}


def get_config_path() -> Path:
    """Return the configuration path from DRIVETHRU_CONFIG or the default."""
    env = os.getenv(CONFIG_ENV_VAR)
    if env:
        return Path(env)
    return DEFAULT_CONFIG_PATH


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "menu"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def build_menu(data: dict[str, Any], *, config_file: str | None = None) -> Menu:
    """
    Build a Menu from already-parsed configuration data.

    Args:
        data: Mapping with top-level keys and a ``profiles`` mapping
        config_file: Source path, used in error details

    Returns:
        Validated, immutable Menu

    Raises:
        ConfigurationError: If the data does not describe a valid menu
    """
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Configuration must be a mapping", config_file=config_file
        )

    raw_profiles = data.get("profiles") or {}
    if not isinstance(raw_profiles, dict):
        raise ConfigurationError(
            "profiles must be a mapping of name to settings",
            config_file=config_file,
            config_key="profiles",
        )

    profiles = []
    for name, settings in raw_profiles.items():
        if settings is None:
            settings = {}
        if not isinstance(settings, dict):
            raise ConfigurationError(
                f"Invalid profile {name}: settings must be a mapping",
                config_file=config_file,
                config_key=f"profiles.{name}",
            )
        settings = dict(settings)
        settings["name"] = str(name)
        try:
            profile = ArtifactProfile(**settings)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid profile {name}: {_format_validation_error(e)}",
                config_file=config_file,
                config_key=f"profiles.{name}",
            ) from e
        profiles.append(profile)
        logger.info(f"found profile named {profile.name}")

    # Empty values fall back to defaults
    settings = {
        key: value
        for key, value in data.items()
        if key != "profiles" and value not in (None, "")
    }
    for env_var, key in ENV_OVERRIDES.items():
        value = os.getenv(env_var)
        if value:
            settings[key] = value

    if "root" not in settings:
        raise ConfigurationError(
            "root is required", config_file=config_file, config_key="root"
        )

    try:
        menu = Menu(profiles=tuple(profiles), **settings)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration: {_format_validation_error(e)}",
            config_file=config_file,
        ) from e

    logger.info(f"loaded {len(menu.profiles)} profiles")
    return menu


def load_menu(path: Path | None = None) -> Menu:
    """
    Load the menu from a YAML file.

    Args:
        path: Configuration file (default: DRIVETHRU_CONFIG or /etc/drivethru/drivethru.yaml)

    Returns:
        Validated, immutable Menu

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    path = path or get_config_path()
    logger.info(f"loading config from {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read configuration: {e}", config_file=str(path)
        ) from e

    try:
        data = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Malformed YAML: {e}", config_file=str(path)
        ) from e

    return build_menu(data, config_file=str(path))
