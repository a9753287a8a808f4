"""Configuration loading for terrain-profile."""

import json
import logging
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".config" / "terrain-profile"
CONFIG_PATH = CONFIG_DIR / "terrain-profile.json"
LOCAL_CONFIG_PATH = Path("terrain-profile.json")

logger = logging.getLogger(__name__)

DEFAULTS = {
    "elevation_api": "open-elevation",
    "sample_count": 50,
    "request_timeout": 30.0,
    "nominatim_url": "https://nominatim.openstreetmap.org/search",
    "user_agent": "terrain-profile/1.0",
    "search_min_chars": 3,
    "search_limit": 5,
    "secret_key": "terrain-profile-dev",
}

# Environment variables that override config file values
ENV_OVERRIDES = {
    "elevation_api": "TERRAIN_PROFILE_ELEVATION_API",
    "sample_count": "TERRAIN_PROFILE_SAMPLES",
    "secret_key": "TERRAIN_PROFILE_SECRET_KEY",
}

# (key, type, smallest accepted value)
NUMERIC_SETTINGS = [
    ("sample_count", int, 1),
    ("request_timeout", float, 0.001),
    ("search_min_chars", int, 0),
    ("search_limit", int, 1),
]


def _load_config() -> dict:
    """Load configuration from config files.

    Merges config from global and local files:
    1. ~/.config/terrain-profile/terrain-profile.json (global, loaded first)
    2. ./terrain-profile.json (local, overrides global)

    Returns:
        Dict with merged config values, empty dict if no files exist.
    """
    config = {}
    for config_path in [CONFIG_PATH, LOCAL_CONFIG_PATH]:
        if config_path.exists():
            try:
                with config_path.open() as f:
                    config.update(json.load(f))
            except (json.JSONDecodeError, OSError):
                continue
    return config


def _coerce(key, value, convert, minimum):
    """Convert a numeric setting, falling back to its default when unusable."""
    try:
        if isinstance(value, bool):
            raise TypeError("booleans are not numbers")
        converted = convert(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring invalid %s setting %r, using %r", key, value, DEFAULTS[key])
        return DEFAULTS[key]
    if not converted >= minimum:  # also rejects NaN
        logger.warning("Ignoring out-of-range %s setting %r, using %r", key, value, DEFAULTS[key])
        return DEFAULTS[key]
    return converted


def get_settings() -> dict:
    """Return defaults merged with config files and environment overrides."""
    settings = dict(DEFAULTS)
    settings.update(_load_config())
    for key, env_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            settings[key] = value
    for key, convert, minimum in NUMERIC_SETTINGS:
        settings[key] = _coerce(key, settings[key], convert, minimum)
    return settings
