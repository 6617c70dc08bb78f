"""Load the engine's DiscoveryConfig from a JSON file."""

import json
import logging
from pathlib import Path
from typing import Optional

from discovery.errors import ConfigError
from discovery.models.config import DEFAULT_CONFIG, DiscoveryConfig

logger = logging.getLogger(__name__)


def load_engine_config(path: Optional[Path]) -> DiscoveryConfig:
    """
    Read a config JSON (sectioned or flat keys) and merge it with the defaults.

    Raises ConfigError when the file cannot be read; pydantic's ValidationError
    when the values are invalid (e.g. weights that do not sum to 1.0).
    """
    if path is None:
        return DEFAULT_CONFIG
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read discovery config {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"Discovery config {path} must be a JSON object")
    config = DiscoveryConfig.from_dict(data)
    logger.info("[config] Loaded discovery config from %s (version %s)", path, config.algorithm_version)
    return config
