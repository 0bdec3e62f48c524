"""
Configuration loader for the Tracking module.

Loads and validates configuration from config.yaml using the Pydantic
models in src.tracking.types.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.tracking.types import TrackingConfig

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> TrackingConfig:
    """
    Load tracking configuration from YAML file.

    Sections or keys missing from the file keep their model defaults.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated TrackingConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.

    Example:
        >>> config = load_config()
        >>> print(config.stability.required_stable_samples)
        5
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading tracking config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Invalid configuration file: expected a mapping, got {type(raw_config).__name__}"
        )

    try:
        config = TrackingConfig(**raw_config)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration file: {e}") from e

    logger.info("Successfully loaded tracking configuration")
    return config


def get_default_config() -> TrackingConfig:
    """
    Get default configuration from the bundled config.yaml file.

    Falls back to the model defaults if the file is missing.
    """
    if DEFAULT_CONFIG_PATH.exists():
        return load_config(DEFAULT_CONFIG_PATH)
    return TrackingConfig()
