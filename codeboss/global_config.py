"""Global configuration management for codeboss.

Handles user-level configuration stored in ~/.codeboss/config.yaml.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from codeboss.config import ENV_VARS


class GlobalConfigError(Exception):
    """Raised when there's an error with global configuration."""
    pass


_CONFIG_DIR = Path.home() / ".codeboss"


def get_global_config_dir() -> Path:
    """Get the global codeboss configuration directory.

    Returns:
        Path to ~/.codeboss/
    """
    return _CONFIG_DIR


def ensure_global_config_dir() -> Path:
    """Ensure the global config directory exists.

    Returns:
        Path to ~/.codeboss/
    """
    config_dir = get_global_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_file_path() -> Path:
    """Get path to config.yaml file.

    Returns:
        Path to ~/.codeboss/config.yaml
    """
    return get_global_config_dir() / "config.yaml"


def load_global_config() -> Dict[str, Any]:
    """Load global configuration from ~/.codeboss/config.yaml.

    Returns:
        Dictionary with configuration values. Empty dict if file doesn't exist.
    """
    config_file = get_config_file_path()

    if not config_file.exists():
        return {}

    try:
        with open(config_file, "r") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise GlobalConfigError(f"Failed to load config from {config_file}: {e}")

    if not isinstance(config, dict):
        raise GlobalConfigError(f"Config file {config_file} must contain a mapping")
    return config


def save_global_config(config: Dict[str, Any]) -> None:
    """Save global configuration to ~/.codeboss/config.yaml.

    Args:
        config: Configuration dictionary to save.
    """
    ensure_global_config_dir()
    config_file = get_config_file_path()

    try:
        with open(config_file, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    except OSError as e:
        raise GlobalConfigError(f"Failed to save config to {config_file}: {e}")


def get_value(key: str) -> Optional[Any]:
    """Get a single value from the global config."""
    return load_global_config().get(key)


def set_value(key: str, value: Any) -> None:
    """Set a single value in the global config.

    Args:
        key: Setting name (one of the keys in codeboss.config.ENV_VARS).
        value: Value to store.

    Raises:
        GlobalConfigError: If the key is not a known setting.
    """
    if key not in ENV_VARS:
        valid = ", ".join(sorted(ENV_VARS))
        raise GlobalConfigError(f"Unknown setting: {key} (valid: {valid})")

    config = load_global_config()
    config[key] = value
    save_global_config(config)


def is_configured() -> bool:
    """Check if a config.yaml exists.

    Returns:
        True if config.yaml exists, False otherwise.
    """
    return get_config_file_path().exists()
