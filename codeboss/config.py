"""Configuration for codeboss.

Settings are resolved in three layers, later layers winning:
1. Defaults defined in this module
2. ~/.codeboss/config.yaml (see codeboss.global_config)
3. Environment variables (a .env file in the working directory is loaded first)
"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when the effective configuration is invalid."""

    pass


class TimeMode(Enum):
    """How commit dates are handled when a commit is rewritten or replayed."""

    PRESERVE = "preserve"
    NOW = "now"


# ============================================================
# DEFAULT FALLBACK VALUES
# ============================================================

DEFAULT_TARGET = "c0deb055"
DEFAULT_INVERSE_FAILURE_RATE = 100_000
DEFAULT_GCP_INSTANCE = "c0deb055-miner"
DEFAULT_GCP_ZONE = "us-central1-a"
DEFAULT_MINER_COMMAND = "./run-codeboss"
DEFAULT_DB_PATH = "~/.codeboss/codeboss.db"

# Environment variable that overrides each setting
ENV_VARS = {
    "target": "TARGET",
    "inverse_failure_rate": "INVERSE_DESIRED_FAILURE_RATE",
    "gcp_instance": "GCP_INSTANCE",
    "gcp_zone": "GCP_ZONE",
    "miner_command": "MINER_COMMAND",
    "db_path": "DB_PATH",
}

_HEX_TARGET_RE = re.compile(r"^[0-9a-f]{1,40}$")


class Settings(BaseModel):
    """Effective codeboss settings."""

    target: str = DEFAULT_TARGET
    inverse_failure_rate: int = DEFAULT_INVERSE_FAILURE_RATE
    gcp_instance: str = DEFAULT_GCP_INSTANCE
    gcp_zone: str = DEFAULT_GCP_ZONE
    miner_command: str = DEFAULT_MINER_COMMAND
    db_path: Path = Path(DEFAULT_DB_PATH)

    @field_validator("target", mode="before")
    @classmethod
    def _normalize_target(cls, value: Any) -> str:
        target = str(value).strip().lower()
        if not _HEX_TARGET_RE.match(target):
            raise ValueError(f"target must be 1-40 hex characters, got {value!r}")
        return target

    @field_validator("inverse_failure_rate", mode="before")
    @classmethod
    def _parse_rate(cls, value: Any) -> int:
        # Accept "100_000" style values from env vars and YAML strings
        if isinstance(value, str):
            value = value.replace("_", "").strip()
        rate = int(value)
        if rate <= 1:
            raise ValueError("inverse_failure_rate must be greater than 1")
        return rate

    @field_validator("db_path", mode="before")
    @classmethod
    def _expand_db_path(cls, value: Any) -> Path:
        return Path(os.path.expanduser(str(value)))

    @property
    def target_bits(self) -> int:
        """Number of bits the target prefix pins down (4 per hex character)."""
        return len(self.target) * 4


def build_settings(
    file_config: Optional[Dict[str, Any]] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Settings:
    """Merge file configuration and environment overrides into Settings.

    Args:
        file_config: Values loaded from config.yaml.
        environ: Environment mapping (defaults to os.environ).

    Returns:
        Validated Settings.

    Raises:
        ConfigError: If any value is invalid.
    """
    if environ is None:
        environ = dict(os.environ)

    values: Dict[str, Any] = {}
    for key, value in (file_config or {}).items():
        if key in ENV_VARS and value is not None:
            values[key] = value

    for key, env_var in ENV_VARS.items():
        env_value = environ.get(env_var)
        if env_value:
            values[key] = env_value

    try:
        return Settings(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}")


def load_config() -> Settings:
    """Load the effective settings from defaults, config.yaml and the environment.

    This should be called by the CLI before any command runs.
    """
    # Import here to avoid circular dependency
    from codeboss import global_config

    load_dotenv()
    return build_settings(global_config.load_global_config())
