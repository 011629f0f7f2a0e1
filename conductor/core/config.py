# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Conductor Configuration - Single source of truth.
YAML is king. Env vars ONLY for the config location and log level.
"""

import os
import yaml
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from conductor.core.errors import ConfigurationError


DEFAULT_CONFIG_PATH = "configs/conductor.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable engine configuration.
    All values from YAML. No hidden state.
    """

    # -- Execution --
    default_slow_mo: int = 0

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"
    log_file: Optional[str] = None

    @property
    def log_path(self) -> Optional[Path]:
        return Path(self.log_file) if self.log_file else None


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        return Config(log_level=os.getenv("LOG_LEVEL", "INFO"))

    try:
        with open(path) as f:
            y = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", config_file=path)

    if not isinstance(y, dict):
        raise ConfigurationError(f"Config root must be a mapping: {path}", config_file=path)

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    slow_mo = get(y, "execution", "slow_mo") or 0
    if not isinstance(slow_mo, int) or slow_mo < 0:
        raise ConfigurationError(
            f"execution.slow_mo must be a non-negative integer, got {slow_mo!r}",
            config_file=path
        )

    return Config(
        default_slow_mo=slow_mo,
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or "INFO",
        log_format=get(y, "logging", "format") or "json",
        log_file=get(y, "logging", "file"),
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("CONDUCTOR_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
