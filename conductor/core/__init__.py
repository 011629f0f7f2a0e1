# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the conductor engine.

This package contains:
- config: Configuration management
- errors: Custom exceptions
- logging: Structured logging
"""

from conductor.core.config import get_config, Config
from conductor.core.errors import ConductorError, ConfigurationError, NodeExecutionError
from conductor.core.logging import get_logger

__all__ = [
    "get_config",
    "Config",
    "ConductorError",
    "ConfigurationError",
    "NodeExecutionError",
    "get_logger",
]
