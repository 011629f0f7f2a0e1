# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the conductor engine.

All exceptions inherit from ConductorError for consistent error handling.
The executor turns any of these (or any other exception) raised by a node
executable into a structured ExecutionResult; they never escape a run.
"""

from typing import Optional


class ConductorError(Exception):
    """Base exception for all conductor errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[dict] = None
    ):
        """
        Initialize conductor error.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
            details: Additional error details
        """
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for transport."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details
        }


class ConfigurationError(ConductorError):
    """Configuration or registry setup error."""

    def __init__(self, message: str, config_file: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code="CONFIGURATION_ERROR", details=details)
        self.config_file = config_file


class NodeExecutionError(ConductorError):
    """Structured failure raised by a node executable."""

    def __init__(self, node_id: str, message: str, details: Optional[dict] = None):
        super().__init__(message, code="EXECUTION_FAILED", details=details)
        self.node_id = node_id


class SimulatedError(ConductorError):
    """Fault injected by the debug controller."""

    def __init__(self, error_type: str, message: str):
        super().__init__(message, code="SIMULATED_ERROR", details={"error_type": error_type})
        self.error_type = error_type


class ChannelError(ConductorError):
    """Malformed process-boundary request."""

    def __init__(self, message: str, request_id: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, code="INVALID_REQUEST", details=details)
        self.request_id = request_id
