# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Structured logging for the conductor engine.

Every engine component logs through a `conductor.<component>` logger. Run
and node identifiers (execution_id, node_id, ...) travel as `extra` fields;
the JSON formatter emits them as top-level keys and the text formatter
appends them as key=value pairs.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

ENGINE_LOGGER_PREFIX = "conductor"

# Attributes present on every LogRecord; anything else came in via `extra`
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}


def _to_jsonable(value: Any) -> Any:
    # pydantic models (node snapshots, results) and enums
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    if hasattr(value, "value"):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    """
    One JSON object per line.

    Timestamp is the record's creation time in UTC; `component` is the
    logger name below the engine prefix.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "component": _component(record.name),
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update(_extra_fields(record))

        return json.dumps(log_data, default=_to_jsonable)


class TextFormatter(logging.Formatter):
    """Human-readable lines with extra fields appended as key=value."""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return line

        # Keep the traceback (if any) after the fields
        head, sep, tail = line.partition("\n")
        pairs = " ".join(f"{k}={v}" for k, v in fields.items())
        return f"{head} [{pairs}]{sep}{tail}"


def _component(name: str) -> Optional[str]:
    prefix = ENGINE_LOGGER_PREFIX + "."
    return name[len(prefix):] if name.startswith(prefix) else None


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_format: str = "json",
    log_file: Optional[Path] = None
) -> logging.Logger:
    """
    Get a logger with a single stdout handler (plus an optional file handler).

    Calling again for the same name reconfigures it rather than stacking
    handlers. Unknown level names fall back to INFO.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = JSONFormatter() if log_format == "json" else TextFormatter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    level: Union[str, int] = "INFO",
    **fields: Any
) -> None:
    """
    Log an engine event with structured fields.

    Fields set to None are dropped so optional identifiers (failed_node_id,
    code, ...) only appear when they carry a value. Skips building the
    record entirely when the level is disabled.
    """
    levelno = level if isinstance(level, int) else logging.getLevelName(level.upper())
    if not isinstance(levelno, int):
        levelno = logging.INFO
    if not logger.isEnabledFor(levelno):
        return

    logger.log(levelno, event, extra={k: v for k, v in fields.items() if v is not None})


def get_engine_logger(component: str) -> logging.Logger:
    """Logger for an engine component (store, executor, conductor...), configured from settings."""
    from conductor.core.config import get_config
    config = get_config()
    return get_logger(
        f"{ENGINE_LOGGER_PREFIX}.{component}",
        log_level=config.log_level,
        log_format=config.log_format,
        log_file=config.log_path
    )
