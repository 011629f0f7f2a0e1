# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Conductor Events

Decouples the execution engine from whatever relays progress onward (IPC
channel, websocket, test harness). Handlers are called synchronously in
subscription order; progress events are forwarded one for one from the
execution graph store.
"""

from typing import Any, Callable, Dict, List

from conductor.core.logging import get_engine_logger
from conductor.models import ExecutionGraphState, ExecutionResult

logger = get_engine_logger("events")

Handler = Callable[[Any], None]
Unsubscribe = Callable[[], None]

STARTED = "started"
PROGRESS = "progress"
COMPLETED = "completed"
ERROR = "error"


class ConductorEventEmitter:
    """Event emitter for conductor execution events"""

    EVENTS = (STARTED, PROGRESS, COMPLETED, ERROR)

    def __init__(self):
        self._handlers: Dict[str, List[Handler]] = {event: [] for event in self.EVENTS}

    def on(self, event: str, handler: Handler) -> Unsubscribe:
        if event not in self._handlers:
            raise ValueError(f"Unknown conductor event: {event}")

        self._handlers[event].append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers[event]:
                self._handlers[event].remove(handler)

        return unsubscribe

    def emit(self, event: str, payload: Any) -> None:
        for handler in list(self._handlers[event]):
            try:
                handler(payload)
            except Exception:
                logger.exception("Event handler failed", extra={"event": event})

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    # -- Typed helpers --

    def on_started(self, handler: Handler) -> Unsubscribe:
        return self.on(STARTED, handler)

    def on_progress(self, handler: Callable[[ExecutionGraphState], None]) -> Unsubscribe:
        return self.on(PROGRESS, handler)

    def on_completed(self, handler: Handler) -> Unsubscribe:
        return self.on(COMPLETED, handler)

    def on_error(self, handler: Handler) -> Unsubscribe:
        return self.on(ERROR, handler)

    def emit_started(self, execution_id: str, node_id: str) -> None:
        self.emit(STARTED, {"execution_id": execution_id, "node_id": node_id})

    def emit_progress(self, state: ExecutionGraphState) -> None:
        self.emit(PROGRESS, state)

    def emit_completed(self, execution_id: str, result: ExecutionResult) -> None:
        self.emit(COMPLETED, {"execution_id": execution_id, "result": result})

    def emit_error(self, execution_id: str, error: Exception) -> None:
        self.emit(ERROR, {"execution_id": execution_id, "error": error})
