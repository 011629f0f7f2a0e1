# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Debug Controller

Injects simulated faults and long-running delays into node executables so
UIs and tests can exercise failure highlighting and progress feedback
without real failing behaviors.
"""

import asyncio
import inspect
import random
from typing import Any, Dict, List, Optional

from conductor.core.errors import SimulatedError
from conductor.core.logging import get_engine_logger
from conductor.models import DebugOptions, SimulateErrorOptions

logger = get_engine_logger("debug")

RANDOM_NODE = "random"

ERROR_TYPE_MESSAGES = {
    "generic": "Simulated generic error",
    "timeout": "Request timeout - operation took too long",
    "network": "Network error - failed to connect to server",
    "validation": "Validation error - invalid input data",
    "permission": "Permission denied - insufficient access rights",
}


class DebugController:
    """
    Holds the active debug options for a conductor.

    "random" targets are resolved once per configure() call, when the
    conductor initializes the controller with the run's node ids.
    """

    def __init__(self, options: Optional[DebugOptions] = None):
        self._options = DebugOptions()
        self._error_node_id: Optional[str] = None
        self._long_running_node_id: Optional[str] = None
        if options:
            self.configure(options)

    def configure(self, options: Optional[DebugOptions]) -> None:
        self._options = options.model_copy(deep=True) if options else DebugOptions()
        # Resolve again on next initialize()
        self._error_node_id = None
        self._long_running_node_id = None

        if self._options.simulate_error:
            self._error_node_id = self._options.simulate_error.node_id
        if self._options.simulate_long_running:
            self._long_running_node_id = self._options.simulate_long_running.node_id

    def initialize(self, node_ids: List[str]) -> None:
        if not node_ids:
            return

        if self._error_node_id == RANDOM_NODE:
            self._error_node_id = random.choice(node_ids)
            logger.info(
                "Selected random node for simulated error",
                extra={"node_id": self._error_node_id, "candidates": len(node_ids)}
            )

        if self._long_running_node_id == RANDOM_NODE:
            self._long_running_node_id = random.choice(node_ids)
            logger.info(
                "Selected random node for simulated delay",
                extra={"node_id": self._long_running_node_id, "candidates": len(node_ids)}
            )

    def get_options(self) -> DebugOptions:
        return self._options.model_copy(deep=True)

    @property
    def is_active(self) -> bool:
        return bool(self._options.simulate_error or self._options.simulate_long_running)

    def should_simulate_error(self, node_id: str) -> bool:
        return self._options.simulate_error is not None and self._error_node_id == node_id

    def get_simulated_error(self, node_id: str) -> Optional[SimulateErrorOptions]:
        if not self.should_simulate_error(node_id):
            return None
        return self._options.simulate_error

    def should_simulate_long_running(self, node_id: str) -> bool:
        return self._options.simulate_long_running is not None and self._long_running_node_id == node_id

    def get_long_running_delay(self, node_id: str) -> int:
        if not self.should_simulate_long_running(node_id):
            return 0
        return self._options.simulate_long_running.delay_ms

    def wrap(self, executable: Any, node_id: str) -> Any:
        """Return the executable unchanged, or wrapped if this node is targeted"""
        if not (self.should_simulate_error(node_id) or self.should_simulate_long_running(node_id)):
            return executable
        return _DebugExecutable(self, executable, node_id)


class _DebugExecutable:

    def __init__(self, controller: DebugController, executable: Any, node_id: str):
        self.controller = controller
        self.executable = executable
        self.node_id = node_id

    async def execute(self, params: Dict[str, Any]) -> Any:
        delay_ms = self.controller.get_long_running_delay(self.node_id)
        if delay_ms:
            logger.debug("Simulating long-running node", extra={"node_id": self.node_id, "delay_ms": delay_ms})
            await asyncio.sleep(delay_ms / 1000)

        simulated = self.controller.get_simulated_error(self.node_id)
        if simulated:
            if simulated.delay_ms:
                await asyncio.sleep(simulated.delay_ms / 1000)
            raise SimulatedError(
                simulated.error_type,
                simulated.message or ERROR_TYPE_MESSAGES[simulated.error_type]
            )

        result = self.executable.execute(params)
        if inspect.isawaitable(result):
            result = await result
        return result
