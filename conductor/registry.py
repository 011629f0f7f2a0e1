# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node Executable Registry

Plain lookup table from node type string to the behavior that executes it.
This is the only extension point for node behaviors; the engine never
hard-codes one.
"""

import inspect
from typing import Any, Callable, Dict, List, Optional

from conductor.core.errors import ConfigurationError
from conductor.core.logging import get_engine_logger

logger = get_engine_logger("registry")


class FunctionExecutable:
    """Adapts a plain (sync or async) callable to the executable interface"""

    def __init__(self, func: Callable[[Dict[str, Any]], Any]):
        self.func = func

    def execute(self, params: Dict[str, Any]) -> Any:
        return self.func(params)

    def __repr__(self) -> str:
        return f"FunctionExecutable({getattr(self.func, '__name__', self.func)!r})"


class NodeRegistry:
    """
    Registry of node executables keyed by node type.

    Entries expose execute(params); execute may return a value or an
    awaitable. Lookups for unknown types return None.
    """

    def __init__(self, executables: Optional[Dict[str, Any]] = None):
        self._executables: Dict[str, Any] = {}
        for node_type, executable in (executables or {}).items():
            self.register(node_type, executable)

    def register(self, node_type: str, executable: Any, replace: bool = False) -> None:
        """
        Register the executable for a node type.

        Args:
            node_type: Node type string (e.g. "http-request")
            executable: Object with execute(params), or a plain callable
            replace: Allow overriding an existing registration

        Raises:
            ConfigurationError: Type already registered, or executable unusable
        """
        if not node_type:
            raise ConfigurationError("Node type must be a non-empty string")

        if node_type in self._executables and not replace:
            raise ConfigurationError(f"Executable already registered for node type: {node_type}")

        if not callable(getattr(executable, "execute", None)):
            if not callable(executable):
                raise ConfigurationError(
                    f"Executable for node type '{node_type}' must be callable or define execute()"
                )
            executable = FunctionExecutable(executable)

        self._executables[node_type] = executable
        logger.debug(
            "Registered node executable",
            extra={"node_type": node_type, "is_async": _is_async(executable)}
        )

    def unregister(self, node_type: str) -> None:
        self._executables.pop(node_type, None)

    def get_node_executable(self, node_type: str) -> Optional[Any]:
        return self._executables.get(node_type)

    def types(self) -> List[str]:
        return sorted(self._executables)

    def __contains__(self, node_type: str) -> bool:
        return node_type in self._executables

    def __len__(self) -> int:
        return len(self._executables)


def _is_async(executable: Any) -> bool:
    target = executable.func if isinstance(executable, FunctionExecutable) else executable.execute
    return inspect.iscoroutinefunction(target)
