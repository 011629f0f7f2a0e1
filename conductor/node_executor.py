# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Graph Node Executor

Runs exactly one node to completion or failure, driving its state machine
in the execution graph store. Every outcome, including setup mistakes and
faults raised by the executable, comes back as an ExecutionResult.
"""

import asyncio
import inspect
import traceback
from typing import Any, Optional

from conductor.core.errors import ConductorError
from conductor.core.logging import get_engine_logger, log_event
from conductor.models import (
    ConductorConfig,
    ErrorCode,
    ExecutionContext,
    ExecutionError,
    ExecutionResult,
    NodeDefinition,
    NodeState,
    monotonic_ms,
)
from conductor.store import ExecutionGraphStore

logger = get_engine_logger("executor")

# UI feedback only; unrelated to how long the real work takes
SLOW_MO_CHECKPOINTS = (
    (0, "Starting..."),
    (20, "Initializing..."),
    (40, "Processing..."),
    (60, "Computing..."),
    (80, "Finalizing..."),
    (90, "Almost done..."),
)

COMPLETE_MESSAGE = "Complete"


async def execute_graph_node(
    node: NodeDefinition,
    context: ExecutionContext,
    start_time: int,
    config: Optional[ConductorConfig],
    store: Optional[ExecutionGraphStore] = None
) -> ExecutionResult:
    """
    Execute a single node.

    Args:
        node: Node to execute
        context: Execution context for this node
        start_time: monotonic_ms() reading the duration is measured from
        config: Conductor wiring (executable registry, debug controller)
        store: Optional execution graph store to report into

    Returns:
        ExecutionResult with executed_nodes == [node.id]
    """
    factory = config.node_executor_factory if config else None
    if factory is None:
        return _setup_failure(
            node, context, start_time,
            ErrorCode.NO_EXECUTOR_FACTORY,
            "No executor factory provided for local execution"
        )

    executable = _lookup_executable(factory, node.type)
    if executable is None:
        return _setup_failure(
            node, context, start_time,
            ErrorCode.NODE_TYPE_NOT_FOUND,
            f"No implementation found for node type: {node.type}"
        )

    if config.debug_controller is not None:
        executable = config.debug_controller.wrap(executable, node.id)

    if store:
        store.set_node_state(node.id, NodeState.EXECUTING)

    log_event(
        logger, "Executing node", "DEBUG",
        node_id=node.id, node_type=node.type,
        execution_id=context.execution_id, slow_mo=context.slow_mo
    )

    if context.slow_mo > 0:
        await _animate_progress(node.id, context.slow_mo, store)

    # Node parameters win over context fields
    params = {**context.model_dump(), **node.parameters}

    try:
        data = executable.execute(params)
        if inspect.isawaitable(data):
            data = await data
    except asyncio.CancelledError:
        raise
    except Exception as e:
        message = e.message if isinstance(e, ConductorError) else (str(e) or type(e).__name__)
        stack = (
            "".join(traceback.format_exception(type(e), e, e.__traceback__))
            if e.__traceback__ else None
        )

        # Progress stays wherever it was last reported
        if store:
            store.set_node_state(node.id, NodeState.ERROR, message)

        return ExecutionResult(
            success=False,
            error=ExecutionError(
                node_id=node.id,
                message=message,
                code=ErrorCode.EXECUTION_FAILED,
                stack=stack
            ),
            executed_nodes=[node.id],
            duration=monotonic_ms() - start_time,
            context=context
        )

    if store:
        store.set_node_progress(node.id, 100, COMPLETE_MESSAGE)
        store.set_node_state(node.id, NodeState.COMPLETED)

    return ExecutionResult(
        success=True,
        data=data,
        executed_nodes=[node.id],
        duration=monotonic_ms() - start_time,
        context=context
    )


async def _animate_progress(node_id: str, slow_mo: int, store: Optional[ExecutionGraphStore]) -> None:
    delay = slow_mo / 1000
    for progress, message in SLOW_MO_CHECKPOINTS:
        if store:
            store.set_node_progress(node_id, progress, message)
        await asyncio.sleep(delay)


def _lookup_executable(factory: Any, node_type: str) -> Any:
    try:
        return factory.get_node_executable(node_type)
    except Exception:
        logger.exception("Executable lookup failed", extra={"node_type": node_type})
        return None


def _setup_failure(
    node: NodeDefinition,
    context: ExecutionContext,
    start_time: int,
    code: ErrorCode,
    message: str
) -> ExecutionResult:
    log_event(logger, message, "WARNING", node_id=node.id, node_type=node.type, code=code.value)
    return ExecutionResult(
        success=False,
        error=ExecutionError(node_id=node.id, message=message, code=code),
        executed_nodes=[node.id],
        duration=monotonic_ms() - start_time,
        context=context
    )
