# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Conductor

Orchestrates node execution: a single node is handed straight to the graph
node executor, a group runs its children one after another in declared
order and stops at the first failure.
"""

from dataclasses import replace
from typing import Any, Dict, Optional, Union

from conductor.core.config import Config, get_config
from conductor.core.errors import ConductorError
from conductor.core.logging import get_engine_logger, log_event
from conductor.debug import DebugController
from conductor.events import ConductorEventEmitter
from conductor.models import (
    ConductorConfig,
    DebugOptions,
    ExecutionContext,
    ExecutionResult,
    HealthResult,
    NodeDefinition,
    NodeState,
    create_execution_id,
    monotonic_ms,
    now_ms,
)
from conductor.node_executor import execute_graph_node
from conductor.store import ExecutionGraphStore

logger = get_engine_logger("conductor")


class Conductor:
    """
    Node execution orchestrator.

    Owns one execution graph store; its mutations are forwarded to
    `events` as progress events. Runs on the same instance must not overlap -
    create one conductor per concurrent run.
    """

    def __init__(self, config: Optional[ConductorConfig] = None, settings: Optional[Config] = None):
        self.config = config or ConductorConfig()
        self.settings = settings or get_config()
        self.store = ExecutionGraphStore()
        self.events = ConductorEventEmitter()
        self.store.subscribe(self.events.emit_progress)

    async def run(
        self,
        node: Union[NodeDefinition, Dict[str, Any]],
        slow_mo: Optional[int] = None,
        *,
        execution_id: Optional[str] = None,
        input: Any = None,
        variables: Optional[Dict[str, Any]] = None,
        debug: Optional[DebugOptions] = None
    ) -> ExecutionResult:
        """
        Execute a node (or a group of nodes) and aggregate the result.

        Args:
            node: Node definition (model or plain dict)
            slow_mo: Progress animation delay in ms; defaults to config
            execution_id: Reuse an id assigned by the caller
            input: Input handed to every executed node
            variables: Shared variables for the run
            debug: Simulated faults/delays for this run

        Returns:
            ExecutionResult; failures are reported, not raised
        """
        if isinstance(node, dict):
            node = NodeDefinition.model_validate(node)

        start_time = monotonic_ms()
        context = ExecutionContext(
            node_id=node.id,
            execution_id=execution_id or create_execution_id(),
            input=input,
            variables=variables or {},
            slow_mo=self.settings.default_slow_mo if slow_mo is None else slow_mo,
            debug=debug,
        )
        execution_config = self._prepare_config(debug)

        leaf_ids = [leaf.id for leaf in node.iter_leaves()]
        self._start_graph(leaf_ids)
        if execution_config.debug_controller is not None:
            execution_config.debug_controller.initialize(leaf_ids)

        self.events.emit_started(context.execution_id, node.id)
        log_event(
            logger, "Execution started", "INFO",
            execution_id=context.execution_id, node_id=node.id,
            node_type=node.type, node_count=len(leaf_ids), slow_mo=context.slow_mo
        )

        try:
            result = await self._execute(node, context, start_time, execution_config)
        finally:
            self.store.set_executing(False)

        log_event(
            logger, "Execution finished", "INFO" if result.success else "WARNING",
            execution_id=context.execution_id, node_id=node.id,
            success=result.success, executed_nodes=result.executed_nodes,
            duration_ms=result.duration,
            failed_node_id=result.error.node_id if result.error else None
        )

        if result.success:
            self.events.emit_completed(context.execution_id, result)
        else:
            self.events.emit_error(
                context.execution_id,
                ConductorError(result.error.message, code=result.error.code.value)
            )

        return result

    async def health(self) -> HealthResult:
        return HealthResult(
            status="ok",
            timestamp=now_ms(),
            message="Local conductor operational"
        )

    def _prepare_config(self, debug: Optional[DebugOptions]) -> ConductorConfig:
        if debug is None:
            return self.config

        # Per-run controller; a caller-supplied one keeps its own options
        return replace(self.config, debug_controller=DebugController(debug))

    def _start_graph(self, leaf_ids) -> None:
        """
        Fresh graph with every executable node pending.

        Registering the full node set up front fixes each node's weight for
        the run, which keeps aggregate progress from ever moving backwards.
        """
        self.store.reset()
        for node_id in leaf_ids:
            self.store.set_node_state(node_id, NodeState.PENDING)
        self.store.set_executing(True)

    async def _execute(
        self,
        node: NodeDefinition,
        context: ExecutionContext,
        start_time: int,
        config: ConductorConfig
    ) -> ExecutionResult:
        if not node.is_group:
            return await execute_graph_node(node, context, start_time, config, self.store)
        return await self._execute_group(node, context, start_time, config)

    async def _execute_group(
        self,
        node: NodeDefinition,
        context: ExecutionContext,
        start_time: int,
        config: ConductorConfig
    ) -> ExecutionResult:
        """Run children strictly in declared order, stopping at the first failure"""
        executed_nodes = []
        data = None

        # Edges are not consulted; declared order is execution order
        for child in node.children:
            child_context = ExecutionContext(
                node_id=child.id,
                execution_id=context.execution_id,
                input=context.input,
                variables=context.variables,
                slow_mo=context.slow_mo,
                debug=context.debug,
            )
            result = await self._execute(child, child_context, monotonic_ms(), config)
            executed_nodes.extend(result.executed_nodes)

            if not result.success:
                # Remaining children stay pending
                return ExecutionResult(
                    success=False,
                    error=result.error,
                    executed_nodes=executed_nodes,
                    duration=monotonic_ms() - start_time,
                    context=context
                )

            data = result.data

        return ExecutionResult(
            success=True,
            data=data,
            executed_nodes=executed_nodes,
            duration=monotonic_ms() - start_time,
            context=context
        )
