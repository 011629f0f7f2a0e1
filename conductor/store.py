# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Graph Store

Observable record of per-node execution state and aggregate progress for a
single run. One store per conductor instance; there is no process-wide
default store.

Every mutation recomputes the aggregate progress in full and synchronously
notifies all subscribers with a snapshot of the state. Notifications are
never batched - UI progress bars and tests rely on seeing each checkpoint.
"""

import math
from typing import Callable, Dict, List, Optional, Union

from conductor.core.logging import get_engine_logger
from conductor.models import ExecutionGraphNode, ExecutionGraphState, NodeState

logger = get_engine_logger("store")

Listener = Callable[[ExecutionGraphState], None]
Unsubscribe = Callable[[], None]


def calculate_progress(nodes: Dict[str, ExecutionGraphNode]) -> int:
    """
    Aggregate progress with equal weight per node.

    O(n) over the node map; called on every mutation, never on reads.
    """
    if not nodes:
        return 0

    weight = 100 / len(nodes)
    weighted = sum(node.progress * weight for node in nodes.values()) / 100

    # Round half up (not banker's rounding)
    return max(0, min(100, math.floor(weighted + 0.5)))


class ExecutionGraphStore:
    """
    Per-run execution graph.

    Node records are created on first touch and mutated only through
    set_node_state / set_node_progress.
    """

    def __init__(self):
        self._state = ExecutionGraphState()
        self._listeners: List[Listener] = []

    # -- Reads --

    def get_state(self) -> ExecutionGraphState:
        """Snapshot of the current state (safe to keep or mutate)"""
        return self._state.model_copy(deep=True)

    # -- Mutations --

    def set_node_state(
        self,
        node_id: str,
        state: Union[NodeState, str],
        message: Optional[str] = None
    ) -> None:
        """Create or update a node's state; terminal states are final"""
        state = NodeState(state)
        node = self._state.nodes.get(node_id)

        if node is None:
            self._state.nodes[node_id] = ExecutionGraphNode(state=state, message=message)
            logger.debug(
                f"Node registered as {state.value}",
                extra={"node_id": node_id, "state": state.value}
            )
        elif node.state.is_terminal and state != node.state:
            logger.warning(
                f"Ignoring transition {node.state.value} -> {state.value} for finished node",
                extra={"node_id": node_id, "previous_state": node.state.value, "state": state.value}
            )
        else:
            previous = node.state
            node.state = state
            if message is not None:
                node.message = message
            self._log_transition(node_id, previous, node)

        self._commit()

    def set_node_progress(self, node_id: str, progress: int, message: Optional[str] = None) -> None:
        """
        Set a node's progress (rounded, clamped to 0-100) and optional status message.

        Non-finite values (NaN, infinity) are ignored with a warning.
        """
        if not math.isfinite(progress):
            logger.warning(
                "Ignoring non-finite progress",
                extra={"node_id": node_id, "progress": str(progress)}
            )
            return

        clamped = max(0, min(100, math.floor(progress + 0.5)))
        node = self._state.nodes.get(node_id)

        if node is None:
            node = ExecutionGraphNode()
            self._state.nodes[node_id] = node

        if clamped < node.progress:
            logger.debug(
                "Progress moved backwards",
                extra={"node_id": node_id, "previous_progress": node.progress, "progress": clamped}
            )

        node.progress = clamped
        if message is not None:
            node.message = message

        self._commit()

    def set_executing(self, is_executing: bool) -> None:
        self._state.is_executing = is_executing
        self._commit()

    def reset(self) -> None:
        """Clear all node records; for reuse between independent runs"""
        self._state = ExecutionGraphState()
        self._commit()

    # -- Subscriptions --

    def subscribe(self, listener: Listener) -> Unsubscribe:
        """
        Register a listener called with a state snapshot after every mutation.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -- Internals --

    def _commit(self) -> None:
        self._state.cached_progress = calculate_progress(self._state.nodes)
        self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return

        snapshot = self.get_state()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                # A broken subscriber must not break the run
                logger.exception("Execution graph listener failed")

    def _log_transition(self, node_id: str, previous: NodeState, node: ExecutionGraphNode) -> None:
        fields = {
            "node_id": node_id,
            "previous_state": previous.value,
            "state": node.state.value,
            "progress": node.progress,
        }
        if node.state == NodeState.COMPLETED:
            logger.info("Node execution completed", extra=fields)
        elif node.state == NodeState.ERROR:
            logger.error("Node execution failed", extra={**fields, "node_message": node.message})
        elif node.state == NodeState.EXECUTING:
            logger.info("Node execution started", extra=fields)
        else:
            logger.debug(f"Node state transition: {previous.value} -> {node.state.value}", extra=fields)


# =============================================================================
# QUERY HELPERS
# =============================================================================

def get_node_state(store: ExecutionGraphStore, node_id: str) -> Optional[ExecutionGraphNode]:
    return store.get_state().nodes.get(node_id)


def get_execution_progress(store: ExecutionGraphStore) -> int:
    """Aggregate progress (reads the cached value)"""
    return store.get_state().cached_progress


def get_completion_progress(store: ExecutionGraphStore) -> int:
    """Share of nodes fully completed, ignoring in-flight progress"""
    nodes = store.get_state().nodes
    if not nodes:
        return 0

    completed = sum(1 for n in nodes.values() if n.state == NodeState.COMPLETED)
    return math.floor(completed / len(nodes) * 100 + 0.5)


def get_nodes_by_state(store: ExecutionGraphStore, state: Union[NodeState, str]) -> List[str]:
    """Ids of nodes currently in the given state"""
    state = NodeState(state)
    return [node_id for node_id, node in store.get_state().nodes.items() if node.state == state]
