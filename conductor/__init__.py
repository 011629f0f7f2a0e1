# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node execution engine.

- ExecutionGraphStore: observable per-run node state and aggregate progress
- execute_graph_node: runs one node through its state machine
- Conductor: runs a node or a group of nodes, fail-fast
- NodeRegistry: node type -> executable lookup
"""

from conductor.channel import NodeChannel, NodeRunRequest, NodeRunResponse
from conductor.conductor import Conductor
from conductor.debug import DebugController
from conductor.events import ConductorEventEmitter
from conductor.models import (
    ConductorConfig,
    DebugOptions,
    Edge,
    ErrorCode,
    ExecutionContext,
    ExecutionError,
    ExecutionGraphNode,
    ExecutionGraphState,
    ExecutionResult,
    HealthResult,
    NodeDefinition,
    NodeState,
)
from conductor.node_executor import execute_graph_node
from conductor.registry import NodeRegistry
from conductor.store import ExecutionGraphStore

__all__ = [
    "Conductor",
    "ConductorConfig",
    "ConductorEventEmitter",
    "DebugController",
    "DebugOptions",
    "Edge",
    "ErrorCode",
    "ExecutionContext",
    "ExecutionError",
    "ExecutionGraphNode",
    "ExecutionGraphState",
    "ExecutionGraphStore",
    "ExecutionResult",
    "HealthResult",
    "NodeChannel",
    "NodeDefinition",
    "NodeRegistry",
    "NodeRunRequest",
    "NodeRunResponse",
    "NodeState",
    "execute_graph_node",
]
