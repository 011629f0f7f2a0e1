# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Conductor Models

Pydantic models for the node execution engine: node definitions, the
per-run execution graph, execution contexts and results.
"""

import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Iterator, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


GROUP_NODE_TYPE = "group"


class NodeState(str, Enum):
    """Node execution state: pending -> executing -> completed | error"""
    PENDING = "pending"
    EXECUTING = "executing"
    COMPLETED = "completed"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in (NodeState.COMPLETED, NodeState.ERROR)


class ErrorCode(str, Enum):
    NO_EXECUTOR_FACTORY = "NO_EXECUTOR_FACTORY"
    NODE_TYPE_NOT_FOUND = "NODE_TYPE_NOT_FOUND"
    EXECUTION_FAILED = "EXECUTION_FAILED"


# =============================================================================
# NODE DEFINITIONS (supplied by the authoring layer)
# =============================================================================

class Edge(BaseModel):
    """Connection between two child nodes of a group"""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")
    target_handle: Optional[str] = Field(default=None, alias="targetHandle")


class NodeDefinition(BaseModel):
    """Declarative unit of work - atomic, or a group of ordered child nodes"""
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    name: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict)
    nodes: Optional[List["NodeDefinition"]] = None
    edges: Optional[List[Edge]] = None

    @property
    def is_group(self) -> bool:
        return self.type == GROUP_NODE_TYPE

    @property
    def children(self) -> List["NodeDefinition"]:
        return list(self.nodes or [])

    def iter_leaves(self) -> Iterator["NodeDefinition"]:
        """Depth-first walk over the nodes that will actually execute"""
        if not self.is_group:
            yield self
            return
        for child in self.children:
            yield from child.iter_leaves()


NodeDefinition.model_rebuild()


# =============================================================================
# EXECUTION GRAPH (one per run)
# =============================================================================

class ExecutionGraphNode(BaseModel):
    state: NodeState = NodeState.PENDING
    progress: int = Field(default=0, ge=0, le=100)
    message: Optional[str] = None


class ExecutionGraphState(BaseModel):
    nodes: Dict[str, ExecutionGraphNode] = Field(default_factory=dict)
    is_executing: bool = False
    cached_progress: int = Field(default=0, ge=0, le=100)


# =============================================================================
# DEBUG OPTIONS
# =============================================================================

ErrorType = Literal["generic", "timeout", "network", "validation", "permission"]


class SimulateErrorOptions(BaseModel):
    node_id: str  # node id or "random"
    error_type: ErrorType = "generic"
    message: Optional[str] = None
    delay_ms: int = Field(default=0, ge=0)


class SimulateLongRunningOptions(BaseModel):
    node_id: str  # node id or "random"
    delay_ms: int = Field(ge=0)


class DebugOptions(BaseModel):
    simulate_error: Optional[SimulateErrorOptions] = None
    simulate_long_running: Optional[SimulateLongRunningOptions] = None


# =============================================================================
# CONTEXT AND RESULTS
# =============================================================================

class ExecutionContext(BaseModel):
    """Context handed to each node executable"""
    node_id: str
    execution_id: str
    input: Any = None
    variables: Dict[str, Any] = Field(default_factory=dict)
    slow_mo: int = Field(default=0, ge=0)  # milliseconds
    debug: Optional[DebugOptions] = None


class ExecutionError(BaseModel):
    node_id: str
    message: str
    code: ErrorCode
    stack: Optional[str] = None


class ExecutionResult(BaseModel):
    success: bool
    data: Any = None
    error: Optional[ExecutionError] = None
    executed_nodes: List[str] = Field(default_factory=list)
    duration: int = 0  # milliseconds
    context: Optional[ExecutionContext] = None


class HealthResult(BaseModel):
    status: Literal["ok", "degraded", "error"]
    timestamp: int  # epoch milliseconds
    message: Optional[str] = None


@dataclass
class ConductorConfig:
    """
    Runtime wiring for a conductor instance.

    node_executor_factory: any object exposing get_node_executable(type)
    debug_controller: optional DebugController for simulated faults/delays
    """
    node_executor_factory: Any = None
    debug_controller: Any = None


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)


def monotonic_ms() -> int:
    """Monotonic clock in milliseconds, for measuring durations"""
    return int(time.monotonic() * 1000)


def create_execution_id() -> str:
    return f"exec_{datetime.now(timezone.utc).strftime('%Y%m%d_%H%M%S')}_{uuid.uuid4().hex[:8]}"
