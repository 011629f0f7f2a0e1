# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node Channel

Maps process-boundary requests (e.g. from a UI process) onto conductor
runs. The concrete transport lives with the embedding process; this module
only defines the request/response shapes and the mapping.
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from conductor.conductor import Conductor
from conductor.core.errors import ChannelError
from conductor.core.logging import get_engine_logger
from conductor.models import ExecutionResult, NodeDefinition

logger = get_engine_logger("channel")

NodeResolver = Callable[[str], Optional[NodeDefinition]]


class NodeRunRequest(BaseModel):
    """Request to run one node"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    node_id: str = Field(alias="nodeId")
    inputs: Dict[str, Any] = Field(default_factory=dict)
    slow_mo: Optional[int] = Field(default=None, alias="slowMo", ge=0)


class NodeRunResponse(BaseModel):
    """Response for a NodeRunRequest"""
    id: str
    success: bool
    outputs: Dict[str, Any] = Field(default_factory=dict)
    error: Optional[str] = None
    error_code: Optional[str] = None
    failed_node_id: Optional[str] = None
    duration: int = 0


def to_outputs(data: Any) -> Dict[str, Any]:
    """Mappings pass through; anything else lands on the default port"""
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return dict(data)
    return {"default": data}


def to_response(request_id: str, result: ExecutionResult) -> NodeRunResponse:
    return NodeRunResponse(
        id=request_id,
        success=result.success,
        outputs=to_outputs(result.data) if result.success else {},
        error=result.error.message if result.error else None,
        error_code=result.error.code.value if result.error else None,
        failed_node_id=result.error.node_id if result.error else None,
        duration=result.duration,
    )


class NodeChannel:
    """
    Serves node run requests against a single conductor.

    Requests are served one at a time per conductor; an embedding process
    wanting concurrent runs creates one channel per conductor.
    """

    def __init__(self, conductor: Conductor, resolve_node: NodeResolver):
        self.conductor = conductor
        self.resolve_node = resolve_node

    async def handle(self, request: NodeRunRequest) -> NodeRunResponse:
        node = self.resolve_node(request.node_id)
        if node is None:
            logger.warning(
                "Run requested for unknown node",
                extra={"request_id": request.id, "node_id": request.node_id}
            )
            return NodeRunResponse(
                id=request.id,
                success=False,
                error=f"Node not found: {request.node_id}",
                failed_node_id=request.node_id,
            )

        result = await self.conductor.run(node, request.slow_mo, input=request.inputs)
        return to_response(request.id, result)

    async def handle_raw(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate and serve a raw request payload.

        Raises:
            ChannelError: Payload is not a valid NodeRunRequest
        """
        try:
            request = NodeRunRequest.model_validate(payload)
        except ValidationError as e:
            raise ChannelError(
                f"Invalid node run request: {e.error_count()} validation error(s)",
                request_id=payload.get("id") if isinstance(payload, dict) else None,
                details={"errors": e.errors(include_url=False)}
            )

        response = await self.handle(request)
        return response.model_dump()
