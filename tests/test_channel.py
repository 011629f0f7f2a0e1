# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the process-boundary node channel
"""

import pytest

from conftest import make_group, make_node
from conductor.channel import NodeChannel, NodeRunRequest, to_outputs
from conductor.conductor import Conductor
from conductor.core.errors import ChannelError
from conductor.models import ConductorConfig
from conductor.registry import NodeRegistry


@pytest.fixture
def nodes():
    return {
        "single": make_node("single"),
        "flow": make_group("flow", [make_node("a"), make_node("b")]),
        "broken": make_group("broken", [make_node("a"), make_node("x", node_type="unknown-type")]),
    }


@pytest.fixture
def channel(conductor, nodes):
    return NodeChannel(conductor, nodes.get)


def test_to_outputs():
    assert to_outputs(None) == {}
    assert to_outputs({"result": 1}) == {"result": 1}
    assert to_outputs("text") == {"default": "text"}


@pytest.mark.asyncio
async def test_successful_request(settings, nodes):
    registry = NodeRegistry({"test": lambda params: {"result": params["input"]["value"] * 2}})
    channel = NodeChannel(Conductor(ConductorConfig(registry), settings=settings), nodes.get)

    response = await channel.handle(NodeRunRequest(id="req-1", nodeId="single", inputs={"value": 21}))

    assert response.id == "req-1"
    assert response.success is True
    assert response.outputs == {"result": 42}
    assert response.error is None


@pytest.mark.asyncio
async def test_non_mapping_data_on_default_port(channel):
    response = await channel.handle(NodeRunRequest(id="req-2", node_id="flow"))

    assert response.success is True
    assert response.outputs == {"default": "test-result"}


@pytest.mark.asyncio
async def test_failed_run(channel):
    response = await channel.handle(NodeRunRequest(id="req-3", node_id="broken"))

    assert response.success is False
    assert response.outputs == {}
    assert response.error_code == "NODE_TYPE_NOT_FOUND"
    assert response.failed_node_id == "x"


@pytest.mark.asyncio
async def test_unknown_node(channel, executable):
    response = await channel.handle(NodeRunRequest(id="req-4", node_id="nope"))

    assert response.success is False
    assert response.error == "Node not found: nope"
    executable.execute.assert_not_called()


@pytest.mark.asyncio
async def test_raw_payload(channel):
    response = await channel.handle_raw({"id": "req-5", "nodeId": "single", "inputs": {"k": "v"}, "slowMo": 0})

    assert response["id"] == "req-5"
    assert response["success"] is True
    assert response["outputs"] == {"default": "test-result"}


@pytest.mark.asyncio
async def test_invalid_raw_payload(channel):
    with pytest.raises(ChannelError) as exc_info:
        await channel.handle_raw({"id": "req-6"})

    assert exc_info.value.request_id == "req-6"
    assert exc_info.value.code == "INVALID_REQUEST"
