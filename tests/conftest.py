# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Test fixtures for the conductor engine.

Provides registries with mocked executables, node factories and isolated
store/conductor instances.
"""

import os
import sys
from typing import Any, List
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add repository root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from conductor.core.config import Config
from conductor.conductor import Conductor
from conductor.models import ConductorConfig, NodeDefinition
from conductor.registry import NodeRegistry
from conductor.store import ExecutionGraphStore


def make_node(node_id: str, node_type: str = "test", **parameters: Any) -> NodeDefinition:
    """Atomic node definition"""
    return NodeDefinition(id=node_id, type=node_type, parameters=parameters)


def make_group(group_id: str, children: List[NodeDefinition], edges: List[dict] = None) -> NodeDefinition:
    """Group node definition with ordered children"""
    return NodeDefinition(id=group_id, type="group", nodes=children, edges=edges or [])


def mock_executable(return_value: Any = "test-result") -> MagicMock:
    """Executable whose async execute() returns return_value"""
    executable = MagicMock()
    executable.execute = AsyncMock(return_value=return_value)
    return executable


def failing_executable(error: Exception) -> MagicMock:
    executable = MagicMock()
    executable.execute = AsyncMock(side_effect=error)
    return executable


# ============================================================================
# Fixtures
# ============================================================================

@pytest.fixture
def settings():
    """Default settings, independent of any config file on disk"""
    return Config()


@pytest.fixture
def executable():
    return mock_executable()


@pytest.fixture
def registry(executable):
    """Registry with a single "test" node type"""
    return NodeRegistry({"test": executable})


@pytest.fixture
def config(registry):
    return ConductorConfig(node_executor_factory=registry)


@pytest.fixture
def store():
    return ExecutionGraphStore()


@pytest.fixture
def conductor(config, settings):
    return Conductor(config, settings=settings)


@pytest.fixture
def snapshots(conductor):
    """Every store snapshot the conductor publishes during a test"""
    seen = []
    conductor.store.subscribe(seen.append)
    return seen
