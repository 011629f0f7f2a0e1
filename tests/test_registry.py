# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the node executable registry
"""

import pytest

from conftest import mock_executable
from conductor.core.errors import ConfigurationError
from conductor.registry import FunctionExecutable, NodeRegistry


def test_lookup_registered_type():
    executable = mock_executable()
    registry = NodeRegistry({"http-request": executable})

    assert registry.get_node_executable("http-request") is executable
    assert "http-request" in registry
    assert len(registry) == 1


def test_unknown_type_returns_none():
    registry = NodeRegistry()

    assert registry.get_node_executable("unknown-type") is None
    assert "unknown-type" not in registry


def test_plain_callable_is_wrapped():
    registry = NodeRegistry()
    registry.register("echo", lambda params: params)

    executable = registry.get_node_executable("echo")
    assert isinstance(executable, FunctionExecutable)
    assert executable.execute({"a": 1}) == {"a": 1}


def test_duplicate_registration_rejected():
    registry = NodeRegistry({"echo": lambda params: params})

    with pytest.raises(ConfigurationError, match="already registered"):
        registry.register("echo", lambda params: None)


def test_replace_registration():
    registry = NodeRegistry({"echo": lambda params: "old"})
    registry.register("echo", lambda params: "new", replace=True)

    assert registry.get_node_executable("echo").execute({}) == "new"


def test_non_callable_rejected():
    registry = NodeRegistry()

    with pytest.raises(ConfigurationError, match="must be callable"):
        registry.register("broken", 42)


def test_empty_type_rejected():
    with pytest.raises(ConfigurationError):
        NodeRegistry().register("", lambda params: None)


def test_unregister_and_types():
    registry = NodeRegistry({"b": lambda p: p, "a": lambda p: p})
    registry.unregister("b")
    registry.unregister("missing")

    assert registry.types() == ["a"]
