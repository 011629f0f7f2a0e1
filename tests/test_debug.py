# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for debug simulation (simulated errors and long-running nodes)
"""

import time

import pytest

from conftest import make_group, make_node, mock_executable
from conductor.conductor import Conductor
from conductor.core.errors import SimulatedError
from conductor.debug import ERROR_TYPE_MESSAGES, DebugController
from conductor.models import (
    ConductorConfig,
    DebugOptions,
    ErrorCode,
    NodeState,
    SimulateErrorOptions,
    SimulateLongRunningOptions,
)


def error_on(node_id, **kwargs):
    return DebugOptions(simulate_error=SimulateErrorOptions(node_id=node_id, **kwargs))


class TestDebugController:

    def test_inactive_by_default(self):
        controller = DebugController()
        executable = mock_executable()

        assert controller.is_active is False
        assert controller.wrap(executable, "a") is executable

    def test_targets_only_configured_node(self):
        controller = DebugController(error_on("b"))

        assert controller.should_simulate_error("b") is True
        assert controller.should_simulate_error("a") is False
        assert controller.get_simulated_error("a") is None

    def test_random_resolved_on_initialize(self):
        controller = DebugController(error_on("random"))
        assert controller.should_simulate_error("random") is True  # unresolved yet

        controller.initialize(["a", "b", "c"])

        targeted = [n for n in ("a", "b", "c") if controller.should_simulate_error(n)]
        assert len(targeted) == 1

    def test_reconfigure_clears_previous_target(self):
        controller = DebugController(error_on("a"))
        controller.configure(None)

        assert controller.should_simulate_error("a") is False
        assert controller.get_options() == DebugOptions()

    def test_long_running_delay(self):
        controller = DebugController(DebugOptions(
            simulate_long_running=SimulateLongRunningOptions(node_id="a", delay_ms=250)
        ))

        assert controller.get_long_running_delay("a") == 250
        assert controller.get_long_running_delay("b") == 0

    @pytest.mark.asyncio
    async def test_wrapped_executable_raises(self):
        controller = DebugController(error_on("a", error_type="network"))
        executable = mock_executable()

        with pytest.raises(SimulatedError, match="Network error"):
            await controller.wrap(executable, "a").execute({})

        executable.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrapped_executable_delays_then_runs(self):
        controller = DebugController(DebugOptions(
            simulate_long_running=SimulateLongRunningOptions(node_id="a", delay_ms=30)
        ))
        executable = mock_executable("done")

        started = time.monotonic()
        result = await controller.wrap(executable, "a").execute({"x": 1})

        assert result == "done"
        assert time.monotonic() - started >= 0.025
        executable.execute.assert_awaited_once_with({"x": 1})


class TestConductorDebugRuns:

    @pytest.mark.asyncio
    async def test_simulated_error_fails_target_node(self, conductor):
        group = make_group("g", [make_node("a"), make_node("b"), make_node("c")])

        result = await conductor.run(group, debug=error_on("b", error_type="timeout"))

        assert result.success is False
        assert result.error.node_id == "b"
        assert result.error.code == ErrorCode.EXECUTION_FAILED
        assert result.error.message == ERROR_TYPE_MESSAGES["timeout"]
        assert result.executed_nodes == ["a", "b"]
        assert conductor.store.get_state().nodes["c"].state == NodeState.PENDING

    @pytest.mark.asyncio
    async def test_custom_simulated_message(self, conductor):
        result = await conductor.run(make_node("a"), debug=error_on("a", message="custom failure"))

        assert result.error.message == "custom failure"
        assert result.context.debug.simulate_error.node_id == "a"

    @pytest.mark.asyncio
    async def test_debug_options_do_not_leak_into_next_run(self, conductor):
        await conductor.run(make_node("a"), debug=error_on("a"))

        result = await conductor.run(make_node("a"))

        assert result.success is True

    @pytest.mark.asyncio
    async def test_supplied_controller_not_armed_by_earlier_run(self, registry, settings):
        controller = DebugController()
        conductor = Conductor(ConductorConfig(registry, debug_controller=controller), settings=settings)

        first = await conductor.run(make_node("a"), debug=error_on("a"))
        second = await conductor.run(make_node("a"))

        assert first.success is False
        assert second.success is True
        assert controller.get_options() == DebugOptions()

    @pytest.mark.asyncio
    async def test_supplied_controller_used_without_run_options(self, registry, settings):
        controller = DebugController(error_on("a"))
        conductor = Conductor(ConductorConfig(registry, debug_controller=controller), settings=settings)

        result = await conductor.run(make_node("a"))

        assert result.success is False
        assert result.error.message == ERROR_TYPE_MESSAGES["generic"]
