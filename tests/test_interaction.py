"""Tests for the tooltip state machine (opportunity_map/interaction.py)."""

import pytest

from opportunity_map.interaction import (
    CellBounds,
    CellEnter,
    CellLeave,
    CellTap,
    DeviceMode,
    TooltipDismiss,
    detect_device_mode,
    resolve_device_mode,
    tooltip_placement,
)
from opportunity_map.matrix.models import Capability, MatrixData, Project

# In the sample matrix P2 and P3 have no score for cap_acoustic.
X = ("P1", "cap_drones")
Y = ("P2", "cap_remote_sensing")
MISSING = ("P2", "cap_acoustic")


class TestPointerMode:
    def test_enter_shows_and_leave_dismisses(self, pointer_resolver):
        tooltip = pointer_resolver.handle(CellEnter(*X))
        assert tooltip is not None
        assert tooltip.cell == X
        assert tooltip.score == pytest.approx(0.82)

        assert pointer_resolver.handle(CellLeave(*X)) is None
        assert not pointer_resolver.is_showing

    def test_entering_new_cell_replaces_payload(self, pointer_resolver):
        pointer_resolver.handle(CellEnter(*X))
        tooltip = pointer_resolver.handle(CellEnter(*Y))
        assert tooltip.cell == Y
        assert tooltip.project.name == "Mangrove Guardians"

    def test_reentering_same_cell_keeps_payload(self, pointer_resolver):
        first = pointer_resolver.handle(CellEnter(*X, bounds=CellBounds(0, 300, 10, 10)))
        second = pointer_resolver.handle(CellEnter(*X, bounds=CellBounds(50, 400, 10, 10)))
        assert second is first

    def test_missing_cell_is_inert(self, pointer_resolver):
        assert pointer_resolver.handle(CellEnter(*MISSING)) is None
        pointer_resolver.handle(CellEnter(*X))
        assert pointer_resolver.handle(CellEnter(*MISSING)).cell == X

    def test_tap_shows_in_pointer_mode(self, pointer_resolver):
        assert pointer_resolver.handle(CellTap(*Y)).cell == Y


class TestTouchMode:
    def test_tap_then_tap_other_cell(self, touch_resolver):
        assert touch_resolver.handle(CellTap(*X)).cell == X
        assert touch_resolver.handle(CellTap(*Y)).cell == Y

    def test_leave_does_not_dismiss(self, touch_resolver):
        touch_resolver.handle(CellTap(*X))
        assert touch_resolver.handle(CellLeave(*X)).cell == X

    def test_hover_is_ignored(self, touch_resolver):
        assert touch_resolver.handle(CellEnter(*X)) is None

    def test_tap_on_missing_cell_keeps_state(self, touch_resolver):
        touch_resolver.handle(CellTap(*X))
        assert touch_resolver.handle(CellTap(*MISSING)).cell == X

    @pytest.mark.parametrize("reason", ["close", "outside"])
    def test_explicit_dismiss(self, touch_resolver, reason):
        touch_resolver.handle(CellTap(*X))
        assert touch_resolver.handle(TooltipDismiss(reason=reason)) is None

    def test_dismiss_when_idle_stays_idle(self, touch_resolver):
        assert touch_resolver.handle(TooltipDismiss()) is None


class TestPayload:
    def test_anchor_is_top_centre_of_cell(self, pointer_resolver):
        tooltip = pointer_resolver.handle(CellEnter(*X, bounds=CellBounds(left=10, top=200, width=20, height=18)))
        assert (tooltip.x, tooltip.y) == (20, 200)
        assert tooltip.placement == "above"

    def test_formatted_score(self, pointer_resolver):
        assert pointer_resolver.handle(CellEnter(*X)).formatted_score == "82.0"

    def test_unknown_cell_is_ignored(self, pointer_resolver):
        assert pointer_resolver.handle(CellTap("P404", "cap_drones")) is None

    def test_rebind_resets_to_idle(self, pointer_resolver):
        pointer_resolver.handle(CellEnter(*X))
        fresh = MatrixData(
            projects=[Project(id="Q1", name="Q")],
            capabilities=[Capability(id="c", label="C")],
            values=[[0.5]],
        )
        pointer_resolver.rebind(fresh)
        assert pointer_resolver.tooltip is None
        assert pointer_resolver.handle(CellEnter("Q1", "c")).score == 0.5

    def test_unsupported_event_raises(self, pointer_resolver):
        with pytest.raises(TypeError):
            pointer_resolver.handle("click")


class TestPlacement:
    def test_near_top_flips_below(self):
        assert tooltip_placement(149.0) == "below"

    def test_default_is_above(self):
        assert tooltip_placement(150.0) == "above"


class TestDeviceMode:
    @pytest.mark.parametrize(
        "agent",
        [
            "Mozilla/5.0 (iPhone; CPU iPhone OS 17_0 like Mac OS X) Mobile/15E148",
            "Mozilla/5.0 (Linux; Android 14; Pixel 8) Mobile Safari/537.36",
            "Mozilla/5.0 (iPad; CPU OS 16_6 like Mac OS X)",
        ],
    )
    def test_touch_agents(self, agent):
        assert detect_device_mode(agent) is DeviceMode.touch

    def test_desktop_agent_is_pointer(self):
        agent = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 Chrome/126.0"
        assert detect_device_mode(agent) is DeviceMode.pointer

    def test_unknown_agent_is_pointer(self):
        assert detect_device_mode(None) is DeviceMode.pointer

    def test_configured_mode_wins(self):
        assert resolve_device_mode("touch", "Windows NT") is DeviceMode.touch
        assert resolve_device_mode("pointer", "iPhone") is DeviceMode.pointer
        assert resolve_device_mode("auto", "iPhone") is DeviceMode.touch
