"""Tooltip interaction state machine for matrix cells.

The resolver is either Idle (no tooltip) or Showing a single payload bound
to one project/capability cell. Pointer devices show on enter and hide on
leave; touch devices show on tap and keep the tooltip until it is
explicitly dismissed. Cells without a score never change state.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Literal, Union

from opportunity_map.matrix.models import Capability, MatrixData, Project
from opportunity_map.matrix.scale import format_score

logger = logging.getLogger(__name__)

# Anchors closer than this to the viewport top flip the tooltip below the cell.
TOOLTIP_FLIP_THRESHOLD_PX = 150.0

_TOUCH_AGENT_PATTERN = re.compile(r"Mobi|Android|iPhone|iPad|iPod|Touch|Silk|Kindle", re.IGNORECASE)


class DeviceMode(str, Enum):
    """Input style of the runtime, read once at startup."""
    touch = "touch"
    pointer = "pointer"


def detect_device_mode(user_agent: str | None) -> DeviceMode:
    """Classify a user agent string as touch-capable or pointer-capable."""
    if user_agent and _TOUCH_AGENT_PATTERN.search(user_agent):
        return DeviceMode.touch
    return DeviceMode.pointer


def resolve_device_mode(configured: str, user_agent: str | None = None) -> DeviceMode:
    """Honour an explicit ``touch``/``pointer`` setting, otherwise detect."""
    if configured in (DeviceMode.touch.value, DeviceMode.pointer.value):
        return DeviceMode(configured)
    return detect_device_mode(user_agent)


# -- Events -------------------------------------------------------------------

@dataclass(frozen=True)
class CellBounds:
    """On-screen rectangle of a cell at interaction time."""

    left: float
    top: float
    width: float = 0.0
    height: float = 0.0

    @property
    def anchor(self) -> tuple[float, float]:
        """Horizontal centre of the top edge."""
        return self.left + self.width / 2, self.top


@dataclass(frozen=True)
class CellEnter:
    project_id: str
    capability_id: str
    bounds: CellBounds | None = None


@dataclass(frozen=True)
class CellLeave:
    project_id: str
    capability_id: str


@dataclass(frozen=True)
class CellTap:
    project_id: str
    capability_id: str
    bounds: CellBounds | None = None


@dataclass(frozen=True)
class TooltipDismiss:
    reason: Literal["close", "outside"] = "close"


InteractionEvent = Union[CellEnter, CellLeave, CellTap, TooltipDismiss]


# -- Tooltip payload ------------------------------------------------------------

@dataclass(frozen=True)
class TooltipData:
    """The single active tooltip. Anchor coordinates are never recomputed."""

    project: Project
    capability: Capability
    score: float
    x: float = 0.0
    y: float = 0.0

    @property
    def cell(self) -> tuple[str, str]:
        return self.project.id, self.capability.id

    @property
    def formatted_score(self) -> str:
        return format_score(self.score)

    @property
    def placement(self) -> str:
        return tooltip_placement(self.y)


def tooltip_placement(anchor_y: float) -> Literal["above", "below"]:
    """Prefer above the cell; flip below when too close to the viewport top."""
    return "below" if anchor_y < TOOLTIP_FLIP_THRESHOLD_PX else "above"


class InteractionResolver:
    """Resolves cell events into at most one active tooltip."""

    def __init__(self, matrix: MatrixData, mode: DeviceMode = DeviceMode.pointer) -> None:
        self._matrix = matrix
        self.mode = mode
        self._tooltip: TooltipData | None = None

    @property
    def tooltip(self) -> TooltipData | None:
        return self._tooltip

    @property
    def is_showing(self) -> bool:
        return self._tooltip is not None

    def rebind(self, matrix: MatrixData) -> None:
        """Attach a freshly built matrix; any open tooltip refers to stale data."""
        self._matrix = matrix
        self._tooltip = None

    def handle(self, event: InteractionEvent) -> TooltipData | None:
        """Apply one event and return the resulting tooltip (None when Idle)."""
        if isinstance(event, TooltipDismiss):
            if self._tooltip is not None:
                logger.debug("Tooltip dismissed (%s)", event.reason)
            self._tooltip = None
        elif isinstance(event, CellTap):
            # Taps show in either mode so hybrid touch/pointer devices work.
            payload = self._payload(event.project_id, event.capability_id, event.bounds)
            if payload is not None:
                self._tooltip = payload
        elif isinstance(event, CellEnter):
            if self.mode is DeviceMode.pointer:
                payload = self._payload(event.project_id, event.capability_id, event.bounds)
                if payload is not None and (
                    self._tooltip is None or self._tooltip.cell != payload.cell
                ):
                    self._tooltip = payload
        elif isinstance(event, CellLeave):
            if self.mode is DeviceMode.pointer:
                self._tooltip = None
        else:
            raise TypeError(f"Unsupported interaction event: {event!r}")
        return self._tooltip

    def _payload(
        self, project_id: str, capability_id: str, bounds: CellBounds | None
    ) -> TooltipData | None:
        row = self._matrix.project_index(project_id)
        col = self._matrix.capability_index(capability_id)
        if row is None or col is None:
            logger.warning("Ignoring event for unknown cell (%s, %s)", project_id, capability_id)
            return None
        score = self._matrix.score(row, col)
        if not math.isfinite(score):
            return None
        x, y = bounds.anchor if bounds is not None else (0.0, 0.0)
        return TooltipData(
            project=self._matrix.projects[row],
            capability=self._matrix.capabilities[col],
            score=score,
            x=x,
            y=y,
        )
