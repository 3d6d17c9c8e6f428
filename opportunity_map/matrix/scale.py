"""Score normalisation and the single-hue colour scale used for cell shading.

Normalisation is relative to the finite min/max of the whole grid, so it
must be recomputed whenever a new grid is built. Lightness falls linearly
from the light endpoint (lowest score) to the dark endpoint (highest).
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from opportunity_map.settings import OpportunityMapSettings
from opportunity_map.utils import hsl_to_hex

MISSING_CELL_COLOR = "#FFFFFF"


@dataclass(frozen=True)
class ScoreRange:
    """Finite score bounds of a grid."""

    min: float = 0.0
    max: float = 0.0

    def normalize(self, score: float) -> float:
        """Map ``score`` into [0, 1]; 0 for missing scores or a flat grid."""
        if score is None or not math.isfinite(score) or self.max == self.min:
            return 0.0
        return (score - self.min) / (self.max - self.min)


def compute_score_range(values: Sequence[Sequence[float]]) -> ScoreRange:
    """Min/max over finite cells only. Both bounds are 0 when none exist."""
    cells = [v for row in values for v in row]
    if not cells:
        return ScoreRange()
    grid = np.asarray(cells, dtype=float)
    finite = grid[np.isfinite(grid)]
    if finite.size == 0:
        return ScoreRange()
    return ScoreRange(min=float(finite.min()), max=float(finite.max()))


@dataclass(frozen=True)
class ColorScale:
    """Fixed hue and saturation, lightness interpolated between two endpoints."""

    hue: float = 205.0
    saturation: float = 60.0
    light: float = 95.0  # lightness at normalized 0
    dark: float = 50.0   # lightness at normalized 1

    @classmethod
    def from_settings(cls, config: OpportunityMapSettings) -> "ColorScale":
        return cls(
            hue=config.color_hue,
            saturation=config.color_saturation,
            light=config.lightness_light,
            dark=config.lightness_dark,
        )

    def lightness(self, t: float) -> float:
        t = min(1.0, max(0.0, t))
        return self.light - t * (self.light - self.dark)

    def css(self, t: float) -> str:
        return f"hsl({self.hue:g}, {self.saturation:g}%, {self.lightness(t):g}%)"

    def hex(self, t: float) -> str:
        return hsl_to_hex(self.hue, self.saturation, self.lightness(t))


def cell_color(
    score: float,
    score_range: ScoreRange,
    scale: ColorScale | None = None,
    missing_color: str = MISSING_CELL_COLOR,
) -> str:
    """Hex colour for a raw score; the neutral colour when the score is missing."""
    if score is None or not math.isfinite(score):
        return missing_color
    scale = scale or ColorScale()
    return scale.hex(score_range.normalize(score))


def legend_stops(scale: ColorScale, steps: int = 11) -> list[list[float | str]]:
    """Evenly spaced ``[t, colour]`` pairs, usable as a Plotly colorscale."""
    if steps < 2:
        raise ValueError("A colour scale needs at least two stops")
    return [[i / (steps - 1), scale.hex(i / (steps - 1))] for i in range(steps)]


def format_score(score: float) -> str:
    """Relevance as a percentage with one decimal, e.g. 0.82 -> ``"82.0"``."""
    return f"{score * 100:.1f}"
