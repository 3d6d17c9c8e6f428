"""Heatmap rendering of the project x capability matrix.

Cells are shaded with the opportunity_map colour scale; missing scores are
left out of the heatmap so the neutral plot background shows through.
"""

from __future__ import annotations

import logging
import math
from typing import Any

import plotly.graph_objects as go
import streamlit as st

from matrix_demo.components.shared import COLORS, esc, truncate
from opportunity_map.interaction import CellEnter, CellLeave, CellTap, DeviceMode, InteractionResolver
from opportunity_map.matrix.models import MatrixData
from opportunity_map.matrix.scale import (
    ColorScale,
    ScoreRange,
    compute_score_range,
    format_score,
    legend_stops,
)
from opportunity_map.matrix.store import MatrixSnapshot

logger = logging.getLogger(__name__)

_SELECTION_KEY = "matrix_last_selection"

# Plotly interpolates linearly between colorscale stops; at this density
# the rendered shade stays within rounding of ColorScale.hex for any score.
_COLORSCALE_STEPS = 101


def _heatmap_inputs(
    matrix: MatrixData, score_range: ScoreRange
) -> tuple[list[list[float | None]], list[list[str]]]:
    """Normalized z values (None for missing) and per-cell hover text."""
    z: list[list[float | None]] = []
    hover: list[list[str]] = []
    for row, project in enumerate(matrix.projects):
        z_row: list[float | None] = []
        hover_row: list[str] = []
        for col, capability in enumerate(matrix.capabilities):
            score = matrix.values[row][col]
            if math.isfinite(score):
                z_row.append(score_range.normalize(score))
                hover_row.append(
                    f"<b>{esc(project.name)}</b><br>{esc(capability.label)}<br>"
                    f"Score: {format_score(score)}"
                )
            else:
                z_row.append(None)
                hover_row.append("")
        z.append(z_row)
        hover.append(hover_row)
    return z, hover


def build_heatmap_figure(
    matrix: MatrixData,
    scale: ColorScale | None = None,
    missing_color: str = "#FFFFFF",
) -> go.Figure:
    """Plotly heatmap with one row per project and one column per capability."""
    scale = scale or ColorScale()
    score_range = compute_score_range(matrix.values)
    z, hover = _heatmap_inputs(matrix, score_range)

    n_rows = len(matrix.projects)
    n_cols = len(matrix.capabilities)

    fig = go.Figure(
        go.Heatmap(
            z=z,
            x=list(range(n_cols)),
            y=list(range(n_rows)),
            zmin=0.0,
            zmax=1.0,
            colorscale=legend_stops(scale, steps=_COLORSCALE_STEPS),
            text=hover,
            hovertemplate="%{text}<extra></extra>",
            hoverongaps=False,
            xgap=1,
            ygap=1,
            showscale=False,
        )
    )
    fig.update_layout(
        plot_bgcolor=missing_color,
        paper_bgcolor="rgba(0,0,0,0)",
        font=dict(color=COLORS["text_body"], size=11),
        margin=dict(l=10, r=10, t=10, b=10),
        height=max(320, 22 * n_rows + 160),
        xaxis=dict(
            side="top",
            tickmode="array",
            tickvals=list(range(n_cols)),
            ticktext=[truncate(c.label) for c in matrix.capabilities],
            tickangle=-90,
            showgrid=False,
            zeroline=False,
        ),
        yaxis=dict(
            tickmode="array",
            tickvals=list(range(n_rows)),
            ticktext=[truncate(p.name, 32) for p in matrix.projects],
            autorange="reversed",
            showgrid=False,
            zeroline=False,
        ),
    )
    return fig


def _error_html(message: str) -> str:
    return f"<div style='color:{COLORS['danger']}'>Error loading matrix: {esc(message)}</div>"


def _selected_cell(event: Any, matrix: MatrixData) -> tuple[str, str] | None:
    """Project/capability ids of the clicked heatmap point, if any."""
    if not event:
        return None
    selection = event.get("selection") if hasattr(event, "get") else None
    points = (selection or {}).get("points") or []
    if not points:
        return None
    point = points[0]
    try:
        row = int(point["y"])
        col = int(point["x"])
    except (KeyError, TypeError, ValueError):
        logger.debug("Unrecognised selection payload: %s", point)
        return None
    if not (0 <= row < len(matrix.projects) and 0 <= col < len(matrix.capabilities)):
        return None
    return matrix.projects[row].id, matrix.capabilities[col].id


def _dispatch_selection(resolver: InteractionResolver, cell: tuple[str, str] | None) -> None:
    """Translate a change in heatmap selection into resolver events."""
    previous = st.session_state.get(_SELECTION_KEY)
    if cell == previous:
        return
    st.session_state[_SELECTION_KEY] = cell
    if cell is None:
        if previous is not None:
            resolver.handle(CellLeave(*previous))
        return
    if resolver.mode is DeviceMode.touch:
        resolver.handle(CellTap(*cell))
    else:
        resolver.handle(CellEnter(*cell))


def render_matrix(
    snapshot: MatrixSnapshot,
    resolver: InteractionResolver,
    scale: ColorScale,
    missing_color: str,
) -> None:
    """Render loading, error and empty states, or the heatmap itself."""
    if snapshot.is_loading and snapshot.matrix.is_empty:
        st.info("Loading matrix…")
        return

    if snapshot.error:
        st.markdown(_error_html(snapshot.error), unsafe_allow_html=True)
        return

    matrix = snapshot.matrix
    if matrix.is_empty:
        st.warning("No matrix data available.")
        return

    st.markdown(
        '<div class="matrix-title">AI Opportunity Map – Solutions Matrix</div>'
        '<p class="matrix-desc">Each square shows how relevant an AI capability is for a '
        "given project. Darker blue indicates higher relevance.</p>",
        unsafe_allow_html=True,
    )

    fig = build_heatmap_figure(matrix, scale, missing_color)
    event = st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key="matrix_heatmap",
    )
    _dispatch_selection(resolver, _selected_cell(event, matrix))
