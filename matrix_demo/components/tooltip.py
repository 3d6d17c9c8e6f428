"""Tooltip card for the active matrix cell."""

from __future__ import annotations

import streamlit as st

from matrix_demo.components.shared import esc
from opportunity_map.interaction import InteractionResolver, TooltipData, TooltipDismiss


def _tooltip_html(tooltip: TooltipData) -> str:
    parts = [
        '<div class="cell-tooltip">',
        f'<div class="tt-project">{esc(tooltip.project.name)}</div>',
        f'<div class="tt-capability">{esc(tooltip.capability.label)}</div>',
        f'<div class="tt-score">Score: {tooltip.formatted_score}</div>',
    ]
    if tooltip.project.description:
        parts.append(
            f'<div class="tt-capability" style="margin-top:0.5rem">'
            f"{esc(tooltip.project.description)}</div>"
        )
    parts.append("</div>")
    return "".join(parts)


def render_tooltip(resolver: InteractionResolver) -> None:
    """Render the active tooltip, if any, with its close control."""
    tooltip = resolver.tooltip
    if tooltip is None:
        return
    st.markdown(_tooltip_html(tooltip), unsafe_allow_html=True)
    if st.button("Close", key="tooltip_close", help="Close tooltip"):
        resolver.handle(TooltipDismiss(reason="close"))
        st.rerun()
