"""Shared CSS, colour constants and formatters for the matrix dashboard."""

from __future__ import annotations

import html

# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------
COLORS: dict[str, str] = {
    "bg_app": "#FFFFFF",
    "bg_header": "#FAFAFA",
    "border": "#E0E0E0",
    "border_cell": "#F5F5F5",
    "text_heading": "#222222",
    "text_body": "#555555",
    "text_muted": "#666666",
    "tooltip_bg": "#333333",
    "tooltip_text": "#FFFFFF",
    "tooltip_secondary": "#CCCCCC",
    "danger": "#D32F2F",
}

APP_CSS = """
<style>
    .stApp {
        font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, Helvetica, Arial, sans-serif;
    }
    .block-container { max-width: 1200px; }

    /* ---- Masthead ---- */
    .masthead h1 { margin-bottom: 0.25rem; }
    .masthead p { margin: 0; color: #555555; max-width: 640px; }

    /* ---- Matrix ---- */
    .matrix-title { margin: 0; font-size: 1.4rem; font-weight: 600; }
    .matrix-desc { margin: 0.25rem 0 0.75rem 0; font-size: 0.875rem; color: #555555; }

    /* ---- Tooltip card ---- */
    .cell-tooltip {
        background: #333333;
        color: #FFFFFF;
        padding: 0.75rem 1rem;
        border-radius: 6px;
        font-size: 0.875rem;
        max-width: 280px;
        box-shadow: 0 4px 12px rgba(0, 0, 0, 0.15);
    }
    .cell-tooltip .tt-project { font-weight: 600; margin-bottom: 0.25rem; }
    .cell-tooltip .tt-capability { font-size: 0.75rem; color: #CCCCCC; margin-bottom: 0.5rem; }
    .cell-tooltip .tt-score { font-weight: 500; }

    /* ---- Footer ---- */
    .app-footer { margin-top: 2rem; font-size: 0.75rem; color: #666666; }
</style>
"""


def esc(text: object) -> str:
    """HTML-escape arbitrary cell text for unsafe_allow_html blocks."""
    return html.escape(str(text), quote=True)


def truncate(text: str, limit: int = 40) -> str:
    """Shorten long labels for axis ticks."""
    return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"
