"""AI Opportunity Map - projects vs. AI capabilities dashboard.

Loads the configured CSV export (``OPPMAP_DATA_SOURCE``), builds the
matrix and renders it as a shaded heatmap with a cell tooltip.

Usage:
    streamlit run matrix_demo/streamlit_app.py
"""

import asyncio
import sys
from pathlib import Path

import streamlit as st
from dotenv import load_dotenv

# Load .env from project root so OPPMAP_* vars are available
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

# Ensure project root is importable
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from matrix_demo.components import APP_CSS, render_matrix, render_tooltip  # noqa: E402
from opportunity_map.interaction import InteractionResolver, resolve_device_mode  # noqa: E402
from opportunity_map.matrix.scale import ColorScale  # noqa: E402
from opportunity_map.matrix.store import MatrixStore  # noqa: E402
from opportunity_map.settings import get_settings  # noqa: E402
from opportunity_map.utils import setup_logging  # noqa: E402

# ---------------------------------------------------------------------------
# Page Configuration
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="AI Opportunity Map",
    page_icon=None,
    layout="wide",
)

st.markdown(APP_CSS, unsafe_allow_html=True)

cfg = get_settings()

# ---------------------------------------------------------------------------
# Session State Initialization
# ---------------------------------------------------------------------------
if "oppmap_store" not in st.session_state:
    setup_logging(cfg.log_level)
    store = MatrixStore(config=cfg)
    asyncio.run(store.reload())
    st.session_state.oppmap_store = store

store: MatrixStore = st.session_state.oppmap_store

if "oppmap_resolver" not in st.session_state:
    user_agent = st.context.headers.get("User-Agent")
    mode = resolve_device_mode(cfg.device_mode, user_agent)
    resolver = InteractionResolver(store.snapshot.matrix, mode=mode)
    # A reload swaps in a new matrix; any open tooltip points at stale data.
    store.subscribe(lambda snapshot: resolver.rebind(snapshot.matrix))
    st.session_state.oppmap_resolver = resolver

resolver: InteractionResolver = st.session_state.oppmap_resolver

# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------
st.markdown(
    '<div class="masthead">'
    "<h1>AI Opportunity Map</h1>"
    "<p>This is a map of opportunity spaces for AI in community-focused "
    "conservation initiatives. Learn more here or contact Rare.</p>"
    "</div>",
    unsafe_allow_html=True,
)

with st.sidebar:
    st.markdown("### Data")
    st.caption(f"Source: {cfg.data_source}")
    st.caption(f"Interaction mode: {resolver.mode.value}")
    if st.button("Reload data", key="oppmap_reload"):
        with st.spinner("Loading matrix…"):
            asyncio.run(store.reload())
        st.rerun()

# ---------------------------------------------------------------------------
# Matrix + tooltip
# ---------------------------------------------------------------------------
render_matrix(
    store.snapshot,
    resolver,
    ColorScale.from_settings(cfg),
    cfg.missing_cell_color,
)
render_tooltip(resolver)

# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------
st.markdown(
    '<div class="app-footer">'
    "Data comes from Rare&apos;s Solution Search contests and has been clustered "
    "to reveal patterns across AI capabilities and conservation solutions. "
    'Learn more at <a href="https://solutionsearch.org" target="_blank" '
    'rel="noreferrer">solutionsearch.org</a>.'
    "</div>",
    unsafe_allow_html=True,
)
