"""Opportunity Map dashboard - component package.

Each module exposes a render function consumed by streamlit_app.py.
"""

from matrix_demo.components.matrix_view import render_matrix  # noqa: F401
from matrix_demo.components.shared import APP_CSS, COLORS  # noqa: F401
from matrix_demo.components.tooltip import render_tooltip  # noqa: F401
