"""Project x capability score matrix.

Classifies parsed export rows, builds the typed matrix, and provides the
normalisation and colour scale used to shade its cells.
"""

from opportunity_map.matrix.builder import build_matrix, build_matrix_from_rows, coerce_score
from opportunity_map.matrix.classifier import ClassifiedRows, classify_rows
from opportunity_map.matrix.models import Capability, MatrixData, Project
from opportunity_map.matrix.scale import (
    ColorScale,
    ScoreRange,
    cell_color,
    compute_score_range,
    format_score,
)
from opportunity_map.matrix.store import MatrixSnapshot, MatrixStore

__all__ = [
    "Capability",
    "ClassifiedRows",
    "ColorScale",
    "MatrixData",
    "MatrixSnapshot",
    "MatrixStore",
    "Project",
    "ScoreRange",
    "build_matrix",
    "build_matrix_from_rows",
    "cell_color",
    "classify_rows",
    "coerce_score",
    "compute_score_range",
    "format_score",
]
