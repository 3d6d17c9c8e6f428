"""Build the typed project/capability matrix from classified rows."""

from __future__ import annotations

import logging
import math
import numbers
from collections.abc import Sequence
from typing import Any

from opportunity_map.matrix.classifier import ClassifiedRows, RawRow, classify_rows, is_null
from opportunity_map.matrix.models import Capability, MatrixData, Project
from opportunity_map.settings import OpportunityMapSettings, get_settings

logger = logging.getLogger(__name__)

MISSING = math.nan


def coerce_score(raw: Any) -> float:
    """Coerce a raw cell to a finite float, or NaN when it has no usable score.

    Numbers pass through; text is trimmed and parsed. Booleans, blanks,
    unparseable text and non-finite values are all missing.
    """
    if raw is None or isinstance(raw, bool):
        return MISSING
    if isinstance(raw, numbers.Real):
        value = float(raw)
    elif isinstance(raw, str):
        text = raw.strip()
        if not text:
            return MISSING
        try:
            value = float(text)
        except ValueError:
            return MISSING
    else:
        return MISSING
    return value if math.isfinite(value) else MISSING


def _text(value: Any) -> str | None:
    """Return ``value`` as stripped text, or None when absent or blank."""
    if is_null(value):
        return None
    text = str(value).strip()
    return text or None


def build_capabilities(label_row: RawRow, capability_columns: Sequence[str]) -> list[Capability]:
    """One capability per column, labelled from the label row when possible."""
    capabilities = []
    for col in capability_columns:
        label = label_row.get(col)
        if isinstance(label, str) and label.strip():
            display = label.strip()
        else:
            display = col
        capabilities.append(Capability(id=col, label=display))
    return capabilities


def build_project(
    row: RawRow,
    index: int,
    metadata_columns: Sequence[str],
    id_column: str,
    name_column: str,
    description_column: str,
) -> Project:
    identifier = _text(row.get(id_column))
    project_id = identifier if identifier is not None else f"row_{index}"
    name = _text(row.get(name_column)) or identifier or f"Project {index + 1}"
    meta = {col: row[col] for col in metadata_columns if col in row}
    return Project(
        id=project_id,
        name=name,
        description=_text(row.get(description_column)),
        meta=meta,
    )


def unique_project_ids(projects: Sequence[Project]) -> list[Project]:
    """Suffix repeated identifiers (``P1``, ``P1_2``, ...) so cells resolve to one row."""
    seen = {project.id for project in projects}
    used: set[str] = set()
    result = []
    for project in projects:
        if project.id not in used:
            used.add(project.id)
            result.append(project)
            continue
        n = 2
        while f"{project.id}_{n}" in used or f"{project.id}_{n}" in seen:
            n += 1
        new_id = f"{project.id}_{n}"
        logger.warning("Duplicate project id %s renamed to %s", project.id, new_id)
        used.add(new_id)
        result.append(project.model_copy(update={"id": new_id}))
    return result


def build_score_grid(
    data_rows: Sequence[RawRow], capability_columns: Sequence[str]
) -> list[list[float]]:
    return [[coerce_score(row.get(col)) for col in capability_columns] for row in data_rows]


def build_matrix(
    classified: ClassifiedRows,
    id_column: str = "solution_id",
    name_column: str = "solution_short_name",
    description_column: str = "solution_short_desc",
) -> MatrixData:
    """Convert classified rows into projects, capabilities and the score grid."""
    capabilities = build_capabilities(classified.label_row, classified.capability_columns)
    projects = [
        build_project(
            row,
            index,
            classified.metadata_columns,
            id_column,
            name_column,
            description_column,
        )
        for index, row in enumerate(classified.data_rows)
    ]
    projects = unique_project_ids(projects)
    values = build_score_grid(classified.data_rows, classified.capability_columns)

    logger.info("Created %d projects, %d capabilities", len(projects), len(capabilities))
    if projects:
        logger.debug("Sample project: %s", projects[0])
    return MatrixData(projects=projects, capabilities=capabilities, values=values)


def build_matrix_from_rows(
    rows: Sequence[RawRow],
    config: OpportunityMapSettings | None = None,
) -> MatrixData:
    """Classify and build in one step using the configured column conventions."""
    cfg = config or get_settings()
    classified = classify_rows(rows, cfg.metadata_columns_list, id_column=cfg.id_column)
    return build_matrix(
        classified,
        id_column=cfg.id_column,
        name_column=cfg.name_column,
        description_column=cfg.description_column,
    )
