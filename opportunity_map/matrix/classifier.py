"""Row classification for loosely-structured matrix exports.

The first parsed row is always the label row: it holds human-friendly
capability names and is never a project. Remaining rows become data rows
only when their identifier column is usable; anything else (trailing
notes, blank spacer rows) is dropped without error.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from opportunity_map.utils import EmptyDataset, NoDataRows

logger = logging.getLogger(__name__)

RawRow = Mapping[str, Any]


@dataclass(frozen=True)
class ClassifiedRows:
    """Output of :func:`classify_rows`."""

    label_row: RawRow
    data_rows: list[RawRow]
    capability_columns: list[str]
    dropped_rows: int = 0
    metadata_columns: list[str] = field(default_factory=list)


def is_null(value: Any) -> bool:
    """None, or a float NaN as produced by pandas for empty cells."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def has_identifier(row: RawRow, id_column: str) -> bool:
    """True when the identifier cell is present, non-null and not blank."""
    value = row.get(id_column)
    if is_null(value):
        return False
    return str(value).strip() != ""


def classify_rows(
    rows: Sequence[RawRow],
    metadata_columns: Iterable[str],
    id_column: str = "solution_id",
) -> ClassifiedRows:
    """Split parsed rows into the label row, data rows and capability columns.

    Raises:
        EmptyDataset: ``rows`` is empty.
        NoDataRows: no row after the label row has a usable identifier.
    """
    if not rows:
        raise EmptyDataset()

    metadata = list(metadata_columns)
    metadata_set = set(metadata)

    label_row = rows[0]
    capability_columns = [col for col in label_row.keys() if col not in metadata_set]
    logger.info("Found %d capability columns", len(capability_columns))

    data_rows = [row for row in rows[1:] if has_identifier(row, id_column)]
    dropped = len(rows) - 1 - len(data_rows)
    logger.info("Data rows with %s: %d (%d dropped)", id_column, len(data_rows), dropped)

    if not data_rows:
        raise NoDataRows(id_column)

    return ClassifiedRows(
        label_row=label_row,
        data_rows=data_rows,
        capability_columns=capability_columns,
        dropped_rows=dropped,
        metadata_columns=metadata,
    )
