"""Loading state for the matrix, with superseded loads discarded.

Each load is tagged with a generation number taken when it starts. A
result is applied only if its generation is still the latest, so a slow
earlier load can never overwrite a newer one. Snapshots are immutable and
replaced whole, so readers never see projects, capabilities and values
that disagree in shape.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from opportunity_map.matrix.builder import build_matrix_from_rows
from opportunity_map.matrix.models import Capability, MatrixData, Project
from opportunity_map.settings import OpportunityMapSettings, get_settings
from opportunity_map.sources import RowSource, csv_source
from opportunity_map.utils import LoadFailure, MatrixBuildError

logger = logging.getLogger(__name__)

Listener = Callable[["MatrixSnapshot"], None]


class MatrixSnapshot(BaseModel):
    """What the renderer sees: the matrix plus load status."""

    model_config = ConfigDict(frozen=True)

    matrix: MatrixData = Field(default_factory=MatrixData)
    is_loading: bool = False
    error: str | None = None
    generation: int = 0

    @property
    def projects(self) -> list[Project]:
        return self.matrix.projects

    @property
    def capabilities(self) -> list[Capability]:
        return self.matrix.capabilities

    @property
    def values(self) -> list[list[float]]:
        return self.matrix.values


class MatrixStore:
    """Owns the current snapshot and the load generation counter."""

    def __init__(
        self,
        source: RowSource | None = None,
        config: OpportunityMapSettings | None = None,
    ) -> None:
        self._config = config or get_settings()
        self._source = source or csv_source(
            self._config.resolve_source(), timeout=self._config.fetch_timeout
        )
        self._generation = 0
        self._snapshot = MatrixSnapshot(is_loading=True)
        self._listeners: list[Listener] = []

    @property
    def snapshot(self) -> MatrixSnapshot:
        return self._snapshot

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener called with every published snapshot."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def begin_load(self) -> int:
        """Start a new load generation; the current matrix stays visible."""
        self._generation += 1
        self._publish(
            MatrixSnapshot(
                matrix=self._snapshot.matrix,
                is_loading=True,
                error=None,
                generation=self._generation,
            )
        )
        return self._generation

    def complete(self, generation: int, rows: Sequence[dict[str, Any]]) -> bool:
        """Build and publish the matrix for ``rows`` if ``generation`` is current."""
        if self._is_stale(generation):
            return False
        try:
            matrix = build_matrix_from_rows(rows, self._config)
        except MatrixBuildError as exc:
            return self.fail(generation, str(exc))
        self._publish(MatrixSnapshot(matrix=matrix, generation=generation))
        return True

    def fail(self, generation: int, message: str) -> bool:
        """Clear the matrix and publish ``message`` if ``generation`` is current."""
        if self._is_stale(generation):
            return False
        logger.error("Matrix load failed: %s", message)
        self._publish(MatrixSnapshot(error=message, generation=generation))
        return True

    async def reload(self) -> MatrixSnapshot:
        """Fetch, build and publish; returns the snapshot current afterwards."""
        generation = self.begin_load()
        try:
            rows = await self._source()
        except LoadFailure as exc:
            self.fail(generation, str(exc) or "Failed to load CSV.")
        except Exception as exc:  # custom sources may raise anything
            logger.exception("Row source raised an unexpected error")
            self.fail(generation, str(exc) or "Unknown error parsing CSV.")
        else:
            self.complete(generation, rows)
        return self._snapshot

    def _is_stale(self, generation: int) -> bool:
        if generation != self._generation:
            logger.debug(
                "Discarding result of load %d (current is %d)", generation, self._generation
            )
            return True
        return False

    def _publish(self, snapshot: MatrixSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            listener(snapshot)
