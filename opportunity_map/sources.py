"""Fetch and parse the tabular export into rows of column -> value.

Remote exports are downloaded with httpx; local files are read off the
event loop. Parsing uses pandas with the first line as the header and
every cell kept as text, so score coercion happens in one place (the
matrix builder).
"""

from __future__ import annotations

import asyncio
import io
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Protocol

import httpx
import pandas as pd

from opportunity_map.utils import LoadFailure

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT = 30.0

Row = dict[str, Any]


class RowSource(Protocol):
    """Async collaborator that yields parsed rows for the matrix store."""

    def __call__(self) -> Awaitable[list[Row]]: ...


def is_remote(source: str) -> bool:
    return source.startswith(("http://", "https://"))


def parse_csv_text(text: str) -> list[Row]:
    """Parse CSV text into a list of row mappings.

    Blank lines are skipped; empty cells become empty strings.
    """
    if not text.strip():
        return []
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise LoadFailure(f"Failed to parse CSV: {exc}") from exc
    return frame.to_dict(orient="records")


async def _download(url: str, timeout: float) -> str:
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.text
    except (httpx.HTTPStatusError, httpx.RequestError) as exc:
        raise LoadFailure(f"Failed to load CSV from {url}: {exc}") from exc


def _read_file(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except OSError as exc:
        raise LoadFailure(f"Failed to load CSV from {path}: {exc}") from exc


async def fetch_rows(source: str, timeout: float = _DEFAULT_TIMEOUT) -> list[Row]:
    """Load ``source`` (URL or path) and parse it into rows."""
    logger.info("Loading CSV from: %s", source)
    if is_remote(source):
        text = await _download(source, timeout)
    else:
        text = await asyncio.to_thread(_read_file, Path(source))
    rows = parse_csv_text(text)
    logger.info("CSV parsing complete. Total rows: %d", len(rows))
    return rows


def csv_source(source: str, timeout: float = _DEFAULT_TIMEOUT) -> Callable[[], Awaitable[list[Row]]]:
    """Bind a locator into a :class:`RowSource`."""

    async def _load() -> list[Row]:
        return await fetch_rows(source, timeout=timeout)

    return _load
