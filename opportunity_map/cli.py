"""
Opportunity Map CLI - inspect a matrix export from the terminal
"""
import asyncio
import math
import sys

import click
from rich.console import Console
from rich.table import Table

from opportunity_map.matrix.builder import build_matrix
from opportunity_map.matrix.classifier import classify_rows
from opportunity_map.matrix.models import MatrixData
from opportunity_map.matrix.scale import compute_score_range, format_score
from opportunity_map.settings import get_settings
from opportunity_map.sources import fetch_rows
from opportunity_map.utils import OpportunityMapError, get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


def _load(source):
    """Fetch, classify and build. Returns (classified, matrix)."""
    cfg = get_settings()
    rows = asyncio.run(fetch_rows(source or cfg.resolve_source(), timeout=cfg.fetch_timeout))
    classified = classify_rows(rows, cfg.metadata_columns_list, id_column=cfg.id_column)
    matrix = build_matrix(
        classified,
        id_column=cfg.id_column,
        name_column=cfg.name_column,
        description_column=cfg.description_column,
    )
    return classified, matrix


def _find_capability(matrix: MatrixData, key: str):
    wanted = key.strip().lower()
    for index, cap in enumerate(matrix.capabilities):
        if cap.id.lower() == wanted or cap.label.lower() == wanted:
            return index
    return None


# ═══════════════════════════════════════════════════════════════════
# MAIN CLI GROUP
# ═══════════════════════════════════════════════════════════════════

@click.group()
@click.version_option(version='0.1.0')
@click.option('--log-level', default=None, help='Override OPPMAP_LOG_LEVEL')
def main(log_level):
    """
    AI Opportunity Map - projects vs. AI capabilities
    """
    setup_logging(log_level or get_settings().log_level)


@main.command()
@click.argument('source', required=False)
def inspect(source):
    """Summarise the matrix built from SOURCE (path or URL)"""
    try:
        with console.status("[bold green]Loading matrix..."):
            classified, matrix = _load(source)
    except OpportunityMapError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    score_range = compute_score_range(matrix.values)
    missing = sum(1 for row in matrix.values for v in row if not math.isfinite(v))

    table = Table(title="Matrix Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("Projects", str(len(matrix.projects)))
    table.add_row("Capabilities", str(len(matrix.capabilities)))
    table.add_row("Dropped rows", str(classified.dropped_rows))
    table.add_row("Missing cells", str(missing))
    table.add_row("Score min", f"{score_range.min:g}")
    table.add_row("Score max", f"{score_range.max:g}")

    console.print(table)
    console.print("\n[green]✓ Matrix built[/green]")


@main.command()
@click.argument('capability')
@click.argument('source', required=False)
@click.option('--limit', '-n', default=5, show_default=True, help='Number of projects')
def top(capability, source, limit):
    """List the highest-scoring projects for CAPABILITY (id or label)"""
    try:
        _, matrix = _load(source)
    except OpportunityMapError as e:
        console.print(f"\n[red]✗ Error: {e}[/red]")
        sys.exit(1)

    col = _find_capability(matrix, capability)
    if col is None:
        console.print(f"\n[red]✗ Unknown capability: {capability}[/red]")
        sys.exit(2)

    scored = [
        (matrix.values[row][col], project)
        for row, project in enumerate(matrix.projects)
        if math.isfinite(matrix.values[row][col])
    ]
    scored.sort(key=lambda item: item[0], reverse=True)

    table = Table(title=matrix.capabilities[col].label)
    table.add_column("Project", style="cyan")
    table.add_column("ID")
    table.add_column("Score", style="magenta", justify="right")
    for score, project in scored[:limit]:
        table.add_row(project.name, project.id, format_score(score))

    console.print(table)


if __name__ == '__main__':
    main()
