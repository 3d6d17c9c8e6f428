"""
Utility functions for the Opportunity Map

Provides logging setup and the exception hierarchy shared by the loader,
the matrix builder and the CLI.
"""

import colorsys
import logging
from pathlib import Path
from typing import Optional


# ═══════════════════════════════════════════════════════════════════
# LOGGING
# ═══════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Configure logging for the Opportunity Map"""
    level = getattr(logging, log_level.upper())

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers
    )


def get_logger(name: str) -> logging.Logger:
    """Get logger instance for module"""
    return logging.getLogger(name)


# ═══════════════════════════════════════════════════════════════════
# COLOUR
# ═══════════════════════════════════════════════════════════════════

def hsl_to_hex(hue: float, saturation: float, lightness: float) -> str:
    """Convert CSS-style HSL (degrees, percent, percent) to ``#RRGGBB``"""
    r, g, b = colorsys.hls_to_rgb((hue % 360) / 360.0, lightness / 100.0, saturation / 100.0)
    return "#{:02X}{:02X}{:02X}".format(round(r * 255), round(g * 255), round(b * 255))


# ═══════════════════════════════════════════════════════════════════
# EXCEPTIONS
# ═══════════════════════════════════════════════════════════════════

class OpportunityMapError(Exception):
    """Base exception for the Opportunity Map"""
    pass


class LoadFailure(OpportunityMapError):
    """The tabular export could not be fetched or parsed"""
    pass


class MatrixBuildError(OpportunityMapError):
    """Rows were loaded but no matrix could be built from them"""
    pass


class EmptyDataset(MatrixBuildError):
    """The export contained zero rows"""

    def __init__(self, message: str = "CSV loaded but contains no data rows.") -> None:
        super().__init__(message)


class NoDataRows(MatrixBuildError):
    """No row after the label row carries a usable identifier"""

    def __init__(self, id_column: str = "solution_id") -> None:
        self.id_column = id_column
        super().__init__(f"CSV loaded but contains no rows with {id_column}.")
