"""Location of the packaged ECB reference-rate history."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_RATES_CSV_PATH", "bundled_rates_path"]

# ``Path(__file__)`` points at ``fx_history/data/__init__.py`` so replacing the
# filename gives the location of ``eurofxref-hist.csv`` irrespective of the
# working directory.
DEFAULT_RATES_CSV_PATH: Final[Path] = Path(__file__).resolve().with_name("eurofxref-hist.csv")


def bundled_rates_path() -> Path:
    """Return the absolute path to the packaged ``eurofxref-hist.csv`` file."""

    return DEFAULT_RATES_CSV_PATH
