from __future__ import annotations

from pathlib import Path

import pytest

from fx_history import FxHistory
from fx_history.ingestion.ecb_csv import load_path
from fx_history.ingestion.models import RateTable

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def sample_csv_path() -> Path:
    return DATA_DIR / "eurofxref-sample.csv"


@pytest.fixture(scope="session")
def sample_table(sample_csv_path: Path) -> RateTable:
    return load_path(sample_csv_path)


@pytest.fixture()
def app(sample_table: RateTable) -> FxHistory:
    return FxHistory(sample_table)
