from __future__ import annotations

from pathlib import Path

import pytest

from ordertrack.codec import HEADER_LINE
from ordertrack.store import OrderStore

SAMPLE = (
    HEADER_LINE
    + "100,Ann Lee,Widget X,5,12.34,01-01-2024\n"
    + "200,Bob Ray,Gadget,1,3.50,15-08-2024\n"
    + "300,Cy Fox,Blue WIDGET,2,7.00,29-02-2024\n"
)


@pytest.fixture(autouse=True)
def _no_env_data_file(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("ORDERTRACK_FILE", raising=False)


@pytest.fixture
def orders_path(tmp_path: Path) -> Path:
    return tmp_path / "orders.csv"


@pytest.fixture
def sample_store(orders_path: Path) -> OrderStore:
    orders_path.write_text(SAMPLE, encoding="utf-8")
    return OrderStore(orders_path)
