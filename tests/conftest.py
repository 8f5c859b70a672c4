from __future__ import annotations

import io
import uuid
from datetime import datetime
from decimal import Decimal

import pytest

from minersales.config import AppConfig
from minersales.logger import StructuredLogger
from minersales.models import ExpenseRecord, SaleRecord, SalesPerson


# ---------------------------------------------------------
# Clock
# ---------------------------------------------------------
@pytest.fixture
def now() -> datetime:
    """Mid-June reference time so "month" and "last" are both non-trivial."""
    return datetime(2025, 6, 15, 12, 0, 0)


# ---------------------------------------------------------
# Config + logging
# ---------------------------------------------------------
@pytest.fixture
def config() -> AppConfig:
    return AppConfig(_env_file=None)


@pytest.fixture
def log_stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def logger(tmp_path, log_stream) -> StructuredLogger:
    # Unique name: handlers are attached once per logger name.
    return StructuredLogger(
        name=f"test.{uuid.uuid4().hex}",
        stream=log_stream,
        log_file=str(tmp_path / "minersales-test.log"),
    )


# ---------------------------------------------------------
# Record factories
# ---------------------------------------------------------
@pytest.fixture
def make_sale():
    def _make(**kwargs) -> SaleRecord:
        defaults = {
            "id": uuid.uuid4().hex[:8],
            "sales_person_id": "1",
            "date": datetime(2025, 6, 10, 9, 30),
            "quantity": 1,
        }
        defaults.update(kwargs)
        return SaleRecord(**defaults)

    return _make


@pytest.fixture
def make_expense():
    def _make(**kwargs) -> ExpenseRecord:
        defaults = {
            "id": uuid.uuid4().hex[:8],
            "sales_person_id": "1",
            "date": datetime(2025, 6, 11, 14, 0),
            "amount": Decimal("0"),
            "category": "Travel",
        }
        defaults.update(kwargs)
        return ExpenseRecord(**defaults)

    return _make


@pytest.fixture
def alice() -> SalesPerson:
    return SalesPerson(id="1", name="Alice", salary=Decimal("1000"))


@pytest.fixture
def bob() -> SalesPerson:
    return SalesPerson(id="2", name="bob", salary=Decimal("2000"), role="Senior Sales")


@pytest.fixture
def carol_excluded() -> SalesPerson:
    return SalesPerson(
        id="3", name="Carol", salary=Decimal("5000"), exclude_from_commission=True,
    )
