"""
Expense Record Model.

One operational expense.  Expenses only reduce net profit; they carry no
margin computation of their own.
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar

from pydantic import field_validator

from minersales.models.base import LedgerRecord
from minersales.utils.numbers import ZERO, to_decimal


class ExpenseRecord(LedgerRecord):
    """Represents a single expense line."""

    DATE_KEYS: ClassVar[tuple[str, ...]] = ("expense_date", "date", "created_at")

    amount: Decimal = ZERO
    category: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: object) -> Decimal:
        return to_decimal(v)

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, v: object) -> str:
        return "" if v is None else str(v)

    @classmethod
    def _prepare_raw(cls, data: dict[str, object]) -> dict[str, object]:
        # The expense-table column wins over the generic one.
        if data.get("expense_amount") is not None:
            data["amount"] = data["expense_amount"]
        return data
