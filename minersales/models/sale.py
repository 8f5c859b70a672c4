"""
Sale Record Model.

One sale transaction as supplied by the data-access layer.  Monetary
fields are USD amounts; anything missing or unreadable becomes zero.
"""

from __future__ import annotations

from decimal import Decimal
from typing import ClassVar, Optional

from pydantic import field_validator

from minersales.models.base import LedgerRecord, _optional_str
from minersales.utils.numbers import ZERO, to_decimal


class SaleRecord(LedgerRecord):
    """Represents a single sale line."""

    DATE_KEYS: ClassVar[tuple[str, ...]] = ("sales_date", "date", "created_at")

    # Older sale rows still carry the pre-migration column names.
    LEGACY_KEYS: ClassVar[dict[str, str]] = {
        "sold_price": "unit_sales_price",
        "installation_cost": "unit_installation_charge",
        "purchased_price": "unit_purchase_price",
        "transport_fee": "courier_charge",
    }

    customer_id: Optional[str] = None
    quantity: Decimal = Decimal("1")

    # Revenue components
    unit_sales_price: Decimal = ZERO
    unit_installation_charge: Decimal = ZERO
    additional_revenue: Decimal = ZERO
    vat: Decimal = ZERO

    # Procurement components
    unit_purchase_price: Decimal = ZERO
    pickup_cost: Decimal = ZERO
    courier_charge: Decimal = ZERO

    commission: Decimal = ZERO
    vendor: str = ""

    @field_validator("customer_id", mode="before")
    @classmethod
    def _coerce_customer(cls, v: object) -> Optional[str]:
        return _optional_str(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def _coerce_quantity(cls, v: object) -> Decimal:
        if v is None:
            return Decimal("1")
        return to_decimal(v)

    @field_validator(
        "unit_sales_price",
        "unit_installation_charge",
        "additional_revenue",
        "vat",
        "unit_purchase_price",
        "pickup_cost",
        "courier_charge",
        "commission",
        mode="before",
    )
    @classmethod
    def _coerce_money(cls, v: object) -> Decimal:
        return to_decimal(v)

    @field_validator("vendor", mode="before")
    @classmethod
    def _coerce_vendor(cls, v: object) -> str:
        return "" if v is None else str(v)

    @classmethod
    def _prepare_raw(cls, data: dict[str, object]) -> dict[str, object]:
        for legacy, current in cls.LEGACY_KEYS.items():
            if data.get(current) is None and data.get(legacy) is not None:
                data[current] = data[legacy]
        return data
