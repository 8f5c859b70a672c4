"""
SalesPerson Model.

Master record owned by the admin screens.  The engine only reads the
attributes that drive compensation and display.
"""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal
from typing import Optional, Self

from pydantic import BaseModel, ConfigDict, field_validator

from minersales.utils.numbers import ZERO, to_decimal
from minersales.utils.string_helpers import normalize_keys


class SalesPerson(BaseModel):
    """Represents a salesperson as supplied by the masters endpoint."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    salary: Decimal = ZERO
    exclude_from_commission: bool = False
    role: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: object) -> object:
        return str(v) if isinstance(v, int) and not isinstance(v, bool) else v

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("salary", mode="before")
    @classmethod
    def _coerce_salary(cls, v: object) -> Decimal:
        return to_decimal(v)

    @field_validator("exclude_from_commission", mode="before")
    @classmethod
    def _coerce_flag(cls, v: object) -> bool:
        return v is True or (isinstance(v, str) and v.strip().lower() == "true")

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> Self:
        """Build a salesperson from a camelCase or snake_case payload."""
        return cls.model_validate(normalize_keys(dict(raw)))
