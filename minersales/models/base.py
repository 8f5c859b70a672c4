"""
Ledger Record Base Model.

Fields and validators shared by sale and expense records: the record id,
the raw transaction date and the owning salesperson reference.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import ClassVar, Optional, Self, Union

from pydantic import BaseModel, ConfigDict, field_validator

from minersales.utils.string_helpers import normalize_keys

RawDate = Union[datetime, date, str, None]


def _optional_str(value: object) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    return text or None


class LedgerRecord(BaseModel):
    """Common shape of a sale or expense row handed in by the data layer.

    ``date`` is kept raw; the period filter decides how to read it so that
    an unparseable value never fails validation.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    # Keys tried in order when ``date`` itself is absent from a raw payload.
    DATE_KEYS: ClassVar[tuple[str, ...]] = ("date", "created_at")

    id: Optional[str] = None
    date: RawDate = None
    sales_person_id: Optional[str] = None
    sales_person_name: Optional[str] = None

    @field_validator("id", "sales_person_id", "sales_person_name", mode="before")
    @classmethod
    def _coerce_str(cls, v: object) -> Optional[str]:
        return _optional_str(v)

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, v: object) -> RawDate:
        if v is None or isinstance(v, (datetime, date, str)):
            return v
        return str(v)

    @classmethod
    def _prepare_raw(cls, data: dict[str, object]) -> dict[str, object]:
        """Hook for subclasses to map legacy keys before validation."""
        return data

    @classmethod
    def from_raw(cls, raw: Mapping[str, object]) -> Self:
        """Build a record from a collaborator payload.

        Keys may be camelCase or snake_case.  The salesperson is resolved
        from ``sales_person_id`` or a nested ``sales_person`` object, and
        the first populated date key in ``DATE_KEYS`` becomes ``date``.
        """
        data: dict[str, object] = normalize_keys(dict(raw))

        nested = data.get("sales_person")
        if isinstance(nested, dict):
            if data.get("sales_person_id") is None:
                data["sales_person_id"] = nested.get("id")
            if data.get("sales_person_name") is None:
                data["sales_person_name"] = nested.get("name")

        for key in cls.DATE_KEYS:
            if data.get(key) is not None:
                data["date"] = data[key]
                break

        return cls.model_validate(cls._prepare_raw(data))
