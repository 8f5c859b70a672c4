"""
String Helpers: Key Normalization.

Single source of truth for converting collaborator payload keys
(camelCase from the web layer, snake_case from the database) into the
snake_case field names used by the record models.
"""

from __future__ import annotations

import re
from typing import Union, overload

__all__ = [
    "normalize_keys",
    "to_snake_case",
]

JsonValue = Union[
    str,
    int,
    float,
    bool,
    None,
    dict[str, "JsonValue"],
    list["JsonValue"],
]

# "MRCoriginal" -> "MRC_original"
_RE_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")

# "salesPersonId" -> "sales_Person_Id"
_RE_CAMEL_BOUNDARY = re.compile(r"([a-z\d])([A-Z])")

_RE_MULTI_UNDERSCORE = re.compile(r"_+")


def to_snake_case(name: str) -> str:
    """Convert a camelCase, PascalCase, or mixed-case string to snake_case.

    ::

        salesPersonId           -> sales_person_id
        unitInstallationCharge  -> unit_installation_charge
        VAT                     -> vat
        excludeFromCommission   -> exclude_from_commission
    """
    s1 = _RE_UPPER_RUN.sub(r"\1_\2", name)
    s2 = _RE_CAMEL_BOUNDARY.sub(r"\1_\2", s1)
    s3 = _RE_MULTI_UNDERSCORE.sub("_", s2)
    return s3.lower()


@overload
def normalize_keys(data: dict[str, JsonValue]) -> dict[str, JsonValue]: ...


@overload
def normalize_keys(data: list[JsonValue]) -> list[JsonValue]: ...


@overload
def normalize_keys(data: JsonValue) -> JsonValue: ...


def normalize_keys(
    data: Union[dict[str, JsonValue], list[JsonValue], JsonValue],
) -> Union[dict[str, JsonValue], list[JsonValue], JsonValue]:
    """Recursively convert all dictionary keys to snake_case."""
    if isinstance(data, dict):
        return {to_snake_case(str(k)): normalize_keys(v) for k, v in data.items()}
    if isinstance(data, list):
        return [normalize_keys(item) for item in data]
    return data
