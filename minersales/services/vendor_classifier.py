"""
Vendor Classifier.

Decides whether a free-text procurement vendor is the preferred CMHK
partner.  Installation charges on CMHK sales stay in margin.
"""

from __future__ import annotations

import re
from typing import Optional

__all__ = ["is_preferred_vendor"]

# "cmhk", "cm hk", "cm  hk", "cm hk." after trimming and lower-casing.
_PREFERRED_VENDOR_RE: re.Pattern[str] = re.compile(r"cm\s*hk\.?")

_DEFAULT_VENDOR_CODE: str = "cmhk"


def is_preferred_vendor(
    vendor_name: Optional[str],
    vendor_code: str = _DEFAULT_VENDOR_CODE,
) -> bool:
    """Return True when *vendor_name* denotes the preferred vendor.

    Matching is case- and whitespace-insensitive but anchored: "CM HK."
    matches, "CM HK Trading" does not.  Never raises.
    """
    if not vendor_name:
        return False
    normalized = str(vendor_name).strip().lower()
    if not normalized:
        return False
    if normalized == vendor_code.strip().lower():
        return True
    return _PREFERRED_VENDOR_RE.fullmatch(normalized) is not None
