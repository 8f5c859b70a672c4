"""Shared utility functions for the MinerSales commission engine.

Convenience re-exports so that consumers can import directly from
``minersales.utils`` (e.g. ``from minersales.utils import to_decimal``).
"""

from minersales.utils.numbers import ZERO, finite_or_zero, to_decimal
from minersales.utils.string_helpers import normalize_keys, to_snake_case

__all__ = [
    "ZERO",
    "finite_or_zero",
    "normalize_keys",
    "to_decimal",
    "to_snake_case",
]
