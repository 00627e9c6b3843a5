"""Scalar coercion for loosely typed feed values.

The parking feed is hand-maintained: counts may arrive as numbers or
numeric strings, and missing values as ``""``, ``"--"`` or ``null``.
These helpers turn such values into ``None`` rather than raising.
"""

from __future__ import annotations

import math
import re
import unicodedata
from typing import Any

# Placeholder strings treated as "no value".
SENTINELS = frozenset({"", "--", "NaN", "nan", "null", "None"})

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")


def is_sentinel(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() in SENTINELS
    return isinstance(value, float) and math.isnan(value)


def safe_float(value: Any) -> float | None:
    """Finite float or ``None``. Booleans are rejected."""
    if isinstance(value, bool) or is_sentinel(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def safe_int(value: Any) -> int | None:
    """Like :func:`safe_float`, truncated toward zero."""
    number = safe_float(value)
    return None if number is None else int(number)


def safe_str(value: Any) -> str | None:
    """Stripped string, or ``None`` when nothing is left."""
    if value is None:
        return None
    return str(value).strip() or None


def slugify(text: str) -> str:
    """ASCII slug used for address-derived zone identifiers.

    ``"Piața Unirii, Timișoara"`` -> ``"piata-unirii-timisoara"``
    """
    decomposed = unicodedata.normalize("NFKD", text)
    ascii_text = decomposed.encode("ascii", "ignore").decode("ascii").lower()
    return _SLUG_STRIP.sub("-", ascii_text).strip("-")
