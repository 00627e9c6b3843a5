"""Best-effort parsing of free-form parking addresses.

Feed addresses arrive in several shapes::

    "Strada Exemplu Nr 12"
    "Bulevardul Vasile Pârvan 4, Timișoara, Romania"
    "Strada Exemplu, nr. 12, Timișoara"
    "Piața Victoriei"

The parser looks for the house number across the whole string, then keeps
the comma-separated parts after it as city and country. It is a display
heuristic, not a validated address parser: anything it does not
recognize falls back to "whole string is the street, number 1".
"""

from __future__ import annotations

from typing import NamedTuple

from parkzones.exceptions import MalformedItem

DEFAULT_NUMBER = "1"
_NUMBER_MARKER = "nr"


class ParsedAddress(NamedTuple):
    street: str
    number: str
    city: str | None = None
    country: str | None = None


class _Token(NamedTuple):
    text: str
    part: int  # index of the comma-separated part the word came from


def _tokenize(text: str) -> list[_Token]:
    return [
        _Token(word, part_index)
        for part_index, part in enumerate(text.split(","))
        for word in part.split()
    ]


def _split_tokens(tokens: list[_Token]) -> tuple[str, str, int] | None:
    """Return ``(street, number, last part used)`` or ``None`` when no rule applies."""
    if not tokens:
        return None

    for idx, token in enumerate(tokens):
        if _NUMBER_MARKER in token.text.lower() and idx + 1 < len(tokens):
            number = tokens[idx + 1].text.strip(".,")
            street = " ".join(t.text for t in tokens[:idx])
            if number and street:
                return street, number, tokens[idx + 1].part
            break

    last = tokens[-1]
    if len(tokens) > 1 and last.text.isdigit():
        return " ".join(t.text for t in tokens[:-1]), last.text, last.part
    return None


def split_street_number(text: str) -> tuple[str, str]:
    """Split a street line into ``(street, number)``."""
    split = _split_tokens(_tokenize(text))
    if split is None:
        return text, DEFAULT_NUMBER
    street, number, _ = split
    return street, number


def parse_address(raw: str) -> ParsedAddress:
    """Parse a raw address into street, number and optional city/country.

    Raises
    ------
    MalformedItem
        If the address is empty or whitespace only.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise MalformedItem(f"address must be a non-empty string, got {raw!r}")

    parts = [part.strip() for part in raw.split(",")]
    tokens = _tokenize(raw)
    # "Strada X, nr. 12, City" needs the whole string; "Strada X 4, City"
    # only has its number at the end of the first part.
    split = _split_tokens(tokens) or _split_tokens([t for t in tokens if t.part == 0])
    if split is None:
        street, number, used = parts[0] or raw.strip(), DEFAULT_NUMBER, 0
    else:
        street, number, used = split

    extras = [part for part in parts[used + 1 :] if part]
    city = extras[0] if extras else None
    country = extras[1] if len(extras) > 1 else None
    return ParsedAddress(street=street, number=number, city=city, country=country)
