"""
Character-level scanners used by the parsing engine.

Covers whitespace skipping, escape resolution inside string literals and
recognition of numeric literals. All scanners work on the full document
with an explicit cursor so that no slices of the remaining input are made.
"""

import math
from dataclasses import dataclass
from typing import Final

from jvariant._value import INT32_MAX
from jvariant._value import INT32_MIN

# Whitespace accepted between tokens. The lenient set also skips vertical
# tab, form feed and NUL.
LENIENT_WHITESPACE: Final = frozenset(" \t\n\r\v\f\0")
JSON_WHITESPACE: Final = frozenset(" \t\n\r")

DIGITS: Final = frozenset("0123456789")
NUMBER_START: Final = DIGITS | {"+", "-"}

_ESCAPES: Final = {
    "n": "\n",
    "r": "\r",
    "0": "\0",
    "t": "\t",
    "v": "\v",
    "f": "\f",
    "b": "\b",
    "a": "\a",
}
_JSON_ESCAPES: Final = frozenset('"\\/bfnrtu')

# Longest run of significant digits that can still be a 32-bit integer.
_INT32_DIGITS: Final = 10


def skip_whitespace(text: str, pos: int, whitespace: frozenset[str]) -> int:
    """Returns the first position at or after ``pos`` holding a non-blank."""
    length = len(text)
    while pos < length and text[pos] in whitespace:
        pos += 1
    return pos


def resolve_escape(char: str, *, strict: bool = False) -> str | None:
    """
    Maps the character following a backslash to the character it stands for.

    Control escapes (``n r 0 t v f b a``) are translated; every other
    character, ``"``, ``\\`` and ``/`` included, stands for itself. ``u`` is
    not decoded and also stands for itself. In strict mode only the JSON
    escape set is accepted and ``None`` is returned for anything else.
    """
    if strict and char not in _JSON_ESCAPES:
        return None
    return _ESCAPES.get(char, char)


@dataclass(frozen=True)
class NumberMatch:
    """A recognized numeric literal and the cursor just past it."""

    text: str
    number: int | float
    end: int

    @property
    def is_integer(self) -> bool:
        return isinstance(self.number, int)


def _scan_digits(text: str, pos: int) -> int:
    length = len(text)
    while pos < length and text[pos] in DIGITS:
        pos += 1
    return pos


def match_number(text: str, pos: int) -> int:
    """
    Finds the longest prefix at ``pos`` shaped like a number.

    The shape is ``[+-]?digits(.digits?)?([eE][+-]?digits)?``. An exponent
    marker without digits after it is left out of the match. Returns ``pos``
    itself when no digits are found.
    """
    length = len(text)
    cursor = pos
    if cursor < length and text[cursor] in "+-":
        cursor += 1

    digits_end = _scan_digits(text, cursor)
    if digits_end == cursor:
        return pos
    cursor = digits_end

    if cursor < length and text[cursor] == ".":
        cursor = _scan_digits(text, cursor + 1)

    if cursor < length and text[cursor] in "eE":
        exponent = cursor + 1
        if exponent < length and text[exponent] in "+-":
            exponent += 1
        exponent_end = _scan_digits(text, exponent)
        if exponent_end > exponent:
            cursor = exponent_end

    return cursor


def _is_canonical(literal: str) -> bool:
    """Rejects leading zeros and a fraction point with no digits after it."""
    unsigned = literal.removeprefix("-")
    if len(unsigned) > 1 and unsigned[0] == "0" and unsigned[1] in DIGITS:
        return False
    point = unsigned.find(".")
    return point < 0 or (
        point + 1 < len(unsigned) and unsigned[point + 1] in DIGITS
    )


def _as_int32(literal: str) -> int | None:
    if "." in literal or "e" in literal or "E" in literal:
        return None
    if len(literal.removeprefix("-").lstrip("0")) > _INT32_DIGITS:
        return None
    number = int(literal)
    if INT32_MIN <= number <= INT32_MAX:
        return number
    return None


def scan_number(
    text: str, pos: int, *, strict: bool = False
) -> NumberMatch | None:
    """
    Recognizes a numeric literal at ``pos`` and classifies it.

    The literal is an integer when the whole match reads as a 32-bit signed
    decimal, otherwise a double when it reads as a finite 64-bit float.
    An explicit ``+`` sign is matched but accepted by neither reading, and
    a float that overflows is rejected. Returns ``None`` for a rejected
    literal or when no digits are present.
    """
    end = match_number(text, pos)
    if end == pos:
        return None

    literal = text[pos:end]
    if literal[0] == "+":
        return None
    if strict and not _is_canonical(literal):
        return None

    integer = _as_int32(literal)
    if integer is not None:
        return NumberMatch(literal, integer, end)

    number = float(literal)
    if math.isinf(number):
        return None
    return NumberMatch(literal, number, end)
