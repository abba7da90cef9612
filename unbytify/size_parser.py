from __future__ import annotations

import math
import os
import re
from enum import Enum
from typing import Optional

from unbytify.units import U64_MAX, UNITS, Unit, unit_for_suffix

_INTEGER_PATTERN = re.compile(r"\+?[0-9]+")
_NUMBER_PATTERN = re.compile(r"\+?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?|inf|infinity|nan)")


class ParseErrorKind(str, Enum):
    INVALID = "invalid"
    OVERFLOW = "overflow"


class SizeParseError(ValueError):
    """Base class for size strings that cannot be turned into a byte count."""

    kind: ParseErrorKind
    message = "cannot parse size"

    def __init__(self, value: str, reason: str = "") -> None:
        self.value = value
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"{self.message} {value!r}{detail}")


class InvalidSizeError(SizeParseError):
    kind = ParseErrorKind.INVALID
    message = "invalid size"


class SizeOverflowError(SizeParseError):
    kind = ParseErrorKind.OVERFLOW
    message = "size overflows 64-bit byte count"


def _parse_number(text: str) -> Optional[float]:
    text = text.strip()
    if not _NUMBER_PATTERN.fullmatch(text):
        return None
    return float(text)


def _checked(count: int, raw: str) -> int:
    if count > U64_MAX:
        raise SizeOverflowError(raw)
    return count


def _scale(number: float, unit: Unit, raw: str) -> int:
    if int(number) == 0:
        return 0
    if number.is_integer():
        return _checked(int(number) * unit.multiplier, raw)
    # Fractional magnitudes always truncate toward zero.
    product = math.floor(number * unit.multiplier_f)
    if product == 0:
        raise SizeOverflowError(raw)
    return _checked(product, raw)


def parse_size(value: str) -> int:
    """
    Parse a human-readable binary size and return bytes.

    Accepted examples: "1024", "1K", "1.5k", "4 MiB", "2gb", " 1 K ".
    Matching is case-insensitive and every unit is a power of 1024.

    Raises InvalidSizeError for malformed input and SizeOverflowError when the
    byte count does not fit into an unsigned 64-bit integer.
    """
    if not isinstance(value, str):
        raise TypeError(f"size must be a string, not {type(value).__name__}")
    text = value.strip().lower()
    if not text:
        raise InvalidSizeError(value, "empty")
    if text.startswith("-"):
        raise InvalidSizeError(value, "negative")

    # Bare integers are already bytes.
    if _INTEGER_PATTERN.fullmatch(text):
        return _checked(int(text), value)

    # Ascending order: "b" is only a unit when the text before it is a number,
    # so "4kib" falls through to the kibi tier.
    for unit in UNITS:
        head, sep, rest = text.partition(unit.letter)
        number = _parse_number(head)
        if number is None:
            continue
        if sep:
            try:
                unit_for_suffix(unit.letter + rest)
            except KeyError:
                raise InvalidSizeError(value, f"malformed unit suffix {unit.letter + rest!r}") from None
        if math.isnan(number):
            raise InvalidSizeError(value, "not a number")
        if math.isinf(number):
            raise SizeOverflowError(value)
        if not sep and not number.is_integer():
            raise InvalidSizeError(value, "fractional size without a unit")
        return _scale(number, unit, value)

    raise InvalidSizeError(value, "unknown unit")


def parse_size_bytes(raw: str | None, default: int) -> int:
    """
    Parse a human-readable size and return bytes.

    Returns default for empty/invalid/overflowing/zero inputs.
    """
    text = (raw or "").strip()
    if not text:
        return default
    try:
        value = parse_size(text)
    except SizeParseError:
        return default
    if value <= 0:
        return default
    return value


def parse_size_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return parse_size(raw)
    except SizeParseError as exc:
        raise ValueError(f"Invalid size in {name}: {exc}") from exc
