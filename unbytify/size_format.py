from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Tuple

from unbytify.units import U64_MAX, UNITS

DEFAULT_PRECISION = 3


def _round_half_away(value: float, precision: int) -> float:
    scale = 10**precision
    scaled = Decimal(value * scale).quantize(Decimal(1), rounding=ROUND_HALF_UP)
    return float(scaled) / scale


def _tier_index(value: int) -> int:
    # floor(log1024(value)) computed on the bit length, so exact powers never
    # land one tier low and the top of the u64 range stays inside the table.
    return min((value.bit_length() - 1) // 10, len(UNITS) - 1)


def format_size(value: int, precision: int = DEFAULT_PRECISION) -> Tuple[float, str]:
    """
    Convert a byte count to a (value, suffix) pair for display.

    The largest tier not exceeding the value is chosen and the magnitude is
    rounded half away from zero to ``precision`` decimals:

        format_size(1536) -> (1.5, "KiB")
        format_size(1025) -> (1.001, "KiB")
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"byte count must be an int, not {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"byte count out of range: {value}")
    if value == 0:
        return 0.0, UNITS[0].suffix
    unit = UNITS[_tier_index(value)]
    return _round_half_away(value / unit.multiplier_f, precision), unit.suffix


def render_size(value: int, precision: int = DEFAULT_PRECISION) -> str:
    magnitude, suffix = format_size(value, precision)
    text = f"{magnitude:.{precision}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return f"{text} {suffix}"
