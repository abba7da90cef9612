from __future__ import annotations

import types
from dataclasses import dataclass
from typing import Tuple

U64_MAX = 2**64 - 1
_BASE = 1024


@dataclass(frozen=True)
class Unit:
    index: int
    suffix: str
    letter: str
    multiplier: int
    multiplier_f: float


def _build_units(suffixes: Tuple[str, ...]) -> Tuple[Unit, ...]:
    units = []
    for index, suffix in enumerate(suffixes):
        multiplier = _BASE**index
        units.append(
            Unit(
                index=index,
                suffix=suffix,
                letter=suffix[:1].lower(),
                multiplier=multiplier,
                multiplier_f=float(multiplier),
            )
        )
    return tuple(units)


SUFFIXES: Tuple[str, ...] = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")
# Built at import time; the import lock guarantees a single construction.
UNITS: Tuple[Unit, ...] = _build_units(SUFFIXES)
# A unit letter may be followed by nothing, "b" or "ib": "k", "kb", "kib".
SUFFIX_TAILS = frozenset({"", "b", "ib"})
_BY_LETTER: types.MappingProxyType = types.MappingProxyType({unit.letter: unit for unit in UNITS})


def unit_for_suffix(suffix: str) -> Unit:
    """
    Resolve any accepted spelling of a tier suffix.

    "k", "K", "kb", "KiB" all resolve to the kibi tier; "b", "bb" and "bib" to
    the byte tier.
    Raises KeyError for anything else.
    """
    text = suffix.strip().lower()
    if not text:
        raise KeyError(suffix)
    unit = _BY_LETTER.get(text[:1])
    if unit is None:
        raise KeyError(suffix)
    if text[1:] not in SUFFIX_TAILS:
        raise KeyError(suffix)
    return unit
