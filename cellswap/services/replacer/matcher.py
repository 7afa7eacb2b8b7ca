"""Cell matching rules for exact and substring replacement."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal

from .models import ReplaceMode, ReplacementMap


@dataclass(frozen=True, slots=True)
class MatchOutcome:
    """New cell text plus the number of pair applications."""

    new_value: str
    count: int

    @property
    def replaced(self) -> bool:
        return self.count > 0


# floats in this magnitude band render positionally, others in exponent form
_POSITIONAL_MIN = 1e-6
_POSITIONAL_MAX = 1e21


def _float_text(value: float) -> str:
    """Shortest round-trip text of a float.

    ``5e-05`` renders as ``0.00005``; only magnitudes outside
    ``[1e-6, 1e21)`` keep an exponent, written as ``1e-7`` or ``1.5e+21``.
    """

    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    magnitude = abs(value)
    if magnitude == 0 or _POSITIONAL_MIN <= magnitude < _POSITIONAL_MAX:
        if value.is_integer():
            return str(int(value))
        return format(Decimal(repr(value)).normalize(), "f")
    mantissa, _, exponent = repr(value).partition("e")
    power = int(exponent)
    return f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def to_text(value: object) -> str:
    """Render a scalar cell value as its display text."""

    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _float_text(value)
    if isinstance(value, datetime):
        if value.time() == time(0, 0) and value.tzinfo is None:
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, (date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format(value.normalize(), "f")
    return str(value)


def _match_full(value: str, replacement_map: ReplacementMap) -> MatchOutcome:
    for pair in replacement_map:
        if value == pair.key:
            return MatchOutcome(new_value=pair.value, count=1)
    return MatchOutcome(new_value=value, count=0)


def _match_partial(value: str, replacement_map: ReplacementMap) -> MatchOutcome:
    new_value = value
    count = 0
    for pair in replacement_map:
        if pair.key not in new_value:
            continue
        # a callable replacement keeps backslashes in the value literal
        replacement = pair.value
        new_value = re.sub(re.escape(pair.key), lambda _m: replacement, new_value)
        count += 1
    return MatchOutcome(new_value=new_value, count=count)


def match_cell(value: str, mode: ReplaceMode | str, replacement_map: ReplacementMap) -> MatchOutcome:
    """Apply the replacement map to a single cell value.

    In full mode the first pair whose key equals ``value`` wins. In partial
    mode every pair is applied in order to the running result, replacing all
    literal occurrences of its key, so a later key may match text produced by
    an earlier pair.
    """

    if ReplaceMode.parse(mode) is ReplaceMode.FULL:
        return _match_full(value, replacement_map)
    return _match_partial(value, replacement_map)


__all__ = ["MatchOutcome", "match_cell", "to_text"]
