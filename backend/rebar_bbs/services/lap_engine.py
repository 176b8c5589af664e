"""
Lap/splice resolver.

A bar longer than the stock length is made of ceil(L / stock) pieces joined
by ceil(L / stock) − 1 laps. The laps add to the steel consumed, never to the
geometric cutting length reported on the bar mark.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LapResult:
    spliced_length_m: float            # steel consumed per bar including laps
    lap_length_m: Optional[float]      # per splice; None when no splice
    splice_count: int = 0


def resolve_laps(cutting_length_m: float, stock_length_m: float, lap_length_m: float) -> LapResult:
    """Splices needed for one bar and the resulting consumed length."""
    if cutting_length_m <= stock_length_m:
        return LapResult(spliced_length_m=cutting_length_m, lap_length_m=None, splice_count=0)

    splice_count = math.ceil(cutting_length_m / stock_length_m) - 1
    return LapResult(
        spliced_length_m=cutting_length_m + splice_count * lap_length_m,
        lap_length_m=lap_length_m,
        splice_count=splice_count,
    )
