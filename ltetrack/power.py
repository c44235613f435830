"""Per-resource-block received power of a subframe."""

from __future__ import annotations

import math
from typing import Sequence

SUBCARRIERS_PER_PRB = 12
SYMBOLS_PER_SUBFRAME = 14

_LOG_DIV = 10 * math.log10(SYMBOLS_PER_SUBFRAME)


def _to_db(power: float) -> float:
    return 10 * math.log10(power) if power > 0 else -math.inf


def compute_rb_power(symbols: Sequence[complex], nof_prb: int) -> list[float]:
    """Average power per PRB in dB over the 14 OFDM symbols of a subframe.

    ``symbols`` holds the resource grid symbol by symbol, each symbol being
    ``12 * nof_prb`` subcarriers long.
    """
    if nof_prb < 0:
        raise ValueError("nof_prb must not be negative")
    width = SUBCARRIERS_PER_PRB * nof_prb
    needed = SYMBOLS_PER_SUBFRAME * width
    if len(symbols) < needed:
        raise ValueError(f"need {needed} symbols for {nof_prb} PRBs, got {len(symbols)}")

    totals = [0.0] * nof_prb
    for j in range(SYMBOLS_PER_SUBFRAME):
        row = symbols[j * width:(j + 1) * width]
        for prb in range(nof_prb):
            block = row[prb * SUBCARRIERS_PER_PRB:(prb + 1) * SUBCARRIERS_PER_PRB]
            totals[prb] += sum(abs(x) ** 2 for x in block) / SUBCARRIERS_PER_PRB
    return [_to_db(total) - _LOG_DIV for total in totals]


class SubframePower:
    """Downlink power map of one subframe with its extremes."""

    def __init__(self, nof_prb: int) -> None:
        self.nof_prb = nof_prb
        self.rb_power_dl: list[float] = [0.0] * nof_prb
        self.max = 0.0
        self.min = 0.0

    def compute(self, symbols: Sequence[complex]) -> list[float]:
        """Recompute the per-PRB power from a resource grid and return it."""
        self.rb_power_dl = compute_rb_power(symbols, self.nof_prb)
        self.max = max(self.rb_power_dl, default=-math.inf)
        self.min = min(self.rb_power_dl, default=math.inf)
        return self.rb_power_dl