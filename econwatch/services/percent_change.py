"""Percent-change and rounding helpers."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def calculate_percent_change(previous: float, latest: float) -> float:
    """Signed percent change from previous to latest.

    Returns 0.0 when previous is 0: no baseline means no meaningful change.
    """
    if previous == 0:
        return 0.0
    return (latest - previous) / previous * 100


def round_value(value: float, places: int = 2) -> float:
    """Round half away from zero (4.145 -> 4.15, -4.145 -> -4.15)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
