"""Period tag: structured (year, period index) ordering for feed readings.

BLS periods look like "M01".."M13" (monthly, M13 = annual average),
"Q01".."Q05" (quarterly) or "A01" (annual). Comparing the raw strings is
wrong ("M2" > "M10"), so tags are parsed into integers first.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_PERIOD_RE = re.compile(r"^([A-Za-z])(\d{1,2})$")


@dataclass(frozen=True, order=True)
class PeriodTag:
    """Totally ordered (year, period_index) pair."""

    year: int
    period_index: int

    @classmethod
    def parse(cls, year: str | int, period: str) -> "PeriodTag":
        """Parse a feed (year, period) pair. Raises ValueError when malformed."""
        try:
            year_int = int(str(year).strip())
        except (TypeError, ValueError):
            raise ValueError(f"invalid year: {year!r}") from None
        match = _PERIOD_RE.match(str(period or "").strip())
        if match is None:
            raise ValueError(f"invalid period: {period!r}")
        return cls(year_int, int(match.group(2)))

    @classmethod
    def try_parse(cls, year: str | int | None, period: str | None) -> "PeriodTag | None":
        """Like parse, but returns None for malformed input."""
        if year is None or period is None:
            return None
        try:
            return cls.parse(year, period)
        except ValueError:
            return None

    def is_newer_than(self, other: "PeriodTag | None") -> bool:
        """True when self is strictly after other; anything beats an unknown tag."""
        return other is None or self > other
