"""Tracked BLS series catalog.

The catalog is an immutable value built once and passed into the feed
client, reconciler and evaluator. Nothing mutates it at runtime.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class SeriesInfo:
    """Display metadata for one tracked series."""

    name: str
    unit: str


@dataclass(frozen=True, eq=False)
class SeriesCatalog:
    """Read-only mapping of series_id -> SeriesInfo."""

    _entries: Mapping[str, SeriesInfo] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_entries", MappingProxyType(dict(self._entries)))

    def __contains__(self, series_id: object) -> bool:
        return series_id in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, series_id: str) -> SeriesInfo | None:
        return self._entries.get(series_id)

    @property
    def series_ids(self) -> list[str]:
        """Series IDs in stable (sorted) order, for batched feed requests."""
        return sorted(self._entries)


DEFAULT_CATALOG = SeriesCatalog(
    {
        "APU0000708111": SeriesInfo("Eggs, grade A, large", "per dozen"),
        "APU0000702111": SeriesInfo("Bread, white, pan", "per lb"),
        "APU0000709213": SeriesInfo("Milk, fresh, low fat", "per gallon"),
        "APU0000FF1101": SeriesInfo("Chicken breast, boneless", "per lb"),
        "APU0000704111": SeriesInfo("Bacon, sliced", "per lb"),
        "APU0000711111": SeriesInfo("Apples, Red Delicious", "per lb"),
        "APU0000711311": SeriesInfo("Oranges, Navel", "per lb"),
        "APU00007471A": SeriesInfo("Gasoline, all types", "per gallon"),
        "LEU0252881600": SeriesInfo("Median usual weekly earnings (CPI-U adjusted)", "USD per week"),
    }
)
