"""Static feed client returning fixed readings (development and tests)."""

from __future__ import annotations

from collections.abc import Iterable

from econwatch.catalog import SeriesCatalog
from econwatch.feed.base import FeedClient
from econwatch.schemas.reading import SeriesReading

_DEFAULT_READINGS = (
    SeriesReading(series_id="APU0000708111", value=4.15, year="2024", period="M12"),
    SeriesReading(series_id="APU0000702111", value=1.91, year="2024", period="M12"),
    SeriesReading(series_id="APU00007471A", value=3.21, year="2024", period="M12"),
)


class StaticFeedClient(FeedClient):
    """Feed client that returns a fixed list of readings, filtered to the catalog."""

    def __init__(self, readings: Iterable[SeriesReading] | None = None) -> None:
        self.readings = list(readings) if readings is not None else list(_DEFAULT_READINGS)

    @property
    def source_name(self) -> str:
        return "static"

    def fetch_latest(self, catalog: SeriesCatalog) -> dict[str, SeriesReading]:
        """Return configured readings for series present in catalog."""
        return {r.series_id: r for r in self.readings if r.series_id in catalog}
