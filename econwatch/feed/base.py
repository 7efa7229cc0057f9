"""Abstract feed client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from econwatch.catalog import SeriesCatalog
from econwatch.schemas.reading import SeriesReading


class FeedClient(ABC):
    """Pluggable source of current series values.

    Clients return at most one reading per catalog series. On transport or
    envelope failure they raise FeedUnavailable and return nothing, so the
    caller never sees a partial batch.
    """

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Identifier for this client (e.g. 'bls', 'static')."""
        ...

    @abstractmethod
    def fetch_latest(self, catalog: SeriesCatalog) -> dict[str, SeriesReading]:
        """Fetch the most recent reading for every series in catalog."""
        ...
