"""BLS public API v2 feed client.

Sends one batched POST for the whole catalog with latest=true and the
registration key, then keeps only the most recent entry per series.

Security: the registration key travels in the request body. Never log the
payload.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from econwatch.catalog import SeriesCatalog
from econwatch.config import get_settings
from econwatch.errors import FeedUnavailable
from econwatch.feed.base import FeedClient
from econwatch.periods import PeriodTag
from econwatch.schemas.reading import SeriesReading

logger = logging.getLogger(__name__)

STATUS_SUCCEEDED = "REQUEST_SUCCEEDED"
USER_AGENT = "EconWatch/0.1 (bls-sync)"
ANNUAL_AVERAGE_PERIOD = "M13"


def _parse_value(raw: Any) -> float | None:
    """Parse a feed value string ("3.90", "1,194"); None for "-" and friends."""
    if raw is None:
        return None
    try:
        return float(str(raw).replace(",", "").strip())
    except ValueError:
        return None


def _pick_latest_entry(entries: list[dict]) -> dict | None:
    """Return the entry flagged latest, else the monthly entry with the greatest period tag."""
    for entry in entries:
        if str(entry.get("latest", "")).lower() == "true":
            return entry

    best: dict | None = None
    best_tag: PeriodTag | None = None
    for entry in entries:
        # M13 is the annual average, not a later month
        if str(entry.get("period", "")).upper() == ANNUAL_AVERAGE_PERIOD:
            continue
        tag = PeriodTag.try_parse(entry.get("year"), entry.get("period"))
        if tag is None:
            continue
        if best_tag is None or tag > best_tag:
            best, best_tag = entry, tag
    return best


def parse_bls_response(body: Any, catalog: SeriesCatalog) -> dict[str, SeriesReading]:
    """Turn a decoded BLS response envelope into readings keyed by series_id.

    Raises FeedUnavailable when the envelope is malformed or its status is not
    REQUEST_SUCCEEDED. Series with no usable latest entry are skipped.
    """
    if not isinstance(body, dict):
        raise FeedUnavailable("BLS response is not a JSON object")

    status = body.get("status")
    if status != STATUS_SUCCEEDED:
        messages = body.get("message") or []
        raise FeedUnavailable(f"BLS API request failed: {status} {messages}".rstrip())

    results = body.get("Results") or body.get("results") or {}
    series_list = results.get("series") if isinstance(results, dict) else None
    if not isinstance(series_list, list):
        raise FeedUnavailable("BLS response has no Results.series list")

    readings: dict[str, SeriesReading] = {}
    for series in series_list:
        series_id = (series or {}).get("seriesID")
        if not series_id:
            continue
        if series_id not in catalog:
            logger.debug("Ignoring untracked series %s", series_id)
            continue

        entry = _pick_latest_entry(series.get("data") or [])
        if entry is None:
            logger.warning("No usable entry for series %s", series_id)
            continue

        value = _parse_value(entry.get("value"))
        if value is None:
            logger.warning(
                "Unparseable value %r for series %s; treating as absent",
                entry.get("value"),
                series_id,
            )
            continue

        try:
            readings[series_id] = SeriesReading(
                series_id=series_id,
                value=value,
                year=str(entry.get("year", "")),
                period=str(entry.get("period", "")),
            )
        except ValueError as exc:
            logger.warning("Invalid period tag for series %s: %s", series_id, exc)

    return readings


class BLSFeedClient(FeedClient):
    """Feed client for the BLS timeseries API."""

    def __init__(
        self,
        api_url: str | None = None,
        api_key: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.api_url = api_url or settings.bls_api_url
        self.api_key = api_key if api_key is not None else settings.bls_api_key
        self.timeout = timeout if timeout is not None else settings.feed_timeout

    @property
    def source_name(self) -> str:
        return "bls"

    def fetch_latest(self, catalog: SeriesCatalog) -> dict[str, SeriesReading]:
        """Fetch the latest reading for every catalog series in one request."""
        series_ids = catalog.series_ids
        if not series_ids:
            return {}

        payload: dict[str, Any] = {"seriesid": series_ids, "latest": True}
        if self.api_key:
            payload["registrationkey"] = self.api_key
        else:
            logger.warning("BLS_API_KEY unset; using unregistered (rate-limited) BLS access")

        logger.info("Fetching latest BLS data for %d series", len(series_ids))
        try:
            with httpx.Client(
                timeout=self.timeout,
                headers={"User-Agent": USER_AGENT},
            ) as client:
                response = client.post(self.api_url, json=payload)
        except httpx.TimeoutException as exc:
            raise FeedUnavailable(f"BLS request timed out after {self.timeout}s") from exc
        except httpx.HTTPError as exc:
            raise FeedUnavailable(f"BLS request failed: {exc}") from exc

        if response.status_code != 200:
            raise FeedUnavailable(f"BLS API returned HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise FeedUnavailable("BLS response is not valid JSON") from exc

        logger.debug("BLS API response: %s", body)
        readings = parse_bls_response(body, catalog)
        logger.info("BLS returned %d usable readings", len(readings))
        return readings
