"""Feed clients for external economic series."""

from __future__ import annotations

import logging

from econwatch.config import Settings, get_settings
from econwatch.feed.base import FeedClient
from econwatch.feed.bls_client import BLSFeedClient
from econwatch.feed.static_client import StaticFeedClient

logger = logging.getLogger(__name__)


def get_feed_client(settings: Settings | None = None) -> FeedClient:
    """Return the configured feed client.

    - FEED_USE_STATIC=1: StaticFeedClient (pytest, local development).
    - Else: BLSFeedClient built from BLS_API_URL / BLS_API_KEY / FEED_TIMEOUT.
    """
    if settings is None:
        settings = get_settings()
    if settings.feed_use_static:
        logger.info("FEED_USE_STATIC set; using StaticFeedClient")
        return StaticFeedClient()
    return BLSFeedClient(
        api_url=settings.bls_api_url,
        api_key=settings.bls_api_key,
        timeout=settings.feed_timeout,
    )


__all__ = ["BLSFeedClient", "FeedClient", "StaticFeedClient", "get_feed_client"]
