"""One monitoring cycle: fetch -> reconcile -> evaluate -> dispatch.

Each run is recorded as a JobRun(job_type="cycle"). Any failure outside the
per-breach dispatch ends the tick as failed; a failure while notifying one
breach is logged and the remaining breaches are still processed.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from econwatch.catalog import DEFAULT_CATALOG, SeriesCatalog
from econwatch.config import Settings, get_settings
from econwatch.feed import get_feed_client
from econwatch.feed.base import FeedClient
from econwatch.models import JobRun
from econwatch.services.email_service import DeliveryChannel, get_delivery_channel
from econwatch.services.notification_dispatcher import SenderIdentity, dispatch
from econwatch.services.reconciler import reconcile
from econwatch.services.recipient_resolver import resolve
from econwatch.services.templates import TemplateStore
from econwatch.services.threshold_evaluator import evaluate_all

logger = logging.getLogger(__name__)

JOB_TYPE_CYCLE = "cycle"


def run_cycle(
    db: Session,
    feed_client: FeedClient | None = None,
    channel: DeliveryChannel | None = None,
    settings: Settings | None = None,
    catalog: SeriesCatalog = DEFAULT_CATALOG,
) -> dict:
    """Run one full cycle.

    Args:
        db: Database session.
        feed_client: Feed to poll (default: from settings).
        channel: Delivery channel (default: from EMAIL_BACKEND).
        settings: Settings (default: cached settings).
        catalog: Tracked series.

    Returns:
        dict with status, job_run_id, series_inserted, series_updated,
        breaches_found, notifications_sent, notifications_failed, error
    """
    if settings is None:
        settings = get_settings()
    if feed_client is None:
        feed_client = get_feed_client(settings)
    if channel is None:
        channel = get_delivery_channel(settings)

    job = JobRun(job_type=JOB_TYPE_CYCLE, status="running")
    db.add(job)
    db.commit()
    db.refresh(job)

    inserted = 0
    updated = 0
    breaches_found = 0
    sent = 0
    failed = 0
    errors: list[str] = []

    try:
        readings = feed_client.fetch_latest(catalog)
        logger.info("Fetched %d readings from %s", len(readings), feed_client.source_name)
        reconciled = reconcile(db, readings, catalog)
        inserted = len(reconciled.inserted)
        updated = len(reconciled.updated)

        breaches = evaluate_all(db, catalog)
        breaches_found = len(breaches)
        templates = TemplateStore(settings.email_template_dir or None)
        sender = SenderIdentity.from_settings(settings)

        for breach in breaches:
            try:
                resolved = resolve(db, breach.definition)
                result = dispatch(
                    db,
                    breach,
                    resolved,
                    channel,
                    templates,
                    sender,
                    repeat_policy=settings.notification_repeat_policy,
                )
                sent += result.sent
                failed += result.failed
            except Exception as exc:
                db.rollback()
                logger.exception("Dispatch failed for threshold %d", breach.definition.id)
                errors.append(f"threshold {breach.definition.id}: {exc}")

        job.finished_at = datetime.now(UTC)
        job.status = "completed"
        job.series_updated = inserted + updated
        job.breaches_found = breaches_found
        job.notifications_sent = sent
        job.error_message = "; ".join(errors[:10]) if errors else None
        db.commit()

    except Exception as exc:
        logger.exception("Cycle failed")
        db.rollback()
        job.finished_at = datetime.now(UTC)
        job.status = "failed"
        job.series_updated = inserted + updated
        job.breaches_found = breaches_found
        job.notifications_sent = sent
        job.error_message = str(exc)
        db.commit()
        return {
            "status": "failed",
            "job_run_id": job.id,
            "series_inserted": inserted,
            "series_updated": updated,
            "breaches_found": breaches_found,
            "notifications_sent": sent,
            "notifications_failed": failed,
            "error": str(exc),
        }

    logger.info(
        "Cycle completed: inserted=%d updated=%d breaches=%d sent=%d failed=%d",
        inserted,
        updated,
        breaches_found,
        sent,
        failed,
    )
    return {
        "status": "completed",
        "job_run_id": job.id,
        "series_inserted": inserted,
        "series_updated": updated,
        "breaches_found": breaches_found,
        "notifications_sent": sent,
        "notifications_failed": failed,
        "error": "; ".join(errors) if errors else None,
    }
