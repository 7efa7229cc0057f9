"""
Long-running cycle scheduler.

Usage:
    python -m econwatch.scheduler          # run forever
    python -m econwatch.scheduler --once   # one cycle, then exit

Ticks never overlap: the job is limited to one instance and missed ticks
coalesce into a single run.
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import UTC, datetime

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.interval import IntervalTrigger

from econwatch.config import Settings, get_settings
from econwatch.db.session import SessionLocal
from econwatch.services.cycle import run_cycle

logger = logging.getLogger(__name__)

CYCLE_JOB_ID = "econwatch_cycle"


def cycle_job() -> bool:
    """Run one cycle in its own session. Returns True when it completed."""
    db = SessionLocal()
    try:
        result = run_cycle(db)
    finally:
        db.close()
    logger.info(
        "Cycle %s: job_run_id=%s breaches=%s sent=%s",
        result["status"],
        result["job_run_id"],
        result["breaches_found"],
        result["notifications_sent"],
    )
    return result["status"] == "completed"


def build_scheduler(settings: Settings | None = None) -> BlockingScheduler:
    """Scheduler with the cycle job registered at CYCLE_INTERVAL_HOURS."""
    if settings is None:
        settings = get_settings()
    scheduler = BlockingScheduler(timezone="UTC")
    # next_run_time=None would add the job paused; omit it to wait one interval
    extra = {"next_run_time": datetime.now(UTC)} if settings.cycle_run_on_start else {}
    scheduler.add_job(
        cycle_job,
        IntervalTrigger(hours=settings.cycle_interval_hours),
        id=CYCLE_JOB_ID,
        name="EconWatch cycle",
        max_instances=1,
        coalesce=True,
        replace_existing=True,
        **extra,
    )
    return scheduler


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    parser = argparse.ArgumentParser(description="EconWatch cycle scheduler")
    parser.add_argument("--once", action="store_true", help="Run one cycle and exit")
    args = parser.parse_args(argv)

    if args.once:
        return 0 if cycle_job() else 1

    settings = get_settings()
    scheduler = build_scheduler(settings)
    logger.info(
        "Scheduler started: every %.1fh, run_on_start=%s",
        settings.cycle_interval_hours,
        settings.cycle_run_on_start,
    )
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
