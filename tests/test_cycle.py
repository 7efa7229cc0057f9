"""End-to-end tests for one fetch -> reconcile -> evaluate -> dispatch cycle."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from econwatch.catalog import DEFAULT_CATALOG
from econwatch.errors import FeedUnavailable
from econwatch.feed import StaticFeedClient
from econwatch.models import Data, DataHistory, JobRun, NotificationRecord
from econwatch.schemas.reading import SeriesReading
from econwatch.services.cycle import run_cycle
from econwatch.services.email_service import DeliveryChannel
from econwatch.services.notification_dispatcher import DispatchResult
from econwatch.services.reconciler import reconcile
from tests.factories import make_recipient, make_threshold
from tests.test_constants import BREAD_SERIES_ID, EGGS_SERIES_ID


def _feed(*readings: SeriesReading) -> StaticFeedClient:
    return StaticFeedClient(list(readings))


def _channel() -> MagicMock:
    channel = MagicMock(spec=DeliveryChannel)
    channel.send.return_value = True
    return channel


def _eggs(value: float, year: str = "2025", period: str = "M01") -> SeriesReading:
    return SeriesReading(series_id=EGGS_SERIES_ID, value=value, year=year, period=period)


def _seed_eggs_threshold(db: Session, owner, magnitude: float = 15.0):
    """Eggs stored at 3.25 for 2024-M12 with one linked recipient."""
    reconcile(db, {EGGS_SERIES_ID: _eggs(3.25, "2024", "M12")}, DEFAULT_CATALOG)
    data = db.query(Data).filter(Data.series_id == EGGS_SERIES_ID).one()
    definition = make_threshold(db, owner, data, magnitude)
    make_recipient(db, "rep@example.com", "Rita", "Rep", threshold=definition)
    return definition


class TestRunCycle:
    def test_eggs_rise_notifies_recipient(self, db: Session, owner) -> None:
        """3.25 -> 3.90 is +20%; a 15% threshold breaches and the recipient is emailed."""
        _seed_eggs_threshold(db, owner)
        channel = _channel()

        result = run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=channel)

        assert result["status"] == "completed"
        assert result["series_updated"] == 1
        assert result["series_inserted"] == 0
        assert result["breaches_found"] == 1
        assert result["notifications_sent"] == 1
        assert result["notifications_failed"] == 0
        assert result["error"] is None

        row = db.query(Data).filter(Data.series_id == EGGS_SERIES_ID).one()
        assert (row.previous_value, row.latest_value) == (3.25, 3.90)
        assert channel.send.call_args.args[0] == "rep@example.com"
        assert db.query(NotificationRecord).count() == 1

        job = db.get(JobRun, result["job_run_id"])
        assert job.job_type == "cycle"
        assert job.status == "completed"
        assert job.series_updated == 1
        assert job.breaches_found == 1
        assert job.notifications_sent == 1
        assert job.finished_at is not None

    def test_rerun_same_period_is_idempotent(self, db: Session, owner) -> None:
        """Same reading again: no writes and no duplicate notification."""
        _seed_eggs_threshold(db, owner)
        channel = _channel()
        run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=channel)
        history_before = db.query(DataHistory).count()

        result = run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=channel)

        assert result["status"] == "completed"
        assert result["series_updated"] == 0
        assert result["notifications_sent"] == 0
        assert channel.send.call_count == 1
        assert db.query(DataHistory).count() == history_before
        assert db.query(NotificationRecord).count() == 1

    def test_below_magnitude_sends_nothing(self, db: Session, owner) -> None:
        _seed_eggs_threshold(db, owner, magnitude=25.0)
        channel = _channel()

        result = run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=channel)

        assert result["breaches_found"] == 0
        channel.send.assert_not_called()

    def test_first_run_inserts_without_breach(self, db: Session) -> None:
        """Fresh rows have previous == latest, so nothing can breach."""
        bread = SeriesReading(series_id=BREAD_SERIES_ID, value=1.91, year="2025", period="M01")

        result = run_cycle(db, feed_client=_feed(_eggs(3.90), bread), channel=_channel())

        assert result["series_inserted"] == 2
        assert result["breaches_found"] == 0
        assert db.query(Data).count() == 2

    def test_feed_failure_marks_job_failed(self, db: Session, owner) -> None:
        _seed_eggs_threshold(db, owner)
        feed = MagicMock()
        feed.source_name = "bls"
        feed.fetch_latest.side_effect = FeedUnavailable("BLS request timed out after 10.0s")
        channel = _channel()

        result = run_cycle(db, feed_client=feed, channel=channel)

        assert result["status"] == "failed"
        assert "timed out" in result["error"]
        channel.send.assert_not_called()
        job = db.get(JobRun, result["job_run_id"])
        assert job.status == "failed"
        assert "timed out" in job.error_message
        row = db.query(Data).filter(Data.series_id == EGGS_SERIES_ID).one()
        assert row.latest_value == 3.25

    def test_one_breach_failure_does_not_stop_others(self, db: Session, owner) -> None:
        definition = _seed_eggs_threshold(db, owner)
        data = db.get(Data, definition.data_id)
        make_threshold(db, owner, data, 10.0)

        with patch(
            "econwatch.services.cycle.dispatch",
            side_effect=[RuntimeError("smtp exploded"), DispatchResult(sent=1)],
        ) as mock_dispatch:
            result = run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=_channel())

        assert mock_dispatch.call_count == 2
        assert result["status"] == "completed"
        assert result["breaches_found"] == 2
        assert result["notifications_sent"] == 1
        assert "smtp exploded" in result["error"]

    def test_evaluation_failure_marks_job_failed(self, db: Session, owner) -> None:
        """A database error after reconciliation still closes the job run as failed."""
        _seed_eggs_threshold(db, owner)
        channel = _channel()

        with patch(
            "econwatch.services.cycle.evaluate_all",
            side_effect=OperationalError("SELECT", {}, Exception("db down")),
        ):
            result = run_cycle(db, feed_client=_feed(_eggs(3.90)), channel=channel)

        assert result["status"] == "failed"
        assert result["series_updated"] == 1
        assert result["breaches_found"] == 0
        assert "db down" in result["error"]
        channel.send.assert_not_called()
        job = db.get(JobRun, result["job_run_id"])
        assert job.status == "failed"
        assert job.finished_at is not None
        assert "db down" in job.error_message
