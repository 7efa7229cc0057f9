"""Reconcile fetched feed readings into persisted Data rows.

The whole batch runs in one transaction. Mutations are planned first from
the readings and the current rows, then applied; a plan with no mutations
rolls back instead of committing. Any database error rolls back the entire
batch, so a partial reconciliation is never committed.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from econwatch.catalog import SeriesCatalog
from econwatch.errors import ReconciliationFailed
from econwatch.models import Data, DataHistory
from econwatch.periods import PeriodTag
from econwatch.schemas.reading import SeriesReading
from econwatch.services.percent_change import round_value

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation batch."""

    inserted: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    committed: bool = False

    @property
    def changed(self) -> int:
        return len(self.inserted) + len(self.updated)


@dataclass
class _Insert:
    reading: SeriesReading
    name: str
    unit: str
    value: float


@dataclass
class _Update:
    reading: SeriesReading
    row: Data
    value: float


def _plan(
    readings: Mapping[str, SeriesReading],
    existing: Mapping[str, Data],
    catalog: SeriesCatalog,
    result: ReconcileResult,
) -> list[_Insert | _Update]:
    """Decide, per reading, whether to insert, update or skip."""
    mutations: list[_Insert | _Update] = []
    for series_id in sorted(readings):
        reading = readings[series_id]
        row = existing.get(series_id)

        if row is None:
            info = catalog.get(series_id)
            if info is None:
                logger.info("No catalog entry for %s; skipping", series_id)
                result.skipped.append(series_id)
                continue
            mutations.append(
                _Insert(
                    reading=reading,
                    name=info.name,
                    unit=info.unit,
                    value=round_value(reading.value),
                )
            )
            continue

        stored_tag = PeriodTag.try_parse(row.year, row.period)
        if not reading.period_tag.is_newer_than(stored_tag):
            logger.debug(
                "No update needed for %s: %s-%s is not newer than stored %s-%s",
                series_id,
                reading.year,
                reading.period,
                row.year,
                row.period,
            )
            result.skipped.append(series_id)
            continue

        mutations.append(_Update(reading=reading, row=row, value=round_value(reading.value)))
    return mutations


def _apply(db: Session, mutations: list[_Insert | _Update], result: ReconcileResult) -> None:
    now = datetime.now(UTC)
    for m in mutations:
        r = m.reading
        if isinstance(m, _Insert):
            row = Data(
                name=m.name,
                series_id=r.series_id,
                unit=m.unit,
                previous_value=m.value,
                latest_value=m.value,
                year=r.year,
                period=r.period,
                last_updated=now,
            )
            row.history.append(
                DataHistory(year=r.year, period=r.period, value=m.value, recorded_at=now)
            )
            db.add(row)
            result.inserted.append(r.series_id)
            logger.info("Inserted %s: %.2f (%s-%s)", r.series_id, m.value, r.year, r.period)
        else:
            row = m.row
            old_value = row.latest_value
            row.previous_value = old_value
            row.latest_value = m.value
            row.year = r.year
            row.period = r.period
            row.last_updated = now
            db.add(
                DataHistory(
                    data_id=row.id, year=r.year, period=r.period, value=m.value, recorded_at=now
                )
            )
            result.updated.append(r.series_id)
            logger.info(
                "Updated %s: %.2f -> %.2f (%s-%s)",
                r.series_id,
                old_value,
                m.value,
                r.year,
                r.period,
            )


def reconcile(
    db: Session,
    readings: Mapping[str, SeriesReading],
    catalog: SeriesCatalog,
) -> ReconcileResult:
    """Merge readings into Data rows in a single transaction.

    Inserts unseen catalog series with previous = latest = round(value, 2).
    For known series, shifts latest -> previous only when the reading's
    period tag is strictly newer than the stored one.

    Raises:
        ReconciliationFailed: on any database error; nothing is committed.
    """
    result = ReconcileResult()
    if not readings:
        logger.info("No readings to reconcile")
        return result

    try:
        rows = db.query(Data).filter(Data.series_id.in_(list(readings))).all()
        existing = {row.series_id: row for row in rows}

        mutations = _plan(readings, existing, catalog, result)
        if not mutations:
            db.rollback()
            logger.info("No updates were made, rolled back transaction")
            return result

        _apply(db, mutations, result)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Reconciliation rolled back: %s", exc)
        raise ReconciliationFailed(f"reconciliation rolled back: {exc}") from exc

    result.committed = True
    logger.info(
        "Reconciliation committed: inserted=%d updated=%d skipped=%d",
        len(result.inserted),
        len(result.updated),
        len(result.skipped),
    )
    return result
