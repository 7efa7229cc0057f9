"""Threshold evaluation against reconciled Data rows.

Runs after reconciliation has committed. Each definition is evaluated on
its own: a definition whose data cannot be loaded is logged and skipped,
the rest of the run continues.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from econwatch.catalog import SeriesCatalog
from econwatch.errors import EvaluationSkipped
from econwatch.models import Data, ThresholdDefinition
from econwatch.services.percent_change import calculate_percent_change

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Breach:
    """A definition whose series moved at least its configured magnitude."""

    definition: ThresholdDefinition
    data_name: str
    series_id: str
    percent_change: float
    year: str
    period: str

    @property
    def is_adverse(self) -> bool:
        """Upper-side move (percent_change > magnitude): the unfavorable template."""
        return self.percent_change > self.definition.magnitude_percent


def is_breach(percent_change: float, magnitude_percent: float) -> bool:
    """True when |percent_change| >= |magnitude_percent|."""
    bound = abs(magnitude_percent)
    return percent_change >= bound or percent_change <= -bound


def _load_data(db: Session, definition: ThresholdDefinition) -> Data:
    try:
        data = db.get(Data, definition.data_id)
    except SQLAlchemyError as exc:
        db.rollback()
        raise EvaluationSkipped(definition.id, f"data load failed: {exc}") from exc
    if data is None:
        raise EvaluationSkipped(definition.id, f"data row {definition.data_id} not found")
    return data


def evaluate_all(db: Session, catalog: SeriesCatalog) -> list[Breach]:
    """Evaluate every stored threshold definition.

    Percent change is computed from the Data row's previous_value and
    latest_value. Definitions on series outside the catalog are ignored.

    Returns:
        Breaches, one per breached definition. Non-breaching definitions
        produce nothing.
    """
    definitions = db.query(ThresholdDefinition).order_by(ThresholdDefinition.id).all()
    breaches: list[Breach] = []

    for definition in definitions:
        try:
            data = _load_data(db, definition)
        except EvaluationSkipped as exc:
            logger.warning("Evaluation skipped: %s", exc)
            continue

        if data.series_id not in catalog:
            logger.debug(
                "Threshold %d references untracked series %s; skipping",
                definition.id,
                data.series_id,
            )
            continue

        percent_change = calculate_percent_change(data.previous_value, data.latest_value)
        if not is_breach(percent_change, definition.magnitude_percent):
            continue

        logger.info(
            "Threshold exceeded for %s (threshold_id=%d) | change=%.2f%% | magnitude=%.2f%%",
            data.name,
            definition.id,
            percent_change,
            definition.magnitude_percent,
        )
        breaches.append(
            Breach(
                definition=definition,
                data_name=data.name,
                series_id=data.series_id,
                percent_change=percent_change,
                year=data.year,
                period=data.period,
            )
        )

    logger.info(
        "Threshold evaluation completed: definitions=%d breaches=%d",
        len(definitions),
        len(breaches),
    )
    return breaches
