"""Tests for threshold evaluation."""

from __future__ import annotations

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from econwatch.catalog import DEFAULT_CATALOG
from econwatch.models import Data
from econwatch.services.percent_change import calculate_percent_change
from econwatch.services.threshold_evaluator import evaluate_all, is_breach
from tests.factories import make_threshold


class TestIsBreach:
    @pytest.mark.parametrize(
        ("percent_change", "magnitude", "expected"),
        [
            (20.0, 15.0, True),
            (15.0, 15.0, True),
            (-15.0, 15.0, True),
            (-20.0, 15.0, True),
            (14.99, 15.0, False),
            (-14.99, 15.0, False),
            (0.0, 15.0, False),
            (20.0, -15.0, True),
        ],
    )
    def test_band(self, percent_change: float, magnitude: float, expected: bool) -> None:
        assert is_breach(percent_change, magnitude) is expected

    @pytest.mark.parametrize(("latest", "expected"), [(111.0, True), (105.0, False), (89.0, True)])
    def test_ten_percent_band_from_hundred(self, latest: float, expected: bool) -> None:
        assert is_breach(calculate_percent_change(100.0, latest), 10.0) is expected


class TestEvaluateAll:
    def test_eggs_rise_breaches_fifteen_percent(self, db: Session, owner, eggs_data) -> None:
        """3.25 -> 3.90 is +20%, past a 15% magnitude."""
        definition = make_threshold(db, owner, eggs_data, 15.0)

        breaches = evaluate_all(db, DEFAULT_CATALOG)

        assert len(breaches) == 1
        breach = breaches[0]
        assert breach.definition.id == definition.id
        assert breach.percent_change == pytest.approx(20.0)
        assert breach.is_adverse is True
        assert (breach.year, breach.period) == ("2025", "M01")

    def test_below_magnitude_no_breach(self, db: Session, owner, eggs_data) -> None:
        make_threshold(db, owner, eggs_data, 25.0)
        assert evaluate_all(db, DEFAULT_CATALOG) == []

    def test_drop_is_breach_but_favorable(self, db: Session, owner) -> None:
        data = Data(
            name="Gasoline",
            series_id="APU00007471A",
            unit="per gallon",
            previous_value=4.00,
            latest_value=3.00,
            year="2025",
            period="M01",
            last_updated=datetime.now(UTC),
        )
        db.add(data)
        db.commit()
        make_threshold(db, owner, data, 10.0)

        breaches = evaluate_all(db, DEFAULT_CATALOG)

        assert len(breaches) == 1
        assert breaches[0].percent_change == pytest.approx(-25.0)
        assert breaches[0].is_adverse is False

    def test_fresh_series_has_zero_change(self, db: Session, owner) -> None:
        data = Data(
            name="Bread",
            series_id="APU0000702111",
            previous_value=1.91,
            latest_value=1.91,
            year="2025",
            period="M01",
        )
        db.add(data)
        db.commit()
        make_threshold(db, owner, data, 0.5)
        assert evaluate_all(db, DEFAULT_CATALOG) == []

    def test_series_outside_catalog_ignored(self, db: Session, owner) -> None:
        data = Data(
            name="CPI",
            series_id="CUUR0000SA0",
            previous_value=100.0,
            latest_value=200.0,
            year="2025",
            period="M01",
        )
        db.add(data)
        db.commit()
        make_threshold(db, owner, data, 1.0)
        assert evaluate_all(db, DEFAULT_CATALOG) == []

    def test_missing_data_row_skipped(self, db: Session, owner, eggs_data) -> None:
        """A definition whose Data row is gone is skipped; others still evaluate."""
        from econwatch.models import ThresholdDefinition

        orphan = ThresholdDefinition(owner_user_id=owner.id, data_id=9999, magnitude_percent=1.0)
        db.add(orphan)
        db.commit()
        good = make_threshold(db, owner, eggs_data, 15.0)

        breaches = evaluate_all(db, DEFAULT_CATALOG)

        assert [b.definition.id for b in breaches] == [good.id]

    def test_data_load_error_skips_only_that_definition(self, db: Session, owner, eggs_data) -> None:
        """A database error loading one Data row does not stop other definitions."""
        bread = Data(
            name="Bread",
            series_id="APU0000702111",
            previous_value=1.50,
            latest_value=2.00,
            year="2025",
            period="M01",
        )
        db.add(bread)
        db.commit()
        make_threshold(db, owner, bread, 10.0)
        good = make_threshold(db, owner, eggs_data, 15.0)
        broken_data_id = bread.id
        real_get = db.get

        def failing_get(entity, ident, *args, **kwargs):
            if entity is Data and ident == broken_data_id:
                raise OperationalError("SELECT", {}, Exception("connection reset"))
            return real_get(entity, ident, *args, **kwargs)

        with patch.object(db, "get", side_effect=failing_get):
            breaches = evaluate_all(db, DEFAULT_CATALOG)

        assert [b.definition.id for b in breaches] == [good.id]
        assert breaches[0].percent_change == pytest.approx(20.0)
