"""Feed reading schema."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from econwatch.periods import PeriodTag


class SeriesReading(BaseModel):
    """Latest value of one series as reported by the feed.

    Produced by feed clients once per cycle and consumed by the reconciler;
    never persisted directly.
    """

    model_config = ConfigDict(frozen=True)

    series_id: str = Field(..., min_length=1, max_length=64)
    value: float
    year: str = Field(..., min_length=4, max_length=4)
    period: str = Field(..., min_length=2, max_length=8)

    @field_validator("year")
    @classmethod
    def _year_must_be_numeric(cls, v: str) -> str:
        if not v.isdigit():
            raise ValueError(f"invalid year: {v!r}")
        return v

    @field_validator("period")
    @classmethod
    def _period_must_parse(cls, v: str) -> str:
        PeriodTag.parse("2000", v)
        return v

    @property
    def period_tag(self) -> PeriodTag:
        return PeriodTag.parse(self.year, self.period)
