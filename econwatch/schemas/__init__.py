"""Pydantic schemas."""

from econwatch.schemas.reading import SeriesReading

__all__ = ["SeriesReading"]
