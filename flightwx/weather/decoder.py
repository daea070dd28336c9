"""Decoder for current-conditions (METAR-style) reports."""

import logging
from typing import Any, Tuple

from flightwx.weather.adapter import ReportInput
from flightwx.weather.classifier import FlightCategoryClassifier
from flightwx.weather.fields import FieldExtractor
from flightwx.weather.models import Observation, FlightCategory

logger = logging.getLogger(__name__)


class ReportDecoder:
    """
    Decode one current-conditions report into an Observation and category.

    Accepts raw text, an upstream JSON record, or a ReportInput. Never
    raises: the worst case is an Observation holding only the raw text,
    classified UNKNOWN.

    Example:
        observation, category = ReportDecoder.decode(
            "METAR KJFK 211200Z 18008KT 2SM BR OVC005 12/11 A2990"
        )
        category  # FlightCategory.IFR
    """

    @classmethod
    def decode(cls, report: Any) -> Tuple[Observation, FlightCategory]:
        """
        Decode a report.

        Args:
            report: Raw report text, upstream mapping, or ReportInput

        Returns:
            (Observation, FlightCategory)
        """
        record = ReportInput.coerce(report)
        fields = FieldExtractor.extract(record.raw_text, structured=record)
        category = FlightCategoryClassifier.classify_fields(fields)

        observation = Observation(
            raw_text=record.raw_text,
            station=record.station,
            **fields.field_values(),
        )
        if category is FlightCategory.UNKNOWN:
            logger.debug("Unclassifiable report for %s: %s", record.station or "?", record.raw_text[:80])
        return observation, category

    @classmethod
    def category(cls, report: Any) -> FlightCategory:
        """Shortcut returning only the flight category."""
        return cls.decode(report)[1]
