"""Segmentation of forecast (TAF-style) bulletins into a period timeline."""

import logging
import re
from dataclasses import replace
from datetime import datetime
from typing import Any, List, Optional, Tuple

from metar_taf_parser.parser.parser import TAFParser

from flightwx.weather.adapter import BulletinInput
from flightwx.weather.classifier import FlightCategoryClassifier
from flightwx.weather.fields import FieldExtractor
from flightwx.weather.models import Bulletin, ChangeType, ForecastPeriod
from flightwx.weather.time_anchor import TimeAnchor

logger = logging.getLogger(__name__)


class BulletinSegmenter:
    """
    Split a forecast bulletin into an ordered timeline of periods.

    The bulletin is decoded by ``TAFParser``. Its main body is the initial
    period and each trend (``FMddhhmm``, ``BECMG``, ``TEMPO``, ``INTER``,
    ``PROBnn [TEMPO]``) becomes one more period. Windows are resolved
    against the issue time and each period is classified on its own.

    Example:
        bulletin = BulletinSegmenter.segment(
            "TAF KXYZ 010600Z 0106/0206 18010KT P6SM FEW250 "
            "FM012000 22015G25KT 3SM BKN015",
            reference=datetime(2024, 3, 1, 6, 0, tzinfo=timezone.utc),
        )
        len(bulletin.periods)  # 2
    """

    # Same boundaries the parser uses to split a bulletin into trend lines
    CHANGE_GROUP_SPLIT = re.compile(
        r'\s+(?<!PROB\d{2}\s)(?=(?:PROB\d{2}|TEMPO|INTER|BECMG|FM\d{6})(?!\S))'
    )

    HEADER_PATTERN = re.compile(
        r'^(?:TAF\s+)?(?:(?:AMD|COR|RTD)\s+)*[A-Z][A-Z0-9]{3}\s+'
        r'(?:\d{6}Z\s+)?(?:\d{4}/\d{4}(?:\s+|$))?'
    )

    CANCELLED_PATTERN = re.compile(r'(?<!\S)(?:NIL|CNL)(?!\S)')

    @classmethod
    def segment(cls, bulletin: Any, reference: Optional[datetime] = None) -> Bulletin:
        """
        Decode a bulletin into its timeline.

        Args:
            bulletin: Raw bulletin text, upstream mapping, or BulletinInput
            reference: Instant near the issue time (e.g. fetch time), used
                to anchor the DDHHMMZ header. Ignored when the input carries
                an upstream issue time.

        Returns:
            Bulletin with periods sorted by start time. Without any time
            anchor the periods keep textual order and have no windows.
            When the parser rejects the text, the whole bulletin becomes a
            single initial period.
        """
        record = BulletinInput.coerce(bulletin)
        text = record.raw_text

        issue_time = cls._issue_time(record, text, reference)

        if cls.CANCELLED_PATTERN.search(text):
            logger.debug("Cancelled or NIL bulletin for %s", record.station or "?")
            return Bulletin(
                raw_text=text,
                station=record.station,
                issue_time=issue_time,
                cancelled=True,
            )

        parsed = cls.parse_bulletin(text)
        if parsed is None:
            return Bulletin(
                raw_text=text,
                station=record.station,
                issue_time=issue_time,
                valid_from=issue_time,
                valid_to=issue_time,
                periods=(cls._build_period(
                    container=None,
                    text=text,
                    window=(issue_time, issue_time),
                    change_type=ChangeType.INITIAL,
                    probability=None,
                ),),
            )

        if getattr(parsed, 'nil', False) or getattr(parsed, 'canceled', False):
            return Bulletin(
                raw_text=text,
                station=record.station,
                issue_time=issue_time,
                cancelled=True,
            )

        valid_from, valid_to = cls._validity(getattr(parsed, 'validity', None), issue_time)

        trends = list(getattr(parsed, 'trends', None) or [])
        spans = cls.CHANGE_GROUP_SPLIT.split(text)
        if len(spans) != len(trends) + 1:
            logger.debug(
                "Bulletin split into %d spans for %d trends, dropping trend text",
                len(spans), len(trends),
            )
            spans = [text] + [""] * len(trends)

        kinds = [cls._trend_kind(trend) for trend in trends]
        starts = [cls._trend_start(trend, issue_time) for trend in trends]

        periods: List[ForecastPeriod] = []

        initial_end = starts[0] if trends else valid_to
        periods.append(cls._build_period(
            container=parsed,
            text=cls.HEADER_PATTERN.sub('', spans[0], count=1),
            window=cls._window(valid_from, initial_end),
            change_type=ChangeType.INITIAL,
            probability=None,
        ))

        for index, trend in enumerate(trends):
            change_type, probability = kinds[index]

            if change_type is ChangeType.FM:
                end = valid_to
                for later_kind, later_start in zip(kinds[index + 1:], starts[index + 1:]):
                    if later_kind[0] is ChangeType.FM:
                        end = later_start
                        break
            else:
                end = cls._trend_end(trend, issue_time)

            periods.append(cls._build_period(
                container=trend,
                text=spans[index + 1],
                window=cls._window(starts[index], end),
                change_type=change_type,
                probability=probability,
            ))

        if issue_time is not None:
            periods.sort(key=lambda p: p.valid_from)

        periods = [replace(p, ordinal=i) for i, p in enumerate(periods)]

        return Bulletin(
            raw_text=text,
            station=record.station or (getattr(parsed, 'station', None) or ""),
            issue_time=issue_time,
            valid_from=valid_from,
            valid_to=valid_to,
            periods=tuple(periods),
        )

    @classmethod
    def parse_bulletin(cls, text: str) -> Optional[Any]:
        """
        Run the TAF parser over a bulletin.

        Args:
            text: Bulletin text, with or without the TAF prefix

        Returns:
            Parsed TAF object, or None if the parser rejects the text
        """
        text = (text or "").strip()
        if not text:
            return None

        # The parser expects the TAF prefix
        if not text.upper().startswith("TAF"):
            text = "TAF " + text

        try:
            return TAFParser().parse(text)
        except Exception as e:
            logger.debug("Failed to parse bulletin: %s - %s", text[:80], e)
            return None

    # --- Internal helpers ---

    @classmethod
    def _issue_time(cls, record: BulletinInput, text: str, reference: Optional[datetime]) -> Optional[datetime]:
        if record.issue_time is not None:
            return TimeAnchor.as_utc(record.issue_time)
        if reference is None:
            logger.debug("No time anchor for bulletin %s", record.station or "?")
            return None
        reference = TimeAnchor.as_utc(reference)
        return TimeAnchor.parse_issue_time(text, reference) or reference

    @classmethod
    def _validity(cls, validity, issue_time: Optional[datetime]) -> Tuple[Optional[datetime], Optional[datetime]]:
        if issue_time is None:
            return None, None
        start = cls._resolve(validity, 'start', issue_time)
        end = cls._resolve(validity, 'end', issue_time)
        if start is None:
            logger.debug("No validity range, using issue time")
            return issue_time, issue_time
        return cls._window(start, end)

    @staticmethod
    def _trend_kind(trend) -> Tuple[ChangeType, Optional[int]]:
        probability = getattr(trend, 'probability', None)
        if probability is not None:
            return ChangeType.PROB, int(probability)
        trend_type = getattr(getattr(trend, 'type', None), 'name', None)
        try:
            return ChangeType(trend_type), None
        except ValueError:
            logger.debug("Unknown trend type %r, treating as TEMPO", trend_type)
            return ChangeType.TEMPO, None

    @classmethod
    def _trend_start(cls, trend, issue_time: Optional[datetime]) -> Optional[datetime]:
        return cls._resolve(getattr(trend, 'validity', None), 'start', issue_time)

    @classmethod
    def _trend_end(cls, trend, issue_time: Optional[datetime]) -> Optional[datetime]:
        return cls._resolve(getattr(trend, 'validity', None), 'end', issue_time)

    @staticmethod
    def _resolve(validity, prefix: str, issue_time: Optional[datetime]) -> Optional[datetime]:
        """Resolve the start or end of a parser validity object."""
        if issue_time is None or validity is None:
            return None
        day = getattr(validity, f'{prefix}_day', None)
        hour = getattr(validity, f'{prefix}_hour', None)
        if day is None or hour is None:
            return None
        minute = getattr(validity, f'{prefix}_minutes', 0) or 0
        return TimeAnchor.resolve(day, hour, minute, issue_time)

    @staticmethod
    def _window(start: Optional[datetime], end: Optional[datetime]) -> Tuple[Optional[datetime], Optional[datetime]]:
        """Enforce start <= end, collapsing a malformed window to zero length."""
        if start is None:
            return None, None
        if end is None or end < start:
            logger.debug("Collapsing malformed window %s - %s", start, end)
            return start, start
        return start, end

    @staticmethod
    def _build_period(
        container: Optional[Any],
        text: str,
        window: Tuple[Optional[datetime], Optional[datetime]],
        change_type: ChangeType,
        probability: Optional[int],
    ) -> ForecastPeriod:
        fields = FieldExtractor.from_container(container, text)
        return ForecastPeriod(
            valid_from=window[0],
            valid_to=window[1],
            change_type=change_type,
            probability=probability,
            flight_category=FlightCategoryClassifier.classify_fields(fields),
            raw_text=text.strip(),
            **fields.field_values(),
        )
