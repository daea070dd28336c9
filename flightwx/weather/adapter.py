"""
Input adapter for upstream weather records.

Upstream sources publish the same information under different field names
(``rawOb`` vs ``rawText``, ``visib`` vs ``visibilityStatuteMi``, ...). The
adapter folds them into one canonical record before the decoder sees them.
"""

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Any, Mapping, Sequence

from dateutil import parser as date_parser

from flightwx.weather.models import FlightCategory

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r'\s+')

RAW_REPORT_KEYS = ('rawOb', 'rawText', 'raw_text')
RAW_BULLETIN_KEYS = ('rawTAF', 'rawOb', 'rawText', 'raw_text')
STATION_KEYS = ('icaoId', 'stationId', 'station')
ISSUE_TIME_KEYS = ('issueTime', 'bulletinTime', 'issue_time')


def normalize_text(text: Optional[str]) -> str:
    """Uppercase and collapse whitespace, dropping a trailing '=' terminator."""
    if not text:
        return ""
    text = _WHITESPACE.sub(' ', str(text)).strip().upper()
    return text.rstrip('=').rstrip()


@dataclass(frozen=True)
class ReportInput:
    """
    Canonical record for one current-conditions report.

    Attributes:
        raw_text: Normalized report text
        station: Station identifier
        visibility: Structured visibility of ambiguous unit (miles or meters)
        visibility_sm: Structured visibility known to be statute miles
        category: Explicit flight category supplied upstream
        wind_direction: Structured wind direction in degrees
        wind_variable: Structured wind direction was variable
        wind_speed: Structured wind speed in knots
        wind_gust: Structured gust in knots
    """

    raw_text: str = ""
    station: str = ""
    visibility: Optional[float] = None
    visibility_sm: Optional[float] = None
    category: Optional[FlightCategory] = None
    wind_direction: Optional[int] = None
    wind_variable: bool = False
    wind_speed: Optional[int] = None
    wind_gust: Optional[int] = None

    @classmethod
    def from_text(cls, text: str) -> 'ReportInput':
        raw = normalize_text(text)
        return cls(raw_text=raw, station=_station_from_text(raw))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'ReportInput':
        """
        Build from an upstream JSON record.

        Args:
            data: Record using any of the known alternate field names

        Returns:
            ReportInput with unparseable values dropped
        """
        raw = normalize_text(_first(data, RAW_REPORT_KEYS))
        station = str(_first(data, STATION_KEYS) or "").strip().upper() or _station_from_text(raw)

        wind_dir_value = _first(data, ('wdir', 'windDirDegrees'))
        wind_variable = isinstance(wind_dir_value, str) and wind_dir_value.strip().upper() == 'VRB'

        category = FlightCategory.from_token(_first(data, ('fltCat', 'flightCategory')))

        return cls(
            raw_text=raw,
            station=station,
            visibility=parse_visibility_value(data.get('visib')),
            visibility_sm=parse_visibility_value(data.get('visibilityStatuteMi')),
            category=category,
            wind_direction=None if wind_variable else _to_int(wind_dir_value),
            wind_variable=wind_variable,
            wind_speed=_to_int(_first(data, ('wspd', 'windSpeedKt'))),
            wind_gust=_to_int(_first(data, ('wgst', 'windGustKt'))),
        )

    @classmethod
    def coerce(cls, report: Any) -> 'ReportInput':
        """Accept a ReportInput, raw text, or an upstream mapping."""
        if isinstance(report, ReportInput):
            return report
        if isinstance(report, Mapping):
            return cls.from_mapping(report)
        return cls.from_text(report if isinstance(report, str) else "")


@dataclass(frozen=True)
class BulletinInput:
    """
    Canonical record for one forecast bulletin.

    Attributes:
        raw_text: Normalized bulletin text
        station: Station identifier
        issue_time: Issue time supplied upstream, if any
    """

    raw_text: str = ""
    station: str = ""
    issue_time: Optional[datetime] = None

    @classmethod
    def from_text(cls, text: str) -> 'BulletinInput':
        raw = normalize_text(text)
        return cls(raw_text=raw, station=_station_from_text(raw))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'BulletinInput':
        raw = normalize_text(_first(data, RAW_BULLETIN_KEYS))
        station = str(_first(data, STATION_KEYS) or "").strip().upper() or _station_from_text(raw)
        return cls(
            raw_text=raw,
            station=station,
            issue_time=parse_timestamp(_first(data, ISSUE_TIME_KEYS)),
        )

    @classmethod
    def coerce(cls, bulletin: Any) -> 'BulletinInput':
        """Accept a BulletinInput, raw text, or an upstream mapping."""
        if isinstance(bulletin, BulletinInput):
            return bulletin
        if isinstance(bulletin, Mapping):
            return cls.from_mapping(bulletin)
        return cls.from_text(bulletin if isinstance(bulletin, str) else "")


def parse_visibility_value(value: Any) -> Optional[float]:
    """
    Normalize a structured visibility value to float.

    Handles numbers and strings such as ``"10+"`` or ``"6+"``.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)

    text = str(value).strip()
    if text.endswith('+'):
        text = text[:-1]
    try:
        return float(text)
    except ValueError:
        logger.debug("Ignoring unparseable visibility value %r", value)
        return None


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 string or epoch seconds into an aware UTC datetime."""
    if value is None or value == "":
        return None
    try:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value, tz=timezone.utc)
        parsed = date_parser.isoparse(str(value).strip())
    except (ValueError, OverflowError, OSError):
        logger.debug("Ignoring unparseable timestamp %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_HEADER_WORDS = frozenset({'METAR', 'SPECI', 'TAF', 'AMD', 'COR', 'RTD'})
_STATION_TOKEN = re.compile(r'^[A-Z][A-Z0-9]{3}$')


def _station_from_text(text: str) -> str:
    for token in text.split()[:4]:
        if token in _HEADER_WORDS:
            continue
        if _STATION_TOKEN.match(token):
            return token
        break
    return ""


def _first(data: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return None
