"""Weather decoder data models."""

from dataclasses import dataclass, fields as dataclass_fields
from datetime import datetime, timedelta
from enum import Enum
from math import inf, isinf
from typing import Optional, Tuple, Dict, Any, Iterator

# Serialized form of an unbounded visibility or unlimited ceiling
UNLIMITED = "unlimited"


class FlightCategory(Enum):
    """
    FAA/NWS flight category based on ceiling and visibility.

    Ordered from worst to best: LIFR < IFR < MVFR < VFR.
    UNKNOWN marks insufficient data and sits outside the scale: comparing it
    with any category is not supported.

    Thresholds (whichever of ceiling or visibility is worse):
        LIFR:  visibility < 1 SM        or  ceiling < 500 ft
        IFR:   1 <= vis < 3 SM          or  500 <= ceiling < 1000 ft
        MVFR:  3 <= vis < 5 SM          or  1000 <= ceiling < 3000 ft
        VFR:   visibility >= 5 SM       and ceiling >= 3000 ft
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"
    UNKNOWN = "UNKNOWN"

    @property
    def order(self) -> Optional[int]:
        """Numeric ordering from worst (0) to best (3), None for UNKNOWN."""
        return _CATEGORY_ORDER.get(self)

    @property
    def is_known(self) -> bool:
        return self is not FlightCategory.UNKNOWN

    @property
    def color(self) -> str:
        """Conventional display colour (hex RGB)."""
        return _CATEGORY_COLORS[self]

    @property
    def label(self) -> str:
        return "Unknown" if self is FlightCategory.UNKNOWN else self.value

    def _comparable(self, other) -> bool:
        return isinstance(other, FlightCategory) and self.is_known and other.is_known

    def __lt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order >= other.order

    @classmethod
    def from_token(cls, value: Any) -> Optional['FlightCategory']:
        """
        Validate an explicit category value.

        Args:
            value: Category string from a report or upstream field (case-insensitive)

        Returns:
            FlightCategory, or None if the value is not one of the five known values
        """
        if isinstance(value, FlightCategory):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None

    @staticmethod
    def worst(*categories: Optional['FlightCategory']) -> Optional['FlightCategory']:
        """Return the worst known category, ignoring UNKNOWN and None."""
        known = [c for c in categories if c is not None and c.is_known]
        return min(known) if known else None


_CATEGORY_ORDER = {
    FlightCategory.LIFR: 0,
    FlightCategory.IFR: 1,
    FlightCategory.MVFR: 2,
    FlightCategory.VFR: 3,
}

_CATEGORY_COLORS = {
    FlightCategory.VFR: "#00FF00",
    FlightCategory.MVFR: "#0080FF",
    FlightCategory.IFR: "#FF0000",
    FlightCategory.LIFR: "#FF00FF",
    FlightCategory.UNKNOWN: "#808080",
}


class ChangeType(Enum):
    """Kind of forecast period within a bulletin timeline."""

    INITIAL = "INITIAL"
    FM = "FM"
    BECMG = "BECMG"
    TEMPO = "TEMPO"
    INTER = "INTER"
    PROB = "PROB"


class PeriodStatus(Enum):
    """Position of a forecast period relative to a query instant."""

    PAST = "PAST"
    CURRENT = "CURRENT"
    FUTURE = "FUTURE"


@dataclass(frozen=True)
class WeatherFields:
    """
    Canonical optional-field record extracted from report text.

    Visibility and ceiling are independently optional. ``math.inf`` marks an
    unbounded visibility or unlimited ceiling, distinct from None (no data).

    Attributes:
        visibility_sm: Visibility in statute miles
        ceiling_ft: Ceiling in feet AGL (lowest BKN/OVC/VV layer)
        wind_direction: Wind direction in degrees (None if variable or absent)
        wind_variable: True when direction was coded VRB
        wind_speed: Sustained wind in knots
        wind_gust: Gust in knots
        clouds: Cloud layer tokens as found (e.g. "BKN015")
        weather: Present-weather codes as found (e.g. "-RA", "VCTS")
        category_token: Explicit flight category supplied by the source
        clear_sky: Text carries an explicit clear-sky marker (CLR/SKC/CAVOK/NSC/NCD)
        unrestricted_clouds: Only FEW/SCT layers were reported
    """

    visibility_sm: Optional[float] = None
    ceiling_ft: Optional[float] = None
    wind_direction: Optional[int] = None
    wind_variable: bool = False
    wind_speed: Optional[int] = None
    wind_gust: Optional[int] = None
    clouds: Tuple[str, ...] = ()
    weather: Tuple[str, ...] = ()
    category_token: Optional[FlightCategory] = None
    clear_sky: bool = False
    unrestricted_clouds: bool = False

    @property
    def visibility_unbounded(self) -> bool:
        return self.visibility_sm is not None and isinf(self.visibility_sm)

    @property
    def ceiling_unlimited(self) -> bool:
        return self.ceiling_ft is not None and isinf(self.ceiling_ft)

    @property
    def has_wind(self) -> bool:
        return self.wind_speed is not None

    def fields_dict(self) -> Dict[str, Any]:
        return {
            'visibility_sm': _encode_limit(self.visibility_sm),
            'ceiling_ft': _encode_limit(self.ceiling_ft),
            'wind_direction': self.wind_direction,
            'wind_variable': self.wind_variable,
            'wind_speed': self.wind_speed,
            'wind_gust': self.wind_gust,
            'clouds': list(self.clouds),
            'weather': list(self.weather),
            'category_token': self.category_token.value if self.category_token else None,
            'clear_sky': self.clear_sky,
            'unrestricted_clouds': self.unrestricted_clouds,
        }

    @staticmethod
    def fields_kwargs(data: dict) -> Dict[str, Any]:
        """Keyword arguments for the shared weather fields from a serialized dict."""
        return {
            'visibility_sm': _decode_limit(data.get('visibility_sm')),
            'ceiling_ft': _decode_limit(data.get('ceiling_ft')),
            'wind_direction': data.get('wind_direction'),
            'wind_variable': data.get('wind_variable', False),
            'wind_speed': data.get('wind_speed'),
            'wind_gust': data.get('wind_gust'),
            'clouds': tuple(data.get('clouds') or ()),
            'weather': tuple(data.get('weather') or ()),
            'category_token': FlightCategory.from_token(data.get('category_token')),
            'clear_sky': data.get('clear_sky', False),
            'unrestricted_clouds': data.get('unrestricted_clouds', False),
        }

    def to_dict(self) -> dict:
        return self.fields_dict()

    @classmethod
    def from_dict(cls, data: dict) -> 'WeatherFields':
        return cls(**cls.fields_kwargs(data))

    def field_values(self) -> Dict[str, Any]:
        """Field values only, for building a subclass instance."""
        return {f.name: getattr(self, f.name) for f in dataclass_fields(WeatherFields)}


@dataclass(frozen=True)
class Observation(WeatherFields):
    """
    Decoded current-conditions (METAR-style) report.

    The raw text is always present and preserved verbatim for display.
    """

    raw_text: str = ""
    station: str = ""

    def to_dict(self) -> dict:
        data = {
            'raw_text': self.raw_text,
            'station': self.station,
        }
        data.update(self.fields_dict())
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'Observation':
        return cls(
            raw_text=data.get('raw_text', ''),
            station=data.get('station', ''),
            **cls.fields_kwargs(data),
        )

    def __repr__(self) -> str:
        return f"Observation({self.station or '?'} {self.raw_text[:40]!r})"


@dataclass(frozen=True)
class ForecastPeriod(WeatherFields):
    """
    One period of a forecast bulletin timeline.

    The validity window is [valid_from, valid_to). Windows of TEMPO/PROB
    periods overlap the underlying base period. A malformed window collapses
    to zero length (valid_to == valid_from).

    Attributes:
        valid_from: Start of validity
        valid_to: End of validity
        change_type: INITIAL, FM, BECMG, TEMPO, INTER or PROB
        probability: Probability percentage for PROB groups
        ordinal: Position in the bulletin timeline
        flight_category: Classified category for this period
        raw_text: Text span of the period, including its change-group token
    """

    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    change_type: ChangeType = ChangeType.INITIAL
    probability: Optional[int] = None
    ordinal: int = 0
    flight_category: FlightCategory = FlightCategory.UNKNOWN
    raw_text: str = ""

    @property
    def duration(self) -> timedelta:
        if self.valid_from is None or self.valid_to is None:
            return timedelta(0)
        return self.valid_to - self.valid_from

    @property
    def is_degenerate(self) -> bool:
        """True for a zero-length (fallback) window."""
        return self.duration <= timedelta(0)

    def contains(self, at: datetime) -> bool:
        """Check whether ``at`` falls within [valid_from, valid_to)."""
        if self.valid_from is None or self.valid_to is None:
            return False
        return self.valid_from <= at < self.valid_to

    def to_dict(self) -> dict:
        data = {
            'valid_from': self.valid_from.isoformat() if self.valid_from else None,
            'valid_to': self.valid_to.isoformat() if self.valid_to else None,
            'change_type': self.change_type.value,
            'probability': self.probability,
            'ordinal': self.ordinal,
            'flight_category': self.flight_category.value,
            'raw_text': self.raw_text,
        }
        data.update(self.fields_dict())
        return data

    @classmethod
    def from_dict(cls, data: dict) -> 'ForecastPeriod':
        change_type = ChangeType.INITIAL
        if data.get('change_type'):
            try:
                change_type = ChangeType(data['change_type'])
            except ValueError:
                pass

        return cls(
            valid_from=_parse_iso(data.get('valid_from')),
            valid_to=_parse_iso(data.get('valid_to')),
            change_type=change_type,
            probability=data.get('probability'),
            ordinal=data.get('ordinal', 0),
            flight_category=FlightCategory.from_token(data.get('flight_category')) or FlightCategory.UNKNOWN,
            raw_text=data.get('raw_text', ''),
            **cls.fields_kwargs(data),
        )

    def __repr__(self) -> str:
        start = self.valid_from.strftime("%d/%H%MZ") if self.valid_from else "?"
        end = self.valid_to.strftime("%d/%H%MZ") if self.valid_to else "?"
        return f"ForecastPeriod({self.change_type.value} {start}-{end} {self.flight_category.value})"


@dataclass(frozen=True)
class Bulletin:
    """
    Decoded forecast (TAF-style) bulletin.

    Owns its ordered timeline of periods.

    Attributes:
        raw_text: Bulletin text as received
        station: Station identifier
        issue_time: Issue timestamp
        valid_from: Overall validity start
        valid_to: Overall validity end
        periods: Timeline ordered by start time
        cancelled: True for NIL or CNL bulletins (no periods)
    """

    raw_text: str = ""
    station: str = ""
    issue_time: Optional[datetime] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    periods: Tuple[ForecastPeriod, ...] = ()
    cancelled: bool = False

    def __len__(self) -> int:
        return len(self.periods)

    def __iter__(self) -> Iterator[ForecastPeriod]:
        return iter(self.periods)

    def to_dict(self) -> dict:
        return {
            'raw_text': self.raw_text,
            'station': self.station,
            'issue_time': self.issue_time.isoformat() if self.issue_time else None,
            'valid_from': self.valid_from.isoformat() if self.valid_from else None,
            'valid_to': self.valid_to.isoformat() if self.valid_to else None,
            'periods': [p.to_dict() for p in self.periods],
            'cancelled': self.cancelled,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Bulletin':
        return cls(
            raw_text=data.get('raw_text', ''),
            station=data.get('station', ''),
            issue_time=_parse_iso(data.get('issue_time')),
            valid_from=_parse_iso(data.get('valid_from')),
            valid_to=_parse_iso(data.get('valid_to')),
            periods=tuple(ForecastPeriod.from_dict(p) for p in data.get('periods') or ()),
            cancelled=data.get('cancelled', False),
        )

    def __repr__(self) -> str:
        return f"Bulletin({self.station or '?'} {len(self.periods)} periods)"


def _encode_limit(value: Optional[float]) -> Any:
    if value is not None and isinf(value):
        return UNLIMITED
    return value


def _decode_limit(value: Any) -> Optional[float]:
    if value == UNLIMITED:
        return inf
    if value is None:
        return None
    return float(value)


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None
