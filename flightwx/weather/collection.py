"""Per-station weather summaries and a queryable collection over them."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import List, Dict, Optional

from flightwx.models.queryable_collection import QueryableCollection
from flightwx.weather.models import Observation, Bulletin, FlightCategory
from flightwx.weather.query import BulletinQuery

# Sustained or gust speed from which a station counts as windy
WINDY_THRESHOLD_KT = 15


@dataclass(frozen=True)
class StationWeather:
    """
    Decoded weather for one station.

    Attributes:
        station: Station identifier
        observation: Latest decoded report, None if the station had none
        category: Category of the observation (UNKNOWN without a report)
        bulletin: Decoded forecast bulletin, if any
        forecast_category: Category of the operative forecast period at the
            instant used by ``with_forecast_at``
    """

    station: str
    observation: Optional[Observation] = None
    category: FlightCategory = FlightCategory.UNKNOWN
    bulletin: Optional[Bulletin] = None
    forecast_category: Optional[FlightCategory] = None

    def with_forecast_at(self, now: datetime) -> 'StationWeather':
        """Copy with ``forecast_category`` selected for ``now``."""
        if self.bulletin is None:
            return self
        return replace(self, forecast_category=BulletinQuery.category(self.bulletin, now))

    def to_dict(self) -> dict:
        return {
            'station': self.station,
            'observation': self.observation.to_dict() if self.observation else None,
            'category': self.category.value,
            'bulletin': self.bulletin.to_dict() if self.bulletin else None,
            'forecast_category': self.forecast_category.value if self.forecast_category else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'StationWeather':
        observation = None
        if data.get('observation'):
            observation = Observation.from_dict(data['observation'])

        bulletin = None
        if data.get('bulletin'):
            bulletin = Bulletin.from_dict(data['bulletin'])

        return cls(
            station=data.get('station', ''),
            observation=observation,
            category=FlightCategory.from_token(data.get('category')) or FlightCategory.UNKNOWN,
            bulletin=bulletin,
            forecast_category=FlightCategory.from_token(data.get('forecast_category')),
        )


class StationWeatherCollection(QueryableCollection[StationWeather]):
    """
    Queryable collection of StationWeather entries.

    Example:
        ifr_or_worse = collection.at_or_worse_than(FlightCategory.IFR).all()
        counts = collection.category_counts()
    """

    def __init__(self, items: List[StationWeather]):
        super().__init__(items)

    # --- Location filters ---

    def for_station(self, station: str) -> 'StationWeatherCollection':
        station_upper = station.upper()
        return self.filter(lambda s: s.station.upper() == station_upper)

    def for_stations(self, stations: List[str]) -> 'StationWeatherCollection':
        wanted = {s.upper() for s in stations}
        return self.filter(lambda s: s.station.upper() in wanted)

    # --- Category filters ---

    def with_category(self, category: FlightCategory) -> 'StationWeatherCollection':
        """Exact category match, UNKNOWN included."""
        return self.filter(lambda s: s.category == category)

    def worse_than(self, category: FlightCategory) -> 'StationWeatherCollection':
        """
        Stations strictly worse than ``category``.

        UNKNOWN stations are never included, and an UNKNOWN threshold
        matches nothing.
        """
        if not category.is_known:
            return self._new_collection([])
        return self.filter(lambda s: s.category.is_known and s.category < category)

    def at_or_worse_than(self, category: FlightCategory) -> 'StationWeatherCollection':
        if not category.is_known:
            return self._new_collection([])
        return self.filter(lambda s: s.category.is_known and s.category <= category)

    def at_or_better_than(self, category: FlightCategory) -> 'StationWeatherCollection':
        if not category.is_known:
            return self._new_collection([])
        return self.filter(lambda s: s.category.is_known and s.category >= category)

    def unknown(self) -> 'StationWeatherCollection':
        """Stations without enough data to classify."""
        return self.filter(lambda s: not s.category.is_known)

    # --- Forecast & wind filters ---

    def with_forecast(self) -> 'StationWeatherCollection':
        return self.filter(lambda s: s.bulletin is not None and len(s.bulletin) > 0)

    def windy(self, threshold_kt: int = WINDY_THRESHOLD_KT) -> 'StationWeatherCollection':
        """Stations whose sustained wind or gust reaches ``threshold_kt``."""
        def is_windy(entry: StationWeather) -> bool:
            obs = entry.observation
            if obs is None or obs.wind_speed is None:
                return False
            return max(obs.wind_speed, obs.wind_gust or 0) >= threshold_kt

        return self.filter(is_windy)

    # --- Summaries ---

    def category_counts(self) -> Dict[FlightCategory, int]:
        """Number of stations per category, every category present."""
        counts = {category: 0 for category in FlightCategory}
        for entry in self._items:
            counts[entry.category] += 1
        return counts

    def by_station(self) -> Dict[str, StationWeather]:
        return {entry.station: entry for entry in self._items}
