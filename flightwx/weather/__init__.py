"""
Weather module for decoding METAR/TAF text and classifying flight categories.

Provides:
- FlightCategory: VFR/MVFR/IFR/LIFR/UNKNOWN enum with ordering
- Observation, ForecastPeriod, Bulletin: decoded data models
- ReportInput, BulletinInput: canonical records built from upstream data
- TimeAnchor: resolve DDHHMM timestamps against a reference instant
- FieldExtractor: visibility, ceiling, wind, cloud and weather tokens
- FlightCategoryClassifier: FAA/NWS ceiling and visibility rules
- ReportDecoder: decode a current-conditions report
- BulletinSegmenter: split a forecast bulletin into its period timeline
- BulletinQuery: pick the operative forecast period for an instant
- StationWeather, StationWeatherCollection: per-station summaries

Example:
    from flightwx.weather import ReportDecoder, FlightCategory

    observation, category = ReportDecoder.decode(
        "METAR KJFK 211200Z 18008KT 2SM BR OVC005 12/11 A2990"
    )
    print(category)  # FlightCategory.IFR
"""

from flightwx.weather.models import (
    FlightCategory,
    ChangeType,
    PeriodStatus,
    WeatherFields,
    Observation,
    ForecastPeriod,
    Bulletin,
)
from flightwx.weather.adapter import ReportInput, BulletinInput
from flightwx.weather.time_anchor import TimeAnchor
from flightwx.weather.fields import FieldExtractor
from flightwx.weather.classifier import FlightCategoryClassifier
from flightwx.weather.decoder import ReportDecoder
from flightwx.weather.segmenter import BulletinSegmenter
from flightwx.weather.query import BulletinQuery
from flightwx.weather.collection import StationWeather, StationWeatherCollection

__all__ = [
    'FlightCategory',
    'ChangeType',
    'PeriodStatus',
    'WeatherFields',
    'Observation',
    'ForecastPeriod',
    'Bulletin',
    'ReportInput',
    'BulletinInput',
    'TimeAnchor',
    'FieldExtractor',
    'FlightCategoryClassifier',
    'ReportDecoder',
    'BulletinSegmenter',
    'BulletinQuery',
    'StationWeather',
    'StationWeatherCollection',
]
