"""
Aviation weather decoding library.

Decodes METAR-style reports and TAF-style forecast bulletins into typed
structures and classifies them into FAA/NWS flight categories.

The main public API includes:
- ReportDecoder: decode a current-conditions report
- BulletinSegmenter: decode a forecast bulletin into a period timeline
- BulletinQuery: select the operative forecast period
- FlightCategory: VFR/MVFR/IFR/LIFR/UNKNOWN
- AwcSource: fetch live data from aviationweather.gov
"""

from flightwx.weather import (
    FlightCategory,
    Observation,
    ForecastPeriod,
    Bulletin,
    ReportDecoder,
    BulletinSegmenter,
    BulletinQuery,
)
from flightwx.sources import AwcSource

__version__ = '0.1.0'
__all__ = [
    'FlightCategory',
    'Observation',
    'ForecastPeriod',
    'Bulletin',
    'ReportDecoder',
    'BulletinSegmenter',
    'BulletinQuery',
    'AwcSource',
]
