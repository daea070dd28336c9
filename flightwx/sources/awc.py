"""Aviation Weather Center (aviationweather.gov) API source for live METAR/TAF data."""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Dict, Any, Tuple, Iterator

import requests

from flightwx import config
from flightwx.weather.adapter import BulletinInput, ReportInput
from flightwx.weather.collection import StationWeather, StationWeatherCollection
from flightwx.weather.decoder import ReportDecoder
from flightwx.weather.models import Bulletin, FlightCategory, Observation
from flightwx.weather.segmenter import BulletinSegmenter

logger = logging.getLogger(__name__)


class AwcSource:
    """
    Fetch live METAR and TAF records from the aviationweather.gov data API.

    Requests the JSON format, folds each record through the input adapter
    and decodes it. Station lists are split into batches. Failed requests
    are logged and produce no data; there is no retry.

    Example:
        source = AwcSource()
        weather = source.fetch_station_weather(["KJFK", "KBOS"])
        for entry in weather:
            print(entry.station, entry.category, entry.forecast_category)
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = config.AWC_BASE_URL,
        timeout: float = config.HTTP_TIMEOUT,
        batch_size: int = config.BATCH_SIZE,
    ):
        """
        Args:
            session: Optional requests.Session for dependency injection (testing).
            base_url: API base URL.
            timeout: HTTP request timeout in seconds.
            batch_size: Maximum station ids per request.
        """
        self._session = session or requests.Session()
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._batch_size = max(1, batch_size)
        self._session.headers.setdefault("User-Agent", config.USER_AGENT)

    def fetch_metars(self, stations: List[str]) -> Dict[str, Tuple[Observation, FlightCategory]]:
        """
        Fetch and decode the latest METAR per station.

        Args:
            stations: Station identifiers

        Returns:
            Dict mapping station to (Observation, FlightCategory). Stations
            without data are absent.
        """
        result: Dict[str, Tuple[Observation, FlightCategory]] = {}
        for batch in self._batches(stations):
            records = self._fetch_json("metar", {
                "ids": ",".join(batch),
                "format": "json",
                "taf": "false",
            })
            for record in records:
                report = ReportInput.from_mapping(record)
                if not report.station:
                    logger.warning("Skipping METAR record without station id")
                    continue
                # Newest report comes first
                if report.station in result:
                    continue
                result[report.station] = ReportDecoder.decode(report)
        return result

    def fetch_tafs(self, stations: List[str], reference: Optional[datetime] = None) -> Dict[str, Bulletin]:
        """
        Fetch and segment the TAF per station.

        Args:
            stations: Station identifiers
            reference: Anchor for bulletins lacking an upstream issue time
                (defaults to the current time)

        Returns:
            Dict mapping station to Bulletin
        """
        reference = reference or datetime.now(tz=timezone.utc)
        result: Dict[str, Bulletin] = {}
        for batch in self._batches(stations):
            records = self._fetch_json("taf", {
                "ids": ",".join(batch),
                "format": "json",
            })
            for record in records:
                bulletin_input = BulletinInput.from_mapping(record)
                if not bulletin_input.station:
                    logger.warning("Skipping TAF record without station id")
                    continue
                if bulletin_input.station in result:
                    continue
                result[bulletin_input.station] = BulletinSegmenter.segment(bulletin_input, reference=reference)
        return result

    def fetch_station_weather(
        self,
        stations: List[str],
        now: Optional[datetime] = None,
        include_tafs: bool = True,
    ) -> StationWeatherCollection:
        """
        Fetch METARs and TAFs and summarize them per requested station.

        Every requested station is present in the result; stations without
        a report are classified UNKNOWN.

        Args:
            stations: Station identifiers
            now: Instant used for forecast selection (defaults to the current time)
            include_tafs: Also fetch TAFs

        Returns:
            StationWeatherCollection in request order
        """
        now = now or datetime.now(tz=timezone.utc)
        metars = self.fetch_metars(stations)
        tafs = self.fetch_tafs(stations, reference=now) if include_tafs else {}

        entries = []
        for station in self._clean(stations):
            observation, category = metars.get(station, (None, FlightCategory.UNKNOWN))
            if observation is None:
                logger.info("No METAR found for %s", station)
            entry = StationWeather(
                station=station,
                observation=observation,
                category=category,
                bulletin=tafs.get(station),
            )
            entries.append(entry.with_forecast_at(now))

        collection = StationWeatherCollection(entries)
        logger.debug(
            "Station weather: %d stations, %d with METAR, %d with TAF",
            len(entries),
            sum(1 for e in entries if e.observation is not None),
            sum(1 for e in entries if e.bulletin is not None),
        )
        return collection

    def _fetch_json(self, endpoint: str, params: dict) -> List[Dict[str, Any]]:
        """
        Make an HTTP GET request and return the decoded record list.

        Handles 204 (no data) and both bare-list and ``{"data": [...]}``
        response shapes. Failures are logged and return an empty list.
        """
        url = f"{self._base_url}/{endpoint}"
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
            if response.status_code == 204:
                return []
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.warning("AWC fetch failed for %s: %s", endpoint, e)
            return []
        except ValueError as e:
            logger.warning("AWC returned non-JSON body for %s: %s", endpoint, e)
            return []

        if isinstance(payload, dict):
            payload = payload.get("data") or []
        if not isinstance(payload, list):
            logger.warning("Unexpected AWC payload for %s: %s", endpoint, type(payload).__name__)
            return []
        return [record for record in payload if isinstance(record, dict)]

    def _batches(self, stations: List[str]) -> Iterator[List[str]]:
        """Yield batches of station ids respecting the batch size limit."""
        cleaned = self._clean(stations)
        for i in range(0, len(cleaned), self._batch_size):
            yield cleaned[i:i + self._batch_size]

    @staticmethod
    def _clean(stations: List[str]) -> List[str]:
        seen = []
        for station in stations:
            station = station.strip().upper()
            if station and station not in seen:
                seen.append(station)
        return seen
