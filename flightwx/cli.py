#!/usr/bin/env python3

"""Command line interface: decode reports, bulletins, or fetch live data."""

import sys
import json
import argparse
import logging
from datetime import datetime, timezone
from typing import List, Optional

from flightwx import config
from flightwx.sources import AwcSource
from flightwx.weather.adapter import parse_timestamp
from flightwx.weather.decoder import ReportDecoder
from flightwx.weather.models import Bulletin, ForecastPeriod, Observation, FlightCategory
from flightwx.weather.query import BulletinQuery
from flightwx.weather.segmenter import BulletinSegmenter

logger = logging.getLogger(__name__)


def _format_limit(value: Optional[float], unit: str, unlimited: str) -> str:
    if value is None:
        return "-"
    if value == float("inf"):
        return unlimited
    return f"{value:.1f}{unit}" if unit == "SM" else f"{int(value)}{unit}"


def _format_wind(fields) -> str:
    if fields.wind_speed is None:
        return "-"
    direction = "VRB" if fields.wind_variable or fields.wind_direction is None else f"{fields.wind_direction:03d}"
    gust = f"G{fields.wind_gust}" if fields.wind_gust else ""
    return f"{direction}@{fields.wind_speed}{gust}KT"


def _describe(fields) -> str:
    parts = [
        f"vis {_format_limit(fields.visibility_sm, 'SM', 'P6SM')}",
        f"ceiling {_format_limit(fields.ceiling_ft, 'FT', 'unlimited')}",
        f"wind {_format_wind(fields)}",
    ]
    if fields.clouds:
        parts.append(" ".join(fields.clouds))
    if fields.weather:
        parts.append(" ".join(fields.weather))
    return ", ".join(parts)


def print_observation(observation: Observation, category: FlightCategory) -> None:
    print(f"{observation.station or '?'}: {category.label}")
    print(f"  {_describe(observation)}")


def print_bulletin(bulletin: Bulletin, now: datetime) -> None:
    if bulletin.cancelled:
        print(f"{bulletin.station or '?'}: bulletin cancelled or NIL")
        return

    selected = BulletinQuery.select(bulletin, now)
    print(f"{bulletin.station or '?'}: {len(bulletin.periods)} periods")
    for period in bulletin.periods:
        marker = "*" if period is selected else " "
        print(f" {marker} {_format_period(period, now)}")
        print(f"      {_describe(period)}")
    if selected is None:
        print("  no forecast category available")


def _format_period(period: ForecastPeriod, now: datetime) -> str:
    label = period.change_type.value
    if period.probability is not None:
        label = f"{label}{period.probability}"
    if period.valid_from is None:
        return f"{label:<8} {period.flight_category.label}"

    window = f"{period.valid_from:%d %H:%MZ} - {period.valid_to:%d %H:%MZ}"
    status = BulletinQuery.status(period, now)
    line = f"{label:<8} {period.flight_category.label:<7} {window}"
    if status is not None:
        line += f"  {status.value}"
    return line


def _parse_time_arg(value: Optional[str], name: str) -> Optional[datetime]:
    if value is None:
        return None
    parsed = parse_timestamp(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(f"Invalid {name} timestamp: {value}")
    return parsed


def run_metar(args) -> int:
    observation, category = ReportDecoder.decode(" ".join(args.text))
    if args.json:
        print(json.dumps({
            'observation': observation.to_dict(),
            'flight_category': category.value,
        }, indent=2))
    else:
        print_observation(observation, category)
    return 0


def run_taf(args) -> int:
    now = _parse_time_arg(args.now, "now") or datetime.now(tz=timezone.utc)
    reference = _parse_time_arg(args.reference, "reference") or now
    bulletin = BulletinSegmenter.segment(" ".join(args.text), reference=reference)
    if args.json:
        selected = BulletinQuery.select(bulletin, now)
        print(json.dumps({
            'bulletin': bulletin.to_dict(),
            'selected_ordinal': selected.ordinal if selected else None,
            'forecast_category': selected.flight_category.value if selected else None,
        }, indent=2))
    else:
        print_bulletin(bulletin, now)
    return 0


def run_fetch(args) -> int:
    now = datetime.now(tz=timezone.utc)
    source = AwcSource(timeout=args.timeout)
    weather = source.fetch_station_weather(args.stations, now=now, include_tafs=not args.no_taf)

    if args.json:
        print(json.dumps([entry.to_dict() for entry in weather], indent=2))
        return 0

    for entry in weather:
        forecast = entry.forecast_category.label if entry.forecast_category else "-"
        print(f"{entry.station:<6} {entry.category.label:<8} forecast {forecast}")
        if entry.observation is not None:
            print(f"       {entry.observation.raw_text}")

    counts = weather.category_counts()
    summary = ", ".join(f"{cat.label} {n}" for cat, n in counts.items() if n)
    print(f"{len(weather)} stations: {summary}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Aviation weather decoder and flight category tool')
    parser.add_argument('-v', '--verbose', help='Verbose output', action='store_true')
    subparsers = parser.add_subparsers(dest='command')
    subparsers.required = True

    metar = subparsers.add_parser('metar', help='Decode a current-conditions report')
    metar.add_argument('text', help='Raw report text', nargs='+')
    metar.add_argument('--json', help='Print JSON', action='store_true')
    metar.set_defaults(func=run_metar)

    taf = subparsers.add_parser('taf', help='Decode a forecast bulletin')
    taf.add_argument('text', help='Raw bulletin text', nargs='+')
    taf.add_argument('-r', '--reference', help='Instant near the issue time (ISO 8601, default: now)')
    taf.add_argument('-n', '--now', help='Query instant (ISO 8601, default: now)')
    taf.add_argument('--json', help='Print JSON', action='store_true')
    taf.set_defaults(func=run_taf)

    fetch = subparsers.add_parser('fetch', help='Fetch live data from aviationweather.gov')
    fetch.add_argument('stations', help='Station identifiers', nargs='+')
    fetch.add_argument('-t', '--timeout', help='HTTP timeout in seconds', type=float, default=config.HTTP_TIMEOUT)
    fetch.add_argument('--no-taf', help='Skip forecast bulletins', action='store_true')
    fetch.add_argument('--json', help='Print JSON', action='store_true')
    fetch.set_defaults(func=run_fetch)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL, logging.INFO),
        format=config.LOG_FORMAT,
    )
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return args.func(args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))


if __name__ == '__main__':
    sys.exit(main())
