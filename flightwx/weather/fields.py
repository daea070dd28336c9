"""
Field extraction from METAR/TAF text.

Tokens are decoded by ``metar_taf_parser``. This module turns the decoded
container into WeatherFields and adds the rules the parser has no notion
of: structured sibling fields, unbounded-visibility markers, clear-sky
markers, automated ``///`` cloud layers and embedded category tokens.
Extraction never raises: absent or unparseable fields are left as None.
"""

import logging
import re
from math import inf
from typing import Optional, List, Tuple, Any

from metar_taf_parser.model.enum import CloudQuantity
from metar_taf_parser.parser.parser import MetarParser

from flightwx.weather.models import WeatherFields, FlightCategory
from flightwx.weather.adapter import ReportInput

logger = logging.getLogger(__name__)

# Meters to statute miles conversion
METERS_TO_SM = 0.000621371

# Wind speed conversions to knots
_MPS_TO_KT = 1.94384
_KMH_TO_KT = 0.539957

_CEILING_QUANTITIES = (CloudQuantity.BKN, CloudQuantity.OVC)
_LAYER_QUANTITIES = (CloudQuantity.FEW, CloudQuantity.SCT, CloudQuantity.BKN, CloudQuantity.OVC)

_REPORT_PREFIX = re.compile(r'^(?:METAR|SPECI)(?:\s+COR)?(?:\s+|$)|^COR\s+')


class FieldExtractor:
    """
    Extract weather fields from report text and optional structured fields.

    Example:
        fields = FieldExtractor.extract("KJFK 211200Z 18008KT 2SM BR OVC005")
        fields.visibility_sm  # 2.0
        fields.ceiling_ft     # 500.0
    """

    # Visibility "greater than N miles" marker
    VIS_PLUS_SM_PATTERN = re.compile(r'(?<![\w/])P\d+\s*SM\b')
    # Statute-mile groups the parser's tokenizer drops (decimals, "10 SM", "M1/4SM")
    VIS_STATUTE_MILES_PATTERN = re.compile(
        r'(?<![\w/.])M?(\d+(?:\s+\d+/\d+|/\d+|\.\d+)?)\s*SM\b'
    )

    CLEAR_SKY_PATTERN = re.compile(r'\b(?:CLR|SKC|CAVOK|NSC|NCD)\b')

    # Automated-station layers with an unknown height or cloud type, e.g. BKN008///
    AUTOMATED_LAYER_PATTERN = re.compile(
        r'(?<![\w/])(FEW|SCT|BKN|OVC|VV)(\d{3}|///)(CB|TCU|///)?(?![\w/])'
    )

    CATEGORY_PATTERN = re.compile(r'\b(LIFR|IFR|MVFR|VFR)\b')

    REMARKS_PATTERN = re.compile(r'\bRMK\b')

    @classmethod
    def extract(
        cls,
        text: str,
        structured: Optional[ReportInput] = None,
    ) -> WeatherFields:
        """
        Decode a report and extract all fields.

        Args:
            text: Report text (normalized to uppercase here)
            structured: Optional structured sibling fields from the upstream source

        Returns:
            WeatherFields with absent fields left as None
        """
        full = (text or "").upper()
        return cls.from_container(cls.parse_report(full), full, structured)

    @classmethod
    def parse_report(cls, text: str) -> Optional[Any]:
        """
        Run the METAR parser over a report.

        Args:
            text: Report text, with or without a METAR/SPECI/COR prefix

        Returns:
            Parsed Metar object, or None if the parser rejects the text
        """
        clean = _REPORT_PREFIX.sub('', (text or "").strip().upper())
        if not clean:
            return None

        try:
            return MetarParser().parse(clean)
        except Exception as e:
            logger.debug("Failed to parse report: %s - %s", clean[:80], e)
            return None

    @classmethod
    def from_container(
        cls,
        container: Optional[Any],
        text: str,
        structured: Optional[ReportInput] = None,
    ) -> WeatherFields:
        """
        Build WeatherFields from a parsed METAR, TAF or TAF trend.

        Args:
            container: Object decoded by metar_taf_parser, or None when the
                parser rejected the text
            text: The raw text the container was decoded from
            structured: Optional structured sibling fields

        Returns:
            WeatherFields with absent fields left as None
        """
        full = (text or "").upper()
        body = cls.strip_remarks(full)

        visibility = cls.extract_visibility(container, body, structured)
        ceiling, unrestricted = cls.extract_ceiling(container, body)
        wind_dir, wind_variable, wind_speed, wind_gust = cls.extract_wind(container, structured)

        category_token = None
        if structured is not None and structured.category is not None:
            category_token = structured.category
        else:
            category_token = cls.extract_category_token(full)

        return WeatherFields(
            visibility_sm=visibility,
            ceiling_ft=ceiling,
            wind_direction=wind_dir,
            wind_variable=wind_variable,
            wind_speed=wind_speed,
            wind_gust=wind_gust,
            clouds=tuple(cls.extract_clouds(container, body)),
            weather=tuple(cls.extract_weather(container)),
            category_token=category_token,
            clear_sky=cls.has_clear_sky(container, body),
            unrestricted_clouds=unrestricted,
        )

    @classmethod
    def strip_remarks(cls, text: str) -> str:
        """Drop the RMK section."""
        match = cls.REMARKS_PATTERN.search(text)
        return text[:match.start()] if match else text

    # --- Visibility ---

    @classmethod
    def extract_visibility(
        cls,
        container: Optional[Any],
        text: str,
        structured: Optional[ReportInput] = None,
    ) -> Optional[float]:
        """
        Visibility in statute miles, ``inf`` when unbounded.

        A structured value is preferred. ``visibility_sm`` is trusted as
        miles. An ambiguous ``visibility`` is read as miles when the raw
        text carries an ``SM`` marker, otherwise as meters.

        From the text, a ``P6SM`` marker wins, then the parser's decoded
        distance, then statute-mile groups the parser skipped, then CAVOK
        or a clear-sky marker (both unbounded).
        """
        if structured is not None:
            if structured.visibility_sm is not None and structured.visibility_sm > 0:
                return structured.visibility_sm
            if structured.visibility is not None and structured.visibility > 0:
                if 'SM' in text:
                    return structured.visibility
                return structured.visibility * METERS_TO_SM

        if cls.VIS_PLUS_SM_PATTERN.search(text):
            return inf

        vis = getattr(container, 'visibility', None)
        distance = getattr(vis, 'distance', None) if vis else None
        if distance:
            parsed = cls.parse_distance(distance)
            if parsed is not None:
                return parsed

        match = cls.VIS_STATUTE_MILES_PATTERN.search(text)
        if match:
            parsed = _safe_parse_fraction(match.group(1))
            if parsed is not None:
                return parsed

        if getattr(container, 'cavok', False) or cls.CLEAR_SKY_PATTERN.search(text):
            return inf

        return None

    @classmethod
    def parse_distance(cls, distance: str) -> Optional[float]:
        """
        Convert a decoded visibility distance to statute miles.

        Handles "2SM", "1 1/2SM", "800m", "10km" and the "> 10km" form the
        parser uses for 9999, which is treated as unbounded.
        """
        text = str(distance).strip().upper()
        if not text:
            return None
        if text.startswith('>') or text.startswith('P'):
            return inf
        text = text.lstrip('<').strip()

        if text.endswith('SM'):
            return _safe_parse_fraction(text[:-2])
        if text.endswith('KM'):
            value = _safe_parse_fraction(text[:-2])
            return value * 1000 * METERS_TO_SM if value is not None else None
        if text.endswith('M'):
            text = text[:-1]

        value = _safe_parse_fraction(text)
        if value is None:
            return None
        if value >= 9999:
            return inf
        return value * METERS_TO_SM

    # --- Ceiling & clouds ---

    @classmethod
    def extract_ceiling(cls, container: Optional[Any], text: str) -> Tuple[Optional[float], bool]:
        """
        Ceiling in feet AGL.

        Ceiling is the lowest BKN, OVC or VV layer. FEW/SCT layers never
        form a ceiling. Without a ceiling layer, a clear-sky marker or
        FEW/SCT-only cloud makes the ceiling unlimited (``inf``); with no
        cloud information at all the ceiling is None.

        Returns:
            (ceiling_ft, unrestricted_clouds)
        """
        heights = []
        has_layers = False
        for cloud in getattr(container, 'clouds', None) or []:
            quantity = getattr(cloud, 'quantity', None)
            height = getattr(cloud, 'height', None)
            if quantity in _LAYER_QUANTITIES:
                has_layers = True
            if quantity in _CEILING_QUANTITIES and height is not None:
                heights.append(height)

        vertical = getattr(container, 'vertical_visibility', None)
        if vertical is not None:
            heights.append(vertical)

        for match in cls.AUTOMATED_LAYER_PATTERN.finditer(text):
            if '///' not in match.group(0):
                continue
            coverage, height = match.group(1), match.group(2)
            has_layers = has_layers or coverage in ('FEW', 'SCT')
            if coverage in ('BKN', 'OVC', 'VV') and height.isdigit():
                heights.append(int(height) * 100)

        if heights:
            return float(min(heights)), False

        if getattr(container, 'cavok', False) or cls.CLEAR_SKY_PATTERN.search(text):
            return inf, False

        if has_layers:
            return inf, True

        return None, False

    @classmethod
    def extract_clouds(cls, container: Optional[Any], text: str = "") -> List[str]:
        """
        Cloud layer tokens, e.g. ``["FEW008", "BKN030CB", "VV002"]``.

        Layers decoded by the parser come first in textual order, followed
        by automated ``///`` layers the parser could not decode.
        """
        result = []
        for cloud in getattr(container, 'clouds', None) or []:
            quantity = getattr(cloud, 'quantity', None)
            height = getattr(cloud, 'height', None)
            if quantity not in _LAYER_QUANTITIES or height is None:
                continue
            cloud_type = getattr(cloud, 'type', None)
            suffix = getattr(cloud_type, 'name', '') if cloud_type else ''
            result.append(f"{quantity.name}{int(height) // 100:03d}{suffix}")

        vertical = getattr(container, 'vertical_visibility', None)
        if vertical is not None:
            result.append(f"VV{int(vertical) // 100:03d}")

        for match in cls.AUTOMATED_LAYER_PATTERN.finditer(text):
            token = match.group(0)
            if '///' not in token:
                continue
            if token[:-3] in result or token in result:
                continue
            result.append(token)
        return result

    @classmethod
    def has_clear_sky(cls, container: Optional[Any], text: str) -> bool:
        return bool(getattr(container, 'cavok', False) or cls.CLEAR_SKY_PATTERN.search(text))

    # --- Wind ---

    @classmethod
    def extract_wind(
        cls,
        container: Optional[Any],
        structured: Optional[ReportInput] = None,
    ) -> Tuple[Optional[int], bool, Optional[int], Optional[int]]:
        """
        Extract wind. Returns (direction, variable, speed_kt, gust_kt).

        Structured wind fields are used only when the text has no wind group.
        """
        wind = getattr(container, 'wind', None)
        speed = getattr(wind, 'speed', None) if wind else None
        if speed is not None:
            unit = getattr(wind, 'unit', 'KT') or 'KT'
            gust = getattr(wind, 'gust', None)
            degrees = getattr(wind, 'degrees', None)
            variable = getattr(wind, 'direction', None) == 'VRB' or degrees is None
            direction = None if variable else degrees
            return (
                direction,
                variable,
                _to_knots(speed, unit),
                _to_knots(gust, unit) if gust else None,
            )

        if structured is not None and structured.wind_speed is not None:
            return (
                structured.wind_direction,
                structured.wind_variable,
                structured.wind_speed,
                structured.wind_gust,
            )

        return None, False, None, None

    # --- Weather & category ---

    @classmethod
    def extract_weather(cls, container: Optional[Any]) -> List[str]:
        """Present-weather codes such as ``-SHRA`` or ``VCTS``."""
        result = []
        for condition in getattr(container, 'weather_conditions', None) or []:
            parts = []
            intensity = getattr(condition, 'intensity', None)
            if intensity:
                parts.append(getattr(intensity, 'value', str(intensity)))
            descriptive = getattr(condition, 'descriptive', None)
            if descriptive:
                parts.append(getattr(descriptive, 'value', str(descriptive)))
            for phenomenon in getattr(condition, 'phenomenons', None) or []:
                parts.append(getattr(phenomenon, 'value', str(phenomenon)))
            if parts:
                result.append("".join(parts))
        return result

    @classmethod
    def extract_category_token(cls, text: str) -> Optional[FlightCategory]:
        """Explicit flight category token embedded in the text, if any."""
        match = cls.CATEGORY_PATTERN.search(text or "")
        if not match:
            return None
        return FlightCategory.from_token(match.group(1))


def _safe_parse_fraction(text: str) -> Optional[float]:
    """
    Parse "2", "0.5", "1/2" or "1 1/2", ignoring an M (less than) prefix.

    Returns None on a zero denominator or anything unparseable.
    """
    text = (text or "").strip().upper()
    if text.startswith('M'):
        text = text[1:].strip()
    if not text:
        return None

    try:
        return float(text)
    except ValueError:
        pass

    whole = 0.0
    if ' ' in text:
        head, text = text.split(None, 1)
        try:
            whole = float(head)
        except ValueError:
            return None

    parts = text.split('/')
    if len(parts) != 2:
        return None
    try:
        num, den = float(parts[0]), float(parts[1])
    except ValueError:
        return None
    if den == 0:
        logger.debug("Zero denominator in visibility fraction %s", text)
        return None
    return whole + num / den


def _to_knots(value: Any, unit: str) -> Optional[int]:
    try:
        value = int(value)
    except (TypeError, ValueError):
        return None
    unit = str(unit).upper().replace('/', '')
    if unit == 'MPS':
        return int(round(value * _MPS_TO_KT))
    if unit == 'KMH':
        return int(round(value * _KMH_TO_KT))
    return value
