"""Tests for current-conditions report decoding."""

import pytest
from math import inf

from flightwx.weather.adapter import ReportInput
from flightwx.weather.decoder import ReportDecoder
from flightwx.weather.models import FlightCategory, Observation


class TestDecodeText:

    def test_ifr_report(self):
        observation, category = ReportDecoder.decode(
            "METAR KJFK 211200Z 18008KT 2SM BR OVC005 12/11 A2990"
        )
        assert category == FlightCategory.IFR
        assert observation.station == "KJFK"
        assert observation.visibility_sm == 2.0
        assert observation.ceiling_ft == 500.0
        assert observation.raw_text == "METAR KJFK 211200Z 18008KT 2SM BR OVC005 12/11 A2990"

    def test_overcast_500_one_mile(self):
        assert ReportDecoder.category("KXYZ 010000Z 00000KT 1SM BR OVC005") == FlightCategory.IFR

    def test_mvfr_report(self):
        assert ReportDecoder.category("KXYZ 010000Z 18010KT 3SM BKN015") == FlightCategory.MVFR

    def test_metric_lifr_report(self):
        observation, category = ReportDecoder.decode("LFPG 211230Z 24005KT 0800 FG VV002")
        assert category == FlightCategory.LIFR
        assert observation.ceiling_ft == 200.0

    def test_automated_broken_layer_is_ifr(self):
        observation, category = ReportDecoder.decode(
            "METAR EGLL 211150Z AUTO 24010KT 9999 BKN008/// 12/11 Q1013"
        )
        assert observation.ceiling_ft == 800.0
        assert category == FlightCategory.IFR

    def test_automated_overcast_layer_is_lifr(self):
        assert ReportDecoder.category(
            "METAR EGLL 211150Z AUTO 24010KT 9999 OVC003/// 12/11 Q1013"
        ) == FlightCategory.LIFR

    def test_cavok_is_vfr(self):
        observation, category = ReportDecoder.decode("LFPG 211230Z 24005KT CAVOK 20/10 Q1015")
        assert category == FlightCategory.VFR
        assert observation.visibility_unbounded
        assert observation.ceiling_unlimited

    def test_clear_without_visibility_is_vfr(self):
        assert ReportDecoder.category("KXYZ 010000Z 00000KT CLR") == FlightCategory.VFR

    def test_scattered_only_is_vfr(self):
        observation, category = ReportDecoder.decode("KXYZ 010000Z 18010KT FEW030 SCT080")
        assert category == FlightCategory.VFR
        assert observation.ceiling_ft == inf
        assert observation.unrestricted_clouds

    def test_no_usable_fields_is_unknown(self):
        observation, category = ReportDecoder.decode("KXYZ 010000Z 18010KT")
        assert category == FlightCategory.UNKNOWN
        assert observation.visibility_sm is None
        assert observation.ceiling_ft is None

    def test_category_token_in_text(self):
        assert ReportDecoder.category("KXYZ 010000Z 10SM SKC MVFR") == FlightCategory.MVFR

    @pytest.mark.parametrize("report", ["", None, 42])
    def test_garbage_never_raises(self, report):
        observation, category = ReportDecoder.decode(report)
        assert isinstance(observation, Observation)
        assert category == FlightCategory.UNKNOWN

    def test_idempotent(self):
        text = "KBOS 211254Z 27015G25KT 1 1/2SM -SN BKN008 OVC015 M02/M05 A2985 RMK AO2"
        assert ReportDecoder.decode(text) == ReportDecoder.decode(text)


class TestDecodeStructured:

    def test_explicit_upstream_category_wins(self):
        record = {"icaoId": "KXYZ", "rawOb": "KXYZ 010000Z 18010KT 10SM CLR", "fltCat": "IFR"}
        assert ReportDecoder.category(record) == FlightCategory.IFR

    def test_invalid_upstream_category_ignored(self):
        record = {"icaoId": "KXYZ", "rawOb": "KXYZ 010000Z 18010KT 10SM CLR", "fltCat": "BOGUS"}
        assert ReportDecoder.category(record) == FlightCategory.VFR

    def test_structured_visibility_in_miles(self):
        record = {"icaoId": "KXYZ", "rawOb": "KXYZ 010000Z 18010KT 10SM FEW250", "visib": "10+"}
        observation, category = ReportDecoder.decode(record)
        assert observation.visibility_sm == 10.0
        assert category == FlightCategory.VFR

    def test_structured_visibility_in_meters(self):
        record = {"icaoId": "LFPG", "rawOb": "LFPG 010000Z 18010KT 0800 FG", "visib": 800}
        observation, category = ReportDecoder.decode(record)
        assert observation.visibility_sm == pytest.approx(0.497, abs=0.001)
        assert category == FlightCategory.LIFR

    def test_alternate_field_names(self):
        record = {
            "stationId": "kxyz",
            "rawText": "KXYZ 010000Z 3SM BR BKN015",
            "visibilityStatuteMi": 3.0,
        }
        observation, category = ReportDecoder.decode(record)
        assert observation.station == "KXYZ"
        assert category == FlightCategory.MVFR

    def test_structured_wind_fallback(self):
        record = {"icaoId": "KXYZ", "rawOb": "KXYZ 010000Z 10SM CLR", "wdir": "VRB", "wspd": 4}
        observation, _ = ReportDecoder.decode(record)
        assert observation.wind_variable
        assert observation.wind_direction is None
        assert observation.wind_speed == 4

    def test_report_input_accepted(self):
        report = ReportInput(raw_text="KXYZ 010000Z 1/2SM FG", station="KXYZ")
        assert ReportDecoder.category(report) == FlightCategory.LIFR
