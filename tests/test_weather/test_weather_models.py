"""Tests for weather models: FlightCategory ordering, serialization."""

import pytest
from datetime import datetime, timezone
from math import inf

from flightwx.weather.models import (
    FlightCategory,
    ChangeType,
    WeatherFields,
    Observation,
    ForecastPeriod,
    Bulletin,
    UNLIMITED,
)


class TestFlightCategory:
    """Test FlightCategory enum ordering and helpers."""

    def test_ordering_lifr_worst(self):
        assert FlightCategory.LIFR < FlightCategory.IFR
        assert FlightCategory.LIFR < FlightCategory.MVFR
        assert FlightCategory.LIFR < FlightCategory.VFR

    def test_ordering_adjacent(self):
        assert FlightCategory.IFR < FlightCategory.MVFR
        assert FlightCategory.MVFR < FlightCategory.VFR
        assert FlightCategory.VFR >= FlightCategory.VFR

    def test_order_property(self):
        assert FlightCategory.LIFR.order == 0
        assert FlightCategory.VFR.order == 3
        assert FlightCategory.UNKNOWN.order is None

    def test_min_returns_worst(self):
        assert min(FlightCategory.VFR, FlightCategory.IFR) == FlightCategory.IFR

    def test_sorting(self):
        cats = [FlightCategory.VFR, FlightCategory.LIFR, FlightCategory.MVFR, FlightCategory.IFR]
        assert sorted(cats) == [
            FlightCategory.LIFR,
            FlightCategory.IFR,
            FlightCategory.MVFR,
            FlightCategory.VFR,
        ]

    def test_unknown_is_not_comparable(self):
        with pytest.raises(TypeError):
            FlightCategory.UNKNOWN < FlightCategory.VFR
        with pytest.raises(TypeError):
            FlightCategory.IFR > FlightCategory.UNKNOWN

    def test_from_token(self):
        assert FlightCategory.from_token("mvfr") == FlightCategory.MVFR
        assert FlightCategory.from_token(" LIFR ") == FlightCategory.LIFR
        assert FlightCategory.from_token("UNKNOWN") == FlightCategory.UNKNOWN
        assert FlightCategory.from_token("SVFR") is None
        assert FlightCategory.from_token(None) is None
        assert FlightCategory.from_token(3) is None

    def test_worst_ignores_unknown(self):
        assert FlightCategory.worst(FlightCategory.VFR, FlightCategory.UNKNOWN, None) == FlightCategory.VFR
        assert FlightCategory.worst(FlightCategory.MVFR, FlightCategory.LIFR) == FlightCategory.LIFR
        assert FlightCategory.worst(FlightCategory.UNKNOWN) is None

    def test_display(self):
        assert FlightCategory.UNKNOWN.label == "Unknown"
        assert FlightCategory.UNKNOWN.color == "#808080"
        assert FlightCategory.VFR.color == "#00FF00"


class TestWeatherFields:

    def test_unbounded_flags(self):
        fields = WeatherFields(visibility_sm=inf, ceiling_ft=inf)
        assert fields.visibility_unbounded
        assert fields.ceiling_unlimited

    def test_missing_is_not_unbounded(self):
        fields = WeatherFields()
        assert not fields.visibility_unbounded
        assert not fields.ceiling_unlimited
        assert not fields.has_wind

    def test_unlimited_serialization(self):
        data = WeatherFields(visibility_sm=inf, ceiling_ft=1500.0).to_dict()
        assert data['visibility_sm'] == UNLIMITED
        assert data['ceiling_ft'] == 1500.0
        restored = WeatherFields.from_dict(data)
        assert restored.visibility_sm == inf


class TestObservation:

    def test_is_immutable(self):
        obs = Observation(raw_text="KXYZ 010000Z")
        with pytest.raises(AttributeError):
            obs.raw_text = "other"

    def test_dict_round_trip(self):
        obs = Observation(
            raw_text="KJFK 211200Z 18008KT 2SM BR OVC005",
            station="KJFK",
            visibility_sm=2.0,
            ceiling_ft=500.0,
            wind_direction=180,
            wind_speed=8,
            clouds=("OVC005",),
            weather=("BR",),
        )
        assert Observation.from_dict(obs.to_dict()) == obs


class TestForecastPeriod:

    def test_contains_half_open(self):
        start = datetime(2024, 3, 1, 6, tzinfo=timezone.utc)
        end = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)
        period = ForecastPeriod(valid_from=start, valid_to=end)
        assert period.contains(start)
        assert not period.contains(end)

    def test_degenerate(self):
        start = datetime(2024, 3, 1, 6, tzinfo=timezone.utc)
        assert ForecastPeriod(valid_from=start, valid_to=start).is_degenerate
        assert ForecastPeriod().is_degenerate

    def test_dict_round_trip(self):
        period = ForecastPeriod(
            valid_from=datetime(2024, 3, 1, 20, tzinfo=timezone.utc),
            valid_to=datetime(2024, 3, 2, 6, tzinfo=timezone.utc),
            change_type=ChangeType.PROB,
            probability=30,
            ordinal=2,
            flight_category=FlightCategory.LIFR,
            raw_text="PROB30 0120/0206 1/2SM FG",
            visibility_sm=0.5,
            weather=("FG",),
        )
        assert ForecastPeriod.from_dict(period.to_dict()) == period


class TestBulletin:

    def test_len_and_iter(self):
        periods = (ForecastPeriod(ordinal=0), ForecastPeriod(ordinal=1))
        bulletin = Bulletin(station="KXYZ", periods=periods)
        assert len(bulletin) == 2
        assert [p.ordinal for p in bulletin] == [0, 1]

    def test_dict_round_trip(self):
        bulletin = Bulletin(
            raw_text="TAF KXYZ 010600Z 0106/0206 18010KT P6SM",
            station="KXYZ",
            issue_time=datetime(2024, 3, 1, 6, tzinfo=timezone.utc),
            valid_from=datetime(2024, 3, 1, 6, tzinfo=timezone.utc),
            valid_to=datetime(2024, 3, 2, 6, tzinfo=timezone.utc),
            periods=(ForecastPeriod(visibility_sm=inf, flight_category=FlightCategory.VFR),),
        )
        assert Bulletin.from_dict(bulletin.to_dict()) == bulletin
