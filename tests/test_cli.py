"""Tests for the flightwx command line."""

import json

import pytest

from flightwx import cli
from flightwx.weather.collection import StationWeather, StationWeatherCollection
from flightwx.weather.decoder import ReportDecoder
from flightwx.weather.models import FlightCategory

SAMPLE_TAF = "TAF KXYZ 010600Z 0106/0206 18010KT P6SM FEW250 FM012000 22015G25KT 3SM BKN015"


class TestMetarCommand:

    def test_text_output(self, capsys):
        assert cli.main(["metar", "KJFK 211200Z 18008KT 2SM BR OVC005"]) == 0
        out = capsys.readouterr().out
        assert "KJFK: IFR" in out
        assert "vis 2.0SM" in out
        assert "ceiling 500FT" in out

    def test_tokens_joined(self, capsys):
        cli.main(["metar", "KXYZ", "010000Z", "00000KT", "CLR"])
        assert "KXYZ: VFR" in capsys.readouterr().out

    def test_json_output(self, capsys):
        cli.main(["metar", "--json", "KXYZ 010000Z 18010KT P6SM SKC"])
        data = json.loads(capsys.readouterr().out)
        assert data["flight_category"] == "VFR"
        assert data["observation"]["visibility_sm"] == "unlimited"


class TestTafCommand:

    def test_text_output(self, capsys):
        cli.main([
            "taf", SAMPLE_TAF,
            "--reference", "2024-03-01T06:00:00Z",
            "--now", "2024-03-01T21:00:00Z",
        ])
        out = capsys.readouterr().out
        assert "KXYZ: 2 periods" in out
        assert "MVFR" in out
        assert "CURRENT" in out

    def test_json_output(self, capsys):
        cli.main([
            "taf", "--json", SAMPLE_TAF,
            "-r", "2024-03-01T06:00:00Z",
            "-n", "2024-03-01T21:00:00Z",
        ])
        data = json.loads(capsys.readouterr().out)
        assert data["selected_ordinal"] == 1
        assert data["forecast_category"] == "MVFR"
        assert len(data["bulletin"]["periods"]) == 2

    def test_cancelled(self, capsys):
        cli.main(["taf", "TAF KXYZ 010600Z NIL", "-r", "2024-03-01T06:00:00Z"])
        assert "cancelled" in capsys.readouterr().out

    def test_invalid_time(self):
        with pytest.raises(SystemExit):
            cli.main(["taf", SAMPLE_TAF, "--now", "yesterday"])


class TestFetchCommand:

    @pytest.fixture
    def fake_source(self, monkeypatch):
        observation, category = ReportDecoder.decode("KJFK 211200Z 18008KT 2SM BR OVC005")
        weather = StationWeatherCollection([
            StationWeather(station="KJFK", observation=observation, category=category),
            StationWeather(station="KLGA"),
        ])
        calls = []

        class FakeSource:
            def __init__(self, timeout=None):
                calls.append(timeout)

            def fetch_station_weather(self, stations, now=None, include_tafs=True):
                calls.append((tuple(stations), include_tafs))
                return weather

        monkeypatch.setattr(cli, "AwcSource", FakeSource)
        return calls

    def test_text_output(self, capsys, fake_source):
        assert cli.main(["fetch", "KJFK", "KLGA", "--no-taf", "-t", "3"]) == 0
        out = capsys.readouterr().out
        assert "KJFK   IFR" in out
        assert "2 stations: IFR 1, Unknown 1" in out
        assert fake_source == [3.0, (("KJFK", "KLGA"), False)]

    def test_json_output(self, capsys, fake_source):
        cli.main(["fetch", "--json", "KJFK", "KLGA"])
        data = json.loads(capsys.readouterr().out)
        assert [entry["station"] for entry in data] == ["KJFK", "KLGA"]
        assert data[0]["category"] == FlightCategory.IFR.value
        assert data[1]["observation"] is None


def test_command_required():
    with pytest.raises(SystemExit):
        cli.main([])
