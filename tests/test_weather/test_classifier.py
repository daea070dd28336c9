"""Tests for flight category classification."""

import pytest
from math import inf

from flightwx.weather.classifier import FlightCategoryClassifier
from flightwx.weather.models import FlightCategory, WeatherFields


class TestVisibilityThresholds:

    @pytest.mark.parametrize("visibility,expected", [
        (0.0, FlightCategory.LIFR),
        (0.25, FlightCategory.LIFR),
        (0.99, FlightCategory.LIFR),
        (1.0, FlightCategory.IFR),
        (2.99, FlightCategory.IFR),
        (3.0, FlightCategory.MVFR),
        (4.99, FlightCategory.MVFR),
        (5.0, FlightCategory.VFR),
        (10.0, FlightCategory.VFR),
        (inf, FlightCategory.VFR),
    ])
    def test_boundaries(self, visibility, expected):
        assert FlightCategoryClassifier.visibility_category(visibility) == expected
        assert FlightCategoryClassifier.classify(visibility_sm=visibility) == expected


class TestCeilingThresholds:

    @pytest.mark.parametrize("ceiling,expected", [
        (0.0, FlightCategory.LIFR),
        (200.0, FlightCategory.LIFR),
        (499.0, FlightCategory.LIFR),
        (500.0, FlightCategory.IFR),
        (999.0, FlightCategory.IFR),
        (1000.0, FlightCategory.MVFR),
        (2999.0, FlightCategory.MVFR),
        (3000.0, FlightCategory.VFR),
        (25000.0, FlightCategory.VFR),
        (inf, FlightCategory.VFR),
    ])
    def test_boundaries(self, ceiling, expected):
        assert FlightCategoryClassifier.ceiling_category(ceiling) == expected
        assert FlightCategoryClassifier.classify(ceiling_ft=ceiling) == expected


class TestCombined:

    @pytest.mark.parametrize("visibility", [0.5, 1.0, 3.0, 5.0, inf])
    @pytest.mark.parametrize("ceiling", [200.0, 500.0, 1000.0, 3000.0, inf])
    def test_worse_of_both_wins(self, visibility, ceiling):
        result = FlightCategoryClassifier.classify(visibility_sm=visibility, ceiling_ft=ceiling)
        assert result == min(
            FlightCategoryClassifier.visibility_category(visibility),
            FlightCategoryClassifier.ceiling_category(ceiling),
        )

    def test_low_ceiling_good_visibility(self):
        assert FlightCategoryClassifier.classify(visibility_sm=10.0, ceiling_ft=400.0) == FlightCategory.LIFR

    def test_good_ceiling_low_visibility(self):
        assert FlightCategoryClassifier.classify(visibility_sm=2.0, ceiling_ft=inf) == FlightCategory.IFR

    def test_overcast_500_with_one_mile_is_ifr(self):
        assert FlightCategoryClassifier.classify(visibility_sm=1.0, ceiling_ft=500.0) == FlightCategory.IFR

    def test_three_miles_broken_1500_is_mvfr(self):
        assert FlightCategoryClassifier.classify(visibility_sm=3.0, ceiling_ft=1500.0) == FlightCategory.MVFR


class TestMissingData:

    def test_nothing_known(self):
        assert FlightCategoryClassifier.classify() == FlightCategory.UNKNOWN

    def test_clear_sky_without_numbers(self):
        assert FlightCategoryClassifier.classify(clear_sky=True) == FlightCategory.VFR

    def test_single_value_ignores_clear_flag(self):
        assert FlightCategoryClassifier.classify(visibility_sm=0.5, clear_sky=True) == FlightCategory.LIFR


class TestExplicitCategory:

    def test_explicit_short_circuits(self):
        result = FlightCategoryClassifier.classify(visibility_sm=10.0, ceiling_ft=inf, explicit="IFR")
        assert result == FlightCategory.IFR

    def test_explicit_case_insensitive(self):
        assert FlightCategoryClassifier.classify(explicit="lifr") == FlightCategory.LIFR

    def test_invalid_explicit_ignored(self):
        result = FlightCategoryClassifier.classify(visibility_sm=4.0, explicit="SVFR")
        assert result == FlightCategory.MVFR


class TestClassifyFields:

    def test_unrestricted_clouds_count_as_clear(self):
        fields = WeatherFields(unrestricted_clouds=True)
        assert FlightCategoryClassifier.classify_fields(fields) == FlightCategory.VFR

    def test_category_token_used(self):
        fields = WeatherFields(visibility_sm=10.0, category_token=FlightCategory.MVFR)
        assert FlightCategoryClassifier.classify_fields(fields) == FlightCategory.MVFR

    def test_empty_fields(self):
        assert FlightCategoryClassifier.classify_fields(WeatherFields()) == FlightCategory.UNKNOWN
