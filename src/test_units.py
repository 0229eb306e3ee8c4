"""Tests for weight conversion and rounding."""

import pytest

from units import (
    convert_weight,
    format_number,
    format_weight,
    round_half_up,
    round_weight,
)


class TestConvertWeight:
    def test_kg_to_lbs(self):
        assert convert_weight(100, "kg", "lbs") == pytest.approx(220.462)

    def test_lbs_to_kg(self):
        assert convert_weight(100, "lbs", "kg") == pytest.approx(45.3592)

    def test_same_unit_is_unchanged(self):
        assert convert_weight(62.5, "kg", "kg") == 62.5
        assert convert_weight(135, "lbs", "lbs") == 135


class TestRoundHalfUp:
    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(3.5) == 4
        assert round_half_up(-2.5) == -2

    def test_decimals(self):
        assert round_half_up(4.25, 1) == pytest.approx(4.3)
        assert round_half_up(4.24, 1) == pytest.approx(4.2)


class TestRoundWeight:
    def test_kg_rounds_to_half_kilo(self):
        assert round_weight(101.2, "kg") == 101.0
        assert round_weight(101.25, "kg") == 101.5
        assert round_weight(101.8, "kg") == 102.0

    def test_lbs_rounds_to_whole_pound(self):
        assert round_weight(100.4, "lbs") == 100
        assert round_weight(100.5, "lbs") == 101


def test_format_weight():
    assert format_weight(100, "kg") == "100.0 kg"
    assert format_weight(225.55, "lbs", decimals=2) == "225.55 lbs"


def test_format_number_drops_trailing_zeros():
    assert format_number(100.0) == "100"
    assert format_number(2.5) == "2.5"
    assert format_number(1.25) == "1.25"


@pytest.mark.parametrize("weight", [0.5, 2.5, 20, 62.5, 100, 142.5, 317.25])
def test_conversion_round_trip(weight):
    converted = convert_weight(convert_weight(weight, "kg", "lbs"), "lbs", "kg")

    assert converted == pytest.approx(weight, rel=1e-5)
