"""
Tests for the Input Normalizer and the measurement schema boundary.

  1. Lenient conversion: bad values become None, never raise
  2. Strict conversion: bad values raise ValueError
  3. Rounding helpers (half-up)
  4. MeasurementInput rejects malformed, negative and over-precise values
"""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from nutricalc.schemas import MeasurementInput
from nutricalc.services.normalizer import (
    parse_measurement_value,
    round_decimal,
    round_kcal,
    to_decimal_or_none,
)


class TestToDecimalOrNone:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("72.50", Decimal("72.50")),
            (72, Decimal("72")),
            (72.1, Decimal("72.1")),
            (Decimal("0.35"), Decimal("0.35")),
            ("12,5", Decimal("12.5")),
            ("  3 ", Decimal("3")),
        ],
    )
    def test_valid_values(self, raw, expected):
        assert to_decimal_or_none(raw) == expected

    def test_float_keeps_short_representation(self):
        """72.1 must not turn into 72.099999999999994315658..."""
        assert str(to_decimal_or_none(72.1)) == "72.1"

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12kg", "NaN", "inf", float("nan"), True])
    def test_unusable_values_become_none(self, raw):
        assert to_decimal_or_none(raw) is None


class TestParseMeasurementValue:

    def test_absent_is_none(self):
        assert parse_measurement_value(None) is None
        assert parse_measurement_value("") is None

    def test_valid_text(self):
        assert parse_measurement_value("175.00") == Decimal("175.00")

    @pytest.mark.parametrize("raw", ["abc", "NaN", "Infinity", "1.2.3"])
    def test_malformed_raises(self, raw):
        with pytest.raises(ValueError):
            parse_measurement_value(raw)


class TestRounding:

    def test_round_half_up(self):
        assert round_decimal(Decimal("23.505")) == Decimal("23.51")
        assert round_decimal(Decimal("23.504")) == Decimal("23.50")

    def test_round_three_places(self):
        assert round_decimal(Decimal("0.8125"), 3) == Decimal("0.813")

    def test_round_kcal(self):
        assert round_kcal(Decimal("1699.5")) == Decimal("1700")
        assert round_kcal(Decimal("1699.49")) == Decimal("1699")

    def test_beyond_default_context_precision(self):
        """A 30-digit value still rounds instead of raising InvalidOperation."""
        value = Decimal("3.265306122448979591836734694E+29")
        assert round_decimal(value) == value
        assert round_kcal(value) == value

    def test_none_passes_through(self):
        assert round_decimal(None) is None
        assert round_kcal(None) is None


class TestMeasurementInputValidation:

    def test_accepts_decimal_text_and_numbers(self):
        m = MeasurementInput(weight_kg="72.00", height_cm=175, skinfold_triceps=12.5)
        assert m.weight_kg == Decimal("72.00")
        assert m.height_cm == Decimal("175")
        assert m.skinfold_triceps == Decimal("12.5")
        assert m.circ_waist is None

    def test_blank_text_is_absent(self):
        assert MeasurementInput(weight_kg="").weight_kg is None

    @pytest.mark.parametrize("raw", ["abc", "NaN", "-1", "72.123"])
    def test_rejects_invalid_values(self, raw):
        with pytest.raises(ValidationError):
            MeasurementInput(weight_kg=raw)

    @pytest.mark.parametrize(
        "field, raw",
        [
            ("weight_kg", "1e30"),
            ("weight_kg", "700.01"),
            ("height_cm", "300.01"),
            ("circ_waist", "1000"),
            ("skinfold_triceps", "100.5"),
        ],
    )
    def test_rejects_oversized_values(self, field, raw):
        with pytest.raises(ValidationError):
            MeasurementInput(**{field: raw})

    def test_accepts_values_at_the_bounds(self):
        m = MeasurementInput(weight_kg="700", height_cm="300", skinfold_calf="100")
        assert m.weight_kg == Decimal("700")
        assert m.skinfold_calf == Decimal("100")
