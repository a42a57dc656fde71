"""Unit tests for quantity kinds and their scaling laws."""

from __future__ import annotations

import math

import pytest

from pymppt.exceptions import EncodingOverflowError
from pymppt.quantities import (
    RAW_MAX,
    Quantity,
    QuantityKind,
    decode,
    encode,
    format_value,
)
from pymppt.scaling import ScaleContext

ALL_KINDS = list(QuantityKind)


class TestDecode:
    """Test decode() for every kind."""

    def test_voltage_half_scale(self, unity_context: ScaleContext) -> None:
        """0x4000 at V_PU = 1 is 0.5 V."""
        assert decode(QuantityKind.VOLTAGE, 0x4000, unity_context) == 0.5

    def test_voltage_uses_voltage_scale(self) -> None:
        """Voltage multiplies by V_PU, not I_PU."""
        ctx = ScaleContext(180.0, 80.0)
        assert decode(QuantityKind.VOLTAGE, 32768, ctx) == 180.0

    def test_current_uses_current_scale(self) -> None:
        """Current multiplies by I_PU."""
        ctx = ScaleContext(180.0, 80.0)
        assert decode(QuantityKind.CURRENT, 32768, ctx) == 80.0

    def test_voltage_percentage_ignores_context(self) -> None:
        """32768 is 50 % whatever the scale factors are."""
        assert decode(QuantityKind.VOLTAGE_PERCENTAGE, 32768, ScaleContext(1.0, 1.0)) == 50.0
        assert decode(QuantityKind.VOLTAGE_PERCENTAGE, 32768, ScaleContext(180.0, 80.0)) == 50.0

    def test_temperature_compensation(self) -> None:
        """raw * V_PU * 2^-16."""
        ctx = ScaleContext(2.0, 1.0)
        assert decode(QuantityKind.TEMPERATURE_COMPENSATION, 32768, ctx) == 1.0

    def test_raw_is_identity(self, tristar_context: ScaleContext) -> None:
        """Raw decodes to the register value as a float."""
        for raw in (0, 1, 12345, RAW_MAX):
            value = decode(QuantityKind.RAW, raw, tristar_context)
            assert value == float(raw)
            assert isinstance(value, float)


class TestEncode:
    """Test encode() for every kind."""

    def test_truncates_toward_zero(self, unity_context: ScaleContext) -> None:
        """Fractions of a count are dropped, not rounded."""
        step = 2.0**-15
        assert encode(QuantityKind.VOLTAGE, 0.5 + step * 0.9, unity_context) == 0x4000

    def test_voltage_with_fractional_scale(self) -> None:
        """trunc((value / 2^-15) / V_PU)."""
        ctx = ScaleContext(1.2, 1.0)
        assert encode(QuantityKind.VOLTAGE, 2.0, ctx) == math.trunc((2.0 / 2.0**-15) / 1.2)

    def test_current(self, tristar_context: ScaleContext) -> None:
        """40 A at I_PU = 80 is half scale."""
        assert encode(QuantityKind.CURRENT, 40.0, tristar_context) == 16384

    def test_voltage_percentage(self, tristar_context: ScaleContext) -> None:
        """50 % is 32768."""
        assert encode(QuantityKind.VOLTAGE_PERCENTAGE, 50.0, tristar_context) == 32768

    def test_raw_floors(self, unity_context: ScaleContext) -> None:
        """Raw encode drops the fractional part."""
        assert encode(QuantityKind.RAW, 42.9, unity_context) == 42
        assert encode(QuantityKind.RAW, 65535.99, unity_context) == RAW_MAX

    def test_small_negative_truncates_to_zero(self, unity_context: ScaleContext) -> None:
        """-0.5 truncates toward zero and is accepted."""
        assert encode(QuantityKind.RAW, -0.5, unity_context) == 0

    def test_overflow_above_range(self, unity_context: ScaleContext) -> None:
        """A result above 65535 raises EncodingOverflowError."""
        with pytest.raises(EncodingOverflowError) as exc_info:
            encode(QuantityKind.RAW, 65536.0, unity_context)

        assert exc_info.value.raw == 65536
        assert exc_info.value.value == 65536.0

    def test_overflow_below_range(self, unity_context: ScaleContext) -> None:
        """A negative result raises EncodingOverflowError."""
        with pytest.raises(EncodingOverflowError):
            encode(QuantityKind.VOLTAGE, -1.0, unity_context)

    def test_overflow_large_voltage_small_scale(self) -> None:
        """28 V cannot be represented when V_PU is 1.2."""
        with pytest.raises(EncodingOverflowError):
            encode(QuantityKind.VOLTAGE, 28.0, ScaleContext(1.2, 1.0))

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_non_finite_rejected(self, value: float, unity_context: ScaleContext) -> None:
        """NaN and infinities never reach the register."""
        with pytest.raises(EncodingOverflowError) as exc_info:
            encode(QuantityKind.CURRENT, value, unity_context)

        assert exc_info.value.raw is None


class TestRoundTrip:
    """Encode and decode are inverses up to truncation."""

    @pytest.mark.parametrize("kind", ALL_KINDS)
    def test_every_raw_survives_at_unity(
        self, kind: QuantityKind, unity_context: ScaleContext
    ) -> None:
        """encode(decode(raw)) == raw for all 65536 raws when both factors are 1."""
        mismatches = [
            raw
            for raw in range(RAW_MAX + 1)
            if encode(kind, decode(kind, raw, unity_context), unity_context) != raw
        ]
        assert mismatches == []

    def test_value_within_one_step(self, tristar_context: ScaleContext) -> None:
        """decode(encode(v)) is within one count of v."""
        step = tristar_context.voltage_scale * 2.0**-15
        for value in (10.0, 13.6, 14.4, 28.0, 57.6):
            raw = encode(QuantityKind.VOLTAGE, value, tristar_context)
            decoded = decode(QuantityKind.VOLTAGE, raw, tristar_context)
            assert value - step < decoded <= value

    def test_fractional_scale_within_one_step(self) -> None:
        """Same contract with a non-integer V_PU."""
        ctx = ScaleContext(1.2, 1.0)
        raw = encode(QuantityKind.VOLTAGE, 2.0, ctx)
        assert abs(decode(QuantityKind.VOLTAGE, raw, ctx) - 2.0) <= 1.2 * 2.0**-15


class TestQuantityKind:
    """Test unit and label metadata."""

    def test_units(self) -> None:
        assert QuantityKind.VOLTAGE.unit == "V"
        assert QuantityKind.CURRENT.unit == "A"
        assert QuantityKind.VOLTAGE_PERCENTAGE.unit == "%"
        assert QuantityKind.TEMPERATURE_COMPENSATION.unit == " - temperature compensation value"
        assert QuantityKind.RAW.unit == ""

    def test_labels(self) -> None:
        assert QuantityKind.VOLTAGE_PERCENTAGE.label == "Voltage Percentage"
        assert QuantityKind.RAW.label == "Raw Value"

    def test_string_values(self) -> None:
        """Kinds serialize as plain strings."""
        assert QuantityKind("voltage") is QuantityKind.VOLTAGE
        assert str(QuantityKind.TEMPERATURE_COMPENSATION) == "temperature_compensation"


class TestQuantity:
    """Test the Quantity value object."""

    def test_display(self) -> None:
        """"<value><unit>, raw: <raw>" with a unity context."""
        assert Quantity(QuantityKind.VOLTAGE, 0x4000).display() == "0.5V, raw: 16384"

    def test_display_whole_number(self) -> None:
        """Whole values print without a trailing .0."""
        q = Quantity(QuantityKind.VOLTAGE_PERCENTAGE, 32768)
        assert q.display() == "50%, raw: 32768"

    def test_display_temperature_compensation(self) -> None:
        """The unit reads as a suffix phrase rather than a symbol."""
        q = Quantity(QuantityKind.TEMPERATURE_COMPENSATION, 32768)
        assert q.display() == "0.5 - temperature compensation value, raw: 32768"

    def test_display_raw(self) -> None:
        assert str(Quantity(QuantityKind.RAW, 42)) == "42, raw: 42"

    def test_value_uses_context(self, tristar_context: ScaleContext) -> None:
        q = Quantity(QuantityKind.CURRENT, 16384, tristar_context)
        assert q.value == 40.0
        assert q.unit == "A"

    def test_from_value(self, tristar_context: ScaleContext) -> None:
        """from_value encodes with the given context."""
        q = Quantity.from_value(QuantityKind.VOLTAGE, 14.4, tristar_context)
        assert q.raw == 2621
        assert q.context is tristar_context

    def test_from_value_overflow(self, unity_context: ScaleContext) -> None:
        with pytest.raises(EncodingOverflowError):
            Quantity.from_value(QuantityKind.VOLTAGE, 2.0, unity_context)

    @pytest.mark.parametrize("raw", [-1, RAW_MAX + 1])
    def test_raw_range_checked(self, raw: int) -> None:
        """Quantities only hold 16-bit values."""
        with pytest.raises(ValueError, match="raw must be"):
            Quantity(QuantityKind.RAW, raw)

    def test_frozen(self) -> None:
        q = Quantity(QuantityKind.RAW, 1)
        with pytest.raises(AttributeError):
            q.raw = 2  # type: ignore[misc]

    def test_to_dict(self) -> None:
        """Lossless {kind, raw, value} serialization."""
        assert Quantity(QuantityKind.VOLTAGE, 0x4000).to_dict() == {
            "kind": "voltage",
            "raw": 16384,
            "value": 0.5,
        }


class TestFormatValue:
    def test_whole(self) -> None:
        assert format_value(28.0) == "28"

    def test_fraction(self) -> None:
        assert format_value(0.5) == "0.5"
        assert format_value(14.397583007812) == "14.397583007812"
