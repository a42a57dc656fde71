"""Quantity kinds and their raw <-> physical scaling laws.

Every configuration register holds an unsigned 16-bit value whose physical
meaning depends on its kind:

| Kind                     | decode(raw)          | encode(value)                     |
|--------------------------|----------------------|-----------------------------------|
| VOLTAGE                  | raw * V_PU * 2^-15   | trunc((value / 2^-15) / V_PU)     |
| CURRENT                  | raw * I_PU * 2^-15   | trunc((value / 2^-15) / I_PU)     |
| VOLTAGE_PERCENTAGE       | raw * 100 * 2^-16    | trunc((value / 2^-16) / 100)      |
| TEMPERATURE_COMPENSATION | raw * V_PU * 2^-16   | trunc((value / 2^-16) / V_PU)     |
| RAW                      | raw                  | trunc(value)                      |

Encoding truncates toward zero, matching the controller's own setpoint
tools. A value that does not fit in 0..65535 after truncation raises
:class:`~pymppt.exceptions.EncodingOverflowError`.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pymppt.exceptions import EncodingOverflowError
from pymppt.scaling import ScaleContext

_LOGGER = logging.getLogger(__name__)

RAW_MIN = 0
RAW_MAX = 0xFFFF


class QuantityKind(StrEnum):
    """Scaling law applied to a register."""

    VOLTAGE = "voltage"
    CURRENT = "current"
    VOLTAGE_PERCENTAGE = "voltage_percentage"
    TEMPERATURE_COMPENSATION = "temperature_compensation"
    RAW = "raw"

    @property
    def unit(self) -> str:
        """Unit label appended to decoded values."""
        return _LAWS[self].unit

    @property
    def label(self) -> str:
        """Human-readable kind name."""
        return _LAWS[self].label


@dataclass(frozen=True)
class _ScalingLaw:
    """One row of the scaling table.

    ``step`` is the fixed-point weight of one raw count and ``factor`` picks
    the multiplier (a session scale factor or a constant).
    """

    step: float
    factor: Callable[[ScaleContext], float]
    unit: str
    label: str


_LAWS: dict[QuantityKind, _ScalingLaw] = {
    QuantityKind.VOLTAGE: _ScalingLaw(2.0**-15, lambda ctx: ctx.voltage_scale, "V", "Voltage"),
    QuantityKind.CURRENT: _ScalingLaw(2.0**-15, lambda ctx: ctx.current_scale, "A", "Current"),
    QuantityKind.VOLTAGE_PERCENTAGE: _ScalingLaw(
        2.0**-16, lambda ctx: 100.0, "%", "Voltage Percentage"
    ),
    QuantityKind.TEMPERATURE_COMPENSATION: _ScalingLaw(
        2.0**-16,
        lambda ctx: ctx.voltage_scale,
        " - temperature compensation value",
        "Temperature Compensation",
    ),
    QuantityKind.RAW: _ScalingLaw(1.0, lambda ctx: 1.0, "", "Raw Value"),
}


def decode(kind: QuantityKind, raw: int, ctx: ScaleContext) -> float:
    """Convert a raw register value to its physical value.

    Args:
        kind: Scaling law to apply
        raw: Unsigned 16-bit register value
        ctx: Session scale factors

    Returns:
        Physical value as a float
    """
    law = _LAWS[kind]
    return raw * law.factor(ctx) * law.step


def encode(kind: QuantityKind, value: float, ctx: ScaleContext) -> int:
    """Convert a physical value to the raw register value.

    Truncates toward zero; no rounding is applied.

    Args:
        kind: Scaling law to apply
        value: Physical value
        ctx: Session scale factors

    Returns:
        Raw register value in 0..65535

    Raises:
        EncodingOverflowError: If the value is not finite or the truncated
            result falls outside the 16-bit range
    """
    if not math.isfinite(value):
        raise EncodingOverflowError(kind.label, value)

    law = _LAWS[kind]
    raw = math.trunc((value / law.step) / law.factor(ctx))
    if not RAW_MIN <= raw <= RAW_MAX:
        raise EncodingOverflowError(kind.label, value, raw)

    _LOGGER.debug("Encoded %s %s -> raw %d", kind.label, value, raw)
    return raw


def format_value(value: float) -> str:
    """Format a decoded value without a trailing ``.0`` for whole numbers."""
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass(frozen=True)
class Quantity:
    """A raw register value tagged with its kind and scale context.

    Instances are immutable; writing a new value produces a new Quantity
    via :meth:`from_value`.

    Example:
        >>> q = Quantity(QuantityKind.VOLTAGE, 0x4000)
        >>> q.value
        0.5
        >>> q.display()
        '0.5V, raw: 16384'
    """

    kind: QuantityKind
    raw: int
    context: ScaleContext = field(default_factory=ScaleContext)

    def __post_init__(self) -> None:
        if not RAW_MIN <= self.raw <= RAW_MAX:
            msg = f"raw must be {RAW_MIN}-{RAW_MAX}, got {self.raw}"
            raise ValueError(msg)

    @classmethod
    def from_value(cls, kind: QuantityKind, value: float, context: ScaleContext) -> Quantity:
        """Encode a physical value into a new Quantity.

        Raises:
            EncodingOverflowError: If the value does not fit in 16 bits
        """
        return cls(kind, encode(kind, value, context), context)

    @property
    def value(self) -> float:
        """Decoded physical value."""
        return decode(self.kind, self.raw, self.context)

    @property
    def unit(self) -> str:
        """Unit label for the decoded value."""
        return self.kind.unit

    def display(self) -> str:
        """Return ``"<value><unit>, raw: <raw>"``."""
        return f"{format_value(self.value)}{self.unit}, raw: {self.raw}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{kind, raw, value}``."""
        return {
            "kind": self.kind.value,
            "raw": self.raw,
            "value": self.value,
        }

    def __str__(self) -> str:
        return self.display()


__all__ = [
    "RAW_MAX",
    "RAW_MIN",
    "Quantity",
    "QuantityKind",
    "decode",
    "encode",
    "format_value",
]
