"""Session scale factors reported by the charge controller.

The first four status registers hold two fixed-point multipliers, each split
into an integer cell and a fractional cell (1/65536 units):

    0x0000  V_PU hi    voltage scale, integer part
    0x0001  V_PU lo    voltage scale, fractional part
    0x0002  I_PU hi    current scale, integer part
    0x0003  I_PU lo    current scale, fractional part

The resulting :class:`ScaleContext` is derived once per session and passed
explicitly to every encode/decode call.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from pymppt.exceptions import InsufficientDataError

_LOGGER = logging.getLogger(__name__)

SCALE_REGISTER_COUNT = 4
"""Number of status registers holding the scale factors."""

FRACTION_DIVISOR = 2.0**16
"""Denominator of the fractional scale cell."""


@dataclass(frozen=True)
class ScaleContext:
    """Voltage and current scale factors for one controller session.

    Attributes:
        voltage_scale: V_PU, volts per unit
        current_scale: I_PU, amps per unit
    """

    voltage_scale: float = 1.0
    current_scale: float = 1.0

    @classmethod
    def derive(cls, raw_block: Sequence[int]) -> ScaleContext:
        """Build the context from the head of the status block.

        Args:
            raw_block: Status register values starting at address 0

        Returns:
            ScaleContext with both factors set

        Raises:
            InsufficientDataError: If fewer than four registers are supplied
        """
        if len(raw_block) < SCALE_REGISTER_COUNT:
            raise InsufficientDataError(SCALE_REGISTER_COUNT, len(raw_block), "scale context")

        v_hi, v_lo, i_hi, i_lo = raw_block[:SCALE_REGISTER_COUNT]
        ctx = cls(
            voltage_scale=v_hi + v_lo / FRACTION_DIVISOR,
            current_scale=i_hi + i_lo / FRACTION_DIVISOR,
        )
        _LOGGER.debug(
            "Derived scale context: V_PU=%s, I_PU=%s",
            ctx.voltage_scale,
            ctx.current_scale,
        )
        return ctx

    @classmethod
    def unity(cls) -> ScaleContext:
        """Return a context with both factors equal to 1.0."""
        return cls(1.0, 1.0)

    @property
    def v(self) -> float:
        """Short alias for ``voltage_scale``."""
        return self.voltage_scale

    @property
    def i(self) -> float:
        """Short alias for ``current_scale``."""
        return self.current_scale

    # Status registers are decoded as raw values; these helpers let callers
    # turn individual status readings into physical units.

    def scale_voltage(self, raw: int) -> float:
        """Scale a raw voltage reading to volts."""
        return raw * self.voltage_scale * 2.0**-15

    def scale_current(self, raw: int) -> float:
        """Scale a raw current reading to amps."""
        return raw * self.current_scale * 2.0**-15

    def scale_power(self, raw: int) -> float:
        """Scale a raw power reading to watts."""
        return raw * self.voltage_scale * self.current_scale * 2.0**-17

    def to_dict(self) -> dict[str, float]:
        """Serialize to a plain dictionary."""
        return {
            "voltage_scale": self.voltage_scale,
            "current_scale": self.current_scale,
        }


__all__ = [
    "FRACTION_DIVISOR",
    "SCALE_REGISTER_COUNT",
    "ScaleContext",
]
