"""In-memory transport for running without a controller attached.

Holds a sparse register bank keyed by absolute address. Unset registers read
as zero, except the scale registers which default to V_PU = I_PU = 1.0 so
decoded values equal the raw fixed-point fractions.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from pymppt.quantities import RAW_MAX, RAW_MIN

from .exceptions import TransportReadError, TransportWriteError
from .protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)

UNITY_SCALE_REGISTERS: dict[int, int] = {0x0000: 1, 0x0001: 0, 0x0002: 1, 0x0003: 0}


class FakeTransport(BaseTransport):
    """Register bank that behaves like a connected controller."""

    transport_type: str = "fake"

    def __init__(self, registers: Mapping[int, int] | None = None) -> None:
        super().__init__("fake")
        self._registers: dict[int, int] = dict(UNITY_SCALE_REGISTERS)
        if registers:
            self._registers.update(registers)
        self.writes: list[tuple[int, int]] = []

    @property
    def registers(self) -> dict[int, int]:
        """Current register bank (address → value)."""
        return self._registers

    async def connect(self) -> None:
        self._connected = True
        _LOGGER.debug("Fake transport connected")

    async def disconnect(self) -> None:
        self._connected = False

    async def read_registers(self, address: int, count: int) -> list[int]:
        self._ensure_connected()
        if address < 0 or count < 0 or address + count > 0x10000:
            raise TransportReadError(f"Illegal register range 0x{address:04X}+{count}")
        return [self._registers.get(addr, 0) for addr in range(address, address + count)]

    async def write_register(self, address: int, value: int) -> None:
        self._ensure_connected()
        if not RAW_MIN <= value <= RAW_MAX:
            raise TransportWriteError(f"Value {value} does not fit in register 0x{address:04X}")
        self._registers[address] = value
        self.writes.append((address, value))
        _LOGGER.info("Fake write %d to register 0x%04X", value, address)


__all__ = ["FakeTransport", "UNITY_SCALE_REGISTERS"]
