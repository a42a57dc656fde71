"""Transports for talking to the charge controller.

Usage:
    from pymppt.transports import ModbusSerialTransport

    async with ModbusSerialTransport(port="/dev/ttyUSB0") as transport:
        regs = await transport.read_registers(0x0000, 92)

For testing without hardware:
    from pymppt.transports import FakeTransport

    transport = FakeTransport({0xE000: 0x4000})
"""

from __future__ import annotations

from .config import SerialConfig, default_serial_port
from .exceptions import (
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .fake import FakeTransport
from .modbus_serial import ModbusSerialTransport
from .protocol import BaseTransport

__all__ = [
    # Transports
    "BaseTransport",
    "FakeTransport",
    "ModbusSerialTransport",
    # Configuration
    "SerialConfig",
    "default_serial_port",
    # Exceptions
    "TransportConnectionError",
    "TransportError",
    "TransportReadError",
    "TransportTimeoutError",
    "TransportWriteError",
]
