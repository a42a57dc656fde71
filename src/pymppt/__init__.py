"""Python library for reading and writing MPPT charge controller registers.

Usage:
    Decoding raw register blocks:
        from pymppt import ScaleContext, decode_config, decode_status, get_field

        status = decode_status(status_regs)          # 92 registers from 0x0000
        config = decode_config(config_regs, status.context)  # 34 from 0xE000
        print(get_field("ev_absorp", config).display())

    Talking to a controller:
        from pymppt import MpptSession
        from pymppt.transports import ModbusSerialTransport

        async with ModbusSerialTransport(port="/dev/ttyUSB0") as transport:
            session = MpptSession(transport)
            await session.refresh()
            await session.set("ev_float", 13.6)
"""

from __future__ import annotations

from .exceptions import (
    EncodingOverflowError,
    InsufficientDataError,
    MpptError,
    UnknownFieldError,
)
from .quantities import Quantity, QuantityKind, decode, encode
from .records import ConfigRecord, StatusRecord, decode_config, decode_status
from .registers import RegisterTable, offset_of
from .resolver import DecodedField, WriteRequest, get_field, set_field
from .scaling import ScaleContext
from .session import MpptSession

__version__ = "0.1.0"
__all__ = [
    # Scaling engine
    "ScaleContext",
    "Quantity",
    "QuantityKind",
    "decode",
    "encode",
    # Register map
    "RegisterTable",
    "offset_of",
    # Records
    "ConfigRecord",
    "StatusRecord",
    "decode_config",
    "decode_status",
    # Field access
    "DecodedField",
    "WriteRequest",
    "get_field",
    "set_field",
    "MpptSession",
    # Exceptions
    "EncodingOverflowError",
    "InsufficientDataError",
    "MpptError",
    "UnknownFieldError",
]
