"""Serial connection settings for the charge controller.

The controller speaks Modbus RTU at 9600 baud, 8 data bits, no parity and
two stop bits, with a default slave address of 1.

Example:
    config = SerialConfig(port="/dev/ttyUSB0")
    config.validate()

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = SerialConfig.from_dict(data)

    # Or read MPPT_* variables (and an optional .env file)
    config = SerialConfig.from_env()
"""

from __future__ import annotations

import os
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

DEFAULT_BAUDRATE = 9600
DEFAULT_BYTESIZE = 8
DEFAULT_PARITY = "N"
DEFAULT_STOPBITS = 2
DEFAULT_UNIT_ID = 1
DEFAULT_TIMEOUT = 10.0


def default_serial_port() -> str:
    """Return the usual USB-RS485 adapter path for this platform."""
    if sys.platform.startswith("linux"):
        return "/dev/ttyUSB0"
    if sys.platform == "darwin":
        return "/dev/tty.usbserial-DUT1"
    return "unknown"


@dataclass
class SerialConfig:
    """Configuration for a Modbus RTU serial connection.

    Attributes:
        port: Serial port path (e.g. /dev/ttyUSB0, COM3)
        baudrate: Serial baud rate (default 9600)
        bytesize: Data bits per byte (default 8)
        parity: 'N' (none), 'E' (even) or 'O' (odd)
        stopbits: Number of stop bits (default 2)
        unit_id: Modbus slave address (default 1)
        timeout: Operation timeout in seconds (default 10.0)
    """

    port: str
    baudrate: int = DEFAULT_BAUDRATE
    bytesize: int = DEFAULT_BYTESIZE
    parity: str = DEFAULT_PARITY
    stopbits: int = DEFAULT_STOPBITS
    unit_id: int = DEFAULT_UNIT_ID
    timeout: float = DEFAULT_TIMEOUT

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If configuration is invalid
        """
        if not self.port:
            raise ValueError("port is required")
        if self.parity not in ("N", "E", "O"):
            raise ValueError(f"parity must be 'N', 'E' or 'O', got {self.parity!r}")
        if self.stopbits not in (1, 2):
            raise ValueError(f"stopbits must be 1 or 2, got {self.stopbits}")
        if not 1 <= self.unit_id <= 247:
            raise ValueError(f"unit_id must be 1-247, got {self.unit_id}")
        if self.timeout <= 0:
            raise ValueError("timeout must be positive")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "port": self.port,
            "baudrate": self.baudrate,
            "bytesize": self.bytesize,
            "parity": self.parity,
            "stopbits": self.stopbits,
            "unit_id": self.unit_id,
            "timeout": self.timeout,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SerialConfig:
        """Create configuration from a dictionary produced by ``to_dict()``."""
        return cls(
            port=data.get("port", default_serial_port()),
            baudrate=data.get("baudrate", DEFAULT_BAUDRATE),
            bytesize=data.get("bytesize", DEFAULT_BYTESIZE),
            parity=data.get("parity", DEFAULT_PARITY),
            stopbits=data.get("stopbits", DEFAULT_STOPBITS),
            unit_id=data.get("unit_id", DEFAULT_UNIT_ID),
            timeout=data.get("timeout", DEFAULT_TIMEOUT),
        )

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> SerialConfig:
        """Create configuration from ``MPPT_*`` environment variables.

        A ``.env`` file is loaded first if present; variables already set in
        the environment take precedence.

        Variables:
            MPPT_SERIAL_PORT, MPPT_BAUDRATE, MPPT_UNIT_ID, MPPT_TIMEOUT

        Raises:
            ValueError: If a numeric variable cannot be parsed
        """
        load_dotenv(env_file)
        return cls(
            port=os.getenv("MPPT_SERIAL_PORT", default_serial_port()),
            baudrate=_env_number("MPPT_BAUDRATE", DEFAULT_BAUDRATE, int),
            unit_id=_env_number("MPPT_UNIT_ID", DEFAULT_UNIT_ID, int),
            timeout=_env_number("MPPT_TIMEOUT", DEFAULT_TIMEOUT, float),
        )


def _env_number(name: str, default: float, convert: Callable[[str], Any]) -> Any:
    """Read a numeric variable, falling back to ``default`` when unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return convert(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


__all__ = [
    "DEFAULT_BAUDRATE",
    "DEFAULT_BYTESIZE",
    "DEFAULT_PARITY",
    "DEFAULT_STOPBITS",
    "DEFAULT_TIMEOUT",
    "DEFAULT_UNIT_ID",
    "SerialConfig",
    "default_serial_port",
]
