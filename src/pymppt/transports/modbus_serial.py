"""Modbus RTU serial transport implementation.

This module provides the ModbusSerialTransport class for direct local
communication with the charge controller via Modbus RTU over a
USB-to-RS485 (or MeterBus-to-serial) adapter.

IMPORTANT: Single-Client Limitation
------------------------------------
Serial ports support only ONE concurrent connection.
Running multiple clients causes communication errors and data corruption.

Example:
    transport = ModbusSerialTransport(port="/dev/ttyUSB0")
    await transport.connect()

    status = await transport.read_registers(0x0000, 92)
    await transport.write_register(0xE000, 0x4000)
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from pymodbus.exceptions import ModbusIOException

from .config import (
    DEFAULT_BAUDRATE,
    DEFAULT_BYTESIZE,
    DEFAULT_PARITY,
    DEFAULT_STOPBITS,
    DEFAULT_TIMEOUT,
    DEFAULT_UNIT_ID,
    SerialConfig,
)
from .exceptions import (
    TransportConnectionError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .protocol import BaseTransport

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusSerialClient

_LOGGER = logging.getLogger(__name__)

MAX_READ_COUNT = 125
"""Maximum registers per read request (Modbus FC 0x03 limit)."""


class ModbusSerialTransport(BaseTransport):
    """Modbus RTU serial transport for local controller communication.

    Reads use holding registers (function code 0x03) and writes use
    single-register writes (function code 0x06). Failures are mapped to
    transport exceptions and propagated without retry.

    Note:
        Requires the `pymodbus` and `pyserial` packages to be installed.
    """

    transport_type: str = "modbus_serial"

    def __init__(
        self,
        port: str,
        baudrate: int = DEFAULT_BAUDRATE,
        bytesize: int = DEFAULT_BYTESIZE,
        parity: str = DEFAULT_PARITY,
        stopbits: int = DEFAULT_STOPBITS,
        unit_id: int = DEFAULT_UNIT_ID,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize Modbus serial transport.

        Args:
            port: Serial port path (e.g., /dev/ttyUSB0, COM3, /dev/tty.usbserial)
            baudrate: Serial baud rate (default 9600)
            bytesize: Data bits per byte (default 8)
            parity: Parity setting - 'N' (none), 'E' (even), 'O' (odd)
            stopbits: Number of stop bits (default 2)
            unit_id: Modbus unit/slave ID (default 1)
            timeout: Connection and operation timeout in seconds
        """
        super().__init__(port)
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits
        self._unit_id = unit_id
        self._timeout = timeout
        self._client: AsyncModbusSerialClient | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config: SerialConfig) -> ModbusSerialTransport:
        """Create a transport from a validated SerialConfig."""
        config.validate()
        return cls(
            port=config.port,
            baudrate=config.baudrate,
            bytesize=config.bytesize,
            parity=config.parity,
            stopbits=config.stopbits,
            unit_id=config.unit_id,
            timeout=config.timeout,
        )

    @property
    def baudrate(self) -> int:
        """Get the serial baud rate."""
        return self._baudrate

    @property
    def unit_id(self) -> int:
        """Get the Modbus unit/slave ID."""
        return self._unit_id

    async def connect(self) -> None:
        """Establish Modbus RTU serial connection.

        Raises:
            TransportConnectionError: If connection fails
        """
        try:
            from pymodbus.client import AsyncModbusSerialClient

            self._client = AsyncModbusSerialClient(
                port=self._port,
                baudrate=self._baudrate,
                bytesize=self._bytesize,
                parity=self._parity,
                stopbits=self._stopbits,
                timeout=self._timeout,
                retries=0,
            )

            connected = await self._client.connect()
            if not connected:
                raise TransportConnectionError(f"Failed to connect to serial port {self._port}")

            self._connected = True
            _LOGGER.info(
                "Modbus serial transport connected to %s @ %d baud (unit %s)",
                self._port,
                self._baudrate,
                self._unit_id,
            )

        except PermissionError as err:
            _LOGGER.error(
                "Permission denied opening serial port %s: %s",
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Permission denied for {self._port}. "
                "On Linux, add user to 'dialout' group: "
                "sudo usermod -a -G dialout $USER"
            ) from err
        except (TimeoutError, OSError) as err:
            _LOGGER.error(
                "Failed to connect to serial port %s: %s",
                self._port,
                err,
            )
            raise TransportConnectionError(
                f"Failed to connect to {self._port}: {err}. "
                "Verify: (1) serial port exists, (2) device is connected, "
                "(3) port is not in use by another application."
            ) from err

    async def disconnect(self) -> None:
        """Close Modbus serial connection."""
        if self._client:
            self._client.close()
            self._client = None

        self._connected = False
        _LOGGER.debug("Modbus serial transport disconnected from %s", self._port)

    async def read_registers(self, address: int, count: int) -> list[int]:
        """Read holding registers, splitting requests above MAX_READ_COUNT.

        Args:
            address: Starting register address
            count: Number of registers to read

        Returns:
            List of register values

        Raises:
            TransportReadError: If the device reports an error or the read fails
            TransportTimeoutError: If operation times out
        """
        values: list[int] = []
        for start in range(address, address + count, MAX_READ_COUNT):
            chunk = min(MAX_READ_COUNT, address + count - start)
            values.extend(await self._read_chunk(start, chunk))
        return values

    async def _read_chunk(self, address: int, count: int) -> list[int]:
        self._ensure_connected()

        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")

        async with self._lock:
            try:
                result = await self._client.read_holding_registers(
                    address=address,
                    count=count,
                    device_id=self._unit_id,
                )
            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    _LOGGER.error("Timeout reading registers at 0x%04X", address)
                    raise TransportTimeoutError(
                        f"Timeout reading registers at 0x{address:04X}"
                    ) from err
                _LOGGER.error("Failed to read registers at 0x%04X: %s", address, err)
                raise TransportReadError(
                    f"Failed to read registers at 0x{address:04X}: {err}"
                ) from err
            except TimeoutError as err:
                _LOGGER.error("Timeout reading registers at 0x%04X", address)
                raise TransportTimeoutError(f"Timeout reading registers at 0x{address:04X}") from err
            except OSError as err:
                _LOGGER.error("Failed to read registers at 0x%04X: %s", address, err)
                raise TransportReadError(
                    f"Failed to read registers at 0x{address:04X}: {err}"
                ) from err

        if result.isError():
            raise TransportReadError(f"Modbus read error at address 0x{address:04X}: {result}")

        if not hasattr(result, "registers") or result.registers is None:
            raise TransportReadError(
                f"Invalid Modbus response at address 0x{address:04X}: no registers in response"
            )

        registers = list(result.registers)
        if len(registers) != count:
            raise TransportReadError(
                f"Short Modbus response at address 0x{address:04X}: "
                f"expected {count} registers, got {len(registers)}"
            )
        return registers

    async def write_register(self, address: int, value: int) -> None:
        """Write a single holding register.

        Args:
            address: Register address
            value: Raw 16-bit value

        Raises:
            TransportWriteError: If write fails
            TransportTimeoutError: If operation times out
        """
        self._ensure_connected()

        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")

        async with self._lock:
            try:
                result = await self._client.write_register(
                    address=address,
                    value=value,
                    device_id=self._unit_id,
                )

                if result.isError():
                    _LOGGER.error(
                        "Modbus error writing register at 0x%04X: %s",
                        address,
                        result,
                    )
                    raise TransportWriteError(
                        f"Modbus write error at address 0x{address:04X}: {result}"
                    )

            except ModbusIOException as err:
                if "timeout" in str(err).lower():
                    _LOGGER.error("Timeout writing register at 0x%04X", address)
                    raise TransportTimeoutError(
                        f"Timeout writing register at 0x{address:04X}"
                    ) from err
                _LOGGER.error("Failed to write register at 0x%04X: %s", address, err)
                raise TransportWriteError(
                    f"Failed to write register at 0x{address:04X}: {err}"
                ) from err
            except TimeoutError as err:
                _LOGGER.error("Timeout writing register at 0x%04X", address)
                raise TransportTimeoutError(f"Timeout writing register at 0x{address:04X}") from err
            except OSError as err:
                _LOGGER.error("Failed to write register at 0x%04X: %s", address, err)
                raise TransportWriteError(
                    f"Failed to write register at 0x{address:04X}: {err}"
                ) from err

        _LOGGER.info("Wrote %d to register 0x%04X", value, address)


__all__ = ["MAX_READ_COUNT", "ModbusSerialTransport"]
