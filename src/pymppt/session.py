"""One connected session with a charge controller.

A session reads the status block, derives the scale context from it, then
reads and decodes the configuration block with that context. The context is
fixed for the lifetime of the snapshot; calling :meth:`MpptSession.refresh`
again (for example after a reconnect) re-derives it.

Example:
    async with ModbusSerialTransport(port="/dev/ttyUSB0") as transport:
        session = MpptSession(transport)
        await session.refresh()

        print(session.get("ev_float").display())
        request = await session.set("ev_float", 13.6)
"""

from __future__ import annotations

import logging
from typing import Any

from pymppt.exceptions import MpptError
from pymppt.records import ConfigRecord, StatusRecord, decode_config, decode_status
from pymppt.registers import (
    CONFIG_BASE_ADDRESS,
    CONFIG_REGISTER_COUNT,
    STATUS_BASE_ADDRESS,
    STATUS_REGISTER_COUNT,
)
from pymppt.resolver import DecodedField, WriteRequest, get_field, set_field
from pymppt.scaling import ScaleContext
from pymppt.transports.protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)


class MpptSession:
    """Decoded view of a controller behind a transport."""

    def __init__(self, transport: BaseTransport) -> None:
        self._transport = transport
        self._status: StatusRecord | None = None
        self._config: ConfigRecord | None = None

    @property
    def transport(self) -> BaseTransport:
        return self._transport

    @property
    def status(self) -> StatusRecord:
        """Most recent status record."""
        if self._status is None:
            raise MpptError("Session has not been refreshed")
        return self._status

    @property
    def config(self) -> ConfigRecord:
        """Most recent configuration record."""
        if self._config is None:
            raise MpptError("Session has not been refreshed")
        return self._config

    @property
    def context(self) -> ScaleContext:
        """Scale context derived from the last status read."""
        return self.status.context

    async def refresh(self) -> None:
        """Read both register blocks and decode them.

        Raises:
            TransportError: If either read fails (not retried)
            InsufficientDataError: If the device returns a short block
        """
        status_regs = await self._transport.read_registers(
            STATUS_BASE_ADDRESS, STATUS_REGISTER_COUNT
        )
        status = decode_status(status_regs)

        config_regs = await self._transport.read_registers(
            CONFIG_BASE_ADDRESS, CONFIG_REGISTER_COUNT
        )
        self._config = decode_config(config_regs, status.context)
        self._status = status
        _LOGGER.debug(
            "Session refreshed: V_PU=%s, I_PU=%s",
            status.context.voltage_scale,
            status.context.current_scale,
        )

    def get(self, name: str) -> DecodedField:
        """Decode one configuration field by name."""
        return get_field(name, self.config)

    async def set(self, name: str, value: float, *, dry_run: bool = False) -> WriteRequest:
        """Encode and write one configuration field.

        Args:
            name: Field name, case-insensitive
            value: New physical value
            dry_run: Compute the write without sending it

        Returns:
            The WriteRequest that was (or would have been) sent

        Raises:
            UnknownFieldError: If the name is not a configuration field
            EncodingOverflowError: If the value does not fit in 16 bits
            TransportError: If the write fails
        """
        request = set_field(name, value, self.config)
        if dry_run:
            _LOGGER.info(
                "Dry run: would write %d to 0x%04X (%s)",
                request.raw,
                request.address,
                request.name,
            )
            return request

        await self._transport.write_register(request.address, request.raw)
        self._config = self.config.with_raw(request.name, request.raw)
        _LOGGER.info(
            "Set %s to %s (raw %d at 0x%04X)",
            request.name,
            request.value,
            request.raw,
            request.address,
        )
        return request

    def to_dict(self) -> dict[str, Any]:
        """Both records in machine-readable form."""
        return {
            "context": self.context.to_dict(),
            "ram": self.status.to_dict(),
            "eeprom": self.config.to_dict(),
        }


__all__ = ["MpptSession"]
