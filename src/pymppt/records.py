"""Decoded status and configuration records.

Both records are immutable mappings from canonical field name to
:class:`~pymppt.quantities.Quantity`, iterated in register order. They are
built fresh from raw register arrays on every read:

    ctx = ScaleContext.derive(status_regs)
    status = decode_status(status_regs)
    config = decode_config(config_regs, ctx)

    config["EV_ABSORP"].display()   # '14.4V, raw: ...'
    config.to_dict()                # {'ev_absorp': {'kind': ..., 'raw': ..., 'value': ...}, ...}
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from pymppt.exceptions import InsufficientDataError, UnknownFieldError
from pymppt.quantities import Quantity, QuantityKind
from pymppt.registers import (
    CONFIG_REGISTER_COUNT,
    CONFIG_REGISTERS,
    STATUS_REGISTER_COUNT,
    STATUS_REGISTERS,
)
from pymppt.scaling import ScaleContext

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class _RegisterRecord(Mapping[str, Quantity]):
    """Read-only mapping of field name → Quantity with a shared scale context.

    Records compare by content like any other mapping and are unhashable.
    """

    fields: Mapping[str, Quantity]
    context: ScaleContext

    def __getitem__(self, name: str) -> Quantity:
        try:
            return self.fields[name.strip().lower()]
        except KeyError:
            raise UnknownFieldError(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip().lower() in self.fields

    def display(self) -> str:
        """Render one ``name: <value><unit>, raw: <raw>`` line per field."""
        return "\n".join(f"{name}: {q.display()}" for name, q in self.fields.items())

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Serialize every field as ``{kind, raw, value}``."""
        return {name: q.to_dict() for name, q in self.fields.items()}

    def raw_values(self) -> dict[str, int]:
        """Return the raw register value of every field."""
        return {name: q.raw for name, q in self.fields.items()}

    def __str__(self) -> str:
        return self.display()


@dataclass(frozen=True, eq=False)
class StatusRecord(_RegisterRecord):
    """Snapshot of the status (RAM) block.

    Every field is a raw quantity; use ``context.scale_voltage`` and friends
    to convert individual readings.
    """


@dataclass(frozen=True, eq=False)
class ConfigRecord(_RegisterRecord):
    """Snapshot of the configuration (EEPROM) block with typed setpoints."""

    def with_raw(self, name: str, raw: int) -> ConfigRecord:
        """Return a copy of this record with one field's raw value replaced.

        Raises:
            UnknownFieldError: If the field does not exist
        """
        old = self[name]
        key = name.strip().lower()
        fields = dict(self.fields)
        fields[key] = Quantity(old.kind, raw, self.context)
        return ConfigRecord(MappingProxyType(fields), self.context)


def _require_length(raw: Sequence[int], required: int, what: str) -> None:
    if len(raw) < required:
        raise InsufficientDataError(required, len(raw), what)


def decode_status(raw: Sequence[int]) -> StatusRecord:
    """Decode the status block.

    Args:
        raw: Status register values starting at address 0x0000

    Returns:
        StatusRecord carrying the scale context derived from its first
        four registers

    Raises:
        InsufficientDataError: If fewer than STATUS_REGISTER_COUNT values
            are supplied
    """
    _require_length(raw, STATUS_REGISTER_COUNT, "status block")
    ctx = ScaleContext.derive(raw)
    fields = {
        reg.canonical_name: Quantity(QuantityKind.RAW, raw[reg.offset], ctx)
        for reg in STATUS_REGISTERS
    }
    _LOGGER.debug("Decoded %d status fields", len(fields))
    return StatusRecord(MappingProxyType(fields), ctx)


def decode_config(raw: Sequence[int], ctx: ScaleContext) -> ConfigRecord:
    """Decode the configuration block using its declared quantity kinds.

    Args:
        raw: Configuration register values starting at 0xE000
        ctx: Scale context from the same session's status block

    Raises:
        InsufficientDataError: If fewer than CONFIG_REGISTER_COUNT values
            are supplied
    """
    _require_length(raw, CONFIG_REGISTER_COUNT, "configuration block")
    fields = {
        reg.canonical_name: Quantity(reg.kind, raw[reg.offset], ctx) for reg in CONFIG_REGISTERS
    }
    _LOGGER.debug("Decoded %d configuration fields", len(fields))
    return ConfigRecord(MappingProxyType(fields), ctx)


__all__ = [
    "ConfigRecord",
    "StatusRecord",
    "decode_config",
    "decode_status",
]
