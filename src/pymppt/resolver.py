"""Name-based access to configuration setpoints.

The command line addresses setpoints by symbolic name. This module is the
single place where such a name is turned into a register definition, a
decoded value, or a raw value plus the absolute address to write it to.
It never touches the bus itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pymppt.exceptions import UnknownFieldError
from pymppt.quantities import Quantity, QuantityKind, format_value
from pymppt.records import ConfigRecord
from pymppt.registers import ConfigRegisterDefinition, RegisterTable, lookup

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodedField:
    """A single configuration field as read from the device."""

    name: str
    kind: QuantityKind
    value: float
    raw: int
    offset: int

    def display(self) -> str:
        """Return ``"<value><unit>, raw: <raw>"``."""
        return f"{format_value(self.value)}{self.kind.unit}, raw: {self.raw}"

    def to_dict(self) -> dict[str, Any]:
        """Serialize as ``{name, kind, value, raw, offset}``."""
        return {
            "name": self.name,
            "kind": self.kind.value,
            "value": self.value,
            "raw": self.raw,
            "offset": self.offset,
        }


@dataclass(frozen=True)
class WriteRequest:
    """What to write, and where, to change one setpoint.

    Attributes:
        name: Canonical field name
        raw: New raw register value
        address: Absolute Modbus address (configuration base + offset)
        previous: Quantity held by the record before the change
        value: Physical value the new raw decodes to (after truncation)
    """

    name: str
    raw: int
    address: int
    previous: Quantity
    value: float


def resolve(name: str) -> ConfigRegisterDefinition:
    """Return the configuration definition for a field name.

    Raises:
        UnknownFieldError: If the name is not a configuration field
    """
    reg = lookup(RegisterTable.CONFIG, name)
    if not isinstance(reg, ConfigRegisterDefinition):
        raise UnknownFieldError(name)
    return reg


def get_field(name: str, record: ConfigRecord) -> DecodedField:
    """Look up a configuration field by name, ignoring case.

    Raises:
        UnknownFieldError: If the name is not a configuration field
    """
    reg = resolve(name)
    quantity = record[reg.canonical_name]
    return DecodedField(
        name=reg.canonical_name,
        kind=reg.kind,
        value=quantity.value,
        raw=quantity.raw,
        offset=reg.offset,
    )


def set_field(name: str, value: float, record: ConfigRecord) -> WriteRequest:
    """Compute the raw value and address for writing a setpoint.

    The value is encoded with the field's declared kind and the record's
    scale context. Nothing is written to the device.

    Raises:
        UnknownFieldError: If the name is not a configuration field
        EncodingOverflowError: If the encoded value does not fit in 16 bits
    """
    reg = resolve(name)
    previous = record[reg.canonical_name]
    new = Quantity.from_value(reg.kind, value, record.context)

    if new.value != value:
        _LOGGER.debug(
            "%s: %s truncated to %s (raw %d)",
            reg.canonical_name,
            value,
            new.value,
            new.raw,
        )

    return WriteRequest(
        name=reg.canonical_name,
        raw=new.raw,
        address=reg.address,
        previous=previous,
        value=new.value,
    )


__all__ = [
    "DecodedField",
    "WriteRequest",
    "get_field",
    "resolve",
    "set_field",
]
