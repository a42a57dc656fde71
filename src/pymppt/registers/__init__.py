"""Register maps for the charge controller.

This package is the single source of truth for register layout:

- status: Status (RAM) block, volatile live readings, based at 0x0000
- config: Configuration (EEPROM) block, persistent setpoints, based at 0xE000

Both tables are numbered from zero within their block. Name lookups are
case-insensitive.
"""

from __future__ import annotations

from enum import StrEnum

from pymppt.registers.config import (
    BY_KIND as CONFIG_BY_KIND,
)
from pymppt.registers.config import (
    BY_NAME as CONFIG_BY_NAME,
)
from pymppt.registers.config import (
    BY_OFFSET as CONFIG_BY_OFFSET,
)
from pymppt.registers.config import (
    CONFIG_BASE_ADDRESS,
    CONFIG_LAST_OFFSET,
    CONFIG_REGISTER_COUNT,
    CONFIG_REGISTERS,
    ConfigRegisterDefinition,
    absolute_address,
)
from pymppt.registers.status import (
    BY_CATEGORY as STATUS_BY_CATEGORY,
)
from pymppt.registers.status import (
    BY_NAME as STATUS_BY_NAME,
)
from pymppt.registers.status import (
    BY_OFFSET as STATUS_BY_OFFSET,
)
from pymppt.registers.status import (
    STATUS_BASE_ADDRESS,
    STATUS_LAST_OFFSET,
    STATUS_REGISTER_COUNT,
    STATUS_REGISTERS,
    StatusCategory,
    StatusRegisterDefinition,
)


class RegisterTable(StrEnum):
    """The two independently numbered register tables."""

    STATUS = "status"
    CONFIG = "config"


_TABLES: dict[RegisterTable, dict[str, StatusRegisterDefinition | ConfigRegisterDefinition]] = {
    RegisterTable.STATUS: dict(STATUS_BY_NAME),
    RegisterTable.CONFIG: dict(CONFIG_BY_NAME),
}


def lookup(
    table: RegisterTable, name: str
) -> StatusRegisterDefinition | ConfigRegisterDefinition | None:
    """Find a register definition by name, ignoring case.

    Returns:
        The definition, or None if the table has no such field.
    """
    return _TABLES[table].get(name.strip().lower())


def offset_of(table: RegisterTable, name: str) -> int | None:
    """Return the block-relative offset of a named field.

    Example:
        >>> offset_of(RegisterTable.CONFIG, "EV_FLOAT")
        1
        >>> offset_of(RegisterTable.CONFIG, "no_such_field") is None
        True
    """
    reg = lookup(table, name)
    return reg.offset if reg is not None else None


__all__ = [
    # Lookup
    "RegisterTable",
    "lookup",
    "offset_of",
    # Status registers
    "STATUS_BASE_ADDRESS",
    "STATUS_BY_CATEGORY",
    "STATUS_BY_NAME",
    "STATUS_BY_OFFSET",
    "STATUS_LAST_OFFSET",
    "STATUS_REGISTERS",
    "STATUS_REGISTER_COUNT",
    "StatusCategory",
    "StatusRegisterDefinition",
    # Configuration registers
    "CONFIG_BASE_ADDRESS",
    "CONFIG_BY_KIND",
    "CONFIG_BY_NAME",
    "CONFIG_BY_OFFSET",
    "CONFIG_LAST_OFFSET",
    "CONFIG_REGISTERS",
    "CONFIG_REGISTER_COUNT",
    "ConfigRegisterDefinition",
    "absolute_address",
]
