"""Configuration (EEPROM) register map.

The configuration block is persistent and holds user-adjustable setpoints.
It lives at ``CONFIG_BASE_ADDRESS`` (0xE000); the offsets below are
block-relative. Compute the Modbus address for a bus read/write as:

    addr = CONFIG_BASE_ADDRESS + offset

Offset │ Name                    │ Kind
───────┼─────────────────────────┼──────────────────────────
 0x00  │ ev_absorp               │ voltage
 0x01  │ ev_float                │ voltage
 0x02  │ et_absorp               │ raw (seconds)
 0x03  │ et_absorp_ext           │ raw (seconds)
 0x04  │ ev_absorp_ext           │ voltage
 0x05  │ ev_float_cancel         │ voltage
 0x06  │ et_float_exit_cum       │ raw (seconds)
 0x07  │ ev_eq                   │ voltage
 0x08  │ et_eqcalendar           │ raw (days)
 0x09  │ et_eq_above             │ raw (seconds)
 0x0A  │ et_eq_reg               │ raw (seconds)
 0x0B  │ et_batt_service         │ raw (days)
 0x0D  │ ev_tempcomp             │ temperature_compensation
 0x0E  │ ev_hvd                  │ voltage
 0x0F  │ ev_hvr                  │ voltage
 0x10  │ evb_ref_lim             │ voltage
 0x11  │ etb_max                 │ raw (°C)
 0x12  │ etb_min                 │ raw (°C)
 0x15  │ ev_soc_g_gy             │ voltage
 0x16  │ ev_soc_gy_y             │ voltage
 0x17  │ ev_soc_y_yr             │ voltage
 0x18  │ ev_soc_yr_r             │ voltage
 0x19  │ emodbus_id              │ raw
 0x1A  │ emeterbus_id            │ raw
 0x1D  │ eib_lim                 │ current
 0x20  │ eva_ref_fixed_init      │ voltage
 0x21  │ eva_ref_fixed_pct_init  │ voltage_percentage
"""

from __future__ import annotations

from dataclasses import dataclass

from pymppt.quantities import QuantityKind

# =============================================================================
# ADDRESSING CONSTANTS
# =============================================================================

CONFIG_BASE_ADDRESS: int = 0xE000
"""First register of the configuration block."""

CONFIG_LAST_OFFSET: int = 0x0021
"""Highest configuration offset in use."""

CONFIG_REGISTER_COUNT: int = CONFIG_LAST_OFFSET + 1
"""Number of registers read for one configuration snapshot."""


@dataclass(frozen=True)
class ConfigRegisterDefinition:
    """Single setpoint within the configuration block.

    Attributes:
        offset: Block-relative offset (0x00-0x21).
        canonical_name: Stable field name used on the command line.
        kind: Scaling law used to decode and encode the register.
        description: Human-readable explanation of the setpoint.
    """

    offset: int
    canonical_name: str
    kind: QuantityKind = QuantityKind.RAW
    description: str = ""

    @property
    def address(self) -> int:
        """Absolute Modbus address of this register."""
        return CONFIG_BASE_ADDRESS + self.offset


_V = QuantityKind.VOLTAGE
_RAW = QuantityKind.RAW

CONFIG_REGISTERS: tuple[ConfigRegisterDefinition, ...] = (
    ConfigRegisterDefinition(0x0000, "ev_absorp", _V, "Absorption voltage @ 25°C"),
    ConfigRegisterDefinition(0x0001, "ev_float", _V, "Float voltage @ 25°C"),
    ConfigRegisterDefinition(0x0002, "et_absorp", _RAW, "Absorption time (s)"),
    ConfigRegisterDefinition(0x0003, "et_absorp_ext", _RAW, "Extended absorption time (s)"),
    ConfigRegisterDefinition(
        0x0004, "ev_absorp_ext", _V, "Battery voltage that triggers extended absorption"
    ),
    ConfigRegisterDefinition(0x0005, "ev_float_cancel", _V, "Voltage that cancels float"),
    ConfigRegisterDefinition(
        0x0006, "et_float_exit_cum", _RAW, "Cumulative time below float cancel voltage (s)"
    ),
    ConfigRegisterDefinition(0x0007, "ev_eq", _V, "Equalize voltage @ 25°C"),
    ConfigRegisterDefinition(0x0008, "et_eqcalendar", _RAW, "Days between equalize cycles"),
    ConfigRegisterDefinition(0x0009, "et_eq_above", _RAW, "Equalize time limit above Vreg (s)"),
    ConfigRegisterDefinition(0x000A, "et_eq_reg", _RAW, "Equalize time limit at Veq (s)"),
    ConfigRegisterDefinition(0x000B, "et_batt_service", _RAW, "Battery service interval (days)"),
    ConfigRegisterDefinition(
        0x000D,
        "ev_tempcomp",
        QuantityKind.TEMPERATURE_COMPENSATION,
        "Temperature compensation coefficient",
    ),
    ConfigRegisterDefinition(0x000E, "ev_hvd", _V, "High voltage disconnect"),
    ConfigRegisterDefinition(0x000F, "ev_hvr", _V, "High voltage reconnect"),
    ConfigRegisterDefinition(0x0010, "evb_ref_lim", _V, "Maximum charge voltage reference"),
    ConfigRegisterDefinition(0x0011, "etb_max", _RAW, "Maximum temperature compensation limit"),
    ConfigRegisterDefinition(0x0012, "etb_min", _RAW, "Minimum temperature compensation limit"),
    ConfigRegisterDefinition(0x0015, "ev_soc_g_gy", _V, "LED green to green/yellow threshold"),
    ConfigRegisterDefinition(0x0016, "ev_soc_gy_y", _V, "LED green/yellow to yellow threshold"),
    ConfigRegisterDefinition(0x0017, "ev_soc_y_yr", _V, "LED yellow to yellow/red threshold"),
    ConfigRegisterDefinition(0x0018, "ev_soc_yr_r", _V, "LED yellow/red to red threshold"),
    ConfigRegisterDefinition(0x0019, "emodbus_id", _RAW, "Modbus slave address"),
    ConfigRegisterDefinition(0x001A, "emeterbus_id", _RAW, "MeterBus address"),
    ConfigRegisterDefinition(0x001D, "eib_lim", QuantityKind.CURRENT, "Charge current limit"),
    ConfigRegisterDefinition(0x0020, "eva_ref_fixed_init", _V, "Fixed array voltage target"),
    ConfigRegisterDefinition(
        0x0021,
        "eva_ref_fixed_pct_init",
        QuantityKind.VOLTAGE_PERCENTAGE,
        "Fixed array voltage target, % of Voc",
    ),
)


# =============================================================================
# LOOKUP INDEXES
# =============================================================================

BY_NAME: dict[str, ConfigRegisterDefinition] = {r.canonical_name: r for r in CONFIG_REGISTERS}
"""Lookup by canonical_name → definition."""

BY_OFFSET: dict[int, ConfigRegisterDefinition] = {r.offset: r for r in CONFIG_REGISTERS}
"""Lookup by block offset → definition."""

_kind_groups: dict[QuantityKind, list[ConfigRegisterDefinition]] = {}
for _r in CONFIG_REGISTERS:
    _kind_groups.setdefault(_r.kind, []).append(_r)

BY_KIND: dict[QuantityKind, tuple[ConfigRegisterDefinition, ...]] = {
    kind: tuple(defs) for kind, defs in _kind_groups.items()
}
"""Lookup by quantity kind → tuple of definitions using it."""


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================


def absolute_address(offset: int) -> int:
    """Compute the Modbus address for a configuration offset.

    Args:
        offset: Block-relative offset (0 to CONFIG_LAST_OFFSET).

    Returns:
        Absolute Modbus register address.

    Raises:
        ValueError: If offset is out of range.
    """
    if not 0 <= offset <= CONFIG_LAST_OFFSET:
        msg = f"offset must be 0-{CONFIG_LAST_OFFSET}, got {offset}"
        raise ValueError(msg)
    return CONFIG_BASE_ADDRESS + offset


__all__ = [
    "BY_KIND",
    "BY_NAME",
    "BY_OFFSET",
    "CONFIG_BASE_ADDRESS",
    "CONFIG_LAST_OFFSET",
    "CONFIG_REGISTERS",
    "CONFIG_REGISTER_COUNT",
    "ConfigRegisterDefinition",
    "absolute_address",
]
