"""Status (RAM) register map.

The status block is volatile and reports live operating state. It is read
with function code 0x03 starting at address 0, so the block-relative offset
of every field is also its Modbus address.

Every status field is decoded as a raw 16-bit quantity; physical scaling is
left to the caller via :class:`~pymppt.scaling.ScaleContext`.

Offset │ Name             │ Category
───────┼──────────────────┼──────────────
 0x00  │ v_pu_hi          │ scaling
 0x04  │ ver_sw           │ scaling
 0x18  │ adc_vb_f_med     │ adc
 0x23  │ t_hs             │ temperature
 0x26  │ adc_vb_f_1m      │ status
 0x32  │ charge_state     │ charger
 0x3A  │ power_out_shadow │ mppt
 0x40  │ vb_min_daily     │ logger
 0x58  │ ib_ref_slave     │ manual_control
 0x5B  │ va_ref_fixed_pct │ manual_control (last)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# =============================================================================
# ADDRESSING CONSTANTS
# =============================================================================

STATUS_BASE_ADDRESS: int = 0x0000
"""First register of the status block."""

STATUS_LAST_OFFSET: int = 0x005B
"""Highest status offset in use."""

STATUS_REGISTER_COUNT: int = STATUS_LAST_OFFSET + 1
"""Number of registers read for one status snapshot."""


class StatusCategory(StrEnum):
    """Logical grouping for status registers."""

    SCALING = "scaling"
    ADC = "adc"
    TEMPERATURE = "temperature"
    STATUS = "status"
    CHARGER = "charger"
    MPPT = "mppt"
    LOGGER = "logger"
    MANUAL_CONTROL = "manual_control"


@dataclass(frozen=True)
class StatusRegisterDefinition:
    """Single register within the status block."""

    offset: int
    """Offset within the status block (0x00-0x5B)."""

    canonical_name: str
    """Unique, stable identifier."""

    category: StatusCategory = StatusCategory.STATUS

    description: str = ""


def _reg(
    offset: int,
    name: str,
    category: StatusCategory,
    description: str = "",
) -> StatusRegisterDefinition:
    return StatusRegisterDefinition(offset, name, category, description)


_S = StatusCategory

STATUS_REGISTERS: tuple[StatusRegisterDefinition, ...] = (
    # scaling values
    _reg(0x0000, "v_pu_hi", _S.SCALING, "Voltage scaling, integer part"),
    _reg(0x0001, "v_pu_lo", _S.SCALING, "Voltage scaling, fractional part"),
    _reg(0x0002, "i_pu_hi", _S.SCALING, "Current scaling, integer part"),
    _reg(0x0003, "i_pu_lo", _S.SCALING, "Current scaling, fractional part"),
    _reg(0x0004, "ver_sw", _S.SCALING, "Software version"),
    # filtered ADC
    _reg(0x0018, "adc_vb_f_med", _S.ADC, "Battery voltage, filtered"),
    _reg(0x0019, "adc_vbterm_f", _S.ADC, "Battery terminal voltage, filtered"),
    _reg(0x001A, "adc_vbs_f", _S.ADC, "Battery sense voltage, filtered"),
    _reg(0x001B, "adc_va_f", _S.ADC, "Array voltage, filtered"),
    _reg(0x001C, "adc_ib_f_shadow", _S.ADC, "Battery current, filtered"),
    _reg(0x001D, "adc_ia_f_shadow", _S.ADC, "Array current, filtered"),
    _reg(0x001E, "adc_p12_f", _S.ADC, "12 V supply"),
    _reg(0x001F, "adc_p3_f", _S.ADC, "3 V supply"),
    _reg(0x0020, "adc_pmeter_f", _S.ADC, "MeterBus voltage"),
    _reg(0x0021, "adc_p18_f", _S.ADC, "1.8 V supply"),
    _reg(0x0022, "adc_v_ref", _S.ADC, "Reference voltage"),
    # temperatures
    _reg(0x0023, "t_hs", _S.TEMPERATURE, "Heatsink temperature"),
    _reg(0x0024, "t_rts", _S.TEMPERATURE, "Remote temperature sensor"),
    _reg(0x0025, "t_batt", _S.TEMPERATURE, "Battery regulation temperature"),
    # status
    _reg(0x0026, "adc_vb_f_1m", _S.STATUS, "Battery voltage, 1 minute filter"),
    _reg(0x0027, "adc_ib_f_1m", _S.STATUS, "Charging current, 1 minute filter"),
    _reg(0x0028, "vb_min", _S.STATUS, "Minimum battery voltage"),
    _reg(0x0029, "vb_max", _S.STATUS, "Maximum battery voltage"),
    _reg(0x002A, "hourmeter_hi", _S.STATUS, "Hourmeter, high word"),
    _reg(0x002B, "hourmeter_lo", _S.STATUS, "Hourmeter, low word"),
    _reg(0x002C, "fault_all", _S.STATUS, "All faults bitfield"),
    _reg(0x002E, "alarm_hi", _S.STATUS, "Alarm bitfield, high word"),
    _reg(0x002F, "alarm_lo", _S.STATUS, "Alarm bitfield, low word"),
    _reg(0x0030, "dip_all", _S.STATUS, "DIP switch positions"),
    _reg(0x0031, "led_state", _S.STATUS, "State of charge LED state"),
    # charger
    _reg(0x0032, "charge_state", _S.CHARGER, "Charge state"),
    _reg(0x0033, "vb_ref", _S.CHARGER, "Target regulation voltage"),
    _reg(0x0034, "ahc_r_hi", _S.CHARGER, "Ah charge resettable, high word"),
    _reg(0x0035, "ahc_r_lo", _S.CHARGER, "Ah charge resettable, low word"),
    _reg(0x0036, "ahc_t_hi", _S.CHARGER, "Ah charge total, high word"),
    _reg(0x0037, "ahc_t_lo", _S.CHARGER, "Ah charge total, low word"),
    _reg(0x0038, "kwhc_r", _S.CHARGER, "kWh charge resettable"),
    _reg(0x0039, "kwhc_t", _S.CHARGER, "kWh charge total"),
    # MPPT
    _reg(0x003A, "power_out_shadow", _S.MPPT, "Output power"),
    _reg(0x003B, "power_in_shadow", _S.MPPT, "Input power"),
    _reg(0x003C, "sweep_pin_max", _S.MPPT, "Maximum power of last sweep"),
    _reg(0x003D, "sweep_vmp", _S.MPPT, "Vmp of last sweep"),
    _reg(0x003E, "sweep_voc", _S.MPPT, "Voc of last sweep"),
    # logger - today's values
    _reg(0x0040, "vb_min_daily", _S.LOGGER, "Minimum battery voltage today"),
    _reg(0x0041, "vb_max_daily", _S.LOGGER, "Maximum battery voltage today"),
    _reg(0x0042, "va_max_daily", _S.LOGGER, "Maximum input voltage today"),
    _reg(0x0043, "ahc_daily", _S.LOGGER, "Amp-hours accumulated today"),
    _reg(0x0044, "whc_daily", _S.LOGGER, "Watt-hours accumulated today"),
    _reg(0x0045, "flags_daily", _S.LOGGER, "Daily flags bitfield"),
    _reg(0x0046, "pout_max_daily", _S.LOGGER, "Maximum power output today"),
    _reg(0x0047, "tb_min_daily", _S.LOGGER, "Minimum battery temperature today"),
    _reg(0x0048, "tb_max_daily", _S.LOGGER, "Maximum battery temperature today"),
    _reg(0x0049, "fault_daily", _S.LOGGER, "Faults today bitfield"),
    _reg(0x004B, "alarm_daily_hi", _S.LOGGER, "Alarms today, high word"),
    _reg(0x004C, "alarm_daily_lo", _S.LOGGER, "Alarms today, low word"),
    _reg(0x004D, "time_ab_daily", _S.LOGGER, "Time in absorption today"),
    _reg(0x004E, "time_eq_daily", _S.LOGGER, "Time in equalize today"),
    _reg(0x004F, "time_fl_daily", _S.LOGGER, "Time in float today"),
    # manual control
    _reg(0x0058, "ib_ref_slave", _S.MANUAL_CONTROL, "Battery current limit, slave mode"),
    _reg(0x0059, "vb_ref_slave", _S.MANUAL_CONTROL, "Battery voltage reference, slave mode"),
    _reg(0x005A, "va_ref_fixed", _S.MANUAL_CONTROL, "Fixed array voltage target"),
    _reg(0x005B, "va_ref_fixed_pct", _S.MANUAL_CONTROL, "Fixed array voltage target, % of Voc"),
)


# =============================================================================
# LOOKUP INDEXES
# =============================================================================

BY_NAME: dict[str, StatusRegisterDefinition] = {r.canonical_name: r for r in STATUS_REGISTERS}
"""Lookup by canonical_name → definition."""

BY_OFFSET: dict[int, StatusRegisterDefinition] = {r.offset: r for r in STATUS_REGISTERS}
"""Lookup by block offset → definition."""

_cat_groups: dict[StatusCategory, list[StatusRegisterDefinition]] = {}
for _r in STATUS_REGISTERS:
    _cat_groups.setdefault(_r.category, []).append(_r)

BY_CATEGORY: dict[StatusCategory, tuple[StatusRegisterDefinition, ...]] = {
    cat: tuple(defs) for cat, defs in _cat_groups.items()
}
"""Lookup by category → tuple of definitions in that category."""


__all__ = [
    "BY_CATEGORY",
    "BY_NAME",
    "BY_OFFSET",
    "STATUS_BASE_ADDRESS",
    "STATUS_LAST_OFFSET",
    "STATUS_REGISTERS",
    "STATUS_REGISTER_COUNT",
    "StatusCategory",
    "StatusRegisterDefinition",
]
