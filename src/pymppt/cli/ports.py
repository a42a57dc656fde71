"""Serial port discovery."""

from __future__ import annotations

from serial.tools import list_ports


def list_serial_ports() -> list[tuple[str, str]]:
    """Return ``(device, description)`` for every serial port, sorted by device."""
    ports = [(port.device, port.description or "") for port in list_ports.comports()]
    return sorted(ports)


def format_port_list(ports: list[tuple[str, str]]) -> str:
    """Format ports one per line for terminal output."""
    if not ports:
        return "No serial ports found"
    width = max(len(device) for device, _ in ports)
    return "\n".join(
        f"{device:<{width}}  {description}".rstrip() for device, description in ports
    )
