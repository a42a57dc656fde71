#!/usr/bin/env python3
"""mppt-control: read and adjust charge controller setpoints.

Usage:
    mppt-control                          # Print all configuration setpoints
    mppt-control get ev_float             # Print one setpoint
    mppt-control set ev_float 13.6        # Write one setpoint
    mppt-control get-ram                  # Print all status registers
    mppt-control print-json               # Dump status and configuration as JSON
    mppt-control --list-serial-ports
    mppt-control --help
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from pymppt import __version__
from pymppt.exceptions import MpptError
from pymppt.quantities import format_value
from pymppt.session import MpptSession
from pymppt.transports import FakeTransport, ModbusSerialTransport, SerialConfig
from pymppt.transports.protocol import BaseTransport

_LOGGER = logging.getLogger(__name__)


def create_parser(config: SerialConfig | None = None) -> argparse.ArgumentParser:
    """Create argument parser.

    Args:
        config: Connection defaults (normally from the environment)
    """
    config = config or SerialConfig.from_env()

    parser = argparse.ArgumentParser(
        prog="mppt-control",
        description="Read and write charge controller registers over Modbus RTU.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mppt-control
      Print every configuration setpoint

  mppt-control get EV_ABSORP
      Print one setpoint (names are case-insensitive)

  mppt-control set ev_absorp 14.4
      Encode 14.4 V with the device's scale factors and write it

  mppt-control --fake set ev_absorp 14.4 --dry-run
      Show what would be written without a controller attached

Environment:
  MPPT_SERIAL_PORT, MPPT_BAUDRATE, MPPT_UNIT_ID, MPPT_TIMEOUT
  (also read from a .env file in the current directory)
""",
    )

    conn_group = parser.add_argument_group("Connection Options")
    conn_group.add_argument(
        "--serial-port",
        "-s",
        default=config.port,
        help="Serial port connected to the controller (default: %(default)s)",
    )
    conn_group.add_argument(
        "--baudrate",
        "-b",
        type=int,
        default=config.baudrate,
        help="Serial baud rate (default: %(default)s)",
    )
    conn_group.add_argument(
        "--unit-id",
        type=int,
        default=config.unit_id,
        help="Modbus slave address (default: %(default)s)",
    )
    conn_group.add_argument(
        "--list-serial-ports",
        action="store_true",
        help="List serial ports on this system and exit",
    )
    conn_group.add_argument(
        "--fake",
        action="store_true",
        help="Use an in-memory device instead of a serial port (for testing)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    get_parser = subparsers.add_parser("get", help="Get a single configuration value")
    get_parser.add_argument("name", help="Setpoint name, e.g. ev_float")

    set_parser = subparsers.add_parser("set", help="Set a single configuration value")
    set_parser.add_argument("name", help="Setpoint name, e.g. ev_float")
    set_parser.add_argument("value", type=float, help="New value in physical units")
    set_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be written without writing",
    )

    subparsers.add_parser("get-ram", help="Print all status (RAM) registers")
    subparsers.add_parser("print-json", help="Print status and configuration as JSON")

    return parser


def configure_logging(verbosity: int) -> None:
    """Configure root logging for the command line."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def serial_config(args: argparse.Namespace) -> SerialConfig:
    """Connection settings given on the command line."""
    return SerialConfig(
        port=args.serial_port,
        baudrate=args.baudrate,
        unit_id=args.unit_id,
    )


def create_transport(args: argparse.Namespace) -> BaseTransport:
    """Build the transport selected by the command line."""
    if args.fake:
        return FakeTransport()
    return ModbusSerialTransport.from_config(serial_config(args))


async def run_command(session: MpptSession, args: argparse.Namespace) -> int:
    """Execute the selected subcommand against a refreshed session."""
    if args.command == "get":
        field = session.get(args.name)
        print(f"{field.name}: {field.display()}")
    elif args.command == "set":
        print(f"setting var {args.name}")
        existing = session.get(args.name)
        print(f"Existing value:\n  {existing.display()}")
        request = await session.set(args.name, args.value, dry_run=args.dry_run)
        print(f"New value:\n  Scaled: {format_value(request.value)}, Raw: {request.raw}\n")
        verb = "Would write" if args.dry_run else "Wrote"
        print(f"{verb} {request.raw} to address 0x{request.address:04X}")
    elif args.command == "get-ram":
        print(session.status.display())
    elif args.command == "print-json":
        print(json.dumps(session.to_dict()))
    else:
        print(session.config.display())
    return 0


async def run(args: argparse.Namespace) -> int:
    """Connect, refresh and run the command."""
    transport = create_transport(args)
    if not args.fake:
        print(f"Connecting to device on {args.serial_port}", file=sys.stderr)

    async with transport:
        session = MpptSession(transport)
        await session.refresh()
        return await run_command(session, args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    try:
        defaults = SerialConfig.from_env()
    except ValueError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    parser = create_parser(defaults)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.list_serial_ports:
        from pymppt.cli.ports import format_port_list, list_serial_ports

        print(format_port_list(list_serial_ports()))
        return 0

    if not args.fake:
        try:
            serial_config(args).validate()
        except ValueError as err:
            print(f"Error: {err}", file=sys.stderr)
            return 1

        if not Path(args.serial_port).exists():
            print(
                f"Serial port {args.serial_port} does not exist\n"
                'Try "mppt-control --help" for usage instructions',
                file=sys.stderr,
            )
            return 1

    try:
        return asyncio.run(run(args))
    except MpptError as err:
        _LOGGER.debug("Command failed", exc_info=True)
        print(f"Error: {err}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
