"""Command-line front end.

    pic32cfg devices
    pic32cfg compile settings.yaml [--device P32MZ2048EFH100] [--defaults] [--header | --pragmas]
    pic32cfg pps pins.yaml [--device P32MZ2048EFH064] [--style mikroc]

Diagnostics go to stderr through logging; generated text goes to stdout.
Exit status is 0 even when diagnostics were reported, and 2 when an input
file cannot be read or the device is unknown.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import pic32cfg.pic32mz_efh  # noqa: F401  registers the EFH parts
from pic32cfg.codegen.pps import STYLES, render_pps_initialize
from pic32cfg.codegen.registers import (
    render_config_words_header,
    render_register_summary,
    render_xc32_pragmas,
)
from pic32cfg.core import clock
from pic32cfg.core.device import create_device, list_available_devices, verify_devices_registered
from pic32cfg.core.exceptions import ConfigurationError
from pic32cfg.pic32mz_efh.consts import DEFAULT_PART_NUMBER, PBCLK_TIMER, PBCLK_UART
from pic32cfg.utils.config_loader import load_assignments, load_snapshot

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_BAD_INPUT = 2


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pic32cfg",
        description="PIC32MZ configuration word compiler and PPS encoder",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("devices", help="List supported part numbers")

    compile_cmd = sub.add_parser("compile", help="Compile a settings snapshot to DEVCFG words")
    compile_cmd.add_argument("snapshot", help="YAML mapping of setting index -> option label")
    compile_cmd.add_argument(
        "--device", default=DEFAULT_PART_NUMBER, help=f"Part number (default: {DEFAULT_PART_NUMBER})"
    )
    compile_cmd.add_argument(
        "--defaults",
        action="store_true",
        help="Fill settings missing from the snapshot with their defaults",
    )
    output = compile_cmd.add_mutually_exclusive_group()
    output.add_argument(
        "--header", action="store_true", help="Emit a C header instead of a summary"
    )
    output.add_argument(
        "--pragmas", action="store_true", help="Emit XC32 #pragma config lines"
    )

    pps_cmd = sub.add_parser("pps", help="Encode PPS assignments and emit PPS_Initialize")
    pps_cmd.add_argument("assignments", help="YAML list of {signal, pin, direction}")
    pps_cmd.add_argument(
        "--device", default=DEFAULT_PART_NUMBER, help=f"Part number (default: {DEFAULT_PART_NUMBER})"
    )
    pps_cmd.add_argument(
        "--style", choices=STYLES, default="harmony", help="C dialect (default: harmony)"
    )

    return parser.parse_args(argv)


def _cmd_devices() -> int:
    for name in list_available_devices():
        device = create_device(name)
        variant = device.variant
        print(f"{name}  {variant.pins:>3} pins  {variant.flash_kb:>4} KB flash  {variant.ram_kb} KB RAM")
    return EXIT_OK


def _cmd_compile(args: argparse.Namespace) -> int:
    device = create_device(args.device)
    snapshot = load_snapshot(args.snapshot)
    if args.defaults:
        snapshot = device.schema.resolve(snapshot)

    result = device.compile_with_diagnostics(snapshot)
    for diagnostic in result.diagnostics:
        logger.warning(diagnostic.message)

    if args.pragmas:
        sys.stdout.write(
            render_xc32_pragmas(snapshot, result.image, device.field_map, device_name=device.name)
        )
        return EXIT_OK

    if args.header:
        sys.stdout.write(render_config_words_header(result.image, device.registers))
        return EXIT_OK

    sys.stdout.write(render_register_summary(result.image, device.registers))
    sysclk = device.estimate_frequency(snapshot)
    print(f"SYSCLK  ~ {sysclk:g} MHz")
    for bus in (PBCLK_UART, PBCLK_TIMER):
        print(f"PBCLK{bus}  ~ {clock.estimate_peripheral_clock(snapshot, bus):g} MHz")
    return EXIT_OK


def _cmd_pps(args: argparse.Namespace) -> int:
    device = create_device(args.device)
    assignments = load_assignments(args.assignments)

    result = device.encode_pins(assignments)
    for error in result.errors:
        logger.warning(error.message)
    for conflict in result.conflicts:
        logger.warning(conflict.message)

    sys.stdout.write(render_pps_initialize(result, device.pps_tables, style=args.style))
    return EXIT_OK


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )
    verify_devices_registered()

    if args.command == "devices":
        return _cmd_devices()

    if args.device not in list_available_devices():
        logger.error(f"Unknown device '{args.device}'. Available: {list_available_devices()}")
        return EXIT_BAD_INPUT

    try:
        if args.command == "compile":
            return _cmd_compile(args)
        return _cmd_pps(args)
    except ConfigurationError as exc:
        logger.error(str(exc))
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    raise SystemExit(main())
