"""C source generation for PPS selector registers.

Two dialects are supported: ``harmony`` (XC32/MPLAB Harmony, block
comments and ``U`` suffixes) and ``mikroc`` (mikroC PRO for PIC32, line
comments). Both emit a ``PPS_Initialize`` function wrapping the selector
writes in the SYSKEY unlock/relock sequence.
"""

from __future__ import annotations

from typing import Callable

from pic32cfg.core.pps import EncodeResult, PPSTables, ResolvedAssignment
from pic32cfg.utils.consts import SYSKEY_LOCK, SYSKEY_UNLOCK_1, SYSKEY_UNLOCK_2

STYLES = ("harmony", "mikroc")

NO_PPS = "// No PPS configured\n"

INDENT = "    "


def _hex(value: int, suffix: str = "") -> str:
    return f"0x{value:X}{suffix}"


def _key(value: int, suffix: str = "") -> str:
    return f"0x{value:08X}{suffix}"


def _winners(items: list[ResolvedAssignment]) -> list[ResolvedAssignment]:
    """First assignment per register; later claims lost to it."""
    seen: set[str] = set()
    unique = []
    for item in items:
        if item.register_name in seen:
            continue
        seen.add(item.register_name)
        unique.append(item)
    return unique


def _harmony(result: EncodeResult, tables: PPSTables) -> str:
    inputs = _winners(result.inputs())
    outputs = _winners(result.outputs())

    lines = [
        "void PPS_Initialize(void)",
        "{",
        f"{INDENT}/* Unlock system for PPS configuration */",
        f"{INDENT}SYSKEY = {_key(SYSKEY_LOCK, 'U')};",
        f"{INDENT}SYSKEY = {_key(SYSKEY_UNLOCK_1, 'U')};",
        f"{INDENT}SYSKEY = {_key(SYSKEY_UNLOCK_2, 'U')};",
        f"{INDENT}CFGCONbits.IOLOCK = 0;",
        "",
    ]

    if inputs:
        lines.append(f"{INDENT}/* PPS Input Mapping */")
        for item in inputs:
            signal = tables.input_signal(item.assignment.signal_name)
            desc = signal.description if signal and signal.description else item.assignment.signal_name
            lines.append(
                f"{INDENT}{item.register_name} = {_hex(item.selector_value, 'U')}; "
                f"/* {desc} = {item.assignment.pin_name} */"
            )
        lines.append("")

    if outputs:
        lines.append(f"{INDENT}/* PPS Output Mapping */")
        for item in outputs:
            pin = tables.output_pin(item.assignment.pin_name)
            output = pin.output_for(item.assignment.signal_name) if pin else None
            desc = output.description if output and output.description else item.assignment.pin_name
            lines.append(
                f"{INDENT}{item.register_name} = {_hex(item.selector_value, 'U')}; "
                f"/* {item.assignment.signal_name} = {desc} */"
            )
        lines.append("")

    lines += [
        f"{INDENT}/* Lock back the PPS */",
        f"{INDENT}CFGCONbits.IOLOCK = 1;",
        f"{INDENT}SYSKEY = {_key(SYSKEY_LOCK, 'U')};",
        "}",
    ]
    return "\n".join(lines) + "\n"


def _mikroc(result: EncodeResult, tables: PPSTables) -> str:
    inputs = _winners(result.inputs())
    outputs = _winners(result.outputs())

    lines = [
        "// PPS Configuration",
        "void PPS_Initialize(void) {",
        f"{INDENT}// Unlock PPS",
        f"{INDENT}SYSKEY = {_key(SYSKEY_LOCK)};",
        f"{INDENT}SYSKEY = {_key(SYSKEY_UNLOCK_1)};",
        f"{INDENT}SYSKEY = {_key(SYSKEY_UNLOCK_2)};",
        f"{INDENT}CFGCONbits.IOLOCK = 0;",
        "",
    ]

    if inputs:
        lines.append(f"{INDENT}// Configure PPS Inputs")
        for item in inputs:
            lines.append(
                f"{INDENT}{item.register_name} = {_hex(item.selector_value)}; "
                f"// {item.assignment.pin_name}"
            )
        lines.append("")

    if outputs:
        lines.append(f"{INDENT}// Configure PPS Outputs")
        for item in outputs:
            lines.append(
                f"{INDENT}{item.register_name} = {_hex(item.selector_value)}; "
                f"// {item.assignment.signal_name}"
            )
        lines.append("")

    lines += [
        f"{INDENT}// Lock PPS",
        f"{INDENT}CFGCONbits.IOLOCK = 1;",
        f"{INDENT}SYSKEY = {_key(SYSKEY_LOCK)};",
        "}",
    ]
    return "\n".join(lines) + "\n"


_RENDERERS: dict[str, Callable[[EncodeResult, PPSTables], str]] = {
    "harmony": _harmony,
    "mikroc": _mikroc,
}


def render_pps_initialize(result: EncodeResult, tables: PPSTables, style: str = "harmony") -> str:
    """Render ``PPS_Initialize`` for the selectors in ``result``.

    Only assignments that won their register are emitted; conflicting and
    invalid ones are left to the caller's diagnostics.

    Args:
        result: Output of PinMultiplexer.encode()
        tables: Tables used for the encode, for signal descriptions
        style: "harmony" or "mikroc"

    Returns:
        C source text ending in a newline

    Raises:
        ValueError: For an unknown style
    """
    renderer = _RENDERERS.get(style.lower())
    if renderer is None:
        raise ValueError(f"Unknown PPS code style '{style}'. Available: {list(STYLES)}")
    if not result.selectors:
        return NO_PPS
    return renderer(result, tables)
