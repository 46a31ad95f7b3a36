"""Text renderings of a compiled DEVCFG image."""

from __future__ import annotations

import re
from typing import Mapping, Optional

from pic32cfg.core.field_map import FieldMap, FieldMapping
from pic32cfg.core.register import RegisterDescriptor, RegisterImage, format_register_value

_MULTIPLIER = re.compile(r"PLL Multiply by (\d+)")


def render_register_summary(
    image: RegisterImage, registers: Mapping[str, RegisterDescriptor]
) -> str:
    """One ``NAME @ 0xADDRESS = 0xVALUE`` line per word, in descriptor order."""
    lines = [
        f"{name} @ {format_register_value(desc.address)} = {image.hex(name)}"
        for name, desc in registers.items()
    ]
    return "\n".join(lines) + "\n"


def render_config_words_header(
    image: RegisterImage, registers: Mapping[str, RegisterDescriptor]
) -> str:
    """C header with one ``#define NAME_VALUE 0x...U`` per word.

    The boot flash address of each word is noted in a trailing comment so
    the header can be used with a linker section or a programmer script.
    """
    lines = [
        "/* Generated configuration words */",
        "#ifndef CONFIG_WORDS_H",
        "#define CONFIG_WORDS_H",
        "",
    ]
    for name, desc in registers.items():
        lines.append(
            f"#define {name}_VALUE {image.hex(name)}U"
            f"  /* @ {format_register_value(desc.address)} */"
        )
    lines += ["", "#endif /* CONFIG_WORDS_H */"]
    return "\n".join(lines) + "\n"


def _pragma_value(mapping: FieldMapping, label: str) -> Optional[str]:
    value = mapping.pragma_for(label)
    if value is None and mapping.field_name == "FPLLMULT":
        match = _MULTIPLIER.fullmatch(label)
        if match:
            value = f"MUL_{match.group(1)}"
    return value


def render_xc32_pragmas(
    snapshot: Mapping[int, str],
    image: RegisterImage,
    field_map: FieldMap,
    device_name: str = "",
) -> str:
    """XC32 ``#pragma config`` lines for ``snapshot``, then the compiled words.

    Pragmas are grouped under a ``// DEVCFGn`` heading per word, in image
    order. Only mapped settings in the snapshot whose label has a known
    pragma value produce a line. The trailing comment block lists the
    words from ``image`` for cross-checking.

    Args:
        snapshot: Setting index -> chosen label
        image: Result of compiling the same snapshot
        field_map: Field map holding the pragma tables
        device_name: Part number for the header comment, omitted if empty

    Returns:
        C source text ending in a newline
    """
    lines = ["// PIC32MZ Configuration Bit Settings"]
    if device_name:
        lines.append(f"// Device: {device_name}")
    lines.append("")

    for register in image:
        pragmas = []
        for mapping in field_map:
            if mapping.register != register or mapping.setting_index not in snapshot:
                continue
            value = _pragma_value(mapping, snapshot[mapping.setting_index])
            if value is not None:
                pragmas.append(f"#pragma config {mapping.field_name} = {value}")
        if pragmas:
            lines += [f"// {register}", *pragmas, ""]

    lines.append("// Register values (for reference):")
    lines += [f"// {name} = {image.hex(name)}" for name in image]
    return "\n".join(lines) + "\n"
