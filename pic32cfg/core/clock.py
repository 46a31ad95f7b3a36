"""Best-effort system clock estimate from the PLL settings.

The result is advisory display data, not a register value: the true
crystal frequency is a board fact this package cannot know, so the
primary oscillator is assumed to be a 24 MHz crystal.

    SYSCLK = (input / FPLLIDIV) * FPLLMULT / FPLLODIV
    e.g.     (24 MHz / 3) * 50 / 2 = 200 MHz
"""

from __future__ import annotations

import re
from typing import Mapping, Optional

# Setting indices feeding the estimate
OSCILLATOR_SETTING = 12
PLL_INPUT_DIVIDER_SETTING = 6
PLL_MULTIPLIER_SETTING = 9
PLL_OUTPUT_DIVIDER_SETTING = 10
PERIPHERAL_BUS_SETTINGS = {2: 40, 3: 41}

DEFAULT_OSCILLATOR = "Primary Oscillator (XT, HS, EC) with PLL"
DEFAULT_PLL_INPUT_DIVIDER = "3x Divider"
DEFAULT_PLL_MULTIPLIER = "PLL Multiply by 50"
DEFAULT_PLL_OUTPUT_DIVIDER = "2x Divider"
DEFAULT_PERIPHERAL_BUS_DIVISOR = 4

FRC_FREQUENCY_MHZ = 8.0
"""Internal fast RC oscillator."""

ASSUMED_CRYSTAL_MHZ = 24.0
"""Primary oscillator path; most PIC32MZ boards carry a 24 MHz crystal."""

FALLBACK_FREQUENCY_MHZ = 200.0
"""Returned whenever a PLL label does not follow the textual convention."""

_DIVIDER_RE = re.compile(r"(\d+)x")
_MULTIPLIER_RE = re.compile(r"by (\d+)")
_PBCLK_RE = re.compile(r"/(\d+)")


def _parse(pattern: re.Pattern[str], label: str) -> Optional[int]:
    match = pattern.search(label)
    if match is None:
        return None
    return int(match.group(1))


def input_frequency(oscillator_label: str) -> float:
    """Nominal PLL input frequency in MHz for an oscillator selection."""
    if "FRC" in oscillator_label or "Fast RC" in oscillator_label:
        return FRC_FREQUENCY_MHZ
    return ASSUMED_CRYSTAL_MHZ


def estimate_frequency(snapshot: Mapping[int, str]) -> float:
    """Estimate SYSCLK in MHz from a (possibly partial) snapshot.

    Missing settings fall back to the documented defaults. Never raises:
    unparsable labels or a zero divider yield FALLBACK_FREQUENCY_MHZ.
    """
    oscillator = snapshot.get(OSCILLATOR_SETTING, DEFAULT_OSCILLATOR)
    input_divider = _parse(
        _DIVIDER_RE, snapshot.get(PLL_INPUT_DIVIDER_SETTING, DEFAULT_PLL_INPUT_DIVIDER)
    )
    multiplier = _parse(
        _MULTIPLIER_RE, snapshot.get(PLL_MULTIPLIER_SETTING, DEFAULT_PLL_MULTIPLIER)
    )
    output_divider = _parse(
        _DIVIDER_RE, snapshot.get(PLL_OUTPUT_DIVIDER_SETTING, DEFAULT_PLL_OUTPUT_DIVIDER)
    )

    if input_divider is None or multiplier is None or output_divider is None:
        return FALLBACK_FREQUENCY_MHZ
    if input_divider == 0 or output_divider == 0:
        return FALLBACK_FREQUENCY_MHZ

    return (input_frequency(oscillator) / input_divider) * multiplier / output_divider


def peripheral_bus_divisor(snapshot: Mapping[int, str], bus: int) -> int:
    """Divisor N from a ``"PBCLKn is SYSCLK/N"`` label.

    Args:
        snapshot: Setting index -> label
        bus: Peripheral bus number (2 or 3)

    Raises:
        ValueError: If ``bus`` has no divisor setting
    """
    if bus not in PERIPHERAL_BUS_SETTINGS:
        raise ValueError(
            f"No divisor setting for PBCLK{bus}; known buses: {sorted(PERIPHERAL_BUS_SETTINGS)}"
        )
    label = snapshot.get(PERIPHERAL_BUS_SETTINGS[bus], "")
    divisor = _parse(_PBCLK_RE, label)
    if not divisor:
        return DEFAULT_PERIPHERAL_BUS_DIVISOR
    return divisor


def estimate_peripheral_clock(snapshot: Mapping[int, str], bus: int) -> float:
    """Estimated PBCLKn frequency in MHz."""
    return estimate_frequency(snapshot) / peripheral_bus_divisor(snapshot, bus)
