"""Structured, non-fatal diagnostics.

The compiler and the pin encoder never raise for bad caller data. They
return a best-effort result together with a tuple of these records so the
caller (usually an editor) can decide whether to block.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Diagnostic:
    """Base class for every diagnostic record."""

    @property
    def message(self) -> str:
        """Human-readable one-line description."""
        return type(self).__name__


@dataclass(frozen=True)
class UnknownSettingIndex(Diagnostic):
    """A snapshot entry has no field mapping; its bits stay erased."""

    setting_index: int
    label: str

    @property
    def message(self) -> str:
        return f"Setting {self.setting_index} has no register field (value {self.label!r} ignored)"


@dataclass(frozen=True)
class UnknownOptionLabel(Diagnostic):
    """A label is not in its field's value table; its bits stay erased."""

    setting_index: int
    label: str
    field_name: str

    @property
    def message(self) -> str:
        return f"Unknown value {self.label!r} for setting {self.setting_index} ({self.field_name})"


@dataclass(frozen=True)
class InvalidRouting(Diagnostic):
    """A pin assignment names a signal/pin pair absent from the PPS tables."""

    signal_name: str
    pin_name: str
    direction: str
    reason: str

    @property
    def message(self) -> str:
        return (
            f"Cannot route {self.direction} {self.signal_name} to {self.pin_name}: "
            f"{self.reason}"
        )


@dataclass(frozen=True)
class PinConflict(Diagnostic):
    """Several output signals claim the same physical pin.

    ``signals`` lists every contender in input order; the first one is the
    selector that was kept.
    """

    pin_name: str
    register_name: str
    signals: tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Pin {self.pin_name} driven by {', '.join(self.signals)} (kept {self.signals[0]})"
