"""Device abstraction - behavioral contract.

A Device is one concrete part number: its configuration words, its setting
catalogue, its PPS tables and the package it ships in. Every concrete
device family must implement this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping, Optional, Sequence

from pic32cfg.core.compiler import CompileResult
from pic32cfg.core.field_map import FieldMap
from pic32cfg.core.pps import EncodeResult, PinAssignment, PPSTables
from pic32cfg.core.register import RegisterDescriptor, RegisterImage
from pic32cfg.core.schema import SettingSchema


class Device(ABC):
    """Base class for configurable devices.

    Every concrete device (e.g., PIC32MZEFHDevice) must inherit from this
    class and implement all abstract members.
    """

    @classmethod
    @abstractmethod
    def part_numbers(cls) -> list[str]:
        """Part numbers this class can be instantiated for."""
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Part number (e.g., 'P32MZ2048EFH144')."""
        ...

    @property
    @abstractmethod
    def pin_count(self) -> int:
        """Package pin count."""
        ...

    @property
    @abstractmethod
    def schema(self) -> SettingSchema:
        """User-facing setting catalogue."""
        ...

    @property
    @abstractmethod
    def field_map(self) -> FieldMap:
        """Setting index -> register bit field."""
        ...

    @property
    @abstractmethod
    def pps_tables(self) -> PPSTables:
        """Peripheral pin select reference tables."""
        ...

    @property
    @abstractmethod
    def registers(self) -> dict[str, RegisterDescriptor]:
        """Configuration words keyed by name."""
        ...

    @abstractmethod
    def compile_with_diagnostics(self, snapshot: Mapping[int, str]) -> CompileResult:
        """Compile a snapshot and report unknown indices and labels."""
        ...

    @abstractmethod
    def compile(self, snapshot: Mapping[int, str]) -> RegisterImage:
        """Compile a snapshot, logging any diagnostics."""
        ...

    @abstractmethod
    def encode_pins(
        self, assignments: Sequence[PinAssignment], pin_count: Optional[int] = None
    ) -> EncodeResult:
        """Validate and encode PPS assignments for this package."""
        ...

    @abstractmethod
    def estimate_frequency(self, snapshot: Mapping[int, str]) -> float:
        """Estimated system clock in MHz."""
        ...

    def defaults(self) -> dict[int, str]:
        """Default label for every setting."""
        return self.schema.defaults()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} ({self.pin_count} pins)>"
