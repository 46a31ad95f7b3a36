from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from overrides import override  # type: ignore

from pic32cfg.core import clock
from pic32cfg.core.compiler import CompileResult, RegisterCompiler
from pic32cfg.core.field_map import FieldMap
from pic32cfg.core.pps import EncodeResult, PinAssignment, PinMultiplexer, PPSTables
from pic32cfg.core.register import RegisterDescriptor, RegisterImage
from pic32cfg.core.schema import SettingSchema
from pic32cfg.interfaces.device import Device
from pic32cfg.utils.config_loader import DeviceConfig, DeviceVariant, get_config

from .consts import DEFAULT_PART_NUMBER, FAMILY_NAME

logger = logging.getLogger(__name__)


class PIC32MZEFHDevice(Device):
    """PIC32MZ EF (with FPU) device.

    Every part of the family shares one DEVCFG layout, setting catalogue
    and PPS table; parts differ only in flash size and package pin count.
    """

    def __init__(
        self,
        part_number: str = DEFAULT_PART_NUMBER,
        config: Optional[DeviceConfig] = None,
        **_kwargs: Any,
    ) -> None:
        self._config = config if config is not None else get_config(FAMILY_NAME)

        variant = self._config.variants.get(part_number)
        if variant is None:
            raise ValueError(
                f"Unknown {FAMILY_NAME} part '{part_number}'. "
                f"Available: {list(self._config.variants)}"
            )
        self._variant: DeviceVariant = variant

        self._compiler = RegisterCompiler(
            self._config.field_map,
            self._config.registers,
            informational=self._config.schema.informational_indices(),
        )
        self._multiplexer = PinMultiplexer(self._config.pps)
        logger.debug(f"Created {part_number} ({variant.pins} pins, {variant.flash_kb} KB flash)")

    @classmethod
    @override
    def part_numbers(cls) -> list[str]:
        return list(get_config(FAMILY_NAME).variants)

    @property
    @override
    def name(self) -> str:
        return self._variant.part_number

    @property
    @override
    def pin_count(self) -> int:
        return self._variant.pins

    @property
    def variant(self) -> DeviceVariant:
        return self._variant

    @property
    @override
    def schema(self) -> SettingSchema:
        return self._config.schema

    @property
    @override
    def field_map(self) -> FieldMap:
        return self._config.field_map

    @property
    @override
    def pps_tables(self) -> PPSTables:
        return self._config.pps

    @property
    @override
    def registers(self) -> dict[str, RegisterDescriptor]:
        return dict(self._config.registers)

    @override
    def compile_with_diagnostics(self, snapshot: Mapping[int, str]) -> CompileResult:
        return self._compiler.compile_with_diagnostics(snapshot)

    @override
    def compile(self, snapshot: Mapping[int, str]) -> RegisterImage:
        return self._compiler.compile(snapshot)

    def decode(self, image: RegisterImage) -> dict[int, str]:
        return self._compiler.decode(image)

    @override
    def encode_pins(
        self, assignments: Sequence[PinAssignment], pin_count: Optional[int] = None
    ) -> EncodeResult:
        """Encode assignments, restricted to this part's package by default."""
        return self._multiplexer.encode(
            assignments, pin_count=self.pin_count if pin_count is None else pin_count
        )

    @override
    def estimate_frequency(self, snapshot: Mapping[int, str]) -> float:
        return clock.estimate_frequency(snapshot)
