"""Core modules for pic32cfg.

Device-agnostic functionality:
- schema: setting catalogue
- field_map: setting -> register bit field tables
- register: register descriptors and compiled images
- compiler: snapshot -> DEVCFG words
- pps: peripheral pin select tables and encoder
- clock: system/peripheral clock estimate
- device: device registry and factory (Device ABC is in interfaces)
"""

from pic32cfg.core.clock import estimate_frequency, estimate_peripheral_clock, peripheral_bus_divisor
from pic32cfg.core.compiler import CompileResult, RegisterCompiler
from pic32cfg.core.device import DeviceRegistry, create_device, list_available_devices
from pic32cfg.core.diagnostics import (
    Diagnostic,
    InvalidRouting,
    PinConflict,
    UnknownOptionLabel,
    UnknownSettingIndex,
)
from pic32cfg.core.field_map import FieldMap, FieldMapping
from pic32cfg.core.pps import (
    EncodeResult,
    PinAssignment,
    PinDirection,
    PinMultiplexer,
    PinSignalGroup,
    PPSInputSignal,
    PPSOutputPin,
    PPSOutputValue,
    PPSTables,
)
from pic32cfg.core.register import RegisterDescriptor, RegisterImage, format_register_value
from pic32cfg.core.schema import Setting, SettingSchema

__all__ = [
    # Schema / field map
    "Setting",
    "SettingSchema",
    "FieldMapping",
    "FieldMap",
    # Registers
    "RegisterDescriptor",
    "RegisterImage",
    "format_register_value",
    "RegisterCompiler",
    "CompileResult",
    # PPS
    "PinSignalGroup",
    "PPSInputSignal",
    "PPSOutputValue",
    "PPSOutputPin",
    "PPSTables",
    "PinAssignment",
    "PinDirection",
    "PinMultiplexer",
    "EncodeResult",
    # Diagnostics
    "Diagnostic",
    "UnknownSettingIndex",
    "UnknownOptionLabel",
    "InvalidRouting",
    "PinConflict",
    # Clock
    "estimate_frequency",
    "peripheral_bus_divisor",
    "estimate_peripheral_clock",
    # Device registry
    "DeviceRegistry",
    "create_device",
    "list_available_devices",
]
