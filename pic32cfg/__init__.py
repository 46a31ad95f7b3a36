"""PIC32MZ configuration word compiler and peripheral pin select encoder.

Turns human-readable configuration choices (oscillator, PLL ratios,
watchdog, debug access, pin functions) into DEVCFG0..DEVCFG3 words and
PPS selector register values, and renders them as C source.

Getting started:
    from pic32cfg import create_device

    device = create_device("P32MZ2048EFH100")
    image = device.compile({6: "3x Divider", 9: "PLL Multiply by 50"})
    print(image.hex("DEVCFG2"))
"""

# Core abstractions
from pic32cfg.interfaces.device import Device
from pic32cfg.core.compiler import CompileResult, RegisterCompiler
from pic32cfg.core.device import create_device, list_available_devices, verify_devices_registered
from pic32cfg.core.pps import PinAssignment, PinDirection, PinMultiplexer, PPSTables
from pic32cfg.core.register import RegisterImage, format_register_value
from pic32cfg.core.schema import Setting, SettingSchema

# Device families (auto-registers when imported)
from pic32cfg.pic32mz_efh import PIC32MZEFHDevice

__all__ = [
    # Core
    "Device",
    "CompileResult",
    "RegisterCompiler",
    "RegisterImage",
    "format_register_value",
    "Setting",
    "SettingSchema",
    "PinAssignment",
    "PinDirection",
    "PinMultiplexer",
    "PPSTables",
    # Device creation
    "create_device",
    "list_available_devices",
    "verify_devices_registered",
    # Concrete devices
    "PIC32MZEFHDevice",
]
