"""Device registry and factory.

Families, not parts, are registered. A family is one Device subclass whose
``part_numbers()`` lists the parts it can be built for, normally the variant
catalogue of its bundled config.yaml. Part-number lookups are resolved
against those catalogues on demand, so registering a family does no file
I/O and a new variant only needs a config.yaml entry.

Device families call register_family() in their package __init__.py, so
importing the family makes its parts available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Type

if TYPE_CHECKING:
    from pic32cfg.interfaces.device import Device


class DeviceRegistry:
    """Registry of device families and the part numbers they provide.

    THREAD SAFETY: Not thread-safe. All family registration should happen
    during module initialization before any threads are spawned.
    """

    def __init__(self):
        self._families: dict[str, Type[Device]] = {}

    def register_family(self, family: str, device_class: Type[Device]) -> None:
        """Register the Device subclass implementing ``family``."""
        if family in self._families:
            raise ValueError(f"Device family '{family}' already registered")
        self._families[family] = device_class

    def list_families(self) -> list[str]:
        return list(self._families)

    def _part_index(self) -> dict[str, str]:
        """Part number -> family, across every registered family.

        Raises:
            ValueError: If two families claim the same part number
        """
        index: dict[str, str] = {}
        for family, device_class in self._families.items():
            for part in device_class.part_numbers():
                if part in index:
                    raise ValueError(
                        f"Part '{part}' claimed by both '{index[part]}' and '{family}'"
                    )
                index[part] = family
        return index

    def family_of(self, name: str) -> str:
        """Family providing part number ``name``."""
        index = self._part_index()
        if name not in index:
            raise ValueError(f"Unknown device '{name}'. Available: {list(index)}")
        return index[name]

    def get(self, name: str) -> Type[Device]:
        """Get the device class serving a part number."""
        return self._families[self.family_of(name)]

    def list_devices(self) -> list[str]:
        """List every part number of every registered family."""
        return list(self._part_index())

    def create(self, name: str, **kwargs) -> Any:
        """Instantiate a device by part number.

        The part number is passed to the constructor as ``part_number``;
        one class serves every part of its family.
        """
        device_class = self.get(name)
        return device_class(part_number=name, **kwargs)


# Global registry
_REGISTRY = DeviceRegistry()


def register_family(family: str, device_class: Type[Device]) -> None:
    """Register a device family globally."""
    _REGISTRY.register_family(family, device_class)


def get_device(name: str) -> Type[Device]:
    """Get a device class by part number."""
    return _REGISTRY.get(name)


def create_device(name: str, **kwargs) -> Any:
    """Create a device instance by part number."""
    return _REGISTRY.create(name, **kwargs)


def list_available_devices() -> list[str]:
    """List all part numbers of all registered families."""
    return _REGISTRY.list_devices()


def verify_devices_registered() -> None:
    """Verify that at least one part number is available.

    Raises:
        RuntimeError: If no family is registered or none lists a part
    """
    devices = list_available_devices()
    if not devices:
        raise RuntimeError(
            "No devices registered! Ensure device modules are imported. "
            "Example: import pic32cfg.pic32mz_efh"
        )
