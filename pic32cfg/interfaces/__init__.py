"""Interface abstractions for pic32cfg.

- Device: configurable part interface (abstract base class)
"""

from pic32cfg.interfaces.device import Device

__all__ = ["Device"]
