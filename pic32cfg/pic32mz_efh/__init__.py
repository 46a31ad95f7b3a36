"""PIC32MZ EF family concrete implementations.

Importing this package registers the family with the device registry; its
part numbers come from the ``devices`` catalogue in config.yaml.
"""

from pic32cfg.core.device import register_family
from pic32cfg.pic32mz_efh.consts import DEFAULT_PART_NUMBER, FAMILY_NAME
from pic32cfg.pic32mz_efh.device import PIC32MZEFHDevice

register_family(FAMILY_NAME, PIC32MZEFHDevice)

__all__ = ["PIC32MZEFHDevice", "DEFAULT_PART_NUMBER", "FAMILY_NAME"]
