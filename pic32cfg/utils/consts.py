"""Constants and utility values for pic32cfg."""


class ConstUtils:
    """Bitwise masks and register constants."""

    MASK_32_BITS = 0xFFFFFFFF
    """32-bit mask: 0xFFFFFFFF"""

    REGISTER_WIDTH_BITS = 32
    """Every DEVCFG word is 32 bits wide."""

    ERASED_WORD = MASK_32_BITS
    """Unprogrammed boot flash reads back as all ones."""


# PPS unlock/lock keys written to SYSKEY around selector updates
SYSKEY_LOCK = 0x00000000
SYSKEY_UNLOCK_1 = 0xAA996655
SYSKEY_UNLOCK_2 = 0x556699AA


def field_mask(bit_start: int, bit_width: int) -> int:
    """Mask covering ``[bit_start, bit_start + bit_width)``."""
    return ((1 << bit_width) - 1) << bit_start


def to_u32(value: int) -> int:
    """Coerce an int to an unsigned 32-bit value."""
    return value & ConstUtils.MASK_32_BITS
