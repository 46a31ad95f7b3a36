"""PIC32MZ EF vendor-level constants (Microchip PIC32MZ EFH series)."""

FAMILY_NAME = "pic32mz_efh"
"""Directory holding the family's bundled config.yaml."""

DEFAULT_PART_NUMBER = "P32MZ2048EFH144"
"""Largest package; every remappable pin is bonded out."""

# Peripheral bus numbers with a divisor setting (PBCLK2 UART/SPI/I2C, PBCLK3 timers)
PBCLK_UART = 2
PBCLK_TIMER = 3
