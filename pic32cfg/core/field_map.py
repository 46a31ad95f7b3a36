"""Field map: where each setting lives inside the configuration words.

Each mapped setting owns one contiguous bit range of one register. The
FieldMap refuses duplicate setting indices and overlapping ranges when it
is built, so the compiler never has to re-check them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional

from pic32cfg.utils.consts import ConstUtils, field_mask


@dataclass(frozen=True)
class FieldMapping:
    """Placement and value table for one setting."""

    setting_index: int
    register: str
    field_name: str
    bit_start: int
    bit_width: int
    values: dict[str, int] = field(default_factory=dict)
    pragmas: dict[str, str] = field(default_factory=dict)  # label -> XC32 #pragma config value

    def __post_init__(self) -> None:
        if not 0 <= self.bit_start < ConstUtils.REGISTER_WIDTH_BITS:
            raise ValueError(
                f"{self.field_name}: bit_start {self.bit_start} outside 0..31"
            )
        if not 1 <= self.bit_width <= ConstUtils.REGISTER_WIDTH_BITS:
            raise ValueError(
                f"{self.field_name}: bit_width {self.bit_width} outside 1..32"
            )
        if self.bit_end > ConstUtils.REGISTER_WIDTH_BITS:
            raise ValueError(f"{self.field_name}: field runs past bit 31")

        limit = 1 << self.bit_width
        for label, value in self.values.items():
            if not 0 <= value < limit:
                raise ValueError(
                    f"{self.field_name}: value {value} for {label!r} does not fit "
                    f"in {self.bit_width} bit(s)"
                )

        unknown = set(self.pragmas) - set(self.values)
        if unknown:
            raise ValueError(
                f"{self.field_name}: pragma values for unknown labels {sorted(unknown)}"
            )

    @property
    def bit_end(self) -> int:
        """One past the most significant bit of the field."""
        return self.bit_start + self.bit_width

    @property
    def mask(self) -> int:
        return field_mask(self.bit_start, self.bit_width)

    def encode(self, label: str) -> Optional[int]:
        """Return the raw field value for ``label``, or None if unknown."""
        return self.values.get(label)

    def pragma_for(self, label: str) -> Optional[str]:
        """Return the XC32 ``#pragma config`` value for ``label``, if one is known."""
        return self.pragmas.get(label)

    def extract(self, word: int) -> int:
        """Pull this field's raw bits out of a register word."""
        return (word >> self.bit_start) & ((1 << self.bit_width) - 1)

    def label_for(self, value: int) -> Optional[str]:
        """Reverse lookup: first label encoding ``value``."""
        for label, encoded in self.values.items():
            if encoded == value:
                return label
        return None

    def overlaps(self, other: FieldMapping) -> bool:
        if self.register != other.register:
            return False
        return not (self.bit_end <= other.bit_start or other.bit_end <= self.bit_start)


class FieldMap:
    """Storage and lookup for FieldMappings keyed by setting index.

    Handles overlap and duplicate validation to catch table bugs early.
    """

    def __init__(self) -> None:
        self._fields: dict[int, FieldMapping] = {}

    def add(self, mapping: FieldMapping) -> None:
        """Add a mapping to this map.

        Raises:
            ValueError: If the index is already mapped or the bit range
                overlaps another field of the same register
        """
        if mapping.setting_index in self._fields:
            raise ValueError(f"Setting {mapping.setting_index} already mapped")

        for existing in self._fields.values():
            if mapping.overlaps(existing):
                raise ValueError(
                    f"{mapping.register}.{mapping.field_name} "
                    f"[{mapping.bit_end - 1}:{mapping.bit_start}] overlaps "
                    f"{existing.field_name} [{existing.bit_end - 1}:{existing.bit_start}]"
                )
        self._fields[mapping.setting_index] = mapping

    def get(self, setting_index: int) -> Optional[FieldMapping]:
        """Return the mapping for setting_index, or None."""
        return self._fields.get(setting_index)

    def fields_for(self, register: str) -> list[FieldMapping]:
        """All fields of one register, ordered by bit position."""
        return sorted(
            (m for m in self._fields.values() if m.register == register),
            key=lambda m: m.bit_start,
        )

    @property
    def registers(self) -> set[str]:
        return {m.register for m in self._fields.values()}

    def __contains__(self, setting_index: object) -> bool:
        return setting_index in self._fields

    def __iter__(self) -> Iterator[FieldMapping]:
        return iter(self._fields.values())

    def __len__(self) -> int:
        return len(self._fields)
