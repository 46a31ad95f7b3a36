"""Configuration register abstraction.

A configuration word is a fixed 32-bit value burned into boot flash. Erased
flash reads as all ones, so every word starts at 0xFFFFFFFF and fields are
cleared/set from there. This module describes the words and holds the
immutable image the compiler produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterator, Mapping

from pic32cfg.utils.consts import ConstUtils

if TYPE_CHECKING:
    from pic32cfg.core.field_map import FieldMapping


def format_register_value(value: int) -> str:
    """Render a register as ``0x`` plus 8 uppercase, zero-padded hex digits."""
    return f"0x{value & ConstUtils.MASK_32_BITS:08X}"


@dataclass(frozen=True)
class RegisterDescriptor:
    """Metadata about a single configuration word.

    This is documentation and validation, not storage. Values live in a
    RegisterImage.
    """

    name: str
    address: int
    width: int = 4  # bytes
    reset_value: int = ConstUtils.ERASED_WORD


@dataclass(frozen=True)
class RegisterImage:
    """Fresh, immutable set of compiled register words keyed by name.

    The words are copied into a read-only view on construction, so the dict
    a caller passed in can change afterwards without affecting the image.
    Images are hashable and compare equal when their words are equal.
    """

    values: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def __hash__(self) -> int:
        return hash(frozenset(self.values.items()))

    def __getitem__(self, register: str) -> int:
        return self.values[register]

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def hex(self, register: str) -> str:
        """Return one word formatted for display (e.g. ``0xFFFFFFF8``)."""
        return format_register_value(self.values[register])

    def as_dict(self) -> dict[str, int]:
        return dict(self.values)

    def as_hex(self) -> dict[str, str]:
        return {name: format_register_value(value) for name, value in self.values.items()}

    def field_value(self, mapping: FieldMapping) -> int:
        """Extract the raw bits of one field from its target word."""
        return mapping.extract(self.values[mapping.register])

    @classmethod
    def erased(cls, registers: Mapping[str, RegisterDescriptor]) -> RegisterImage:
        """Image where every word holds its reset (erased) value."""
        return cls({name: desc.reset_value for name, desc in registers.items()})
