"""Register compiler: snapshot of chosen labels -> DEVCFG words.

ALGORITHM
=========
1. Every word starts erased (0xFFFFFFFF). Fields nobody sets keep
   reading as all ones, exactly like unprogrammed boot flash.
2. For each (setting index, label) in the snapshot:
   - informational setting -> skip silently (runtime value, no field)
   - no field mapping      -> UnknownSettingIndex, skip
   - label not in table    -> UnknownOptionLabel, skip
   - otherwise             -> word = (word & ~mask) | (value << bit_start)
3. Words are coerced to unsigned 32-bit.

Step 2 only ever rewrites the bits of its own field and fields never
overlap (FieldMap enforces that), so the visiting order of the snapshot is
not observable in the result.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping

from pic32cfg.core.diagnostics import Diagnostic, UnknownOptionLabel, UnknownSettingIndex
from pic32cfg.core.field_map import FieldMap
from pic32cfg.core.register import RegisterDescriptor, RegisterImage
from pic32cfg.utils.consts import to_u32

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileResult:
    """Register image plus the non-fatal problems found while compiling."""

    image: RegisterImage
    diagnostics: tuple[Diagnostic, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.diagnostics


class RegisterCompiler:
    """Pure compiler over a fixed field map and register set.

    Instances hold only immutable reference tables, so one compiler can be
    shared freely between callers and threads.
    """

    def __init__(
        self,
        field_map: FieldMap,
        registers: Mapping[str, RegisterDescriptor],
        informational: Iterable[int] = (),
    ):
        self._field_map = field_map
        self._registers = dict(registers)
        self._informational = frozenset(informational)

    @property
    def registers(self) -> dict[str, RegisterDescriptor]:
        return dict(self._registers)

    def compile_with_diagnostics(self, snapshot: Mapping[int, str]) -> CompileResult:
        """Compile ``snapshot`` and return the image with its diagnostics.

        Args:
            snapshot: Partial mapping of setting index -> chosen label.
                Only entries present are applied; it is never mutated.

        Returns:
            CompileResult with a fresh RegisterImage.
        """
        words = {name: desc.reset_value for name, desc in self._registers.items()}
        diagnostics: list[Diagnostic] = []

        for index, label in snapshot.items():
            if index in self._informational:
                continue

            mapping = self._field_map.get(index)
            if mapping is None:
                diagnostics.append(UnknownSettingIndex(setting_index=index, label=label))
                continue

            value = mapping.encode(label)
            if value is None:
                diagnostics.append(
                    UnknownOptionLabel(
                        setting_index=index, label=label, field_name=mapping.field_name
                    )
                )
                continue

            word = words[mapping.register]
            words[mapping.register] = (word & ~mapping.mask) | (value << mapping.bit_start)

        image = RegisterImage({name: to_u32(word) for name, word in words.items()})
        return CompileResult(image=image, diagnostics=tuple(diagnostics))

    def compile(self, snapshot: Mapping[int, str]) -> RegisterImage:
        """Compile ``snapshot``, logging each diagnostic as a warning."""
        result = self.compile_with_diagnostics(snapshot)
        for diagnostic in result.diagnostics:
            logger.warning(diagnostic.message)
        return result.image

    def decode(self, image: RegisterImage) -> dict[int, str]:
        """Map every field's current bits back to its label.

        Fields whose bits match no label (e.g. an erased 3-bit field with
        only five defined values) are left out.
        """
        decoded: dict[int, str] = {}
        for mapping in self._field_map:
            label = mapping.label_for(image.field_value(mapping))
            if label is not None:
                decoded[mapping.setting_index] = label
        return decoded
