"""Peripheral Pin Select (PPS) tables and the pin assignment encoder.

ROUTING MODEL
=============
Remappable pins are partitioned into four groups. Inside a group:

- An *input* signal register (e.g. U1RXR) selects its source pin by
  writing the group-relative selector of that pin. A group-0 signal can
  only be sourced from a group-0 pin.
- An *output* pin register (e.g. RPD2R) selects which peripheral output
  drives the pin by writing that output's selector value.

Inputs and outputs are independent multiplexers, so several inputs may
read one pin and an input may read a pin an output drives. Only two
outputs on one pin are a conflict.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from pic32cfg.core.diagnostics import InvalidRouting, PinConflict
from pic32cfg.core.exceptions import TableValidationError

logger = logging.getLogger(__name__)

NO_CONNECT = "No Connect"


class PinDirection(str, enum.Enum):
    """Direction of a PPS assignment."""

    INPUT = "input"
    """Peripheral input reads a physical pin."""

    OUTPUT = "output"
    """Peripheral output drives a physical pin."""


@dataclass(frozen=True)
class GroupPin:
    """One selectable pin inside a PinSignalGroup."""

    selector: int
    pin_name: str
    min_pin_count: int = 0  # smallest package that bonds out this pin


@dataclass(frozen=True)
class PinSignalGroup:
    """Selector -> pin table shared by every signal of one group."""

    group: int
    pins: tuple[GroupPin, ...]

    def selector_for(self, pin_name: str) -> Optional[GroupPin]:
        for entry in self.pins:
            if entry.pin_name == pin_name:
                return entry
        return None

    @property
    def selectors(self) -> frozenset[int]:
        return frozenset(entry.selector for entry in self.pins)


@dataclass(frozen=True)
class PPSInputSignal:
    signal_name: str
    register_name: str
    group: int
    valid_selector_values: frozenset[int]
    description: str = ""
    category: str = "Other"


@dataclass(frozen=True)
class PPSOutputValue:
    selector_value: int
    signal_name: str
    description: str = ""
    category: str = "Other"


@dataclass(frozen=True)
class PPSOutputPin:
    pin_name: str
    register_name: str
    group: int
    valid_outputs: tuple[PPSOutputValue, ...]

    def output_for(self, signal_name: str) -> Optional[PPSOutputValue]:
        for output in self.valid_outputs:
            if output.signal_name == signal_name:
                return output
        return None


@dataclass(frozen=True)
class PinAssignment:
    """User intent: route ``signal_name`` to/from ``pin_name``."""

    signal_name: str
    pin_name: str
    direction: PinDirection

    def __post_init__(self) -> None:
        # Accept plain "input"/"output" strings from interchange files
        object.__setattr__(self, "direction", PinDirection(self.direction))


@dataclass(frozen=True)
class ResolvedAssignment:
    assignment: PinAssignment
    register_name: str
    selector_value: int


@dataclass(frozen=True)
class EncodeResult:
    """Selector register values plus everything that could not be applied."""

    selectors: dict[str, int] = field(default_factory=dict)
    resolved: tuple[ResolvedAssignment, ...] = ()
    conflicts: tuple[PinConflict, ...] = ()
    errors: tuple[InvalidRouting, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.conflicts and not self.errors

    def inputs(self) -> list[ResolvedAssignment]:
        return [r for r in self.resolved if r.assignment.direction is PinDirection.INPUT]

    def outputs(self) -> list[ResolvedAssignment]:
        return [r for r in self.resolved if r.assignment.direction is PinDirection.OUTPUT]


class PPSTables:
    """Immutable lookup over the PPS groups, input signals and output pins."""

    def __init__(
        self,
        groups: Iterable[PinSignalGroup],
        inputs: Iterable[PPSInputSignal],
        outputs: Iterable[PPSOutputPin],
    ):
        self._groups: dict[int, PinSignalGroup] = {}
        self._inputs: dict[str, PPSInputSignal] = {}
        self._outputs: dict[str, PPSOutputPin] = {}

        for group in groups:
            if group.group in self._groups:
                raise TableValidationError("pps", f"Duplicate PPS group {group.group}")
            self._groups[group.group] = group
        for signal in inputs:
            if signal.signal_name in self._inputs:
                raise TableValidationError(
                    "pps", f"Duplicate PPS input signal {signal.signal_name}"
                )
            self._inputs[signal.signal_name] = signal
        for pin in outputs:
            if pin.pin_name in self._outputs:
                raise TableValidationError("pps", f"Duplicate PPS output pin {pin.pin_name}")
            self._outputs[pin.pin_name] = pin

        self.validate()

    def validate(self) -> None:
        """Cross-check the tables.

        Raises:
            TableValidationError: On duplicate selectors, dangling group
                references, selectors missing from a group, or output pins
                that are not members of their group
        """
        for group in self._groups.values():
            selectors = [entry.selector for entry in group.pins]
            if len(set(selectors)) != len(selectors):
                raise TableValidationError("pps", f"Group {group.group} repeats a selector")

        for signal in self._inputs.values():
            group = self._groups.get(signal.group)
            if group is None:
                raise TableValidationError(
                    "pps", f"{signal.signal_name} references unknown group {signal.group}"
                )
            missing = signal.valid_selector_values - group.selectors
            if missing:
                raise TableValidationError(
                    "pps",
                    f"{signal.signal_name} allows selectors {sorted(missing)} "
                    f"not present in group {signal.group}",
                )

        for pin in self._outputs.values():
            group = self._groups.get(pin.group)
            if group is None:
                raise TableValidationError(
                    "pps", f"{pin.pin_name} references unknown group {pin.group}"
                )
            if group.selector_for(pin.pin_name) is None:
                raise TableValidationError(
                    "pps", f"Output pin {pin.pin_name} is not a member of group {pin.group}"
                )
            values = [output.selector_value for output in pin.valid_outputs]
            if len(set(values)) != len(values):
                raise TableValidationError("pps", f"{pin.pin_name} repeats an output selector")

    def group(self, group: int) -> Optional[PinSignalGroup]:
        return self._groups.get(group)

    def input_signal(self, signal_name: str) -> Optional[PPSInputSignal]:
        return self._inputs.get(signal_name)

    def output_pin(self, pin_name: str) -> Optional[PPSOutputPin]:
        return self._outputs.get(pin_name)

    def outputs_for_pin(self, pin_name: str) -> Optional[tuple[PPSOutputValue, ...]]:
        pin = self._outputs.get(pin_name)
        return pin.valid_outputs if pin else None

    def pins_for_signal(self, signal_name: str, pin_count: Optional[int] = None) -> list[str]:
        """Physical pins an input signal may be sourced from."""
        signal = self._inputs.get(signal_name)
        if signal is None:
            return []
        group = self._groups[signal.group]
        return [
            entry.pin_name
            for entry in group.pins
            if entry.selector in signal.valid_selector_values
            and entry.pin_name != NO_CONNECT
            and (pin_count is None or entry.min_pin_count <= pin_count)
        ]

    def min_pin_count(self, pin_name: str) -> int:
        for group in self._groups.values():
            entry = group.selector_for(pin_name)
            if entry is not None:
                return entry.min_pin_count
        return 0

    @property
    def input_signals(self) -> list[PPSInputSignal]:
        return list(self._inputs.values())

    @property
    def output_pins(self) -> list[PPSOutputPin]:
        return list(self._outputs.values())


class PinMultiplexer:
    """Validates and encodes PinAssignments against a PPSTables instance.

    Stateless across calls: each encode() builds and returns a new result.
    """

    def __init__(self, tables: PPSTables):
        self._tables = tables

    def encode(
        self,
        assignments: Sequence[PinAssignment],
        pin_count: Optional[int] = None,
    ) -> EncodeResult:
        """Resolve every assignment to a (register, selector) pair.

        Args:
            assignments: Ordered assignments; order decides conflict winners.
            pin_count: Package pin count. When given, pins that are not
                bonded out on that package are rejected.

        Returns:
            EncodeResult. InvalidRouting entries never stop the batch.
        """
        resolved: list[ResolvedAssignment] = []
        errors: list[InvalidRouting] = []

        for assignment in assignments:
            if assignment.direction is PinDirection.INPUT:
                outcome = self._resolve_input(assignment, pin_count)
            else:
                outcome = self._resolve_output(assignment, pin_count)

            if isinstance(outcome, InvalidRouting):
                errors.append(outcome)
            else:
                resolved.append(outcome)

        selectors, conflicts = self._collect(resolved)
        return EncodeResult(
            selectors=selectors,
            resolved=tuple(resolved),
            conflicts=tuple(conflicts),
            errors=tuple(errors),
        )

    # Private helpers -------------------------------------------------------

    @staticmethod
    def _invalid(assignment: PinAssignment, reason: str) -> InvalidRouting:
        return InvalidRouting(
            signal_name=assignment.signal_name,
            pin_name=assignment.pin_name,
            direction=assignment.direction.value,
            reason=reason,
        )

    def _check_package(
        self, assignment: PinAssignment, pin_count: Optional[int]
    ) -> Optional[InvalidRouting]:
        if pin_count is None:
            return None
        needed = self._tables.min_pin_count(assignment.pin_name)
        if needed > pin_count:
            return self._invalid(
                assignment, f"pin only available on {needed}-pin packages and larger"
            )
        return None

    def _resolve_input(
        self, assignment: PinAssignment, pin_count: Optional[int]
    ) -> ResolvedAssignment | InvalidRouting:
        signal = self._tables.input_signal(assignment.signal_name)
        if signal is None:
            return self._invalid(assignment, "unknown PPS input signal")

        group = self._tables.group(signal.group)
        entry = group.selector_for(assignment.pin_name) if group else None
        if entry is None or entry.selector not in signal.valid_selector_values:
            return self._invalid(assignment, f"pin is not in input group {signal.group}")

        unavailable = self._check_package(assignment, pin_count)
        if unavailable is not None:
            return unavailable

        return ResolvedAssignment(assignment, signal.register_name, entry.selector)

    def _resolve_output(
        self, assignment: PinAssignment, pin_count: Optional[int]
    ) -> ResolvedAssignment | InvalidRouting:
        pin = self._tables.output_pin(assignment.pin_name)
        if pin is None:
            return self._invalid(assignment, "pin is not a remappable output")

        output = pin.output_for(assignment.signal_name)
        if output is None:
            return self._invalid(assignment, f"signal is not selectable on output group {pin.group}")

        unavailable = self._check_package(assignment, pin_count)
        if unavailable is not None:
            return unavailable

        return ResolvedAssignment(assignment, pin.register_name, output.selector_value)

    @staticmethod
    def _collect(
        resolved: Sequence[ResolvedAssignment],
    ) -> tuple[dict[str, int], list[PinConflict]]:
        selectors: dict[str, int] = {}
        claims: dict[str, list[ResolvedAssignment]] = {}

        for item in resolved:
            if item.assignment.direction is PinDirection.OUTPUT:
                claims.setdefault(item.assignment.pin_name, []).append(item)

            if item.register_name in selectors:
                if item.assignment.direction is PinDirection.INPUT:
                    logger.warning(
                        f"{item.assignment.signal_name} assigned more than once; "
                        f"keeping {item.register_name} = 0x{selectors[item.register_name]:X}"
                    )
                continue
            selectors[item.register_name] = item.selector_value

        conflicts: list[PinConflict] = []
        for pin_name, items in claims.items():
            signals = tuple(dict.fromkeys(i.assignment.signal_name for i in items))
            if len(signals) > 1:
                conflicts.append(
                    PinConflict(
                        pin_name=pin_name,
                        register_name=items[0].register_name,
                        signals=signals,
                    )
                )
        return selectors, conflicts
