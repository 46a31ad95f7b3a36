"""Setting schema: the catalogue of user-facing configuration choices."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Mapping, Optional


@dataclass(frozen=True)
class Setting:
    """One configuration choice.

    ``informational`` settings (peripheral bus divisors, PMD masks) are shown
    to the user and consumed by generators but have no DEVCFG field.
    """

    index: int
    name: str
    category: str
    options: tuple[str, ...]
    default: str
    description: str = ""
    informational: bool = False

    def __post_init__(self) -> None:
        if self.index < 0:
            raise ValueError(f"Setting index must be >= 0, got {self.index}")
        if not self.options:
            raise ValueError(f"Setting {self.index} has no options")
        if len(set(self.options)) != len(self.options):
            raise ValueError(f"Setting {self.index} has duplicate options")
        if self.default not in self.options:
            raise ValueError(
                f"Setting {self.index} default {self.default!r} is not one of its options"
            )


class SettingSchema:
    """Ordered collection of Settings keyed by index."""

    def __init__(self) -> None:
        self._settings: dict[int, Setting] = {}

    def add(self, setting: Setting) -> None:
        """Add a setting.

        Raises:
            ValueError: If a setting with this index already exists
        """
        if setting.index in self._settings:
            raise ValueError(f"Setting index {setting.index} already exists")
        self._settings[setting.index] = setting

    def get(self, index: int) -> Optional[Setting]:
        return self._settings.get(index)

    def indices(self) -> list[int]:
        return list(self._settings)

    def categories(self) -> list[str]:
        """Distinct categories in first-seen order."""
        seen: dict[str, None] = {}
        for setting in self._settings.values():
            seen.setdefault(setting.category, None)
        return list(seen)

    def by_category(self, category: str) -> list[Setting]:
        return [s for s in self._settings.values() if s.category == category]

    def informational_indices(self) -> list[int]:
        """Indices of settings that carry no DEVCFG field."""
        return [index for index, s in self._settings.items() if s.informational]

    def defaults(self) -> dict[int, str]:
        return {index: s.default for index, s in self._settings.items()}

    def resolve(self, snapshot: Mapping[int, str]) -> dict[int, str]:
        """Return a total snapshot: defaults overlaid with ``snapshot``.

        Entries for indices the schema does not know are carried over
        unchanged so downstream diagnostics still see them.
        """
        resolved = self.defaults()
        resolved.update(snapshot)
        return resolved

    def __contains__(self, index: object) -> bool:
        return index in self._settings

    def __iter__(self) -> Iterator[Setting]:
        return iter(self._settings.values())

    def __len__(self) -> int:
        return len(self._settings)
