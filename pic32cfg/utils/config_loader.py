"""Helpers for loading and validating device reference data.

The bundled ``config.yaml`` of a device family holds the register list,
the part-number catalogue, the setting schema with its field map and the
PPS tables. Everything is validated once here, at load time; compiling and
encoding never re-check the tables.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union
import threading

import yaml  # type: ignore[import-untyped]

from pic32cfg.core.exceptions import ConfigurationError, TableValidationError
from pic32cfg.core.field_map import FieldMap, FieldMapping
from pic32cfg.core.pps import (
    GroupPin,
    PinAssignment,
    PinSignalGroup,
    PPSInputSignal,
    PPSOutputPin,
    PPSOutputValue,
    PPSTables,
)
from pic32cfg.core.register import RegisterDescriptor
from pic32cfg.core.schema import Setting, SettingSchema


@dataclass(frozen=True)
class DeviceVariant:
    part_number: str
    pins: int
    flash_kb: int
    ram_kb: int


@dataclass(frozen=True)
class DeviceConfig:
    family: str
    registers: dict[str, RegisterDescriptor]
    variants: dict[str, DeviceVariant]
    schema: SettingSchema
    field_map: FieldMap
    pps: PPSTables
    source: Optional[Path] = field(default=None, compare=False)


# Configuration cache with thread safety
_LOADER_CACHE: dict[str, DeviceConfig] = {}
_CACHE_LOCK = threading.RLock()


def _get_config_path(family: str, path: Optional[str] = None) -> str:
    if path is None:
        # Config files are in pic32cfg/{family}/config.yaml
        base = Path(__file__).parent.parent / family / "config.yaml"
        path = str(base)

    return path


def _load_yaml_file(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to parse {path}: {exc}") from exc

    return raw


def _build_registers(registers_raw: dict[str, Any]) -> dict[str, RegisterDescriptor]:
    if not registers_raw:
        raise ConfigurationError("registers", "at least one register is required")
    return {
        name: RegisterDescriptor(name=name, address=int(entry["address"]))
        for name, entry in registers_raw.items()
    }


def _build_variants(devices_raw: dict[str, Any]) -> dict[str, DeviceVariant]:
    return {
        part: DeviceVariant(
            part_number=part,
            pins=int(entry["pins"]),
            flash_kb=int(entry.get("flash_kb", 0)),
            ram_kb=int(entry.get("ram_kb", 0)),
        )
        for part, entry in devices_raw.items()
    }


def _build_pragmas(index: int, pragmas_raw: dict[str, Any]) -> dict[str, str]:
    # Unquoted ON/OFF would arrive as YAML 1.1 booleans
    for label, value in pragmas_raw.items():
        if not isinstance(value, str):
            raise TableValidationError(
                "settings",
                f"Setting {index} pragma value for {label!r} must be a quoted string, "
                f"got {value!r}",
            )
    return {str(label): value for label, value in pragmas_raw.items()}


def _build_setting(
    entry: dict[str, Any], registers: dict[str, RegisterDescriptor]
) -> tuple[Setting, Optional[FieldMapping]]:
    index = int(entry["index"])
    options_raw = entry["options"]
    informational = bool(entry.get("informational", False))
    field_raw = entry.get("field")

    if informational == (field_raw is not None):
        raise TableValidationError(
            "settings",
            f"Setting {index} must either declare a field or be informational",
        )

    mapping: Optional[FieldMapping] = None
    if field_raw is not None:
        if not isinstance(options_raw, dict):
            raise TableValidationError(
                "settings", f"Setting {index} options must map label -> field value"
            )
        register = field_raw["register"]
        if register not in registers:
            raise TableValidationError(
                "settings", f"Setting {index} targets unknown register {register!r}"
            )
        mapping = FieldMapping(
            setting_index=index,
            register=register,
            field_name=str(field_raw["name"]),
            bit_start=int(field_raw["bit_start"]),
            bit_width=int(field_raw["bit_width"]),
            values={str(label): int(value) for label, value in options_raw.items()},
            pragmas=_build_pragmas(index, entry.get("pragmas") or {}),
        )
        options = tuple(mapping.values)
    else:
        options = tuple(str(label) for label in options_raw)

    setting = Setting(
        index=index,
        name=str(entry["name"]),
        category=str(entry.get("category", "General")),
        options=options,
        default=str(entry["default"]),
        description=str(entry.get("description", "")),
        informational=informational,
    )
    return setting, mapping


def _build_schema(
    settings_raw: list[dict[str, Any]], registers: dict[str, RegisterDescriptor]
) -> tuple[SettingSchema, FieldMap]:
    schema = SettingSchema()
    field_map = FieldMap()
    for entry in settings_raw:
        try:
            setting, mapping = _build_setting(entry, registers)
            schema.add(setting)
            if mapping is not None:
                field_map.add(mapping)
        except ValueError as exc:
            raise TableValidationError("settings", str(exc)) from exc
    return schema, field_map


def _build_pps_tables(pps_raw: dict[str, Any]) -> PPSTables:
    groups = [
        PinSignalGroup(
            group=int(group),
            pins=tuple(
                GroupPin(
                    selector=int(pin["selector"]),
                    pin_name=str(pin["pin"]),
                    min_pin_count=int(pin.get("min_pins", 0)),
                )
                for pin in pins
            ),
        )
        for group, pins in pps_raw.get("groups", {}).items()
    ]
    group_selectors = {g.group: g.selectors for g in groups}

    inputs = []
    for sig in pps_raw.get("inputs", []):
        group = int(sig["group"])
        if "selectors" in sig:
            valid = frozenset(int(s) for s in sig["selectors"])
        else:
            valid = group_selectors.get(group, frozenset())
        inputs.append(
            PPSInputSignal(
                signal_name=str(sig["signal"]),
                register_name=str(sig.get("register", f"{sig['signal']}R")),
                group=group,
                valid_selector_values=valid,
                description=str(sig.get("description", "")),
                category=str(sig.get("category", "Other")),
            )
        )

    output_values = {
        int(group): tuple(
            PPSOutputValue(
                selector_value=int(out["selector"]),
                signal_name=str(out["signal"]),
                description=str(out.get("description", "")),
                category=str(out.get("category", "Other")),
            )
            for out in outs
        )
        for group, outs in pps_raw.get("output_groups", {}).items()
    }

    outputs = []
    for group, pins in pps_raw.get("outputs", {}).items():
        group = int(group)
        if group not in output_values:
            raise TableValidationError("pps", f"No output signals declared for group {group}")
        for pin in pins:
            outputs.append(
                PPSOutputPin(
                    pin_name=str(pin),
                    register_name=f"{pin}R",
                    group=group,
                    valid_outputs=output_values[group],
                )
            )

    return PPSTables(groups, inputs, outputs)


def _parse_device_cfg_from_dict(raw: dict[str, Any]) -> DeviceConfig:
    if not isinstance(raw, dict):
        raise ConfigurationError("Config root must be a mapping")
    try:
        registers = _build_registers(raw["registers"])
        schema, field_map = _build_schema(raw["settings"], registers)
        cfg = DeviceConfig(
            family=str(raw["family"]),
            registers=registers,
            variants=_build_variants(raw.get("devices", {})),
            schema=schema,
            field_map=field_map,
            pps=_build_pps_tables(raw.get("pps", {})),
        )
    except KeyError as exc:
        raise ConfigurationError(f"Missing required config key: {exc}") from exc
    except (TypeError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid config schema: {exc}") from exc

    return cfg


def load_config(family: str, path: Optional[str] = None) -> DeviceConfig:
    """Load and validate device reference data from a YAML file.

    Args:
        family: Device family identifier (e.g., 'pic32mz_efh') for config lookup.
        path: Optional path to YAML config. If None, load bundled pic32cfg/{family}/config.yaml.

    Returns:
        DeviceConfig instance

    Raises:
        ConfigurationError: on parse errors
        TableValidationError: when the tables are internally inconsistent
    """

    p = Path(_get_config_path(family=family, path=path))
    raw = _load_yaml_file(p)

    cfg = _parse_device_cfg_from_dict(raw=raw)
    return DeviceConfig(
        family=cfg.family,
        registers=cfg.registers,
        variants=cfg.variants,
        schema=cfg.schema,
        field_map=cfg.field_map,
        pps=cfg.pps,
        source=p,
    )


def get_config(family: str) -> DeviceConfig:
    """Return the loaded config for family, loading and caching if necessary.

    Configs are cached per family; repeated calls for the same family
    return the cached instance without re-reading the YAML file.

    THREAD SAFETY: This function is thread-safe. Multiple threads can
    safely call this concurrently.
    """
    with _CACHE_LOCK:
        if family not in _LOADER_CACHE:
            _LOADER_CACHE[family] = load_config(family=family)
        return _LOADER_CACHE[family]


def clear_config_cache() -> None:
    """Clear all cached configurations.

    All subsequent calls to get_config() will reload from disk.
    """
    with _CACHE_LOCK:
        _LOADER_CACHE.clear()


# Interchange files ---------------------------------------------------------


def load_snapshot(path: Union[str, Path]) -> dict[int, str]:
    """Read a ``setting index -> label`` snapshot from YAML.

    Accepts either a bare mapping or one nested under a ``settings`` key.
    """
    raw = _load_yaml_file(Path(path))
    if isinstance(raw, dict) and isinstance(raw.get("settings"), dict):
        raw = raw["settings"]
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError("snapshot", "expected a mapping of setting index to label")
    snapshot: dict[int, str] = {}
    for index, label in raw.items():
        try:
            key = int(index)
        except ValueError as exc:
            raise ConfigurationError(
                "snapshot", f"setting indices must be integers: {exc}"
            ) from exc
        # YAML 1.1 turns unquoted 1:32 into 92 and yes/no into booleans
        if not isinstance(label, str):
            raise ConfigurationError(
                "snapshot",
                f"label for setting {key} must be a string, got {label!r}; quote it in the file",
            )
        snapshot[key] = label
    return snapshot


def load_assignments(path: Union[str, Path]) -> list[PinAssignment]:
    """Read an ordered list of pin assignments from YAML.

    Each entry needs ``signal``, ``pin`` and ``direction`` (input/output).
    Entries may also sit under an ``assignments`` key.
    """
    raw = _load_yaml_file(Path(path))
    if isinstance(raw, dict):
        raw = raw.get("assignments", [])
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigurationError("assignments", "expected a list of assignments")
    try:
        return [
            PinAssignment(
                signal_name=str(entry["signal"]),
                pin_name=str(entry["pin"]),
                direction=str(entry["direction"]).lower(),
            )
            for entry in raw
        ]
    except KeyError as exc:
        raise ConfigurationError("assignments", f"missing key {exc}") from exc
    except ValueError as exc:
        raise ConfigurationError("assignments", str(exc)) from exc
