"""
Pytest configuration and shared fixtures for the pic32cfg test suite.
"""

import copy
import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'pic32cfg' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pic32cfg.utils.config_loader import (  # noqa: E402
    _parse_device_cfg_from_dict,
    clear_config_cache,
    get_config,
)


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


REGISTERS_CFG = {
    "CFGA": {"address": 0x1000},
    "CFGB": {"address": 0x1004},
}

DEVICES_CFG = {
    "TEST064": {"pins": 64, "flash_kb": 512, "ram_kb": 128},
    "TEST100": {"pins": 100, "flash_kb": 1024, "ram_kb": 256},
}

SETTINGS_CFG = [
    {
        "index": 0,
        "name": "Mode",
        "category": "Core",
        "field": {"register": "CFGA", "name": "MODE", "bit_start": 0, "bit_width": 2},
        "default": "Fast",
        "options": {"Fast": 3, "Slow": 1, "Off": 0},
        "pragmas": {"Fast": "FAST", "Slow": "SLOW"},
    },
    {
        "index": 1,
        "name": "Enable",
        "category": "Core",
        "field": {"register": "CFGA", "name": "EN", "bit_start": 4, "bit_width": 1},
        "default": "On",
        "options": {"On": 1, "Off": 0},
    },
    {
        "index": 2,
        "name": "Divider",
        "category": "Clock",
        "field": {"register": "CFGB", "name": "DIV", "bit_start": 8, "bit_width": 3},
        "default": "2x Divider",
        "options": {"1x Divider": 0, "2x Divider": 1, "4x Divider": 3},
    },
    {
        "index": 3,
        "name": "Bus Divisor",
        "category": "Clock",
        "informational": True,
        "default": "PBCLK2 is SYSCLK/2",
        "options": ["PBCLK2 is SYSCLK/1", "PBCLK2 is SYSCLK/2"],
    },
]

PPS_CFG = {
    "groups": {
        0: [
            {"selector": 0, "pin": "RPA0"},
            {"selector": 1, "pin": "RPA1"},
            {"selector": 2, "pin": "RPA2", "min_pins": 100},
        ],
        1: [
            {"selector": 0, "pin": "RPB0"},
            {"selector": 1, "pin": "RPB1"},
        ],
    },
    "inputs": [
        {"signal": "U1RX", "register": "U1RXR", "group": 0, "description": "UART1 Receive"},
        {"signal": "U2RX", "register": "U2RXR", "group": 0, "selectors": [0, 1]},
        {"signal": "INT1", "group": 1, "selectors": [1], "category": "Interrupt"},
    ],
    "output_groups": {
        0: [
            {"selector": 0, "signal": "No Connect"},
            {"selector": 1, "signal": "U1TX", "description": "UART1 Transmit"},
            {"selector": 2, "signal": "SDO1", "description": "SPI1 Data Output"},
        ],
        1: [
            {"selector": 0, "signal": "No Connect"},
            {"selector": 3, "signal": "OC1", "description": "Output Compare 1"},
        ],
    },
    "outputs": {0: ["RPA0", "RPA1", "RPA2"], 1: ["RPB0", "RPB1"]},
}


@pytest.fixture
def valid_device_config_dict():
    """
    Fixture providing a small but complete device configuration dictionary.
    """
    return copy.deepcopy(
        {
            "family": "testchip",
            "registers": REGISTERS_CFG,
            "devices": DEVICES_CFG,
            "settings": SETTINGS_CFG,
            "pps": PPS_CFG,
        }
    )


@pytest.fixture
def temp_config_yaml_file(temp_yaml_file, valid_device_config_dict):
    """
    Fixture that creates a temporary YAML file with valid configuration.

    Yields:
        Path: Path to the temporary YAML file with valid configuration
    """
    with open(temp_yaml_file, "w", encoding="utf-8") as f:
        yaml.dump(valid_device_config_dict, f)

    yield temp_yaml_file


@pytest.fixture
def small_config(valid_device_config_dict):
    """Parsed DeviceConfig for the small test chip."""
    return _parse_device_cfg_from_dict(valid_device_config_dict)


@pytest.fixture
def efh_config():
    """Bundled PIC32MZ EFH configuration, loaded fresh."""
    clear_config_cache()
    yield get_config("pic32mz_efh")
    clear_config_cache()


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
