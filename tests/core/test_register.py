import pytest

from pic32cfg.core.field_map import FieldMapping
from pic32cfg.core.register import RegisterDescriptor, RegisterImage, format_register_value


def test_format_register_value_pads_and_uppercases():
    assert format_register_value(0) == "0x00000000"
    assert format_register_value(0xABC) == "0x00000ABC"
    assert format_register_value(0xFFFFFFF8) == "0xFFFFFFF8"


def test_format_register_value_truncates_to_32_bits():
    assert format_register_value(0x1_0000_0001) == "0x00000001"


def test_register_descriptor_defaults():
    desc = RegisterDescriptor(name="DEVCFG0", address=0x1FC0FFCC)
    assert desc.width == 4
    assert desc.reset_value == 0xFFFFFFFF


def test_erased_image_uses_reset_values():
    registers = {
        "DEVCFG0": RegisterDescriptor(name="DEVCFG0", address=0x1FC0FFCC),
        "DEVCFG1": RegisterDescriptor(name="DEVCFG1", address=0x1FC0FFC8),
    }
    image = RegisterImage.erased(registers)
    assert image.as_dict() == {"DEVCFG0": 0xFFFFFFFF, "DEVCFG1": 0xFFFFFFFF}
    assert list(image) == ["DEVCFG0", "DEVCFG1"]
    assert len(image) == 2


def test_image_accessors():
    image = RegisterImage({"DEVCFG2": 0xFFFFFFFA})
    assert image["DEVCFG2"] == 0xFFFFFFFA
    assert image.hex("DEVCFG2") == "0xFFFFFFFA"
    assert image.as_hex() == {"DEVCFG2": "0xFFFFFFFA"}

    with pytest.raises(KeyError):
        image["DEVCFG9"]


def test_image_field_value():
    mapping = FieldMapping(
        setting_index=6,
        register="DEVCFG2",
        field_name="FPLLIDIV",
        bit_start=0,
        bit_width=3,
        values={"3x Divider": 2},
    )
    image = RegisterImage({"DEVCFG2": 0xFFFFFFFA})
    assert image.field_value(mapping) == 2


def test_image_is_frozen():
    image = RegisterImage({"DEVCFG0": 1})
    with pytest.raises(AttributeError):
        image.values = {}


def test_image_copies_callers_dict():
    words = {"DEVCFG0": 1}
    image = RegisterImage(words)
    words["DEVCFG0"] = 2
    words["DEVCFG1"] = 3

    assert image["DEVCFG0"] == 1
    assert len(image) == 1


def test_image_values_are_read_only():
    image = RegisterImage({"DEVCFG0": 1})
    with pytest.raises(TypeError):
        image.values["DEVCFG0"] = 2


def test_image_is_hashable():
    first = RegisterImage({"DEVCFG0": 1, "DEVCFG1": 2})
    second = RegisterImage({"DEVCFG1": 2, "DEVCFG0": 1})

    assert first == second
    assert hash(first) == hash(second)
    assert len({first, second}) == 1
    assert first != RegisterImage({"DEVCFG0": 1, "DEVCFG1": 3})
