import logging

import pytest

from pic32cfg.core.compiler import CompileResult, RegisterCompiler
from pic32cfg.core.diagnostics import UnknownOptionLabel, UnknownSettingIndex


@pytest.fixture
def compiler(small_config):
    return RegisterCompiler(small_config.field_map, small_config.registers)


@pytest.fixture
def efh_compiler(efh_config):
    return RegisterCompiler(efh_config.field_map, efh_config.registers)


class TestRegisterCompiler:
    """Compile behaviour against the small test chip."""

    def test_empty_snapshot_is_all_erased(self, compiler):
        result = compiler.compile_with_diagnostics({})

        assert result.image.as_dict() == {"CFGA": 0xFFFFFFFF, "CFGB": 0xFFFFFFFF}
        assert result.ok

    def test_fields_are_substituted(self, compiler):
        image = compiler.compile({0: "Slow", 1: "Off", 2: "4x Divider"})

        # MODE=01 in bits 1:0, EN=0 at bit 4
        assert image["CFGA"] == 0xFFFFFFED
        # DIV=011 in bits 10:8
        assert image["CFGB"] == 0xFFFFFBFF

    def test_zero_value_clears_field(self, compiler):
        image = compiler.compile({0: "Off"})
        assert image["CFGA"] & 0b11 == 0
        assert image["CFGA"] | 0b11 == 0xFFFFFFFF

    def test_unknown_index_is_reported_and_skipped(self, compiler):
        result = compiler.compile_with_diagnostics({99: "On", 0: "Slow"})

        assert result.diagnostics == (UnknownSettingIndex(setting_index=99, label="On"),)
        assert result.image["CFGA"] == 0xFFFFFFFD
        assert not result.ok

    def test_informational_index_is_skipped_silently(self, small_config, caplog):
        compiler = RegisterCompiler(
            small_config.field_map,
            small_config.registers,
            informational=small_config.schema.informational_indices(),
        )
        with caplog.at_level(logging.WARNING):
            result = compiler.compile_with_diagnostics({3: "PBCLK2 is SYSCLK/1", 0: "Slow"})
            compiler.compile({3: "PBCLK2 is SYSCLK/1"})

        assert result.ok
        assert result.image["CFGA"] == 0xFFFFFFFD
        assert caplog.records == []

    def test_informational_index_unknown_without_schema(self, compiler):
        result = compiler.compile_with_diagnostics({3: "PBCLK2 is SYSCLK/1"})
        assert result.diagnostics == (
            UnknownSettingIndex(setting_index=3, label="PBCLK2 is SYSCLK/1"),
        )

    def test_unknown_label_is_reported_and_skipped(self, compiler):
        result = compiler.compile_with_diagnostics({0: "Turbo"})

        assert result.diagnostics == (
            UnknownOptionLabel(setting_index=0, label="Turbo", field_name="MODE"),
        )
        assert result.image["CFGA"] == 0xFFFFFFFF

    def test_order_independence(self, compiler):
        forward = {0: "Slow", 1: "Off", 2: "1x Divider"}
        backward = dict(reversed(list(forward.items())))

        assert compiler.compile(forward) == compiler.compile(backward)

    def test_determinism(self, compiler):
        snapshot = {0: "Fast", 2: "2x Divider"}
        assert compiler.compile(snapshot) == compiler.compile(snapshot)

    def test_field_isolation(self, compiler):
        base = compiler.compile({0: "Fast", 1: "On"})
        changed = compiler.compile({0: "Off", 1: "On"})

        diff = base["CFGA"] ^ changed["CFGA"]
        assert diff & ~0b11 == 0
        assert base["CFGB"] == changed["CFGB"]

    def test_snapshot_not_mutated(self, compiler):
        snapshot = {0: "Slow", 77: "x"}
        compiler.compile_with_diagnostics(snapshot)
        assert snapshot == {0: "Slow", 77: "x"}

    def test_compile_logs_diagnostics(self, compiler, caplog):
        with caplog.at_level(logging.WARNING, logger="pic32cfg.core.compiler"):
            compiler.compile({0: "Turbo", 55: "x"})

        messages = [r.getMessage() for r in caplog.records]
        assert any("Turbo" in m for m in messages)
        assert any("55" in m for m in messages)

    def test_compile_with_diagnostics_does_not_log(self, compiler, caplog):
        with caplog.at_level(logging.DEBUG):
            compiler.compile_with_diagnostics({0: "Turbo"})
        assert caplog.records == []

    def test_results_are_fresh(self, compiler):
        first = compiler.compile_with_diagnostics({0: "Slow"})
        second = compiler.compile_with_diagnostics({0: "Slow"})
        assert isinstance(first, CompileResult)
        assert first.image is not second.image

    def test_decode_returns_labels(self, compiler):
        image = compiler.compile({0: "Slow", 1: "Off", 2: "4x Divider"})
        assert compiler.decode(image) == {0: "Slow", 1: "Off", 2: "4x Divider"}

    def test_decode_skips_unmapped_values(self, compiler):
        # Erased DIV field (0b111) has no label
        decoded = compiler.decode(compiler.compile({}))
        assert 2 not in decoded
        assert decoded[0] == "Fast"


class TestEFHCompile:
    """Known register values for the bundled PIC32MZ EFH tables."""

    def test_pll_input_divider(self, efh_compiler):
        image = efh_compiler.compile({6: "3x Divider"})

        assert image["DEVCFG2"] & 0b111 == 0b010
        assert image["DEVCFG2"] & ~0b111 & 0xFFFFFFFF == 0xFFFFFFF8
        assert image.hex("DEVCFG2") == "0xFFFFFFFA"

    def test_debug_and_jtag(self, efh_compiler):
        image = efh_compiler.compile({26: "Debugger is disabled", 27: "JTAG Port Enabled"})
        assert image["DEVCFG0"] == 0xFFFFFFFC

    def test_untouched_registers_stay_erased(self, efh_compiler):
        image = efh_compiler.compile({6: "3x Divider"})
        for name in ("DEVCFG0", "DEVCFG1", "DEVCFG3"):
            assert image[name] == 0xFFFFFFFF

    def test_all_defaults_compile_cleanly(self, efh_config):
        compiler = RegisterCompiler(
            efh_config.field_map,
            efh_config.registers,
            informational=efh_config.schema.informational_indices(),
        )
        result = compiler.compile_with_diagnostics(efh_config.schema.defaults())

        assert result.ok
        assert compiler.decode(result.image) == {
            s.index: s.default for s in efh_config.schema if not s.informational
        }

    def test_pll_multiplier_field(self, efh_compiler):
        image = efh_compiler.compile({9: "PLL Multiply by 50"})
        # FPLLMULT = 49 at bits 14:8
        assert (image["DEVCFG2"] >> 8) & 0x7F == 49
