import pytest

from pic32cfg.core.schema import Setting, SettingSchema


def _setting(index, category="Core", options=("A", "B"), default="A", **kwargs):
    return Setting(
        index=index,
        name=f"S{index}",
        category=category,
        options=options,
        default=default,
        **kwargs,
    )


class TestSetting:
    """Test Setting construction checks."""

    def test_valid_setting(self):
        setting = _setting(3, description="demo")
        assert setting.index == 3
        assert setting.default == "A"
        assert setting.informational is False

    def test_default_must_be_an_option(self):
        with pytest.raises(ValueError, match="not one of its options"):
            _setting(0, default="C")

    def test_options_must_be_distinct(self):
        with pytest.raises(ValueError, match="duplicate"):
            _setting(0, options=("A", "A"))

    def test_options_must_not_be_empty(self):
        with pytest.raises(ValueError):
            _setting(0, options=(), default="A")

    def test_negative_index_rejected(self):
        with pytest.raises(ValueError):
            _setting(-1)

    def test_setting_immutable(self):
        setting = _setting(0)
        with pytest.raises(AttributeError):
            setting.default = "B"


class TestSettingSchema:
    """Test SettingSchema lookups."""

    @pytest.fixture
    def schema(self):
        schema = SettingSchema()
        schema.add(_setting(0, category="PLL"))
        schema.add(_setting(1, category="Debug", default="B"))
        schema.add(_setting(2, category="PLL"))
        return schema

    def test_duplicate_index_rejected(self, schema):
        with pytest.raises(ValueError, match="already exists"):
            schema.add(_setting(1))

    def test_get_and_contains(self, schema):
        assert schema.get(1).name == "S1"
        assert schema.get(9) is None
        assert 2 in schema
        assert 9 not in schema
        assert len(schema) == 3

    def test_categories_in_first_seen_order(self, schema):
        assert schema.categories() == ["PLL", "Debug"]
        assert [s.index for s in schema.by_category("PLL")] == [0, 2]

    def test_defaults(self, schema):
        assert schema.defaults() == {0: "A", 1: "B", 2: "A"}
        assert schema.indices() == [0, 1, 2]

    def test_resolve_fills_missing_and_keeps_unknown(self, schema):
        snapshot = {1: "A", 42: "Whatever"}
        resolved = schema.resolve(snapshot)

        assert resolved == {0: "A", 1: "A", 2: "A", 42: "Whatever"}
        assert snapshot == {1: "A", 42: "Whatever"}

    def test_informational_indices(self):
        schema = SettingSchema()
        schema.add(_setting(0))
        schema.add(_setting(40, informational=True))
        schema.add(_setting(41, informational=True))

        assert schema.informational_indices() == [40, 41]
