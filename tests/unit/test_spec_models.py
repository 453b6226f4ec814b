"""Tests for metagen.spec.models and metagen.spec.marker modules."""

from dataclasses import dataclass

import pytest

from metagen import meta
from metagen.customizers.builtin import FieldNamesCustomizer
from metagen.errors import ConfigError
from metagen.spec.marker import extend, get_meta, is_marked, opt
from metagen.spec.models import CustomizerSpec, MetaOptions, Opt, SourceUnit, to_snake_case
from metagen.spec.types import DirectRef, SymbolRef


class TestCustomizerSpec:
    """Tests for CustomizerSpec model."""

    def test_opts_map_first_value_wins(self) -> None:
        spec = CustomizerSpec(
            plugin_type_ref=FieldNamesCustomizer,
            opts=[("case", "lower"), ("prefix", "f_"), ("case", "upper")],
        )
        assert spec.opts_map() == {"case": "lower", "prefix": "f_"}

    def test_opts_from_mapping(self) -> None:
        spec = CustomizerSpec(plugin_type_ref=FieldNamesCustomizer, opts={"case": "lower"})
        assert spec.opts == (Opt(key="case", value="lower"),)

    def test_no_opts(self) -> None:
        spec = CustomizerSpec(plugin_type_ref="pkg.plugins:Plugin")
        assert spec.opts_map() == {}
        assert isinstance(spec.plugin_type_ref, SymbolRef)
        assert spec.describe() == "pkg.plugins:Plugin"

    def test_opt_values_must_be_strings(self) -> None:
        with pytest.raises(ValueError):
            CustomizerSpec(plugin_type_ref=FieldNamesCustomizer, opts={"case": ["upper"]})

    def test_is_frozen(self) -> None:
        spec = CustomizerSpec(plugin_type_ref=FieldNamesCustomizer)
        with pytest.raises(ValueError):
            spec.opts = ()


class TestMetaOptions:
    """Tests for MetaOptions model."""

    def test_defaults(self) -> None:
        options = MetaOptions()
        assert options.customizers == ()
        assert options.aggregate is False
        assert options.suffix == "Model"

    def test_bare_customizer_references(self) -> None:
        options = MetaOptions(customizers=[FieldNamesCustomizer, "pkg.mod:Other"])
        first, second = options.customizers
        assert isinstance(first.plugin_type_ref, DirectRef)
        assert first.plugin_type_ref.handle is FieldNamesCustomizer
        assert isinstance(second.plugin_type_ref, SymbolRef)

    def test_rejects_unknown_fields(self) -> None:
        with pytest.raises(ValueError):
            MetaOptions(aggregated=True)

    @pytest.mark.parametrize("suffix", ["", "-Meta", "Meta Model"])
    def test_invalid_suffix(self, suffix: str) -> None:
        with pytest.raises(ValueError, match="Suffix"):
            MetaOptions(suffix=suffix)


class TestMarker:
    """Tests for the @meta marker and helpers."""

    def test_bare_marker(self) -> None:
        @meta
        class Point:
            x: int

        options = get_meta(Point)
        assert options == MetaOptions()
        assert is_marked(Point)

    def test_marker_with_options(self) -> None:
        @meta(
            aggregate=True,
            suffix="Meta",
            customizers=[extend(FieldNamesCustomizer, case="lower")],
        )
        class Point:
            x: int

        options = get_meta(Point)
        assert options.aggregate is True
        assert options.suffix == "Meta"
        assert options.customizers[0].opts_map() == {"case": "lower"}

    def test_marker_is_not_inherited(self) -> None:
        @meta
        class Base:
            x: int

        class Child(Base):
            y: int

        assert is_marked(Base)
        assert not is_marked(Child)

    def test_rejects_non_classes(self) -> None:
        with pytest.raises(TypeError, match="only decorate classes"):
            meta(lambda: None)

    def test_invalid_options_raise_config_error(self) -> None:
        with pytest.raises(ConfigError, match="meta.suffix"):

            @meta(suffix="")
            @dataclass
            class Point:
                x: int

    def test_extend_keeps_pairs_before_keywords(self) -> None:
        spec = extend(FieldNamesCustomizer, [opt("case", "lower")], case="upper", prefix="p_")
        assert [o.key for o in spec.opts] == ["case", "case", "prefix"]
        assert spec.opts_map() == {"case": "lower", "prefix": "p_"}

    def test_extend_invalid_reference(self) -> None:
        with pytest.raises(ConfigError, match="extend"):
            extend(42)

    def test_get_meta_of_non_class(self) -> None:
        assert get_meta("Point") is None


class TestSourceUnit:
    """Tests for SourceUnit and naming helpers."""

    def test_model_module_in_namespace(self) -> None:
        unit = SourceUnit(
            name="PersonModel",
            namespace="shop.people",
            source_type_ref="shop.people.person.Person",
            source_module="shop.people.person",
            source_name="Person",
        )
        assert unit.model_module == "shop.people.person_model"

    def test_model_module_in_root_namespace(self) -> None:
        unit = SourceUnit(
            name="PersonModel",
            namespace="",
            source_type_ref="person.Person",
            source_module="person",
            source_name="Person",
        )
        assert unit.model_module == "person_model"

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("PersonModel", "person_model"),
            ("HTTPRequestModel", "http_request_model"),
            ("PAggregator", "p_aggregator"),
            ("OrderItemsAggregator", "order_items_aggregator"),
            ("Vector3DModel", "vector3_d_model"),
        ],
    )
    def test_to_snake_case(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected
