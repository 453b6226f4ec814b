"""Tests for metagen.spec.types module."""

from collections import OrderedDict

import pytest

from metagen.errors import CustomizerResolutionError
from metagen.spec.types import DirectRef, SymbolRef, parse_type_ref, resolve_type_ref


class TestParseTypeRef:
    """Tests for parse_type_ref function."""

    def test_class_becomes_direct_ref(self) -> None:
        ref = parse_type_ref(OrderedDict)
        assert isinstance(ref, DirectRef)
        assert ref.handle is OrderedDict
        assert ref.describe() == "collections.OrderedDict"

    def test_string_becomes_symbol_ref(self) -> None:
        ref = parse_type_ref("collections:OrderedDict")
        assert isinstance(ref, SymbolRef)
        assert ref.qualified_name == "collections:OrderedDict"

    def test_dict_form(self) -> None:
        ref = parse_type_ref({"kind": "symbol", "qualified_name": "collections.OrderedDict"})
        assert isinstance(ref, SymbolRef)

    def test_existing_ref_is_returned_unchanged(self) -> None:
        ref = SymbolRef(qualified_name="a.b")
        assert parse_type_ref(ref) is ref

    def test_rejects_other_values(self) -> None:
        with pytest.raises(ValueError, match="Expected a class"):
            parse_type_ref(42)

    @pytest.mark.parametrize("name", ["", "pkg..mod", "pkg.mod:Cls:Other", "pkg.1mod"])
    def test_invalid_qualified_names(self, name: str) -> None:
        with pytest.raises(ValueError):
            SymbolRef(qualified_name=name)


class TestResolveTypeRef:
    """Tests for resolve_type_ref function."""

    def test_direct_ref_skips_loader(self) -> None:
        def loader(name: str) -> type:
            raise AssertionError("loader must not be used for direct references")

        assert resolve_type_ref(DirectRef(handle=OrderedDict), loader) is OrderedDict

    @pytest.mark.parametrize("name", ["collections:OrderedDict", "collections.OrderedDict"])
    def test_symbol_ref_resolves_through_import_system(self, name: str) -> None:
        assert resolve_type_ref(SymbolRef(qualified_name=name)) is OrderedDict

    def test_symbol_ref_uses_custom_loader(self) -> None:
        class Plugin:
            pass

        seen = []

        def loader(name: str) -> type:
            seen.append(name)
            return Plugin

        assert resolve_type_ref(SymbolRef(qualified_name="x.y:Plugin"), loader) is Plugin
        assert seen == ["x.y:Plugin"]

    def test_missing_module(self) -> None:
        ref = SymbolRef(qualified_name="metagen_no_such_module:Plugin")
        with pytest.raises(CustomizerResolutionError, match="cannot be loaded") as exc_info:
            resolve_type_ref(ref)

        assert exc_info.value.reference == ref
        assert isinstance(exc_info.value.__cause__, ImportError)

    def test_missing_attribute(self) -> None:
        ref = SymbolRef(qualified_name="collections:NoSuchThing")
        with pytest.raises(CustomizerResolutionError, match="collections:NoSuchThing"):
            resolve_type_ref(ref)

    def test_not_a_class(self) -> None:
        ref = SymbolRef(qualified_name="os.path:join")
        with pytest.raises(CustomizerResolutionError, match="not a class"):
            resolve_type_ref(ref)
