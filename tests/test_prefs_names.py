import pytest

from prefs_import.pref_names import (
    BASE_BOOLEAN_NAMES,
    COLOR_NAMES,
    DEFAULT_NAMES,
    EXTRA_BOOLEAN_NAMES,
    INTEGER_NAMES,
    NameTableError,
    PreferenceNames,
    PrefKind,
)


def test_default_tables_are_disjoint():
    tables = [BASE_BOOLEAN_NAMES, EXTRA_BOOLEAN_NAMES, INTEGER_NAMES, COLOR_NAMES]
    total = sum(len(t) for t in tables)
    assert len(frozenset().union(*tables)) == total


def test_kind_of_resolves_each_table():
    assert DEFAULT_NAMES.kind_of("ColorsUseSystem") is PrefKind.BOOLEAN
    assert DEFAULT_NAMES.kind_of("EditorRightTextLimitLineWidth") is PrefKind.INTEGER
    assert DEFAULT_NAMES.kind_of("ColorsBackground") is PrefKind.COLOR
    assert DEFAULT_NAMES.kind_of("EditorFontSize") is None


def test_extra_booleans_only_with_include_bools():
    name = "EditorRightTextLineVisible"
    assert DEFAULT_NAMES.kind_of(name) is None
    assert DEFAULT_NAMES.kind_of(name, include_bools=True) is PrefKind.BOOLEAN


def test_kind_of_is_case_sensitive():
    assert DEFAULT_NAMES.kind_of("colorstext") is None


def test_custom_tables_accept_any_iterable():
    names = PreferenceNames(booleans={"Foo"}, extra_booleans=(), integers=["Bar"], colors={"Baz"})
    assert names.kind_of("Foo") is PrefKind.BOOLEAN
    assert names.kind_of("Bar") is PrefKind.INTEGER
    assert names.kind_of("Baz") is PrefKind.COLOR
    assert isinstance(names.integers, frozenset)


def test_overlapping_tables_are_rejected():
    with pytest.raises(NameTableError, match="'Foo' appears in both booleans and colors"):
        PreferenceNames(booleans={"Foo"}, extra_booleans=(), integers=(), colors={"Foo"})


def test_as_dict_lists_sorted_names():
    tables = DEFAULT_NAMES.as_dict()
    assert set(tables) == {"boolean", "extra", "integer", "color"}
    assert tables["boolean"] == ["ColorsUseSystem"]
    assert tables["color"] == sorted(COLOR_NAMES)
