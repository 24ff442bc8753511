from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class NameTableError(ValueError):
    """Raised when recognized-name tables overlap."""


class PrefKind(str, Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    COLOR = "color"


# Color pane, Desktop: use system colors.
BASE_BOOLEAN_NAMES = frozenset(
    {
        "ColorsUseSystem",
    }
)

# Check boxes on the Programming Tools and Editor Display panes. Only imported
# when include_bools is set.
EXTRA_BOOLEAN_NAMES = frozenset(
    {
        "ColorsUseMLintAutoFixBackground",
        "Editor.VariableHighlighting.Automatic",
        "Editor.NonlocalVariableHighlighting",
        "EditorCodepadHighVisible",
        "EditorCodeBlockDividers",
        "Editorhighlight-caret-row-boolean",
        "EditorRightTextLineVisible",
    }
)

INTEGER_NAMES = frozenset(
    {
        "EditorRightTextLimitLineWidth",
    }
)

COLOR_NAMES = frozenset(
    {
        "ColorsText",
        "ColorsBackground",
        "Colors_M_Keywords",
        "Colors_M_Comments",
        "Colors_M_Strings",
        "Colors_M_UnterminatedStrings",
        "Colors_M_SystemCommands",
        "Colors_M_Errors",
        "Colors_HTML_HTMLLinks",
        "Colors_M_Warnings",
        "ColorsMLintAutoFixBackground",
        "Editor.VariableHighlighting.Color",
        "Editor.NonlocalVariableHighlighting.TextColor",
        "Editorhighlight-lines",
        "Editorhighlight-caret-row-boolean-color",
        "EditorRightTextLimitLineColor",
    }
)


@dataclass(frozen=True)
class PreferenceNames:
    """Recognized preference names, one table per value kind."""

    booleans: frozenset[str] = BASE_BOOLEAN_NAMES
    extra_booleans: frozenset[str] = EXTRA_BOOLEAN_NAMES
    integers: frozenset[str] = INTEGER_NAMES
    colors: frozenset[str] = COLOR_NAMES
    _lookup: dict[str, PrefKind] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        tables = {
            "booleans": frozenset(self.booleans),
            "extra_booleans": frozenset(self.extra_booleans),
            "integers": frozenset(self.integers),
            "colors": frozenset(self.colors),
        }
        for attr, names in tables.items():
            object.__setattr__(self, attr, names)

        seen: dict[str, str] = {}
        for attr, names in tables.items():
            for name in sorted(names):
                if name in seen:
                    raise NameTableError(
                        f"preference name {name!r} appears in both {seen[name]} and {attr}"
                    )
                seen[name] = attr

        lookup: dict[str, PrefKind] = {}
        for name in self.integers:
            lookup[name] = PrefKind.INTEGER
        for name in self.colors:
            lookup[name] = PrefKind.COLOR
        object.__setattr__(self, "_lookup", lookup)

    def kind_of(self, name: str, *, include_bools: bool = False) -> PrefKind | None:
        if name in self.booleans:
            return PrefKind.BOOLEAN
        if include_bools and name in self.extra_booleans:
            return PrefKind.BOOLEAN
        return self._lookup.get(name)

    def as_dict(self) -> dict[str, list[str]]:
        return {
            "boolean": sorted(self.booleans),
            "extra": sorted(self.extra_booleans),
            "integer": sorted(self.integers),
            "color": sorted(self.colors),
        }


DEFAULT_NAMES = PreferenceNames()
