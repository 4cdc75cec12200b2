"""Spacing style options, grouped the way IntelliJ lays them out."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace


@dataclass(frozen=True, slots=True)
class BeforeParentheses:
    method_declaration: bool = False
    method_call: bool = False
    if_parentheses: bool = True
    for_parentheses: bool = True
    while_parentheses: bool = True
    catch_parentheses: bool = True
    when_parentheses: bool = True
    annotation_parameters: bool = False


@dataclass(frozen=True, slots=True)
class AroundOperators:
    assignment: bool = True
    logical: bool = True
    equality: bool = True
    relational: bool = True
    bitwise: bool = True
    additive: bool = True
    multiplicative: bool = True
    unary: bool = False
    range: bool = False
    elvis: bool = True
    arrow: bool = True


@dataclass(frozen=True, slots=True)
class Other:
    before_comma: bool = False
    after_comma: bool = True
    before_colon_after_declaration_name: bool = False
    after_colon_before_declaration_type: bool = True
    before_colon_in_new_type_definition: bool = True
    after_colon_in_new_type_definition: bool = True
    before_left_brace: bool = True
    before_keywords: bool = True
    before_semicolon: bool = False


@dataclass(frozen=True, slots=True)
class Within:
    parentheses: bool = False
    brackets: bool = False
    angle_brackets: bool = False


@dataclass(frozen=True, slots=True)
class TypeParameters:
    before_opening_angle_bracket: bool = False
    before_colon_in_bounds: bool = True
    after_colon_in_bounds: bool = True


@dataclass(frozen=True, slots=True)
class SpacesStyle:
    before_parentheses: BeforeParentheses = BeforeParentheses()
    around_operators: AroundOperators = AroundOperators()
    other: Other = Other()
    within: Within = Within()
    type_parameters: TypeParameters = TypeParameters()

    @staticmethod
    def from_mapping(options: Mapping[str, bool], base: SpacesStyle | None = None) -> SpacesStyle:
        """Build a style from dotted names, e.g. `{"other.after_comma": False}`.

        Unknown names and non-boolean values raise `ValueError`.
        """
        style = base if base is not None else SpacesStyle()
        groups: dict[str, dict[str, bool]] = {}
        for name, value in options.items():
            group_name, _, option = name.partition(".")
            group = getattr(style, group_name, None) if group_name in _GROUP_NAMES else None
            if group is None or option not in {f.name for f in fields(group)}:
                raise ValueError(f"Unknown spacing option: {name!r}")
            if not isinstance(value, bool):
                raise ValueError(f"Spacing option {name!r} expects a bool, got {value!r}")
            groups.setdefault(group_name, {})[option] = value

        changes = {
            group_name: replace(getattr(style, group_name), **values)
            for group_name, values in groups.items()
        }
        return replace(style, **changes)


_GROUP_NAMES = frozenset(f.name for f in fields(SpacesStyle))


def intellij_spaces() -> SpacesStyle:
    return SpacesStyle()


__all__ = [
    "AroundOperators",
    "BeforeParentheses",
    "Other",
    "SpacesStyle",
    "TypeParameters",
    "Within",
    "intellij_spaces",
]
