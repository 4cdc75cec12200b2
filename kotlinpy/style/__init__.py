"""Formatting style configuration."""

from kotlinpy.style.spaces import (
    AroundOperators,
    BeforeParentheses,
    Other,
    SpacesStyle,
    TypeParameters,
    Within,
    intellij_spaces,
)
from kotlinpy.style.tabs import TabsAndIndentsStyle, intellij_tabs_and_indents

__all__ = [
    "AroundOperators",
    "BeforeParentheses",
    "Other",
    "SpacesStyle",
    "TabsAndIndentsStyle",
    "TypeParameters",
    "Within",
    "intellij_spaces",
    "intellij_tabs_and_indents",
]
