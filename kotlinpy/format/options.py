"""Formatter configuration."""

from dataclasses import dataclass, field
from uuid import UUID

from kotlinpy.mapping import MapperOptions
from kotlinpy.style import SpacesStyle, TabsAndIndentsStyle, intellij_spaces, intellij_tabs_and_indents


@dataclass(frozen=True, slots=True)
class FormatOptions:
    """Which passes run and with which style.

    `stop_after` names a node id; every pass leaves the nodes printed after it
    untouched.
    """

    spaces: SpacesStyle = field(default_factory=intellij_spaces)
    tabs_and_indents: TabsAndIndentsStyle = field(default_factory=intellij_tabs_and_indents)
    minimum_viable_spacing: bool = True
    remove_trailing_semicolons: bool = False
    stop_after: UUID | None = None
    mapper: MapperOptions = field(default_factory=MapperOptions)


__all__ = ["FormatOptions"]
