"""Indentation style options."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TabsAndIndentsStyle:
    use_tab_character: bool = False
    tab_size: int = 4
    indent_size: int = 4
    continuation_indent: int = 8
    keep_indents_on_empty_lines: bool = False

    def indent(self, depth: int) -> str:
        """Leading whitespace for a line nested `depth` blocks deep."""
        width = self.indent_size * depth
        if self.use_tab_character:
            tabs, spaces = divmod(width, self.tab_size)
            return "\t" * tabs + " " * spaces
        return " " * width


def intellij_tabs_and_indents() -> TabsAndIndentsStyle:
    return TabsAndIndentsStyle()


__all__ = ["TabsAndIndentsStyle", "intellij_tabs_and_indents"]
