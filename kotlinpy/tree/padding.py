"""Padding wrappers that keep trivia next to the element it belongs to."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, replace

from kotlinpy.tree.markers import Markers
from kotlinpy.tree.space import Space


@dataclass(frozen=True, slots=True)
class RightPadded[T]:
    """An element plus the trivia that follows it (before a delimiter)."""

    element: T
    after: Space = Space.EMPTY
    markers: Markers = Markers.EMPTY

    def with_element(self, element: T) -> RightPadded[T]:
        if element is self.element:
            return self
        return replace(self, element=element)

    def with_after(self, after: Space) -> RightPadded[T]:
        if after is self.after:
            return self
        return replace(self, after=after)

    def with_markers(self, markers: Markers) -> RightPadded[T]:
        if markers is self.markers:
            return self
        return replace(self, markers=markers)


@dataclass(frozen=True, slots=True)
class LeftPadded[T]:
    """An element plus the trivia before the keyword or operator that introduces it."""

    before: Space
    element: T
    markers: Markers = Markers.EMPTY

    def with_before(self, before: Space) -> LeftPadded[T]:
        if before is self.before:
            return self
        return replace(self, before=before)

    def with_element(self, element: T) -> LeftPadded[T]:
        if element is self.element:
            return self
        return replace(self, element=element)


@dataclass(frozen=True, slots=True)
class Container[T]:
    """Delimited, comma separated elements; `before` precedes the opening delimiter."""

    before: Space
    padded: tuple[RightPadded[T], ...]
    markers: Markers = Markers.EMPTY

    @property
    def elements(self) -> tuple[T, ...]:
        return tuple(item.element for item in self.padded)

    def __iter__(self) -> Iterator[T]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.padded)

    def with_before(self, before: Space) -> Container[T]:
        if before is self.before:
            return self
        return replace(self, before=before)

    def with_padded(self, padded: tuple[RightPadded[T], ...]) -> Container[T]:
        if padded == self.padded:
            return self
        return replace(self, padded=padded)

    def with_markers(self, markers: Markers) -> Container[T]:
        if markers is self.markers:
            return self
        return replace(self, markers=markers)


__all__ = ["Container", "LeftPadded", "RightPadded"]
