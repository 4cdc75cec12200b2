"""Markers for event-based parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from kotlinpy.parser.tree_sink import FinishEvent, StartEvent, TokenEvent
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.text import TextRange

if TYPE_CHECKING:
    from kotlinpy.parser.parser import Parser


@dataclass(slots=True)
class Marker:
    pos: int
    start: int
    old_start: int
    child_idx: int | None = None

    def complete(self, parser: Parser, kind: KotlinSyntaxKind) -> CompletedMarker:
        event = parser.events[self.pos]
        if isinstance(event, StartEvent):
            parser.events[self.pos] = StartEvent(kind=kind, forward_parent=event.forward_parent)
        else:
            raise RuntimeError("Marker must point to a StartEvent")

        finish_pos = len(parser.events)
        parser.events.append(FinishEvent())
        return CompletedMarker(
            start_pos=self.pos,
            finish_pos=finish_pos,
            offset=self.start,
            old_start=self.old_start,
            kind=kind,
        )

    def abandon(self, parser: Parser) -> None:
        idx = self.pos
        if idx == len(parser.events) - 1:
            event = parser.events[-1]
            if isinstance(event, StartEvent) and event.forward_parent is None:
                parser.events.pop()

        if self.child_idx is not None:
            event = parser.events[self.child_idx]
            if isinstance(event, StartEvent):
                parser.events[self.child_idx] = StartEvent(kind=event.kind, forward_parent=None)


@dataclass(frozen=True, slots=True)
class CompletedMarker:
    start_pos: int
    finish_pos: int
    offset: int
    old_start: int
    kind: KotlinSyntaxKind

    def change_kind(self, parser: Parser, new_kind: KotlinSyntaxKind) -> CompletedMarker:
        event = parser.events[self.start_pos]
        if not isinstance(event, StartEvent):
            raise RuntimeError("CompletedMarker points to non-start event")
        parser.events[self.start_pos] = StartEvent(kind=new_kind, forward_parent=event.forward_parent)
        return CompletedMarker(
            start_pos=self.start_pos,
            finish_pos=self.finish_pos,
            offset=self.offset,
            old_start=self.old_start,
            kind=new_kind,
        )

    def range(self, parser: Parser) -> TextRange:
        end = self.offset
        for event in reversed(parser.events[self.old_start : self.finish_pos]):
            if isinstance(event, TokenEvent):
                end = event.end
                break
        return TextRange(self.offset, end)

    def precede(self, parser: Parser) -> Marker:
        new_pos = parser.start()
        idx = self.start_pos
        event = parser.events[idx]
        if isinstance(event, StartEvent):
            distance = new_pos.pos - self.start_pos
            if distance <= 0:
                raise RuntimeError("Invalid precede distance")
            parser.events[idx] = StartEvent(kind=event.kind, forward_parent=distance)
        else:
            raise RuntimeError("CompletedMarker points to non-start event")

        new_pos.child_idx = self.start_pos
        new_pos.start = self.offset
        new_pos.old_start = min(new_pos.old_start, self.old_start)
        return new_pos
