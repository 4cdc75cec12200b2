"""Parser events and the sink that replays them into a lossless green tree."""

from dataclasses import dataclass

from kotlinpy.cst import GreenNode, TreeBuilder
from kotlinpy.diagnostics import Diagnostic
from kotlinpy.lexer import Token, TokenKind
from kotlinpy.syntax import KotlinSyntaxKind
from kotlinpy.text import slice_text_range


@dataclass(frozen=True, slots=True)
class StartEvent:
    """Opens a node.

    `forward_parent` is the distance to a later start event that wraps this
    one; precede() uses it to open a node around one already completed.
    """

    kind: KotlinSyntaxKind
    forward_parent: int | None = None

    @staticmethod
    def tombstone() -> "StartEvent":
        return StartEvent(kind=KotlinSyntaxKind.TOMBSTONE)


@dataclass(frozen=True, slots=True)
class FinishEvent:
    pass


@dataclass(frozen=True, slots=True)
class TokenEvent:
    kind: KotlinSyntaxKind
    end: int


Event = StartEvent | FinishEvent | TokenEvent


@dataclass(frozen=True, slots=True)
class ParsedGreenTree:
    root: GreenNode
    diagnostics: list[Diagnostic]


def _forward_chain(events: list[Event], index: int, start: StartEvent) -> list[KotlinSyntaxKind]:
    """Kinds of `start` and its forward parents, innermost first.

    Each forward parent is tombstoned in place so it is not opened twice.
    """
    kinds = [start.kind]
    offset = start.forward_parent
    while offset is not None:
        index += offset
        if index >= len(events):
            raise RuntimeError("Invalid forward_parent offset in parser events")
        parent = events[index]
        if not isinstance(parent, StartEvent):
            raise RuntimeError("forward_parent must point to StartEvent")
        events[index] = StartEvent.tombstone()
        if parent.kind != KotlinSyntaxKind.TOMBSTONE:
            kinds.append(parent.kind)
        offset = parent.forward_parent
    return kinds


class LosslessTreeSink:
    """Converts parser events + the full token stream into a green CST.

    Trivia tokens become leaves of the outermost node that is open when the
    next significant token arrives: a node never starts or ends with trivia.
    """

    def __init__(
        self,
        text: str,
        tokens: list[Token],
        builder: TreeBuilder | None = None,
    ) -> None:
        self._text = text
        self._tokens = tokens
        self._index = 0
        self._parents_count = 0
        self._errors: list[Diagnostic] = []
        self._builder = builder if builder is not None else TreeBuilder()
        self._needs_eof = True

    def token(self, kind: KotlinSyntaxKind, end: int) -> None:
        self._eat_trivia()
        token = self._tokens[self._index]
        if token.range.end != end:
            raise RuntimeError(f"Token event ending at {end} does not match lexer token {token.range}")
        self._do_token(kind, token)

    def start_node(self, kind: KotlinSyntaxKind) -> None:
        # The root keeps leading file trivia; every other node starts at its first token.
        if self._parents_count > 0:
            self._eat_trivia()
        self._builder.start_node(kind)
        self._parents_count += 1

    def finish_node(self) -> None:
        self._parents_count -= 1
        if self._parents_count < 0:
            raise RuntimeError("finish_node called more often than start_node")

        if self._parents_count == 0:
            self._eat_trivia()
            if self._needs_eof and self._index < len(self._tokens):
                self._do_token(KotlinSyntaxKind.EOF, self._tokens[self._index])

        self._builder.finish_node()

    def errors(self, errors: list[Diagnostic]) -> None:
        self._errors = list(errors)

    def replay(self, events: list[Event], errors: list[Diagnostic]) -> ParsedGreenTree:
        """Feed `events` through the sink and finish the tree.

        Forward parents open before the node that points at them.
        """
        self.errors(errors)
        for index, event in enumerate(events):
            match event:
                case StartEvent(kind=KotlinSyntaxKind.TOMBSTONE):
                    continue
                case StartEvent():
                    for kind in reversed(_forward_chain(events, index, event)):
                        self.start_node(kind)
                case FinishEvent():
                    self.finish_node()
                case TokenEvent(kind=kind, end=end):
                    self.token(kind, end)
        return self.finish()

    def finish(self) -> ParsedGreenTree:
        return ParsedGreenTree(root=self._builder.finish(), diagnostics=self._errors)

    def _do_token(self, kind: KotlinSyntaxKind, token: Token) -> None:
        if token.kind == TokenKind.EOF:
            self._needs_eof = False
        self._builder.token(kind, slice_text_range(self._text, token.range))
        self._index += 1

    def _eat_trivia(self) -> None:
        while self._index < len(self._tokens):
            token = self._tokens[self._index]
            if not token.kind.is_trivia:
                break
            self._do_token(KotlinSyntaxKind.from_token_kind(token.kind), token)


def build_lossless_tree(
    text: str,
    events: list[Event],
    tokens: list[Token],
    diagnostics: list[Diagnostic],
) -> ParsedGreenTree:
    return LosslessTreeSink(text=text, tokens=tokens).replay(events, diagnostics)
