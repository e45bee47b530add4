"""Token stream assembly: collect emitted tokens, then restore reading order.

WHY: Rules emit in traversal-completion order, which is not textual
order. A BEGIN is emitted before its children are visited and an END
after, while a token emitted deep inside one child can textually precede
a token emitted earlier for a sibling. A single stable sort at the end is
the only place that guarantees tokens come out in reading order.

HOW: TokenStream is the explicit output buffer a Walker emits into.
emit() anchors a token at the start of a span, emit_end() at the
construct's closing character. tokens() returns the buffer stably sorted
by (line, column). assemble() wires a fresh stream and walker together
for one tree.

RULES:
- One TokenStream per tree; nothing is shared between files
- Ties on (line, column) keep emission order (stable sort), so for equal
  positions the earlier-emitted (begin-side) token comes first
- END tokens sit at (end_line, max(end_column - 1, 0)) with length 1
- Anchors without a valid span raise InvariantViolation
"""

from __future__ import annotations

from operator import attrgetter
from typing import List, Union

from structokens.core.ir import InvariantViolation, Token
from structokens.core.rules import RULES
from structokens.core.syntax import Span, SyntaxNode
from structokens.core.traversal import Walker
from structokens.core.vocabulary import MARKER_LENGTH, TokenKind, is_end

Anchor = Union[Span, SyntaxNode]

_READING_ORDER = attrgetter("line", "column")


def _span_of(anchor: Anchor, kind: TokenKind) -> Span:
    span = anchor.span if isinstance(anchor, SyntaxNode) else anchor
    if not isinstance(span, Span) or not span.is_valid:
        raise InvariantViolation(
            "{} anchored on a node without valid position: {!r}".format(kind.name, span)
        )
    return span


class TokenStream:
    """Output buffer for one traversal."""

    def __init__(self) -> None:
        self._tokens: List[Token] = []

    def __len__(self) -> int:
        return len(self._tokens)

    def emit(self, kind: TokenKind, anchor: Anchor, length: int) -> Token:
        """Append a token at the start of ``anchor``."""
        span = _span_of(anchor, kind)
        token = Token(kind, span.start_line, span.start_column, length)
        self._tokens.append(token)
        return token

    def emit_end(self, kind: TokenKind, anchor: Anchor) -> Token:
        """Append an END token at the last character of ``anchor``."""
        if not is_end(kind):
            raise InvariantViolation("{} is not an END kind".format(kind.name))
        span = _span_of(anchor, kind)
        token = Token(kind, span.end_line, max(span.end_column - 1, 0), MARKER_LENGTH)
        self._tokens.append(token)
        return token

    def emitted(self) -> List[Token]:
        """Tokens in emission order (for diagnostics and tests)."""
        return list(self._tokens)

    def tokens(self) -> List[Token]:
        """Tokens in reading order."""
        return sorted(self._tokens, key=_READING_ORDER)


def assemble(root: SyntaxNode) -> List[Token]:
    """Convert an adapted syntax tree into a reading-order token list.

    Args:
        root: Root of the tree produced by the parser adapter.

    Returns:
        Tokens sorted by (line, column), ties in emission order.

    Raises:
        InvariantViolation: If an emission rule produced an invalid token.
    """
    stream = TokenStream()
    Walker(stream, RULES).visit(root)
    return stream.tokens()
