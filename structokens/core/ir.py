"""Token dataclass: the unit of a structural token stream.

WHY: Every emission rule produces the same kind of record: a token kind
anchored at a source position with a length. Formatters, the CLI and the
HTTP API all consume these records, so their invariants are enforced once,
at construction, instead of in every consumer.

HOW: Token is a frozen dataclass validated in __post_init__. A violation
raises InvariantViolation: it signals a defect in an emission rule or in
the parser adapter, never bad user input.

RULES:
- kind is a TokenKind member (unknown kinds are rejected)
- line >= 1 (1-based), column >= 0 (0-based, in characters)
- length > 0
- END kinds always have length 1
- Tokens are immutable once created
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from structokens.core.vocabulary import MARKER_LENGTH, TokenKind, is_end


class InvariantViolation(RuntimeError):
    """An emission rule or the adapter broke a token invariant.

    This is a programming defect. It aborts the conversion of the file and
    must not be caught and ignored.
    """


@dataclass(frozen=True)
class Token:
    """One structural token.

    Attributes:
        kind: The token kind from the closed vocabulary.
        line: 1-based source line of the anchor.
        column: 0-based source column of the anchor, in characters.
        length: Number of source characters the token stands for.
    """

    kind: TokenKind
    line: int
    column: int
    length: int

    def __post_init__(self) -> None:
        if not isinstance(self.kind, TokenKind):
            raise InvariantViolation("unknown token kind: {!r}".format(self.kind))
        if self.length <= 0:
            raise InvariantViolation(
                "{} at {}:{} has non-positive length {}".format(
                    self.kind.name, self.line, self.column, self.length
                )
            )
        if self.line < 1 or self.column < 0:
            raise InvariantViolation(
                "{} has invalid position {}:{}".format(
                    self.kind.name, self.line, self.column
                )
            )
        if is_end(self.kind) and self.length != MARKER_LENGTH:
            raise InvariantViolation(
                "{} must have length {}, got {}".format(
                    self.kind.name, MARKER_LENGTH, self.length
                )
            )

    @property
    def position(self) -> tuple[int, int]:
        """Sort key: (line, column)."""
        return (self.line, self.column)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stream record shape.

        ``{"token": {"key": name, "value": id}, "line", "column", "length"}``
        """
        return {
            "token": {
                "key": self.kind.name,
                "value": int(self.kind),
            },
            "line": self.line,
            "column": self.column,
            "length": self.length,
        }
