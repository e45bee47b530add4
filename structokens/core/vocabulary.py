"""The closed vocabulary of structural token kinds.

WHY: Consumers (typically a model with an embedding table) serialize the
id → name mapping once and reuse it across runs. The set of kinds and
their ids must therefore never change at runtime and never depend on the
input being converted.

HOW: TokenKind is an IntEnum whose member order fixes the ids. Id 0 is
reserved (padding for consumers), so ids run from 1 to kind_count() and
amount() reports kind_count() + 1. LEXEMES ties each fixed-length kind to
the keyword or bracket it marks, so emission rules read lengths from one
place instead of repeating literals.

RULES:
- Ids start at 1; 0 is never assigned
- amount() == kind_count() + 1 == len(mapping()) + 1
- Every *_END kind has a matching *_BEGIN kind and vice versa
- New kinds are appended at the end, never inserted
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict


class TokenKind(IntEnum):
    """Structural token kinds, in stable id order."""

    FOR_BEGIN = 1
    FOR_END = 2
    FUNCTION_BEGIN = 3
    FUNCTION_END = 4
    BREAK = 5
    APPLY = 6
    IF_BEGIN = 7
    IF_END = 8
    ELSE = 9
    CONTINUE = 10
    CLASS_BEGIN = 11
    CLASS_END = 12
    IN_CLASS_BEGIN = 13
    IN_CLASS_END = 14
    WITH_BEGIN = 15
    WITH_END = 16
    SWITCH_BEGIN = 17
    SWITCH_END = 18
    CASE = 19
    RETURN = 20
    THROW = 21
    TRY = 22
    CATCH_BEGIN = 23
    CATCH_END = 24
    WHILE_BEGIN = 25
    WHILE_END = 26
    DO_WHILE_BEGIN = 27
    DO_WHILE_END = 28
    ASSIGN = 29
    ARRAY_BEGIN = 30
    ARRAY_END = 31
    OBJECT_BEGIN = 32
    OBJECT_END = 33
    TERNARY = 34
    YIELD = 35
    GEN_EXPR_BEGIN = 36
    GEN_EXPR_END = 37
    ARRAY_COMP_BEGIN = 38
    ARRAY_COMP_END = 39
    IMPORT = 40
    AWAIT = 41
    DECORATOR = 42
    EXPORT = 43


_BEGIN_SUFFIX = "_BEGIN"
_END_SUFFIX = "_END"

# ---------------------------------------------------------------------------
# Lexemes: the source text a fixed-length token stands for
# ---------------------------------------------------------------------------

LEXEMES: Dict[TokenKind, str] = {
    TokenKind.FOR_BEGIN: "for",
    TokenKind.FUNCTION_BEGIN: "function",
    TokenKind.BREAK: "break",
    TokenKind.IF_BEGIN: "if",
    TokenKind.CONTINUE: "continue",
    TokenKind.CLASS_BEGIN: "class",
    TokenKind.IN_CLASS_BEGIN: "class",
    TokenKind.WITH_BEGIN: "with",
    TokenKind.SWITCH_BEGIN: "switch",
    TokenKind.CASE: "case",
    TokenKind.RETURN: "return",
    TokenKind.THROW: "throw",
    TokenKind.TRY: "try",
    TokenKind.CATCH_BEGIN: "catch",
    TokenKind.WHILE_BEGIN: "while",
    TokenKind.DO_WHILE_BEGIN: "do",
    TokenKind.ARRAY_BEGIN: "[",
    TokenKind.OBJECT_BEGIN: "{",
    TokenKind.YIELD: "yield",
    TokenKind.GEN_EXPR_BEGIN: "(",
    TokenKind.ARRAY_COMP_BEGIN: "[",
    TokenKind.IMPORT: "import",
    TokenKind.AWAIT: "await",
    TokenKind.DECORATOR: "@",
    TokenKind.EXPORT: "export",
}
"""Keyword or bracket for every kind whose length is fixed."""

MARKER_LENGTH = 1
"""Length of END tokens and of the ELSE marker: a single character."""

DEFAULT_LEXEME = "default"
"""Lexeme of a CASE token for a switch clause without a guard value."""

# Suffix appended to a ternary's condition: the token covers "cond ?".
TERNARY_SUFFIX = " ?"

BIND_LEXEME = "="
"""Implicit binding of a for-in / for-of loop variable."""


def lexeme_length(kind: TokenKind) -> int:
    """Character length of the fixed lexeme for ``kind``.

    Raises:
        KeyError: If ``kind`` has no fixed lexeme (its length is computed
            from the source, e.g. APPLY or ASSIGN).
    """
    return len(LEXEMES[kind])


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


def kind_count() -> int:
    """Number of token kinds in the vocabulary."""
    return len(TokenKind)


def amount() -> int:
    """Size of an id table covering every kind plus the reserved id 0."""
    return kind_count() + 1


def id_of(name: str) -> int:
    """Id of the kind called ``name``; raises KeyError when unknown."""
    return int(TokenKind[name])


def name_of(token_id: int) -> str:
    """Name of the kind with id ``token_id``; raises KeyError when unknown."""
    try:
        return TokenKind(token_id).name
    except ValueError:
        raise KeyError(token_id) from None


def mapping() -> Dict[str, str]:
    """Id → name mapping with string keys, in id order.

    String keys keep the mapping identical after a JSON round trip.
    """
    return {str(int(kind)): kind.name for kind in TokenKind}


def is_begin(kind: TokenKind) -> bool:
    return kind.name.endswith(_BEGIN_SUFFIX)


def is_end(kind: TokenKind) -> bool:
    return kind.name.endswith(_END_SUFFIX)


def end_of(kind: TokenKind) -> TokenKind:
    """The END kind closing the BEGIN kind ``kind``."""
    if not is_begin(kind):
        raise ValueError("{} is not a BEGIN kind".format(kind.name))
    return TokenKind[kind.name[: -len(_BEGIN_SUFFIX)] + _END_SUFFIX]


def begin_of(kind: TokenKind) -> TokenKind:
    """The BEGIN kind opened before the END kind ``kind``."""
    if not is_end(kind):
        raise ValueError("{} is not an END kind".format(kind.name))
    return TokenKind[kind.name[: -len(_END_SUFFIX)] + _BEGIN_SUFFIX]
