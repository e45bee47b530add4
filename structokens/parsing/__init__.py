"""Parsing collaborator: tree-sitter JavaScript parser and tree adapter.

WHY: The core consumes a closed SyntaxNode model; this package is the only
place that knows tree-sitter exists.

HOW: parser.py parses (strict, then lenient), adapter.py converts the
tree-sitter tree into SyntaxNodes with character-based positions.
"""

from structokens.parsing.parser import (
    ParseError,
    parse_lenient,
    parse_source,
    parse_strict,
)

__all__ = ["ParseError", "parse_lenient", "parse_source", "parse_strict"]
