"""JavaScript parsing with a strict first attempt and a lenient fallback.

WHY: Real-world inputs include files that do not parse cleanly (partial
edits, vendor syntax, truncated downloads). A structural fingerprint of a
mostly-valid file is still useful, so a strict parse failure is retried
with an error-tolerant parse instead of failing the whole file.

HOW: tree-sitter always produces a tree; errors show up as ERROR nodes
and zero-width MISSING nodes. parse_strict() rejects any tree containing
either with a ParseError carrying the first error's position.
parse_lenient() accepts the error-recovered tree as-is. parse_source()
tries strict, logs the failure as a warning, and falls back to lenient.

RULES:
- Source is parsed as module code; tree-sitter's JavaScript grammar
  accepts top-level return/await and import/export anywhere
- JSX is accepted (the grammar includes it)
- Positions are always tracked; the adapter converts them to 1-based
  lines and character columns
- A lenient failure propagates as ParseError (no partial output)
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from structokens.core.syntax import SyntaxNode
from structokens.parsing.adapter import adapt

logger = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())


class ParseError(ValueError):
    """Source could not be parsed.

    Attributes:
        line: 1-based line of the first syntax error, if known.
        column: 0-based byte column of the first syntax error, if known.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


def _parse_tree(source: str) -> Tuple[Tree, bytes]:
    """Run tree-sitter on ``source``; return the tree and the parsed bytes."""
    if not isinstance(source, str):
        raise TypeError("source must be str, got {}".format(type(source).__name__))
    data = source.encode("utf-8")
    tree = Parser(JS_LANGUAGE).parse(data)
    if tree is None or tree.root_node is None:
        raise ParseError("tree-sitter returned no tree")
    return tree, data


def _first_error(root: Node) -> Optional[Node]:
    """First ERROR or MISSING node in source order, or None."""
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error or node.is_missing:
            return node
        stack.extend(
            child for child in reversed(node.children)
            if child.has_error or child.is_missing
        )
    return None


def _describe(node: Node) -> str:
    row, column = node.start_point
    if node.is_missing:
        what = "missing {!r}".format(node.type)
    else:
        what = "unexpected input"
    return "{} at line {}, column {}".format(what, row + 1, column)


def parse_strict(source: str) -> SyntaxNode:
    """Parse ``source``; reject any tree with syntax errors.

    Raises:
        ParseError: If tree-sitter had to recover from an error.
    """
    tree, data = _parse_tree(source)
    error = _first_error(tree.root_node)
    if error is not None:
        row, column = error.start_point
        raise ParseError(_describe(error), line=row + 1, column=column)
    return adapt(tree, data)


def parse_lenient(source: str) -> SyntaxNode:
    """Parse ``source``, keeping tree-sitter's error-recovered tree."""
    tree, data = _parse_tree(source)
    return adapt(tree, data)


def parse_source(source: str) -> SyntaxNode:
    """Parse strictly, falling back to the lenient parse on failure.

    Raises:
        ParseError: If the lenient parse fails as well.
    """
    try:
        return parse_strict(source)
    except ParseError as exc:
        logger.warning("Got parse error: %s", exc)
        return parse_lenient(source)
