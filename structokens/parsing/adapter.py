"""Adapter from tree-sitter's concrete tree to the core SyntaxNode model.

WHY: tree-sitter reports positions as 0-based rows and byte columns and
keeps keywords and operators as anonymous children. The core wants
1-based lines, character columns, character lengths, and a small closed
set of node variants. Converting once at the boundary keeps every
emission rule free of parser details.

HOW: A TreeCursor walk (no recursion, so deeply nested sources are safe)
visits every tree-sitter node once. Named nodes become SyntaxNodes and
are attached to their parent's children (and fields, when the grammar
names the slot). Anonymous nodes become keyword spans on their parent;
an anonymous child in the ``operator`` slot becomes the parent's
operator. Zero-width nodes (MISSING placeholders inserted by error
recovery, automatic semicolons) have no source text and are dropped.

RULES:
- line = tree-sitter row + 1
- column and length are counted in characters of the decoded source
- Zero-width nodes never reach the core
- ``export default class {}`` is a class declaration, not a class expression
- Plain assignments (``=``) get operator "=" even though the grammar
  leaves that token outside the operator field
"""

from __future__ import annotations

from typing import List, Optional

from tree_sitter import Node, Tree

from structokens.core.syntax import NodeKind, Span, SyntaxNode, classify

_ASSIGN = "="


class _PositionIndex:
    """Converts tree-sitter byte positions to character positions."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._ascii = data.isascii()
        self._line_starts: List[int] = [0]
        offset = data.find(b"\n")
        while offset != -1:
            self._line_starts.append(offset + 1)
            offset = data.find(b"\n", offset + 1)

    def column(self, row: int, byte_column: int) -> int:
        if self._ascii:
            return byte_column
        start = self._line_starts[min(row, len(self._line_starts) - 1)]
        return len(self._data[start:start + byte_column].decode("utf-8", errors="replace"))

    def length(self, start_byte: int, end_byte: int) -> int:
        if self._ascii:
            return end_byte - start_byte
        return len(self._data[start_byte:end_byte].decode("utf-8", errors="replace"))

    def span(self, node: Node) -> Span:
        start_row, start_col = node.start_point
        end_row, end_col = node.end_point
        return Span(
            start_line=start_row + 1,
            start_column=self.column(start_row, start_col),
            end_line=end_row + 1,
            end_column=self.column(end_row, end_col),
        )


def _make_node(ts_node: Node, index: _PositionIndex) -> SyntaxNode:
    return SyntaxNode(
        kind=classify(ts_node.type),
        type=ts_node.type,
        span=index.span(ts_node),
        length=index.length(ts_node.start_byte, ts_node.end_byte),
    )


def _is_default_class(parent: SyntaxNode, node: SyntaxNode, field_name: Optional[str]) -> bool:
    """An anonymous class after ``export default`` is a declaration."""
    return (
        node.type == "class"
        and field_name == "value"
        and parent.kind is NodeKind.EXPORT
        and "default" in parent.keywords
    )


def _attach(
    parent: SyntaxNode,
    ts_node: Node,
    field_name: Optional[str],
    index: _PositionIndex,
) -> Optional[SyntaxNode]:
    """Attach one tree-sitter child to ``parent``; return it if it is named."""
    if ts_node.is_named:
        node = _make_node(ts_node, index)
        if _is_default_class(parent, node, field_name):
            node.kind = NodeKind.CLASS_DECLARATION
        parent.children.append(node)
        if field_name and field_name not in parent.fields:
            parent.fields[field_name] = node
        return node
    text = ts_node.type
    parent.keywords.setdefault(text, index.span(ts_node))
    if field_name == "operator" or (
        text == _ASSIGN and parent.kind is NodeKind.ASSIGNMENT and parent.operator is None
    ):
        parent.operator = text
    return None


def adapt(tree: Tree, data: bytes) -> SyntaxNode:
    """Convert a parsed tree into a SyntaxNode tree.

    Args:
        tree: tree-sitter parse result.
        data: The exact UTF-8 bytes that were parsed.

    Returns:
        The root SyntaxNode (the ``program`` node).
    """
    index = _PositionIndex(data)
    root = _make_node(tree.root_node, index)

    cursor = tree.walk()
    # SyntaxNode of the cursor node's parent, one entry per depth.
    parents: List[SyntaxNode] = [root]
    if not cursor.goto_first_child():
        return root
    while True:
        parent = parents[-1]
        ts_node = cursor.node
        current: Optional[SyntaxNode] = None
        if ts_node.end_byte > ts_node.start_byte:
            current = _attach(parent, ts_node, cursor.field_name, index)

        if current is not None and cursor.goto_first_child():
            parents.append(current)
            continue
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent() or len(parents) == 1:
                return root
            parents.pop()

