"""Syntax tree model consumed by the traversal: a closed set of node variants.

WHY: The emission rules must not depend on the parser's string-typed node
names. The parser adapter classifies every grammar node into one member of
the closed NodeKind enum, and the rule table is checked to cover every
member, so an unhandled construct is caught at import time rather than
silently falling through.

HOW: Span holds a node's start/end position. SyntaxNode carries the
variant tag (kind), the grammar's own type name (for diagnostics), the
span, the character length of its source text, its named children in
source order, named fields, the spans of anonymous keyword children, and
the operator text for assignment/update expressions. GRAMMAR_KINDS maps
tree-sitter-javascript node types onto NodeKind; anything not listed is
NodeKind.OTHER.

RULES:
- Lines are 1-based, columns 0-based and counted in characters
- A SyntaxNode's children are exactly the nodes the walker may visit
- fields values are always also present in children
- SyntaxNode trees are built once per file and never mutated by the core
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional


class NodeKind(Enum):
    """Syntactically significant node variants; OTHER covers the rest."""

    FOR = "for"
    FOR_EACH = "for_each"
    FUNCTION = "function"
    METHOD = "method"
    BREAK = "break"
    CONTINUE = "continue"
    CALL = "call"
    IF = "if"
    CLASS_DECLARATION = "class_declaration"
    CLASS_EXPRESSION = "class_expression"
    WITH = "with"
    SWITCH = "switch"
    SWITCH_CASE = "switch_case"
    RETURN = "return"
    THROW = "throw"
    TRY = "try"
    CATCH = "catch"
    WHILE = "while"
    DO_WHILE = "do_while"
    VARIABLE_DECLARATOR = "variable_declarator"
    ASSIGNMENT = "assignment"
    UPDATE = "update"
    TERNARY = "ternary"
    YIELD = "yield"
    ARRAY = "array"
    OBJECT = "object"
    GENERATOR_EXPRESSION = "generator_expression"
    COMPREHENSION = "comprehension"
    IMPORT = "import"
    AWAIT = "await"
    DECORATOR = "decorator"
    EXPORT = "export"
    OTHER = "other"


# tree-sitter-javascript node type → NodeKind.
# The grammar has no generator-expression or comprehension nodes.
GRAMMAR_KINDS: Dict[str, NodeKind] = {
    "for_statement": NodeKind.FOR,
    "for_in_statement": NodeKind.FOR_EACH,
    "function_declaration": NodeKind.FUNCTION,
    "function_expression": NodeKind.FUNCTION,
    "function": NodeKind.FUNCTION,
    "arrow_function": NodeKind.FUNCTION,
    "generator_function": NodeKind.FUNCTION,
    "generator_function_declaration": NodeKind.FUNCTION,
    "method_definition": NodeKind.METHOD,
    "break_statement": NodeKind.BREAK,
    "continue_statement": NodeKind.CONTINUE,
    "call_expression": NodeKind.CALL,
    "if_statement": NodeKind.IF,
    "class_declaration": NodeKind.CLASS_DECLARATION,
    "class": NodeKind.CLASS_EXPRESSION,
    "with_statement": NodeKind.WITH,
    "switch_statement": NodeKind.SWITCH,
    "switch_case": NodeKind.SWITCH_CASE,
    "switch_default": NodeKind.SWITCH_CASE,
    "return_statement": NodeKind.RETURN,
    "throw_statement": NodeKind.THROW,
    "try_statement": NodeKind.TRY,
    "catch_clause": NodeKind.CATCH,
    "while_statement": NodeKind.WHILE,
    "do_statement": NodeKind.DO_WHILE,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    "assignment_expression": NodeKind.ASSIGNMENT,
    "augmented_assignment_expression": NodeKind.ASSIGNMENT,
    "update_expression": NodeKind.UPDATE,
    "ternary_expression": NodeKind.TERNARY,
    "yield_expression": NodeKind.YIELD,
    "array": NodeKind.ARRAY,
    "object": NodeKind.OBJECT,
    "import_statement": NodeKind.IMPORT,
    "await_expression": NodeKind.AWAIT,
    "decorator": NodeKind.DECORATOR,
    "export_statement": NodeKind.EXPORT,
}


def classify(node_type: str) -> NodeKind:
    """NodeKind for a grammar node type; unknown types are OTHER."""
    return GRAMMAR_KINDS.get(node_type, NodeKind.OTHER)


@dataclass(frozen=True)
class Span:
    """Start/end position of a node or keyword.

    The end position is exclusive: end_column is one past the last
    character on end_line.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int

    @property
    def is_valid(self) -> bool:
        return (
            self.start_line >= 1
            and self.start_column >= 0
            and (self.end_line, self.end_column) >= (self.start_line, self.start_column)
        )


@dataclass
class SyntaxNode:
    """One node of the adapted syntax tree.

    Attributes:
        kind: Variant tag used for rule dispatch.
        type: Grammar node type, e.g. ``"for_in_statement"``.
        span: Source span.
        length: Character length of the node's source text.
        children: Named children in source order.
        fields: Named fields (``left``, ``body``, ``condition`` ...).
        keywords: Spans of anonymous children keyed by their text, first
            occurrence only (``class``, ``export``, ``else`` ...).
        operator: Operator text of assignment and update expressions.
    """

    kind: NodeKind
    type: str
    span: Span
    length: int
    children: List[SyntaxNode] = field(default_factory=list)
    fields: Dict[str, SyntaxNode] = field(default_factory=dict)
    keywords: Dict[str, Span] = field(default_factory=dict)
    operator: Optional[str] = None

    def child(self, name: str) -> Optional[SyntaxNode]:
        """The child stored under field ``name``, or None."""
        return self.fields.get(name)

    def keyword(self, text: str) -> Optional[Span]:
        """Span of the first anonymous child spelled ``text``, or None."""
        return self.keywords.get(text)

    def iter_tree(self) -> Iterator[SyntaxNode]:
        """Yield this node and every descendant, pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))
