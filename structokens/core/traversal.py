"""Depth-first traversal engine over the adapted syntax tree.

WHY: Emission rules need three behaviors: emit then recurse normally,
emit while visiting only chosen children in a chosen order (e.g. an
``if`` places its ELSE marker between the consequence and the
alternative), or emit and stop. The engine provides those primitives and
nothing else, so a rule's recursion is always explicit.

HOW: Walker.visit() dispatches on node.kind through the rule table.
The engine never recurses on its own after a rule returns: a rule that
wants default behavior calls descend(), a rule that wants a subset calls
visit_child() per field. Nothing can re-trigger full recursion for a
node whose rule recursed partially.

RULES:
- The rule table must cover every NodeKind (checked on construction)
- descend() visits children in source order
- Each visit() call dispatches exactly one rule
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Mapping

from structokens.core.syntax import NodeKind, SyntaxNode

if TYPE_CHECKING:
    from structokens.core.assembler import TokenStream

Rule = Callable[["Walker", SyntaxNode], None]


class Walker:
    """Walks a SyntaxNode tree, feeding emitted tokens into one stream.

    Args:
        stream: Output buffer the rules emit into.
        rules: Rule per NodeKind. Must be exhaustive.
    """

    def __init__(self, stream: TokenStream, rules: Mapping[NodeKind, Rule]) -> None:
        missing = [kind.name for kind in NodeKind if kind not in rules]
        if missing:
            raise ValueError("No emission rule for: {}".format(", ".join(missing)))
        self.stream = stream
        self._rules = rules

    def visit(self, node: SyntaxNode) -> None:
        """Run the rule registered for the node's kind."""
        self._rules[node.kind](self, node)

    def descend(self, node: SyntaxNode) -> None:
        """Default behavior: visit every child in source order."""
        for child in node.children:
            self.visit(child)

    def visit_child(self, node: SyntaxNode, name: str) -> None:
        """Visit the child stored under field ``name``, if there is one."""
        child = node.child(name)
        if child is not None:
            self.visit(child)
