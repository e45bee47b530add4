"""Emission rules: one per syntactically significant node variant.

WHY: This is where the structure of a program becomes tokens. Each rule
decides which kind(s) a construct produces, where they are anchored and
how long they are. Everything else in the package exists to feed these
rules a tree and to order what they emit.

HOW: Rules are plain functions registered per NodeKind with the @rule
decorator into RULES. A rule receives the Walker (for recursion and the
output stream) and the node. Three shapes recur:
  _block: BEGIN at the opening keyword, default recursion, END at close
  _single: one token at the construct start, then default recursion
  custom: emission interleaved with explicit child visits (if, for-of,
          assignment, update, call)

RULES:
- Every NodeKind has exactly one rule; OTHER recurses and emits nothing
- Fixed lengths come from the vocabulary's lexeme constants
- BEGIN/END kinds are always emitted in matching pairs
- Missing sub-nodes (error-recovered trees) fall back to anchoring on the
  construct itself; a missing operator is an InvariantViolation
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Optional, Union

from structokens.core.ir import InvariantViolation
from structokens.core.syntax import NodeKind, Span, SyntaxNode
from structokens.core.vocabulary import (
    BIND_LEXEME,
    DEFAULT_LEXEME,
    MARKER_LENGTH,
    TERNARY_SUFFIX,
    TokenKind,
    end_of,
    lexeme_length,
)

if TYPE_CHECKING:
    from structokens.core.traversal import Rule, Walker

T = TokenKind

RULES: Dict[NodeKind, "Rule"] = {}


def rule(*kinds: NodeKind) -> Callable[["Rule"], "Rule"]:
    """Register the decorated function as the rule for ``kinds``."""

    def register(func: "Rule") -> "Rule":
        for kind in kinds:
            if kind in RULES:
                raise ValueError("Duplicate emission rule for {}".format(kind.name))
            RULES[kind] = func
        return func

    return register


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


def _block(
    walker: Walker,
    node: SyntaxNode,
    begin: TokenKind,
    anchor: Optional[Union[Span, SyntaxNode]] = None,
) -> None:
    walker.stream.emit(begin, anchor or node, lexeme_length(begin))
    walker.descend(node)
    walker.stream.emit_end(end_of(begin), node)


def _single(walker: Walker, node: SyntaxNode, kind: TokenKind) -> None:
    walker.stream.emit(kind, node, lexeme_length(kind))
    walker.descend(node)


def _operator_length(node: SyntaxNode) -> int:
    if not node.operator:
        raise InvariantViolation(
            "{} at {}:{} has no operator".format(
                node.type, node.span.start_line, node.span.start_column
            )
        )
    return len(node.operator)


# ---------------------------------------------------------------------------
# Default
# ---------------------------------------------------------------------------


@rule(NodeKind.OTHER)
def _recurse(walker: Walker, node: SyntaxNode) -> None:
    walker.descend(node)


# ---------------------------------------------------------------------------
# Block-scoped constructs
# ---------------------------------------------------------------------------


@rule(NodeKind.FOR)
def _for(walker: Walker, node: SyntaxNode) -> None:
    # C-style header: declarators and updates inside it emit on their own.
    _block(walker, node, T.FOR_BEGIN)


@rule(NodeKind.FUNCTION)
def _function(walker: Walker, node: SyntaxNode) -> None:
    # Declarations, expressions, arrows and generators alike.
    _block(walker, node, T.FUNCTION_BEGIN)


@rule(NodeKind.METHOD)
def _method(walker: Walker, node: SyntaxNode) -> None:
    """A method's function starts at its parameter list, not at its name."""
    _block(walker, node, T.FUNCTION_BEGIN, node.child("parameters"))


@rule(NodeKind.CLASS_DECLARATION)
def _class_declaration(walker: Walker, node: SyntaxNode) -> None:
    # Decorators precede the keyword.
    _block(walker, node, T.CLASS_BEGIN, node.keyword("class"))


@rule(NodeKind.CLASS_EXPRESSION)
def _class_expression(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.IN_CLASS_BEGIN, node.keyword("class"))


@rule(NodeKind.WITH)
def _with(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.WITH_BEGIN)


@rule(NodeKind.SWITCH)
def _switch(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.SWITCH_BEGIN)


@rule(NodeKind.CATCH)
def _catch(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.CATCH_BEGIN)


@rule(NodeKind.WHILE)
def _while(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.WHILE_BEGIN)


@rule(NodeKind.DO_WHILE)
def _do_while(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.DO_WHILE_BEGIN)


@rule(NodeKind.ARRAY)
def _array(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.ARRAY_BEGIN)


@rule(NodeKind.OBJECT)
def _object(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.OBJECT_BEGIN)


@rule(NodeKind.GENERATOR_EXPRESSION)
def _generator_expression(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.GEN_EXPR_BEGIN)


@rule(NodeKind.COMPREHENSION)
def _comprehension(walker: Walker, node: SyntaxNode) -> None:
    _block(walker, node, T.ARRAY_COMP_BEGIN)


# ---------------------------------------------------------------------------
# Branching and iteration with interleaved emission
# ---------------------------------------------------------------------------


@rule(NodeKind.IF)
def _if(walker: Walker, node: SyntaxNode) -> None:
    """IF_BEGIN, condition, consequence, [ELSE, alternative], IF_END.

    The alternative is the ``else`` clause, so ELSE lands on the ``else``
    keyword itself.
    """
    stream = walker.stream
    stream.emit(T.IF_BEGIN, node, lexeme_length(T.IF_BEGIN))
    walker.visit_child(node, "condition")
    walker.visit_child(node, "consequence")
    alternative = node.child("alternative")
    if alternative is not None:
        stream.emit(T.ELSE, alternative, MARKER_LENGTH)
        walker.visit(alternative)
    stream.emit_end(T.IF_END, node)


_DECLARATION_KEYWORDS = ("var", "let", "const")


@rule(NodeKind.FOR_EACH)
def _for_each(walker: Walker, node: SyntaxNode) -> None:
    """for-in, for-of and for-await share one shape.

    The loop variable gets an ASSIGN for the implicit binding on each
    iteration, placed between the binding and the iterable. A declared
    binding (``const x``) starts at its ``var``/``let``/``const`` keyword.
    """
    stream = walker.stream
    stream.emit(T.FOR_BEGIN, node, lexeme_length(T.FOR_BEGIN))
    left = node.child("left")
    if left is not None:
        walker.visit(left)
        declared = [node.keyword(word) for word in _DECLARATION_KEYWORDS]
        anchor = next((span for span in declared if span is not None), left)
        stream.emit(T.ASSIGN, anchor, len(BIND_LEXEME))
    walker.visit_child(node, "right")
    walker.visit_child(node, "body")
    stream.emit_end(T.FOR_END, node)


@rule(NodeKind.SWITCH_CASE)
def _switch_case(walker: Walker, node: SyntaxNode) -> None:
    if node.child("value") is not None:
        length = lexeme_length(T.CASE)
    else:
        length = len(DEFAULT_LEXEME)
    walker.stream.emit(T.CASE, node, length)
    walker.descend(node)


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


def _unwrap_parens(node: SyntaxNode) -> SyntaxNode:
    while node.type == "parenthesized_expression":
        inner = [child for child in node.children if child.type != "comment"]
        if len(inner) != 1:
            break
        node = inner[0]
    return node


def _callee_anchor(callee: SyntaxNode) -> SyntaxNode:
    """Property of a member callee, index of a subscript, else the callee."""
    callee = _unwrap_parens(callee)
    if callee.type == "member_expression":
        return callee.child("property") or callee
    if callee.type == "subscript_expression":
        return callee.child("index") or callee
    return callee


@rule(NodeKind.CALL)
def _call(walker: Walker, node: SyntaxNode) -> None:
    """One APPLY per call; a call is not a scope, so no BEGIN/END.

    ``import(...)`` is a dynamic import, not a call, and a tagged template
    literal is parsed as a call but marks no application.
    """
    callee = node.child("function")
    arguments = node.child("arguments")
    if callee is not None and callee.type == "import":
        walker.stream.emit(T.IMPORT, node, lexeme_length(T.IMPORT))
    elif arguments is None or arguments.type != "template_string":
        anchor = _callee_anchor(callee) if callee is not None else node
        walker.stream.emit(T.APPLY, anchor, anchor.length)
    walker.descend(node)


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


@rule(NodeKind.VARIABLE_DECLARATOR)
def _variable_declarator(walker: Walker, node: SyntaxNode) -> None:
    name = node.child("name")
    if name is not None and node.child("value") is not None:
        walker.stream.emit(T.ASSIGN, name, name.length)
    walker.descend(node)


@rule(NodeKind.ASSIGNMENT)
def _assignment(walker: Walker, node: SyntaxNode) -> None:
    # Covers compound operators (+=, ??=, >>>=) through the operator text.
    walker.visit_child(node, "left")
    walker.stream.emit(T.ASSIGN, node, _operator_length(node))
    walker.visit_child(node, "right")


@rule(NodeKind.UPDATE)
def _update(walker: Walker, node: SyntaxNode) -> None:
    walker.descend(node)
    walker.stream.emit(T.ASSIGN, node, _operator_length(node))


# ---------------------------------------------------------------------------
# Single-token constructs
# ---------------------------------------------------------------------------


@rule(NodeKind.TERNARY)
def _ternary(walker: Walker, node: SyntaxNode) -> None:
    # Anchored at the condition as written, measured without its parentheses.
    condition = node.child("condition") or node
    length = _unwrap_parens(condition).length + len(TERNARY_SUFFIX)
    walker.stream.emit(T.TERNARY, condition, length)
    walker.descend(node)


@rule(NodeKind.BREAK)
def _break(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.BREAK)


@rule(NodeKind.CONTINUE)
def _continue(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.CONTINUE)


@rule(NodeKind.RETURN)
def _return(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.RETURN)


@rule(NodeKind.THROW)
def _throw(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.THROW)


@rule(NodeKind.TRY)
def _try(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.TRY)


@rule(NodeKind.YIELD)
def _yield(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.YIELD)


@rule(NodeKind.AWAIT)
def _await(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.AWAIT)


@rule(NodeKind.IMPORT)
def _import(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.IMPORT)


@rule(NodeKind.DECORATOR)
def _decorator(walker: Walker, node: SyntaxNode) -> None:
    _single(walker, node, T.DECORATOR)


@rule(NodeKind.EXPORT)
def _export(walker: Walker, node: SyntaxNode) -> None:
    """Named, default and star exports collapse into one EXPORT."""
    walker.stream.emit(T.EXPORT, node.keyword("export") or node, lexeme_length(T.EXPORT))
    walker.descend(node)


_unhandled = [kind.name for kind in NodeKind if kind not in RULES]
if _unhandled:
    raise RuntimeError("No emission rule for: {}".format(", ".join(_unhandled)))
