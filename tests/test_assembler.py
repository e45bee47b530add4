"""Tests for TokenStream, assembly and whole-stream invariants.

WHY: Rules emit in traversal-completion order; only the assembler turns
that into reading order. The properties checked here (ordering, balanced
BEGIN/END, positive lengths, determinism) are what downstream consumers
rely on without ever looking at individual rules.

HOW: Direct TokenStream tests with hand-built anchors, invariant
violations on malformed anchors, and property checks over the sample
module and a deeply nested snippet.

RULES:
- Output is non-decreasing in (line, column)
- Ties keep emission order
- BEGIN/END kinds nest like parentheses
- Invalid tokens raise InvariantViolation, never silently pass
"""

import pytest

from structokens.core.assembler import TokenStream, assemble
from structokens.core.ir import InvariantViolation, Token
from structokens.core.syntax import NodeKind, Span
from structokens.core.vocabulary import TokenKind, begin_of, is_begin, is_end
from structokens.pipeline import tokenize_file

from helpers import SAMPLE_MODULE, node, program, span, tokenize


def _assert_balanced(tokens):
    stack = []
    for token in tokens:
        if is_begin(token.kind):
            stack.append(token.kind)
        elif is_end(token.kind):
            assert stack, "unmatched {} at {}".format(token.kind.name, token.position)
            assert stack.pop() is begin_of(token.kind)
    assert stack == []


class TestTokenStream:
    """Emission, END placement and sorting."""

    def test_emit_anchors_at_span_start(self):
        stream = TokenStream()
        token = stream.emit(TokenKind.RETURN, span(4, 12, line=3), 6)
        assert token == Token(TokenKind.RETURN, 3, 4, 6)

    def test_emit_end_sits_on_last_character(self):
        stream = TokenStream()
        token = stream.emit_end(TokenKind.FOR_END, Span(1, 0, 4, 10))
        assert (token.line, token.column, token.length) == (4, 9, 1)

    def test_emit_end_clamps_column_zero(self):
        stream = TokenStream()
        token = stream.emit_end(TokenKind.FOR_END, Span(1, 0, 2, 0))
        assert (token.line, token.column) == (2, 0)

    def test_emit_end_rejects_non_end_kind(self):
        with pytest.raises(InvariantViolation):
            TokenStream().emit_end(TokenKind.FOR_BEGIN, span(0, 3))

    def test_tokens_sorted_stably(self):
        stream = TokenStream()
        stream.emit(TokenKind.APPLY, span(5, 6), 1)
        stream.emit(TokenKind.IF_BEGIN, span(0, 9), 2)
        stream.emit(TokenKind.ASSIGN, span(5, 7), 1)
        stream.emit(TokenKind.RETURN, span(0, 6, line=2), 6)
        ordered = stream.tokens()
        assert [t.kind for t in ordered] == [
            TokenKind.IF_BEGIN,
            TokenKind.APPLY,
            TokenKind.ASSIGN,
            TokenKind.RETURN,
        ]
        assert [t.kind for t in stream.emitted()][0] is TokenKind.APPLY
        assert len(stream) == 4

    def test_sort_uses_line_before_column(self):
        stream = TokenStream()
        stream.emit(TokenKind.BREAK, span(0, 5, line=2), 5)
        stream.emit(TokenKind.BREAK, span(40, 45, line=1), 5)
        assert [t.line for t in stream.tokens()] == [1, 2]


class TestInvariantViolations:
    """Malformed tokens and anchors are fatal."""

    def test_zero_length(self):
        with pytest.raises(InvariantViolation):
            TokenStream().emit(TokenKind.APPLY, span(0, 1), 0)

    def test_invalid_span(self):
        with pytest.raises(InvariantViolation):
            TokenStream().emit(TokenKind.APPLY, Span(0, 0, 1, 1), 1)

    def test_span_ending_before_start(self):
        with pytest.raises(InvariantViolation):
            TokenStream().emit(TokenKind.APPLY, Span(2, 5, 1, 0), 1)

    def test_end_token_must_have_length_one(self):
        with pytest.raises(InvariantViolation):
            Token(TokenKind.IF_END, 1, 0, 2)

    def test_kind_must_be_token_kind(self):
        with pytest.raises(InvariantViolation):
            Token(6, 1, 0, 1)

    def test_negative_column(self):
        with pytest.raises(InvariantViolation):
            Token(TokenKind.APPLY, 1, -1, 1)

    def test_missing_operator(self):
        update = node(NodeKind.UPDATE, 0, 3)
        with pytest.raises(InvariantViolation, match="no operator"):
            assemble(program(update))

    def test_invariant_violation_is_not_a_value_error(self):
        assert issubclass(InvariantViolation, RuntimeError)
        assert not issubclass(InvariantViolation, ValueError)


class TestStreamProperties:
    """Whole-stream guarantees on realistic input."""

    def test_sample_module_is_ordered(self):
        tokens = tokenize(SAMPLE_MODULE)
        positions = [t.position for t in tokens]
        assert positions == sorted(positions)

    def test_sample_module_is_balanced(self):
        _assert_balanced(tokenize(SAMPLE_MODULE))

    def test_lengths_positive(self):
        assert all(t.length >= 1 for t in tokenize(SAMPLE_MODULE))

    def test_sample_module_covers_constructs(self):
        seen = {t.kind for t in tokenize(SAMPLE_MODULE)}
        expected = {
            TokenKind.IMPORT, TokenKind.EXPORT, TokenKind.CLASS_BEGIN,
            TokenKind.FUNCTION_BEGIN, TokenKind.FOR_BEGIN, TokenKind.YIELD,
            TokenKind.OBJECT_BEGIN, TokenKind.IF_BEGIN, TokenKind.ELSE,
            TokenKind.CONTINUE, TokenKind.WHILE_BEGIN, TokenKind.BREAK,
            TokenKind.DO_WHILE_BEGIN, TokenKind.SWITCH_BEGIN, TokenKind.CASE,
            TokenKind.RETURN, TokenKind.ARRAY_BEGIN, TokenKind.TERNARY,
            TokenKind.THROW, TokenKind.TRY, TokenKind.CATCH_BEGIN,
            TokenKind.AWAIT, TokenKind.APPLY, TokenKind.ASSIGN,
        }
        assert expected <= seen

    def test_deep_nesting_is_balanced(self):
        depth = 60
        source = "f(" * depth + ")" * depth + ";\n" + "[" * depth + "]" * depth + ";"
        tokens = tokenize(source)
        assert len([t for t in tokens if t.kind is TokenKind.APPLY]) == depth
        _assert_balanced(tokens)

    def test_same_end_position_closes_inner_first(self):
        # Both the loop and the function expression end on the last brace.
        tokens = tokenize("for (;;) x = function () {}")
        ends = [t.kind for t in tokens if is_end(t.kind)]
        assert ends == [TokenKind.FUNCTION_END, TokenKind.FOR_END]
        _assert_balanced(tokens)

    def test_empty_source(self):
        assert tokenize("") == []
        assert tokenize("// only a comment\n") == []


class TestDeterminism:
    """The same input always yields the same stream."""

    def test_file_conversion_is_idempotent(self, sample_file):
        first = [t.to_dict() for t in tokenize_file(sample_file)]
        second = [t.to_dict() for t in tokenize_file(sample_file)]
        assert first == second

    def test_file_matches_source(self, sample_file):
        assert tokenize_file(sample_file) == tokenize(SAMPLE_MODULE)
