"""Tests for the closed token vocabulary.

WHY: Consumers persist the id → name mapping and size embedding tables
from the amount. Any drift in ids, names or the amount silently corrupts
every model trained on earlier streams.

HOW: Checks the exact member order, the amount/mapping relationship,
lookup errors, BEGIN/END pairing, and the lexeme lengths used by rules.

RULES:
- Ids are pinned explicitly for a handful of kinds (append-only contract)
- No test depends on the parser
"""

import json

import pytest

from structokens.core.vocabulary import (
    DEFAULT_LEXEME,
    LEXEMES,
    MARKER_LENGTH,
    TokenKind,
    amount,
    begin_of,
    end_of,
    id_of,
    is_begin,
    is_end,
    kind_count,
    lexeme_length,
    mapping,
    name_of,
)


class TestIds:
    """Ids are stable, dense and start at 1."""

    def test_kind_count(self):
        assert kind_count() == 43

    def test_amount_is_count_plus_one(self):
        assert amount() == kind_count() + 1 == 44

    def test_ids_are_dense_from_one(self):
        assert [int(k) for k in TokenKind] == list(range(1, kind_count() + 1))

    @pytest.mark.parametrize("name,expected", [
        ("FOR_BEGIN", 1),
        ("APPLY", 6),
        ("ELSE", 9),
        ("ASSIGN", 29),
        ("TERNARY", 34),
        ("IMPORT", 40),
        ("EXPORT", 43),
    ])
    def test_pinned_ids(self, name, expected):
        assert id_of(name) == expected
        assert name_of(expected) == name

    def test_zero_is_reserved(self):
        with pytest.raises(KeyError):
            name_of(0)

    def test_unknown_name(self):
        with pytest.raises(KeyError):
            id_of("GOTO")

    def test_unknown_id(self):
        with pytest.raises(KeyError):
            name_of(amount())


class TestMapping:
    """The id → name mapping matches the amount and survives JSON."""

    def test_amount_equals_mapping_plus_one(self):
        assert amount() == len(mapping()) + 1

    def test_keys_are_decimal_strings(self):
        m = mapping()
        assert m["1"] == "FOR_BEGIN"
        assert m["43"] == "EXPORT"
        assert all(key.isdigit() for key in m)

    def test_json_round_trip_is_identical(self):
        m = mapping()
        assert json.loads(json.dumps(m)) == m

    def test_mapping_is_in_id_order(self):
        assert list(mapping().keys()) == [str(i) for i in range(1, amount())]


class TestPairing:
    """Every BEGIN has an END and vice versa."""

    def test_every_begin_has_an_end(self):
        for kind in TokenKind:
            if is_begin(kind):
                assert begin_of(end_of(kind)) is kind

    def test_every_end_has_a_begin(self):
        for kind in TokenKind:
            if is_end(kind):
                assert end_of(begin_of(kind)) is kind

    def test_begin_and_end_counts_match(self):
        begins = [k for k in TokenKind if is_begin(k)]
        ends = [k for k in TokenKind if is_end(k)]
        assert len(begins) == len(ends) == 14

    def test_end_of_rejects_non_begin(self):
        with pytest.raises(ValueError):
            end_of(TokenKind.APPLY)

    def test_begin_of_rejects_non_end(self):
        with pytest.raises(ValueError):
            begin_of(TokenKind.FOR_BEGIN)


class TestLexemes:
    """Fixed token lengths come from keyword lexemes."""

    @pytest.mark.parametrize("kind,length", [
        (TokenKind.FOR_BEGIN, 3),
        (TokenKind.FUNCTION_BEGIN, 8),
        (TokenKind.IF_BEGIN, 2),
        (TokenKind.CLASS_BEGIN, 5),
        (TokenKind.SWITCH_BEGIN, 6),
        (TokenKind.CASE, 4),
        (TokenKind.CONTINUE, 8),
        (TokenKind.DO_WHILE_BEGIN, 2),
        (TokenKind.ARRAY_BEGIN, 1),
        (TokenKind.IMPORT, 6),
        (TokenKind.DECORATOR, 1),
    ])
    def test_lengths(self, kind, length):
        assert lexeme_length(kind) == length

    def test_default_case_length(self):
        assert len(DEFAULT_LEXEME) == 7

    def test_computed_kinds_have_no_lexeme(self):
        for kind in (TokenKind.APPLY, TokenKind.ASSIGN, TokenKind.TERNARY):
            assert kind not in LEXEMES
            with pytest.raises(KeyError):
                lexeme_length(kind)

    def test_end_kinds_have_no_lexeme(self):
        assert not any(is_end(kind) for kind in LEXEMES)
        assert MARKER_LENGTH == 1

    def test_every_begin_has_a_lexeme(self):
        assert all(kind in LEXEMES for kind in TokenKind if is_begin(kind))
