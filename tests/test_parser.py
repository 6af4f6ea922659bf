"""Test the token consumer's symbol tables and the tree append rules."""

from __future__ import annotations

import io

import pytest

from fort.ast import NodeType, Tree, append_tree
from fort.lexer import Lexer, tokenize
from fort.parser import Parser, label_key
from fort.source import CharSource
from fort.tokens import Token, TokenType

from .conftest import stmt


def make_parser(source: str) -> Parser:
    return Parser(Lexer(CharSource(io.StringIO(source))))


class TestLabelKey:
    def test_plain(self):
        assert label_key("10") == "10"

    def test_prefix_blanks(self):
        assert label_key("10    ") == "10"
        assert label_key("  1 0 ") == "10"

    def test_leading_zeros(self):
        assert label_key("00010 ") == "10"

    def test_continuation_column_is_not_part_of_label(self):
        assert label_key("123450", prefix=True) == "12345"
        assert label_key("10   0", prefix=True) == "10"

    def test_goto_label_keeps_every_digit(self):
        assert label_key("123450") == "123450"


class TestPullContract:
    def test_parse_returns_all_tokens(self):
        source = stmt("GOTO 20", "10") + stmt("END")
        assert make_parser(source).parse() == tokenize(source)

    def test_next_token_one_at_a_time(self):
        parser = make_parser(stmt("GOTO 10"))
        assert parser.next_token().type == TokenType.KEYWORD
        assert parser.references == []
        assert parser.next_token().type == TokenType.LABEL
        assert len(parser.references) == 1

    def test_stops_at_error(self):
        parser = make_parser("  X\n" + stmt("GOTO 10"))
        tokens = parser.parse()
        assert [t.type for t in tokens] == [TokenType.ERROR]
        assert parser.next_token() is None


class TestLabels:
    def test_definitions_and_references(self):
        parser = make_parser(stmt("GOTO 20", "10") + stmt("GOTO 10", "20") + stmt("END"))
        parser.parse()
        assert sorted(parser.labels) == ["10", "20"]
        assert [t.text for t in parser.references] == ["20", "10"]
        assert parser.undefined_labels() == []

    def test_defining_token_recorded(self):
        parser = make_parser(stmt("GOTO 10", "10") + stmt("END"))
        parser.parse()
        tok = parser.labels.fetch("10")
        assert tok.type == TokenType.LABEL
        assert tok.text == "10    "
        assert tok.line == 1

    def test_undefined_label(self):
        parser = make_parser(stmt("GOTO 99") + stmt("END"))
        parser.parse()
        undefined = parser.undefined_labels()
        assert [t.text for t in undefined] == ["99"]

    def test_leading_zeros_match(self):
        parser = make_parser("00010 GOTO 10\n" + stmt("END"))
        parser.parse()
        assert parser.undefined_labels() == []

    def test_duplicate_definition(self):
        parser = make_parser(stmt("GOTO 10", "10") + stmt("GOTO 10", "10") + stmt("END"))
        parser.parse()
        assert len(parser.duplicates) == 1
        assert parser.duplicates[0].line == 2
        assert parser.labels.fetch("10").line == 1

    def test_zero_in_continuation_column(self):
        parser = make_parser("10   0GOTO 10\n" + stmt("END"))
        parser.parse()
        assert sorted(parser.labels) == ["10"]
        assert parser.undefined_labels() == []


class TestNames:
    def test_first_occurrence_kept(self):
        parser = make_parser(stmt("ALPHA") + stmt("BETA") + stmt("ALPHA") + stmt("END"))
        parser.parse()
        assert sorted(parser.names) == ["ALPHA", "BETA"]
        assert parser.names.fetch("ALPHA").line == 1

    def test_keywords_are_not_names(self):
        parser = make_parser(stmt("GOTO 1", "1") + stmt("END"))
        parser.parse()
        assert len(parser.names) == 0


class TestTreeAppend:
    def test_binary_append_fills_left_then_right(self):
        root = Tree(NodeType.PROGRAM)
        a = Tree(NodeType.STATEMENT)
        b = Tree(NodeType.STATEMENT)
        assert append_tree(root, a) is root
        append_tree(root, b)
        assert root.left is a
        assert root.right is b

    def test_depth_follows_parent(self):
        root = Tree(NodeType.PROGRAM)
        stmt_node = Tree(NodeType.STATEMENT)
        leaf = Tree(NodeType.IDENT, token=Token(TokenType.IDENT, "X", 1, 8))
        append_tree(root, stmt_node)
        append_tree(stmt_node, leaf)
        assert stmt_node.depth == 1
        assert leaf.depth == 2
        assert leaf.token.text == "X"

    def test_third_child_rejected(self):
        root = Tree(NodeType.STATEMENT)
        append_tree(root, Tree(NodeType.KEYWORD))
        append_tree(root, Tree(NodeType.LABEL))
        with pytest.raises(ValueError, match="already has two children"):
            append_tree(root, Tree(NodeType.LABEL))

    def test_goto_append_not_implemented(self):
        goto = Tree(NodeType.GOTO)
        with pytest.raises(NotImplementedError):
            append_tree(goto, Tree(NodeType.LABEL))
        assert goto.left is None
