# =============================================================================
# test_lexer.py - Lexer Unit Tests
# =============================================================================
# Tests for the command filter and tokenizer.
#
# Test coverage includes:
#   - Filtering of non-command characters (comments by omission)
#   - Token types for all eight commands
#   - Line and column tracking across newlines
# =============================================================================

import pytest
from brainfuck.lexer import Lexer, TokenType, filter_source, COMMAND_CHARS


def tokenize(source: str) -> list:
    return list(Lexer(source, "<test>").tokenize())


# =============================================================================
# Filtering Tests
# =============================================================================

class TestFilterSource:
    """Test filter_source()."""

    def test_keeps_all_commands(self):
        """All eight command characters survive filtering in order."""
        assert filter_source("[]<>+-.,") == "[]<>+-.,"

    def test_strips_comments(self):
        """Letters, digits and whitespace are removed."""
        assert filter_source("add 2: ++\n print: .") == "++."

    def test_empty_source(self):
        assert filter_source("") == ""

    def test_only_comments(self):
        assert filter_source("hello world 123") == ""

    def test_command_set(self):
        assert COMMAND_CHARS == frozenset("[]<>+-.,")


# =============================================================================
# Tokenizer Tests
# =============================================================================

class TestTokenize:
    """Test Lexer.tokenize()."""

    @pytest.mark.parametrize("char,token_type", [
        (">", TokenType.RIGHT),
        ("<", TokenType.LEFT),
        ("+", TokenType.PLUS),
        ("-", TokenType.MINUS),
        (".", TokenType.OUTPUT),
        (",", TokenType.INPUT),
        ("[", TokenType.LBRACKET),
        ("]", TokenType.RBRACKET),
    ])
    def test_command_token_types(self, char, token_type):
        tokens = tokenize(char)
        assert len(tokens) == 1
        assert tokens[0].type == token_type

    def test_comments_produce_no_tokens(self):
        assert tokenize("this is a comment") == []

    def test_token_count_matches_filter(self):
        source = "x+y-z[a>b<c]d.e,f"
        assert len(tokenize(source)) == len(filter_source(source))

    def test_columns_are_one_indexed(self):
        tokens = tokenize("a+b-")
        assert [(t.line, t.column) for t in tokens] == [(1, 2), (1, 4)]

    def test_line_tracking(self):
        """Newlines advance the line and reset the column."""
        tokens = tokenize("+\n  -\n\n[")
        assert [(t.line, t.column) for t in tokens] == [(1, 1), (2, 3), (4, 1)]

    def test_location_carries_filename(self):
        token = list(Lexer("+", "prog.bf").tokenize())[0]
        assert str(token.location) == "prog.bf:1:1"


class TestGetLine:
    """Test Lexer.get_line() used for error context."""

    def test_existing_line(self):
        lexer = Lexer("first\nsecond [\nthird")
        assert lexer.get_line(2) == "second ["

    def test_out_of_range(self):
        lexer = Lexer("only")
        assert lexer.get_line(0) == ""
        assert lexer.get_line(5) == ""

    def test_other_line_breaks_stay_in_line(self):
        """Only newline starts a new line; form feeds and friends do not."""
        lexer = Lexer("a\x0cb c\nd [")
        (token,) = lexer.tokenize()
        assert token.line == 2
        assert lexer.get_line(1) == "a\x0cb c"
        assert lexer.get_line(2) == "d ["

    def test_crlf_line_endings(self):
        lexer = Lexer("one\r\ntwo [\r\n")
        (token,) = lexer.tokenize()
        assert (token.line, token.column) == (2, 5)
        assert lexer.get_line(2) == "two ["
