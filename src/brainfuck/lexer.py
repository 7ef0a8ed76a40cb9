"""
Brainfuck Lexer
===============

The language has exactly eight commands. Every other character in the
program text is a comment, so lexing amounts to filtering: the lexer walks
the source, drops anything that is not a command, and yields one token per
command character with its line and column for error reporting.

Command Characters
------------------
    >   move the pointer right          <   move the pointer left
    +   increment the current cell      -   decrement the current cell
    .   write the current cell          ,   read into the current cell
    [   start a loop                    ]   end a loop

Usage
-----
>>> from brainfuck.lexer import Lexer, filter_source
>>> filter_source("add two: ++ done.")
'++.'
>>> [t.type for t in Lexer("+[-]").tokenize()][:2]
[<TokenType.PLUS: '+'>, <TokenType.LBRACKET: '['>]
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from brainfuck.errors import SourceLocation


# =============================================================================
# Token Types
# =============================================================================

class TokenType(Enum):
    """The eight command tokens, valued by their source character."""
    RIGHT = ">"
    LEFT = "<"
    PLUS = "+"
    MINUS = "-"
    OUTPUT = "."
    INPUT = ","
    LBRACKET = "["
    RBRACKET = "]"


COMMAND_CHARS = frozenset(t.value for t in TokenType)

_CHAR_TO_TYPE = {t.value: t for t in TokenType}


@dataclass(frozen=True)
class Token:
    """
    A single command character with its position in the source.

    Attributes:
        type: Which command this is
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        filename: Source filename for error messages
    """
    type: TokenType
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        return f"Token({self.type.value!r} @ {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Get source location for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)


# =============================================================================
# Filtering
# =============================================================================

def filter_source(source: str) -> str:
    """Strip every character that is not one of the eight commands."""
    return "".join(c for c in source if c in COMMAND_CHARS)


# =============================================================================
# Lexer
# =============================================================================

class Lexer:
    """
    Tokenizes program text into command tokens.

    Usage:
        lexer = Lexer(source_text, filename)
        tokens = list(lexer.tokenize())

    Attributes:
        source: The program text being tokenized
        filename: Name of the source file (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename
        # Only "\n" ends a line, matching the line numbers tokenize() assigns
        self._lines = source.split("\n")

    def tokenize(self) -> Iterator[Token]:
        """
        Generate command tokens from the source, skipping comments.

        Yields:
            Token objects in source order
        """
        line = 1
        column = 1
        for char in self.source:
            token_type = _CHAR_TO_TYPE.get(char)
            if token_type is not None:
                yield Token(token_type, line, column, self.filename)
            if char == "\n":
                line += 1
                column = 1
            else:
                column += 1

    def get_line(self, line: int) -> str:
        """Return the text of a 1-indexed source line, or "" if out of range."""
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1].rstrip("\r")
        return ""
