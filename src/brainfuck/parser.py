"""
Brainfuck Parser
================

This module turns the token stream from the lexer into the structural tree
defined in brainfuck.ast.

Grammar (EBNF)
--------------
program  ::= command*
command  ::= loop | shift | arith | '.' | ','
loop     ::= '[' command* ']'
shift    ::= ('>' | '<')+
arith    ::= ('+' | '-')+

A shift or arith rule always consumes the longest possible run, so "+-+"
becomes a single Arith(+1) and "><<" a single Shift(-1). Folding a run is
the same as producing one node per character and summing neighbours
afterwards; a run that cancels out still produces a node (with amount 0)
so the fold never changes how many commands a later pass sees between
loops.

Example Usage
-------------
>>> from brainfuck.parser import parse
>>> program = parse("++[>+<-]")
>>> program.body[0]
Arith(amount=2)
"""

import logging
from typing import Optional

from brainfuck.ast import Arith, Input, Loop, Node, Output, Program, Shift
from brainfuck.errors import UnmatchedBracketError
from brainfuck.lexer import Lexer, Token, TokenType

logger = logging.getLogger(__name__)


# Direction each run character contributes to its fold
_SHIFT_STEP = {TokenType.RIGHT: 1, TokenType.LEFT: -1}
_ARITH_STEP = {TokenType.PLUS: 1, TokenType.MINUS: -1}


class Parser:
    """
    Parser for Brainfuck.

    Usage:
        lexer = Lexer(source, "hello.bf")
        parser = Parser(list(lexer.tokenize()), lexer)
        program = parser.parse()

    Attributes:
        tokens: Command tokens to parse
        filename: Source filename for the resulting Program
    """

    def __init__(self, tokens: list[Token], lexer: Optional[Lexer] = None):
        self.tokens = tokens
        self._lexer = lexer
        self.filename = lexer.filename if lexer else "<input>"
        self._pos = 0

    # =========================================================================
    # Token Access
    # =========================================================================

    def _peek(self) -> Optional[Token]:
        if self._pos < len(self.tokens):
            return self.tokens[self._pos]
        return None

    def _advance(self) -> Token:
        token = self.tokens[self._pos]
        self._pos += 1
        return token

    def _unmatched(self, token: Token) -> UnmatchedBracketError:
        source_line = self._lexer.get_line(token.line) if self._lexer else None
        return UnmatchedBracketError(
            token.type.value,
            location=token.location,
            source_line=source_line,
        )

    # =========================================================================
    # Grammar Rules
    # =========================================================================

    def parse(self) -> Program:
        """
        Parse the whole token stream.

        Loops are assembled with a stack of open bodies: '[' pushes the
        enclosing body and starts a new one, ']' closes the current body
        into a Loop and appends it to the enclosing one. Nesting depth is
        limited only by memory.

        Returns:
            Program root node

        Raises:
            UnmatchedBracketError: If the brackets do not balance
        """
        self._pos = 0
        nodes: list[Node] = []
        open_loops: list[tuple[Token, list[Node]]] = []

        while True:
            token = self._peek()
            if token is None:
                break

            if token.type == TokenType.LBRACKET:
                self._advance()
                open_loops.append((token, nodes))
                nodes = []
            elif token.type == TokenType.RBRACKET:
                if not open_loops:
                    raise self._unmatched(token)
                self._advance()
                opening, enclosing = open_loops.pop()
                enclosing.append(Loop(body=tuple(nodes), location=opening.location))
                nodes = enclosing
            else:
                nodes.append(self._parse_command())

        if open_loops:
            # The innermost loop still open is the one missing its ']'
            raise self._unmatched(open_loops[-1][0])

        return Program(body=tuple(nodes), filename=self.filename)

    def _parse_command(self) -> Node:
        """Parse one non-bracket command, folding shift and arith runs."""
        token = self._peek()

        if token.type in _SHIFT_STEP:
            return Shift(self._fold_run(_SHIFT_STEP), location=token.location)
        if token.type in _ARITH_STEP:
            return Arith(self._fold_run(_ARITH_STEP), location=token.location)

        self._advance()
        if token.type == TokenType.OUTPUT:
            return Output(location=token.location)
        return Input(location=token.location)

    def _fold_run(self, steps: dict[TokenType, int]) -> int:
        """Consume a maximal run of tokens in `steps` and return their sum."""
        amount = 0
        while True:
            token = self._peek()
            if token is None or token.type not in steps:
                return amount
            amount += steps[token.type]
            self._advance()


def parse(source: str, filename: str = "<input>") -> Program:
    """
    Parse program text into a Program tree.

    Non-command characters are ignored.

    Raises:
        UnmatchedBracketError: If the brackets do not balance
    """
    lexer = Lexer(source, filename)
    tokens = list(lexer.tokenize())
    program = Parser(tokens, lexer).parse()
    logger.debug(f"Parsed {filename}: {len(tokens)} commands, {len(program)} top-level nodes")
    return program
