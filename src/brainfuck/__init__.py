"""
Brainfuck - Optimizing Interpreter
==================================

This package runs programs written in Brainfuck, the eight-command language
that works on a tape of byte cells through a single movable pointer.

Programs go through a short pipeline before they run:

    Source → Lexer → Parser → Lowering → Optimizer → Executor

Main Components
---------------
- **lexer**: keeps the eight command characters, everything else is a comment
- **parser**: recursive descent parser producing the syntax tree (brainfuck.ast)
- **ir**: offset-addressed instruction tree and the lowering pass
- **optimizer**: multiply-loop conversion and move coalescing
- **executor**: the tape, the pointer and the evaluation loop
- **ports**: byte input/output adapters and end-of-input policies

Quick Start
-----------
Run a program and collect its output:
    >>> from brainfuck import interpret
    >>> interpret("++++[>++++<-]>.").output
    b'\\x10'

Drive the stages by hand:
    >>> from brainfuck import parse, lower, optimize, execute
    >>> from brainfuck.ports import BytesInputPort, BytesOutputPort
    >>> out = BytesOutputPort()
    >>> tape = execute(optimize(lower(parse(",."))), BytesInputPort(b"A"), out)
    >>> out.getvalue()
    b'A'

Or use the command-line tool:
    $ bfi hello.bf
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from brainfuck.errors import (
    BrainfuckError,
    BrainfuckSyntaxError,
    UnmatchedBracketError,
    ExecutionError,
    TapeFault,
    NegativeAddressError,
    PortError,
    InputExhaustedError,
    SourceLocation,
)
from brainfuck.lexer import Lexer, Token, TokenType, filter_source
from brainfuck.parser import Parser, parse
from brainfuck.ast import ASTPrinter, Program
from brainfuck.ir import Instruction, lower, format_instructions
from brainfuck.optimizer import (
    Optimizer,
    OptimizationStats,
    is_multiply_loop,
    convert_multiply_loop,
    convert_multiply_loops,
    coalesce_moves,
    optimize,
)
from brainfuck.executor import Executor, Tape, execute
from brainfuck.ports import (
    InputPort,
    OutputPort,
    EofPolicy,
    BytesInputPort,
    BytesOutputPort,
    StreamInputPort,
    StreamOutputPort,
)
from brainfuck.interpreter import (
    Interpreter,
    InterpreterOptions,
    RunResult,
    interpret,
)

__all__ = [
    # Version
    "__version__",
    # Errors
    "BrainfuckError",
    "BrainfuckSyntaxError",
    "UnmatchedBracketError",
    "ExecutionError",
    "TapeFault",
    "NegativeAddressError",
    "PortError",
    "InputExhaustedError",
    "SourceLocation",
    # Front end
    "Lexer",
    "Token",
    "TokenType",
    "filter_source",
    "Parser",
    "parse",
    "ASTPrinter",
    "Program",
    # Instruction tree
    "Instruction",
    "lower",
    "format_instructions",
    # Optimizer
    "Optimizer",
    "OptimizationStats",
    "is_multiply_loop",
    "convert_multiply_loop",
    "convert_multiply_loops",
    "coalesce_moves",
    "optimize",
    # Execution
    "Executor",
    "Tape",
    "execute",
    # Ports
    "InputPort",
    "OutputPort",
    "EofPolicy",
    "BytesInputPort",
    "BytesOutputPort",
    "StreamInputPort",
    "StreamOutputPort",
    # Interpreter
    "Interpreter",
    "InterpreterOptions",
    "RunResult",
    "interpret",
]
