"""
Brainfuck Interpreter Main Module
=================================

Ties the pipeline together:

    Source → Lexer → Parser → Lowering → Optimizer → Executor

Usage
-----
Command line:
    $ bfi hello.bf

Programmatic:
    >>> from brainfuck import interpret
    >>> interpret("++++++++[>++++++++<-]>+.").output
    b'A'

Configuration
-------------
InterpreterOptions controls whether the optimizer runs and what ','
does at end of input. Options can also be read from the environment:

    BF_OPTIMIZE   "0", "false", "no" or "off" disables the optimizer
    BF_EOF        zero | unchanged | max | error

Error Handling
--------------
Syntax errors are raised by the parser before anything runs. Faults raised
while running (and errors from the ports) end the run and propagate
unchanged.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from brainfuck.ast import Program
from brainfuck.executor import Executor, Tape
from brainfuck.ir import Instruction, lower
from brainfuck.optimizer import OptimizationStats, Optimizer
from brainfuck.parser import parse
from brainfuck.ports import (
    BytesInputPort,
    BytesOutputPort,
    EofPolicy,
    InputPort,
    OutputPort,
)

logger = logging.getLogger(__name__)


_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class InterpreterOptions:
    """
    Interpreter configuration options.

    Attributes:
        optimize: Run the optimizer before executing (default: True)
        eof_policy: What ',' does at end of input when the interpreter
                    creates the input port itself (default: UNCHANGED)
    """
    optimize: bool = True
    eof_policy: EofPolicy = EofPolicy.UNCHANGED

    @classmethod
    def from_env(cls) -> "InterpreterOptions":
        """
        Create options from environment variables.

        Environment variables (all optional):
            BF_OPTIMIZE: Disable the optimizer with 0/false/no/off
            BF_EOF: End-of-input policy name

        Raises:
            ValueError: If BF_EOF names an unknown policy
        """
        options = cls()

        if optimize := os.environ.get("BF_OPTIMIZE"):
            options.optimize = optimize.strip().lower() not in _FALSE_VALUES

        if eof := os.environ.get("BF_EOF"):
            options.eof_policy = EofPolicy.from_name(eof)

        return options


@dataclass
class RunResult:
    """
    Everything a run produced.

    Attributes:
        program: The parsed syntax tree
        instructions: The instruction tree that was executed
        stats: Optimizer statistics (all zero when optimization is off)
        tape: Final tape contents
        output: Bytes written, when the interpreter created the output port
    """
    program: Program
    instructions: tuple[Instruction, ...]
    stats: OptimizationStats = field(default_factory=OptimizationStats)
    tape: Optional[Tape] = None
    output: Optional[bytes] = None


class Interpreter:
    """
    Parses, optimizes and runs Brainfuck programs.

    Example:
        interpreter = Interpreter(InterpreterOptions(optimize=False))
        result = interpreter.run(",.", BytesInputPort(b"x"))

    Attributes:
        options: Interpreter configuration
    """

    def __init__(self, options: Optional[InterpreterOptions] = None):
        self.options = options or InterpreterOptions()

    def compile(self, source: str, filename: str = "<input>") -> RunResult:
        """
        Run every stage except execution.

        Raises:
            BrainfuckSyntaxError: If the brackets do not balance
        """
        program = parse(source, filename)
        optimizer = Optimizer(enabled=self.options.optimize)
        instructions = optimizer.optimize(lower(program))
        return RunResult(program=program, instructions=instructions, stats=optimizer.stats)

    def run(
        self,
        source: str,
        input_port: Optional[InputPort] = None,
        output_port: Optional[OutputPort] = None,
        filename: str = "<input>",
    ) -> RunResult:
        """
        Compile and execute a program.

        Args:
            source: Program text
            input_port: Source for ','; defaults to empty input
            output_port: Sink for '.'; defaults to an in-memory buffer whose
                         contents end up in RunResult.output
            filename: Name used in error messages

        Raises:
            BrainfuckSyntaxError: If the program does not parse
            ExecutionError: If the program faults while running
            PortError: If a port fails
        """
        result = self.compile(source, filename)

        if input_port is None:
            input_port = BytesInputPort(eof_policy=self.options.eof_policy)
        collected = None
        if output_port is None:
            collected = output_port = BytesOutputPort()

        logger.debug(f"Running {filename} (optimize={self.options.optimize})")
        result.tape = Executor(input_port, output_port).run(result.instructions)

        if collected is not None:
            result.output = collected.getvalue()
        return result

    def run_file(
        self,
        path: str | Path,
        input_port: Optional[InputPort] = None,
        output_port: Optional[OutputPort] = None,
    ) -> RunResult:
        """
        Run a program stored in a file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {path}")
        source = path.read_text(encoding="utf-8", errors="replace")
        return self.run(source, input_port, output_port, filename=str(path))


def interpret(
    source: str,
    input_port: Optional[InputPort] = None,
    output_port: Optional[OutputPort] = None,
    options: Optional[InterpreterOptions] = None,
) -> RunResult:
    """
    Parse, optimize and run a program in one call.

    Args:
        source: Program text
        input_port: Source for ','; bytes are also accepted
        output_port: Sink for '.'; when omitted, output is collected into
                     the returned RunResult.output
        options: Interpreter configuration (defaults if None)
    """
    options = options or InterpreterOptions()
    if isinstance(input_port, (bytes, bytearray)):
        input_port = BytesInputPort(input_port, eof_policy=options.eof_policy)
    return Interpreter(options).run(source, input_port, output_port)
