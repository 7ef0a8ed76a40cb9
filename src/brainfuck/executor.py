"""
Brainfuck Execution Engine
==========================

Runs an instruction tree (see brainfuck.ir) against a tape of byte cells.

Tape Model
----------
    - Starts as a single zero cell at address 0
    - Grows to the right with zero cells whenever an address at or beyond
      its end is resolved, and never shrinks
    - Has no cells left of address 0: resolving a negative address raises
      NegativeAddressError and ends the run

Cell arithmetic wraps modulo 256 in both directions, so optimized and
unoptimized trees compute the same values.

Each run owns a fresh tape and pointer; nothing is shared between runs.
Evaluation is strictly sequential. The only places a run can block are the
input and output ports.

Example usage:
    >>> from brainfuck import parse, lower, optimize
    >>> from brainfuck.ports import BytesInputPort, BytesOutputPort
    >>> out = BytesOutputPort()
    >>> tape = execute(optimize(lower(parse("++++[>++++<-]>."))), BytesInputPort(), out)
    >>> out.getvalue()
    b'\\x10'
"""

import logging
from typing import Iterable

from brainfuck.errors import NegativeAddressError
from brainfuck.ir import (
    AddConst,
    AddMult,
    Input,
    Instruction,
    Loop,
    Output,
    Shift,
    Zero,
)
from brainfuck.ports import InputPort, OutputPort

logger = logging.getLogger(__name__)


# =============================================================================
# Tape
# =============================================================================

class Tape:
    """
    Growable array of byte cells with a fixed origin at address 0.

    Attributes:
        cells: The backing bytearray (length is the current tape size)
    """

    def __init__(self):
        self.cells = bytearray(1)

    def __len__(self) -> int:
        return len(self.cells)

    def ensure(self, address: int) -> None:
        """Grow the tape with zero cells until `address` exists."""
        if address >= len(self.cells):
            self.cells.extend(bytes(address + 1 - len(self.cells)))

    def read(self, address: int) -> int:
        return self.cells[address]

    def write(self, address: int, value: int) -> None:
        self.cells[address] = value & 0xFF

    @property
    def highest_address(self) -> int:
        """The highest address that has ever been resolved."""
        return len(self.cells) - 1

    def dump(self, start: int = 0, length: int = 16) -> str:
        """Hex view of part of the tape, for diagnostics."""
        window = self.cells[start:start + length]
        return " ".join(f"{b:02X}" for b in window)


# =============================================================================
# Executor
# =============================================================================

class Executor:
    """
    Interprets instruction trees.

    Example:
        executor = Executor(BytesInputPort(b"A"), BytesOutputPort())
        executor.run(instructions)
        print(executor.tape.dump())

    Attributes:
        input_port: Where ',' reads from
        output_port: Where '.' writes to
        tape: The cells; kept after a fault so callers can inspect them
        pointer: Current tape index
        instructions_executed: Number of instructions evaluated so far
    """

    def __init__(self, input_port: InputPort, output_port: OutputPort):
        self.input_port = input_port
        self.output_port = output_port
        self.tape = Tape()
        self.pointer = 0
        self.instructions_executed = 0

    def resolve(self, offset: int) -> int:
        """
        Turn a pointer-relative offset into an absolute tape address.

        The tape is grown as needed so the returned address always exists.

        Raises:
            NegativeAddressError: If pointer + offset is negative
        """
        address = self.pointer + offset
        if address < 0:
            raise NegativeAddressError(address, self.pointer, offset)
        self.tape.ensure(address)
        return address

    def run(self, instructions: Iterable[Instruction]) -> Tape:
        """
        Execute an instruction sequence from the start of a fresh tape.

        Returns:
            The tape after the program finishes

        Raises:
            NegativeAddressError: If the program reaches left of cell 0
        """
        self.tape = Tape()
        self.pointer = 0
        self.instructions_executed = 0
        try:
            self._run_body(tuple(instructions))
        except NegativeAddressError as e:
            logger.debug(
                f"Run aborted after {self.instructions_executed} instructions: {e}; "
                f"tape[0:16] = {self.tape.dump()}"
            )
            raise
        logger.debug(
            f"Run finished: {self.instructions_executed} instructions, "
            f"{len(self.tape)} cells, pointer at {self.pointer}"
        )
        return self.tape

    def _run_body(self, body: tuple[Instruction, ...]) -> None:
        """
        Run a sequence, entering loops without recursing.

        Each frame is [loop body, index of the next instruction]. Reaching
        the end of a loop body re-tests the cell under the pointer and
        either restarts the body or returns to the enclosing frame.
        """
        frames = [[body, 0]]
        while frames:
            frame = frames[-1]
            sequence, index = frame
            if index < len(sequence):
                instruction = sequence[index]
                frame[1] = index + 1
                if isinstance(instruction, Loop):
                    self.instructions_executed += 1
                    if self.tape.cells[self.resolve(0)]:
                        frames.append([instruction.body, 0])
                else:
                    self.step(instruction)
            elif len(frames) > 1 and self.tape.cells[self.resolve(0)]:
                frame[1] = 0
            else:
                frames.pop()

    def step(self, instruction: Instruction) -> None:
        """Evaluate one instruction (a loop runs to completion)."""
        if isinstance(instruction, Loop):
            self._run_body((instruction,))
            return

        self.instructions_executed += 1
        cells = self.tape.cells

        if isinstance(instruction, Shift):
            self.pointer = self.resolve(instruction.delta)

        elif isinstance(instruction, AddConst):
            address = self.resolve(instruction.offset)
            cells[address] = (cells[address] + instruction.amount) & 0xFF

        elif isinstance(instruction, AddMult):
            value = cells[self.resolve(instruction.source)]
            # A zero counter means the replaced loop never ran
            if value:
                address = self.resolve(instruction.offset)
                cells[address] = (cells[address] + value * instruction.factor) & 0xFF

        elif isinstance(instruction, Zero):
            cells[self.resolve(instruction.offset)] = 0

        elif isinstance(instruction, Output):
            self.output_port.write_byte(cells[self.resolve(instruction.offset)])

        elif isinstance(instruction, Input):
            address = self.resolve(instruction.offset)
            value = self.input_port.read_byte()
            if value is not None:
                cells[address] = value & 0xFF

        else:
            raise TypeError(f"not an instruction: {instruction!r}")


def execute(
    instructions: Iterable[Instruction],
    input_port: InputPort,
    output_port: OutputPort,
) -> Tape:
    """
    Run an instruction tree on a fresh tape.

    Args:
        instructions: Instruction tree, optimized or not
        input_port: Source of bytes for ','
        output_port: Sink for bytes from '.'

    Returns:
        The final tape

    Raises:
        NegativeAddressError: If the program reaches left of cell 0
        PortError: Propagated unchanged from the ports
    """
    return Executor(input_port, output_port).run(instructions)
