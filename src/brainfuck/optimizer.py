"""
Brainfuck Instruction Optimizer
===============================

This module rewrites instruction trees (see brainfuck.ir) into cheaper but
equivalent ones. Both passes are pure: they return a new tree and leave
their input untouched.

Supported Optimizations
-----------------------
1. **Multiply loops**: A loop that walks away from its counter cell, adds
   constants to some neighbours, walks back and decrements the counter by
   one is a multiply-accumulate. It is replaced by one AddMult per target
   cell and a final Zero of the counter:

       [->++>+++<<]   →   p[1] += p[0] * 2
                          p[2] += p[0] * 3
                          p[0] = 0

2. **Move coalescing**: Pointer movement is folded into the offsets of
   the instructions that follow it. The pointer is only physically moved
   right before a loop (whose condition always reads offset 0) and at the
   end of a sequence:

       >>+>-<.   →   p[2] += 1
                     p[3] += -1
                     output p[2]
                     shift +2

Pass Order
----------
Multiply-loop conversion must run first. It needs the raw Shift/AddConst
shape of a loop body, and the loops it removes no longer force a pointer
move in the coalescing pass.

Every loop body is optimized independently of its parent, and a loop that
is not a multiply loop may still contain inner loops that are.

Usage
-----
>>> from brainfuck.parser import parse
>>> from brainfuck.ir import lower
>>> from brainfuck.optimizer import Optimizer
>>> optimizer = Optimizer()
>>> optimized = optimizer.optimize(lower(parse("++[>+<-]")))
>>> optimizer.stats.multiply_loops
1

Passing enabled=False to the constructor makes optimize() return its input
unchanged.
"""

import logging
from dataclasses import dataclass, replace
from typing import Iterable

from brainfuck.ir import (
    AddConst,
    AddMult,
    Input,
    Instruction,
    Loop,
    Output,
    Shift,
    Zero,
    count_instructions,
    rebuild_tree,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Optimization Statistics
# =============================================================================

@dataclass
class OptimizationStats:
    """
    Statistics about optimizations performed.

    Attributes:
        multiply_loops: Loops replaced by AddMult/Zero sequences
        shifts_removed: Shift instructions folded away by coalescing
        instructions_before: Instruction count (all levels) before optimizing
        instructions_after: Instruction count (all levels) after optimizing
    """
    multiply_loops: int = 0
    shifts_removed: int = 0
    instructions_before: int = 0
    instructions_after: int = 0

    @property
    def total_optimizations(self) -> int:
        """Total number of individual rewrites applied."""
        return self.multiply_loops + self.shifts_removed

    def __str__(self) -> str:
        lines = ["Optimization Statistics:"]
        if self.multiply_loops:
            lines.append(f"  Multiply loops converted: {self.multiply_loops}")
        if self.shifts_removed:
            lines.append(f"  Shifts folded into offsets: {self.shifts_removed}")
        lines.append(f"  Total optimizations: {self.total_optimizations}")
        lines.append(
            f"  Instructions: {self.instructions_before} -> {self.instructions_after}"
        )
        return "\n".join(lines)


# =============================================================================
# Multiply-Loop Recognition
# =============================================================================

def _counter_change(body: Iterable[Instruction]) -> int:
    """
    Sum the AddConst amounts that land on the loop's counter cell.

    The running offset follows the Shifts in the body; an AddConst hits the
    counter when running offset plus its own offset is 0.
    """
    running = 0
    total = 0
    for instruction in body:
        if isinstance(instruction, Shift):
            running += instruction.delta
        elif isinstance(instruction, AddConst) and running + instruction.offset == 0:
            total += instruction.amount
    return total


def is_multiply_loop(node: Instruction) -> bool:
    """
    Check whether a node is a loop that can be turned into AddMults.

    True only for a Loop whose body
      1. holds nothing but Shift and AddConst,
      2. moves the pointer a net distance of 0, and
      3. changes the counter cell by exactly -1 modulo 256 per iteration.

    The last check is on the wrapped byte value, so a net change of 255 or
    -257 counts as well. An empty loop changes nothing and never qualifies.
    """
    if not isinstance(node, Loop):
        return False

    body = node.body
    if not all(isinstance(i, (Shift, AddConst)) for i in body):
        return False
    if sum(i.delta for i in body if isinstance(i, Shift)) != 0:
        return False
    return _counter_change(body) % 256 == 255


# =============================================================================
# Optimizer
# =============================================================================

class Optimizer:
    """
    Instruction tree optimizer.

    Attributes:
        enabled: Whether optimization is enabled
        stats: Statistics about the last optimize() call
    """

    def __init__(self, enabled: bool = True):
        self.enabled = enabled
        self.stats = OptimizationStats()

    def optimize(self, instructions: Iterable[Instruction]) -> tuple[Instruction, ...]:
        """
        Run multiply-loop conversion and then move coalescing.

        Running optimize() on its own output gives the same tree back.

        Args:
            instructions: Top-level instruction sequence

        Returns:
            Optimized instruction sequence
        """
        instructions = tuple(instructions)
        if not self.enabled:
            return instructions

        self.stats = OptimizationStats()
        self.stats.instructions_before = count_instructions(instructions)

        result = self.coalesce_moves(self.convert_multiply_loops(instructions))

        self.stats.instructions_after = count_instructions(result)
        logger.debug(str(self.stats))
        return result

    # =========================================================================
    # Multiply-Loop Conversion
    # =========================================================================

    def convert_multiply_loops(
        self, instructions: Iterable[Instruction]
    ) -> tuple[Instruction, ...]:
        """Convert every multiply loop in a sequence, at any depth."""
        return rebuild_tree(instructions, self._convert_sequence)

    def convert_multiply_loop(self, node: Instruction) -> tuple[Instruction, ...]:
        """
        Rewrite one node.

        A multiply loop is replaced by its closed form; any other loop is
        rebuilt with its nested loops converted. Non-loop nodes come back
        unchanged.

        Returns:
            The replacement sequence for `node`
        """
        return self.convert_multiply_loops((node,))

    def _convert_sequence(self, instructions: list) -> tuple[Instruction, ...]:
        # Inner loops are already converted; a loop that still holds only
        # Shift and AddConst is exactly as it was in the input
        result = []
        for instruction in instructions:
            if is_multiply_loop(instruction):
                result.extend(self._expand_multiply_loop(instruction))
            else:
                result.append(instruction)
        return tuple(result)

    def _expand_multiply_loop(self, node: Loop) -> tuple[Instruction, ...]:
        result = []
        running = 0
        for instruction in node.body:
            if isinstance(instruction, Shift):
                result.append(instruction)
                running += instruction.delta
            elif running + instruction.offset != 0:
                # -running is the counter cell as seen from here
                result.append(
                    AddMult(instruction.offset, -running, instruction.amount)
                )
        assert running == 0, f"multiply loop body moves pointer by {running}"
        result.append(Zero(0))

        self.stats.multiply_loops += 1
        return tuple(result)

    # =========================================================================
    # Move Coalescing
    # =========================================================================

    def coalesce_moves(self, instructions: Iterable[Instruction]) -> tuple[Instruction, ...]:
        """
        Fold Shifts into the offsets of the instructions after them.

        Each loop body is coalesced as its own scope, starting from offset 0.
        Pending movement is emitted as a single Shift right before a loop and
        at the end of the sequence, so the pointer is where the unoptimized
        code would have left it at both points.
        """
        return rebuild_tree(instructions, self._coalesce_sequence)

    def _coalesce_sequence(self, instructions: list) -> tuple[Instruction, ...]:
        result = []
        running = 0
        shifts_in = 0
        shifts_out = 0

        for instruction in instructions:
            if isinstance(instruction, Shift):
                running += instruction.delta
                shifts_in += 1
            elif isinstance(instruction, Loop):
                # Body already coalesced in its own scope
                if running:
                    result.append(Shift(running))
                    shifts_out += 1
                    running = 0
                result.append(instruction)
            elif isinstance(instruction, AddMult):
                result.append(AddMult(
                    instruction.offset + running,
                    instruction.source + running,
                    instruction.factor,
                ))
            elif isinstance(instruction, (AddConst, Zero, Output, Input)):
                result.append(replace(instruction, offset=instruction.offset + running))
            else:
                raise TypeError(f"not an instruction: {instruction!r}")

        if running:
            result.append(Shift(running))
            shifts_out += 1

        self.stats.shifts_removed += shifts_in - shifts_out
        return tuple(result)


# =============================================================================
# Convenience Functions
# =============================================================================

def convert_multiply_loops(instructions: Iterable[Instruction]) -> tuple[Instruction, ...]:
    """Replace every multiply loop in the tree by AddMult/Zero instructions."""
    return Optimizer().convert_multiply_loops(instructions)


def convert_multiply_loop(node: Instruction) -> tuple[Instruction, ...]:
    """Rewrite a single node; see Optimizer.convert_multiply_loop."""
    return Optimizer().convert_multiply_loop(node)


def coalesce_moves(instructions: Iterable[Instruction]) -> tuple[Instruction, ...]:
    """Fold pointer movement into instruction offsets at every level."""
    return Optimizer().coalesce_moves(instructions)


def optimize(instructions: Iterable[Instruction]) -> tuple[Instruction, ...]:
    """Run both passes in order and return the optimized tree."""
    return Optimizer().optimize(instructions)


def optimize_instructions(
    instructions: Iterable[Instruction],
    enabled: bool = True,
) -> tuple[tuple[Instruction, ...], OptimizationStats]:
    """
    Optimize and also return the statistics.

    Returns:
        Tuple of (optimized instructions, optimization statistics)
    """
    optimizer = Optimizer(enabled=enabled)
    result = optimizer.optimize(instructions)
    return result, optimizer.stats
