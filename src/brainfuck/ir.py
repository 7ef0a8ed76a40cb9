"""
Brainfuck Intermediate Representation
=====================================

The instruction tree is what the optimizer rewrites and the executor runs.
Unlike the syntax tree, every instruction that touches a cell names it by an
offset relative to the pointer, so a cell can be reached without first
moving the pointer to it.

Instructions
------------
    Loop(body)                  while p[0]: body
    Shift(delta)                p += delta
    AddConst(offset, amount)    p[offset] += amount
    AddMult(offset, src, f)     p[offset] += p[src] * f
    Zero(offset)                p[offset] = 0
    Output(offset)              write p[offset]
    Input(offset)               read into p[offset]

All arithmetic is modulo 256. Offsets are resolved against the pointer in
effect when the instruction is reached, never ahead of time. AddMult and
Zero only appear after optimization; lowering emits offset 0 everywhere.

Trees are immutable: frozen dataclasses with tuple bodies. Passes build a
new tree instead of editing one in place.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator, Union

from brainfuck import ast

logger = logging.getLogger(__name__)


# =============================================================================
# Instruction Definitions
# =============================================================================

@dataclass(frozen=True)
class Loop:
    body: tuple["Instruction", ...] = ()


@dataclass(frozen=True)
class Shift:
    delta: int


@dataclass(frozen=True)
class AddConst:
    offset: int
    amount: int


@dataclass(frozen=True)
class AddMult:
    offset: int
    source: int
    factor: int


@dataclass(frozen=True)
class Zero:
    offset: int


@dataclass(frozen=True)
class Output:
    offset: int = 0


@dataclass(frozen=True)
class Input:
    offset: int = 0


Instruction = Union[Loop, Shift, AddConst, AddMult, Zero, Output, Input]


# =============================================================================
# Lowering
# =============================================================================

def lower_node(node: ast.Node) -> Instruction:
    """Lower a single syntax node; a loop brings its whole body along."""
    if isinstance(node, ast.Loop):
        return Loop(lower_body(node.body))
    return _lower_leaf(node)


def _lower_leaf(node: ast.Node) -> Instruction:
    if isinstance(node, ast.Shift):
        return Shift(node.amount)
    if isinstance(node, ast.Arith):
        return AddConst(0, node.amount)
    if isinstance(node, ast.Output):
        return Output(0)
    if isinstance(node, ast.Input):
        return Input(0)
    raise TypeError(f"not a syntax node: {node!r}")


def _lower_sequence(nodes: list) -> tuple[Instruction, ...]:
    # Nested loops arrive already lowered
    return tuple(n if isinstance(n, Loop) else _lower_leaf(n) for n in nodes)


def lower_body(nodes: Iterable[ast.Node]) -> tuple[Instruction, ...]:
    return rebuild_tree(nodes, _lower_sequence, loop_type=ast.Loop)


def lower(program: Union[ast.Program, Iterable[ast.Node]]) -> tuple[Instruction, ...]:
    """
    Convert a syntax tree into an instruction tree.

    Total over valid trees: every syntax node has exactly one instruction
    counterpart and all offsets are 0.

    Args:
        program: A Program, or any sequence of syntax nodes

    Returns:
        The top-level instruction sequence
    """
    body = program.body if isinstance(program, ast.Program) else program
    instructions = lower_body(body)
    logger.debug(f"Lowered {len(instructions)} top-level instructions")
    return instructions


# =============================================================================
# Tree Utilities
# =============================================================================

def rebuild_tree(
    body: Iterable,
    rewrite: Callable[[list], tuple[Instruction, ...]],
    loop_type: type = Loop,
) -> tuple[Instruction, ...]:
    """
    Rebuild a tree bottom-up, one sequence at a time.

    `rewrite` receives each sequence with its nested loops already rebuilt
    into instruction Loops and returns the replacement sequence. The walk
    keeps its own stack of open sequences, so nesting depth is limited by
    memory rather than by the interpreter's recursion limit.

    Args:
        body: Top-level sequence of the tree to rebuild
        rewrite: Sequence rewriter applied innermost first
        loop_type: Class of the loop nodes in the input tree

    Returns:
        The rewritten top-level sequence
    """
    # Each frame: the unvisited rest of a sequence and its finished children
    frames = [(iter(body), [])]
    while True:
        pending, done = frames[-1]
        for node in pending:
            if isinstance(node, loop_type):
                frames.append((iter(node.body), []))
                break
            done.append(node)
        else:
            result = rewrite(done)
            frames.pop()
            if not frames:
                return result
            frames[-1][1].append(Loop(result))


def iter_instructions(instructions: Iterable[Instruction]) -> Iterator[tuple[Instruction, int]]:
    """Yield (instruction, depth) pairs in source order, loops before their bodies."""
    stack = [(iter(instructions), 0)]
    while stack:
        pending, depth = stack[-1]
        instruction = next(pending, None)
        if instruction is None:
            stack.pop()
            continue
        yield instruction, depth
        if isinstance(instruction, Loop):
            stack.append((iter(instruction.body), depth + 1))


def count_instructions(instructions: Iterable[Instruction]) -> int:
    """Count instructions at every nesting level (loops count themselves)."""
    return sum(1 for _ in iter_instructions(instructions))


def format_instruction(instruction: Instruction) -> str:
    """One-line description of a single instruction (a loop is its header only)."""
    if isinstance(instruction, Shift):
        return f"shift {instruction.delta:+d}"
    if isinstance(instruction, AddConst):
        return f"p[{instruction.offset}] += {instruction.amount}"
    if isinstance(instruction, AddMult):
        return (
            f"p[{instruction.offset}] += "
            f"p[{instruction.source}] * {instruction.factor}"
        )
    if isinstance(instruction, Zero):
        return f"p[{instruction.offset}] = 0"
    if isinstance(instruction, Output):
        return f"output p[{instruction.offset}]"
    if isinstance(instruction, Input):
        return f"input p[{instruction.offset}]"
    if isinstance(instruction, Loop):
        return "while p[0]"
    raise TypeError(f"not an instruction: {instruction!r}")


def format_instructions(instructions: Iterable[Instruction], indent: int = 0) -> str:
    """
    Render an instruction tree as indented text.

    Example for the optimized form of "++[>+<-]":
        p[0] += 2
        p[1] += p[0] * 1
        p[0] = 0

    Loop bodies are indented one level under their "while p[0]" line.
    """
    return "\n".join(
        "  " * (indent + depth) + format_instruction(instruction)
        for instruction, depth in iter_instructions(instructions)
    )
