"""
Brainfuck Abstract Syntax Tree (AST) Definitions
================================================

This module defines the structural tree produced by the parser. It mirrors
the source closely: runs of movement or arithmetic commands are already
folded into a single signed amount, but nothing else has been rewritten.

Node Hierarchy
--------------
Program - root node holding the top-level command sequence
Node (one of)
├── Loop   - '[' ... ']', owns its body
├── Shift  - a run of '>' / '<' folded into one signed amount
├── Arith  - a run of '+' / '-' folded into one signed amount
├── Output - '.'
└── Input  - ','

Design Notes
------------
- All nodes are frozen dataclasses; sequences are tuples, so a tree is an
  immutable value once built
- A Loop owns its children; nothing is shared between subtrees
- Each node stores the source location of its first character. Locations
  are excluded from equality so that trees built from differently laid out
  text compare equal when they mean the same thing
- The tree is consumed by lowering (see brainfuck.ir); nothing downstream
  keeps a reference to it
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from brainfuck.errors import SourceLocation


# =============================================================================
# Node Definitions
# =============================================================================

@dataclass(frozen=True)
class Loop:
    """
    A bracketed loop.

    Attributes:
        body: The commands between '[' and ']'
        location: Position of the opening bracket
    """
    body: tuple["Node", ...] = ()
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Shift:
    """
    Pointer movement.

    Attributes:
        amount: Net movement of the run; '>' counts +1 and '<' counts -1
        location: Position of the first character of the run
    """
    amount: int = 0
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Arith:
    """
    Cell arithmetic.

    Attributes:
        amount: Net change of the run; '+' counts +1 and '-' counts -1.
                Not reduced modulo 256 here.
        location: Position of the first character of the run
    """
    amount: int = 0
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Output:
    """Write the current cell ('.')."""
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Input:
    """Read into the current cell (',')."""
    location: Optional[SourceLocation] = field(default=None, compare=False, repr=False)


Node = Union[Loop, Shift, Arith, Output, Input]


@dataclass(frozen=True)
class Program:
    """
    Root node of the tree.

    Attributes:
        body: Top-level command sequence
        filename: Name of the file the program was parsed from
    """
    body: tuple[Node, ...] = ()
    filename: str = field(default="<input>", compare=False)

    def __len__(self) -> int:
        return len(self.body)

    def __iter__(self):
        return iter(self.body)


# =============================================================================
# AST Visitor Base
# =============================================================================

class ASTVisitor:
    """
    Base class for AST visitors.

    Subclasses override visit_* methods for the node types they care about.

    Usage:
        class ShiftCounter(ASTVisitor):
            def __init__(self):
                self.count = 0

            def visit_Shift(self, node):
                self.count += 1

        counter = ShiftCounter()
        counter.visit(program)
    """

    def visit(self, node: Union[Program, Node]) -> Any:
        """Dispatch to visit_<ClassName>, falling back to generic_visit."""
        method_name = f"visit_{node.__class__.__name__}"
        visitor = getattr(self, method_name, self.generic_visit)
        return visitor(node)

    def generic_visit(self, node: Union[Program, Node]) -> None:
        """Visit the children of Program and Loop nodes."""
        for child in getattr(node, "body", ()):
            self.visit(child)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor):
    """
    Pretty printer for AST debugging.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))

    Output for "++[>+<-]":
        Program
          Arith +2
          Loop
            Shift +1
            Arith +1
            Shift -1
            Arith -1
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: Union[Program, Node]) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        # Explicit stack of (node, depth), children pushed in reverse
        stack = [(node, 0)]
        while stack:
            current, self.indent_level = stack.pop()
            self.visit(current)
            children = getattr(current, "body", ())
            stack.extend((child, self.indent_level + 1) for child in reversed(children))
        self.indent_level = 0
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def visit_Program(self, node: Program):
        self._emit("Program")

    def visit_Loop(self, node: Loop):
        self._emit("Loop")

    def visit_Shift(self, node: Shift):
        self._emit(f"Shift {node.amount:+d}")

    def visit_Arith(self, node: Arith):
        self._emit(f"Arith {node.amount:+d}")

    def visit_Output(self, node: Output):
        self._emit("Output")

    def visit_Input(self, node: Input):
        self._emit("Input")
