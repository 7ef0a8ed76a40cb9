"""
Brainfuck Error Hierarchy
=========================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from BrainfuckError, allowing callers to catch every
interpreter-related error with a single except clause if desired.

Exception Hierarchy
-------------------
BrainfuckError (base)
├── BrainfuckSyntaxError - malformed program text
│   └── UnmatchedBracketError - '[' without ']' or ']' without '['
├── ExecutionError - the program aborted while running
│   └── TapeFault - the program addressed a cell that does not exist
│       └── NegativeAddressError - address left of cell 0
└── PortError - failures reported by input/output ports
    └── InputExhaustedError - ',' executed with no input left (strict EOF)

Syntax errors are raised before any instruction runs, so no partial tree is
ever returned. Execution errors abort the current run only; the executor
that raised them keeps its tape so callers can inspect it afterwards.

Error messages follow the same format as other compiler tools:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BrainfuckError(Exception):
    """
    Base exception for all errors raised by this package.

        try:
            interpret(source)
        except BrainfuckError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in program text.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Syntax Errors
# =============================================================================

class BrainfuckSyntaxError(BrainfuckError):
    """
    Syntax error in program text.

    The only syntax the language has is bracket nesting, so in practice
    this is raised for unbalanced loops. Every other character is either a
    command or a comment.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The source text of the offending line (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.bf:3:9: error: unmatched '['
                +++++[>++
                     ^
            hint: add a closing ']' to end the loop
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class UnmatchedBracketError(BrainfuckSyntaxError):
    """
    A loop bracket without its partner.

    Raised for a '[' still open at end of input, or for a ']' that closes
    nothing.

    Attributes:
        bracket: The offending bracket character
    """

    def __init__(
        self,
        bracket: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.bracket = bracket
        if bracket == "[":
            hint = "add a closing ']' to end the loop"
        else:
            hint = "remove the ']' or add a matching '[' before it"
        super().__init__(
            f"unmatched '{bracket}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Execution Errors
# =============================================================================

class ExecutionError(BrainfuckError):
    """
    Base exception for errors that abort a running program.

    The language has no recoverable runtime exceptions: anything raised
    while executing ends the run.
    """
    pass


class TapeFault(ExecutionError):
    """
    The program addressed a cell that cannot exist.

    Attributes:
        address: The absolute address the program tried to reach
        pointer: The pointer value when the fault happened
        offset: The relative offset that was being resolved
    """

    def __init__(self, message: str, address: int, pointer: int, offset: int):
        self.address = address
        self.pointer = pointer
        self.offset = offset
        super().__init__(message)


class NegativeAddressError(TapeFault):
    """
    Address resolution produced an index left of cell 0.

    The tape is unbounded only to the right. Moving or reaching left of the
    origin is undefined by the language and treated as fatal rather than
    clamped or wrapped.
    """

    def __init__(self, address: int, pointer: int, offset: int):
        super().__init__(
            f"tried to access cell {address} left of cell 0 "
            f"(pointer {pointer}, offset {offset:+d})",
            address=address,
            pointer=pointer,
            offset=offset,
        )


# =============================================================================
# Port Errors
# =============================================================================

class PortError(BrainfuckError):
    """
    Base exception for failures reported by input or output ports.

    The executor never raises these itself; it lets them propagate from the
    port that raised them.
    """
    pass


class InputExhaustedError(PortError):
    """
    ',' was executed after the input stream ended.

    Only raised by ports configured with the strict end-of-input policy.
    """

    def __init__(self, bytes_read: int = 0):
        self.bytes_read = bytes_read
        super().__init__(f"input exhausted after {bytes_read} byte(s)")
