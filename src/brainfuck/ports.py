"""
Input and Output Ports
======================

The executor does no I/O of its own. It reads bytes from an input port and
writes bytes to an output port, and anything beyond single bytes (files,
terminals, buffering, end-of-input handling) is the port's business.

Port Protocols
--------------
InputPort.read_byte() -> int | None
    Return the next byte (0-255). None tells the executor to leave the
    target cell unchanged, which is how "end of input" is usually spelled.

OutputPort.write_byte(value) -> None
    Write one byte (0-255).

End-of-Input Policy
-------------------
Programs disagree on what ',' should do once input runs out, so the input
adapters below take an EofPolicy:

    ZERO        store 0
    UNCHANGED   leave the cell as it is (default)
    MAX         store 255 (the byte form of -1)
    ERROR       raise InputExhaustedError

Adapters
--------
- BytesInputPort / BytesOutputPort: in-memory, used by tests and interpret()
- StreamInputPort / StreamOutputPort: wrap binary file objects such as
  sys.stdin.buffer and sys.stdout.buffer
"""

from enum import Enum
from typing import BinaryIO, Optional, Protocol, runtime_checkable

from brainfuck.errors import InputExhaustedError


# =============================================================================
# Protocols
# =============================================================================

@runtime_checkable
class InputPort(Protocol):
    """Anything the executor can read single bytes from."""

    def read_byte(self) -> Optional[int]:
        ...


@runtime_checkable
class OutputPort(Protocol):
    """Anything the executor can write single bytes to."""

    def write_byte(self, value: int) -> None:
        ...


class EofPolicy(Enum):
    """What an input port does when ',' runs after the end of input."""
    ZERO = "zero"
    UNCHANGED = "unchanged"
    MAX = "max"
    ERROR = "error"

    @classmethod
    def from_name(cls, name: str) -> "EofPolicy":
        """
        Look up a policy by its (case-insensitive) name.

        Raises:
            ValueError: If the name is not a known policy
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValueError(f"unknown EOF policy '{name}' (expected one of: {valid})") from None


# =============================================================================
# Input Adapters
# =============================================================================

class _PolicyInputPort:
    """Shared end-of-input handling for the input adapters."""

    def __init__(self, eof_policy: EofPolicy = EofPolicy.UNCHANGED):
        self.eof_policy = eof_policy
        self.bytes_read = 0

    def _end_of_input(self) -> Optional[int]:
        if self.eof_policy == EofPolicy.ZERO:
            return 0
        if self.eof_policy == EofPolicy.MAX:
            return 0xFF
        if self.eof_policy == EofPolicy.ERROR:
            raise InputExhaustedError(self.bytes_read)
        return None


class BytesInputPort(_PolicyInputPort):
    """
    Input port over an in-memory byte string.

    Example:
        >>> port = BytesInputPort(b"A")
        >>> port.read_byte(), port.read_byte()
        (65, None)
    """

    def __init__(self, data: bytes = b"", eof_policy: EofPolicy = EofPolicy.UNCHANGED):
        super().__init__(eof_policy)
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        """Number of bytes not yet read."""
        return len(self._data) - self._pos

    def read_byte(self) -> Optional[int]:
        if self._pos >= len(self._data):
            return self._end_of_input()
        value = self._data[self._pos]
        self._pos += 1
        self.bytes_read += 1
        return value


class StreamInputPort(_PolicyInputPort):
    """
    Input port over a binary stream (e.g. sys.stdin.buffer).

    Reads block until a byte is available or the stream reports end of
    file. OSErrors from the stream propagate to the caller.
    """

    def __init__(self, stream: BinaryIO, eof_policy: EofPolicy = EofPolicy.UNCHANGED):
        super().__init__(eof_policy)
        self.stream = stream

    def read_byte(self) -> Optional[int]:
        data = self.stream.read(1)
        if not data:
            return self._end_of_input()
        self.bytes_read += 1
        return data[0]


# =============================================================================
# Output Adapters
# =============================================================================

class BytesOutputPort:
    """
    Output port that collects bytes in memory.

    Example:
        >>> port = BytesOutputPort()
        >>> port.write_byte(72); port.write_byte(105)
        >>> port.getvalue()
        b'Hi'
    """

    def __init__(self):
        self._buffer = bytearray()

    def write_byte(self, value: int) -> None:
        self._buffer.append(value & 0xFF)

    def getvalue(self) -> bytes:
        """Return everything written so far."""
        return bytes(self._buffer)

    def __len__(self) -> int:
        return len(self._buffer)


class StreamOutputPort:
    """
    Output port over a binary stream (e.g. sys.stdout.buffer).

    Attributes:
        stream: The underlying binary stream
        autoflush: Flush after every byte; useful for interactive terminals
    """

    def __init__(self, stream: BinaryIO, autoflush: bool = False):
        self.stream = stream
        self.autoflush = autoflush

    def write_byte(self, value: int) -> None:
        self.stream.write(bytes((value & 0xFF,)))
        if self.autoflush:
            self.stream.flush()

    def flush(self) -> None:
        self.stream.flush()
