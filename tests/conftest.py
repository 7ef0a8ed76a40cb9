"""
Shared Test Configuration
=========================

Fixtures used across the test suite.
"""

from pathlib import Path

import pytest

from brainfuck.executor import execute
from brainfuck.ir import lower
from brainfuck.optimizer import optimize
from brainfuck.parser import parse
from brainfuck.ports import BytesInputPort, BytesOutputPort, EofPolicy


HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)


def _run_source(
    source: str,
    data: bytes = b"",
    optimized: bool = True,
    eof_policy: EofPolicy = EofPolicy.UNCHANGED,
) -> bytes:
    instructions = lower(parse(source))
    if optimized:
        instructions = optimize(instructions)
    out = BytesOutputPort()
    execute(instructions, BytesInputPort(data, eof_policy=eof_policy), out)
    return out.getvalue()


@pytest.fixture
def run_source():
    """Run a program through the whole pipeline and return its output bytes."""
    return _run_source


@pytest.fixture(scope="session")
def hello_world() -> str:
    """The classic program printing "Hello World!\\n"."""
    return HELLO_WORLD


@pytest.fixture(scope="session")
def programs_dir() -> Path:
    """Directory holding the sample .bf programs."""
    return Path(__file__).parent / "programs"
