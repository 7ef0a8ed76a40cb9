# =============================================================================
# test_executor.py - Execution Engine Tests
# =============================================================================
# Tests for the tape, address resolution and instruction evaluation.
#
# Test coverage includes:
#   - Tape growth and the "length = highest address + 1" rule
#   - Negative address faults
#   - Modulo-256 arithmetic for every instruction
#   - AddMult read-before-write and zero-counter behaviour
#   - End-to-end scenarios through parse/lower/optimize/execute
#   - Loops nested deeper than the recursion limit
# =============================================================================

import pytest
from brainfuck.errors import ExecutionError, NegativeAddressError, TapeFault
from brainfuck.executor import Executor, Tape, execute
from brainfuck.ir import AddConst, AddMult, Input, Loop, Output, Shift, Zero, lower
from brainfuck.optimizer import optimize
from brainfuck.parser import parse
from brainfuck.ports import BytesInputPort, BytesOutputPort


def run(instructions, data: bytes = b""):
    """Execute instructions and return (tape, output bytes)."""
    out = BytesOutputPort()
    tape = execute(instructions, BytesInputPort(data), out)
    return tape, out.getvalue()


def tape_for(source: str, optimized: bool) -> Tape:
    instructions = lower(parse(source))
    if optimized:
        instructions = optimize(instructions)
    tape, _ = run(instructions)
    return tape


# =============================================================================
# Tape Tests
# =============================================================================

class TestTape:
    """Test the Tape class."""

    def test_starts_with_one_zero_cell(self):
        tape = Tape()
        assert len(tape) == 1
        assert tape.read(0) == 0

    def test_ensure_grows_with_zeros(self):
        tape = Tape()
        tape.ensure(4)
        assert len(tape) == 5
        assert bytes(tape.cells) == b"\x00" * 5

    def test_ensure_never_shrinks(self):
        tape = Tape()
        tape.ensure(9)
        tape.ensure(2)
        assert len(tape) == 10

    def test_write_wraps(self):
        tape = Tape()
        tape.write(0, 257)
        assert tape.read(0) == 1

    def test_dump(self):
        tape = Tape()
        tape.ensure(2)
        tape.write(1, 0xAB)
        assert tape.dump() == "00 AB 00"


# =============================================================================
# Address Resolution Tests
# =============================================================================

class TestResolve:
    """Test Executor.resolve()."""

    def test_resolve_grows_tape(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        assert executor.resolve(7) == 7
        assert len(executor.tape) == 8

    def test_negative_address_faults(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        with pytest.raises(NegativeAddressError) as exc_info:
            executor.resolve(-1)
        error = exc_info.value
        assert error.address == -1
        assert error.pointer == 0
        assert error.offset == -1

    def test_fault_hierarchy(self):
        assert issubclass(NegativeAddressError, TapeFault)
        assert issubclass(TapeFault, ExecutionError)

    def test_shift_left_of_origin(self):
        with pytest.raises(NegativeAddressError):
            run((Shift(-1),))

    def test_offset_left_of_origin(self):
        with pytest.raises(NegativeAddressError):
            run((Shift(2), AddConst(-3, 1)))

    def test_tape_kept_after_fault(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        with pytest.raises(NegativeAddressError):
            executor.run((AddConst(0, 9), Shift(3), Shift(-5)))
        assert executor.tape.read(0) == 9
        assert executor.pointer == 3

    def test_output_before_fault_is_kept(self):
        out = BytesOutputPort()
        with pytest.raises(NegativeAddressError):
            execute(lower(parse("+.<.")), BytesInputPort(), out)
        assert out.getvalue() == b"\x01"


# =============================================================================
# Tape Growth Property
# =============================================================================

class TestTapeGrowth:
    """Tape length is one more than the highest address touched."""

    @pytest.mark.parametrize("source,highest", [
        ("", 0),
        (">>>>+", 4),
        (">>>>>>>>+<<<<<<<<+", 8),
        ("++[>>>+<<<-]", 3),
        ("+[>>+<<-]>.", 2),
    ])
    @pytest.mark.parametrize("optimized", [False, True])
    def test_highest_address(self, source, highest, optimized):
        tape = tape_for(source, optimized)
        assert tape.highest_address == highest
        assert len(tape) == highest + 1

    def test_highest_address_of_fresh_tape(self):
        assert Tape().highest_address == 0

    def test_large_offset(self):
        tape, _ = run((AddConst(10_000, 1),))
        assert tape.highest_address == 10_000
        assert len(tape) == 10_001
        assert tape.read(10_000) == 1


# =============================================================================
# Instruction Semantics Tests
# =============================================================================

class TestInstructions:
    """Test each instruction on hand-built trees."""

    def test_addconst_wraps_up(self):
        tape, _ = run((AddConst(0, 300),))
        assert tape.read(0) == 44

    def test_addconst_wraps_down(self):
        tape, _ = run((AddConst(0, -1),))
        assert tape.read(0) == 255

    def test_addconst_at_offset(self):
        tape, _ = run((AddConst(3, 2),))
        assert tape.read(3) == 2
        assert tape.read(0) == 0

    def test_addmult(self):
        tape, _ = run((AddConst(0, 3), AddMult(1, 0, 4)))
        assert tape.read(1) == 12

    def test_addmult_wraps(self):
        tape, _ = run((AddConst(0, 100), AddMult(1, 0, 3)))
        assert tape.read(1) == 300 % 256

    def test_addmult_negative_factor(self):
        tape, _ = run((AddConst(0, 3), AddConst(1, 10), AddMult(1, 0, -2)))
        assert tape.read(1) == 4

    def test_addmult_same_cell_reads_source_first(self):
        tape, _ = run((AddConst(0, 3), AddMult(0, 0, 2)))
        assert tape.read(0) == 9

    def test_addmult_zero_source_leaves_destination_alone(self):
        """A zero counter means the loop never ran; the target is not touched."""
        tape, _ = run((AddMult(5, 0, 3),))
        assert len(tape) == 1

    def test_zero(self):
        tape, _ = run((AddConst(2, 77), Zero(2)))
        assert tape.read(2) == 0

    def test_output(self):
        _, output = run((AddConst(1, 65), Output(1)))
        assert output == b"A"

    def test_input(self):
        tape, _ = run((Input(2),), b"z")
        assert tape.read(2) == ord("z")

    def test_input_at_eof_leaves_cell(self):
        tape, _ = run((AddConst(0, 5), Input(0)))
        assert tape.read(0) == 5

    def test_shift_moves_pointer(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        executor.run((Shift(4), Shift(-1)))
        assert executor.pointer == 3

    def test_loop_runs_until_zero(self):
        tape, output = run((AddConst(0, 3), Loop((Output(0), AddConst(0, -1)))))
        assert output == b"\x03\x02\x01"
        assert tape.read(0) == 0

    def test_loop_skipped_on_zero(self):
        _, output = run((Loop((Output(0),)),))
        assert output == b""

    def test_loop_condition_follows_pointer(self):
        """The condition reads the cell under the pointer after each pass."""
        instructions = (
            AddConst(0, 1), AddConst(1, 1), AddConst(2, 1),
            Loop((Shift(1),)),
        )
        executor = Executor(BytesInputPort(), BytesOutputPort())
        executor.run(instructions)
        assert executor.pointer == 3

    def test_instruction_count(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        executor.run((AddConst(0, 2), Loop((AddConst(0, -1),))))
        # AddConst, Loop, and two passes of the body
        assert executor.instructions_executed == 4

    def test_rejects_unknown_instruction(self):
        with pytest.raises(TypeError):
            run(("+",))

    def test_fresh_tape_per_run(self):
        executor = Executor(BytesInputPort(), BytesOutputPort())
        executor.run((AddConst(0, 1), Shift(2)))
        tape = executor.run(())
        assert len(tape) == 1
        assert executor.pointer == 0


# =============================================================================
# End-to-End Scenarios
# =============================================================================

class TestScenarios:
    """Complete programs through the whole pipeline."""

    @pytest.mark.parametrize("optimized", [False, True])
    def test_four_times_four(self, optimized, run_source):
        assert run_source("++++[>++++<-]>.", optimized=optimized) == bytes([16])

    @pytest.mark.parametrize("optimized", [False, True])
    def test_passthrough(self, optimized, run_source):
        assert run_source(",.", bytes([65]), optimized=optimized) == bytes([65])

    @pytest.mark.parametrize("optimized", [False, True])
    def test_wraparound_arithmetic(self, optimized, run_source):
        """5*8+7 = 47 ('/'), then 47-3 = 44 (',')."""
        output = run_source("+++++[>++++++++<-]>+++++++.---.", optimized=optimized)
        assert output == b"/,"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_underflow(self, optimized, run_source):
        assert run_source("-.", optimized=optimized) == b"\xff"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_overflow(self, optimized, run_source):
        assert run_source("-++.", optimized=optimized) == b"\x01"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_hello_world(self, optimized, run_source, hello_world):
        assert run_source(hello_world, optimized=optimized) == b"Hello World!\n"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_leftward_copy_at_origin_never_runs(self, optimized, run_source):
        """A skipped loop reaching left of cell 0 is not a fault."""
        assert run_source("[<+>-].", optimized=optimized) == b"\x00"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_leftward_copy_faults_when_run(self, optimized, run_source):
        with pytest.raises(NegativeAddressError):
            run_source("+[<+>-]", optimized=optimized)


# =============================================================================
# Deep Nesting
# =============================================================================

class TestDeepNesting:
    """Loops nested past the recursion limit run to completion."""

    DEPTH = 1000

    @pytest.mark.parametrize("optimized", [False, True])
    def test_deeply_nested_loops(self, optimized, run_source):
        source = "+" + "[" * self.DEPTH + "-" + "]" * self.DEPTH + "."
        assert run_source(source, optimized=optimized) == b"\x00"

    @pytest.mark.parametrize("optimized", [False, True])
    def test_multiply_loop_at_the_bottom(self, optimized, run_source):
        source = "+++" + "[" * self.DEPTH + ">+<-" + "]" * self.DEPTH + ">."
        assert run_source(source, optimized=optimized) == b"\x03"

    def test_step_runs_nested_loop(self):
        node = AddConst(1, 1)
        for _ in range(self.DEPTH):
            node = Loop((node, Zero(0)))
        executor = Executor(BytesInputPort(), BytesOutputPort())
        executor.tape.write(0, 1)
        executor.step(node)
        assert executor.tape.read(1) == 1
        assert executor.tape.read(0) == 0
