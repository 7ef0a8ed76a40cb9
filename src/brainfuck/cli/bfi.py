"""
bfi - Brainfuck Interpreter Command-Line Interface
==================================================

Runs a Brainfuck program from a file, with standard input and standard
output wired to the program's ',' and '.' commands.

Usage Examples
--------------
Run a program:
    $ bfi hello.bf

Feed it input:
    $ echo "text" | bfi rot13.bf

Run without the optimizer:
    $ bfi --no-optimize hello.bf

Inspect the trees instead of running:
    $ bfi --dump-ast hello.bf
    $ bfi --dump-ir hello.bf
"""

import logging
from pathlib import Path
from typing import Optional

import click

from brainfuck import __version__
from brainfuck.ast import ASTPrinter
from brainfuck.cli.errors import handle_cli_exception
from brainfuck.interpreter import Interpreter, InterpreterOptions
from brainfuck.ir import format_instructions
from brainfuck.ports import EofPolicy, StreamInputPort, StreamOutputPort

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "--no-optimize",
    is_flag=True,
    help="Skip the optimizer (also set by BF_OPTIMIZE=0)",
)
@click.option(
    "--eof",
    type=click.Choice([p.value for p in EofPolicy], case_sensitive=False),
    default=None,
    help="What ',' does at end of input (default: unchanged, or $BF_EOF)",
)
@click.option(
    "--dump-ast",
    is_flag=True,
    help="Print the syntax tree and exit",
)
@click.option(
    "--dump-ir",
    is_flag=True,
    help="Print the instruction tree that would run and exit",
)
@click.option(
    "--stats",
    is_flag=True,
    help="Print optimizer statistics to stderr after the run",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging to stderr)",
)
@click.version_option(version=__version__, prog_name="bfi")
def main(
    input_file: Path,
    no_optimize: bool,
    eof: Optional[str],
    dump_ast: bool,
    dump_ir: bool,
    stats: bool,
    verbose: bool,
) -> None:
    """
    Run a Brainfuck program.

    INPUT_FILE is the program source. Every character other than
    the eight commands  > < + - . , [ ]  is ignored.

    \b
    Examples:
        bfi hello.bf                  # Run with stdin/stdout
        bfi --no-optimize hello.bf    # Skip the optimizer
        bfi --eof zero cat.bf         # ',' stores 0 at end of input
        bfi --dump-ir hello.bf        # Show optimized instructions
    """
    setup_logging(verbose)

    try:
        options = InterpreterOptions.from_env()
    except ValueError as e:
        handle_cli_exception(click.BadParameter(str(e)), verbose)

    if no_optimize:
        options.optimize = False
    if eof is not None:
        options.eof_policy = EofPolicy.from_name(eof)

    try:
        source = input_file.read_text(encoding="utf-8", errors="replace")
        interpreter = Interpreter(options)

        if dump_ast or dump_ir:
            compiled = interpreter.compile(source, str(input_file))
            if dump_ast:
                click.echo(ASTPrinter().print(compiled.program))
            if dump_ir:
                click.echo(format_instructions(compiled.instructions))
            return

        stdout = click.get_binary_stream("stdout")
        input_port = StreamInputPort(click.get_binary_stream("stdin"), options.eof_policy)
        output_port = StreamOutputPort(stdout, autoflush=stdout.isatty())

        logger.debug(f"Running {input_file} (optimize={options.optimize}, eof={options.eof_policy.value})")
        try:
            result = interpreter.run(source, input_port, output_port, filename=str(input_file))
        finally:
            output_port.flush()

        if stats:
            click.echo(str(result.stats), err=True)

    except Exception as e:
        handle_cli_exception(e, verbose)


if __name__ == "__main__":
    main()
