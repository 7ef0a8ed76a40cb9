"""
Brainfuck Command-Line Interface
================================

This package provides the command-line front end for the interpreter:

- **bfi**: run a Brainfuck program from a file

The tool is a Click-based CLI application with help text and consistent
exit codes (see brainfuck.cli.errors).
"""

__all__ = ["bfi"]
