"""
CLI Error Handling
==================

Maps assembler exceptions to tracsasm exit codes and stderr messages.

| Exception                          | Exit code      | Message                   |
|------------------------------------|----------------|---------------------------|
| AssemblyFailedError                | BUILD_ERROR    | collected error report    |
| SourceUnavailableError             | INVALID_ARGS   | the rendered diagnostic   |
| InternalAssemblerError             | INTERNAL_ERROR | the rendered diagnostic   |
| any other AssemblerError           | BUILD_ERROR    | the rendered diagnostic   |
| other TracsError subclasses        | BUILD_ERROR    | <context> error: ...      |
| click.BadParameter, OSError family | INVALID_ARGS   | Error: ...                |
| anything else                      | INTERNAL_ERROR | Internal error: ...       |
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from tracs_asm.errors import (
    AssemblerError,
    AssemblyFailedError,
    InternalAssemblerError,
    SourceUnavailableError,
    TracsError,
)


class ExitCode(IntEnum):
    """Process exit status of tracsasm."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Assembly failed or the output could not be written
    INVALID_ARGS = 2     # Bad option value or unreadable input
    INTERNAL_ERROR = 3   # Bug in the assembler


def classify_exception(error: Exception,
                       context: str | None = None) -> tuple[ExitCode, str]:
    """
    Decide the exit code and the message to print for an exception.

    Args:
        error: The exception that stopped the command
        context: Word prefixed to TracsErrors that are not assembler
            diagnostics (e.g., "Assembly")

    Returns:
        (exit code, message) pair
    """
    if isinstance(error, AssemblyFailedError):
        # The report carries its own "error:" prefixes and summary line
        return ExitCode.BUILD_ERROR, error.errors.report()
    # Assembler diagnostics render their own "error:" prefix
    if isinstance(error, SourceUnavailableError):
        return ExitCode.INVALID_ARGS, str(error)
    if isinstance(error, InternalAssemblerError):
        return ExitCode.INTERNAL_ERROR, str(error)
    if isinstance(error, AssemblerError):
        return ExitCode.BUILD_ERROR, str(error)
    if isinstance(error, TracsError):
        label = f"{context} error" if context else "Error"
        return ExitCode.BUILD_ERROR, f"{label}: {error}"
    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        return ExitCode.INVALID_ARGS, f"Error: {error}"
    return ExitCode.INTERNAL_ERROR, f"Internal error: {error}"


def handle_cli_exception(error: Exception, verbose: bool = False,
                         context: str | None = None) -> NoReturn:
    """
    Print an exception to stderr and exit with its exit code.

    Tracebacks are printed for internal errors when verbose is set.
    """
    code, message = classify_exception(error, context)
    click.echo(message, err=True)
    if verbose and code == ExitCode.INTERNAL_ERROR:
        traceback.print_exc()
    sys.exit(code)
