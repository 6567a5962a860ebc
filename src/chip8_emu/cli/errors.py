"""
CLI Exit Codes and Error Reporting
==================================

Maps emulator exceptions onto process exit codes so that scripts can
tell a misbehaving ROM (runtime fault) from a bad invocation (missing
file, bad option, invalid configuration).

Every message goes to stderr; stdout is reserved for the screen dump.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from chip8_emu.errors import Chip8Error, MachineFault


class ExitCode(IntEnum):
    """Process exit codes shared by the CLI tools."""
    SUCCESS = 0
    RUNTIME_ERROR = 1    # Machine fault while running a program
    INVALID_ARGS = 2     # Bad option, configuration or ROM image
    INTERNAL_ERROR = 3   # Bug in the emulator or the tool


def exit_code_for(error: Exception) -> ExitCode:
    """
    Classify an exception.

    Args:
        error: The exception that ended the command

    Returns:
        The exit code the command should terminate with
    """
    match error:
        case MachineFault():
            return ExitCode.RUNTIME_ERROR
        case Chip8Error() | click.BadParameter() | OSError():
            return ExitCode.INVALID_ARGS
        case _:
            return ExitCode.INTERNAL_ERROR


def fail(message: str, code: ExitCode = ExitCode.INVALID_ARGS) -> NoReturn:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {message}", err=True)
    sys.exit(code)


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Report an exception and exit with the matching code.

    Machine faults are printed as they are, since their message already
    carries the "error:" prefix and the PC/opcode context. Internal errors
    print a traceback in verbose mode.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors
        error_type: Optional prefix for configuration errors (e.g., "Configuration")

    Raises:
        SystemExit: Always
    """
    code = exit_code_for(error)

    if code == ExitCode.RUNTIME_ERROR:
        click.echo(str(error), err=True)
    elif code == ExitCode.INTERNAL_ERROR:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
    elif isinstance(error, Chip8Error) and error_type:
        click.echo(f"{error_type} error: {error}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)

    sys.exit(code)
