"""
chip8-emu - CHIP-8 Virtual Machine Interpreter
==============================================

This package provides an interpreter core for the CHIP-8 virtual
machine together with a headless command-line runner.

Main Components
---------------
- **emulator**: The virtual machine
    Memory, registers, call stack, framebuffer, timers, keypad and the
    fetch-decode-execute engine, wrapped by a paced Emulator session

- **cli**: Command-line tools (chip8run)
    Runs a ROM for a number of steps and prints or renders the screen

Quick Start
-----------
Run a program:
    >>> from chip8_emu import Emulator
    >>> emu = Emulator()
    >>> result = emu.load_rom("ibm_logo.ch8")
    >>> executed = emu.run(500)
    >>> print(emu.display_text)

Or use the command-line tool:
    $ chip8run ibm_logo.ch8 --steps 500
    $ chip8run pong.ch8 --steps 5000 --format png -o pong.png

Version History
---------------
1.0.0 - Initial release with interpreter core and chip8run
"""

__version__ = "1.0.0"
__author__ = "chip8-emu contributors"

from chip8_emu.errors import (
    Chip8Error,
    MachineFault,
    StackOverflowError,
    StackUnderflowError,
    FetchOutOfBoundsError,
    SessionHaltedError,
    ConfigurationError,
)
from chip8_emu.emulator import Emulator, EmulatorConfig

__all__ = [
    "__version__",
    "Chip8Error",
    "MachineFault",
    "StackOverflowError",
    "StackUnderflowError",
    "FetchOutOfBoundsError",
    "SessionHaltedError",
    "ConfigurationError",
    "Emulator",
    "EmulatorConfig",
]
