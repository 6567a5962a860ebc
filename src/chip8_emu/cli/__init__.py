"""
chip8-emu Command-Line Interface
================================

This package provides command-line tools for the CHIP-8 interpreter:

- **chip8run**: Headless ROM runner

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run"]
