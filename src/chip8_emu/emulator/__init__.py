"""
CHIP-8 Virtual Machine
======================

An interpreter core for the CHIP-8 virtual machine.

This package provides:

- **CPU**: Fetch-decode-execute engine for the 35 base instructions
- **Memory**: 4096-byte address space with the resident glyph table
- **Framebuffer**: 64x32 XOR display with sprite collision detection
- **Keypad**: 16 keys plus the FX0A wait-for-key latch
- **Timers**: 60 Hz delay and sound countdowns
- **Diagnostics**: Queryable log of non-fatal conditions

Quick Start
-----------

Basic usage::

    >>> from chip8_emu.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(seed=7))
    >>> result = emu.load_rom("maze.ch8")
    >>> executed = emu.run(2000)
    >>> print(emu.display_text)

Driving the CPU directly::

    >>> from chip8_emu.emulator import Chip8CPU
    >>> cpu = Chip8CPU()
    >>> result = cpu.load_program(bytes([0xA0, 0x50, 0xD0, 0x05]))  # I=glyph "0"; DRW
    >>> _ = cpu.step(); _ = cpu.step()
    >>> cpu.display.lit_count()
    14

Module Structure
----------------

- `emulator.py`: Main Emulator class (pacing, ROM files, key names)
- `cpu.py`: Chip8CPU engine
- `instructions.py`: Instruction decoding
- `memory.py`: Address space and program loading
- `stack.py`: Return address stack
- `display.py`: Framebuffer
- `keyboard.py`: Keypad and key-wait latch
- `keymap.py`: Host keyboard layout
- `timers.py`: Delay and sound timers
- `entropy.py`: Random byte source
- `diagnostics.py`: Non-fatal condition log
- `constants.py`: Machine dimensions and the glyph table
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig

# CPU
from .cpu import Chip8CPU, CPUState
from .instructions import Instruction, Op, decode

# Machine state
from .memory import Memory, LoadResult
from .stack import CallStack
from .display import Framebuffer
from .keyboard import Keypad, KeyWaitState
from .keymap import DEFAULT_KEYMAP, resolve_key, validate_keymap
from .timers import Timers, TimerState
from .entropy import EntropySource

# Diagnostics
from .diagnostics import DiagnosticEvent, DiagnosticKind, DiagnosticLog

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",

    # CPU
    "Chip8CPU",
    "CPUState",
    "Instruction",
    "Op",
    "decode",

    # Memory
    "Memory",
    "LoadResult",
    "CallStack",

    # Display
    "Framebuffer",

    # Keyboard
    "Keypad",
    "KeyWaitState",
    "DEFAULT_KEYMAP",
    "resolve_key",
    "validate_keymap",

    # Timers and entropy
    "Timers",
    "TimerState",
    "EntropySource",

    # Diagnostics
    "DiagnosticEvent",
    "DiagnosticKind",
    "DiagnosticLog",
]
