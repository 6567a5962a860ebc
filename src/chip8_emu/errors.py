"""
CHIP-8 Emulator Error Hierarchy
===============================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from Chip8Error, allowing callers to catch every
emulator-related error with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── MachineFault (fatal, ends the emulation session)
│   ├── StackOverflowError - CALL with all 16 stack entries in use
│   ├── StackUnderflowError - RET with an empty stack
│   ├── FetchOutOfBoundsError - PC leaves fewer than 2 bytes of memory
│   └── SessionHaltedError - stepping a session that already faulted
└── ConfigurationError - invalid static configuration

Two Tiers of Failure
--------------------
Only machine faults raise. Everything the interpreter can survive
(unknown opcodes, invalid key indices, out-of-bounds BCD or register
block transfers) is recorded as a DiagnosticEvent and execution carries
on with the next instruction. Program loading reports failure through a
LoadResult value rather than an exception.

Error messages follow this format:
    error: description (PC=$0204, opcode=$00EE)
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all emulator errors.

    Callers driving a session can catch every emulator error with:

        try:
            emu.run(10_000)
        except Chip8Error as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Machine Faults
# =============================================================================

class MachineFault(Chip8Error):
    """
    Unrecoverable invariant violation inside the virtual machine.

    A fault ends the session: the machine state is left as it was at
    the point of failure and no further instructions should be executed.

    Attributes:
        message: The error description
        pc: Address of the instruction being executed (optional)
        opcode: The 16-bit instruction word (optional)
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with the machine context.

        Example output:
            error: stack underflow (PC=$0204, opcode=$00EE)
        """
        context = []
        if self.pc is not None:
            context.append(f"PC=${self.pc:04X}")
        if self.opcode is not None:
            context.append(f"opcode=${self.opcode:04X}")

        if context:
            return f"error: {self.message} ({', '.join(context)})"
        return f"error: {self.message}"


class StackOverflowError(MachineFault):
    """
    CALL executed with every call stack entry already in use.

    The call stack holds 16 return addresses. A 17th nested call has
    nowhere to store its return address.
    """

    def __init__(self, depth: int, pc: Optional[int] = None, opcode: Optional[int] = None):
        self.depth = depth
        super().__init__(f"stack overflow (depth {depth})", pc=pc, opcode=opcode)


class StackUnderflowError(MachineFault):
    """RET executed with an empty call stack."""

    def __init__(self, pc: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("stack underflow", pc=pc, opcode=opcode)


class FetchOutOfBoundsError(MachineFault):
    """
    Instruction fetch would read past the end of memory.

    Raised when the program counter leaves fewer than two bytes before
    the end of the 4096-byte address space, typically after a jump to a
    bad address or a program running off its end.
    """

    def __init__(self, pc: int):
        super().__init__("instruction fetch outside memory", pc=pc)


class SessionHaltedError(MachineFault):
    """
    Execution requested after the session already faulted.

    Attributes:
        cause: The original fault that halted the session
    """

    def __init__(self, cause: MachineFault):
        self.cause = cause
        super().__init__(f"session halted by earlier fault: {cause.message}", pc=cause.pc, opcode=cause.opcode)


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(Chip8Error, ValueError):
    """
    Invalid static configuration.

    Raised at construction time for settings that can never work, such
    as a glyph table that overlaps program memory, non-positive clock
    rates, or a keymap that targets keys outside 0x0-0xF.
    """
    pass
