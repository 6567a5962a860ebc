"""
Call Stack for CHIP-8 Emulator
==============================

Fixed-capacity stack of return addresses used by CALL (2NNN) and
RET (00EE). Unlike most CPUs the stack does not live in addressable
memory; it is a separate 16-entry array with its own pointer.

Overflow and underflow are machine faults and end the session.
"""

from typing import List, Optional

from ..errors import StackOverflowError, StackUnderflowError
from .constants import STACK_DEPTH


class CallStack:
    """
    Return-address stack with an explicit pointer.

    Invariant: 0 <= pointer <= depth. push() and pop() are the only
    mutators besides clear().

    Example:
        >>> stack = CallStack()
        >>> stack.push(0x202)
        >>> stack.pop()
        514
    """

    def __init__(self, depth: int = STACK_DEPTH):
        self._depth = depth
        self._entries = [0] * depth
        self._pointer = 0

    @property
    def depth(self) -> int:
        """Maximum number of entries."""
        return self._depth

    @property
    def pointer(self) -> int:
        """Number of entries currently in use."""
        return self._pointer

    def push(self, address: int, pc: Optional[int] = None, opcode: Optional[int] = None) -> None:
        """
        Push a return address.

        Args:
            address: 16-bit return address
            pc: Address of the calling instruction (error context only)
            opcode: Calling instruction word (error context only)

        Raises:
            StackOverflowError: If all entries are in use
        """
        if self._pointer >= self._depth:
            raise StackOverflowError(self._depth, pc=pc, opcode=opcode)
        self._entries[self._pointer] = address & 0xFFFF
        self._pointer += 1

    def pop(self, pc: Optional[int] = None, opcode: Optional[int] = None) -> int:
        """
        Pop the most recent return address.

        Raises:
            StackUnderflowError: If the stack is empty
        """
        if self._pointer == 0:
            raise StackUnderflowError(pc=pc, opcode=opcode)
        self._pointer -= 1
        return self._entries[self._pointer]

    def peek(self) -> List[int]:
        """Return the live entries, oldest first."""
        return self._entries[:self._pointer]

    def clear(self) -> None:
        """Empty the stack."""
        self._entries = [0] * self._depth
        self._pointer = 0

    def __len__(self) -> int:
        return self._pointer
