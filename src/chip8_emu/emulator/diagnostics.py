"""
Diagnostic Channel for CHIP-8 Emulator
======================================

Records the non-fatal conditions the interpreter survives:
- Unknown instructions and sub-opcodes
- Key-test instructions (EX9E/EXA1) given a register value above 0xF
- BCD or register block transfers that would run past the end of memory

Each condition becomes a DiagnosticEvent in the machine's DiagnosticLog
and a warning on the module logger. Execution continues with the next
instruction either way, so tests and drivers can inspect what went
wrong without the interpreter ever printing to the console.

Example usage:

    >>> from chip8_emu.emulator import Emulator, DiagnosticKind
    >>> emu = Emulator()
    >>> result = emu.load_bytes(bytes([0x5A, 0xB1]))  # 5XY1 is not an instruction
    >>> instruction = emu.step()
    >>> emu.diagnostics.last.kind == DiagnosticKind.UNKNOWN_OPCODE
    True
"""

import logging
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterator, List, Optional

logger = logging.getLogger(__name__)


class DiagnosticKind(Enum):
    """
    Enumeration of non-fatal conditions.

    Used in DiagnosticEvent to indicate what was detected.
    """
    UNKNOWN_OPCODE = auto()  # Instruction word matched no instruction
    INVALID_KEY = auto()     # Key-test instruction with register value > 0xF
    MEMORY_BOUNDS = auto()   # Block transfer would leave memory


@dataclass(frozen=True)
class DiagnosticEvent:
    """
    One non-fatal condition detected during execution.

    Attributes:
        kind: What was detected
        pc: Address of the offending instruction
        opcode: The 16-bit instruction word
        message: Human-readable description
    """
    kind: DiagnosticKind
    pc: int
    opcode: int
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return f"${self.pc:04X}: {self.message}"
        match self.kind:
            case DiagnosticKind.UNKNOWN_OPCODE:
                return f"${self.pc:04X}: unknown opcode ${self.opcode:04X}"
            case DiagnosticKind.INVALID_KEY:
                return f"${self.pc:04X}: invalid key index in ${self.opcode:04X}"
            case DiagnosticKind.MEMORY_BOUNDS:
                return f"${self.pc:04X}: memory access out of bounds in ${self.opcode:04X}"
            case _:
                return f"${self.pc:04X}: diagnostic"


class DiagnosticLog:
    """
    Bounded, ordered record of diagnostic events.

    Once max_events is reached the oldest events are dropped. An optional
    listener is called with every recorded event, which lets a driver
    surface diagnostics as they happen.

    Example:
        >>> log = DiagnosticLog()
        >>> log.record(DiagnosticEvent(DiagnosticKind.UNKNOWN_OPCODE, 0x200, 0xFFFF))
        >>> log.count(DiagnosticKind.UNKNOWN_OPCODE)
        1
    """

    DEFAULT_MAX_EVENTS = 1024

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS):
        if max_events <= 0:
            raise ValueError(f"max_events must be positive, got {max_events}")
        self._events: deque[DiagnosticEvent] = deque(maxlen=max_events)
        self._total = 0
        self.listener: Optional[Callable[[DiagnosticEvent], None]] = None

    def record(self, event: DiagnosticEvent) -> None:
        """
        Record an event.

        Args:
            event: The diagnostic to record
        """
        self._events.append(event)
        self._total += 1
        logger.warning(str(event))
        if self.listener:
            self.listener(event)

    @property
    def events(self) -> List[DiagnosticEvent]:
        """Retained events, oldest first."""
        return list(self._events)

    @property
    def last(self) -> Optional[DiagnosticEvent]:
        """Most recent event, or None if nothing was recorded."""
        return self._events[-1] if self._events else None

    @property
    def total(self) -> int:
        """Number of events recorded since the last clear, including dropped ones."""
        return self._total

    def count(self, kind: Optional[DiagnosticKind] = None) -> int:
        """
        Count retained events.

        Args:
            kind: Only count events of this kind (all kinds if None)
        """
        if kind is None:
            return len(self._events)
        return sum(1 for e in self._events if e.kind == kind)

    def clear(self) -> None:
        """Forget all events."""
        self._events.clear()
        self._total = 0

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[DiagnosticEvent]:
        return iter(list(self._events))
