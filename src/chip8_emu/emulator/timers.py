"""
Delay and Sound Timers for CHIP-8 Emulator
==========================================

Two independent 8-bit countdown registers. Both are decremented by an
external tick, conventionally at 60 Hz; the interpreter itself has no
notion of wall-clock time.

- Delay timer: readable and writable by programs (FX07, FX15)
- Sound timer: write-only for programs (FX18); a tone sounds while it
  is non-zero
"""

from dataclasses import dataclass


@dataclass
class TimerState:
    """Raw timer values (0-255)."""
    delay: int = 0
    sound: int = 0


class Timers:
    """
    Delay/sound timer pair.

    Example:
        >>> timers = Timers()
        >>> timers.sound = 2
        >>> timers.sound_active
        True
        >>> timers.tick(); timers.tick()
        >>> timers.sound_active
        False
    """

    def __init__(self):
        self.state = TimerState()

    @property
    def delay(self) -> int:
        """Delay timer (8-bit)."""
        return self.state.delay

    @delay.setter
    def delay(self, value: int) -> None:
        self.state.delay = value & 0xFF

    @property
    def sound(self) -> int:
        """Sound timer (8-bit)."""
        return self.state.sound

    @sound.setter
    def sound(self, value: int) -> None:
        self.state.sound = value & 0xFF

    @property
    def sound_active(self) -> bool:
        """True while the tone should sound."""
        return self.state.sound > 0

    def tick(self) -> None:
        """Decrement both timers, stopping at zero."""
        if self.state.delay > 0:
            self.state.delay -= 1
        if self.state.sound > 0:
            self.state.sound -= 1

    def reset(self) -> None:
        """Zero both timers."""
        self.state = TimerState()
