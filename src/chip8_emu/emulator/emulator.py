"""
CHIP-8 Emulator - Session Orchestrator
======================================

This module provides the main `Emulator` class, which wraps one Chip8CPU
with the pieces a driver needs around it: ROM file loading, pacing of
instructions against the 60 Hz timers, host key translation, framebuffer
presentation and fault bookkeeping.

The Emulator class:
- Builds the CPU with an entropy source seeded from the configuration
- Loads programs from ROM files or raw bytes
- Supports execution control (step, run, run_frame, run_until)
- Translates host key names through the configured keymap
- Offers framebuffer inspection as text or PNG

Pacing
------
The CPU and the timers run at independent fixed rates (700 Hz and 60 Hz
by default). run(steps) keeps them in proportion by counting
instructions; run_frame(elapsed) spends wall-clock time through two
accumulators, which is how a real-time front end drives the machine:

    >>> emu = Emulator()
    >>> result = emu.load_rom("pong.ch8")
    >>> while playing:
    ...     emu.run_frame(clock.tick() / 1000.0)
    ...     if emu.needs_refresh:
    ...         present(emu.framebuffer)
    ...         emu.mark_rendered()

Faults
------
A MachineFault ends the session. The emulator remembers it, and further
step(), run(), run_frame() or run_until() calls raise SessionHaltedError
until reset().
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from ..errors import ConfigurationError, MachineFault, SessionHaltedError
from .cpu import Chip8CPU
from .diagnostics import DiagnosticLog
from .display import Framebuffer
from .entropy import EntropySource
from .instructions import Instruction
from .keyboard import Keypad
from .keymap import DEFAULT_KEYMAP, resolve_key, validate_keymap
from .memory import LoadResult, Memory
from .timers import Timers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        cpu_hz: Instructions executed per second of emulated time
        timer_hz: Timer ticks per second of emulated time
        seed: Seed for the CXNN entropy source (None for an unseeded run)
        keymap: Host key name to CHIP-8 key index table (stored read-only)

    Example:
        >>> config = EmulatorConfig(cpu_hz=1000.0, seed=42)
        >>> emu = Emulator(config)
    """
    cpu_hz: float = 700.0
    timer_hz: float = 60.0
    seed: Optional[int] = None
    keymap: Mapping[str, int] = field(default_factory=lambda: DEFAULT_KEYMAP, hash=False)

    def __post_init__(self):
        # Read-only copy of the table
        object.__setattr__(self, "keymap", MappingProxyType(dict(self.keymap)))

    def validate(self) -> None:
        """
        Check that the configuration can drive a session.

        Raises:
            ConfigurationError: If a clock rate is not positive or the
                keymap targets a key outside 0x0-0xF
        """
        if self.cpu_hz <= 0:
            raise ConfigurationError(f"cpu_hz must be positive, got {self.cpu_hz}")
        if self.timer_hz <= 0:
            raise ConfigurationError(f"timer_hz must be positive, got {self.timer_hz}")
        validate_keymap(self.keymap)


class Emulator:
    """
    CHIP-8 session with pacing, input translation and fault tracking.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        cpu: The Chip8CPU instance (accessible for low-level control)
        memory: The 4096-byte address space
        display: The framebuffer
        keypad: The keypad and FX0A latch
        timers: The delay/sound timers
        diagnostics: Log of non-fatal conditions

    Example:
        >>> emu = Emulator(EmulatorConfig(seed=1))
        >>> emu.load_bytes(bytes([0x00, 0xE0, 0x12, 0x02]))  # CLS; JP $202
        LoadResult(success=True, size=4, message='loaded 4 bytes at $200')
        >>> emu.run(100)
        100
        >>> emu.registers["pc"]
        514
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator with given configuration.

        Args:
            config: EmulatorConfig; defaults to 700 Hz CPU, 60 Hz timers,
                    unseeded entropy and the default keymap

        Raises:
            ConfigurationError: If the configuration is invalid
        """
        self.config = config or EmulatorConfig()
        self.config.validate()

        self.cpu = Chip8CPU(entropy=EntropySource(seed=self.config.seed))

        # Pacing state
        self._cpu_interval = 1.0 / self.config.cpu_hz
        self._timer_interval = 1.0 / self.config.timer_hz
        self._cpu_accumulator = 0.0
        self._timer_accumulator = 0.0
        self._tick_credit = 0.0

        self._fault: Optional[MachineFault] = None

    # =========================================================================
    # Subsystems
    # =========================================================================

    @property
    def memory(self) -> Memory:
        """The 4096-byte address space."""
        return self.cpu.memory

    @property
    def display(self) -> Framebuffer:
        """The framebuffer."""
        return self.cpu.display

    @property
    def keypad(self) -> Keypad:
        """The keypad and key-wait latch."""
        return self.cpu.keypad

    @property
    def timers(self) -> Timers:
        """The delay and sound timers."""
        return self.cpu.timers

    @property
    def diagnostics(self) -> DiagnosticLog:
        """Log of non-fatal conditions."""
        return self.cpu.diagnostics

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> LoadResult:
        """
        Load a ROM image from a file into memory at $200.

        Never raises for a bad file: missing, unreadable and oversized
        images all come back as a failed LoadResult.

        Args:
            path: Path to the ROM file

        Returns:
            LoadResult describing the outcome
        """
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            message = f"cannot read {path}: {e.strerror or e}"
            logger.error(f"Failed to load program: {message}")
            return LoadResult(False, 0, message)

        result = self.load_bytes(data)
        if result:
            logger.debug(f"Loaded ROM {path.name}")
        return result

    def load_bytes(self, data: bytes) -> LoadResult:
        """
        Load a raw program image into memory at $200.

        Args:
            data: Program bytes (at most 3584)

        Returns:
            LoadResult describing the outcome
        """
        return self.cpu.load_program(bytes(data))

    def reset(self) -> None:
        """
        Reset the machine to power-on state and clear any fault.

        Memory is wiped, so the program must be loaded again.
        """
        self.cpu.reset()
        self._cpu_accumulator = 0.0
        self._timer_accumulator = 0.0
        self._tick_credit = 0.0
        self._fault = None

    # =========================================================================
    # Execution Control
    # =========================================================================

    def _check_halted(self) -> None:
        if self._fault is not None:
            raise SessionHaltedError(self._fault)

    def _step(self) -> Optional[Instruction]:
        try:
            return self.cpu.step()
        except MachineFault as e:
            self._fault = e
            logger.error(f"Session halted: {e}")
            raise

    def _advance(self) -> Optional[Instruction]:
        """Step once and tick the timers when a tick period has elapsed."""
        instruction = self._step()
        self._tick_credit += self.config.timer_hz / self.config.cpu_hz
        while self._tick_credit >= 1.0:
            self.cpu.tick()
            self._tick_credit -= 1.0
        return instruction

    def step(self) -> Optional[Instruction]:
        """
        Execute a single instruction without touching the timers.

        Returns:
            The executed instruction, or None while awaiting a key

        Raises:
            MachineFault: If the instruction faults
            SessionHaltedError: If the session already faulted
        """
        self._check_halted()
        return self._step()

    def tick(self) -> None:
        """Advance the delay and sound timers by one tick."""
        self.cpu.tick()

    def run(self, steps: int) -> int:
        """
        Execute a number of steps, ticking timers at the configured ratio.

        Steps taken while awaiting a key still count against the budget
        and still let the timers run down.

        Args:
            steps: Number of step() calls to make

        Returns:
            Number of instructions actually executed

        Raises:
            MachineFault: If an instruction faults
            SessionHaltedError: If the session already faulted
        """
        self._check_halted()
        executed = 0
        for _ in range(steps):
            if self._advance() is not None:
                executed += 1
        return executed

    def run_frame(self, elapsed_seconds: float) -> int:
        """
        Spend elapsed wall-clock time on timer ticks and instructions.

        Time carries over between calls in two accumulators, so calling
        this once per host frame runs the CPU at cpu_hz and the timers
        at timer_hz on average, whatever the frame rate.

        Args:
            elapsed_seconds: Time since the previous call

        Returns:
            Number of instructions executed

        Raises:
            MachineFault: If an instruction faults
            SessionHaltedError: If the session already faulted
        """
        self._check_halted()
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must not be negative, got {elapsed_seconds}")

        self._timer_accumulator += elapsed_seconds
        while self._timer_accumulator >= self._timer_interval:
            self.cpu.tick()
            self._timer_accumulator -= self._timer_interval

        self._cpu_accumulator += elapsed_seconds
        executed = 0
        while self._cpu_accumulator >= self._cpu_interval:
            self._cpu_accumulator -= self._cpu_interval
            if self._step() is not None:
                executed += 1
        return executed

    def run_until(
        self,
        predicate: Callable[["Emulator"], bool],
        max_steps: int = 100_000,
    ) -> bool:
        """
        Run until a condition holds.

        The predicate is checked before every step, with timers paced as
        in run().

        Args:
            predicate: Called with this emulator; stop when it returns True
            max_steps: Maximum steps before giving up

        Returns:
            True if the predicate was satisfied, False if max_steps hit first

        Example:
            >>> if emu.run_until(lambda e: e.waiting_for_key, max_steps=5000):
            ...     emu.press_key("X")
        """
        self._check_halted()
        for _ in range(max_steps):
            if predicate(self):
                return True
            self._advance()
        return predicate(self)

    # =========================================================================
    # Keyboard Input
    # =========================================================================

    def press_key(self, key: Union[str, int]) -> bool:
        """
        Press a key.

        Args:
            key: Host key name from the keymap, or a key index 0x0-0xF

        Returns:
            True if the key was recognized and delivered
        """
        index = resolve_key(key, self.config.keymap)
        if index is None:
            logger.warning(f"Ignoring press of unmapped key {key!r}")
            return False
        self.cpu.press_key(index)
        return True

    def release_key(self, key: Union[str, int]) -> bool:
        """
        Release a key.

        Args:
            key: Host key name from the keymap, or a key index 0x0-0xF

        Returns:
            True if the key was recognized and delivered
        """
        index = resolve_key(key, self.config.keymap)
        if index is None:
            logger.warning(f"Ignoring release of unmapped key {key!r}")
            return False
        self.cpu.release_key(index)
        return True

    # =========================================================================
    # Display and Sound
    # =========================================================================

    @property
    def framebuffer(self) -> bytes:
        """Raw pixel buffer, one byte (0 or 1) per pixel, row-major."""
        return self.display.get_pixel_buffer()

    @property
    def needs_refresh(self) -> bool:
        """True if the framebuffer changed since the last mark_rendered()."""
        return self.display.needs_refresh

    def mark_rendered(self) -> None:
        """Acknowledge that the current framebuffer has been presented."""
        self.display.mark_rendered()

    @property
    def display_text(self) -> str:
        """Framebuffer as text, '#' for lit pixels and '.' for dark ones."""
        return self.display.get_text()

    def render_display(self, scale: int = 10) -> Optional[bytes]:
        """
        Render the framebuffer to a PNG image.

        Args:
            scale: Pixel scaling factor (default 10)

        Returns:
            PNG bytes, or None if Pillow is not installed
        """
        return self.display.render_image(scale=scale)

    @property
    def sound_active(self) -> bool:
        """True while the tone should sound."""
        return self.cpu.sound_active

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def waiting_for_key(self) -> bool:
        """True while FX0A has suspended execution."""
        return self.cpu.waiting_for_key

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, dt, st
        """
        regs = {f"v{n:x}": value for n, value in enumerate(self.cpu.v)}
        regs.update({
            'i': self.cpu.i,
            'pc': self.cpu.pc,
            'sp': self.cpu.stack.pointer,
            'dt': self.timers.delay,
            'st': self.timers.sound,
        })
        return regs

    @property
    def instruction_count(self) -> int:
        """Instructions executed since last reset."""
        return self.cpu.instruction_count

    @property
    def fault(self) -> Optional[MachineFault]:
        """The fault that halted the session, or None."""
        return self._fault

    @property
    def halted(self) -> bool:
        """True once a machine fault has ended the session."""
        return self._fault is not None

    def __repr__(self) -> str:
        """Return string representation of emulator state."""
        return (
            f"Emulator(pc=${self.cpu.pc:04X}, "
            f"instructions={self.cpu.instruction_count}, "
            f"halted={self.halted})"
        )
