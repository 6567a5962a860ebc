"""
Memory Subsystem for CHIP-8 Emulator
====================================

Flat 4096-byte address space with the hexadecimal glyph table resident
in low memory and programs loaded at $200.

Memory Map:
    $000-$04F  Reserved
    $050-$09F  Glyph table (installed at construction)
    $0A0-$1FF  Reserved
    $200-$FFF  Program memory

Reads and writes are plain byte accesses; there is no banking and no
memory-mapped I/O. Bounds are the caller's concern: the CPU checks
ranges before block transfers and reports overflows as diagnostics.
"""

import logging
from dataclasses import dataclass

from ..errors import ConfigurationError
from .constants import (
    FONT_END,
    FONT_SET,
    FONT_START,
    MAX_PROGRAM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
)

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    """
    Outcome of loading a program image.

    Load failures are ordinary results, not exceptions: the driver
    decides whether to retry with another image or give up.

    Attributes:
        success: True if the image was copied into memory
        size: Size of the image in bytes (0 if it could not be read)
        message: Human-readable description of the outcome
    """
    success: bool
    size: int = 0
    message: str = ""

    def __bool__(self) -> bool:
        return self.success


class Memory:
    """
    The 4096-byte CHIP-8 address space.

    The glyph table is installed once at construction and is never
    touched by program loading.

    Example:
        >>> mem = Memory()
        >>> mem.load_program(bytes([0x60, 0x2A]))
        LoadResult(success=True, size=2, message='loaded 2 bytes at $200')
        >>> hex(mem.read_word(0x200))
        '0x602a'
    """

    SIZE = MEMORY_SIZE

    def __init__(self, font_start: int = FONT_START, font_end: int = FONT_END):
        """
        Initialize zeroed memory with the glyph table installed.

        Args:
            font_start: First address of the glyph table
            font_end: One past the last address of the glyph table

        Raises:
            ConfigurationError: If the glyph range is empty, does not match
                the font size, or reaches into program memory
        """
        if font_end <= font_start:
            raise ConfigurationError(
                f"Glyph table range ${font_start:03X}-${font_end:03X} is empty"
            )
        if font_end - font_start != len(FONT_SET):
            raise ConfigurationError(
                f"Glyph table range holds {font_end - font_start} bytes, font needs {len(FONT_SET)}"
            )
        if font_end > PROGRAM_START:
            raise ConfigurationError(
                f"Glyph table ends at ${font_end:03X}, overlapping program memory at ${PROGRAM_START:03X}"
            )

        self._font_start = font_start
        self._font_end = font_end
        self._data = bytearray(MEMORY_SIZE)
        self._install_font()

    def _install_font(self) -> None:
        self._data[self._font_start:self._font_end] = FONT_SET

    @property
    def font_start(self) -> int:
        """Base address of the glyph table."""
        return self._font_start

    def read(self, address: int) -> int:
        """
        Read byte from memory.

        Args:
            address: Address in 0-4095

        Returns:
            Byte value at address
        """
        return self._data[address]

    def write(self, address: int, value: int) -> None:
        """
        Write byte to memory.

        Args:
            address: Address in 0-4095
            value: Byte value to write (masked to 8 bits)
        """
        self._data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read 16-bit big-endian word at address."""
        return (self._data[address] << 8) | self._data[address + 1]

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read count bytes starting at address."""
        return bytes(self._data[address:address + count])

    def write_bytes(self, address: int, data: bytes) -> None:
        """Write a block of bytes starting at address."""
        self._data[address:address + len(data)] = data

    def in_bounds(self, address: int, count: int = 1) -> bool:
        """Check that count bytes starting at address lie inside memory."""
        return 0 <= address and address + count <= MEMORY_SIZE

    def load_program(self, data: bytes) -> LoadResult:
        """
        Copy a program image into memory at $200.

        The rest of memory, including the glyph table, is left as is.
        The program counter is not touched: callers load before stepping.

        Args:
            data: Raw program image

        Returns:
            LoadResult describing the outcome. An oversized image leaves
            memory completely unmodified.
        """
        size = len(data)
        if size > MAX_PROGRAM_SIZE:
            message = f"program too large ({size} bytes, maximum {MAX_PROGRAM_SIZE})"
            logger.error(f"Failed to load program: {message}")
            return LoadResult(False, size, message)

        self._data[PROGRAM_START:PROGRAM_START + size] = data
        logger.debug(f"Loaded {size} bytes at ${PROGRAM_START:03X}")
        return LoadResult(True, size, f"loaded {size} bytes at ${PROGRAM_START:03X}")

    def reset(self) -> None:
        """Zero all memory and reinstall the glyph table."""
        self._data = bytearray(MEMORY_SIZE)
        self._install_font()

    def __len__(self) -> int:
        return MEMORY_SIZE
