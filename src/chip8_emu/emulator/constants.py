"""
CHIP-8 Machine Constants
========================

Fixed dimensions of the virtual machine and the built-in hexadecimal
font.

Memory Map:
    $000-$04F  Reserved (interpreter area, unused)
    $050-$09F  Hexadecimal glyph table (16 glyphs x 5 bytes)
    $0A0-$1FF  Reserved
    $200-$FFF  Program memory (3584 bytes)
"""

# Memory
MEMORY_SIZE = 4096
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# Registers
NUM_REGISTERS = 16
FLAG_REGISTER = 0xF

# Call stack
STACK_DEPTH = 16

# Display
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# Keypad
NUM_KEYS = 16
MAX_KEY = NUM_KEYS - 1

# Glyph table
FONT_START = 0x050
FONT_END = 0x0A0  # One past last glyph byte
FONT_GLYPH_SIZE = 5

# =============================================================================
# HEXADECIMAL FONT
# =============================================================================
# 4x5 pixel glyphs for digits 0-F. Each glyph is 5 bytes (one per row),
# pixels in the high nibble with the most significant bit leftmost.

FONT_SET = bytes([
    0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
    0x20, 0x60, 0x20, 0x20, 0x70,  # 1
    0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
    0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
    0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
    0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
    0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
    0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
    0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
    0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
    0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
    0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
    0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
    0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
    0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
    0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
])
