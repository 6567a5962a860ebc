"""
Framebuffer for CHIP-8 Emulator
===============================

64x32 monochrome framebuffer with XOR sprite drawing.

Pixel model:
- One byte per pixel, 0 (off) or 1 (on), row-major from the top-left
- Coordinates wrap modulo width and height on every access
- Sprites are XORed onto the screen; turning a lit pixel off is a
  collision, reported back to the CPU through VF

The dirty flag tells the presentation layer that the picture may have
changed since it was last rendered. The driver clears it with
mark_rendered() after drawing.
"""

from typing import List, Optional, Sequence

from .constants import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH


class Framebuffer:
    """
    Monochrome pixel grid with toroidal addressing.

    Example:
        >>> fb = Framebuffer()
        >>> fb.draw_sprite(62, 0, [0xF0])  # wraps onto columns 0 and 1
        False
        >>> fb.get_pixel(0, 0), fb.get_pixel(1, 0)
        (True, True)
        >>> fb.draw_sprite(62, 0, [0xF0])  # drawn again: erased, collision
        True
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        """
        Initialize a blank framebuffer.

        Args:
            width: Width in pixels
            height: Height in pixels
        """
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid framebuffer size {width}x{height}")

        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)

        # Track if display needs refresh (for external rendering)
        self._needs_refresh = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def width(self) -> int:
        """Width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Height in pixels."""
        return self._height

    @property
    def needs_refresh(self) -> bool:
        """True if the picture changed since the last mark_rendered()."""
        return self._needs_refresh

    def mark_rendered(self) -> None:
        """Clear the dirty flag once the presentation layer has drawn."""
        self._needs_refresh = False

    # =========================================================================
    # Pixel Access
    # =========================================================================

    def _index(self, x: int, y: int) -> int:
        return (x % self._width) + (y % self._height) * self._width

    def get_pixel(self, x: int, y: int) -> bool:
        """
        Read a pixel.

        Args:
            x: Column (wrapped modulo width)
            y: Row (wrapped modulo height)

        Returns:
            True if the pixel is lit
        """
        return self._pixels[self._index(x, y)] == 1

    def set_pixel(self, x: int, y: int, state: bool = True) -> bool:
        """
        XOR a value into a pixel.

        Args:
            x: Column (wrapped modulo width)
            y: Row (wrapped modulo height)
            state: Value to XOR in; False leaves the pixel unchanged

        Returns:
            True if a lit pixel was turned off (collision)
        """
        index = self._index(x, y)
        original = self._pixels[index] == 1
        new = original != bool(state)

        self._pixels[index] = 1 if new else 0
        if original != new:
            self._needs_refresh = True

        return original and not new

    def draw_sprite(self, x: int, y: int, rows: Sequence[int]) -> bool:
        """
        XOR a sprite onto the screen.

        Each row is one byte, most significant bit leftmost. Every set bit
        is wrapped independently, so a sprite straddling an edge appears
        split across both sides of the screen.

        Args:
            x: Column of the sprite's left edge
            y: Row of the sprite's top edge
            rows: Sprite bytes, top row first

        Returns:
            True if any lit pixel was erased. Once set, the result stays
            set for the rest of the sprite.
        """
        collision = False
        for row, sprite_byte in enumerate(rows):
            for column in range(SPRITE_WIDTH):
                if sprite_byte & (0x80 >> column):
                    if self.set_pixel(x + column, y + row):
                        collision = True

        # Drawing always counts as a change for the presentation layer
        self._needs_refresh = True
        return collision

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels = bytearray(self._width * self._height)
        self._needs_refresh = True

    def lit_count(self) -> int:
        """Number of lit pixels."""
        return sum(self._pixels)

    # =========================================================================
    # Presentation Helpers
    # =========================================================================

    def get_pixel_buffer(self) -> bytes:
        """
        Get the raw pixel buffer.

        Returns:
            width * height bytes, row-major, 1 for lit pixels
        """
        return bytes(self._pixels)

    def get_text_grid(self, on: str = "#", off: str = ".") -> List[str]:
        """
        Get the screen as one string per row.

        Args:
            on: Character used for lit pixels
            off: Character used for dark pixels
        """
        lines = []
        for y in range(self._height):
            start = y * self._width
            row = self._pixels[start:start + self._width]
            lines.append("".join(on if p else off for p in row))
        return lines

    def get_text(self, on: str = "#", off: str = ".") -> str:
        """Get the screen as a single newline-separated string."""
        return "\n".join(self.get_text_grid(on, off))

    def render_image(
        self,
        scale: int = 10,
        ink_color: tuple = (255, 97, 0),
        paper_color: tuple = (0, 0, 0),
    ) -> Optional[bytes]:
        """
        Render the framebuffer as a PNG image.

        Args:
            scale: Size of each CHIP-8 pixel in image pixels
            ink_color: RGB tuple for lit pixels
            paper_color: RGB tuple for the background

        Returns:
            PNG image bytes, or None if PIL not available
        """
        try:
            from PIL import Image, ImageDraw
            import io
        except ImportError:
            return None

        if scale < 1:
            raise ValueError(f"scale must be >= 1, got {scale}")

        img = Image.new('RGB', (self._width * scale, self._height * scale), color=paper_color)
        draw = ImageDraw.Draw(img)

        for y in range(self._height):
            for x in range(self._width):
                if self._pixels[x + y * self._width]:
                    draw.rectangle(
                        [x * scale, y * scale, (x + 1) * scale - 1, (y + 1) * scale - 1],
                        fill=ink_color
                    )

        buffer = io.BytesIO()
        img.save(buffer, format='PNG')
        return buffer.getvalue()
