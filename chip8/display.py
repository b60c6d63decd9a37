"""Monochrome 64x32 frame buffer with XOR sprite compositing."""

from typing import List

from .constants import DISPLAY_WIDTH, DISPLAY_HEIGHT


class Chip8Display:
    """Pixel grid owned by the CPU.

    Coordinates wrap around the screen edges, so every draw stays on the
    grid. ``draw_flag`` is raised on every change and is left for the
    renderer to clear.
    """

    def __init__(self):
        self.pixels = [[0] * DISPLAY_WIDTH for _ in range(DISPLAY_HEIGHT)]
        self.draw_flag = False

    def clear(self):
        """Set every pixel to 0"""
        for row in self.pixels:
            for x in range(DISPLAY_WIDTH):
                row[x] = 0
        self.draw_flag = True

    def draw_pixel(self, x: int, y: int):
        """Toggle the pixel at (x, y)"""
        self.pixels[y % DISPLAY_HEIGHT][x % DISPLAY_WIDTH] ^= 1
        self.draw_flag = True

    def draw_sprite(self, row_byte: int, x: int, y: int) -> bool:
        """XOR one 8-pixel sprite row onto the screen at (x, y).

        Bits are drawn most significant first. Returns True if any set bit
        landed on a pixel that was already on.
        """
        collision = False
        row = self.pixels[y % DISPLAY_HEIGHT]
        for col in range(8):
            if row_byte & (0x80 >> col):
                dx = (x + col) % DISPLAY_WIDTH
                if row[dx] == 1:
                    collision = True
                row[dx] ^= 1
        self.draw_flag = True
        return collision

    def pixel(self, x: int, y: int) -> int:
        return self.pixels[y % DISPLAY_HEIGHT][x % DISPLAY_WIDTH]

    def rows(self) -> List[List[int]]:
        """Copy of the frame buffer, one list per scanline"""
        return [row[:] for row in self.pixels]

    def count_set_pixels(self) -> int:
        return sum(sum(row) for row in self.pixels)

    def restore(self, rows: List[List[int]]):
        if len(rows) != DISPLAY_HEIGHT or any(len(row) != DISPLAY_WIDTH for row in rows):
            raise ValueError(f"Frame buffer must be {DISPLAY_WIDTH}x{DISPLAY_HEIGHT}")
        self.pixels = [[1 if p else 0 for p in row] for row in rows]
        self.draw_flag = True
