"""Unit tests for the frame buffer."""

import pytest

from chip8.constants import DISPLAY_WIDTH, DISPLAY_HEIGHT
from chip8.display import Chip8Display


def test_starts_blank():
    display = Chip8Display()
    assert display.count_set_pixels() == 0
    assert display.draw_flag is False


def test_clear():
    display = Chip8Display()
    for y in range(10):
        for x in range(10):
            display.draw_pixel(x, y)
    assert display.count_set_pixels() == 100
    display.clear()
    assert display.count_set_pixels() == 0


def test_draw_pixel_toggles():
    display = Chip8Display()
    display.draw_pixel(5, 6)
    assert display.pixel(5, 6) == 1
    display.draw_pixel(5, 6)
    assert display.pixel(5, 6) == 0


def test_sprite_row_is_drawn_msb_first():
    display = Chip8Display()
    assert display.draw_sprite(0x80, 3, 4) is False
    assert display.pixel(3, 4) == 1
    assert display.count_set_pixels() == 1

    display.draw_sprite(0x01, 10, 0)
    assert display.pixel(17, 0) == 1


def test_drawing_twice_restores_pixels_and_collides():
    display = Chip8Display()
    display.draw_pixel(40, 20)
    before = display.rows()

    assert display.draw_sprite(0xA5, 38, 20) is True
    assert display.draw_sprite(0xA5, 38, 20) is True
    assert display.rows() == before


def test_collision_only_for_set_bits():
    display = Chip8Display()
    display.draw_sprite(0x80, 0, 0)
    # Bit 7 lands on x=7, which is off
    assert display.draw_sprite(0x01, 0, 0) is False
    # Zero bits never collide
    assert display.draw_sprite(0x00, 0, 0) is False
    assert display.draw_sprite(0x80, 0, 0) is True


def test_sprite_wraps_around_edges():
    display = Chip8Display()
    display.draw_sprite(0xFF, DISPLAY_WIDTH - 4, DISPLAY_HEIGHT - 1)
    assert display.count_set_pixels() == 8
    assert display.pixel(DISPLAY_WIDTH - 1, DISPLAY_HEIGHT - 1) == 1
    assert display.pixel(0, DISPLAY_HEIGHT - 1) == 1
    assert display.pixel(3, DISPLAY_HEIGHT - 1) == 1
    assert display.pixel(4, DISPLAY_HEIGHT - 1) == 0

    display.draw_sprite(0x80, 0, DISPLAY_HEIGHT)
    assert display.pixel(0, 0) == 1


def test_rows_is_a_copy():
    display = Chip8Display()
    rows = display.rows()
    rows[0][0] = 1
    assert display.pixel(0, 0) == 0


def test_restore_rejects_wrong_shape():
    display = Chip8Display()
    with pytest.raises(ValueError):
        display.restore([[0] * DISPLAY_WIDTH])
