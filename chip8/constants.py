"""Machine geometry, font table and key bindings."""

# Constants
MEMORY_SIZE = 4096
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
STACK_SIZE = 16
NUM_REGISTERS = 16
NUM_KEYS = 16
PROGRAM_START = 0x200
FONT_START = 0x000
FONT_GLYPH_SIZE = 5

MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

VF = 0xF
HALT_OPCODE = 0x0000

# CHIP-8 Font sprites (0-F)
FONTSET = bytes([
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

# Keypad layout (CHIP-8 key -> keyboard key)
#
#   1 2 3 C        1 2 3 4
#   4 5 6 D   =>   q w e r
#   7 8 9 E        a s d f
#   A 0 B F        z x c v
KEY_BINDINGS = {
    0x0: 'x', 0x1: '1', 0x2: '2', 0x3: '3',
    0x4: 'q', 0x5: 'w', 0x6: 'e', 0x7: 'a',
    0x8: 's', 0x9: 'd', 0xA: 'z', 0xB: 'c',
    0xC: '4', 0xD: 'r', 0xE: 'f', 0xF: 'v',
}

# Keyboard mapping (keyboard key -> CHIP-8 key)
KEYBOARD_MAP = {host: code for code, host in KEY_BINDINGS.items()}
