"""4KB CHIP-8 address space with the built-in font at the bottom."""

import logging

from .constants import MEMORY_SIZE, MAX_PROGRAM_SIZE, PROGRAM_START, FONT_START, FONTSET
from .errors import AddressOutOfRange, ProgramTooLarge

logger = logging.getLogger(__name__)


class Chip8Memory:
    """Flat byte store; programs are loaded at PROGRAM_START"""

    def __init__(self):
        self._data = bytearray(MEMORY_SIZE)
        self.reset()

    def reset(self):
        """Zero memory and reload the font"""
        self._data[:] = bytes(MEMORY_SIZE)
        self._data[FONT_START:FONT_START + len(FONTSET)] = FONTSET

    def load_program(self, data: bytes):
        """Copy program bytes into memory starting at 0x200.

        Raises ProgramTooLarge, leaving memory untouched, when the program
        runs past the end of memory.
        """
        size = len(data)
        if size + PROGRAM_START > MEMORY_SIZE:
            raise ProgramTooLarge(size, MAX_PROGRAM_SIZE)
        self._data[PROGRAM_START:PROGRAM_START + size] = bytes(data)
        logger.debug("Loaded %d byte program at %03X", size, PROGRAM_START)

    def read(self, addr: int) -> int:
        self._check(addr)
        return self._data[addr]

    def write(self, addr: int, value: int):
        self._check(addr)
        self._data[addr] = value

    def read_word(self, addr: int) -> int:
        """Big-endian 16-bit read of addr and addr+1"""
        return (self.read(addr) << 8) | self.read(addr + 1)

    def dump(self) -> bytearray:
        return bytearray(self._data)

    def restore(self, data: bytes):
        if len(data) != MEMORY_SIZE:
            raise ValueError(f"Memory image must be {MEMORY_SIZE} bytes, got {len(data)}")
        self._data[:] = data

    def _check(self, addr: int):
        if not 0 <= addr < MEMORY_SIZE:
            raise AddressOutOfRange(f"Memory access at {addr:#x} outside of {MEMORY_SIZE} bytes")
