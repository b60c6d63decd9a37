"""CHIP-8 virtual machine."""

from .constants import MEMORY_SIZE, PROGRAM_START, DISPLAY_WIDTH, DISPLAY_HEIGHT
from .cpu import Chip8CPU, MachineState, StepResult
from .display import Chip8Display
from .errors import (
    Chip8Error, ProgramTooLarge, MachineFault, UnknownOpcode, StackOverflow,
    StackUnderflow, AddressOutOfRange, RegisterOutOfRange,
)
from .keypad import Chip8Keypad
from .memory import Chip8Memory

__version__ = "1.0.0"

__all__ = [
    "Chip8CPU", "MachineState", "StepResult",
    "Chip8Memory", "Chip8Display", "Chip8Keypad",
    "Chip8Error", "ProgramTooLarge", "MachineFault", "UnknownOpcode",
    "StackOverflow", "StackUnderflow", "AddressOutOfRange", "RegisterOutOfRange",
    "MEMORY_SIZE", "PROGRAM_START", "DISPLAY_WIDTH", "DISPLAY_HEIGHT",
]
