"""Exceptions raised by the interpreter.

``ProgramTooLarge`` is the only condition a loader is expected to recover
from. Everything deriving from ``MachineFault`` means the running program (or
the host driving it) broke a machine invariant, and execution must stop.
"""

from typing import Optional


class Chip8Error(Exception):
    """Base class for every error raised by this package"""


class ProgramTooLarge(Chip8Error):
    """Program does not fit between the load offset and the end of memory"""

    def __init__(self, size: int, capacity: int):
        super().__init__(
            f"Program of {size} bytes does not fit in {capacity} bytes of program memory"
        )
        self.size = size
        self.capacity = capacity


class MachineFault(Chip8Error):
    """Fatal fault; the machine cannot continue"""

    def __init__(self, message: str, pc: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.pc = pc
        self.opcode = opcode

    def __str__(self):
        text = super().__str__()
        if self.pc is None:
            return text
        if self.opcode is None:
            return f"{text} (PC={self.pc:04X})"
        return f"{text} (PC={self.pc:04X}, opcode={self.opcode:04X})"


class UnknownOpcode(MachineFault):
    pass


class StackOverflow(MachineFault):
    pass


class StackUnderflow(MachineFault):
    pass


class AddressOutOfRange(MachineFault):
    pass


class RegisterOutOfRange(MachineFault):
    pass
