"""
CHIP-8 CPU core.

Owns the memory, display and keypad, and executes the 35 original opcodes
one at a time. Timers count down once per executed instruction rather than
at 60Hz, so a run is fully determined by the program, the key presses fed
in and the random generator.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from .constants import (
    NUM_REGISTERS, STACK_SIZE, PROGRAM_START, FONT_START, FONT_GLYPH_SIZE,
    VF, HALT_OPCODE,
)
from .display import Chip8Display
from .errors import (
    MachineFault, UnknownOpcode, StackOverflow, StackUnderflow, RegisterOutOfRange,
)
from .keypad import Chip8Keypad
from .memory import Chip8Memory

logger = logging.getLogger(__name__)


class StepResult(Enum):
    """Outcome of a single step"""
    EXECUTED = "executed"  # instruction ran
    WAITING = "waiting"    # FX0A found no key; PC unchanged, step again
    HALTED = "halted"      # 0000 sentinel fetched; PC unchanged


@dataclass
class MachineState:
    """Complete machine state for save/load"""
    memory: bytearray
    v: list
    i: int
    pc: int
    stack: list
    sp: int
    delay_timer: int
    sound_timer: int
    display: list
    last_pressed: Optional[int]


class Chip8CPU:
    """CHIP-8 CPU core with all 35 opcodes"""

    def __init__(self, rng: Optional[random.Random] = None, seed: Optional[int] = None):
        # CXNN draws from this generator; pass a seed for a reproducible run
        self.rng = rng if rng is not None else random.Random(seed)
        self.memory = Chip8Memory()
        self.display = Chip8Display()
        self.keypad = Chip8Keypad()
        self.reset()

    def reset(self):
        """Reset CPU to initial state.

        Memory, display and keypad are cleared in place, so references a
        host holds to them (key callbacks, renderers) stay live.
        """
        self.memory.reset()
        self.display.clear()
        self.keypad.clear()

        # Registers
        self.v = [0] * NUM_REGISTERS  # V0-VF
        self.i = 0  # Index register
        self.pc = PROGRAM_START  # Program counter

        # Stack
        self.stack = [0] * STACK_SIZE
        self.sp = 0  # Stack pointer

        # Timers
        self.delay_timer = 0
        self.sound_timer = 0

        # State flags
        self.waiting_for_key = False
        self.fault: Optional[MachineFault] = None

    def load_program(self, data: bytes):
        """Load program bytes at 0x200; raises ProgramTooLarge"""
        self.memory.load_program(data)

    def populate_registers(self, values: Iterable[int]):
        """Write values[n] into Vn, starting at V0"""
        values = list(values)
        if len(values) > NUM_REGISTERS:
            raise RegisterOutOfRange(f"{len(values)} values for {NUM_REGISTERS} registers")
        for index, value in enumerate(values):
            if not 0 <= value <= 0xFF:
                raise ValueError(f"V{index:X} must hold a byte, got {value!r}")
            self.v[index] = value

    def register_value(self, index: int) -> Optional[int]:
        if not 0 <= index < NUM_REGISTERS:
            return None
        return self.v[index]

    def step(self) -> StepResult:
        """Fetch, decode and execute one instruction"""
        if self.fault is not None:
            raise self.fault

        pc = self.pc
        opcode = None
        try:
            opcode = self.memory.read_word(pc)
            if opcode == HALT_OPCODE:
                return StepResult.HALTED

            self.waiting_for_key = False
            if not self._execute(opcode):
                return StepResult.WAITING if self.waiting_for_key else StepResult.EXECUTED
        except MachineFault as fault:
            if fault.pc is None:
                fault.pc = pc
                fault.opcode = opcode
            self.fault = fault
            logger.debug("CPU fault: %s", fault)
            raise

        self.pc += 2
        self._tick_timers()
        return StepResult.EXECUTED

    def run(self, max_steps: Optional[int] = None) -> StepResult:
        """Step until the halt sentinel.

        Also returns when FX0A is waiting for a key (press one and call run
        again) or after max_steps instructions.
        """
        steps = 0
        while max_steps is None or steps < max_steps:
            result = self.step()
            if result is not StepResult.EXECUTED:
                return result
            steps += 1
        return StepResult.EXECUTED

    def _tick_timers(self):
        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def _execute(self, opcode: int) -> bool:
        """Decode and execute opcode.

        Returns False when the instruction has placed PC itself (or must be
        retried), True when PC should move on to the next instruction.
        """
        # Extract common parts
        nnn = opcode & 0x0FFF  # 12-bit address
        nn = opcode & 0x00FF   # 8-bit constant
        n = opcode & 0x000F    # 4-bit constant
        x = (opcode >> 8) & 0x0F  # Register X
        y = (opcode >> 4) & 0x0F  # Register Y

        first = opcode >> 12

        if opcode == 0x00E0:
            # 00E0: Clear screen
            self.display.clear()

        elif opcode == 0x00EE:
            # 00EE: Return from subroutine, resuming after the call
            self._ret()

        elif first == 0x1:
            # 1NNN: Jump to NNN
            self.pc = nnn
            return False

        elif first == 0x2:
            # 2NNN: Call subroutine at NNN
            self._call(nnn)
            return False

        elif first == 0x3:
            # 3XNN: Skip if VX == NN
            if self.v[x] == nn:
                self.pc += 2

        elif first == 0x4:
            # 4XNN: Skip if VX != NN
            if self.v[x] != nn:
                self.pc += 2

        elif first == 0x5 and n == 0:
            # 5XY0: Skip if VX == VY
            if self.v[x] == self.v[y]:
                self.pc += 2

        elif first == 0x6:
            # 6XNN: VX = NN
            self.v[x] = nn

        elif first == 0x7:
            # 7XNN: VX += NN (no carry)
            self.v[x] = (self.v[x] + nn) & 0xFF

        elif first == 0x8:
            self._execute_8xxx(opcode, x, y, n)

        elif first == 0x9 and n == 0:
            # 9XY0: Skip if VX != VY
            if self.v[x] != self.v[y]:
                self.pc += 2

        elif first == 0xA:
            # ANNN: I = NNN
            self.i = nnn

        elif first == 0xB:
            # BNNN: Jump to NNN + V0
            self.pc = nnn + self.v[0]
            return False

        elif first == 0xC:
            # CXNN: VX = random & NN
            self.v[x] = self.rng.randint(0, 255) & nn

        elif first == 0xD:
            # DXYN: Draw sprite
            self._draw_sprite(x, y, n)

        elif first == 0xE and nn == 0x9E:
            # EX9E: Skip if key VX pressed (consumes the key press)
            if self.keypad.take() == self.v[x]:
                self.pc += 2

        elif first == 0xE and nn == 0xA1:
            # EXA1: Skip if key VX not pressed
            if not self.keypad.was_pressed(self.v[x]):
                self.pc += 2

        elif first == 0xF:
            return self._execute_fxxx(opcode, x, nn)

        else:
            raise UnknownOpcode(f"Unknown opcode {opcode:04X}")

        return True

    def _execute_8xxx(self, opcode: int, x: int, y: int, n: int):
        """Execute 8xxx opcodes (ALU operations)"""
        vx = self.v[x]
        vy = self.v[y]
        if n == 0x0:
            # 8XY0: VX = VY
            self.v[x] = vy
        elif n == 0x1:
            # 8XY1: VX |= VY
            self.v[x] = vx | vy
        elif n == 0x2:
            # 8XY2: VX &= VY
            self.v[x] = vx & vy
        elif n == 0x3:
            # 8XY3: VX ^= VY
            self.v[x] = vx ^ vy
        elif n == 0x4:
            # 8XY4: VX += VY with carry
            result = vx + vy
            self.v[x] = result & 0xFF
            self.v[VF] = 1 if result > 0xFF else 0
        elif n == 0x5:
            # 8XY5: VX -= VY, VF = NOT borrow
            if vy > vx:
                self.v[x] = abs(vx - vy + 1) & 0xFF
                self.v[VF] = 0
            else:
                self.v[x] = vx - vy
                self.v[VF] = 1
        elif n == 0x6:
            # 8XY6: VX >>= 1
            self.v[VF] = vx & 1
            self.v[x] = vx >> 1
        elif n == 0x7:
            # 8XY7: VX = VY - VX, VF = NOT borrow
            if vx > vy:
                self.v[x] = abs(vy - vx + 1) & 0xFF
                self.v[VF] = 0
            else:
                self.v[x] = abs(vy - vx) & 0xFF
                self.v[VF] = 1
        elif n == 0xE:
            # 8XYE: VX <<= 1
            self.v[VF] = vx >> 7
            self.v[x] = (vx << 1) & 0xFF
        else:
            raise UnknownOpcode(f"Unknown ALU opcode {opcode:04X}")

    def _execute_fxxx(self, opcode: int, x: int, nn: int) -> bool:
        """Execute Fxxx opcodes"""
        if nn == 0x07:
            # FX07: VX = delay timer
            self.v[x] = self.delay_timer
        elif nn == 0x0A:
            # FX0A: Wait for key press
            key = self.keypad.take()
            if key is None:
                self.waiting_for_key = True
                return False  # Re-run this instruction on the next step
            self.v[x] = key
        elif nn == 0x15:
            # FX15: delay timer = VX
            self.delay_timer = self.v[x]
        elif nn == 0x18:
            # FX18: sound timer = VX
            self.sound_timer = self.v[x]
        elif nn == 0x1E:
            # FX1E: I += VX, VF flags a result beyond 12 bits
            result = self.i + self.v[x]
            self.v[VF] = 1 if result > 0xFFF else 0
            self.i = result & 0xFFFF
        elif nn == 0x29:
            # FX29: I = font sprite for VX
            self.i = FONT_START + self.v[x] * FONT_GLYPH_SIZE
        elif nn == 0x33:
            # FX33: Store BCD of VX at I, I+1, I+2
            value = self.v[x]
            self.memory.write(self.i, value // 100)
            self.memory.write(self.i + 1, (value // 10) % 10)
            self.memory.write(self.i + 2, value % 10)
        elif nn == 0x55:
            # FX55: Store V0-VX at I
            for r in range(x + 1):
                self.memory.write(self.i + r, self.v[r])
        elif nn == 0x65:
            # FX65: Load V0-VX from I
            for r in range(x + 1):
                self.v[r] = self.memory.read(self.i + r)
        else:
            raise UnknownOpcode(f"Unknown opcode {opcode:04X}")
        return True

    def _call(self, addr: int):
        if self.sp >= STACK_SIZE:
            raise StackOverflow(f"Call stack full ({STACK_SIZE} frames)")
        self.stack[self.sp] = self.pc
        self.sp += 1
        self.pc = addr
        logger.debug("Call %03X, depth %d", addr, self.sp)

    def _ret(self):
        if self.sp == 0:
            raise StackUnderflow("Return with an empty call stack")
        self.sp -= 1
        self.pc = self.stack[self.sp]
        logger.debug("Return to %03X, depth %d", self.pc, self.sp)

    def _draw_sprite(self, x: int, y: int, n: int):
        """Draw sprite at (VX, VY) with height N"""
        self.v[VF] = 0
        px = self.v[x]
        py = self.v[y]

        collision = False
        for row in range(n):
            sprite_byte = self.memory.read(self.i + row)
            if self.display.draw_sprite(sprite_byte, px, py + row):
                collision = True

        self.v[VF] = 1 if collision else 0

    def snapshot(self) -> MachineState:
        """Get current state for save"""
        return MachineState(
            memory=self.memory.dump(),
            v=list(self.v),
            i=self.i,
            pc=self.pc,
            stack=list(self.stack),
            sp=self.sp,
            delay_timer=self.delay_timer,
            sound_timer=self.sound_timer,
            display=self.display.rows(),
            last_pressed=self.keypad.last_pressed,
        )

    def restore(self, state: MachineState):
        """Load state from save"""
        if len(state.v) != NUM_REGISTERS or len(state.stack) != STACK_SIZE:
            raise ValueError("Saved state does not match the machine layout")
        self.memory.restore(state.memory)
        self.v = list(state.v)
        self.i = state.i
        self.pc = state.pc
        self.stack = list(state.stack)
        self.sp = state.sp
        self.delay_timer = state.delay_timer
        self.sound_timer = state.sound_timer
        self.display.restore(state.display)
        self.keypad.last_pressed = state.last_pressed
        self.waiting_for_key = False
        self.fault = None
