"""Command line entry point: ``chip8 ROM [options]``."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .cpu import Chip8CPU, StepResult
from .errors import MachineFault, ProgramTooLarge

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAULT = 1
EXIT_LOAD_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8",
        description="CHIP-8 interpreter",
    )
    parser.add_argument("rom", type=Path, help="Program image, loaded at 0x200")
    parser.add_argument("--headless", action="store_true",
                        help="Run without a window and print the final registers")
    parser.add_argument("--max-steps", type=int, default=None,
                        help="Stop a headless run after this many instructions")
    parser.add_argument("--keys", default="",
                        help="Hex key codes fed one at a time whenever a headless run waits for a key")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the CXNN random generator")
    parser.add_argument("--speed", type=int, default=1, choices=(1, 2, 4, 8),
                        help="Speed multiplier for the windowed run")
    parser.add_argument("--no-controller", action="store_true",
                        help="Disable game controller input")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def run_headless(cpu: Chip8CPU, max_steps: Optional[int], keys: str) -> StepResult:
    """Run until halt, feeding queued keys to FX0A waits.

    Returns WAITING if the program waits for a key after the queue ran out.
    """
    pending = [int(k, 16) for k in keys]
    steps = 0
    while max_steps is None or steps < max_steps:
        result = cpu.step()
        if result is StepResult.HALTED:
            return result
        if result is StepResult.WAITING:
            if not pending:
                return result
            key = pending.pop(0)
            logger.debug("Feeding key %X at %03X", key, cpu.pc)
            cpu.keypad.press(key)
            continue
        steps += 1
    return StepResult.EXECUTED


def format_registers(cpu: Chip8CPU) -> str:
    regs = " ".join(f"V{n:X}={value:02X}" for n, value in enumerate(cpu.v))
    return (f"PC={cpu.pc:03X} I={cpu.i:03X} SP={cpu.sp} "
            f"DT={cpu.delay_timer} ST={cpu.sound_timer}\n{regs}")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    try:
        data = args.rom.read_bytes()
    except OSError as e:
        logger.error("Cannot read %s: %s", args.rom, e)
        return EXIT_LOAD_ERROR

    cpu = Chip8CPU(seed=args.seed)
    try:
        cpu.load_program(data)
    except ProgramTooLarge as e:
        logger.error("%s: %s", args.rom, e)
        return EXIT_LOAD_ERROR

    if not args.headless:
        from .frontend import Chip8GUI, EmulatorConfig

        config = EmulatorConfig(speed_multiplier=args.speed, controller=not args.no_controller)
        app = Chip8GUI(cpu, config)
        app.load_rom(data, args.rom.name, str(args.rom))
        app.run()
        return EXIT_OK

    try:
        keys = args.keys.strip()
        if any(k not in "0123456789abcdefABCDEF" for k in keys):
            logger.error("--keys takes hex digits, got %r", keys)
            return EXIT_LOAD_ERROR
        result = run_headless(cpu, args.max_steps, keys)
    except MachineFault as e:
        logger.error("Execution halted: %s", e)
        print(format_registers(cpu))
        return EXIT_FAULT

    if result is StepResult.WAITING:
        logger.info("Program is waiting for a key at %03X", cpu.pc)
    elif result is StepResult.EXECUTED:
        logger.info("Stopped after %d instructions", args.max_steps)
    print(format_registers(cpu))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
