"""Command line front ends: assembler, disassembler and headless runner."""

import argparse
import time
from typing import List, Optional

import jax

from chip8core.assembler import assemble
from chip8core.disassembler import disassemble
from chip8core.emulator import load_rom_file, run_frames
from chip8core.logging import ConsoleLogger
from chip8core.machine import Chip8
from chip8core.rendering import render_terminal_frame, save_screenshot


def _elapsed_us(start: float) -> int:
    return int((time.perf_counter() - start) * 1_000_000)


def run_asm(args, logger: ConsoleLogger) -> int:
    with open(args.input, "r") as f:
        source = f.read()

    start = time.perf_counter()
    rom = assemble(source)
    elapsed = _elapsed_us(start)

    with open(args.output, "wb") as f:
        f.write(rom)
    logger.info(f"Assembled {len(rom)} bytes in {elapsed} us -> {args.output}")
    return 0


def run_deasm(args, logger: ConsoleLogger) -> int:
    with open(args.input, "rb") as f:
        rom = f.read()

    start = time.perf_counter()
    text = disassemble(rom)
    elapsed = _elapsed_us(start)

    with open(args.output, "w") as f:
        f.write(text)
    logger.info(f"Disassembled {len(rom)} bytes in {elapsed} us -> {args.output}")
    return 0


def run_rom(args, logger: ConsoleLogger) -> int:
    machine = Chip8(rng=jax.random.PRNGKey(args.seed), logger=logger, trace=args.trace)
    machine.state = load_rom_file(machine.state, args.rom)
    logger.info(f"Running {args.rom} for {args.frames} frames at {args.cycles} cycles per frame")

    start = time.perf_counter()
    if args.trace:
        for _ in range(args.frames):
            machine.run_frame(args.cycles)
    else:
        machine.state, _ = run_frames(machine.state, args.frames, args.cycles, progress=args.progress)
    machine.state = jax.block_until_ready(machine.state)
    logger.info(f"Finished in {time.perf_counter() - start:.4f}s")

    keypad = None if args.no_keypad else machine.read_keypad()
    print(render_terminal_frame(machine.read_display(), machine.read_sound_timer(), keypad, smpte=args.smpte))

    if args.screenshot:
        save_screenshot(machine.read_display(), args.screenshot, color_scheme=args.color_scheme)
        logger.info(f"Saved screenshot to {args.screenshot}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chip8core",
        description="CHIP-8 assembler, disassembler and emulator",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        default="INFO",
        choices=ConsoleLogger.LEVELS,
        help="Minimum log level (default: INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    asm = subparsers.add_parser("asm", help="Assemble a text file into a ROM")
    asm.add_argument("input", help="Assembly source file")
    asm.add_argument("output", help="ROM file to write")
    asm.set_defaults(handler=run_asm)

    deasm = subparsers.add_parser("deasm", help="Disassemble a ROM into text")
    deasm.add_argument("input", help="ROM file")
    deasm.add_argument("output", help="Assembly text file to write")
    deasm.set_defaults(handler=run_deasm)

    run = subparsers.add_parser("run", help="Run a ROM headlessly and print the final frame")
    run.add_argument("rom", help="ROM file")
    run.add_argument(
        "--frames",
        type=int,
        default=100,
        help="Number of frames to run (default: 100)",
    )
    run.add_argument(
        "--cycles",
        type=int,
        default=8,
        help="Instructions executed per frame (default: 8)",
    )
    run.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Random seed for the RND instruction (default: 0)",
    )
    run.add_argument(
        "--screenshot",
        type=str,
        default=None,
        help="Save the final display to this image file",
    )
    run.add_argument(
        "--color-scheme",
        type=str,
        default="classic",
        help="Screenshot color scheme (default: classic)",
    )
    run.add_argument("--no-keypad", action="store_true", help="Hide the keypad diagram")
    run.add_argument("--smpte", action="store_true", help="Colour the screen with SMPTE colour bars")
    run.add_argument("--trace", action="store_true", help="Log every executed instruction at DEBUG level")
    run.add_argument("--progress", action="store_true", help="Show a progress bar while running")
    run.set_defaults(handler=run_rom)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logger = ConsoleLogger(name="chip8core", log_level=args.log_level)
    try:
        return args.handler(args, logger)
    except (OSError, ValueError) as e:
        logger.error(str(e))
        return 1
