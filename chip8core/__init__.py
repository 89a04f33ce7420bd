"""CHIP-8 emulator, assembler and disassembler."""

from chip8core.state import EmulatorState, create_state
from chip8core.emulator import execute, fetch, step, tick_timers, load_rom, load_rom_file, run_frame, run_frames
from chip8core.decode import DecodedInstruction, decode
from chip8core.opcodes import Op
from chip8core.constants import *
from chip8core.machine import Chip8
from chip8core.assembler import assemble, assemble_line
from chip8core.disassembler import disassemble, disassemble_instruction
from chip8core.rendering import display_to_rgb, create_color_scheme, save_screenshot, render_terminal_frame

__all__ = [
    "EmulatorState",
    "create_state",
    "fetch",
    "execute",
    "step",
    "tick_timers",
    "load_rom",
    "load_rom_file",
    "run_frame",
    "run_frames",
    "DecodedInstruction",
    "decode",
    "Op",
    "Chip8",
    "assemble",
    "assemble_line",
    "disassemble",
    "disassemble_instruction",
    "PROGRAM_START",
    "FONT_START",
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "display_to_rgb",
    "create_color_scheme",
    "save_screenshot",
    "render_terminal_frame",
]
