"""Main CHIP-8 emulator execution engine."""

from functools import partial

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import decode
from chip8core.opcodes import Op
from chip8core.constants import MAX_ROM_SIZE, PROGRAM_START
from chip8core.logging import scan_with_progress
from chip8core.instructions.system import no_op, execute_clear_screen, execute_return
from chip8core.instructions.control_flow import (
    execute_jump, execute_call, execute_skip_if_equal_immediate,
    execute_skip_if_not_equal_immediate, execute_skip_if_equal_register,
    execute_skip_if_not_equal_register, execute_jump_with_offset,
    execute_skip_if_key_pressed, execute_skip_if_key_not_pressed
)
from chip8core.instructions.alu import (
    execute_alu_set, execute_alu_or, execute_alu_and, execute_alu_xor, execute_alu_add,
    execute_alu_sub_xy, execute_alu_sub_yx, execute_shift_right, execute_shift_left
)
from chip8core.instructions.memory import execute_set, execute_add, execute_set_index, execute_random
from chip8core.instructions.display import execute_display
from chip8core.instructions.misc import (
    execute_get_delay_timer, execute_wait_for_key, execute_set_delay_timer,
    execute_set_sound_timer, execute_add_to_index, execute_font_character,
    execute_bcd_conversion, execute_store_registers, execute_load_registers
)

INSTRUCTION_HANDLERS = {
    Op.UNKNOWN: no_op,
    Op.NOP: no_op,
    Op.CLS: execute_clear_screen,
    Op.RET: execute_return,
    Op.JP: execute_jump,
    Op.CALL: execute_call,
    Op.SE_BYTE: execute_skip_if_equal_immediate,
    Op.SNE_BYTE: execute_skip_if_not_equal_immediate,
    Op.SE_REG: execute_skip_if_equal_register,
    Op.LD_BYTE: execute_set,
    Op.ADD_BYTE: execute_add,
    Op.LD_REG: execute_alu_set,
    Op.OR: execute_alu_or,
    Op.AND: execute_alu_and,
    Op.XOR: execute_alu_xor,
    Op.ADD_REG: execute_alu_add,
    Op.SUB: execute_alu_sub_xy,
    Op.SHR: execute_shift_right,
    Op.SUBN: execute_alu_sub_yx,
    Op.SHL: execute_shift_left,
    Op.SNE_REG: execute_skip_if_not_equal_register,
    Op.LD_I: execute_set_index,
    Op.JP_V0: execute_jump_with_offset,
    Op.RND: execute_random,
    Op.DRW: execute_display,
    Op.SKP: execute_skip_if_key_pressed,
    Op.SKNP: execute_skip_if_key_not_pressed,
    Op.LD_VX_DT: execute_get_delay_timer,
    Op.LD_VX_K: execute_wait_for_key,
    Op.LD_DT_VX: execute_set_delay_timer,
    Op.LD_ST_VX: execute_set_sound_timer,
    Op.ADD_I_VX: execute_add_to_index,
    Op.LD_F_VX: execute_font_character,
    Op.LD_B_VX: execute_bcd_conversion,
    Op.LD_MEM_VX: execute_store_registers,
    Op.LD_VX_MEM: execute_load_registers,
}

# lax.switch branches, indexed by Op value
_BRANCHES = [INSTRUCTION_HANDLERS[op] for op in sorted(Op)]


def execute(state: EmulatorState, instruction: int) -> EmulatorState:
    """Execute single CHIP-8 instruction."""
    decoded_instruction = decode(instruction)
    return jax.lax.switch(decoded_instruction.op, _BRANCHES, state, decoded_instruction)


def _pack_u16(high: jnp.uint8, low: jnp.uint8) -> jnp.uint16:
    """Pack two bytes into uint16."""
    return (high.astype(jnp.uint16) << 8) | low.astype(jnp.uint16)


def fetch(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Fetch next instruction from memory."""
    instruction = _pack_u16(state.memory[state.pc], state.memory[state.pc + 1])
    return state.replace(pc=state.pc + 2), instruction


def step(state: EmulatorState) -> tuple[EmulatorState, jnp.uint16]:
    """Run one fetch-decode-execute cycle, returning the executed word."""
    state, instruction = fetch(state)
    return execute(state, instruction), instruction


def tick_timers(state: EmulatorState) -> EmulatorState:
    """Count both timers down by one, stopping at zero."""
    return state.replace(
        delay_timer=jnp.where(state.delay_timer > 0, state.delay_timer - 1, state.delay_timer),
        sound_timer=jnp.where(state.sound_timer > 0, state.sound_timer - 1, state.sound_timer),
    )


def load_rom(state: EmulatorState, rom_data: bytes) -> EmulatorState:
    """Load ROM data into CHIP-8 memory starting at 0x200.

    The ROM must fit in the 3584 bytes above the boot offset; this is not
    checked here (see `load_rom_file`).
    """
    rom_array = jnp.array(list(rom_data), dtype=jnp.uint8)
    new_memory = state.memory.at[PROGRAM_START:PROGRAM_START + len(rom_data)].set(rom_array)
    return state.replace(memory=new_memory)


def load_rom_file(state: EmulatorState, filename: str) -> EmulatorState:
    """Read a ROM file and load it into memory."""
    with open(filename, 'rb') as f:
        rom_data = f.read()
    if len(rom_data) > MAX_ROM_SIZE:
        raise ValueError(
            f"ROM '{filename}' is {len(rom_data)} bytes, the maximum is {MAX_ROM_SIZE}"
        )
    return load_rom(state, rom_data)


def _run_instruction(state, _):
    state, _ = step(state)
    return state, None


@partial(jax.jit, static_argnums=1)
def run_frame(state: EmulatorState, cycles: int) -> EmulatorState:
    """Run one display frame: `cycles` instructions followed by a timer tick."""
    state, _ = jax.lax.scan(_run_instruction, state, length=cycles)
    return tick_timers(state)


def run_frames(
    state: EmulatorState,
    frames: int,
    cycles_per_frame: int = 8,
    progress: bool = False,
) -> tuple[EmulatorState, jnp.ndarray]:
    """Run `frames` frames, returning the final state and every frame's display.

    Args:
        state: Starting emulator state
        frames: Number of frames to run
        cycles_per_frame: Instructions executed between timer ticks
        progress: Show a tqdm progress bar while the scan runs

    Returns:
        Tuple of the final state and a uint8 array of shape (frames, 2048)
    """
    def frame(state, _):
        state = run_frame(state, cycles_per_frame)
        return state, state.display

    if progress:
        frame = scan_with_progress(frames, desc=f"Running ({frames:,} frames)")(frame)

    @jax.jit
    def run(state):
        return jax.lax.scan(frame, state, jnp.arange(frames))

    return run(state)
