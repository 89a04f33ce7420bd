"""CHIP-8 miscellaneous instructions (Fxxx)."""

import jax
import jax.lax
import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FONT_GLYPH_SIZE, FONT_START, KEY_COUNT, REGISTER_COUNT


def execute_get_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX07 - Set VX to delay timer value."""
    return state.replace(V=state.V.at[instruction.x].set(state.delay_timer))


def execute_set_delay_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX15 - Set delay timer to VX."""
    return state.replace(delay_timer=state.V[instruction.x])


def execute_set_sound_timer(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX18 - Set sound timer to VX."""
    return state.replace(sound_timer=state.V[instruction.x])


def execute_add_to_index(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX1E - Add VX to I register. No overflow flag."""
    return state.replace(I=state.I + jnp.astype(state.V[instruction.x], jnp.uint16))


def execute_wait_for_key(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX0A - Wait for key press.

    The wait is a re-fetch: with no key down the PC is stepped back so this
    instruction runs again on the next cycle. With several keys down the
    highest key index wins.
    """
    def key_pressed_action(state):
        pressed_key = (KEY_COUNT - 1) - jnp.argmax(state.keypad[::-1])
        return state.replace(V=state.V.at[instruction.x].set(jnp.astype(pressed_key, jnp.uint8)))

    def wait_action(state):
        return state.replace(pc=state.pc - 2)

    return jax.lax.cond(jnp.any(state.keypad), key_pressed_action, wait_action, state)


def execute_font_character(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX29 - Set I to location of sprite for digit VX."""
    font_address = FONT_START + jnp.astype(state.V[instruction.x], jnp.uint16) * FONT_GLYPH_SIZE
    return state.replace(I=font_address)


_BCD_PLACES = jnp.array([100, 10, 1], dtype=jnp.uint8)


def execute_bcd_conversion(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX33 - Store hundreds, tens and ones of VX at I, I+1, I+2."""
    digits = (state.V[instruction.x] // _BCD_PLACES) % 10
    return state.replace(memory=state.memory.at[state.I + jnp.arange(3)].set(digits))


def _register_window(state: EmulatorState, x):
    """Memory addresses I..I+15 and a mask selecting V0 through VX."""
    return state.I + jnp.arange(REGISTER_COUNT), jnp.arange(REGISTER_COUNT) <= x


def _advance_index(state: EmulatorState, x):
    return state.I + jnp.astype(x + 1, jnp.uint16)


def execute_store_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX55 - Store V0 through VX in memory starting at I, then I += X + 1."""
    addresses, selected = _register_window(state, instruction.x)
    stored = jnp.where(selected, state.V, state.memory[addresses])
    return state.replace(memory=state.memory.at[addresses].set(stored), I=_advance_index(state, instruction.x))


def execute_load_registers(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """FX65 - Load V0 through VX from memory starting at I, then I += X + 1."""
    addresses, selected = _register_window(state, instruction.x)
    loaded = jnp.where(selected, state.memory[addresses], state.V)
    return state.replace(V=loaded, I=_advance_index(state, instruction.x))
