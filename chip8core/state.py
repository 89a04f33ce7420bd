"""CHIP-8 emulator state structures."""

import jax
import jax.numpy as jnp
from flax.struct import dataclass, PyTreeNode

from chip8core.constants import (
    FONT_DATA, FONT_START, KEY_COUNT, MEMORY_SIZE, PROGRAM_START, REGISTER_COUNT, SCREEN_SIZE, STACK_SIZE
)


@dataclass
class StackState:
    """Return-address stack; `pointer` counts the entries in use."""
    data: jnp.ndarray
    pointer: jnp.ndarray


class EmulatorState(PyTreeNode):
    """Main CHIP-8 emulator state.

    The display is a linear framebuffer: pixel (x, y) lives at ``y * 64 + x``.
    """
    rng: jax.Array
    memory: jnp.ndarray
    pc: jnp.ndarray
    display: jnp.ndarray
    stack: StackState
    delay_timer: jnp.ndarray
    sound_timer: jnp.ndarray
    keypad: jnp.ndarray
    V: jnp.ndarray
    I: jnp.ndarray


def create_stack() -> StackState:
    """Create an empty stack."""
    return StackState(
        data=jnp.zeros(STACK_SIZE, dtype=jnp.uint16),
        pointer=jnp.zeros((), dtype=jnp.uint8),
    )


def create_state(rng: jax.Array = jax.random.PRNGKey(0)) -> EmulatorState:
    """Create initial emulator state with font data loaded."""
    memory = jnp.zeros(MEMORY_SIZE, dtype=jnp.uint8)
    memory = memory.at[FONT_START:FONT_START + len(FONT_DATA)].set(jnp.array(FONT_DATA, dtype=jnp.uint8))
    return EmulatorState(
        rng=rng,
        memory=memory,
        pc=jnp.asarray(PROGRAM_START, dtype=jnp.uint16),
        display=jnp.zeros(SCREEN_SIZE, dtype=jnp.uint8),
        stack=create_stack(),
        delay_timer=jnp.zeros((), dtype=jnp.uint8),
        sound_timer=jnp.zeros((), dtype=jnp.uint8),
        keypad=jnp.zeros(KEY_COUNT, dtype=jnp.bool_),
        V=jnp.zeros(REGISTER_COUNT, dtype=jnp.uint8),
        I=jnp.zeros((), dtype=jnp.uint16),
    )
