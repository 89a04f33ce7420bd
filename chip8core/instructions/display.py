"""CHIP-8 display operations."""

import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.constants import FLAG_REGISTER, MAX_SPRITE_HEIGHT, SCREEN_SIZE, SCREEN_WIDTH, SPRITE_WIDTH

# Pre-computed sprite grid: one row per sprite byte, one column per bit
rows = jnp.arange(MAX_SPRITE_HEIGHT)[:, None]
cols = jnp.arange(SPRITE_WIDTH)[None, :]


def execute_display(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """DXYN - Draw sprite at (VX, VY) with height N.

    Sprite rows are read from memory starting at I and XORed onto the display.
    Target pixels are computed on the linear framebuffer and wrapped modulo its
    size, so a sprite leaving the right edge continues on the next row and one
    leaving the bottom continues at the top. VF is set to 1 if any lit pixel is
    erased, otherwise 0.
    """
    sprite_x = jnp.astype(state.V[instruction.x], jnp.int32)
    sprite_y = jnp.astype(state.V[instruction.y], jnp.int32)

    sprite_bytes = state.memory[jnp.astype(state.I, jnp.int32) + rows]
    sprite = (sprite_bytes >> (7 - cols)) & 1
    sprite = jnp.astype(jnp.where(rows < instruction.n, sprite, 0), jnp.uint8)

    targets = (sprite_x + cols + (sprite_y + rows) * SCREEN_WIDTH) % SCREEN_SIZE
    current = state.display[targets]

    return state.replace(
        display=state.display.at[targets].set(current ^ sprite),
        V=state.V.at[FLAG_REGISTER].set(jnp.astype(jnp.any(current & sprite), jnp.uint8))
    )
