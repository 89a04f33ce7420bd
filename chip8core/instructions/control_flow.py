"""CHIP-8 control flow instructions."""

import jax.numpy as jnp
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction
from chip8core.stack import push


def execute_jump(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """1NNN - Jump to address NNN."""
    return state.replace(pc=jnp.astype(instruction.nnn, jnp.uint16))


def execute_call(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """2NNN - Call subroutine at NNN.

    With all 16 stack slots in use the call is dropped: nothing is pushed and
    execution continues with the next instruction.
    """
    stack, pushed = push(state.stack, state.pc)
    target = jnp.where(pushed, jnp.astype(instruction.nnn, jnp.uint16), state.pc)
    return state.replace(stack=stack, pc=target)


def skip_when(predicate):
    """Build a handler that skips the next word when `predicate(V, keypad, instruction)` holds."""
    def skip_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        taken = predicate(state.V, state.keypad, instruction)
        return state.replace(pc=jnp.where(taken, state.pc + 2, state.pc))
    return skip_instruction


def _vx_equals_byte(V, keypad, inst):
    return V[inst.x] == inst.nn


def _vx_equals_vy(V, keypad, inst):
    return V[inst.x] == V[inst.y]


def _key_in_vx_down(V, keypad, inst):
    # Only the low nibble of VX selects the key
    return keypad[V[inst.x] & 0xF]


execute_skip_if_equal_immediate = skip_when(_vx_equals_byte)
execute_skip_if_not_equal_immediate = skip_when(lambda V, keypad, inst: ~_vx_equals_byte(V, keypad, inst))
execute_skip_if_equal_register = skip_when(_vx_equals_vy)
execute_skip_if_not_equal_register = skip_when(lambda V, keypad, inst: ~_vx_equals_vy(V, keypad, inst))
execute_skip_if_key_pressed = skip_when(_key_in_vx_down)
execute_skip_if_key_not_pressed = skip_when(lambda V, keypad, inst: ~_key_in_vx_down(V, keypad, inst))


def execute_jump_with_offset(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """BNNN - Jump to address NNN + V0."""
    jump_address = jnp.astype(instruction.nnn, jnp.uint16) + jnp.astype(state.V[0], jnp.uint16)
    return state.replace(pc=jump_address)
