"""CHIP-8 ALU operations (8xxx)."""

import jax.numpy as jnp
from chip8core.constants import FLAG_REGISTER
from chip8core.state import EmulatorState
from chip8core.decode import DecodedInstruction


def alu_set(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY0 - Set: VX = VY."""
    return vy


def alu_or(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY1 - Binary OR: VX |= VY."""
    return vx | vy


def alu_and(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY2 - Binary AND: VX &= VY."""
    return vx & vy


def alu_xor(vx: jnp.ndarray, vy: jnp.ndarray) -> jnp.ndarray:
    """8XY3 - Logical XOR: VX ^= VY."""
    return vx ^ vy


def alu_add(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY4 - Add: VX += VY, set carry flag."""
    result = jnp.astype(vx, jnp.uint16) + jnp.astype(vy, jnp.uint16)
    carry = jnp.astype(result > 0xFF, jnp.uint8)
    return jnp.astype(result & 0xFF, jnp.uint8), carry


def alu_sub_xy(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY5 - Subtract: VX -= VY, VF = 1 when no borrow occurs."""
    no_borrow = jnp.astype(vx >= vy, jnp.uint8)
    return vx - vy, no_borrow


def alu_sub_yx(vx: jnp.ndarray, vy: jnp.ndarray) -> tuple[jnp.ndarray, jnp.ndarray]:
    """8XY7 - Subtract: VX = VY - VX, VF = 1 when no borrow occurs."""
    no_borrow = jnp.astype(vy >= vx, jnp.uint8)
    return vy - vx, no_borrow


def make_logic_instruction(operation):
    """Factory for 8XYN instructions that leave VF alone."""
    def logic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result = operation(state.V[instruction.x], state.V[instruction.y])
        return state.replace(V=state.V.at[instruction.x].set(result))
    return logic_instruction


def make_arithmetic_instruction(operation):
    """Factory for 8XYN instructions that write VF after VX."""
    def arithmetic_instruction(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
        result, flag = operation(state.V[instruction.x], state.V[instruction.y])
        new_V = state.V.at[instruction.x].set(result)
        new_V = new_V.at[FLAG_REGISTER].set(flag)
        return state.replace(V=new_V)
    return arithmetic_instruction


execute_alu_set = make_logic_instruction(alu_set)
execute_alu_or = make_logic_instruction(alu_or)
execute_alu_and = make_logic_instruction(alu_and)
execute_alu_xor = make_logic_instruction(alu_xor)
execute_alu_add = make_arithmetic_instruction(alu_add)
execute_alu_sub_xy = make_arithmetic_instruction(alu_sub_xy)
execute_alu_sub_yx = make_arithmetic_instruction(alu_sub_yx)


# Shifts operate on VX in place and ignore VY. VF takes the shifted-out bit
# before VX is shifted, so a shift of VF itself shifts the flag.

def execute_shift_right(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XY6 - Shift right: VF = VX & 1, VX >>= 1."""
    new_V = state.V.at[FLAG_REGISTER].set(state.V[instruction.x] & 1)
    return state.replace(V=new_V.at[instruction.x].set(new_V[instruction.x] >> 1))


def execute_shift_left(state: EmulatorState, instruction: DecodedInstruction) -> EmulatorState:
    """8XYE - Shift left: VF = VX >> 7, VX <<= 1."""
    new_V = state.V.at[FLAG_REGISTER].set(state.V[instruction.x] >> 7)
    return state.replace(V=new_V.at[instruction.x].set(new_V[instruction.x] << 1))
