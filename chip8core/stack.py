"""CHIP-8 stack operations.

Both operations fail soft: pushing onto a full stack drops the address and
popping an empty stack yields address 0. Neither raises.
"""

import jax.numpy as jnp
from chip8core.constants import STACK_SIZE
from chip8core.state import StackState


def push(stack: StackState, address: jnp.ndarray) -> tuple[StackState, jnp.ndarray]:
    """Push address onto stack, returning the new stack and whether it fit."""
    has_room = stack.pointer < STACK_SIZE
    slot = jnp.minimum(stack.pointer, STACK_SIZE - 1)
    new_data = jnp.where(has_room, stack.data.at[slot].set(address), stack.data)
    new_pointer = jnp.where(has_room, stack.pointer + 1, stack.pointer)
    return stack.replace(data=new_data, pointer=new_pointer), has_room


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop address from stack."""
    is_empty = stack.pointer == 0
    new_pointer = jnp.where(is_empty, stack.pointer, stack.pointer - 1)
    popped_address = jnp.where(is_empty, jnp.zeros((), dtype=stack.data.dtype), stack.data[new_pointer])
    return stack.replace(pointer=new_pointer), popped_address
