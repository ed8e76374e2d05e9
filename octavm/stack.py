"""CHIP-8 call stack operations."""

import jax.numpy as jnp

from octavm.constants import STACK_SIZE
from octavm.errors import StackOverflowError, StackUnderflowError
from octavm.state import StackState


def push(stack: StackState, address) -> StackState:
    """Push a return address onto the stack."""
    pointer = int(stack.pointer)
    if pointer >= STACK_SIZE:
        raise StackOverflowError(f"Call stack overflow ({STACK_SIZE} nested calls)")
    masked_address = jnp.astype(jnp.asarray(address) & 0xFFFF, jnp.uint16)
    new_data = stack.data.at[pointer].set(masked_address)
    return stack.replace(data=new_data, pointer=pointer + 1)


def pop(stack: StackState) -> tuple[StackState, jnp.ndarray]:
    """Pop a return address from the stack."""
    pointer = int(stack.pointer)
    if pointer == 0:
        raise StackUnderflowError("Return with an empty call stack")
    new_pointer = pointer - 1
    popped_address = stack.data[new_pointer]
    new_data = stack.data.at[new_pointer].set(0)
    return stack.replace(data=new_data, pointer=new_pointer), popped_address
