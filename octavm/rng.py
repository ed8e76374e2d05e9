"""Random byte sources for the CXNN instruction.

The interpreter does not own a random generator; one is passed to
``execute``/``step`` so that runs can be replayed exactly.
"""

import itertools
from typing import Iterable, Protocol

import jax
import jax.numpy as jnp


class RandomSource(Protocol):
    def next_byte(self) -> int:
        ...


class KeyRandomSource:
    """Random bytes drawn from a JAX PRNG key, split on every draw."""

    def __init__(self, seed: int | jax.Array = 0):
        if isinstance(seed, int):
            seed = jax.random.PRNGKey(seed)
        self.key = seed

    def next_byte(self) -> int:
        self.key, subkey = jax.random.split(self.key)
        return int(jax.random.randint(subkey, shape=(), minval=0, maxval=256, dtype=jnp.int32))


class SequenceRandomSource:
    """Replays a fixed sequence of bytes, starting over when exhausted."""

    def __init__(self, values: Iterable[int]):
        values = [value & 0xFF for value in values]
        if not values:
            raise ValueError("SequenceRandomSource needs at least one value")
        self.values = values
        self._iterator = itertools.cycle(values)

    def next_byte(self) -> int:
        return next(self._iterator)
