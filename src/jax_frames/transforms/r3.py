"""R^3 translation group operations in JAX.

Translations form a vector space under addition, so the group is its own Lie
algebra and the exp/log maps are the identity.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def identity(batch_shape=(), dtype=jnp.float64) -> Array:
    """Zero translation of shape (..., 3)."""
    return jnp.zeros(tuple(batch_shape) + (3,), dtype=dtype)


def multiply(a: Array, b: Array) -> Array:
    """Compose two translations."""
    return a + b


def inverse(a: Array) -> Array:
    return -a


def exp(x: Array) -> Array:
    return x


def log(a: Array) -> Array:
    return a
