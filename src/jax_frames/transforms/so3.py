"""SO(3) and so(3) Lie group operations in JAX.

Rotations are stored as unit quaternions in (w, x, y, z) order and their Lie
algebra as 3D rotation vectors (axis scaled by angle). All functions are pure,
JIT-able, and broadcast over leading batch dimensions.
"""

import jax
import jax.numpy as jnp

Array = jax.Array

# Shared by the SO(3) and SE(3) exp/log maps. Must stay a single constant so
# that log(exp(x)) round trips across the small-angle branch.
SMALL_ANGLE_THRESHOLD = 1e-6


def identity(batch_shape=(), dtype=jnp.float64) -> Array:
    """Identity rotation as a (..., 4) quaternion."""
    q = jnp.array([1.0, 0.0, 0.0, 0.0], dtype=dtype)
    return jnp.broadcast_to(q, tuple(batch_shape) + (4,))


def normalize(q: Array) -> Array:
    """Normalize quaternions to unit length."""
    return q / jnp.linalg.norm(q, axis=-1, keepdims=True)


def multiply(q1: Array, q2: Array) -> Array:
    """
    Hamilton product of two quaternions, i.e. the rotation q1 ∘ q2.

    Args:
        q1: (..., 4) first quaternion
        q2: (..., 4) second quaternion

    Returns:
        (..., 4) quaternion applying q2 first, then q1
    """
    w1, x1, y1, z1 = jnp.moveaxis(q1, -1, 0)
    w2, x2, y2, z2 = jnp.moveaxis(q2, -1, 0)

    return jnp.stack([
        w1 * w2 - x1 * x2 - y1 * y2 - z1 * z2,
        w1 * x2 + x1 * w2 + y1 * z2 - z1 * y2,
        w1 * y2 - x1 * z2 + y1 * w2 + z1 * x2,
        w1 * z2 + x1 * y2 - y1 * x2 + z1 * w2,
    ], axis=-1)


def inverse(q: Array) -> Array:
    """
    Inverse of a unit quaternion (its conjugate).

    Args:
        q: (..., 4) unit quaternion

    Returns:
        (..., 4) inverse quaternion
    """
    return q * jnp.array([1.0, -1.0, -1.0, -1.0], dtype=q.dtype)


def exp(log_r: Array) -> Array:
    """
    SO(3) exponential map: convert a rotation vector to a unit quaternion.

    Args:
        log_r: (..., 3) array of rotation vectors (axis * angle)

    Returns:
        (..., 4) array of unit quaternions
    """
    angle = jnp.linalg.norm(log_r, axis=-1, keepdims=True)
    small_angle = angle < SMALL_ANGLE_THRESHOLD
    safe_angle = jnp.where(small_angle, 1.0, angle)

    half = angle / 2.0
    # sin(θ/2)/θ -> 1/2 - θ²/48 near zero
    scale = jnp.where(small_angle, 0.5 - angle**2 / 48.0, jnp.sin(half) / safe_angle)

    q = jnp.concatenate([jnp.cos(half), scale * log_r], axis=-1)
    return normalize(q)


def log(q: Array) -> Array:
    """
    SO(3) logarithm map: convert a unit quaternion to a rotation vector.

    The returned angle lies in [0, π]; q and -q map to the same vector.

    Args:
        q: (..., 4) array of unit quaternions

    Returns:
        (..., 3) array of rotation vectors
    """
    # Pick the hemisphere with non-negative scalar part (shortest rotation)
    q = jnp.where(q[..., 0:1] < 0, -q, q)
    w, vec = q[..., 0:1], q[..., 1:]

    sin_half = jnp.linalg.norm(vec, axis=-1, keepdims=True)
    angle = 2.0 * jnp.arctan2(sin_half, w)

    small_angle = angle < SMALL_ANGLE_THRESHOLD
    safe_sin_half = jnp.where(small_angle, 1.0, sin_half)
    safe_w = jnp.where(small_angle, w, 1.0)

    return jnp.where(small_angle, 2.0 * vec / safe_w, vec * (angle / safe_sin_half))


def angle(q: Array) -> Array:
    """
    Rotation angle of a quaternion in [0, π].

    Args:
        q: (..., 4) array of unit quaternions

    Returns:
        (...) array of angles
    """
    sin_half = jnp.linalg.norm(q[..., 1:], axis=-1)
    return 2.0 * jnp.arctan2(sin_half, jnp.abs(q[..., 0]))


def apply(q: Array, v: Array) -> Array:
    """
    Rotate vector(s) by a quaternion.

    Args:
        q: (..., 4) unit quaternion
        v: (..., 3) or (..., N, 3) vector(s) to rotate

    Returns:
        (..., 3) or (..., N, 3) rotated vector(s)
    """
    if v.ndim == q.ndim + 1:  # Multiple vectors case
        q = q[..., None, :]
    w, u = q[..., 0:1], q[..., 1:]

    # v' = v + 2w (u × v) + 2 u × (u × v)
    uv = jnp.cross(u, v)
    return v + 2.0 * w * uv + 2.0 * jnp.cross(u, uv)


def as_matrix(q: Array) -> Array:
    """
    Convert quaternions to rotation matrices.

    Args:
        q: (..., 4) array of quaternions in (w, x, y, z) format

    Returns:
        (..., 3, 3) array of rotation matrices
    """
    w, x, y, z = jnp.moveaxis(normalize(q), -1, 0)

    xx, yy, zz = x*x, y*y, z*z
    wx, wy, wz = w*x, w*y, w*z
    xy, xz, yz = x*y, x*z, y*z

    return jnp.stack([
        jnp.stack([1 - 2*(yy + zz), 2*(xy - wz), 2*(xz + wy)], axis=-1),
        jnp.stack([2*(xy + wz), 1 - 2*(xx + zz), 2*(yz - wx)], axis=-1),
        jnp.stack([2*(xz - wy), 2*(yz + wx), 1 - 2*(xx + yy)], axis=-1)
    ], axis=-2)


def from_matrix(matrix: Array) -> Array:
    """
    Convert rotation matrices to quaternions (w, x, y, z).

    Picks the numerically best of the four standard extraction branches per
    batch element, so it stays accurate for rotations close to π.

    Args:
        matrix: (..., 3, 3) array of rotation matrices

    Returns:
        (..., 4) array of unit quaternions with non-negative w
    """
    m = matrix
    trace = m[..., 0, 0] + m[..., 1, 1] + m[..., 2, 2]
    eps = jnp.finfo(m.dtype).eps

    candidates = jnp.stack([
        jnp.stack([1.0 + trace,
                   m[..., 2, 1] - m[..., 1, 2],
                   m[..., 0, 2] - m[..., 2, 0],
                   m[..., 1, 0] - m[..., 0, 1]], axis=-1),
        jnp.stack([m[..., 2, 1] - m[..., 1, 2],
                   1.0 + m[..., 0, 0] - m[..., 1, 1] - m[..., 2, 2],
                   m[..., 0, 1] + m[..., 1, 0],
                   m[..., 0, 2] + m[..., 2, 0]], axis=-1),
        jnp.stack([m[..., 0, 2] - m[..., 2, 0],
                   m[..., 0, 1] + m[..., 1, 0],
                   1.0 - m[..., 0, 0] + m[..., 1, 1] - m[..., 2, 2],
                   m[..., 1, 2] + m[..., 2, 1]], axis=-1),
        jnp.stack([m[..., 1, 0] - m[..., 0, 1],
                   m[..., 0, 2] + m[..., 2, 0],
                   m[..., 1, 2] + m[..., 2, 1],
                   1.0 - m[..., 0, 0] - m[..., 1, 1] + m[..., 2, 2]], axis=-1),
    ], axis=-2)  # (..., 4, 4)

    # The largest diagonal term of each candidate is its best-conditioned one
    pivots = jnp.stack([
        trace,
        m[..., 0, 0],
        m[..., 1, 1],
        m[..., 2, 2],
    ], axis=-1)
    best = jnp.argmax(pivots, axis=-1)

    q = jnp.take_along_axis(candidates, best[..., None, None], axis=-2)[..., 0, :]
    q = q / jnp.maximum(jnp.linalg.norm(q, axis=-1, keepdims=True), eps)

    return jnp.where(q[..., 0:1] < 0, -q, q)
