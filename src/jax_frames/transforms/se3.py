"""SE(3) and se(3) Lie group operations in JAX.

This module implements SE(3) rigid body transforms as (rotation quaternion,
translation) pairs and their Lie algebra as twists with separate angular and
linear parts. All functions are pure, JIT-able, and operate on JAX arrays.
The exp/log maps use the closed-form screw-motion formulas, guarded near the
identity by ``so3.SMALL_ANGLE_THRESHOLD``.
"""

import jax
import jax.numpy as jnp
from flax import struct

from . import so3

Array = jax.Array


@struct.dataclass
class Isometry3:
    """Rigid body transform: rotate by ``rotation``, then translate.

    Attributes:
        rotation: (..., 4) unit quaternion in (w, x, y, z) format
        translation: (..., 3) translation vector
    """
    rotation: Array
    translation: Array


@struct.dataclass
class Twist:
    """Element of se(3).

    Attributes:
        w: (..., 3) angular part (rotation vector)
        v: (..., 3) linear part
    """
    w: Array
    v: Array


def identity(batch_shape=(), dtype=jnp.float64) -> Isometry3:
    """Identity transform: no rotation, zero translation."""
    return Isometry3(
        rotation=so3.identity(batch_shape, dtype=dtype),
        translation=jnp.zeros(tuple(batch_shape) + (3,), dtype=dtype),
    )


def from_parts(translation: Array, rotation: Array = None) -> Isometry3:
    """
    Construct an SE(3) transform from a translation and an optional rotation.

    Args:
        translation: (..., 3) translation vector
        rotation: (..., 4) quaternion; identity when omitted

    Returns:
        Isometry3 with broadcast batch shapes
    """
    translation = jnp.asarray(translation, dtype=jnp.float64)
    if rotation is None:
        rotation = so3.identity(translation.shape[:-1])
    rotation = so3.normalize(jnp.asarray(rotation, dtype=jnp.float64))

    batch_shape = jnp.broadcast_shapes(translation.shape[:-1], rotation.shape[:-1])
    return Isometry3(
        rotation=jnp.broadcast_to(rotation, batch_shape + (4,)),
        translation=jnp.broadcast_to(translation, batch_shape + (3,)),
    )


def from_matrix(T: Array) -> Isometry3:
    """
    Convert homogeneous (..., 4, 4) matrices to an Isometry3.

    Raises:
        ValueError: if the trailing shape is not (4, 4)
    """
    if T.shape[-2:] != (4, 4):
        raise ValueError(f"matrix must have shape (...,4,4), got {T.shape}")
    return Isometry3(rotation=so3.from_matrix(T[..., :3, :3]), translation=T[..., :3, 3])


def as_matrix(iso: Isometry3) -> Array:
    """
    Convert an Isometry3 to (..., 4, 4) homogeneous matrices.
    """
    R = so3.as_matrix(iso.rotation)
    batch_shape = R.shape[:-2]

    T = jnp.zeros(batch_shape + (4, 4), dtype=R.dtype)
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(iso.translation)
    T = T.at[..., 3, 3].set(1.0)

    return T


def multiply(a: Isometry3, b: Isometry3) -> Isometry3:
    """
    Compose two SE(3) transforms, a ∘ b (apply b first).

    The rotations compose and the translation is ``R_a t_b + t_a``.
    """
    return Isometry3(
        rotation=so3.multiply(a.rotation, b.rotation),
        translation=so3.apply(a.rotation, b.translation) + a.translation,
    )


def inverse(a: Isometry3) -> Isometry3:
    """
    Inverse of an SE(3) transform: ``(R^-1, -R^-1 t)``.
    """
    r_inv = so3.inverse(a.rotation)
    return Isometry3(rotation=r_inv, translation=-so3.apply(r_inv, a.translation))


def apply(iso: Isometry3, points: Array) -> Array:
    """
    Apply SE(3) transformation to points.

    Args:
        iso: transform to apply
        points: (..., 3) or (..., N, 3) points to transform

    Returns:
        (..., 3) or (..., N, 3) transformed points
    """
    translation = iso.translation
    if points.ndim == translation.ndim + 1:
        translation = translation[..., None, :]
    return so3.apply(iso.rotation, points) + translation


def _split_along(x: Array, axis: Array):
    """Split ``x`` into its components parallel and perpendicular to a unit axis."""
    parallel = jnp.sum(x * axis, axis=-1, keepdims=True) * axis
    return parallel, x - parallel


def exp(twist: Twist) -> Isometry3:
    """
    SE(3) exponential map: convert a twist to a rigid transform.

    With θ = |w| and unit axis ŵ, the linear part splits into v_proj along ŵ
    and v_perp. Then t' = (v_perp × ŵ) / θ and t = (R t' - t') + v_proj.
    Below the small-angle threshold, t = v.

    Args:
        twist: Twist with (..., 3) angular and linear parts

    Returns:
        Isometry3 of the screw motion
    """
    w, v = twist.w, twist.v
    rotation = so3.exp(w)

    theta = jnp.linalg.norm(w, axis=-1, keepdims=True)
    is_small_angle = theta < so3.SMALL_ANGLE_THRESHOLD
    safe_theta = jnp.where(is_small_angle, 1.0, theta)

    w_normed = w / safe_theta
    v_proj, v_perp = _split_along(v, w_normed)
    t_prime = jnp.cross(v_perp, w_normed) / safe_theta
    t = (so3.apply(rotation, t_prime) - t_prime) + v_proj

    translation = jnp.where(is_small_angle, v, t)
    return Isometry3(rotation=rotation, translation=translation)


def log(iso: Isometry3) -> Twist:
    """
    SE(3) logarithm map: convert a rigid transform to a twist.

    Inverse of ``exp``. With w the rotation vector of ``iso`` and θ = |w|, the
    translation splits into t_proj along ŵ and t_perp. Then
    t' = (t_perp × ŵ) / (2 tan(θ/2)) - t_perp / 2 and v = w × t' + t_proj.
    Below the small-angle threshold, v = t.

    Args:
        iso: Isometry3 to take the logarithm of

    Returns:
        Twist with angle |w| in [0, π]
    """
    w = so3.log(iso.rotation)
    t = iso.translation

    theta = jnp.linalg.norm(w, axis=-1, keepdims=True)
    is_small_angle = theta < so3.SMALL_ANGLE_THRESHOLD
    safe_theta = jnp.where(is_small_angle, 1.0, theta)

    w_normed = w / safe_theta
    t_proj, t_perp = _split_along(t, w_normed)
    t_prime = jnp.cross(t_perp, w_normed) / (2.0 * jnp.tan(safe_theta / 2.0)) - t_perp / 2.0
    v = jnp.cross(w, t_prime) + t_proj

    return Twist(w=w, v=jnp.where(is_small_angle, t, v))


def scale_twist(twist: Twist, scalar) -> Twist:
    """Scale both parts of a twist."""
    return Twist(w=twist.w * scalar, v=twist.v * scalar)


def add_twists(a: Twist, b: Twist) -> Twist:
    """Component-wise sum of two twists (se(3) as a vector space)."""
    return Twist(w=a.w + b.w, v=a.v + b.v)


def negate_twist(twist: Twist) -> Twist:
    return Twist(w=-twist.w, v=-twist.v)


def zero_twist(batch_shape=(), dtype=jnp.float64) -> Twist:
    zeros = jnp.zeros(tuple(batch_shape) + (3,), dtype=dtype)
    return Twist(w=zeros, v=zeros)


def get_position(iso: Isometry3) -> Array:
    """Extract the (..., 3) translation of a transform."""
    return iso.translation


def get_rotation(iso: Isometry3) -> Array:
    """Extract the (..., 4) rotation quaternion of a transform."""
    return iso.rotation
