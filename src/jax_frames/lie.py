"""Lie exponential/logarithm maps and geodesic interpolation between points.

The logarithm of ``q`` seen from ``p`` is the tangent vector at ``p`` that
reaches ``q``: ``log(p^-1 ∘ q)``, kept together with its anchor ``p`` as a
``LieAlgebraPoint``. The exponential maps such a tangent vector back onto the
group and composes it onto the anchor, so

    lerp_to(p, q, alpha) = exp(scale_by(log_of(p, q), alpha))

walks the constant-velocity geodesic from p (alpha = 0) to q (alpha = 1).

SO(3) uses the rotation vector of the relative rotation, SE(3) the closed-form
screw-motion twist and R^3 plain vector differences. All maps share
``transforms.SMALL_ANGLE_THRESHOLD``.
"""

from dataclasses import dataclass
from typing import Any, Callable

import jax
from flax import struct

from .core import CoordinateSystem, Manifold, Point
from .core.coordinate_system import check_finite
from .errors import FrameMismatchError, ManifoldError, check_same_coordinate_system
from .group import group_mul, invert
from .transforms import r3, se3, so3


def _scale_vector(x: jax.Array, scalar) -> jax.Array:
    return x * scalar


@dataclass(frozen=True)
class LieOps:
    """Algebra primitives of one Lie group, taken at the identity.

    Attributes:
        log: group element -> algebra coordinates
        exp: algebra coordinates -> group element
        scale: (algebra coordinates, scalar) -> algebra coordinates
    """
    log: Callable
    exp: Callable
    scale: Callable


_LIE_OPS = {
    Manifold.SO3: LieOps(log=so3.log, exp=so3.exp, scale=_scale_vector),
    Manifold.SE3: LieOps(log=se3.log, exp=se3.exp, scale=se3.scale_twist),
    Manifold.R3: LieOps(log=r3.log, exp=r3.exp, scale=_scale_vector),
}


def lie_ops(group: Manifold) -> LieOps:
    """Look up the exp/log primitives of a Lie group.

    Raises:
        ManifoldError: if ``group`` is not a Lie group
    """
    try:
        return _LIE_OPS[group]
    except KeyError:
        raise ManifoldError(f"{group.name} is not a Lie group") from None


@struct.dataclass
class LieAlgebraPoint:
    """Tangent-space coordinates anchored at a group element.

    Attributes:
        tangent_at: group element whose tangent space holds the coordinates
        coordinate_system: algebra-tagged system, same frame and time as the
                           anchor. Marked as a static field for JIT compilation.
        coordinates: rotation vector (so3), ``Twist`` (se3) or vector (R3)
    """
    tangent_at: Point
    coordinate_system: CoordinateSystem = struct.field(pytree_node=False)
    coordinates: Any

    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @classmethod
    def new(cls, tangent_at: Point, coordinate_system: CoordinateSystem, coordinates: Any) -> "LieAlgebraPoint":
        """
        Build a tangent vector at ``tangent_at``.

        Raises:
            FrameMismatchError: if the frame or time differs from the anchor's
            ManifoldError: if the manifold is not the anchor group's algebra
        """
        anchor_system = tangent_at.coordinate_system
        if coordinate_system.frame != anchor_system.frame:
            raise FrameMismatchError(
                f"Lie algebra coordinate system {coordinate_system!r} is not at the frame of "
                f"its anchor {anchor_system!r}.",
                expected=anchor_system,
                actual=coordinate_system,
            )
        if coordinate_system.manifold != anchor_system.manifold.algebra:
            raise ManifoldError(
                f"{coordinate_system.manifold.name} is not the Lie algebra of "
                f"{anchor_system.manifold.name}"
            )
        check_finite(coordinates)
        return cls(tangent_at=tangent_at, coordinate_system=coordinate_system, coordinates=coordinates)

    def scale_by(self, scalar) -> "LieAlgebraPoint":
        return scale_by(self, scalar)

    def to_group_element(self) -> Point:
        return exp(self)


def algebra_system(coordinate_system: CoordinateSystem) -> CoordinateSystem:
    """The Lie algebra coordinate system at the same frame and time."""
    return coordinate_system.with_manifold(coordinate_system.manifold.algebra)


def log_of(p: Point, q: Point) -> LieAlgebraPoint:
    """
    Logarithm of ``q`` in the tangent space at ``p``.

    Args:
        p: anchor group element
        q: target group element in the same coordinate system

    Returns:
        LieAlgebraPoint anchored at ``p`` holding ``log(p^-1 ∘ q)``

    Raises:
        FrameMismatchError: if the coordinate systems differ
    """
    check_same_coordinate_system(p.coordinate_system, q.coordinate_system)
    ops = lie_ops(p.coordinate_system.manifold)
    relative = group_mul(invert(p), q)
    return LieAlgebraPoint(
        tangent_at=p,
        coordinate_system=algebra_system(p.coordinate_system),
        coordinates=ops.log(relative.coordinates),
    )


def exp(algebra_point: LieAlgebraPoint) -> Point:
    """
    Map tangent coordinates back to the group, composed onto their anchor.

    Returns:
        ``tangent_at ∘ exp(coordinates)`` in the anchor's coordinate system
    """
    base = algebra_point.tangent_at
    ops = lie_ops(base.coordinate_system.manifold)
    step = Point(coordinate_system=base.coordinate_system, coordinates=ops.exp(algebra_point.coordinates))
    return group_mul(base, step)


def scale_by(algebra_point: LieAlgebraPoint, scalar) -> LieAlgebraPoint:
    """Scale tangent coordinates, keeping the anchor."""
    ops = lie_ops(algebra_point.tangent_at.coordinate_system.manifold)
    return algebra_point.replace(coordinates=ops.scale(algebra_point.coordinates, scalar))


def lerp_to(p: Point, q: Point, alpha) -> Point:
    """
    Geodesic interpolation from ``p`` (alpha = 0) to ``q`` (alpha = 1).

    For SE(3) the path is a screw motion: constant angular and linear velocity
    in the body frame of ``p``, not a per-coordinate blend.

    Raises:
        FrameMismatchError: if the coordinate systems differ
    """
    return exp(scale_by(log_of(p, q), alpha))
