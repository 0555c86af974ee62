"""Group algebra over points on group manifolds.

Each group manifold has one ``GroupOps`` capability object holding its
identity, composition and inverse. The functions here check coordinate systems
and dispatch on the manifold tag of the point's coordinate system.
"""

from dataclasses import dataclass
from typing import Callable

from .core import CoordinateSystem, Manifold, Point
from .errors import ManifoldError, check_same_coordinate_system
from .transforms import r3, se3, so3


@dataclass(frozen=True)
class GroupOps:
    """Group primitives for one representation.

    Attributes:
        identity: () -> neutral element
        multiply: (a, b) -> a ∘ b
        inverse: a -> a^-1
    """
    identity: Callable
    multiply: Callable
    inverse: Callable


_GROUP_OPS = {
    Manifold.SO3: GroupOps(identity=so3.identity, multiply=so3.multiply, inverse=so3.inverse),
    Manifold.SE3: GroupOps(identity=se3.identity, multiply=se3.multiply, inverse=se3.inverse),
    Manifold.R3: GroupOps(identity=r3.identity, multiply=r3.multiply, inverse=r3.inverse),
    # Lie algebras are vector spaces under addition
    Manifold.so3: GroupOps(identity=r3.identity, multiply=r3.multiply, inverse=r3.inverse),
    Manifold.se3: GroupOps(identity=se3.zero_twist, multiply=se3.add_twists, inverse=se3.negate_twist),
}


def group_ops(manifold: Manifold) -> GroupOps:
    """Look up the group primitives of ``manifold``.

    Raises:
        ManifoldError: if the manifold is not a group
    """
    try:
        return _GROUP_OPS[manifold]
    except KeyError:
        raise ManifoldError(f"{manifold.name} is not a group") from None


def identity_at(coordinate_system: CoordinateSystem) -> Point:
    """The neutral element of the coordinate system's group."""
    ops = group_ops(coordinate_system.manifold)
    return Point(coordinate_system=coordinate_system, coordinates=ops.identity())


def group_mul(a: Point, b: Point) -> Point:
    """
    Compose two group elements, a ∘ b.

    Args:
        a: left operand
        b: right operand, in the same coordinate system as ``a``

    Returns:
        Point in the shared coordinate system

    Raises:
        FrameMismatchError: if the coordinate systems differ
    """
    check_same_coordinate_system(a.coordinate_system, b.coordinate_system)
    ops = group_ops(a.coordinate_system.manifold)
    return Point(coordinate_system=a.coordinate_system, coordinates=ops.multiply(a.coordinates, b.coordinates))


def invert(a: Point) -> Point:
    """Group inverse, in the same coordinate system."""
    ops = group_ops(a.coordinate_system.manifold)
    return Point(coordinate_system=a.coordinate_system, coordinates=ops.inverse(a.coordinates))
