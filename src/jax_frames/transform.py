"""Transforms between coordinate systems.

A ``Transform`` with ``dst = A`` and ``src = B`` stores the origin of B written
as a point in A. It maps points from B to A by group multiplication, and is
itself a group element, so transforms invert and compose with the group law.
Every operation checks the coordinate systems it chains through and raises
``FrameMismatchError`` on a mismatch, timestamps included.

``ProjectiveTransform`` maps SE(3) poses onto an image plane through a camera
intrinsics matrix. It can only be applied.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
import numpy as np
from jax.tree_util import register_pytree_node_class

from .core import CoordinateSystem, Manifold, Point
from .core.coordinate_system import check_finite
from .errors import MalformedTransformError, ManifoldError, check_same_coordinate_system
from .group import group_mul, identity_at, invert
from .transforms import se3

Array = jax.Array

logger = logging.getLogger(__name__)

_NORMALIZATION_ROW = np.array([0.0, 0.0, 1.0])


@register_pytree_node_class  # let Transform work with jit / grad / vmap …
@dataclass(frozen=True, eq=False)
class Transform:
    """Immutable transform from ``src`` to ``dst`` on a group manifold.

    Transforms compare and hash by identity.

    Attributes:
        dst: coordinate system of points after applying the transform
        src: coordinate system of points before applying the transform
        representation: origin of ``src`` written in ``dst``, in the
                        manifold's representation
    """
    dst: CoordinateSystem
    src: CoordinateSystem
    representation: Any

    def __post_init__(self):
        if self.dst.manifold != self.src.manifold:
            raise MalformedTransformError(
                f"Transform endpoints must share a manifold, got {self.dst.manifold.name} "
                f"and {self.src.manifold.name}; use ProjectiveTransform between manifolds."
            )
        if not self.dst.manifold.is_group:
            raise ManifoldError(f"{self.dst.manifold.name} is not a group")

    # Constructors
    @classmethod
    def new(cls, dst: CoordinateSystem, src: CoordinateSystem, representation: Any) -> "Transform":
        check_finite(representation)
        return cls(dst=dst, src=src, representation=representation)

    @classmethod
    def identity_at(cls, coordinate_system: CoordinateSystem) -> "Transform":
        """Identity transform from ``coordinate_system`` to itself."""
        identity_point = identity_at(coordinate_system)
        return cls(dst=coordinate_system, src=coordinate_system, representation=identity_point.coordinates)

    @classmethod
    def from_matrix(cls, dst: CoordinateSystem, src: CoordinateSystem, matrix: Array) -> "Transform":
        """SE(3) transform from a (4, 4) homogeneous matrix."""
        if dst.manifold != Manifold.SE3:
            raise ManifoldError(f"homogeneous matrices describe SE3 transforms, not {dst.manifold.name}")
        return cls.new(dst, src, se3.from_matrix(jnp.asarray(matrix, dtype=jnp.float64)))

    # PyTree boiler-plate
    def tree_flatten(self):
        return (self.representation,), (self.dst, self.src)

    @classmethod
    def tree_unflatten(cls, aux, children):
        dst, src = aux
        (representation,) = children
        return cls(dst=dst, src=src, representation=representation)

    # Basic operations
    def as_point(self) -> Point:
        """The origin of ``src`` as a point in ``dst``."""
        return Point(coordinate_system=self.dst, coordinates=self.representation)

    def transform(self, point: Point) -> Point:
        """
        Re-express ``point`` from ``src`` in ``dst``.

        Raises:
            FrameMismatchError: if ``point`` is not in ``src``
        """
        check_same_coordinate_system(self.src, point.coordinate_system, "Point")
        point_in_dst = Point(coordinate_system=self.dst, coordinates=point.coordinates)
        return group_mul(self.as_point(), point_in_dst)

    def invert(self) -> "Transform":
        """Transform from ``dst`` back to ``src``."""
        return Transform(dst=self.src, src=self.dst, representation=invert(self.as_point()).coordinates)

    def compose_with(self, rhs: "Transform") -> "Transform":
        """
        Self ∘ rhs (apply *rhs* first, then self).

        Raises:
            FrameMismatchError: if ``self.src`` differs from ``rhs.dst``
        """
        check_same_coordinate_system(self.src, rhs.dst, "rhs destination")
        rhs_in_dst = Point(coordinate_system=self.dst, coordinates=rhs.representation)
        composed = group_mul(self.as_point(), rhs_in_dst)
        return Transform(dst=self.dst, src=rhs.src, representation=composed.coordinates)


def validate_intrinsics(k: Array) -> Array:
    """
    Check a camera intrinsics matrix and return it as a float64 array.

    Raises:
        MalformedTransformError: if ``k`` is not 3x3 or its last row is not [0, 0, 1]
    """
    k = jnp.asarray(k, dtype=jnp.float64)
    if k.shape != (3, 3):
        raise MalformedTransformError(f"intrinsics matrix must have shape (3,3), got {k.shape}")
    last_row = np.asarray(k[2])
    if not np.array_equal(last_row, _NORMALIZATION_ROW):
        raise MalformedTransformError(
            f"Last row of camera intrinsics matrix must be [0, 0, 1], got {last_row.tolist()}."
        )
    return k


def _warn_if_behind(depth: Array) -> None:
    try:
        behind = bool(jnp.any(depth <= 0))
    except jax.errors.ConcretizationTypeError:
        return
    if behind:
        logger.warning(
            "Projection had z-coordinate <= 0. Thus the Point may be physically behind the Camera."
        )


@dataclass(frozen=True, eq=False)
class ProjectiveTransform:
    """Pinhole projection from an SE(3) coordinate system to an image plane.

    Attributes:
        dst: RP2 image-plane coordinate system
        src: SE3 coordinate system of the camera
        k: (3, 3) intrinsics matrix with last row [0, 0, 1]
    """
    dst: CoordinateSystem
    src: CoordinateSystem
    k: Array

    def __post_init__(self):
        if self.dst.manifold != Manifold.RP2 or self.src.manifold != Manifold.SE3:
            raise ManifoldError(
                f"ProjectiveTransform maps SE3 to RP2, got {self.src.manifold.name} "
                f"to {self.dst.manifold.name}"
            )
        object.__setattr__(self, "k", validate_intrinsics(self.k))

    @classmethod
    def new(cls, dst: CoordinateSystem, src: CoordinateSystem, k: Array) -> "ProjectiveTransform":
        return cls(dst=dst, src=src, k=k)

    def transform(self, point: Point) -> Point:
        """
        Project the position of an SE(3) point onto the image plane.

        Points at depth <= 0 are logged as a warning and still projected.

        Raises:
            FrameMismatchError: if ``point`` is not in ``src``
        """
        check_same_coordinate_system(self.src, point.coordinate_system, "Point")
        position = se3.get_position(point.coordinates)
        unnormalized = jnp.einsum("ij,...j->...i", self.k, position)
        depth = unnormalized[..., 2:3]
        _warn_if_behind(depth)
        return Point(coordinate_system=self.dst, coordinates=unnormalized[..., :2] / depth)
