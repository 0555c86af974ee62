"""Static transforms: fixed extrinsics and intrinsics that do not change with time.

A static transform stores only coordinate system ids and a representation. It
becomes a regular ``Transform`` (or ``ProjectiveTransform``) between the two
frames at a given time via ``at_time``. Inverting and composing work on the
stored representation directly.
"""

from dataclasses import dataclass
from typing import Any

import jax

from .core import CoordinateSystemId, Manifold, Point
from .core.coordinate_system import check_finite
from .errors import FrameMismatchError, MalformedTransformError, ManifoldError
from .group import group_ops
from .transform import ProjectiveTransform, Transform, validate_intrinsics

Array = jax.Array


@dataclass(frozen=True, eq=False)
class StaticTransform:
    """Time-invariant transform from ``src_id`` to ``dst_id``.

    Attributes:
        dst_id: destination coordinate system id
        src_id: source coordinate system id
        representation: origin of the source written in the destination
    """
    dst_id: CoordinateSystemId
    src_id: CoordinateSystemId
    representation: Any

    def __post_init__(self):
        if self.dst_id.manifold != self.src_id.manifold:
            raise MalformedTransformError(
                f"StaticTransform endpoints must share a manifold, got {self.dst_id.manifold.name} "
                f"and {self.src_id.manifold.name}"
            )
        if not self.dst_id.manifold.is_group:
            raise ManifoldError(f"{self.dst_id.manifold.name} is not a group")

    @classmethod
    def new(cls, dst_id: CoordinateSystemId, src_id: CoordinateSystemId, representation: Any) -> "StaticTransform":
        check_finite(representation)
        return cls(dst_id=dst_id, src_id=src_id, representation=representation)

    def at_time(self, time: int) -> Transform:
        """The transform between both frames at ``time``."""
        return Transform(dst=self.dst_id.at_time(time), src=self.src_id.at_time(time), representation=self.representation)

    def invert(self) -> "StaticTransform":
        ops = group_ops(self.dst_id.manifold)
        return StaticTransform(dst_id=self.src_id, src_id=self.dst_id, representation=ops.inverse(self.representation))

    def compose_with(self, rhs: "StaticTransform") -> "StaticTransform":
        """
        Self ∘ rhs (apply *rhs* first, then self).

        Raises:
            FrameMismatchError: if ``self.src_id`` differs from ``rhs.dst_id``
        """
        if self.src_id != rhs.dst_id:
            raise FrameMismatchError(
                f"Source coordinate system of `self` {self.src_id} does not match "
                f"destination coordinate system of `rhs` {rhs.dst_id}.",
                expected=self.src_id,
                actual=rhs.dst_id,
            )
        ops = group_ops(self.dst_id.manifold)
        return StaticTransform(
            dst_id=self.dst_id,
            src_id=rhs.src_id,
            representation=ops.multiply(self.representation, rhs.representation),
        )

    def transform(self, point: Point) -> Point:
        """Apply at the time of ``point``."""
        return self.at_time(point.coordinate_system.time).transform(point)


@dataclass(frozen=True, eq=False)
class StaticProjectiveTransform:
    """Time-invariant camera projection from ``src_id`` (SE3) to ``dst_id`` (RP2).

    Attributes:
        dst_id: image-plane coordinate system id
        src_id: camera pose coordinate system id
        k: (3, 3) intrinsics matrix with last row [0, 0, 1]
    """
    dst_id: CoordinateSystemId
    src_id: CoordinateSystemId
    k: Array

    def __post_init__(self):
        if self.dst_id.manifold != Manifold.RP2 or self.src_id.manifold != Manifold.SE3:
            raise ManifoldError(
                f"StaticProjectiveTransform maps SE3 to RP2, got {self.src_id.manifold.name} "
                f"to {self.dst_id.manifold.name}"
            )
        object.__setattr__(self, "k", validate_intrinsics(self.k))

    @classmethod
    def new(cls, dst_id: CoordinateSystemId, src_id: CoordinateSystemId, k: Array) -> "StaticProjectiveTransform":
        return cls(dst_id=dst_id, src_id=src_id, k=k)

    def at_time(self, time: int) -> ProjectiveTransform:
        return ProjectiveTransform(dst=self.dst_id.at_time(time), src=self.src_id.at_time(time), k=self.k)

    def transform(self, point: Point) -> Point:
        """Project at the time of ``point``."""
        return self.at_time(point.coordinate_system.time).transform(point)
