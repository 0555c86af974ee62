"""Coordinate systems and the points written relative to them.

A ``CoordinateSystem`` is a frame tag, a logical time and a manifold tag. A
``Point`` holds coordinates expressed in exactly one coordinate system:

    - SO3: (4,) unit quaternion
    - SE3: ``Isometry3``
    - R3, so3: (3,) vector
    - se3: ``Twist``
    - RP2: (2,) image-plane coordinates
"""

from dataclasses import dataclass
from typing import Any

import jax
import jax.numpy as jnp
from flax import struct

from ..config import config
from ..errors import NonFiniteCoordinatesError
from .frames import CoordinateFrame, FrameId
from .manifold import Manifold


@dataclass(frozen=True)
class CoordinateSystemId:
    """Static identity of a coordinate system: which frame, which manifold.

    E.g. ``CoordinateSystemId(StereoFrame.LEFT_CAMERA, Manifold.SE3)`` for the
    left camera pose and ``CoordinateSystemId(StereoFrame.LEFT_CAMERA,
    Manifold.RP2)`` for its image plane.
    """
    frame_id: FrameId
    manifold: Manifold

    def at_time(self, time: int) -> "CoordinateSystem":
        return CoordinateSystem.at_time(self, time)

    def __str__(self):
        return f"{self.frame_id.name}/{self.manifold.name}"


@dataclass(frozen=True)
class CoordinateSystem:
    """A frame at a time, with the manifold its coordinates live on.

    Two coordinate systems are equal iff frame id, time and manifold all match.
    """
    frame: CoordinateFrame
    manifold: Manifold

    @classmethod
    def at_frame(cls, frame: CoordinateFrame, manifold: Manifold) -> "CoordinateSystem":
        return cls(frame=frame, manifold=manifold)

    @classmethod
    def at_time(cls, system_id: CoordinateSystemId, time: int) -> "CoordinateSystem":
        return cls(frame=CoordinateFrame.at_time(system_id.frame_id, time), manifold=system_id.manifold)

    @property
    def id(self) -> CoordinateSystemId:
        return CoordinateSystemId(self.frame.id, self.manifold)

    @property
    def time(self) -> int:
        return self.frame.time

    def with_manifold(self, manifold: Manifold) -> "CoordinateSystem":
        """Same frame and time, different manifold."""
        return CoordinateSystem(frame=self.frame, manifold=manifold)

    def __str__(self):
        return f"{self.frame}/{self.manifold.name}"


def check_finite(coordinates: Any) -> None:
    """Reject NaN/inf coordinates when ``config.check_finite`` is enabled.

    Traced values cannot be inspected and are skipped.

    Raises:
        NonFiniteCoordinatesError: if any concrete leaf is not finite
    """
    if not config.check_finite:
        return
    for leaf in jax.tree_util.tree_leaves(coordinates):
        try:
            finite = bool(jnp.all(jnp.isfinite(leaf)))
        except jax.errors.ConcretizationTypeError:
            continue
        if not finite:
            raise NonFiniteCoordinatesError(f"coordinates must be finite, got {coordinates!r}")


@struct.dataclass
class Point:
    """Coordinates anchored to a coordinate system.

    The coordinate system is static pytree metadata, so points can be passed
    through ``jax.jit``/``jax.vmap`` and frame checks still run at trace time.

    Attributes:
        coordinate_system: the system the coordinates are written in.
                           Marked as a static field for JIT compilation.
        coordinates: array or pytree of arrays in the manifold's representation
    """
    coordinate_system: CoordinateSystem = struct.field(pytree_node=False)
    coordinates: Any

    # compared by identity; coordinates are arrays
    __eq__ = object.__eq__
    __hash__ = object.__hash__

    @classmethod
    def new(cls, coordinate_system: CoordinateSystem, coordinates: Any) -> "Point":
        check_finite(coordinates)
        return cls(coordinate_system=coordinate_system, coordinates=coordinates)

    @property
    def manifold(self) -> Manifold:
        return self.coordinate_system.manifold


ManifoldElement = Point
