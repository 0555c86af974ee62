"""Core data structures: frame identity, manifold tags, coordinate systems and points.

These are the immutable values every other module operates on.
"""

from .frames import CoordinateFrame, FrameId
from .manifold import Manifold
from .coordinate_system import CoordinateSystem, CoordinateSystemId, ManifoldElement, Point
from .frame_ids import (
    GenericFrame,
    StereoFrame,
    LEFT_CAMERA_SE3,
    LEFT_CAMERA_IMAGE,
    RIGHT_CAMERA_SE3,
    RIGHT_CAMERA_IMAGE,
)

__all__ = [
    "CoordinateFrame",
    "FrameId",
    "Manifold",
    "CoordinateSystem",
    "CoordinateSystemId",
    "ManifoldElement",
    "Point",
    "GenericFrame",
    "StereoFrame",
    "LEFT_CAMERA_SE3",
    "LEFT_CAMERA_IMAGE",
    "RIGHT_CAMERA_SE3",
    "RIGHT_CAMERA_IMAGE",
]
