"""
JAX Frames: frame- and time-checked coordinate algebra for multi-sensor robots.

Values are anchored to a coordinate system (frame tag, logical time, manifold)
and transformed between systems with run-time checks against mixing frames or
time instants. Lie exp/log maps provide geodesic interpolation of poses.
"""

import jax
jax.config.update("jax_enable_x64", True)

# Import core modules
from . import transforms
from . import core
from .config import config
from .core import (
    CoordinateFrame,
    CoordinateSystem,
    CoordinateSystemId,
    FrameId,
    Manifold,
    ManifoldElement,
    Point,
)
from .errors import (
    FrameMismatchError,
    MalformedTransformError,
    ManifoldError,
    NonFiniteCoordinatesError,
)
from .group import group_mul, identity_at, invert
from .lie import LieAlgebraPoint, exp, lerp_to, log_of, scale_by
from .transform import ProjectiveTransform, Transform
from .static_transform import StaticProjectiveTransform, StaticTransform
from .posture import Direction, Posture

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "config",
    "CoordinateFrame",
    "CoordinateSystem",
    "CoordinateSystemId",
    "FrameId",
    "Manifold",
    "ManifoldElement",
    "Point",
    "FrameMismatchError",
    "MalformedTransformError",
    "ManifoldError",
    "NonFiniteCoordinatesError",
    "group_mul",
    "identity_at",
    "invert",
    "LieAlgebraPoint",
    "exp",
    "lerp_to",
    "log_of",
    "scale_by",
    "Transform",
    "ProjectiveTransform",
    "StaticTransform",
    "StaticProjectiveTransform",
    "Direction",
    "Posture",
]
