"""
JAX array-level Lie group operations used by the frame algebra.

This module provides pure, JIT-compilable implementations of:
- SO(3) rotations as unit quaternions (so3 module)
- SE(3) rigid body transforms as rotation/translation pairs (se3 module)
- R^3 translations (r3 module)

All functions are pure, stateless, and carry no coordinate-frame information;
frame checking lives one layer up in ``jax_frames.group`` and ``jax_frames.lie``.
"""

from . import so3
from . import se3
from . import r3
from .se3 import Isometry3, Twist
from .so3 import SMALL_ANGLE_THRESHOLD

__all__ = [
    "so3",
    "se3",
    "r3",
    "Isometry3",
    "Twist",
    "SMALL_ANGLE_THRESHOLD",
]
