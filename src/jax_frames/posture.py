"""SE(2) posture for planar planning and control.

A ``Posture`` is a 2D position plus a heading stored as a unit complex number
(cos, sin). It never holds NaN or -0.0, so equality, ordering and hashing line
up with each other and postures can be used as dictionary keys or sorted.
"""

import enum
import math
from dataclasses import dataclass

import jax
import jax.numpy as jnp

from .errors import NonFiniteCoordinatesError

Array = jax.Array


class Direction(enum.Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


def _validate(name: str, value) -> float:
    value = float(value)
    if math.isnan(value):
        raise NonFiniteCoordinatesError(f"Posture {name} must not be NaN")
    # canonical zero, so str() never shows -0.0
    return 0.0 if value == 0.0 else value


def _wrap_angle(angle: float) -> float:
    """Wrap an angle to [-π, π)."""
    return (angle + math.pi) % (2.0 * math.pi) - math.pi


@dataclass(frozen=True, order=True)
class Posture:
    """Immutable SE(2) pose, ordered by (x, y, re, im).

    Attributes:
        x: position x in meters
        y: position y in meters
        re: cosine of the heading
        im: sine of the heading
    """
    x: float
    y: float
    re: float
    im: float

    def __post_init__(self):
        for name in ("x", "y", "re", "im"):
            object.__setattr__(self, name, _validate(name, getattr(self, name)))

    # Constructors
    @classmethod
    def new(cls, position, angle: float) -> "Posture":
        position = jnp.asarray(position, dtype=jnp.float64)
        return cls(x=position[0], y=position[1], re=jnp.cos(angle), im=jnp.sin(angle))

    @classmethod
    def origin(cls) -> "Posture":
        return cls.new(jnp.zeros(2), 0.0)

    @classmethod
    def from_pt_rot(cls, point, rotation) -> "Posture":
        """From a position and a (cos, sin) rotation, normalized to unit length."""
        point = jnp.asarray(point, dtype=jnp.float64)
        rotation = jnp.asarray(rotation, dtype=jnp.float64)
        rotation = rotation / jnp.linalg.norm(rotation)
        return cls(x=point[0], y=point[1], re=rotation[0], im=rotation[1])

    @classmethod
    def from_isometry(cls, matrix: Array) -> "Posture":
        """From a (3, 3) homogeneous SE(2) matrix."""
        matrix = jnp.asarray(matrix, dtype=jnp.float64)
        if matrix.shape != (3, 3):
            raise ValueError(f"matrix must have shape (3,3), got {matrix.shape}")
        return cls.from_pt_rot(matrix[:2, 2], matrix[:2, 0])

    # Accessors
    def isometry(self) -> Array:
        """(3, 3) homogeneous matrix of this posture."""
        return jnp.array([
            [self.re, -self.im, self.x],
            [self.im, self.re, self.y],
            [0.0, 0.0, 1.0],
        ])

    @property
    def position(self) -> Array:
        return jnp.array([self.x, self.y])

    @property
    def rotation(self) -> Array:
        """Heading as a (cos, sin) unit vector."""
        return jnp.array([self.re, self.im])

    @property
    def angle(self) -> float:
        return math.atan2(self.im, self.re)

    def _rotation_matrix(self) -> Array:
        return self.isometry()[:2, :2]

    # Operations
    def inv_mul(self, rhs: "Posture") -> "Posture":
        """Posture of ``rhs`` relative to this one (self^-1 ∘ rhs)."""
        return Posture.from_isometry(jnp.linalg.solve(self.isometry(), rhs.isometry()))

    def inv_mul_point(self, point) -> Array:
        """Express a world point in this posture's local frame."""
        offset = jnp.asarray(point, dtype=jnp.float64) - self.position
        return self._rotation_matrix().T @ offset

    def translate(self, translation) -> "Posture":
        """Shift the position by a world-frame translation, keeping the heading."""
        position = self.position + jnp.asarray(translation, dtype=jnp.float64)
        return Posture.from_pt_rot(position, self.rotation)

    def natural_direction(self, target: "Posture") -> Direction:
        """
        Direction to drive to ``target`` with the least total rotation.

        Counts both the initial turn towards the target and the final turn on
        arrival, driving either forwards or in reverse.
        """
        if self.position_equals(target):
            return Direction.FORWARD
        dx, dy = float(target.x - self.x), float(target.y - self.y)
        forward_heading = math.atan2(dy, dx)
        forward_initial_turn = abs(_wrap_angle(self.angle - forward_heading))
        forward_final_turn = abs(_wrap_angle(target.angle - forward_heading))
        total_forward_turning = forward_initial_turn + forward_final_turn
        total_backward_turning = math.pi - forward_initial_turn + math.pi - forward_final_turn
        if total_forward_turning <= total_backward_turning:
            return Direction.FORWARD
        return Direction.BACKWARD

    def position_equals(self, other: "Posture") -> bool:
        return self.x == other.x and self.y == other.y

    def __mul__(self, rhs):
        """Compose with another posture, or map a local translation to a world point."""
        if isinstance(rhs, Posture):
            return Posture.from_isometry(self.isometry() @ rhs.isometry())
        try:
            translation = jnp.asarray(rhs, dtype=jnp.float64)
        except (TypeError, ValueError):
            return NotImplemented
        if translation.shape != (2,):
            return NotImplemented
        return self._rotation_matrix() @ translation + self.position

    def __str__(self):
        return f"[{self.x}, {self.y}, {self.angle}]"
