"""Manifold classification tags.

Every coordinate system carries one ``Manifold`` tag naming the shape of its
representation space. The tags are a closed set; capability flags and the
Lie group <-> Lie algebra pairing are looked up in the tables below.
"""

import enum

from ..errors import ManifoldError


class Manifold(enum.Enum):
    """Representation space of a coordinate system."""

    SO3 = "SO3"  # rotations, unit quaternions
    so3 = "so3"  # rotation vectors
    SE3 = "SE3"  # rigid poses, Isometry3
    se3 = "se3"  # twists
    R3 = "R3"    # translations, self-paired
    RP2 = "RP2"  # image plane
    SE2 = "SE2"
    SO2 = "SO2"
    R2 = "R2"

    @property
    def is_manifold(self) -> bool:
        return True

    @property
    def is_differentiable(self) -> bool:
        return True

    @property
    def is_group(self) -> bool:
        return self in _GROUPS

    @property
    def is_vector_space(self) -> bool:
        return self in _VECTOR_SPACES

    @property
    def is_lie_group(self) -> bool:
        return self in _GROUP_TO_ALGEBRA

    @property
    def is_lie_algebra(self) -> bool:
        return self in _ALGEBRA_TO_GROUP

    @property
    def algebra(self) -> "Manifold":
        """The Lie algebra paired with this Lie group.

        Raises:
            ManifoldError: if this manifold is not a Lie group
        """
        try:
            return _GROUP_TO_ALGEBRA[self]
        except KeyError:
            raise ManifoldError(f"{self.name} is not a Lie group") from None

    @property
    def group(self) -> "Manifold":
        """The Lie group paired with this Lie algebra.

        Raises:
            ManifoldError: if this manifold is not a Lie algebra
        """
        try:
            return _ALGEBRA_TO_GROUP[self]
        except KeyError:
            raise ManifoldError(f"{self.name} is not a Lie algebra") from None


_VECTOR_SPACES = frozenset({Manifold.so3, Manifold.se3, Manifold.R3})

_GROUPS = frozenset({Manifold.SO3, Manifold.SE3}) | _VECTOR_SPACES

_GROUP_TO_ALGEBRA = {
    Manifold.SO3: Manifold.so3,
    Manifold.SE3: Manifold.se3,
    Manifold.R3: Manifold.R3,
}

_ALGEBRA_TO_GROUP = {algebra: group for group, algebra in _GROUP_TO_ALGEBRA.items()}

assert len(_ALGEBRA_TO_GROUP) == len(_GROUP_TO_ALGEBRA), "Lie pairing must be one-to-one"
