"""Exceptions raised by jax_frames.

``FrameMismatchError`` signals a caller bug: values anchored to different
coordinate systems were combined. It derives from ``AssertionError`` so that it
is never mistaken for a recoverable condition and never retried.
"""


class FrameMismatchError(AssertionError):
    """Two coordinate systems that must be equal are not."""

    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class MalformedTransformError(ValueError):
    """A transform was constructed from invalid parameters."""


class ManifoldError(TypeError):
    """An operation was requested on a manifold that lacks the capability."""


class NonFiniteCoordinatesError(ValueError):
    """Coordinates contain NaN or infinite values where they are rejected."""


def check_same_coordinate_system(expected, actual, what: str = "Point") -> None:
    """Raise ``FrameMismatchError`` unless the two coordinate systems are equal."""
    if expected != actual:
        raise FrameMismatchError(
            f"Expected coordinate system {expected!r} does not match {what} "
            f"coordinate system {actual!r}.",
            expected=expected,
            actual=actual,
        )
