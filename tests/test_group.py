"""Tests for the group algebra over points."""

import hypothesis
import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_frames import FrameMismatchError, ManifoldError, Point, group_mul, identity_at, invert
from jax_frames.core import CoordinateSystemId, GenericFrame, LEFT_CAMERA_IMAGE, Manifold
from jax_frames.transforms import se3, so3

hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)

SO3_A = CoordinateSystemId(GenericFrame.A, Manifold.SO3).at_time(0)
SE3_A = CoordinateSystemId(GenericFrame.A, Manifold.SE3).at_time(0)
R3_A = CoordinateSystemId(GenericFrame.A, Manifold.R3).at_time(0)


def random_pose(key):
    key_t, key_q = jax.random.split(key)
    translation = jax.random.uniform(key_t, (3,), minval=-5.0, maxval=5.0)
    rotation = so3.normalize(jax.random.normal(key_q, (4,)))
    return se3.from_parts(translation, rotation)


def random_element(manifold, key):
    if manifold is Manifold.SO3:
        return Point.new(SO3_A, so3.normalize(jax.random.normal(key, (4,))))
    if manifold is Manifold.SE3:
        return Point.new(SE3_A, random_pose(key))
    return Point.new(R3_A, jax.random.uniform(key, (3,), minval=-5.0, maxval=5.0))


def assert_elements_close(a, b, atol=1e-4):
    assert a.coordinate_system == b.coordinate_system
    manifold = a.coordinate_system.manifold
    if manifold is Manifold.SO3:
        assert so3.angle(so3.multiply(so3.inverse(a.coordinates), b.coordinates)) < atol
    elif manifold is Manifold.SE3:
        assert so3.angle(so3.multiply(so3.inverse(a.coordinates.rotation), b.coordinates.rotation)) < atol
        np.testing.assert_allclose(a.coordinates.translation, b.coordinates.translation, atol=atol)
    else:
        np.testing.assert_allclose(a.coordinates, b.coordinates, atol=atol)


@pytest.mark.parametrize("manifold", [Manifold.SO3, Manifold.SE3, Manifold.R3])
@given(seed=st.integers(min_value=0, max_value=100))
@settings(deadline=None, max_examples=20)
def test_group_axioms(manifold, seed):
    """Associativity, identity and inverse for same-coordinate-system elements."""
    ka, kb, kc = jax.random.split(jax.random.PRNGKey(seed), 3)
    a, b, c = (random_element(manifold, k) for k in (ka, kb, kc))
    e = identity_at(a.coordinate_system)

    assert_elements_close(group_mul(group_mul(a, b), c), group_mul(a, group_mul(b, c)))
    assert_elements_close(group_mul(a, e), a)
    assert_elements_close(group_mul(e, a), a)
    assert_elements_close(group_mul(a, invert(a)), e)
    assert_elements_close(group_mul(invert(a), a), e)


def test_identity_representations():
    np.testing.assert_allclose(identity_at(SO3_A).coordinates, jnp.array([1.0, 0.0, 0.0, 0.0]))
    pose = identity_at(SE3_A).coordinates
    np.testing.assert_allclose(pose.rotation, jnp.array([1.0, 0.0, 0.0, 0.0]))
    np.testing.assert_allclose(pose.translation, jnp.zeros(3))
    np.testing.assert_allclose(identity_at(R3_A).coordinates, jnp.zeros(3))


def test_se3_group_mul_is_isometry_composition():
    a = Point.new(SE3_A, se3.from_parts(jnp.array([1.0, 0.0, 0.0]), so3.exp(jnp.array([0.0, 0.0, jnp.pi / 2]))))
    b = Point.new(SE3_A, se3.from_parts(jnp.array([1.0, 0.0, 0.0])))

    ab = group_mul(a, b)

    # R_a t_b + t_a
    np.testing.assert_allclose(ab.coordinates.translation, jnp.array([1.0, 1.0, 0.0]), atol=1e-12)
    np.testing.assert_allclose(ab.coordinates.rotation, a.coordinates.rotation, atol=1e-12)


def test_r3_group_mul_is_addition():
    a = Point.new(R3_A, jnp.array([1.0, 2.0, 3.0]))
    b = Point.new(R3_A, jnp.array([0.5, 0.5, 0.5]))
    np.testing.assert_allclose(group_mul(a, b).coordinates, jnp.array([1.5, 2.5, 3.5]))
    np.testing.assert_allclose(invert(a).coordinates, jnp.array([-1.0, -2.0, -3.0]))


def test_group_mul_rejects_different_times():
    a = Point.new(SO3_A, so3.identity())
    b = Point.new(CoordinateSystemId(GenericFrame.A, Manifold.SO3).at_time(1), so3.identity())
    with pytest.raises(FrameMismatchError):
        group_mul(a, b)


def test_group_mul_rejects_different_frames():
    a = Point.new(SO3_A, so3.identity())
    b = Point.new(CoordinateSystemId(GenericFrame.B, Manifold.SO3).at_time(0), so3.identity())
    with pytest.raises(FrameMismatchError):
        group_mul(a, b)


def test_group_mul_does_not_mutate_operands():
    a = Point.new(R3_A, jnp.array([1.0, 2.0, 3.0]))
    b = Point.new(R3_A, jnp.array([1.0, 1.0, 1.0]))
    group_mul(a, b)
    invert(a)
    np.testing.assert_allclose(a.coordinates, jnp.array([1.0, 2.0, 3.0]))
    np.testing.assert_allclose(b.coordinates, jnp.array([1.0, 1.0, 1.0]))


def test_image_plane_is_not_a_group():
    with pytest.raises(ManifoldError):
        identity_at(LEFT_CAMERA_IMAGE.at_time(0))
