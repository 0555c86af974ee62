"""Tests for the Lie exp/log engine and geodesic interpolation."""

import hypothesis
import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_frames import (
    FrameMismatchError,
    LieAlgebraPoint,
    ManifoldError,
    Point,
    exp,
    group_mul,
    invert,
    lerp_to,
    log_of,
    scale_by,
)
from jax_frames.core import CoordinateSystemId, GenericFrame, Manifold
from jax_frames.transforms import SMALL_ANGLE_THRESHOLD, se3, so3

hypothesis.settings.register_profile("ci", max_examples=10, deadline=None)

SE3_ID = CoordinateSystemId(GenericFrame.A, Manifold.SE3)
SO3_ID = CoordinateSystemId(GenericFrame.A, Manifold.SO3)
R3_ID = CoordinateSystemId(GenericFrame.A, Manifold.R3)


def pose(translation, rotation_vector):
    return se3.from_parts(jnp.array(translation), so3.exp(jnp.array(rotation_vector)))


def relative_angle(p, q):
    return so3.angle(group_mul(invert(p), q).coordinates.rotation)


@pytest.fixture
def p():
    return Point.new(SE3_ID.at_time(0), pose([0.5, 0.6, 0.7], [0.1, 0.2, 0.3]))


@pytest.fixture
def q():
    return Point.new(SE3_ID.at_time(0), pose([0.8, 0.9, 1.0], [1.1, 1.2, 1.3]))


def test_log_of_is_anchored(p, q):
    tangent = log_of(p, q)

    assert tangent.tangent_at is p
    assert tangent.coordinate_system == SE3_ID.at_time(0).with_manifold(Manifold.se3)
    assert isinstance(tangent.coordinates, se3.Twist)


def test_log_of_self_is_zero(p):
    tangent = log_of(p, p)
    np.testing.assert_allclose(tangent.coordinates.w, jnp.zeros(3), atol=1e-12)
    np.testing.assert_allclose(tangent.coordinates.v, jnp.zeros(3), atol=1e-12)


def test_exp_of_log_returns_target(p, q):
    back = exp(log_of(p, q))

    assert back.coordinate_system == q.coordinate_system
    assert relative_angle(back, q) < 1e-9
    np.testing.assert_allclose(back.coordinates.translation, q.coordinates.translation, atol=1e-9)


def test_lerp_boundaries(p, q):
    start = lerp_to(p, q, 0.0)
    end = lerp_to(p, q, 1.0)

    assert relative_angle(start, p) < 1e-4
    np.testing.assert_allclose(start.coordinates.translation, p.coordinates.translation, atol=1e-4)
    assert relative_angle(end, q) < 1e-4
    np.testing.assert_allclose(end.coordinates.translation, q.coordinates.translation, atol=1e-4)


def test_lerp_constant_angular_velocity(p, q):
    angle_p_q = relative_angle(p, q)

    quarter_lerp = lerp_to(p, q, 0.25)
    assert jnp.abs(relative_angle(p, quarter_lerp) - 0.25 * angle_p_q) < 1e-4

    half_lerp = lerp_to(p, q, 0.5)
    assert jnp.abs(relative_angle(p, half_lerp) - 0.5 * angle_p_q) < 1e-4

    # quarter + half + quarter steps along the geodesic land on q
    delta_quarter = group_mul(invert(p), quarter_lerp)
    delta_half = group_mul(invert(p), half_lerp)
    lerp_q = group_mul(group_mul(group_mul(p, delta_quarter), delta_half), delta_quarter)
    residual = group_mul(invert(q), lerp_q).coordinates
    assert so3.angle(residual.rotation) < 1e-4
    assert jnp.linalg.norm(residual.translation) < 1e-4


def test_lerp_is_a_screw_motion():
    """Halfway along a helix about z lands on the helix, not on the chord."""
    eps = 1e-6
    cs = SE3_ID.at_time(0)
    p = Point.new(cs, pose([jnp.cos(eps), jnp.sin(eps), 0.0], [0.0, 0.0, eps]))
    pi_minus_eps = jnp.pi - eps
    q = Point.new(cs, pose([jnp.cos(pi_minus_eps), jnp.sin(pi_minus_eps), 1.0], [0.0, 0.0, pi_minus_eps]))

    half = lerp_to(p, q, 0.5)

    np.testing.assert_allclose(half.coordinates.translation, jnp.array([0.0, 1.0, 0.5]), atol=eps)
    expected_rotation = so3.exp(jnp.array([0.0, 0.0, jnp.pi / 2]))
    assert so3.angle(so3.multiply(so3.inverse(half.coordinates.rotation), expected_rotation)) < eps


@given(st.integers(min_value=0, max_value=100))
@settings(deadline=None)
def test_lerp_constant_velocity_random(seed):
    k1, k2, k3, k4 = jax.random.split(jax.random.PRNGKey(seed), 4)
    cs = SE3_ID.at_time(0)
    p = Point.new(cs, se3.exp(se3.Twist(w=jax.random.uniform(k1, (3,), minval=-1, maxval=1),
                                        v=jax.random.uniform(k2, (3,), minval=-1, maxval=1))))
    q = Point.new(cs, se3.exp(se3.Twist(w=jax.random.uniform(k3, (3,), minval=-1, maxval=1),
                                        v=jax.random.uniform(k4, (3,), minval=-1, maxval=1))))
    angle_p_q = relative_angle(p, q)
    for alpha in (0.25, 0.5):
        assert jnp.abs(relative_angle(p, lerp_to(p, q, alpha)) - alpha * angle_p_q) < 1e-4


@pytest.mark.parametrize(
    "theta",
    [0.0, 0.5 * SMALL_ANGLE_THRESHOLD, 0.999 * SMALL_ANGLE_THRESHOLD, 1.001 * SMALL_ANGLE_THRESHOLD, 1e-3, 0.5],
)
def test_log_exp_roundtrip_near_singularity(theta):
    cs = SE3_ID.at_time(0)
    base = Point.new(cs, pose([0.2, -0.1, 0.3], [0.3, 0.2, 0.1]))
    step = se3.exp(se3.Twist(w=theta * jnp.array([0.0, 0.6, 0.8]), v=jnp.array([0.4, 0.1, -0.2])))
    target = group_mul(base, Point.new(cs, step))

    back = exp(log_of(base, target))

    assert relative_angle(back, target) < 1e-4
    np.testing.assert_allclose(back.coordinates.translation, target.coordinates.translation, atol=1e-4)


def test_so3_lerp_is_slerp():
    cs = SO3_ID.at_time(0)
    p = Point.new(cs, so3.identity())
    q = Point.new(cs, so3.exp(jnp.array([0.0, 0.0, 1.2])))

    tangent = log_of(p, q)
    np.testing.assert_allclose(tangent.coordinates, jnp.array([0.0, 0.0, 1.2]), atol=1e-12)

    third = lerp_to(p, q, 1.0 / 3.0)
    np.testing.assert_allclose(third.coordinates, so3.exp(jnp.array([0.0, 0.0, 0.4])), atol=1e-12)


def test_r3_lerp_is_linear():
    cs = R3_ID.at_time(0)
    p = Point.new(cs, jnp.array([0.0, 0.0, 0.0]))
    q = Point.new(cs, jnp.array([2.0, 4.0, -6.0]))
    np.testing.assert_allclose(lerp_to(p, q, 0.25).coordinates, jnp.array([0.5, 1.0, -1.5]))


def test_scale_by_keeps_anchor(p, q):
    tangent = log_of(p, q)
    scaled = tangent.scale_by(2.0)

    assert scaled.tangent_at is p
    assert scaled.coordinate_system == tangent.coordinate_system
    np.testing.assert_allclose(scaled.coordinates.w, 2.0 * tangent.coordinates.w)
    np.testing.assert_allclose(scaled.coordinates.v, 2.0 * tangent.coordinates.v)
    np.testing.assert_allclose(scale_by(tangent, 2.0).coordinates.v, scaled.coordinates.v)
    # the original is untouched
    np.testing.assert_allclose(log_of(p, q).coordinates.w, tangent.coordinates.w)


def test_lie_algebra_point_to_group_element(p, q):
    tangent = log_of(p, q)
    assert relative_angle(tangent.to_group_element(), q) < 1e-9


def test_log_of_rejects_time_mismatch(p):
    later = Point.new(SE3_ID.at_time(1), p.coordinates)
    with pytest.raises(FrameMismatchError):
        log_of(p, later)
    with pytest.raises(FrameMismatchError):
        lerp_to(p, later, 0.5)


def test_lie_algebra_point_must_share_anchor_frame(p):
    with pytest.raises(FrameMismatchError):
        LieAlgebraPoint.new(p, SE3_ID.at_time(1).with_manifold(Manifold.se3), se3.zero_twist())


def test_lie_algebra_point_must_use_paired_algebra(p):
    with pytest.raises(ManifoldError):
        LieAlgebraPoint.new(p, p.coordinate_system.with_manifold(Manifold.so3), jnp.zeros(3))


def test_lie_algebra_point_new(p):
    tangent = LieAlgebraPoint.new(p, p.coordinate_system.with_manifold(Manifold.se3), se3.zero_twist())
    back = exp(tangent)
    assert relative_angle(back, p) < 1e-12


def test_lerp_is_jit_compatible(p, q):
    half = jax.jit(lerp_to)(p, q, 0.5)
    assert half.coordinate_system == p.coordinate_system
    assert jnp.abs(relative_angle(p, half) - 0.5 * relative_angle(p, q)) < 1e-9
