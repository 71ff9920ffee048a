"""Tests for single joints: poses, twists, caching, validation and equality."""

import copy

import jax
import jax.numpy as jnp
import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from jax_chain.core import Joint, JointType, JointTypeError
from jax_chain.core.joint import equal
from jax_chain.transforms import se3


def test_rot_z_quarter_turn():
    """RotZ at π/2 is a pure 90° rotation about Z."""
    joint = Joint("elbow", JointType.ROT_Z)
    T = joint.pose(jnp.pi / 2)

    expected_R = jnp.array([[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    np.testing.assert_allclose(se3.get_rotation(T), expected_R, atol=1e-12)
    np.testing.assert_array_equal(se3.get_position(T), jnp.zeros(3))


def test_rot_z_zero_is_identity():
    """pose(0) of a rotational joint is the identity."""
    joint = Joint("elbow", JointType.ROT_Z)
    np.testing.assert_array_equal(joint.pose(0.0), jnp.eye(4))


def test_trans_x_scale_and_offset():
    """TransX with scale 2 and offset 1 moves 2*3+1 = 7 along X at q=3."""
    joint = Joint("slide", JointType.TRANS_X, scale=2.0, offset=1.0)
    T = joint.pose(3.0)

    np.testing.assert_allclose(se3.get_position(T), jnp.array([7.0, 0.0, 0.0]))
    np.testing.assert_array_equal(se3.get_rotation(T), jnp.eye(3))


@pytest.mark.parametrize("joint_type, axis", [
    (JointType.ROT_X, [1.0, 0.0, 0.0]),
    (JointType.ROT_Y, [0.0, 1.0, 0.0]),
    (JointType.ROT_Z, [0.0, 0.0, 1.0]),
])
def test_principal_rotation_offset(joint_type, axis):
    """The offset is added to the scaled input before rotating."""
    joint = Joint("j", joint_type, scale=-1.0, offset=0.25)
    T = joint.pose(0.5)

    # angle = -0.5 + 0.25; the axis is left unchanged by its own rotation
    np.testing.assert_allclose(se3.get_rotation(T) @ jnp.array(axis), jnp.array(axis), atol=1e-12)
    angle = jnp.arccos((jnp.trace(se3.get_rotation(T)) - 1.0) / 2.0)
    np.testing.assert_allclose(angle, 0.25, atol=1e-12)


def test_rot_axis_rotates_about_offset_line():
    """Half a turn about a vertical line through (1, 0, 0) carries the origin to (2, 0, 0)."""
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 1.0], origin=[1.0, 0.0, 0.0])
    T = joint.pose(jnp.pi)

    np.testing.assert_allclose(se3.get_rotation(T), jnp.diag(jnp.array([-1.0, -1.0, 1.0])), atol=1e-12)
    np.testing.assert_allclose(se3.get_position(T), jnp.array([2.0, 0.0, 0.0]), atol=1e-12)
    # points on the axis stay put
    np.testing.assert_allclose(se3.apply(T, jnp.array([1.0, 0.0, 5.0])), jnp.array([1.0, 0.0, 5.0]), atol=1e-12)


def test_rot_axis_zero_is_identity():
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 1.0, 1.0], origin=[1.0, 2.0, 3.0])
    np.testing.assert_allclose(joint.pose(0.0), jnp.eye(4), atol=1e-15)


def test_axis_is_normalised():
    """The stored axis has unit length."""
    joint = Joint("slide", JointType.TRANS_AXIS, axis=[0.0, 0.0, 2.0], origin=[0.0, 0.0, 0.0])
    np.testing.assert_allclose(joint.axis, jnp.array([0.0, 0.0, 1.0]))
    np.testing.assert_allclose(joint.joint_axis(), jnp.array([0.0, 0.0, 1.0]))


def test_trans_axis_pose():
    """TransAxis translates along the normalised axis."""
    joint = Joint("slide", JointType.TRANS_AXIS, axis=[1.0, 1.0, 0.0], origin=[5.0, 5.0, 5.0])
    T = joint.pose(jnp.sqrt(2.0))

    np.testing.assert_allclose(se3.get_position(T), jnp.array([1.0, 1.0, 0.0]), atol=1e-12)
    np.testing.assert_array_equal(se3.get_rotation(T), jnp.eye(3))


def test_fixed_joint():
    """Fixed joints contribute nothing."""
    joint = Joint("weld")
    assert joint.type is JointType.FIXED
    np.testing.assert_array_equal(joint.pose(1.3), jnp.eye(4))
    np.testing.assert_array_equal(joint.twist(2.0), jnp.zeros(6))
    np.testing.assert_array_equal(joint.joint_axis(), jnp.zeros(3))
    np.testing.assert_array_equal(joint.joint_origin(), jnp.zeros(3))


def test_none_is_fixed():
    """NONE and FIXED name the same joint type."""
    assert JointType.NONE is JointType.FIXED
    assert Joint("weld", JointType.NONE).type_name == "Fixed"


def test_type_names():
    assert Joint("a", JointType.ROT_Y).type_name == "RotY"
    assert Joint("b", JointType.TRANS_AXIS, axis=[1, 0, 0], origin=[0, 0, 0]).type_name == "TransAxis"


def test_rotational_twist():
    """RotX twist is purely angular, scaled by the joint scale."""
    joint = Joint("roll", JointType.ROT_X, scale=2.0)
    np.testing.assert_allclose(joint.twist(3.0), jnp.array([0.0, 0.0, 0.0, 6.0, 0.0, 0.0]))


def test_translational_twist():
    """TransY twist is purely linear."""
    joint = Joint("lift", JointType.TRANS_Y, scale=0.5)
    np.testing.assert_allclose(joint.twist(4.0), jnp.array([0.0, 2.0, 0.0, 0.0, 0.0, 0.0]))


def test_rot_axis_twist_couples_origin():
    """An offset rotation axis gives the base origin a linear velocity origin x w."""
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 1.0], origin=[1.0, 0.0, 0.0])
    np.testing.assert_allclose(joint.twist(2.0), jnp.array([0.0, -2.0, 0.0, 0.0, 0.0, 2.0]), atol=1e-12)


def test_rot_axis_twist_matches_pose_derivative():
    """The twist is the velocity of the body point passing through the base origin."""
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[1.0, 2.0, 2.0], origin=[0.3, -0.5, 1.0], scale=1.5)
    q0 = 0.4

    # body point that sits at the base origin when q = q0
    body_point = se3.apply(se3.inverse(joint.pose(q0)), jnp.zeros(3))
    velocity = jax.jacfwd(lambda q: se3.apply(joint.pose(q), body_point))(jnp.asarray(q0))

    np.testing.assert_allclose(joint.twist(1.0)[:3], velocity, atol=1e-10)


def test_twist_does_not_depend_on_cache():
    """twist() gives the same result whatever pose was evaluated last."""
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 1.0, 0.0], origin=[0.0, 0.0, 1.0])
    before = joint.twist(1.0)
    joint.pose(2.5)
    np.testing.assert_array_equal(joint.twist(1.0), before)


def test_pose_cache_hit_and_invalidation():
    """Same input returns the cached frame; a new input replaces it."""
    joint = Joint("elbow", JointType.ROT_Y)

    first = joint.pose(0.7)
    assert joint.pose(0.7) is first

    other = joint.pose(0.8)
    assert other is not first
    np.testing.assert_array_equal(joint.pose(0.7), first)


def test_traced_input_bypasses_cache():
    """Poses evaluated under JIT are correct and never cached."""
    joint = Joint("elbow", JointType.ROT_Z)
    T = jax.jit(joint.pose)(0.3)

    assert joint._cache is None
    np.testing.assert_allclose(T, joint.pose(0.3), atol=1e-12)


def test_constant_input_under_jit_caches_concrete_pose():
    """A Python float evaluated inside a traced function caches a concrete frame."""
    joint = Joint("elbow", JointType.ROT_Z)

    jax.jit(lambda x: joint.pose(0.5) * x)(1.0)

    np.testing.assert_allclose(joint.pose(0.5), Joint("elbow", JointType.ROT_Z).pose(0.5), atol=1e-15)


@given(st.floats(min_value=-10.0, max_value=10.0, allow_nan=False))
@settings(deadline=None, max_examples=25)
def test_cached_pose_matches_fresh_evaluation(q):
    """Cached and uncached evaluations are bit-identical."""
    joint = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 1.0, 1.0], origin=[0.5, 0.0, 0.0], offset=0.1)
    joint.pose(q + 1.0)
    first = joint.pose(q)
    second = joint.pose(q)

    np.testing.assert_array_equal(first, second)
    np.testing.assert_array_equal(first, joint.copy().pose(q))


def test_axis_joint_requires_axis_and_origin():
    """Axis joints cannot be built without axis and origin."""
    with pytest.raises(JointTypeError, match="requires an axis and an origin"):
        Joint("hinge", JointType.ROT_AXIS)
    with pytest.raises(JointTypeError, match="requires an axis and an origin"):
        Joint("slide", JointType.TRANS_AXIS, axis=[1.0, 0.0, 0.0])


def test_principal_joint_rejects_axis():
    """Non-axis joints refuse an axis or an origin."""
    with pytest.raises(JointTypeError, match="does not take an axis or an origin"):
        Joint("elbow", JointType.ROT_Z, axis=[0.0, 0.0, 1.0], origin=[0.0, 0.0, 0.0])
    with pytest.raises(JointTypeError, match="does not take an axis or an origin"):
        Joint("weld", origin=[0.0, 0.0, 0.0])


def test_invalid_axis():
    with pytest.raises(JointTypeError, match="zero-length axis"):
        Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 0.0], origin=[0.0, 0.0, 0.0])
    with pytest.raises(JointTypeError, match="must have shape"):
        Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 1.0], origin=[0.0, 0.0, 0.0])


def test_joint_type_error_is_value_error():
    assert issubclass(JointTypeError, ValueError)
    with pytest.raises(JointTypeError, match="Unknown joint type"):
        Joint("bad", "RotZ")


def test_equality_within_epsilon():
    """Scalar parameters are compared within epsilon, names and types exactly."""
    a = Joint("knee", JointType.ROT_X, scale=1.0, damping=0.2, upper_position_limit=1.5)
    b = Joint("knee", JointType.ROT_X, scale=1.0 + 1e-9, damping=0.2, upper_position_limit=1.5)

    assert equal(a, b)
    assert a == b
    assert not equal(a, Joint("knee", JointType.ROT_X, scale=1.001, damping=0.2, upper_position_limit=1.5))
    assert equal(a, Joint("knee", JointType.ROT_X, scale=1.001, damping=0.2, upper_position_limit=1.5), eps=1e-2)
    assert a != Joint("Knee", JointType.ROT_X, scale=1.0, damping=0.2, upper_position_limit=1.5)
    assert a != Joint("knee", JointType.ROT_Y, scale=1.0, damping=0.2, upper_position_limit=1.5)


def test_equality_compares_axis_and_origin():
    a = Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 1.0], origin=[1.0, 0.0, 0.0])

    assert a == Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 3.0], origin=[1.0, 0.0, 0.0])
    assert a != Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.1, 1.0], origin=[1.0, 0.0, 0.0])
    assert a != Joint("hinge", JointType.ROT_AXIS, axis=[0.0, 0.0, 1.0], origin=[1.0, 0.0, 0.01])


def test_copy_has_fresh_cache():
    """Copies are equal but do not share the pose cache."""
    joint = Joint("elbow", JointType.ROT_Z, home_position=0.3)
    joint.pose(1.0)

    for clone in (joint.copy(), copy.copy(joint), copy.deepcopy(joint)):
        assert clone is not joint
        assert clone._cache is None
        assert clone == joint
