"""SE(3) frames and 6D twists in JAX.

Frames are 4x4 homogeneous matrices. Twists are 6-vectors laid out as
[vx, vy, vz, wx, wy, wz]: linear velocity of the reference point first,
angular velocity last. All functions are pure and operate on JAX arrays.
"""


import jax
import jax.numpy as jnp

from . import so3

Array = jax.Array


def identity() -> Array:
    """Identity frame."""
    return jnp.eye(4, dtype=jnp.float64)


def from_position_and_rotation(p: Array, R: Array) -> Array:
    """
    Construct SE(3) transform from position and rotation.

    Args:
        p: (..., 3) position vector
        R: (..., 3, 3) rotation matrix

    Returns:
        (..., 4, 4) homogeneous transformation matrix
    """
    p = jnp.asarray(p, dtype=jnp.float64)
    R = jnp.asarray(R, dtype=jnp.float64)

    # Ensure consistent batch shapes
    batch_shape = jnp.broadcast_shapes(p.shape[:-1], R.shape[:-2])
    p = jnp.broadcast_to(p, batch_shape + (3,))
    R = jnp.broadcast_to(R, batch_shape + (3, 3))

    T = jnp.zeros(batch_shape + (4, 4), dtype=p.dtype)
    T = T.at[..., :3, :3].set(R)
    T = T.at[..., :3, 3].set(p)
    T = T.at[..., 3, 3].set(1.0)

    return T


def from_translation(p: Array) -> Array:
    """Pure translation frame."""
    return from_position_and_rotation(p, jnp.eye(3))


def from_rotation(R: Array) -> Array:
    """Pure rotation frame."""
    return from_position_and_rotation(jnp.zeros(3), R)


def multiply(T1: Array, T2: Array) -> Array:
    """
    Multiply two SE(3) transformation matrices.

    Args:
        T1: (..., 4, 4) first transformation matrix
        T2: (..., 4, 4) second transformation matrix

    Returns:
        (..., 4, 4) result of T1 @ T2
    """
    return jnp.matmul(T1, T2)


def inverse(T: Array) -> Array:
    """
    Compute inverse of SE(3) transformation matrix.

    Uses the block structure for efficient computation:
    T^-1 = [[R^T, -R^T @ t], [0, 1]]
    """
    R_inv = so3.inverse(get_rotation(T))
    t_inv = -jnp.einsum("...ij,...j->...i", R_inv, get_position(T))

    return from_position_and_rotation(t_inv, R_inv)


def apply(T: Array, points: Array) -> Array:
    """
    Apply SE(3) transformation to points.

    Args:
        T: (..., 4, 4) transformation matrix
        points: (..., 3) or (..., N, 3) points to transform

    Returns:
        (..., 3) or (..., N, 3) transformed points
    """
    ones = jnp.ones_like(points[..., 0:1])
    points_h = jnp.concatenate([points, ones], axis=-1)

    transformed_h = jnp.einsum("...ij,...j->...i", T, points_h)

    return transformed_h[..., :3]


def get_position(T: Array) -> Array:
    """(..., 3) translation part of a frame."""
    return T[..., :3, 3]


def get_rotation(T: Array) -> Array:
    """(..., 3, 3) rotation part of a frame."""
    return T[..., :3, :3]


def twist(linear: Array, angular: Array) -> Array:
    """Stack linear and angular velocity into a (..., 6) twist."""
    return jnp.concatenate([jnp.asarray(linear, dtype=jnp.float64),
                            jnp.asarray(angular, dtype=jnp.float64)], axis=-1)


def rotate_twist(R: Array, t: Array) -> Array:
    """
    Express a twist in a rotated frame.

    Both the linear and the angular part are rotated; the reference point
    stays where it is.

    Args:
        R: (3, 3) rotation matrix
        t: (..., 6) twist(s)

    Returns:
        (..., 6) rotated twist(s)
    """
    v = jnp.einsum("ij,...j->...i", R, t[..., :3])
    w = jnp.einsum("ij,...j->...i", R, t[..., 3:])
    return jnp.concatenate([v, w], axis=-1)


def change_ref_point(t: Array, d: Array) -> Array:
    """
    Move the reference point of a twist.

    The new reference point sits at ``d`` relative to the old one, both
    expressed in the twist's frame: v' = v + w x d.

    Args:
        t: (..., 6) twist(s)
        d: (3,) displacement of the reference point

    Returns:
        (..., 6) twist(s) with the new reference point
    """
    v, w = t[..., :3], t[..., 3:]
    return jnp.concatenate([v + jnp.cross(w, d), w], axis=-1)


def equal(a: Array, b: Array, eps: float) -> bool:
    """True when every component of ``a`` and ``b`` differs by at most ``eps``."""
    if jnp.shape(a) != jnp.shape(b):
        return False
    return bool(jnp.max(jnp.abs(jnp.asarray(a) - jnp.asarray(b)), initial=0.0) <= eps)
