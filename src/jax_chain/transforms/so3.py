"""SO(3) and so(3) operations in JAX.

This module implements the rotation primitives needed by joint transforms:
Rodrigues' formula for axis-angle rotations, skew-symmetric matrices and
rotation application. All functions are pure, JIT-able, and operate on JAX
arrays.
"""

import jax
import jax.numpy as jnp

Array = jax.Array


def from_axis_angle(axis: Array, angle) -> Array:
    """
    Rotation of ``angle`` radians about a unit ``axis``.

    The axis is taken as given, so a zero angle yields the identity
    exactly and the angle may carry any sign.

    Args:
        axis: (3,) unit rotation axis
        angle: scalar rotation angle in radians

    Returns:
        (3, 3) rotation matrix
    """
    axis = jnp.asarray(axis, dtype=jnp.float64)
    K = skew_symmetric(axis)
    # R = I + sin(θ) * K + (1 - cos(θ)) * K²
    return jnp.eye(3) + jnp.sin(angle) * K + (1.0 - jnp.cos(angle)) * jnp.matmul(K, K)


def inverse(R: Array) -> Array:
    """
    Compute inverse of rotation matrix.

    For rotation matrices, the inverse is simply the transpose.
    """
    return jnp.swapaxes(R, -1, -2)


def apply(R: Array, v: Array) -> Array:
    """
    Apply rotation to vector(s).

    Args:
        R: (..., 3, 3) rotation matrix
        v: (..., 3) or (..., N, 3) vector(s) to rotate

    Returns:
        (..., 3) or (..., N, 3) rotated vector(s)
    """
    if v.ndim == R.ndim - 1:
        return jnp.einsum('...ij,...j->...i', R, v)
    return jnp.einsum('...ij,...nj->...ni', R, v)


def skew_symmetric(v: Array) -> Array:
    """
    Convert 3D vector to skew-symmetric (cross-product) matrix.

    Args:
        v: (..., 3) vector

    Returns:
        (..., 3, 3) skew-symmetric matrix
    """
    zeros = jnp.zeros(v.shape[:-1], dtype=v.dtype)

    return jnp.stack([
        jnp.stack([zeros, -v[..., 2], v[..., 1]], axis=-1),
        jnp.stack([v[..., 2], zeros, -v[..., 0]], axis=-1),
        jnp.stack([-v[..., 1], v[..., 0], zeros], axis=-1)
    ], axis=-2)
