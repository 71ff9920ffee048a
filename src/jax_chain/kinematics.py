"""Forward kinematics and Jacobian computation for serial chains.

This module builds on the core data structures: recursive forward position
kinematics, the analytic Jacobian assembled from per-joint twists, and the
end-effector twist obtained by projecting joint velocities through it.

Joint values may be given as a JointSpaceVector or as a 1-D array. With a
JAX array the functions are traceable by ``jax.jit`` and ``jax.jacfwd``.
"""

import logging
from typing import Dict, Optional, Union

import jax
import jax.numpy as jnp
import numpy as np

from .core import Chain, JointSpaceVector, JointType, project_jacobian
from .transforms import se3

Array = jax.Array
JointValues = Union[JointSpaceVector, Array]

logger = logging.getLogger(__name__)


def forward_kinematics(chain: Chain, q: JointValues) -> Dict[str, Array]:
    """Compute forward kinematics for all segments of the chain.

    Args:
        chain: Chain to evaluate
        q: Joint positions, one per actuated joint

    Returns:
        Dictionary mapping segment names to the 4x4 world pose of their tip.
        If names repeat, the last segment with a name wins.
    """
    world_transforms = forward_kinematics_world(chain, q)
    return {segment.name: world_transforms[i] for i, segment in enumerate(chain)}


def forward_kinematics_world(chain: Chain, q: JointValues) -> Array:
    """Internal FK function returning the stacked world transforms.

    Args:
        chain: Chain to evaluate
        q: Joint positions, one per actuated joint

    Returns:
        Array of shape (segment_count, 4, 4) with the world pose of every
        segment tip.
    """
    values = _joint_values(chain, q)

    frames = []
    T_world = se3.identity()
    j = 0
    for segment in chain:
        if segment.joint.type is JointType.FIXED:
            T_world = se3.multiply(T_world, segment.pose(0.0))
        else:
            T_world = se3.multiply(T_world, segment.pose(values[j]))
            j += 1
        frames.append(T_world)

    if not frames:
        return jnp.zeros((0, 4, 4))
    return jnp.stack(frames)


def end_effector_pose(chain: Chain, q: JointValues, segment_nr: int = -1) -> Array:
    """World pose of the tip of segment ``segment_nr`` (default: the last one).

    An empty chain yields the identity. ``segment_nr`` follows Python
    indexing; anything outside the chain raises ``IndexError``.
    """
    if chain.segment_count == 0:
        _joint_values(chain, q)
        return se3.identity()
    if not -chain.segment_count <= segment_nr < chain.segment_count:
        raise IndexError(
            f"segment index {segment_nr} out of range for chain with {chain.segment_count} segments"
        )
    return forward_kinematics_world(chain, q)[segment_nr]


def jacobian(chain: Chain, q: JointValues, segment_name: Optional[str] = None) -> Array:
    """Compute the 6D Jacobian of a segment tip w.r.t. the joint positions.

    Column i is the twist of the tip caused by a unit velocity of actuated
    joint i, expressed in the base frame with the tip as reference point.
    Joints after the target segment have zero columns.

    Args:
        chain: Chain to evaluate
        q: Joint positions, one per actuated joint
        segment_name: Target segment; the last segment when omitted

    Returns:
        6x(joint_count) Jacobian matrix relating joint velocities to the tip twist
    """
    values = _joint_values(chain, q)

    if segment_name is None:
        target = chain.segment_count - 1
    else:
        names = [segment.name for segment in chain]
        try:
            target = names.index(segment_name)
        except ValueError:
            raise ValueError(f"Segment '{segment_name}' not found in chain")

    logger.debug("Computing Jacobian up to segment %d of %d", target, chain.segment_count)

    # one row per joint while assembling; transposed on return
    columns = jnp.zeros((chain.joint_count, 6))
    T_world = se3.identity()
    j = 0
    for segment in chain.segments[:target + 1]:
        actuated = segment.joint.type is not JointType.FIXED
        q_j = values[j] if actuated else 0.0
        T_tip = se3.multiply(T_world, segment.pose(q_j))

        # Earlier columns now refer to the new tip
        columns = se3.change_ref_point(columns, se3.get_position(T_tip) - se3.get_position(T_world))

        if actuated:
            column = se3.rotate_twist(se3.get_rotation(T_world), segment.twist(q_j, 1.0))
            columns = columns.at[j].set(column)
            j += 1
        T_world = T_tip

    return columns.T


def end_effector_twist(chain: Chain, q: JointValues, qdot: JointValues) -> Array:
    """Twist of the last segment tip for joint positions ``q`` and velocities ``qdot``."""
    _joint_values(chain, qdot)
    return project_jacobian(jacobian(chain, q), qdot)


def _joint_values(chain: Chain, q: JointValues):
    values = q.data if isinstance(q, JointSpaceVector) else q
    shape = np.shape(values)
    if len(shape) != 1 or shape[0] != chain.joint_count:
        raise ValueError(f"Expected {chain.joint_count} joint values, got shape {shape}")
    return values
