"""Core chain data structures: joints, segments, chains and joint-space vectors.

Frames are plain (4, 4) JAX arrays and twists (6,) arrays, see
:mod:`jax_chain.transforms`.
"""

from .joint import Joint, JointType, JointTypeError
from .segment import Segment
from .chain import Chain
from .joint_space import (
    JointSpaceVector,
    add,
    divide,
    project_jacobian,
    scale,
    subtract,
    zero,
)
from .joint_space import equal as joint_space_equal

__all__ = [
    "Joint",
    "JointType",
    "JointTypeError",
    "Segment",
    "Chain",
    "JointSpaceVector",
    "add",
    "subtract",
    "scale",
    "divide",
    "zero",
    "joint_space_equal",
    "project_jacobian",
]
