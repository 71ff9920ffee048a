"""
JAX Chain: serial kinematic chains for robotics.

This library models a serial chain of joints and segments, the joint-space
vectors indexed by its actuated joints, and the forward position and
velocity kinematics built on top of them.
"""

import logging

import jax
jax.config.update("jax_enable_x64", True)

logging.getLogger(__name__).addHandler(logging.NullHandler())

from . import transforms
from . import core
from . import kinematics
from .config import EPSILON
from .core import (
    Chain,
    Joint,
    JointSpaceVector,
    JointType,
    JointTypeError,
    Segment,
    project_jacobian,
)

__version__ = "0.1.0"
__all__ = [
    "transforms",
    "core",
    "kinematics",
    "EPSILON",
    "Chain",
    "Joint",
    "JointSpaceVector",
    "JointType",
    "JointTypeError",
    "Segment",
    "project_jacobian",
]
