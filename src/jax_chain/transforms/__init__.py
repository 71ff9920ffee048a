"""
JAX-based rigid-body algebra used by the kinematic chain.

This module provides the pieces joints and segments are built from:
- SO(3) rotations (so3 module)
- SE(3) frames and 6D twists (se3 module)

All functions are pure, stateless, and designed for high-performance computation.
"""

from . import so3
from . import se3

__all__ = [
    "so3",
    "se3",
]
