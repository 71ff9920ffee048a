"""Segment: a joint followed by a fixed tip offset.

A segment is the building block of a chain. Its frame at joint position q is
the joint transform composed with a constant tip frame.
"""

import jax
import jax.numpy as jnp
from flax import struct

from ..config import EPSILON
from ..transforms import se3
from .joint import Joint
from .joint import equal as joints_equal

Array = jax.Array


@struct.dataclass
class Segment:
    """Immutable PyTree pairing a joint with its trailing fixed frame.

    Attributes:
        name: Segment identifier. Marked as a static field.
        joint: The segment's joint. Marked as a static field.
        f_tip: (4, 4) frame from the end of the joint to the segment tip.
    """
    name: str = struct.field(pytree_node=False, default="NoName")
    joint: Joint = struct.field(pytree_node=False, default_factory=Joint)
    f_tip: Array = struct.field(default_factory=se3.identity)

    def __eq__(self, other):
        if not isinstance(other, Segment):
            return NotImplemented
        return equal(self, other)

    def copy(self) -> "Segment":
        """Copy owning its own joint (and therefore its own pose cache)."""
        return self.replace(joint=self.joint.copy(), f_tip=jnp.asarray(self.f_tip, dtype=jnp.float64))

    def pose(self, q) -> Array:
        """Frame from the segment base to its tip at joint position ``q``."""
        return se3.multiply(self.joint.pose(q), self.f_tip)

    def twist(self, q, qdot) -> Array:
        """
        Twist of the segment tip caused by a joint velocity.

        Expressed in the segment base frame, with the tip as reference point.

        Args:
            q: Joint position.
            qdot: Joint velocity.

        Returns:
            (6,) twist [vx, vy, vz, wx, wy, wz].
        """
        return se3.change_ref_point(self.joint.twist(qdot), se3.get_position(self.pose(q)))


def equal(a: Segment, b: Segment, eps: float = EPSILON) -> bool:
    """Names match exactly; joints and tip frames agree within ``eps``."""
    return a.name == b.name and joints_equal(a.joint, b.joint, eps) and se3.equal(a.f_tip, b.f_tip, eps)
