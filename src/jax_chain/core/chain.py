"""Serial kinematic chain built out of segments.

A chain owns copies of the segments appended to it and keeps, next to them,
the ordered subsequence of actuated (non-fixed) joints. Index i of a
JointSpaceVector used with the chain refers to ``chain.get_joint(i)``.
"""

import logging
from typing import Iterable, Iterator, List, Tuple

from ..config import EPSILON
from .joint import Joint, JointType
from .joint import equal as joints_equal
from .segment import Segment
from .segment import equal as segments_equal

logger = logging.getLogger(__name__)


class Chain:
    """Ordered, append-only sequence of segments.

    Copies (``copy.copy``, ``copy.deepcopy`` or :meth:`copy`) never share
    segments, joints or pose caches with the original.

    Args:
        segments: Segments appended in order; defaults to an empty chain.
    """

    def __init__(self, segments: Iterable[Segment] = ()):
        self._segments: List[Segment] = []
        self._joints: List[Joint] = []
        for segment in segments:
            self.add_segment(segment)

    def add_segment(self, segment: Segment) -> None:
        """Append a copy of ``segment`` to the end of the chain."""
        if not isinstance(segment, Segment):
            raise TypeError(f"expected a Segment, got {type(segment).__name__}")

        owned = segment.copy()
        self._segments.append(owned)
        if owned.joint.type is not JointType.FIXED:
            self._joints.append(owned.joint)

        logger.debug("Added segment '%s' (%s), chain has %d segments and %d joints",
                     owned.name, owned.joint.type_name, len(self._segments), len(self._joints))

    def add_chain(self, chain: "Chain") -> None:
        """Append copies of every segment of ``chain``, in order. ``chain`` is left untouched."""
        # snapshot first so that chain.add_chain(chain) terminates
        for segment in list(chain._segments):
            self.add_segment(segment)

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    @property
    def joint_count(self) -> int:
        """Number of actuated joints; the length JointSpaceVectors for this chain need."""
        return len(self._joints)

    @property
    def segments(self) -> Tuple[Segment, ...]:
        return tuple(self._segments)

    @property
    def joints(self) -> Tuple[Joint, ...]:
        return tuple(self._joints)

    def get_segment(self, index: int) -> Segment:
        """Segment at ``index``. Plain list indexing, no range check of its own."""
        return self._segments[index]

    def get_joint(self, index: int) -> Joint:
        """
        The ``index``-th actuated joint, in chain order.

        Raises:
            IndexError: If ``index`` is outside ``[0, joint_count)``.
        """
        if not 0 <= index < len(self._joints):
            raise IndexError(f"joint index {index} out of range for chain with {len(self._joints)} joints")
        return self._joints[index]

    def __iter__(self) -> Iterator[Segment]:
        return iter(self._segments)

    def copy(self) -> "Chain":
        return Chain(self._segments)

    def __copy__(self) -> "Chain":
        return self.copy()

    def __deepcopy__(self, memo) -> "Chain":
        return self.copy()

    def __eq__(self, other):
        if not isinstance(other, Chain):
            return NotImplemented
        return equal(self, other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"Chain(segments={self.segment_count}, joints={self.joint_count})"


def equal(a: Chain, b: Chain, eps: float = EPSILON) -> bool:
    """Structural, order-sensitive comparison of two chains within ``eps``."""
    if a.segment_count != b.segment_count or a.joint_count != b.joint_count:
        return False
    if not all(segments_equal(s, t, eps) for s, t in zip(a.segments, b.segments)):
        return False
    return all(joints_equal(j, k, eps) for j, k in zip(a.joints, b.joints))
