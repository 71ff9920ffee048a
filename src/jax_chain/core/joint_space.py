"""Joint-space vectors and their arithmetic.

A JointSpaceVector holds one scalar per actuated joint of a chain (positions,
velocities, torques, ...), in the chain's actuated-joint order. It never
references a chain; callers size it to ``chain.joint_count``.

The arithmetic is exposed as free functions writing into an explicit
destination, which may alias one of the sources. Operand lengths must match;
numpy raises on mismatch and nothing is resized implicitly.
"""

import collections.abc
from typing import Iterable, Iterator, List, Union

import jax
import jax.numpy as jnp
import numpy as np

from ..config import EPSILON

Array = jax.Array


class JointSpaceVector:
    """Resizable float64 vector indexed by actuated joint.

    Args:
        data: Either a size, creating a zero-filled vector, or a 1-D
            sequence, buffer or iterator of scalars, which is copied.
            Defaults to empty.
    """

    __slots__ = ("data",)

    def __init__(self, data: Union[int, Iterable[float], np.ndarray] = 0):
        if isinstance(data, (int, np.integer)):
            if data < 0:
                raise ValueError(f"size must be non-negative, got {data}")
            self.data = np.zeros(int(data), dtype=np.float64)
        else:
            if isinstance(data, collections.abc.Iterator):
                data = list(data)
            values = np.array(data, dtype=np.float64)
            if values.ndim != 1:
                raise ValueError(f"expected a 1-D sequence of scalars, got shape {values.shape}")
            self.data = values

    @classmethod
    def moved_from(cls, other: "JointSpaceVector") -> "JointSpaceVector":
        """Take over ``other``'s storage, leaving ``other`` empty."""
        vector = cls.__new__(cls)
        vector.data = other.data
        other.data = np.zeros(0, dtype=np.float64)
        return vector

    def copy(self) -> "JointSpaceVector":
        return JointSpaceVector(self.data)

    __copy__ = copy

    def __deepcopy__(self, memo) -> "JointSpaceVector":
        return self.copy()

    def resize(self, size: int) -> None:
        """Change the length, keeping existing values and zero-filling new slots."""
        resized = np.zeros(size, dtype=np.float64)
        kept = min(size, self.data.shape[0])
        resized[:kept] = self.data[:kept]
        self.data = resized

    def size(self) -> int:
        return self.data.shape[0]

    def rows(self) -> int:
        return self.data.shape[0]

    def columns(self) -> int:
        return 1

    def to_list(self) -> List[float]:
        """Copy of the values as a list, in joint order."""
        return self.data.tolist()

    def __len__(self) -> int:
        return self.data.shape[0]

    def __getitem__(self, index):
        return self.data[index]

    def __setitem__(self, index, value) -> None:
        self.data[index] = value

    def __iter__(self) -> Iterator[float]:
        return iter(self.data.tolist())

    def __array__(self, dtype=None, copy=None):
        # copy=False shares the storage
        if copy is False:
            if dtype is not None and np.dtype(dtype) != self.data.dtype:
                raise ValueError(f"cannot convert to {np.dtype(dtype)} without a copy")
            return self.data
        if dtype is None:
            return self.data.copy()
        return self.data.astype(dtype)

    def __eq__(self, other):
        if not isinstance(other, JointSpaceVector):
            return NotImplemented
        return equal(self, other)

    __hash__ = None

    def __repr__(self) -> str:
        return f"JointSpaceVector({self.data.tolist()})"


def add(a: JointSpaceVector, b: JointSpaceVector, dest: JointSpaceVector) -> None:
    """dest = a + b"""
    np.add(a.data, b.data, out=dest.data)


def subtract(a: JointSpaceVector, b: JointSpaceVector, dest: JointSpaceVector) -> None:
    """dest = a - b"""
    np.subtract(a.data, b.data, out=dest.data)


def scale(a: JointSpaceVector, factor: float, dest: JointSpaceVector) -> None:
    """dest = factor * a"""
    np.multiply(a.data, factor, out=dest.data)


def divide(a: JointSpaceVector, factor: float, dest: JointSpaceVector) -> None:
    """dest = a / factor"""
    np.divide(a.data, factor, out=dest.data)


def zero(dest: JointSpaceVector) -> None:
    dest.data.fill(0.0)


def equal(a: JointSpaceVector, b: JointSpaceVector, eps: float = EPSILON) -> bool:
    """Lengths match and no element differs by more than ``eps``."""
    if a.data.shape != b.data.shape:
        return False
    if a.data.shape[0] == 0:
        return True
    return bool(np.max(np.abs(a.data - b.data)) <= eps)


def project_jacobian(jacobian: Array, qdot: Union[JointSpaceVector, Array]) -> Array:
    """
    Twist produced by joint velocities through a Jacobian.

    Args:
        jacobian: (6, N) Jacobian, N == len(qdot).
        qdot: Joint velocities, as a vector or a 1-D array.

    Returns:
        (6,) twist [vx, vy, vz, wx, wy, wz].
    """
    if isinstance(qdot, JointSpaceVector):
        qdot = qdot.data
    return jnp.matmul(jnp.asarray(jacobian, dtype=jnp.float64), jnp.asarray(qdot, dtype=jnp.float64))
