"""Single degree-of-freedom joints.

A joint maps one scalar input (a position or a velocity) to the rigid
transform or twist it contributes to a chain, before the owning segment's
fixed tip offset is applied. Besides its kinematic parameters a joint
carries scalar physical coefficients (inertia, damping, stiffness) and
position limits as metadata for downstream solvers.
"""

import numbers
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import jax
import jax.numpy as jnp
import numpy as np

from ..config import EPSILON
from ..transforms import se3, so3

Array = jax.Array


class JointTypeError(ValueError):
    """Raised when a joint type is built with the wrong axis/origin arguments."""


class JointType(Enum):
    """Closed set of joint motions. ``NONE`` is an alias of ``FIXED``."""

    ROT_AXIS = "RotAxis"
    ROT_X = "RotX"
    ROT_Y = "RotY"
    ROT_Z = "RotZ"
    TRANS_AXIS = "TransAxis"
    TRANS_X = "TransX"
    TRANS_Y = "TransY"
    TRANS_Z = "TransZ"
    FIXED = "Fixed"
    NONE = "Fixed"


_AXIS_TYPES = frozenset({JointType.ROT_AXIS, JointType.TRANS_AXIS})
_ROTATIONAL_TYPES = frozenset({JointType.ROT_AXIS, JointType.ROT_X, JointType.ROT_Y, JointType.ROT_Z})

_PRINCIPAL_AXES = {
    JointType.ROT_X: (1.0, 0.0, 0.0),
    JointType.ROT_Y: (0.0, 1.0, 0.0),
    JointType.ROT_Z: (0.0, 0.0, 1.0),
    JointType.TRANS_X: (1.0, 0.0, 0.0),
    JointType.TRANS_Y: (0.0, 1.0, 0.0),
    JointType.TRANS_Z: (0.0, 0.0, 1.0),
}

_SCALAR_PARAMETERS = (
    "scale",
    "offset",
    "inertia",
    "damping",
    "stiffness",
    "upper_position_limit",
    "lower_position_limit",
    "home_position",
)


@dataclass(frozen=True, eq=False)
class Joint:
    """One joint of a serial chain.

    ``axis`` and ``origin`` exist only for ``ROT_AXIS`` and ``TRANS_AXIS``
    joints, where both are required; every other type must leave them unset.
    The axis is normalised to unit length on construction.

    Attributes:
        name: Joint identifier.
        type: Kind of motion, see :class:`JointType`.
        scale: Ratio between joint input and geometric motion.
        offset: Geometric motion at zero input.
        inertia: 1D inertia along the joint axis.
        damping: 1D damping along the joint axis.
        stiffness: 1D stiffness along the joint axis.
        upper_position_limit: Upper position limit.
        lower_position_limit: Lower position limit.
        home_position: Homing position.
        axis: (3,) unit motion axis of an axis joint, else None.
        origin: (3,) point the axis passes through, else None.
    """

    name: str = "NoName"
    type: JointType = JointType.FIXED
    scale: float = 1.0
    offset: float = 0.0
    inertia: float = 0.0
    damping: float = 0.0
    stiffness: float = 0.0
    upper_position_limit: float = 0.0
    lower_position_limit: float = 0.0
    home_position: float = 0.0
    axis: Optional[Array] = None
    origin: Optional[Array] = None
    # (last input, last pose); replaced as a whole so readers never see a mixed pair
    _cache: Optional[Tuple[float, Array]] = field(default=None, init=False, repr=False)

    def __post_init__(self):
        if not isinstance(self.type, JointType):
            raise JointTypeError(f"Unknown joint type {self.type!r}")

        if self.type in _AXIS_TYPES:
            if self.axis is None or self.origin is None:
                raise JointTypeError(
                    f"Joint '{self.name}' of type {self.type.value} requires an axis and an origin"
                )
            axis = _as_vector(self.axis, self.name, "axis")
            norm = np.linalg.norm(axis)
            if norm == 0.0:
                raise JointTypeError(f"Joint '{self.name}' has a zero-length axis")
            object.__setattr__(self, "axis", jnp.asarray(axis / norm))
            object.__setattr__(self, "origin", jnp.asarray(_as_vector(self.origin, self.name, "origin")))
        elif self.axis is not None or self.origin is not None:
            raise JointTypeError(
                f"Joint '{self.name}' of type {self.type.value} does not take an axis or an origin"
            )

    def __copy__(self) -> "Joint":
        # Parameters are immutable and may be shared; the cache may not
        clone = object.__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.__dict__["_cache"] = None
        return clone

    def __deepcopy__(self, memo) -> "Joint":
        return self.__copy__()

    def copy(self) -> "Joint":
        """Independent copy with an empty pose cache."""
        return self.__copy__()

    def __eq__(self, other):
        if not isinstance(other, Joint):
            return NotImplemented
        return equal(self, other)

    @property
    def type_name(self) -> str:
        return self.type.value

    def joint_axis(self) -> Array:
        """Unit vector of the motion axis, e.g. (1, 0, 0) for ROT_X; zero for FIXED."""
        if self.type is JointType.FIXED:
            return jnp.zeros(3)
        if self.type in _AXIS_TYPES:
            return self.axis
        return jnp.asarray(_PRINCIPAL_AXES[self.type], dtype=jnp.float64)

    def joint_origin(self) -> Array:
        """Point the motion axis passes through; zero for non-axis joints."""
        if self.type in _AXIS_TYPES:
            return self.origin
        return jnp.zeros(3)

    def pose(self, q) -> Array:
        """
        Frame between the beginning and the end of the joint at position ``q``.

        Repeated calls with the same concrete ``q`` return the cached frame.
        Traced or array inputs are always evaluated.

        Args:
            q: Joint position.

        Returns:
            (4, 4) homogeneous transform.
        """
        if not isinstance(q, numbers.Real):
            return self._pose(q)

        cached = self._cache
        if cached is not None and cached[0] == q:
            return cached[1]

        # Concrete input: keep the cached frame concrete even while tracing
        with jax.ensure_compile_time_eval():
            frame = self._pose(q)
        object.__setattr__(self, "_cache", (q, frame))
        return frame

    def _pose(self, q) -> Array:
        if self.type is JointType.FIXED:
            return se3.identity()

        d = self.scale * q + self.offset

        if self.type is JointType.ROT_AXIS:
            # rotation about the line through ``origin``
            R = so3.from_axis_angle(self.axis, d)
            return se3.from_position_and_rotation(self.origin - R @ self.origin, R)

        if self.type in _ROTATIONAL_TYPES:
            return se3.from_rotation(so3.from_axis_angle(self.joint_axis(), d))

        return se3.from_translation(self.joint_axis() * d)

    def twist(self, qdot) -> Array:
        """
        Twist produced by a joint velocity ``qdot``.

        The twist is expressed in the joint's base frame with the base origin
        as reference point. It does not depend on the joint position, so no
        prior :meth:`pose` call is needed.

        Args:
            qdot: Joint velocity.

        Returns:
            (6,) twist [vx, vy, vz, wx, wy, wz].
        """
        if self.type is JointType.FIXED:
            return jnp.zeros(6)

        rate = self.scale * qdot
        direction = self.joint_axis()

        if self.type in _ROTATIONAL_TYPES:
            w = direction * rate
            v = jnp.cross(self.joint_origin(), w)
            return se3.twist(v, w)

        return se3.twist(direction * rate, jnp.zeros(3))


def equal(a: Joint, b: Joint, eps: float = EPSILON) -> bool:
    """
    Compare two joints.

    Names and types must match exactly; every scalar parameter and every
    component of axis and origin must agree within ``eps``.
    """
    if a.name != b.name or a.type is not b.type:
        return False
    for parameter in _SCALAR_PARAMETERS:
        if abs(getattr(a, parameter) - getattr(b, parameter)) > eps:
            return False
    return _optional_vectors_equal(a.axis, b.axis, eps) and _optional_vectors_equal(a.origin, b.origin, eps)


def _optional_vectors_equal(u: Optional[Array], v: Optional[Array], eps: float) -> bool:
    if u is None or v is None:
        return u is None and v is None
    return se3.equal(u, v, eps)


def _as_vector(value, joint_name: str, what: str) -> np.ndarray:
    vector = np.asarray(value, dtype=np.float64)
    if vector.shape != (3,):
        raise JointTypeError(f"Joint '{joint_name}' {what} must have shape (3,), got {vector.shape}")
    return vector
