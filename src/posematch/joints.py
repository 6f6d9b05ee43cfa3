# src/posematch/joints.py
# ---------------------------------------------------------------
# Joint identifiers reported by the skeleton tracker, plus the
# joint subsets the matcher works with.
# ---------------------------------------------------------------

from __future__ import annotations
from enum import IntEnum
from typing import Dict, Optional, Tuple

from .geometry.vectors import Position2D


class JointType(IntEnum):
    """Sensor joint codes. Code 0 means "no joint" and has no member."""
    HEAD = 1
    NECK = 2
    TORSO = 3
    WAIST = 4
    LEFT_COLLAR = 5
    LEFT_SHOULDER = 6
    LEFT_ELBOW = 7
    LEFT_WRIST = 8
    LEFT_HAND = 9
    LEFT_FINGERTIP = 10
    RIGHT_COLLAR = 11
    RIGHT_SHOULDER = 12
    RIGHT_ELBOW = 13
    RIGHT_WRIST = 14
    RIGHT_HAND = 15
    RIGHT_FINGERTIP = 16
    LEFT_HIP = 17
    LEFT_KNEE = 18
    LEFT_ANKLE = 19
    LEFT_FOOT = 20
    RIGHT_HIP = 21
    RIGHT_KNEE = 22
    RIGHT_ANKLE = 23
    RIGHT_FOOT = 24

    @property
    def wire_name(self) -> str:
        # LEFT_SHOULDER -> "LeftShoulder" (name used in poses.json)
        return "".join(part.capitalize() for part in self.name.split("_"))

    @classmethod
    def from_code(cls, code: int) -> Optional["JointType"]:
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def from_wire_name(cls, name: str) -> Optional["JointType"]:
        return _BY_WIRE_NAME.get(name)


_BY_WIRE_NAME: Dict[str, JointType] = {j.wire_name: j for j in JointType}

# One skeleton's usable joints at one instant, or one reference pose.
JointMap = Dict[JointType, Position2D]

# Alignment order: right arm first, then left arm (shoulder -> hand).
ARM_JOINTS: Tuple[JointType, ...] = (
    JointType.RIGHT_SHOULDER,
    JointType.RIGHT_ELBOW,
    JointType.RIGHT_WRIST,
    JointType.RIGHT_HAND,
    JointType.LEFT_SHOULDER,
    JointType.LEFT_ELBOW,
    JointType.LEFT_WRIST,
    JointType.LEFT_HAND,
)

# Index ranges into ARM_JOINTS that form a connected limb chain.
ARM_CHAINS: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 2, 3),  # right shoulder -> elbow -> wrist -> hand
    (4, 5, 6, 7),  # left shoulder -> elbow -> wrist -> hand
)

# Joints a live skeleton may contribute; the rest are tracked but unreliable.
AVAILABLE_JOINTS = frozenset(ARM_JOINTS)
