# src/posematch/analysis/joint_extractor.py
# ---------------------------------------------------------------
# Reduces a raw tracker frame to the joints the matcher can use:
# known codes on the allowlist with in-bounds projected positions.
# ---------------------------------------------------------------
from __future__ import annotations
from typing import AbstractSet, Iterable

from ..config import COORD_MAX, COORD_MIN
from ..data_models import SkeletonJoint
from ..geometry.vectors import Position2D
from ..joints import AVAILABLE_JOINTS, JointMap, JointType


def _in_bounds(v: float) -> bool:
    # NaN fails both comparisons and is dropped too
    return COORD_MIN <= v <= COORD_MAX


def extract_joints(
    joints: Iterable[SkeletonJoint],
    available: AbstractSet[JointType] = AVAILABLE_JOINTS,
) -> JointMap:
    """
    Build the live JointMap from a raw skeleton frame.

    A joint is kept only if its code is a known JointType, its projected x/y
    lie inside [0, 1] (out-of-range values are dropped, not clamped) and it is
    in `available`. Confidence, depth and real-world coordinates are ignored.
    """
    out: JointMap = {}
    for j in joints:
        jt = JointType.from_code(j.joint_type_code)
        if jt is None or jt not in available:
            continue
        x, y = j.projected_position.x, j.projected_position.y
        if not (_in_bounds(x) and _in_bounds(y)):
            continue
        out[jt] = Position2D(float(x), float(y))
    return out
