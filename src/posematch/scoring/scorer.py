# src/posematch/scoring/scorer.py
# ---------------------------------------------------------------
# Scores an aligned pose by its worst joint, applies the matcher
# cutoffs and picks the best candidate among the library poses.
# ---------------------------------------------------------------
import numpy as np
from typing import Iterable, Optional, Tuple

from ..data_models import PoseName
from ..geometry.alignment import AlignmentResult


def max_joint_distance(result: AlignmentResult) -> float:
    """
    Worst-fitting joint after alignment.
    The maximum (not the mean) is used so one badly misplaced limb rejects the pose.
    """
    d = result.joint_distances()
    if d.size == 0 or not np.all(np.isfinite(d)):
        return float("inf")
    return float(d.max())


def within_rotation(angle: float, cutoff: float) -> bool:
    return abs(angle) <= cutoff


def within_distance(score: float, cutoff: float) -> bool:
    return score <= cutoff


def best_match(candidates: Iterable[Tuple[PoseName, float]]) -> Optional[PoseName]:
    """
    Lowest score wins. Equal scores resolve to the lexicographically
    smallest pose name, independent of library iteration order.
    """
    best = None
    for name, score in candidates:
        key = (score, name.value)
        if best is None or key < best[0]:
            best = (key, name)
    return None if best is None else best[1]
