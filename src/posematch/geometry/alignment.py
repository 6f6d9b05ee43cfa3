# src/posematch/geometry/alignment.py
# ---------------------------------------------------------------
# Rigid (similarity) alignment of a reference pose onto a live
# skeleton: uniform scale from limb-chain lengths, translation by
# centering, rotation by the Kabsch algorithm (SVD of the 2x2
# covariance). Everything runs in float32.
# ---------------------------------------------------------------

from __future__ import annotations
import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from ..joints import ARM_CHAINS, ARM_JOINTS, JointMap, JointType
from .vectors import Position2D, to_matrix, to_points

logger = logging.getLogger(__name__)

Chains = Tuple[Tuple[int, ...], ...]


@dataclass
class AlignmentResult:
    """Output of one alignment call. Matrices are 2xN, one column per joint."""
    rotation_angle: float          # radians, rotation applied to the reference
    aligned_live: np.ndarray       # centered live points
    aligned_reference: np.ndarray  # rescaled, centered and rotated reference points

    def joint_distances(self) -> np.ndarray:
        """Per-joint Euclidean distance between the two aligned sets."""
        return np.linalg.norm(self.aligned_live - self.aligned_reference, axis=0)

    def live_points(self):
        return to_points(self.aligned_live)

    def reference_points(self):
        return to_points(self.aligned_reference)


def arm_points(joint_map: JointMap, joints: Sequence[JointType] = ARM_JOINTS) -> Optional[list]:
    """Pick `joints` out of the map in order; None if any of them is missing."""
    out = []
    for j in joints:
        p = joint_map.get(j)
        if p is None:
            return None
        out.append(p)
    return out


def chain_length(mat: np.ndarray, chains: Chains = ARM_CHAINS) -> np.float32:
    """Sum of consecutive segment lengths along every chain."""
    total = np.float32(0.0)
    for chain in chains:
        seg = mat[:, list(chain[1:])] - mat[:, list(chain[:-1])]
        total += np.linalg.norm(seg, axis=0).sum(dtype=np.float32)
    return np.float32(total)


def kabsch_rotation(source: np.ndarray, target: np.ndarray) -> Optional[np.ndarray]:
    """
    Optimal proper rotation R minimising sum |R s_i - t_i|^2 for centered
    2xN matrices. Returns None when the SVD fails or yields non-finite values.
    """
    cov = source @ target.T
    try:
        u, _s, vh = np.linalg.svd(cov)
    except np.linalg.LinAlgError:
        logger.debug("SVD did not converge on covariance %s", cov.tolist())
        return None
    if not (np.all(np.isfinite(u)) and np.all(np.isfinite(vh))):
        return None

    v = vh.T
    # reflection guard: force det(R) = +1
    d = 1.0 if np.linalg.det(v @ u.T) >= 0 else -1.0
    correction = np.eye(cov.shape[0], dtype=np.float32)
    correction[-1, -1] = d
    return (v @ correction @ u.T).astype(np.float32)


def align(
    live: Optional[Sequence[Position2D]],
    reference: Optional[Sequence[Position2D]],
    chains: Chains = ARM_CHAINS,
) -> Optional[AlignmentResult]:
    """
    Fit scale and rotation mapping `reference` onto `live`.

    Both sequences must be ordered the same way (ARM_JOINTS by default) and
    `chains` index into that order. Returns None for incomplete or degenerate
    input; no exception escapes for bad geometry.
    """
    if live is None or reference is None:
        return None
    n = len(live)
    if n != len(reference) or n < 2:
        return None
    if any(i >= n for chain in chains for i in chain):
        return None

    m_live = to_matrix(live)
    m_ref = to_matrix(reference)

    total_live = chain_length(m_live, chains)
    total_ref = chain_length(m_ref, chains)
    if not (np.isfinite(total_live) and np.isfinite(total_ref)):
        return None
    if total_live <= 0 or total_ref <= 0:
        logger.debug("degenerate chain length live=%s reference=%s", total_live, total_ref)
        return None

    # bring the reference onto the live chain length
    scale = np.float32(total_live / total_ref)
    m_ref = m_ref * scale

    m_live = m_live - m_live.mean(axis=1, keepdims=True)
    m_ref = m_ref - m_ref.mean(axis=1, keepdims=True)

    rot = kabsch_rotation(m_ref, m_live)
    if rot is None:
        return None

    angle = float(math.atan2(rot[1, 0], rot[0, 0]))
    aligned_ref = (rot @ m_ref).astype(np.float32)
    if not np.all(np.isfinite(aligned_ref)):
        return None
    return AlignmentResult(rotation_angle=angle, aligned_live=m_live, aligned_reference=aligned_ref)
