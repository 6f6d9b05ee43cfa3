# src/posematch/analysis/pose_matcher.py
# ---------------------------------------------------------------
# Pose detection: align the live arm joints onto every reference
# pose, reject by rotation and worst-joint distance, keep the
# closest survivor. PoseTester runs the same check against a
# single pose and keeps the intermediate numbers for calibration.
# ---------------------------------------------------------------

from __future__ import annotations
import logging
from typing import Iterable, List, Optional, Tuple

from ..data_models import AlignmentDiagnostics, PoseName, Settings, SkeletonJoint
from ..geometry.alignment import align, arm_points
from ..joints import JointMap
from ..poses.library import PoseLibrary
from ..scoring.scorer import best_match, max_joint_distance, within_distance, within_rotation
from .joint_extractor import extract_joints

logger = logging.getLogger(__name__)


def check_pose(
    pose: PoseName,
    live: JointMap,
    reference: Optional[JointMap],
    joint_cutoff: float,
    rotation_cutoff: float,
) -> AlignmentDiagnostics:
    """Score one reference pose against the live joints; never raises for bad geometry."""
    diag = AlignmentDiagnostics(pose=pose)
    live_pts = arm_points(live)
    ref_pts = arm_points(reference) if reference is not None else None
    if live_pts is None or ref_pts is None:
        diag.reason = "missing_joints"
        return diag

    result = align(live_pts, ref_pts)
    if result is None:
        diag.reason = "degenerate"
        return diag

    diag.rotation_angle = result.rotation_angle
    diag.aligned_live = [p.as_tuple() for p in result.live_points()]
    diag.aligned_reference = [p.as_tuple() for p in result.reference_points()]
    diag.max_distance = max_joint_distance(result)

    if not within_rotation(result.rotation_angle, rotation_cutoff):
        diag.reason = "rotation_cutoff"
    elif not within_distance(diag.max_distance, joint_cutoff):
        diag.reason = "joint_cutoff"
    else:
        diag.reason = "matched"
        diag.matched = True
    return diag


class PoseDetector:
    """Matches each incoming skeleton frame against a whole PoseLibrary."""

    def __init__(self, settings: Settings, library: PoseLibrary):
        self.settings = settings
        self.library = library

    def scores(self, live: JointMap) -> List[Tuple[PoseName, float]]:
        # one consistent read of the thresholds per frame
        joint_cutoff = self.settings.joint_cutoff
        rotation_cutoff = self.settings.rotation_cutoff
        matched: List[Tuple[PoseName, float]] = []
        for name, reference in self.library.items():
            diag = check_pose(name, live, reference, joint_cutoff, rotation_cutoff)
            if diag.matched:
                matched.append((name, diag.max_distance))
            else:
                logger.debug("%s rejected: %s (angle=%s, max_dist=%s)",
                             name.value, diag.reason, diag.rotation_angle, diag.max_distance)
        return matched

    def detect(self, joints: Iterable[SkeletonJoint]) -> Optional[PoseName]:
        live = extract_joints(joints)
        return best_match(self.scores(live))


def detect(joints: Iterable[SkeletonJoint], settings: Settings, library: PoseLibrary) -> Optional[PoseName]:
    return PoseDetector(settings, library).detect(joints)


class PoseTester:
    """
    Single-pose variant of PoseDetector for calibration.

    `inspect` returns the full AlignmentDiagnostics and also stores it in
    `last_diagnostics`, overwriting the previous call's values. No locking:
    readers on other threads must synchronize themselves.
    """

    def __init__(self, pose: PoseName, settings: Settings, library: PoseLibrary):
        self.pose = pose
        self.settings = settings
        self.library = library
        self.last_diagnostics: Optional[AlignmentDiagnostics] = None

    def inspect(self, joints: Iterable[SkeletonJoint]) -> AlignmentDiagnostics:
        live = extract_joints(joints)
        diag = check_pose(
            self.pose,
            live,
            self.library.get(self.pose),
            self.settings.joint_cutoff,
            self.settings.rotation_cutoff,
        )
        self.last_diagnostics = diag
        return diag

    def detect(self, joints: Iterable[SkeletonJoint]) -> Optional[PoseName]:
        return self.pose if self.inspect(joints).matched else None
