import numpy as np
import pytest
from helpers import DAB_R_ARMS, rotate_about_centroid, to_frame, to_record, transform

from posematch.analysis.pose_matcher import PoseDetector, PoseTester, check_pose, detect
from posematch.data_models import PoseName, Settings
from posematch.geometry.vectors import Position2D
from posematch.joints import ARM_JOINTS, JointType
from posematch.poses.library import PoseLibrary

LOOSE = Settings(joint_cutoff=1.0, rotation_cutoff=3.2)

# reference pose as listed in the matcher's acceptance scenario
DAB_R_ROUNDED = {
    JointType.RIGHT_SHOULDER: (0.517, 0.487),
    JointType.RIGHT_ELBOW: (0.350, 0.418),
    JointType.RIGHT_WRIST: (0.209, 0.323),
    JointType.RIGHT_HAND: (0.178, 0.301),
    JointType.LEFT_SHOULDER: (0.688, 0.498),
    JointType.LEFT_ELBOW: (0.586, 0.530),
    JointType.LEFT_WRIST: (0.458, 0.403),
    JointType.LEFT_HAND: (0.433, 0.379),
}


def test_match_identity(dab_points, dab_library, strict_settings):
    detector = PoseDetector(strict_settings, dab_library)
    assert detector.detect(to_frame(dab_points)) is PoseName.DAB_R


def test_match_identity_score_is_zero(dab_points, dab_library, strict_settings):
    diag = PoseTester(PoseName.DAB_R, strict_settings, dab_library).inspect(to_frame(dab_points))
    assert diag.matched
    assert diag.max_distance == pytest.approx(0.0, abs=1e-6)
    assert diag.rotation_angle == pytest.approx(0.0, abs=1e-5)


def test_rounded_scenario():
    library = PoseLibrary.from_records([to_record("DabR", DAB_R_ROUNDED)])
    settings = Settings(joint_cutoff=0.01, rotation_cutoff=0.34)
    assert detect(to_frame(DAB_R_ROUNDED), settings, library) is PoseName.DAB_R

    moved = dict(DAB_R_ROUNDED)
    moved[JointType.RIGHT_ELBOW] = (0.450, 0.418)
    assert detect(to_frame(moved), settings, library) is None


def test_match_close(dab_points, dab_library, strict_settings):
    # hand-sized jitter on the right arm
    dab_points[JointType.RIGHT_ELBOW] = (0.3501515, 0.41818976)
    dab_points[JointType.RIGHT_WRIST] = (0.20917341, 0.3226182)
    dab_points[JointType.RIGHT_HAND] = (0.1778911, 0.30141133)
    assert detect(to_frame(dab_points), strict_settings, dab_library) is PoseName.DAB_R


def test_nomatch_joint_cutoff(dab_points, dab_library, strict_settings):
    dab_points[JointType.RIGHT_ELBOW] = (0.4500515, 0.41818976)
    dab_points[JointType.RIGHT_WRIST] = (0.30907341, 0.3226182)
    dab_points[JointType.RIGHT_HAND] = (0.2777911, 0.30141133)
    assert detect(to_frame(dab_points), strict_settings, dab_library) is None
    diag = PoseTester(PoseName.DAB_R, strict_settings, dab_library).inspect(to_frame(dab_points))
    assert diag.reason == "joint_cutoff"


def test_match_translated(dab_points, dab_library, strict_settings):
    shifted = transform(dab_points, lambda x, y: (x + 0.2, y + 0.2))
    assert detect(to_frame(shifted), strict_settings, dab_library) is PoseName.DAB_R


@pytest.mark.parametrize("k", [1.2, 0.5])
def test_match_scaled(dab_points, dab_library, strict_settings, k):
    scaled = transform(dab_points, lambda x, y: (x * k, y * k))
    assert detect(to_frame(scaled), strict_settings, dab_library) is PoseName.DAB_R


@pytest.mark.parametrize("theta", [0.15, -0.15, 0.3, -0.3])
def test_match_rotation_within_cutoff(dab_points, dab_library, strict_settings, theta):
    rotated = rotate_about_centroid(dab_points, theta)
    assert detect(to_frame(rotated), strict_settings, dab_library) is PoseName.DAB_R


@pytest.mark.parametrize("theta", [0.4, -0.4, 0.8])
def test_nomatch_rotation_cutoff(dab_points, dab_library, strict_settings, theta):
    rotated = rotate_about_centroid(dab_points, theta)
    assert detect(to_frame(rotated), strict_settings, dab_library) is None
    diag = PoseTester(PoseName.DAB_R, strict_settings, dab_library).inspect(to_frame(rotated))
    assert diag.reason == "rotation_cutoff"
    assert abs(diag.rotation_angle) == pytest.approx(abs(theta), abs=1e-4)


@pytest.mark.parametrize("missing", ARM_JOINTS)
def test_missing_arm_joint_never_matches(dab_points, dab_library, missing):
    del dab_points[missing]
    assert detect(to_frame(dab_points), LOOSE, dab_library) is None


def test_out_of_range_arm_joint_never_matches(dab_points, dab_library):
    dab_points[JointType.LEFT_HAND] = (1.05, 0.4)
    assert detect(to_frame(dab_points), LOOSE, dab_library) is None


def test_joint_cutoff_is_monotonic(dab_points, dab_library):
    dab_points[JointType.RIGHT_ELBOW] = (0.36, 0.43)
    frame = to_frame(dab_points)
    score = PoseTester(PoseName.DAB_R, LOOSE, dab_library).inspect(frame).max_distance
    assert score > 0

    results = [detect(frame, Settings(joint_cutoff=c, rotation_cutoff=0.34), dab_library)
               for c in (score * 0.5, score * 0.99, score * 1.01, score * 2, 1.0)]
    assert results == [None, None, PoseName.DAB_R, PoseName.DAB_R, PoseName.DAB_R]


def test_rotation_cutoff_is_monotonic(dab_points, dab_library):
    frame = to_frame(rotate_about_centroid(dab_points, 0.3))
    results = [detect(frame, Settings(joint_cutoff=0.01, rotation_cutoff=c), dab_library)
               for c in (0.1, 0.29, 0.31, 1.0)]
    assert results == [None, None, PoseName.DAB_R, PoseName.DAB_R]


def test_best_score_wins(dab_points):
    near = dict(DAB_R_ARMS)
    near[JointType.LEFT_ELBOW] = (0.60, 0.55)
    library = PoseLibrary.from_records([to_record("HandsUp", near), to_record("DabR", DAB_R_ARMS)])
    assert detect(to_frame(dab_points), LOOSE, library) is PoseName.DAB_R
    assert detect(to_frame(near), LOOSE, library) is PoseName.HANDS_UP


def test_tie_breaks_on_pose_name(dab_points):
    # identical references give bit-identical scores
    library = PoseLibrary.from_records([to_record("DabR", DAB_R_ARMS), to_record("DabL", DAB_R_ARMS)])
    assert detect(to_frame(dab_points), LOOSE, library) is PoseName.DAB_L
    library = PoseLibrary.from_records([to_record("Roof", DAB_R_ARMS), to_record("HandsUp", DAB_R_ARMS)])
    assert detect(to_frame(dab_points), LOOSE, library) is PoseName.HANDS_UP


def test_reference_missing_arm_joint_is_skipped(dab_points):
    partial = dict(DAB_R_ARMS)
    del partial[JointType.LEFT_WRIST]
    library = PoseLibrary.from_records([to_record("Roof", partial), to_record("DabR", DAB_R_ARMS)])
    assert detect(to_frame(dab_points), LOOSE, library) is PoseName.DAB_R


def test_degenerate_reference_is_skipped(dab_points):
    flat = {jt: (0.5, 0.5) for jt in ARM_JOINTS}
    library = PoseLibrary.from_records([to_record("Roof", flat)])
    diag = PoseTester(PoseName.ROOF, LOOSE, library).inspect(to_frame(dab_points))
    assert diag.reason == "degenerate"
    assert not diag.matched


def test_empty_library(dab_points, strict_settings):
    assert detect(to_frame(dab_points), strict_settings, PoseLibrary()) is None


def test_settings_changes_apply_on_next_frame(dab_points, dab_library):
    dab_points[JointType.RIGHT_ELBOW] = (0.37, 0.44)
    frame = to_frame(dab_points)
    detector = PoseDetector(Settings(joint_cutoff=0.001, rotation_cutoff=0.34), dab_library)
    assert detector.detect(frame) is None
    detector.settings.joint_cutoff = 0.5
    assert detector.detect(frame) is PoseName.DAB_R


def test_tester_overwrites_last_diagnostics(dab_points, dab_library, strict_settings):
    tester = PoseTester(PoseName.DAB_R, strict_settings, dab_library)
    assert tester.last_diagnostics is None

    assert tester.detect(to_frame(dab_points)) is PoseName.DAB_R
    first = tester.last_diagnostics
    assert first.matched and len(first.aligned_live) == 8 and len(first.aligned_reference) == 8

    del dab_points[JointType.RIGHT_HAND]
    assert tester.detect(to_frame(dab_points)) is None
    assert tester.last_diagnostics.reason == "missing_joints"
    assert tester.last_diagnostics.aligned_live == []
    assert first.matched


def test_tester_for_pose_not_in_library(dab_points, dab_library, strict_settings):
    tester = PoseTester(PoseName.FLYING_L, strict_settings, dab_library)
    assert tester.detect(to_frame(dab_points)) is None
    assert tester.last_diagnostics.reason == "missing_joints"


def test_check_pose_reports_aligned_points(dab_points):
    live = {jt: Position2D(*p) for jt, p in dab_points.items()}
    diag = check_pose(PoseName.DAB_R, live, live, 0.01, 0.34)
    assert diag.matched
    assert np.allclose(diag.aligned_live, diag.aligned_reference, atol=1e-6)
