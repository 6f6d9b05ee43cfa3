import math

from posematch.data_models import PoseRecord, SkeletonJoint, Vector3
from posematch.joints import JointType

# DabR arm joints as captured by the tracker
DAB_R_ARMS = {
    JointType.LEFT_SHOULDER: (0.68835175, 0.49775392),
    JointType.LEFT_ELBOW: (0.5864927, 0.5303629),
    JointType.LEFT_WRIST: (0.45776764, 0.40316057),
    JointType.LEFT_HAND: (0.43292272, 0.37860954),
    JointType.RIGHT_SHOULDER: (0.51725876, 0.48693466),
    JointType.RIGHT_ELBOW: (0.3500515, 0.41818976),
    JointType.RIGHT_WRIST: (0.20907341, 0.3226182),
    JointType.RIGHT_HAND: (0.1777911, 0.30141133),
}


def to_frame(points, confidence=1.0):
    return [
        SkeletonJoint(
            joint_type_code=int(jt),
            confidence=confidence,
            projected_position=Vector3(x=x, y=y, z=1000.0),
            real_position=Vector3(x=0.0, y=0.0, z=0.0),
        )
        for jt, (x, y) in points.items()
    ]


def to_record(name, points):
    return PoseRecord(name=name, data=[(jt.wire_name, p) for jt, p in points.items()])


def transform(points, fn):
    return {jt: fn(x, y) for jt, (x, y) in points.items()}


def rotate_about_centroid(points, theta):
    cx = sum(p[0] for p in points.values()) / len(points)
    cy = sum(p[1] for p in points.values()) / len(points)
    c, s = math.cos(theta), math.sin(theta)

    def rot(x, y):
        dx, dy = x - cx, y - cy
        return (cx + c * dx - s * dy, cy + s * dx + c * dy)

    return transform(points, rot)
