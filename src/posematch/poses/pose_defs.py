# src/posematch/poses/pose_defs.py
# Reference captures shipped with the package, used when no poses.json exists.

from ..data_models import PoseRecord
from .library import PoseLibrary

BUILTIN_POSES = {  # central registry of bundled reference poses
    "DabR": {  # right-arm dab, head tucked into the left elbow
        "label": "Dab (right)",
        "data": [
            ["Head", [0.5808275, 0.42642814]],
            ["Neck", [0.58105177, 0.45120373]],
            ["Torso", [0.5645727, 0.5913842]],
            ["Waist", [0.5587295, 0.68986714]],
            ["LeftCollar", [0.5765486, 0.4895107]],
            ["LeftShoulder", [0.68835175, 0.49775392]],
            ["LeftElbow", [0.5864927, 0.5303629]],
            ["LeftWrist", [0.45776764, 0.40316057]],
            ["LeftHand", [0.43292272, 0.37860954]],
            ["LeftFingertip", [0.0, 0.0]],
            ["RightCollar", [0.5765486, 0.4895107]],
            ["RightShoulder", [0.51725876, 0.48693466]],
            ["RightElbow", [0.3500515, 0.41818976]],
            ["RightWrist", [0.20907341, 0.3226182]],
            ["RightHand", [0.1777911, 0.30141133]],
            ["RightFingertip", [0.0, 0.0]],
            ["LeftHip", [0.6397388, 0.70486915]],
            ["LeftKnee", [0.6397388, 0.91291016]],
            ["LeftAnkle", [0.6397388, 1.1086042]],
            ["LeftFoot", [0.0, 0.0]],
            ["RightHip", [0.4802191, 0.7070243]],
            ["RightKnee", [0.4802191, 0.90910274]],
            ["RightAnkle", [0.4802191, 1.099188]],
            ["RightFoot", [0.0, 0.0]],
        ],
    },
}


def builtin_records():
    return [PoseRecord(name=name, data=spec["data"]) for name, spec in BUILTIN_POSES.items()]


def builtin_library() -> PoseLibrary:
    return PoseLibrary.from_records(builtin_records())
