# src/posematch/data_models.py

from __future__ import annotations
from enum import Enum
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, confloat, field_validator

from .config import DEFAULT_JOINT_CUTOFF, DEFAULT_ROTATION_CUTOFF
from .joints import JointType

# --- Base Structures ---

class PoseName(str, Enum):
    """Closed set of poses the matcher can report."""
    DAB_R = "DabR"
    DAB_L = "DabL"
    HANDS_UP = "HandsUp"
    ROOF = "Roof"
    FLYING_R = "FlyingR"
    FLYING_L = "FlyingL"

    @classmethod
    def parse(cls, name: str) -> Optional["PoseName"]:
        try:
            return cls(name)
        except ValueError:
            return None


class Vector3(BaseModel):
    x: float
    y: float
    z: float = 0.0


class SkeletonJoint(BaseModel):
    """One joint as reported by the tracker. Only the code and proj x/y are used."""
    joint_type_code: int = Field(description="Sensor joint code (see JointType).")
    confidence: float = 0.0
    projected_position: Vector3 = Field(description="Normalized projection; z is depth.")
    real_position: Optional[Vector3] = None


class SkeletonFrame(BaseModel):
    joints: List[SkeletonJoint] = []


# --- Configuration ---

class Settings(BaseModel):
    """Matcher thresholds. Mutable between frames; validated on every assignment."""
    model_config = ConfigDict(validate_assignment=True)

    joint_cutoff: confloat(gt=0.0, allow_inf_nan=False) = Field(
        default=DEFAULT_JOINT_CUTOFF, description="Max tolerated worst-joint distance after alignment.")
    rotation_cutoff: confloat(gt=0.0, allow_inf_nan=False) = Field(
        default=DEFAULT_ROTATION_CUTOFF, description="Max tolerated fitted rotation, radians.")


class SettingsUpdate(BaseModel):
    joint_cutoff: Optional[confloat(gt=0.0, allow_inf_nan=False)] = None
    rotation_cutoff: Optional[confloat(gt=0.0, allow_inf_nan=False)] = None


# --- Persistence ---

Coordinate = confloat(allow_inf_nan=False)

class PoseRecord(BaseModel):
    """One captured reference pose as stored in poses.json. Coordinates must be finite."""
    name: str
    data: List[Tuple[str, Tuple[Coordinate, Coordinate]]]

    @field_validator("data")
    @classmethod
    def _known_joints(cls, v):
        for joint_name, _ in v:
            if JointType.from_wire_name(joint_name) is None:
                raise ValueError(f"unknown joint name {joint_name!r}")
        return v


# --- Diagnostics ---

Reason = Literal["matched", "missing_joints", "degenerate", "rotation_cutoff", "joint_cutoff"]

class AlignmentDiagnostics(BaseModel):
    """Snapshot of the last single-pose check, for calibration and overlays."""
    pose: PoseName
    matched: bool = False
    reason: Reason = "missing_joints"
    rotation_angle: Optional[float] = None
    max_distance: Optional[float] = None
    aligned_live: List[Tuple[float, float]] = []
    aligned_reference: List[Tuple[float, float]] = []


# --- API Requests / Responses ---

class DetectResponse(BaseModel):
    pose: Optional[PoseName] = None

class CaptureRequest(BaseModel):
    name: str
    joints: List[SkeletonJoint]

class CaptureResponse(BaseModel):
    status: Literal["success", "error"]
    message: str
    poses: List[PoseName] = []
