import pytest
from helpers import DAB_R_ARMS, to_record

from posematch.data_models import Settings
from posematch.geometry.vectors import Position2D
from posematch.joints import ARM_JOINTS
from posematch.poses.library import PoseLibrary


@pytest.fixture
def dab_points():
    return dict(DAB_R_ARMS)


@pytest.fixture
def dab_library():
    return PoseLibrary.from_records([to_record("DabR", DAB_R_ARMS)])


@pytest.fixture
def strict_settings():
    return Settings(joint_cutoff=0.01, rotation_cutoff=0.34)


@pytest.fixture
def arm_positions():
    return [Position2D(*DAB_R_ARMS[j]) for j in ARM_JOINTS]
