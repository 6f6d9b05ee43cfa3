# src/posematch/io/pose_store.py
# Reads and appends the pose library file: a stream of JSON objects
# written back to back, one per capture session (append-only).

from __future__ import annotations
import json
import logging
import os
from typing import Iterable, List

from pydantic import ValidationError

from ..data_models import PoseRecord, SkeletonJoint
from ..joints import JointType
from ..poses.library import PoseLibrary

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """The pose library file is missing or malformed. Fatal at load time."""


def _iter_json_objects(text: str):
    decoder = json.JSONDecoder()
    idx, end = 0, len(text)
    while True:
        while idx < end and text[idx].isspace():
            idx += 1
        if idx >= end:
            return
        obj, idx = decoder.raw_decode(text, idx)
        yield obj


def read_poses(path: str) -> List[PoseRecord]:
    """Parse every record in `path`. Any bad record fails the whole load."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise PersistenceError(f"cannot read pose library {path}: {e}") from e

    records: List[PoseRecord] = []
    try:
        for obj in _iter_json_objects(text):
            records.append(PoseRecord.model_validate(obj))
    except json.JSONDecodeError as e:
        raise PersistenceError(f"malformed JSON in {path}: {e}") from e
    except ValidationError as e:
        raise PersistenceError(f"invalid pose record #{len(records) + 1} in {path}: {e}") from e
    logger.info("Read %d pose record(s) from %s", len(records), path)
    return records


def load_library(path: str) -> PoseLibrary:
    return PoseLibrary.from_records(read_poses(path))


def record_from_skeleton(name: str, joints: Iterable[SkeletonJoint]) -> PoseRecord:
    """Capture every recognized joint of a frame, unfiltered, as a PoseRecord.

    Raises pydantic.ValidationError for non-finite coordinates, which would
    not survive a round trip through the file.
    """
    data = []
    for j in joints:
        jt = JointType.from_code(j.joint_type_code)
        if jt is None:
            continue
        data.append((jt.wire_name, (float(j.projected_position.x), float(j.projected_position.y))))
    return PoseRecord(name=name, data=data)


def append_pose(path: str, record: PoseRecord) -> None:
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        f.write(record.model_dump_json() + "\n")
    logger.info("Appended pose %r (%d joints) to %s", record.name, len(record.data), path)
