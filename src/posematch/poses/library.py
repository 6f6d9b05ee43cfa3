# src/posematch/poses/library.py
from __future__ import annotations
import logging
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping

from ..data_models import PoseName, PoseRecord
from ..geometry.vectors import Position2D
from ..joints import JointMap, JointType

logger = logging.getLogger(__name__)


def record_to_joint_map(record: PoseRecord) -> JointMap:
    """Convert the on-disk (joint_name, [x, y]) pairs into a JointMap."""
    out: JointMap = {}
    for joint_name, (x, y) in record.data:
        jt = JointType.from_wire_name(joint_name)
        if jt is not None:
            out[jt] = Position2D(float(x), float(y))
    return out


class PoseLibrary(Mapping):
    """
    Immutable mapping PoseName -> reference JointMap.

    Reference maps are curated offline and are not filtered. Iteration is in
    pose-name order so scans over the library are reproducible.
    """

    def __init__(self, poses: Mapping[PoseName, JointMap] = None):
        frozen: Dict[PoseName, Mapping] = {}
        for name in sorted(poses or {}, key=lambda p: p.value):
            frozen[name] = MappingProxyType(dict(poses[name]))
        self._poses = MappingProxyType(frozen)

    @classmethod
    def from_records(cls, records: Iterable[PoseRecord]) -> "PoseLibrary":
        poses: Dict[PoseName, JointMap] = {}
        dropped = 0
        for rec in records:
            name = PoseName.parse(rec.name)
            if name is None:
                dropped += 1
                logger.debug("Skipping record with unrecognized pose name %r", rec.name)
                continue
            # later captures of the same pose replace earlier ones
            poses[name] = record_to_joint_map(rec)
        if dropped:
            logger.warning("Dropped %d pose record(s) with unrecognized names", dropped)
        logger.info("Pose library loaded: %s", ", ".join(p.value for p in poses) or "(empty)")
        return cls(poses)

    def __getitem__(self, key: PoseName) -> JointMap:
        return self._poses[key]

    def __iter__(self) -> Iterator[PoseName]:
        return iter(self._poses)

    def __len__(self) -> int:
        return len(self._poses)

    def __repr__(self) -> str:
        return f"PoseLibrary({[p.value for p in self._poses]})"
