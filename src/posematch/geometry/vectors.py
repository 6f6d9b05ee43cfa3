# src/posematch/geometry/vectors.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

import numpy as np

# --- TYPE ALIASES ---
Point = Tuple[float, float]


@dataclass(frozen=True)
class Position2D:
    """2D point in normalized frame space (x right, y down, nominally [0,1])."""
    x: float
    y: float

    def __add__(self, other: "Position2D") -> "Position2D":
        return Position2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Position2D") -> "Position2D":
        return Position2D(self.x - other.x, self.y - other.y)

    def __mul__(self, k: float) -> "Position2D":
        return Position2D(self.x * k, self.y * k)

    __rmul__ = __mul__

    def norm(self) -> float:
        return math.hypot(self.x, self.y)

    def distance(self, other: "Position2D") -> float:
        return (self - other).norm()

    def as_tuple(self) -> Point:
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, p: Point) -> "Position2D":
        return cls(float(p[0]), float(p[1]))


def to_matrix(points: Iterable[Position2D]) -> np.ndarray:
    """Stack points into a 2xN float32 matrix (one column per point)."""
    pts = list(points)
    return np.array([[p.x for p in pts], [p.y for p in pts]], dtype=np.float32).reshape(2, len(pts))


def to_points(mat: np.ndarray) -> List[Position2D]:
    """Inverse of to_matrix."""
    return [Position2D(float(mat[0, i]), float(mat[1, i])) for i in range(mat.shape[1])]
