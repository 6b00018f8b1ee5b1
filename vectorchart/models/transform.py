"""Affine transforms backed by numpy 3x3 matrices."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np


class AffineTransform:
    """2D affine transform ``[a c e; b d f; 0 0 1]`` (canvas convention).

    A point (x, y) maps to (a*x + c*y + e, b*x + d*y + f).
    """

    __slots__ = ("matrix",)

    def __init__(self, a: float = 1.0, b: float = 0.0, c: float = 0.0,
                 d: float = 1.0, e: float = 0.0, f: float = 0.0) -> None:
        self.matrix = np.array(
            [[a, c, e], [b, d, f], [0.0, 0.0, 1.0]], dtype=np.float64
        )

    # ==================== Constructors ====================

    @classmethod
    def identity(cls) -> "AffineTransform":
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> "AffineTransform":
        return cls(e=tx, f=ty)

    @classmethod
    def scaling(cls, sx: float, sy: Optional[float] = None) -> "AffineTransform":
        return cls(a=sx, d=sx if sy is None else sy)

    @classmethod
    def rotation(cls, angle: float) -> "AffineTransform":
        """Rotation by ``angle`` radians around the origin."""
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        return cls(a=cos_a, b=sin_a, c=-sin_a, d=cos_a)

    @classmethod
    def from_matrix(cls, matrix: np.ndarray) -> "AffineTransform":
        transform = cls()
        transform.matrix = np.array(matrix, dtype=np.float64)
        return transform

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "AffineTransform":
        """Build from ``[a, b, c, d, e, f]``."""
        if len(values) != 6:
            raise ValueError(f"Affine transform needs 6 values, got {len(values)}")
        return cls(*[float(v) for v in values])

    # ==================== Accessors ====================

    def as_sequence(self) -> List[float]:
        m = self.matrix
        return [float(v) for v in (m[0, 0], m[1, 0], m[0, 1], m[1, 1], m[0, 2], m[1, 2])]

    @property
    def is_identity(self) -> bool:
        return bool(np.allclose(self.matrix, np.eye(3)))

    @property
    def rotation_angle(self) -> float:
        """Angle of the image of the unit X vector, in radians."""
        return math.atan2(self.matrix[1, 0], self.matrix[0, 0])

    # ==================== Operations ====================

    def apply(self, x: float, y: float) -> Tuple[float, float]:
        m = self.matrix
        return (
            float(m[0, 0] * x + m[0, 1] * y + m[0, 2]),
            float(m[1, 0] * x + m[1, 1] * y + m[1, 2]),
        )

    def apply_points(self, points: Iterable[Tuple[float, float]]) -> np.ndarray:
        """Transform an (N, 2) array of points at once."""
        pts = np.asarray(list(points), dtype=np.float64).reshape(-1, 2)
        if pts.size == 0:
            return pts
        homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
        return (homogeneous @ self.matrix.T)[:, :2]

    def multiply(self, other: "AffineTransform") -> "AffineTransform":
        """``self`` applied after ``other``."""
        return AffineTransform.from_matrix(self.matrix @ other.matrix)

    def inverse(self) -> "AffineTransform":
        return AffineTransform.from_matrix(np.linalg.inv(self.matrix))

    def copy(self) -> "AffineTransform":
        return AffineTransform.from_matrix(self.matrix.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return bool(np.allclose(self.matrix, other.matrix))

    def __repr__(self) -> str:
        a, b, c, d, e, f = (round(v, 4) for v in self.as_sequence())
        return f"AffineTransform(a={a}, b={b}, c={c}, d={d}, e={e}, f={f})"
