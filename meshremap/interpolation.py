"""Arc-length edge interpolation and bilinear / Coons face interpolation."""

from __future__ import annotations

from itertools import pairwise
from typing import Iterable, Optional

from meshremap.geometry import Vector3D


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class EdgeInterpolator:
    """A polyline parametrised by normalised arc length, t in [0, 1]."""

    def __init__(self, points: Optional[Iterable[Vector3D]] = None) -> None:
        self.points: list[Vector3D] = []
        self.arc_lengths: list[float] = []
        self.total_length = 0.0
        if points is not None:
            self.build(points)

    def build(self, points: Iterable[Vector3D]) -> None:
        """Store the points and compute cumulative arc lengths."""
        self.points = list(points)
        self.arc_lengths = []
        self.total_length = 0.0
        if len(self.points) < 2:
            return
        self.arc_lengths.append(0.0)
        for previous, current in pairwise(self.points):
            self.total_length += current.distance_to(previous)
            self.arc_lengths.append(self.total_length)

    def is_valid(self) -> bool:
        """True when the edge has at least one segment."""
        return len(self.points) >= 2

    def point(self, index: int) -> Vector3D:
        """The stored point at ``index``."""
        if not 0 <= index < len(self.points):
            raise IndexError(f"point index {index} out of range")
        return self.points[index]

    def _segment_containing(self, target: float) -> Optional[int]:
        return next(
            (i for i, (lo, hi) in enumerate(pairwise(self.arc_lengths)) if lo <= target <= hi),
            None,
        )

    def interpolate(self, t: float) -> Vector3D:
        """Point at fraction ``t`` of the total arc length (clamped to [0, 1])."""
        if not self.points:
            return Vector3D()
        if len(self.points) == 1:
            return self.points[0]
        t = _clamp01(t)
        if t <= 0.0:
            return self.points[0]
        if t >= 1.0:
            return self.points[-1]

        target = t * self.total_length
        idx = self._segment_containing(target)
        if idx is None:
            idx = 0
        segment = self.arc_lengths[idx + 1] - self.arc_lengths[idx]
        local_t = (target - self.arc_lengths[idx]) / segment if segment > 0 else 0.0
        return Vector3D.lerp(self.points[idx], self.points[idx + 1], local_t)

    def _find_segment(self, t: float) -> tuple[int, float]:
        if self.total_length <= 0.0:
            return 0, 0.0
        target = t * self.total_length
        idx = self._segment_containing(target)
        if idx is None:
            return len(self.arc_lengths) - 2, 1.0
        segment = self.arc_lengths[idx + 1] - self.arc_lengths[idx]
        local_t = (target - self.arc_lengths[idx]) / segment if segment > 0 else 0.0
        return idx, local_t

    def tangent(self, t: float) -> Vector3D:
        """Unit direction of the segment at fraction ``t``; +x for a degenerate edge."""
        if len(self.points) < 2:
            return Vector3D(1.0, 0.0, 0.0)
        idx, _ = self._find_segment(_clamp01(t))
        return (self.points[idx + 1] - self.points[idx]).normalized()


class FaceInterpolator:
    """A surface patch over (s, t) in [0, 1]^2, bilinear or a Coons patch of four edges."""

    def __init__(self) -> None:
        self.edges = [EdgeInterpolator() for _ in range(4)]
        self.corners = [Vector3D() for _ in range(4)]
        self.valid = False
        self.bilinear = False

    def build(
        self,
        edge0: EdgeInterpolator,
        edge1: EdgeInterpolator,
        edge2: EdgeInterpolator,
        edge3: EdgeInterpolator,
    ) -> None:
        """Coons patch: edge0/edge1 at s=0/1 run along t, edge2/edge3 at t=0/1 run along s."""
        self.edges = [EdgeInterpolator(edge.points) for edge in (edge0, edge1, edge2, edge3)]

        def first(edge: EdgeInterpolator) -> Vector3D:
            return edge.points[0] if edge.points else Vector3D()

        def last(edge: EdgeInterpolator) -> Vector3D:
            return edge.points[-1] if edge.points else Vector3D()

        self.corners = [first(edge0), first(edge1), last(edge0), last(edge1)]
        self.valid = all(edge.is_valid() for edge in (edge0, edge1, edge2, edge3))
        self.bilinear = False

    def build_bilinear(
        self, c00: Vector3D, c10: Vector3D, c01: Vector3D, c11: Vector3D
    ) -> None:
        """Bilinear patch through four corners named by their (s, t) position."""
        self.corners = [c00, c10, c01, c11]
        self.edges = [
            EdgeInterpolator([c00, c01]),
            EdgeInterpolator([c10, c11]),
            EdgeInterpolator([c00, c10]),
            EdgeInterpolator([c01, c11]),
        ]
        self.valid = True
        self.bilinear = True

    def interpolate(self, s: float, t: float) -> Vector3D:
        """Point at (s, t), both clamped to [0, 1]; zero when the patch is not built."""
        if not self.valid:
            return Vector3D()
        s = _clamp01(s)
        t = _clamp01(t)
        c00, c10, c01, c11 = self.corners

        if self.bilinear:
            bottom = Vector3D.lerp(c00, c10, s)
            top = Vector3D.lerp(c01, c11, s)
            return Vector3D.lerp(bottom, top, t)

        ruled_s = self.edges[0].interpolate(t) * (1.0 - s) + self.edges[1].interpolate(t) * s
        ruled_t = self.edges[2].interpolate(s) * (1.0 - t) + self.edges[3].interpolate(s) * t
        corner_blend = (
            c00 * ((1.0 - s) * (1.0 - t))
            + c10 * (s * (1.0 - t))
            + c01 * ((1.0 - s) * t)
            + c11 * (s * t)
        )
        return ruled_s + ruled_t - corner_blend