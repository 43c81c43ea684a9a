"""Geometry of the twelve boundary edges of a structured grid."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import pairwise

from meshremap.boundary import BoundaryExtractor
from meshremap.geometry import Mesh, Vector3D

# (start corner, end corner) of each of the twelve grid edges.
_EDGE_CORNERS = (
    (0, 1), (3, 2), (4, 5), (7, 6),
    (0, 3), (1, 2), (4, 7), (5, 6),
    (0, 4), (1, 5), (3, 7), (2, 6),
)


@dataclass
class EdgeInfo:
    """Points and segment lengths along one grid edge."""

    axis: int = 0
    points: list[Vector3D] = field(default_factory=list)
    segment_lengths: list[float] = field(default_factory=list)
    total_length: float = 0.0
    start_corner: int = 0
    end_corner: int = 0

    def arc_length_parameter(self, point_index: int) -> float:
        """Fraction of the total length reached at a point, in [0, 1]."""
        if point_index <= 0 or self.total_length <= 0:
            return 0.0
        if point_index >= len(self.points) - 1:
            return 1.0
        return sum(self.segment_lengths[:point_index]) / self.total_length

    def interpolate(self, t: float) -> Vector3D:
        """Index-based position: t = i / (n - 1) gives exactly point i."""
        if not self.points:
            return Vector3D()
        if t <= 0.0:
            return self.points[0]
        if t >= 1.0:
            return self.points[-1]
        n = len(self.points)
        if n < 2:
            return self.points[0]
        scaled = t * (n - 1)
        idx = int(scaled)
        if idx >= n - 1:
            return self.points[-1]
        return Vector3D.lerp(self.points[idx], self.points[idx + 1], scaled - idx)


class EdgeCalculator:
    """Measures the grid edges and derives neutral (average) lengths per axis."""

    def __init__(self) -> None:
        self.edges: list[EdgeInfo] = [EdgeInfo() for _ in range(12)]
        self.neutral_length_i = 0.0
        self.neutral_length_j = 0.0
        self.neutral_length_k = 0.0
        self.dim_i = 0
        self.dim_j = 0
        self.dim_k = 0

    def calculate_all_edges(self, mesh: Mesh, boundary: BoundaryExtractor) -> None:
        """Collect the edge points from the mesh and compute all lengths."""
        self.dim_i, self.dim_j, self.dim_k = boundary.dim_i, boundary.dim_j, boundary.dim_k
        edges = []
        for edge_nodes, (start, end) in zip(boundary.edge_nodes, _EDGE_CORNERS):
            points = [
                node.position
                for node in (mesh.node(node_id) for node_id in edge_nodes.node_ids)
                if node is not None
            ]
            segments = [b.distance_to(a) for a, b in pairwise(points)]
            edges.append(
                EdgeInfo(
                    axis=edge_nodes.axis,
                    points=points,
                    segment_lengths=segments,
                    total_length=sum(segments),
                    start_corner=start,
                    end_corner=end,
                )
            )
        self.edges = edges
        self.neutral_length_i = sum(edge.total_length for edge in edges[0:4]) / 4.0
        self.neutral_length_j = sum(edge.total_length for edge in edges[4:8]) / 4.0
        self.neutral_length_k = sum(edge.total_length for edge in edges[8:12]) / 4.0

    def edge(self, index: int) -> EdgeInfo:
        """One of the twelve edges: 0-3 along i, 4-7 along j, 8-11 along k."""
        if not 0 <= index < 12:
            raise IndexError(f"edge index must be in 0..11, got {index}")
        return self.edges[index]

    def _neutral_length(self, axis: int) -> float:
        return (self.neutral_length_i, self.neutral_length_j, self.neutral_length_k)[axis]

    def avg_element_size(self, axis: int) -> float:
        """Neutral length divided by the element count along an axis; 0 when empty."""
        if axis not in (0, 1, 2):
            raise ValueError(f"axis must be 0, 1 or 2, got {axis}")
        dim = (self.dim_i, self.dim_j, self.dim_k)[axis]
        return self._neutral_length(axis) / dim if dim > 0 else 0.0

    def edge_strain(self, edge_index: int) -> float:
        """Relative deviation of an edge's length from its axis's neutral length."""
        if not 0 <= edge_index < 12:
            return 0.0
        edge = self.edges[edge_index]
        if edge.axis not in (0, 1, 2):
            return 0.0
        neutral = self._neutral_length(edge.axis)
        if neutral <= 0:
            return 0.0
        return (edge.total_length - neutral) / neutral