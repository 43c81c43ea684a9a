"""Mapping from the parametric unit cube onto a structured bent mesh."""

from __future__ import annotations

from meshremap.boundary import BoundaryExtractor
from meshremap.edges import EdgeCalculator
from meshremap.geometry import Mesh, Vector3D
from meshremap.interpolation import EdgeInterpolator, FaceInterpolator


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class ParametricMapper:
    """Maps (u, v, w) in [0, 1]^3 to physical points using the boundary of a grid."""

    def __init__(self) -> None:
        self.valid = False
        self.corners: list[Vector3D] = [Vector3D() for _ in range(8)]
        self.edges: list[EdgeInterpolator] = [EdgeInterpolator() for _ in range(12)]
        self.faces: list[FaceInterpolator] = [FaceInterpolator() for _ in range(6)]

    def build(
        self, mesh: Mesh, boundary: BoundaryExtractor, edge_calculator: EdgeCalculator
    ) -> None:
        """Set up corners, edges and faces; ``valid`` stays False if a corner node is missing."""
        self.valid = False
        corners = []
        for node_id in boundary.corner_nodes:
            node = mesh.node(node_id)
            if node is None:
                return
            corners.append(node.position)
        self.corners = corners
        self.edges = [EdgeInterpolator(edge_calculator.edge(i).points) for i in range(12)]
        self._build_faces()
        self.valid = True

    def _build_faces(self) -> None:
        c = self.corners
        layout = (
            (0, 3, 4, 7),
            (1, 2, 5, 6),
            (0, 1, 4, 5),
            (3, 2, 7, 6),
            (0, 1, 3, 2),
            (4, 5, 7, 6),
        )
        faces = []
        for a, b, d, e in layout:
            face = FaceInterpolator()
            face.build_bilinear(c[a], c[b], c[d], c[e])
            faces.append(face)
        self.faces = faces

    def map_to_physical(self, u: float, v: float, w: float) -> Vector3D:
        """Physical point for clamped parametric coordinates; zero if not built."""
        if not self.valid:
            return Vector3D()
        return self.edge_based_interpolate(_clamp01(u), _clamp01(v), _clamp01(w))

    def edge_based_interpolate(self, u: float, v: float, w: float) -> Vector3D:
        """Points on the four i-edges at u, blended bilinearly in (v, w)."""
        p00 = self.edges[0].interpolate(u)
        p10 = self.edges[1].interpolate(u)
        p01 = self.edges[2].interpolate(u)
        p11 = self.edges[3].interpolate(u)
        bottom = p00 * (1.0 - v) + p10 * v
        top = p01 * (1.0 - v) + p11 * v
        return bottom * (1.0 - w) + top * w

    def trilinear_interpolate(self, u: float, v: float, w: float) -> Vector3D:
        """Trilinear blend of the eight corners."""
        mu, mv, mw = 1.0 - u, 1.0 - v, 1.0 - w
        weights = (
            mu * mv * mw,
            u * mv * mw,
            u * v * mw,
            mu * v * mw,
            mu * mv * w,
            u * mv * w,
            u * v * w,
            mu * v * w,
        )
        result = Vector3D()
        for corner, weight in zip(self.corners, weights):
            result = result + corner * weight
        return result

    def transfinite_interpolate(self, u: float, v: float, w: float) -> Vector3D:
        """Gordon-Hall blend: faces minus edges plus corners."""
        mu, mv, mw = 1.0 - u, 1.0 - v, 1.0 - w
        f, e, c = self.faces, self.edges, self.corners

        faces = (
            f[0].interpolate(v, w) * mu
            + f[1].interpolate(v, w) * u
            + f[2].interpolate(u, w) * mv
            + f[3].interpolate(u, w) * v
            + f[4].interpolate(u, v) * mw
            + f[5].interpolate(u, v) * w
        )
        edges = (
            e[0].interpolate(u) * (mv * mw)
            + e[1].interpolate(u) * (v * mw)
            + e[2].interpolate(u) * (mv * w)
            + e[3].interpolate(u) * (v * w)
            + e[4].interpolate(v) * (mu * mw)
            + e[5].interpolate(v) * (u * mw)
            + e[6].interpolate(v) * (mu * w)
            + e[7].interpolate(v) * (u * w)
            + e[8].interpolate(w) * (mu * mv)
            + e[9].interpolate(w) * (u * mv)
            + e[10].interpolate(w) * (mu * v)
            + e[11].interpolate(w) * (u * v)
        )
        corners = (
            c[0] * (mu * mv * mw)
            + c[1] * (u * mv * mw)
            + c[2] * (u * v * mw)
            + c[3] * (mu * v * mw)
            + c[4] * (mu * mv * w)
            + c[5] * (u * mv * w)
            + c[6] * (u * v * w)
            + c[7] * (mu * v * w)
        )
        return faces - edges + corners

    def is_u_fold_geometry(self) -> bool:
        """True when the i-direction ends near where it starts in x (a U-shaped fold)."""
        c = self.corners
        size = max(
            abs(c[1].x - c[0].x),
            abs(c[1].y - c[0].y),
            abs(c[1].z - c[0].z),
            abs(c[5].x - c[0].x),
            abs(c[5].z - c[0].z),
            abs(c[4].x - c[0].x),
            abs(c[4].y - c[0].y),
        )
        if size < 1e-10:
            return False
        return abs(c[1].x - c[0].x) / size < 0.1

    @staticmethod
    def edge_index(axis: int, pos: int) -> int:
        """Index of an edge: 0-3 along i, 4-7 along j, 8-11 along k."""
        return axis * 4 + pos