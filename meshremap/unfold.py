"""Unfolding of a bent structured hexahedral mesh into a straight (flat) one."""

from __future__ import annotations

from itertools import accumulate
from typing import Optional

from meshremap.boundary import BoundaryExtractor
from meshremap.connectivity import ConnectivityAnalyzer
from meshremap.edges import EdgeCalculator, EdgeInfo
from meshremap.geometry import Element, ElementType, Mesh, Node, Part, Vector3D
from meshremap.indexer import IndexingError, StructuredGridIndexer

# Ways to reach grid node (i, j, k): element offset (di, dj, dk) and the local
# corner of that element which sits on the node, in the order they are tried.
_NODE_LOOKUP = (
    (0, 0, 0, 0),
    (1, 0, 0, 1),
    (0, 1, 0, 3),
    (0, 0, 1, 4),
    (1, 1, 0, 2),
    (1, 0, 1, 5),
    (0, 1, 1, 7),
    (1, 1, 1, 6),
)


class UnfoldError(Exception):
    """Raised when a bent mesh cannot be unfolded."""


def _cumulative(edge: EdgeInfo) -> list[float]:
    return list(accumulate(edge.segment_lengths, initial=0.0))


def _axis_direction(start: Optional[Node], end: Optional[Node], default: Vector3D) -> Vector3D:
    if start is None or end is None:
        return default
    direction = end.position - start.position
    if direction.magnitude() > 1e-10:
        return direction.normalized()
    return default


class FlatMeshGenerator:
    """Builds a flat mesh whose i-direction follows the arc length of a bent mesh."""

    def __init__(self) -> None:
        self.flat_length_i = 0.0
        self.flat_length_j = 0.0
        self.flat_length_k = 0.0
        self.dim_i = 0
        self.dim_j = 0
        self.dim_k = 0
        self.j_axis_dir = Vector3D(0.0, 1.0, 0.0)
        self.k_axis_dir = Vector3D(0.0, 0.0, 1.0)
        self.analyzed_mesh = Mesh()
        self.connectivity = ConnectivityAnalyzer()
        self.indexer = StructuredGridIndexer()
        self.boundary = BoundaryExtractor()
        self.edge_calculator = EdgeCalculator()

    def generate_flat_mesh(self, bent_mesh: Mesh) -> Mesh:
        """Analyse the bent mesh and return its unfolded counterpart."""
        self._analyze_bent_mesh(bent_mesh)
        self._calculate_flat_dimensions()
        return self._generate_mesh()

    def _analyze_bent_mesh(self, bent_mesh: Mesh) -> None:
        self.analyzed_mesh = bent_mesh.copy()
        self.connectivity = ConnectivityAnalyzer()
        self.indexer = StructuredGridIndexer()
        self.boundary = BoundaryExtractor()
        self.edge_calculator = EdgeCalculator()

        self.connectivity.build(self.analyzed_mesh)
        if not self.connectivity.is_structured:
            raise UnfoldError(
                "Input mesh is not a valid structured grid: " + self.connectivity.error_message
            )
        try:
            self.indexer.assign_indices(self.analyzed_mesh, self.connectivity)
        except IndexingError as exc:
            raise UnfoldError(f"Failed to assign structured indices: {exc}") from exc
        self.indexer.build_index_lookup(self.analyzed_mesh)
        self.dim_i, self.dim_j, self.dim_k = self.indexer.dimensions

        self.boundary.extract(self.analyzed_mesh)
        self.edge_calculator.calculate_all_edges(self.analyzed_mesh, self.boundary)
        self._analyze_cross_section_axes()

    def _calculate_flat_dimensions(self) -> None:
        arc_lengths = self.centerline_arc_lengths()
        if arc_lengths:
            self.flat_length_i = arc_lengths[-1]
        self.flat_length_j = self.edge_calculator.neutral_length_j
        self.flat_length_k = self.edge_calculator.neutral_length_k

    def centerline_arc_lengths(self) -> list[float]:
        """Average cumulative arc length of the four i-edges at each i node position."""
        cumulatives = [_cumulative(self.edge_calculator.edge(index)) for index in range(4)]
        lengths = []
        for i in range(self.dim_i + 1):
            values = [cum[i] for cum in cumulatives if i < len(cum)]
            if values:
                lengths.append(sum(values) / len(values))
            else:
                lengths.append(i / self.dim_i * self.flat_length_i)
        return lengths

    def node_at(self, i: int, j: int, k: int) -> Optional[Node]:
        """Node of the analysed bent mesh at grid node position (i, j, k), or None."""
        dims = (self.dim_i, self.dim_j, self.dim_k)
        for di, dj, dk, corner in _NODE_LOOKUP:
            index = (i - di, j - dj, k - dk)
            if not all(0 <= value < dim for value, dim in zip(index, dims)):
                continue
            element = self.indexer.element_at(*index)
            if element is not None:
                return self.analyzed_mesh.node(element.node_ids[corner])
        return None

    def _analyze_cross_section_axes(self) -> None:
        origin = self.node_at(0, 0, 0)
        self.j_axis_dir = _axis_direction(
            origin, self.node_at(0, self.dim_j, 0), Vector3D(0.0, 1.0, 0.0)
        )
        self.k_axis_dir = _axis_direction(
            origin, self.node_at(0, 0, self.dim_k), Vector3D(0.0, 0.0, 1.0)
        )

    def _generate_mesh(self) -> Mesh:
        flat = Mesh(name="flat_unfolded")
        arc_lengths = self.centerline_arc_lengths()
        dim_i, dim_j, dim_k = self.dim_i, self.dim_j, self.dim_k
        half_j, half_k = self.flat_length_j / 2, self.flat_length_k / 2

        def corner(node: Optional[Node], fallback: Vector3D) -> Vector3D:
            return node.position if node is not None else fallback

        corners = (
            corner(self.node_at(0, 0, 0), Vector3D(0.0, -half_j, -half_k)),
            corner(self.node_at(0, dim_j, 0), Vector3D(0.0, half_j, -half_k)),
            corner(self.node_at(0, 0, dim_k), Vector3D(0.0, -half_j, half_k)),
            corner(self.node_at(0, dim_j, dim_k), Vector3D(0.0, half_j, half_k)),
        )
        min_y = min(c.y for c in corners)
        max_y = max(c.y for c in corners)
        min_z = min(c.z for c in corners)
        max_z = max(c.z for c in corners)
        size_y = max_y - min_y
        size_z = max_z - min_z
        if size_y < 1e-10:
            size_y = self.flat_length_j
        if size_z < 1e-10:
            size_z = self.flat_length_k

        node_id = 1
        for k in range(dim_k + 1):
            z = min_z + (k / dim_k) * size_z
            for j in range(dim_j + 1):
                y = min_y + (j / dim_j) * size_y
                for i in range(dim_i + 1):
                    x = arc_lengths[i] if i < len(arc_lengths) else (i / dim_i) * self.flat_length_i
                    flat.add_node(Node(node_id, Vector3D(x, y, z)))
                    node_id += 1

        per_row = dim_i + 1
        per_slice = per_row * (dim_j + 1)
        element_id = 1
        for k in range(dim_k):
            for j in range(dim_j):
                for i in range(dim_i):
                    base = 1 + i + j * per_row + k * per_slice
                    node_ids = [
                        base,
                        base + 1,
                        base + 1 + per_row,
                        base + per_row,
                        base + per_slice,
                        base + 1 + per_slice,
                        base + 1 + per_row + per_slice,
                        base + per_row + per_slice,
                    ]
                    element = Element(
                        id=element_id, part_id=1, node_ids=node_ids, type=ElementType.HEX8
                    )
                    element.set_grid_index(i, j, k)
                    flat.add_element(element)
                    element_id += 1

        flat.add_part(Part(id=1, name="unfolded_part"))
        return flat