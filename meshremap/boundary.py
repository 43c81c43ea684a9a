"""Boundary faces, corner nodes and edge node chains of a structured hexahedral grid."""

from __future__ import annotations

from dataclasses import dataclass, field

from meshremap.geometry import Element, Mesh

# Grid offsets of the eight local nodes of a hexahedron.
_LOCAL_NODE_OFFSETS = (
    (0, 0, 0),
    (1, 0, 0),
    (1, 1, 0),
    (0, 1, 0),
    (0, 0, 1),
    (1, 0, 1),
    (1, 1, 1),
    (0, 1, 1),
)


@dataclass
class EdgeNodes:
    """Node ids along one of the twelve grid edges, in increasing index order."""

    axis: int = 0
    node_ids: list[int] = field(default_factory=list)


class BoundaryExtractor:
    """Collects the boundary elements, the node grid, corners and edges of a structured mesh."""

    def __init__(self) -> None:
        self.dim_i = 0
        self.dim_j = 0
        self.dim_k = 0
        self.corner_nodes: list[int] = [0] * 8
        self.edge_nodes: list[EdgeNodes] = [EdgeNodes() for _ in range(12)]
        self.node_grid: list[list[list[int]]] = []
        self._face_elements: list[list[Element]] = [[] for _ in range(Element.NUM_FACES)]

    def extract(self, mesh: Mesh) -> None:
        """Analyse a mesh whose elements carry grid indices and whose dimensions are set."""
        self._face_elements = [[] for _ in range(Element.NUM_FACES)]
        if not mesh.grid_dimensions_set:
            return

        self.dim_i, self.dim_j, self.dim_k = mesh.dim_i, mesh.dim_j, mesh.dim_k

        for element in mesh.elements.values():
            if not element.index_assigned:
                continue
            on_face = (
                element.i == 0,
                element.i == self.dim_i - 1,
                element.j == 0,
                element.j == self.dim_j - 1,
                element.k == 0,
                element.k == self.dim_k - 1,
            )
            for face, hit in enumerate(on_face):
                if hit:
                    self._face_elements[face].append(element)

        self._build_node_grid(mesh)
        self._extract_corner_nodes()
        self._extract_edge_nodes()

    def _build_node_grid(self, mesh: Mesh) -> None:
        ni, nj, nk = self.dim_i + 1, self.dim_j + 1, self.dim_k + 1
        self.node_grid = [[[-1] * nk for _ in range(nj)] for _ in range(ni)]
        for element in mesh.elements.values():
            if not element.index_assigned:
                continue
            for node_id, (di, dj, dk) in zip(element.node_ids, _LOCAL_NODE_OFFSETS):
                gi, gj, gk = element.i + di, element.j + dj, element.k + dk
                if 0 <= gi < ni and 0 <= gj < nj and 0 <= gk < nk:
                    self.node_grid[gi][gj][gk] = node_id

    def _extract_corner_nodes(self) -> None:
        grid = self.node_grid
        if not (grid and grid[0] and grid[0][0]):
            return
        ni, nj, nk = self.dim_i, self.dim_j, self.dim_k
        self.corner_nodes = [
            grid[0][0][0],
            grid[ni][0][0],
            grid[ni][nj][0],
            grid[0][nj][0],
            grid[0][0][nk],
            grid[ni][0][nk],
            grid[ni][nj][nk],
            grid[0][nj][nk],
        ]

    def _extract_edge_nodes(self) -> None:
        grid = self.node_grid
        ni, nj, nk = self.dim_i, self.dim_j, self.dim_k
        edges: list[EdgeNodes] = []
        for j, k in ((0, 0), (nj, 0), (0, nk), (nj, nk)):
            edges.append(EdgeNodes(0, [grid[i][j][k] for i in range(ni + 1)]))
        for i, k in ((0, 0), (ni, 0), (0, nk), (ni, nk)):
            edges.append(EdgeNodes(1, [grid[i][j][k] for j in range(nj + 1)]))
        for i, j in ((0, 0), (ni, 0), (0, nj), (ni, nj)):
            edges.append(EdgeNodes(2, [grid[i][j][k] for k in range(nk + 1)]))
        self.edge_nodes = edges

    def nodes_on_face(self, face: int) -> list[int]:
        """Sorted unique node ids on a grid face: 0/1 i-min/max, 2/3 j, 4/5 k."""
        if not 0 <= face < Element.NUM_FACES:
            raise ValueError(f"face index must be in 0..5, got {face}")
        return sorted(
            {node_id for element in self._face_elements[face] for node_id in element.face_node_ids(face)}
        )