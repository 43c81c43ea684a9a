"""Generation of a straight (neutral) structured hexahedral grid."""

from __future__ import annotations

from typing import Any

from meshremap.geometry import Element, Mesh, Node, Vector3D


class NeutralGridGenerator:
    """Builds a box of dim_i x dim_j x dim_k hexahedra of a given overall size."""

    def __init__(self) -> None:
        self.elem_size_i = 1.0
        self.elem_size_j = 1.0
        self.elem_size_k = 1.0
        self.total_size_i = 0.0
        self.total_size_j = 0.0
        self.total_size_k = 0.0

    def generate_from_edges(self, edge_calculator: Any) -> Mesh:
        """Grid sized by the neutral (average) edge lengths of an edge calculator."""
        return self.generate(
            edge_calculator.dim_i,
            edge_calculator.dim_j,
            edge_calculator.dim_k,
            edge_calculator.neutral_length_i,
            edge_calculator.neutral_length_j,
            edge_calculator.neutral_length_k,
        )

    def generate(
        self,
        dim_i: int,
        dim_j: int,
        dim_k: int,
        size_i: float,
        size_j: float,
        size_k: float,
    ) -> Mesh:
        """Grid starting at x=0 and centred on the origin in y and z."""
        self.elem_size_i = size_i / dim_i if dim_i > 0 else 1.0
        self.elem_size_j = size_j / dim_j if dim_j > 0 else 1.0
        self.elem_size_k = size_k / dim_k if dim_k > 0 else 1.0
        self.total_size_i = size_i
        self.total_size_j = size_j
        self.total_size_k = size_k

        mesh = Mesh()
        self._generate_nodes(mesh, dim_i, dim_j, dim_k)
        self._generate_elements(mesh, dim_i, dim_j, dim_k)
        mesh.set_grid_dimensions(dim_i, dim_j, dim_k)
        return mesh

    def _generate_nodes(self, mesh: Mesh, dim_i: int, dim_j: int, dim_k: int) -> None:
        for i in range(dim_i + 1):
            for j in range(dim_j + 1):
                for k in range(dim_k + 1):
                    position = Vector3D(
                        i * self.elem_size_i,
                        (j - dim_j / 2.0) * self.elem_size_j,
                        (k - dim_k / 2.0) * self.elem_size_k,
                    )
                    mesh.add_node(Node(self.node_id(i, j, k, dim_j, dim_k), position))

    def _generate_elements(self, mesh: Mesh, dim_i: int, dim_j: int, dim_k: int) -> None:
        def nid(i: int, j: int, k: int) -> int:
            return self.node_id(i, j, k, dim_j, dim_k)

        for i in range(dim_i):
            for j in range(dim_j):
                for k in range(dim_k):
                    node_ids = [
                        nid(i, j, k),
                        nid(i + 1, j, k),
                        nid(i + 1, j + 1, k),
                        nid(i, j + 1, k),
                        nid(i, j, k + 1),
                        nid(i + 1, j, k + 1),
                        nid(i + 1, j + 1, k + 1),
                        nid(i, j + 1, k + 1),
                    ]
                    element = Element(
                        id=self.element_id(i, j, k, dim_j, dim_k), part_id=1, node_ids=node_ids
                    )
                    element.set_grid_index(i, j, k)
                    mesh.add_element(element)

    @staticmethod
    def node_id(i: int, j: int, k: int, dim_j: int, dim_k: int) -> int:
        """One-based id of the grid node at (i, j, k), k varying fastest."""
        return i * (dim_j + 1) * (dim_k + 1) + j * (dim_k + 1) + k + 1

    @staticmethod
    def element_id(i: int, j: int, k: int, dim_j: int, dim_k: int) -> int:
        """One-based id of the element at (i, j, k), k varying fastest."""
        return i * dim_j * dim_k + j * dim_k + k + 1