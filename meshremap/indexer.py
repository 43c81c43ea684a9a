"""Assignment of structured (i, j, k) indices to elements of a hexahedral grid."""

from __future__ import annotations

from collections import deque
from typing import Optional

from meshremap.connectivity import ConnectivityAnalyzer
from meshremap.geometry import Element, Mesh


class IndexingError(Exception):
    """Raised when structured indices cannot be assigned."""


class StructuredGridIndexer:
    """Walks element neighbours from a corner and numbers the elements on a grid."""

    def __init__(self) -> None:
        self.dim_i = 0
        self.dim_j = 0
        self.dim_k = 0
        # Pairs of (negative, positive) local faces for each grid axis.
        self.axis_to_face: list[tuple[int, int]] = [(0, 1), (2, 3), (4, 5)]
        self._lookup: dict[tuple[int, int, int], Element] = {}

    @property
    def dimensions(self) -> tuple[int, int, int]:
        return self.dim_i, self.dim_j, self.dim_k

    def assign_indices(self, mesh: Mesh, connectivity: ConnectivityAnalyzer) -> None:
        """Give every element grid indices and set the mesh's grid dimensions."""
        self.dim_i = self.dim_j = self.dim_k = 0

        if not mesh.elements:
            raise IndexingError("Mesh has no elements")

        if all(
            element.index_assigned and element.i >= 0 and element.j >= 0 and element.k >= 0
            for element in mesh.elements.values()
        ):
            self._calculate_dimensions(mesh)
            mesh.set_grid_dimensions(*self.dimensions)
            return

        for element in mesh.elements.values():
            element.i = element.j = element.k = -1
            element.index_assigned = False

        corners = connectivity.corner_elements()
        if not corners:
            raise IndexingError("Cannot find corner element to start indexing")
        start = corners[0]

        self._determine_initial_directions(start, connectivity)
        self._propagate_indices(mesh, start, connectivity)
        self._calculate_dimensions(mesh)
        mesh.set_grid_dimensions(*self.dimensions)

    def _determine_initial_directions(
        self, start: int, connectivity: ConnectivityAnalyzer
    ) -> None:
        neighbors = connectivity.neighbors(start)
        if len(neighbors) != 3:
            raise IndexingError(
                f"Start element is not a corner (has {len(neighbors)} neighbors instead of 3)"
            )
        faces = sorted(neighbor.through_face for neighbor in neighbors)
        for axis, face in enumerate(faces):
            self.axis_to_face[axis] = (face - 1, face) if face % 2 else (face, face + 1)

    def _propagate_indices(
        self, mesh: Mesh, start: int, connectivity: ConnectivityAnalyzer
    ) -> None:
        start_element = mesh.element(start)
        if start_element is None:
            raise IndexingError("Start element not found")

        start_element.set_grid_index(0, 0, 0)
        queue: deque[tuple[int, int, int, int]] = deque([(start, 0, 0, 0)])

        while queue:
            element_id, i, j, k = queue.popleft()
            for neighbor in connectivity.neighbors(element_id):
                other = mesh.element(neighbor.neighbor_element_id)
                if other is None or other.index_assigned:
                    continue
                index = [i, j, k]
                index[self.axis_from_face(neighbor.through_face)] += self.direction_from_face(
                    neighbor.through_face
                )
                other.set_grid_index(*index)
                queue.append((neighbor.neighbor_element_id, *index))

        for element_id in sorted(mesh.elements):
            if not mesh.elements[element_id].index_assigned:
                raise IndexingError(f"Element {element_id} was not indexed")

        elements = mesh.elements.values()
        min_i = min(0, *(element.i for element in elements))
        min_j = min(0, *(element.j for element in elements))
        min_k = min(0, *(element.k for element in elements))
        for element in elements:
            element.i -= min_i
            element.j -= min_j
            element.k -= min_k

    def _calculate_dimensions(self, mesh: Mesh) -> None:
        assigned = [element for element in mesh.elements.values() if element.index_assigned]
        self.dim_i = max((element.i + 1 for element in assigned), default=0)
        self.dim_j = max((element.j + 1 for element in assigned), default=0)
        self.dim_k = max((element.k + 1 for element in assigned), default=0)

    def build_index_lookup(self, mesh: Mesh) -> None:
        """Index the mesh's elements by their grid position."""
        self._lookup = {
            (element.i, element.j, element.k): element
            for element in mesh.elements.values()
            if element.index_assigned
        }

    def element_at(self, i: int, j: int, k: int) -> Optional[Element]:
        """Element at a grid position, after ``build_index_lookup``."""
        return self._lookup.get((i, j, k))

    def reorder_axes(self, mesh: Mesh) -> None:
        """Permute the axes so that dim_i >= dim_j >= dim_k."""
        dims = sorted(
            [(self.dim_i, 0), (self.dim_j, 1), (self.dim_k, 2)],
            key=lambda item: item[0],
            reverse=True,
        )
        perm = [axis for _, axis in dims]
        for element in mesh.elements.values():
            old = (element.i, element.j, element.k)
            element.i, element.j, element.k = old[perm[0]], old[perm[1]], old[perm[2]]
        self.dim_i, self.dim_j, self.dim_k = (size for size, _ in dims)
        mesh.set_grid_dimensions(*self.dimensions)

    def swap_axes(self, mesh: Mesh, axis1: int, axis2: int) -> None:
        """Exchange two grid axes in every element and in the stored dimensions."""
        for axis in (axis1, axis2):
            if axis not in (0, 1, 2):
                raise ValueError(f"axis must be 0, 1 or 2, got {axis}")
        if axis1 == axis2:
            return
        for element in mesh.elements.values():
            index = [element.i, element.j, element.k]
            index[axis1], index[axis2] = index[axis2], index[axis1]
            element.i, element.j, element.k = index
        dims = [self.dim_i, self.dim_j, self.dim_k]
        dims[axis1], dims[axis2] = dims[axis2], dims[axis1]
        self.dim_i, self.dim_j, self.dim_k = dims

    @staticmethod
    def axis_from_face(face: int) -> int:
        """Grid axis normal to a local face: 0 for i, 1 for j, 2 for k."""
        return face // 2

    @staticmethod
    def direction_from_face(face: int) -> int:
        """-1 for the negative face of an axis, +1 for the positive one."""
        parity = face % 2
        return 2 * parity - 1