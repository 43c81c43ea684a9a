"""Face-sharing connectivity between hexahedral elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from meshremap.geometry import Element, Mesh


@dataclass(frozen=True)
class Face:
    """One quadrilateral face of an element."""

    node_ids: tuple[int, int, int, int] = (0, 0, 0, 0)
    element_id: int = -1
    local_face_index: int = -1

    def key(self) -> str:
        """Order-independent identifier built from the sorted node ids."""
        return "_".join(str(node_id) for node_id in sorted(self.node_ids))


@dataclass(frozen=True)
class ElementNeighbor:
    """A neighbouring element and the faces through which the two touch."""

    neighbor_element_id: int
    through_face: int
    neighbor_face: int


class ConnectivityAnalyzer:
    """Finds element neighbours through shared faces and checks for a structured grid."""

    def __init__(self) -> None:
        self._neighbors: dict[int, list[ElementNeighbor]] = {}
        self._face_map: dict[str, list[tuple[int, int]]] = {}
        self._boundary_faces: list[Face] = []
        self.error_message = ""
        self.is_structured = False

    def build(self, mesh: Mesh) -> None:
        """Analyse the mesh; ``is_structured`` and ``error_message`` report the outcome."""
        self._neighbors = {}
        self._face_map = {}
        self._boundary_faces = []
        self.error_message = ""
        self.is_structured = False

        if not mesh.elements:
            self.error_message = "Mesh has no elements"
            return

        self._build_face_map(mesh)
        self._find_neighbors()
        self._validate_structured_grid()

    def _build_face_map(self, mesh: Mesh) -> None:
        for element_id, element in mesh.elements.items():
            for face_index in range(Element.NUM_FACES):
                face = Face(element.face_node_ids(face_index), element_id, face_index)
                self._face_map.setdefault(face.key(), []).append((element_id, face_index))

    def _find_neighbors(self) -> None:
        for pairs in self._face_map.values():
            for element_id, _ in pairs:
                self._neighbors.setdefault(element_id, [])

        for key in sorted(self._face_map):
            pairs = self._face_map[key]
            if len(pairs) == 2:
                (first, first_face), (second, second_face) = pairs
                self._neighbors[first].append(ElementNeighbor(second, first_face, second_face))
                self._neighbors[second].append(ElementNeighbor(first, second_face, first_face))
            elif len(pairs) == 1:
                element_id, face_index = pairs[0]
                node_ids = tuple(int(token) for token in key.split("_"))
                self._boundary_faces.append(Face(node_ids, element_id, face_index))
            # More than two elements on one face is a mesh error and is ignored here.

    def _validate_structured_grid(self) -> None:
        corner_count = 0
        for element_id in sorted(self._neighbors):
            count = len(self._neighbors[element_id])
            if not 3 <= count <= 6:
                self.error_message = (
                    f"Element {element_id} has {count} neighbors (expected 3-6)"
                )
                self.is_structured = False
                return
            if count == 3:
                corner_count += 1

        if corner_count == 8:
            self.is_structured = True
        else:
            self.error_message = f"Expected 8 corner elements, found {corner_count}"
            self.is_structured = False

    def neighbors(self, element_id: int) -> list[ElementNeighbor]:
        """Neighbours of an element; empty for an unknown id."""
        return list(self._neighbors.get(element_id, ()))

    def neighbor_count(self, element_id: int) -> int:
        return len(self._neighbors.get(element_id, ()))

    def are_neighbors(self, first_id: int, second_id: int) -> bool:
        return self.shared_face(first_id, second_id) is not None

    def shared_face(self, first_id: int, second_id: int) -> Optional[int]:
        """Local face of the first element that touches the second, or None."""
        return next(
            (
                neighbor.through_face
                for neighbor in self._neighbors.get(first_id, ())
                if neighbor.neighbor_element_id == second_id
            ),
            None,
        )

    def _with_neighbor_count(self, count: int) -> list[int]:
        return [
            element_id
            for element_id in sorted(self._neighbors)
            if len(self._neighbors[element_id]) == count
        ]

    def corner_elements(self) -> list[int]:
        """Elements with exactly three neighbours, by id."""
        return self._with_neighbor_count(3)

    def edge_elements(self) -> list[int]:
        """Elements with exactly four neighbours, by id."""
        return self._with_neighbor_count(4)

    def face_elements(self) -> list[int]:
        """Elements with exactly five neighbours, by id."""
        return self._with_neighbor_count(5)

    def interior_elements(self) -> list[int]:
        """Elements with six neighbours, by id."""
        return self._with_neighbor_count(6)

    def boundary_faces(self) -> list[Face]:
        """Faces that belong to a single element."""
        return list(self._boundary_faces)