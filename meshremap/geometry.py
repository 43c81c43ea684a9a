"""Basic geometric and mesh data types: vectors, nodes, elements, parts and meshes."""

from __future__ import annotations

import copy
import enum
import math
from dataclasses import dataclass, field
from numbers import Real
from typing import ClassVar, Iterator, Optional

# Local node indices of the six hexahedron faces: i-, i+, j-, j+, k-, k+.
_FACE_LOCAL_NODES = (
    (0, 3, 7, 4),
    (1, 2, 6, 5),
    (0, 1, 5, 4),
    (3, 2, 6, 7),
    (0, 1, 2, 3),
    (4, 5, 6, 7),
)


@dataclass
class Vector3D:
    """A mutable three-component vector."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __add__(self, other: Vector3D) -> Vector3D:
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        if not isinstance(other, Vector3D):
            return NotImplemented
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar: float) -> Vector3D:
        if not isinstance(scalar, Real):
            return NotImplemented
        return Vector3D(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def __str__(self) -> str:
        return f"({self.x:.6f}, {self.y:.6f}, {self.z:.6f})"

    def dot(self, other: Vector3D) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Vector product."""
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.sqrt(self.magnitude_squared())

    def magnitude_squared(self) -> float:
        """Squared Euclidean length."""
        return self.dot(self)

    def normalized(self) -> Vector3D:
        """Unit vector in the same direction; the zero vector stays zero."""
        length = self.magnitude()
        if length == 0.0:
            return Vector3D()
        return self / length

    def distance_to(self, other: Vector3D) -> float:
        """Distance between two points."""
        return (self - other).magnitude()

    @staticmethod
    def lerp(a: Vector3D, b: Vector3D, t: float) -> Vector3D:
        """Linear interpolation from ``a`` (t=0) to ``b`` (t=1)."""
        return a + (b - a) * t


class ElementType(enum.Enum):
    """Kinds of solid element."""

    HEX8 = "hex8"
    TET4 = "tet4"


@dataclass
class Node:
    """A mesh node with an optional mapped position."""

    id: int = 0
    position: Vector3D = field(default_factory=Vector3D)
    mapped_position: Optional[Vector3D] = None

    def effective_position(self) -> Vector3D:
        """The mapped position if one was set, otherwise the original one."""
        return self.mapped_position if self.mapped_position is not None else self.position


@dataclass
class Element:
    """A hexahedral element with optional structured grid indices."""

    NUM_FACES: ClassVar[int] = 6

    id: int = 0
    part_id: int = 0
    node_ids: list[int] = field(default_factory=lambda: [0] * 8)
    type: ElementType = ElementType.HEX8
    i: int = -1
    j: int = -1
    k: int = -1
    index_assigned: bool = False

    def set_grid_index(self, i: int, j: int, k: int) -> None:
        """Assign structured grid indices."""
        self.i, self.j, self.k = i, j, k
        self.index_assigned = True

    def contains_node(self, node_id: int) -> bool:
        return node_id in self.node_ids

    @staticmethod
    def _check_face(face: int) -> None:
        if not 0 <= face < Element.NUM_FACES:
            raise ValueError(f"face index must be in 0..5, got {face}")

    def face_node_ids(self, face: int) -> tuple[int, int, int, int]:
        """Global node ids of one of the six faces."""
        self._check_face(face)
        a, b, c, d = _FACE_LOCAL_NODES[face]
        ids = self.node_ids
        return ids[a], ids[b], ids[c], ids[d]

    @staticmethod
    def opposite_face(face: int) -> int:
        Element._check_face(face)
        return face ^ 1

    @staticmethod
    def face_axis(face: int) -> int:
        Element._check_face(face)
        return face // 2


@dataclass
class Part:
    """A named group of elements."""

    id: int = 0
    name: str = ""
    material_id: int = 0


@dataclass
class Mesh:
    """Nodes, elements and parts keyed by id, plus structured grid dimensions."""

    name: str = ""
    nodes: dict[int, Node] = field(default_factory=dict)
    elements: dict[int, Element] = field(default_factory=dict)
    parts: dict[int, Part] = field(default_factory=dict)
    dim_i: int = 0
    dim_j: int = 0
    dim_k: int = 0
    grid_dimensions_set: bool = False

    def add_node(self, node: Node) -> None:
        self.nodes[node.id] = node

    def add_element(self, element: Element) -> None:
        self.elements[element.id] = element

    def add_part(self, part: Part) -> None:
        self.parts[part.id] = part

    def node(self, node_id: int) -> Optional[Node]:
        return self.nodes.get(node_id)

    def element(self, element_id: int) -> Optional[Element]:
        return self.elements.get(element_id)

    def bounding_box(self) -> tuple[Vector3D, Vector3D]:
        """Minimum and maximum corners; both zero for an empty mesh."""
        if not self.nodes:
            return Vector3D(), Vector3D()
        positions = [node.position for node in self.nodes.values()]
        low = Vector3D(
            min(p.x for p in positions), min(p.y for p in positions), min(p.z for p in positions)
        )
        high = Vector3D(
            max(p.x for p in positions), max(p.y for p in positions), max(p.z for p in positions)
        )
        return low, high

    def set_grid_dimensions(self, dim_i: int, dim_j: int, dim_k: int) -> None:
        self.dim_i, self.dim_j, self.dim_k = dim_i, dim_j, dim_k
        self.grid_dimensions_set = True

    def copy(self) -> Mesh:
        """An independent deep copy."""
        return copy.deepcopy(self)

    def clear(self) -> None:
        """Remove all nodes, elements and parts and forget the grid dimensions."""
        self.nodes.clear()
        self.elements.clear()
        self.parts.clear()
        self.dim_i = self.dim_j = self.dim_k = 0
        self.grid_dimensions_set = False