import pytest

from meshremap.connectivity import ConnectivityAnalyzer
from meshremap.geometry import Element, Mesh, Node, Vector3D
from meshremap.indexer import IndexingError, StructuredGridIndexer


def build_grid(ni, nj, nk, assign=False, reverse=False, node_base=1, element_base=1, shift=0.0):
    mesh = Mesh()
    positions = {}

    def nid(i, j, k):
        return node_base + i + j * (ni + 1) + k * (ni + 1) * (nj + 1)

    for k in range(nk + 1):
        for j in range(nj + 1):
            for i in range(ni + 1):
                mesh.add_node(Node(nid(i, j, k), Vector3D(i + shift, float(j), float(k))))
    total = ni * nj * nk
    count = 0
    for k in range(nk):
        for j in range(nj):
            for i in range(ni):
                eid = element_base + (total - 1 - count if reverse else count)
                count += 1
                nodes = [
                    nid(i, j, k), nid(i + 1, j, k), nid(i + 1, j + 1, k), nid(i, j + 1, k),
                    nid(i, j, k + 1), nid(i + 1, j, k + 1), nid(i + 1, j + 1, k + 1),
                    nid(i, j + 1, k + 1),
                ]
                element = Element(id=eid, part_id=1, node_ids=nodes)
                if assign:
                    element.set_grid_index(i, j, k)
                mesh.add_element(element)
                positions[eid] = (i, j, k)
    return mesh, positions


def index(mesh):
    connectivity = ConnectivityAnalyzer()
    connectivity.build(mesh)
    indexer = StructuredGridIndexer()
    indexer.assign_indices(mesh, connectivity)
    return indexer


def test_indices_follow_grid_from_corner():
    mesh, positions = build_grid(3, 2, 2)
    indexer = index(mesh)
    for eid, expected in positions.items():
        element = mesh.element(eid)
        assert element.index_assigned
        assert (element.i, element.j, element.k) == expected
    assert indexer.dimensions == (3, 2, 2)
    assert mesh.grid_dimensions_set
    assert (mesh.dim_i, mesh.dim_j, mesh.dim_k) == (3, 2, 2)


def test_start_at_far_corner_is_normalised():
    mesh, positions = build_grid(3, 2, 2, reverse=True)
    indexer = index(mesh)
    for eid, expected in positions.items():
        element = mesh.element(eid)
        assert (element.i, element.j, element.k) == expected
    assert indexer.dimensions == (3, 2, 2)


def test_indices_are_unique_and_in_range():
    mesh, _ = build_grid(4, 3, 2)
    indexer = index(mesh)
    seen = {(e.i, e.j, e.k) for e in mesh.elements.values()}
    assert len(seen) == len(mesh.elements)
    for i, j, k in seen:
        assert 0 <= i < indexer.dim_i
        assert 0 <= j < indexer.dim_j
        assert 0 <= k < indexer.dim_k


def test_existing_indices_are_kept():
    mesh, positions = build_grid(2, 3, 2, assign=True)
    indexer = StructuredGridIndexer()
    indexer.assign_indices(mesh, ConnectivityAnalyzer())
    assert indexer.dimensions == (2, 3, 2)
    for eid, expected in positions.items():
        element = mesh.element(eid)
        assert (element.i, element.j, element.k) == expected


def test_partial_indices_are_recomputed():
    mesh, positions = build_grid(2, 2, 2)
    mesh.element(3).set_grid_index(7, 7, 7)
    indexer = index(mesh)
    element = mesh.element(3)
    assert (element.i, element.j, element.k) == positions[3]
    assert indexer.dimensions == (2, 2, 2)


def test_empty_mesh_raises():
    with pytest.raises(IndexingError, match="no elements"):
        index(Mesh())


def test_mesh_without_corner_raises():
    mesh, _ = build_grid(1, 1, 1)
    with pytest.raises(IndexingError, match="corner"):
        index(mesh)


def test_disconnected_blocks_raise():
    mesh, _ = build_grid(2, 2, 2)
    other, _ = build_grid(2, 2, 2, node_base=1000, element_base=100, shift=10.0)
    for node in other.nodes.values():
        mesh.add_node(node)
    for element in other.elements.values():
        mesh.add_element(element)
    with pytest.raises(IndexingError, match="was not indexed"):
        index(mesh)


def test_element_lookup():
    mesh, positions = build_grid(3, 2, 2)
    indexer = index(mesh)
    indexer.build_index_lookup(mesh)
    for eid, (i, j, k) in positions.items():
        assert indexer.element_at(i, j, k).id == eid
    assert indexer.element_at(5, 5, 5) is None


def test_reorder_axes_sorts_dimensions():
    mesh, positions = build_grid(2, 4, 3, assign=True)
    indexer = StructuredGridIndexer()
    indexer.assign_indices(mesh, ConnectivityAnalyzer())
    indexer.reorder_axes(mesh)
    assert indexer.dimensions == (4, 3, 2)
    assert (mesh.dim_i, mesh.dim_j, mesh.dim_k) == (4, 3, 2)
    for eid, (i, j, k) in positions.items():
        element = mesh.element(eid)
        assert (element.i, element.j, element.k) == (j, k, i)


def test_swap_axes_exchanges_indices_and_dimensions():
    mesh, positions = build_grid(3, 2, 4, assign=True)
    indexer = StructuredGridIndexer()
    indexer.assign_indices(mesh, ConnectivityAnalyzer())
    indexer.swap_axes(mesh, 0, 2)
    assert indexer.dimensions == (4, 2, 3)
    for eid, (i, j, k) in positions.items():
        element = mesh.element(eid)
        assert (element.i, element.j, element.k) == (k, j, i)


def test_swap_axes_rejects_bad_axis():
    mesh, _ = build_grid(2, 2, 2, assign=True)
    with pytest.raises(ValueError):
        StructuredGridIndexer().swap_axes(mesh, 0, 3)


@pytest.mark.parametrize(
    "face, axis, direction",
    [(0, 0, -1), (1, 0, 1), (2, 1, -1), (3, 1, 1), (4, 2, -1), (5, 2, 1)],
)
def test_face_axis_and_direction(face, axis, direction):
    assert StructuredGridIndexer.axis_from_face(face) == axis
    assert StructuredGridIndexer.direction_from_face(face) == direction