import pytest

from meshremap.boundary import BoundaryExtractor
from meshremap.edges import EdgeCalculator
from meshremap.geometry import Element, Mesh, Node, Vector3D
from meshremap.parametric import ParametricMapper


def create_unit_cube_mesh(coords=None):
    coords = coords or [
        (0.0, 0.0, 0.0),
        (1.0, 0.0, 0.0),
        (1.0, 1.0, 0.0),
        (0.0, 1.0, 0.0),
        (0.0, 0.0, 1.0),
        (1.0, 0.0, 1.0),
        (1.0, 1.0, 1.0),
        (0.0, 1.0, 1.0),
    ]
    mesh = Mesh()
    for node_id, (x, y, z) in enumerate(coords, start=1):
        mesh.add_node(Node(node_id, Vector3D(x, y, z)))
    element = Element(id=1, part_id=1, node_ids=[1, 2, 3, 4, 5, 6, 7, 8])
    element.set_grid_index(0, 0, 0)
    mesh.add_element(element)
    mesh.set_grid_dimensions(1, 1, 1)
    return mesh


def create_2x2x2_mesh():
    mesh = Mesh()
    node_id = 1
    for k in range(3):
        for j in range(3):
            for i in range(3):
                mesh.add_node(Node(node_id, Vector3D(i * 0.5, j * 0.5, k * 0.5)))
                node_id += 1
    element_id = 1
    for k in range(2):
        for j in range(2):
            for i in range(2):
                n0 = 1 + i + j * 3 + k * 9
                n4 = n0 + 9
                element = Element(
                    id=element_id,
                    part_id=1,
                    node_ids=[n0, n0 + 1, n0 + 4, n0 + 3, n4, n4 + 1, n4 + 4, n4 + 3],
                )
                element.set_grid_index(i, j, k)
                mesh.add_element(element)
                element_id += 1
    mesh.set_grid_dimensions(2, 2, 2)
    return mesh


def build_mapper(mesh):
    boundary = BoundaryExtractor()
    boundary.extract(mesh)
    calc = EdgeCalculator()
    calc.calculate_all_edges(mesh, boundary)
    mapper = ParametricMapper()
    mapper.build(mesh, boundary, calc)
    return mapper


def assert_point(p, x, y, z, tol=1e-10):
    assert p.x == pytest.approx(x, abs=tol)
    assert p.y == pytest.approx(y, abs=tol)
    assert p.z == pytest.approx(z, abs=tol)


@pytest.fixture(params=["cube", "grid"])
def mapper(request):
    mesh = create_unit_cube_mesh() if request.param == "cube" else create_2x2x2_mesh()
    return build_mapper(mesh)


def test_build_is_valid(mapper):
    assert mapper.valid
    assert mapper.corners[0] == Vector3D(0.0, 0.0, 0.0)
    assert mapper.corners[6] == Vector3D(1.0, 1.0, 1.0)


def test_trilinear_corners(mapper):
    assert_point(mapper.trilinear_interpolate(0.0, 0.0, 0.0), 0.0, 0.0, 0.0)
    assert_point(mapper.trilinear_interpolate(1.0, 0.0, 0.0), 1.0, 0.0, 0.0)
    assert_point(mapper.trilinear_interpolate(1.0, 1.0, 1.0), 1.0, 1.0, 1.0)
    assert_point(mapper.trilinear_interpolate(0.5, 0.5, 0.5), 0.5, 0.5, 0.5)


def test_trilinear_edge_midpoints(mapper):
    assert_point(mapper.trilinear_interpolate(0.5, 0.0, 0.0), 0.5, 0.0, 0.0)
    assert_point(mapper.trilinear_interpolate(0.0, 0.5, 0.0), 0.0, 0.5, 0.0)
    assert_point(mapper.trilinear_interpolate(0.0, 0.0, 0.5), 0.0, 0.0, 0.5)


@pytest.mark.parametrize("u", [0.0, 0.25, 0.5, 0.75, 1.0])
@pytest.mark.parametrize("v", [0.0, 0.25, 0.5, 0.75, 1.0])
@pytest.mark.parametrize("w", [0.0, 0.25, 0.5, 0.75, 1.0])
def test_unit_cube_is_identity(mapper, u, v, w):
    assert_point(mapper.trilinear_interpolate(u, v, w), u, v, w)
    assert_point(mapper.transfinite_interpolate(u, v, w), u, v, w)
    assert_point(mapper.map_to_physical(u, v, w), u, v, w)


def test_parameter_clamping(mapper):
    assert mapper.map_to_physical(-0.5, 0.5, 0.5).x == pytest.approx(0.0, abs=1e-10)
    assert mapper.map_to_physical(1.5, 0.5, 0.5).x == pytest.approx(1.0, abs=1e-10)


def test_continuity(mapper):
    epsilon = 1e-6
    p1 = mapper.trilinear_interpolate(0.5, 0.5, 0.5)
    p2 = mapper.trilinear_interpolate(0.5 + epsilon, 0.5, 0.5)
    assert (p2 - p1).magnitude() < epsilon * 2
    q1 = mapper.map_to_physical(0.5, 0.5, 0.5)
    q2 = mapper.map_to_physical(0.5 + epsilon, 0.5, 0.5)
    assert (q2 - q1).magnitude() < epsilon * 2


def test_large_grid_interpolation(mapper):
    xs = [
        mapper.trilinear_interpolate(ii / 10.0, jj / 10.0, kk / 10.0).x
        for ii in range(11)
        for jj in range(11)
        for kk in range(11)
    ]
    inside = [x for x in xs if -0.001 <= x <= 1.001]
    assert len(inside) == 11 * 11 * 11
    assert min(xs) == pytest.approx(0.0, abs=1e-10)
    assert max(xs) == pytest.approx(1.0, abs=1e-10)


def test_unbuilt_mapper_returns_zero():
    assert ParametricMapper().map_to_physical(0.5, 0.5, 0.5) == Vector3D()


def test_missing_corner_node_leaves_mapper_invalid():
    mesh = create_unit_cube_mesh()
    boundary = BoundaryExtractor()
    boundary.extract(mesh)
    calc = EdgeCalculator()
    calc.calculate_all_edges(mesh, boundary)
    del mesh.nodes[7]
    mapper = ParametricMapper()
    mapper.build(mesh, boundary, calc)
    assert not mapper.valid
    assert mapper.map_to_physical(0.5, 0.5, 0.5) == Vector3D()


def test_u_fold_detection():
    assert not build_mapper(create_unit_cube_mesh()).is_u_fold_geometry()
    folded = create_unit_cube_mesh(
        [
            (0.0, 0.0, 0.0),
            (0.0, 0.0, 2.0),
            (0.0, 1.0, 2.0),
            (0.0, 1.0, 0.0),
            (1.0, 0.0, 0.0),
            (1.0, 0.0, 2.0),
            (1.0, 1.0, 2.0),
            (1.0, 1.0, 0.0),
        ]
    )
    assert build_mapper(folded).is_u_fold_geometry()


def test_degenerate_corners_are_not_u_fold():
    assert not ParametricMapper().is_u_fold_geometry()


def test_edge_index():
    assert ParametricMapper.edge_index(0, 0) == 0
    assert ParametricMapper.edge_index(1, 2) == 6
    assert ParametricMapper.edge_index(2, 3) == 11