import numpy as np
import pytest

from convex_hull import build_hull, convex_hull_2d, convex_hull_3d


def signed_area(polygon):
    p = np.asarray(polygon)
    q = np.roll(p, -1, axis=0)
    return 0.5 * float(np.sum(p[:, 0] * q[:, 1] - q[:, 0] * p[:, 1]))


def test_unit_square_returns_four_corners_counter_clockwise():
    pts = [(1, 1), (0, 0), (0, 1), (1, 0), (0.5, 0.5), (1, 0.5)]
    hull = convex_hull_2d(pts)
    np.testing.assert_allclose(hull["polygon"], [[0, 0], [1, 0], [1, 1], [0, 1]])
    assert signed_area(hull["polygon"]) == pytest.approx(1.0)


def test_polygon_order_indexes_vertices():
    hull = convex_hull_2d([(0, 0), (2, 0), (2, 2), (0, 4)])
    np.testing.assert_allclose(hull["vertices"][hull["order"]], hull["polygon"])
    assert len(hull["polygon"]) == 4
    assert signed_area(hull["polygon"]) > 0


def test_degenerate_2d_inputs():
    assert convex_hull_2d([]).get("polygon").shape == (0, 2)

    single = convex_hull_2d([(1, 2), (1, 2)])
    np.testing.assert_allclose(single["polygon"], [[1, 2]])

    segment = convex_hull_2d([(0, 0), (1, 1), (2, 2), (3, 3)])
    assert sorted(map(tuple, segment["polygon"].tolist())) == [(0.0, 0.0), (3.0, 3.0)]


def unit_cube():
    return np.array([(a, b, c) for a in (0, 1) for b in (0, 1) for c in (0, 1)], dtype=float)


def assert_outward(hull):
    E = hull["vertices"]
    centroid = E.mean(axis=0)
    for a, b, c in hull["faces"]:
        normal = np.cross(E[b] - E[a], E[c] - E[a])
        assert np.dot(normal, E[a] - centroid) > 0


def test_cube_triangles_wind_outward():
    hull = convex_hull_3d(unit_cube())
    assert len(hull["faces"]) == 12
    assert hull["triangles"].shape == (12, 3, 3)
    assert_outward(hull)
    # square diagonals are not reported as edges
    assert len(hull["edges"]) == 12


def test_tetrahedron_winding_and_closed_surface():
    pts = [(0, 0, 0), (3, 0, 0), (0, 3, 0), (0, 0, 3), (0.5, 0.5, 0.5)]
    hull = convex_hull_3d(pts)
    assert len(hull["faces"]) == 4
    assert_outward(hull)

    # every directed edge appears once, its reverse in the neighbouring face
    directed = [(f[i], f[(i + 1) % 3]) for f in hull["faces"] for i in range(3)]
    assert len(set(directed)) == len(directed)
    for a, b in directed:
        assert (b, a) in directed


def test_coplanar_points_give_two_sided_polygon():
    pts = [(0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)]
    hull = convex_hull_3d(pts)
    assert len(hull["faces"]) == 4
    assert len(hull["edges"]) == 4
    E = hull["vertices"]
    normals = [np.cross(E[b] - E[a], E[c] - E[a]) for a, b, c in hull["faces"]]
    assert any(n[2] > 0 for n in normals) and any(n[2] < 0 for n in normals)


def test_collinear_and_tiny_3d_inputs():
    line = convex_hull_3d([(0, 0, 0), (1, 1, 1), (2, 2, 2)])
    assert line["faces"] == []
    assert len(line["edges"]) == 1

    point = convex_hull_3d([(1, 1, 1)])
    assert point["faces"] == [] and point["edges"] == []


def test_build_hull_dispatch():
    assert build_hull(np.zeros((5, 4)), 4) is None
    assert "faces" in build_hull(unit_cube(), 3)
    square = build_hull([(0, 0), (1, 0), (1, 1), (0, 1)], 2)
    assert len(square["polygon"]) == 4
    interval = build_hull([[0.0], [2.0], [1.0]], 1)
    np.testing.assert_allclose(sorted(interval["polygon"][:, 0]), [0.0, 2.0])
