import numpy as np
from scipy.spatial import ConvexHull


def _unique_points(points, dim):
    E = np.asarray(points, dtype=float)
    if E.size == 0:
        return np.empty((0, dim))
    E = E.reshape(-1, dim)
    return np.unique(np.round(E, 10), axis=0)


def _affine_rank(E, tol):
    centered = E - E.mean(axis=0, keepdims=True)
    _, s, vh = np.linalg.svd(centered, full_matrices=False)
    if s.size == 0:
        return 0, centered, vh
    return int(np.sum(s > (tol * max(s[0], 1.0)))), centered, vh


def _polygon_order(UV, tol):
    """Counter-clockwise boundary order of 2D points, starting at the lowest one."""
    if UV.shape[0] == 1:
        return np.array([0])

    dim, centered, vh = _affine_rank(UV, tol)
    if dim == 0:
        return np.array([0])
    if dim == 1:
        d = centered @ vh[0]
        return np.array([int(np.argmin(d)), int(np.argmax(d))])

    order = np.asarray(ConvexHull(UV).vertices, dtype=int)
    start = min(range(len(order)), key=lambda i: (UV[order[i], 1], UV[order[i], 0]))
    return np.roll(order, -start)


def convex_hull_2d(points, tol=1e-10):
    E = _unique_points(points, 2)
    if E.shape[0] == 0:
        return {"vertices": E, "order": np.empty(0, dtype=int), "polygon": np.empty((0, 2))}

    order = _polygon_order(E, tol)
    return {"vertices": E, "order": order, "polygon": E[order]}


def _orient_outward(E, faces, centroid):
    out = []
    for a, b, c in faces:
        normal = np.cross(E[b] - E[a], E[c] - E[a])
        if np.dot(normal, E[a] - centroid) < 0:
            b, c = c, b
        out.append((int(a), int(b), int(c)))
    return out


def _feature_edges(faces, equations, tol):
    # edges shared by two coplanar triangles are quad diagonals, not hull edges
    owners = {}
    for k, (a, b, c) in enumerate(faces):
        for e in ((a, b), (b, c), (a, c)):
            owners.setdefault(tuple(sorted(e)), []).append(k)

    edges = []
    for e, ks in owners.items():
        if len(ks) == 2 and np.allclose(equations[ks[0]], equations[ks[1]], atol=max(tol, 1e-9)):
            continue
        edges.append(e)
    return sorted(edges)


def convex_hull_3d(points, tol=1e-10):
    E = _unique_points(points, 3)
    out = {"vertices": E, "faces": [], "edges": [], "triangles": np.empty((0, 3, 3))}
    n = E.shape[0]
    if n < 2:
        return out

    dim, centered, vh = _affine_rank(E, tol)

    if dim <= 1:
        d = centered @ vh[0]
        i_min, i_max = int(np.argmin(d)), int(np.argmax(d))
        if i_min != i_max:
            out["edges"] = [(min(i_min, i_max), max(i_min, i_max))]
        return out

    if dim == 2:
        # flat polygon: fan-triangulate and emit both windings so it shows from either side
        UV = centered @ vh[:2].T
        order = _polygon_order(UV, tol)
        o0 = int(order[0])
        front = [(o0, int(order[i]), int(order[i + 1])) for i in range(1, len(order) - 1)]
        back = [(a, c, b) for (a, b, c) in front]
        out["faces"] = front + back
        out["edges"] = sorted(
            tuple(sorted((int(order[i]), int(order[(i + 1) % len(order)]))))
            for i in range(len(order))
        )
        out["triangles"] = E[np.array(out["faces"], dtype=int)] if out["faces"] else out["triangles"]
        return out

    hull = ConvexHull(E)
    centroid = E[hull.vertices].mean(axis=0)
    faces = _orient_outward(E, [tuple(map(int, face)) for face in hull.simplices], centroid)

    out["faces"] = faces
    out["edges"] = _feature_edges(faces, hull.equations, tol)
    out["triangles"] = E[np.array(faces, dtype=int)]
    return out


def build_hull(points, dimension, tol=1e-10):
    if dimension >= 4:
        return None
    if dimension == 3:
        return convex_hull_3d(points, tol)

    E = np.asarray(points, dtype=float).reshape(-1, dimension) if np.size(points) else np.empty((0, dimension))
    if dimension == 1:
        E = np.hstack([E, np.zeros((E.shape[0], 1))])
    return convex_hull_2d(E, tol)
