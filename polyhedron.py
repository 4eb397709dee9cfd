"""Everything the rendering layer consumes for one solved problem.

`visualize` solves, explores the reachable vertices and builds the hull.
The payload depends on the dimension:

- 1 or 2 variables: `polygon` (ordered boundary) and 2D `steps`;
- 3 variables: `triangles` (outward wound) and 3D `steps`;
- 4 or more: no geometry, a `trace` of per-step records instead.
"""
import logging

import numpy as np

from convex_hull import build_hull
from simplex_utils import DIMENSION_MISMATCH, _defaults, _explain_state
from state_graph import explore_vertices
from two_phase_simplex import solve

logger = logging.getLogger(__name__)


def trace_records(run):
    return [state.as_record() for state in run.states]


def format_trace(run, explain=False):
    def fnum(v):
        if v is None or not np.isfinite(v):
            return "-"
        if abs(v) < 1e-12:
            v = 0.0
        return f"{v:.6g}"

    header = ["step", "phase", "basis", "point", "objective"]
    rows = [header]
    notes = {}
    for state in run.states:
        rec = state.as_record()
        rows.append([
            str(rec["step"]),
            rec["phase"],
            "{" + ", ".join(rec["basis"]) + "}",
            "(" + ", ".join(fnum(v) for v in rec["point"]) + ")",
            fnum(rec["objective"]),
        ])
        if explain:
            notes[len(rows) - 1] = _explain_state(state)

    widths = [max(len(r[c]) for r in rows) for c in range(len(header))]
    out = [" | ".join(rows[0][c].ljust(widths[c]) for c in range(len(header))),
           "-+-".join("-" * w for w in widths)]
    for k, r in enumerate(rows[1:], start=1):
        out.append(" | ".join(r[c].ljust(widths[c]) for c in range(len(header))))
        if notes.get(k):
            out.extend("    " + line for line in notes[k].splitlines())
    out.append(f"status: {run.status}")
    return "\n".join(out)


def _step_points(run, dim):
    pts = np.array([state.point for state in run.states], dtype=float).reshape(-1, run.dimension)
    if run.dimension < dim:
        pts = np.hstack([pts, np.zeros((pts.shape[0], dim - run.dimension))])
    return pts


def describe(run, opts=None):
    opts = _defaults(opts)
    out = {
        "run": run,
        "status": run.status,
        "error": run.error,
        "dimension": run.dimension,
        "graph": None,
        "vertices": [],
        "hull": None,
    }
    if run.status == DIMENSION_MISMATCH:
        return out

    n = run.dimension
    graph = None
    if opts["explore"]:
        graph = explore_vertices(run, max_nodes=opts["max_nodes"], tol=opts["tol"])
    out["graph"] = graph
    out["vertices"] = graph.vertices() if graph is not None else []

    if n >= 4:
        out["trace"] = trace_records(run)
        return out

    points = graph.vertex_array() if graph is not None else np.empty((0, n))
    hull = build_hull(points, n, tol=opts["tol"])
    out["hull"] = hull
    if n <= 2:
        out["polygon"] = hull["polygon"]
        out["steps"] = _step_points(run, 2)
    else:
        out["triangles"] = hull["triangles"]
        out["steps"] = _step_points(run, 3)
    logger.debug("%dD payload: %d vertices, %d steps", n, len(out["vertices"]), len(out["steps"]))
    return out


def visualize(objective, constraints, maximize=True, dimension=None, opts=None):
    opts = _defaults(opts)
    run = solve(objective, constraints, maximize=maximize, dimension=dimension, opts=opts)
    return describe(run, opts)
