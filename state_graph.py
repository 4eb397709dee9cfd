import logging
from collections import deque
from dataclasses import dataclass

import numpy as np

from simplex_utils import _extract_solution, _pivot, _ratio_test, canonical_basis

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Vertex:
    point: tuple
    basis: tuple


class StateGraph:
    """Graph of feasible bases reachable from a starting basis by single pivots.

    Nodes are canonical bases, so two paths reaching the same basis merge.
    The objective row is carried along but never consulted: every ratio test
    that succeeds is an edge, improving or not.
    """

    def __init__(self, tableau, basis, n_orig, tol=1e-9):
        self.tableau = None if tableau is None else np.array(tableau, dtype=float)
        self.basis = np.array(basis, dtype=int)
        self.n_orig = int(n_orig)
        self.tol = tol
        self.nodes = {}
        self.order = []
        self.edges = set()
        self.truncated = False

    @classmethod
    def empty(cls, n_orig, tol=1e-9):
        """Graph of a problem with no feasible basis: no nodes, no edges."""
        return cls(None, (), n_orig, tol)

    def _point(self, T, basis):
        x = _extract_solution(T, basis)
        return tuple(float(v) for v in x[:self.n_orig])

    def _is_feasible(self, T):
        rhs = T[:-1, -1]
        scale = max(1.0, float(np.max(np.abs(rhs)))) if rhs.size else 1.0
        return bool(np.all(rhs >= -self.tol * scale))

    def neighbours(self, T, basis):
        n = T.shape[1] - 1
        basic = set(int(j) for j in basis)
        for col in range(n):
            if col in basic:
                continue
            ratios = _ratio_test(T, col, self.tol)
            finite = np.where(np.isfinite(ratios))[0]
            if finite.size == 0:
                continue
            min_ratio = float(np.min(ratios[finite]))
            ties = finite[np.abs(ratios[finite] - min_ratio) <= self.tol]
            for row in ties:
                T2 = _pivot(T.copy(), int(row), col, self.tol)
                basis2 = basis.copy()
                basis2[int(row)] = col
                if not self._is_feasible(T2):
                    continue
                yield T2, basis2

    def explore(self, max_nodes=None):
        if self.tableau is None:
            return self
        start = canonical_basis(self.basis)
        self.nodes = {start: self._point(self.tableau, self.basis)}
        self.order = [start]
        self.edges = set()
        self.truncated = False
        queue = deque([(self.tableau, self.basis)])

        while queue:
            T, basis = queue.popleft()
            key = canonical_basis(basis)
            for T2, basis2 in self.neighbours(T, basis):
                key2 = canonical_basis(basis2)
                if key2 != key:
                    self.edges.add(tuple(sorted((key, key2))))
                if key2 in self.nodes:
                    continue
                if max_nodes is not None and len(self.nodes) >= max_nodes:
                    self.truncated = True
                    continue
                self.nodes[key2] = self._point(T2, basis2)
                self.order.append(key2)
                queue.append((T2, basis2))

        logger.info("explored %d feasible bases, %d edges%s", len(self.nodes), len(self.edges),
                    " (truncated)" if self.truncated else "")
        return self

    def vertices(self):
        out = []
        for key in self.order:
            point = self.nodes[key]
            p = np.asarray(point)
            if any(np.max(np.abs(p - np.asarray(v.point))) <= 1e-7 for v in out):
                continue
            out.append(Vertex(point=point, basis=key))
        return out

    def vertex_array(self):
        verts = self.vertices()
        if not verts:
            return np.empty((0, self.n_orig))
        return np.array([v.point for v in verts], dtype=float)


def explore_vertices(run, max_nodes=None, tol=1e-9):
    if not run.reached_phase2:
        return StateGraph.empty(run.dimension, tol)
    graph = StateGraph(run.phase2_tableau, run.phase2_basis, run.dimension, tol)
    return graph.explore(max_nodes=max_nodes)
