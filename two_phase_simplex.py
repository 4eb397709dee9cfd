import logging

import numpy as np

from constraint import EQ, GE, LE, Constraint
from linear_function import DimensionMismatch, LinearFunction
from simplex_utils import (
    DIMENSION_MISMATCH,
    INFEASIBLE,
    INITIALIZING,
    OPTIMAL,
    PHASE_I,
    PHASE_II,
    UNBOUNDED,
    _add_state,
    _defaults,
    _extract_solution,
    _make_objective_consistent,
    _pivot_out_artificial_basics,
    _remap_basis,
    _simplex_core,
    _tableau_to_text,
)

logger = logging.getLogger(__name__)


class LinearProgram:
    """Objective, constraints and direction of one problem.

    Variable indexing is checked here, before any tableau exists. Decision
    variables are implicitly non-negative.
    """

    def __init__(self, objective, constraints, maximize=True, dimension=None):
        if not isinstance(objective, LinearFunction):
            raise TypeError("objective must be a LinearFunction")
        constraints = list(constraints)
        for con in constraints:
            if not isinstance(con, Constraint):
                raise TypeError(f"expected a Constraint, got {con!r}")

        if dimension is None:
            used = [objective.max_variable()] + [con.function.max_variable() for con in constraints]
            dimension = max(used) + 1
        dimension = int(dimension)
        if dimension < 1:
            raise DimensionMismatch("a problem needs at least one variable")

        objective.check_dimension(dimension)
        for i, con in enumerate(constraints):
            try:
                con.check_dimension(dimension)
            except DimensionMismatch as e:
                raise DimensionMismatch(f"constraint {i + 1} ({con}): {e}") from e

        self.objective = objective
        self.constraints = constraints
        self.maximize = bool(maximize)
        self.dimension = dimension

    @classmethod
    def from_arrays(cls, c, A, b, sense, maximize=True):
        c = np.asarray(c, dtype=float).reshape(-1)
        A = np.asarray(A, dtype=float).reshape(-1, c.size)
        b = np.asarray(b, dtype=float).reshape(-1)
        if A.shape[0] != b.size or b.size != len(sense):
            raise DimensionMismatch("A, b and sense must have one entry per constraint")
        constraints = [
            Constraint(LinearFunction.from_vector(A[i]), sense[i], LinearFunction(b[i]))
            for i in range(b.size)
        ]
        return cls(LinearFunction.from_vector(c), constraints, maximize=maximize, dimension=c.size)

    @property
    def c(self):
        return self.objective.to_vector(self.dimension)

    def is_feasible(self, point, tol=1e-9):
        point = np.asarray(point, dtype=float).reshape(-1)
        if np.any(point[:self.dimension] < -tol):
            return False
        return all(con.is_satisfied(point, tol) for con in self.constraints)


class SimplexRun:
    """Outcome of one solve: terminal status plus the ordered step history.

    `states` holds the Phase II snapshots, each at a feasible vertex; the
    search for feasibility is kept apart in `phase1_states`.
    """

    def __init__(self, problem=None):
        self.problem = problem
        self.status = None
        self.phase = INITIALIZING
        self.states = []
        self.phase1_states = []
        self.x = None
        self.z = None
        self.tableau = None
        self.basis = None
        self.var_names = []
        self.phase2_tableau = None
        self.phase2_basis = None
        self.rows = []
        self.slack_columns = ()
        self.error = None

    @property
    def dimension(self):
        return self.problem.dimension if self.problem is not None else 0

    @property
    def reached_phase2(self):
        return self.phase2_tableau is not None

    def step_count(self):
        return len(self.states)

    def state_at(self, index):
        return self.states[index]

    def __repr__(self):
        return f"<SimplexRun status={self.status} steps={self.step_count()} z={self.z}>"


def two_phase_simplex(problem, opts=None):
    opts = _defaults(opts)
    tol = opts["tol"]
    run = SimplexRun(problem)

    n = problem.dimension
    c = problem.c if problem.maximize else -problem.c
    objective = problem.objective

    rows, senses = [], []
    for con in problem.constraints:
        _, b = con.coefficients(n)
        # private copies, the caller's constraints stay untouched
        if b < 0:
            con = Constraint(-con.function, {LE: GE, GE: LE, EQ: EQ}[con.op])
        else:
            con = Constraint(con.function, con.op)
        rows.append(con)
        senses.append(con.op)

    m = len(rows)
    var_names = [f"x{k+1}" for k in range(n)]
    extra_names = []
    slack_at = []
    basis = np.zeros(m, dtype=int)
    art = []

    for i, sense in enumerate(senses):
        if sense == LE:
            slack_at.append(len(extra_names))
            extra_names.append(f"s{i+1}")
            basis[i] = n + len(extra_names) - 1
        elif sense == GE:
            slack_at.append(len(extra_names))
            extra_names.append(f"u{i+1}")
            extra_names.append(f"a{i+1}")
            basis[i] = n + len(extra_names) - 1
            art.append(basis[i])
        else:
            slack_at.append(None)
            extra_names.append(f"a{i+1}")
            basis[i] = n + len(extra_names) - 1
            art.append(basis[i])

    names = var_names + extra_names
    N = len(names)
    T = np.zeros((m + 1, N + 1))
    for i, con in enumerate(rows):
        T[i, :] = con.to_tableau_row(n, slack_index=slack_at[i], width=N + 1)
    for j in art:
        T[int(np.where(basis == j)[0][0]), j] = 1.0

    run.rows = rows
    run.slack_columns = tuple(None if k is None else names[n + k] for k in slack_at)
    run.var_names = names

    if art:
        run.phase = PHASE_I
        c1 = np.zeros(N)
        c1[art] = -1.0
        T[-1, :] = np.hstack([-c1, [0.0]])
        T = _make_objective_consistent(T, c1, basis)
        _add_state(run.phase1_states, T, names, basis, PHASE_I, 0, n, objective,
                   info={"event": "phase_start", "reason": "Phase I: minimise the sum of artificial variables."})

        T, basis, status = _simplex_core(T, basis, names, run.phase1_states, n, objective, PHASE_I,
                                         tol, opts["pivot_rule"])

        scale = max(1.0, float(np.max(np.abs(T[:-1, -1]))) if m else 1.0)
        phase1_objective = float(T[-1, -1])
        if status != OPTIMAL or abs(phase1_objective) > tol * scale:
            logger.info("Phase I optimum %.6g is not zero, LP is infeasible", phase1_objective)
            return _finish(run, INFEASIBLE, T, basis, names)

        art_names = [names[j] for j in art]
        T, basis, actions, redundant = _pivot_out_artificial_basics(T, basis, art, names, tol)
        keep = np.ones(N, dtype=bool)
        keep[art] = False
        T = np.hstack([T[:, :-1][:, keep], T[:, -1:]])
        names = [nm for j, nm in enumerate(names) if keep[j]]
        basis = _remap_basis(basis, keep)
        transition = {
            "event": "phase_transition",
            "phase1_objective": phase1_objective,
            "artificial_variables": art_names,
            "pivot_out_actions": actions,
            "redundant_rows": redundant,
            "reason": "Phase II: optimise the original objective from the feasible basis.",
        }
    else:
        transition = {"event": "phase_start",
                      "reason": "Slack basis is feasible, Phase I skipped."}

    run.phase = PHASE_II
    run.var_names = names
    c2 = np.zeros(len(names))
    c2[:n] = c
    T[-1, :] = np.hstack([-c2, [0.0]])
    T = _make_objective_consistent(T, c2, basis)

    run.phase2_tableau = T.copy()
    run.phase2_basis = basis.copy()
    _add_state(run.states, T, names, basis, PHASE_II, 0, n, objective, info=transition)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Phase II start\n%s", _tableau_to_text(T, names, basis))

    T, basis, status = _simplex_core(T, basis, names, run.states, n, objective, PHASE_II, tol, opts["pivot_rule"])
    return _finish(run, status, T, basis, names)


def _finish(run, status, T, basis, names):
    n = run.dimension
    x_all = _extract_solution(T, basis)
    run.status = status
    run.tableau = T.copy()
    run.basis = basis.copy()
    run.var_names = names[:]
    run.states = tuple(run.states)
    run.phase1_states = tuple(run.phase1_states)
    if status == INFEASIBLE:
        run.x = None
        run.z = None
    else:
        run.x = x_all[:n].copy()
        run.z = run.problem.objective.evaluate(run.x) if status == OPTIMAL else None
    logger.info("simplex finished: %s after %d + %d states (z=%s)", status,
                len(run.phase1_states), len(run.states), run.z)
    return run


def solve(objective, constraints, maximize=True, dimension=None, opts=None):
    try:
        problem = LinearProgram(objective, constraints, maximize=maximize, dimension=dimension)
    except DimensionMismatch as e:
        logger.info("rejected problem: %s", e)
        run = SimplexRun()
        run.status = DIMENSION_MISMATCH
        run.error = str(e)
        run.states = ()
        run.phase1_states = ()
        return run
    return two_phase_simplex(problem, opts)
