import logging
from dataclasses import dataclass, field

import numpy as np

logger = logging.getLogger(__name__)

INITIALIZING = "INITIALIZING"
PHASE_I = "PHASE I"
PHASE_II = "PHASE II"

OPTIMAL = "optimal"
UNBOUNDED = "unbounded"
INFEASIBLE = "infeasible"
DIMENSION_MISMATCH = "dimension_mismatch"

PIVOT_RULES = ("dantzig", "bland")


def canonical_basis(basis):
    return tuple(sorted(int(j) for j in basis))


@dataclass(frozen=True)
class SimplexState:
    """Read-only capture of the tableau after one pivot (or at a phase start)."""

    index: int
    phase: str
    phase_step: int
    basis: tuple
    point: tuple
    objective: float
    entering: str = ""
    leaving: str = ""
    ratios: tuple = ()
    tableau: np.ndarray = field(default=None, repr=False, compare=False)
    names: tuple = ()
    info: dict = field(default_factory=dict, repr=False, compare=False)

    def as_record(self):
        return {
            "step": self.index,
            "phase": self.phase,
            "basis": [self.names[j] for j in self.basis] if self.names else list(self.basis),
            "point": list(self.point),
            "objective": self.objective,
        }


def _simplex_core(T, basis, names, states, n_orig, objective, phase, tol, pivot_rule):
    n = T.shape[1] - 1
    step = 0
    seen = {canonical_basis(basis)}
    rule = pivot_rule

    while True:
        reduced_costs = T[-1, :n].copy()
        eligible_enter = np.where(reduced_costs < -tol)[0]
        if eligible_enter.size == 0:
            return T, basis, OPTIMAL

        if rule == "bland":
            enter_col = int(np.min(eligible_enter))
            enter_ties = eligible_enter.copy()
            enter_reason = "Bland's rule: smallest-index variable with negative reduced cost."
        else:
            min_rc = float(np.min(reduced_costs[eligible_enter]))
            enter_ties = eligible_enter[np.abs(reduced_costs[eligible_enter] - min_rc) <= tol]
            enter_col = int(np.min(enter_ties))
            enter_reason = "Dantzig rule: most negative reduced cost (ties by smallest index)."

        ratios = _ratio_test(T, enter_col, tol)
        leave_candidates = np.where(np.isfinite(ratios))[0]
        if leave_candidates.size == 0:
            logger.info("%s: column %s has no positive entry, LP is unbounded", phase, names[enter_col])
            return T, basis, UNBOUNDED

        min_ratio = float(np.min(ratios[leave_candidates]))
        leave_ties = leave_candidates[np.abs(ratios[leave_candidates] - min_ratio) <= tol]
        leave_row = int(leave_ties[np.argmin(basis[leave_ties])])

        entering = names[enter_col]
        leaving = names[basis[leave_row]]
        piv = float(T[leave_row, enter_col])

        _pivot(T, leave_row, enter_col, tol)
        basis[leave_row] = enter_col
        step += 1
        logger.debug("%s step %d: %s enters, %s leaves (pivot %.6g)", phase, step, entering, leaving, piv)

        _add_state(
            states,
            T,
            names,
            basis,
            phase,
            step,
            n_orig,
            objective,
            entering=entering,
            leaving=leaving,
            ratios=ratios,
            info={
                "event": "pivot",
                "pivot_rule": rule,
                "reduced_costs": reduced_costs,
                "enter_candidates": eligible_enter.tolist(),
                "enter_tie_candidates": enter_ties.tolist(),
                "enter_value": float(reduced_costs[enter_col]),
                "leave_candidates": leave_candidates.tolist(),
                "leave_tie_candidates": leave_ties.tolist(),
                "min_ratio": min_ratio,
                "pivot_value": piv,
                "is_degenerate_step": bool(min_ratio <= tol),
                "reason": f"{enter_reason} Minimum-ratio test (ties by smallest basic-variable index).",
            },
        )

        key = canonical_basis(basis)
        if key in seen and rule != "bland":
            # cycling
            logger.info("%s: basis %s repeated, switching to Bland's rule", phase, key)
            rule = "bland"
        seen.add(key)


def _ratio_test(T, col, tol):
    m = T.shape[0] - 1
    ratios = np.full(m, np.inf)
    column = T[:m, col]
    rhs = T[:m, -1]
    mask = column > tol
    ratios[mask] = rhs[mask] / column[mask]
    return ratios


def _pivot(T, row, col, tol=0.0):
    piv = T[row, col]
    if abs(piv) <= tol:
        raise RuntimeError("Zero pivot encountered")
    T[row, :] /= piv
    for r in range(T.shape[0]):
        if r != row:
            factor = T[r, col]
            if factor != 0.0:
                T[r, :] -= factor * T[row, :]
    # pin the pivot column to an exact unit vector
    T[:, col] = 0.0
    T[row, col] = 1.0
    return T


def _add_state(states, T, names, basis, phase, step, n_orig, objective,
               entering="", leaving="", ratios=(), info=None):
    x = _extract_solution(T, basis)
    point = tuple(float(v) for v in x[:n_orig])
    snapshot = T.copy()
    snapshot.flags.writeable = False

    states.append(SimplexState(
        index=len(states),
        phase=phase,
        phase_step=step,
        basis=tuple(int(j) for j in basis),
        point=point,
        objective=float(objective.evaluate(point)),
        entering=entering,
        leaving=leaving,
        ratios=tuple(float(r) for r in ratios),
        tableau=snapshot,
        names=tuple(names),
        info={} if info is None else info,
    ))
    return states


def _make_objective_consistent(T, c, basis):
    T = T.copy()
    for i, bi in enumerate(basis):
        cb = c[bi]
        if abs(cb) > 0:
            T[-1, :] += cb * T[i, :]
    return T


def _extract_solution(T, basis):
    n = T.shape[1] - 1
    x = np.zeros(n)
    for i, bi in enumerate(basis):
        x[bi] = T[i, -1]
    return x


def _pivot_out_artificial_basics(T, basis, art, names, tol):
    """Drive zero-valued artificial variables out of the basis after Phase I.

    Rows whose artificial cannot leave have no non-artificial entry: they are
    linear combinations of the other rows and get removed.
    """
    T = T.copy()
    m = T.shape[0] - 1
    n = T.shape[1] - 1
    art_set = set(art)
    actions = []
    redundant = []

    for i in range(m):
        if basis[i] not in art_set:
            continue
        for j in range(n):
            if j not in art_set and abs(T[i, j]) > tol:
                piv = float(T[i, j])
                actions.append({"row": i + 1, "from": names[basis[i]], "to": names[j], "pivot": piv})
                _pivot(T, i, j, tol)
                basis[i] = j
                break
        else:
            redundant.append(i)

    if redundant:
        logger.debug("dropping redundant rows %s", [r + 1 for r in redundant])
        keep_rows = [r for r in range(T.shape[0]) if r not in redundant]
        T = T[keep_rows, :]
        basis = np.array([basis[i] for i in range(m) if i not in redundant], dtype=int)

    return T, basis, actions, redundant


def _remap_basis(basis, keep):
    mapping = np.full(len(keep), -1, dtype=int)
    mapping[np.where(keep)[0]] = np.arange(np.count_nonzero(keep))
    out = basis.copy()
    for i in range(len(out)):
        out[i] = mapping[out[i]]
    return out


def _explain_state(state):
    info = state.info
    if not info:
        return ""

    event = info.get("event", "")
    lines = []

    if event == "pivot":
        lines.append(f"Pivot: {state.entering} enters, {state.leaving} leaves.")
        lines.append(f"Reduced cost of entering variable: {info['enter_value']:.6g}")

        enter_ties = info.get("enter_tie_candidates", [])
        if len(enter_ties) > 1:
            lines.append("Entering tie candidates: " + ", ".join(state.names[j] for j in enter_ties))

        leave_ties = info.get("leave_tie_candidates", [])
        if len(leave_ties) > 1:
            lines.append("Ratio tie rows: " + ", ".join(f"R{r + 1}" for r in leave_ties))

        lines.append(f"Minimum ratio theta*: {info['min_ratio']:.6g}")
        if info.get("is_degenerate_step", False):
            lines.append("Degenerate pivot (theta* is ~0).")

    elif event == "phase_transition":
        lines.append(f"Phase I objective value: {info.get('phase1_objective', 0.0):.6g}")
        art = info.get("artificial_variables", [])
        if art:
            lines.append("Artificial vars removed: " + ", ".join(art))
        for a in info.get("pivot_out_actions", []):
            lines.append(f"Cleanup pivot R{a['row']}: {a['from']} -> {a['to']}")
        dropped = info.get("redundant_rows", [])
        if dropped:
            lines.append("Redundant rows dropped: " + ", ".join(f"R{r + 1}" for r in dropped))

    reason = info.get("reason", "")
    if reason:
        lines.append(reason)
    return "\n".join(lines)


def _tableau_to_text(T, names, basis, ratios=()):
    m = T.shape[0] - 1
    n = T.shape[1] - 1

    def fnum(v):
        if not np.isfinite(v):
            return "inf"
        if abs(v) < 1e-12:
            v = 0.0
        return f"{v:.6g}"

    rows = [["row"] + list(names) + ["rhs", "ratio"]]
    for i in range(m):
        ratio_txt = "inf" if (len(ratios) == 0 or not np.isfinite(ratios[i])) else fnum(ratios[i])
        rows.append([f"R{i+1}({names[basis[i]]})"] + [fnum(T[i, j]) for j in range(n)]
                    + [fnum(T[i, -1]), ratio_txt])
    rows.append(["Rz"] + [fnum(T[-1, j]) for j in range(n)] + [fnum(T[-1, -1]), "-"])

    widths = [max(len(r[c]) for r in rows) for c in range(len(rows[0]))]
    out = [" | ".join(rows[0][c].rjust(widths[c]) for c in range(len(widths))),
           "-+-".join("-" * w for w in widths)]
    for r in rows[1:]:
        out.append(" | ".join(r[c].rjust(widths[c]) for c in range(len(widths))))
    return "\n".join(out)


def _defaults(opts):
    out = dict(opts or {})
    out.setdefault("tol", 1e-9)
    out.setdefault("pivot_rule", "dantzig")
    out.setdefault("explore", True)
    out.setdefault("max_nodes", None)

    tol = float(out["tol"])
    if not np.isfinite(tol) or tol <= 0:
        raise ValueError("opts['tol'] must be a positive finite number.")
    out["tol"] = tol

    pivot_rule = str(out["pivot_rule"]).strip().lower()
    if pivot_rule not in PIVOT_RULES:
        raise ValueError("opts['pivot_rule'] must be 'dantzig' or 'bland'.")
    out["pivot_rule"] = pivot_rule

    max_nodes = out["max_nodes"]
    if max_nodes is not None and (isinstance(max_nodes, bool) or int(max_nodes) < 1):
        raise ValueError("opts['max_nodes'] must be None or a positive integer.")
    out["explore"] = bool(out["explore"])
    return out
