import numpy as np

from linear_function import EPS, LinearFunction

LE = "<="
GE = ">="
EQ = "="
SENSES = (LE, GE, EQ)

_SLACK_SIGN = {LE: 1.0, GE: -1.0, EQ: 0.0}


class Constraint:
    """`lhs op rhs` between two linear functions, op in {"<=", ">=", "="}."""

    def __init__(self, lhs, op, rhs=None):
        if op not in SENSES:
            raise ValueError("sense entries must be <=, >=, =")
        self.lhs = _as_function(lhs)
        self.rhs = _as_function(rhs if rhs is not None else 0.0)
        self.op = op
        # column of the slack/surplus variable once placed in a tableau
        self.slack_index = None

    @property
    def function(self):
        """`lhs - rhs`, so the constraint reads `function op 0`."""
        return self.lhs - self.rhs

    def normalize(self):
        f = self.function
        if self.op == LE:
            return [Constraint(f, LE)]
        if self.op == GE:
            return [Constraint(-f, LE)]
        return [Constraint(f, LE), Constraint(-f, LE)]

    def check_dimension(self, dimension):
        self.function.check_dimension(dimension)

    def coefficients(self, dimension):
        f = self.function
        return f.to_vector(dimension), -f.constant

    def to_tableau_row(self, dimension, slack_index=None, width=None):
        a, b = self.coefficients(dimension)
        n_extra = 0 if width is None else width - dimension - 1
        if slack_index is not None:
            n_extra = max(n_extra, slack_index + 1)
        row = np.zeros(dimension + n_extra + 1)
        row[:dimension] = a
        if slack_index is not None:
            row[dimension + slack_index] = _SLACK_SIGN[self.op]
            self.slack_index = slack_index
        row[-1] = b
        return row

    def violation(self, point):
        value = self.function.evaluate(point)
        if self.op == LE:
            return max(0.0, value)
        if self.op == GE:
            return max(0.0, -value)
        return abs(value)

    def is_satisfied(self, point, tol=EPS):
        return self.violation(point) <= tol

    def __repr__(self):
        return f"Constraint({self.lhs!r}, {self.op!r}, {self.rhs!r})"

    def __str__(self):
        return f"{self.lhs} {self.op} {self.rhs}"


def _as_function(value):
    if isinstance(value, LinearFunction):
        return value
    return LinearFunction(float(value))
