from collections.abc import Mapping

import numpy as np

EPS = 1e-9


class DimensionMismatch(ValueError):
    pass


class LinearFunction:
    """Sparse linear combination of variable indices plus a constant.

    Variables are integer indices into the coordinate space. A variable that
    does not appear has coefficient 0.
    """

    __slots__ = ("constant", "_coefficients")

    def __init__(self, constant=0.0, coefficients=None):
        self.constant = float(constant)
        self._coefficients = {}
        for var, coeff in (coefficients or {}).items():
            var = _as_variable(var)
            self._coefficients[var] = self._coefficients.get(var, 0.0) + float(coeff)

    @classmethod
    def single_variable(cls, var):
        return cls(0.0, {var: 1.0})

    @classmethod
    def from_vector(cls, vec, constant=0.0):
        vec = np.asarray(vec, dtype=float).reshape(-1)
        return cls(constant, {j: v for j, v in enumerate(vec) if v != 0.0})

    @property
    def coefficients(self):
        return dict(self._coefficients)

    def coefficient(self, var):
        return self._coefficients.get(_as_variable(var), 0.0)

    def __getitem__(self, var):
        return self.coefficient(var)

    def variables(self):
        return sorted(j for j, coeff in self._coefficients.items() if coeff != 0.0)

    def max_variable(self):
        used = self.variables()
        return used[-1] if used else -1

    def check_dimension(self, dimension):
        for var in self._coefficients:
            if var >= dimension and self._coefficients[var] != 0.0:
                raise DimensionMismatch(
                    f"variable x{var + 1} is outside a {dimension}-dimensional problem"
                )

    def to_vector(self, dimension):
        self.check_dimension(dimension)
        vec = np.zeros(dimension)
        for var, coeff in self._coefficients.items():
            if var < dimension:
                vec[var] = coeff
        return vec

    def evaluate(self, point):
        # variables missing from the point count as zero
        if isinstance(point, Mapping):
            lookup = lambda j: float(point.get(j, 0.0))
        else:
            values = np.asarray(point, dtype=float).reshape(-1)
            lookup = lambda j: float(values[j]) if j < values.size else 0.0
        total = self.constant
        for var, coeff in self._coefficients.items():
            total += coeff * lookup(var)
        return total

    __call__ = evaluate

    def add(self, other):
        other = _as_function(other)
        out = LinearFunction(self.constant + other.constant, self._coefficients)
        for var, coeff in other._coefficients.items():
            out._coefficients[var] = out._coefficients.get(var, 0.0) + coeff
        return out

    def subtract(self, other):
        return self.add(_as_function(other).negate())

    def scale(self, k):
        k = float(k)
        return LinearFunction(
            self.constant * k,
            {var: coeff * k for var, coeff in self._coefficients.items()},
        )

    def negate(self):
        return self.scale(-1.0)

    def only_negative_coefficients(self):
        return all(coeff < 0.0 for coeff in self._coefficients.values())

    def max_coefficient(self):
        if not self._coefficients:
            raise ValueError("max_coefficient() of a constant linear function")
        return max(self._coefficients.items(), key=lambda item: (item[1], -item[0]))

    def __add__(self, other):
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other):
        return self.subtract(other)

    def __rsub__(self, other):
        return _as_function(other).subtract(self)

    def __mul__(self, k):
        if isinstance(k, LinearFunction):
            return NotImplemented
        return self.scale(k)

    __rmul__ = __mul__

    def __truediv__(self, k):
        return self.scale(1.0 / float(k))

    def __neg__(self):
        return self.negate()

    def __eq__(self, other):
        if not isinstance(other, LinearFunction):
            return NotImplemented
        if abs(self.constant - other.constant) > EPS:
            return False
        for var in set(self._coefficients) | set(other._coefficients):
            if abs(self.coefficient(var) - other.coefficient(var)) > EPS:
                return False
        return True

    def __hash__(self):
        # equality is tolerant, so no coefficient value is safe to hash
        return hash(LinearFunction)

    def __repr__(self):
        return f"LinearFunction({self.constant!r}, {self._coefficients!r})"

    def __str__(self):
        parts = []
        for var in self.variables():
            coeff = self._coefficients[var]
            sign = "-" if coeff < 0 else "+"
            mag = abs(coeff)
            term = f"x{var + 1}" if mag == 1.0 else f"{mag:g}x{var + 1}"
            parts.append((sign, term))
        if self.constant != 0.0 or not parts:
            parts.append(("-" if self.constant < 0 else "+", f"{abs(self.constant):g}"))

        first_sign, first_term = parts[0]
        out = ("-" if first_sign == "-" else "") + first_term
        for sign, term in parts[1:]:
            out += f" {sign} {term}"
        return out


def _as_variable(var):
    if isinstance(var, (bool, np.bool_)) or not isinstance(var, (int, np.integer)):
        raise TypeError(f"variables are integer indices, got {var!r}")
    if var < 0:
        raise DimensionMismatch(f"variable index must be non-negative, got {var}")
    return int(var)


def _as_function(value):
    if isinstance(value, LinearFunction):
        return value
    return LinearFunction(float(value))
