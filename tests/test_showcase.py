import numpy as np
import pytest

from showcase import EXAMPLES, build_example, run_showcase
from two_phase_simplex import two_phase_simplex


@pytest.mark.parametrize("key", list(EXAMPLES))
def test_examples_solve_to_feasible_optimum(key):
    problem = build_example(key)
    run = two_phase_simplex(problem)
    assert run.status == "optimal"
    assert problem.is_feasible(run.x, tol=1e-7)
    assert run.z == pytest.approx(float(np.dot(EXAMPLES[key]["c"], run.x)))


def test_mixed_example_known_optimum():
    run = two_phase_simplex(build_example("2d_mixed"))
    np.testing.assert_allclose(run.x, [3.0, 1.0], atol=1e-9)
    assert run.z == pytest.approx(19.0)


def test_run_showcase_prints_summary(capsys):
    payload = run_showcase("3d")
    out = capsys.readouterr().out
    assert "Status: optimal" in out
    assert "z* =" in out
    assert payload["triangles"].shape[1:] == (3, 3)


def test_run_showcase_4d_prints_trace(capsys):
    payload = run_showcase("4d")
    out = capsys.readouterr().out
    assert "status: optimal" in out
    assert payload["hull"] is None
    assert len(payload["trace"]) == payload["run"].step_count()
