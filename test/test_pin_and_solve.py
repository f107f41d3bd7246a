"""
Tests für sketcher/operations/pin_and_solve.py

Eingabefeld-Workflow: Wert setzen, pinnen, lösen, Pin lösen.
"""

import math

import pytest

from sketcher import Sketch, Point
from sketcher.operations import PinAndSolve, ResultStatus, OperationResult
from sketcher.solver import RelaxationSolver, SolverResult, SolverStatus

pytestmark = [pytest.mark.solver, pytest.mark.fast]


@pytest.fixture
def sketch_with_midpoint():
    sketch = Sketch("pin")
    line = sketch.add_line(0.0, 0.0, 10.0, 0.0)
    point = sketch.add_point(5.0, 0.0)
    sketch.add_midpoint(point, line)
    return sketch, line, point


class TestPinAndSolve:

    def test_pinned_value_survives_solve(self, sketch_with_midpoint):
        sketch, line, point = sketch_with_midpoint

        result = PinAndSolve(sketch).execute(point.var_y, 4.0)

        assert result.status == ResultStatus.SUCCESS
        assert isinstance(result.solver_result, SolverResult)
        assert point.y == 4.0
        assert line.p0.y == pytest.approx(4.0, abs=1e-6)
        assert line.p1.y == pytest.approx(4.0, abs=1e-6)

    def test_pin_released_after_solve(self, sketch_with_midpoint):
        sketch, _, point = sketch_with_midpoint

        PinAndSolve(sketch).execute(point.var_y, 4.0)

        assert point.var_y.constant is False

    def test_already_constant_variable_stays_constant(self, sketch_with_midpoint):
        sketch, _, point = sketch_with_midpoint
        point.var_x.constant = True

        sketch.pin_and_solve(point.var_x, 6.0)

        assert point.var_x.constant is True
        assert point.x == 6.0

    def test_non_finite_value_rejected(self, sketch_with_midpoint):
        sketch, _, point = sketch_with_midpoint
        op = PinAndSolve(sketch)

        result = op.execute(point.var_y, math.nan)

        assert result.is_error
        assert op.last_result is result
        assert point.y == 0.0
        assert result.solver_result is None
        assert not op.can_execute(point.var_y, math.inf)
        assert op.can_execute(point.var_y, 1.0)

    def test_foreign_variable_rejected(self, sketch_with_midpoint):
        sketch, _, _ = sketch_with_midpoint
        stranger = Point(0.0, 0.0)

        result = sketch.pin_and_solve(stranger.var_x, 1.0)

        assert result.is_error
        assert stranger.x == 0.0

    def test_iteration_limit_gives_warning(self):
        sketch = Sketch(_solver=RelaxationSolver(max_iterations=1))
        line = sketch.add_line(0.0, 0.0, 10.0, 0.0)
        point = sketch.add_point(5.0, 0.0)
        sketch.add_midpoint(point, line)

        result = sketch.pin_and_solve(point.var_y, 4.0)

        assert result.status == ResultStatus.WARNING
        assert result.success
        assert not result.solver_result.success

    def test_undamped_operation(self, sketch_with_midpoint):
        sketch, line, point = sketch_with_midpoint

        result = PinAndSolve(sketch, damped=False).execute(point.var_x, 6.0)

        assert result.success
        assert (line.p0.x + line.p1.x) / 2 == pytest.approx(6.0, abs=1e-6)


class TestOperationResult:

    def test_from_solver_maps_convergence(self):
        converged = SolverResult(True, 3, 0.0, SolverStatus.CONVERGED, "ok")
        limited = SolverResult(False, 1000, 0.5, SolverStatus.ITERATION_LIMIT_REACHED, "limit")

        assert OperationResult.from_solver(converged).status == ResultStatus.SUCCESS
        result = OperationResult.from_solver(limited)
        assert result.status == ResultStatus.WARNING
        assert result.success
        assert result.message == "limit"

    def test_rejected(self):
        err = OperationResult.rejected("kaputt")
        assert err.is_error and not err.success
        assert err.solver_result is None
