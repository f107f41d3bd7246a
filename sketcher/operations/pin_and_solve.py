"""
LiteCAD Sketcher - Pin & Solve Operation
========================================

Setzt eine Variable auf einen Wert, pinnt sie für genau einen Solve und gibt
den Pin danach wieder frei. Ersetzt das direkte Schreiben aus UI-Callbacks.

Verwendung:
    op = PinAndSolve(sketch)
    result = op.execute(line.p0.var_x, 12.5)
"""

import math
from typing import Optional, TYPE_CHECKING

from loguru import logger

from ..solver import SolverResult
from .base import SketchOperation

if TYPE_CHECKING:
    from sketcher import Sketch, Variable


class PinAndSolve(SketchOperation):
    """Wert setzen, pinnen, gedämpft lösen, Pin lösen."""

    def __init__(self, sketch: 'Sketch', damped: bool = True):
        super().__init__(sketch)
        self.damped = damped

    def validate(self, variable: 'Variable', value: float) -> Optional[str]:
        if not math.isfinite(value):
            return f"Ungültiger Wert: {value}"
        if not self.sketch.owns_variable(variable):
            return "Variable gehört nicht zum Sketch"
        return None

    def _apply(self, variable: 'Variable', value: float) -> SolverResult:
        was_constant = variable.constant
        variable.set(value)
        variable.constant = True
        try:
            result = self.sketch.solve(damped=self.damped)
        finally:
            variable.constant = was_constant

        logger.debug(f"[PinAndSolve] {variable!r} <- {value}: {result.message}")
        return result
