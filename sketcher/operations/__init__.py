"""
LiteCAD Sketcher - Sketch Operations Module
===========================================

Befehls-Objekte für Änderungen am Sketch von außen (z.B. Eingabefelder).

Verwendung:
    from sketcher.operations import PinAndSolve

    op = PinAndSolve(sketch)
    result = op.execute(circle.var_r, 25.0)

    if not result.success:
        print(result.message)
"""

from .base import OperationResult, ResultStatus, SketchOperation
from .pin_and_solve import PinAndSolve

__all__ = [
    # Core
    'OperationResult',
    'ResultStatus',
    'SketchOperation',
    # Pin & Solve
    'PinAndSolve',
]
