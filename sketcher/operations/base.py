"""
LiteCAD Sketcher - Befehls-Objekte
==================================

Änderungen von außen (Eingabefelder, Ziehen) laufen als Befehl auf dem
Sketch: erst prüfen, dann anwenden und lösen. Das Ergebnis trägt den
SolverResult des Laufs.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, TYPE_CHECKING

from loguru import logger

from ..solver import SolverResult

if TYPE_CHECKING:
    from sketcher import Sketch


class ResultStatus(Enum):
    SUCCESS = auto()   # Solver konvergiert
    WARNING = auto()   # Angewendet, Iterationslimit erreicht
    ERROR = auto()     # Abgelehnt, Sketch unverändert


@dataclass
class OperationResult:
    """Ausgang eines Befehls; solver_result fehlt nur bei Ablehnung."""
    status: ResultStatus
    message: str = ""
    solver_result: Optional[SolverResult] = None

    @property
    def success(self) -> bool:
        return self.status is not ResultStatus.ERROR

    @property
    def is_error(self) -> bool:
        return self.status is ResultStatus.ERROR

    @classmethod
    def from_solver(cls, result: SolverResult) -> 'OperationResult':
        status = ResultStatus.SUCCESS if result.success else ResultStatus.WARNING
        return cls(status, result.message, result)

    @classmethod
    def rejected(cls, reason: str) -> 'OperationResult':
        return cls(ResultStatus.ERROR, reason)


class SketchOperation(ABC):
    """
    Befehl auf einem Sketch.

    Subklassen liefern validate() (Ablehnungsgrund oder None) und _apply()
    (ändert den Sketch und löst). execute() verbindet beides und merkt sich
    das Ergebnis in last_result.
    """

    def __init__(self, sketch: 'Sketch'):
        self.sketch = sketch
        self.last_result: Optional[OperationResult] = None

    def validate(self, *args) -> Optional[str]:
        return None

    def can_execute(self, *args) -> bool:
        return self.validate(*args) is None

    @abstractmethod
    def _apply(self, *args) -> SolverResult:
        ...

    def execute(self, *args) -> OperationResult:
        reason = self.validate(*args)
        if reason is not None:
            logger.warning(f"[{type(self).__name__}] Abgelehnt: {reason}")
            result = OperationResult.rejected(reason)
        else:
            result = OperationResult.from_solver(self._apply(*args))
        self.last_result = result
        return result
