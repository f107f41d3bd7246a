"""
LiteCAD Sketcher - Constraint Solver
Lokale numerische Relaxation: Deltas sammeln, mitteln, dämpfen, anwenden
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import math
import time

import numpy as np
from loguru import logger

from config.feature_flags import is_enabled
from config.tolerances import Tolerances, solver_damping

from .geometry import Figure
from .relations import Relation, RelationContractError
from .variable import Variable


class SolverStatus(Enum):
    """Zustand des Solvers (IDLE, RELAXING) bzw. Ergebnis eines Aufrufs"""
    IDLE = auto()                     # Kein solve()-Aufruf aktiv
    RELAXING = auto()                 # Relaxations-Durchläufe laufen
    CONVERGED = auto()                # Gesamtfehler < Toleranz
    ITERATION_LIMIT_REACHED = auto()  # Budget erschöpft, Fehler noch zu groß


@dataclass
class SolverResult:
    """Ergebnis eines solve()-Aufrufs"""
    success: bool
    iterations: int
    final_error: float
    status: SolverStatus
    message: str = ""
    n_variables: int = 0
    n_relations: int = 0
    solve_time_ms: float = 0.0


def _unique_variables(figures: Iterable[Figure]) -> List[Variable]:
    seen = set()
    variables = []
    for figure in figures:
        for v in figure.variables():
            if id(v) not in seen:
                seen.add(id(v))
                variables.append(v)
    return variables


class RelaxationSolver:
    """
    Iterativer Relaxations-Solver für geometrische Relationen.

    Pro Durchlauf:
    1. get_deltas() aller Relationen sammeln
    2. Deltas pro Wert-Zelle mitteln (gelinkte Variablen teilen einen Topf),
       Zellen mit konstanter Variable überspringen
    3. Mit Dämpfungsfaktor (< 1) skalieren und einmal pro Zelle schreiben
    4. Gesamtfehler neu berechnen

    Abbruch bei Gesamtfehler < tolerance oder nach max_iterations.
    Zwischen zwei Aufrufen wird kein Zustand gehalten.
    """

    def __init__(self, tolerance: Optional[float] = None, max_iterations: Optional[int] = None,
                 damping: Optional[float] = None, drag_damping: Optional[float] = None):
        self.tolerance = Tolerances.SOLVER_TOLERANCE if tolerance is None else tolerance
        self.max_iterations = Tolerances.SOLVER_MAX_ITERATIONS if max_iterations is None else max_iterations
        self.damping = solver_damping() if damping is None else damping
        self.drag_damping = solver_damping(damped=True) if drag_damping is None else drag_damping
        self.state = SolverStatus.IDLE

    def solve(self, relations: Sequence[Relation], figures: Sequence[Figure] = (),
              constant_figures: Sequence[Figure] = (), damped: bool = False) -> SolverResult:
        """
        Löst das Relationen-System.

        Args:
            relations: Alle Relationen
            figures: Alle Figuren des Sketches (für Statistik)
            constant_figures: Figuren, deren Variablen nur für diesen Aufruf
                              konstant gesetzt werden (z.B. gezogener Punkt)
            damped: True = stärkere Dämpfung für interaktives Ziehen

        Returns:
            SolverResult mit Endfehler und Status
        """
        relations = list(relations)
        damping = self.drag_damping if damped else self.damping
        start_time = time.perf_counter()

        pinned = self._pin(constant_figures)
        self.state = SolverStatus.RELAXING
        try:
            iterations, error = self._relax(relations, damping)
        finally:
            self._release(pinned)
            self.state = SolverStatus.IDLE

        converged = error < self.tolerance
        status = SolverStatus.CONVERGED if converged else SolverStatus.ITERATION_LIMIT_REACHED

        if converged:
            message = f"Konvergiert nach {iterations} Durchläufen (Fehler: {error:.2e})"
            logger.debug(f"[Solver] {message}")
        else:
            message = f"Iterationslimit {self.max_iterations} erreicht (Fehler: {error:.2e})"
            logger.warning(f"[Solver] {message}")

        return SolverResult(
            success=converged,
            iterations=iterations,
            final_error=float(error),
            status=status,
            message=message,
            n_variables=len(_unique_variables(figures)),
            n_relations=len(relations),
            solve_time_ms=(time.perf_counter() - start_time) * 1000,
        )

    # === Relaxation ===

    def _relax(self, relations: List[Relation], damping: float) -> Tuple[int, float]:
        error = self.total_error(relations)
        if error < self.tolerance:
            return 0, error

        debug = is_enabled("solver_debug_logging")
        iteration = 0
        while iteration < self.max_iterations:
            iteration += 1
            self.step(relations, damping)
            error = self.total_error(relations)
            if debug:
                logger.debug(f"[Solver] Durchlauf {iteration}: Fehler {error:.6e}")
            if error < self.tolerance:
                break
        return iteration, error

    def step(self, relations: Sequence[Relation], damping: float) -> int:
        """
        Ein Relaxations-Durchlauf.

        Returns:
            Anzahl der geschriebenen Wert-Zellen
        """
        check_contract = is_enabled("solver_contract_checks")
        buckets: Dict[int, List[float]] = {}
        owners: Dict[int, Variable] = {}

        for relation in relations:
            for variable, delta in relation.get_deltas():
                if check_contract and not relation.owns(variable):
                    raise RelationContractError(
                        f"{relation!r} schlägt Delta für fremde Variable {variable!r} vor"
                    )
                if not math.isfinite(delta):
                    logger.warning(f"[Solver] Nicht-endliches Delta von {relation!r} ignoriert")
                    continue
                key = variable.cell_key
                buckets.setdefault(key, []).append(delta)
                owners.setdefault(key, variable)

        written = 0
        for key, deltas in buckets.items():
            variable = owners[key]
            if variable.cell_constant:
                continue
            variable.value += damping * float(np.mean(deltas))
            written += 1
        return written

    @staticmethod
    def total_error(relations: Sequence[Relation]) -> float:
        """Summe aller Relation-Fehler (NaN/Inf bleibt sichtbar)"""
        if not relations:
            return 0.0
        errors = np.fromiter((r.get_error() for r in relations), dtype=np.float64, count=len(relations))
        return float(errors.sum())

    # === Konstante Figuren ===

    @staticmethod
    def _pin(figures: Sequence[Figure]) -> List[Tuple[Variable, bool]]:
        pinned = []
        for figure in figures:
            for v in figure.variables():
                pinned.append((v, v.constant))
                v.constant = True
        return pinned

    @staticmethod
    def _release(pinned: List[Tuple[Variable, bool]]) -> None:
        # Rückwärts, damit doppelt gepinnte Variablen ihren Ursprungswert erhalten
        for v, was_constant in reversed(pinned):
            v.constant = was_constant


def solve(relations: Sequence[Relation], figures: Sequence[Figure] = (),
          constant_figures: Sequence[Figure] = (), damped: bool = False) -> float:
    """Einstiegspunkt für die UI: löst und gibt den Endfehler zurück"""
    return RelaxationSolver().solve(relations, figures, constant_figures, damped).final_error
