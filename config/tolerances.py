"""
LiteCAD Sketcher - Zentralisierte Toleranz-Konfiguration
========================================================

Alle Toleranzen und Solver-Parameter an einem Ort.

Toleranz-Philosophie:
- Solver-Konvergenz: 1e-8 (Summe aller Relation-Fehler)
- Orientierung: 0.1 - bewusst grob, damit fast kollineare Segmente
  beim Schnitt-Test als kollinear gelten
- Punkt-Vergleich: exakt (Point.equals)
- Regression: Streuung unter 1e-9 (relativ) gilt als 0

Verwendung:
    from config.tolerances import Tolerances

    # Direkt als Klassenvariablen
    damping = Tolerances.SOLVER_DAMPING

    # Oder via Convenience-Funktion
    from config.tolerances import solver_damping
    drag = solver_damping(damped=True)
"""


class Tolerances:
    """
    Zentrale Toleranz-Konstanten für den Sketcher.

    Kategorien:
    - SOLVER_*: Relaxations-Solver
    - ORIENTATION_*: Orientierungs-Test / Segment-Schnitt
    - EPSILON_*: Numerische Stabilität
    """

    # =========================================================================
    # Relaxations-Solver
    # =========================================================================

    # Abbruch wenn Summe aller Relation-Fehler darunter liegt
    SOLVER_TOLERANCE = 1e-8

    # Maximale Anzahl Relaxations-Durchläufe pro solve()-Aufruf
    SOLVER_MAX_ITERATIONS = 1000

    # Dämpfung der gemittelten Deltas (muss < 1 sein)
    SOLVER_DAMPING = 0.5

    # Stärkere Dämpfung für interaktives Ziehen (damped=True)
    SOLVER_DAMPING_DRAG = 0.25

    # =========================================================================
    # Orientierung
    # =========================================================================

    # Absolute Schwelle für das Kreuzprodukt: darunter = kollinear
    ORIENTATION_EPSILON = 0.1

    # =========================================================================
    # Mathematische Epsilon-Werte (Numerische Stabilität)
    # =========================================================================

    # Relative Streuung, unter der eine Regressions-Achse als 0 gilt
    EPSILON_MATH = 1e-9


# =============================================================================
# Convenience-Funktionen
# =============================================================================

def solver_damping(damped: bool = False) -> float:
    """Gibt den Dämpfungsfaktor für normales Lösen bzw. Ziehen zurück."""
    return Tolerances.SOLVER_DAMPING_DRAG if damped else Tolerances.SOLVER_DAMPING


# =============================================================================
# Toleranz-Validierung (für Debugging)
# =============================================================================

def validate_tolerances():
    """
    Validiert dass alle Toleranzen sinnvolle Werte haben.
    Nützlich für Tests und Debugging.
    """
    issues = []

    # Dämpfung muss im offenen Intervall (0, 1) liegen, sonst schwingt der Solver
    for name in ("SOLVER_DAMPING", "SOLVER_DAMPING_DRAG"):
        value = getattr(Tolerances, name)
        if not (0.0 < value < 1.0):
            issues.append(f"{name} außerhalb (0, 1): {value}")

    if Tolerances.SOLVER_DAMPING_DRAG > Tolerances.SOLVER_DAMPING:
        issues.append(
            f"SOLVER_DAMPING_DRAG ({Tolerances.SOLVER_DAMPING_DRAG}) schwächer als "
            f"SOLVER_DAMPING ({Tolerances.SOLVER_DAMPING})"
        )

    if Tolerances.SOLVER_MAX_ITERATIONS < 1:
        issues.append(f"SOLVER_MAX_ITERATIONS muss >= 1 sein: {Tolerances.SOLVER_MAX_ITERATIONS}")

    if Tolerances.SOLVER_TOLERANCE <= 0.0:
        issues.append(f"SOLVER_TOLERANCE muss positiv sein: {Tolerances.SOLVER_TOLERANCE}")

    return issues


# Automatische Validierung beim Import (nur Warnung, kein Fehler)
_validation_issues = validate_tolerances()
if _validation_issues:
    from loguru import logger
    for issue in _validation_issues:
        logger.warning(f"Toleranz-Validierung: {issue}")
