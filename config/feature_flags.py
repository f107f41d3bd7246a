"""
LiteCAD Sketcher - Feature Flags
================================

Feature Flags ermöglichen Debug-Modi und schrittweises Aktivieren von
Solver-Verhalten ohne Code-Änderung. Tests setzen alle Flags vor jedem
Test auf die Defaults zurück (siehe test/conftest.py).
"""

from typing import Dict

FEATURE_FLAGS: Dict[str, bool] = {
    # Debug-Modi
    "solver_debug_logging": False,  # Fehler pro Relaxations-Durchlauf loggen (sehr verbose)

    # Solver-Verhalten
    "solver_contract_checks": True,  # Deltas gegen get_variables() der Relation prüfen (fail fast)
}


def is_enabled(flag: str) -> bool:
    """
    Prüft ob ein Feature-Flag aktiviert ist.

    Args:
        flag: Name des Feature-Flags

    Returns:
        True wenn aktiviert, False wenn nicht aktiviert oder unbekannt
    """
    return FEATURE_FLAGS.get(flag, False)


def set_flag(flag: str, value: bool) -> None:
    """
    Setzt ein Feature-Flag zur Laufzeit.
    Nützlich für Tests und Debugging.

    Args:
        flag: Name des Feature-Flags
        value: Neuer Wert
    """
    FEATURE_FLAGS[flag] = value
