"""
LiteCAD Sketcher - Configuration Module
=======================================

Zentrale Konfiguration für Toleranzen, Solver-Parameter und Feature Flags.
"""

from .tolerances import Tolerances, solver_damping, validate_tolerances
from .feature_flags import is_enabled, set_flag, FEATURE_FLAGS
