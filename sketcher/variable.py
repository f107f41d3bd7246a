"""
LiteCAD Sketcher - Variablen
Skalare Unbekannte mit Konstanz-Flag und teilbarer Wert-Zelle (Linking)
"""

from typing import List


class _Cell:
    """
    Gemeinsame Wert-Zelle.

    Alle Variablen einer Link-Gruppe halten dieselbe Zelle. Die Zelle kennt
    ihre Mitglieder, damit ein erneutes Linken die ganze Gruppe umzieht.
    """
    __slots__ = ("value", "members")

    def __init__(self, value: float):
        self.value = value
        self.members: List['Variable'] = []


class Variable:
    """
    Skalare Unbekannte.

    Schreiben geht immer über die Zelle, nie über Feld-Ersetzung, damit
    gelinkte Variablen (horizontal/vertikal/koinzident) konsistent bleiben.
    constant=True bedeutet: der Solver darf diese Variable nicht verändern.
    Explizite Zuweisung von außen (z.B. Eingabefeld) bleibt erlaubt.
    """

    __slots__ = ("_cell", "constant")

    def __init__(self, value: float = 0.0, constant: bool = False):
        self._cell = _Cell(float(value))
        self._cell.members.append(self)
        self.constant = constant

    # === Wert ===

    @property
    def value(self) -> float:
        return self._cell.value

    @value.setter
    def value(self, value: float):
        self._cell.value = float(value)

    def get(self) -> float:
        return self._cell.value

    def set(self, value: float) -> None:
        self._cell.value = float(value)

    # === Linking ===

    def link(self, other: 'Variable') -> None:
        """
        Verbindet diese Variable (samt ihrer Link-Gruppe) mit other.

        Danach teilen alle Variablen beider Gruppen eine Zelle mit dem Wert
        von other. Linking ist transitiv.
        """
        if self._cell is other._cell:
            return
        target = other._cell
        for member in self._cell.members:
            member._cell = target
            target.members.append(member)

    def unlink(self) -> None:
        """Löst die Variable aus ihrer Link-Gruppe (behält den aktuellen Wert)."""
        if len(self._cell.members) == 1:
            return
        self._cell.members.remove(self)
        self._cell = _Cell(self._cell.value)
        self._cell.members.append(self)

    def is_linked(self, other: 'Variable') -> bool:
        """True wenn beide Variablen dieselbe Zelle teilen."""
        return self._cell is other._cell

    def linked_variables(self) -> List['Variable']:
        """Alle Variablen der Link-Gruppe (inklusive self)."""
        return list(self._cell.members)

    @property
    def cell_constant(self) -> bool:
        """True wenn irgendeine Variable der Link-Gruppe konstant ist."""
        return any(member.constant for member in self._cell.members)

    @property
    def cell_key(self) -> int:
        """Identität der Zelle, gleich für alle gelinkten Variablen."""
        return id(self._cell)

    def __repr__(self):
        flags = " const" if self.constant else ""
        linked = len(self._cell.members)
        link_str = f" linked={linked}" if linked > 1 else ""
        return f"Var({self.value:.4f}{flags}{link_str})"
