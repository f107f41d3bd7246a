"""
LiteCAD Sketcher - Sketch Object
Fasst Figuren, Links und Relationen zusammen
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, Union
import uuid

from loguru import logger

from .geometry import Figure, Point, Line, Circle, Arc, figure_variables
from .relations import (
    Relation, MidpointRelation, ColinearPointsRelation, EqualLengthRelation,
    PointsOnCircleRelation, TangentLineRelation, EqualRelation,
    make_midpoint, make_colinear, make_equal_length, make_points_on_circle,
    make_tangent, make_equal_radius, calculate_total_error,
)
from .solver import RelaxationSolver, SolverResult
from .util import point_at_angle
from .variable import Variable


@dataclass
class Sketch:
    """
    2D-Sketch mit Figuren und Relationen

    Ein Sketch enthält:
    - Figuren (Punkte, Linien, Kreise, Bögen), jede mit eigenen Variablen
    - Links zwischen Variablen (koinzident, horizontal, vertikal)
    - Relationen (Mittelpunkt, kollinear, gleiche Länge, ...)

    Externe Änderungen (Ziehen, Eingabefelder) passieren nur vor oder nach
    einem solve()-Aufruf, nie währenddessen.
    """

    name: str = "Sketch"
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])

    figures: List[Figure] = field(default_factory=list)
    relations: List[Relation] = field(default_factory=list)

    _solver: RelaxationSolver = field(default_factory=RelaxationSolver, repr=False)

    # === Geometrie-Erstellung ===

    def add_figure(self, figure: Figure) -> Figure:
        """Fügt eine bestehende Figur hinzu (kein Kopieren)"""
        self.figures.append(figure)
        return figure

    def add_point(self, x: float, y: float) -> Point:
        """Fügt einen Punkt hinzu"""
        return self.add_figure(Point(x, y))

    def add_line(self, x1: float, y1: float, x2: float, y2: float) -> Line:
        """Fügt eine Linie hinzu"""
        return self.add_figure(Line(Point(x1, y1), Point(x2, y2)))

    def add_line_from_points(self, p0: Point, p1: Point) -> Line:
        """Linie mit Kopien von p0/p1 (Verbindung nur über add_coincident)"""
        return self.add_figure(Line(p0, p1))

    def add_circle(self, cx: float, cy: float, radius: float) -> Circle:
        """Fügt einen Kreis hinzu"""
        return self.add_figure(Circle(Point(cx, cy), radius))

    def add_arc(self, cx: float, cy: float, radius: float,
                start_angle: float, end_angle: float) -> Arc:
        """Fügt einen Bogen hinzu (Winkel in Radians, gegen den Uhrzeigersinn)"""
        center = Point(cx, cy)
        p0 = point_at_angle(center, radius, start_angle)
        p1 = point_at_angle(center, radius, end_angle)
        return self.add_figure(Arc(center, radius, p0, p1))

    def add_rectangle(self, x: float, y: float, width: float, height: float) -> List[Line]:
        """Fügt ein Rechteck hinzu (4 Linien, Ecken und Achsen über Links)"""
        bottom = self.add_line(x, y, x + width, y)
        right = self.add_line(x + width, y, x + width, y + height)
        top = self.add_line(x + width, y + height, x, y + height)
        left = self.add_line(x, y + height, x, y)

        # Ecken koinzident
        self.add_coincident(bottom.p1, right.p0)
        self.add_coincident(right.p1, top.p0)
        self.add_coincident(top.p1, left.p0)
        self.add_coincident(left.p1, bottom.p0)

        # Form erhalten
        self.add_horizontal(bottom)
        self.add_horizontal(top)
        self.add_vertical(right)
        self.add_vertical(left)

        return [bottom, right, top, left]

    def remove_figure(self, figure: Figure) -> int:
        """
        Entfernt eine Figur und alle Relationen, die ihre Variablen nutzen.
        Die Variablen der Figur verlassen ihre Link-Gruppen.

        Returns:
            Anzahl der entfernten Relationen
        """
        if figure in self.figures:
            self.figures.remove(figure)

        variables = figure.variables()
        owned = {id(v) for v in variables}
        to_remove = [r for r in self.relations if any(id(v) in owned for v in r.get_variables())]
        for r in to_remove:
            self.relations.remove(r)
        for v in variables:
            v.unlink()
        if to_remove:
            logger.debug(f"[Sketch] {len(to_remove)} Relationen mit {figure!r} entfernt")
        return len(to_remove)

    # === Links ===

    @staticmethod
    def _as_points(target: Union[Line, Sequence[Point]]) -> List[Point]:
        if isinstance(target, Line):
            return [target.p0, target.p1]
        points = list(target)
        for p in points:
            if not isinstance(p, Point):
                raise TypeError(f"Erwartet Point, erhalten {type(p).__name__}")
        return points

    def add_coincident(self, p0: Point, p1: Point) -> None:
        """Lässt zwei Punkte zusammenfallen (x und y gelinkt, Wert von p0)"""
        p1.var_x.link(p0.var_x)
        p1.var_y.link(p0.var_y)

    def add_horizontal(self, target: Union[Line, Sequence[Point]]) -> None:
        """Linie bzw. Punkte horizontal: alle y-Variablen gelinkt"""
        points = self._as_points(target)
        for p in points[1:]:
            p.var_y.link(points[0].var_y)

    def add_vertical(self, target: Union[Line, Sequence[Point]]) -> None:
        """Linie bzw. Punkte vertikal: alle x-Variablen gelinkt"""
        points = self._as_points(target)
        for p in points[1:]:
            p.var_x.link(points[0].var_x)

    # === Relationen ===

    def add_relation(self, relation: Relation) -> Relation:
        self.relations.append(relation)
        return relation

    def remove_relation(self, relation: Relation) -> None:
        if relation in self.relations:
            self.relations.remove(relation)

    def add_midpoint(self, point: Point, line: Line) -> MidpointRelation:
        return self.add_relation(make_midpoint(point, line))

    def add_colinear(self, *points: Point) -> ColinearPointsRelation:
        return self.add_relation(make_colinear(*points))

    def add_equal_length(self, *lines: Line) -> EqualLengthRelation:
        return self.add_relation(make_equal_length(*lines))

    def add_points_on_circle(self, circle: Circle, *points: Point) -> PointsOnCircleRelation:
        return self.add_relation(make_points_on_circle(circle, *points))

    def add_tangent(self, line: Line, circle: Circle) -> TangentLineRelation:
        return self.add_relation(make_tangent(line, circle))

    def add_equal_radius(self, *circles: Circle) -> EqualRelation:
        return self.add_relation(make_equal_radius(*circles))

    # === Variablen ===

    def variables(self) -> List[Variable]:
        """Alle Variablen aller Figuren (ohne Duplikate)"""
        seen = set()
        result = []
        for figure in self.figures:
            for v in figure.variables():
                if id(v) not in seen:
                    seen.add(id(v))
                    result.append(v)
        return result

    def owns_variable(self, variable: Variable) -> bool:
        return any(variable is v for v in self.variables())

    def figure_variables(self, figure: Figure) -> List[Tuple[str, Variable]]:
        """Beschriftete Variablen einer Figur (für Eingabefelder)"""
        return figure_variables(figure)

    def total_error(self) -> float:
        return calculate_total_error(self.relations)

    # === Solver ===

    def solve(self, damped: bool = False) -> SolverResult:
        """Löst alle Relationen"""
        return self.solve_with_constant_figures([], damped)

    def solve_with_constant_figures(self, figures: Sequence[Figure], damped: bool = False) -> SolverResult:
        """Löst mit temporär fixierten Figuren (z.B. der gerade gezogene Punkt)"""
        result = self._solver.solve(self.relations, self.figures, figures, damped)
        logger.debug(f"[Sketch] {self.name}: {result.message}")
        return result

    def pin_and_solve(self, variable: Variable, value: float):
        """Setzt eine Variable, pinnt sie für einen Solve und löst (OperationResult)"""
        from .operations import PinAndSolve
        return PinAndSolve(self).execute(variable, value)

    def __repr__(self):
        return (f"Sketch('{self.name}', {len(self.figures)} figures, "
                f"{len(self.relations)} relations)")
