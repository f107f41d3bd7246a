"""
LiteCAD Sketcher - Relationen
Geometrische Beziehungen mit Fehlermaß und lokalen Korrektur-Deltas
"""

from abc import ABC, abstractmethod
from typing import List, Tuple, Iterable
import uuid

from .geometry import Point, Line, Circle
from .variable import Variable
from . import util

VariableDelta = Tuple[Variable, float]


class RelationContractError(RuntimeError):
    """Eine Relation schlägt ein Delta für eine fremde Variable vor."""


class Relation(ABC):
    """
    Basis-Klasse für alle Relationen.

    Vertrag:
    - get_variables(): feste Liste der Variablen, die die Relation anpassen darf
    - get_error(): nicht-negatives Fehlermaß (0 = erfüllt)
    - get_deltas(): (Variable, Delta)-Paare. Jedes Delta ist eine lokale
      Korrektur unter der Annahme, dass alle anderen Variablen fest bleiben.
      Eine Variable darf mehrfach vorkommen, der Solver mittelt.
    """

    def __init__(self, name: str, variables: List[Variable]):
        self.name = name
        self.id = str(uuid.uuid4())[:8]
        self.variables = variables

    def get_variables(self) -> List[Variable]:
        return self.variables

    @abstractmethod
    def get_error(self) -> float:
        ...

    @abstractmethod
    def get_deltas(self) -> List[VariableDelta]:
        ...

    def owns(self, variable: Variable) -> bool:
        """True wenn variable (als Objekt, nicht nur per Link) zur Relation gehört."""
        return any(variable is v for v in self.variables)

    def __repr__(self):
        return f"{type(self).__name__}({self.name})"


def _point_variables(*points: Point) -> List[Variable]:
    variables = []
    for p in points:
        variables += [p.var_x, p.var_y]
    return variables


class MidpointRelation(Relation):
    """Punkt liegt auf dem Mittelpunkt einer Linie"""

    def __init__(self, point: Point, line: Line):
        super().__init__("midpoint", _point_variables(point, line.p0, line.p1))
        self.midpoint = point
        self.line = line

    def get_deltas(self) -> List[VariableDelta]:
        # Drei unabhängige Korrekturen aus demselben Zustand (nicht verkettet)
        deltas: List[VariableDelta] = []

        midpoint = util.average_of_points(self.line.p0, self.line.p1)
        deltas += util.point_deltas(self.midpoint, midpoint)

        reflect_p0 = util.reflect_over(self.line.p0, self.midpoint)
        deltas += util.point_deltas(self.line.p1, reflect_p0)

        reflect_p1 = util.reflect_over(self.line.p1, self.midpoint)
        deltas += util.point_deltas(self.line.p0, reflect_p1)

        return deltas

    def get_error(self) -> float:
        midpoint = util.average_of_points(self.line.p0, self.line.p1)
        return util.distance(self.midpoint, midpoint)


class EqualRelation(Relation):
    """Alle Variablen haben denselben Wert"""

    def __init__(self, name: str, *variables: Variable):
        if len(variables) < 2:
            raise ValueError(f"{name} benötigt mindestens 2 Variablen, hat {len(variables)}")
        super().__init__(name, list(variables))

    def _average(self) -> float:
        return sum(v.value for v in self.variables) / len(self.variables)

    def get_deltas(self) -> List[VariableDelta]:
        avg = self._average()
        return [(v, avg - v.value) for v in self.variables]

    def get_error(self) -> float:
        avg = self._average()
        return sum(abs(v.value - avg) for v in self.variables)


class ColinearPointsRelation(Relation):
    """Punkte liegen auf einer gemeinsamen Geraden"""

    def __init__(self, *points: Point):
        if len(points) < 2:
            raise ValueError(f"colinear benötigt mindestens 2 Punkte, hat {len(points)}")
        super().__init__("colinear", _point_variables(*points))
        self.points = list(points)

    def regression_line(self) -> Line:
        forced = util.forced_regression_line(*self.points)
        if forced is not None:
            return forced
        return util.least_squares_regression(*self.points)

    def get_deltas(self) -> List[VariableDelta]:
        regression = self.regression_line()
        deltas: List[VariableDelta] = []
        for p in self.points:
            deltas += util.point_deltas(p, util.project_onto_line(regression, p))
        return deltas

    def get_error(self) -> float:
        regression = self.regression_line()
        return sum(util.distance_to_line(regression, p) for p in self.points)


class EqualLengthRelation(Relation):
    """Linien haben dieselbe Länge"""

    def __init__(self, *lines: Line):
        if len(lines) < 2:
            raise ValueError(f"equal length benötigt mindestens 2 Linien, hat {len(lines)}")
        variables = []
        for line in lines:
            variables += line.variables()
        super().__init__("equal length", variables)
        self.lines = list(lines)

    def _average_length(self) -> float:
        return sum(util.length_of_line(line) for line in self.lines) / len(self.lines)

    def get_deltas(self) -> List[VariableDelta]:
        avg = self._average_length()
        deltas: List[VariableDelta] = []
        for line in self.lines:
            goal_p1 = util.point_in_direction(line.p0, line.p1, avg)
            goal_p0 = util.point_in_direction(line.p1, line.p0, avg)
            deltas += util.point_deltas(line.p1, goal_p1)
            deltas += util.point_deltas(line.p0, goal_p0)
        return deltas

    def get_error(self) -> float:
        avg = self._average_length()
        return sum(abs(util.length_of_line(line) - avg) for line in self.lines)


class PointsOnCircleRelation(Relation):
    """Punkte liegen auf dem Kreisrand"""

    def __init__(self, circle: Circle, *points: Point):
        if not points:
            raise ValueError("points on circle benötigt mindestens 1 Punkt")
        super().__init__("points on circle", [circle.var_r] + _point_variables(*points))
        self.circle = circle
        self.points = list(points)

    def get_deltas(self) -> List[VariableDelta]:
        deltas: List[VariableDelta] = []
        total = 0.0
        for p in self.points:
            deltas += util.point_deltas(p, util.project_onto_circle(self.circle, p))
            total += util.distance(self.circle.c, p)
        deltas.append((self.circle.var_r, total / len(self.points) - self.circle.radius))
        return deltas

    def get_error(self) -> float:
        return sum(util.distance_to_circle(self.circle, p) for p in self.points)


class TangentLineRelation(Relation):
    """Unendliche Gerade berührt den Kreis (Abstand Mittelpunkt = Radius)"""

    def __init__(self, line: Line, circle: Circle):
        variables = _point_variables(line.p0, line.p1, circle.c) + [circle.var_r]
        super().__init__("tangent", variables)
        self.line = line
        self.circle = circle

    def get_deltas(self) -> List[VariableDelta]:
        foot = util.project_onto_line(self.line, self.circle.c)
        touch = util.point_in_direction(self.circle.c, foot, self.circle.radius)
        dx = touch.x - foot.x
        dy = touch.y - foot.y

        c = self.circle.c
        deltas: List[VariableDelta] = []
        for p in (self.line.p0, self.line.p1):
            deltas += [(p.var_x, dx), (p.var_y, dy)]
        deltas += [(c.var_x, -dx), (c.var_y, -dy)]
        deltas.append((self.circle.var_r, util.distance(c, foot) - self.circle.radius))
        return deltas

    def get_error(self) -> float:
        return abs(util.distance_to_line(self.line, self.circle.c) - self.circle.radius)


# === Relation-Factories ===

def _require(value, expected, name: str):
    if not isinstance(value, expected):
        raise TypeError(f"{name}: erwartet {expected.__name__}, erhalten {type(value).__name__}")


def make_midpoint(point: Point, line: Line) -> MidpointRelation:
    """Punkt auf Mittelpunkt einer Linie"""
    _require(point, Point, "midpoint")
    _require(line, Line, "midpoint")
    return MidpointRelation(point, line)


def make_equal(name: str, *variables: Variable) -> EqualRelation:
    """Variablen gleich (ohne Linking)"""
    return EqualRelation(name, *variables)


def make_colinear(*points: Point) -> ColinearPointsRelation:
    """Punkte kollinear"""
    for p in points:
        _require(p, Point, "colinear")
    return ColinearPointsRelation(*points)


def make_equal_length(*lines: Line) -> EqualLengthRelation:
    """Linien gleich lang"""
    for line in lines:
        _require(line, Line, "equal length")
    return EqualLengthRelation(*lines)


def make_points_on_circle(circle: Circle, *points: Point) -> PointsOnCircleRelation:
    """Punkte auf Kreis"""
    _require(circle, Circle, "points on circle")
    for p in points:
        _require(p, Point, "points on circle")
    return PointsOnCircleRelation(circle, *points)


def make_tangent(line: Line, circle: Circle) -> TangentLineRelation:
    """Linie tangential an Kreis"""
    _require(line, Line, "tangent")
    _require(circle, Circle, "tangent")
    return TangentLineRelation(line, circle)


def make_equal_radius(*circles: Circle) -> EqualRelation:
    """Kreise/Bögen mit gleichem Radius"""
    for circle in circles:
        _require(circle, Circle, "equal radius")
    return EqualRelation("equal radius", *[c.var_r for c in circles])


def calculate_total_error(relations: Iterable[Relation]) -> float:
    """Summe der Fehler aller Relationen"""
    return sum(r.get_error() for r in relations)
