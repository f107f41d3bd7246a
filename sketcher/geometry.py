"""
LiteCAD Sketcher - Geometrie-Primitives
Punkte, Linien, Kreise, Bögen aus Variablen zusammengesetzt
"""

from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Dict, List, Tuple
import math

from .variable import Variable


class GeometryType(Enum):
    """Geometrie-Typen"""
    POINT = auto()
    LINE = auto()
    CIRCLE = auto()
    ARC = auto()


def _copy_variable(variable: Variable, memo: Dict[int, Variable]) -> Variable:
    """
    Kopiert eine Variable. Variablen, die innerhalb derselben Kopie bereits
    über ihre Zelle bekannt sind, werden wieder gelinkt.
    """
    copy = Variable(variable.value, variable.constant)
    original = memo.get(variable.cell_key)
    if original is None:
        memo[variable.cell_key] = copy
    else:
        copy.link(original)
    return copy


def _translate_points(points: List['Point'], dx: float, dy: float) -> None:
    """Verschiebt Punkte, jede geteilte Zelle aber nur einmal pro Achse."""
    moved_x = set()
    moved_y = set()
    for point in points:
        if point.var_x.cell_key not in moved_x:
            point.x += dx
            moved_x.add(point.var_x.cell_key)
        if point.var_y.cell_key not in moved_y:
            point.y += dy
            moved_y.add(point.var_y.cell_key)


class Figure(ABC):
    """
    Basis-Klasse für alle Figuren.

    Jede Figur besteht aus Variablen (direkt oder über Kind-Figuren) und
    unterstützt Nächster-Punkt-Abfrage, Verschieben, Vergleich und Kopie.
    """

    geometry_type: GeometryType

    @abstractmethod
    def child_figures(self) -> List['Figure']:
        ...

    @abstractmethod
    def variables(self) -> List[Variable]:
        """Alle Variablen der Figur (rekursiv über Kind-Figuren)."""
        ...

    @abstractmethod
    def closest_point(self, point: 'Point') -> 'Point':
        ...

    @abstractmethod
    def translate(self, from_ref: 'Point', to_ref: 'Point') -> None:
        """Verschiebt die Figur um (to_ref - from_ref)."""
        ...

    @abstractmethod
    def equals(self, other: 'Figure') -> bool:
        ...

    @abstractmethod
    def _copy(self, memo: Dict[int, Variable]) -> 'Figure':
        ...

    def copy(self) -> 'Figure':
        """
        Tiefe Kopie mit frischen Variablen.

        Links zu Variablen außerhalb der Figur gehen verloren, Links innerhalb
        der Figur (z.B. horizontale Linie) bleiben in der Kopie erhalten.
        """
        return self._copy({})

    @property
    def constant(self) -> bool:
        return all(v.constant for v in self.variables())

    @constant.setter
    def constant(self, value: bool):
        for v in self.variables():
            v.constant = value


class Point(Figure):
    """2D-Punkt - Grundbaustein aller Geometrie"""

    geometry_type = GeometryType.POINT

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.var_x = Variable(x)
        self.var_y = Variable(y)

    @classmethod
    def from_variables(cls, var_x: Variable, var_y: Variable) -> 'Point':
        """Punkt, der direkt auf bestehende Variablen schreibt (kein Kopieren)."""
        point = cls.__new__(cls)
        point.var_x = var_x
        point.var_y = var_y
        return point

    @property
    def x(self) -> float:
        return self.var_x.value

    @x.setter
    def x(self, value: float):
        self.var_x.value = value

    @property
    def y(self) -> float:
        return self.var_y.value

    @y.setter
    def y(self, value: float):
        self.var_y.value = value

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def child_figures(self) -> List[Figure]:
        return []

    def variables(self) -> List[Variable]:
        return [self.var_x, self.var_y]

    def closest_point(self, point: 'Point') -> 'Point':
        return Point(self.x, self.y)

    def translate(self, from_ref: 'Point', to_ref: 'Point') -> None:
        self.x += to_ref.x - from_ref.x
        self.y += to_ref.y - from_ref.y

    def equals(self, other: Figure) -> bool:
        if not isinstance(other, Point):
            return False
        return self.x == other.x and self.y == other.y

    def _copy(self, memo: Dict[int, Variable]) -> 'Point':
        return Point.from_variables(_copy_variable(self.var_x, memo), _copy_variable(self.var_y, memo))

    def __repr__(self):
        return f"P({self.x:.2f}, {self.y:.2f})"


class Line(Figure):
    """
    2D-Linie zwischen zwei Punkten.

    Die Linie besitzt Kopien der übergebenen Punkte, sie aliast niemals die
    Geometrie des Aufrufers.
    """

    geometry_type = GeometryType.LINE

    def __init__(self, p0: Point, p1: Point):
        # Gemeinsames Memo: ein Link zwischen p0 und p1 überlebt die Kopie
        memo: Dict[int, Variable] = {}
        self.p0 = p0._copy(memo)
        self.p1 = p1._copy(memo)

    def set_constant(self, constant: bool) -> None:
        self.p0.constant = constant
        self.p1.constant = constant

    @property
    def length(self) -> float:
        return math.hypot(self.p1.x - self.p0.x, self.p1.y - self.p0.y)

    @property
    def midpoint(self) -> Point:
        return Point((self.p0.x + self.p1.x) / 2, (self.p0.y + self.p1.y) / 2)

    def child_figures(self) -> List[Figure]:
        return [self.p0, self.p1]

    def variables(self) -> List[Variable]:
        return self.p0.variables() + self.p1.variables()

    def closest_point(self, point: Point) -> Point:
        from .util import project_onto_segment
        return project_onto_segment(self, point)

    def translate(self, from_ref: Point, to_ref: Point) -> None:
        _translate_points([self.p0, self.p1], to_ref.x - from_ref.x, to_ref.y - from_ref.y)

    def equals(self, other: Figure) -> bool:
        if not isinstance(other, Line):
            return False
        return other.p0.equals(self.p0) and other.p1.equals(self.p1)

    def _copy(self, memo: Dict[int, Variable]) -> 'Line':
        line = Line.__new__(Line)
        line.p0 = self.p0._copy(memo)
        line.p1 = self.p1._copy(memo)
        return line

    def __repr__(self):
        return f"Line({self.p0} -> {self.p1})"


class Circle(Figure):
    """2D-Kreis: Mittelpunkt + Radius-Variable"""

    geometry_type = GeometryType.CIRCLE

    def __init__(self, center: Point, radius: float = 10.0):
        self.c = center._copy({})
        self.var_r = Variable(radius)

    @property
    def radius(self) -> float:
        return self.var_r.value

    @radius.setter
    def radius(self, value: float):
        self.var_r.value = value

    def child_figures(self) -> List[Figure]:
        return [self.c]

    def variables(self) -> List[Variable]:
        return self.c.variables() + [self.var_r]

    def closest_point(self, point: Point) -> Point:
        from .util import project_onto_circle
        return project_onto_circle(self, point)

    def translate(self, from_ref: Point, to_ref: Point) -> None:
        self.c.translate(from_ref, to_ref)

    def equals(self, other: Figure) -> bool:
        if not isinstance(other, Circle) or isinstance(other, Arc):
            return False
        return other.c.equals(self.c) and other.radius == self.radius

    def _copy(self, memo: Dict[int, Variable]) -> 'Circle':
        circle = Circle.__new__(Circle)
        circle.c = self.c._copy(memo)
        circle.var_r = _copy_variable(self.var_r, memo)
        return circle

    def __repr__(self):
        return f"Circle(center={self.c}, r={self.radius:.2f})"


class Arc(Circle):
    """
    2D-Kreisbogen: Kreis + zwei Randpunkte.

    Die Winkelgrenzen (Radians) ergeben sich aus den Randpunkten relativ zum
    Mittelpunkt. Der Bogen läuft gegen den Uhrzeigersinn von angle0 nach angle1.
    """

    geometry_type = GeometryType.ARC

    def __init__(self, center: Point, radius: float, p0: Point, p1: Point):
        memo: Dict[int, Variable] = {}
        self.c = center._copy(memo)
        self.var_r = Variable(radius)
        self.p0 = p0._copy(memo)
        self.p1 = p1._copy(memo)

    @property
    def angle0(self) -> float:
        return math.atan2(self.p0.y - self.c.y, self.p0.x - self.c.x)

    @property
    def angle1(self) -> float:
        return math.atan2(self.p1.y - self.c.y, self.p1.x - self.c.x)

    def child_figures(self) -> List[Figure]:
        return [self.c, self.p0, self.p1]

    def variables(self) -> List[Variable]:
        return super().variables() + self.p0.variables() + self.p1.variables()

    def closest_point(self, point: Point) -> Point:
        from .util import project_onto_arc
        return project_onto_arc(self, point)

    def translate(self, from_ref: Point, to_ref: Point) -> None:
        _translate_points([self.c, self.p0, self.p1], to_ref.x - from_ref.x, to_ref.y - from_ref.y)

    def equals(self, other: Figure) -> bool:
        if not isinstance(other, Arc):
            return False
        return (other.c.equals(self.c) and other.radius == self.radius
                and other.p0.equals(self.p0) and other.p1.equals(self.p1))

    def _copy(self, memo: Dict[int, Variable]) -> 'Arc':
        arc = Arc.__new__(Arc)
        arc.c = self.c._copy(memo)
        arc.var_r = _copy_variable(self.var_r, memo)
        arc.p0 = self.p0._copy(memo)
        arc.p1 = self.p1._copy(memo)
        return arc

    def __repr__(self):
        return (f"Arc(center={self.c}, r={self.radius:.2f}, "
                f"{math.degrees(self.angle0):.1f}°-{math.degrees(self.angle1):.1f}°)")


def figure_variables(figure: Figure) -> List[Tuple[str, Variable]]:
    """
    Beschriftete, editierbare Variablen einer Figur (für Eingabefelder).

    Point: x, y | Line: x1, y1, x2, y2 | Circle: center x, center y, radius
    Arc: wie Circle plus x1, y1, x2, y2 der Randpunkte
    """
    if isinstance(figure, Point):
        return [("x", figure.var_x), ("y", figure.var_y)]
    if isinstance(figure, Line):
        return [
            ("x1", figure.p0.var_x), ("y1", figure.p0.var_y),
            ("x2", figure.p1.var_x), ("y2", figure.p1.var_y),
        ]
    if isinstance(figure, Circle):
        labelled = [
            ("center x", figure.c.var_x), ("center y", figure.c.var_y),
            ("radius", figure.var_r),
        ]
        if isinstance(figure, Arc):
            labelled += [
                ("x1", figure.p0.var_x), ("y1", figure.p0.var_y),
                ("x2", figure.p1.var_x), ("y2", figure.p1.var_y),
            ]
        return labelled
    raise TypeError(f"Unbekannter Figur-Typ: {type(figure).__name__}")
