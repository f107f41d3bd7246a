"""
LiteCAD Sketcher - Geometrie-Utilities
Projektionen, Abstände, Schnitte, Winkel und Regression

Alle Funktionen sind zustandslos und für jede Eingabe definiert. Entartete
Geometrie (Linie der Länge 0, Punkt im Kreismittelpunkt, senkrechte
Regression) wird über feste Regeln aufgelöst, nicht über Exceptions.
"""

from typing import List, Optional, Tuple
import math

import numpy as np

from config.tolerances import Tolerances

from .geometry import Point, Line, Circle, Arc
from .variable import Variable


# === Punkte & Abstände ===

def average_of_points(*points: Point) -> Point:
    """Mittelwert der Punkte als neuer Punkt"""
    x = sum(p.x for p in points)
    y = sum(p.y for p in points)
    return Point(x / len(points), y / len(points))


def distance(p0: Point, p1: Point) -> float:
    """Euklidischer Abstand"""
    return math.hypot(p0.x - p1.x, p0.y - p1.y)


def length_of_line(line: Line) -> float:
    return distance(line.p0, line.p1)


def distance_to_line(line: Line, point: Point) -> float:
    """Abstand zur Projektion auf die unendliche Gerade"""
    return distance(point, project_onto_line(line, point))


def distance_to_segment(segment: Line, point: Point) -> float:
    """Abstand zum nächsten Punkt auf dem Segment"""
    return distance(point, project_onto_segment(segment, point))


def distance_to_circle(circle: Circle, point: Point) -> float:
    return abs(distance(circle.c, point) - circle.radius)


def magnitude(point: Point) -> float:
    return math.hypot(point.x, point.y)


def normalize(point: Point) -> Point:
    """
    Einheitsvektor in Richtung point.
    Ohne Länge zeigt das Ergebnis nach oben: Point(0, 1)
    """
    mag = magnitude(point)
    if mag == 0:
        return Point(0, 1)
    return Point(point.x / mag, point.y / mag)


def point_in_direction(from_point: Point, to_point: Point, dist: float) -> Point:
    """Punkt im Abstand dist von from_point in Richtung to_point"""
    ray = normalize(Point(to_point.x - from_point.x, to_point.y - from_point.y))
    return Point(from_point.x + ray.x * dist, from_point.y + ray.y * dist)


def reflect_over(point: Point, pivot: Point) -> Point:
    """Punkt an pivot gespiegelt (2 * pivot - point)"""
    dx = point.x - pivot.x
    dy = point.y - pivot.y
    return Point(point.x - dx * 2, point.y - dy * 2)


def point_deltas(point: Point, goal: Point) -> List[Tuple[Variable, float]]:
    """(Variable, Delta)-Paare, die point genau auf goal schieben"""
    return [
        (point.var_x, goal.x - point.x),
        (point.var_y, goal.y - point.y),
    ]


# === Winkel ===

def angle_between(pivot: Point, point: Point) -> float:
    """Winkel der Strecke pivot -> point in Radians"""
    return math.atan2(point.y - pivot.y, point.x - pivot.x)


def point_at_angle(pivot: Point, radius: float, angle: float) -> Point:
    return Point(pivot.x + math.cos(angle) * radius, pivot.y + math.sin(angle) * radius)


def is_angle_between(start_angle: float, end_angle: float, angle: float) -> bool:
    """
    Liegt angle gegen den Uhrzeigersinn zwischen start_angle und end_angle?
    end_angle und angle werden relativ zu start_angle nach [0, 2π) gebracht.
    """
    end_angle = end_angle - start_angle
    if end_angle < 0:
        end_angle += math.pi * 2
    angle = angle - start_angle
    if angle < 0:
        angle += math.pi * 2
    return angle < end_angle


# === Projektionen ===

def projection_factor(line: Line, point: Point) -> float:
    """
    Anteil der Projektion entlang der Linie: 0 = line.p0, 1 = line.p1.
    Für eine Linie ohne Länge (und point auf keinem Endpunkt) NaN.
    """
    if line.p0.equals(point):
        return 0.0
    if line.p1.equals(point):
        return 1.0
    dx = line.p0.x - line.p1.x
    dy = line.p0.y - line.p1.y
    len2 = dx * dx + dy * dy
    if len2 == 0:
        return math.nan
    return -((point.x - line.p0.x) * dx + (point.y - line.p0.y) * dy) / len2


def point_along_line(line: Line, r: float) -> Point:
    """Punkt kollinear zur Linie; r außerhalb [0, 1] ist erlaubt"""
    px = line.p0.x + r * (line.p1.x - line.p0.x)
    py = line.p0.y + r * (line.p1.y - line.p0.y)
    return Point(px, py)


def project_onto_line(line: Line, point: Point) -> Point:
    """Projektion auf die unendliche Gerade durch line.p0 und line.p1"""
    r = projection_factor(line, point)
    if math.isnan(r):
        r = 1.0  # p0 == p1, jeder Faktor landet auf demselben Punkt
    return point_along_line(line, r)


def project_onto_segment(line: Line, point: Point) -> Point:
    """Projektion auf das Segment, r wird auf [0, 1] begrenzt (NaN -> 1)"""
    r = projection_factor(line, point)
    if r < 0:
        r = 0.0
    elif r > 1 or math.isnan(r):
        r = 1.0
    return point_along_line(line, r)


def project_onto_circle(circle: Circle, point: Point) -> Point:
    """Projektion auf den Kreisrand; im Mittelpunkt: oberster Kreispunkt"""
    return point_in_direction(circle.c, point, circle.radius)


def project_onto_arc(arc: Arc, point: Point) -> Point:
    """
    Projektion auf den Bogen. Liegt die Richtung außerhalb des Bogens,
    wird der nähere Randpunkt zurückgegeben.
    """
    angle = angle_between(arc.c, point)
    if is_angle_between(arc.angle0, arc.angle1, angle):
        return project_onto_circle(arc, point)

    d0 = distance(point, arc.p0)
    d1 = distance(point, arc.p1)
    if d0 < d1:
        return arc.p0.copy()
    return arc.p1.copy()


# === Orientierung & Schnitte ===

def orientation(p0: Point, p1: Point, p2: Point) -> int:
    """
    Drehsinn des Tripels: 1 = im Uhrzeigersinn, -1 = gegen den Uhrzeigersinn,
    0 = kollinear (|Kreuzprodukt| < Tolerances.ORIENTATION_EPSILON).
    """
    val = (p1.y - p0.y) * (p2.x - p1.x) - (p1.x - p0.x) * (p2.y - p1.y)
    if abs(val) < Tolerances.ORIENTATION_EPSILON:
        return 0
    return 1 if val > 0 else -1


def on_segment(line: Line, point: Point) -> bool:
    """Für einen kollinearen Punkt: liegt er innerhalb der Bounding-Box?"""
    return (min(line.p0.x, line.p1.x) <= point.x <= max(line.p0.x, line.p1.x)
            and min(line.p0.y, line.p1.y) <= point.y <= max(line.p0.y, line.p1.y))


def segments_intersect(line0: Line, line1: Line) -> bool:
    """True wenn sich die beiden Segmente schneiden oder berühren"""
    if length_of_line(line0) == 0 or length_of_line(line1) == 0:
        return False

    o0 = orientation(line0.p0, line0.p1, line1.p0)
    o1 = orientation(line0.p0, line0.p1, line1.p1)
    o2 = orientation(line1.p0, line1.p1, line0.p0)
    o3 = orientation(line1.p0, line1.p1, line0.p1)

    # Allgemeiner Fall
    if o0 != o1 and o2 != o3:
        return True

    # Kollineare Sonderfälle
    if o0 == 0 and on_segment(line0, line1.p0):
        return True
    if o1 == 0 and on_segment(line0, line1.p1):
        return True
    if o2 == 0 and on_segment(line1, line0.p0):
        return True
    if o3 == 0 and on_segment(line1, line0.p1):
        return True

    return False


def point_within_rectangle(corner0: Point, corner1: Point, point: Point) -> bool:
    """Liegt point strikt innerhalb des Rechtecks aus corner0/corner1?"""
    inside_x = min(corner0.x, corner1.x) < point.x < max(corner0.x, corner1.x)
    inside_y = min(corner0.y, corner1.y) < point.y < max(corner0.y, corner1.y)
    return inside_x and inside_y


def point_within_circle(circle: Circle, point: Point) -> bool:
    return distance(circle.c, point) <= circle.radius


def line_intersects_circle(circle: Circle, line: Line) -> bool:
    """Segment schneidet den Kreis oder liegt in ihm"""
    return distance_to_segment(line, circle.c) <= circle.radius


# === Regression ===

def forced_regression_line(*points: Point) -> Optional[Line]:
    """
    Erzwungene Regressionsgerade durch konstante oder gelinkte Punkte.

    - Zwei Punkte mit konstantem x (bzw. y): Gerade durch genau diese Punkte,
      konstante Punkte sind feste Pins, keine Messwerte.
    - Zwei Punkte mit gelinktem x (vertikal) bzw. y (horizontal): Gerade
      durch den Mittelwert der geteilten Achse.

    Returns:
        Line oder None wenn keine Regel greift (dann statistische Regression)
    """
    constant_x: List[Point] = []
    constant_y: List[Point] = []

    for p in points:
        if p.var_x.constant:
            constant_x.append(p)
        if len(constant_x) >= 2:
            return Line(constant_x[0], constant_x[1])
        if p.var_y.constant:
            constant_y.append(p)
        if len(constant_y) >= 2:
            return Line(constant_y[0], constant_y[1])

    avg = average_of_points(*points)

    # Gelinkte Variablen decken bestehende Horizontal/Vertikal-Beziehungen ab
    for p0 in points:
        for p1 in points:
            if p0 is p1:
                continue
            if p0.var_x.is_linked(p1.var_x):
                return Line(Point(avg.x, p0.y), Point(avg.x, p1.y))
            if p0.var_y.is_linked(p1.var_y):
                return Line(Point(p0.x, avg.y), Point(p1.x, avg.y))
    return None


def least_squares_regression(*points: Point) -> Line:
    """
    Regressionsgerade (kleinste Quadrate).

    Zuerst y = f(x). Ist die x-Streuung 0 oder die Steigung betragsmäßig > 1
    (fast senkrecht), wird x = f(y) gefittet, damit die Lösung nahe der
    Senkrechten nicht explodiert.

    Die Summen sind um den Schwerpunkt zentriert. Eine Streuung unter
    EPSILON_MATH relativ zur Gesamtstreuung gilt als 0.
    """
    if len(points) < 2:
        raise ValueError(f"Regression benötigt mindestens 2 Punkte, hat {len(points)}")

    xs = np.array([p.x for p in points], dtype=np.float64)
    ys = np.array([p.y for p in points], dtype=np.float64)
    mx, my = float(xs.mean()), float(ys.mean())
    dx = xs - mx
    dy = ys - my

    sxx = float(dx @ dx)
    syy = float(dy @ dy)
    sxy = float(dx @ dy)

    spread = sxx + syy
    if spread == 0:
        # Alle Punkte identisch: horizontale Gerade durch den Mittelwert
        return Line(Point(mx, my), Point(mx + 1, my))

    eps = Tolerances.EPSILON_MATH * spread
    if sxx <= eps:
        sxx, sxy = 0.0, 0.0
    if syy <= eps:
        syy, sxy = 0.0, 0.0

    if sxx == 0 or abs(sxy / sxx) > 1:
        slope = sxy / syy
        x_intercept = mx - slope * my
        return Line(Point(x_intercept, 0), Point(x_intercept + slope, 1))

    slope = sxy / sxx
    y_intercept = my - slope * mx
    return Line(Point(0, y_intercept), Point(1, y_intercept + slope))
