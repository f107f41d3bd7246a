"""
Tests für sketcher/util.py - Projektionen, Schnitte, Regression
"""

import math

import pytest

from sketcher import util
from sketcher.geometry import Point, Line, Circle, Arc

pytestmark = [pytest.mark.solver, pytest.mark.fast]


def _dot(ax, ay, bx, by):
    return ax * bx + ay * by


class TestProjection:

    @pytest.mark.parametrize("px,py", [(3.0, 7.0), (-4.0, 2.0), (20.0, -1.0)])
    def test_projection_is_perpendicular(self, px, py):
        line = Line(Point(0.0, 0.0), Point(10.0, 5.0))
        point = Point(px, py)
        proj = util.project_onto_line(line, point)

        offset = _dot(point.x - proj.x, point.y - proj.y, line.p1.x - line.p0.x, line.p1.y - line.p0.y)
        assert offset == pytest.approx(0.0, abs=1e-9)

    def test_projection_factor_endpoints(self):
        line = Line(Point(0.0, 0.0), Point(10.0, 0.0))
        assert util.projection_factor(line, Point(0.0, 0.0)) == 0.0
        assert util.projection_factor(line, Point(10.0, 0.0)) == 1.0
        assert util.projection_factor(line, Point(2.5, 9.0)) == pytest.approx(0.25)

    def test_segment_projection_is_clamped(self):
        line = Line(Point(0.0, 0.0), Point(10.0, 0.0))
        assert util.project_onto_segment(line, Point(-5.0, 3.0)).as_tuple() == (0.0, 0.0)
        assert util.project_onto_segment(line, Point(15.0, 3.0)).as_tuple() == (10.0, 0.0)
        # Unendliche Gerade wird nicht begrenzt
        assert util.project_onto_line(line, Point(15.0, 3.0)).as_tuple() == pytest.approx((15.0, 0.0))

    def test_degenerate_line_does_not_raise(self):
        line = Line(Point(1.0, 1.0), Point(1.0, 1.0))
        assert math.isnan(util.projection_factor(line, Point(3.0, 3.0)))
        assert util.project_onto_line(line, Point(3.0, 3.0)).as_tuple() == (1.0, 1.0)
        assert util.project_onto_segment(line, Point(3.0, 3.0)).as_tuple() == (1.0, 1.0)

    def test_circle_projection(self):
        circle = Circle(Point(0.0, 0.0), 5.0)
        assert util.project_onto_circle(circle, Point(10.0, 0.0)).as_tuple() == pytest.approx((5.0, 0.0))

    def test_circle_center_projects_to_top(self):
        circle = Circle(Point(2.0, 3.0), 5.0)
        assert util.project_onto_circle(circle, Point(2.0, 3.0)).as_tuple() == pytest.approx((2.0, 8.0))

    def test_arc_projection_inside_range(self):
        arc = Arc(Point(0.0, 0.0), 1.0, Point(1.0, 0.0), Point(0.0, 1.0))
        proj = util.project_onto_arc(arc, Point(2.0, 2.0))
        half = math.sqrt(2) / 2
        assert proj.as_tuple() == pytest.approx((half, half))

    def test_arc_projection_outside_range_returns_nearer_endpoint(self):
        arc = Arc(Point(0.0, 0.0), 1.0, Point(1.0, 0.0), Point(0.0, 1.0))
        proj = util.project_onto_arc(arc, Point(1.0, -5.0))
        assert proj.equals(arc.p0)
        assert proj is not arc.p0

        proj = util.project_onto_arc(arc, Point(-5.0, 1.0))
        assert proj.equals(arc.p1)


class TestAnglesAndVectors:

    def test_is_angle_between(self):
        assert util.is_angle_between(0.0, math.pi / 2, math.pi / 4)
        assert not util.is_angle_between(0.0, math.pi / 2, math.pi)
        # Über die 0-Grenze hinweg
        assert util.is_angle_between(3 * math.pi / 2, math.pi / 2, 0.0)
        assert not util.is_angle_between(3 * math.pi / 2, math.pi / 2, math.pi)

    def test_normalize_zero_vector_points_up(self):
        assert util.normalize(Point(0.0, 0.0)).as_tuple() == (0.0, 1.0)
        assert util.normalize(Point(3.0, 4.0)).as_tuple() == pytest.approx((0.6, 0.8))

    def test_point_in_direction(self):
        p = util.point_in_direction(Point(1.0, 1.0), Point(1.0, 11.0), 4.0)
        assert p.as_tuple() == pytest.approx((1.0, 5.0))

    def test_point_at_angle(self):
        p = util.point_at_angle(Point(1.0, 1.0), 2.0, math.pi / 2)
        assert p.as_tuple() == pytest.approx((1.0, 3.0))
        assert util.angle_between(Point(1.0, 1.0), p) == pytest.approx(math.pi / 2)

    @pytest.mark.parametrize("point,pivot", [
        ((3.0, -2.0), (1.0, 4.0)),
        ((0.0, 0.0), (0.0, 0.0)),
        ((-7.5, 2.25), (10.0, -3.0)),
    ])
    def test_reflect_over_is_involution(self, point, pivot):
        p = Point(*point)
        q = Point(*pivot)
        twice = util.reflect_over(util.reflect_over(p, q), q)
        assert twice.as_tuple() == pytest.approx(p.as_tuple())

    def test_reflect_over_value(self):
        assert util.reflect_over(Point(3.0, -2.0), Point(1.0, 4.0)).as_tuple() == (-1.0, 10.0)

    def test_point_deltas(self):
        p = Point(1.0, 2.0)
        deltas = util.point_deltas(p, Point(4.0, 0.0))
        assert deltas == [(p.var_x, 3.0), (p.var_y, -2.0)]


class TestIntersection:

    def test_orientation(self):
        assert util.orientation(Point(0, 0), Point(10, 0), Point(5, 5)) == -1
        assert util.orientation(Point(0, 0), Point(10, 0), Point(5, -5)) == 1
        # Unter ORIENTATION_EPSILON gilt als kollinear
        assert util.orientation(Point(0, 0), Point(10, 0), Point(5, 0.005)) == 0

    @pytest.mark.parametrize("a,b,expected", [
        (((0, 0), (10, 10)), ((0, 10), (10, 0)), True),    # Kreuzung
        (((0, 0), (1, 0)), ((0, 5), (1, 5)), False),       # parallel
        (((0, 0), (10, 0)), ((5, 0), (5, 5)), True),       # T-Berührung
        (((0, 0), (4, 0)), ((6, 0), (9, 0)), False),       # kollinear, getrennt
        (((0, 0), (6, 0)), ((4, 0), (9, 0)), True),        # kollinear, überlappend
    ])
    def test_segments_intersect_is_symmetric(self, a, b, expected):
        line_a = Line(Point(*a[0]), Point(*a[1]))
        line_b = Line(Point(*b[0]), Point(*b[1]))
        assert util.segments_intersect(line_a, line_b) is expected
        assert util.segments_intersect(line_b, line_a) is expected

    def test_zero_length_segment_never_intersects(self):
        dot = Line(Point(5, 0), Point(5, 0))
        line = Line(Point(0, 0), Point(10, 0))
        assert not util.segments_intersect(dot, line)
        assert not util.segments_intersect(line, dot)

    def test_point_within_rectangle_is_strict(self):
        assert util.point_within_rectangle(Point(0, 0), Point(4, 4), Point(2, 2))
        assert util.point_within_rectangle(Point(4, 4), Point(0, 0), Point(2, 2))
        assert not util.point_within_rectangle(Point(0, 0), Point(4, 4), Point(0, 2))

    def test_circle_containment(self):
        circle = Circle(Point(0, 0), 2.0)
        assert util.point_within_circle(circle, Point(1, 1))
        assert not util.point_within_circle(circle, Point(2, 2))
        assert util.line_intersects_circle(circle, Line(Point(-5, 1), Point(5, 1)))
        assert not util.line_intersects_circle(circle, Line(Point(-5, 3), Point(5, 3)))

    def test_distances(self):
        line = Line(Point(0, 0), Point(10, 0))
        assert util.distance_to_line(line, Point(20, 3)) == pytest.approx(3.0)
        assert util.distance_to_segment(line, Point(13, 4)) == pytest.approx(5.0)
        assert util.distance_to_circle(Circle(Point(0, 0), 2.0), Point(5, 0)) == pytest.approx(3.0)


class TestRegression:

    def test_vertical_points(self):
        points = [Point(2.0, 0.0), Point(2.0, 5.0), Point(2.0, 9.0)]
        line = util.least_squares_regression(*points)
        for p in points:
            assert util.distance_to_line(line, p) == pytest.approx(0.0, abs=1e-9)

    def test_horizontal_points(self):
        points = [Point(0.0, 3.0), Point(4.0, 3.0), Point(9.0, 3.0)]
        line = util.least_squares_regression(*points)
        assert line.p0.y == pytest.approx(3.0)
        assert line.p1.y == pytest.approx(3.0)
        for p in points:
            assert util.distance_to_line(line, p) == pytest.approx(0.0, abs=1e-9)

    def test_steep_points_fit_against_y(self):
        points = [Point(0.0, 0.0), Point(1.0, 2.0), Point(2.0, 4.0)]
        line = util.least_squares_regression(*points)
        assert line.p0.y == 0.0 and line.p1.y == 1.0
        for p in points:
            assert util.distance_to_line(line, p) == pytest.approx(0.0, abs=1e-9)

    @pytest.mark.parametrize("x,count", [(0.7, 3), (3.3, 3), (0.101, 3), (1.1, 10)])
    def test_vertical_points_at_fractional_x(self, x, count):
        """Rundungsreste in der x-Streuung dürfen keine Waagerechte erzeugen."""
        points = [Point(x, float(i)) for i in range(count)]
        line = util.least_squares_regression(*points)
        for p in points:
            assert util.distance_to_line(line, p) == pytest.approx(0.0, abs=1e-9)

    def test_horizontal_points_at_fractional_y(self):
        points = [Point(float(i), 0.3) for i in range(5)]
        line = util.least_squares_regression(*points)
        for p in points:
            assert util.distance_to_line(line, p) == pytest.approx(0.0, abs=1e-9)

    def test_coincident_points_give_horizontal_line(self):
        line = util.least_squares_regression(Point(1.0, 1.0), Point(1.0, 1.0))
        assert line.p0.as_tuple() == (1.0, 1.0)
        assert line.p1.y == 1.0

    def test_too_few_points_raises(self):
        with pytest.raises(ValueError):
            util.least_squares_regression(Point(0.0, 0.0))

    def test_forced_line_through_constant_points(self):
        a = Point(0.0, 0.0)
        b = Point(3.0, 4.0)
        c = Point(10.0, -1.0)
        a.var_x.constant = True
        b.var_x.constant = True
        line = util.forced_regression_line(a, b, c)
        assert line.p0.equals(a) and line.p1.equals(b)

    def test_forced_line_for_linked_y(self):
        a = Point(0.0, 2.0)
        b = Point(6.0, 2.0)
        b.var_y.link(a.var_y)
        c = Point(3.0, 8.0)
        line = util.forced_regression_line(a, b, c)
        assert line.p0.y == pytest.approx(4.0)
        assert line.p1.y == pytest.approx(4.0)

    def test_no_forced_line_for_free_points(self):
        assert util.forced_regression_line(Point(0, 0), Point(1, 2), Point(3, 1)) is None
