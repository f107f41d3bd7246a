"""
LiteCAD Sketcher Module
"""

from .variable import Variable

from .geometry import (
    Figure, Point, Line, Circle, Arc,
    GeometryType, figure_variables,
)

from .relations import (
    Relation, RelationContractError,
    MidpointRelation, EqualRelation, ColinearPointsRelation,
    EqualLengthRelation, PointsOnCircleRelation, TangentLineRelation,
    make_midpoint, make_equal, make_colinear, make_equal_length,
    make_points_on_circle, make_tangent, make_equal_radius,
    calculate_total_error,
)

from .solver import RelaxationSolver, SolverResult, SolverStatus, solve

from .sketch import Sketch
