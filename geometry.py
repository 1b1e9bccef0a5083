"""
Basic 2D geometry primitives.

Point type and the orientation, intersection and circumcircle predicates
shared by regions and the triangulator. Coordinates follow the y-up
convention: a positive cross product means a counter-clockwise turn.
"""

from dataclasses import dataclass
from typing import Optional, Union
import math


@dataclass(frozen=True)
class Point2D:
    """A 2D point."""
    x: float
    y: float

    def __iter__(self):
        yield self.x
        yield self.y

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


PointLike = Union[Point2D, tuple[float, float]]


def as_point(p: PointLike) -> Point2D:
    """Coerce an (x, y) pair to a Point2D."""
    if isinstance(p, Point2D):
        return p
    x, y = p
    return Point2D(float(x), float(y))


def midpoint(a: Point2D, b: Point2D) -> Point2D:
    return Point2D((a.x + b.x) * 0.5, (a.y + b.y) * 0.5)


def cross_product(o: Point2D, a: Point2D, b: Point2D) -> float:
    """
    Cross product of vectors OA and OB.
    Positive = B is to the left of OA (CCW turn)
    Negative = B is to the right of OA (CW turn)
    """
    return (a.x - o.x) * (b.y - o.y) - (a.y - o.y) * (b.x - o.x)


def is_point_left(point: Point2D, start: Point2D, end: Point2D) -> bool:
    """Check if point lies strictly to the left of the directed line start->end."""
    return cross_product(start, end, point) > 0.0


def is_point_right(point: Point2D, start: Point2D, end: Point2D) -> bool:
    """Check if point lies strictly to the right of the directed line start->end."""
    return cross_product(start, end, point) < 0.0


def points_equal(p1: Point2D, p2: Point2D, eps: float = 1e-6) -> bool:
    """Check if two points are equal within epsilon tolerance on both axes."""
    return abs(p1.x - p2.x) < eps and abs(p1.y - p2.y) < eps


def segments_intersection(
    a: Point2D,
    b: Point2D,
    c: Point2D,
    d: Point2D,
    parallel_eps: float = 1e-12
) -> Optional[Point2D]:
    """
    Find the crossing point of segments AB and CD.

    AB is taken as origin + t * direction and intersected with the line
    through C perpendicular to n = perp(CD). The crossing is then projected
    onto CD to get its parameter s.

    Returns:
        The intersection point, or None if the segments are parallel or
        either parameter falls outside [0, 1].
    """
    ab_x, ab_y = b.x - a.x, b.y - a.y
    cd_x, cd_y = d.x - c.x, d.y - c.y

    n_x, n_y = -cd_y, cd_x
    denominator = n_x * ab_x + n_y * ab_y
    if abs(denominator) < parallel_eps:
        return None

    ac_x, ac_y = a.x - c.x, a.y - c.y
    t = -(n_x * ac_x + n_y * ac_y) / denominator
    if not 0.0 <= t <= 1.0:
        return None

    ix = a.x + t * ab_x
    iy = a.y + t * ab_y

    # Position along CD; denominator != 0 guarantees CD has non-zero length
    cd_length_sq = cd_x * cd_x + cd_y * cd_y
    s = (cd_x * (ix - c.x) + cd_y * (iy - c.y)) / cd_length_sq
    if not 0.0 <= s <= 1.0:
        return None

    return Point2D(ix, iy)


def circumcenter(a: Point2D, b: Point2D, c: Point2D, eps: float = 1e-10) -> Optional[Point2D]:
    """
    Center of the circle through a, b and c.

    Returns:
        The circumcenter, or None when the points are collinear.
    """
    d = 2.0 * (a.x * (b.y - c.y) + b.x * (c.y - a.y) + c.x * (a.y - b.y))
    if abs(d) < eps:
        return None

    a_sq = a.x * a.x + a.y * a.y
    b_sq = b.x * b.x + b.y * b.y
    c_sq = c.x * c.x + c.y * c.y

    x = (a_sq * (b.y - c.y) + b_sq * (c.y - a.y) + c_sq * (a.y - b.y)) / d
    y = (a_sq * (c.x - b.x) + b_sq * (a.x - c.x) + c_sq * (b.x - a.x)) / d
    return Point2D(x, y)


def angle_with_horizontal(p1: Point2D, p2: Point2D) -> float:
    """Angle of the vector p1->p2 against the +x axis, in radians."""
    return math.atan2(p2.y - p1.y, p2.x - p1.x)
