"""
Planar Region Module

A planar region is an ordered list of vertices; insertion order is the
boundary traversal order. Depending on the vertex count it is a point
(n=1), a segment (n=2) or a closed polygon (n>=3) whose edges run
v[i] -> v[(i+1) % n].

The region keeps a cache of its self-intersection points (crossings of
non-adjacent edges). The cache is rebuilt on every add_vertex() and mapped
together with the vertices in apply_transform(); those are the only two
mutation paths, so the cache always matches the vertex list.

Point containment uses the even-odd ray casting rule. Points exactly on
the boundary get whatever classification the rule produces (on the
square (0,0),(10,0),(10,10),(0,10) the corner (0,0) is inside and the
corner (10,10) is outside).
"""

from __future__ import annotations
from typing import Iterable, Optional
import math

try:
    from .geometry import (
        Point2D, PointLike, as_point, midpoint, is_point_left,
        points_equal, segments_intersection,
    )
    from .transform2d import AffineTransform
    from .config import GeometryConfig, DEFAULT_CONFIG
except ImportError:
    from geometry import (
        Point2D, PointLike, as_point, midpoint, is_point_left,
        points_equal, segments_intersection,
    )
    from transform2d import AffineTransform
    from config import GeometryConfig, DEFAULT_CONFIG


# (start, end) pair of a boundary edge
Segment = tuple[Point2D, Point2D]
# (anchor, unit direction) pair for an edge arrow
Arrow = tuple[Point2D, tuple[float, float]]

CONVEX_LABEL = "convex"
NON_CONVEX_LABEL = "non-convex"


class PlanarRegion:
    """
    Polygon built incrementally from vertices.

    Args:
        point: First vertex of the region.
        config: Tolerances for the predicates (defaults to DEFAULT_CONFIG).
    """

    def __init__(self, point: PointLike, config: Optional[GeometryConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self._vertices: list[Point2D] = [as_point(point)]
        self._intersections: list[Point2D] = []

    @classmethod
    def from_points(
        cls,
        points: Iterable[PointLike],
        config: Optional[GeometryConfig] = None
    ) -> PlanarRegion:
        """
        Build a region by appending points in order.

        Raises:
            ValueError: If points is empty.
        """
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            raise ValueError("A region needs at least one vertex") from None

        region = cls(first, config)
        for p in it:
            region.add_vertex(p)
        return region

    def __len__(self):
        return len(self._vertices)

    def __iter__(self):
        return iter(self._vertices)

    def __repr__(self):
        coords = ", ".join(f"({v.x:g}, {v.y:g})" for v in self._vertices)
        return f"PlanarRegion([{coords}])"

    # =========================================================================
    # Mutation
    # =========================================================================

    def add_vertex(self, p: PointLike) -> None:
        """Append a vertex and rebuild the self-intersection cache."""
        self._vertices.append(as_point(p))
        self._update_intersections()

    def apply_transform(self, transform: AffineTransform) -> None:
        """Map every vertex and cached intersection through transform."""
        self._vertices = transform.apply_many(self._vertices)
        self._intersections = transform.apply_many(self._intersections)

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_point(self) -> bool:
        return len(self._vertices) == 1

    def is_segment(self) -> bool:
        return len(self._vertices) == 2

    def is_convex(self) -> bool:
        """
        Check convexity by the sign of consecutive edge turns.

        Turns whose cross product magnitude is within convexity_tolerance
        count as collinear and do not affect the result. Regions with fewer
        than 3 vertices are never convex. Only turn signs are checked, so a
        star polygon such as a pentagram passes.
        """
        n = len(self._vertices)
        if n < 3:
            return False

        eps = self.config.convexity_tolerance
        sign = 0
        for i in range(n):
            p1 = self._vertices[i]
            p2 = self._vertices[(i + 1) % n]
            p3 = self._vertices[(i + 2) % n]

            cross = (p2.x - p1.x) * (p3.y - p2.y) - (p2.y - p1.y) * (p3.x - p2.x)
            if abs(cross) <= eps:
                continue

            current = 1 if cross > 0 else -1
            if sign == 0:
                sign = current
            elif sign != current:
                return False

        return True

    def contains(self, p: PointLike) -> bool:
        """
        Check if the region contains a point.

        - point region: coordinates match within point_tolerance
        - segment region: point lies on the segment (collinear within
          point_tolerance, projection between the endpoints)
        - polygon: even-odd ray casting toward +x
        """
        x, y = as_point(p)
        n = len(self._vertices)
        eps = self.config.point_tolerance

        if n == 0:
            return False

        if n == 1:
            v = self._vertices[0]
            return abs(v.x - x) < eps and abs(v.y - y) < eps

        if n == 2:
            p1, p2 = self._vertices
            cross = (p2.x - p1.x) * (y - p1.y) - (p2.y - p1.y) * (x - p1.x)
            if abs(cross) > eps:
                return False
            dot = (x - p1.x) * (p2.x - p1.x) + (y - p1.y) * (p2.y - p1.y)
            length_sq = (p2.x - p1.x) ** 2 + (p2.y - p1.y) ** 2
            return 0.0 <= dot <= length_sq

        inside = False
        for i in range(n):
            vi = self._vertices[i]
            vj = self._vertices[(i + 1) % n]
            if ((vi.y > y) != (vj.y > y)) and (x < (vj.x - vi.x) * (y - vi.y) / (vj.y - vi.y) + vi.x):
                inside = not inside
        return inside

    def get_center(self) -> Point2D:
        """Arithmetic mean of the vertices (not the area centroid)."""
        n = len(self._vertices)
        x = sum(v.x for v in self._vertices) / n
        y = sum(v.y for v in self._vertices) / n
        return Point2D(x, y)

    # =========================================================================
    # Self-intersections
    # =========================================================================

    def _update_intersections(self) -> None:
        """Rebuild the cache of crossings between non-adjacent edges."""
        self._intersections = []

        n = len(self._vertices)
        if n < 4:
            return

        eps = self.config.point_tolerance
        for i in range(n):
            a = self._vertices[i]
            b = self._vertices[(i + 1) % n]

            for j in range(i + 2, n):
                # Last edge wraps around to share vertex 0 with the first one
                if (j + 1) % n == i:
                    continue

                c = self._vertices[j]
                d = self._vertices[(j + 1) % n]

                hit = segments_intersection(a, b, c, d, self.config.parallel_tolerance)
                if hit is None:
                    continue
                if any(points_equal(q, hit, eps) for q in self._intersections):
                    continue
                self._intersections.append(hit)

    def is_self_intersecting(self) -> bool:
        return bool(self._intersections)

    # =========================================================================
    # Rendering contract (read only)
    # =========================================================================

    @property
    def vertices(self) -> list[Point2D]:
        return list(self._vertices)

    @property
    def intersections(self) -> list[Point2D]:
        return list(self._intersections)

    def edge_loop(self) -> list[Point2D]:
        """Polyline through the vertices, closed back to the first one when n >= 3."""
        points = list(self._vertices)
        if len(points) >= 3:
            points.append(points[0])
        return points

    def edges(self) -> list[Segment]:
        """Boundary edges as (start, end) pairs."""
        n = len(self._vertices)
        if n < 2:
            return []
        if n == 2:
            return [(self._vertices[0], self._vertices[1])]
        return [(self._vertices[i], self._vertices[(i + 1) % n]) for i in range(n)]

    def label(self) -> str:
        return CONVEX_LABEL if self.is_convex() else NON_CONVEX_LABEL

    def edge_arrows(self, reference: PointLike) -> list[Arrow]:
        """
        Per-edge normals pointing toward the side of reference.

        For each edge, returns its midpoint and the unit normal on the side
        where reference lies: the left normal if reference is strictly
        left of the directed edge, the right normal otherwise. Zero-length
        edges get a zero vector.
        """
        ref = as_point(reference)
        arrows = []
        for start, end in self.edges():
            dx = end.x - start.x
            dy = end.y - start.y
            length = math.hypot(dx, dy)
            if length < 1e-12:
                direction = (0.0, 0.0)
            elif is_point_left(ref, start, end):
                direction = (-dy / length, dx / length)
            else:
                direction = (dy / length, -dx / length)
            arrows.append((midpoint(start, end), direction))
        return arrows
