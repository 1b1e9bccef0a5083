"""
Incremental Triangulation Module

Turns a point set into a triangle mesh by edge expansion (a gift-wrapping
construction of the Delaunay triangulation).

Algorithm:
1. Seed: take the leftmost point L and the point B with the smallest angle
   from L to the horizontal. L-B is a convex hull edge; every other point
   lies on one side of it.
2. Keep a worklist of "alive" edges, each directed so that the side still
   to be explored is on its right.
3. Step: pop an alive edge and look for its right conjugate point. Among
   the points strictly right of the edge, take the one whose circumcircle
   with the edge endpoints has its center furthest "back" along the
   right-pointing normal. That circle contains no other point on the right.
4. No conjugate point: the edge is a hull edge and becomes "dead".
   Otherwise emit the triangle. Each of the two new edges is alive when
   first seen and dead when seen from its second triangle. The popped edge
   becomes dead.
5. The triangulation is complete once no alive edge is left.

Each step scans all points, and the number of steps is linear in the
number of points, so a full run is O(n^2).

Edges are keyed by point index, never by coordinates. Coincident input
points are not merged; they can produce degenerate circumcircles, which are
skipped as candidates.
"""

from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Optional

try:
    from .geometry import (
        Point2D, PointLike, as_point, midpoint, is_point_right, points_equal,
        circumcenter, angle_with_horizontal,
    )
    from .region import PlanarRegion, Segment
    from .config import GeometryConfig, DEFAULT_CONFIG
except ImportError:
    from geometry import (
        Point2D, PointLike, as_point, midpoint, is_point_right, points_equal,
        circumcenter, angle_with_horizontal,
    )
    from region import PlanarRegion, Segment
    from config import GeometryConfig, DEFAULT_CONFIG


# Directed edge (start index, end index); the unexplored side is on its right
DirectedEdge = tuple[int, int]


class TriangulationError(RuntimeError):
    """Invalid use of a triangulator."""


class InsufficientPoints(TriangulationError, ValueError):
    """Raised when a triangulation is started with fewer than 3 points."""

    def __init__(self, count: int):
        super().__init__(f"Triangulation needs at least 3 points, got {count}")
        self.count = count


@dataclass(frozen=True, order=True)
class Edge:
    """Unordered pair of point indices, stored with the smaller index first."""
    a: int
    b: int

    def __post_init__(self):
        if self.a > self.b:
            first, second = self.b, self.a
            object.__setattr__(self, 'a', first)
            object.__setattr__(self, 'b', second)

    def __iter__(self):
        yield self.a
        yield self.b


@dataclass(frozen=True, order=True)
class Triangle:
    """Unordered triple of point indices, stored sorted."""
    a: int
    b: int
    c: int

    @classmethod
    def from_indices(cls, i: int, j: int, k: int) -> Triangle:
        a, b, c = sorted((i, j, k))
        return cls(a, b, c)

    def __iter__(self):
        yield self.a
        yield self.b
        yield self.c

    def edges(self) -> tuple[Edge, Edge, Edge]:
        return (Edge(self.a, self.b), Edge(self.b, self.c), Edge(self.a, self.c))


# =============================================================================
# Geometric subroutines
# =============================================================================

def find_initial_edge(points: list[Point2D], eps: float = 1e-6) -> DirectedEdge:
    """
    Find a convex hull edge to seed the triangulation.

    The first endpoint is the leftmost point (lowest x, then lowest y). The
    second is the point with the minimal angle to the horizontal as seen
    from it; equal angles prefer the closer point so no input point lies
    inside the seed edge. Copies of the leftmost point (within eps) are
    never chosen as the second endpoint.

    Returns:
        (start, end) directed so that all other points lie on its right.

    Raises:
        TriangulationError: If every point coincides with the leftmost one.
    """
    leftmost = 0
    for i in range(1, len(points)):
        p, best = points[i], points[leftmost]
        if p.x < best.x or (p.x == best.x and p.y < best.y):
            leftmost = i

    origin = points[leftmost]
    best_idx = None
    best_key = None
    for i, p in enumerate(points):
        if i == leftmost or points_equal(p, origin, eps):
            continue
        key = (angle_with_horizontal(origin, p), (p.x - origin.x) ** 2 + (p.y - origin.y) ** 2)
        if best_key is None or key < best_key:
            best_key = key
            best_idx = i

    if best_idx is None:
        raise TriangulationError("All input points coincide; no seed edge exists")

    # Every other point is counter-clockwise of leftmost->best, i.e. to the
    # right of the reversed edge
    return (best_idx, leftmost)


def find_right_conjugate_point(
    points: list[Point2D],
    start: int,
    end: int,
    config: GeometryConfig = DEFAULT_CONFIG
) -> Optional[int]:
    """
    Find the right conjugate point of the directed edge start->end.

    Candidates are points strictly right of the edge. Each is scored by the
    signed distance of its circumcenter (with the edge endpoints) from the
    edge midpoint, measured along the edge's right-pointing normal. The
    lowest score wins; collinear triples have no circumcenter and are
    skipped.

    Returns:
        Index of the conjugate point, or None if the edge has nothing on
        its right (a hull edge).
    """
    p1 = points[start]
    p2 = points[end]
    mid = midpoint(p1, p2)
    # Right-pointing normal of p1->p2
    normal_x = p2.y - p1.y
    normal_y = -(p2.x - p1.x)

    best_point = None
    best_score = float('inf')
    for i, p3 in enumerate(points):
        if i == start or i == end:
            continue
        if not is_point_right(p3, p1, p2):
            continue

        center = circumcenter(p1, p2, p3, config.collinear_tolerance)
        if center is None:
            continue

        score = (center.x - mid.x) * normal_x + (center.y - mid.y) * normal_y
        if score < best_score:
            best_score = score
            best_point = i

    return best_point


# =============================================================================
# Triangulation state
# =============================================================================

class Triangulator:
    """
    Step-wise triangulation of an editable point set.

    States: uninitialized -> initialized -> (stepping) -> completed.
    Points can be appended while uninitialized; they are frozen from
    initialize() until reset() or clear().

    Args:
        points: Initial input points.
        config: Tolerances for the geometric predicates.
    """

    def __init__(
        self,
        points: Optional[Iterable[PointLike]] = None,
        config: Optional[GeometryConfig] = None
    ):
        self.config = config or DEFAULT_CONFIG
        self._points: list[Point2D] = [as_point(p) for p in points] if points is not None else []
        self._triangles: list[Triangle] = []
        # Alive edges with their working direction, plus the pop order
        self._alive: dict[Edge, DirectedEdge] = {}
        self._pending: deque[DirectedEdge] = deque()
        self._dead: set[Edge] = set()

    # =========================================================================
    # Editing
    # =========================================================================

    def add_point(self, p: PointLike) -> int:
        """
        Append an input point.

        Returns:
            Index of the new point.

        Raises:
            TriangulationError: If a triangulation is in progress or done.
        """
        if self.is_initialized():
            raise TriangulationError(
                "Points are frozen during triangulation; call reset() first"
            )
        self._points.append(as_point(p))
        return len(self._points) - 1

    def add_points(self, points: Iterable[PointLike]) -> None:
        for p in points:
            self.add_point(p)

    def reset(self) -> None:
        """Drop triangles and edge state, keeping the points."""
        self._triangles = []
        self._alive = {}
        self._pending = deque()
        self._dead = set()

    def clear(self) -> None:
        """Drop everything, points included."""
        self._points = []
        self.reset()

    # =========================================================================
    # Algorithm
    # =========================================================================

    def initialize(self, points: Optional[Iterable[PointLike]] = None, debug: bool = False) -> None:
        """
        Start a triangulation by seeding one hull edge.

        Args:
            points: Replacement input set; the current points are used if None.
            debug: If True, print the chosen seed edge.

        Raises:
            InsufficientPoints: If fewer than 3 points are available. The
                state is left untouched.
            TriangulationError: If all points coincide. The state is left
                untouched.
        """
        new_points = [as_point(p) for p in points] if points is not None else self._points
        if len(new_points) < 3:
            raise InsufficientPoints(len(new_points))

        seed = find_initial_edge(new_points, self.config.point_tolerance)

        self._points = new_points
        self.reset()
        self._mark_alive(seed)

        if debug:
            start, end = seed
            print(f"  Points: {len(self._points)}")
            print(f"  Seed edge: {start} -> {end}")

    def step(self) -> bool:
        """
        Process one alive edge.

        Returns:
            True if an edge was resolved, False if nothing was left to do.
        """
        while self._pending:
            start, end = self._pending.popleft()
            edge = Edge(start, end)
            # Stale entry: the edge was closed from its other side
            if edge not in self._alive:
                continue

            best = find_right_conjugate_point(self._points, start, end, self.config)
            if best is not None:
                self._triangles.append(Triangle.from_indices(start, end, best))
                # The new triangle is start, end, best in clockwise order;
                # orient each new edge so the triangle is on its left
                for new_edge in ((start, best), (best, end)):
                    self._discover(new_edge)

            self._mark_dead(edge)
            return True

        return False

    def advance(self) -> bool:
        """
        Single-step driver: initialize on first use, then step.

        Returns:
            True if the state changed.
        """
        if self.is_completed():
            return False
        if not self.is_initialized():
            self.initialize()
            return True
        return self.step()

    def run_to_completion(self, debug: bool = False) -> list[Triangle]:
        """
        Initialize if needed and step until no alive edge is left.

        Args:
            debug: If True, print progress information.

        Returns:
            The triangle list.
        """
        if not self.is_initialized():
            self.initialize(debug=debug)

        steps = 0
        while self._alive:
            if not self.step():
                break
            steps += 1

        if debug:
            print(f"  Steps: {steps}")
            print(f"  Triangles: {len(self._triangles)}")
            print(f"  Dead edges: {len(self._dead)}")

        return self.triangles

    def _discover(self, directed: DirectedEdge) -> None:
        edge = Edge(*directed)
        if edge in self._dead:
            return
        if edge in self._alive:
            # Second adjacent triangle found: the edge is resolved
            self._mark_dead(edge)
        else:
            self._mark_alive(directed)

    def _mark_alive(self, directed: DirectedEdge) -> None:
        self._alive[Edge(*directed)] = directed
        self._pending.append(directed)

    def _mark_dead(self, edge: Edge) -> None:
        self._alive.pop(edge, None)
        self._dead.add(edge)

    # =========================================================================
    # State queries
    # =========================================================================

    def is_initialized(self) -> bool:
        return bool(self._alive) or bool(self._dead)

    def is_completed(self) -> bool:
        return not self._alive and bool(self._dead)

    # =========================================================================
    # Read-only data for renderers
    # =========================================================================

    @property
    def points(self) -> list[Point2D]:
        return list(self._points)

    @property
    def triangles(self) -> list[Triangle]:
        return list(self._triangles)

    def triangle_regions(self) -> list[PlanarRegion]:
        """Each triangle as a 3-vertex region."""
        return [
            PlanarRegion.from_points((self._points[i] for i in tri), self.config)
            for tri in self._triangles
        ]

    def alive_edges(self) -> list[Edge]:
        return sorted(self._alive)

    def dead_edges(self) -> list[Edge]:
        return sorted(self._dead)

    def alive_segments(self) -> list[Segment]:
        return [self._segment(e) for e in self.alive_edges()]

    def dead_segments(self) -> list[Segment]:
        return [self._segment(e) for e in self.dead_edges()]

    def _segment(self, edge: Edge) -> Segment:
        return (self._points[edge.a], self._points[edge.b])

    def edge_triangle_counts(self) -> dict[Edge, int]:
        """Number of emitted triangles bordering each edge."""
        counts: dict[Edge, int] = {}
        for tri in self._triangles:
            for edge in tri.edges():
                counts[edge] = counts.get(edge, 0) + 1
        return counts
