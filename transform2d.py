"""
2D Affine Transformations

An affine transform is stored as six coefficients (a, b, c, d, e, f) acting
on column vectors:

    | x' |   | a  b  c | | x |
    | y' | = | d  e  f | | y |
    | 1  |   | 0  0  1 | | 1 |

so that (x, y) -> (a*x + b*y + c, d*x + e*y + f).

Composition follows matrix multiplication: compose(A, B) applies B first,
then A. Angles are in radians, counter-clockwise in a y-up frame.
"""

from dataclasses import dataclass
from typing import Iterable, Optional
import math

import numpy as np

try:
    from .geometry import Point2D, PointLike, as_point
    from .config import DEFAULT_CONFIG
except ImportError:
    from geometry import Point2D, PointLike, as_point
    from config import DEFAULT_CONFIG


class SingularTransform(ValueError):
    """Raised when inverting a transform whose determinant is (close to) zero."""

    def __init__(self, determinant: float):
        super().__init__(
            f"Transform is not invertible (determinant {determinant:.3e}); "
            "it is not an affine bijection"
        )
        self.determinant = determinant


@dataclass(frozen=True)
class AffineTransform:
    """Immutable 2D affine transform."""
    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 0.0
    e: float = 1.0
    f: float = 0.0

    # -------------------------------------------------------------------------
    # Basic constructors
    # -------------------------------------------------------------------------

    @classmethod
    def identity(cls) -> 'AffineTransform':
        return cls()

    @classmethod
    def translation(cls, dx: float, dy: float) -> 'AffineTransform':
        return cls(1.0, 0.0, dx, 0.0, 1.0, dy)

    @classmethod
    def rotation(cls, angle: float) -> 'AffineTransform':
        """Counter-clockwise rotation about the origin."""
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        return cls(cos_a, -sin_a, 0.0, sin_a, cos_a, 0.0)

    @classmethod
    def rotation_degrees(cls, angle: float) -> 'AffineTransform':
        return cls.rotation(math.radians(angle))

    @classmethod
    def scaling(cls, sx: float, sy: float) -> 'AffineTransform':
        return cls(sx, 0.0, 0.0, 0.0, sy, 0.0)

    @classmethod
    def uniform_scaling(cls, s: float) -> 'AffineTransform':
        return cls.scaling(s, s)

    @classmethod
    def shear(cls, shx: float, shy: float) -> 'AffineTransform':
        """Shear: x' = x + shx*y, y' = shy*x + y."""
        return cls(1.0, shx, 0.0, shy, 1.0, 0.0)

    @classmethod
    def reflection_x(cls) -> 'AffineTransform':
        """Mirror across the X axis."""
        return cls.scaling(1.0, -1.0)

    @classmethod
    def reflection_y(cls) -> 'AffineTransform':
        """Mirror across the Y axis."""
        return cls.scaling(-1.0, 1.0)

    # -------------------------------------------------------------------------
    # Compound constructors (built from the primitives only)
    # -------------------------------------------------------------------------

    @classmethod
    def rotation_around(cls, angle: float, center: PointLike) -> 'AffineTransform':
        """Counter-clockwise rotation about center."""
        cx, cy = as_point(center)
        return compose(
            cls.translation(cx, cy),
            compose(cls.rotation(angle), cls.translation(-cx, -cy))
        )

    @classmethod
    def rotation_degrees_around(cls, angle: float, center: PointLike) -> 'AffineTransform':
        return cls.rotation_around(math.radians(angle), center)

    @classmethod
    def scaling_around(cls, sx: float, sy: float, center: PointLike) -> 'AffineTransform':
        """Scaling with center as the fixed point."""
        cx, cy = as_point(center)
        return compose(
            cls.translation(cx, cy),
            compose(cls.scaling(sx, sy), cls.translation(-cx, -cy))
        )

    @classmethod
    def uniform_scaling_around(cls, s: float, center: PointLike) -> 'AffineTransform':
        return cls.scaling_around(s, s, center)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def apply(self, p: PointLike) -> Point2D:
        """Map a point through the transform."""
        x, y = as_point(p)
        return Point2D(
            self.a * x + self.b * y + self.c,
            self.d * x + self.e * y + self.f
        )

    def apply_many(self, points: Iterable[PointLike]) -> list[Point2D]:
        """Map a batch of points in one matrix product."""
        coords = np.array([as_point(p).to_tuple() for p in points], dtype=float)
        if coords.size == 0:
            return []
        linear = np.array([[self.a, self.b], [self.d, self.e]])
        mapped = coords @ linear.T + np.array([self.c, self.f])
        return [Point2D(float(x), float(y)) for x, y in mapped]

    def multiply(self, other: 'AffineTransform') -> 'AffineTransform':
        """Matrix product self * other (other applies first)."""
        return AffineTransform(
            a=self.a * other.a + self.b * other.d,
            b=self.a * other.b + self.b * other.e,
            c=self.a * other.c + self.b * other.f + self.c,
            d=self.d * other.a + self.e * other.d,
            e=self.d * other.b + self.e * other.e,
            f=self.d * other.c + self.e * other.f + self.f,
        )

    def __matmul__(self, other: 'AffineTransform') -> 'AffineTransform':
        if not isinstance(other, AffineTransform):
            return NotImplemented
        return self.multiply(other)

    def determinant(self) -> float:
        return self.a * self.e - self.b * self.d

    def inverse(self, eps: Optional[float] = None) -> 'AffineTransform':
        """
        Algebraic inverse of the transform.

        Args:
            eps: Determinant magnitude below which the matrix is singular
                (defaults to the configured singular tolerance).

        Raises:
            SingularTransform: If the transform cannot be inverted.
        """
        if eps is None:
            eps = DEFAULT_CONFIG.singular_tolerance

        det = self.determinant()
        if abs(det) < eps:
            raise SingularTransform(det)

        inv_det = 1.0 / det
        return AffineTransform(
            a=self.e * inv_det,
            b=-self.b * inv_det,
            c=(self.b * self.f - self.c * self.e) * inv_det,
            d=-self.d * inv_det,
            e=self.a * inv_det,
            f=(self.c * self.d - self.a * self.f) * inv_det,
        )

    def is_identity(self, tolerance: float = 1e-6) -> bool:
        return self.almost_equal(IDENTITY, tolerance)

    def almost_equal(self, other: 'AffineTransform', tolerance: float = 1e-6) -> bool:
        """Coefficient-wise comparison within tolerance."""
        return all(
            abs(mine - theirs) < tolerance
            for mine, theirs in zip(self.coefficients(), other.coefficients())
        )

    def coefficients(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.e, self.f)

    # -------------------------------------------------------------------------
    # Matrix interop
    # -------------------------------------------------------------------------

    def as_matrix(self) -> np.ndarray:
        """Homogeneous 3x3 matrix (column-vector convention)."""
        return np.array([
            [self.a, self.b, self.c],
            [self.d, self.e, self.f],
            [0.0, 0.0, 1.0],
        ])

    @classmethod
    def from_matrix(cls, matrix) -> 'AffineTransform':
        """
        Build a transform from a 3x3 homogeneous or 2x3 affine matrix.

        Raises:
            ValueError: If the matrix has another shape.
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape not in ((3, 3), (2, 3)):
            raise ValueError(f"Expected a 3x3 or 2x3 matrix, got shape {m.shape}")
        return cls(
            float(m[0, 0]), float(m[0, 1]), float(m[0, 2]),
            float(m[1, 0]), float(m[1, 1]), float(m[1, 2]),
        )


IDENTITY = AffineTransform()


def compose(first: AffineTransform, second: AffineTransform) -> AffineTransform:
    """
    Compose two transforms.

    compose(a, b).apply(p) == a.apply(b.apply(p)): the right operand is
    applied first. Associative, not commutative.
    """
    return first.multiply(second)
