"""Unit tests for transform2d module."""

import pytest
import math

import numpy as np

from geometry import Point2D
from transform2d import AffineTransform, SingularTransform, compose, IDENTITY


def assert_point_close(p, expected, tol=1e-4):
    ex, ey = expected
    assert p.x == pytest.approx(ex, abs=tol)
    assert p.y == pytest.approx(ey, abs=tol)


SAMPLE_TRANSFORMS = [
    AffineTransform.translation(3.0, -2.0),
    AffineTransform.rotation(0.7),
    AffineTransform.scaling(2.0, 0.5),
    AffineTransform.shear(0.3, -0.2),
    AffineTransform(1.5, -0.4, 2.0, 0.9, 0.8, -1.0),
]


class TestConstructors:
    """Tests for the basic transform constructors."""

    def test_identity(self):
        """Identity leaves points unchanged."""
        t = AffineTransform.identity()
        assert t.apply((3.0, 4.0)) == Point2D(3.0, 4.0)
        assert t.is_identity()

    def test_translation(self):
        """Test translation."""
        t = AffineTransform.translation(5.0, -1.0)
        assert_point_close(t.apply((1.0, 1.0)), (6.0, 0.0))

    def test_rotation_is_counter_clockwise(self):
        """Quarter turn maps +x onto +y."""
        t = AffineTransform.rotation(math.pi / 2)
        assert_point_close(t.apply((1.0, 0.0)), (0.0, 1.0))
        assert_point_close(t.apply((0.0, 1.0)), (-1.0, 0.0))

    def test_rotation_degrees(self):
        """Degrees and radians agree."""
        t = AffineTransform.rotation_degrees(90)
        assert t.almost_equal(AffineTransform.rotation(math.pi / 2))

    def test_scaling(self):
        """Test non-uniform scaling."""
        t = AffineTransform.scaling(2.0, 3.0)
        assert_point_close(t.apply((1.0, 1.0)), (2.0, 3.0))

    def test_uniform_scaling(self):
        """Test uniform scaling."""
        t = AffineTransform.uniform_scaling(4.0)
        assert_point_close(t.apply((1.0, -2.0)), (4.0, -8.0))

    def test_shear(self):
        """Shear adds shx*y to x and shy*x to y."""
        t = AffineTransform.shear(2.0, 0.5)
        assert_point_close(t.apply((1.0, 1.0)), (3.0, 1.5))

    def test_reflections(self):
        """reflection_x flips y, reflection_y flips x."""
        assert_point_close(AffineTransform.reflection_x().apply((2.0, 3.0)), (2.0, -3.0))
        assert_point_close(AffineTransform.reflection_y().apply((2.0, 3.0)), (-2.0, 3.0))

    def test_transform_is_immutable(self):
        """Coefficients cannot be reassigned."""
        t = AffineTransform.translation(1.0, 1.0)
        with pytest.raises(AttributeError):
            t.c = 5.0


class TestComposition:
    """Tests for composing transforms."""

    def test_right_operand_applies_first(self):
        """compose(a, b) applies b then a."""
        a = AffineTransform.translation(10.0, 0.0)
        b = AffineTransform.scaling(2.0, 2.0)
        p = Point2D(1.0, 1.0)
        assert_point_close(compose(a, b).apply(p), a.apply(b.apply(p)))
        assert_point_close(compose(a, b).apply(p), (12.0, 2.0))

    def test_not_commutative(self):
        """Order of composition matters."""
        a = AffineTransform.translation(10.0, 0.0)
        b = AffineTransform.scaling(2.0, 2.0)
        assert not compose(a, b).almost_equal(compose(b, a))

    @pytest.mark.parametrize("t", SAMPLE_TRANSFORMS)
    def test_identity_is_neutral(self, t):
        """Composing with identity on either side returns the same transform."""
        assert compose(t, IDENTITY).almost_equal(t)
        assert compose(IDENTITY, t).almost_equal(t)

    def test_associative(self):
        """(A B) C == A (B C) for random transforms."""
        rng = np.random.default_rng(5)
        for _ in range(20):
            a, b, c = (AffineTransform(*rng.uniform(-2, 2, size=6)) for _ in range(3))
            left = compose(compose(a, b), c)
            right = compose(a, compose(b, c))
            assert left.almost_equal(right, 1e-9)

    def test_matmul_operator(self):
        """The @ operator is composition."""
        a = AffineTransform.rotation(0.3)
        b = AffineTransform.translation(1.0, 2.0)
        assert (a @ b).almost_equal(a.multiply(b))

    def test_matches_numpy_product(self):
        """Composition agrees with the homogeneous matrix product."""
        a = SAMPLE_TRANSFORMS[4]
        b = SAMPLE_TRANSFORMS[3]
        expected = a.as_matrix() @ b.as_matrix()
        np.testing.assert_allclose(compose(a, b).as_matrix(), expected)


class TestInverse:
    """Tests for inverse transforms."""

    @pytest.mark.parametrize("t", SAMPLE_TRANSFORMS)
    def test_round_trip(self, t):
        """T^-1(T(p)) returns p."""
        for p in [(0.0, 0.0), (1.0, 2.0), (-7.5, 3.25), (100.0, -40.0)]:
            assert_point_close(t.inverse().apply(t.apply(p)), p)

    @pytest.mark.parametrize("t", SAMPLE_TRANSFORMS)
    def test_inverse_composes_to_identity(self, t):
        """T T^-1 is the identity."""
        assert compose(t, t.inverse()).is_identity(1e-9)

    def test_singular_raises(self):
        """Zero scale cannot be inverted."""
        with pytest.raises(SingularTransform):
            AffineTransform.scaling(0.0, 1.0).inverse()

    def test_singular_is_value_error(self):
        """SingularTransform is a ValueError and reports the determinant."""
        t = AffineTransform(1.0, 2.0, 0.0, 2.0, 4.0, 0.0)
        with pytest.raises(ValueError) as exc_info:
            t.inverse()
        assert exc_info.value.determinant == pytest.approx(0.0)

    def test_failed_inverse_leaves_transform_unchanged(self):
        """A failed inverse does not modify the original."""
        t = AffineTransform(1.0, 2.0, 3.0, 2.0, 4.0, 5.0)
        with pytest.raises(SingularTransform):
            t.inverse()
        assert t.coefficients() == (1.0, 2.0, 3.0, 2.0, 4.0, 5.0)

    def test_custom_tolerance(self):
        """Small determinants are accepted or rejected depending on eps."""
        t = AffineTransform.uniform_scaling(1e-4)
        assert t.inverse().apply((1e-4, 0.0)).x == pytest.approx(1.0)
        with pytest.raises(SingularTransform):
            t.inverse(eps=1e-6)


class TestAroundPoint:
    """Tests for rotation and scaling about a center."""

    @pytest.mark.parametrize("angle", [0.0, math.pi / 4, math.pi / 2, math.pi, 3 * math.pi / 2])
    def test_rotation_round_trip(self, angle):
        """Rotating by theta then -theta about c returns the point."""
        center = (3.0, -2.0)
        p = Point2D(7.0, 5.0)
        forward = AffineTransform.rotation_around(angle, center)
        back = AffineTransform.rotation_around(-angle, center)
        assert_point_close(back.apply(forward.apply(p)), (7.0, 5.0))

    def test_rotation_fixes_center(self):
        """The center of rotation does not move."""
        t = AffineTransform.rotation_around(1.1, (4.0, 4.0))
        assert_point_close(t.apply((4.0, 4.0)), (4.0, 4.0))

    def test_rotation_around_point(self):
        """Half turn about (1, 1) maps (2, 1) to (0, 1)."""
        t = AffineTransform.rotation_degrees_around(180, Point2D(1.0, 1.0))
        assert_point_close(t.apply((2.0, 1.0)), (0.0, 1.0))

    def test_scaling_around(self):
        """Scaling about a center keeps the center fixed."""
        t = AffineTransform.scaling_around(2.0, 3.0, (1.0, 1.0))
        assert_point_close(t.apply((1.0, 1.0)), (1.0, 1.0))
        assert_point_close(t.apply((2.0, 2.0)), (3.0, 4.0))

    def test_uniform_scaling_around(self):
        """Uniform scaling about a center."""
        t = AffineTransform.uniform_scaling_around(0.5, (10.0, 10.0))
        assert_point_close(t.apply((0.0, 0.0)), (5.0, 5.0))


class TestMatrixInterop:
    """Tests for numpy matrix conversion."""

    def test_as_matrix(self):
        """Homogeneous matrix layout."""
        t = AffineTransform(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        np.testing.assert_array_equal(
            t.as_matrix(),
            np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0], [0.0, 0.0, 1.0]])
        )

    def test_from_matrix(self):
        """3x3 and 2x3 matrices are accepted."""
        t = AffineTransform(1.0, 2.0, 3.0, 4.0, 5.0, 6.0)
        assert AffineTransform.from_matrix(t.as_matrix()) == t
        assert AffineTransform.from_matrix(t.as_matrix()[:2]) == t

    def test_from_matrix_bad_shape(self):
        """Other shapes are rejected."""
        with pytest.raises(ValueError):
            AffineTransform.from_matrix(np.eye(2))

    def test_apply_many_matches_apply(self):
        """Batch application agrees with point-wise application."""
        t = SAMPLE_TRANSFORMS[4]
        points = [(0.0, 0.0), (1.0, 2.0), (-3.0, 0.5)]
        for got, p in zip(t.apply_many(points), points):
            assert_point_close(got, t.apply(p).to_tuple(), 1e-12)

    def test_apply_many_empty(self):
        """Empty input gives empty output."""
        assert AffineTransform.identity().apply_many([]) == []
