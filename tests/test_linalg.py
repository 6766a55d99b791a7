"""Tests for the Vector3 / Matrix3 linear algebra layer."""

import unittest

import numpy as np
import pytest

from rover_sim.linalg import Matrix3, SingularMatrixError, Vector3


@pytest.fixture
def a():
    return Vector3(1.0, 2.0, 3.0)


@pytest.fixture
def b():
    return Vector3(-4.0, 0.5, 2.0)


@pytest.fixture
def m():
    # det = 9
    return Matrix3((4.0, 7.0, 2.0), (3.0, 6.0, 1.0), (2.0, 5.0, 3.0))


# =============================================================================
# Vector3
# =============================================================================

def test_default_vector_is_zero():
    v = Vector3()
    assert v == Vector3(0.0, 0.0, 0.0)
    assert v.norm() == 0.0


def test_cross_anticommutative(a, b):
    assert a.cross(b).isclose(-(b.cross(a)))


def test_cross_with_self_is_zero(a):
    assert a.cross(a) == Vector3.zeros()


def test_cross_parallel_is_zero(a):
    assert a.cross(a * 2.5).isclose(Vector3.zeros(), atol=1e-12)


def test_cross_right_hand_rule():
    x = Vector3(1.0, 0.0, 0.0)
    y = Vector3(0.0, 1.0, 0.0)
    assert x.cross(y) == Vector3(0.0, 0.0, 1.0)
    assert y.cross(x) == Vector3(0.0, 0.0, -1.0)


def test_dot_equals_norm_squared(a, b):
    assert a.dot(a) == pytest.approx(a.norm() ** 2)
    assert b.dot(b) == pytest.approx(b.norm() ** 2)


def test_dot_matches_numpy(a, b):
    assert a.dot(b) == pytest.approx(np.dot(a.to_array(), b.to_array()))


def test_norm_positive_for_nonzero(a):
    assert a.norm() == pytest.approx(np.sqrt(14.0))
    assert (-a).norm() == pytest.approx(a.norm())


def test_vector_space_laws(a, b):
    c = Vector3(0.3, -7.0, 1.5)
    assert (a + b).isclose(b + a)
    assert ((a + b) + c).isclose(a + (b + c))
    assert ((a + b) * 3.0).isclose(a * 3.0 + b * 3.0)
    assert (2.0 * a).isclose(a * 2.0)
    assert (a / 4.0).isclose(a * 0.25)
    assert (a - a) == Vector3.zeros()


def test_in_place_operators(a, b):
    c = a.copy()
    c += b
    assert c.isclose(a + b)
    c -= b
    assert c.isclose(a)


def test_clear(a):
    a.clear()
    assert a == Vector3.zeros()


def test_component_access(a):
    assert a(0) == 1.0
    assert a(1) == 2.0
    assert a(2) == 3.0
    assert a[2] == a.z
    a[1] = 9.0
    assert a.y == 9.0


@pytest.mark.parametrize("index", [-1, 3, 10, 1.0, "x", True])
def test_component_access_out_of_range(a, index):
    with pytest.raises(IndexError):
        a(index)
    with pytest.raises(IndexError):
        a[index]


def test_vector_times_matrix_undefined(a):
    with pytest.raises(TypeError):
        a * Matrix3.identity()


def test_integer_dtype_rejected():
    with pytest.raises(TypeError):
        Vector3(1, 2, 3, dtype=np.int64)


def test_from_array_wrong_shape():
    with pytest.raises(ValueError):
        Vector3.from_array([1.0, 2.0])


def test_numpy_scalar_on_left(a):
    result = np.float64(2.0) * a
    assert isinstance(result, Vector3)
    assert result == Vector3(2.0, 4.0, 6.0)

    v32 = Vector3(1.0, 2.0, 3.0, dtype=np.float32)
    result32 = np.float32(2.0) * v32
    assert isinstance(result32, Vector3)
    assert result32.dtype == np.float32

    scaled = np.float64(0.5) * Matrix3.identity()
    assert isinstance(scaled, Matrix3)
    assert scaled == Matrix3.diagonal(0.5, 0.5, 0.5)


def test_float32_preserved():
    v = Vector3(1.0, 2.0, 3.0, dtype=np.float32)
    assert (v * np.float64(2.0)).dtype == np.float32
    assert (v + v).dtype == np.float32
    assert v.cross(v).dtype == np.float32
    assert (v / 3.0).dtype == np.float32


# =============================================================================
# Matrix3
# =============================================================================

class TestMatrixInverse(unittest.TestCase):
    """Tests for determinant and adjugate inversion."""

    def setUp(self):
        self.m = Matrix3((4.0, 7.0, 2.0), (3.0, 6.0, 1.0), (2.0, 5.0, 3.0))

    def test_determinant(self):
        """Cofactor determinant should match the hand value and numpy."""
        self.assertAlmostEqual(self.m.determinant(), 9.0, places=12)
        self.assertAlmostEqual(self.m.determinant(), np.linalg.det(self.m.to_array()), places=10)

    def test_inverse_times_matrix_is_identity(self):
        """M * M^-1 and M^-1 * M should both be identity."""
        inv = self.m.inverse()
        self.assertTrue((self.m * inv).isclose(Matrix3.identity(), atol=1e-12))
        self.assertTrue((inv * self.m).isclose(Matrix3.identity(), atol=1e-12))

    def test_inverse_matches_numpy(self):
        np.testing.assert_array_almost_equal(
            self.m.inverse().to_array(), np.linalg.inv(self.m.to_array())
        )

    def test_adjugate_identity(self):
        """M * adj(M) = det(M) * I."""
        product = self.m * self.m.adjugate()
        self.assertTrue(product.isclose(Matrix3.identity() * 9.0, atol=1e-12))

    def test_singular_raises(self):
        singular = Matrix3((1.0, 2.0, 3.0), (2.0, 4.0, 6.0), (1.0, 1.0, 1.0))
        with self.assertRaises(SingularMatrixError) as ctx:
            singular.inverse()
        self.assertEqual(ctx.exception.det, 0.0)

    def test_singular_is_arithmetic_error(self):
        with self.assertRaises(ArithmeticError):
            Matrix3.zeros().inverse()

    def test_custom_tolerance(self):
        nearly = Matrix3.diagonal(1e-5, 1.0, 1.0)
        nearly.inverse()
        with self.assertRaises(SingularMatrixError):
            nearly.inverse(tolerance=1e-3)


def test_matrix_vector_row_dot_column(m):
    assert m * Vector3(1.0, 0.0, 0.0) == m.col(0)
    v = Vector3(1.0, -1.0, 2.0)
    expected = Vector3(m.row(0).dot(v), m.row(1).dot(v), m.row(2).dot(v))
    assert (m * v).isclose(expected)
    assert (m @ v).isclose(expected)


def test_matrix_product_order(m):
    r = Matrix3((0.0, -1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    np.testing.assert_array_almost_equal((m * r).to_array(), m.to_array() @ r.to_array())
    np.testing.assert_array_almost_equal((r * m).to_array(), r.to_array() @ m.to_array())
    assert not (m * r).isclose(r * m)


def test_matrix_product_associative(m):
    r = Matrix3((0.0, -1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, 1.0))
    v = Vector3(0.2, 0.4, -1.0)
    assert ((m * r) * v).isclose(m * (r * v))


def test_matrix_scalar_ops(m):
    assert (m * 2.0).isclose(m + m)
    assert (2.0 * m).isclose(m * 2.0)
    assert (m / 2.0).isclose(m * 0.5)
    assert (m - m) == Matrix3.zeros()


def test_transpose(m):
    assert m.T.row(0) == m.col(0)
    assert m.transpose().transpose() == m


def test_element_access(m):
    assert m(0, 1) == 7.0
    assert m[2, 1] == 5.0
    assert m[1] == Vector3(3.0, 6.0, 1.0)
    with pytest.raises(IndexError):
        m(0, 3)
    with pytest.raises(IndexError):
        m(-1, 0)
    with pytest.raises(IndexError):
        m.row(3)
    with pytest.raises(IndexError):
        m.col(5)
    with pytest.raises(IndexError):
        m[0, 1, 2]
    with pytest.raises(IndexError):
        m[(0,)]
    with pytest.raises(IndexError):
        m[0] = 1.0
    with pytest.raises(IndexError):
        m[0, 1, 2] = 1.0
    m[2, 1] = -1.0
    assert m(2, 1) == -1.0


def test_skew_matches_cross():
    w = Vector3(0.3, -1.2, 2.0)
    s = Matrix3.skew(w)
    for v in (Vector3(1.0, 0.0, 0.0), Vector3(0.5, 2.0, -3.0)):
        assert (s * v).isclose(w.cross(v))
    assert s.T.isclose(-s)


def test_diagonal_inverse():
    d = Matrix3.diagonal(2.0, 4.0, 8.0)
    assert d.inverse().isclose(Matrix3.diagonal(0.5, 0.25, 0.125))


def test_matrix_float32_preserved():
    m32 = Matrix3.diagonal(1.0, 2.0, 3.0, dtype=np.float32)
    assert m32.inverse().dtype == np.float32
    assert (m32 * Vector3(1.0, 1.0, 1.0, dtype=np.float32)).dtype == np.float32
    assert (m32 * m32).dtype == np.float32


def test_matrix_wrong_row_length():
    with pytest.raises(ValueError):
        Matrix3((1.0, 2.0), (3.0, 4.0), (5.0, 6.0))
