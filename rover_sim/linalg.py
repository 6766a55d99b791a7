"""
Rover 6DOF Dynamics - Minimal 3D Linear Algebra

This module implements the fixed-size 3-vector and 3x3 matrix types used by
the dynamics layer. Both are thin value types over a numpy array whose dtype
(np.float32 or np.float64) selects the scalar precision.

Matrix3 inversion uses the classical adjugate / determinant formula and the
determinant uses cofactor expansion along the first row.
"""

import numpy as np

from . import constants as C


class SingularMatrixError(ArithmeticError):
    """Raised when inverting a matrix whose determinant is within tolerance of zero."""

    def __init__(self, det: float, tolerance: float):
        super().__init__(
            f"Matrix is singular: |det| = {abs(det):.3e} <= tolerance {tolerance:.3e}"
        )
        self.det = det
        self.tolerance = tolerance


def _check_index(i) -> int:
    """Return i if it is a valid component index, raise IndexError otherwise."""
    if isinstance(i, bool) or not isinstance(i, (int, np.integer)) or not 0 <= i <= 2:
        raise IndexError(f"Component index must be 0, 1 or 2, got {i!r}")
    return int(i)


def _check_pair(key):
    if not isinstance(key, tuple) or len(key) != 2:
        raise IndexError(f"Matrix element key must be a (row, col) pair, got {key!r}")
    return _check_index(key[0]), _check_index(key[1])


def _as_float_dtype(dtype) -> np.dtype:
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise TypeError(f"Scalar type must be a floating dtype, got {dtype}")
    return dtype


class Vector3:
    """
    Ordered triple (x, y, z) representing a physical 3D quantity.

    The reference frame is tracked by convention, not by the type.

    Args:
        x, y, z: Components
        dtype: Floating scalar type (default np.float64)
    """

    __slots__ = ("_v",)

    # Make numpy scalars defer to __rmul__ instead of iterating the components.
    __array_ufunc__ = None

    def __init__(self, x=0.0, y=0.0, z=0.0, dtype=np.float64):
        self._v = np.array([x, y, z], dtype=_as_float_dtype(dtype))

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> 'Vector3':
        obj = cls.__new__(cls)
        obj._v = arr
        return obj

    @classmethod
    def from_array(cls, arr, dtype=None) -> 'Vector3':
        """
        Create a Vector3 from any array-like of shape (3,).

        Args:
            arr: Array-like with three components
            dtype: Scalar type; defaults to the array's dtype if floating, else float64
        """
        a = np.asarray(arr)
        if a.shape != (3,):
            raise ValueError(f"Vector3 requires shape (3,), got {a.shape}")
        if dtype is None:
            dtype = a.dtype if np.issubdtype(a.dtype, np.floating) else np.float64
        return cls._wrap(np.array(a, dtype=_as_float_dtype(dtype)))

    @classmethod
    def zeros(cls, dtype=np.float64) -> 'Vector3':
        return cls(dtype=dtype)

    @property
    def dtype(self) -> np.dtype:
        return self._v.dtype

    @property
    def x(self):
        return self._v[0]

    @x.setter
    def x(self, value):
        self._v[0] = value

    @property
    def y(self):
        return self._v[1]

    @y.setter
    def y(self, value):
        self._v[1] = value

    @property
    def z(self):
        return self._v[2]

    @z.setter
    def z(self, value):
        self._v[2] = value

    def __call__(self, i):
        """Bounds-checked component access."""
        return self._v[_check_index(i)]

    def __getitem__(self, i):
        return self._v[_check_index(i)]

    def __setitem__(self, i, value):
        self._v[_check_index(i)] = value

    def __len__(self) -> int:
        return 3

    def __iter__(self):
        return iter(self._v.tolist())

    def clear(self) -> None:
        """Zero all components in place."""
        self._v[:] = 0.0

    def dot(self, other: 'Vector3'):
        v, w = self._v, other._v
        return v[0] * w[0] + v[1] * w[1] + v[2] * w[2]

    def cross(self, other: 'Vector3') -> 'Vector3':
        """Right-handed cross product self × other."""
        a, b = self._v, other._v
        return Vector3._wrap(np.array([
            a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0],
        ], dtype=self.dtype))

    def norm(self):
        return np.sqrt(self.dot(self))

    def copy(self) -> 'Vector3':
        return Vector3._wrap(self._v.copy())

    def to_array(self) -> np.ndarray:
        """Return a copy of the components as a numpy array."""
        return self._v.copy()

    def isclose(self, other: 'Vector3', rtol: float = 1e-9, atol: float = 1e-12) -> bool:
        return bool(np.allclose(self._v, other._v, rtol=rtol, atol=atol))

    # Arithmetic -------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3._wrap((self._v + other._v).astype(self.dtype, copy=False))

    def __sub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return Vector3._wrap((self._v - other._v).astype(self.dtype, copy=False))

    def __iadd__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        self._v += other._v
        return self

    def __isub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        self._v -= other._v
        return self

    def __neg__(self):
        return Vector3._wrap(-self._v)

    def __mul__(self, c):
        if isinstance(c, (Vector3, Matrix3)):
            return NotImplemented
        return Vector3._wrap((self._v * c).astype(self.dtype, copy=False))

    __rmul__ = __mul__

    def __truediv__(self, c):
        if isinstance(c, (Vector3, Matrix3)):
            return NotImplemented
        return Vector3._wrap((self._v / c).astype(self.dtype, copy=False))

    def __eq__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    __hash__ = None

    def __repr__(self) -> str:
        return f"Vector3({self.x!r}, {self.y!r}, {self.z!r}, dtype={self.dtype.name})"


class Matrix3:
    """
    3x3 real matrix stored as three row vectors.

    Used both for the body-to-inertial DCM and for general tensors such as
    the inertia tensor and its inverse.

    Args:
        row0, row1, row2: Rows as Vector3 or 3-element sequences (default zero)
        dtype: Floating scalar type (default np.float64)
    """

    __slots__ = ("_m",)

    __array_ufunc__ = None

    def __init__(self, row0=(0.0, 0.0, 0.0), row1=(0.0, 0.0, 0.0),
                 row2=(0.0, 0.0, 0.0), dtype=np.float64):
        rows = [r._v if isinstance(r, Vector3) else r for r in (row0, row1, row2)]
        m = np.array(rows, dtype=_as_float_dtype(dtype))
        if m.shape != (3, 3):
            raise ValueError(f"Matrix3 rows must have 3 components, got shape {m.shape}")
        self._m = m

    @classmethod
    def _wrap(cls, arr: np.ndarray) -> 'Matrix3':
        obj = cls.__new__(cls)
        obj._m = arr
        return obj

    @classmethod
    def from_array(cls, arr, dtype=None) -> 'Matrix3':
        """Create a Matrix3 from any array-like of shape (3, 3)."""
        a = np.asarray(arr)
        if a.shape != (3, 3):
            raise ValueError(f"Matrix3 requires shape (3, 3), got {a.shape}")
        if dtype is None:
            dtype = a.dtype if np.issubdtype(a.dtype, np.floating) else np.float64
        return cls._wrap(np.array(a, dtype=_as_float_dtype(dtype)))

    @classmethod
    def zeros(cls, dtype=np.float64) -> 'Matrix3':
        return cls(dtype=dtype)

    @classmethod
    def identity(cls, dtype=np.float64) -> 'Matrix3':
        return cls._wrap(np.eye(3, dtype=_as_float_dtype(dtype)))

    @classmethod
    def diagonal(cls, d0, d1, d2, dtype=np.float64) -> 'Matrix3':
        return cls._wrap(np.diag(np.array([d0, d1, d2], dtype=_as_float_dtype(dtype))))

    @classmethod
    def skew(cls, w: Vector3) -> 'Matrix3':
        """
        Skew-symmetric matrix S of w such that S * v == w.cross(v) for all v.

        Args:
            w: Vector (typically body angular velocity)

        Returns:
            [[0, -wz, wy], [wz, 0, -wx], [-wy, wx, 0]]
        """
        x, y, z = w._v
        return cls._wrap(np.array([
            [0.0, -z, y],
            [z, 0.0, -x],
            [-y, x, 0.0],
        ], dtype=w.dtype))

    @property
    def dtype(self) -> np.dtype:
        return self._m.dtype

    def row(self, i) -> Vector3:
        return Vector3._wrap(self._m[_check_index(i)].copy())

    def col(self, j) -> Vector3:
        return Vector3._wrap(self._m[:, _check_index(j)].copy())

    def __call__(self, i, j):
        """Bounds-checked element access."""
        return self._m[_check_index(i), _check_index(j)]

    def __getitem__(self, key):
        if isinstance(key, tuple):
            i, j = _check_pair(key)
            return self._m[i, j]
        return self.row(key)

    def __setitem__(self, key, value):
        i, j = _check_pair(key)
        self._m[i, j] = value

    def transpose(self) -> 'Matrix3':
        return Matrix3._wrap(self._m.T.copy())

    @property
    def T(self) -> 'Matrix3':
        return self.transpose()

    def determinant(self):
        """Determinant by cofactor expansion along the first row."""
        a = self._m
        return (a[0, 0] * (a[1, 1] * a[2, 2] - a[1, 2] * a[2, 1])
                - a[0, 1] * (a[1, 0] * a[2, 2] - a[1, 2] * a[2, 0])
                + a[0, 2] * (a[1, 0] * a[2, 1] - a[1, 1] * a[2, 0]))

    def adjugate(self) -> 'Matrix3':
        """Transpose of the cofactor matrix."""
        a = self._m
        return Matrix3._wrap(np.array([
            [a[1, 1] * a[2, 2] - a[1, 2] * a[2, 1],
             a[0, 2] * a[2, 1] - a[0, 1] * a[2, 2],
             a[0, 1] * a[1, 2] - a[0, 2] * a[1, 1]],
            [a[1, 2] * a[2, 0] - a[1, 0] * a[2, 2],
             a[0, 0] * a[2, 2] - a[0, 2] * a[2, 0],
             a[0, 2] * a[1, 0] - a[0, 0] * a[1, 2]],
            [a[1, 0] * a[2, 1] - a[1, 1] * a[2, 0],
             a[0, 1] * a[2, 0] - a[0, 0] * a[2, 1],
             a[0, 0] * a[1, 1] - a[0, 1] * a[1, 0]],
        ], dtype=self.dtype))

    def inverse(self, tolerance: float = None) -> 'Matrix3':
        """
        Invert via adjugate / determinant.

        Args:
            tolerance: |det| at or below which the matrix is treated as singular.
                       Defaults to C.SINGULARITY_TOLERANCE.

        Returns:
            Inverse matrix

        Raises:
            SingularMatrixError: If |det| <= tolerance
        """
        if tolerance is None:
            tolerance = C.SINGULARITY_TOLERANCE
        det = self.determinant()
        if not abs(det) > tolerance:
            raise SingularMatrixError(float(det), tolerance)
        return self.adjugate() / det

    def copy(self) -> 'Matrix3':
        return Matrix3._wrap(self._m.copy())

    def to_array(self) -> np.ndarray:
        """Return a copy of the elements as a (3, 3) numpy array."""
        return self._m.copy()

    def isclose(self, other: 'Matrix3', rtol: float = 1e-9, atol: float = 1e-12) -> bool:
        return bool(np.allclose(self._m, other._m, rtol=rtol, atol=atol))

    # Arithmetic -------------------------------------------------------------

    def __add__(self, other):
        if not isinstance(other, Matrix3):
            return NotImplemented
        return Matrix3._wrap((self._m + other._m).astype(self.dtype, copy=False))

    def __sub__(self, other):
        if not isinstance(other, Matrix3):
            return NotImplemented
        return Matrix3._wrap((self._m - other._m).astype(self.dtype, copy=False))

    def __neg__(self):
        return Matrix3._wrap(-self._m)

    def __mul__(self, other):
        """Matrix * Matrix, Matrix * Vector3, or Matrix * scalar (operand order preserved)."""
        if isinstance(other, Matrix3):
            return Matrix3._wrap((self._m @ other._m).astype(self.dtype, copy=False))
        if isinstance(other, Vector3):
            return Vector3._wrap((self._m @ other._v).astype(self.dtype, copy=False))
        return Matrix3._wrap((self._m * other).astype(self.dtype, copy=False))

    def __rmul__(self, c):
        # Only scalars reach here; Vector3 * Matrix3 is undefined.
        if isinstance(c, Vector3):
            return NotImplemented
        return Matrix3._wrap((self._m * c).astype(self.dtype, copy=False))

    def __matmul__(self, other):
        if not isinstance(other, (Matrix3, Vector3)):
            return NotImplemented
        return self * other

    def __truediv__(self, c):
        if isinstance(c, (Vector3, Matrix3)):
            return NotImplemented
        return Matrix3._wrap((self._m / c).astype(self.dtype, copy=False))

    def __eq__(self, other):
        if not isinstance(other, Matrix3):
            return NotImplemented
        return bool(np.array_equal(self._m, other._m))

    __hash__ = None

    def __repr__(self) -> str:
        rows = ", ".join(str(r) for r in self._m.tolist())
        return f"Matrix3({rows}, dtype={self.dtype.name})"
