"""
Dense matrix with shared-storage views.

A `Matrix` is a window of `rows x cols` elements over a two dimensional
numpy array. Owning instances cover the whole array; views created by
`sub_matrix`, `row` and `col` cover a part of it and share the storage with
the matrix they were taken from, so writes through either are seen by both.
Every other operation (arithmetic, copies, conversions) returns a new owning
instance.
"""

from __future__ import annotations

import numbers
from collections import abc
from typing import Any, Self

import numpy as np
import pandas as pd

from . import config
from ._typing import Array, DTypeLike, Scalar, Size
from .errors import InvalidArgument, MatrixRuntimeError, OutOfRange
from .util import assert_equal_sizes, size_to_string

#: Random generators shared by all calls of the corresponding factory.
_GENERATORS: dict[str, np.random.Generator] = {}


def _generator(name: str, seed: int | None, force_seed: bool) -> np.random.Generator:
    gen = _GENERATORS.get(name)
    if gen is None or force_seed:
        gen = np.random.default_rng(seed)
        _GENERATORS[name] = gen
    return gen


class Matrix:
    """Dense matrix of real or complex numbers.

    Parameters
    ----------
    n: int, nested sequence or Matrix, optional (default=0)
        Number of rows. A nested sequence of rows builds the matrix from a
        literal (see `from_rows`), a Matrix is deep copied.
    m: int, optional
        Number of columns. If not given, the matrix is square.
    value: scalar, optional (default=0)
        Value of every element.
    dtype: numpy dtype, optional
        Scalar type. If not given, complex128 is used for complex values and
        float64 otherwise.

    Examples
    --------
    >>> a = Matrix([[1, 2], [3, 4]])
    >>> a.row(0)[1] = 5
    >>> float(a[0, 1])
    5.0
    """

    __slots__ = ("_data", "_rows", "_cols", "_offset_i", "_offset_j")

    # Make numpy scalars defer to our reflected operators.
    __array_ufunc__ = None

    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        n: int | abc.Sequence[abc.Sequence[Scalar]] | Matrix = 0,
        m: int | None = None,
        value: Scalar | None = None,
        *,
        dtype: DTypeLike | None = None,
    ):
        if isinstance(n, Matrix):
            self._bind(n._view().copy())
            return

        if not isinstance(n, numbers.Integral):
            self._bind(Matrix.from_rows(n, dtype=dtype)._data)
            return

        if m is None:
            m = n
        if value is None:
            value = 0
        if dtype is None:
            dtype = np.complex128 if np.iscomplexobj(value) else np.float64

        self._bind(np.full((n, m), value, dtype=config.scalar_type(dtype)))

    def _bind(
        self,
        data: Array,
        rows: int | None = None,
        cols: int | None = None,
        offset_i: int = 0,
        offset_j: int = 0,
    ) -> None:
        self._data = data
        self._rows = data.shape[0] if rows is None else rows
        self._cols = data.shape[1] if cols is None else cols
        self._offset_i = offset_i
        self._offset_j = offset_j

    def _view(self) -> Array:
        """numpy view over the logical region of the storage."""
        return self._data[
            self._offset_i : self._offset_i + self._rows,
            self._offset_j : self._offset_j + self._cols,
        ]

    @classmethod
    def _from_array(cls, data: Array) -> Self:
        obj = object.__new__(cls)
        obj._bind(data)
        return obj

    @classmethod
    def from_rows(
        cls, rows: abc.Iterable[abc.Iterable[Scalar]], dtype: DTypeLike | None = None
    ) -> Self:
        """Create a matrix from a nested literal of rows.

        All rows must have the same length, otherwise InvalidArgument is raised.
        """
        rows = [list(row) for row in rows]
        n = len(rows)
        m = len(rows[0]) if rows else 0

        for row in rows:
            if len(row) != m:
                raise InvalidArgument(
                    f"All rows should have same size, got {len(row)} instead of {m}"
                )

        data = np.array(rows, dtype=dtype).reshape(n, m)
        if dtype is None and not np.iscomplexobj(data):
            data = data.astype(np.float64)
        config.scalar_type(data.dtype)
        return cls._from_array(data)

    @classmethod
    def from_numpy(cls, array: Any, dtype: DTypeLike | None = None) -> Self:
        """Create a matrix holding a copy of a 1 or 2 dimensional array.

        One dimensional arrays become column vectors.
        """
        data = np.array(array, dtype=dtype, copy=True)
        if data.ndim == 1:
            data = data.reshape(-1, 1)
        elif data.ndim != 2:
            raise InvalidArgument(
                f"Only 1 or 2 dimensional arrays can be converted, got {data.ndim}"
            )
        if dtype is None and not np.issubdtype(data.dtype, np.inexact):
            data = data.astype(np.float64)
        config.scalar_type(data.dtype)
        return cls._from_array(data)

    @classmethod
    def from_dataframe(cls, dataframe: pd.DataFrame) -> Self:
        """Create a matrix from the values of a pandas dataframe."""
        return cls.from_numpy(dataframe.to_numpy())

    @classmethod
    def move(cls, other: Matrix) -> Self:
        """Create a matrix taking over the storage of `other`,
        which is left as an empty matrix."""
        obj = cls()
        obj.swap(other)
        return obj

    def swap(self, other: Matrix) -> None:
        """Exchange storage, extents and offsets with another matrix."""
        for name in self.__slots__:
            mine = getattr(self, name)
            setattr(self, name, getattr(other, name))
            setattr(other, name, mine)

    def copy(self) -> Self:
        """A new matrix with its own storage and the same elements."""
        return self._from_array(self._view().copy())

    def __copy__(self) -> Self:
        return self.copy()

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        return self.copy()

    def copy_from(self, other: Matrix) -> None:
        """Rebind this matrix to new storage holding a copy of `other`."""
        self._bind(other._view().copy())

    def assign(self, other: Matrix) -> None:
        """Copy the elements of `other` into the storage of this matrix.

        Unlike `copy_from`, assigning into a view writes into the storage
        of the matrix it was taken from.
        """
        assert_equal_sizes(self, other)
        self._view()[...] = other._view()

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def size(self) -> Size:
        """Number of rows and columns."""
        return self._rows, self._cols

    @property
    def dtype(self) -> np.dtype:
        return self._data.dtype

    @property
    def eps(self) -> float:
        """Comparison tolerance of the scalar type of this matrix."""
        return config.get_eps(self.dtype)

    @property
    def is_square(self) -> bool:
        return self._rows == self._cols

    @property
    def is_row_vector(self) -> bool:
        return self._rows == 1

    @property
    def is_col_vector(self) -> bool:
        return self._cols == 1

    @property
    def is_vector(self) -> bool:
        return self.is_row_vector or self.is_col_vector

    @property
    def is_submatrix(self) -> bool:
        """True if this matrix is a view over part of a larger storage."""
        return not (
            self._rows == self._data.shape[0]
            and self._cols == self._data.shape[1]
            and self._offset_i == 0
            and self._offset_j == 0
        )

    def _locate(self, i: int, j: int | None) -> tuple[int, int]:
        if j is None:
            if self.is_row_vector:
                i, j = 0, i
            elif self.is_col_vector:
                j = 0
            else:
                raise MatrixRuntimeError(
                    "trying to get value by single index in matrix of size "
                    + size_to_string(self.size)
                )

        if i < 0 or j < 0 or i >= self._rows or j >= self._cols:
            raise OutOfRange(
                f"Indexes ({i}; {j}) out of matrix size {size_to_string(self.size)}"
            )

        return i + self._offset_i, j + self._offset_j

    def at(self, i: int, j: int | None = None) -> Any:
        """Element at row `i` and column `j`.

        If `j` is omitted the matrix must be a vector and `i` is the
        position along it.
        """
        return self._data[self._locate(i, j)]

    def __getitem__(self, key: int | tuple[int, int]) -> Any:
        if isinstance(key, tuple):
            return self.at(*key)
        return self.at(key)

    def __setitem__(self, key: int | tuple[int, int], value: Scalar) -> None:
        if isinstance(key, tuple):
            self._data[self._locate(*key)] = value
        else:
            self._data[self._locate(key, None)] = value

    def sub_matrix(self, i: int, j: int, n: int = -1, m: int = -1) -> Self:
        """View of `n` rows and `m` columns starting at element (i, j).

        A value of -1 for `n` or `m` extends the view to the last row or
        column. The view shares storage with this matrix.
        """
        if n == -1:
            n = self._rows - i
        if m == -1:
            m = self._cols - j

        if i < 0 or j < 0 or n < 0 or m < 0 or i + n > self._rows or j + m > self._cols:
            raise OutOfRange(
                f"Sub matrix of size {size_to_string((n, m))} at ({i}; {j}) "
                f"out of matrix size {size_to_string(self.size)}"
            )

        obj = object.__new__(type(self))
        obj._bind(self._data, n, m, self._offset_i + i, self._offset_j + j)
        return obj

    def row(self, i: int) -> Self:
        return self.sub_matrix(i, 0, 1, self._cols)

    def col(self, j: int) -> Self:
        return self.sub_matrix(0, j, self._rows, 1)

    def __neg__(self) -> Self:
        return self._from_array(-self._view())

    def __add__(self, other: Any) -> Self:
        if not isinstance(other, Matrix):
            return NotImplemented
        assert_equal_sizes(self, other)
        return self._from_array(self._view() + other._view())

    def __sub__(self, other: Any) -> Self:
        if not isinstance(other, Matrix):
            return NotImplemented
        assert_equal_sizes(self, other)
        return self._from_array(self._view() - other._view())

    def __iadd__(self, other: Matrix) -> Self:
        assert_equal_sizes(self, other)
        view = self._view()
        view += other._view()
        return self

    def __isub__(self, other: Matrix) -> Self:
        assert_equal_sizes(self, other)
        view = self._view()
        view -= other._view()
        return self

    def _product(self, other: Matrix) -> Self:
        if self._cols != other._rows:
            raise MatrixRuntimeError(
                f"Bad matrix sizes {size_to_string(self.size)} {size_to_string(other.size)}"
            )

        lhs, rhs = self._view(), other._view()
        result = np.zeros(
            (self._rows, other._cols), dtype=np.result_type(lhs.dtype, rhs.dtype)
        )
        # Summing the k terms in order gives every element the same rounding
        # as the i, k, j triple loop.
        for k in range(self._cols):
            result += lhs[:, k, np.newaxis] * rhs[np.newaxis, k, :]
        return self._from_array(result)

    def __mul__(self, other: Any) -> Self:
        if isinstance(other, Matrix):
            return self._product(other)
        if isinstance(other, numbers.Number):
            return self._from_array(self._view() * other)
        return NotImplemented

    def __rmul__(self, other: Any) -> Self:
        if isinstance(other, numbers.Number):
            return self._from_array(other * self._view())
        return NotImplemented

    def __matmul__(self, other: Any) -> Self:
        if isinstance(other, Matrix):
            return self._product(other)
        return NotImplemented

    def __truediv__(self, other: Any) -> Self:
        if isinstance(other, numbers.Number):
            return self._from_array(self._view() / other)
        return NotImplemented

    def __imul__(self, other: Any) -> Self:
        if isinstance(other, Matrix):
            self.copy_from(self._product(other))
        else:
            view = self._view()
            view *= other
        return self

    def __itruediv__(self, other: Any) -> Self:
        view = self._view()
        view /= other
        return self

    def scalar_product(self, other: Matrix) -> Any:
        """Sum of the element-wise products of two vectors of equal size.

        Complex elements are not conjugated.
        """
        if not self.is_vector or not other.is_vector:
            raise MatrixRuntimeError(
                f"Matrices of sizes {size_to_string(self.size)} and "
                f"{size_to_string(other.size)} are not both vectors"
            )
        assert_equal_sizes(self, other)
        return np.dot(self._view().ravel(), other._view().ravel())

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        assert_equal_sizes(self, other)

        a, b = self._view(), other._view()
        # NaN never compares equal, not even to itself.
        with np.errstate(invalid="ignore"):
            differs = np.isnan(a) | np.isnan(b) | (np.abs(a - b) > self.eps)
        return bool(differs.any())

    def __eq__(self, other: object) -> bool:
        differs = self.__ne__(other)
        if differs is NotImplemented:
            return NotImplemented
        return not differs

    def to_complex(self) -> Matrix:
        """A new complex matrix with the same elements."""
        dtype = np.result_type(self.dtype, np.complex64)
        return self._from_array(self._view().astype(dtype))

    def transposed(self) -> Self:
        return self._from_array(self._view().T.copy())

    def to_numpy(self) -> Array:
        """Copy of the elements as a two dimensional numpy array."""
        return self._view().copy()

    def to_dataframe(self) -> pd.DataFrame:
        """Convert matrix to a pandas dataframe."""
        return pd.DataFrame(self.to_numpy())

    @classmethod
    def ones(cls, n: int, dtype: DTypeLike = np.float64) -> Self:
        """Identity matrix of size n."""
        return cls._from_array(np.eye(n, dtype=config.scalar_type(dtype)))

    @classmethod
    def zeros(cls, n: int, m: int | None = None, dtype: DTypeLike = np.float64) -> Self:
        return cls(n, m, dtype=dtype)

    @classmethod
    def random(
        cls,
        n: int,
        m: int,
        low: float,
        high: float,
        seed: int | None = None,
        force_seed: bool = False,
        dtype: DTypeLike = np.float64,
    ) -> Self:
        """Matrix with elements drawn uniformly from [low, high).

        Parameters
        ----------
        n, m: int
            Number of rows and columns.
        low, high: float
            Bounds of the uniform distribution.
        seed: int, optional
            Seed of the generator. The generator is created on first use and
            then shared by all calls, so `seed` is only used the first time
            unless `force_seed` is given.
        force_seed: bool, optional (default=False)
            Reseed the generator with `seed` before drawing.
        dtype: numpy dtype, optional (default=float64)
        """
        gen = _generator("random", seed, force_seed)
        values = gen.uniform(low, high, size=(n, m))
        return cls._from_array(values.astype(config.scalar_type(dtype)))

    @classmethod
    def random_ints(
        cls,
        n: int,
        m: int,
        low: int,
        high: int,
        seed: int | None = None,
        dtype: DTypeLike = np.float64,
    ) -> Self:
        """Matrix with integer elements drawn uniformly from [low, high]."""
        gen = _generator("random_ints", seed, False)
        values = gen.integers(low, high, size=(n, m), endpoint=True)
        return cls._from_array(values.astype(config.scalar_type(dtype)))

    def _formatted(self) -> list[list[str]]:
        precision = config.get_precision(self.dtype)
        return [
            [format(value, f".{precision}f") for value in row]
            for row in self._view().tolist()
        ]

    def __str__(self):
        cells = self._formatted()
        width = max((len(cell) for row in cells for cell in row), default=0)
        lines = (", ".join(cell.rjust(width) for cell in row) for row in cells)
        return "[" + ",\n ".join(lines) + "]"

    __repr__ = __str__

    def to_wolfram_string(self) -> str:
        """Format as a nested list, e.g. {{1,2},{3,4}}."""
        cells = self._formatted()
        return "{" + ",".join("{" + ",".join(row) + "}" for row in cells) + "}"
