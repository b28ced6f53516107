"""
Tests for the dense matrix container.
"""

import copy

import numpy as np
import pandas as pd
import pytest

from Eigenpower import InvalidArgument, Matrix, MatrixRuntimeError, OutOfRange, set_eps


@pytest.fixture
def a():
    return Matrix([[1, 2, 3], [4, 5, 6], [7, 8, 10]])


class TestConstruction:
    def test_dimensions_and_fill(self):
        m = Matrix(2, 3, 1.5)
        assert m.size == (2, 3)
        assert m.dtype == np.float64
        np.testing.assert_array_equal(m.to_numpy(), np.full((2, 3), 1.5))

    def test_square_and_empty(self):
        assert Matrix(4).size == (4, 4)
        assert Matrix().size == (0, 0)

    def test_complex_fill_value_gives_complex_matrix(self):
        assert Matrix(2, 2, 1j).dtype == np.complex128

    def test_literal(self):
        m = Matrix([[1, 2], [3, 4]])
        assert m[1, 0] == 3.0
        assert m.dtype == np.float64

    def test_complex_literal(self):
        m = Matrix.from_rows([[1, 2j]])
        assert m.dtype == np.complex128
        assert m[0, 1] == 2j

    def test_ragged_literal_raises(self):
        with pytest.raises(InvalidArgument, match="got 1 instead of 2"):
            Matrix([[1, 2], [3]])

    def test_integer_dtype_rejected(self):
        with pytest.raises(InvalidArgument):
            Matrix(2, 2, dtype=np.int64)

    def test_copy_never_aliases(self, a):
        for b in (Matrix(a), a.copy(), copy.copy(a), copy.deepcopy(a)):
            b[0, 0] = 100
            assert a[0, 0] == 1

    def test_copy_of_view_owns_storage(self, a):
        b = a.row(1).copy()
        assert not b.is_submatrix
        b[0] = -1
        assert a[1, 0] == 4

    def test_move_leaves_source_empty(self, a):
        b = Matrix.move(a)
        assert b.size == (3, 3)
        assert b[2, 2] == 10
        assert a.size == (0, 0)

    def test_swap(self):
        x, y = Matrix(1, 2, 1.0), Matrix(3, 1, 2.0)
        x.swap(y)
        assert x.size == (3, 1) and x[0] == 2.0
        assert y.size == (1, 2) and y[0] == 1.0

    def test_from_numpy_vector_is_column(self):
        m = Matrix.from_numpy(np.array([1, 2, 3]))
        assert m.size == (3, 1)
        assert m.dtype == np.float64

    def test_from_numpy_rejects_3d(self):
        with pytest.raises(InvalidArgument):
            Matrix.from_numpy(np.zeros((2, 2, 2)))

    def test_dataframe_roundtrip(self, a):
        df = a.to_dataframe()
        assert isinstance(df, pd.DataFrame)
        assert df.shape == (3, 3)
        assert Matrix.from_dataframe(df) == a


class TestViews:
    def test_row_view_writes_through(self, a):
        r = a.row(0)
        r[0] = 42
        assert a[0, 0] == 42

    def test_owner_writes_are_seen_by_view(self, a):
        c = a.col(2)
        a[1, 2] = -6
        assert c[1] == -6

    def test_sub_matrix_to_the_end(self, a):
        s = a.sub_matrix(1, 1)
        assert s.size == (2, 2)
        assert s.is_submatrix
        assert s == Matrix([[5, 6], [8, 10]])

    def test_view_of_view_offsets_accumulate(self, a):
        s = a.sub_matrix(1, 1).sub_matrix(1, 0, 1, 2)
        assert s.size == (1, 2)
        assert s[1] == 10
        s[0] = 0
        assert a[2, 1] == 0

    def test_owner_is_not_submatrix(self, a):
        assert not a.is_submatrix
        assert not a.sub_matrix(0, 0).is_submatrix

    def test_sub_matrix_out_of_bounds(self, a):
        with pytest.raises(OutOfRange):
            a.sub_matrix(2, 2, 2, 2)

    def test_assign_into_view(self, a):
        a.row(0).assign(Matrix([[0, 0, 0]]))
        np.testing.assert_array_equal(a.to_numpy()[0], [0, 0, 0])

    def test_assign_size_mismatch(self, a):
        with pytest.raises(InvalidArgument):
            a.row(0).assign(a.col(0))

    def test_in_place_arithmetic_on_view(self, a):
        v = a.col(0)
        v *= 2
        v += Matrix([[1], [1], [1]])
        np.testing.assert_array_equal(a.to_numpy()[:, 0], [3, 9, 15])


class TestElementAccess:
    def test_out_of_range(self):
        m = Matrix(2, 2)
        with pytest.raises(OutOfRange):
            m.at(10, 10)
        with pytest.raises(OutOfRange):
            m[-1, 0]

    def test_single_index_needs_vector(self, a):
        with pytest.raises(MatrixRuntimeError):
            a.at(0)
        with pytest.raises(MatrixRuntimeError):
            a[0] = 1

    def test_single_index_on_vectors(self, a):
        assert a.row(2)[1] == 8
        assert a.col(1)[2] == 8
        with pytest.raises(OutOfRange):
            a.row(0)[3]

    def test_out_of_range_is_index_error(self):
        with pytest.raises(IndexError):
            Matrix(1, 1).at(0, 1)

    def test_predicates(self, a):
        assert a.is_square
        assert not a.is_vector
        assert a.row(0).is_row_vector
        assert a.col(0).is_col_vector


class TestArithmetic:
    def test_add_zeros_and_subtract_self(self, a):
        zeros = Matrix.zeros(3, 3)
        assert a + zeros == a
        assert a - a == zeros

    def test_add_size_mismatch(self, a):
        with pytest.raises(InvalidArgument):
            a + Matrix(2, 2)
        with pytest.raises(InvalidArgument):
            a - Matrix(3, 2)

    def test_add_returns_owning_instance(self, a):
        s = a.row(0) + a.row(1)
        assert not s.is_submatrix
        s[0] = 0
        assert a[0, 0] == 1

    def test_product(self):
        x = Matrix([[1, 2], [3, 4]])
        y = Matrix([[0, 1], [1, 0]])
        assert x * y == Matrix([[2, 1], [4, 3]])
        assert x @ y == x * y

    def test_product_matches_numpy(self):
        x = Matrix.random(4, 3, -1, 1, seed=3, force_seed=True)
        y = Matrix.random(3, 5, -1, 1)
        np.testing.assert_allclose((x * y).to_numpy(), x.to_numpy() @ y.to_numpy())

    def test_product_bad_sizes(self):
        with pytest.raises(MatrixRuntimeError, match=r"\(2; 3\) \(2; 3\)"):
            Matrix(2, 3) * Matrix(2, 3)

    def test_product_associative(self):
        set_eps(1e-9, 4)
        x = Matrix.random(3, 4, -2, 2, seed=11, force_seed=True)
        y = Matrix.random(4, 2, -2, 2)
        z = Matrix.random(2, 3, -2, 2)
        assert (x * y) * z == x * (y * z)

    def test_scalar_operations(self, a):
        assert 2 * a == a * 2
        assert (a * 2) / 2 == a
        assert -a == a * -1
        assert np.float64(3) * a == a * 3.0

    def test_complex_scalar_promotes(self, a):
        c = a * 1j
        assert c.dtype == np.complex128
        assert c[0, 1] == 2j

    def test_matrix_in_place_product(self):
        x = Matrix([[1, 1], [0, 1]])
        x *= Matrix([[1, 1], [0, 1]])
        assert x == Matrix([[1, 2], [0, 1]])

    def test_scalar_product(self):
        u = Matrix([[1], [2], [3]])
        v = Matrix([[4], [5], [6]])
        assert u.scalar_product(v) == 32

    def test_scalar_product_does_not_conjugate(self):
        u = Matrix([[1j], [1]])
        assert u.scalar_product(u) == 0

    def test_scalar_product_errors(self, a):
        with pytest.raises(InvalidArgument):
            Matrix(3, 1).scalar_product(Matrix(2, 1))
        with pytest.raises(InvalidArgument):
            Matrix(3, 1).scalar_product(Matrix(1, 3))
        with pytest.raises(MatrixRuntimeError):
            a.scalar_product(a.col(0))
        with pytest.raises(MatrixRuntimeError):
            a.col(0).scalar_product(a)


class TestComparison:
    def test_within_eps_is_equal(self, a):
        set_eps(1e-6, 2)
        b = a + Matrix(3, 3, 1e-8)
        assert a == b
        assert not a != b

    def test_outside_eps_differs(self, a):
        b = a.copy()
        b[2, 2] += 1e-3
        assert a != b

    def test_nan_never_equal(self):
        m = Matrix(1, 1, np.nan)
        assert m != m
        assert not m == m

    def test_size_mismatch_raises(self):
        with pytest.raises(InvalidArgument):
            Matrix(2, 2) == Matrix(3, 3)

    def test_unhashable(self):
        with pytest.raises(TypeError):
            hash(Matrix(1))


class TestConversion:
    def test_transposed_twice(self, a):
        assert a.transposed().transposed() == a

    def test_transposed_is_not_a_view(self, a):
        t = a.transposed()
        assert t[0, 1] == 4
        t[0, 1] = 0
        assert a[1, 0] == 4

    def test_to_complex(self, a):
        c = a.to_complex()
        assert c.dtype == np.complex128
        assert c[1, 1] == 5 + 0j
        c[1, 1] = 1j
        assert a[1, 1] == 5

    def test_to_complex_single_precision(self):
        assert Matrix(1, 1, dtype=np.float32).to_complex().dtype == np.complex64


class TestFactories:
    def test_ones_is_identity(self, a):
        i = Matrix.ones(3)
        assert i * a == a
        assert a * i == a

    def test_zeros(self):
        assert Matrix.zeros(2, 3) == Matrix(2, 3, 0.0)

    def test_random_bounds_and_seed(self):
        x = Matrix.random(5, 5, -1, 1, seed=7, force_seed=True)
        y = Matrix.random(5, 5, -1, 1, seed=7, force_seed=True)
        assert x == y
        assert np.all((x.to_numpy() >= -1) & (x.to_numpy() < 1))

    def test_random_generator_is_shared(self):
        x = Matrix.random(2, 2, 0, 1, seed=1, force_seed=True)
        y = Matrix.random(2, 2, 0, 1, seed=1)
        assert x != y

    def test_random_ints(self):
        m = Matrix.random_ints(10, 10, -3, 3, seed=5)
        values = m.to_numpy()
        assert m.dtype == np.float64
        assert np.all(values == np.round(values))
        assert values.min() >= -3 and values.max() <= 3


class TestFormatting:
    def test_str_is_column_aligned(self):
        set_eps(1e-9, 1)
        m = Matrix([[1, -20], [300, 4]])
        assert str(m) == "[  1.0, -20.0,\n 300.0,   4.0]"

    def test_str_default_precision(self):
        assert str(Matrix([[1, 2]])) == "[1, 2]"

    def test_wolfram_string(self):
        set_eps(1e-9, 2)
        m = Matrix([[1, 2], [3, 4.5]])
        assert m.to_wolfram_string() == "{{1.00,2.00},{3.00,4.50}}"

    def test_precision_is_per_scalar_type(self):
        set_eps(1e-9, 3, np.complex128)
        assert str(Matrix([[1]])) == "[1]"
        assert str(Matrix([[1j]])) == "[0.000+1.000j]"
