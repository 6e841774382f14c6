import unittest

import numpy as np

import cachematrix


class TestMatrixConstruction(unittest.TestCase):
    def test_from_nested_list(self):
        m = cachematrix.matrix([[1, 2], [3, 4]])
        self.assertEqual(m.shape, (2, 2))
        self.assertEqual(m.rows(), 2)
        self.assertEqual(m.cols(), 2)
        self.assertEqual(m[1, 0], 3.0)
        self.assertIsInstance(m.get(0, 1), float)

    def test_from_numpy_copies_input(self):
        a = np.array([[1.0, 2.0], [3.0, 4.0]])
        m = cachematrix.matrix(a)
        a[0, 0] = 100.0
        self.assertEqual(m[0, 0], 1.0)

    def test_non_square_raises_shape_error(self):
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.matrix([[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12]])
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.matrix(np.zeros((3, 4)))

    def test_empty_and_1d_raise_shape_error(self):
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.matrix([])
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.matrix(np.zeros(3))
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.matrix([[1, 2], [3]])

    def test_shape_error_is_value_error(self):
        with self.assertRaises(ValueError):
            cachematrix.matrix([[1, 2, 3]])

    def test_non_numeric_raises_type_error(self):
        with self.assertRaises(TypeError):
            cachematrix.matrix("abcd")
        with self.assertRaises(TypeError):
            cachematrix.matrix([["a", "b"], ["c", "d"]])

    def test_payload_is_read_only(self):
        m = cachematrix.matrix([[1.0, 0.0], [0.0, 1.0]])
        out = m.to_numpy()
        out[0, 0] = 5.0
        self.assertEqual(m[0, 0], 1.0)
        with self.assertRaises(TypeError):
            m[0, 0] = 5.0  # type: ignore[index]

    def test_with_entry_returns_new_matrix(self):
        m = cachematrix.matrix([[5, 7], [0, 8]])
        m2 = m.with_entry(0, 0, 6)
        self.assertEqual(m[0, 0], 5.0)
        self.assertEqual(m2[0, 0], 6.0)
        self.assertEqual(m2[0, 1], 7.0)


class TestMatrixEquality(unittest.TestCase):
    def test_equality_is_approximate(self):
        a = cachematrix.matrix([[1.0, 2.0], [3.0, 4.0]])
        b = cachematrix.matrix([[1.0 + 1e-12, 2.0], [3.0, 4.0 - 1e-12]])
        self.assertTrue(a == b)
        self.assertFalse(a != b)
        self.assertTrue(a.approx_equal(b))

    def test_difference_beyond_tolerance_is_not_equal(self):
        a = cachematrix.matrix([[5.0, 7.0], [0.0, 8.0]])
        b = cachematrix.matrix([[6.0, 7.0], [0.0, 8.0]])
        self.assertFalse(a == b)
        self.assertTrue(a != b)

    def test_explicit_tolerance(self):
        a = cachematrix.matrix([[1.0]])
        b = cachematrix.matrix([[1.01]])
        self.assertFalse(a.approx_equal(b))
        self.assertTrue(a.approx_equal(b, rtol=0.1))

    def test_different_shapes_are_not_equal(self):
        self.assertFalse(cachematrix.identity(2) == cachematrix.identity(3))

    def test_nan_never_equal(self):
        a = cachematrix.matrix([[float("nan")]])
        self.assertFalse(a == a)

    def test_compare_with_plain_data(self):
        m = cachematrix.matrix([[1, 0], [0, 1]])
        self.assertTrue(m == [[1, 0], [0, 1]])
        self.assertTrue(m == np.eye(2))
        self.assertFalse(m == "not a matrix")

    def test_unhashable(self):
        with self.assertRaises(TypeError):
            hash(cachematrix.identity(2))


class TestMatrixOperations(unittest.TestCase):
    def test_matmul(self):
        m = cachematrix.matrix([[1, 2], [3, 4]])
        out = m @ cachematrix.identity(2)
        self.assertIsInstance(out, cachematrix.Matrix)
        self.assertTrue(out == m)

    def test_matmul_with_numpy_on_either_side(self):
        m = cachematrix.matrix([[1, 2], [3, 4]])
        right = m @ np.eye(2)
        left = np.eye(2) @ m
        self.assertIsInstance(right, cachematrix.Matrix)
        self.assertIsInstance(left, cachematrix.Matrix)
        self.assertTrue(left == m)

    def test_matmul_dimension_mismatch(self):
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.identity(2) @ cachematrix.identity(3)

    def test_numpy_interop(self):
        m = cachematrix.matrix([[1, 2], [3, 4]])
        np.testing.assert_array_equal(np.asarray(m), [[1.0, 2.0], [3.0, 4.0]])
        self.assertEqual(m.tolist(), [[1.0, 2.0], [3.0, 4.0]])

    def test_identity(self):
        self.assertEqual(cachematrix.identity(3).tolist(), np.eye(3).tolist())
        with self.assertRaises(cachematrix.ShapeError):
            cachematrix.identity(0)


class TestMatrixFormatting(unittest.TestCase):
    def test_str_small(self):
        text = str(cachematrix.matrix([[0.2, -0.175], [0.0, 0.125]]))
        self.assertEqual(text, "Matrix(shape=(2, 2))\n[\n [0.2 -0.175]\n [0 0.125]\n]")

    def test_str_truncates_large(self):
        text = str(cachematrix.identity(20))
        self.assertIn("...", text)
        self.assertTrue(text.startswith("Matrix(shape=(20, 20))"))

    def test_repr(self):
        self.assertEqual(repr(cachematrix.identity(2)), "<Matrix shape=(2, 2)>")


if __name__ == "__main__":
    unittest.main()
