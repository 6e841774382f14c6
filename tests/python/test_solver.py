import unittest

import numpy as np

import cachematrix
from cachematrix import default_solve


class TestDefaultSolve(unittest.TestCase):
    def setUp(self):
        rng = np.random.default_rng(42)
        self.a = rng.random((6, 6)) + np.eye(6) * 3.0
        self.expected = np.linalg.inv(self.a)

    def test_available_methods(self):
        self.assertEqual(cachematrix.available_methods(), ["auto", "gauss", "lu", "qr", "svd"])

    def test_every_method_inverts(self):
        for method in cachematrix.available_methods():
            with self.subTest(method=method):
                inv = default_solve(self.a, method=method)
                self.assertIsInstance(inv, cachematrix.Matrix)
                np.testing.assert_allclose(inv.to_numpy(), self.expected, rtol=1e-9, atol=1e-12)

    def test_every_method_rejects_singular(self):
        singular = [[1.0, 2.0], [2.0, 4.0]]
        for method in cachematrix.available_methods():
            with self.subTest(method=method):
                with self.assertRaises(cachematrix.SolveError):
                    default_solve(singular, method=method)

    def test_zero_matrix_is_singular(self):
        for method in cachematrix.available_methods():
            with self.subTest(method=method):
                with self.assertRaises(cachematrix.SolveError):
                    default_solve(np.zeros((3, 3)), method=method)

    def test_gauss_pivots_zero_leading_entry(self):
        a = [[0.0, 1.0], [1.0, 0.0]]
        inv = default_solve(a, method="gauss")
        np.testing.assert_allclose(inv.to_numpy(), [[0.0, 1.0], [1.0, 0.0]])

    def test_upper_triangular_example(self):
        inv = default_solve([[5.0, 7.0], [0.0, 8.0]])
        np.testing.assert_allclose(inv.to_numpy(), [[0.2, -0.175], [0.0, 0.125]], rtol=0, atol=1e-9)

    def test_non_finite_input(self):
        with self.assertRaises(cachematrix.SolveError):
            default_solve([[float("inf"), 0.0], [0.0, 1.0]])

    def test_unknown_method(self):
        with self.assertRaises(cachematrix.SolveError):
            default_solve(self.a, method="cholesky")

    def test_unknown_option(self):
        with self.assertRaises(cachematrix.SolveError):
            default_solve(self.a, pivot=True)

    def test_rcond_only_for_svd(self):
        default_solve(self.a, method="svd", rcond=1e-6)
        with self.assertRaises(cachematrix.SolveError):
            default_solve(self.a, method="lu", rcond=1e-6)

    def test_svd_rcond_controls_cutoff(self):
        ill = np.diag([1.0, 1e-8])
        default_solve(ill, method="svd")
        with self.assertRaises(cachematrix.SolveError):
            default_solve(ill, method="svd", rcond=1e-6)

    def test_non_square_input(self):
        with self.assertRaises(cachematrix.ShapeError):
            default_solve(np.ones((2, 3)))

    def test_solve_error_is_runtime_error(self):
        self.assertTrue(issubclass(cachematrix.SolveError, RuntimeError))
        self.assertTrue(issubclass(cachematrix.SolveError, cachematrix.CacheMatrixError))


if __name__ == "__main__":
    unittest.main()
