"""
Unit tests for NDArray elementwise arithmetic, broadcasting, unary
functions and masks.
"""

import unittest

import numpy as np

from ndgrad import NDArray, NDArrayArithmeticError, ShapeMismatchError


class TestNDArrayBroadcasting(unittest.TestCase):
    def test_matrix_plus_row_vector(self):
        rng = np.random.default_rng(0)
        x = rng.normal(size=(32, 100)).astype(np.float32)
        b = rng.normal(size=(100,)).astype(np.float32)

        out = NDArray.from_numpy(x) + NDArray.from_numpy(b)

        self.assertEqual(out.shape, (32, 100))
        np.testing.assert_allclose(out.to_numpy(), x + b, rtol=1e-6, atol=1e-6)

    def test_column_times_row(self):
        col = NDArray([[1], [2], [3]])
        row = NDArray([10, 20])
        out = col * row
        self.assertEqual(out.shape, (3, 2))
        self.assertEqual(out.to_nested(), [[10, 20], [20, 40], [30, 60]])

    def test_scalar_operands_both_sides(self):
        a = NDArray([1.0, 2.0, 4.0])
        self.assertEqual((a + 1).to_nested(), [2.0, 3.0, 5.0])
        self.assertEqual((1 - a).to_nested(), [0.0, -1.0, -3.0])
        self.assertEqual((2 * a).to_nested(), [2.0, 4.0, 8.0])
        self.assertEqual((8 / a).to_nested(), [8.0, 4.0, 2.0])
        self.assertEqual((a ** 2).to_nested(), [1.0, 4.0, 16.0])
        self.assertEqual((2 ** a).to_nested(), [2.0, 4.0, 16.0])
        self.assertEqual((-a).to_nested(), [-1.0, -2.0, -4.0])

    def test_incompatible_shapes_raise(self):
        with self.assertRaises(ShapeMismatchError) as ctx:
            NDArray.zeros((3, 4)) + NDArray.zeros((3,))
        self.assertEqual(ctx.exception.op, "add")
        for op in (
            lambda a, b: a - b,
            lambda a, b: a * b,
            lambda a, b: a / b,
            lambda a, b: a ** b,
        ):
            with self.assertRaises(ShapeMismatchError):
                op(NDArray.ones((2, 3)), NDArray.ones((2, 2)))

    def test_result_is_independent_of_operands(self):
        a = NDArray([1.0, 2.0])
        out = a + 0.0
        out.set_index([0], 5.0)
        self.assertEqual(a.to_nested(), [1.0, 2.0])


class TestNDArrayArithmeticErrors(unittest.TestCase):
    def test_division_by_zero(self):
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([1.0, 2.0]) / NDArray([1.0, 0.0])
        with self.assertRaises(NDArrayArithmeticError):
            1.0 / NDArray([0.0])

    def test_log_of_non_positive(self):
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([1.0, 0.0]).log()
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([-1.0]).log()

    def test_sqrt_of_negative(self):
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([4.0, -1.0]).sqrt()

    def test_sqrt_of_zero_is_allowed(self):
        self.assertEqual(NDArray([0.0, 4.0]).sqrt().to_nested(), [0.0, 2.0])

    def test_fractional_power_of_negative_base(self):
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([-4.0]) ** 0.5
        self.assertEqual((NDArray([-2.0]) ** 2).to_nested(), [4.0])

    def test_zero_to_negative_power(self):
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([0.0, 2.0]) ** -1.0
        with self.assertRaises(NDArrayArithmeticError):
            NDArray([0.0, 1.0]) ** NDArray([-0.5, 1.0])
        self.assertEqual((NDArray([0.0, 2.0]) ** 0.0).to_nested(), [1.0, 1.0])
        self.assertEqual((NDArray([2.0, 4.0]) ** -1.0).to_nested(), [0.5, 0.25])


class TestNDArrayUnary(unittest.TestCase):
    def test_exp_log_sqrt_abs_match_numpy(self):
        x = np.array([[0.5, 1.0], [2.0, 3.0]], dtype=np.float32)
        a = NDArray.from_numpy(x)
        np.testing.assert_allclose(a.exp().to_numpy(), np.exp(x), rtol=1e-6)
        np.testing.assert_allclose(a.log().to_numpy(), np.log(x), rtol=1e-6)
        np.testing.assert_allclose(a.sqrt().to_numpy(), np.sqrt(x), rtol=1e-6)
        self.assertEqual(abs(NDArray([-1.5, 2.0])).to_nested(), [1.5, 2.0])


class TestNDArrayMasks(unittest.TestCase):
    def test_equal_and_greater_are_float_masks(self):
        a = NDArray([1.0, 2.0, 3.0])
        self.assertEqual(a.equal(2.0).to_nested(), [0.0, 1.0, 0.0])
        self.assertEqual(a.greater([0.0, 2.0, 2.0]).to_nested(), [1.0, 0.0, 1.0])

    def test_where_broadcasts(self):
        cond = NDArray([[1.0], [0.0]])
        out = NDArray.where(cond, NDArray([1.0, 2.0]), -1.0)
        self.assertEqual(out.to_nested(), [[1.0, 2.0], [-1.0, -1.0]])


if __name__ == "__main__":
    unittest.main()
