"""
Unit tests for NDArray gather, select, slicing, scatter and the
softmax / cross-entropy helpers.
"""

import unittest

import numpy as np

from ndgrad import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    NDArray,
    ShapeMismatchError,
)


class TestNDArrayGatherSelect(unittest.TestCase):
    def setUp(self):
        self.table = NDArray([[0, 1], [10, 11], [20, 21], [30, 31]])

    def test_gather_rows_with_index_shape(self):
        idx = np.array([[0, 3, 3], [1, 2, 0]])
        out = self.table.gather(idx)
        self.assertEqual(out.shape, (2, 3, 2))
        self.assertEqual(out.to_nested()[0][1], [30.0, 31.0])

    def test_gather_accepts_float_index_arrays(self):
        out = self.table.gather(NDArray([2.0, -1.0]))
        self.assertEqual(out.to_nested(), [[20, 21], [30, 31]])

    def test_gather_scalar_index_drops_axis(self):
        self.assertEqual(self.table.gather(1).to_nested(), [10.0, 11.0])

    def test_gather_result_does_not_alias(self):
        out = self.table.gather(0)
        out.set_index([0], 99.0)
        self.assertEqual(self.table.to_nested()[0], [0.0, 1.0])

    def test_gather_index_errors(self):
        with self.assertRaises(IndexOutOfRangeError):
            self.table.gather([4])
        with self.assertRaises(IndexOutOfRangeError):
            self.table.gather([-5])
        with self.assertRaises(InvalidArgumentError):
            self.table.gather([0.5])
        with self.assertRaises(InvalidArgumentError):
            self.table.gather(np.array([True, False]))

    def test_select_coordinates(self):
        out = self.table.select([0, 1, 3], [1, 0, 1])
        self.assertEqual(out.to_nested(), [1.0, 10.0, 31.0])

    def test_select_needs_one_array_per_axis(self):
        with self.assertRaises(InvalidArgumentError):
            self.table.select([0, 1])

    def test_index_row(self):
        self.assertEqual(self.table.index_row(2).to_nested(), [20.0, 21.0])
        with self.assertRaises(IndexOutOfRangeError):
            self.table.index_row(4)
        with self.assertRaises(TypeError):
            self.table.index_row(1.0)
        with self.assertRaises(InvalidArgumentError):
            NDArray(1.0).index_row(0)


class TestNDArraySliceAxis(unittest.TestCase):
    def test_slice_columns(self):
        a = NDArray([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(a.slice_axis(1, 1, 3).to_nested(), [[2, 3], [5, 6]])
        self.assertEqual(a.slice_axis(-1, 0, 0).shape, (2, 0))

    def test_slice_bounds(self):
        a = NDArray.zeros((2, 3))
        with self.assertRaises(IndexOutOfRangeError):
            a.slice_axis(1, 2, 4)
        with self.assertRaises(IndexOutOfRangeError):
            a.slice_axis(1, 2, 1)


class TestNDArrayScatter(unittest.TestCase):
    def test_scatter_add_accumulates_repeats(self):
        g = NDArray.zeros((3, 2))
        g.scatter_add_([0, 2, 0], NDArray([[1, 1], [2, 2], [3, 3]]))
        self.assertEqual(g.to_nested(), [[4, 4], [0, 0], [2, 2]])

    def test_scatter_add_is_adjoint_of_select(self):
        g = NDArray.zeros((2, 2))
        g.scatter_add_(([0, 0, 1], [1, 1, 0]), NDArray([1.0, 2.0, 5.0]))
        self.assertEqual(g.to_nested(), [[0, 3], [5, 0]])

    def test_set_index_last_write_wins(self):
        g = NDArray.zeros((3,))
        g.set_index([1, 1], NDArray([4.0, 7.0]))
        self.assertEqual(g.to_nested(), [0.0, 7.0, 0.0])

    def test_scatter_values_must_fit(self):
        g = NDArray.zeros((3, 2))
        with self.assertRaises(ShapeMismatchError):
            g.scatter_add_([0, 1], NDArray.ones((3, 2)))


class TestNDArraySoftmaxCrossEntropy(unittest.TestCase):
    def test_softmax_rows_sum_to_one(self):
        logits = NDArray([[1.0, 2.0, 3.0], [1000.0, 1000.0, 1000.0]])
        p = logits.softmax(axis=1)
        np.testing.assert_allclose(p.sum(axis=1).to_numpy(), [1.0, 1.0], rtol=1e-6)
        np.testing.assert_allclose(p.to_numpy()[1], [1 / 3] * 3, rtol=1e-6)

    def test_log_softmax_is_log_of_softmax(self):
        x = NDArray([[0.5, -1.0, 2.0]])
        np.testing.assert_allclose(
            x.log_softmax().to_numpy(), np.log(x.softmax().to_numpy()), rtol=1e-5, atol=1e-6
        )

    def test_cross_entropy_matches_reference(self):
        x = np.array([[2.0, 0.5, -1.0], [0.1, 0.2, 0.3]], dtype=np.float64)
        y = np.array([0, 2])
        shifted = x - x.max(axis=1, keepdims=True)
        logp = shifted - np.log(np.exp(shifted).sum(axis=1, keepdims=True))
        expected = -logp[np.arange(2), y].mean()

        loss = NDArray.from_numpy(x).cross_entropy(y)
        self.assertEqual(loss.shape, ())
        self.assertAlmostEqual(loss.item(), expected, places=5)

    def test_uniform_logits_give_log_classes(self):
        loss = NDArray.zeros((4, 27)).cross_entropy([0, 5, 26, 3])
        self.assertAlmostEqual(loss.item(), float(np.log(27.0)), places=5)

    def test_cross_entropy_argument_errors(self):
        with self.assertRaises(InvalidArgumentError):
            NDArray.zeros((3,)).cross_entropy([0])
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 3)).cross_entropy([0, 1, 2])
        with self.assertRaises(IndexOutOfRangeError):
            NDArray.zeros((2, 3)).cross_entropy([0, 3])


if __name__ == "__main__":
    unittest.main()
