"""
Unit tests for NDArray matmul and shape manipulation.
"""

import unittest

import numpy as np

from ndgrad import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    NDArray,
    ShapeMismatchError,
)


class TestNDArrayMatmul(unittest.TestCase):
    def setUp(self):
        self.rng = np.random.default_rng(1)

    def _rand(self, *shape):
        return self.rng.normal(size=shape).astype(np.float32)

    def test_matrix_product(self):
        a, b = self._rand(4, 3), self._rand(3, 5)
        out = NDArray.from_numpy(a) @ NDArray.from_numpy(b)
        self.assertEqual(out.shape, (4, 5))
        np.testing.assert_allclose(out.to_numpy(), a @ b, rtol=1e-5, atol=1e-5)

    def test_vector_cases(self):
        v, w, m = self._rand(3), self._rand(3), self._rand(3, 2)
        dot = NDArray.from_numpy(v).matmul(NDArray.from_numpy(w))
        self.assertEqual(dot.shape, ())
        self.assertAlmostEqual(dot.item(), float(v @ w), places=5)

        self.assertEqual((NDArray.from_numpy(v) @ NDArray.from_numpy(m)).shape, (2,))
        self.assertEqual((NDArray.from_numpy(m.T) @ NDArray.from_numpy(v)).shape, (2,))

    def test_batched_product_broadcasts_batch(self):
        a, b = self._rand(2, 1, 4, 3), self._rand(5, 3, 2)
        out = NDArray.from_numpy(a) @ NDArray.from_numpy(b)
        self.assertEqual(out.shape, (2, 5, 4, 2))
        np.testing.assert_allclose(out.to_numpy(), np.matmul(a, b), rtol=1e-5, atol=1e-5)

    def test_inner_dimension_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 3)) @ NDArray.zeros((4, 2))
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((3,)) @ NDArray.zeros((4,))

    def test_rank_zero_operand_rejected(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray(2.0) @ NDArray.zeros((2, 2))

    def test_batch_mismatch(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 2, 3)) @ NDArray.zeros((3, 3, 2))


class TestNDArrayReshape(unittest.TestCase):
    def test_reshape_forms(self):
        a = NDArray.arange(12)
        self.assertEqual(a.reshape(3, 4).shape, (3, 4))
        self.assertEqual(a.reshape((2, 6)).shape, (2, 6))
        self.assertEqual(a.reshape([2, -1, 3]).shape, (2, 2, 3))
        self.assertEqual(a.reshape(-1).shape, (12,))
        self.assertEqual(a.reshape(3, 4).flatten().to_nested(), a.to_nested())

    def test_reshape_preserves_row_major_order(self):
        a = NDArray([[1, 2, 3], [4, 5, 6]])
        self.assertEqual(a.reshape(3, 2).to_nested(), [[1, 2], [3, 4], [5, 6]])

    def test_two_unknown_dimensions(self):
        with self.assertRaises(InvalidArgumentError):
            NDArray.zeros((2, 6)).reshape(-1, -1)

    def test_size_must_be_preserved(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 6)).reshape(5, 2)
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 6)).reshape(-1, 5)

    def test_invalid_dimension(self):
        with self.assertRaises(InvalidArgumentError):
            NDArray.zeros((4,)).reshape(-2, -2)
        with self.assertRaises(InvalidArgumentError):
            NDArray.zeros((4,)).reshape(2, -3)

    def test_expand_and_squeeze(self):
        a = NDArray.zeros((2, 3))
        self.assertEqual(a.expand_dims(0).shape, (1, 2, 3))
        self.assertEqual(a.expand_dims(-1).shape, (2, 3, 1))
        self.assertEqual(NDArray.zeros((1, 3, 1)).squeeze().shape, (3,))
        self.assertEqual(NDArray.zeros((1, 3, 1)).squeeze(-1).shape, (1, 3))
        with self.assertRaises(InvalidArgumentError):
            a.squeeze(0)

    def test_broadcast_to(self):
        a = NDArray([[1.0], [2.0]])
        self.assertEqual(a.broadcast_to((2, 3)).to_nested(), [[1, 1, 1], [2, 2, 2]])
        with self.assertRaises(ShapeMismatchError):
            a.broadcast_to((3, 3))
        with self.assertRaises(ShapeMismatchError):
            NDArray.zeros((2, 3)).broadcast_to((3,))


class TestNDArrayTranspose(unittest.TestCase):
    def test_square_transpose(self):
        a = NDArray([1, 2, 3, 4], shape=[2, 2])
        self.assertEqual(a.transpose().to_nested(), [[1.0, 3.0], [2.0, 4.0]])
        self.assertEqual(a.T.to_nested(), [[1.0, 3.0], [2.0, 4.0]])

    def test_transpose_owns_contiguous_buffer(self):
        x = np.arange(6, dtype=np.float32).reshape(2, 3)
        t = NDArray.from_numpy(x).transpose()
        self.assertEqual(t.shape, (3, 2))
        self.assertEqual(t.strides, (2, 1))
        np.testing.assert_array_equal(t.data, x.T.reshape(-1))

    def test_swap_and_permute(self):
        x = np.arange(24, dtype=np.float32).reshape(2, 3, 4)
        a = NDArray.from_numpy(x)
        np.testing.assert_array_equal(a.transpose(0, 2).to_numpy(), np.swapaxes(x, 0, 2))
        np.testing.assert_array_equal(a.permute((2, 0, 1)).to_numpy(), np.transpose(x, (2, 0, 1)))
        with self.assertRaises(InvalidArgumentError):
            a.permute((0, 0, 1))
        with self.assertRaises(IndexOutOfRangeError):
            a.transpose(0, 3)

    def test_vector_T_is_a_copy(self):
        v = NDArray([1.0, 2.0])
        self.assertEqual(v.T, v)
        self.assertIsNot(v.T, v)


class TestNDArrayJoinSplit(unittest.TestCase):
    def test_concatenate(self):
        a = NDArray([[1, 2]])
        b = NDArray([[3, 4], [5, 6]])
        self.assertEqual(
            NDArray.concatenate([a, b]).to_nested(), [[1, 2], [3, 4], [5, 6]]
        )
        self.assertEqual(
            NDArray.concatenate([b, b], axis=-1).shape, (2, 4)
        )

    def test_concatenate_errors(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray.concatenate([NDArray.zeros((2, 2)), NDArray.zeros((2, 3))], axis=0)
        with self.assertRaises(ShapeMismatchError):
            NDArray.concatenate([NDArray.zeros((2, 2)), NDArray.zeros((2,))])
        with self.assertRaises(InvalidArgumentError):
            NDArray.concatenate([])
        with self.assertRaises(IndexOutOfRangeError):
            NDArray.concatenate([NDArray.zeros((2,))], axis=1)

    def test_stack(self):
        a, b = NDArray([1, 2, 3]), NDArray([4, 5, 6])
        self.assertEqual(NDArray.stack([a, b]).shape, (2, 3))
        self.assertEqual(NDArray.stack([a, b], axis=1).to_nested(), [[1, 4], [2, 5], [3, 6]])
        with self.assertRaises(ShapeMismatchError):
            NDArray.stack([a, NDArray([1, 2])])

    def test_split_equal_sections(self):
        a = NDArray.arange(12).reshape(6, 2)
        parts = a.split(3)
        self.assertEqual([p.shape for p in parts], [(2, 2)] * 3)
        self.assertEqual(NDArray.concatenate(parts), a)

    def test_split_at_indices(self):
        a = NDArray.arange(10).reshape(2, 5)
        parts = a.split([1, 4], axis=1)
        self.assertEqual([p.shape for p in parts], [(2, 1), (2, 3), (2, 1)])
        self.assertEqual(NDArray.concatenate(parts, axis=1), a)

    def test_split_errors(self):
        a = NDArray.zeros((5, 2))
        with self.assertRaises(ShapeMismatchError):
            a.split(2)
        with self.assertRaises(InvalidArgumentError):
            a.split(0)
        with self.assertRaises(InvalidArgumentError):
            a.split([3, 1])


if __name__ == "__main__":
    unittest.main()
