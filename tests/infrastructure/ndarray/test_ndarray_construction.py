"""
Unit tests for NDArray construction, factories and conversions.
"""

import unittest

import numpy as np

from ndgrad import DTYPE, InvalidArgumentError, NDArray, ShapeMismatchError


class TestNDArrayConstruction(unittest.TestCase):
    def test_flat_data_with_shape(self):
        a = NDArray([1, 2, 3, 4, 5, 6], shape=[2, 3])
        self.assertEqual(a.shape, (2, 3))
        self.assertEqual(a.ndim, 2)
        self.assertEqual(a.numel(), 6)
        self.assertEqual(a.dtype, DTYPE)
        self.assertEqual(a.to_nested(), [[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])

    def test_flat_data_count_must_match_shape(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray([1, 2, 3], shape=[2, 2])

    def test_negative_dimension_rejected(self):
        with self.assertRaises(InvalidArgumentError):
            NDArray([], shape=[-1, 0])

    def test_nested_round_trip(self):
        nested = [[[1.0, 2.0], [3.0, 4.0]], [[5.0, 6.0], [7.0, 8.0]]]
        a = NDArray(nested)
        self.assertEqual(a.shape, (2, 2, 2))
        self.assertEqual(a.to_nested(), nested)
        self.assertEqual(a.tolist(), nested)

    def test_ragged_nested_data_raises(self):
        with self.assertRaises(ShapeMismatchError):
            NDArray([[1, 2, 3], [4, 5]])
        with self.assertRaises(ShapeMismatchError):
            NDArray([[1, 2], 3])
        with self.assertRaises(ShapeMismatchError):
            NDArray([1, [2, 3]])

    def test_non_numeric_leaf_raises_type_error(self):
        with self.assertRaises(TypeError):
            NDArray([1.0, "x"])

    def test_scalar_is_rank_zero(self):
        a = NDArray(3.5)
        self.assertEqual(a.shape, ())
        self.assertEqual(a.ndim, 0)
        self.assertEqual(a.numel(), 1)
        self.assertEqual(a.item(), 3.5)
        self.assertEqual(a.to_nested(), 3.5)

    def test_empty_array(self):
        a = NDArray([])
        self.assertEqual(a.shape, (0,))
        self.assertEqual(a.numel(), 0)

    def test_from_numpy_copies_and_casts(self):
        src = np.arange(6, dtype=np.float64).reshape(2, 3)
        a = NDArray.from_numpy(src)
        src[0, 0] = 100.0
        self.assertEqual(a.dtype, np.float32)
        self.assertEqual(a.to_nested()[0][0], 0.0)
        np.testing.assert_array_equal(a.to_numpy(), np.arange(6).reshape(2, 3))

    def test_to_numpy_is_a_copy(self):
        a = NDArray([[1, 2], [3, 4]])
        out = a.to_numpy()
        out[0, 0] = -1.0
        self.assertEqual(a.to_nested()[0][0], 1.0)

    def test_data_is_read_only_flat_view(self):
        a = NDArray([[1, 2], [3, 4]])
        flat = a.data
        self.assertEqual(flat.shape, (4,))
        with self.assertRaises(ValueError):
            flat[0] = 10.0

    def test_copy_constructor_does_not_alias(self):
        a = NDArray([1, 2, 3])
        b = NDArray(a)
        b.set_index([0], 9.0)
        self.assertEqual(a.to_nested(), [1.0, 2.0, 3.0])
        self.assertEqual(b.to_nested(), [9.0, 2.0, 3.0])

    def test_factories(self):
        self.assertEqual(NDArray.zeros((2, 2)).to_nested(), [[0.0, 0.0], [0.0, 0.0]])
        self.assertEqual(NDArray.ones(3).to_nested(), [1.0, 1.0, 1.0])
        self.assertEqual(NDArray.full((1, 2), 7).to_nested(), [[7.0, 7.0]])
        self.assertEqual(NDArray.arange(4).to_nested(), [0.0, 1.0, 2.0, 3.0])
        self.assertEqual(NDArray.arange(1, 7, 2).to_nested(), [1.0, 3.0, 5.0])
        with self.assertRaises(InvalidArgumentError):
            NDArray.arange(0, 5, 0)

    def test_like_factories_keep_shape(self):
        a = NDArray([[1, 2, 3]])
        self.assertEqual(a.zeros_like().shape, (1, 3))
        self.assertEqual(a.ones_like().to_nested(), [[1.0, 1.0, 1.0]])

    def test_strides_are_row_major(self):
        self.assertEqual(NDArray.zeros((2, 3, 4)).strides, (12, 4, 1))
        self.assertEqual(NDArray(1.0).strides, ())

    def test_item_requires_single_element(self):
        self.assertEqual(NDArray([[2.0]]).item(), 2.0)
        with self.assertRaises(InvalidArgumentError):
            NDArray([1.0, 2.0]).item()

    def test_structural_equality(self):
        a = NDArray([1, 2, 3, 4], shape=[2, 2])
        self.assertEqual(a, NDArray([[1, 2], [3, 4]]))
        self.assertNotEqual(a, NDArray([1, 2, 3, 4]))
        self.assertNotEqual(a, NDArray([[1, 2], [3, 5]]))
        self.assertEqual(a, [[1, 2], [3, 4]])

    def test_allclose(self):
        a = NDArray([1.0, 2.0])
        self.assertTrue(a.allclose([1.0 + 1e-7, 2.0]))
        self.assertFalse(a.allclose([1.1, 2.0]))
        self.assertFalse(a.allclose([[1.0, 2.0]]))

    def test_len_iter_and_row_indexing(self):
        a = NDArray([[1, 2], [3, 4], [5, 6]])
        self.assertEqual(len(a), 3)
        rows = [r.to_nested() for r in a]
        self.assertEqual(rows, [[1.0, 2.0], [3.0, 4.0], [5.0, 6.0]])
        self.assertEqual(a[-1].to_nested(), [5.0, 6.0])
        with self.assertRaises(TypeError):
            len(NDArray(1.0))

    def test_numpy_interop(self):
        a = NDArray([[1, 2], [3, 4]])
        np.testing.assert_array_equal(np.asarray(a), [[1, 2], [3, 4]])
        self.assertEqual(float(NDArray([5.0])), 5.0)

    def test_repr_mentions_shape(self):
        self.assertIn("shape=(2,)", repr(NDArray([1, 2])))


if __name__ == "__main__":
    unittest.main()
