"""
Unit tests for Tensor construction, properties and graph wiring.
"""

import unittest

import numpy as np

from ndgrad import BackwardState, INDArray, ITensor, InvalidOperationError, NDArray, Tensor


class TestTensorConstruction(unittest.TestCase):
    def test_nested_and_flat_construction(self):
        t = Tensor([[1.0, 2.0], [3.0, 4.0]])
        self.assertEqual(t.shape, (2, 2))
        self.assertEqual(t.ndim, 2)
        self.assertEqual(Tensor([1, 2, 3, 4], shape=[2, 2]).tolist(), t.tolist())

    def test_data_is_copied(self):
        arr = NDArray([1.0, 2.0])
        t = Tensor(arr)
        self.assertIsNot(t.data, arr)
        self.assertEqual(t.data, arr)

    def test_grad_buffer_follows_requires_grad(self):
        t = Tensor([[1.0, 2.0, 3.0]], requires_grad=True)
        self.assertTrue(t.requires_grad)
        self.assertEqual(t.grad, NDArray.zeros((1, 3)))

        c = Tensor([1.0])
        self.assertFalse(c.requires_grad)
        self.assertIsNone(c.grad)

    def test_leaf_properties(self):
        t = Tensor([1.0], requires_grad=True)
        self.assertTrue(t.is_leaf)
        self.assertIsNone(t.operation)
        self.assertEqual(t.children, ())
        self.assertIs(t.state, BackwardState.PENDING)

    def test_factories(self):
        self.assertEqual(Tensor.zeros((2, 3)).tolist(), [[0.0] * 3] * 2)
        self.assertEqual(Tensor.ones(2, requires_grad=True).grad.shape, (2,))
        t = Tensor.from_numpy(np.arange(3, dtype=np.int64))
        self.assertEqual(t.data.dtype, np.float32)
        self.assertEqual(t.tolist(), [0.0, 1.0, 2.0])

    def test_conversions(self):
        t = Tensor(2.5)
        self.assertEqual(t.shape, ())
        self.assertEqual(t.item(), 2.5)
        self.assertEqual(float(t), 2.5)
        self.assertEqual(t.numel(), 1)
        self.assertEqual(len(Tensor([[1, 2], [3, 4], [5, 6]])), 3)
        np.testing.assert_array_equal(Tensor([[1, 2]]).to_numpy(), [[1.0, 2.0]])

    def test_satisfies_interfaces(self):
        t = Tensor([1.0])
        self.assertIsInstance(t, ITensor)
        self.assertIsInstance(t.data, INDArray)

    def test_repr(self):
        self.assertIn("requires_grad=True", repr(Tensor([1.0], requires_grad=True)))


class TestTensorGraphWiring(unittest.TestCase):
    def test_output_records_operation_and_edges(self):
        a = Tensor([1.0, 2.0], requires_grad=True)
        b = Tensor([3.0, 4.0], requires_grad=True)
        c = a * b

        self.assertTrue(c.requires_grad)
        self.assertFalse(c.is_leaf)
        self.assertEqual(c.operation.function.__name__, "MulFn")
        self.assertEqual(tuple(c.operation.parents), (a, b))
        self.assertEqual([e.slot for e in a.children], [0])
        self.assertEqual([e.slot for e in b.children], [1])
        self.assertIs(a.children[0].target(), c)

    def test_constants_are_not_wired(self):
        a = Tensor([1.0, 2.0], requires_grad=True)
        k = Tensor([3.0, 4.0])
        c = a + k
        self.assertEqual(k.children, ())
        self.assertEqual(len(a.children), 1)
        self.assertEqual(c.operation.needs_input_grad, (True, False))

    def test_no_grad_inputs_give_plain_result(self):
        c = Tensor([1.0]) + 2.0
        self.assertFalse(c.requires_grad)
        self.assertIsNone(c.operation)
        self.assertIsNone(c.grad)

    def test_same_tensor_twice_records_two_edges(self):
        x = Tensor([3.0], requires_grad=True)
        y = x * x
        self.assertEqual(sorted(e.slot for e in x.children), [0, 1])
        del y

    def test_discarded_consumer_edge_is_pruned(self):
        x = Tensor([1.0], requires_grad=True)
        y = x * 2.0
        self.assertEqual(len(x.children), 1)
        del y
        self.assertEqual(x.children, ())

    def test_forward_errors_do_not_wire_graph(self):
        x = Tensor([1.0, 0.0], requires_grad=True)
        with self.assertRaises(ArithmeticError):
            Tensor([1.0, 1.0]) / x
        self.assertEqual(x.children, ())

    def test_requires_grad_toggle_only_on_leaves(self):
        x = Tensor([1.0, 2.0])
        x.requires_grad = True
        self.assertEqual(x.grad, NDArray.zeros(2))
        y = x * 2.0
        with self.assertRaises(InvalidOperationError):
            y.requires_grad = False
        x.requires_grad = False
        self.assertIsNone(x.grad)

    def test_transpose_property_on_low_rank(self):
        v = Tensor([1.0, 2.0], requires_grad=True)
        self.assertIs(v.T, v)
        self.assertEqual(v.data.T, v.data)
        m = Tensor([[1.0, 2.0]])
        self.assertEqual(m.T.shape, (2, 1))

    def test_detach_cuts_graph(self):
        x = Tensor([1.0, 2.0], requires_grad=True)
        d = (x * 2.0).detach()
        self.assertFalse(d.requires_grad)
        self.assertTrue(d.is_leaf)
        self.assertEqual(d.tolist(), [2.0, 4.0])


if __name__ == "__main__":
    unittest.main()
