import numpy as np
import pytest
from utils.gen_utils import EPSILON, copy_table_3d, verify_table_3d
from utils.gen_utils import check_equal_small, check_different_small
from utils.gen_utils import check_equal_general, check_different_general
from utils.gen_utils import veccmp, vec_lt, vec_gt
from utils.gen_utils import sequential_sorted_contains, base_iter


def test_copy_table_3d_from_nested_lists():
    src = [[[1, 2], [3, 4]], [[5, 6], [7, 8]]]
    out = np.zeros((2, 2, 2))
    copy_table_3d(src, out, 2, 2, 2)
    assert out.tolist() == src


def test_copy_table_3d_only_touches_given_dims():
    src = np.ones((3, 3, 3))
    out = np.zeros((3, 3, 3))
    copy_table_3d(src, out, 2, 1, 3)
    assert out.sum() == 6.
    assert out[2].sum() == 0.


def test_verify_table_3d():
    assert verify_table_3d(np.zeros((2, 3, 2)), 2, 3, 2)
    assert not verify_table_3d(np.zeros((2, 3, 3)), 2, 3, 2)
    assert verify_table_3d([[[0, 0]], [[0, 0]]], 2, 1, 2)
    assert not verify_table_3d([[[0, 0]], [[0]]], 2, 1, 2)
    assert not verify_table_3d([[0, 0], [0, 0]], 2, 2, 1)
    assert verify_table_3d([], 0, 4, 0)


def test_verify_table_3d_nested_dicts():
    table = {s: {a: {s1: 0. for s1 in range(3)} for a in range(2)}
             for s in range(3)}
    assert verify_table_3d(table, 3, 2, 3)
    assert not verify_table_3d(table, 3, 2, 4)
    table[1] = {0: {0: 0., 1: 0., 2: 0.}, 5: {0: 0., 1: 0., 2: 0.}}
    assert not verify_table_3d(table, 3, 2, 3)


@pytest.mark.parametrize("x", [0., 1., -3.5, 1e300, 1e-300, 0.3])
def test_check_equal_small_reflexive(x):
    assert check_equal_small(x, x)
    assert not check_different_small(x, x)


def test_check_equal_small_tolerance():
    assert check_equal_small(0.1 + 0.2, 0.3)
    assert check_equal_small(1., 1. + 5 * EPSILON)
    assert check_different_small(0., 6 * EPSILON)
    assert check_different_small(0.5, 0.5001)


def test_check_equal_general_large_values():
    assert not check_equal_small(1e20, 1e20 + 1e4)
    assert check_equal_general(1e20, 1e20 + 1e4)
    assert check_different_general(1e20, 1.0000001e20)


def test_check_equal_general_zero_is_not_a_division():
    assert check_equal_general(0., 0.)
    assert check_different_general(0., 1.)
    assert check_different_general(-2., 0.)


@pytest.mark.parametrize("a, b", [
    (1., 2.), (1e20, 1e20 + 1e4), (0., 1e-17), (-5., 5.), (3.3, 3.3)
])
def test_check_equal_general_symmetric(a, b):
    assert check_equal_general(a, b) == check_equal_general(b, a)


def test_veccmp():
    v = [0.25, 0.5, 0.25]
    assert veccmp(v, v) == 0
    assert veccmp([1., 2., 3.], [1., 2., 4.]) == -1
    assert veccmp([1., 3., 0.], [1., 2., 4.]) == 1
    assert veccmp([], []) == 0


def test_veccmp_antisymmetric():
    a = np.array([0.1, 0.7, 0.2])
    b = np.array([0.1, 0.6, 0.3])
    assert veccmp(a, b) == -veccmp(b, a)
    assert vec_gt(a, b)
    assert vec_lt(b, a)
    assert not vec_lt(a, a)
    assert not vec_gt(a, a)


def test_veccmp_rejects_unequal_sizes():
    with pytest.raises(ValueError):
        veccmp([1, 2], [1, 2, 3])


def test_sequential_sorted_contains():
    v = [1, 3, 5, 7]
    assert sequential_sorted_contains(v, 5)
    assert sequential_sorted_contains(v, 1)
    assert sequential_sorted_contains(v, 7)
    assert not sequential_sorted_contains(v, 4)
    assert not sequential_sorted_contains(v, 8)
    assert not sequential_sorted_contains(v, 0)
    assert not sequential_sorted_contains([], 0)


class Unwrapping:

    def __init__(self, it):
        self.it = it

    def base(self):
        return self.it

    def __iter__(self):
        return self

    def __next__(self):
        return next(self.it)


def test_base_iter_unwraps_adapted_iterator():
    inner = iter([1, 2, 3])
    assert base_iter(Unwrapping(inner)) is inner


def test_base_iter_returns_plain_iterator():
    it = iter([1, 2, 3])
    assert base_iter(it) is it
    r = reversed([1, 2])
    assert base_iter(r) is r


def test_base_iter_ignores_non_callable_base():
    flat = np.arange(4).flat
    assert base_iter(flat) is flat
    arr = np.arange(4)[1:]
    assert base_iter(arr) is arr
