from typing import Any, Sequence, TypeVar
import numpy as np

X = TypeVar('X')

EPSILON = np.finfo(float).eps
SMALL_EPSILON_FACTOR = 5


def copy_table_3d(
    in_table: Any,
    out_table: Any,
    d1: int,
    d2: int,
    d3: int
) -> None:
    """
    Copies in_table[i][j][k] into out_table[i][j][k] for every index
    below (d1, d2, d3). Both containers only need to support three chained
    [] operations. The dimensions are trusted, no size checks are done on
    the containers themselves.
    """
    for i in range(d1):
        for j in range(d2):
            for k in range(d3):
                out_table[i][j][k] = in_table[i][j][k]


def verify_table_3d(table: Any, d1: int, d2: int, d3: int) -> bool:
    shape = getattr(table, 'shape', None)
    if shape is not None:
        return tuple(shape) == (d1, d2, d3)
    # index rather than iterate, so int-keyed nested dicts qualify too
    try:
        return len(table) == d1 and\
            all(len(table[i]) == d2 for i in range(d1)) and\
            all(len(table[i][j]) == d3
                for i in range(d1) for j in range(d2))
    except (TypeError, KeyError, IndexError):
        return False


def check_equal_small(a: float, b: float) -> bool:
    """
    Meant for numbers near [0, 1] (probabilities). Outside that range the
    absolute tolerance becomes meaningless, use check_equal_general.
    """
    return abs(a - b) <= SMALL_EPSILON_FACTOR * EPSILON


def check_different_small(a: float, b: float) -> bool:
    return not check_equal_small(a, b)


def check_equal_general(a: float, b: float) -> bool:
    if check_equal_small(a, b):
        return True
    m = min(abs(a), abs(b))
    # a zero here means the other value is further than the small tolerance
    if m == 0.:
        return False
    return abs(a - b) / m < EPSILON


def check_different_general(a: float, b: float) -> bool:
    return not check_equal_general(a, b)


def veccmp(lhs: Sequence[X], rhs: Sequence[X]) -> int:
    if len(lhs) != len(rhs):
        raise ValueError(
            "veccmp needs equal sizes, got %d and %d" % (len(lhs), len(rhs))
        )
    for l, r in zip(lhs, rhs):
        if l > r:
            return 1
        if l < r:
            return -1
    return 0


def vec_lt(lhs: Sequence[X], rhs: Sequence[X]) -> bool:
    return veccmp(lhs, rhs) < 0


def vec_gt(lhs: Sequence[X], rhs: Sequence[X]) -> bool:
    return veccmp(lhs, rhs) > 0


def sequential_sorted_contains(v: Sequence[X], elem: X) -> bool:
    """
    Membership test for a sorted (ascending) sequence by linear scan.
    For short sequences this beats bisect, do not use it on long ones.
    """
    for e in v:
        if e < elem:
            continue
        return e == elem
    return False


def has_base(it: Any) -> bool:
    # numpy flatiter/ndarray expose base as plain attribute, not a method
    return callable(getattr(it, 'base', None))


def base_iter(it: Any) -> Any:
    """
    Returns the underlying iterator of an adapted iterator (anything with
    a callable base() method), or the iterator itself when there is
    nothing to unwrap.
    """
    return it.base() if has_base(it) else it


if __name__ == '__main__':
    print(check_equal_small(0.1 + 0.2, 0.3))
    print(check_equal_general(1e20, 1e20 + 1e4))
    print(check_equal_general(1e20, 1.1e20))
    print(veccmp([1., 2., 3.], [1., 2., 4.]))
    print(vec_gt([2., 0.], [1., 9.]))
    print(sequential_sorted_contains([1, 3, 5, 7], 5))
    print(sequential_sorted_contains([1, 3, 5, 7], 4))
