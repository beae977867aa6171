import itertools
import math

import pytest
from hypothesis import given, strategies as st

from zktensor.tensor import (
    DimError,
    DimMismatchError,
    Tensor,
    TensorError,
    WrongMethodError,
    tmax,
)


def test_tensor_holds_data():
    data = [-1.0, 0.0, 1.0, 2.5]
    tensor = Tensor(data, [2, 2])
    assert tensor[:] == data


def test_tensor_clone_equal():
    x = Tensor([1, 2, 3], [3])
    clone = x.map(lambda v: v)
    assert x == clone


def test_tensor_eq():
    a = Tensor([1, 2, 3], [3])
    b = Tensor([1, 2, 3], [3, 1])
    b.reshape([3])
    c = Tensor([1, 2, 4], [3])
    d = Tensor([1, 2, 4], [3, 1])
    assert a == b
    assert not (a == c)
    assert not (a == d)


def test_tensor_slice():
    a = Tensor([1, 2, 3, 4, 5, 6], [2, 3])
    b = Tensor([1, 4], [2])
    assert a.get_slice([range(0, 2), range(0, 1)]) == b


def test_set():
    a = Tensor(None, [3, 3, 3])
    a.set([0, 0, 1], 10)
    assert a[0 + 0 + 1] == 10
    a.set([2, 2, 0], 9)
    assert a[2 * 9 + 2 * 3 + 0] == 9


def test_get():
    a = Tensor(None, [2, 3, 5])
    a[1 * 15 + 1 * 5 + 1] = 5
    assert a.get([1, 1, 1]) == 5


def test_get_slice_1d():
    a = Tensor([1, 2, 3], [3])
    b = Tensor([1, 2], [2])
    assert a.get_slice([range(0, 2)]) == b


def test_get_slice_too_many_indices():
    a = Tensor([1, 2, 3], [3])
    with pytest.raises(DimError):
        a.get_slice([range(0, 1), range(0, 1)])


def test_get_index():
    a = Tensor(None, [3, 3, 3])
    assert a.get_index([2, 2, 2]) == 26
    assert a.get_index([1, 2, 2]) == 17
    assert a.get_index([1, 2, 0]) == 15
    assert a.get_index([1, 0, 1]) == 10


def test_get_index_out_of_range():
    a = Tensor(None, [3, 3])
    with pytest.raises(IndexError):
        a.get_index([3, 0])


def test_get_index_wrong_rank():
    a = Tensor(None, [3, 3])
    with pytest.raises(DimError):
        a.get_index([1])


def test_reshape():
    a = Tensor(None, [3, 3, 3])
    a.reshape([9, 3])
    assert a.dims() == (9, 3)


def test_reshape_bad_size():
    a = Tensor(None, [3, 3])
    with pytest.raises(DimError):
        a.reshape([4, 2])


def test_flatten():
    a = Tensor(None, [3, 3, 3])
    a.flatten()
    assert a.dims() == (27,)


def test_map():
    a = Tensor([1, 4], [2])
    c = a.map(lambda x: x**2)
    assert c == Tensor.from_iterable([1, 16])


def test_enum_map():
    a = Tensor([1, 4], [2])
    c = a.enum_map(lambda i, x: (x + i) ** 2)
    assert c == Tensor.from_iterable([1, 25])


def test_enum_map_propagates_error():
    a = Tensor([1, 4], [2])

    def fail(i, x):
        raise DimMismatchError("test")

    with pytest.raises(DimMismatchError, match="dimension mismatch in tensor op: test"):
        a.enum_map(fail)


def test_mc_enum_map():
    a = Tensor([1, 4], [2])
    c = a.mc_enum_map(lambda i, x: (x + i[0]) ** 2)
    assert c == Tensor.from_iterable([1, 25])


def test_mc_enum_map_keeps_shape():
    a = Tensor([0, 0, 0, 0, 0, 0], [2, 3])
    c = a.mc_enum_map(lambda coord, x: coord[0] * 10 + coord[1])
    assert c == Tensor([0, 1, 2, 10, 11, 12], [2, 3])


def test_combine():
    a = Tensor([1, 2, 3, 4, 5, 6], [2, 3])
    b = Tensor([1, 4], [2, 1])
    c = Tensor([a, b], [2])
    d = c.combine()
    assert d.dims() == (8,)
    assert list(d) == [1, 2, 3, 4, 5, 6, 1, 4]


def test_new_wrong_length():
    with pytest.raises(DimError):
        Tensor([1, 2, 3], [2, 2])


def test_new_none_is_zeros():
    t = Tensor(None, [2, 2])
    assert list(t) == [0, 0, 0, 0]
    assert len(t) == 4


def test_is_empty():
    assert Tensor(None, [0, 3]).is_empty() is True
    assert Tensor(None, [1]).is_empty() is False


def test_error_messages():
    assert str(DimError()) == "dimensionality error when manipulating a tensor"
    assert str(WrongMethodError()) == "wrong method called"
    assert isinstance(DimMismatchError("x"), TensorError)


def test_tmax():
    assert tmax(3, 5) == 5
    assert tmax(5, 3) == 5
    assert tmax(1.5, -2.0) == 1.5
    assert tmax(math.nan, 2.0) == 2.0
    assert tmax(2.0, math.nan) == 2.0
    assert math.isnan(tmax(math.nan, math.nan))


dims_strategy = st.lists(st.integers(min_value=1, max_value=4), min_size=1, max_size=4)


@given(dims_strategy)
def test_get_index_is_bijection(dims):
    t = Tensor(None, dims)
    indices = [t.get_index(c) for c in itertools.product(*(range(d) for d in dims))]
    assert sorted(indices) == list(range(len(t)))


@given(dims_strategy)
def test_flatten_preserves_data(dims):
    t = Tensor(None, dims).enum_map(lambda i, _: i)
    data = list(t)
    t.flatten()
    assert t.dims() == (math.prod(dims),)
    assert list(t) == data


@given(dims_strategy)
def test_full_slice_preserves_values(dims):
    t = Tensor(None, dims).enum_map(lambda i, _: i)
    s = t.get_slice([range(d) for d in dims])
    assert list(s) == list(t)
    assert math.prod(s.dims()) == len(t)