"""A generic multi-dimensional array stored as a flat list plus its dimensions."""

from __future__ import annotations

import itertools
import math
from collections.abc import Callable, Iterable, Iterator, Sequence
from typing import Any

__all__ = [
    "TensorError",
    "DimMismatchError",
    "DimError",
    "WrongMethodError",
    "tmax",
    "Tensor",
]


class TensorError(Exception):
    """Base class for tensor related errors."""


class DimMismatchError(TensorError):
    """Shapes of the operands of a tensor operation do not agree."""

    def __init__(self, op: str) -> None:
        super().__init__(f"dimension mismatch in tensor op: {op}")
        self.op = op


class DimError(TensorError):
    """A shape is inconsistent with the data it describes."""

    def __init__(self) -> None:
        super().__init__("dimensionality error when manipulating a tensor")


class WrongMethodError(TensorError):
    """A method was called on a tensor-like object that does not support it."""

    def __init__(self) -> None:
        super().__init__("wrong method called")


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def tmax(a: Any, b: Any) -> Any:
    """Return the larger of two values; a NaN loses to any number."""
    a_nan, b_nan = _is_nan(a), _is_nan(b)
    if a_nan and b_nan:
        return math.nan
    if a_nan:
        return b
    if b_nan:
        return a
    return a if a >= b else b


def _product(dims: Iterable[int]) -> int:
    return math.prod(dims)


class Tensor:
    """Values held in row-major order together with the dimensions that index them."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, values: Iterable[Any] | None, dims: Sequence[int]) -> None:
        dims = tuple(dims)
        total = _product(dims)
        if values is None:
            inner = [0] * total
        else:
            inner = list(values)
            if len(inner) != total:
                raise DimError()
        self._inner: list[Any] = inner
        self._dims: tuple[int, ...] = dims

    @classmethod
    def from_iterable(cls, values: Iterable[Any]) -> "Tensor":
        """Build a one-dimensional tensor from any iterable."""
        data = list(values)
        return cls(data, (len(data),))

    def __len__(self) -> int:
        return _product(self._dims)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._inner)

    def __getitem__(self, index: int | slice) -> Any:
        return self._inner[index]

    def __setitem__(self, index: int | slice, value: Any) -> None:
        self._inner[index] = value

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._dims == other._dims and self._inner == other._inner

    def __repr__(self) -> str:
        return f"Tensor({self._inner!r}, dims={list(self._dims)!r})"

    def is_empty(self) -> bool:
        """True when the tensor holds no elements."""
        return len(self) == 0

    def dims(self) -> tuple[int, ...]:
        """The tensor's dimensions."""
        return self._dims

    def get_index(self, indices: Sequence[int]) -> int:
        """Convert multi-dimensional coordinates into a flat index."""
        if len(indices) != len(self._dims):
            raise DimError()
        index = 0
        stride = 1
        for coord, dim in zip(reversed(indices), reversed(self._dims)):
            if not 0 <= coord < dim:
                raise IndexError(f"index {coord} out of range for dimension of size {dim}")
            index += coord * stride
            stride *= dim
        return index

    def set(self, indices: Sequence[int], value: Any) -> None:
        """Set the value at the given coordinates."""
        self._inner[self.get_index(indices)] = value

    def get(self, indices: Sequence[int]) -> Any:
        """Return the value at the given coordinates."""
        return self._inner[self.get_index(indices)]

    def get_slice(self, indices: Sequence[range]) -> "Tensor":
        """Return the sub-tensor selected by one range per leading dimension.

        Trailing dimensions that are not given are taken whole; leading
        dimensions of size one are dropped while more than one remains.
        """
        if len(self._dims) < len(indices):
            raise DimError()
        full = list(indices) + [range(d) for d in self._dims[len(indices):]]
        values = [self.get(coord) for coord in itertools.product(*full)]
        dims = [len(r) for r in full]
        for i in reversed(range(len(indices))):
            if dims[i] == 1 and len(dims) > 1:
                del dims[i]
        return Tensor(values, dims)

    def reshape(self, new_dims: Sequence[int]) -> None:
        """Change the shape in place; the element count must stay the same."""
        new_dims = tuple(new_dims)
        if len(self) != _product(new_dims):
            raise DimError()
        self._dims = new_dims

    def flatten(self) -> None:
        """Make the tensor one-dimensional in place."""
        self._dims = (len(self),)

    def map(self, func: Callable[[Any], Any]) -> "Tensor":
        """Apply a function to each element, keeping the shape."""
        return Tensor((func(x) for x in self._inner), self._dims)

    def enum_map(self, func: Callable[[int, Any], Any]) -> "Tensor":
        """Apply a function to each flat index and element, keeping the shape."""
        return Tensor((func(i, x) for i, x in enumerate(self._inner)), self._dims)

    def mc_enum_map(self, func: Callable[[tuple[int, ...], Any], Any]) -> "Tensor":
        """Apply a function to each coordinate tuple and element, keeping the shape."""
        coords = itertools.product(*(range(d) for d in self._dims))
        return Tensor((func(coord, self.get(coord)) for coord in coords), self._dims)

    def combine(self) -> "Tensor":
        """Concatenate a tensor of tensors into one flat tensor."""
        values: list[Any] = []
        for inner in self._inner:
            values.extend(inner)
        return Tensor(values, (len(values),))