"""Placement of a tensor's elements over fixed-height storage columns.

A `VarTensor` describes a block of columns, each with `col_size` usable rows,
that stores the elements of a tensor of shape `dims` in row-major order.
Element `i` (after an `offset`) lives in column `i // col_size` at row
`i % col_size`.
"""

from __future__ import annotations

import dataclasses
import enum
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

__all__ = ["ColumnKind", "VarTensor"]

DEFAULT_BLINDING_FACTORS = 5


class ColumnKind(enum.Enum):
    """The kind of column a `VarTensor` is stored in."""

    ADVICE = "advice"
    FIXED = "fixed"


def _usable_rows(k: int, max_rot: int, blinding_factors: int) -> int:
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if blinding_factors < 0:
        raise ValueError(f"blinding_factors must be non-negative, got {blinding_factors}")
    rows = min(max_rot, 2**k - blinding_factors - 1)
    if rows <= 0:
        raise ValueError(
            f"no usable rows: k={k}, max_rot={max_rot}, blinding_factors={blinding_factors}"
        )
    return rows


@dataclass(frozen=True)
class VarTensor:
    """A set of columns laid out to hold a tensor of shape `dims`.

    `col_size` is the number of rows used in each column and `capacity` the
    number of cells the block must hold.  The shape of the storage and the
    shape of the represented tensor may differ.
    """

    kind: ColumnKind
    column_count: int
    col_size: int
    capacity: int
    dims: tuple[int, ...]
    equality: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "dims", tuple(self.dims))
        if self.col_size <= 0:
            raise ValueError(f"col_size must be positive, got {self.col_size}")
        if self.column_count < 0:
            raise ValueError(f"column_count must be non-negative, got {self.column_count}")
        if self.capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {self.capacity}")

    @classmethod
    def _new(
        cls,
        kind: ColumnKind,
        k: int,
        capacity: int,
        dims: Sequence[int],
        equality: bool,
        max_rot: int,
        blinding_factors: int,
    ) -> "VarTensor":
        rows = _usable_rows(k, max_rot, blinding_factors)
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        return cls(
            kind=kind,
            column_count=capacity // rows + 1,
            col_size=rows,
            capacity=capacity,
            dims=tuple(dims),
            equality=equality,
        )

    @classmethod
    def new_advice(
        cls,
        k: int,
        capacity: int,
        dims: Sequence[int],
        equality: bool,
        max_rot: int,
        blinding_factors: int = DEFAULT_BLINDING_FACTORS,
    ) -> "VarTensor":
        """Lay out advice columns for `capacity` cells in a circuit of 2**k rows.

        Each column uses at most `max_rot` rows and never the last
        `blinding_factors + 1` rows of the circuit.
        """
        return cls._new(
            ColumnKind.ADVICE, k, capacity, dims, equality, max_rot, blinding_factors
        )

    @classmethod
    def new_fixed(
        cls,
        k: int,
        capacity: int,
        dims: Sequence[int],
        equality: bool,
        max_rot: int,
        blinding_factors: int = DEFAULT_BLINDING_FACTORS,
    ) -> "VarTensor":
        """Lay out fixed columns for `capacity` cells in a circuit of 2**k rows."""
        return cls._new(
            ColumnKind.FIXED, k, capacity, dims, equality, max_rot, blinding_factors
        )

    def num_cols(self) -> int:
        """The number of columns in the block."""
        return self.column_count

    def reshape(self, new_dims: Sequence[int]) -> "VarTensor":
        """Return the same storage representing a tensor of shape `new_dims`."""
        return dataclasses.replace(self, dims=tuple(new_dims))

    def cartesian_coord(self, linear_coord: int) -> tuple[int, int]:
        """Map a linear position to its (column, row) in the storage block."""
        if linear_coord < 0:
            raise ValueError(f"linear coordinate must be non-negative, got {linear_coord}")
        return divmod(linear_coord, self.col_size)

    def positions(self, offset: int = 0) -> Iterator[tuple[int, int]]:
        """Yield the (column, row) of every element of the tensor, starting at `offset`.

        Raises IndexError when a position falls beyond the block's columns.
        """
        for i in range(math.prod(self.dims)):
            column, row = self.cartesian_coord(offset + i)
            if column >= self.column_count:
                raise IndexError(
                    f"element {i} at offset {offset} needs column {column}, "
                    f"but only {self.column_count} exist"
                )
            yield column, row