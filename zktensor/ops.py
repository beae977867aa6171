"""Arithmetic, linear-algebra and pooling operations on tensors."""

from __future__ import annotations

import functools
import itertools
import operator
from collections.abc import Callable, Sequence
from typing import Any

from zktensor.tensor import DimMismatchError, Tensor, tmax

__all__ = [
    "affine",
    "scale_and_shift",
    "matmul",
    "add",
    "const_add",
    "sub",
    "const_sub",
    "mult",
    "div",
    "const_mult",
    "rescale",
    "pow",
    "sum",
    "convolution",
    "sumpool",
    "max_pool2d",
    "dot",
    "pad",
]


def _copy(t: Tensor) -> Tensor:
    return Tensor(list(t), t.dims())


def _slides(size: int, padding: int, window: int, stride: int, op: str) -> int:
    span = size + 2 * padding - window
    if span < 0:
        raise DimMismatchError(op)
    return span // stride + 1


def _divide(x: Any, y: Any) -> Any:
    """Divide, truncating toward zero when both operands are integers."""
    if isinstance(x, int) and isinstance(y, int):
        quotient = abs(x) // abs(y)
        return quotient if (x < 0) == (y < 0) else -quotient
    return x / y


def dot(inputs: Sequence[Tensor]) -> Tensor:
    """Dot product of two tensors with the same number of elements, as a one-element tensor."""
    if len(inputs) != 2 or len(inputs[0]) != len(inputs[1]):
        raise DimMismatchError("dot")
    a, b = inputs
    result = functools.reduce(lambda acc, pair: acc + pair[0] * pair[1], zip(a, b), 0)
    return Tensor([result], (1,))


def affine(inputs: Sequence[Tensor]) -> Tensor:
    """Compute kernel @ input + bias for inputs (input, kernel, bias).

    A one-dimensional input is treated as a column vector and the result
    is flattened back to one dimension.
    """
    if len(inputs) != 3:
        raise DimMismatchError("affine")
    inp, kernel, bias = inputs
    if (
        len(kernel.dims()) < 2
        or not bias.dims()
        or not inp.dims()
        or bias.dims()[0] != kernel.dims()[0]
        or inp.dims()[0] != kernel.dims()[1]
    ):
        raise DimMismatchError("affine")

    if len(inp.dims()) == 1:
        inp = Tensor(list(inp), (inp.dims()[0], 1))

    rows, cols = kernel.dims()[0], inp.dims()[1]
    output = Tensor(None, (rows, cols))
    for i, j in itertools.product(range(rows), range(cols)):
        prod = dot(
            [
                kernel.get_slice([range(i, i + 1)]),
                inp.get_slice([range(inp.dims()[0]), range(j, j + 1)]),
            ]
        )
        output.set((i, j), prod[0] + bias[i])

    if cols == 1:
        output.flatten()
    return output


def scale_and_shift(inputs: Sequence[Tensor]) -> Tensor:
    """Compute kernel * input + bias elementwise for inputs (input, kernel, bias)."""
    if (
        len(inputs) != 3
        or inputs[1].dims() != inputs[2].dims()
        or inputs[0].dims() != inputs[1].dims()
    ):
        raise DimMismatchError("scale and shift")
    inp, kernel, bias = inputs
    return Tensor((k * x + b for x, k, b in zip(inp, kernel, bias)), inp.dims())


def matmul(inputs: Sequence[Tensor]) -> Tensor:
    """Matrix multiply two tensors, batching over all but the last two dimensions."""
    if len(inputs) != 2:
        raise DimMismatchError("matmul")
    a, b = inputs
    a_dims, b_dims = a.dims(), b.dims()
    n = len(a_dims)
    if (
        n < 2
        or len(b_dims) < n
        or a_dims[n - 1] != b_dims[n - 2]
        or a_dims[: n - 2] != b_dims[: n - 2]
    ):
        raise DimMismatchError("matmul")

    dims = a_dims[: n - 2] + (a_dims[n - 2], b_dims[n - 1])
    output = Tensor(None, dims)
    for coord in itertools.product(*(range(d) for d in dims)):
        row = [range(c, c + 1) for c in coord[:-1]]
        col = [range(c, c + 1) for c in coord]
        col[n - 2] = range(b_dims[n - 2])
        prod = dot([a.get_slice(row), b.get_slice(col)])
        output.set(coord, prod[0])
    return output


def _elementwise(
    tensors: Sequence[Tensor],
    op: Callable[[Any, Any], Any],
    const_op: Callable[[Tensor, Any], Tensor],
    name: str,
) -> Tensor:
    if not tensors:
        raise DimMismatchError(name)
    if len(tensors) == 2 and tensors[1].dims() == (1,):
        return const_op(tensors[0], tensors[1][0])
    first = tensors[0]
    if any(t.dims() != first.dims() for t in tensors):
        raise DimMismatchError(name)
    output = _copy(first)
    for t in tensors[1:]:
        for i, value in enumerate(t):
            output[i] = op(output[i], value)
    return output


def add(tensors: Sequence[Tensor]) -> Tensor:
    """Add tensors of equal shape; a second tensor of shape [1] is added as a constant."""
    return _elementwise(tensors, operator.add, const_add, "add")


def const_add(a: Tensor, b: Any) -> Tensor:
    """Add a constant to every element."""
    return a.map(lambda x: x + b)


def sub(tensors: Sequence[Tensor]) -> Tensor:
    """Subtract the later tensors from the first; a second tensor of shape [1] is a constant."""
    return _elementwise(tensors, operator.sub, const_sub, "sub")


def const_sub(a: Tensor, b: Any) -> Tensor:
    """Subtract a constant from every element."""
    return a.map(lambda x: x - b)


def mult(tensors: Sequence[Tensor]) -> Tensor:
    """Multiply tensors elementwise; a second tensor of shape [1] is a constant."""
    return _elementwise(tensors, operator.mul, const_mult, "mult")


def div(t: Tensor, d: Tensor) -> Tensor:
    """Divide elementwise; integers divide with truncation toward zero."""
    if t.dims() != d.dims():
        raise DimMismatchError("div")
    return Tensor((_divide(x, y) for x, y in zip(t, d)), t.dims())


def const_mult(a: Tensor, b: Any) -> Tensor:
    """Multiply every element by a constant."""
    return a.map(lambda x: x * b)


def rescale(a: Tensor, mult: int) -> Tensor:
    """Add each element to itself until it appears `mult` times (at least once)."""
    count = max(mult, 1)
    return a.map(lambda x: functools.reduce(operator.add, itertools.repeat(x, count)))


def pow(a: Tensor, power: int) -> Tensor:
    """Raise each element to `power` by repeated multiplication (at least one factor)."""
    count = max(power, 1)
    return a.map(lambda x: functools.reduce(operator.mul, itertools.repeat(x, count)))


def sum(a: Tensor) -> Tensor:
    """Sum all elements into a one-element tensor."""
    return Tensor([functools.reduce(operator.add, a, 0)], (1,))


def pad(image: Tensor, padding: tuple[int, int]) -> Tensor:
    """Zero-pad a C x H x W tensor by padding[0] rows and padding[1] columns on each side."""
    if len(image.dims()) != 3:
        raise DimMismatchError("pad")
    channels, height, width = image.dims()
    pad_h, pad_w = padding
    output = Tensor(None, (channels, height + 2 * pad_h, width + 2 * pad_w))
    for ch, row, col in itertools.product(range(channels), range(height), range(width)):
        output.set((ch, row + pad_h, col + pad_w), image.get((ch, row, col)))
    return output


def convolution(
    inputs: Sequence[Tensor],
    padding: tuple[int, int],
    stride: tuple[int, int],
) -> Tensor:
    """Convolve a C x H x W image with an O x C x KH x KW kernel, plus an optional bias."""
    if len(inputs) < 2:
        raise DimMismatchError("conv")
    has_bias = len(inputs) == 3
    image, kernel = inputs[0], inputs[1]
    if (
        len(image.dims()) != 3
        or len(kernel.dims()) != 4
        or image.dims()[0] != kernel.dims()[1]
    ):
        raise DimMismatchError("conv")
    if has_bias:
        bias = inputs[2]
        if len(bias.dims()) != 1 or bias.dims()[0] != kernel.dims()[0]:
            raise DimMismatchError("conv bias")

    out_channels, in_channels, kernel_h, kernel_w = kernel.dims()
    _, image_h, image_w = image.dims()
    padded = pad(image, padding)

    vert = _slides(image_h, padding[0], kernel_h, stride[0], "conv")
    horz = _slides(image_w, padding[1], kernel_w, stride[1], "conv")

    output = Tensor(None, (out_channels, vert, horz))
    for i, j, k in itertools.product(range(out_channels), range(vert), range(horz)):
        rs, cs = j * stride[0], k * stride[1]
        value = dot(
            [
                kernel.get_slice([range(i, i + 1)]),
                padded.get_slice(
                    [
                        range(in_channels),
                        range(rs, rs + kernel_h),
                        range(cs, cs + kernel_w),
                    ]
                ),
            ]
        )[0]
        if has_bias:
            value = value + inputs[2][i]
        output.set((i, j, k), value)
    return output


def sumpool(
    image: Tensor,
    padding: tuple[int, int],
    stride: tuple[int, int],
    kernel_shape: tuple[int, int],
) -> Tensor:
    """Sum-pool each channel of a C x H x W tensor."""
    if len(image.dims()) != 3:
        raise DimMismatchError("sumpool")
    channels, image_h, image_w = image.dims()
    kernel_h, kernel_w = kernel_shape
    padded = pad(image, padding)

    vert = _slides(image_h, padding[0], kernel_h, stride[0], "sumpool")
    horz = _slides(image_w, padding[1], kernel_w, stride[1], "sumpool")

    output = Tensor(None, (channels, vert, horz))
    for i, j, k in itertools.product(range(channels), range(vert), range(horz)):
        rs, cs = j * stride[0], k * stride[1]
        window = padded.get_slice(
            [range(i, i + 1), range(rs, rs + kernel_h), range(cs, cs + kernel_w)]
        )
        output.set((i, j, k), sum(window)[0])
    return output


def max_pool2d(
    image: Tensor,
    padding: tuple[int, int],
    stride: tuple[int, int],
    pool_dims: tuple[int, int],
) -> Tensor:
    """Max-pool each channel of a C x H x W tensor."""
    if len(image.dims()) != 3 or pool_dims[0] <= 0 or pool_dims[1] <= 0:
        raise DimMismatchError("max_pool2d")
    channels, image_h, image_w = image.dims()
    padded = pad(image, padding)

    vert = _slides(image_h, padding[0], pool_dims[0], stride[0], "max_pool2d")
    horz = _slides(image_w, padding[1], pool_dims[1], stride[1], "max_pool2d")

    output = Tensor(None, (channels, vert, horz))
    for i, j, k in itertools.product(range(channels), range(vert), range(horz)):
        rs, cs = j * stride[0], k * stride[1]
        window = padded.get_slice(
            [range(i, i + 1), range(rs, rs + pool_dims[0]), range(cs, cs + pool_dims[1])]
        )
        output.set((i, j, k), functools.reduce(tmax, window))
    return output