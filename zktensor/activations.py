"""Quantised activation functions over integer tensors.

Arithmetic is carried out in single precision and results are rounded half
away from zero, then saturated to the signed 32-bit range.
"""

from __future__ import annotations

import math
import struct
from collections.abc import Sequence

from zktensor.tensor import DimMismatchError, Tensor

__all__ = ["sigmoid", "leakyrelu", "prelu", "const_div"]

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _f32(value: float) -> float:
    """Round a float to the nearest single-precision value."""
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _fdiv(x: float, y: float) -> float:
    """IEEE division: a zero divisor gives an infinity or NaN instead of raising."""
    if y == 0:
        if x == 0 or math.isnan(x):
            return math.nan
        sign = math.copysign(1.0, x) * math.copysign(1.0, y)
        return math.copysign(math.inf, sign)
    return _f32(x / y)


def _fexp(x: float) -> float:
    try:
        return _f32(math.exp(x))
    except OverflowError:
        return math.inf


def _round_to_i32(value: float) -> int:
    """Round half away from zero and saturate to the signed 32-bit range."""
    if math.isnan(value):
        return 0
    if math.isinf(value):
        return _I32_MAX if value > 0 else _I32_MIN
    rounded = math.floor(abs(value) + 0.5)
    result = int(math.copysign(rounded, value))
    return min(max(result, _I32_MIN), _I32_MAX)


def sigmoid(a: Tensor, scale_input: int, scale_output: int) -> Tensor:
    """Apply scale_output / (1 + exp(-x / scale_input)) to each element."""

    def apply(x: int) -> int:
        kix = _fdiv(_f32(float(x)), _f32(float(scale_input)))
        denom = _f32(1.0 + _fexp(-kix))
        return _round_to_i32(_fdiv(_f32(float(scale_output)), denom))

    return a.map(apply)


def _relu_like(x: int, scale: int, slope: float) -> int:
    fx = _f32(float(x))
    if x < 0:
        fx = _f32(_f32(slope) * fx)
    return _round_to_i32(_fdiv(fx, _f32(float(scale))))


def leakyrelu(a: Tensor, scale: int, slope: float) -> Tensor:
    """Divide each element by `scale`, multiplying negative ones by `slope` first."""
    return a.map(lambda x: _relu_like(x, scale, slope))


def prelu(a: Tensor, scale: int, slopes: Sequence[float]) -> Tensor:
    """Leaky relu with one slope per channel (the first dimension).

    A single slope applies to every element; otherwise the number of slopes
    must equal the number of channels.
    """
    if len(slopes) == 1:
        return leakyrelu(a, scale, slopes[0])
    dims = a.dims()
    if not dims or len(slopes) != dims[0]:
        raise DimMismatchError("prelu")
    per_channel = math.prod(dims[1:])
    return a.enum_map(lambda i, x: _relu_like(x, scale, slopes[i // per_channel]))


def const_div(a: Tensor, scale: int) -> Tensor:
    """Divide each element by `scale`, rounding half away from zero."""
    divisor = _f32(float(scale))
    return a.map(lambda x: _round_to_i32(_fdiv(_f32(float(x)), divisor)))