# zktensor

A small library with no dependencies. It provides multi-dimensional tensors
and the integer operations used to run quantized neural networks in a form that
an arithmetic circuit can check. It also has the JSON documents for model
inputs and proofs, and a description of how a tensor is laid out over circuit
columns.

## Modules

### `zktensor.tensor`

`Tensor(values, dims)` holds values in row-major order together with their
shape.

- If `values` is `None`, the tensor is filled with zeros.
- If the number of values does not match the product of `dims`, `DimError` is
  raised.
- `Tensor.from_iterable(values)` builds a one-dimensional tensor.

The tensor supports the following:

- `len()`, iteration, flat indexing with `t[i]`, and equality. Two tensors are
  equal when both their shape and their values match.
- `dims()`, which returns a tuple, and `is_empty()`.
- `get(indices)`, `set(indices, value)` and `get_index(indices)`.
  - A wrong number of coordinates raises `DimError`.
  - An out-of-range coordinate raises `IndexError`.
- `get_slice(ranges)`.
  - It takes one `range` per leading dimension. Any dimensions that are not
    given are taken whole.
  - Leading dimensions of size one are dropped while more than one dimension
    remains.
- `reshape(new_dims)` and `flatten()`. Both work in place. `reshape` raises
  `DimError` if the element count would change.
- `map(func)`, `enum_map(func)` and `mc_enum_map(func)`.
  - `enum_map` passes the flat index to `func`.
  - `mc_enum_map` passes the coordinate tuple to `func`.
- `combine()`, which concatenates a tensor of tensors into one flat tensor.

`tmax(a, b)` returns the larger of two values. A float NaN loses to any number.

The error classes are `TensorError` and its subclasses `DimMismatchError`,
`DimError` and `WrongMethodError`.

### `zktensor.ops`

This module provides element-wise operations and linear algebra on tensors.

Element-wise operations:

- `add`, `sub` and `mult` take a sequence of tensors of the same shape. If a
  second tensor of shape `(1,)` is given, it is applied as a constant.
- `const_add`, `const_sub` and `const_mult` apply a constant to every element.
- `div(t, d)` divides element by element. When both operands are integers, the
  result is truncated toward zero.
- `rescale(a, mult)` uses repeated addition and `pow(a, power)` uses repeated
  multiplication.
- `scale_and_shift([x, k, b])` computes `k * x + b`.

Reductions and linear algebra:

- `sum(a)` and `dot([a, b])` each return a one-element tensor.
- `matmul([a, b])` batches over every dimension except the last two.
- `affine([x, kernel, bias])` computes `kernel @ x + bias`. A one-dimensional
  `x` is treated as a column vector.

Image operations on `C x H x W` tensors:

- `pad(image, (ph, pw))` adds zero padding.
- `convolution([image, kernel, bias], padding, stride)` takes a kernel of shape
  `O x C x KH x KW`. The bias is optional.
- `sumpool(image, padding, stride, kernel_shape)` sums each pooling window.
- `max_pool2d(image, padding, stride, pool_dims)` takes the maximum of each
  pooling window.

Shape mismatches raise `DimMismatchError`.

### `zktensor.activations`

This module provides fixed-point activations on integer tensors:

- `sigmoid(a, scale_input, scale_output)`
- `leakyrelu(a, scale, slope)`
- `prelu(a, scale, slopes)`
- `const_div(a, scale)`

How the results are computed:

- Arithmetic is done in single precision.
- Results are rounded half away from zero, then saturated to the signed 32-bit
  range.

For `prelu`, a single slope applies to every element. Otherwise the number of
slopes must equal the first dimension of the tensor, or `DimMismatchError` is
raised.

### `zktensor.proof`

- `ModelInput` is a dataclass with the fields `input_data`, `input_shapes` and
  `output_data`.
- `Proof` is a dataclass with the fields `public_inputs` (lists of signed 32-bit
  integers) and `proof` (bytes).

Both classes provide `from_dict`, `to_dict` and `load(path)`. `Proof` also has
`save(path)`, which writes compact JSON with the proof bytes stored as a list
of integers. Malformed documents raise `ValueError`.

### `zktensor.layout`

`VarTensor` describes a block of circuit columns, of kind `ColumnKind.ADVICE`
or `ColumnKind.FIXED`, that holds a tensor of shape `dims`.

To create one, use
`VarTensor.new_advice(k, capacity, dims, equality, max_rot, blinding_factors=5)`
or `VarTensor.new_fixed(...)`:

- Each column uses `min(max_rot, 2**k - blinding_factors - 1)` rows.
- The block has `capacity // rows + 1` columns.

Methods:

- `num_cols()` returns the number of columns.
- `reshape(new_dims)` returns a new `VarTensor` with the given shape.
- `cartesian_coord(i)` maps a linear position to its `(column, row)` pair.
- `positions(offset)` yields the `(column, row)` of every element. It raises
  `IndexError` when a position falls beyond the block.

## What it does not do

The package computes values and describes layouts and file formats. It does
not do the following:

- Build circuits or their constraints.
- Generate keys or parameters.
- Create or verify proofs, including aggregated ones.
- Read model files.

It has no command-line program.

## Installing

```
pip install .
pip install .[test]   # with the test dependencies
```

## Example

```python
from zktensor.tensor import Tensor
from zktensor.ops import convolution
from zktensor.activations import leakyrelu

image = Tensor([5, 2, 3, 0, 4, -1, 3, 1, 6], [1, 3, 3])
kernel = Tensor([5, 1, 1, 1], [1, 1, 2, 2])
bias = Tensor([0], [1])

out = convolution([image, kernel, bias], (0, 0), (1, 1))
print(list(out), out.dims())          # [31, 16, 8, 26] (1, 2, 2)

print(list(leakyrelu(Tensor([2, -5], [2]), 1, 0.1)))   # [2, -1]
```

Reading and writing proof files:

```python
from zktensor.proof import Proof

proof = Proof(public_inputs=[[1, 2, 3]], proof=b"\x01\x02")
proof.save("model.pf")
assert Proof.load("model.pf") == proof
```

## Running the tests

```
pytest
```