"""Shape arithmetic used when building IR nodes."""

from __future__ import annotations

import math
from typing import Sequence

from .datatypes import DataType, Padding, element_size

RUNTIME_RANK = 4


def _product(values: Sequence[int]) -> int:
    return math.prod(values)


def get_transposed_shape(input_shape: Sequence[int], perm: Sequence[int]) -> list[int]:
    """Permute ``input_shape`` by ``perm``."""
    return [input_shape[perm[i]] for i in range(len(input_shape))]


def get_windowed_output_size(size: int, filter: int, stride: int, dilation: int, same: bool) -> int:
    """Output length of a sliding window over ``size`` elements."""
    effective_filter_size = (filter - 1) * dilation + 1
    if same:
        return (size + stride - 1) // stride
    return (size - effective_filter_size + stride) // stride


def get_windowed_padding_for_output(
    input_size: int, output_size: int, filter: int, stride: int, dilation: int
) -> Padding:
    """Padding needed so a window produces ``output_size`` elements."""
    effective_filter_size = (filter - 1) * dilation + 1
    padding = max(0, (output_size - 1) * stride + effective_filter_size - input_size)
    return Padding(padding // 2, padding - padding // 2)


def get_windowed_padding(input_size: int, filter: int, stride: int, dilation: int, same: bool) -> Padding:
    """Padding for a window in ``same`` or ``valid`` mode."""
    output_size = get_windowed_output_size(input_size, filter, stride, dilation, same)
    return get_windowed_padding_for_output(input_size, output_size, filter, stride, dilation)


def get_bytes(dtype: DataType, shape: Sequence[int]) -> int:
    """Number of bytes a tensor of ``dtype`` and ``shape`` occupies."""
    return _product(shape) * element_size(dtype)


def normalize_reduce_axis(axis: Sequence[int]) -> list[int]:
    return sorted(axis)


def get_reduced_shape(input_shape: Sequence[int], axis: Sequence[int], keep_dims: bool) -> list[int]:
    """Shape after reducing over ``axis``, which must be sorted."""
    if list(axis) != sorted(axis):
        raise ValueError("axis must be sorted")
    reduced = set(axis)
    shape = []
    for index, dim in enumerate(input_shape):
        if index not in reduced:
            shape.append(dim)
        elif keep_dims:
            shape.append(1)
    return shape


def normalize_reshape(in_shape: Sequence[int], new_shape: Sequence[int]) -> list[int]:
    """Resolve a single ``-1`` dimension in ``new_shape``."""
    result = list(new_shape)
    known_size = 1
    unknown_index = None
    for index, dim in enumerate(new_shape):
        if dim == -1:
            if unknown_index is not None:
                raise ValueError("Reshape can only have 1 non-determined dimension at most")
            unknown_index = index
        else:
            known_size *= dim
    if unknown_index is not None:
        result[unknown_index] = _product(in_shape) // known_size
    return result


def get_binary_output_shape(input_a_shape: Sequence[int], input_b_shape: Sequence[int]) -> list[int]:
    """Broadcast two shapes against each other."""
    dest_dims = max(len(input_a_shape), len(input_b_shape))
    a = [1] * (dest_dims - len(input_a_shape)) + list(input_a_shape)
    b = [1] * (dest_dims - len(input_b_shape)) + list(input_b_shape)
    out_shape = []
    for in_a, in_b in zip(a, b):
        if in_a == in_b:
            out_shape.append(in_a)
        elif in_a == 1:
            out_shape.append(in_b)
        elif in_b == 1:
            out_shape.append(in_a)
        else:
            raise ValueError("inputs are not compatible to broadcast")
    return out_shape


def get_concated_shape(input_shapes: Sequence[Sequence[int]], axis: int) -> list[int]:
    """Shape of the concatenation of ``input_shapes`` along ``axis``."""
    if not input_shapes:
        raise ValueError("there must be at least one input")
    shape = list(input_shapes[0])
    for in_shape in input_shapes[1:]:
        if len(in_shape) != len(shape):
            raise ValueError("inputs must have same ranks")
        for j, dim in enumerate(in_shape):
            if j == axis:
                shape[j] += dim
            elif dim != shape[j]:
                raise ValueError("inputs are not compatible to concat")
    return shape


def to_runtime_shape(shape: Sequence[int]) -> list[int]:
    """Extend a shape of rank at most 4 to rank 4 with leading ones."""
    if len(shape) > RUNTIME_RANK:
        raise ValueError(f"rank must be at most {RUNTIME_RANK}")
    return [1] * (RUNTIME_RANK - len(shape)) + [int(dim) for dim in shape]


def to_runtime_paddings(paddings: Sequence[Padding]) -> list[Padding]:
    """Extend paddings to rank 4 with leading zero paddings."""
    if len(paddings) > RUNTIME_RANK:
        raise ValueError(f"rank must be at most {RUNTIME_RANK}")
    return [Padding.zero()] * (RUNTIME_RANK - len(paddings)) + list(paddings)


def extend_transpose_shape(in_shape: Sequence[int], perm: Sequence[int]) -> tuple[list[int], list[int]]:
    """Extend a shape and its permutation to rank 4; return both."""
    if len(perm) > RUNTIME_RANK:
        raise ValueError(f"rank must be at most {RUNTIME_RANK}")
    in_ext = RUNTIME_RANK - len(in_shape)
    perm_ext = RUNTIME_RANK - len(perm)
    r_in_shape = to_runtime_shape(in_shape)
    r_perm = list(range(perm_ext)) + [int(p + in_ext) for p in perm]
    return r_in_shape, r_perm


def get_concat_params(out_shape: Sequence[int], elem_size: int, axis: int) -> tuple[int, int]:
    """Return ``(inner_size, outer_size)`` of a concatenation along ``axis``."""
    inner_size = elem_size
    outer_size = 1
    for index, dim in enumerate(out_shape):
        if index > axis:
            inner_size *= dim
        elif index < axis:
            outer_size *= dim
    return inner_size, outer_size


def get_padded_shape(in_shape: Sequence[int], paddings: Sequence[Padding]) -> list[int]:
    return [dim + paddings[i].sum() for i, dim in enumerate(in_shape)]


def get_resize_image_shape(in_shape: Sequence[int], new_size: Sequence[int]) -> list[int]:
    """Replace the last two dimensions with ``new_size`` (height, width)."""
    new_shape = list(in_shape)
    new_shape[-1] = new_size[1]
    new_shape[-2] = new_size[0]
    return new_shape


def normalize_strided_slice_begin(
    in_shape: Sequence[int], begin: Sequence[int], strides: Sequence[int], begin_mask: int
) -> list[int]:
    result = []
    for i, stride in enumerate(strides):
        if stride == 0:
            raise ValueError("stride must not be zero")
        if begin_mask & (1 << i):
            result.append(0 if stride > 0 else in_shape[i] - 1)
        else:
            result.append(begin[i])
    return result


def normalize_strided_slice_end(
    in_shape: Sequence[int],
    begin: Sequence[int],
    end: Sequence[int],
    strides: Sequence[int],
    end_mask: int,
    shrink_axis_mask: int,
) -> list[int]:
    result = []
    for i, stride in enumerate(strides):
        if end_mask & (1 << i):
            end_val = in_shape[i] if stride > 0 else -1
        else:
            end_val = end[i]
        if shrink_axis_mask & (1 << i):
            end_val = begin[i] + 1
        result.append(end_val)
    return result


def get_strided_slice_output_shape(
    begin: Sequence[int],
    end: Sequence[int],
    strides: Sequence[int],
    ellipsis_mask: int,
    new_axis_mask: int,
    shrink_axis_mask: int,
) -> list[int]:
    if ellipsis_mask:
        raise ValueError("Non-zero ellipsis_mask is not supported")
    if new_axis_mask:
        raise ValueError("Non-zero new_axis_mask is not supported")
    shape = []
    for i, stride in enumerate(strides):
        if shrink_axis_mask & (1 << i):
            continue
        shape.append(math.ceil((end[i] - begin[i]) / stride))
    return shape