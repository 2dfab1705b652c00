"""Nodes that rearrange, slice, pad, resize or reduce tensors."""

from __future__ import annotations

from typing import Sequence

from ..connectors import InputConnector, OutputConnector
from ..datatypes import DataType, ImageResizeMode, NodeOpcode, Padding, ReduceOp
from ..node import Node
from ..op_utils import (
    get_concated_shape,
    get_padded_shape,
    get_reduced_shape,
    get_resize_image_shape,
    get_strided_slice_output_shape,
    get_transposed_shape,
    normalize_reduce_axis,
    normalize_reshape,
    normalize_strided_slice_begin,
    normalize_strided_slice_end,
)


class _SingleInputNode(Node):
    """A node with one input connector and one output connector."""

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class Concat(Node):
    """Concatenation of any number of inputs along one axis."""

    opcode = NodeOpcode.CONCAT

    def __init__(self, dtype: DataType, input_shapes: Sequence[Sequence[int]], axis: int) -> None:
        if not input_shapes:
            raise ValueError("there must be at least one input")
        super().__init__()
        self.axis = axis
        self.concat_dims = tuple(int(shape[axis]) for shape in input_shapes)
        for index, shape in enumerate(input_shapes):
            self.add_input(f"input_{index}", dtype, shape)
        self.add_output("output", dtype, get_concated_shape(input_shapes, axis))

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class Pad(_SingleInputNode):
    """Pads every dimension with a constant value."""

    opcode = NodeOpcode.PAD

    def __init__(
        self,
        dtype: DataType,
        input_shape: Sequence[int],
        paddings: Sequence[Padding],
        pad_value: float,
    ) -> None:
        super().__init__()
        self.paddings = tuple(paddings)
        self.pad_value = pad_value
        self.add_input("input", dtype, input_shape)
        self.add_output("output", dtype, get_padded_shape(input_shape, self.paddings))


class Reshape(_SingleInputNode):
    """Gives data a new shape; one dimension may be ``-1`` and is inferred."""

    opcode = NodeOpcode.RESHAPE

    def __init__(self, dtype: DataType, input_shape: Sequence[int], new_shape: Sequence[int]) -> None:
        super().__init__()
        self.new_shape = tuple(normalize_reshape(input_shape, new_shape))
        self.add_input("input", dtype, input_shape)
        self.add_output("output", dtype, self.new_shape)


class Transpose(_SingleInputNode):
    """Permutes the dimensions of its input."""

    opcode = NodeOpcode.TRANSPOSE

    def __init__(self, dtype: DataType, input_shape: Sequence[int], perm: Sequence[int]) -> None:
        super().__init__()
        self.perm = tuple(perm)
        self.add_input("input", dtype, input_shape)
        self.add_output("output", dtype, get_transposed_shape(input_shape, self.perm))


class StridedSlice(_SingleInputNode):
    """Strided slice; begin and end masks are folded into ``begin`` and ``end``."""

    opcode = NodeOpcode.STRIDED_SLICE

    def __init__(
        self,
        dtype: DataType,
        input_shape: Sequence[int],
        begin: Sequence[int],
        end: Sequence[int],
        strides: Sequence[int],
        begin_mask: int,
        end_mask: int,
        ellipsis_mask: int,
        new_axis_mask: int,
        shrink_axis_mask: int,
    ) -> None:
        super().__init__()
        self.begin = tuple(normalize_strided_slice_begin(input_shape, begin, strides, begin_mask))
        self.end = tuple(
            normalize_strided_slice_end(input_shape, self.begin, end, strides, end_mask, shrink_axis_mask)
        )
        self.strides = tuple(strides)
        self.begin_mask = 0
        self.end_mask = 0
        self.ellipsis_mask = ellipsis_mask
        self.new_axis_mask = new_axis_mask
        self.shrink_axis_mask = shrink_axis_mask
        self.add_input("input", dtype, input_shape)
        self.add_output(
            "output",
            dtype,
            get_strided_slice_output_shape(
                self.begin, self.end, self.strides, ellipsis_mask, new_axis_mask, shrink_axis_mask
            ),
        )


class ResizeImage(_SingleInputNode):
    """Resizes the last two dimensions to ``new_size`` (height, width)."""

    opcode = NodeOpcode.RESIZE_IMAGE

    def __init__(
        self,
        dtype: DataType,
        mode: ImageResizeMode,
        input_shape: Sequence[int],
        new_size: Sequence[int],
        align_corners: bool,
    ) -> None:
        if len(new_size) != 2:
            raise ValueError("new_size must hold height and width")
        super().__init__()
        self.mode = mode
        self.new_size = (int(new_size[0]), int(new_size[1]))
        self.align_corners = align_corners
        self.add_input("input", dtype, input_shape)
        self.add_output("output", dtype, get_resize_image_shape(input_shape, self.new_size))


class Reduce(_SingleInputNode):
    """Reduces float data over a set of axes."""

    opcode = NodeOpcode.REDUCE

    def __init__(
        self,
        reduce_op: ReduceOp,
        input_shape: Sequence[int],
        axis: Sequence[int],
        init_value: float,
        keep_dims: bool,
    ) -> None:
        super().__init__()
        self.reduce_op = reduce_op
        self.axis = tuple(normalize_reduce_axis(axis))
        self.init_value = float(init_value)
        self.keep_dims = keep_dims
        self.add_input("input", DataType.FLOAT32, input_shape)
        self.add_output(
            "output", DataType.FLOAT32, get_reduced_shape(input_shape, self.axis, keep_dims)
        )