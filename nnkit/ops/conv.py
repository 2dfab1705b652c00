"""Windowed nodes: 2-D convolution and 2-D window reduction."""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from ..connectors import InputConnector, OutputConnector
from ..datatypes import DataType, NodeOpcode, Padding, ReduceOp, ValueRange
from ..node import Node
from ..op_utils import get_windowed_output_size

_WEIGHTS_RANK = 4


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def _freeze_tensor(data: Any, rank: int) -> tuple[tuple, tuple[int, ...]]:
    """Turn a nested sequence into nested tuples of floats and return it with its shape."""
    shape: list[int] = []
    level = data
    for _ in range(rank):
        if not _is_sequence(level):
            raise ValueError(f"weights must be a rank-{rank} nested sequence")
        shape.append(len(level))
        level = level[0] if len(level) else []

    def freeze(item: Any, depth: int) -> Any:
        if depth == rank:
            if _is_sequence(item):
                raise ValueError("weights have too many dimensions")
            return float(item)
        if not _is_sequence(item) or len(item) != shape[depth]:
            raise ValueError("weights must be a regular tensor")
        return tuple(freeze(element, depth + 1) for element in item)

    return freeze(data, 0), tuple(shape)


class Conv2D(Node):
    """Grouped 2-D convolution over NCHW float data with a fused clamp.

    ``weights`` is a nested sequence shaped
    ``[output_channels, input_channels / groups, filter_h, filter_w]``.
    """

    opcode = NodeOpcode.CONV2D

    def __init__(
        self,
        input_shape: Sequence[int],
        weights: Sequence[Any],
        bias: Iterable[float],
        groups: int,
        padding_h: Padding,
        padding_w: Padding,
        stride_h: int,
        stride_w: int,
        dilation_h: int,
        dilation_w: int,
        fused_activation: ValueRange,
    ) -> None:
        super().__init__()
        self.weights, self.weights_shape = _freeze_tensor(weights, _WEIGHTS_RANK)
        self.bias = tuple(float(value) for value in bias)
        self.groups = groups
        self.padding_h = padding_h
        self.padding_w = padding_w
        self.stride_h = stride_h
        self.stride_w = stride_w
        self.dilation_h = dilation_h
        self.dilation_w = dilation_w
        self.fused_activation = fused_activation

        self.add_input("input", DataType.FLOAT32, input_shape)
        self.add_output(
            "output",
            DataType.FLOAT32,
            [
                input_shape[0],
                self.output_channels,
                get_windowed_output_size(
                    input_shape[2] + padding_h.sum(), self.filter_h, stride_h, dilation_h, False
                ),
                get_windowed_output_size(
                    input_shape[3] + padding_w.sum(), self.filter_w, stride_w, dilation_w, False
                ),
            ],
        )

    @property
    def filter_h(self) -> int:
        return self.weights_shape[2]

    @property
    def filter_w(self) -> int:
        return self.weights_shape[3]

    @property
    def input_channels(self) -> int:
        return self.weights_shape[1] * self.groups

    @property
    def output_channels(self) -> int:
        return self.weights_shape[0]

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class ReduceWindow2D(Node):
    """Pooling-style reduction over 2-D windows of NCHW float data."""

    opcode = NodeOpcode.REDUCE_WINDOW2D

    def __init__(
        self,
        reduce_op: ReduceOp,
        input_shape: Sequence[int],
        init_value: float,
        filter_h: int,
        filter_w: int,
        padding_h: Padding,
        padding_w: Padding,
        stride_h: int,
        stride_w: int,
        dilation_h: int,
        dilation_w: int,
        fused_activation: ValueRange,
    ) -> None:
        super().__init__()
        self.reduce_op = reduce_op
        self.init_value = float(init_value)
        self.filter_h = filter_h
        self.filter_w = filter_w
        self.padding_h = padding_h
        self.padding_w = padding_w
        self.stride_h = stride_h
        self.stride_w = stride_w
        self.dilation_h = dilation_h
        self.dilation_w = dilation_w
        self.fused_activation = fused_activation

        self.add_input("input", DataType.FLOAT32, input_shape)
        self.add_output(
            "output",
            DataType.FLOAT32,
            [
                input_shape[0],
                input_shape[1],
                get_windowed_output_size(
                    input_shape[2] + padding_h.sum(), filter_h, stride_h, dilation_h, False
                ),
                get_windowed_output_size(
                    input_shape[3] + padding_w.sum(), filter_w, stride_w, dilation_w, False
                ),
            ],
        )

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)