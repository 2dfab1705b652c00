"""Element-wise and matrix arithmetic nodes."""

from __future__ import annotations

from typing import Iterable, Sequence

from ..connectors import InputConnector, OutputConnector
from ..datatypes import BinaryOp, DataType, NodeOpcode, UnaryOp, ValueRange
from ..node import Node
from ..op_utils import get_binary_output_shape


class Binary(Node):
    """Element-wise binary operation with broadcasting and a fused clamp."""

    opcode = NodeOpcode.BINARY

    def __init__(
        self,
        binary_op: BinaryOp,
        input_a_shape: Sequence[int],
        input_b_shape: Sequence[int],
        fused_activation: ValueRange,
    ) -> None:
        super().__init__()
        self.binary_op = binary_op
        self.fused_activation = fused_activation
        self.add_input("input_a", DataType.FLOAT32, input_a_shape)
        self.add_input("input_b", DataType.FLOAT32, input_b_shape)
        self.add_output(
            "output", DataType.FLOAT32, get_binary_output_shape(input_a_shape, input_b_shape)
        )

    @property
    def input_a(self) -> InputConnector:
        return self.input_at(0)

    @property
    def input_b(self) -> InputConnector:
        return self.input_at(1)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class Unary(Node):
    """Element-wise unary operation."""

    opcode = NodeOpcode.UNARY

    def __init__(self, unary_op: UnaryOp, input_shape: Sequence[int]) -> None:
        super().__init__()
        self.unary_op = unary_op
        self.add_input("input", DataType.FLOAT32, input_shape)
        self.add_output("output", DataType.FLOAT32, input_shape)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class MatMul(Node):
    """Product of two rank-2 matrices plus a bias, with a fused clamp."""

    opcode = NodeOpcode.MATMUL

    def __init__(
        self,
        input_a_shape: Sequence[int],
        input_b_shape: Sequence[int],
        bias: Iterable[float],
        fused_activation: ValueRange,
    ) -> None:
        if len(input_a_shape) != 2 or len(input_b_shape) != 2:
            raise ValueError("inputs must be 2 rank")
        if input_a_shape[1] != input_b_shape[0]:
            raise ValueError("input a's cols must be equal to input b's rows")
        super().__init__()
        self.bias = tuple(float(value) for value in bias)
        self.fused_activation = fused_activation
        self.add_input("input_a", DataType.FLOAT32, input_a_shape)
        self.add_input("input_b", DataType.FLOAT32, input_b_shape)
        self.add_output("output", DataType.FLOAT32, [input_a_shape[0], input_b_shape[1]])

    @property
    def input_a(self) -> InputConnector:
        return self.input_at(0)

    @property
    def input_b(self) -> InputConnector:
        return self.input_at(1)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)