"""Quantization nodes converting between float and 8-bit data."""

from __future__ import annotations

from typing import Sequence

from ..connectors import InputConnector, OutputConnector
from ..datatypes import DataType, NodeOpcode, QuantParam
from ..node import Node


class _UnaryShapeNode(Node):
    """A node with one input and one output of the same shape."""

    def __init__(self, input_shape: Sequence[int], input_dtype: DataType, output_dtype: DataType) -> None:
        super().__init__()
        self.add_input("input", input_dtype, input_shape)
        self.add_output("output", output_dtype, input_shape)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class Quantize(_UnaryShapeNode):
    """Float data to uint8 with the given quantization parameters."""

    opcode = NodeOpcode.QUANTIZE

    def __init__(self, input_shape: Sequence[int], quant_param: QuantParam) -> None:
        super().__init__(input_shape, DataType.FLOAT32, DataType.UINT8)
        self.quant_param = quant_param


class Dequantize(_UnaryShapeNode):
    """uint8 data back to float with the given quantization parameters."""

    opcode = NodeOpcode.DEQUANTIZE

    def __init__(self, input_shape: Sequence[int], quant_param: QuantParam) -> None:
        super().__init__(input_shape, DataType.UINT8, DataType.FLOAT32)
        self.quant_param = quant_param


class FakeQuantize(_UnaryShapeNode):
    """Marks where float data is to be quantized; stays float."""

    opcode = NodeOpcode.FAKE_QUANTIZE

    def __init__(self, input_shape: Sequence[int]) -> None:
        super().__init__(input_shape, DataType.FLOAT32, DataType.FLOAT32)


class FakeDequantize(_UnaryShapeNode):
    """Marks where quantized data is to be dequantized; stays float."""

    opcode = NodeOpcode.FAKE_DEQUANTIZE

    def __init__(self, input_shape: Sequence[int]) -> None:
        super().__init__(input_shape, DataType.FLOAT32, DataType.FLOAT32)