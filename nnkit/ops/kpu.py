"""Nodes moving uint8 data between main memory and KPU memory."""

from __future__ import annotations

from typing import Sequence

from ..connectors import InputConnector, OutputConnector
from ..datatypes import DataType, MemoryType, NodeOpcode
from ..node import Node


class KpuUpload(Node):
    """Copies uint8 data from main memory into KPU memory."""

    opcode = NodeOpcode.K210_KPU_UPLOAD

    def __init__(self, input_shape: Sequence[int]) -> None:
        super().__init__()
        self.add_input("input", DataType.UINT8, input_shape)
        self.add_output("output", DataType.UINT8, input_shape, MemoryType.K210_KPU)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class KpuDownload(Node):
    """Copies uint8 data from KPU memory back into main memory."""

    opcode = NodeOpcode.K210_KPU_DOWNLOAD

    def __init__(self, input_shape: Sequence[int]) -> None:
        super().__init__()
        self.add_input("input", DataType.UINT8, input_shape)
        self.add_output("output", DataType.UINT8, input_shape)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)