"""IR nodes and the placeholder nodes that mark graph boundaries."""

from __future__ import annotations

from typing import ClassVar, Iterable

from .connectors import InputConnector, OutputConnector
from .datatypes import DataType, MemoryType, NodeAttributes, NodeOpcode


class Node:
    """Base class of every IR node; subclasses set ``opcode``."""

    opcode: ClassVar[NodeOpcode]

    def __init__(self) -> None:
        if not hasattr(type(self), "opcode"):
            raise TypeError(f"{type(self).__name__} does not define an opcode")
        self.name = ""
        self._inputs: list[InputConnector] = []
        self._outputs: list[OutputConnector] = []

    @property
    def runtime_opcode(self) -> NodeOpcode:
        return type(self).opcode

    @property
    def attributes(self) -> NodeAttributes:
        return NodeAttributes.NONE

    @property
    def inputs(self) -> tuple[InputConnector, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> tuple[OutputConnector, ...]:
        return tuple(self._outputs)

    def input_at(self, index: int) -> InputConnector:
        if not 0 <= index < len(self._inputs):
            raise IndexError(f"input index {index} out of range")
        return self._inputs[index]

    def output_at(self, index: int) -> OutputConnector:
        if not 0 <= index < len(self._outputs):
            raise IndexError(f"output index {index} out of range")
        return self._outputs[index]

    def add_input(self, name: str, dtype: DataType, shape: Iterable[int]) -> InputConnector:
        connector = InputConnector(self, name, dtype, shape)
        self._inputs.append(connector)
        return connector

    def add_output(
        self,
        name: str,
        dtype: DataType,
        shape: Iterable[int],
        memory_type: MemoryType = MemoryType.MAIN,
    ) -> OutputConnector:
        connector = OutputConnector(self, name, dtype, shape, memory_type)
        self._outputs.append(connector)
        return connector

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class InputNode(Node):
    """A graph input: a single output fed from outside the graph."""

    opcode = NodeOpcode.INPUT_NODE

    def __init__(self, dtype: DataType, shape: Iterable[int], memory_type: MemoryType = MemoryType.MAIN) -> None:
        super().__init__()
        self.add_output("output", dtype, shape, memory_type)

    @property
    def output(self) -> OutputConnector:
        return self.output_at(0)


class OutputNode(Node):
    """A graph output: a single input whose data leaves the graph."""

    opcode = NodeOpcode.OUTPUT_NODE

    def __init__(self, dtype: DataType, shape: Iterable[int]) -> None:
        super().__init__()
        self.add_input("input", dtype, shape)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)


class IgnoreNode(Node):
    """A sink that consumes a value; kept alive as an action node."""

    opcode = NodeOpcode.IGNORE_NODE

    def __init__(self, dtype: DataType, shape: Iterable[int]) -> None:
        super().__init__()
        self.add_input("input", dtype, shape)

    @property
    def input(self) -> InputConnector:
        return self.input_at(0)

    @property
    def attributes(self) -> NodeAttributes:
        return NodeAttributes.ACTION