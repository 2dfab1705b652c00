"""A container owning the nodes of one IR graph."""

from __future__ import annotations

from typing import TypeVar

from .datatypes import NodeOpcode, node_opcode_name
from .node import InputNode, Node, OutputNode
from .visitor import make_relay_ir_visitor

N = TypeVar("N", bound=Node)


class Graph:
    """Nodes of a graph, with its inputs and outputs tracked separately."""

    def __init__(self) -> None:
        self._nodes: list[Node] = []
        self._inputs: list[InputNode] = []
        self._outputs: list[OutputNode] = []

    @property
    def nodes(self) -> tuple[Node, ...]:
        return tuple(self._nodes)

    @property
    def inputs(self) -> tuple[InputNode, ...]:
        return tuple(self._inputs)

    @property
    def outputs(self) -> tuple[OutputNode, ...]:
        return tuple(self._outputs)

    def emplace(self, node: N) -> N:
        """Add ``node`` to the graph and return it."""
        self._nodes.append(node)
        if node.runtime_opcode == NodeOpcode.INPUT_NODE:
            self._inputs.append(node)  # type: ignore[arg-type]
        elif node.runtime_opcode == NodeOpcode.OUTPUT_NODE:
            self._outputs.append(node)  # type: ignore[arg-type]
        return node

    def assign_names(self) -> None:
        """Give every unnamed or duplicately named node a unique name."""
        names: set[str] = set()
        for node in self._nodes:
            index = 0
            while not node.name or node.name in names:
                node.name = f"{node_opcode_name(node.runtime_opcode)}_{index}"
                index += 1
            names.add(node.name)

    def collect(self) -> None:
        """Drop and disconnect every node the outputs do not depend on."""
        used: set[Node] = set()
        make_relay_ir_visitor(used.add).visit_graph(self)

        kept: list[Node] = []
        for node in self._nodes:
            if node in used:
                kept.append(node)
                continue
            for connector in node.inputs:
                connector.clear_connection()
            for connector in node.outputs:
                connector.clear_connections()
            if node.runtime_opcode == NodeOpcode.INPUT_NODE:
                self._inputs = [n for n in self._inputs if n is not node]
        self._nodes = kept