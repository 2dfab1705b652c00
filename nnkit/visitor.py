"""Traversal of IR graphs from their outputs back to their inputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Generator, Iterable, TypeVar

from .datatypes import NodeAttributes
from .node import Node, OutputNode

if TYPE_CHECKING:
    from .graph import Graph

N = TypeVar("N", bound=Node)


class IRVisitor(ABC):
    """Visits every node reachable from a set of outputs."""

    def __init__(self) -> None:
        self._visited: set[Node] = set()

    def visit_graph(self, graph: Graph) -> None:
        self.visit_outputs(graph.outputs)

    def visit_outputs(self, outputs: Iterable[OutputNode]) -> None:
        """Start a fresh traversal; stop as soon as a visit asks to."""
        self._visited.clear()
        for output in outputs:
            if self._visit_strategy(output):
                return

    def visited(self, node: Node) -> bool:
        return node in self._visited

    def mark_visit(self, node: Node) -> None:
        self._visited.add(node)

    def visit_node(self, node: Node) -> bool:
        """Handle one node; return True to stop the traversal."""
        return False

    @abstractmethod
    def _visit_strategy(self, node: Node) -> bool:
        """Walk from ``node``; return True if the traversal was stopped."""


class DfsIRVisitor(IRVisitor):
    """Depth-first traversal: a node is visited after all of its producers.

    After a node, any action node it feeds is walked as well.
    """

    def _visit_strategy(self, node: Node) -> bool:
        stack = [self._walk(node)]
        while stack:
            try:
                child = next(stack[-1])
            except StopIteration as stop:
                stack.pop()
                if stop.value:
                    return True
                continue
            stack.append(self._walk(child))
        return False

    def _walk(self, node: Node) -> Generator[Node, None, bool]:
        if self.visited(node):
            return False
        self.mark_visit(node)

        for connector in node.inputs:
            source = connector.connection
            if source is not None:
                yield source.owner

        if self.visit_node(node):
            return True

        for output in node.outputs:
            for connector in output.connections:
                owner = connector.owner
                if owner.attributes & NodeAttributes.ACTION:
                    yield owner
        return False


class RelayIRVisitor(DfsIRVisitor):
    """Depth-first visitor that hands each node to a callback.

    A callback that returns a true value stops the traversal.
    """

    def __init__(self, visitor: Callable[[Node], object]) -> None:
        super().__init__()
        self._visitor = visitor

    def visit_node(self, node: Node) -> bool:
        return bool(self._visitor(node))


def make_relay_ir_visitor(visitor: Callable[[Node], object]) -> RelayIRVisitor:
    return RelayIRVisitor(visitor)


def try_get_direct_child(node: Node, node_type: type[N]) -> N | None:
    """First node of ``node_type`` fed directly by ``node``, if any."""
    for output in node.outputs:
        for connector in output.connections:
            if connector.owner.runtime_opcode == node_type.opcode:
                return connector.owner  # type: ignore[return-value]
    return None


def try_get_direct_parent(node: Node, node_type: type[N]) -> N | None:
    """First node of ``node_type`` feeding ``node`` directly, if any."""
    for connector in node.inputs:
        source = connector.connection
        if source is not None and source.owner.runtime_opcode == node_type.opcode:
            return source.owner  # type: ignore[return-value]
    return None


def node_cast(node: Node, node_type: type[N]) -> N | None:
    """Return ``node`` if its opcode is that of ``node_type``, else None."""
    if node.runtime_opcode == node_type.opcode:
        return node  # type: ignore[return-value]
    return None