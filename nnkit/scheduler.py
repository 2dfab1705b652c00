"""Assigns memory to every tensor of a graph in execution order."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from .connectors import InputConnector, OutputConnector
from .datatypes import MemoryType, NodeOpcode
from .memory_allocator import MemoryAllocation, MemoryAllocator, MemoryNode
from .node import Node, OutputNode
from .visitor import make_relay_ir_visitor

InputAllocator = Callable[[Node, OutputConnector, "AllocationContext"], None]

_INPUT_ALLOCATORS: dict[NodeOpcode, InputAllocator] = {}


def register_input_allocator(opcode: NodeOpcode, allocator: InputAllocator) -> None:
    """Use ``allocator`` for outputs consumed by nodes of ``opcode``.

    The first registration for an opcode wins.
    """
    _INPUT_ALLOCATORS.setdefault(opcode, allocator)


class AllocationContext:
    """Tracks which memory each output connector has been given."""

    def __init__(self, allocators: Mapping[MemoryType, MemoryAllocator]) -> None:
        self._allocators = allocators
        self._memory_map: dict[OutputConnector, MemoryNode] = {}
        self._allocations: dict[OutputConnector, MemoryAllocation] = {}

    @property
    def allocations(self) -> Mapping[OutputConnector, MemoryAllocation]:
        return MappingProxyType(self._allocations)

    def allocate_default(self, conn: OutputConnector) -> None:
        """Allocate memory for ``conn``, or take another reference if it has some."""
        allocator = self._allocators.get(conn.memory_type)
        if allocator is None:
            raise LookupError("Allocator is not found")

        node = self._memory_map.get(conn)
        if node is not None:
            node.add_ref()
            return

        size = allocator.get_bytes(conn.dtype, conn.shape)
        node = allocator.allocate(size)
        self._memory_map[conn] = node
        self._allocations[conn] = MemoryAllocation(conn.memory_type, node.safe_start(), size)

    def release(self, conn: OutputConnector) -> None:
        """Drop one reference to the memory of ``conn``, if it has any."""
        node = self._memory_map.get(conn)
        if node is not None:
            node.release()


def _source_of(connector: InputConnector) -> OutputConnector:
    source = connector.connection
    if source is None:
        raise ValueError(f"input {connector.name!r} of {connector.owner!r} is not connected")
    return source


def schedule(outputs: Iterable[OutputNode], context: AllocationContext) -> list[Node]:
    """Allocate memory for the graph feeding ``outputs``; return the compute order."""
    compute_sequence: list[Node] = []

    def visit(node: Node) -> None:
        for out in node.outputs:
            for connector in out.connections:
                consumer = connector.owner
                allocator = _INPUT_ALLOCATORS.get(consumer.runtime_opcode)
                if allocator is not None:
                    allocator(consumer, out, context)
                else:
                    context.allocate_default(out)

        allocations = context.allocations
        output_allocations = [allocations[out] for out in node.outputs]
        for connector in node.inputs:
            input_allocation = allocations[_source_of(connector)]
            if any(out.overlap(input_allocation) for out in output_allocations):
                raise RuntimeError(f"input and output memory of {node!r} overlap")

        compute_sequence.append(node)

        # Graph outputs keep their memory; constants and graph inputs are pinned.
        if node.runtime_opcode != NodeOpcode.OUTPUT_NODE:
            for connector in node.inputs:
                source = _source_of(connector)
                if (
                    source.memory_type != MemoryType.CONST
                    and source.owner.runtime_opcode != NodeOpcode.INPUT_NODE
                ):
                    context.release(source)

    make_relay_ir_visitor(visit).visit_outputs(outputs)
    return compute_sequence