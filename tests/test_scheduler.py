from unittest import mock

import pytest

from nnkit.datatypes import DataType, MemoryType, NodeOpcode, UnaryOp
from nnkit.graph import Graph
from nnkit.memory_allocator import MainMemoryAllocator
from nnkit.node import InputNode, OutputNode
from nnkit.op_utils import get_bytes
from nnkit.ops.arith import Unary
from nnkit.scheduler import AllocationContext, register_input_allocator, schedule

SHAPE = [1, 4]


def build_chain(length):
    graph = Graph()
    inp = graph.emplace(InputNode(DataType.FLOAT32, SHAPE))
    source = inp.output
    unaries = []
    for _ in range(length):
        unary = graph.emplace(Unary(UnaryOp.NEG, SHAPE))
        unary.input.connect(source)
        source = unary.output
        unaries.append(unary)
    out = graph.emplace(OutputNode(DataType.FLOAT32, SHAPE))
    out.input.connect(source)
    return graph, inp, unaries, out


def test_compute_sequence_follows_dependencies():
    graph, inp, unaries, out = build_chain(2)
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    sequence = schedule(graph.outputs, context)
    assert sequence == [inp, *unaries, out]


def test_every_output_gets_an_allocation_of_its_size():
    graph, inp, unaries, _ = build_chain(2)
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    schedule(graph.outputs, context)
    expected = get_bytes(DataType.FLOAT32, SHAPE)
    for conn in [inp.output] + [u.output for u in unaries]:
        allocation = context.allocations[conn]
        assert allocation.size == expected
        assert allocation.type == MemoryType.MAIN


def test_inputs_and_outputs_of_a_node_do_not_overlap():
    graph, inp, unaries, _ = build_chain(3)
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    schedule(graph.outputs, context)
    for unary in unaries:
        produced = context.allocations[unary.output]
        consumed = context.allocations[unary.input.connection]
        assert not produced.overlap(consumed)


def test_released_memory_is_reused():
    graph, inp, unaries, _ = build_chain(4)
    allocator = MainMemoryAllocator()
    context = AllocationContext({MemoryType.MAIN: allocator})
    schedule(graph.outputs, context)
    size = get_bytes(DataType.FLOAT32, SHAPE)
    assert context.allocations[unaries[2].output].start == context.allocations[unaries[0].output].start
    assert allocator.max_usage == 3 * size


def test_graph_input_memory_stays_pinned():
    graph, inp, unaries, _ = build_chain(4)
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    schedule(graph.outputs, context)
    pinned = context.allocations[inp.output]
    for unary in unaries:
        assert not context.allocations[unary.output].overlap(pinned)


def test_missing_allocator_raises():
    graph, *_ = build_chain(1)
    context = AllocationContext({})
    with pytest.raises(LookupError):
        schedule(graph.outputs, context)


def test_unconnected_input_raises():
    graph = Graph()
    out = graph.emplace(OutputNode(DataType.FLOAT32, SHAPE))
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    with pytest.raises(ValueError):
        schedule(graph.outputs, context)
    assert out.input.connection is None


def test_allocate_default_counts_references():
    inp = InputNode(DataType.FLOAT32, SHAPE)
    allocator = MainMemoryAllocator()
    context = AllocationContext({MemoryType.MAIN: allocator})
    context.allocate_default(inp.output)
    first = context.allocations[inp.output]
    context.allocate_default(inp.output)
    assert context.allocations[inp.output] == first

    context.release(inp.output)
    other = allocator.allocate(first.size)
    assert other.start != first.start

    context.release(inp.output)
    reused = allocator.allocate(first.size)
    assert reused.start == first.start


def test_release_of_unallocated_connector_does_nothing():
    inp = InputNode(DataType.FLOAT32, SHAPE)
    context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
    context.release(inp.output)
    assert dict(context.allocations) == {}


def test_registered_allocator_is_used_for_consumer():
    graph, inp, unaries, out = build_chain(1)
    calls = []

    def allocate(node, conn, context):
        calls.append((node, conn))
        context.allocate_default(conn)

    with mock.patch.dict("nnkit.scheduler._INPUT_ALLOCATORS", clear=True):
        register_input_allocator(NodeOpcode.OUTPUT_NODE, allocate)
        context = AllocationContext({MemoryType.MAIN: MainMemoryAllocator()})
        schedule(graph.outputs, context)

    assert calls == [(out, unaries[0].output)]
    assert unaries[0].output in context.allocations


def test_first_registration_wins():
    first_calls = []
    second_calls = []

    def first(node, conn, context):
        first_calls.append(node)
        context.allocate_default(conn)

    def second(node, conn, context):
        second_calls.append(node)
        context.allocate_default(conn)

    graph, _, _, out = build_chain(1)
    with mock.patch.dict("nnkit.scheduler._INPUT_ALLOCATORS", clear=True):
        register_input_allocator(NodeOpcode.OUTPUT_NODE, first)
        register_input_allocator(NodeOpcode.OUTPUT_NODE, second)
        schedule(graph.outputs, AllocationContext({MemoryType.MAIN: MainMemoryAllocator()}))

    assert first_calls == [out]
    assert second_calls == []