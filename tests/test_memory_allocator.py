import pytest

from nnkit.datatypes import DataType, MemoryType
from nnkit.freelist import OutOfMemoryError
from nnkit.memory_allocator import (
    MainMemoryAllocator,
    MemoryAllocation,
    MemoryAllocator,
    MemoryNode,
)
from nnkit.op_utils import get_bytes


def test_allocate_rounds_up_to_default_alignment():
    allocator = MemoryAllocator()
    node = allocator.allocate(5)
    assert node.size == 8
    assert node.size % allocator.alignment == 0


def test_allocate_keeps_aligned_size():
    allocator = MemoryAllocator(alignment=4)
    node = allocator.allocate(12)
    assert node.size == 12


def test_allocations_do_not_overlap_and_grow_heap():
    allocator = MemoryAllocator()
    first = allocator.allocate(8)
    second = allocator.allocate(8)
    assert first.end <= second.start or second.end <= first.start
    assert allocator.max_usage == first.size + second.size


def test_new_node_holds_one_reference():
    node = MemoryAllocator().allocate(16)
    assert node.use_count == 1
    assert node.used
    assert node.safe_start() == node.start


def test_release_frees_and_block_is_reused():
    allocator = MemoryAllocator()
    node = allocator.allocate(16)
    start = node.start
    node.release()
    assert not node.used
    with pytest.raises(RuntimeError):
        node.safe_start()
    again = allocator.allocate(16)
    assert again.start == start
    assert allocator.max_usage == 16


def test_add_ref_keeps_node_alive_after_one_release():
    allocator = MemoryAllocator()
    node = allocator.allocate(16)
    node.add_ref()
    node.release()
    assert node.used
    other = allocator.allocate(16)
    assert other.start != node.start


def test_release_twice_raises():
    node = MemoryAllocator().allocate(8)
    node.release()
    with pytest.raises(RuntimeError):
        node.release()


def test_fixed_size_runs_out_of_memory():
    allocator = MemoryAllocator(8, 16)
    allocator.allocate(16)
    with pytest.raises(OutOfMemoryError):
        allocator.allocate(8)


def test_nodes_lists_every_allocation():
    allocator = MemoryAllocator()
    a = allocator.allocate(8)
    b = allocator.allocate(24)
    assert allocator.nodes == (a, b)


def test_get_bytes_matches_tensor_size():
    allocator = MemoryAllocator()
    assert allocator.get_bytes(DataType.FLOAT32, [2, 3]) == get_bytes(DataType.FLOAT32, [2, 3])
    assert allocator.get_bytes(DataType.UINT8, [2, 3]) == 6


def test_main_memory_allocator_behaves_as_allocator():
    allocator = MainMemoryAllocator()
    node = allocator.allocate(3)
    assert isinstance(node, MemoryNode)
    assert node.size == 8
    assert isinstance(allocator, MemoryAllocator)


@pytest.mark.parametrize(
    "lhs, rhs, expected",
    [
        (MemoryAllocation(MemoryType.MAIN, 0, 8), MemoryAllocation(MemoryType.MAIN, 4, 8), True),
        (MemoryAllocation(MemoryType.MAIN, 0, 8), MemoryAllocation(MemoryType.MAIN, 8, 8), False),
        (MemoryAllocation(MemoryType.MAIN, 0, 8), MemoryAllocation(MemoryType.CONST, 0, 8), False),
        (MemoryAllocation(MemoryType.MAIN, 2, 2), MemoryAllocation(MemoryType.MAIN, 0, 8), True),
    ],
)
def test_overlap(lhs, rhs, expected):
    assert lhs.overlap(rhs) is expected
    assert rhs.overlap(lhs) is expected


def test_allocation_end():
    allocation = MemoryAllocation(MemoryType.MAIN, 8, 16)
    assert allocation.end == allocation.start + allocation.size