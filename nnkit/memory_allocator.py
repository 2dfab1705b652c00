"""Reference-counted memory blocks laid out by a free list."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .datatypes import DataType, MemoryType
from .freelist import FreeMemoryNode, Freelist
from .op_utils import get_bytes as _tensor_bytes


def _align(size: int, alignment: int = 8) -> int:
    remainder = size % alignment
    if remainder:
        return size - remainder + alignment
    return size


@dataclass(frozen=True)
class MemoryAllocation:
    """Where a tensor was placed: memory region, start and size."""

    type: MemoryType
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size

    def overlap(self, rhs: MemoryAllocation) -> bool:
        """True if both allocations share at least one byte of the same region."""
        return self.type == rhs.type and self.start < rhs.end and self.end > rhs.start


class MemoryNode:
    """A block handed out by an allocator, freed when its last reference goes."""

    def __init__(self, allocator: MemoryAllocator, start: int, size: int) -> None:
        self._allocator = allocator
        self._start = start
        self._size = size
        self._use_count = 0

    @property
    def use_count(self) -> int:
        return self._use_count

    @property
    def start(self) -> int:
        return self._start

    @property
    def size(self) -> int:
        return self._size

    @property
    def end(self) -> int:
        return self._start + self._size

    @property
    def used(self) -> bool:
        return self._use_count != 0

    def safe_start(self) -> int:
        """The start of the block; raise if the block has been freed."""
        if self.used:
            return self._start
        raise RuntimeError("Memory node has been freed")

    def add_ref(self) -> None:
        self._use_count += 1

    def release(self) -> None:
        """Drop one reference, returning the block to its allocator at zero."""
        self._use_count -= 1
        if self._use_count == 0:
            self._allocator.free(self)
        if self._use_count < 0:
            raise RuntimeError("Memory node has been freed")

    def __repr__(self) -> str:
        return f"MemoryNode(start={self._start}, size={self._size}, use_count={self._use_count})"


class MemoryAllocator:
    """Hands out aligned, reference-counted blocks from a free list."""

    def __init__(self, alignment: int = 8, fixed_size: int | None = None) -> None:
        self._alignment = alignment
        self._freelist = Freelist(fixed_size)
        self._nodes: list[MemoryNode] = []

    @property
    def alignment(self) -> int:
        return self._alignment

    @property
    def max_usage(self) -> int:
        """Highest address reached by any allocation."""
        return self._freelist.max_usage

    @property
    def nodes(self) -> tuple[MemoryNode, ...]:
        """Every block handed out, in allocation order."""
        return tuple(self._nodes)

    def allocate(self, size: int) -> MemoryNode:
        """Allocate ``size`` bytes rounded up to the alignment; one reference held."""
        free_node = self._freelist.allocate(_align(size, self._alignment))
        node = MemoryNode(self, free_node.start, free_node.size)
        self._nodes.append(node)
        node.add_ref()
        return node

    def free(self, node: MemoryNode) -> None:
        self._freelist.free(FreeMemoryNode(node.start, node.size))

    def get_bytes(self, dtype: DataType, shape: Sequence[int]) -> int:
        """Bytes a tensor of ``dtype`` and ``shape`` needs in this memory."""
        return _tensor_bytes(dtype, shape)


class MainMemoryAllocator(MemoryAllocator):
    """Allocator for the main memory region."""