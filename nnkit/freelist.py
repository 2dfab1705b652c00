"""First-fit free list used to lay out tensors in memory."""

from __future__ import annotations

import bisect
from dataclasses import dataclass


class OutOfMemoryError(RuntimeError):
    """Raised when a fixed-size free list cannot satisfy a request."""


@dataclass
class FreeMemoryNode:
    """A contiguous range of memory."""

    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size


class Freelist:
    """Free list over a fixed region, or over a heap that grows on demand."""

    def __init__(self, fixed_size: int | None = None) -> None:
        self._is_fixed = fixed_size is not None
        self._nodes: dict[int, FreeMemoryNode] = {}
        self._keys: list[int] = []
        self._heap_end = 0
        if fixed_size is not None:
            self._insert(FreeMemoryNode(0, fixed_size))
            self._heap_end = fixed_size

    @property
    def max_usage(self) -> int:
        """Highest address the heap has reached."""
        return self._heap_end

    @property
    def free_nodes(self) -> list[FreeMemoryNode]:
        """Copies of the free ranges, ordered by start."""
        return [FreeMemoryNode(n.start, n.size) for n in map(self._nodes.__getitem__, self._keys)]

    def allocate(self, size: int) -> FreeMemoryNode:
        """Take ``size`` bytes from the end of the first block large enough."""
        free = self._reserve(size)
        if free.size == size:
            removed = self._remove(free.start)
            return FreeMemoryNode(removed.start, removed.size)
        free.size -= size
        return FreeMemoryNode(free.end, size)

    def free(self, node: FreeMemoryNode) -> None:
        """Return a range to the list, merging it with adjacent free ranges."""
        if node.start not in self._nodes:
            self._insert(FreeMemoryNode(node.start, node.size))
        self._merge(node.start)

    def _insert(self, node: FreeMemoryNode) -> None:
        self._nodes[node.start] = node
        bisect.insort(self._keys, node.start)

    def _remove(self, start: int) -> FreeMemoryNode:
        """Drop the free range starting at ``start`` and return it."""
        self._keys.pop(bisect.bisect_left(self._keys, start))
        return self._nodes.pop(start)

    def _reserve(self, size: int) -> FreeMemoryNode:
        for key in self._keys:
            node = self._nodes[key]
            if node.size >= size:
                return node

        if self._is_fixed:
            raise OutOfMemoryError("Allocator has ran out of memory")

        if self._keys:
            last = self._nodes[self._keys[-1]]
            if last.end == self._heap_end:
                enlarge = size - last.size
                last.size += enlarge
                self._heap_end += enlarge
                return last

        node = FreeMemoryNode(self._heap_end, size)
        self._insert(node)
        self._heap_end += size
        return node

    def _merge(self, start: int) -> None:
        current = start
        while True:
            index = bisect.bisect_left(self._keys, current)
            node = self._nodes[current]
            if index > 0:
                left = self._nodes[self._keys[index - 1]]
                if left.end == node.start:
                    left.size += node.size
                    self._remove(node.start)
                    current = left.start
                    continue
            if index + 1 < len(self._keys):
                right = self._nodes[self._keys[index + 1]]
                if right.start == node.end:
                    node.size += right.size
                    self._remove(right.start)
                    continue
            return