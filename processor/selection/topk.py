"""
Top-K selection primitives.

- BoundedTopK: keeps the K largest items of a stream in O(n log K) using a
  min-heap whose root is the weakest survivor.
- PriorityExtractor: unbounded max-heap supporting fixed-count and
  tie-complete extraction.
"""
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from .heap import BinaryHeap

T = TypeVar("T")


class BoundedTopK(Generic[T]):
    """
    Retain the `capacity` items with the highest key.

    Equal keys are not ordered deterministically unless the key itself
    carries a secondary component (e.g. `(score, id)`).
    """

    def __init__(self, capacity: int, key: Callable[[T], object]):
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self.capacity = capacity
        self.key = key
        self._heap: BinaryHeap[T] = BinaryHeap.min_heap(key)

    def size(self) -> int:
        return self._heap.size()

    def __len__(self) -> int:
        return self._heap.size()

    def insert(self, item: T) -> bool:
        """Offer an item; returns True if it is now among the retained."""
        if self.capacity == 0:
            return False

        if self._heap.size() < self.capacity:
            self._heap.insert(item)
            return True

        weakest = self._heap.peek()
        if self.key(item) > self.key(weakest):
            self._heap.replace_top(item)
            return True
        return False

    def extend(self, items: Iterable[T]) -> "BoundedTopK[T]":
        for item in items:
            self.insert(item)
        return self

    def snapshot(self) -> List[T]:
        """Retained items, highest key first. Does not modify the selector."""
        # Heap order only guarantees the root; drain a copy to rank the rest
        drained = self._heap.copy()
        ascending = []
        while drained.size() > 0:
            ascending.append(drained.extract_top())
        ascending.reverse()
        return ascending


class PriorityExtractor(Generic[T]):
    """Repeated extraction of the current maximum by key."""

    def __init__(self, key: Callable[[T], object], items: Iterable[T] = ()):
        self.key = key
        self._heap: BinaryHeap[T] = BinaryHeap.max_heap(key, items)

    def size(self) -> int:
        return self._heap.size()

    def __len__(self) -> int:
        return self._heap.size()

    def insert(self, item: T) -> None:
        self._heap.insert(item)

    def peek(self) -> Optional[T]:
        return self._heap.peek()

    def extract_max(self) -> Optional[T]:
        return self._heap.extract_top()

    def take(self, count: int) -> List[T]:
        """Fixed-count extraction: the min(count, size) largest items."""
        return [self._heap.extract_top() for _ in range(min(max(count, 0), self._heap.size()))]

    def take_ties(self) -> List[T]:
        """Tie-complete extraction: every item sharing the maximum key."""
        first = self._heap.peek()
        if first is None:
            return []

        top_key = self.key(first)
        tied = []
        while self._heap.size() > 0 and self.key(self._heap.peek()) == top_key:
            tied.append(self._heap.extract_top())
        return tied
