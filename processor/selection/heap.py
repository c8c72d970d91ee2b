"""
Array-backed binary heap parameterised by a comparator.

A min-heap and a max-heap are the same structure with an inverted
comparator; use `BinaryHeap.min_heap(key)` / `BinaryHeap.max_heap(key)`.
"""
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")

# higher_priority(a, b) is True when `a` must sit above `b` in the heap
Comparator = Callable[[T, T], bool]


class BinaryHeap(Generic[T]):
    """Binary heap over a Python list using index arithmetic."""

    def __init__(self, higher_priority: Comparator, items: Iterable[T] = ()):
        self._higher_priority = higher_priority
        self._items: List[T] = []
        for item in items:
            self.insert(item)

    @classmethod
    def min_heap(cls, key: Callable[[T], object], items: Iterable[T] = ()) -> "BinaryHeap[T]":
        return cls(lambda a, b: key(a) < key(b), items)

    @classmethod
    def max_heap(cls, key: Callable[[T], object], items: Iterable[T] = ()) -> "BinaryHeap[T]":
        return cls(lambda a, b: key(a) > key(b), items)

    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def peek(self) -> Optional[T]:
        """Return the top item without removing it, or None if empty."""
        return self._items[0] if self._items else None

    def insert(self, item: T) -> None:
        self._items.append(item)
        self._sift_up(len(self._items) - 1)

    def extract_top(self) -> Optional[T]:
        """Remove and return the top item, or None if empty."""
        if not self._items:
            return None

        top = self._items[0]
        last = self._items.pop()
        if self._items:
            self._items[0] = last
            self._sift_down(0)
        return top

    def replace_top(self, item: T) -> Optional[T]:
        """Swap the top item for `item` in one sift; returns the old top."""
        if not self._items:
            self.insert(item)
            return None

        top = self._items[0]
        self._items[0] = item
        self._sift_down(0)
        return top

    def copy(self) -> "BinaryHeap[T]":
        clone = BinaryHeap(self._higher_priority)
        clone._items = list(self._items)
        return clone

    # ------------------------------------------------------------------
    # Index arithmetic
    # ------------------------------------------------------------------

    @staticmethod
    def _parent(index: int) -> int:
        return (index - 1) // 2

    def _swap(self, i: int, j: int) -> None:
        self._items[i], self._items[j] = self._items[j], self._items[i]

    def _sift_up(self, index: int) -> None:
        while index > 0:
            parent = self._parent(index)
            if not self._higher_priority(self._items[index], self._items[parent]):
                break
            self._swap(index, parent)
            index = parent

    def _sift_down(self, index: int) -> None:
        size = len(self._items)
        while True:
            best = index
            left = 2 * index + 1
            right = left + 1

            if left < size and self._higher_priority(self._items[left], self._items[best]):
                best = left
            if right < size and self._higher_priority(self._items[right], self._items[best]):
                best = right

            if best == index:
                return
            self._swap(index, best)
            index = best
