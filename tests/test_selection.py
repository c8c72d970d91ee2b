"""Tests for the heap, top-K and priority extraction primitives."""

from __future__ import annotations

import random

import pytest

from processor.selection import BinaryHeap, BoundedTopK, PriorityExtractor


def drain(heap: BinaryHeap) -> list:
    out = []
    while heap.size() > 0:
        out.append(heap.extract_top())
    return out


class TestBinaryHeap:
    def test_min_heap_extracts_ascending(self):
        heap = BinaryHeap.min_heap(lambda x: x, [5, 3, 8, 1, 9, 2])
        assert heap.peek() == 1
        assert drain(heap) == [1, 2, 3, 5, 8, 9]

    def test_max_heap_extracts_descending(self):
        heap = BinaryHeap.max_heap(lambda x: x, [5, 3, 8, 1, 9, 2])
        assert heap.peek() == 9
        assert drain(heap) == [9, 8, 5, 3, 2, 1]

    def test_empty_heap(self):
        heap = BinaryHeap.max_heap(lambda x: x)
        assert heap.peek() is None
        assert heap.extract_top() is None
        assert len(heap) == 0

    def test_custom_comparator(self):
        # Shortest string first
        heap = BinaryHeap(lambda a, b: len(a) < len(b), ["ccc", "a", "bb"])
        assert drain(heap) == ["a", "bb", "ccc"]

    def test_replace_top(self):
        heap = BinaryHeap.min_heap(lambda x: x, [4, 6, 5])
        assert heap.replace_top(10) == 4
        assert drain(heap) == [5, 6, 10]

    def test_replace_top_on_empty_inserts(self):
        heap = BinaryHeap.min_heap(lambda x: x)
        assert heap.replace_top(3) is None
        assert heap.peek() == 3

    def test_copy_is_independent(self):
        heap = BinaryHeap.max_heap(lambda x: x, [1, 2, 3])
        clone = heap.copy()
        clone.extract_top()
        assert heap.size() == 3
        assert clone.size() == 2

    def test_matches_sorted_on_random_input(self):
        rng = random.Random(7)
        values = [rng.randint(-50, 50) for _ in range(200)]
        heap = BinaryHeap.max_heap(lambda x: x, values)
        assert drain(heap) == sorted(values, reverse=True)


class TestBoundedTopK:
    def test_keeps_largest(self):
        selector = BoundedTopK(3, key=lambda x: x).extend([4, 1, 9, 7, 3, 8])
        assert selector.snapshot() == [9, 8, 7]

    def test_fewer_than_k_returns_all_sorted(self):
        selector = BoundedTopK(5, key=lambda x: x).extend([2, 7, 1])
        assert selector.snapshot() == [7, 2, 1]

    def test_zero_capacity(self):
        selector = BoundedTopK(0, key=lambda x: x)
        assert selector.insert(10) is False
        assert selector.snapshot() == []

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            BoundedTopK(-1, key=lambda x: x)

    def test_insert_reports_retention(self):
        selector = BoundedTopK(2, key=lambda x: x)
        assert selector.insert(5)
        assert selector.insert(3)
        assert not selector.insert(1)
        assert not selector.insert(3)  # equal to minimum is not strictly greater
        assert selector.insert(4)
        assert selector.snapshot() == [5, 4]

    def test_snapshot_does_not_mutate(self):
        selector = BoundedTopK(3, key=lambda x: x).extend([1, 2, 3, 4])
        first = selector.snapshot()
        second = selector.snapshot()
        assert first == second == [4, 3, 2]
        assert len(selector) == 3

    @pytest.mark.parametrize("seed", range(5))
    def test_matches_brute_force(self, seed):
        rng = random.Random(seed)
        for n in range(0, 30):
            for k in range(0, 8):
                scores = [rng.randint(0, 10) for _ in range(n)]
                items = [{"id": i, "score": s} for i, s in enumerate(scores)]
                snapshot = BoundedTopK(k, key=lambda item: item["score"]).extend(items).snapshot()

                expected = sorted(scores, reverse=True)[:k]
                assert [item["score"] for item in snapshot] == expected


class TestPriorityExtractor:
    def test_peek_and_extract(self):
        extractor = PriorityExtractor(key=lambda x: x, items=[3, 9, 4])
        assert extractor.peek() == 9
        assert extractor.extract_max() == 9
        assert extractor.peek() == 4
        assert extractor.size() == 2

    def test_empty(self):
        extractor = PriorityExtractor(key=lambda x: x)
        assert extractor.peek() is None
        assert extractor.extract_max() is None
        assert extractor.take(5) == []
        assert extractor.take_ties() == []

    def test_take_fixed_count(self):
        extractor = PriorityExtractor(key=lambda x: x, items=range(1, 9))
        assert extractor.take(5) == [8, 7, 6, 5, 4]
        assert extractor.size() == 3

    def test_take_more_than_available(self):
        extractor = PriorityExtractor(key=lambda x: x, items=[2, 1])
        assert extractor.take(5) == [2, 1]

    def test_take_ties_returns_all_tied_for_first(self):
        items = [("a", 3), ("b", 5), ("c", 5), ("d", 2), ("e", 5)]
        extractor = PriorityExtractor(key=lambda item: item[1], items=items)
        tied = extractor.take_ties()
        assert sorted(name for name, _ in tied) == ["b", "c", "e"]
        assert extractor.size() == 2
        assert extractor.peek() == ("a", 3)

    def test_take_ties_single_maximum(self):
        extractor = PriorityExtractor(key=lambda x: x, items=[1, 7, 3])
        assert extractor.take_ties() == [7]
