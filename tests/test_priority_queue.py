"""Tests for the stable priority queue."""

from searchviz.domain.priority_queue import PriorityQueue


class TestPriorityQueue:

    def test_pops_lowest_priority_first(self):
        queue = PriorityQueue()
        queue.put("a", 3.0)
        queue.put("b", 1.0)
        queue.put("c", 2.0)
        assert [queue.get()[0] for _ in range(3)] == ["b", "c", "a"]
        assert queue.get() is None

    def test_ties_pop_in_insertion_order(self):
        queue = PriorityQueue()
        for item_id in ("x", "y", "z"):
            queue.put(item_id, 1.0)
        assert [queue.get()[0] for _ in range(3)] == ["x", "y", "z"]

    def test_lower_priority_replaces_entry(self):
        queue = PriorityQueue()
        queue.put("a", 5.0)
        queue.put("b", 3.0)
        assert queue.put("a", 1.0)
        assert len(queue) == 2
        assert queue.get() == ("a", 1.0)
        assert queue.get() == ("b", 3.0)
        assert queue.is_empty()

    def test_equal_or_higher_priority_is_ignored(self):
        queue = PriorityQueue()
        queue.put("a", 2.0)
        assert not queue.put("a", 2.0)
        assert not queue.put("a", 4.0)
        assert queue.get_priority("a") == 2.0

    def test_replaced_entry_moves_behind_earlier_ties(self):
        queue = PriorityQueue()
        queue.put("a", 5.0)
        queue.put("b", 1.0)
        queue.put("a", 1.0)
        assert queue.ordered_ids() == ["b", "a"]

    def test_membership_and_iteration(self):
        queue = PriorityQueue()
        queue.put("a", 2.0)
        queue.put("b", 1.0)
        assert "a" in queue
        assert "z" not in queue
        assert list(queue) == ["b", "a"]
        # Iteration does not consume
        assert len(queue) == 2
