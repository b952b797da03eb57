"""Stable priority queue used by the cost-ordered search algorithms."""

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass
class PriorityItem:
    """
    Item in the priority queue.

    Comparison order:
    1. priority (lower is better)
    2. sequence (insertion order, so ties pop first-in first-out)
    """
    priority: float
    sequence: int
    item_id: str
    removed: bool = field(default=False, compare=False)

    def __lt__(self, other: 'PriorityItem') -> bool:
        """Define comparison for heap ordering."""
        if self.priority != other.priority:
            return self.priority < other.priority
        return self.sequence < other.sequence


class PriorityQueue:
    """
    Binary heap keyed by priority with insertion-order tie-breaking.
    Each item id is held at most once; re-inserting with a lower priority
    replaces the old entry.
    """

    def __init__(self):
        self._heap: List[PriorityItem] = []
        self._entry_finder: Dict[str, PriorityItem] = {}
        self._counter = itertools.count()

    def __len__(self) -> int:
        return len(self._entry_finder)

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._entry_finder

    def is_empty(self) -> bool:
        """Check if the queue is empty."""
        return not self._entry_finder

    def put(self, item_id: str, priority: float) -> bool:
        """
        Add an item or lower its priority.
        Returns False if the item is already queued with an equal or better priority.
        """
        existing = self._entry_finder.get(item_id)
        if existing is not None:
            if existing.priority <= priority:
                return False
            existing.removed = True

        entry = PriorityItem(priority, next(self._counter), item_id)
        self._entry_finder[item_id] = entry
        heapq.heappush(self._heap, entry)
        return True

    def get(self) -> Optional[Tuple[str, float]]:
        """
        Remove and return (item_id, priority) with the lowest priority.
        Returns None if queue is empty.
        """
        while self._heap:
            entry = heapq.heappop(self._heap)
            if not entry.removed:
                del self._entry_finder[entry.item_id]
                return (entry.item_id, entry.priority)
        return None

    def get_priority(self, item_id: str) -> Optional[float]:
        """Get the priority of a queued item, or None if not present."""
        entry = self._entry_finder.get(item_id)
        return entry.priority if entry is not None else None

    def ordered_ids(self) -> List[str]:
        """Item ids in the order they would be popped."""
        return [entry.item_id for entry in sorted(self._entry_finder.values())]

    def __iter__(self) -> Iterator[str]:
        return iter(self.ordered_ids())
