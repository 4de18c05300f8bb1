"""A doubly ended list: items are added at the head and removed from the tail."""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Deque, Optional, Tuple

Dealloc = Optional[Callable[[Any], None]]


class LinkedListError(Exception):
    """Raised when a list operation is given invalid input."""


class EmptyListError(LinkedListError):
    """Raised when an operation needs an element but the list is empty."""


class LinkedList:
    """FIFO list: ``add`` pushes at the head, ``remove`` pops from the tail.

    Each element may carry a ``dealloc`` callable which is invoked on the
    element's data when the list is flushed.
    """

    def __init__(self) -> None:
        # Index 0 is the head, the right end is the tail.
        self._items: Deque[Tuple[Any, Dealloc]] = deque()

    def add(self, data: Any, dealloc: Dealloc = None) -> None:
        """Add ``data`` at the head of the list."""
        if data is None:
            raise LinkedListError("data must not be None")
        self._items.appendleft((data, dealloc))

    def remove(self) -> Any:
        """Remove and return the data at the tail (the oldest element)."""
        if not self._items:
            raise EmptyListError("list is empty")
        data, _ = self._items.pop()
        return data

    def is_empty(self) -> bool:
        """Return True when the list holds no elements."""
        return not self._items

    def flush(self) -> None:
        """Remove every element, head first, calling its dealloc if one was given."""
        while self._items:
            data, dealloc = self._items.popleft()
            if dealloc is not None:
                dealloc(data)

    def search(
        self,
        equal: Callable[[Any, Any], bool],
        key: Any,
        remove_if_found: bool = False,
    ) -> Any:
        """Return the first element, from the head, for which ``equal(key, data)``.

        Returns None when nothing matches. When ``remove_if_found`` is true the
        match is taken out of the list; its data is handed back to the caller,
        so its dealloc is not called.
        """
        if equal is None:
            raise LinkedListError("an equality function is required")
        if not self._items:
            raise EmptyListError("list is empty")
        for position, (data, _) in enumerate(self._items):
            if equal(key, data):
                if remove_if_found:
                    del self._items[position]
                return data
        return None

    def __len__(self) -> int:
        return len(self._items)