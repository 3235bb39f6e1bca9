"""
Priority queue with value semantics built on :class:`HeapStorage`.

Copies made with :meth:`PriorityQueue.copy` (or ``copy.copy``) share their
storage until one of them mutates, at which point the mutating queue clones
the storage first. Plain assignment in Python only binds a second name to the
same queue, so value copies are always explicit.
"""
from __future__ import annotations

import copy
import logging
import operator
import threading
from typing import Any, Callable, Generic, Iterable, Iterator, Optional, TypeVar

from pqueue.config import runtime_config
from pqueue.heap_storage import HeapStorage

T = TypeVar("T")
Sort = Callable[[Any, Any], bool]

_LOGGER = logging.getLogger(__name__)


class _Unallocated:
    """State of a queue that has never needed storage."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "UNALLOCATED"


UNALLOCATED = _Unallocated()


class SharedStorage:
    """A :class:`HeapStorage` together with the number of queues owning it."""

    __slots__ = ("storage", "_owners", "_lock")

    def __init__(self, storage: HeapStorage) -> None:
        self.storage = storage
        self._owners = 1
        self._lock = threading.Lock()

    @property
    def owners(self) -> int:
        return self._owners

    def retain(self) -> "SharedStorage":
        with self._lock:
            self._owners += 1
        return self

    def release(self) -> None:
        with self._lock:
            self._owners -= 1

    def is_unique(self) -> bool:
        with self._lock:
            return self._owners == 1


class PriorityQueue(Generic[T]):
    """
    A queue whose elements are dequeued by priority order.

    Parameters
    ----------
    elements : Iterable, optional
        Initial elements, heapified in O(n).
    sort : callable, optional
        Strict weak ordering, ``sort(a, b)`` is true when ``a`` has priority
        over ``b``. Defaults to natural max order (``operator.gt``). Fixed
        for the lifetime of the queue.
    minimum_capacity : int
        Number of elements the queue can hold before reallocating,
        by default 0.
    """

    __slots__ = ("_state", "_sort", "__weakref__")

    def __init__(
        self,
        elements: Optional[Iterable[T]] = None,
        sort: Optional[Sort] = None,
        *,
        minimum_capacity: int = 0
    ) -> None:
        if minimum_capacity < 0:
            raise ValueError(
                f"minimum_capacity must be non-negative, got {minimum_capacity}"
            )
        self._sort = sort if sort is not None else operator.gt
        self._state = UNALLOCATED
        if elements is not None:
            storage = HeapStorage.from_iterable(
                elements, self._sort, _heapify_threshold()
            )
            storage.reserve_capacity(minimum_capacity)
            self._state = SharedStorage(storage)
        elif minimum_capacity > 0:
            self._state = SharedStorage(
                HeapStorage(minimum_capacity, self._sort, _heapify_threshold())
            )

    @classmethod
    def repeating(
        cls,
        value: T,
        count: int,
        sort: Optional[Sort] = None
    ) -> "PriorityQueue[T]":
        """Queue holding ``count`` copies of ``value``."""
        queue = cls(sort=sort)
        queue._state = SharedStorage(
            HeapStorage.repeating(value, count, queue._sort, _heapify_threshold())
        )
        return queue

    @classmethod
    def min_pq(cls, elements: Optional[Iterable[T]] = None) -> "PriorityQueue[T]":
        """Queue dequeuing the smallest element first."""
        return cls(elements, operator.lt)

    @classmethod
    def max_pq(cls, elements: Optional[Iterable[T]] = None) -> "PriorityQueue[T]":
        """Queue dequeuing the largest element first."""
        return cls(elements, operator.gt)

    # -----------------------------
    # Copy on write
    # -----------------------------
    def _make_unique(self, reserving_capacity: int = 0) -> HeapStorage:
        state = self._state
        if state is UNALLOCATED:
            storage = HeapStorage(
                reserving_capacity, self._sort, _heapify_threshold()
            )
            self._state = SharedStorage(storage)
            return storage

        if not state.is_unique():
            storage = state.storage.copy(reserving_capacity)
            _LOGGER.debug(
                "Cloning storage shared by %d queues (%d elements)",
                state.owners, storage.count
            )
            self._state = SharedStorage(storage)
            state.release()
            return storage

        storage = state.storage
        if reserving_capacity > 0:
            storage.reserve_capacity(storage.count + reserving_capacity)
        return storage

    def copy(self) -> "PriorityQueue[T]":
        """O(1) value copy; storage is cloned on the first mutation."""
        other = type(self).__new__(type(self))
        other._sort = self._sort
        state = self._state
        other._state = state if state is UNALLOCATED else state.retain()
        return other

    __copy__ = copy

    def __deepcopy__(self, memo: dict) -> "PriorityQueue[T]":
        other = type(self).__new__(type(self))
        other._sort = self._sort
        other._state = UNALLOCATED
        if self._state is not UNALLOCATED:
            storage = self._state.storage
            other._state = SharedStorage(
                HeapStorage.from_iterable(
                    copy.deepcopy(storage.to_list(), memo),
                    self._sort,
                    storage.heapify_threshold
                )
            )
        return other

    def __del__(self) -> None:
        release = getattr(getattr(self, "_state", None), "release", None)
        if release is not None:
            release()

    # -----------------------------
    # Read-only properties
    # -----------------------------
    @property
    def storage(self) -> Optional[HeapStorage]:
        """Underlying storage, or ``None`` while unallocated."""
        if self._state is UNALLOCATED:
            return None
        return self._state.storage

    @property
    def sort(self) -> Sort:
        return self._sort

    @property
    def count(self) -> int:
        if self._state is UNALLOCATED:
            return 0
        return self._state.storage.count

    @property
    def underestimated_count(self) -> int:
        return self.count

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def capacity(self) -> int:
        if self._state is UNALLOCATED:
            return 0
        return self._state.storage.capacity

    @property
    def is_full(self) -> bool:
        if self._state is UNALLOCATED:
            return False
        return self._state.storage.is_full

    # -----------------------------
    # Queue operations
    # -----------------------------
    def peek(self) -> Optional[T]:
        """Element that would be dequeued next, or ``None`` when empty."""
        if self._state is UNALLOCATED:
            return None
        return self._state.storage.peek()

    def enqueue(self, element: T) -> None:
        self._make_unique().insert(element)

    def enqueue_many(self, elements: Iterable[T]) -> None:
        """Enqueue every element of ``elements``."""
        if isinstance(elements, PriorityQueue):
            if elements._state is UNALLOCATED:
                return
            elements = elements._state.storage.to_list()
        self._make_unique(operator.length_hint(elements)).insert_many(elements)

    def dequeue(self) -> Optional[T]:
        """Remove and return the highest priority element, or ``None``."""
        if self.is_empty:
            return None
        return self._make_unique().extract()

    def enqueue_dequeue(self, element: T) -> T:
        """
        Enqueue ``element`` then dequeue, in a single pass.

        Returns ``element`` itself without storing it when the queue is
        empty or ``element`` has priority over every stored element.
        """
        if self.is_empty:
            return element
        return self._make_unique().push_pop(element)

    def dequeue_enqueue(self, element: T) -> Optional[T]:
        """
        Dequeue then enqueue ``element``, in a single pass.

        Returns the element dequeued, or ``None`` when the queue was empty
        (``element`` is enqueued either way).
        """
        storage = self._make_unique()
        if storage.is_empty:
            storage.insert(element)
            return None
        return storage.replace(element)

    def remove(self, element: T) -> Optional[T]:
        """Remove one occurrence of ``element``; ``None`` if not stored."""
        if self._state is UNALLOCATED:
            return None
        index = self._state.storage.index_of(element)
        if index is None:
            return None
        return self._make_unique().remove_at(index)

    def clear(self, keep_capacity: bool = False) -> None:
        """Remove every element, optionally keeping the allocated capacity."""
        state = self._state
        if state is UNALLOCATED:
            return
        if not keep_capacity:
            self._state = UNALLOCATED
            state.release()
        elif state.is_unique():
            state.storage.remove_range(0, state.storage.count, True)
        else:
            self._state = SharedStorage(
                HeapStorage(
                    state.storage.capacity,
                    self._sort,
                    state.storage.heapify_threshold
                )
            )
            state.release()

    def reserve_capacity(self, minimum_capacity: int) -> None:
        """Make room for ``minimum_capacity`` more elements."""
        if minimum_capacity < 0:
            raise ValueError(
                f"minimum_capacity must be non-negative, got {minimum_capacity}"
            )
        if minimum_capacity == 0 or self.capacity - self.count >= minimum_capacity:
            return
        self._make_unique(minimum_capacity)

    def drain(self) -> Iterator[T]:
        """Consuming iterator: each step dequeues from this queue."""
        while not self.is_empty:
            yield self.dequeue()

    # -----------------------------
    # Python protocols
    # -----------------------------
    def __len__(self) -> int:
        return self.count

    def __bool__(self) -> bool:
        return not self.is_empty

    def __contains__(self, element: object) -> bool:
        if self._state is UNALLOCATED:
            return False
        return self._state.storage.index_of(element) is not None

    def __iter__(self) -> Iterator[T]:
        # Drains a private copy, so iterating never consumes this queue.
        return self.copy().drain()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PriorityQueue):
            return NotImplemented
        if self is other:
            return True
        if self._state is not UNALLOCATED and self._state is other._state:
            return True
        if self.count != other.count:
            return False
        return all(a == b for a, b in zip(self, other))

    def __hash__(self) -> int:
        return hash((self.count, tuple(self)))

    def __str__(self) -> str:
        return "PriorityQueue[" + ", ".join(str(e) for e in self) + "]"

    def __repr__(self) -> str:
        items = ", ".join(repr(e) for e in self)
        return f"{type(self).__name__}([{items}])"


def _heapify_threshold() -> float:
    return runtime_config().heapify_threshold
