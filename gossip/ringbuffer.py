"""A fixed-size ring that overwrites its oldest value when full."""

from __future__ import annotations

from collections import deque
from typing import Callable, Generic, Iterator, TypeVar

T = TypeVar("T")


class NotPresentError(LookupError):
    """The requested value is not in the ring."""

    def __init__(self) -> None:
        super().__init__("value not present")


class Ringbuffer(Generic[T]):
    """A ring holding at most ``capacity`` values.

    Iteration starts at the most recently inserted value and then walks the
    ring forwards, i.e. continues with the oldest one.
    """

    def __init__(self, capacity: int) -> None:
        self._capacity = capacity
        # ring order, the first entry is the current position
        self._ring: deque[T] = deque()

    def insert(self, value: T) -> None:
        """Insert a value, silently dropping the oldest one when full."""
        if self._ring and len(self._ring) >= self._capacity:
            if len(self._ring) > 1:
                del self._ring[1]
            else:
                self._ring.clear()
        if self._ring:
            self._ring.append(self._ring.popleft())
        self._ring.appendleft(value)

    def remove(self, value: T) -> None:
        """Remove the first occurrence of ``value``.

        Raises :class:`NotPresentError` if it is not contained.
        """
        for index, item in enumerate(self._ring):
            if item == value:
                if index == 0:
                    self._ring.popleft()
                else:
                    del self._ring[index]
                return
        raise NotPresentError()

    def __iter__(self) -> Iterator[T]:
        return iter(tuple(self._ring))

    def __len__(self) -> int:
        return len(self._ring)

    def filter(self, predicate: Callable[[T], bool]) -> list[T]:
        """Return all values for which ``predicate`` is true, in ring order."""
        return [item for item in self if predicate(item)]

    def find_first(self, predicate: Callable[[T], bool]) -> T:
        """Return the first value for which ``predicate`` is true.

        Raises :class:`NotPresentError` if there is none.
        """
        for item in self:
            if predicate(item):
                return item
        raise NotPresentError()

    def to_list(self) -> list[T]:
        """Return the values in ring order."""
        return list(self)