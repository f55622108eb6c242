"""
Reactive value container for entity caches.

A ReactiveStore holds one value (the ordered snapshot of an entity
type's records) and notifies subscribers whenever a new value is set.
Subscribers receive the current value immediately on subscribe.
"""

from __future__ import annotations

from typing import Callable, Generic, List, TypeVar

T = TypeVar("T")

Subscriber = Callable[[T], None]


class ReactiveStore(Generic[T]):
    """Observable single-value container.

    Example:
        >>> store = ReactiveStore([])
        >>> unsubscribe = store.subscribe(print)
        []
        >>> store.set([{"id": 1}])
        [{'id': 1}]
        >>> unsubscribe()
    """

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: List[Subscriber[T]] = []

    def get(self) -> T:
        """Current value."""
        return self._value

    def set(self, value: T) -> None:
        """Publish a new value to every subscriber, in subscription order."""
        self._value = value
        for subscriber in list(self._subscribers):
            subscriber(value)

    def subscribe(self, subscriber: Subscriber[T]) -> Callable[[], None]:
        """Register a subscriber and call it with the current value.

        Returns:
            Function that removes the subscriber
        """
        self._subscribers.append(subscriber)
        subscriber(self._value)

        def unsubscribe() -> None:
            if subscriber in self._subscribers:
                self._subscribers.remove(subscriber)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
