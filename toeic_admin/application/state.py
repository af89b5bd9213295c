"""In-process observable state containers.

Views that show the same data subscribe to one store and are called back
after every write, so a write from one request is visible to all of them.
"""

from __future__ import annotations

import copy
import itertools
import logging
import threading
from collections.abc import Callable
from typing import Any, Generic, Protocol, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
Listener = Callable[[T], None]


class CollectionPersistencePort(Protocol):
    def load_collection(self, key: str) -> list[dict[str, Any]]:
        ...

    def save_collection(self, key: str, items: list[dict[str, Any]]) -> None:
        ...


class ObservableStore(Generic[T]):
    def __init__(self, initial: T):
        self._value = initial
        self._lock = threading.RLock()
        self._listeners: dict[int, Listener[T]] = {}
        self._tokens = itertools.count(1)

    def get(self) -> T:
        with self._lock:
            return copy.deepcopy(self._value)

    def set(self, value: T) -> None:
        with self._lock:
            self._value = copy.deepcopy(value)
            listeners = list(self._listeners.values())
        self._notify(listeners, value)

    def update(self, mutate: Callable[[T], T]) -> T:
        """Apply ``mutate`` to a copy of the current value and store the result."""
        with self._lock:
            value = mutate(copy.deepcopy(self._value))
            self.set(value)
            return value

    def subscribe(self, listener: Listener[T]) -> Callable[[], None]:
        """Register ``listener``; the returned callable unsubscribes it."""
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = listener

        def unsubscribe() -> None:
            with self._lock:
                self._listeners.pop(token, None)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        with self._lock:
            return len(self._listeners)

    @staticmethod
    def _notify(listeners: list[Listener[T]], value: T) -> None:
        for listener in listeners:
            try:
                listener(copy.deepcopy(value))
            except Exception:
                logger.exception("State listener %r failed", listener)


class PersistentCollection(ObservableStore[list[dict[str, Any]]]):
    """A JSON list kept under one storage key and mirrored in memory."""

    def __init__(self, *, persistence: CollectionPersistencePort, key: str):
        self.persistence = persistence
        self.key = key
        super().__init__(persistence.load_collection(key))

    def set(self, value: list[dict[str, Any]]) -> None:
        with self._lock:
            self.persistence.save_collection(self.key, value)
            super().set(value)

    def reload(self) -> list[dict[str, Any]]:
        """Re-read the key from storage and notify subscribers."""
        with self._lock:
            value = self.persistence.load_collection(self.key)
            super().set(value)
            return value
