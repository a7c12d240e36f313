"""At-most-once memoization for remote lookups."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Hashable, TypeVar

from action_commander.core.errors import OperationCancelled

logger = logging.getLogger(__name__)

V = TypeVar("V")


class RequestCache(Generic[V]):
    """A dumb, thread-safe, in-memory cache for a short-lived process.

    Both values and exceptions are cached: a lookup that failed once is not
    retried during the same run.  A single lock guards the whole instance, so
    concurrent callers asking for the same key wait for the first one to
    finish and then reuse its outcome.
    """

    def __init__(self, name: str = "cache"):
        self.name = name
        self._lock = threading.Lock()
        self._entries: dict[Hashable, tuple[V | None, Exception | None]] = {}

    def do(self, key: Hashable, compute: Callable[[], V]) -> V:
        with self._lock:
            if key in self._entries:
                logger.debug("%s: hit key=%s", self.name, key)
                value, error = self._entries[key]
                if error is not None:
                    raise error
                return value  # type: ignore[return-value]

            logger.debug("%s: miss key=%s", self.name, key)
            try:
                value = compute()
            except OperationCancelled:
                raise
            except Exception as exc:
                self._entries[key] = (None, exc)
                raise
            self._entries[key] = (value, None)
            return value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
