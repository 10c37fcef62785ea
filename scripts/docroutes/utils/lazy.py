"""Compute-once values shared across threads."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


class Lazy(Generic[T]):
    """A value built on first access, exactly once.

    Concurrent first callers block on the lock until the build finishes and
    then all observe the same result. A build that raises poisons the value:
    every later call re-raises the original exception.
    """

    def __init__(self, build: Callable[[], T], name: str = "value"):
        self._build = build
        self._name = name
        self._lock = threading.Lock()
        self._ready = False
        self._value: Optional[T] = None
        self._error: Optional[BaseException] = None

    @property
    def is_ready(self) -> bool:
        return self._ready

    def get(self) -> T:
        if self._ready:
            return self._value  # type: ignore[return-value]

        with self._lock:
            if self._error is not None:
                raise self._error
            if not self._ready:
                logger.info("building %s", self._name)
                try:
                    self._value = self._build()
                except Exception as e:
                    self._error = e
                    raise
                self._ready = True

        return self._value  # type: ignore[return-value]
