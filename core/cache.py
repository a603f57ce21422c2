"""Process-wide lazily initialized values.

Each value is computed at most once per process, on first access, and is
safe to request concurrently from several threads. There is no expiry or
refresh: once computed, the value lives as long as the process.
"""

import threading
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


class LazyValue(Generic[T]):
    def __init__(self, factory: Callable[[], T]):
        self._factory = factory
        self._lock = threading.Lock()
        self._value: Optional[T] = None
        self._ready = False

    @property
    def initialized(self) -> bool:
        return self._ready

    def get(self) -> T:
        """Return the value, building it on the first call.

        If the factory raises, nothing is stored and the error propagates;
        the next call tries again.
        """
        if self._ready:
            return self._value  # type: ignore[return-value]
        with self._lock:
            if not self._ready:
                self._value = self._factory()
                self._ready = True
            return self._value  # type: ignore[return-value]
