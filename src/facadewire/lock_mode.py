from __future__ import annotations

import threading
from contextlib import AbstractContextManager, nullcontext
from enum import Enum


class LockMode(Enum):
    """Select locking behavior for shared caches and binding stores.

    Use these values for ``ResolutionCache``, ``BindingStore`` and the objects
    that create them. Keep the default ``THREAD`` unless every access happens
    on a single thread.
    """

    THREAD = "thread"
    """Guard writes with ``threading.Lock``."""

    NONE = "none"
    """Disable locking around cache writes."""

    def create_lock(self) -> AbstractContextManager[object]:
        """Return a context manager that guards one critical section."""
        if self is LockMode.THREAD:
            return threading.Lock()
        return nullcontext()
