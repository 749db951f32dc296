# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Thread-safe once-only value slot."""

import threading
from collections.abc import Callable
from typing import Any

from ..types import Undefined

__all__ = ("OnceGuard",)


class OnceGuard:
    """Value slot filled at most once per success, using double-checked locking.

    The slot starts as ``Undefined``. The first ``ensure`` call takes the lock,
    runs the factory and stores whatever it returns, ``None`` included. The
    lock is then retired: later calls see the populated slot and return
    without locking.

    A factory that raises leaves the slot empty and the lock in place, so the
    next ``ensure`` runs the factory again.

    Example:
        guard = OnceGuard()
        guard.ensure(load_config)   # runs load_config
        guard.ensure(load_config)   # returns the cached result

    Attributes:
        value: The cached value, or ``Undefined`` before the first success.
    """

    __slots__ = ("value", "_lock", "_owner")

    def __init__(self) -> None:
        self.value: Any = Undefined
        self._lock: threading.RLock | None = threading.RLock()
        # ident of the thread running the factory, None when idle
        self._owner: int | None = None

    @property
    def filled(self) -> bool:
        """Check if the slot holds a value."""
        return self.value is not Undefined

    @property
    def retired(self) -> bool:
        """Check if the lock has been discarded."""
        return self._lock is None

    def ensure(
        self,
        factory: Callable[[], Any],
        on_reentry: Callable[[], Exception] | None = None,
    ) -> Any:
        """Return the slot value, running ``factory`` if the slot is empty.

        Args:
            factory: Zero-argument callable producing the value.
            on_reentry: Builds the exception raised when ``factory`` ends up
                calling ``ensure`` on this same guard. Defaults to
                ``RuntimeError``.

        Returns:
            The cached value, identical for every caller.
        """
        value = self.value
        if value is not Undefined:
            return value

        lock = self._lock
        if lock is None:
            # retired only after value was written
            return self.value

        with lock:
            if self.value is Undefined:
                if self._owner == threading.get_ident():
                    raise (
                        on_reentry()
                        if on_reentry is not None
                        else RuntimeError("OnceGuard factory re-entered itself")
                    )
                self._owner = threading.get_ident()
                try:
                    self.value = factory()
                finally:
                    self._owner = None
                self._lock = None
        return self.value
