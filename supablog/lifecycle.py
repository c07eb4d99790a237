"""Cancellation tokens and scoped subscriptions."""

from typing import Callable


class CancelToken:
    """Marks an async load as abandoned once its owner is torn down.

    Cancelling does not stop the underlying network call; holders check
    ``cancelled`` before applying a result.
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True


class Subscription:
    """Handle for a registered listener.

    ``unsubscribe()`` is idempotent. Used as a context manager, the listener
    is unregistered on exit.
    """

    def __init__(self, unregister: Callable[[], None]):
        self._unregister = unregister
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def unsubscribe(self):
        if self._active:
            self._active = False
            self._unregister()

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.unsubscribe()
        return False
