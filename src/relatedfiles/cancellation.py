"""Cooperative cancellation for long-running traversals."""

import threading


class CancellationToken:
    """Thread-safe flag checked by the traversal at every scanned element.

    The traversal never raises on cancellation: it stops scanning, keeps what
    it has already emitted and reports a cancelled status.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


class _NeverCancelled(CancellationToken):
    def cancel(self) -> None:
        raise RuntimeError("NEVER_CANCELLED cannot be cancelled")


NEVER_CANCELLED = _NeverCancelled()
