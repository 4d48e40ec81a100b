"""Cancellation and deadline handling for probes.

A ``ProbeContext`` travels with a single probe. Every AWS call a prober
makes goes through ``ProbeContext.call``, which runs the call on a worker
thread and gives up waiting as soon as the context is cancelled or its
deadline passes. The caller then sees ``ProbeCancelledError`` rather
than a result the probe never finished computing.

Example
-------
::

    from resource_probe.context import ProbeContext

    ctx = ProbeContext.with_timeout(5.0)
    result = registry.probe("AWS::S3::Bucket", "my-bucket", ctx=ctx)
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import Any, TypeVar

from resource_probe.errors import ProbeCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Upper bound on how long ``call`` sleeps between cancellation checks.
_POLL_INTERVAL = 0.05


class ProbeContext:
    """Carries the cancellation flag and optional deadline for one probe.

    Parameters
    ----------
    deadline:
        Absolute deadline on the ``time.monotonic()`` clock, or ``None``
        for no deadline.
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._deadline = deadline
        self._cancelled = threading.Event()

    @classmethod
    def background(cls) -> "ProbeContext":
        """Return a context with no deadline. It can still be cancelled."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "ProbeContext":
        """Return a context whose deadline is *seconds* from now."""
        if seconds < 0:
            raise ValueError(f"timeout must be non-negative, got {seconds!r}")
        return cls(deadline=time.monotonic() + seconds)

    @property
    def deadline(self) -> float | None:
        return self._deadline

    @property
    def cancelled(self) -> bool:
        """Return True once ``cancel`` has been called."""
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Cancel the probe. Safe to call from any thread, any number of times."""
        self._cancelled.set()

    def remaining(self) -> float | None:
        """Seconds left before the deadline, floored at zero, or ``None``."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def check(self) -> None:
        """Raise ``ProbeCancelledError`` if the probe should stop now."""
        if self._cancelled.is_set():
            raise ProbeCancelledError("cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise ProbeCancelledError("deadline exceeded")

    def call(self, func: Callable[..., T], /, **kwargs: Any) -> T:
        """Run ``func(**kwargs)`` and stop waiting on cancellation or deadline.

        Exceptions raised by *func* are re-raised unchanged in the calling
        thread. If the context is cancelled or the deadline passes first,
        ``ProbeCancelledError`` is raised and the late result of the worker
        thread is discarded.

        Raises
        ------
        ProbeCancelledError
            If the context is cancelled, or the deadline passes, before
            *func* returns.
        """
        self.check()

        outcome: dict[str, Any] = {}
        finished = threading.Event()

        def _run() -> None:
            try:
                outcome["value"] = func(**kwargs)
            except BaseException as exc:  # re-raised in the caller's thread
                outcome["error"] = exc
            finally:
                finished.set()

        name = getattr(func, "__name__", "vendor-call")
        worker = threading.Thread(target=_run, name=f"probe-{name}", daemon=True)
        worker.start()

        while not finished.wait(self._wait_interval()):
            try:
                self.check()
            except ProbeCancelledError as exc:
                logger.debug("Abandoning in-flight call %s: %s", name, exc.reason)
                raise

        if "error" in outcome:
            raise outcome["error"]
        return outcome["value"]

    def _wait_interval(self) -> float:
        remaining = self.remaining()
        if remaining is None:
            return _POLL_INTERVAL
        return min(_POLL_INTERVAL, remaining)

    def __repr__(self) -> str:
        return f"ProbeContext(deadline={self._deadline!r}, cancelled={self.cancelled})"
