"""Debounced trigger for automatic incremental passes."""

from __future__ import annotations

import threading
from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from .engine import SyncAlreadyRunningError

if TYPE_CHECKING:
    from collections.abc import Callable

log = getLogger(__name__)

DEFAULT_QUIET_SECONDS = 10.0


class _Timer(Protocol):
    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


type TimerFactory = Callable[[float, Callable[[], None]], _Timer]


class DebouncedSync:
    """Coalesce bursts of triggers into one call after a quiet interval.

    Every ``trigger()`` restarts the countdown. When the countdown expires
    while a pass is still running, the call is rescheduled instead of dropped.
    """

    def __init__(
        self,
        run: Callable[[], object],
        *,
        quiet_seconds: float = DEFAULT_QUIET_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._run = run
        self._quiet_seconds = quiet_seconds
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: _Timer | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self._quiet_seconds, partial(self._fire, self._generation))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                # superseded by a later trigger
                return
            self._timer = None
        try:
            self._run()
        except SyncAlreadyRunningError:
            log.info("A sync pass is still running; retrying after the quiet interval")
            self.trigger()
