"""Caller-owned store that applies job events and notifies listeners."""

from __future__ import annotations

import logging
from typing import Callable

from compintel.jobs.machine import transition
from compintel.schemas.job import JobEvent, JobState

logger = logging.getLogger(__name__)

StateListener = Callable[[JobState], None]


class JobStore:
    """Holds the current :class:`JobState`; the only place it is mutated."""

    def __init__(self, initial: JobState | None = None) -> None:
        self._state = initial or JobState()
        self._listeners: list[StateListener] = []

    @property
    def state(self) -> JobState:
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, event: JobEvent) -> JobState:
        """Apply ``event`` and notify listeners if the state changed."""
        previous = self._state
        self._state = transition(previous, event)
        if self._state is not previous:
            logger.debug(
                "Job %s -> %s (%s)",
                previous.status.value, self._state.status.value, type(event).__name__,
            )
            for listener in list(self._listeners):
                listener(self._state)
        return self._state
