"""Pure transition function for the analysis job lifecycle.

    IDLE ──submit──▶ CRAWLING ──progress──▶ ANALYZING
                       │  ▲                    │
                       │  └──── progress ──────┤
                       ├──────── success ──────┴──▶ COMPLETED ──submit──▶ CRAWLING
                       └──────── failure ─────────▶ FAILED ──reset──▶ IDLE

Running states can also be cancelled back to IDLE.
"""

from __future__ import annotations

from compintel.schemas.job import (
    Cancelled,
    Failed,
    JobEvent,
    JobState,
    JobStatus,
    ProgressReported,
    ResetElapsed,
    Submitted,
    Succeeded,
)

SUBMITTED_MESSAGE = "Initializing crawl agents..."
FAILED_MESSAGE = "Analysis failed. Please try again."
CANCELLED_MESSAGE = "Analysis cancelled."

# Progress messages containing these words mean the model has moved past
# extraction and is writing the report.
_ANALYZING_HINTS = ("synthesiz", "analyzing", "report")
_CRAWLING_HINTS = ("crawl", "extract", "initializ", "search")


class InvalidTransition(ValueError):
    """An event arrived that the current state cannot accept."""


def phase_for_message(message: str, current: JobStatus) -> JobStatus:
    """Advisory phase for a progress message; unknown messages keep the phase."""
    lowered = message.lower()
    if any(hint in lowered for hint in _ANALYZING_HINTS):
        return JobStatus.ANALYZING
    if any(hint in lowered for hint in _CRAWLING_HINTS):
        return JobStatus.CRAWLING
    return current


def transition(state: JobState, event: JobEvent) -> JobState:
    """Return the state that results from applying ``event`` to ``state``."""
    status = state.status

    if isinstance(event, Submitted):
        if status.is_running:
            raise InvalidTransition(f"Cannot submit a new analysis while {status.value}")
        return state.model_copy(update={
            "status": JobStatus.CRAWLING,
            "message": SUBMITTED_MESSAGE,
            "error": None,
        })

    if isinstance(event, ProgressReported):
        if not status.is_running:
            return state
        return state.model_copy(update={
            "status": phase_for_message(event.message, status),
            "message": event.message,
        })

    if isinstance(event, Succeeded):
        if not status.is_running:
            raise InvalidTransition(f"No analysis in flight to complete (status {status.value})")
        return state.model_copy(update={
            "status": JobStatus.COMPLETED,
            "message": "",
            "report": event.report,
            "error": None,
            "view": "dashboard",
        })

    if isinstance(event, Failed):
        if not status.is_running:
            raise InvalidTransition(f"No analysis in flight to fail (status {status.value})")
        return state.model_copy(update={
            "status": JobStatus.FAILED,
            "message": FAILED_MESSAGE,
            "error": event.error,
        })

    if isinstance(event, ResetElapsed):
        if status is not JobStatus.FAILED:
            return state
        return state.model_copy(update={"status": JobStatus.IDLE, "message": ""})

    if isinstance(event, Cancelled):
        if not status.is_running:
            return state
        return state.model_copy(update={"status": JobStatus.IDLE, "message": CANCELLED_MESSAGE})

    raise InvalidTransition(f"Unknown event: {event!r}")
