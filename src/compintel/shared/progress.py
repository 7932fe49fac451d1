"""Progress reporting: an ordered message channel and a Rich job display."""

from __future__ import annotations

from typing import Callable

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn

from compintel.schemas.job import JobState, JobStatus

console = Console()

MessageListener = Callable[[str], None]


class ProgressChannel:
    """Ordered, synchronous channel for human-readable progress messages.

    Every published message is kept in ``messages`` (so callers and tests can
    inspect the exact order) and forwarded to each subscriber in turn.
    """

    def __init__(self) -> None:
        self.messages: list[str] = []
        self._subscribers: list[MessageListener] = []

    def subscribe(self, listener: MessageListener) -> None:
        self._subscribers.append(listener)

    def publish(self, message: str) -> None:
        self.messages.append(message)
        for listener in list(self._subscribers):
            listener(message)

    def clear(self) -> None:
        self.messages.clear()


_STATUS_STYLE = {
    JobStatus.IDLE: "dim",
    JobStatus.CRAWLING: "cyan",
    JobStatus.ANALYZING: "magenta",
    JobStatus.COMPLETED: "green",
    JobStatus.FAILED: "red",
}


class JobProgress:
    """Rich spinner that mirrors job state changes.

    Pass :meth:`on_state` to :meth:`JobStore.subscribe`.
    """

    def __init__(self, label: str = "Competitive analysis") -> None:
        self._label = label
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_id: int | None = None

    def __enter__(self) -> "JobProgress":
        self._progress.__enter__()
        self._task_id = self._progress.add_task(f"[cyan]{self._label}[/]", total=None)
        return self

    def __exit__(self, *args: object) -> None:
        self._progress.__exit__(*args)

    def on_state(self, state: JobState) -> None:
        if self._task_id is None:
            return
        style = _STATUS_STYLE[state.status]
        description = f"[{style}]{self._label}[/] [{style}]{state.status.value}[/]"
        if state.message:
            description += f": {state.message}"
        done = state.status in (JobStatus.COMPLETED, JobStatus.FAILED)
        if state.status is JobStatus.COMPLETED:
            description = f"[green]✓ {self._label}[/]"
        elif state.status is JobStatus.FAILED:
            description = f"[red]✗ {self._label}: {state.message}[/]"
        self._progress.update(
            self._task_id,
            description=description,
            total=1 if done else None,
            completed=1 if done else 0,
        )
