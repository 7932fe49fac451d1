"""Orchestrator — the single entry point that runs an analysis as a job."""

from __future__ import annotations

import asyncio
import logging

from compintel.agents.competitor_analysis.agent import CompetitorAnalysisAgent, validate_request
from compintel.errors import AnalysisInProgress, GenerationUnavailable
from compintel.jobs.store import JobStore
from compintel.schemas.job import (
    Cancelled,
    Failed,
    JobState,
    ProgressReported,
    ResetElapsed,
    Submitted,
    Succeeded,
)
from compintel.schemas.report import AnalysisReport
from compintel.shared.progress import ProgressChannel

logger = logging.getLogger(__name__)

DEFAULT_RESET_DELAY = 3.0  # seconds in FAILED before returning to IDLE


class AnalysisOrchestrator:
    """Runs analyses one at a time against a caller-owned :class:`JobStore`.

    Lifecycle:
        submit → CRAWLING/ANALYZING (progress) → COMPLETED | FAILED
        FAILED → IDLE after ``reset_delay`` seconds

    Generation and hydration errors stop here: they are logged, recorded
    in the job state and never re-raised.
    """

    def __init__(
        self,
        agent: CompetitorAnalysisAgent,
        *,
        store: JobStore | None = None,
        channel: ProgressChannel | None = None,
        timeout: float | None = None,
        reset_delay: float = DEFAULT_RESET_DELAY,
    ) -> None:
        self.agent = agent
        self.store = store or JobStore()
        self.channel = channel or ProgressChannel()
        self.timeout = timeout
        self.reset_delay = reset_delay
        self._task: asyncio.Task[AnalysisReport] | None = None
        self._reset_task: asyncio.Task[None] | None = None
        self.channel.subscribe(self._on_progress)

    @property
    def state(self) -> JobState:
        return self.store.state

    @property
    def report(self) -> AnalysisReport | None:
        """The current report slot (last completed analysis)."""
        return self.store.state.report

    def _on_progress(self, message: str) -> None:
        self.store.dispatch(ProgressReported(message=message))

    async def start_analysis(
        self, primary_url: str, competitors: list[str],
    ) -> AnalysisReport | None:
        """Run one analysis and return its report, or ``None`` if it failed.

        Raises ``InvalidRequest`` (no state change) for a bad request and
        ``AnalysisInProgress`` if another analysis is still running.
        """
        competitors = list(competitors)
        validate_request(primary_url, competitors)
        if self.store.state.status.is_running:
            raise AnalysisInProgress("An analysis is already running")

        self._cancel_reset()
        self.channel.clear()
        self.store.dispatch(Submitted(primary_url=primary_url, competitors=competitors))

        # cancel() detaches the task; a detached run never touches the store
        task = asyncio.create_task(self._run(primary_url, competitors))
        self._task = task
        try:
            report = await task
        except asyncio.CancelledError:
            if self._task is not task:
                logger.info("Analysis of %s cancelled", primary_url)
                return None
            # the caller itself was cancelled; leave the job idle and propagate
            self._task = None
            self.store.dispatch(Cancelled())
            raise
        except Exception as exc:
            if self._task is not task:
                logger.info("Cancelled analysis of %s ended with %r", primary_url, exc)
                return None
            self._task = None
            logger.exception("Analysis of %s failed", primary_url)
            self.store.dispatch(Failed(error=type(exc).__name__, detail=str(exc)))
            self._schedule_reset()
            return None

        if self._task is not task:
            logger.info("Discarding result of cancelled analysis of %s", primary_url)
            return None
        self._task = None
        self.store.dispatch(Succeeded(report=report))
        return report

    async def _run(self, primary_url: str, competitors: list[str]) -> AnalysisReport:
        run = self.agent.run_analysis(
            primary_url, competitors, on_progress=self.channel.publish,
        )
        if self.timeout is None:
            return await run
        try:
            return await asyncio.wait_for(run, timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            raise GenerationUnavailable(
                f"Generation timed out after {self.timeout:g}s"
            ) from exc

    def cancel(self) -> bool:
        """Abort the in-flight analysis. Returns False if nothing was running.

        The job returns to IDLE at once and a new analysis may be submitted
        before the cancelled run has finished unwinding.
        """
        task = self._task
        if task is None or task.done():
            return False
        self._task = None
        task.cancel()
        self.store.dispatch(Cancelled())
        return True

    # ------------------------------------------------------------------
    # Automatic FAILED → IDLE reset
    # ------------------------------------------------------------------

    def _schedule_reset(self) -> None:
        self._cancel_reset()
        self._reset_task = asyncio.create_task(self._reset_after_delay())

    def _cancel_reset(self) -> None:
        if self._reset_task is not None and not self._reset_task.done():
            self._reset_task.cancel()
        self._reset_task = None

    async def _reset_after_delay(self) -> None:
        await asyncio.sleep(self.reset_delay)
        self.store.dispatch(ResetElapsed())

    async def wait_for_reset(self) -> None:
        """Block until a pending FAILED → IDLE reset has happened."""
        if self._reset_task is not None:
            await self._reset_task
