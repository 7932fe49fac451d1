"""Tests for the progress channel and the Rich job display."""

from __future__ import annotations

from compintel.schemas.job import JobState, JobStatus
from compintel.shared.progress import JobProgress, ProgressChannel


class TestProgressChannel:
    def test_keeps_order(self) -> None:
        channel = ProgressChannel()
        for msg in ("one", "two", "three"):
            channel.publish(msg)
        assert channel.messages == ["one", "two", "three"]

    def test_subscribers_receive_each_message(self) -> None:
        channel = ProgressChannel()
        first: list[str] = []
        second: list[str] = []
        channel.subscribe(first.append)
        channel.subscribe(second.append)

        channel.publish("hello")
        channel.publish("world")

        assert first == second == ["hello", "world"]

    def test_clear(self) -> None:
        channel = ProgressChannel()
        channel.publish("old")
        channel.clear()
        assert channel.messages == []


class TestJobProgress:
    def test_ignores_state_outside_context(self) -> None:
        JobProgress().on_state(JobState(status=JobStatus.CRAWLING, message="x"))

    def test_tracks_states(self) -> None:
        with JobProgress("Run") as progress:
            progress.on_state(JobState(status=JobStatus.CRAWLING, message="Crawling"))
            task = progress._progress.tasks[0]
            assert "CRAWLING" in task.description
            assert "Crawling" in task.description

            progress.on_state(JobState(status=JobStatus.COMPLETED))
            task = progress._progress.tasks[0]
            assert "✓ Run" in task.description
            assert task.finished

    def test_failure_shows_message(self) -> None:
        with JobProgress("Run") as progress:
            progress.on_state(JobState(status=JobStatus.FAILED, message="Analysis failed. Please try again."))
            assert "Analysis failed" in progress._progress.tasks[0].description
