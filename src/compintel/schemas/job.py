"""Job lifecycle states and the events that move between them."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

from compintel.schemas.report import AnalysisReport


class JobStatus(str, Enum):
    IDLE = "IDLE"
    CRAWLING = "CRAWLING"
    ANALYZING = "ANALYZING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_running(self) -> bool:
        return self in (JobStatus.CRAWLING, JobStatus.ANALYZING)


class JobState(BaseModel):
    """Snapshot of the session: job phase plus the current report slot.

    ``report`` is the last successfully completed report. It survives new
    submissions and failures and is only replaced by a later success.
    """

    model_config = ConfigDict(frozen=True)

    status: JobStatus = JobStatus.IDLE
    message: str = ""
    report: AnalysisReport | None = None
    error: str | None = None  # error type name of the last failure
    view: Literal["new", "dashboard"] = "new"


class Submitted(BaseModel):
    primary_url: str
    competitors: list[str] = []


class ProgressReported(BaseModel):
    message: str


class Succeeded(BaseModel):
    report: AnalysisReport


class Failed(BaseModel):
    error: str
    detail: str = ""


class ResetElapsed(BaseModel):
    """The post-failure delay ran out."""


class Cancelled(BaseModel):
    """The caller aborted the in-flight analysis."""


JobEvent = Union[Submitted, ProgressReported, Succeeded, Failed, ResetElapsed, Cancelled]
