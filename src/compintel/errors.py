"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations


class AnalysisError(Exception):
    """Base class for every failure the analysis pipeline can report."""


class InvalidRequest(AnalysisError):
    """The caller's request was rejected before any generation call."""


class AnalysisInProgress(AnalysisError):
    """A new analysis was submitted while another one is still running."""


class GenerationUnavailable(AnalysisError):
    """The generation service failed, timed out, or returned no text."""


class MalformedResponse(AnalysisError):
    """The generated text could not be turned into a report."""
