"""Competitor Analysis Agent — prompt, search-grounded generation, hydration."""

from __future__ import annotations

import logging
from typing import Protocol

from compintel.agents.competitor_analysis.hydrator import hydrate
from compintel.agents.competitor_analysis.prompts import build_instruction
from compintel.errors import InvalidRequest
from compintel.schemas.config import MAX_COMPETITORS
from compintel.schemas.report import AnalysisReport
from compintel.shared.openai_client import ProgressCallback

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything with the ``GenerationClient.generate`` signature."""

    async def generate(
        self, instruction: str, on_progress: ProgressCallback | None = None,
    ) -> str: ...


def validate_request(primary_url: str, competitor_urls: list[str]) -> None:
    """Reject requests that must never reach the generation service."""
    if not primary_url or not primary_url.strip():
        raise InvalidRequest("A primary URL is required")
    if len(competitor_urls) > MAX_COMPETITORS:
        raise InvalidRequest(
            f"At most {MAX_COMPETITORS} competitors are supported, got {len(competitor_urls)}"
        )
    if any(not url or not url.strip() for url in competitor_urls):
        raise InvalidRequest("Competitor URLs must not be blank")


class CompetitorAnalysisAgent:
    """Turns a primary URL plus competitors into an :class:`AnalysisReport`.

    The flow is linear: build the instruction, await the generation call,
    hydrate the text. Errors propagate as typed :class:`AnalysisError`
    subclasses; no state is kept between runs.
    """

    def __init__(self, client: TextGenerator) -> None:
        self.client = client

    @property
    def name(self) -> str:
        return "Competitor Analysis"

    def build_instruction(self, primary_url: str, competitor_urls: list[str]) -> str:
        return build_instruction(primary_url, competitor_urls)

    def parse_output(
        self, raw_text: str, primary_url: str, competitor_urls: list[str],
    ) -> AnalysisReport:
        return hydrate(raw_text, primary_url, competitor_urls)

    async def run_analysis(
        self,
        primary_url: str,
        competitor_urls: list[str],
        *,
        on_progress: ProgressCallback | None = None,
    ) -> AnalysisReport:
        """Run one analysis end to end.

        Raises ``InvalidRequest`` before any network call,
        ``GenerationUnavailable`` if the service fails, and
        ``MalformedResponse`` if its text cannot be hydrated.
        """
        competitor_urls = list(competitor_urls)
        validate_request(primary_url, competitor_urls)

        instruction = self.build_instruction(primary_url, competitor_urls)
        raw = await self.client.generate(instruction, on_progress)

        logger.debug("Agent %s raw output:\n%s", self.name, raw[:500])
        return self.parse_output(raw, primary_url, competitor_urls)
