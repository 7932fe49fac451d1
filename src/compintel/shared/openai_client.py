"""Async OpenAI API wrapper for the search-grounded report generation call."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable

from openai import AsyncOpenAI, OpenAIError

from compintel.agents.competitor_analysis.prompts import urls_in_instruction
from compintel.errors import GenerationUnavailable

logger = logging.getLogger(__name__)

# Default model and sampling settings
MODEL = "gpt-4o"
TEMPERATURE = 0.2
MAX_OUTPUT_TOKENS = 16_384

# Web search tool for the Responses API; grounds the model in live page
# content.
SEARCH_TOOL: dict[str, Any] = {"type": "web_search_preview"}

ProgressCallback = Callable[[str], None]
"""Called with a short human-readable status message."""

MSG_EXTRACTING = "Crawling and extracting deep insights (SWOT, Pricing, Tech)..."
MSG_SYNTHESIZING = "Synthesizing strategic report..."


def initializing_message(site_count: int) -> str:
    return f"Initializing research agents for {site_count} sites..."


class GenerationClient:
    """Thin async wrapper around the OpenAI Responses API.

    One request, one text blob back. Every failure is reported as
    :class:`GenerationUnavailable`; retries are the caller's business.
    """

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str = MODEL,
        temperature: float = TEMPERATURE,
    ) -> None:
        self._api_key = api_key
        self._client: AsyncOpenAI | None = None
        self.model = model
        self.temperature = temperature

    def _get_client(self) -> AsyncOpenAI:
        # Built lazily so a missing OPENAI_API_KEY fails the call, not the import.
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self._api_key)
        return self._client

    async def generate(
        self,
        instruction: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Run the instruction through the model with web search enabled.

        Emits an initializing and an extracting message before the request
        and a synthesizing message once text has come back.
        """
        if on_progress:
            on_progress(initializing_message(len(urls_in_instruction(instruction))))
            on_progress(MSG_EXTRACTING)

        try:
            response = await self._get_client().responses.create(
                model=self.model,
                input=instruction,
                tools=[SEARCH_TOOL],
                temperature=self.temperature,
                max_output_tokens=MAX_OUTPUT_TOKENS,
            )
        except OpenAIError as exc:
            logger.error("Generation request failed: %s", exc)
            raise GenerationUnavailable(f"Generation request failed: {exc}") from exc

        error = getattr(response, "error", None)
        if error:
            raise GenerationUnavailable(f"Generation service reported an error: {error}")

        text = getattr(response, "output_text", None) or ""
        if not text.strip():
            raise GenerationUnavailable("Generation service returned no text")

        usage = getattr(response, "usage", None)
        if usage:
            logger.info(
                "Generation finished (input_tokens=%s, output_tokens=%s)",
                getattr(usage, "input_tokens", 0),
                getattr(usage, "output_tokens", 0),
            )

        if on_progress:
            on_progress(MSG_SYNTHESIZING)
        return text


# ======================================================================
# Dry-run mock client (no API calls)
# ======================================================================


def _dry_run_payload(urls: list[str]) -> dict[str, Any]:
    """Canned, well-formed report payload keyed by the requested URLs."""
    primary = urls[0] if urls else "https://example.com"
    urls = urls or [primary]
    return {
        "profiles": [
            {
                "url": url,
                "name": f"Company {i + 1}",
                "description": "Dry-run profile. No data was fetched.",
                "colors": ["#2563eb"],
            }
            for i, url in enumerate(urls)
        ],
        "features": [
            {
                "name": "Login with Google",
                "canonical_feature": "SSO",
                "confidence": 0.9,
                "evidence_snippet": "Sign in with Google on the login page.",
                "availability": {url: i == 0 for i, url in enumerate(urls)},
            },
            {
                "name": "Usage dashboards",
                "canonical_feature": "Analytics",
                "confidence": 0.7,
                "evidence_snippet": "Real-time reporting dashboards.",
                "availability": {url: True if i == 0 else "Beta" for i, url in enumerate(urls)},
            },
        ],
        "pricing": [
            {
                "url": primary,
                "has_free_trial": True,
                "currency": "USD",
                "tiers": [
                    {"tier_name": "Starter", "price": "$10", "billing_cycle": "month",
                     "features_included": ["SSO", "Dashboards"]},
                ],
            }
        ],
        "seo": [
            {
                "url": url,
                "page_speed_score": 85 - 10 * i,
                "meta_description_health": "Good",
                "schema_types": ["Organization"],
                "blog_freshness": "Medium",
                "mobile_friendly": True,
            }
            for i, url in enumerate(urls)
        ],
        "swot": {
            url: {
                "strengths": ["Clear positioning"],
                "weaknesses": ["Limited integrations"],
                "opportunities": ["Mid-market expansion"],
                "threats": ["Price competition"],
            }
            for url in urls
        },
        "tech_stacks": [
            {"url": url, "frontend": ["React"], "backend": ["Python"], "analytics": ["GA4"]}
            for url in urls
        ],
        "market_positioning": {
            url: {"x": max(10, 70 - 15 * i), "y": max(10, 60 - 10 * i)}
            for i, url in enumerate(urls)
        },
        "summary": "Dry-run report: the primary company leads on SSO and analytics.",
        "recommendations": ["Publish pricing for all tiers", "Invest in integrations"],
    }


class DryRunClient:
    """Drop-in replacement for GenerationClient that makes zero API calls."""

    model = "dry-run"
    temperature = TEMPERATURE

    async def generate(
        self,
        instruction: str,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        urls = urls_in_instruction(instruction)
        if on_progress:
            on_progress(initializing_message(len(urls)))
            on_progress(MSG_EXTRACTING)
        logger.info("[dry-run] Returning canned report for %d sites", len(urls))
        text = json.dumps(_dry_run_payload(urls), indent=2)
        if on_progress:
            on_progress(MSG_SYNTHESIZING)
        return text
