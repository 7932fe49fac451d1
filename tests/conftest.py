"""Shared test fixtures."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock

import pytest

from compintel.agents.competitor_analysis.hydrator import hydrate
from compintel.schemas.report import AnalysisReport
from compintel.shared.openai_client import GenerationClient

# Root of the test fixtures
FIXTURES_DIR = Path(__file__).parent / "fixtures"

PRIMARY = "https://acme.com"
RIVAL = "https://rival.com"


@pytest.fixture
def payload_text() -> str:
    """Raw JSON text for the acme-vs-rival scenario."""
    return (FIXTURES_DIR / "acme_vs_rival.json").read_text()


@pytest.fixture
def payload(payload_text: str) -> dict[str, Any]:
    return json.loads(payload_text)


@pytest.fixture
def report(payload_text: str) -> AnalysisReport:
    """A hydrated report for https://acme.com vs https://rival.com."""
    return hydrate(payload_text, PRIMARY, [RIVAL])


@pytest.fixture
def mock_generation_client() -> GenerationClient:
    """Return a GenerationClient with a mocked OpenAI SDK underneath."""
    client = GenerationClient(api_key="sk-test")
    client._client = AsyncMock()
    return client


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Write a minimal valid config YAML and return its path."""
    cfg = tmp_path / "config.yml"
    cfg.write_text(
        """\
primary_url: "https://acme.com"
competitor_urls:
  - "https://rival.com"
output_directory: "{out}"
""".format(out=str(tmp_path / "output"))
    )
    return cfg
