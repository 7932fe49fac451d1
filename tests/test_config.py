"""Tests for config loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from compintel.config import clean_urls, load_config
from compintel.schemas.config import AnalysisConfig


class TestAnalysisConfig:
    """Test the AnalysisConfig Pydantic model directly."""

    def test_defaults(self) -> None:
        cfg = AnalysisConfig()
        assert cfg.primary_url == ""
        assert cfg.competitor_urls == []
        assert cfg.model == "gpt-4o"
        assert cfg.temperature == 0.2
        assert cfg.reset_delay_seconds == 3.0

    def test_at_most_four_competitors(self) -> None:
        with pytest.raises(ValidationError, match="At most 4"):
            AnalysisConfig(
                primary_url="https://a.com",
                competitor_urls=[f"https://c{i}.com" for i in range(5)],
            )

    def test_four_competitors_ok(self) -> None:
        cfg = AnalysisConfig(competitor_urls=[f"https://c{i}.com" for i in range(4)])
        assert len(cfg.competitor_urls) == 4

    def test_temperature_must_be_non_zero(self) -> None:
        with pytest.raises(ValidationError, match="temperature"):
            AnalysisConfig(temperature=0)

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AnalysisConfig(timeout_seconds=0)


class TestCleanUrls:
    def test_strips_and_drops_blanks(self) -> None:
        assert clean_urls(["  https://a.com ", "", "   ", "https://b.com"]) == [
            "https://a.com",
            "https://b.com",
        ]

    def test_none_is_empty(self) -> None:
        assert clean_urls(None) == []


class TestLoadConfig:
    """Test YAML file loading."""

    def test_load_valid_file(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.primary_url == "https://acme.com"
        assert cfg.competitor_urls == ["https://rival.com"]

    def test_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("just a string")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(bad)

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yml"
        empty.write_text("")
        assert load_config(empty) == AnalysisConfig()

    def test_null_lists_become_empty(self, tmp_path: Path) -> None:
        """YAML files with commented-out list items load as None."""
        cfg_file = tmp_path / "config.yml"
        cfg_file.write_text(
            """\
primary_url: "https://acme.com"
competitor_urls:
  # - "https://example.com"
"""
        )
        cfg = load_config(cfg_file)
        assert cfg.competitor_urls == []

    def test_blank_competitors_dropped(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "config.yml"
        cfg_file.write_text(
            """\
primary_url: "  https://acme.com  "
competitor_urls:
  - ""
  - "https://rival.com"
  -
"""
        )
        cfg = load_config(cfg_file)
        assert cfg.primary_url == "https://acme.com"
        assert cfg.competitor_urls == ["https://rival.com"]
