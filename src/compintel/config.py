"""YAML config loader — reads analysis-config.yml into AnalysisConfig."""

from pathlib import Path

import yaml

from compintel.schemas.config import AnalysisConfig


def clean_urls(urls: list[str] | None) -> list[str]:
    """Trim whitespace and drop blank entries, keeping order."""
    if not urls:
        return []
    return [u.strip() for u in urls if isinstance(u, str) and u.strip()]


def load_config(path: str | Path) -> AnalysisConfig:
    """Load and validate an analysis config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    # YAML loads lists with only commented-out items as None; normalize to empty list.
    # Also strip empty-string or None items from actual lists.
    if "competitor_urls" in raw:
        if isinstance(raw["competitor_urls"], list) or raw["competitor_urls"] is None:
            raw["competitor_urls"] = clean_urls(raw["competitor_urls"])
    if isinstance(raw.get("primary_url"), str):
        raw["primary_url"] = raw["primary_url"].strip()

    return AnalysisConfig(**raw)
