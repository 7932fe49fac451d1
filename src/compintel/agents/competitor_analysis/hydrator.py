"""Turn raw model text into an :class:`AnalysisReport`.

Hydration is all-or-nothing: it either returns a fully validated report or
raises :class:`MalformedResponse`. Nothing is ever partially populated.
"""

from __future__ import annotations

import json
import logging
import re
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from compintel.agents.competitor_analysis.prompts import REQUIRED_FIELDS
from compintel.errors import MalformedResponse
from compintel.schemas.report import AnalysisReport

logger = logging.getLogger(__name__)

# Anchored to the ends of the text so fence sequences inside string values
# are left alone.
_LEADING_FENCE = re.compile(r"\A```[A-Za-z]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```\Z")

_LIST_FIELDS = ("profiles", "features", "pricing", "seo", "tech_stacks", "recommendations")
_MAP_FIELDS = ("swot", "market_positioning")
_URL_ROW_FIELDS = ("profiles", "pricing", "seo", "tech_stacks")

_SCHEME = re.compile(r"^[a-z][a-z0-9+.-]*://")


def strip_fence_markers(text: str) -> str:
    """Remove one leading and one trailing code-fence marker, if present.

    Text without markers only loses surrounding whitespace.
    """
    text = text.strip()
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def canonical_url(url: str) -> str:
    """Comparison key for a URL: no scheme, no leading www., no trailing slash."""
    key = url.strip().lower()
    key = _SCHEME.sub("", key)
    if key.startswith("www."):
        key = key[4:]
    return key.rstrip("/")


class _UrlIndex:
    """Requested URLs plus the canonical keys that map back to exactly one of them."""

    def __init__(self, urls: list[str]) -> None:
        self.requested = set(urls)
        self.by_key: dict[str, str] = {}
        ambiguous: set[str] = set()
        for url in urls:
            key = canonical_url(url)
            if self.by_key.get(key, url) != url:
                ambiguous.add(key)
            self.by_key[key] = url
        # e.g. http:// and https:// variants of one site were both requested
        for key in ambiguous:
            logger.debug("Not reconciling ambiguous URL key %r", key)
            del self.by_key[key]

    def resolve(self, key: str) -> str:
        if key in self.requested:
            return key
        return self.by_key.get(canonical_url(key), key)


def _reconcile_map(mapping: dict[str, Any], index: _UrlIndex, field: str) -> dict[str, Any]:
    """Rewrite near-miss URL keys to the requested spelling.

    A key that already matches exactly always wins over a reconciled one.
    """
    result: dict[str, Any] = {k: v for k, v in mapping.items() if k in index.requested}
    for key, value in mapping.items():
        if key in result:
            continue
        fixed = index.resolve(key)
        if fixed in result:
            logger.debug("Dropping duplicate %s key %r (already have %r)", field, key, fixed)
            continue
        if fixed != key:
            logger.info("Reconciled %s key %r -> %r", field, key, fixed)
        result[fixed] = value
    return result


def reconcile_urls(data: dict[str, Any], urls: list[str]) -> dict[str, Any]:
    """Align URL keys and ``url`` fields in the payload with the requested URLs.

    Models sometimes echo ``acme.com`` for ``https://acme.com``; those are
    mapped back. Keys matching no requested URL, or matching several, are
    kept as returned.
    """
    index = _UrlIndex(urls)
    data = dict(data)

    for field in _MAP_FIELDS:
        if isinstance(data.get(field), dict):
            data[field] = _reconcile_map(data[field], index, field)

    if isinstance(data.get("features"), list):
        features = []
        for feature in data["features"]:
            if isinstance(feature, dict) and isinstance(feature.get("availability"), dict):
                feature = {
                    **feature,
                    "availability": _reconcile_map(feature["availability"], index, "availability"),
                }
            features.append(feature)
        data["features"] = features

    for field in _URL_ROW_FIELDS:
        if isinstance(data.get(field), list):
            rows = []
            for row in data[field]:
                if isinstance(row, dict) and isinstance(row.get("url"), str):
                    row = {**row, "url": index.resolve(row["url"])}
                rows.append(row)
            data[field] = rows

    return data


def parse_payload(raw_text: str) -> dict[str, Any]:
    """Strip fences, parse JSON and check the required top-level fields."""
    text = strip_fence_markers(raw_text)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponse(
            f"Model response is not valid JSON ({exc}). "
            f"First 300 chars: {text[:300]!r}"
        ) from exc

    if not isinstance(data, dict):
        raise MalformedResponse(
            f"Model response must be a JSON object, got {type(data).__name__}"
        )

    missing = [key for key in REQUIRED_FIELDS if key not in data]
    if missing:
        raise MalformedResponse(f"Model response is missing required fields: {', '.join(missing)}")

    # null collections carry no data; treat them as empty
    for key in _LIST_FIELDS:
        if data[key] is None:
            data[key] = []
    for key in _MAP_FIELDS:
        if data[key] is None:
            data[key] = {}
    if data["summary"] is None:
        data["summary"] = ""

    return data


def hydrate(raw_text: str, primary_url: str, competitor_urls: list[str]) -> AnalysisReport:
    """Build the report from raw model text plus the caller's inputs.

    ``primary_url`` and ``competitor_urls`` are ground truth: anything the
    model returned under the identity fields is discarded.
    """
    data = parse_payload(raw_text)
    data = reconcile_urls(data, [primary_url, *competitor_urls])

    fields = {key: data[key] for key in REQUIRED_FIELDS}
    fields.update(
        id=str(uuid.uuid4()),
        timestamp=datetime.now(timezone.utc).isoformat(),
        primary_url=primary_url,
        competitors=tuple(competitor_urls),
    )

    try:
        return AnalysisReport.model_validate(fields)
    except ValidationError as exc:
        raise MalformedResponse(f"Model response does not match the report schema: {exc}") from exc
