"""Instruction text for the competitor analysis generation call."""

from __future__ import annotations

import json
from typing import Any

URL_LIST_HEADER = "## Companies in Scope"

REQUIRED_FIELDS = (
    "profiles",
    "features",
    "pricing",
    "seo",
    "swot",
    "tech_stacks",
    "market_positioning",
    "summary",
    "recommendations",
)

INSTRUCTION_TEMPLATE = """\
You are an expert Competitor Analysis Engine.

## Role
You research companies on the public web and compare their products, pricing, \
search presence and strategic position.

## Task
Analyze the following websites deeply using web search to find their features, \
pricing, SEO details and strategic positioning.

Primary Company: {primary_url}
Competitors: {competitor_list}

{url_list_header}
Use these exact strings, character for character, wherever a company URL is \
required (as map keys and as "url" values). Do not add or remove a scheme, \
"www." or a trailing slash.
{url_lines}

## Steps
1. Search for the homepage, pricing page and features page of each company.
2. Extract a list of distinct features. Normalize them into canonical buckets \
in "canonical_feature" (e.g. "Login with Google" -> "SSO").
3. Determine feature availability for EACH company listed above: true, false, \
or a short string for partial or qualified support.
4. Extract pricing tiers with an explicit currency and billing cycle, and \
whether a free trial exists. Use an empty "tiers" list when pricing is quote-only.
5. Estimate SEO health from public signals: page speed score (0-100), meta \
description health ("Good", "Fair" or "Poor"), schema.org types, blog freshness \
("High", "Medium" or "Low") and mobile friendliness.
6. Perform a SWOT analysis for EACH company based on public perception and \
feature gaps.
7. Infer the likely tech stack (frontend, backend/cloud, analytics) from \
typical patterns or job postings found in search.
8. Score each company from 0 to 100 on two axes: "x" = Innovation and \
"y" = Market Presence.
9. Write a brief executive summary and a list of actionable recommendations \
for the primary company.

## Output Format
Return ONLY a valid JSON object. Do not wrap it in markdown code fences and do \
not add any text before or after it. The object must contain exactly these \
top-level fields: {required_fields}.

It must match this structure:

{example_json}
"""


def _example_shape(urls: list[str]) -> dict[str, Any]:
    """Build the example payload, keyed by the real URLs."""
    swot_entry = {
        "strengths": ["..."],
        "weaknesses": ["..."],
        "opportunities": ["..."],
        "threats": ["..."],
    }
    return {
        "profiles": [
            {"url": url, "name": "...", "description": "...", "colors": ["#hex"]}
            for url in urls
        ],
        "features": [
            {
                "name": "...",
                "canonical_feature": "...",
                "confidence": 0.9,
                "evidence_snippet": "...",
                "availability": {
                    url: (True if i == 0 else False) for i, url in enumerate(urls)
                },
            }
        ],
        "pricing": [
            {
                "url": urls[0],
                "has_free_trial": True,
                "currency": "USD",
                "tiers": [
                    {
                        "tier_name": "Starter",
                        "price": "$10",
                        "billing_cycle": "month",
                        "features_included": ["..."],
                    }
                ],
            }
        ],
        "seo": [
            {
                "url": urls[0],
                "page_speed_score": 85,
                "meta_description_health": "Good",
                "schema_types": ["Organization", "Product"],
                "blog_freshness": "High",
                "mobile_friendly": True,
            }
        ],
        "swot": {url: swot_entry for url in urls},
        "tech_stacks": [
            {
                "url": urls[0],
                "frontend": ["React"],
                "backend": ["Python"],
                "analytics": ["GA4"],
            }
        ],
        "market_positioning": {url: {"x": 50, "y": 50} for url in urls},
        "summary": "A brief executive summary comparison...",
        "recommendations": ["Actionable advice 1", "Actionable advice 2"],
    }


def build_instruction(primary_url: str, competitor_urls: list[str]) -> str:
    """Render the generation instruction for one analysis request.

    Pure and deterministic: the same inputs always produce the same text.
    """
    urls = [primary_url, *competitor_urls]
    return INSTRUCTION_TEMPLATE.format(
        primary_url=primary_url,
        competitor_list=", ".join(competitor_urls) if competitor_urls else "(none)",
        url_list_header=URL_LIST_HEADER,
        url_lines="\n".join(f"- {url}" for url in urls),
        required_fields=", ".join(REQUIRED_FIELDS),
        example_json=json.dumps(_example_shape(urls), indent=2),
    )


def urls_in_instruction(instruction: str) -> list[str]:
    """Recover the URL list embedded by :func:`build_instruction`."""
    lines = instruction.splitlines()
    try:
        start = lines.index(URL_LIST_HEADER)
    except ValueError:
        return []

    urls: list[str] = []
    for line in lines[start + 1:]:
        if line.startswith("- "):
            urls.append(line[2:])
        elif urls:
            break
    return urls
