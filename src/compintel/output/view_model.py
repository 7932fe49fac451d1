"""Derived series and defensive lookups over a finished report.

Everything here is a pure function of the report and is recomputed on
every call. Missing cross-references come back as ``None`` or a
placeholder string, never as an exception.
"""

from __future__ import annotations

from typing import Any, Callable, NamedTuple, Sequence
from urllib.parse import urlsplit

from compintel.schemas.report import (
    AnalysisReport,
    Feature,
    PricingModel,
    SeoSignals,
    Swot,
    TechStack,
)

PLACEHOLDER = "-"
UNKNOWN = "?"

COLORS = ["#2563eb", "#0ea5e9", "#22c55e", "#eab308", "#f97316"]


def display_label(url: str) -> str:
    """``https://www.acme.com/pricing`` → ``acme.com``; bad input is returned unchanged."""
    try:
        host = urlsplit(url).hostname
    except ValueError:
        return url
    if not host:
        return url
    return host[4:] if host.startswith("www.") else host


# ----------------------------------------------------------------------
# Lookups
# ----------------------------------------------------------------------


def _find_by_url(rows: Sequence[Any], url: str) -> Any | None:
    for row in rows:
        if row.url == url:
            return row
    return None


def seo_signal_for(report: AnalysisReport, url: str) -> SeoSignals | None:
    return _find_by_url(report.seo, url)


def pricing_for(report: AnalysisReport, url: str) -> PricingModel | None:
    return _find_by_url(report.pricing, url)


def tech_stack_for(report: AnalysisReport, url: str) -> TechStack | None:
    return _find_by_url(report.tech_stacks, url)


def swot_for(report: AnalysisReport, url: str) -> Swot | None:
    return report.swot.get(url)


def availability_cell(feature: Feature, url: str) -> str:
    """Text for one feature-matrix cell: yes / no / qualifier / unknown."""
    value = feature.availability.get(url)
    if value is True:
        return "yes"
    if value is False:
        return "no"
    if isinstance(value, str) and value.strip():
        return value
    return UNKNOWN


# ----------------------------------------------------------------------
# Chart series
# ----------------------------------------------------------------------


class FeatureDensity(NamedTuple):
    url: str
    label: str
    count: int
    is_primary: bool


class PositioningPoint(NamedTuple):
    url: str
    label: str
    x: float  # innovation
    y: float  # market presence
    color: str


def feature_density(report: AnalysisReport) -> list[FeatureDensity]:
    """Number of features fully available (``True``) per company."""
    return [
        FeatureDensity(
            url=url,
            label=display_label(url),
            count=sum(1 for f in report.features if f.availability.get(url) is True),
            is_primary=url == report.primary_url,
        )
        for url in report.all_urls
    ]


def positioning_series(report: AnalysisReport) -> list[PositioningPoint]:
    """One point per ``market_positioning`` entry, in payload order."""
    return [
        PositioningPoint(
            url=url,
            label=display_label(url),
            x=pos.x,
            y=pos.y,
            color=COLORS[idx % len(COLORS)],
        )
        for idx, (url, pos) in enumerate(report.market_positioning.items())
    ]


# ----------------------------------------------------------------------
# SEO table
# ----------------------------------------------------------------------


def speed_band(score: float) -> str:
    if score > 80:
        return "good"
    if score > 50:
        return "fair"
    return "poor"


def _fmt_speed(v: Any) -> str:
    return f"{v:g}/100 ({speed_band(v)})"


def _fmt_bool(v: Any) -> str:
    return "yes" if v else "no"


class SeoMetric(NamedTuple):
    key: str
    label: str
    format: Callable[[Any], str]


SEO_METRICS: tuple[SeoMetric, ...] = (
    SeoMetric("page_speed_score", "Performance Score", _fmt_speed),
    SeoMetric("mobile_friendly", "Mobile Friendly", _fmt_bool),
    SeoMetric("blog_freshness", "Blog Freshness", str),
    SeoMetric("meta_description_health", "Meta Health", str),
)


def seo_metric_value(report: AnalysisReport, url: str, metric: SeoMetric) -> str:
    """Formatted metric for one company, or ``PLACEHOLDER`` if unknown."""
    signal = seo_signal_for(report, url)
    if signal is None:
        return PLACEHOLDER
    value = getattr(signal, metric.key)
    if value is None:
        return PLACEHOLDER
    return metric.format(value)


def seo_rows(report: AnalysisReport) -> list[tuple[str, list[str]]]:
    """``(metric label, [value per company])`` rows in ``all_urls`` order."""
    return [
        (metric.label, [seo_metric_value(report, url, metric) for url in report.all_urls])
        for metric in SEO_METRICS
    ]


def share_summary(report: AnalysisReport) -> str:
    """Short plain-text summary suitable for pasting into chat or email."""
    rivals = ", ".join(display_label(u) for u in report.competitors) or "(no competitors)"
    return (
        f"Competitor Analysis: {display_label(report.primary_url)} vs {rivals}\n"
        f"Summary: {report.summary}"
    )
