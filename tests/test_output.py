"""Tests for Markdown report generation."""

from __future__ import annotations

from compintel.output.markdown import render_markdown_report
from compintel.schemas.report import (
    AnalysisReport,
    Feature,
    PricingModel,
    PricingTier,
    SeoSignals,
    TechStack,
)


def _with(report: AnalysisReport, **update) -> AnalysisReport:
    return report.model_copy(update=update)


def test_render_contains_sections(report: AnalysisReport) -> None:
    md = render_markdown_report(report)

    assert md.startswith("# Competitor Analysis Report: acme.com vs rival.com")
    assert report.id[:8] in md
    assert "## Executive Summary" in md
    assert report.summary in md
    assert "## Feature Matrix" in md
    assert "## Pricing" in md
    assert "## Strategy & SWOT" in md
    assert "## Visual Insights" in md
    assert "## SEO Signals" in md
    assert "1. Launch a budget tier" in md


def test_feature_matrix_row(report: AnalysisReport) -> None:
    md = render_markdown_report(report)
    assert "| Feature | acme.com (You) | rival.com |" in md
    assert "| Login with Google (SSO, 90% conf) | ✅ | ❌ |" in md


def test_empty_sections_render_placeholders(report: AnalysisReport) -> None:
    md = render_markdown_report(_with(report, features=[], recommendations=[]))
    assert "No features were extracted." in md
    assert "## Recommendations" not in md
    # pricing and SEO are empty in the fixture
    assert "### acme.com\n\n-" in md
    assert "| Performance Score | - | - |" in md
    assert "### Tech Stack" not in md


def test_pricing_tiers(report: AnalysisReport) -> None:
    pricing = [
        PricingModel(
            url="https://acme.com",
            has_free_trial=True,
            currency="USD",
            tiers=[
                PricingTier(
                    tier_name="Pro",
                    price=29,
                    billing_cycle="month",
                    features_included=["a", "b", "c", "d", "e", "f"],
                ),
            ],
        ),
        PricingModel(url="https://rival.com", tiers=[]),
    ]
    md = render_markdown_report(_with(report, pricing=pricing))
    assert "*Free trial available*" in md
    assert "- **Pro**: 29 USD / month" in md
    assert "  - + 2 more..." in md
    assert "Pricing details not public or custom quote only." in md


def test_tech_stack_and_seo(report: AnalysisReport) -> None:
    md = render_markdown_report(
        _with(
            report,
            tech_stacks=[TechStack(url="https://acme.com", frontend=["React"], backend=[], analytics=["GA4"])],
            seo=[SeoSignals(url="https://rival.com", page_speed_score=62, meta_description_health="Good")],
        )
    )
    assert "| acme.com | React | N/A | GA4 |" in md
    assert "| rival.com | - | - | - |" in md
    assert "| Performance Score | - | 62/100 (fair) |" in md
    assert "| Meta Health | - | Good |" in md


def test_visual_tables(report: AnalysisReport) -> None:
    md = render_markdown_report(report)
    assert "| **acme.com** | 1 |" in md
    assert "| rival.com | 0 |" in md
    assert "| acme.com | 70 | 60 |" in md
    assert "| rival.com | 40 | 30 |" in md


def test_swot_per_company(report: AnalysisReport) -> None:
    md = render_markdown_report(report)
    assert "#### acme.com" in md
    assert "#### rival.com" in md
    assert "- Enterprise" in md


def test_no_competitors(report: AnalysisReport) -> None:
    md = render_markdown_report(_with(report, competitors=[]))
    assert md.startswith("# Competitor Analysis Report: acme.com\n")
    assert "| Feature | acme.com (You) |" in md


def test_pipes_in_cells_are_escaped(report: AnalysisReport) -> None:
    feature = Feature(
        name="Export | Import",
        availability={"https://acme.com": "CSV | XLSX", "https://rival.com": True},
    )
    md = render_markdown_report(
        _with(
            report,
            features=(feature,),
            tech_stacks=(TechStack(url="https://acme.com", frontend=("React|Next",)),),
        )
    )
    assert "| Export \\| Import | CSV \\| XLSX | ✅ |" in md
    assert "| acme.com | React\\|Next | N/A | N/A |" in md
