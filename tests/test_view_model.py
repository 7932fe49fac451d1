"""Tests for derived chart series and lookups over a report."""

from __future__ import annotations

import pytest

from compintel.output.view_model import (
    COLORS,
    PLACEHOLDER,
    SEO_METRICS,
    UNKNOWN,
    availability_cell,
    display_label,
    feature_density,
    positioning_series,
    pricing_for,
    seo_signal_for,
    seo_metric_value,
    seo_rows,
    share_summary,
    speed_band,
    swot_for,
    tech_stack_for,
)
from compintel.schemas.report import AnalysisReport, Feature, Position, SeoSignals

A = "https://a.com"
B = "https://b.com"


def _report(**kwargs) -> AnalysisReport:
    fields = dict(id="r1", timestamp="2026-01-01T00:00:00+00:00", primary_url=A, competitors=[B])
    fields.update(kwargs)
    return AnalysisReport(**fields)


class TestDisplayLabel:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://acme.com", "acme.com"),
            ("https://www.acme.com/pricing", "acme.com"),
            ("http://shop.acme.co.uk:8080/", "shop.acme.co.uk"),
        ],
    )
    def test_hostname(self, url: str, expected: str) -> None:
        assert display_label(url) == expected

    @pytest.mark.parametrize("url", ["not a url", "acme.com", ""])
    def test_unparseable_returned_as_is(self, url: str) -> None:
        assert display_label(url) == url


class TestFeatureDensity:
    def test_counts_only_true(self) -> None:
        features = [
            Feature(name="SSO", availability={A: True, B: False}),
            Feature(name="API", availability={A: True, B: "Beta"}),
            Feature(name="Export", availability={A: True}),
        ]
        rows = feature_density(_report(features=features))
        assert {r.url: r.count for r in rows} == {A: 3, B: 0}

    def test_one_row_per_company_in_order(self) -> None:
        rows = feature_density(_report(competitors=[B, "https://c.com"]))
        assert [r.url for r in rows] == [A, B, "https://c.com"]
        assert [r.is_primary for r in rows] == [True, False, False]
        assert all(r.count == 0 for r in rows)

    def test_scenario_counts(self, report: AnalysisReport) -> None:
        assert {d.label: d.count for d in feature_density(report)} == {"acme.com": 1, "rival.com": 0}


class TestAvailabilityCell:
    def test_values(self) -> None:
        feature = Feature(name="SSO", availability={A: True, B: False, "https://c.com": "Enterprise only"})
        assert availability_cell(feature, A) == "yes"
        assert availability_cell(feature, B) == "no"
        assert availability_cell(feature, "https://c.com") == "Enterprise only"

    def test_missing_key_is_unknown(self) -> None:
        assert availability_cell(Feature(name="SSO", availability={A: True}), B) == UNKNOWN

    def test_null_and_blank_are_unknown(self) -> None:
        feature = Feature(name="SSO", availability={A: None, B: "  "})
        assert availability_cell(feature, A) == UNKNOWN
        assert availability_cell(feature, B) == UNKNOWN


class TestPositioning:
    def test_one_point_per_entry_with_palette(self) -> None:
        urls = [f"https://c{i}.com" for i in range(6)]
        positions = {u: Position(x=i * 10, y=50) for i, u in enumerate(urls)}
        points = positioning_series(_report(market_positioning=positions))
        assert [p.url for p in points] == urls
        assert [p.color for p in points] == [COLORS[i % len(COLORS)] for i in range(6)]
        assert points[3].x == 30

    def test_scenario(self, report: AnalysisReport) -> None:
        points = positioning_series(report)
        assert [(p.label, p.x, p.y) for p in points] == [("acme.com", 70, 60), ("rival.com", 40, 30)]

    def test_empty(self) -> None:
        assert positioning_series(_report()) == []


class TestLookups:
    def test_missing_rows_are_none(self, report: AnalysisReport) -> None:
        assert seo_signal_for(report, report.primary_url) is None
        assert pricing_for(report, report.primary_url) is None
        assert tech_stack_for(report, report.primary_url) is None
        assert swot_for(report, "https://unknown.com") is None

    def test_swot_found(self, report: AnalysisReport) -> None:
        swot = swot_for(report, "https://rival.com")
        assert swot is not None and swot.strengths == ("Price",)


class TestSeo:
    @pytest.mark.parametrize("score, band", [(95, "good"), (81, "good"), (80, "fair"), (51, "fair"), (50, "poor")])
    def test_speed_band(self, score: float, band: str) -> None:
        assert speed_band(score) == band

    def test_missing_signal_is_placeholder(self) -> None:
        report = _report(seo=[SeoSignals(url=A, page_speed_score=92, mobile_friendly=True)])
        speed = SEO_METRICS[0]
        assert seo_metric_value(report, A, speed) == "92/100 (good)"
        assert seo_metric_value(report, B, speed) == PLACEHOLDER

    def test_missing_field_is_placeholder(self) -> None:
        report = _report(seo=[SeoSignals(url=A)])
        assert all(seo_metric_value(report, A, m) == PLACEHOLDER for m in SEO_METRICS)

    def test_rows(self) -> None:
        report = _report(seo=[SeoSignals(url=B, mobile_friendly=False, blog_freshness="High")])
        rows = dict(seo_rows(report))
        assert rows["Mobile Friendly"] == [PLACEHOLDER, "no"]
        assert rows["Blog Freshness"] == [PLACEHOLDER, "High"]
        assert len(rows) == len(SEO_METRICS)


class TestShareSummary:
    def test_lists_companies_and_summary(self, report: AnalysisReport) -> None:
        text = share_summary(report)
        assert text.startswith("Competitor Analysis: acme.com vs rival.com")
        assert report.summary in text

    def test_no_competitors(self) -> None:
        assert "(no competitors)" in share_summary(_report(competitors=[]))
