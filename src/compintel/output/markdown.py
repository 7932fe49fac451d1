"""Markdown report builder — renders an AnalysisReport to a structured Markdown document."""

from __future__ import annotations

from compintel.output.view_model import (
    PLACEHOLDER,
    availability_cell,
    display_label,
    feature_density,
    positioning_series,
    pricing_for,
    seo_rows,
    swot_for,
    tech_stack_for,
)
from compintel.schemas.report import AnalysisReport

_CELL_ICONS = {"yes": "✅", "no": "❌", "?": "❔"}


def _header_row(report: AnalysisReport, first: str) -> list[str]:
    labels = [f"{_cell(display_label(report.primary_url))} (You)"]
    labels += [_cell(display_label(u)) for u in report.competitors]
    return [
        f"| {first} | " + " | ".join(labels) + " |",
        "|" + "---|" * (len(labels) + 1),
    ]


def _cell(text: str) -> str:
    """Make model-supplied text safe inside a table cell."""
    return text.replace("|", "\\|").replace("\n", " ")


def _join(items: tuple[str, ...]) -> str:
    return _cell(", ".join(items)) if items else "N/A"


def render_markdown_report(report: AnalysisReport) -> str:
    """Render an AnalysisReport into a Markdown string."""
    sections: list[str] = []

    # Title
    rivals = ", ".join(display_label(u) for u in report.competitors)
    title = display_label(report.primary_url)
    if rivals:
        title += f" vs {rivals}"
    sections.append(f"# Competitor Analysis Report: {title}\n")
    sections.append(f"*Generated: {report.timestamp} • ID: {report.id[:8]}*\n")

    # Executive Summary
    sections.append("## Executive Summary\n")
    sections.append((report.summary or PLACEHOLDER) + "\n")

    sections.append(_render_feature_matrix(report))
    sections.append(_render_pricing(report))
    sections.append(_render_strategy(report))
    sections.append(_render_visuals(report))
    sections.append(_render_seo(report))

    # Recommendations
    if report.recommendations:
        sections.append("## Recommendations\n")
        for i, rec in enumerate(report.recommendations, 1):
            sections.append(f"{i}. {rec}")
        sections.append("")

    return "\n".join(sections)


def _render_feature_matrix(report: AnalysisReport) -> str:
    lines = ["## Feature Matrix\n"]
    if not report.features:
        lines.append("No features were extracted.\n")
        return "\n".join(lines)

    lines += _header_row(report, "Feature")
    for feature in report.features:
        label = feature.name
        if feature.canonical_feature:
            label += f" ({feature.canonical_feature}"
            if feature.confidence is not None:
                label += f", {feature.confidence * 100:.0f}% conf"
            label += ")"
        cells = []
        for url in report.all_urls:
            value = availability_cell(feature, url)
            cells.append(_CELL_ICONS.get(value) or _cell(value))
        lines.append(f"| {_cell(label)} | " + " | ".join(cells) + " |")
    lines.append("")
    return "\n".join(lines)


def _render_pricing(report: AnalysisReport) -> str:
    lines = ["## Pricing\n"]
    for url in report.all_urls:
        lines.append(f"### {display_label(url)}\n")
        model = pricing_for(report, url)
        if model is None:
            lines.append(f"{PLACEHOLDER}\n")
            continue
        if model.has_free_trial:
            lines.append("*Free trial available*\n")
        if not model.tiers:
            lines.append("Pricing details not public or custom quote only.\n")
            continue
        for tier in model.tiers:
            cycle = f" / {tier.billing_cycle}" if tier.billing_cycle else ""
            currency = f" {model.currency}" if model.currency else ""
            lines.append(f"- **{tier.tier_name}**: {tier.price or PLACEHOLDER}{currency}{cycle}")
            shown = tier.features_included[:4]
            for feat in shown:
                lines.append(f"  - {feat}")
            extra = len(tier.features_included) - len(shown)
            if extra > 0:
                lines.append(f"  - + {extra} more...")
        lines.append("")
    return "\n".join(lines)


def _render_strategy(report: AnalysisReport) -> str:
    lines = ["## Strategy & SWOT\n"]

    if report.tech_stacks:
        lines.append("### Tech Stack\n")
        lines.append("| Company | Frontend | Backend | Analytics |")
        lines.append("|---------|----------|---------|-----------|")
        for url in report.all_urls:
            stack = tech_stack_for(report, url)
            if stack is None:
                lines.append(f"| {_cell(display_label(url))} | {PLACEHOLDER} | {PLACEHOLDER} | {PLACEHOLDER} |")
                continue
            lines.append(
                f"| {_cell(display_label(url))} | {_join(stack.frontend)} | "
                f"{_join(stack.backend)} | {_join(stack.analytics)} |"
            )
        lines.append("")

    lines.append("### SWOT Analysis\n")
    for url in report.all_urls:
        swot = swot_for(report, url)
        if swot is None:
            continue
        lines.append(f"#### {display_label(url)}\n")
        for heading, items in (
            ("Strengths", swot.strengths),
            ("Weaknesses", swot.weaknesses),
            ("Opportunities", swot.opportunities),
            ("Threats", swot.threats),
        ):
            lines.append(f"**{heading}:**")
            for item in items or [PLACEHOLDER]:
                lines.append(f"- {item}")
        lines.append("")
    return "\n".join(lines)


def _render_visuals(report: AnalysisReport) -> str:
    lines = ["## Visual Insights\n", "### Feature Density\n"]
    lines.append("| Company | Features |")
    lines.append("|---------|----------|")
    for row in feature_density(report):
        name = f"**{_cell(row.label)}**" if row.is_primary else _cell(row.label)
        lines.append(f"| {name} | {row.count} |")
    lines.append("")

    lines.append("### Market Positioning\n")
    points = positioning_series(report)
    if not points:
        lines.append(f"{PLACEHOLDER}\n")
        return "\n".join(lines)
    lines.append("| Company | Innovation | Market Presence |")
    lines.append("|---------|------------|-----------------|")
    for p in points:
        lines.append(f"| {_cell(p.label)} | {p.x:g} | {p.y:g} |")
    lines.append("")
    return "\n".join(lines)


def _render_seo(report: AnalysisReport) -> str:
    lines = ["## SEO Signals\n"]
    lines += _header_row(report, "Metric")
    for label, values in seo_rows(report):
        lines.append(f"| {label} | " + " | ".join(_cell(v) for v in values) + " |")
    lines.append("")
    return "\n".join(lines)
