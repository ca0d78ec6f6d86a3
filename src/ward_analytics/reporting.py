"""Render analytics records as markdown, CSV and JSON.

The markdown output is what the flows publish as Prefect artifacts.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence

from ward_analytics.models import (
    AnalyticsMetrics,
    AnalyticsReport,
    ConstituencyAnalytics,
    CountyAnalytics,
    CountyComparison,
    VarianceAnalysis,
)

CSV_HEADERS = ["County", "Wards", "Constituencies", "Sub-counties", "Percentage of Total"]


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def format_metrics(metrics: AnalyticsMetrics) -> str:
    """Format dataset metrics as a markdown summary."""
    largest = metrics.largest_county
    smallest = metrics.smallest_county
    lines = [
        "## Kenya Geospatial Data Metrics",
        "",
        "### Administrative Divisions",
        "",
        f"- **Wards:** {metrics.total_wards}",
        f"- **Counties:** {metrics.total_counties}",
        f"- **Constituencies:** {metrics.total_constituencies}",
        f"- **Sub-counties:** {metrics.total_sub_counties}",
        "",
        "### Averages",
        "",
        f"- **Wards per county:** {metrics.average_wards_per_county}",
        f"- **Wards per constituency:** {metrics.average_wards_per_constituency}",
        "",
        "### Extremes",
        "",
        f"- **Largest county:** {f'{largest.region} ({largest.ward_count} wards)' if largest else 'N/A'}",
        f"- **Smallest county:** {f'{smallest.region} ({smallest.ward_count} wards)' if smallest else 'N/A'}",
    ]
    return "\n".join(lines)


def format_county_table(counties: Sequence[CountyAnalytics]) -> str:
    """Format county analytics as a markdown table."""
    lines = [
        "| County | Wards | Constituencies | % of Total |",
        "|--------|-------|----------------|------------|",
    ]
    for c in counties:
        share = f"{c.percentage_of_total_wards:.2f}%"
        lines.append(f"| {c.county_name} | {c.ward_count} | {c.constituency_count} | {share} |")
    return "\n".join(lines)


def county_csv(counties: Sequence[CountyAnalytics]) -> str:
    """Export county analytics as CSV text."""
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for c in counties:
        writer.writerow(
            [
                c.county_name,
                c.ward_count,
                c.constituency_count,
                c.sub_county_count,
                f"{c.percentage_of_total_wards:.2f}",
            ]
        )
    return buf.getvalue()


def report_json(report: AnalyticsReport) -> str:
    """Serialise a report to indented JSON."""
    return report.model_dump_json(indent=2)


def format_report(report: AnalyticsReport) -> str:
    """Full markdown report: metrics, top counties and a footer."""
    lines = [
        format_metrics(report.metrics),
        "",
        "## Top Counties by Ward Count",
        "",
        format_county_table(report.top_counties_by_wards),
        "",
        "## Summary",
        "",
        f"- **Total wards analysed:** {report.metrics.total_wards}",
        f"- **Mapped counties:** {len(report.spatial_distribution)}",
        f"- **Generated:** {report.generated_at.isoformat()}",
    ]
    return "\n".join(lines)


def format_comparison(comparison: CountyComparison) -> str:
    """Format a two-county comparison."""
    lines = ["## County Comparison", ""]
    for c in (comparison.county1, comparison.county2):
        lines.extend(
            [
                f"### {c.county_name}",
                "",
                f"- **Wards:** {c.ward_count}",
                f"- **Constituencies:** {c.constituency_count}",
                f"- **Percentage of total:** {c.percentage_of_total_wards:.2f}%",
                "",
            ]
        )
    diff = comparison.difference
    lines.extend(
        [
            "### Difference",
            "",
            f"- **Ward difference:** {_signed(diff.ward_difference)}",
            f"- **Percentage difference:** {_signed(diff.percentage_difference)}%",
        ]
    )
    return "\n".join(lines)


def format_distribution_summary(counties: list[CountyAnalytics], size: int = 5) -> str:
    """Top and bottom ``size`` counties by ward count."""
    ranked = sorted(counties, key=lambda c: c.ward_count, reverse=True)
    top = ranked[:size]
    bottom = list(reversed(ranked[-size:])) if ranked else []
    lines = [f"## Top {size} Counties", ""]
    lines.extend(f"{i}. {c.county_name}: {c.ward_count} wards" for i, c in enumerate(top, start=1))
    lines.extend(["", f"## Bottom {size} Counties", ""])
    lines.extend(f"{i}. {c.county_name}: {c.ward_count} wards" for i, c in enumerate(bottom, start=1))
    return "\n".join(lines)


def format_county_quick_stats(county: CountyAnalytics, constituencies: list[ConstituencyAnalytics]) -> str:
    """Headline numbers for one county and its constituencies."""
    lines = [
        f"## {county.county_name.upper()}",
        "",
        f"- **Wards:** {county.ward_count}",
        f"- **Constituencies:** {county.constituency_count}",
        f"- **Sub-counties:** {county.sub_county_count}",
        f"- **Percentage of total wards:** {county.percentage_of_total_wards:.2f}%",
        "",
        "### Constituencies",
        "",
    ]
    lines.extend(f"- {c.constituency_name}: {c.ward_count} wards" for c in constituencies)
    return "\n".join(lines)


def format_variance(variance: VarianceAnalysis) -> str:
    """Format the ward-count spread with a short interpretation."""
    lines = [
        "## Variance Analysis",
        "",
        f"- **Mean wards per county:** {variance.mean:.2f}",
        f"- **Standard deviation:** {variance.std_dev:.2f}",
        f"- **Coefficient of variation:** {variance.coefficient_of_variation * 100:.2f}%",
        "",
        "### Interpretation",
        "",
        (
            "- High variation in ward distribution across counties"
            if variance.high_variation
            else "- Relatively uniform ward distribution"
        ),
        (
            "- Significant disparity between largest and smallest counties"
            if variance.significant_disparity
            else "- Balanced county sizes"
        ),
    ]
    return "\n".join(lines)
