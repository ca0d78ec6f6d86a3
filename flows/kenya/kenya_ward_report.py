"""Kenya Ward Analytics Report.

Binds the analytics engine to the configured ward data source, fans out the
per-county analytics on a thread pool, assembles the timestamped report and
publishes it as a markdown artifact.

Airflow equivalent: PythonOperator per county + downstream report task.
Prefect approach:    WardDataSource block, .map() over counties on a
                     ThreadPoolTaskRunner, markdown artifact.
"""

from __future__ import annotations

from prefect import flow, task, unmapped
from prefect.artifacts import create_markdown_artifact
from prefect.task_runners import ThreadPoolTaskRunner

from ward_analytics.config import DEFAULT_BLOCK_NAME, TOP_COUNTIES_LIMIT, utc_now
from ward_analytics.data_access import DataAccess, get_data_source
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.models import AnalyticsMetrics, AnalyticsReport, County, CountyAnalytics
from ward_analytics.reporting import format_report

# ---------------------------------------------------------------------------
# Tasks
# ---------------------------------------------------------------------------


@task
def fetch_counties(data: DataAccess) -> list[County]:
    """List every county in the dataset.

    Args:
        data: Bound ward data backend.

    Returns:
        Counties in backend order.
    """
    counties = data.get_all_counties()
    print(f"Found {len(counties)} counties")
    return counties


@task
def analyse_county(data: DataAccess, county_name: str) -> CountyAnalytics:
    """Compute analytics for a single county.

    Args:
        data: Bound ward data backend.
        county_name: County to analyse.

    Returns:
        CountyAnalytics for the county.
    """
    analytics = AnalyticsEngine(data).county_analytics(county_name)
    print(f"{analytics.county_name}: {analytics.ward_count} wards ({analytics.percentage_of_total_wards:.2f}%)")
    return analytics


@task
def compute_metrics(data: DataAccess) -> AnalyticsMetrics:
    """Compute the dataset overview.

    Args:
        data: Bound ward data backend.

    Returns:
        AnalyticsMetrics.
    """
    return AnalyticsEngine(data).metrics()


@task
def assemble_report(
    data: DataAccess,
    metrics: AnalyticsMetrics,
    breakdown: list[CountyAnalytics],
    top_limit: int,
) -> AnalyticsReport:
    """Combine the fanned-out county analytics with the spatial views.

    Args:
        data: Bound ward data backend.
        metrics: Dataset overview.
        breakdown: Per-county analytics, in county order.
        top_limit: Number of counties in the top ranking.

    Returns:
        AnalyticsReport.
    """
    engine = AnalyticsEngine(data)
    return AnalyticsReport(
        generated_at=utc_now(),
        metrics=metrics,
        county_breakdown=breakdown,
        top_counties_by_wards=engine.rank_by_wards(breakdown, top_limit),
        spatial_distribution=engine.spatial_distribution(),
        density_analysis=engine.density_analysis(),
    )


@task
def publish_report(report: AnalyticsReport) -> str:
    """Render the report as markdown and publish it as an artifact.

    Args:
        report: The assembled report.

    Returns:
        The markdown text.
    """
    markdown = format_report(report)
    create_markdown_artifact(
        key="kenya-ward-report",
        markdown=markdown,
        description="Kenya ward analytics report",
    )
    return markdown


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------


@flow(name="kenya_ward_report", log_prints=True, task_runner=ThreadPoolTaskRunner(max_workers=4))  # type: ignore[arg-type]
def ward_report_flow(source: str = DEFAULT_BLOCK_NAME, top_limit: int = TOP_COUNTIES_LIMIT) -> AnalyticsReport:
    """Build and publish the ward analytics report.

    Args:
        source: WardDataSource block name.
        top_limit: Number of counties in the top ranking.

    Returns:
        AnalyticsReport.
    """
    data = get_data_source(source).get_data_access()

    counties = fetch_counties(data)
    metrics = compute_metrics(data)
    futures = analyse_county.map(unmapped(data), [c.name for c in counties])
    breakdown = [f.result() for f in futures]
    report = assemble_report(data, metrics, breakdown, top_limit)
    publish_report(report)

    print(f"Report: {report.metrics.total_wards} wards across {report.metrics.total_counties} counties")
    return report


if __name__ == "__main__":
    ward_report_flow()
