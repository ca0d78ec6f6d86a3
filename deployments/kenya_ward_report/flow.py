"""Kenya Ward Report -- deployment-ready flow.

Builds the ward analytics report from the configured data source and
publishes a markdown artifact named after the deployment.

Two ways to register this deployment:

1. CLI::

    cd deployments/kenya_ward_report
    prefect deploy --all

2. Python::

    python deployments/kenya_ward_report/deploy.py
"""

from __future__ import annotations

from prefect import flow, task
from prefect.artifacts import create_markdown_artifact
from prefect.runtime import deployment
from pydantic import BaseModel

from ward_analytics.config import DEFAULT_BLOCK_NAME, FLOW_DEFAULTS, TASK_DEFAULTS
from ward_analytics.data_access import get_data_source
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.models import AnalyticsReport
from ward_analytics.reporting import format_report


class WardReportSummary(BaseModel):
    deployment_name: str
    county_count: int
    ward_count: int
    markdown: str


@task(**TASK_DEFAULTS)  # type: ignore[call-overload]
def build_report(source: str) -> AnalyticsReport:
    """Generate the analytics report from the named data source."""
    engine = AnalyticsEngine(get_data_source(source).get_data_access())
    report = engine.generate_report()
    print(f"Generated report at {report.generated_at.isoformat()}")
    return report


@task
def publish(report: AnalyticsReport) -> WardReportSummary:
    """Publish the report as a markdown artifact keyed by deployment."""
    dep_name = deployment.name or "local"
    markdown = f"# Kenya Ward Report ({dep_name})\n\n" + format_report(report)
    create_markdown_artifact(
        key="kenya-ward-report",
        markdown=markdown,
        description="Scheduled Kenya ward analytics report",
    )
    return WardReportSummary(
        deployment_name=dep_name,
        county_count=report.metrics.total_counties,
        ward_count=report.metrics.total_wards,
        markdown=markdown,
    )


@flow(name="kenya_ward_report_deployment", **FLOW_DEFAULTS)  # type: ignore[call-overload]
def kenya_ward_report_flow(source: str = DEFAULT_BLOCK_NAME) -> WardReportSummary:
    """Generate and publish the ward analytics report."""
    report = build_report(source)
    summary = publish(report)
    print(f"[{summary.deployment_name}] {summary.ward_count} wards in {summary.county_count} counties")
    return summary


if __name__ == "__main__":
    kenya_ward_report_flow()
