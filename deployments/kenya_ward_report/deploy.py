"""Register the Kenya ward report deployment programmatically.

Usage:
    PREFECT_API_URL=http://localhost:4200/api uv run python deployments/kenya_ward_report/deploy.py
"""

from dotenv import load_dotenv
from flow import kenya_ward_report_flow

if __name__ == "__main__":
    load_dotenv()
    kenya_ward_report_flow.deploy(
        name="kenya-ward-report",
        work_pool_name="default",
        cron="0 6 * * *",
    )
