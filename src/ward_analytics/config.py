"""Shared configuration defaults for the analytics engine and its flows."""

import datetime

FLOW_DEFAULTS: dict[str, object] = {
    "retries": 1,
    "retry_delay_seconds": 10,
    "log_prints": True,
}

TASK_DEFAULTS: dict[str, object] = {
    "retries": 1,
    "retry_delay_seconds": 10,
    "log_prints": True,
}

BACKEND_ENV_VAR = "WARD_ANALYTICS_BACKEND"
DATA_PATH_ENV_VAR = "WARD_ANALYTICS_DATA_PATH"
DEFAULT_BACKEND = "mock"
DEFAULT_BLOCK_NAME = "ward-data"

TOP_COUNTIES_LIMIT = 10
COMPLEX_BOUNDARY_THRESHOLD = 200


def timestamp() -> str:
    """Return the current UTC timestamp as an ISO-8601 string."""
    return utc_now().isoformat()


def utc_now() -> datetime.datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.datetime.now(tz=datetime.UTC)
