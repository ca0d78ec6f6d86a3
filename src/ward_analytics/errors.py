"""Exception taxonomy for the ward analytics engine."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class WardAnalyticsError(Exception):
    """Base class for every error raised by this package."""


class NotFoundError(WardAnalyticsError, LookupError):
    """A lookup by name found nothing.

    Carries the entity kind ("county", "constituency", "ward", ...) and the
    key that was queried so callers can report the failure precisely.
    """

    def __init__(self, kind: str, key: str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind.capitalize()} not found: {key}")


class RegionNotFoundError(NotFoundError):
    """A county, constituency or sub-county lookup found nothing."""

    def __init__(self, key: str, kind: str = "county") -> None:
        super().__init__(kind, key)


class WardNotFoundError(NotFoundError):
    """A ward lookup found nothing."""

    def __init__(self, key: str) -> None:
        super().__init__("ward", key)


class EmptyGeometryError(WardAnalyticsError, ValueError):
    """A geometry has no rings, so it has no extent, area or shape."""


class MalformedGeometryError(WardAnalyticsError, ValueError):
    """A geometry has rings Shapely cannot build, e.g. fewer than four positions."""


class DivisionGuardError(WardAnalyticsError, ArithmeticError):
    """A ratio was requested against a zero denominator."""


class BackendError(WardAnalyticsError):
    """A storage backend failed while answering a query.

    The backend's own exception is kept on ``original`` (and as
    ``__cause__``); the engine never retries.
    """

    def __init__(self, operation: str, original: BaseException) -> None:
        self.operation = operation
        self.original = original
        super().__init__(f"Backend call {operation} failed: {original!r}")


# ---------------------------------------------------------------------------
# Guarded arithmetic
# ---------------------------------------------------------------------------


def ratio(numerator: float, denominator: float) -> float:
    """Return ``numerator / denominator``.

    Raises:
        DivisionGuardError: If the denominator is zero.
    """
    if denominator == 0:
        raise DivisionGuardError(f"cannot divide {numerator} by zero")
    return numerator / denominator


def percentage(part: float, whole: float) -> float:
    """Return ``part / whole * 100``, or ``0.0`` when ``whole`` is zero.

    A zero denominator means there is nothing to take a share of, so the
    share is reported as 0% and a warning is logged.
    """
    try:
        return ratio(part, whole) * 100
    except DivisionGuardError:
        logger.warning("Percentage of %s over a zero total reported as 0.0", part)
        return 0.0
