"""Pre-built analytical views composed from engine calls."""

from __future__ import annotations

import logging
import statistics

from ward_analytics import reporting
from ward_analytics.config import TOP_COUNTIES_LIMIT
from ward_analytics.engine import AnalyticsEngine
from ward_analytics.errors import DivisionGuardError, ratio
from ward_analytics.models import CountySizeCategories, VarianceAnalysis

logger = logging.getLogger(__name__)

LARGE_COUNTY_RANGE = (50, 1000)
MEDIUM_COUNTY_RANGE = (20, 49)
SMALL_COUNTY_RANGE = (1, 19)

HIGH_VARIATION_CV = 0.5
DISPARITY_RATIO = 5


class AnalyticsQueries:
    """Named views over an ``AnalyticsEngine`` for common questions."""

    def __init__(self, engine: AnalyticsEngine) -> None:
        self._engine = engine

    def executive_summary(self) -> str:
        return reporting.format_metrics(self._engine.metrics())

    def top_performers(self, limit: int = TOP_COUNTIES_LIMIT) -> str:
        return reporting.format_county_table(self._engine.top_counties_by_wards(limit))

    def distribution_analysis(self) -> str:
        return reporting.format_distribution_summary(self._engine.all_county_analytics())

    def counties_by_size(self) -> CountySizeCategories:
        """Bucket counties into large (50+), medium (20-49) and small (1-19)."""
        return CountySizeCategories(
            large=self._engine.find_wards_in_range(*LARGE_COUNTY_RANGE),
            medium=self._engine.find_wards_in_range(*MEDIUM_COUNTY_RANGE),
            small=self._engine.find_wards_in_range(*SMALL_COUNTY_RANGE),
        )

    def regional_breakdown(self) -> str:
        return reporting.format_county_table(self._engine.all_county_analytics())

    def export_as_json(self) -> str:
        return reporting.report_json(self._engine.generate_report())

    def export_counties_as_csv(self) -> str:
        return reporting.county_csv(self._engine.all_county_analytics())

    def county_quick_stats(self, county_name: str) -> str:
        """Headline numbers for one county.

        Raises:
            RegionNotFoundError: If the county does not exist.
        """
        county = self._engine.county_analytics(county_name)
        constituencies = self._engine.constituencies_by_county(county_name)
        return reporting.format_county_quick_stats(county, constituencies)

    def county_comparison(self, county1: str, county2: str) -> str:
        return reporting.format_comparison(self._engine.compare_counties(county1, county2))

    def variance_statistics(self) -> VarianceAnalysis:
        """Population mean, standard deviation and CV of county ward counts.

        The coefficient of variation is 0.0 when the mean is zero. When the
        smallest county has no wards, any county with wards counts as a
        significant disparity.
        """
        counts = [c.ward_count for c in self._engine.all_county_analytics()]
        if not counts:
            return VarianceAnalysis(
                mean=0.0,
                std_dev=0.0,
                coefficient_of_variation=0.0,
                high_variation=False,
                significant_disparity=False,
            )

        mean = statistics.fmean(counts)
        std_dev = statistics.pstdev(counts)
        try:
            cv = ratio(std_dev, mean)
        except DivisionGuardError:
            logger.warning("Mean ward count is zero; coefficient of variation reported as 0.0")
            cv = 0.0

        largest, smallest = max(counts), min(counts)
        try:
            disparity = ratio(largest, smallest) > DISPARITY_RATIO
        except DivisionGuardError:
            disparity = largest > 0

        return VarianceAnalysis(
            mean=mean,
            std_dev=std_dev,
            coefficient_of_variation=cv,
            high_variation=cv > HIGH_VARIATION_CV,
            significant_disparity=disparity,
        )

    def variance_analysis(self) -> str:
        return reporting.format_variance(self.variance_statistics())
