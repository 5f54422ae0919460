"""Report aggregation package."""

from expense_tracker.reports.aggregator import ReportAggregator, month_bounds

__all__ = ["ReportAggregator", "month_bounds"]
