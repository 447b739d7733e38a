"""Aggregation and export package."""

from flowtrack.reports.aggregation import (
    build_period_report,
    build_recent_report,
    daily_series,
    filter_by_period,
    filter_by_range,
    filter_by_type,
    group_by_day,
    latest_transactions,
    local_date,
    period_start,
    search_transactions,
    sort_newest_first,
    summary,
    totals_by_category,
)
from flowtrack.reports.export import (
    ExportFormat,
    parse_snapshot,
    render,
    render_detailed_list,
    render_json,
    render_summary_report,
)

__all__ = [
    # Aggregation
    "build_period_report",
    "build_recent_report",
    "daily_series",
    "filter_by_period",
    "filter_by_range",
    "filter_by_type",
    "group_by_day",
    "latest_transactions",
    "local_date",
    "period_start",
    "search_transactions",
    "sort_newest_first",
    "summary",
    "totals_by_category",
    # Export
    "ExportFormat",
    "parse_snapshot",
    "render",
    "render_detailed_list",
    "render_json",
    "render_summary_report",
]
