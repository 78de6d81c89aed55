"""PDF reports"""

from inventory_soft.reporting.monthly import (
    MonthlySummary,
    ReportLine,
    build_monthly_summary,
    render_monthly_report,
    report_filename,
    report_lines,
)

__all__ = [
    "MonthlySummary",
    "ReportLine",
    "report_lines",
    "build_monthly_summary",
    "render_monthly_report",
    "report_filename",
]
