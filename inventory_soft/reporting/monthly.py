"""
Monthly Report

Current-month sales totals and stock alerts, rendered as a paginated PDF
straight from the in-memory snapshot.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime
from io import BytesIO
from typing import List, Optional, Sequence, Tuple

import structlog
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from inventory_soft.domain.models import Product, Sale

logger = structlog.get_logger(__name__)

DEFAULT_LISTING_LIMIT = 10

PAGE_WIDTH, PAGE_HEIGHT = A4
LEFT_MARGIN = 40
TOP_MARGIN = 50
BOTTOM_MARGIN = 50
LINE_HEIGHT = 15


@dataclass(frozen=True)
class MonthlySummary:
    year: int
    month: int
    generated_at: datetime
    total_sales: float
    total_quantity_sold: int
    total_products: int
    low_stock_count: int
    inventory_value: float
    month_sales: Tuple[Sale, ...]
    low_stock_products: Tuple[Product, ...]

    @property
    def month_name(self) -> str:
        return calendar.month_name[self.month]


def build_monthly_summary(
    products: Sequence[Product],
    sales: Sequence[Sale],
    today: Optional[date] = None,
) -> MonthlySummary:
    """Totals over the sales of the current calendar month plus stock figures"""
    today = today or date.today()
    month_sales = tuple(
        s for s in sales if s.date.year == today.year and s.date.month == today.month
    )
    low_stock = tuple(p for p in products if p.is_low_stock)
    return MonthlySummary(
        year=today.year,
        month=today.month,
        generated_at=datetime.now(),
        total_sales=sum(s.total_price for s in month_sales),
        total_quantity_sold=sum(s.quantity for s in month_sales),
        total_products=len(products),
        low_stock_count=len(low_stock),
        inventory_value=sum(p.inventory_value for p in products),
        month_sales=month_sales,
        low_stock_products=low_stock,
    )


def report_filename(summary: MonthlySummary) -> str:
    return f"monthly-report-{summary.month_name}-{summary.year}.pdf"


@dataclass(frozen=True)
class ReportLine:
    text: str
    font: str = "Helvetica"
    size: int = 10
    indent: int = 0
    gap: int = LINE_HEIGHT


def _heading(text: str) -> ReportLine:
    return ReportLine(text, font="Helvetica-Bold", size=13, gap=20)


def _item(text: str) -> ReportLine:
    return ReportLine(text, indent=5)


def report_lines(
    summary: MonthlySummary,
    company_name: str = "Inventory Soft",
    listing_limit: int = DEFAULT_LISTING_LIMIT,
) -> List[Optional[ReportLine]]:
    """
    Report content top to bottom; ``None`` is a blank spacer line.

    Sale and low-stock listings show at most ``listing_limit`` rows, followed
    by a "+N more" line when truncated.
    """
    lines: List[Optional[ReportLine]] = [
        ReportLine(f"Monthly Report - {company_name}", font="Helvetica-Bold", size=16, gap=25),
        ReportLine(f"Period: {summary.month_name} {summary.year}", size=11),
        ReportLine(f"Generated: {summary.generated_at:%Y-%m-%d}", size=11),
        None,
        _heading("Key Metrics"),
        _item(f"Total sales this month: ${summary.total_sales:.2f}"),
        _item(f"Units sold: {summary.total_quantity_sold}"),
        _item(f"Products in inventory: {summary.total_products}"),
        _item(f"Low stock products: {summary.low_stock_count}"),
        _item(f"Inventory value: ${summary.inventory_value:.2f}"),
    ]

    if summary.month_sales:
        lines += [None, _heading("Sales This Month")]
        lines += [
            _item(f"{s.product_name} - Qty: {s.quantity} - Total: ${s.total_price:.2f}")
            for s in summary.month_sales[:listing_limit]
        ]
        hidden = len(summary.month_sales) - listing_limit
        if hidden > 0:
            lines.append(_item(f"+{hidden} more sales"))

    if summary.low_stock_products:
        lines += [None, _heading("Low Stock Products")]
        lines += [
            _item(f"{p.name} - Stock: {p.stock}/{p.min_stock}")
            for p in summary.low_stock_products[:listing_limit]
        ]
        hidden = len(summary.low_stock_products) - listing_limit
        if hidden > 0:
            lines.append(_item(f"+{hidden} more products"))

    return lines


def render_monthly_report(
    summary: MonthlySummary,
    company_name: str = "Inventory Soft",
    listing_limit: int = DEFAULT_LISTING_LIMIT,
) -> bytes:
    """Render the summary as PDF bytes, starting a new page at the bottom margin"""
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Monthly Report - {summary.month_name} {summary.year}")

    y = PAGE_HEIGHT - TOP_MARGIN
    for line in report_lines(summary, company_name, listing_limit):
        if line is None:
            y -= LINE_HEIGHT
            continue
        if y < BOTTOM_MARGIN:
            pdf.showPage()
            y = PAGE_HEIGHT - TOP_MARGIN
        pdf.setFont(line.font, line.size)
        pdf.drawString(LEFT_MARGIN + line.indent, y, line.text)
        y -= line.gap

    pdf.save()
    content = buffer.getvalue()
    logger.info(
        "Monthly report rendered",
        period=f"{summary.year}-{summary.month:02d}",
        sales=len(summary.month_sales),
        low_stock=len(summary.low_stock_products),
        size_bytes=len(content),
    )
    return content
