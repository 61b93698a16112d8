"""Generate monthly sales report PDFs from the aggregate views."""

from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO
from datetime import date

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import Canvas
from reportlab.platypus import Image, PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle


TRANSACTIONS_DISPLAY_LIMIT = 250


@dataclass(slots=True)
class ReportPriceRange:
    """Histogram bucket row."""

    label: str
    count: int


@dataclass(slots=True)
class ReportCategoryRow:
    """Item count for one category."""

    name: str
    count: int


@dataclass(slots=True)
class ReportTransactionRow:
    date: str
    title: str
    category: str
    price: float | None


@dataclass(slots=True)
class MonthlyReportData:
    """Input payload for monthly report rendering."""

    period_label: str
    total_sale_amount: float
    total_sold_items: int
    total_not_sold_items: int
    price_ranges: list[ReportPriceRange]
    categories: list[ReportCategoryRow]
    transactions: list[ReportTransactionRow]
    transactions_truncated: bool = False


def _format_amount(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:,.2f}"


def _autopct_threshold(pct: float) -> str:
    return f"{pct:.1f}%" if pct >= 3 else ""


def _summarize_categories(categories: list[ReportCategoryRow]) -> list[ReportCategoryRow]:
    ordered = sorted(categories, key=lambda row: row.count, reverse=True)
    top_rows = ordered[:8]
    other_count = sum(row.count for row in ordered[8:])
    if other_count > 0:
        top_rows.append(ReportCategoryRow(name="Other", count=other_count))
    return top_rows


def _figure_to_png(fig) -> bytes:
    image_buffer = BytesIO()
    fig.savefig(image_buffer, format="png", bbox_inches="tight")
    plt.close(fig)
    image_buffer.seek(0)
    return image_buffer.read()


def _build_bar_chart(price_ranges: list[ReportPriceRange]) -> bytes:
    labels = [row.label for row in price_ranges]
    if labels:
        # Open-ended top bucket.
        labels[-1] = f"{labels[-1].split('-')[0]}+"
    values = [row.count for row in price_ranges]

    fig, ax = plt.subplots(figsize=(6.2, 3.0), dpi=140)
    ax.bar(labels, values, color="#4C78A8")
    ax.set_title("Items per price range")
    ax.set_ylabel("Items")
    ax.tick_params(axis="x", labelrotation=45, labelsize=7)
    ax.spines[["top", "right"]].set_visible(False)
    return _figure_to_png(fig)


def _build_pie_chart(categories: list[ReportCategoryRow]) -> bytes:
    rows = _summarize_categories(categories)
    labels = [row.name for row in rows]
    values = [row.count for row in rows]

    fig, ax = plt.subplots(figsize=(6.2, 3.6), dpi=140)
    wedges, _, _ = ax.pie(
        values,
        labels=None,
        autopct=_autopct_threshold,
        startangle=90,
        wedgeprops={"width": 0.45, "edgecolor": "white"},
        pctdistance=0.78,
    )
    ax.legend(
        wedges,
        labels,
        title="Categories",
        loc="center left",
        bbox_to_anchor=(1.0, 0.5),
        fontsize=8,
        frameon=False,
    )
    ax.set_title("Items per category")
    ax.axis("equal")
    return _figure_to_png(fig)


class _FooterCanvas(Canvas):
    def __init__(self, *args, generated_on: str, **kwargs):
        super().__init__(*args, **kwargs)
        self._generated_on = generated_on
        self._saved_page_states: list[dict] = []

    def showPage(self) -> None:  # noqa: N802 (ReportLab API)
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self) -> None:
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count=page_count)
            super().showPage()
        super().save()

    def _draw_footer(self, *, page_count: int) -> None:
        self.setFont("Helvetica", 8)
        self.setFillColor(colors.HexColor("#8A8F98"))
        self.drawString(20 * mm, 10 * mm, f"Generated on {self._generated_on}")
        self.drawRightString(190 * mm, 10 * mm, f"Page {self._pageNumber}/{page_count}")


def _build_kpi_cards(data: MonthlyReportData) -> Table:
    styles = getSampleStyleSheet()
    card_style = ParagraphStyle(
        name="KpiCard",
        parent=styles["BodyText"],
        fontSize=10,
        leading=14,
        textColor=colors.HexColor("#1F2937"),
    )
    cells = [
        [
            Paragraph("<b>Total sale amount</b><br/>" + _format_amount(data.total_sale_amount), card_style),
            Paragraph("<b>Sold items</b><br/>" + str(data.total_sold_items), card_style),
            Paragraph("<b>Not sold items</b><br/>" + str(data.total_not_sold_items), card_style),
        ]
    ]
    table = Table(cells, colWidths=[58 * mm, 58 * mm, 58 * mm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor("#F4F6F8")),
                ("BOX", (0, 0), (-1, -1), 0.6, colors.HexColor("#DDE2E8")),
                ("INNERGRID", (0, 0), (-1, -1), 0.4, colors.HexColor("#DDE2E8")),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 8),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return table


def _striped_table_style(row_count: int, *, right_align_from: int) -> TableStyle:
    table_style: list[tuple] = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#EEF1F4")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#D7DCE2")),
        ("ALIGN", (right_align_from, 1), (-1, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 4),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
    ]
    for row_index in range(1, row_count):
        if row_index % 2 == 0:
            table_style.append(("BACKGROUND", (0, row_index), (-1, row_index), colors.HexColor("#FAFBFC")))
    return TableStyle(table_style)


def _build_categories_table(categories: list[ReportCategoryRow]) -> Table:
    total_items = sum(row.count for row in categories)
    table_data = [["Category", "Items", "Share (%)"]]
    for row in sorted(categories, key=lambda item: item.count, reverse=True)[:10]:
        ratio = (row.count / total_items * 100) if total_items > 0 else 0.0
        table_data.append([row.name, str(row.count), f"{ratio:.1f}%"])

    table = Table(table_data, colWidths=[90 * mm, 50 * mm, 20 * mm], repeatRows=1)
    table.setStyle(_striped_table_style(len(table_data), right_align_from=1))
    return table


def _build_transactions_table(data: MonthlyReportData) -> Table:
    def _truncate_text(value: str, max_length: int = 40) -> str:
        if len(value) <= max_length:
            return value
        return value[: max_length - 1].rstrip() + "…"

    table_data = [["Date", "Product", "Category", "Price"]]
    if not data.transactions:
        table_data.append(["-", "No transactions", "-", "-"])
    else:
        for row in data.transactions[:TRANSACTIONS_DISPLAY_LIMIT]:
            table_data.append(
                [
                    row.date,
                    _truncate_text(row.title),
                    _truncate_text(row.category, max_length=24),
                    _format_amount(row.price),
                ]
            )

    table = Table(table_data, colWidths=[28 * mm, 72 * mm, 48 * mm, 30 * mm], repeatRows=1)
    table.setStyle(_striped_table_style(len(table_data), right_align_from=3))
    return table


def generate_monthly_report_pdf(data: MonthlyReportData) -> bytes:
    """Render a 2-page sales report with charts and a transaction detail table."""

    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=16 * mm,
        leftMargin=16 * mm,
        topMargin=16 * mm,
        bottomMargin=14 * mm,
    )
    styles = getSampleStyleSheet()
    section_title_style = ParagraphStyle(name="SectionTitle", parent=styles["Heading2"], spaceAfter=4, fontSize=12)
    subtitle_style = ParagraphStyle(name="Subtitle", parent=styles["BodyText"], fontSize=9, textColor=colors.HexColor("#6B7280"))

    story = [
        Paragraph("Monthly sales report", styles["Title"]),
        Spacer(1, 1 * mm),
        Paragraph(f"Period: {data.period_label}", styles["BodyText"]),
        Paragraph(f"Generated on {date.today().isoformat()}", subtitle_style),
        Spacer(1, 5 * mm),
        _build_kpi_cards(data),
        Spacer(1, 6 * mm),
    ]

    story.append(Paragraph("Price ranges", section_title_style))
    if not any(row.count for row in data.price_ranges):
        story.append(Paragraph("No priced items for this month.", styles["BodyText"]))
    else:
        bar_bytes = _build_bar_chart(data.price_ranges)
        story.append(Image(BytesIO(bar_bytes), width=140 * mm, height=68 * mm))
    story.append(Spacer(1, 3 * mm))

    story.append(Paragraph("Categories", section_title_style))
    if not data.categories:
        story.append(Paragraph("No transactions for this month.", styles["BodyText"]))
    else:
        pie_bytes = _build_pie_chart(data.categories)
        story.append(Image(BytesIO(pie_bytes), width=140 * mm, height=80 * mm))
        story.append(Spacer(1, 3 * mm))
        story.append(_build_categories_table(data.categories))

    story.append(PageBreak())
    story.append(Paragraph("Transaction details", styles["Title"]))
    story.append(Spacer(1, 2 * mm))
    story.append(Paragraph(f"Period: {data.period_label}", styles["BodyText"]))
    story.append(Spacer(1, 4 * mm))
    if data.transactions_truncated or len(data.transactions) > TRANSACTIONS_DISPLAY_LIMIT:
        story.append(Paragraph(f"List truncated to {TRANSACTIONS_DISPLAY_LIMIT} transactions.", styles["Italic"]))
        story.append(Spacer(1, 2 * mm))
    story.append(_build_transactions_table(data))

    generated_on = date.today().isoformat()
    doc.build(
        story,
        canvasmaker=lambda *args, **kwargs: _FooterCanvas(*args, generated_on=generated_on, **kwargs),
    )
    buffer.seek(0)
    return buffer.read()
