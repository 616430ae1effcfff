"""
Report composition.
Turns an audit result into the ordered list of sections the layout engine places.
"""

from decimal import Decimal

from ..config import ReportOptions
from ..core.models import (
    AuditResult,
    CategoryKey,
    CategorySummary,
    ChangeStatus,
    CostBreakdown,
    Matched,
    ReconciledLine,
    Uncategorized,
    WarrantyFlag,
    category_label,
)
from ..utils.formatting import (
    format_currency,
    format_percentage,
    format_quantity,
    format_signed_currency,
)
from .layout import Section
from .summary import CHANGE_TYPE_LABELS
from .table import ColumnSpec, RowTone, TableRow

DETAIL_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Status", 52),
    ColumnSpec("Description", 170),
    ColumnSpec("Qty", 40, align="right"),
    ColumnSpec("Unit Price", 60, align="right"),
    ColumnSpec("Original", 60, align="right"),
    ColumnSpec("Supplement", 60, align="right"),
    ColumnSpec("Change", 55, align="right", toned=True),
    ColumnSpec("%", 35, align="right", toned=True),
)

TOTALS_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("", 172),
    ColumnSpec("Original", 120, align="right"),
    ColumnSpec("Supplement", 120, align="right"),
    ColumnSpec("Change", 120, align="right", toned=True),
)

OVERVIEW_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Change Type", 172),
    ColumnSpec("Items", 60, align="right"),
    ColumnSpec("Amount", 110, align="right", toned=True),
    ColumnSpec("Average", 100, align="right"),
    ColumnSpec("% of Total", 90, align="right"),
)

OVERVIEW_TONES: dict[str, RowTone] = {
    "increases": RowTone.INCREASE,
    "decreases": RowTone.DECREASE,
    "additions": RowTone.NEW,
    "removals": RowTone.REMOVED,
    "unchanged": RowTone.NEUTRAL,
}

CATEGORY_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Category", 120),
    ColumnSpec("Items", 40, align="right"),
    ColumnSpec("Original", 70, align="right"),
    ColumnSpec("Supplement", 70, align="right"),
    ColumnSpec("Increases", 65, align="right"),
    ColumnSpec("Decreases", 65, align="right"),
    ColumnSpec("Net Change", 62, align="right", toned=True),
    ColumnSpec("%", 40, align="right", toned=True),
)

WARRANTY_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Description", 200),
    ColumnSpec("Category", 100),
    ColumnSpec("Work Type", 80),
    ColumnSpec("Marker", 72),
    ColumnSpec("Total", 80, align="right"),
)

BREAKDOWN_COLUMNS: tuple[ColumnSpec, ...] = (
    ColumnSpec("Source", 58),
    ColumnSpec("Description", 144),
    ColumnSpec("Total", 55, align="right"),
    ColumnSpec("Parts", 55, align="right"),
    ColumnSpec("Labor", 55, align="right"),
    ColumnSpec("Materials", 55, align="right"),
    ColumnSpec("Variance", 55, align="right", toned=True),
    ColumnSpec("Validated", 55, align="center", toned=True),
)


def amount_tone(amount: Decimal) -> RowTone:
    """Red for increases, green for decreases."""
    if amount > 0:
        return RowTone.INCREASE
    if amount < 0:
        return RowTone.DECREASE
    return RowTone.NEUTRAL


def line_tone(line: ReconciledLine) -> RowTone:
    """Row tone for a reconciled line."""
    if line.status is ChangeStatus.NEW:
        return RowTone.NEW
    if line.status is ChangeStatus.REMOVED:
        return RowTone.REMOVED
    return amount_tone(line.variance.total_delta)


def category_section_id(category: CategoryKey) -> str:
    """Section id for a category detail table; real categories are upper-case."""
    if isinstance(category, Uncategorized):
        return "category-uncategorized"
    return f"category-{category}"


def _optional_currency(amount: Decimal | None) -> str:
    return "-" if amount is None else format_currency(amount)


class ReportComposer:
    """
    Builds report sections from an audit result.

    Section order: grand totals, changes overview, category summary, one
    detail table per category (in the aggregator's order), warranty items,
    cost-breakdown checks.
    """

    def __init__(self, options: ReportOptions | None = None) -> None:
        self.options = options or ReportOptions()

    def banner(self, result: AuditResult) -> list[str]:
        """Heading lines for the first page."""
        return [
            self.options.report_title,
            f"Claim ID: {result.claim_id}",
            f"Generated: {result.audit_timestamp.strftime('%Y-%m-%d %H:%M UTC')}",
        ]

    def compose(self, result: AuditResult) -> list[Section]:
        sections = [
            self.grand_totals(result),
            self.changes_overview(result),
            self.category_summary(result.categories),
        ]
        sections.extend(self.category_detail(summary) for summary in result.categories)
        if self.options.include_warranty_table:
            sections.append(self.warranty_items(result.warranty_flags))
        if self.options.include_cost_breakdown_table and result.cost_breakdowns:
            sections.append(self.cost_breakdowns(result.cost_breakdowns))
        return sections

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------
    def grand_totals(self, result: AuditResult) -> Section:
        s = result.summary
        rows = []
        for label, original, supplement in (
            ("Subtotal", s.original_subtotal, s.supplement_subtotal),
            ("Tax", s.original_tax, s.supplement_tax),
            ("Total", s.original_total, s.supplement_total),
        ):
            change = supplement - original
            rows.append(
                TableRow(
                    cells=(
                        label,
                        format_currency(original),
                        format_currency(supplement),
                        format_signed_currency(change),
                    ),
                    tone=amount_tone(change),
                )
            )
        rows.append(
            TableRow(
                cells=("Overall Change", "", "", format_percentage(s.percentage_change)),
                tone=amount_tone(s.net_change),
            )
        )
        return Section(
            section_id="grand-totals",
            title="Grand Totals",
            columns=TOTALS_COLUMNS,
            rows=tuple(rows),
            shade_alternate=False,
        )

    def changes_overview(self, result: AuditResult) -> Section:
        """Change-type breakdown, headline counts, then any risk indicators."""
        s = result.summary
        rows = []
        for name, label in CHANGE_TYPE_LABELS.items():
            detail = getattr(s.changes_by_type, name)
            rows.append(
                TableRow(
                    cells=(
                        label,
                        str(detail.count),
                        format_currency(detail.total_amount),
                        format_currency(detail.average_amount),
                        f"{detail.percentage_of_total:.1f}%",
                    ),
                    tone=OVERVIEW_TONES[name] if detail.count else RowTone.NEUTRAL,
                )
            )
        rows.append(TableRow(cells=("Significant Changes", str(s.significant_items))))
        rows.append(TableRow(cells=("Warranty Items", str(s.warranty_items))))
        for indicator in s.risk_indicators:
            rows.append(
                TableRow(
                    cells=(
                        f"Risk ({indicator.severity.value}): {indicator.description}",
                        str(len(indicator.affected_items)) if indicator.affected_items else "",
                    ),
                    tone=RowTone.INCREASE,
                )
            )
        return Section(
            section_id="changes-overview",
            title="Changes Overview",
            columns=OVERVIEW_COLUMNS,
            rows=tuple(rows),
        )

    def category_summary(self, categories: list[CategorySummary]) -> Section:
        rows = tuple(
            TableRow(
                cells=(
                    summary.label,
                    str(summary.item_count),
                    format_currency(summary.original_subtotal),
                    format_currency(summary.supplement_subtotal),
                    format_currency(summary.increase_sum),
                    format_currency(summary.decrease_sum),
                    format_signed_currency(summary.net_change),
                    format_percentage(summary.percentage_change, decimals=1),
                ),
                tone=amount_tone(summary.net_change),
            )
            for summary in categories
        )
        if not rows:
            rows = (TableRow(cells=("No line items",)),)
        return Section(
            section_id="category-summary",
            title="Category Summary",
            columns=CATEGORY_COLUMNS,
            rows=rows,
        )

    def detail_row(self, line: ReconciledLine) -> TableRow:
        match = line.match
        status = line.status.value
        if isinstance(match, Matched):
            o, s = match.original, match.supplement
            if match.change_type is not None:
                status = f"{status} ({match.change_type.value})"
            quantity = format_quantity(s.quantity)
            if o.quantity != s.quantity:
                quantity = f"{format_quantity(o.quantity)} -> {quantity}"
            unit_price = format_currency(s.unit_price)
            if o.unit_price != s.unit_price:
                unit_price = f"{format_currency(o.unit_price)} -> {unit_price}"
        else:
            item = match.item
            quantity = format_quantity(item.quantity)
            unit_price = format_currency(item.unit_price)

        return TableRow(
            cells=(
                status,
                line.description,
                quantity,
                unit_price,
                _optional_currency(line.variance.original_amount),
                _optional_currency(line.variance.supplement_amount),
                format_signed_currency(line.variance.total_delta),
                format_percentage(line.variance.total_pct, decimals=1),
            ),
            tone=line_tone(line),
        )

    def category_detail(self, summary: CategorySummary) -> Section:
        label = summary.label
        count = summary.item_count
        return Section(
            section_id=category_section_id(summary.category),
            title=f"{label} ({count} item{'s' if count != 1 else ''}, "
            f"net {format_signed_currency(summary.net_change)})",
            columns=DETAIL_COLUMNS,
            rows=tuple(self.detail_row(line) for line in summary.items),
        )

    def warranty_items(self, flags: list[WarrantyFlag]) -> Section:
        rows = tuple(
            TableRow(
                cells=(
                    flag.description,
                    category_label(flag.category),
                    flag.work_type.value,
                    flag.marker or "",
                    format_currency(flag.total),
                )
            )
            for flag in flags
            if flag.flagged
        )
        if not rows:
            rows = (TableRow(cells=("No repair or replacement items",)),)
        return Section(
            section_id="warranty-items",
            title="Warranty Items",
            columns=WARRANTY_COLUMNS,
            rows=rows,
        )

    def cost_breakdowns(self, breakdowns: list[CostBreakdown]) -> Section:
        rows = tuple(
            TableRow(
                cells=(
                    breakdown.source.title(),
                    breakdown.description,
                    format_currency(breakdown.total),
                    format_currency(breakdown.part_cost),
                    format_currency(breakdown.labor_cost),
                    format_currency(breakdown.material_cost),
                    format_signed_currency(breakdown.variance),
                    "true" if breakdown.is_validated else "false",
                ),
                tone=RowTone.NEUTRAL if breakdown.is_validated else RowTone.INCREASE,
            )
            for breakdown in breakdowns
        )
        return Section(
            section_id="cost-breakdown",
            title="Cost Breakdown Validation",
            columns=BREAKDOWN_COLUMNS,
            rows=rows,
        )
