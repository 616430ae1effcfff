"""
Audit Summary Reporting Module.
Builds audit results and formats them as text, JSON and delimited exports.
"""

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

import pandas as pd

from ..config import VarianceThresholds
from ..core.models import (
    Added,
    AuditResult,
    AuditSummary,
    CategorySummary,
    ChangeStatus,
    ChangeTypeDetail,
    CostBreakdown,
    Matched,
    MatchResult,
    ReconciledLine,
    Removed,
    RiskIndicator,
    SupplementClaim,
    WarrantyFlag,
)
from ..core.variance import percent_change
from ..modules.risk import ChangeTypeAnalyzer, RiskAssessor
from ..utils.formatting import (
    format_currency,
    format_percentage,
    format_signed_currency,
)

EXPORT_COLUMNS = [
    "Category",
    "Status",
    "Description",
    "Original Qty",
    "Supplement Qty",
    "Original Unit Price",
    "Supplement Unit Price",
    "Original Total",
    "Supplement Total",
    "Total Change",
    "Change %",
]


CHANGE_TYPE_LABELS = {
    "increases": "Increases",
    "decreases": "Decreases",
    "additions": "New Items",
    "removals": "Removed Items",
    "unchanged": "Unchanged Items",
}


def _money(value: Decimal | None) -> float | None:
    return float(value) if value is not None else None


class ReportFormatter:
    """
    Formats audit results for various output formats.
    """

    STATUS_MARKERS = {
        ChangeStatus.NEW: "+",
        ChangeStatus.REMOVED: "-",
        ChangeStatus.CHANGED: "~",
        ChangeStatus.SAME: " ",
    }

    def __init__(self, result: AuditResult) -> None:
        self.result = result

    def to_text(self, include_details: bool = True) -> str:
        """
        Format the audit as a plain text report.

        Args:
            include_details: Whether to list every line under its category

        Returns:
            Formatted text report
        """
        lines: list[str] = []
        result = self.result
        summary = result.summary

        lines.append("=" * 70)
        lines.append("SUPPLEMENT AUDIT REPORT")
        lines.append("=" * 70)
        lines.append("")
        lines.append(f"Claim ID: {result.claim_id}")
        lines.append(f"Audit Date: {result.audit_timestamp.strftime('%Y-%m-%d %H:%M:%S UTC')}")
        lines.append("")

        lines.append("-" * 70)
        lines.append("SUMMARY")
        lines.append("-" * 70)
        lines.append(f"Original Total:   {format_currency(summary.original_total)}")
        lines.append(f"Supplement Total: {format_currency(summary.supplement_total)}")
        lines.append(
            f"Net Change:       {format_signed_currency(summary.net_change)} "
            f"({format_percentage(summary.percentage_change)})"
        )
        lines.append("")
        lines.append(f"Line Items: {summary.total_items}")
        lines.append(f"  - New: {summary.new_items}")
        lines.append(f"  - Changed: {summary.changed_items}")
        lines.append(f"  - Removed: {summary.removed_items}")
        lines.append(f"  - Unchanged: {summary.unchanged_items}")
        lines.append(f"Significant Changes: {summary.significant_items}")
        lines.append(f"Warranty Items: {summary.warranty_items}")
        if summary.unvalidated_breakdowns:
            lines.append(f"Unvalidated Cost Breakdowns: {summary.unvalidated_breakdowns}")
        lines.append("")

        if result.modules_executed:
            lines.append(f"Modules Executed: {', '.join(result.modules_executed)}")
            lines.append("")

        lines.append("-" * 70)
        lines.append("CHANGES BY TYPE")
        lines.append("-" * 70)
        for name, label in CHANGE_TYPE_LABELS.items():
            detail = getattr(summary.changes_by_type, name)
            lines.append(
                f"{label + ':':<17} {detail.count:>3}  {format_currency(detail.total_amount):>12}  "
                f"avg {format_currency(detail.average_amount)}, "
                f"{detail.percentage_of_total:.1f}% of total"
            )
        lines.append("")

        if summary.risk_indicators:
            lines.append("-" * 70)
            lines.append("RISK INDICATORS")
            lines.append("-" * 70)
            for indicator in summary.risk_indicators:
                lines.append(f"[{indicator.severity.value.upper()}] {indicator.description}")
                lines.append(f"   -> {indicator.recommended_action}")
            lines.append("")

        lines.append("-" * 70)
        lines.append("CATEGORIES")
        lines.append("-" * 70)
        for category in result.categories:
            lines.append(
                f"{category.label}: {format_currency(category.original_subtotal)} -> "
                f"{format_currency(category.supplement_subtotal)} "
                f"({format_signed_currency(category.net_change)}, {category.item_count} items)"
            )
            if include_details:
                for line in category.items:
                    marker = self.STATUS_MARKERS[line.status]
                    lines.append(
                        f"   {marker} [{line.status.value}] {line.description} "
                        f"{format_signed_currency(line.variance.total_delta)}"
                    )
        lines.append("")

        flagged = result.flagged_warranty_items
        if include_details and flagged:
            lines.append("-" * 70)
            lines.append("WARRANTY ITEMS")
            lines.append("-" * 70)
            for flag in flagged:
                lines.append(f"[{flag.work_type.value}] {flag.description} ({flag.marker})")
            lines.append("")

        unvalidated = result.unvalidated_breakdowns
        if include_details and unvalidated:
            lines.append("-" * 70)
            lines.append("COST BREAKDOWN EXCEPTIONS")
            lines.append("-" * 70)
            for breakdown in unvalidated:
                lines.append(
                    f"{breakdown.description} ({breakdown.source}): components "
                    f"{format_currency(breakdown.component_sum)} vs total "
                    f"{format_currency(breakdown.total)}"
                )
            lines.append("")

        lines.append("=" * 70)
        lines.append("END OF REPORT")
        lines.append("=" * 70)

        return "\n".join(lines)

    def _line_dict(self, line: ReconciledLine) -> dict[str, Any]:
        match = line.match
        variance = line.variance
        return {
            "status": line.status.value,
            "change_type": (
                match.change_type.value
                if isinstance(match, Matched) and match.change_type is not None
                else None
            ),
            "item_id": line.item.id,
            "description": line.description,
            "original_total": _money(variance.original_amount),
            "supplement_total": _money(variance.supplement_amount),
            "quantity_delta": variance.quantity_delta,
            "unit_price_delta": float(variance.unit_price_delta),
            "total_delta": float(variance.total_delta),
            "total_pct": variance.total_pct,
            "significance": line.significance.value,
            "is_significant": line.is_significant,
        }

    @staticmethod
    def _detail_dict(detail: ChangeTypeDetail) -> dict[str, Any]:
        return {
            "count": detail.count,
            "total_amount": float(detail.total_amount),
            "average_amount": float(detail.average_amount),
            "percentage_of_total": detail.percentage_of_total,
            "items": list(detail.item_ids),
        }

    @staticmethod
    def _risk_dict(indicator: RiskIndicator) -> dict[str, Any]:
        return {
            "type": indicator.type.value,
            "severity": indicator.severity.value,
            "description": indicator.description,
            "recommended_action": indicator.recommended_action,
            "affected_items": list(indicator.affected_items),
        }

    def _category_dict(self, category: CategorySummary) -> dict[str, Any]:
        return {
            "category": category.label,
            "item_count": category.item_count,
            "original_subtotal": float(category.original_subtotal),
            "supplement_subtotal": float(category.supplement_subtotal),
            "increase_sum": float(category.increase_sum),
            "decrease_sum": float(category.decrease_sum),
            "net_change": float(category.net_change),
            "percentage_change": category.percentage_change,
            "significant_item_count": category.significant_item_count,
            "items": [self._line_dict(line) for line in category.items],
        }

    def to_dict(self) -> dict[str, Any]:
        """
        Convert the audit result to dictionary format.

        Returns:
            Dictionary representation with money as floats
        """
        summary = self.result.summary
        return {
            "claim_id": self.result.claim_id,
            "audit_timestamp": self.result.audit_timestamp.isoformat(),
            "summary": {
                "new_items": summary.new_items,
                "removed_items": summary.removed_items,
                "changed_items": summary.changed_items,
                "unchanged_items": summary.unchanged_items,
                "significant_items": summary.significant_items,
                "warranty_items": summary.warranty_items,
                "unvalidated_breakdowns": summary.unvalidated_breakdowns,
                "original_total": float(summary.original_total),
                "supplement_total": float(summary.supplement_total),
                "total_increase": float(summary.total_increase),
                "total_decrease": float(summary.total_decrease),
                "net_change": float(summary.net_change),
                "percentage_change": summary.percentage_change,
                "changes_by_type": {
                    name: self._detail_dict(getattr(summary.changes_by_type, name))
                    for name in CHANGE_TYPE_LABELS
                },
                "risk_indicators": [self._risk_dict(r) for r in summary.risk_indicators],
            },
            "modules_executed": self.result.modules_executed,
            "categories": [self._category_dict(c) for c in self.result.categories],
            "warranty_items": [
                {
                    "item_id": flag.item_id,
                    "description": flag.description,
                    "work_type": flag.work_type.value,
                    "marker": flag.marker,
                    "total": float(flag.total),
                }
                for flag in self.result.flagged_warranty_items
            ],
            "cost_breakdowns": [
                {
                    "item_id": b.item_id,
                    "description": b.description,
                    "source": b.source,
                    "total": float(b.total),
                    "component_sum": float(b.component_sum),
                    "variance": float(b.variance),
                    "validated": b.is_validated,
                }
                for b in self.result.cost_breakdowns
            ],
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Convert the audit result to JSON format.

        Args:
            indent: JSON indentation level

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=indent)

    def to_dataframe(self) -> pd.DataFrame:
        """One row per line item, grouped by category, with a status column."""
        records = []
        for category in self.result.categories:
            for line in category.items:
                match = line.match
                original = match.original if isinstance(match, (Matched, Removed)) else None
                supplement = match.supplement if isinstance(match, (Matched, Added)) else None
                records.append(
                    {
                        "Category": category.label,
                        "Status": line.status.value,
                        "Description": line.description,
                        "Original Qty": original.quantity if original else None,
                        "Supplement Qty": supplement.quantity if supplement else None,
                        "Original Unit Price": _money(original.unit_price) if original else None,
                        "Supplement Unit Price": (
                            _money(supplement.unit_price) if supplement else None
                        ),
                        "Original Total": _money(line.variance.original_amount),
                        "Supplement Total": _money(line.variance.supplement_amount),
                        "Total Change": float(line.variance.total_delta),
                        "Change %": (
                            round(line.variance.total_pct, 2)
                            if line.variance.total_pct is not None
                            else None
                        ),
                    }
                )
        return pd.DataFrame(records, columns=EXPORT_COLUMNS)

    def to_csv(self, path: str | Path | None = None) -> str:
        """
        Export line items as CSV.

        Args:
            path: Optional file path to also write the export to

        Returns:
            The CSV text
        """
        text = self.to_dataframe().to_csv(index=False)
        if path is not None:
            Path(path).write_text(text, encoding="utf-8")
        return text

    def print_summary(self) -> None:
        """Print a brief summary to stdout."""
        print(self.to_text(include_details=False))

    def print_full(self) -> None:
        """Print the full report to stdout."""
        print(self.to_text(include_details=True))


class AuditResultBuilder:
    """
    Builder for constructing audit results.
    """

    def __init__(
        self, claim: SupplementClaim, thresholds: VarianceThresholds | None = None
    ) -> None:
        self.claim = claim
        self.result = AuditResult(claim_id=claim.claim_id)
        self.change_analyzer = ChangeTypeAnalyzer()
        self.risk_assessor = RiskAssessor(thresholds)

    def add_matches(self, matches: list[MatchResult]) -> "AuditResultBuilder":
        self.result.matches.extend(matches)
        return self

    def add_lines(self, lines: list[ReconciledLine]) -> "AuditResultBuilder":
        self.result.lines.extend(lines)
        return self

    def set_categories(self, categories: list[CategorySummary]) -> "AuditResultBuilder":
        self.result.categories = list(categories)
        return self

    def add_warranty_flags(self, flags: list[WarrantyFlag]) -> "AuditResultBuilder":
        self.result.warranty_flags.extend(flags)
        return self

    def add_cost_breakdowns(self, breakdowns: list[CostBreakdown]) -> "AuditResultBuilder":
        self.result.cost_breakdowns.extend(breakdowns)
        return self

    def add_module(self, module_name: str) -> "AuditResultBuilder":
        """Record that a module was executed."""
        if module_name not in self.result.modules_executed:
            self.result.modules_executed.append(module_name)
        return self

    def calculate_summary(self) -> "AuditResultBuilder":
        """Compute claim-level counts and totals."""
        original = self.claim.original
        supplement = self.claim.supplement
        counts = {status: 0 for status in ChangeStatus}
        total_increase = Decimal("0")
        total_decrease = Decimal("0")
        for line in self.result.lines:
            counts[line.status] += 1
            delta = line.variance.total_delta
            if delta > 0:
                total_increase += delta
            elif delta < 0:
                total_decrease += abs(delta)

        net_change = supplement.total - original.total
        percentage_change = percent_change(net_change, original.total)
        changes = self.change_analyzer.analyze(self.result.lines)
        self.result.summary = AuditSummary(
            new_items=counts[ChangeStatus.NEW],
            removed_items=counts[ChangeStatus.REMOVED],
            changed_items=counts[ChangeStatus.CHANGED],
            unchanged_items=counts[ChangeStatus.SAME],
            significant_items=sum(1 for line in self.result.lines if line.is_significant),
            warranty_items=len(self.result.flagged_warranty_items),
            unvalidated_breakdowns=len(self.result.unvalidated_breakdowns),
            original_subtotal=original.subtotal,
            original_tax=original.tax,
            original_total=original.total,
            supplement_subtotal=supplement.subtotal,
            supplement_tax=supplement.tax,
            supplement_total=supplement.total,
            total_increase=total_increase,
            total_decrease=total_decrease,
            net_change=net_change,
            percentage_change=percentage_change,
            changes_by_type=changes,
            risk_indicators=self.risk_assessor.assess(percentage_change, changes),
        )
        return self

    def build(self) -> AuditResult:
        """Build and return the final result."""
        self.calculate_summary()
        return self.result

    def get_formatter(self) -> ReportFormatter:
        return ReportFormatter(self.build())
