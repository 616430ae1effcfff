"""
Category aggregation of reconciled line items.
"""

from decimal import Decimal

from ..core.models import (
    Added,
    CategoryKey,
    CategorySummary,
    ChangeStatus,
    Matched,
    ReconciledLine,
    Removed,
    category_label,
)
from ..core.variance import percent_change


class CategoryAggregator:
    """
    Groups reconciled lines by category and computes subtotals.

    Categories are returned highest ``|net_change|`` first. Lines without a
    category fall into the UNCATEGORIZED sentinel group.
    """

    def group(self, lines: list[ReconciledLine]) -> dict[CategoryKey, list[ReconciledLine]]:
        groups: dict[CategoryKey, list[ReconciledLine]] = {}
        for line in lines:
            groups.setdefault(line.category, []).append(line)
        return groups

    def summarize(self, category: CategoryKey, lines: list[ReconciledLine]) -> CategorySummary:
        """Build the summary for one category's lines."""
        original_subtotal = Decimal("0")
        supplement_subtotal = Decimal("0")
        increase_sum = Decimal("0")
        decrease_sum = Decimal("0")
        status_counts = {status: 0 for status in ChangeStatus}

        for line in lines:
            match = line.match
            if isinstance(match, (Matched, Removed)):
                original_subtotal += match.original.total
            if isinstance(match, (Matched, Added)):
                supplement_subtotal += match.supplement.total

            delta = line.variance.total_delta
            if delta > 0:
                increase_sum += delta
            elif delta < 0:
                decrease_sum += abs(delta)
            status_counts[line.status] += 1

        net_change = supplement_subtotal - original_subtotal
        ordered = sorted(lines, key=lambda line: abs(line.variance.total_delta), reverse=True)

        return CategorySummary(
            category=category,
            items=ordered,
            original_subtotal=original_subtotal,
            supplement_subtotal=supplement_subtotal,
            increase_sum=increase_sum,
            decrease_sum=decrease_sum,
            net_change=net_change,
            percentage_change=percent_change(net_change, original_subtotal),
            significant_item_count=sum(1 for line in lines if line.is_significant),
            new_count=status_counts[ChangeStatus.NEW],
            changed_count=status_counts[ChangeStatus.CHANGED],
            removed_count=status_counts[ChangeStatus.REMOVED],
            unchanged_count=status_counts[ChangeStatus.SAME],
        )

    def aggregate(self, lines: list[ReconciledLine]) -> list[CategorySummary]:
        """Summarize every category, highest absolute net change first."""
        summaries = [
            self.summarize(category, category_lines)
            for category, category_lines in self.group(lines).items()
        ]
        return sorted(
            summaries,
            key=lambda summary: (-abs(summary.net_change), category_label(summary.category)),
        )
