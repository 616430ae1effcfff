"""
Change-type breakdown and claim-level risk indicators.
"""

import logging
from collections.abc import Callable
from decimal import ROUND_HALF_UP, Decimal

from ..config import VarianceThresholds
from ..core.models import (
    Added,
    ChangesByType,
    ChangeTypeDetail,
    Matched,
    ReconciledLine,
    Removed,
    RiskIndicator,
    RiskType,
    SignificanceLevel,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _is_increase(line: ReconciledLine) -> bool:
    return isinstance(line.match, Matched) and line.variance.total_delta > 0


def _is_decrease(line: ReconciledLine) -> bool:
    return isinstance(line.match, Matched) and line.variance.total_delta < 0


def _is_unchanged(line: ReconciledLine) -> bool:
    return isinstance(line.match, Matched) and line.variance.total_delta == 0


def _is_addition(line: ReconciledLine) -> bool:
    return isinstance(line.match, Added)


def _is_removal(line: ReconciledLine) -> bool:
    return isinstance(line.match, Removed)


class ChangeTypeAnalyzer:
    """
    Splits reconciled lines by the direction of their dollar change.

    Matched lines are increases, decreases or unchanged by their total delta,
    so a quantity change that leaves the total alone counts as unchanged.
    """

    def _detail(
        self,
        lines: list[ReconciledLine],
        predicate: Callable[[ReconciledLine], bool],
        grand_amount: Decimal,
    ) -> ChangeTypeDetail:
        selected = [line for line in lines if predicate(line)]
        amount = sum((abs(line.variance.total_delta) for line in selected), Decimal("0"))
        average = (
            (amount / len(selected)).quantize(CENT, rounding=ROUND_HALF_UP)
            if selected
            else Decimal("0")
        )
        share = float(amount / grand_amount * 100) if grand_amount > 0 else 0.0
        return ChangeTypeDetail(
            count=len(selected),
            total_amount=amount,
            average_amount=average,
            percentage_of_total=share,
            item_ids=[line.item.id or line.description for line in selected],
        )

    def analyze(self, lines: list[ReconciledLine]) -> ChangesByType:
        grand_amount = sum((abs(line.variance.total_delta) for line in lines), Decimal("0"))
        return ChangesByType(
            increases=self._detail(lines, _is_increase, grand_amount),
            decreases=self._detail(lines, _is_decrease, grand_amount),
            additions=self._detail(lines, _is_addition, grand_amount),
            removals=self._detail(lines, _is_removal, grand_amount),
            unchanged=self._detail(lines, _is_unchanged, grand_amount),
        )


class RiskAssessor:
    """Raises claim-level risk indicators from the overall change and added lines."""

    def __init__(self, thresholds: VarianceThresholds | None = None) -> None:
        self.thresholds = thresholds or VarianceThresholds()

    def high_variance(self, percentage_change: float | None) -> RiskIndicator | None:
        """Overall change beyond the review threshold; None without a baseline."""
        t = self.thresholds
        if percentage_change is None or abs(percentage_change) <= t.high_variance_percent:
            return None
        severity = (
            SignificanceLevel.CRITICAL
            if abs(percentage_change) > t.critical_variance_percent
            else SignificanceLevel.HIGH
        )
        return RiskIndicator(
            type=RiskType.HIGH_VARIANCE,
            severity=severity,
            description=(
                f"Total variance of {percentage_change:+.1f}% exceeds the "
                f"{t.high_variance_percent:g}% review threshold"
            ),
            recommended_action="Review every change on the supplement",
        )

    def scope_creep(self, additions: ChangeTypeDetail) -> RiskIndicator | None:
        """Too many lines added by the supplement."""
        t = self.thresholds
        if additions.count <= t.scope_creep_items:
            return None
        severity = (
            SignificanceLevel.HIGH
            if additions.count > t.high_scope_creep_items
            else SignificanceLevel.MEDIUM
        )
        return RiskIndicator(
            type=RiskType.SCOPE_CREEP,
            severity=severity,
            description=f"{additions.count} new items added to the supplement",
            recommended_action="Verify each new item is necessary",
            affected_items=list(additions.item_ids),
        )

    def assess(
        self, percentage_change: float | None, changes: ChangesByType
    ) -> list[RiskIndicator]:
        indicators = [
            indicator
            for indicator in (
                self.high_variance(percentage_change),
                self.scope_creep(changes.additions),
            )
            if indicator is not None
        ]
        for indicator in indicators:
            logger.info(
                "Risk indicator %s (%s): %s",
                indicator.type.value,
                indicator.severity.value,
                indicator.description,
            )
        return indicators
