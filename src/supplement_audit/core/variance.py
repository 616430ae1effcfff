"""
Variance calculation for reconciled line items.
"""

from decimal import Decimal

from ..config import VarianceThresholds
from .models import (
    Added,
    Matched,
    MatchResult,
    ReconciledLine,
    Removed,
    SignificanceLevel,
    VarianceRecord,
)

SIGNIFICANT_LEVELS = frozenset({SignificanceLevel.HIGH, SignificanceLevel.CRITICAL})


def percent_change(delta: Decimal | float, baseline: Decimal | float | None) -> float | None:
    """Percentage of delta against baseline; None when there is no usable baseline."""
    if baseline is None or baseline == 0:
        return None
    if isinstance(delta, Decimal) or isinstance(baseline, Decimal):
        return float(Decimal(str(delta)) / Decimal(str(baseline)) * 100)
    return delta / baseline * 100


class VarianceCalculator:
    """
    Computes quantity, unit price and total deltas for match results.

    Pure: line items are never modified.
    """

    def __init__(self, thresholds: VarianceThresholds | None = None) -> None:
        self.thresholds = thresholds or VarianceThresholds()

    def calculate(self, match: MatchResult) -> VarianceRecord:
        """Compute the variance record for a single match result."""
        if isinstance(match, Matched):
            return self._matched(match)
        if isinstance(match, Added):
            return self._added(match)
        if isinstance(match, Removed):
            return self._removed(match)
        raise TypeError(f"Unsupported match result: {type(match).__name__}")

    def _matched(self, match: Matched) -> VarianceRecord:
        o, s = match.original, match.supplement
        quantity_delta = s.quantity - o.quantity
        unit_price_delta = s.unit_price - o.unit_price
        total_delta = s.total - o.total
        return VarianceRecord(
            original_amount=o.total,
            supplement_amount=s.total,
            quantity_delta=quantity_delta,
            unit_price_delta=unit_price_delta,
            total_delta=total_delta,
            quantity_pct=percent_change(quantity_delta, o.quantity),
            unit_price_pct=percent_change(unit_price_delta, o.unit_price),
            total_pct=percent_change(total_delta, o.total),
        )

    def _added(self, match: Added) -> VarianceRecord:
        s = match.supplement
        return VarianceRecord(
            original_amount=None,
            supplement_amount=s.total,
            quantity_delta=s.quantity,
            unit_price_delta=s.unit_price,
            total_delta=s.total,
        )

    def _removed(self, match: Removed) -> VarianceRecord:
        o = match.original
        return VarianceRecord(
            original_amount=o.total,
            supplement_amount=None,
            quantity_delta=-o.quantity,
            unit_price_delta=-o.unit_price,
            total_delta=-o.total,
            quantity_pct=percent_change(-o.quantity, o.quantity),
            unit_price_pct=percent_change(-o.unit_price, o.unit_price),
            total_pct=percent_change(-o.total, o.total),
        )

    def significance(self, variance: VarianceRecord) -> SignificanceLevel:
        """Grade a variance by the highest level either its percent or dollar change reaches."""
        t = self.thresholds
        pct = abs(variance.total_pct) if variance.total_pct is not None else 0.0
        amount = abs(variance.total_delta)
        if pct >= t.critical_percent or amount >= t.critical_amount:
            return SignificanceLevel.CRITICAL
        if pct >= t.significance_percent or amount >= t.significance_amount:
            return SignificanceLevel.HIGH
        if pct >= t.medium_percent or amount >= t.medium_amount:
            return SignificanceLevel.MEDIUM
        return SignificanceLevel.LOW

    def is_significant(self, variance: VarianceRecord) -> bool:
        """Whether a variance grades HIGH or CRITICAL."""
        return self.significance(variance) in SIGNIFICANT_LEVELS

    def calculate_all(self, matches: list[MatchResult]) -> list[ReconciledLine]:
        """Pair every match result with its variance record."""
        lines: list[ReconciledLine] = []
        for match in matches:
            variance = self.calculate(match)
            level = self.significance(variance)
            lines.append(
                ReconciledLine(
                    match=match,
                    variance=variance,
                    significance=level,
                    is_significant=level in SIGNIFICANT_LEVELS,
                )
            )
        return lines
