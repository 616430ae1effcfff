"""
Cost-breakdown validation.
Checks that a line's stated part, labor and material costs add up to its total.
"""

import logging
from decimal import Decimal
from typing import Literal

from ..config import DEFAULT_BREAKDOWN_TOLERANCE
from ..core.models import CostBreakdown, Invoice, LineItem

logger = logging.getLogger(__name__)


class CostBreakdownValidator:
    """
    Validates stated sub-costs against line totals.

    Labor cost is taken from ``labor_cost`` or, failing that, from
    ``labor_hours * labor_rate``. Lines with no stated sub-costs are skipped.
    Inconsistencies are logged and reported, never raised.
    """

    def __init__(self, tolerance: Decimal = DEFAULT_BREAKDOWN_TOLERANCE) -> None:
        self.tolerance = tolerance

    def _labor_cost(self, item: LineItem) -> Decimal | None:
        if item.labor_cost is not None:
            return item.labor_cost
        if item.labor_hours is not None and item.labor_rate is not None:
            return Decimal(str(item.labor_hours)) * item.labor_rate
        return None

    def check(
        self, item: LineItem, source: Literal["original", "supplement"] = "supplement"
    ) -> CostBreakdown | None:
        """Check one line; None when it states no sub-costs."""
        labor_cost = self._labor_cost(item)
        components = [item.part_cost, labor_cost, item.material_cost]
        if all(component is None for component in components):
            return None

        part_cost = item.part_cost or Decimal("0")
        labor_cost = labor_cost or Decimal("0")
        material_cost = item.material_cost or Decimal("0")
        component_sum = part_cost + labor_cost + material_cost
        variance = item.total - component_sum
        is_validated = abs(variance) <= self.tolerance

        if not is_validated:
            logger.warning(
                "Cost breakdown for %s line %r (%s) sums to %s but total is %s",
                source,
                item.id,
                item.description,
                component_sum,
                item.total,
            )

        return CostBreakdown(
            item_id=item.id,
            description=item.description,
            source=source,
            total=item.total,
            part_cost=part_cost,
            labor_cost=labor_cost,
            material_cost=material_cost,
            component_sum=component_sum,
            variance=variance,
            tolerance=self.tolerance,
            is_validated=is_validated,
        )

    def validate(self, original: Invoice, supplement: Invoice) -> list[CostBreakdown]:
        """Check every line of both invoices that states a breakdown."""
        results: list[CostBreakdown] = []
        for source, invoice in (("original", original), ("supplement", supplement)):
            for item in invoice.line_items:
                breakdown = self.check(item, source)
                if breakdown is not None:
                    results.append(breakdown)
        return results
