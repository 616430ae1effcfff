"""
Reconciliation of original estimate lines against supplement lines.
"""

import logging
from collections import defaultdict, deque

from .models import Added, Invoice, LineItem, Matched, MatchResult, Removed
from .normalizer import LineItemNormalizer, MatchKey, get_normalizer

logger = logging.getLogger(__name__)


class Reconciler:
    """
    Matches original invoice lines to supplement invoice lines.

    Matching is exact on the normalized ``(category, description)`` key.
    Duplicate keys are consumed first-come-first-served in original order.
    Every line of both invoices appears in exactly one result.
    """

    def __init__(self, normalizer: LineItemNormalizer | None = None) -> None:
        self.normalizer = normalizer or get_normalizer()

    def reconcile(self, original: Invoice, supplement: Invoice) -> list[MatchResult]:
        """
        Reconcile two invoices.

        Args:
            original: The original estimate
            supplement: The revised supplement

        Returns:
            Matched results in supplement order, then Removed in original
            order, then Added in supplement order
        """
        return self.reconcile_items(original.line_items, supplement.line_items)

    def reconcile_items(
        self, original_items: list[LineItem], supplement_items: list[LineItem]
    ) -> list[MatchResult]:
        lookup: dict[MatchKey, deque[int]] = defaultdict(deque)
        for index, item in enumerate(original_items):
            lookup[self.normalizer.key(item)].append(index)

        consumed: set[int] = set()
        matched: list[MatchResult] = []
        unmatched_supplement: list[LineItem] = []

        for item in supplement_items:
            candidates = lookup.get(self.normalizer.key(item))
            if candidates:
                index = candidates.popleft()
                consumed.add(index)
                matched.append(Matched(original=original_items[index], supplement=item))
            else:
                unmatched_supplement.append(item)

        removed: list[MatchResult] = [
            Removed(original=item)
            for index, item in enumerate(original_items)
            if index not in consumed
        ]
        added: list[MatchResult] = [Added(supplement=item) for item in unmatched_supplement]

        logger.debug(
            "Reconciled %d original / %d supplement lines: %d matched, %d removed, %d added",
            len(original_items),
            len(supplement_items),
            len(matched),
            len(removed),
            len(added),
        )
        return matched + removed + added
