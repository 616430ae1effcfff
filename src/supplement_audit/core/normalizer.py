"""
Line item normalization for reconciliation matching.
"""

from .models import LineItem

MatchKey = tuple[str, str]


def collapse_whitespace(value: str | None) -> str:
    """Trim and collapse internal whitespace runs to single spaces."""
    if not value:
        return ""
    return " ".join(str(value).split())


class LineItemNormalizer:
    """
    Builds the matching key for a line item.

    The key is ``(CATEGORY, description)`` with the category upper-cased and
    the description case-folded, both trimmed with whitespace collapsed.
    Missing fields become empty strings. The item itself is never modified.
    """

    def normalize_category(self, category: str | None) -> str:
        return collapse_whitespace(category).upper()

    def normalize_description(self, description: str | None) -> str:
        return collapse_whitespace(description).casefold()

    def key(self, item: LineItem) -> MatchKey:
        return (
            self.normalize_category(item.category),
            self.normalize_description(item.description),
        )


_default_normalizer: LineItemNormalizer | None = None


def get_normalizer() -> LineItemNormalizer:
    """Get the shared normalizer instance."""
    global _default_normalizer
    if _default_normalizer is None:
        _default_normalizer = LineItemNormalizer()
    return _default_normalizer
