"""
Warranty work classification for supplement line items.
Flags repair and replacement work that needs warranty tracking.
"""

from ..core.marker_rules import MarkerRegistry, MarkerRule
from ..core.models import LineItem, WarrantyFlag, WorkType, category_key


class WarrantyClassifier:
    """
    Classifies supplement lines as REPAIR, REPLACEMENT or SERVICE.

    Independent of reconciliation. The operation code is checked before the
    description; replacement markers outrank repair markers.
    """

    REPLACEMENT_MARKERS: list[str] = [
        r"\brepl(?:ace(?:d|ment)?)?\b",
        r"\br\s*&\s*r\b",
        r"\bo/h\b",
        r"\boverhaul(?:ed)?\b",
        r"\bnew\s+part\b",
    ]

    REPAIR_MARKERS: list[str] = [
        r"\brpr\b",
        r"\brepair(?:ed|s)?\b",
        r"\bpdr\b",
        r"\bstraighten\b",
        r"\bweld(?:ed|ing)?\b",
    ]

    def __init__(self, registry: MarkerRegistry | None = None) -> None:
        self.registry = registry or MarkerRegistry()
        self._register_rules()

    def _register_rules(self) -> None:
        """Register the default warranty markers."""
        self.registry.add_rule(
            MarkerRule(
                rule_id="WAR-001",
                work_type=WorkType.REPLACEMENT,
                patterns=list(self.REPLACEMENT_MARKERS),
                priority=20,
                description="Part replacement operations",
            )
        )
        self.registry.add_rule(
            MarkerRule(
                rule_id="WAR-002",
                work_type=WorkType.REPAIR,
                patterns=list(self.REPAIR_MARKERS),
                priority=10,
                description="Repair of the existing part",
            )
        )

    def add_marker(self, work_type: WorkType, pattern: str, priority: int = 5) -> None:
        """Register an additional marker pattern for a work type."""
        rule_id = f"WAR-X{len(self.registry.list_rules()) + 1:03d}"
        self.registry.add_rule(
            MarkerRule(
                rule_id=rule_id,
                work_type=work_type,
                patterns=[pattern],
                priority=priority,
                description="Custom marker",
            )
        )

    def classify(self, item: LineItem) -> WarrantyFlag:
        """Classify a single supplement line."""
        hit = self.registry.match(item.operation) or self.registry.match(item.description)
        work_type = hit.work_type if hit else WorkType.SERVICE
        return WarrantyFlag(
            item_id=item.id,
            description=item.description,
            category=category_key(item.category),
            work_type=work_type,
            flagged=work_type is not WorkType.SERVICE,
            marker=hit.marker if hit else None,
            total=item.total,
        )

    def classify_all(self, items: list[LineItem]) -> list[WarrantyFlag]:
        return [self.classify(item) for item in items]
