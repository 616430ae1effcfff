"""
Tests for warranty work classification and the marker registry.
"""

from decimal import Decimal

import pytest

from supplement_audit.core.marker_rules import MarkerRegistry, MarkerRule
from supplement_audit.core.models import UNCATEGORIZED, LineItem, WorkType
from supplement_audit.modules.warranty import WarrantyClassifier


def supplement_line(description: str, operation: str | None = None) -> LineItem:
    return LineItem(
        id="s1",
        description=description,
        category="PARTS",
        quantity=1,
        unit_price=Decimal("250"),
        operation=operation,
    )


@pytest.fixture
def classifier() -> WarrantyClassifier:
    return WarrantyClassifier()


class TestWarrantyClassifier:
    """Tests for WarrantyClassifier."""

    def test_replacement_flagged(self, classifier: WarrantyClassifier) -> None:
        """Test a 'Repl' line is flagged as replacement work."""
        flag = classifier.classify(supplement_line("Repl Rear Bumper Cover"))
        assert flag.flagged
        assert flag.work_type == WorkType.REPLACEMENT
        assert flag.marker == "Repl"
        assert flag.total == Decimal("250")

    def test_service_not_flagged(self, classifier: WarrantyClassifier) -> None:
        """Test a diagnostic line is not flagged."""
        flag = classifier.classify(supplement_line("Diagnostic Scan"))
        assert not flag.flagged
        assert flag.work_type == WorkType.SERVICE
        assert flag.marker is None

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Replace LT Headlamp", WorkType.REPLACEMENT),
            ("R&R Front Door Shell", WorkType.REPLACEMENT),
            ("R & R Grille", WorkType.REPLACEMENT),
            ("Overhaul Front Bumper", WorkType.REPLACEMENT),
            ("O/H Rear Bumper", WorkType.REPLACEMENT),
            ("New part - Mirror Glass", WorkType.REPLACEMENT),
            ("Rpr LT Fender", WorkType.REPAIR),
            ("Repair Quarter Panel Dent", WorkType.REPAIR),
            ("PDR Roof", WorkType.REPAIR),
            ("Straighten Core Support", WorkType.REPAIR),
            ("Weld Rail Section", WorkType.REPAIR),
            ("Blend Adjacent Panel", WorkType.SERVICE),
            ("Hazardous Waste Disposal", WorkType.SERVICE),
            ("Replenish Coolant", WorkType.SERVICE),
        ],
    )
    def test_markers(
        self, classifier: WarrantyClassifier, description: str, expected: WorkType
    ) -> None:
        assert classifier.classify(supplement_line(description)).work_type == expected

    def test_replacement_outranks_repair(self, classifier: WarrantyClassifier) -> None:
        flag = classifier.classify(supplement_line("Repair or replace door handle"))
        assert flag.work_type == WorkType.REPLACEMENT

    def test_operation_checked_first(self, classifier: WarrantyClassifier) -> None:
        """Test the operation code wins over description markers."""
        flag = classifier.classify(supplement_line("Repair bracket", operation="R&R"))
        assert flag.work_type == WorkType.REPLACEMENT
        assert flag.marker == "R&R"

    def test_operation_without_marker_falls_back(self, classifier: WarrantyClassifier) -> None:
        flag = classifier.classify(supplement_line("Rpr LT Fender", operation="Refinish"))
        assert flag.work_type == WorkType.REPAIR

    def test_missing_category(self, classifier: WarrantyClassifier) -> None:
        item = LineItem(description="Repl Mirror", quantity=1, unit_price=Decimal("80"))
        assert classifier.classify(item).category is UNCATEGORIZED

    def test_custom_marker(self, classifier: WarrantyClassifier) -> None:
        """Test callers can register extra markers."""
        assert not classifier.classify(supplement_line("Swap mirror assembly")).flagged
        classifier.add_marker(WorkType.REPLACEMENT, r"\bswap\b")
        flag = classifier.classify(supplement_line("Swap mirror assembly"))
        assert flag.work_type == WorkType.REPLACEMENT

    def test_classify_all(self, classifier: WarrantyClassifier) -> None:
        flags = classifier.classify_all(
            [supplement_line("Repl Rear Bumper Cover"), supplement_line("Diagnostic Scan")]
        )
        assert [flag.flagged for flag in flags] == [True, False]


class TestMarkerRegistry:
    """Tests for MarkerRegistry."""

    @pytest.fixture
    def registry(self) -> MarkerRegistry:
        registry = MarkerRegistry()
        registry.add_rule(
            MarkerRule(rule_id="R1", work_type=WorkType.REPAIR, patterns=[r"\bfix\b"], priority=1)
        )
        registry.add_rule(
            MarkerRule(
                rule_id="R2", work_type=WorkType.REPLACEMENT, patterns=[r"\bnew\b"], priority=5
            )
        )
        return registry

    def test_priority_order(self, registry: MarkerRegistry) -> None:
        assert [rule.rule_id for rule in registry.active_rules()] == ["R2", "R1"]
        hit = registry.match("fix with new bolt")
        assert hit is not None
        assert hit.rule_id == "R2"

    def test_case_insensitive(self, registry: MarkerRegistry) -> None:
        hit = registry.match("FIX hinge")
        assert hit is not None
        assert hit.marker == "FIX"

    def test_disable_and_enable(self, registry: MarkerRegistry) -> None:
        assert registry.disable_rule("R2")
        hit = registry.match("fix with new bolt")
        assert hit is not None and hit.rule_id == "R1"
        assert registry.enable_rule("R2")
        assert registry.match("new bolt") is not None

    def test_remove_rule(self, registry: MarkerRegistry) -> None:
        assert registry.remove_rule("R1")
        assert not registry.remove_rule("R1")
        assert registry.get_rule("R1") is None
        assert registry.match("fix hinge") is None

    def test_empty_text(self, registry: MarkerRegistry) -> None:
        assert registry.match(None) is None
        assert registry.match("") is None

    def test_list_rules(self, registry: MarkerRegistry) -> None:
        rules = registry.list_rules()
        assert {rule["rule_id"] for rule in rules} == {"R1", "R2"}
        assert rules[0]["work_type"] == "REPAIR"
