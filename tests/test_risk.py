"""
Tests for the change-type breakdown and risk indicators.
"""

import logging
from decimal import Decimal

import pytest

from supplement_audit.config import VarianceThresholds
from supplement_audit.core.models import (
    ChangesByType,
    ChangeTypeDetail,
    Invoice,
    LineItem,
    ReconciledLine,
    RiskType,
    SignificanceLevel,
)
from supplement_audit.core.reconciler import Reconciler
from supplement_audit.core.variance import VarianceCalculator
from supplement_audit.modules.risk import ChangeTypeAnalyzer, RiskAssessor


def make_item(description: str, unit_price: str, item_id: str = "") -> LineItem:
    return LineItem(
        id=item_id,
        description=description,
        category="PARTS",
        quantity=1,
        unit_price=Decimal(unit_price),
    )


def reconcile(original: list[LineItem], supplement: list[LineItem]) -> list[ReconciledLine]:
    matches = Reconciler().reconcile(
        Invoice(line_items=original), Invoice(line_items=supplement)
    )
    return VarianceCalculator().calculate_all(matches)


@pytest.fixture
def analyzer() -> ChangeTypeAnalyzer:
    return ChangeTypeAnalyzer()


@pytest.fixture
def assessor() -> RiskAssessor:
    return RiskAssessor()


class TestChangeTypeAnalyzer:
    """Tests for ChangeTypeAnalyzer."""

    def test_breakdown(self, analyzer: ChangeTypeAnalyzer) -> None:
        """Test every line lands in exactly one change type."""
        lines = reconcile(
            [
                make_item("Body Labor", "100"),
                make_item("Paint", "200"),
                make_item("Clip", "12"),
                make_item("Trim", "40"),
            ],
            [
                make_item("Body Labor", "150"),
                make_item("Paint", "180"),
                make_item("Trim", "40"),
                make_item("New Panel", "300", item_id="s9"),
            ],
        )
        changes = analyzer.analyze(lines)

        assert changes.increases.count == 1
        assert changes.increases.total_amount == Decimal("50")
        assert changes.decreases.total_amount == Decimal("20")
        assert changes.additions.item_ids == ["s9"]
        assert changes.removals.item_ids == ["Clip"]
        assert changes.removals.total_amount == Decimal("12")
        assert changes.unchanged.count == 1
        assert changes.unchanged.percentage_of_total == 0.0
        assert changes.additions.percentage_of_total == pytest.approx(300 / 382 * 100)

        shares = sum(
            getattr(changes, name).percentage_of_total
            for name in ("increases", "decreases", "additions", "removals", "unchanged")
        )
        assert shares == pytest.approx(100.0)

    def test_average_rounded_to_cents(self, analyzer: ChangeTypeAnalyzer) -> None:
        lines = reconcile(
            [make_item("A", "10"), make_item("B", "10"), make_item("C", "5")], []
        )
        removals = analyzer.analyze(lines).removals
        assert removals.count == 3
        assert removals.total_amount == Decimal("25")
        assert removals.average_amount == Decimal("8.33")

    def test_no_lines(self, analyzer: ChangeTypeAnalyzer) -> None:
        changes = analyzer.analyze([])
        assert changes.additions == ChangeTypeDetail()
        assert changes.increases.average_amount == Decimal("0")


class TestRiskAssessor:
    """Tests for RiskAssessor."""

    @pytest.mark.parametrize(
        ("percentage", "expected"),
        [
            (None, None),
            (25.0, None),
            (-10.0, None),
            (25.1, SignificanceLevel.HIGH),
            (50.0, SignificanceLevel.HIGH),
            (-60.0, SignificanceLevel.CRITICAL),
        ],
    )
    def test_high_variance(
        self,
        assessor: RiskAssessor,
        percentage: float | None,
        expected: SignificanceLevel | None,
    ) -> None:
        """Test over 25% is high and over 50% is critical."""
        indicator = assessor.high_variance(percentage)
        if expected is None:
            assert indicator is None
        else:
            assert indicator is not None
            assert indicator.type is RiskType.HIGH_VARIANCE
            assert indicator.severity is expected

    @pytest.mark.parametrize(
        ("count", "expected"),
        [
            (5, None),
            (6, SignificanceLevel.MEDIUM),
            (15, SignificanceLevel.MEDIUM),
            (16, SignificanceLevel.HIGH),
        ],
    )
    def test_scope_creep(
        self, assessor: RiskAssessor, count: int, expected: SignificanceLevel | None
    ) -> None:
        additions = ChangeTypeDetail(count=count, item_ids=[f"s{i}" for i in range(count)])
        indicator = assessor.scope_creep(additions)
        if expected is None:
            assert indicator is None
        else:
            assert indicator is not None
            assert indicator.severity is expected
            assert indicator.affected_items == additions.item_ids
            assert indicator.description.startswith(f"{count} new items")

    def test_custom_thresholds(self) -> None:
        assessor = RiskAssessor(VarianceThresholds(high_variance_percent=5, scope_creep_items=1))
        assert assessor.high_variance(6.0) is not None
        assert assessor.scope_creep(ChangeTypeDetail(count=2)) is not None

    def test_assess(self, assessor: RiskAssessor, caplog: pytest.LogCaptureFixture) -> None:
        changes = ChangesByType(additions=ChangeTypeDetail(count=7))
        with caplog.at_level(logging.INFO, logger="supplement_audit.modules.risk"):
            indicators = assessor.assess(80.0, changes)

        assert [i.type for i in indicators] == [RiskType.HIGH_VARIANCE, RiskType.SCOPE_CREEP]
        assert "high_variance" in caplog.text

    def test_assess_quiet_claim(self, assessor: RiskAssessor) -> None:
        assert assessor.assess(3.0, ChangesByType()) == []
