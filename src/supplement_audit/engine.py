"""
Supplement Audit Engine - Main Orchestrator.
Coordinates reconciliation, variance, aggregation and classification modules
and renders their results.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from .config import DEFAULT_BREAKDOWN_TOLERANCE, PageGeometry, ReportOptions, VarianceThresholds
from .core.models import AuditResult, SupplementClaim
from .core.reconciler import Reconciler
from .core.variance import VarianceCalculator
from .modules.aggregation import CategoryAggregator
from .modules.cost_breakdown import CostBreakdownValidator
from .modules.warranty import WarrantyClassifier
from .reporting.composer import ReportComposer
from .reporting.layout import ReportDocument, ReportLayoutEngine
from .reporting.pdf import PdfRenderer
from .reporting.summary import AuditResultBuilder, ReportFormatter

logger = logging.getLogger(__name__)


class SupplementAuditEngine:
    """
    Main orchestrator for supplement audits.

    Reconciles an original estimate against its supplement, computes
    variances and category subtotals, flags warranty work, and lays the
    result out as a paginated report.
    """

    def __init__(
        self,
        thresholds: VarianceThresholds | None = None,
        breakdown_tolerance: Decimal = DEFAULT_BREAKDOWN_TOLERANCE,
        enable_warranty: bool = True,
        enable_cost_breakdown: bool = True,
        geometry: PageGeometry | None = None,
        options: ReportOptions | None = None,
    ) -> None:
        """
        Initialize the Supplement Audit Engine.

        Args:
            thresholds: Significance thresholds for line variances
            breakdown_tolerance: Allowed gap between sub-costs and a line total
            enable_warranty: Enable warranty work classification
            enable_cost_breakdown: Enable cost-breakdown validation
            geometry: Page size and type metrics for the report
            options: Report presentation options
        """
        self.thresholds = thresholds or VarianceThresholds()
        self.breakdown_tolerance = breakdown_tolerance
        self.enable_warranty = enable_warranty
        self.enable_cost_breakdown = enable_cost_breakdown
        self.geometry = geometry or PageGeometry()
        self.options = options or ReportOptions()

        # Initialize components lazily
        self._reconciler: Reconciler | None = None
        self._variance_calculator: VarianceCalculator | None = None
        self._aggregator: CategoryAggregator | None = None
        self._warranty_classifier: WarrantyClassifier | None = None
        self._breakdown_validator: CostBreakdownValidator | None = None

    @property
    def reconciler(self) -> Reconciler:
        """Get or create the reconciler."""
        if self._reconciler is None:
            self._reconciler = Reconciler()
        return self._reconciler

    @property
    def variance_calculator(self) -> VarianceCalculator:
        """Get or create the variance calculator."""
        if self._variance_calculator is None:
            self._variance_calculator = VarianceCalculator(self.thresholds)
        return self._variance_calculator

    @property
    def aggregator(self) -> CategoryAggregator:
        """Get or create the category aggregator."""
        if self._aggregator is None:
            self._aggregator = CategoryAggregator()
        return self._aggregator

    @property
    def warranty_classifier(self) -> WarrantyClassifier:
        """Get or create the warranty classifier."""
        if self._warranty_classifier is None:
            self._warranty_classifier = WarrantyClassifier()
        return self._warranty_classifier

    @property
    def breakdown_validator(self) -> CostBreakdownValidator:
        """Get or create the cost-breakdown validator."""
        if self._breakdown_validator is None:
            self._breakdown_validator = CostBreakdownValidator(self.breakdown_tolerance)
        return self._breakdown_validator

    def audit(self, claim: SupplementClaim | dict[str, Any]) -> AuditResult:
        """
        Audit a supplement against its original estimate.

        Args:
            claim: The claim to audit (SupplementClaim or dict)

        Returns:
            Complete audit result
        """
        if isinstance(claim, dict):
            claim = SupplementClaim.model_validate(claim)

        builder = AuditResultBuilder(claim, self.thresholds)

        # Phase 1: Reconciliation and variance
        matches = self.reconciler.reconcile(claim.original, claim.supplement)
        lines = self.variance_calculator.calculate_all(matches)
        builder.add_matches(matches).add_lines(lines).add_module("Reconciliation")

        # Phase 2: Category aggregation
        builder.set_categories(self.aggregator.aggregate(lines)).add_module("Category Summary")

        # Phase 3: Warranty classification
        if self.enable_warranty:
            flags = self.warranty_classifier.classify_all(claim.supplement.line_items)
            builder.add_warranty_flags(flags).add_module("Warranty Classification")

        # Phase 4: Cost-breakdown validation
        if self.enable_cost_breakdown:
            breakdowns = self.breakdown_validator.validate(claim.original, claim.supplement)
            builder.add_cost_breakdowns(breakdowns).add_module("Cost Breakdown Validation")

        result = builder.build()
        logger.info(
            "Audited claim %s: %d new, %d changed, %d removed, net %s",
            result.claim_id,
            result.summary.new_items,
            result.summary.changed_items,
            result.summary.removed_items,
            result.summary.net_change,
        )
        return result

    def audit_with_formatter(self, claim: SupplementClaim | dict[str, Any]) -> ReportFormatter:
        """
        Perform audit and return a formatter for output.

        Args:
            claim: The claim to audit

        Returns:
            ReportFormatter for flexible output formatting
        """
        return ReportFormatter(self.audit(claim))

    def build_report(self, result: AuditResult) -> ReportDocument:
        """
        Lay out an audit result as a paginated document.

        Raises:
            LayoutOverflowError: A row cannot fit on a page with the
                configured geometry
        """
        composer = ReportComposer(self.options)
        layout_engine = ReportLayoutEngine(self.geometry, self.options)
        return layout_engine.layout(composer.compose(result), banner=composer.banner(result))

    def render_pdf(self, result: AuditResult, path: str | Path | None = None) -> bytes:
        """Lay out and render an audit result as PDF bytes, optionally writing to path."""
        document = self.build_report(result)
        renderer = PdfRenderer(title=self.options.report_title, author=self.options.brand_name)
        return renderer.render(document, path)

    def export_csv(self, result: AuditResult, path: str | Path | None = None) -> str:
        """Export one row per line item with its status."""
        return ReportFormatter(result).to_csv(path)

    def get_enabled_modules(self) -> list[str]:
        """Get list of enabled modules."""
        modules = ["Reconciliation", "Category Summary"]
        if self.enable_warranty:
            modules.append("Warranty Classification")
        if self.enable_cost_breakdown:
            modules.append("Cost Breakdown Validation")
        return modules

    def configure(
        self,
        thresholds: VarianceThresholds | None = None,
        significance_percent: float | None = None,
        significance_amount: Decimal | None = None,
        breakdown_tolerance: Decimal | None = None,
        enable_warranty: bool | None = None,
        enable_cost_breakdown: bool | None = None,
        geometry: PageGeometry | None = None,
        options: ReportOptions | None = None,
    ) -> "SupplementAuditEngine":
        """
        Configure the engine settings.

        Args:
            thresholds: Replace all variance and risk thresholds
            significance_percent: Percent change that marks a line significant
            significance_amount: Dollar change that marks a line significant
            breakdown_tolerance: Allowed gap between sub-costs and a line total
            enable_warranty: Enable/disable warranty classification
            enable_cost_breakdown: Enable/disable cost-breakdown validation
            geometry: Replace the page geometry
            options: Replace the report options

        Returns:
            Self for method chaining
        """
        if thresholds is not None:
            self.thresholds = thresholds
            self._variance_calculator = None
        if significance_percent is not None or significance_amount is not None:
            self.thresholds = self.thresholds.model_copy(
                update={
                    k: v
                    for k, v in (
                        ("significance_percent", significance_percent),
                        ("significance_amount", significance_amount),
                    )
                    if v is not None
                }
            )
            self._variance_calculator = None
        if breakdown_tolerance is not None:
            self.breakdown_tolerance = breakdown_tolerance
            self._breakdown_validator = None
        if enable_warranty is not None:
            self.enable_warranty = enable_warranty
        if enable_cost_breakdown is not None:
            self.enable_cost_breakdown = enable_cost_breakdown
        if geometry is not None:
            self.geometry = geometry
        if options is not None:
            self.options = options
        return self


# Convenience function for quick audits
def audit_supplement(claim: SupplementClaim | dict[str, Any]) -> AuditResult:
    """
    Convenience function for quick supplement audits.

    Args:
        claim: The claim to audit

    Returns:
        Complete audit result
    """
    engine = SupplementAuditEngine()
    return engine.audit(claim)
