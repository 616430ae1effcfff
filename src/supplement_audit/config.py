"""
Configuration models for the Supplement Audit Engine.
"""

from decimal import Decimal

from pydantic import BaseModel, Field

# Tolerance for part/labor/material sub-costs summing to a line total.
DEFAULT_BREAKDOWN_TOLERANCE = Decimal("0.01")


class VarianceThresholds(BaseModel):
    """
    Thresholds that grade reconciled lines and flag claim-level risk.

    A line is graded CRITICAL, HIGH or MEDIUM when either its absolute percent
    change or its absolute dollar change reaches that level, LOW otherwise.
    HIGH and CRITICAL lines count as significant.
    """

    significance_percent: float = Field(default=10.0, ge=0)
    significance_amount: Decimal = Field(default=Decimal("500"), ge=0)
    medium_percent: float = Field(default=5.0, ge=0)
    medium_amount: Decimal = Field(default=Decimal("100"), ge=0)
    critical_percent: float = Field(default=50.0, ge=0)
    critical_amount: Decimal = Field(default=Decimal("1000"), ge=0)

    # Claim-level risk indicators
    high_variance_percent: float = Field(default=25.0, ge=0)
    critical_variance_percent: float = Field(default=50.0, ge=0)
    scope_creep_items: int = Field(default=5, ge=0)
    high_scope_creep_items: int = Field(default=15, ge=0)


class PageGeometry(BaseModel):
    """Page size, margins and type metrics, in points."""

    width: float = Field(default=612.0, gt=0)  # US Letter
    height: float = Field(default=792.0, gt=0)
    margin_top: float = Field(default=54.0, ge=0)
    safe_margin: float = Field(default=54.0, ge=0, description="Reserved space at page bottom")
    margin_left: float = Field(default=40.0, ge=0)
    margin_right: float = Field(default=40.0, ge=0)
    line_height: float = Field(default=10.0, gt=0)
    cell_padding: float = Field(default=3.0, ge=0)
    font_name: str = "Helvetica"
    bold_font_name: str = "Helvetica-Bold"
    font_size: float = Field(default=8.0, gt=0)
    title_font_size: float = Field(default=12.0, gt=0)
    banner_font_size: float = Field(default=16.0, gt=0)
    section_gap: float = Field(default=12.0, ge=0)
    footer_offset: float = Field(default=24.0, ge=0)

    @property
    def printable_height(self) -> float:
        """Vertical space available for content on a single page."""
        return self.height - self.margin_top - self.safe_margin

    @property
    def content_width(self) -> float:
        """Horizontal space available between the side margins."""
        return self.width - self.margin_left - self.margin_right


class ReportOptions(BaseModel):
    """Presentation options for the rendered report."""

    brand_name: str = "Supplement Audit"
    report_title: str = "Supplement Audit Report"
    color_coding: bool = True
    include_warranty_table: bool = True
    include_cost_breakdown_table: bool = True
