"""
Core components for the Supplement Audit Engine.
"""

from .loaders import invoice_from_dataframe, load_claim, load_invoice_csv
from .marker_rules import MarkerHit, MarkerRegistry, MarkerRule
from .models import (
    UNCATEGORIZED,
    UNCATEGORIZED_LABEL,
    Added,
    AuditResult,
    AuditSummary,
    CategorySummary,
    ChangesByType,
    ChangeStatus,
    ChangeType,
    ChangeTypeDetail,
    CostBreakdown,
    Invoice,
    LineItem,
    Matched,
    MatchResult,
    ReconciledLine,
    Removed,
    RiskIndicator,
    RiskType,
    SignificanceLevel,
    SupplementClaim,
    Uncategorized,
    VarianceRecord,
    WarrantyFlag,
    WorkType,
    category_key,
    category_label,
)
from .normalizer import LineItemNormalizer, get_normalizer
from .reconciler import Reconciler
from .variance import VarianceCalculator, percent_change

__all__ = [
    # Models
    "UNCATEGORIZED",
    "UNCATEGORIZED_LABEL",
    "Added",
    "AuditResult",
    "AuditSummary",
    "CategorySummary",
    "ChangesByType",
    "ChangeStatus",
    "ChangeType",
    "ChangeTypeDetail",
    "CostBreakdown",
    "Invoice",
    "LineItem",
    "Matched",
    "MatchResult",
    "ReconciledLine",
    "Removed",
    "RiskIndicator",
    "RiskType",
    "SignificanceLevel",
    "SupplementClaim",
    "Uncategorized",
    "VarianceRecord",
    "WarrantyFlag",
    "WorkType",
    "category_key",
    "category_label",
    # Reconciliation
    "LineItemNormalizer",
    "Reconciler",
    "VarianceCalculator",
    "get_normalizer",
    "percent_change",
    # Marker Rules
    "MarkerHit",
    "MarkerRegistry",
    "MarkerRule",
    # Loaders
    "invoice_from_dataframe",
    "load_claim",
    "load_invoice_csv",
]
