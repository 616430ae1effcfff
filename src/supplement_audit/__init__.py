"""
Supplement Audit Engine.

Reconciles auto-repair insurance supplements against their original
estimates, computes cost variances, and renders paginated audit reports.
"""

from .config import PageGeometry, ReportOptions, VarianceThresholds
from .core.loaders import invoice_from_dataframe, load_claim
from .core.models import (
    UNCATEGORIZED,
    Added,
    AuditResult,
    CategorySummary,
    ChangeStatus,
    Invoice,
    LineItem,
    Matched,
    Removed,
    RiskIndicator,
    SignificanceLevel,
    SupplementClaim,
    WorkType,
)
from .engine import SupplementAuditEngine, audit_supplement
from .exceptions import LayoutOverflowError, SupplementAuditError
from .reporting.layout import ReportDocument, ReportLayoutEngine, Section
from .reporting.summary import AuditResultBuilder, ReportFormatter

__version__ = "0.1.0"

__all__ = [
    # Main Engine
    "SupplementAuditEngine",
    "audit_supplement",
    # Models
    "UNCATEGORIZED",
    "Added",
    "AuditResult",
    "CategorySummary",
    "ChangeStatus",
    "Invoice",
    "LineItem",
    "Matched",
    "Removed",
    "RiskIndicator",
    "SignificanceLevel",
    "SupplementClaim",
    "WorkType",
    # Config
    "PageGeometry",
    "ReportOptions",
    "VarianceThresholds",
    # Errors
    "LayoutOverflowError",
    "SupplementAuditError",
    # Reporting
    "AuditResultBuilder",
    "ReportDocument",
    "ReportFormatter",
    "ReportLayoutEngine",
    "Section",
    # Loaders
    "invoice_from_dataframe",
    "load_claim",
]
