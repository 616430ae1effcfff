"""
Reporting modules for the Supplement Audit Engine.
"""

from .composer import ReportComposer
from .layout import (
    BlockKind,
    DrawnBlock,
    LayoutCursor,
    LayoutState,
    Page,
    ReportDocument,
    ReportLayoutEngine,
    Section,
)
from .pdf import PdfRenderer
from .summary import AuditResultBuilder, ReportFormatter
from .table import ColumnSpec, RowTone, TableRenderer, TableRow

__all__ = [
    "AuditResultBuilder",
    "BlockKind",
    "ColumnSpec",
    "DrawnBlock",
    "LayoutCursor",
    "LayoutState",
    "Page",
    "PdfRenderer",
    "ReportComposer",
    "ReportDocument",
    "ReportFormatter",
    "ReportLayoutEngine",
    "RowTone",
    "Section",
    "TableRenderer",
    "TableRow",
]
