"""
Audit modules for the Supplement Audit Engine.
"""

from .aggregation import CategoryAggregator
from .cost_breakdown import CostBreakdownValidator
from .risk import ChangeTypeAnalyzer, RiskAssessor
from .warranty import WarrantyClassifier

__all__ = [
    "CategoryAggregator",
    "ChangeTypeAnalyzer",
    "CostBreakdownValidator",
    "RiskAssessor",
    "WarrantyClassifier",
]
