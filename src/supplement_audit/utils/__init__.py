"""
Utility modules for the Supplement Audit Engine.
"""

from .formatting import (
    format_currency,
    format_percentage,
    format_quantity,
    format_signed_currency,
)

__all__ = [
    "format_currency",
    "format_percentage",
    "format_quantity",
    "format_signed_currency",
]
