"""
Loading helpers for claim and invoice data.
Accepts JSON claim files and tabular (CSV / DataFrame) line items.
"""

import json
from pathlib import Path
from typing import Any

import pandas as pd

from .models import Invoice, SupplementClaim

# Accepted column names per LineItem field, in lookup order.
COLUMN_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "ID", "Id", "line", "Line"),
    "category": ("category", "Category", "CATEGORY"),
    "description": ("description", "Description", "DESCRIPTION"),
    "quantity": ("quantity", "Quantity", "Qty", "qty"),
    "unit_price": ("unit_price", "Unit Price", "unitPrice", "price", "Price"),
    "total": ("total", "Total"),
    "operation": ("operation", "Operation", "Op"),
    "part_cost": ("part_cost", "Part Cost", "partCost"),
    "labor_cost": ("labor_cost", "Labor Cost", "laborCost"),
    "material_cost": ("material_cost", "Material Cost", "materialCost"),
    "labor_hours": ("labor_hours", "Labor Hours", "laborHours"),
    "labor_rate": ("labor_rate", "Labor Rate", "laborRate"),
}

MONEY_FIELDS = {"unit_price", "total", "part_cost", "labor_cost", "material_cost", "labor_rate"}
TEXT_FIELDS = {"id", "category", "description", "operation"}


def _row_value(row: pd.Series, names: tuple[str, ...]) -> Any:
    for name in names:
        if name in row and pd.notna(row[name]):
            return row[name]
    return None


def invoice_from_dataframe(
    df: pd.DataFrame,
    tax: float | str | None = None,
    file_name: str | None = None,
) -> Invoice:
    """
    Convert a DataFrame of line items into an Invoice.

    Column names are matched loosely (``unit_price``, ``Unit Price``,
    ``unitPrice``...). Empty cells are treated as missing values.

    Args:
        df: One row per line item
        tax: Optional invoice tax amount
        file_name: Optional source file name

    Returns:
        Invoice with subtotal and total computed from the rows
    """
    line_items = []
    for index, row in df.iterrows():
        item: dict[str, Any] = {}
        for field_name, names in COLUMN_ALIASES.items():
            value = _row_value(row, names)
            if value is None:
                continue
            if hasattr(value, "item"):
                value = value.item()
            if field_name in MONEY_FIELDS or field_name in TEXT_FIELDS:
                value = str(value)
            item[field_name] = value
        item.setdefault("id", str(index))
        line_items.append(item)

    data: dict[str, Any] = {"line_items": line_items, "file_name": file_name}
    if tax is not None:
        data["tax"] = str(tax)
    return Invoice.model_validate(data)


def load_invoice_csv(path: str | Path, tax: float | str | None = None) -> Invoice:
    """Load an invoice from a CSV file of line items."""
    path = Path(path)
    return invoice_from_dataframe(pd.read_csv(path), tax=tax, file_name=path.name)


def load_claim(path: str | Path) -> SupplementClaim:
    """
    Load a supplement claim from a JSON file.

    Raises:
        pydantic.ValidationError: The file does not describe a claim
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return SupplementClaim.model_validate(data)
