"""
Tests for claim and invoice loading helpers.
"""

import json
from decimal import Decimal
from pathlib import Path

import pandas as pd
import pytest
from pydantic import ValidationError

from supplement_audit.core.loaders import invoice_from_dataframe, load_claim, load_invoice_csv
from supplement_audit.core.models import UNCATEGORIZED, category_key


class TestInvoiceFromDataFrame:
    """Tests for invoice_from_dataframe."""

    def test_display_column_names(self) -> None:
        df = pd.DataFrame(
            {
                "Category": ["LABOR", "PARTS"],
                "Description": ["Body Labor", "Quarter Panel"],
                "Qty": [2, 1],
                "Unit Price": [60.0, 450.0],
            }
        )
        invoice = invoice_from_dataframe(df, tax="12.50")

        assert [item.description for item in invoice.line_items] == ["Body Labor", "Quarter Panel"]
        assert invoice.line_items[0].total == Decimal("120")
        assert invoice.subtotal == Decimal("570")
        assert invoice.total == Decimal("582.50")

    def test_row_index_used_as_id(self) -> None:
        df = pd.DataFrame({"description": ["A", "B"], "quantity": [1, 1], "unit_price": [1, 2]})
        invoice = invoice_from_dataframe(df)
        assert [item.id for item in invoice.line_items] == ["0", "1"]

    def test_empty_cells_are_missing(self) -> None:
        """Test blank categories fall back to UNCATEGORIZED downstream."""
        df = pd.DataFrame(
            {
                "category": ["PARTS", None],
                "description": ["Clip", "Misc"],
                "quantity": [1, 1],
                "price": [5, 7],
                "total": [5, None],
            }
        )
        invoice = invoice_from_dataframe(df)
        misc = invoice.line_items[1]
        assert misc.category is None
        assert category_key(misc.category) is UNCATEGORIZED
        assert misc.total == Decimal("7")

    def test_numeric_text_columns(self) -> None:
        df = pd.DataFrame({"id": [101], "description": [42], "quantity": [1], "unit_price": [3]})
        item = invoice_from_dataframe(df).line_items[0]
        assert item.id == "101"
        assert item.description == "42"

    def test_breakdown_columns(self) -> None:
        df = pd.DataFrame(
            {
                "description": ["Body Labor"],
                "quantity": [1],
                "unit_price": [150],
                "Labor Hours": [1.5],
                "Labor Rate": [100],
            }
        )
        item = invoice_from_dataframe(df).line_items[0]
        assert item.labor_hours == 1.5
        assert item.labor_rate == Decimal("100")


class TestFileLoaders:
    """Tests for file-based loaders."""

    def test_load_invoice_csv(self, tmp_path: Path) -> None:
        path = tmp_path / "supplement.csv"
        path.write_text(
            "Category,Description,Qty,Unit Price\nPARTS,Quarter Panel,1,450\n", encoding="utf-8"
        )
        invoice = load_invoice_csv(path)
        assert invoice.file_name == "supplement.csv"
        assert invoice.total == Decimal("450")

    def test_load_claim(self, tmp_path: Path) -> None:
        path = tmp_path / "claim.json"
        path.write_text(
            json.dumps(
                {
                    "claimId": "CLM-7",
                    "originalInvoice": {"lineItems": [{"description": "A", "price": 1}]},
                    "supplementInvoice": {"lineItems": [{"description": "A", "price": 2}]},
                }
            ),
            encoding="utf-8",
        )
        claim = load_claim(path)
        assert claim.claim_id == "CLM-7"
        assert claim.supplement.line_items[0].unit_price == Decimal("2")

    def test_load_claim_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "claim.json"
        path.write_text(json.dumps({"claimId": "CLM-7"}), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_claim(path)
