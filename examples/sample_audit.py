#!/usr/bin/env python3
"""
Sample Audit Script.
Demonstrates usage of the Supplement Audit Engine.
"""

import logging
from decimal import Decimal

from supplement_audit import (
    Invoice,
    LayoutOverflowError,
    LineItem,
    SupplementAuditEngine,
    SupplementClaim,
)


def create_sample_claim() -> SupplementClaim:
    """Create a sample estimate and supplement for demonstration."""
    return SupplementClaim(
        claim_id="CLM-2024-AUTO-017",
        original=Invoice(
            file_name="estimate.pdf",
            line_items=[
                LineItem(
                    id="1",
                    category="LABOR",
                    description="Body Labor",
                    quantity=3.5,
                    unit_price=Decimal("62.00"),
                ),
                LineItem(
                    id="2",
                    category="LABOR",
                    description="Paint Labor",
                    quantity=2.0,
                    unit_price=Decimal("62.00"),
                ),
                LineItem(
                    id="3",
                    category="PARTS",
                    description="Front Bumper Cover",
                    quantity=1,
                    unit_price=Decimal("412.50"),
                    operation="Repl",
                ),
                LineItem(
                    id="4",
                    category="PARTS",
                    description="Trim Clip",
                    quantity=6,
                    unit_price=Decimal("2.10"),
                ),
                LineItem(
                    id="5",
                    category="PAINT",
                    description="Paint Supplies",
                    quantity=1,
                    unit_price=Decimal("148.00"),
                ),
            ],
            tax=Decimal("42.18"),
        ),
        supplement=Invoice(
            file_name="supplement-1.pdf",
            line_items=[
                LineItem(
                    id="1",
                    category="LABOR",
                    description="Body Labor",
                    quantity=5.0,  # Hidden damage found at teardown
                    unit_price=Decimal("62.00"),
                ),
                LineItem(
                    id="2",
                    category="LABOR",
                    description="Paint Labor",
                    quantity=2.0,
                    unit_price=Decimal("62.00"),
                ),
                LineItem(
                    id="3",
                    category="PARTS",
                    description="Front Bumper Cover",
                    quantity=1,
                    unit_price=Decimal("468.90"),  # OEM price update
                    operation="Repl",
                    part_cost=Decimal("412.50"),
                    labor_cost=Decimal("40.00"),  # Does not add up to the total
                ),
                LineItem(
                    id="6",
                    category="PARTS",
                    description="Rear Bumper Reinforcement",
                    quantity=1,
                    unit_price=Decimal("286.00"),
                    operation="R&R",
                ),
                LineItem(
                    id="7",
                    category="FRAME",
                    description="Rpr Rear Body Panel",
                    quantity=1,
                    unit_price=Decimal("310.00"),
                    labor_hours=5.0,
                    labor_rate=Decimal("62.00"),
                ),
                LineItem(
                    id="8",
                    category=None,  # No category from extraction
                    description="Diagnostic Scan",
                    quantity=1,
                    unit_price=Decimal("95.00"),
                ),
                LineItem(
                    id="5",
                    category="PAINT",
                    description="Paint Supplies",
                    quantity=1,
                    unit_price=Decimal("186.00"),
                ),
            ],
            tax=Decimal("71.84"),
        ),
    )


def main() -> None:
    """Run sample audit demonstration."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("SUPPLEMENT AUDIT ENGINE - SAMPLE AUDIT")
    print("=" * 70)
    print()

    claim = create_sample_claim()
    print(f"Auditing Claim: {claim.claim_id}")
    print(f"Original Total: ${claim.original.total:,.2f}")
    print(f"Supplement Total: ${claim.supplement.total:,.2f}")
    print()

    engine = SupplementAuditEngine()
    print(f"Enabled Modules: {', '.join(engine.get_enabled_modules())}")
    print()

    print("Running audit...")
    formatter = engine.audit_with_formatter(claim)

    print()
    formatter.print_full()

    print()
    print("-" * 70)
    print("CSV Export:")
    print("-" * 70)
    print(formatter.to_csv())

    try:
        content = engine.render_pdf(formatter.result, "supplement_audit.pdf")
    except LayoutOverflowError as e:
        print(f"Report generation failed: {e}")
    else:
        print(f"Wrote supplement_audit.pdf ({len(content):,} bytes)")


if __name__ == "__main__":
    main()
