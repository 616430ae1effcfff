"""
Core data models for the Supplement Audit Engine.
Uses Pydantic for validation and serialization.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class Uncategorized(Enum):
    """Sentinel category for line items that carry no category metadata."""

    UNCATEGORIZED = "UNCATEGORIZED"

    def __str__(self) -> str:
        return self.value


UNCATEGORIZED = Uncategorized.UNCATEGORIZED

# Mixed case, so it can never equal an upper-cased real category
UNCATEGORIZED_LABEL = "(Uncategorized)"

CategoryKey = str | Uncategorized


def category_key(category: str | None) -> CategoryKey:
    """Grouping key for a raw category: trimmed and upper-cased, or the sentinel."""
    if category is None:
        return UNCATEGORIZED
    key = " ".join(str(category).split()).upper()
    return key if key else UNCATEGORIZED


def category_label(category: CategoryKey) -> str:
    """Display label for a category key."""
    if isinstance(category, Uncategorized):
        return UNCATEGORIZED_LABEL
    return category


class ChangeStatus(str, Enum):
    """Reconciliation status of a line item."""

    NEW = "NEW"
    CHANGED = "CHANGED"
    REMOVED = "REMOVED"
    SAME = "SAME"


class ChangeType(str, Enum):
    """Which fields moved on a changed, matched line."""

    PRICE = "PRICE"
    QUANTITY = "QUANTITY"
    PRICE_AND_QUANTITY = "PRICE+QTY"
    OTHER = "OTHER"


class SignificanceLevel(str, Enum):
    """Graded size of a change, also used as risk severity."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskType(str, Enum):
    """Claim-level risk indicators."""

    HIGH_VARIANCE = "high_variance"
    SCOPE_CREEP = "scope_creep"


class WorkType(str, Enum):
    """Kind of work a supplement line represents."""

    REPAIR = "REPAIR"
    REPLACEMENT = "REPLACEMENT"
    SERVICE = "SERVICE"


class LineItem(BaseModel):
    """Individual line item from an estimate or supplement invoice."""

    id: str = ""
    category: str | None = None
    description: str = ""
    quantity: float = 0.0
    unit_price: Decimal = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("unit_price", "unitPrice", "price"),
    )
    total: Decimal | None = None
    operation: str | None = None

    # Optional cost breakdown stated by the shop
    part_cost: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("part_cost", "partCost")
    )
    labor_cost: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("labor_cost", "laborCost")
    )
    material_cost: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("material_cost", "materialCost")
    )
    labor_hours: float | None = Field(
        default=None, validation_alias=AliasChoices("labor_hours", "laborHours")
    )
    labor_rate: Decimal | None = Field(
        default=None, validation_alias=AliasChoices("labor_rate", "laborRate")
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def model_post_init(self, __context: Any) -> None:
        """Calculate total if not provided."""
        if self.total is None:
            self.total = Decimal(str(self.quantity)) * self.unit_price


class Invoice(BaseModel):
    """An ordered collection of line items with its stated totals."""

    file_name: str | None = Field(
        default=None, validation_alias=AliasChoices("file_name", "fileName")
    )
    line_items: list[LineItem] = Field(
        default_factory=list,
        validation_alias=AliasChoices("line_items", "lineItems"),
    )
    subtotal: Decimal | None = None
    tax: Decimal = Decimal("0")
    total: Decimal | None = None

    def model_post_init(self, __context: Any) -> None:
        """Calculate subtotal and total if not provided."""
        if self.subtotal is None:
            self.subtotal = sum(
                (item.total for item in self.line_items if item.total is not None),
                Decimal("0"),
            )
        if self.total is None:
            self.total = self.subtotal + self.tax


class SupplementClaim(BaseModel):
    """An original estimate and its supplement, as handed over for auditing."""

    claim_id: str = Field(validation_alias=AliasChoices("claim_id", "claimId", "id"))
    original: Invoice = Field(
        validation_alias=AliasChoices("original", "original_invoice", "originalInvoice")
    )
    supplement: Invoice = Field(
        validation_alias=AliasChoices(
            "supplement", "supplement_invoice", "supplementInvoice"
        )
    )
    metadata: dict[str, Any] = Field(default_factory=dict)


# =============================================================================
# Reconciliation results
# =============================================================================
class Matched(BaseModel):
    """An original line and the supplement line it reconciles with."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["matched"] = "matched"
    original: LineItem
    supplement: LineItem

    @property
    def item(self) -> LineItem:
        return self.supplement

    @property
    def change_type(self) -> ChangeType | None:
        """Which fields differ between the two lines, None when identical."""
        price_moved = self.original.unit_price != self.supplement.unit_price
        qty_moved = self.original.quantity != self.supplement.quantity
        if price_moved and qty_moved:
            return ChangeType.PRICE_AND_QUANTITY
        if price_moved:
            return ChangeType.PRICE
        if qty_moved:
            return ChangeType.QUANTITY
        if self.original.total != self.supplement.total:
            return ChangeType.OTHER
        return None

    @property
    def status(self) -> ChangeStatus:
        return ChangeStatus.SAME if self.change_type is None else ChangeStatus.CHANGED


class Added(BaseModel):
    """A supplement line with no original counterpart."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["added"] = "added"
    supplement: LineItem

    @property
    def item(self) -> LineItem:
        return self.supplement

    @property
    def status(self) -> ChangeStatus:
        return ChangeStatus.NEW


class Removed(BaseModel):
    """An original line that is absent from the supplement."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["removed"] = "removed"
    original: LineItem

    @property
    def item(self) -> LineItem:
        return self.original

    @property
    def status(self) -> ChangeStatus:
        return ChangeStatus.REMOVED


MatchResult = Annotated[Union[Matched, Added, Removed], Field(discriminator="kind")]


class VarianceRecord(BaseModel):
    """Absolute and percentage deltas for one reconciled line."""

    model_config = ConfigDict(frozen=True)

    original_amount: Decimal | None = None
    supplement_amount: Decimal | None = None
    quantity_delta: float = 0.0
    unit_price_delta: Decimal = Decimal("0")
    total_delta: Decimal = Decimal("0")
    quantity_pct: float | None = None
    unit_price_pct: float | None = None
    total_pct: float | None = None


class ReconciledLine(BaseModel):
    """A match result together with its variance."""

    model_config = ConfigDict(frozen=True)

    match: MatchResult
    variance: VarianceRecord
    significance: SignificanceLevel = SignificanceLevel.LOW
    is_significant: bool = False

    @property
    def item(self) -> LineItem:
        return self.match.item

    @property
    def status(self) -> ChangeStatus:
        return self.match.status

    @property
    def category(self) -> CategoryKey:
        return category_key(self.match.item.category)

    @property
    def description(self) -> str:
        return self.match.item.description


class CategorySummary(BaseModel):
    """Per-category subtotals derived from reconciled lines."""

    model_config = ConfigDict(frozen=True)

    category: CategoryKey
    items: list[ReconciledLine] = Field(default_factory=list)
    original_subtotal: Decimal = Decimal("0")
    supplement_subtotal: Decimal = Decimal("0")
    increase_sum: Decimal = Decimal("0")
    decrease_sum: Decimal = Decimal("0")
    net_change: Decimal = Decimal("0")
    percentage_change: float | None = None
    significant_item_count: int = 0
    new_count: int = 0
    changed_count: int = 0
    removed_count: int = 0
    unchanged_count: int = 0

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def label(self) -> str:
        return category_label(self.category)


class WarrantyFlag(BaseModel):
    """Work-type classification of a supplement line."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    description: str
    category: CategoryKey = UNCATEGORIZED
    work_type: WorkType = WorkType.SERVICE
    flagged: bool = False
    marker: str | None = None
    total: Decimal = Decimal("0")


class CostBreakdown(BaseModel):
    """Check of a line's stated sub-costs against its total."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    description: str
    source: Literal["original", "supplement"]
    total: Decimal
    part_cost: Decimal = Decimal("0")
    labor_cost: Decimal = Decimal("0")
    material_cost: Decimal = Decimal("0")
    component_sum: Decimal = Decimal("0")
    variance: Decimal = Decimal("0")
    tolerance: Decimal = Decimal("0.01")
    is_validated: bool = True


class ChangeTypeDetail(BaseModel):
    """Count and dollar weight of one kind of change."""

    model_config = ConfigDict(frozen=True)

    count: int = 0
    total_amount: Decimal = Decimal("0")
    average_amount: Decimal = Decimal("0")
    percentage_of_total: float = 0.0
    item_ids: list[str] = Field(default_factory=list)


class ChangesByType(BaseModel):
    """
    Reconciled lines split by the direction of their change.

    Amounts are absolute dollar changes; ``percentage_of_total`` is each
    group's share of the summed absolute change across all lines.
    """

    model_config = ConfigDict(frozen=True)

    increases: ChangeTypeDetail = Field(default_factory=ChangeTypeDetail)
    decreases: ChangeTypeDetail = Field(default_factory=ChangeTypeDetail)
    additions: ChangeTypeDetail = Field(default_factory=ChangeTypeDetail)
    removals: ChangeTypeDetail = Field(default_factory=ChangeTypeDetail)
    unchanged: ChangeTypeDetail = Field(default_factory=ChangeTypeDetail)


class RiskIndicator(BaseModel):
    """A claim-level pattern worth a reviewer's attention."""

    model_config = ConfigDict(frozen=True)

    type: RiskType
    severity: SignificanceLevel
    description: str
    recommended_action: str
    affected_items: list[str] = Field(default_factory=list)


class AuditSummary(BaseModel):
    """Claim-level totals and counts."""

    new_items: int = 0
    removed_items: int = 0
    changed_items: int = 0
    unchanged_items: int = 0
    significant_items: int = 0
    warranty_items: int = 0
    unvalidated_breakdowns: int = 0
    original_subtotal: Decimal = Decimal("0")
    original_tax: Decimal = Decimal("0")
    original_total: Decimal = Decimal("0")
    supplement_subtotal: Decimal = Decimal("0")
    supplement_tax: Decimal = Decimal("0")
    supplement_total: Decimal = Decimal("0")
    total_increase: Decimal = Decimal("0")
    total_decrease: Decimal = Decimal("0")
    net_change: Decimal = Decimal("0")
    percentage_change: float | None = None
    changes_by_type: ChangesByType = Field(default_factory=ChangesByType)
    risk_indicators: list[RiskIndicator] = Field(default_factory=list)

    @property
    def total_items(self) -> int:
        return self.new_items + self.removed_items + self.changed_items + self.unchanged_items


class AuditResult(BaseModel):
    """Complete output of a supplement audit."""

    claim_id: str
    audit_timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    matches: list[MatchResult] = Field(default_factory=list)
    lines: list[ReconciledLine] = Field(default_factory=list)
    categories: list[CategorySummary] = Field(default_factory=list)
    warranty_flags: list[WarrantyFlag] = Field(default_factory=list)
    cost_breakdowns: list[CostBreakdown] = Field(default_factory=list)
    summary: AuditSummary = Field(default_factory=AuditSummary)
    modules_executed: list[str] = Field(default_factory=list)

    @property
    def flagged_warranty_items(self) -> list[WarrantyFlag]:
        return [flag for flag in self.warranty_flags if flag.flagged]

    @property
    def unvalidated_breakdowns(self) -> list[CostBreakdown]:
        return [b for b in self.cost_breakdowns if not b.is_validated]
