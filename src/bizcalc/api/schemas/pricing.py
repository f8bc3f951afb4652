"""Pydantic schemas for pricing endpoints."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from bizcalc.domain.models import LineItem, LineItemKind, MarkupPricing


class LineItemRequest(BaseModel):
    """Request schema for a single line item."""

    id: Optional[str] = Field(default=None, description="Line item ID; defaults to its position")
    kind: LineItemKind = Field(default=LineItemKind.SERVICE, description="Line item kind")
    quantity: Decimal = Field(..., ge=0, description="Quantity")
    unit_price: Decimal = Field(..., ge=0, description="Price per unit")
    is_taxable: bool = Field(default=True, description="Whether the line is taxed")
    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Line tax rate as a fraction; overrides the document rate",
    )
    discount_amount: Optional[Decimal] = Field(
        default=None,
        description="Discount amount (read from discount lines only)",
    )
    description: Optional[str] = Field(default=None, max_length=500)

    def to_domain(self, index: int) -> LineItem:
        return LineItem(
            id=self.id or str(index + 1),
            kind=self.kind,
            quantity=self.quantity,
            unit_price=self.unit_price,
            is_taxable=self.is_taxable,
            tax_rate=self.tax_rate,
            discount_amount=self.discount_amount,
            description=self.description,
        )


def to_line_items(items: list[LineItemRequest]) -> list[LineItem]:
    """Convert request line items to domain line items."""
    return [item.to_domain(index) for index, item in enumerate(items)]


class PricingRequest(BaseModel):
    """Request schema for pricing a set of line items."""

    line_items: list[LineItemRequest]
    tax_rate: Optional[Decimal] = Field(
        default=None,
        ge=0,
        description="Tax rate as a fraction (0.0825 = 8.25%); defaults to the configured rate",
    )


class PricingResponse(BaseModel):
    """Response schema for line-item pricing."""

    model_config = {"from_attributes": True}

    subtotal: Decimal
    total_tax: Decimal
    total_discounts: Decimal
    total_fees: Decimal
    total_amount: Decimal
    taxable_amount: Decimal


class MarkupRequest(BaseModel):
    """Request schema for cost-plus pricing."""

    base_price: Decimal = Field(default=Decimal("0"), ge=0)
    labor_rate: Decimal = Field(default=Decimal("0"), ge=0)
    estimated_hours: Decimal = Field(default=Decimal("0"), ge=0)
    material_costs: Decimal = Field(default=Decimal("0"), ge=0)
    markup_percent: Decimal = Field(default=Decimal("0"), description="Markup in percent")

    def to_domain(self) -> MarkupPricing:
        return MarkupPricing(
            base_price=self.base_price,
            labor_rate=self.labor_rate,
            estimated_hours=self.estimated_hours,
            material_costs=self.material_costs,
            markup_percent=self.markup_percent,
        )


class MarkupResponse(BaseModel):
    """Response schema for cost-plus pricing."""

    model_config = {"from_attributes": True}

    subtotal: Decimal
    total_with_markup: Decimal
    costs: Decimal
    profit: Decimal
    profit_margin_percent: Decimal
