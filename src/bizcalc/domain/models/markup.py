"""Markup pricing input model."""

from dataclasses import dataclass, field
from decimal import Decimal

from bizcalc.core.money import to_decimal


@dataclass
class MarkupPricing:
    """Inputs for a cost-plus price: base price, labor, materials and markup %."""

    base_price: Decimal = field(default_factory=lambda: Decimal("0"))
    labor_rate: Decimal = field(default_factory=lambda: Decimal("0"))
    estimated_hours: Decimal = field(default_factory=lambda: Decimal("0"))
    material_costs: Decimal = field(default_factory=lambda: Decimal("0"))
    markup_percent: Decimal = field(default_factory=lambda: Decimal("0"))

    def __post_init__(self) -> None:
        self.base_price = to_decimal(self.base_price, "base_price")
        self.labor_rate = to_decimal(self.labor_rate, "labor_rate")
        self.estimated_hours = to_decimal(self.estimated_hours, "estimated_hours")
        self.material_costs = to_decimal(self.material_costs, "material_costs")
        self.markup_percent = to_decimal(self.markup_percent, "markup_percent")

    @property
    def labor_cost(self) -> Decimal:
        return self.labor_rate * self.estimated_hours
