"""Cost breakdown of an order's furniture groups.

Two passes over the same groups:

- the customer-facing breakdown by category (material, labour, foam,
  painting), which drives invoice totals;
- the internal cost of the job, using the internal ("JL") prices and the
  material company's tax rate, which drives profit reporting.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..models import Order, FurnitureGroup
from ..utils.numbers import to_number_or_default, is_positive_number
from .base import BaseCalculator
from .tax_rates import TaxRateTable, material_company_tax_rate


@dataclass(frozen=True)
class CostBreakdown:
    """Customer-facing subtotals per category."""

    material: float = 0.0
    labour: float = 0.0
    foam: float = 0.0
    painting: float = 0.0

    @property
    def items_subtotal(self) -> float:
        return self.material + self.labour + self.foam + self.painting

    @property
    def taxable_subtotal(self) -> float:
        """Categories subject to customer tax."""
        return self.material + self.foam

    def to_dict(self) -> Dict[str, float]:
        return {
            'material': self.material,
            'labour': self.labour,
            'foam': self.foam,
            'painting': self.painting,
        }


@dataclass(frozen=True)
class InternalCost:
    """What the job costs the business."""

    subtotal_before_tax: float = 0.0
    grand_total: float = 0.0


def category_enabled(flag: Any) -> bool:
    """Optional categories count unless their flag is present and false."""
    return flag is None or bool(flag)


def line_amount(price: Any, quantity: Any, default_quantity: float) -> float:
    """price × quantity for one category, or 0 when the price is not positive."""
    if not is_positive_number(price):
        return 0.0
    return to_number_or_default(price) * to_number_or_default(quantity, default_quantity)


class CostBreakdownCalculator(BaseCalculator[CostBreakdown]):
    """Reduce an order's furniture groups into categorized subtotals."""

    def __init__(self, tax_rates: Optional[TaxRateTable] = None, debug: bool = False):
        """Initialize calculator.

        Args:
            tax_rates: Material company tax rates for the internal cost pass
            debug: Enable debug logging
        """
        super().__init__(debug)
        self.tax_rates = dict(tax_rates or {})

    def calculate(self, order: Order) -> CostBreakdown:
        """Compute the customer-facing breakdown.

        Material quantity defaults to 0; the other quantities default to 1.
        Foam and painting are skipped when their enable flag is set to false.
        """
        material = labour = foam = painting = 0.0

        for group in order.furniture_groups:
            material += line_amount(group.material_price, group.material_qnty, 0)
            labour += line_amount(group.labour_price, group.labour_qnty, 1)
            if category_enabled(group.foam_enabled):
                foam += line_amount(group.foam_price, group.foam_qnty, 1)
            if category_enabled(group.painting_enabled):
                painting += line_amount(group.painting_labour, group.painting_qnty, 1)

        self.stats.orders_calculated += 1
        breakdown = CostBreakdown(material=material, labour=labour, foam=foam, painting=painting)
        if self.debug:
            self.logger.debug(f"Order {order.id} breakdown: {breakdown.to_dict()}")
        return breakdown

    def calculate_internal_cost(self, order: Order) -> InternalCost:
        """Compute the internal cost of the order.

        Per group: internal material (taxed at the material company's rate),
        internal foam (untaxed), other expenses and shipping. Then the totals
        of all order-level extra expenses. Painting is labour done in-house
        and carries no internal cost.
        """
        subtotal = 0.0
        grand_total = 0.0

        for group in order.furniture_groups:
            group_subtotal, group_total = self._group_internal_cost(group)
            subtotal += group_subtotal
            grand_total += group_total

        for expense in order.extra_expenses:
            expense_total = to_number_or_default(expense.total)
            subtotal += expense_total
            grand_total += expense_total

        if self.debug:
            self.logger.debug(
                f"Order {order.id} internal cost: {subtotal:.2f} before tax, {grand_total:.2f} total"
            )
        return InternalCost(subtotal_before_tax=subtotal, grand_total=grand_total)

    def _group_internal_cost(self, group: FurnitureGroup):
        """Return (subtotal before tax, total) for one furniture group."""
        subtotal = 0.0
        total = 0.0

        if is_positive_number(group.material_jl_price):
            material = to_number_or_default(group.material_jl_qnty, 0) * to_number_or_default(group.material_jl_price)
            rate = material_company_tax_rate(group.material_company, self.tax_rates)
            subtotal += material
            total += material + material * rate

        if is_positive_number(group.foam_jl_price):
            foam = to_number_or_default(group.foam_qnty, 1) * to_number_or_default(group.foam_jl_price)
            subtotal += foam
            total += foam

        for amount in (group.other_expenses, group.shipping):
            if is_positive_number(amount):
                value = to_number_or_default(amount)
                subtotal += value
                total += value

        return subtotal, total


def compute_breakdown(order: Order) -> CostBreakdown:
    """Customer-facing subtotals for an order."""
    return CostBreakdownCalculator().calculate(order)


def compute_internal_cost(order: Order, tax_rates: Optional[TaxRateTable] = None) -> InternalCost:
    """Internal cost of an order using the given material company rates."""
    return CostBreakdownCalculator(tax_rates).calculate_internal_cost(order)
