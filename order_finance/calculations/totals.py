"""Invoice totals for regular and corporate orders.

Regular orders tax only material and foam at the flat customer rate, while
the internal cost uses each material company's own rate. Corporate invoices
tax the whole subtotal plus delivery and may add a card surcharge. The
strategy is chosen once from the order's shape.
"""

import enum
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..constants import (
    CUSTOMER_TAX_RATE,
    CREDIT_CARD_FEE_RATE,
    SERVICE_BOTH,
    SERVICE_TRIP_MULTIPLIERS,
)
from ..models import Order, PaymentData
from ..utils.numbers import to_number_or_default, is_positive_number, round_currency
from .base import BaseCalculator
from .breakdown import CostBreakdownCalculator
from .tax_rates import TaxRateTable


class OrderKind(enum.Enum):
    """Totals model an order is invoiced under."""
    REGULAR = 'regular'
    CORPORATE = 'corporate'


def order_kind(order: Order) -> OrderKind:
    """Classify an order by its shape."""
    return OrderKind.CORPORATE if order.is_corporate else OrderKind.REGULAR


@dataclass(frozen=True)
class InvoiceTotals:
    """Customer-facing invoice totals plus the internal cost of the job."""

    kind: OrderKind
    items_subtotal: float
    tax_amount: float
    pickup_delivery_cost: float
    grand_total: float
    amount_paid: float
    balance_due: float
    jl_grand_total: float
    jl_subtotal_before_tax: float
    credit_card_fee: float = 0.0

    @property
    def profit(self) -> float:
        return self.grand_total - self.jl_grand_total

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'itemsSubtotal': self.items_subtotal,
            'taxAmount': self.tax_amount,
            'pickupDeliveryCost': self.pickup_delivery_cost,
            'creditCardFee': self.credit_card_fee,
            'grandTotal': self.grand_total,
            'amountPaid': self.amount_paid,
            'balanceDue': self.balance_due,
            'jlGrandTotal': self.jl_grand_total,
            'jlSubtotalBeforeTax': self.jl_subtotal_before_tax,
        }


def pickup_delivery_cost(payment: PaymentData, default_service_type: Optional[str] = SERVICE_BOTH) -> float:
    """Delivery charge for an order.

    Zero unless delivery is enabled. The configured cost is billed once for
    pickup or delivery and twice for both. A missing or unknown service type
    falls back to ``default_service_type``.
    """
    if not payment.pickup_delivery_enabled:
        return 0.0
    cost = to_number_or_default(payment.pickup_delivery_cost)
    service_type = payment.pickup_delivery_service_type or default_service_type
    return cost * SERVICE_TRIP_MULTIPLIERS.get(service_type, 1)


class TotalsStrategy(ABC):
    """Computes invoice totals for one kind of order."""

    def __init__(self, breakdown_calculator: CostBreakdownCalculator):
        self.breakdown_calculator = breakdown_calculator

    @abstractmethod
    def totals(self, order: Order) -> InvoiceTotals:
        pass


class RegularTotalsStrategy(TotalsStrategy):
    """Totals for walk-in customer orders."""

    def totals(self, order: Order) -> InvoiceTotals:
        breakdown = self.breakdown_calculator.calculate(order)
        internal = self.breakdown_calculator.calculate_internal_cost(order)

        items_subtotal = breakdown.items_subtotal
        tax_amount = breakdown.taxable_subtotal * CUSTOMER_TAX_RATE
        delivery = pickup_delivery_cost(order.payment, SERVICE_BOTH)
        grand_total = items_subtotal + tax_amount + delivery
        amount_paid = to_number_or_default(order.payment.amount_paid)

        return InvoiceTotals(
            kind=OrderKind.REGULAR,
            items_subtotal=items_subtotal,
            tax_amount=tax_amount,
            pickup_delivery_cost=delivery,
            grand_total=grand_total,
            amount_paid=amount_paid,
            balance_due=grand_total - amount_paid,
            jl_grand_total=internal.grand_total,
            jl_subtotal_before_tax=internal.subtotal_before_tax,
        )


class CorporateTotalsStrategy(TotalsStrategy):
    """Totals for corporate accounts.

    Every quantity defaults to 0, so a line needs both a positive price and
    a quantity. Tax applies to subtotal and delivery; figures are rounded to
    cents as printed on the corporate invoice.
    """

    def totals(self, order: Order) -> InvoiceTotals:
        subtotal = 0.0
        for group in order.furniture_groups:
            subtotal += self._line(group.material_price, group.material_qnty)
            subtotal += self._line(group.labour_price, group.labour_qnty)
            # foam and painting need their flag set on corporate orders
            if group.foam_enabled:
                subtotal += self._line(group.foam_price, group.foam_qnty)
            if group.painting_enabled:
                subtotal += self._line(group.painting_labour, group.painting_qnty)

        delivery = pickup_delivery_cost(order.payment, None)
        tax = (subtotal + delivery) * CUSTOMER_TAX_RATE
        credit_card_fee = (subtotal + delivery + tax) * CREDIT_CARD_FEE_RATE if order.credit_card_fee_enabled else 0.0
        total = subtotal + delivery + tax + credit_card_fee

        internal = self.breakdown_calculator.calculate_internal_cost(order)
        amount_paid = to_number_or_default(order.payment.amount_paid)
        grand_total = round_currency(total)

        return InvoiceTotals(
            kind=OrderKind.CORPORATE,
            items_subtotal=round_currency(subtotal),
            tax_amount=round_currency(tax),
            pickup_delivery_cost=round_currency(delivery),
            credit_card_fee=round_currency(credit_card_fee),
            grand_total=grand_total,
            amount_paid=amount_paid,
            balance_due=grand_total - amount_paid,
            jl_grand_total=internal.grand_total,
            jl_subtotal_before_tax=internal.subtotal_before_tax,
        )

    @staticmethod
    def _line(price: Any, quantity: Any) -> float:
        if not is_positive_number(price):
            return 0.0
        return to_number_or_default(price) * to_number_or_default(quantity, 0)


class InvoiceTotalsCalculator(BaseCalculator[InvoiceTotals]):
    """Produce invoice totals, dispatching on the order kind."""

    def __init__(self, tax_rates: Optional[TaxRateTable] = None, debug: bool = False):
        """Initialize calculator.

        Args:
            tax_rates: Material company tax rates for the internal cost
            debug: Enable debug logging
        """
        super().__init__(debug)
        breakdown_calculator = CostBreakdownCalculator(tax_rates, debug)
        self.strategies = {
            OrderKind.REGULAR: RegularTotalsStrategy(breakdown_calculator),
            OrderKind.CORPORATE: CorporateTotalsStrategy(breakdown_calculator),
        }

    def calculate(self, order: Order) -> InvoiceTotals:
        kind = order_kind(order)
        totals = self.strategies[kind].totals(order)
        self.stats.orders_calculated += 1
        if self.debug:
            self.logger.debug(f"Order {order.id} ({kind.value}) totals: {totals.to_dict()}")
        return totals


def compute_totals(order: Order, tax_rates: Optional[TaxRateTable] = None) -> InvoiceTotals:
    """Invoice totals for an order."""
    return InvoiceTotalsCalculator(tax_rates).calculate(order)
