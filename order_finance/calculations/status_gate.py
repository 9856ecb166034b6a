"""Payment checks on invoice status changes.

Moving an order into a terminal status is gated on what the customer has
paid:

- done: the invoice must be fully paid, and completion is then handed to
  the allocation engine instead of being applied here;
- cancelled: nothing may have been received;
- pending: no payment rule.

Any other status is applied unconditionally.
"""

from typing import Optional

from ..models import Order, InvoiceStatusDefinition, EndStateType
from .base import BaseCalculator
from .results import (
    Accepted,
    Rejected,
    RequiresAllocation,
    TransitionResult,
    ValidationError,
    PAYMENT_SHORTFALL,
    PAYMENT_PRESENT_ON_CANCEL,
)
from .tax_rates import TaxRateTable
from .totals import InvoiceTotalsCalculator


class StatusTransitionGate(BaseCalculator[TransitionResult]):
    """Decide whether an order may move to a requested status."""

    def __init__(self, tax_rates: Optional[TaxRateTable] = None, debug: bool = False):
        """Initialize gate.

        Args:
            tax_rates: Material company tax rates, used for the order's cost
            debug: Enable debug logging
        """
        super().__init__(debug)
        self.totals_calculator = InvoiceTotalsCalculator(tax_rates, debug)

    def calculate(self, order: Order, target: InvoiceStatusDefinition) -> TransitionResult:
        """Request a status change.

        The input order is never modified. Accepted results carry a copy with
        the new status; rejections carry the original order.

        Args:
            order: Order to move
            target: Requested status definition

        Returns:
            Accepted, Rejected or RequiresAllocation
        """
        self.stats.orders_calculated += 1

        if not target.is_terminal:
            return self._accept(order, target)

        totals = self.totals_calculator.calculate(order)
        paid = totals.amount_paid

        if target.end_state_type is EndStateType.DONE:
            required = totals.grand_total
            if paid < required:
                shortfall = required - paid
                self.stats.rejected += 1
                self.logger.info(
                    f"Order {order.id} cannot move to {target.value}: "
                    f"required {required:.2f}, paid {paid:.2f}"
                )
                return Rejected(order=order, error=ValidationError(
                    kind=PAYMENT_SHORTFALL,
                    message=(
                        f"Cannot complete order: Payment not fully received. "
                        f"Required: ${required:.2f}, Paid: ${paid:.2f}"
                    ),
                    shortfall=shortfall,
                    current_amount=paid,
                ))
            self.stats.requires_allocation += 1
            return RequiresAllocation(
                order=order,
                status=target,
                total_revenue=totals.grand_total,
                total_cost=totals.jl_grand_total,
            )

        if target.end_state_type is EndStateType.CANCELLED and paid > 0:
            self.stats.rejected += 1
            self.logger.info(f"Order {order.id} cannot be cancelled: {paid:.2f} received")
            return Rejected(order=order, error=ValidationError(
                kind=PAYMENT_PRESENT_ON_CANCEL,
                message=(
                    f"Cannot cancel order: Payment has been received (${paid:.2f}). "
                    "Please refund the customer first."
                ),
                current_amount=paid,
            ))

        return self._accept(order, target)

    request_transition = calculate

    def _accept(self, order: Order, target: InvoiceStatusDefinition) -> Accepted:
        self.stats.accepted += 1
        if self.debug:
            self.logger.debug(f"Order {order.id}: {order.invoice_status} -> {target.value}")
        return Accepted(order=order.with_updates(invoice_status=target.value), status=target)


def request_status_transition(
    order: Order,
    target: InvoiceStatusDefinition,
    tax_rates: Optional[TaxRateTable] = None
) -> TransitionResult:
    """Request a status change for an order."""
    return StatusTransitionGate(tax_rates).request_transition(order, target)
