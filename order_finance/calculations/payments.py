"""Payment history and the remediation paths offered on rejected transitions.

``amountPaid`` is kept as a running total: every payment appended through
``record_payment`` adds its amount to it, so the total and the history move
together. Refunds are recorded as negative payments.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Optional, Tuple

from ..constants import AUTO_PAID_NOTE, REFUND_NOTE
from ..models import Order, PaymentRecord, ExtraExpense
from ..utils.dates import to_iso, utc_now
from ..utils.numbers import to_number_or_default
from .tax_rates import TaxRateTable
from .totals import compute_totals

logger = logging.getLogger(__name__)


def record_payment(order: Order, amount: float, when: Optional[datetime] = None, notes: str = '') -> Order:
    """Append a payment and update the running amount paid.

    Args:
        order: Order receiving the payment
        amount: Amount received (negative for a refund)
        when: Payment time, now by default
        notes: Free-text note stored with the payment

    Returns:
        A copy of the order with the payment applied
    """
    when = when or utc_now()
    payment = order.payment
    new_total = to_number_or_default(payment.amount_paid) + amount
    history = list(payment.payment_history) + [
        PaymentRecord(amount=amount, date=to_iso(when), notes=notes)
    ]
    logger.debug(f"Order {order.id}: payment {amount:.2f}, amount paid now {new_total:.2f}")
    return order.with_updates(
        payment=replace(payment, amount_paid=new_total, payment_history=history)
    )


def payment_history_total(order: Order) -> float:
    """Sum of all amounts in the payment history."""
    return sum(to_number_or_default(entry.amount) for entry in order.payment.payment_history)


def mark_fully_paid(order: Order, tax_rates: Optional[TaxRateTable] = None, when: Optional[datetime] = None) -> Order:
    """Record the outstanding balance as paid so the order can be completed.

    Orders with nothing outstanding are returned unchanged.
    """
    totals = compute_totals(order, tax_rates)
    shortfall = totals.grand_total - totals.amount_paid
    if shortfall <= 0:
        return order
    logger.info(f"Order {order.id}: recording {shortfall:.2f} to settle the invoice")
    paid = record_payment(order, shortfall, when, AUTO_PAID_NOTE)
    # paid + (total - paid) can land a float ulp short of the total
    return paid.with_updates(payment=replace(paid.payment, amount_paid=totals.grand_total))


def refund_to_zero(order: Order, when: Optional[datetime] = None) -> Order:
    """Record a refund of everything received so the order can be cancelled.

    Orders with nothing received are returned unchanged.
    """
    paid = to_number_or_default(order.payment.amount_paid)
    if paid == 0:
        return order
    logger.info(f"Order {order.id}: recording refund of {paid:.2f}")
    return record_payment(order, -paid, when, REFUND_NOTE)


@dataclass(frozen=True)
class DepositStatus:
    """How much of the deposit and the invoice has been received."""

    total: float
    deposit: float
    amount_paid: float
    remaining: float
    is_deposit_paid: bool
    is_fully_paid: bool


def deposit_status(order: Order, tax_rates: Optional[TaxRateTable] = None) -> DepositStatus:
    """Summarize deposit and payment progress for an order."""
    totals = compute_totals(order, tax_rates)
    deposit = to_number_or_default(order.payment.deposit)
    paid = totals.amount_paid
    return DepositStatus(
        total=totals.grand_total,
        deposit=deposit,
        amount_paid=paid,
        remaining=totals.grand_total - paid,
        is_deposit_paid=paid >= deposit,
        is_fully_paid=paid >= totals.grand_total,
    )


def compute_expense_total(price: Any, unit: Any, tax: Any, tax_type: str = 'fixed') -> Tuple[float, float]:
    """Tax and total for an extra expense.

    ``unit`` falls back to 1 when it is not a number or is zero. A
    ``percent`` tax is a rate on price × unit; a ``fixed`` tax is an amount.

    Returns:
        (tax amount, total)
    """
    amount = to_number_or_default(price) * (to_number_or_default(unit, 1) or 1)
    if tax_type == 'percent':
        tax_amount = amount * to_number_or_default(tax) / 100
    else:
        tax_amount = to_number_or_default(tax)
    return tax_amount, amount + tax_amount


def build_extra_expense(description: str, price: Any, unit: Any, tax: Any = 0, tax_type: str = 'fixed') -> ExtraExpense:
    """Create an extra expense with its tax and total filled in."""
    tax_amount, total = compute_expense_total(price, unit, tax, tax_type)
    return ExtraExpense(
        description=description,
        price=to_number_or_default(price),
        unit=unit,
        tax=round(tax_amount, 2),
        tax_type=tax_type,
        total=round(total, 2),
    )


def add_extra_expense(order: Order, expense: ExtraExpense) -> Order:
    """Return a copy of the order with an extra expense appended."""
    return order.with_updates(extra_expenses=list(order.extra_expenses) + [expense])
