"""Tests for payment history, remediation helpers and extra expenses."""

from datetime import datetime, timezone

import pytest

from ..calculations.payments import (
    add_extra_expense,
    build_extra_expense,
    compute_expense_total,
    deposit_status,
    mark_fully_paid,
    payment_history_total,
    record_payment,
    refund_to_zero,
)
from ..calculations.results import Accepted, RequiresAllocation
from ..calculations.status_gate import request_status_transition
from ..calculations.totals import compute_totals
from ..constants import AUTO_PAID_NOTE, REFUND_NOTE

WHEN = datetime(2025, 4, 1, 9, 30, tzinfo=timezone.utc)


def test_record_payment_keeps_total_and_history_together(make_order):
    order = record_payment(make_order(), 100, WHEN, 'Deposit')
    order = record_payment(order, 50.5, WHEN)

    assert order.payment.amount_paid == 150.5
    assert payment_history_total(order) == 150.5
    assert order.payment.payment_history[0].notes == 'Deposit'
    assert order.payment.payment_history[0].date == WHEN.isoformat()


def test_record_payment_does_not_modify_input(make_order):
    order = make_order()
    record_payment(order, 100, WHEN)

    assert order.payment.amount_paid == 0
    assert order.payment.payment_history == []


def test_mark_fully_paid_then_complete(make_order, statuses):
    """Recording the balance lets the order through the done gate."""
    order = record_payment(make_order(), 100, WHEN)
    paid = mark_fully_paid(order, when=WHEN)

    assert paid.payment.amount_paid == pytest.approx(276)
    assert paid.payment.payment_history[-1].amount == pytest.approx(176)
    assert paid.payment.payment_history[-1].notes == AUTO_PAID_NOTE
    assert compute_totals(paid).balance_due == pytest.approx(0)
    assert isinstance(request_status_transition(paid, statuses['done']), RequiresAllocation)


def test_mark_fully_paid_noop_when_settled(make_order):
    order = record_payment(make_order(), 300, WHEN)
    assert mark_fully_paid(order) is order


def test_refund_to_zero_then_cancel(make_order, statuses):
    order = record_payment(make_order(), 80, WHEN)
    refunded = refund_to_zero(order, WHEN)

    assert refunded.payment.amount_paid == 0
    assert refunded.payment.payment_history[-1].amount == -80
    assert refunded.payment.payment_history[-1].notes == REFUND_NOTE
    assert isinstance(request_status_transition(refunded, statuses['cancelled']), Accepted)


def test_refund_noop_without_payments(make_order):
    order = make_order()
    assert refund_to_zero(order) is order


def test_deposit_status(make_order):
    status = deposit_status(record_payment(make_order(), 120, WHEN))

    assert status.total == pytest.approx(276)
    assert status.deposit == 100
    assert status.remaining == pytest.approx(156)
    assert status.is_deposit_paid
    assert not status.is_fully_paid


@pytest.mark.parametrize('price,unit,tax,tax_type,expected', [
    (10, 3, 13, 'percent', (3.9, 33.9)),
    (10, 3, 2, 'fixed', (2, 32)),
    (10, None, 0, 'fixed', (0, 10)),
    (10, 0, 0, 'fixed', (0, 10)),
    ('$12.50', '2', '', 'fixed', (0, 25)),
])
def test_compute_expense_total(price, unit, tax, tax_type, expected):
    tax_amount, total = compute_expense_total(price, unit, tax, tax_type)

    assert tax_amount == pytest.approx(expected[0])
    assert total == pytest.approx(expected[1])


def test_extra_expense_counts_toward_internal_cost(make_order, tax_rates):
    expense = build_extra_expense('Upholstery tacks', 20, 2, 13, 'percent')
    order = add_extra_expense(make_order(), expense)

    assert expense.total == 45.2
    assert len(order.extra_expenses) == 1
    assert compute_totals(order, tax_rates).jl_grand_total == pytest.approx(138 + 45.2)
