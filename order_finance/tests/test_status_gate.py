"""Tests for payment checks on status transitions."""

import pytest

from ..calculations.results import (
    Accepted,
    Rejected,
    RequiresAllocation,
    PAYMENT_SHORTFALL,
    PAYMENT_PRESENT_ON_CANCEL,
)
from ..calculations.status_gate import StatusTransitionGate, request_status_transition
from ..exceptions import StatusNotFoundError
from ..models import resolve_status, default_done_status, InvoiceStatusDefinition, EndStateType


def _paid(make_order, order_document, amount):
    return make_order(paymentData={**order_document['paymentData'], 'amountPaid': amount})


def test_non_terminal_status_is_applied(make_order, statuses):
    order = make_order()
    result = request_status_transition(order, statuses['pending'])

    assert isinstance(result, Accepted)
    assert result.order.invoice_status == 'pending'
    assert order.invoice_status == 'in_progress'


def test_done_with_shortfall_is_rejected(make_order, order_document, statuses):
    """The rejection carries the exact amount still owed."""
    order = _paid(make_order, order_document, 100)
    result = request_status_transition(order, statuses['done'])

    assert isinstance(result, Rejected)
    assert result.error.kind == PAYMENT_SHORTFALL
    assert result.error.shortfall == pytest.approx(176)
    assert result.error.current_amount == 100
    assert result.error.message == (
        "Cannot complete order: Payment not fully received. Required: $276.00, Paid: $100.00"
    )
    assert result.order is order


def test_done_when_fully_paid_requires_allocation(make_order, order_document, statuses, tax_rates):
    order = _paid(make_order, order_document, 276)
    result = request_status_transition(order, statuses['done'], tax_rates)

    assert isinstance(result, RequiresAllocation)
    assert result.order.invoice_status == 'in_progress'
    assert result.total_revenue == pytest.approx(276)
    assert result.total_cost == pytest.approx(138)


def test_overpaid_order_can_complete(make_order, order_document, statuses):
    result = request_status_transition(_paid(make_order, order_document, 300), statuses['done'])
    assert isinstance(result, RequiresAllocation)


def test_cancel_with_payment_is_rejected(make_order, order_document, statuses):
    result = request_status_transition(_paid(make_order, order_document, 50), statuses['cancelled'])

    assert isinstance(result, Rejected)
    assert result.error.kind == PAYMENT_PRESENT_ON_CANCEL
    assert result.error.current_amount == 50
    assert result.error.message == (
        "Cannot cancel order: Payment has been received ($50.00). Please refund the customer first."
    )


def test_cancel_without_payment_is_accepted(make_order, statuses):
    result = request_status_transition(make_order(), statuses['cancelled'])

    assert isinstance(result, Accepted)
    assert result.order.invoice_status == 'cancelled'


def test_pending_end_state_has_no_payment_rule(make_order, order_document, statuses):
    result = request_status_transition(_paid(make_order, order_document, 20), statuses['on_hold'])
    assert isinstance(result, Accepted)


def test_end_state_without_type_is_not_gated(make_order, order_document):
    archived = InvoiceStatusDefinition(value='archived', is_end_state=True, end_state_type='unknown')
    result = request_status_transition(_paid(make_order, order_document, 20), archived)
    assert isinstance(result, Accepted)


def test_gate_stats(make_order, order_document, statuses):
    gate = StatusTransitionGate()
    gate.request_transition(make_order(), statuses['pending'])
    gate.request_transition(make_order(), statuses['done'])
    gate.request_transition(_paid(make_order, order_document, 276), statuses['done'])

    stats = gate.get_stats()
    assert stats['orders_calculated'] == 3
    assert stats['accepted'] == 1
    assert stats['rejected'] == 1
    assert stats['requires_allocation'] == 1


class TestStatusDefinitions:
    """Tests for status reference data helpers."""

    def test_end_state_type_coerced(self, statuses):
        assert statuses['done'].end_state_type is EndStateType.DONE
        assert statuses['done'].is_terminal

    def test_end_state_type_dropped_when_not_end_state(self):
        definition = InvoiceStatusDefinition(value='x', is_end_state=False, end_state_type='done')
        assert definition.end_state_type is None
        assert not definition.is_terminal

    def test_resolve_unknown_status(self, status_definitions):
        with pytest.raises(StatusNotFoundError):
            resolve_status('shipped', status_definitions)

    def test_default_done_status(self, status_definitions):
        assert default_done_status(status_definitions).value == 'done'
        assert default_done_status(status_definitions[:2]) is None

    def test_from_document(self):
        definition = InvoiceStatusDefinition.from_document({
            'value': 'done', 'label': 'Done', 'isEndState': True,
            'endStateType': 'Done', 'sortOrder': 4, 'createdBy': 'admin'
        })
        assert definition.end_state_type is EndStateType.DONE
        assert definition.extra == {'createdBy': 'admin'}
        assert definition.to_document()['endStateType'] == 'done'
