"""Tests for invoice totals of regular and corporate orders."""

import pytest

from ..calculations.totals import (
    InvoiceTotalsCalculator,
    OrderKind,
    compute_totals,
    order_kind,
    pickup_delivery_cost,
)
from ..models import Order, PaymentData


def test_workshop_order_totals(make_order):
    """Subtotal 250, tax on material only, no delivery."""
    totals = compute_totals(make_order())

    assert totals.kind is OrderKind.REGULAR
    assert totals.items_subtotal == pytest.approx(250)
    assert totals.tax_amount == pytest.approx(26)
    assert totals.pickup_delivery_cost == 0
    assert totals.grand_total == pytest.approx(276)
    assert totals.balance_due == pytest.approx(276)


def test_tax_applies_to_material_and_foam_only(make_order, order_document):
    group = order_document['furnitureData']['groups'][0]
    group['foamEnabled'] = True
    group['paintingLabour'] = 80
    order = make_order(furnitureData={'groups': [group]})

    totals = compute_totals(order)

    assert totals.items_subtotal == pytest.approx(370)
    assert totals.tax_amount == pytest.approx(240 * 0.13)


def test_oversized_price_is_ignored(make_order, order_document):
    """A price too large for a float drops out instead of failing the totals."""
    group = order_document['furnitureData']['groups'][0]
    group['labourPrice'] = 10 ** 400
    order = make_order(furnitureData={'groups': [group]})

    totals = compute_totals(order)

    assert totals.items_subtotal == pytest.approx(200)
    assert totals.grand_total == pytest.approx(226)


def test_empty_order_totals_only_delivery():
    order = Order(id='empty', payment=PaymentData(pickup_delivery_enabled=True, pickup_delivery_cost=25))
    totals = compute_totals(order)

    assert totals.items_subtotal == 0
    assert totals.tax_amount == 0
    assert totals.grand_total == 50


@pytest.mark.parametrize('service_type,expected', [
    ('pickup', 30),
    ('delivery', 30),
    ('both', 60),
    (None, 60),
])
def test_delivery_multiplier(service_type, expected):
    payment = PaymentData(
        pickup_delivery_enabled=True,
        pickup_delivery_cost='30',
        pickup_delivery_service_type=service_type
    )
    assert pickup_delivery_cost(payment) == expected


def test_delivery_disabled_is_zero():
    payment = PaymentData(pickup_delivery_enabled=False, pickup_delivery_cost=30, pickup_delivery_service_type='both')
    assert pickup_delivery_cost(payment) == 0


def test_amount_paid_reduces_balance(make_order, order_document):
    order = make_order(paymentData={**order_document['paymentData'], 'amountPaid': '100'})
    totals = compute_totals(order)

    assert totals.amount_paid == 100
    assert totals.balance_due == pytest.approx(176)


def test_profit_uses_internal_cost(make_order, tax_rates):
    totals = compute_totals(make_order(), tax_rates)

    assert totals.jl_grand_total == pytest.approx(138)
    assert totals.jl_subtotal_before_tax == pytest.approx(120)
    assert totals.profit == pytest.approx(276 - 138)


class TestCorporateTotals:
    """Tests for the corporate totals strategy."""

    def test_detected_by_order_type_or_layout(self, corporate_document):
        assert order_kind(Order.from_document(corporate_document)) is OrderKind.CORPORATE

        untyped = dict(corporate_document)
        del untyped['orderType']
        assert order_kind(Order.from_document(untyped)) is OrderKind.CORPORATE

    def test_corporate_totals(self, corporate_document):
        """Tax covers delivery too; delivery defaults to a single trip."""
        totals = compute_totals(Order.from_document(corporate_document))

        assert totals.items_subtotal == 330
        assert totals.pickup_delivery_cost == 40
        assert totals.tax_amount == 48.1
        assert totals.credit_card_fee == 0
        assert totals.grand_total == 418.1

    def test_credit_card_fee(self, corporate_document):
        corporate_document['creditCardFeeEnabled'] = True
        totals = compute_totals(Order.from_document(corporate_document))

        assert totals.credit_card_fee == 10.45
        assert totals.grand_total == 428.55

    def test_missing_quantities_count_as_zero(self, corporate_document):
        corporate_document['furnitureGroups'] = [{'materialPrice': 100, 'labourPrice': 50}]
        corporate_document['paymentDetails']['pickupDeliveryEnabled'] = False
        totals = compute_totals(Order.from_document(corporate_document))

        assert totals.grand_total == 0

    def test_foam_and_painting_need_their_flags(self, corporate_document):
        corporate_document['furnitureGroups'] = [
            {'foamPrice': 100, 'foamQnty': 1, 'paintingLabour': 50, 'paintingQnty': 1}
        ]
        corporate_document['paymentDetails']['pickupDeliveryEnabled'] = False

        assert compute_totals(Order.from_document(corporate_document)).items_subtotal == 0

        group = corporate_document['furnitureGroups'][0]
        group['foamEnabled'] = True
        group['paintingEnabled'] = True
        assert compute_totals(Order.from_document(corporate_document)).items_subtotal == 150

    def test_both_service_type_doubles_delivery(self, corporate_document):
        corporate_document['paymentDetails']['pickupDeliveryServiceType'] = 'both'
        totals = compute_totals(Order.from_document(corporate_document))

        assert totals.pickup_delivery_cost == 80


def test_calculator_dispatches_by_kind(make_order, corporate_document):
    calculator = InvoiceTotalsCalculator()

    assert calculator.calculate(make_order()).kind is OrderKind.REGULAR
    assert calculator.calculate(Order.from_document(corporate_document)).kind is OrderKind.CORPORATE
    assert calculator.get_stats()['orders_calculated'] == 2
