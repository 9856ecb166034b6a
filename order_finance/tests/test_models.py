"""Tests for reading and writing order documents."""

from ..models import Order, FurnitureGroup


def test_regular_document_round_trip(order_document):
    order = Order.from_document(order_document)

    assert order.id == 'order-1'
    assert not order.is_corporate
    assert order.furniture_groups[0].material_price == 100
    assert order.order_details.start_date == '2025-03-20'
    assert order.to_document() == order_document


def test_unknown_fields_are_preserved(order_document):
    order_document['furnitureData']['groups'][0]['fabricColour'] = 'teal'
    order_document['furnitureData']['layout'] = 'compact'
    order_document['paymentData']['paymentMethod'] = 'cash'

    document = Order.from_document(order_document).to_document()

    assert document['furnitureData']['groups'][0]['fabricColour'] == 'teal'
    assert document['furnitureData']['layout'] == 'compact'
    assert document['paymentData']['paymentMethod'] == 'cash'


def test_corporate_document_layout(corporate_document):
    order = Order.from_document(corporate_document)
    document = order.to_document()

    assert order.is_corporate
    assert order.payment.pickup_delivery_cost == 40
    assert 'furnitureGroups' in document
    assert 'paymentDetails' in document
    assert 'furnitureData' not in document
    assert document['corporateCustomer'] == {'name': 'Acme Hotels'}


def test_order_id_from_store_key():
    order = Order.from_document({'invoiceStatus': 'pending'}, order_id='abc')
    assert order.id == 'abc'


def test_with_updates_leaves_original():
    order = Order(id='a', furniture_groups=[FurnitureGroup(labour_price=10)])
    updated = order.with_updates(invoice_status='done')

    assert updated.invoice_status == 'done'
    assert order.invoice_status is None
    assert updated.furniture_groups is order.furniture_groups
