"""Shared test fixtures and utilities."""

import copy

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from ..db.models import Base
from ..db.session import SessionManager
from ..models import InvoiceStatusDefinition, Order


@pytest.fixture
def status_definitions():
    """Status reference data with one status of each kind."""
    return [
        InvoiceStatusDefinition(value='pending', label='Pending', sort_order=1),
        InvoiceStatusDefinition(value='in_progress', label='In Progress', sort_order=2),
        InvoiceStatusDefinition(value='on_hold', label='On Hold', is_end_state=True,
                                end_state_type='pending', sort_order=3),
        InvoiceStatusDefinition(value='done', label='Done', is_end_state=True,
                                end_state_type='done', sort_order=4),
        InvoiceStatusDefinition(value='cancelled', label='Cancelled', is_end_state=True,
                                end_state_type='cancelled', sort_order=5),
    ]


@pytest.fixture
def statuses(status_definitions):
    """Status definitions keyed by code."""
    return {definition.value: definition for definition in status_definitions}


@pytest.fixture
def tax_rates():
    """Material company tax rates as decimals."""
    return {
        'charlotte fabrics': 0.15,
        'robert allen': 0.13,
    }


BASE_DOCUMENT = {
    'id': 'order-1',
    'personalInfo': {'customerName': 'Jane Doe'},
    'orderDetails': {
        'billInvoice': '1001',
        'startDate': '2025-03-20',
        'endDate': '2025-04-10',
    },
    'furnitureData': {
        'groups': [
            {
                'furnitureType': 'Sofa',
                'materialCompany': 'Charlotte Fabrics',
                'materialPrice': 100,
                'materialQnty': 2,
                'labourPrice': 50,
                'labourQnty': 1,
                'foamEnabled': False,
                'foamPrice': 40,
                'foamQnty': 1,
                'materialJLPrice': 60,
                'materialJLQnty': 2,
            }
        ]
    },
    'paymentData': {
        'deposit': 100,
        'amountPaid': 0,
        'paymentHistory': [],
        'pickupDeliveryEnabled': False,
    },
    'invoiceStatus': 'in_progress',
    'extraExpenses': [],
}


@pytest.fixture
def order_document():
    """A fresh regular order document: items subtotal 250, tax 26, total 276."""
    return copy.deepcopy(BASE_DOCUMENT)


@pytest.fixture
def make_order(order_document):
    """Build an Order from the base document with top-level overrides."""
    def _make(**overrides):
        document = copy.deepcopy(order_document)
        document.update(overrides)
        return Order.from_document(document)
    return _make


@pytest.fixture
def corporate_document():
    """A corporate order document."""
    return {
        'id': 'corp-1',
        'orderType': 'corporate',
        'corporateCustomer': {'name': 'Acme Hotels'},
        'orderDetails': {'startDate': '2025-05-01', 'endDate': '2025-05-15'},
        'furnitureGroups': [
            {
                'furnitureType': 'Chair',
                'materialPrice': 100,
                'materialQnty': 2,
                'labourPrice': 50,
                'labourQnty': 2,
                'foamEnabled': True,
                'foamPrice': 30,
                'foamQnty': 1,
            }
        ],
        'paymentDetails': {
            'amountPaid': 0,
            'pickupDeliveryEnabled': True,
            'pickupDeliveryCost': 40,
        },
        'invoiceStatus': 'in_progress',
    }


@pytest.fixture
def engine():
    """Create a test database engine."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool
    )
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session_manager(engine):
    """Create a session manager for testing."""
    return SessionManager(engine=engine)
