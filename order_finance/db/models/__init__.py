"""SQLAlchemy models for database tables."""

from .base import Base
from .order import OrderDocument
from .invoice_status import InvoiceStatus
from .material_company import MaterialCompany

__all__ = [
    'Base',
    'OrderDocument',
    'InvoiceStatus',
    'MaterialCompany'
]
