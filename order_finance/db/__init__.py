"""Database access for order documents and reference data."""

from .session import SessionManager
from .repository import OrderRepository, ReferenceDataRepository, StoredOrder

__all__ = [
    'SessionManager',
    'OrderRepository',
    'ReferenceDataRepository',
    'StoredOrder'
]
