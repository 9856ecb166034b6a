"""Order, status and allocation models."""

from .order import Order, FurnitureGroup, PaymentData, PaymentRecord, OrderDetails, ExtraExpense
from .status import InvoiceStatusDefinition, EndStateType, resolve_status, default_done_status
from .allocation import MonthlyAllocation, AllocationRecord, month_key

__all__ = [
    'Order',
    'FurnitureGroup',
    'PaymentData',
    'PaymentRecord',
    'OrderDetails',
    'ExtraExpense',
    'InvoiceStatusDefinition',
    'EndStateType',
    'resolve_status',
    'default_done_status',
    'MonthlyAllocation',
    'AllocationRecord',
    'month_key'
]
