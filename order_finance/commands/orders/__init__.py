"""
Order commands for the order-finance CLI.
Import order documents, show totals, change status and allocate revenue.
"""

from .import_orders import ImportOrdersCommand
from .totals import ShowTotalsCommand
from .transition import TransitionStatusCommand, AllocateOrderCommand
from .base import parse_override

__all__ = [
    'ImportOrdersCommand',
    'ShowTotalsCommand',
    'TransitionStatusCommand',
    'AllocateOrderCommand',
    'parse_override'
]
