"""
Command implementations for the order-finance CLI.
Each submodule provides specific command functionality.
"""

from .utils import TestConnectionCommand
from .orders import (
    ImportOrdersCommand,
    ShowTotalsCommand,
    TransitionStatusCommand,
    AllocateOrderCommand
)
from .reports import ProfitLossCommand

__all__ = [
    'TestConnectionCommand',
    'ImportOrdersCommand',
    'ShowTotalsCommand',
    'TransitionStatusCommand',
    'AllocateOrderCommand',
    'ProfitLossCommand'
]
