"""
CLI module for the order-finance package.
Provides command-line interface functionality and utilities.

The click group lives in ``order_finance.cli.main``; it is not imported here
because the command modules import this package's base classes.
"""

from .base import BaseCommand
from .config import Config
from .logging import setup_logging, get_logger

__all__ = ['BaseCommand', 'Config', 'setup_logging', 'get_logger']
