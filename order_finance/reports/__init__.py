"""Financial reports over completed orders."""

from .profit_loss import (
    PERIODS,
    select_completed,
    build_ledger,
    summarize_periods,
    calculate_ytd,
    calculate_trends
)

__all__ = [
    'PERIODS',
    'select_completed',
    'build_ledger',
    'summarize_periods',
    'calculate_ytd',
    'calculate_trends'
]
