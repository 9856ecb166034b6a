"""
Order financial calculations: cost breakdown, invoice totals, status
transition checks and monthly revenue allocation.
"""

from .tax_rates import material_company_tax_rate, build_tax_rate_table
from .breakdown import CostBreakdown, CostBreakdownCalculator, InternalCost, compute_breakdown, compute_internal_cost
from .totals import InvoiceTotals, InvoiceTotalsCalculator, OrderKind, order_kind, compute_totals
from .status_gate import StatusTransitionGate, request_status_transition
from .allocation import (
    AllocationPlan,
    AllocationStatus,
    RevenueAllocationEngine,
    build_default_allocation,
    check_allocation_sum,
    commit_allocation,
    normalize_allocation,
)
from .payments import record_payment, mark_fully_paid, refund_to_zero, deposit_status, build_extra_expense
from .results import ValidationError, Accepted, Rejected, RequiresAllocation, Committed
from .error_tracker import ErrorTracker

__all__ = [
    'material_company_tax_rate',
    'build_tax_rate_table',
    'CostBreakdown',
    'CostBreakdownCalculator',
    'InternalCost',
    'compute_breakdown',
    'compute_internal_cost',
    'InvoiceTotals',
    'InvoiceTotalsCalculator',
    'OrderKind',
    'order_kind',
    'compute_totals',
    'StatusTransitionGate',
    'request_status_transition',
    'AllocationPlan',
    'AllocationStatus',
    'RevenueAllocationEngine',
    'build_default_allocation',
    'check_allocation_sum',
    'commit_allocation',
    'normalize_allocation',
    'record_payment',
    'mark_fully_paid',
    'refund_to_zero',
    'deposit_status',
    'build_extra_expense',
    'ValidationError',
    'Accepted',
    'Rejected',
    'RequiresAllocation',
    'Committed',
    'ErrorTracker'
]
