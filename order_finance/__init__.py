"""Order financial engine for an upholstery workshop."""

from .calculations import (
    compute_breakdown,
    compute_totals,
    request_status_transition,
    build_default_allocation,
    commit_allocation,
    material_company_tax_rate,
)
from .utils import to_number_or_default

__all__ = [
    'compute_breakdown',
    'compute_totals',
    'request_status_transition',
    'build_default_allocation',
    'commit_allocation',
    'material_company_tax_rate',
    'to_number_or_default'
]
