"""Result values returned by the status gate and allocation engine.

Rejections are ordinary return values carrying a ``ValidationError`` with the
amounts a remediation flow needs. Nothing here is raised.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..models import Order, InvoiceStatusDefinition, AllocationRecord

PAYMENT_SHORTFALL = 'payment_shortfall'
PAYMENT_PRESENT_ON_CANCEL = 'payment_present_on_cancel'
ALLOCATION_SUM = 'allocation_sum'
INVALID_DATE_RANGE = 'invalid_date_range'


@dataclass(frozen=True)
class ValidationError:
    """A recoverable problem with an order or an allocation."""

    kind: str
    message: str
    shortfall: float = 0.0
    current_amount: float = 0.0
    total_percentage: Optional[float] = None
    direction: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'message': self.message,
            'shortfall': self.shortfall,
            'currentAmount': self.current_amount,
            'totalPercentage': self.total_percentage,
            'direction': self.direction,
        }


@dataclass(frozen=True)
class Accepted:
    """The transition was applied; ``order`` carries the new status."""
    order: Order
    status: InvoiceStatusDefinition


@dataclass(frozen=True)
class Rejected:
    """The request was refused; the order was left unchanged."""
    order: Order
    error: ValidationError


@dataclass(frozen=True)
class RequiresAllocation:
    """Completion is payment-valid but must be committed with an allocation."""
    order: Order
    status: InvoiceStatusDefinition
    total_revenue: float
    total_cost: float


@dataclass(frozen=True)
class Committed:
    """Allocation and completion status applied together."""
    order: Order
    allocation: AllocationRecord


TransitionResult = Union[Accepted, Rejected, RequiresAllocation]
CommitResult = Union[Committed, Rejected]
