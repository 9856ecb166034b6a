"""Revenue allocation across the calendar months an order spans.

Completing an order books its revenue and cost against months. The default
split weights each month by the number of the job's days that fall in it;
the split can be edited before it is committed, and a commit is refused
unless the percentages add up to 100.
"""

import calendar
import enum
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any, Iterable, List, Optional, Sequence, Union

from ..constants import ALLOCATION_TOLERANCE
from ..models import (
    Order,
    InvoiceStatusDefinition,
    EndStateType,
    MonthlyAllocation,
    AllocationRecord,
)
from ..utils.dates import parse_date, to_iso, utc_now
from ..utils.numbers import to_number_or_default
from .base import BaseCalculator
from .results import (
    Committed,
    CommitResult,
    Rejected,
    RequiresAllocation,
    ValidationError,
    ALLOCATION_SUM,
    INVALID_DATE_RANGE,
)

DEFAULT_DONE_STATUS = 'done'


class AllocationStatus(enum.Enum):
    """How an allocation's percentages compare to 100%."""
    BALANCED = 'balanced'
    OVER = 'over'
    UNDER = 'under'


def allocation_status(total_percentage: float) -> AllocationStatus:
    if abs(total_percentage - 100) <= ALLOCATION_TOLERANCE:
        return AllocationStatus.BALANCED
    return AllocationStatus.OVER if total_percentage > 100 else AllocationStatus.UNDER


def build_default_allocation(
    start: Any,
    end: Any,
    total_revenue: float = 0.0,
    total_cost: float = 0.0
) -> Union[List[MonthlyAllocation], ValidationError]:
    """Split a date range into day-weighted monthly allocations.

    Both ends are inclusive: March 20 to April 10 is 22 days, 12 in March
    and 10 in April. A range inside one month yields a single 100% row.

    Args:
        start: First day of the job
        end: Last day of the job
        total_revenue: Revenue to spread over the rows
        total_cost: Cost to spread over the rows

    Returns:
        One allocation per month touched, in calendar order, or an
        invalid_date_range ValidationError when either date is missing or
        unreadable or the start falls after the end
    """
    start_day = parse_date(start)
    end_day = parse_date(end)
    if start_day is None or end_day is None:
        return ValidationError(kind=INVALID_DATE_RANGE, message="Please enter valid start and end dates")
    if start_day > end_day:
        return ValidationError(kind=INVALID_DATE_RANGE, message="Start date cannot be after end date")

    if (start_day.year, start_day.month) == (end_day.year, end_day.month):
        row = MonthlyAllocation(
            month=start_day.month,
            year=start_day.year,
            percentage=100.0,
            days=(end_day - start_day).days + 1
        )
        row.recompute(total_revenue, total_cost)
        return [row]

    total_days = (end_day - start_day).days + 1
    rows = []
    cursor = start_day
    while cursor <= end_day:
        last_day = calendar.monthrange(cursor.year, cursor.month)[1]
        month_end = date(cursor.year, cursor.month, last_day)
        days = (min(month_end, end_day) - cursor).days + 1
        row = MonthlyAllocation(
            month=cursor.month,
            year=cursor.year,
            percentage=days / total_days * 100,
            days=days
        )
        row.recompute(total_revenue, total_cost)
        rows.append(row)
        cursor = month_end + timedelta(days=1)

    return rows


class AllocationPlan:
    """An editable allocation for one order, prior to commit."""

    def __init__(
        self,
        rows: List[MonthlyAllocation],
        total_revenue: float,
        total_cost: float,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        warnings: Optional[List[str]] = None
    ):
        self.rows = rows
        self.total_revenue = total_revenue
        self.total_cost = total_cost
        self.start_date = start_date
        self.end_date = end_date
        self.warnings = warnings or []
        self._recompute()

    def _recompute(self) -> None:
        for row in self.rows:
            row.recompute(self.total_revenue, self.total_cost)

    def set_percentage(self, index: int, percentage: Any) -> None:
        """Override one row's percentage; non-numeric input counts as 0."""
        self.rows[index].percentage = to_number_or_default(percentage)
        self._recompute()

    def override(self, year: int, month: int, percentage: Any) -> None:
        """Override the percentage for a month, adding the month if needed."""
        for index, row in enumerate(self.rows):
            if row.year == year and row.month == month:
                self.set_percentage(index, percentage)
                return
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        self.rows.append(MonthlyAllocation(month=month, year=year, percentage=to_number_or_default(percentage)))
        self.rows.sort(key=lambda row: (row.year, row.month))
        self._recompute()

    @property
    def total_percentage(self) -> float:
        return sum(row.percentage for row in self.rows)

    @property
    def remaining(self) -> float:
        return 100 - self.total_percentage

    @property
    def status(self) -> AllocationStatus:
        return allocation_status(self.total_percentage)

    @property
    def total_profit(self) -> float:
        return sum(row.profit for row in self.rows)


def check_allocation_sum(allocations: Iterable[MonthlyAllocation]) -> Optional[ValidationError]:
    """Return a ValidationError unless the percentages sum to 100 ± 0.01."""
    total = sum(to_number_or_default(row.percentage) for row in allocations)
    status = allocation_status(total)
    if status is AllocationStatus.BALANCED:
        return None
    gap = abs(100 - total)
    if status is AllocationStatus.OVER:
        message = f"Total exceeds 100% by {gap:.1f}%"
    else:
        message = f"{gap:.1f}% remaining to reach 100%"
    return ValidationError(
        kind=ALLOCATION_SUM,
        message=message,
        total_percentage=total,
        direction=status.value,
    )


class RevenueAllocationEngine(BaseCalculator[AllocationPlan]):
    """Prepare, edit and commit monthly allocations for completed orders."""

    def calculate(self, order: Order, total_revenue: float = 0.0, total_cost: float = 0.0):
        """Build the default plan from the order's own start and end dates."""
        return self.prepare(order, total_revenue, total_cost)

    def prepare(
        self,
        order: Order,
        total_revenue: float,
        total_cost: float,
        start: Any = None,
        end: Any = None
    ) -> Union[AllocationPlan, Rejected]:
        """Build the default allocation plan for an order.

        Dates given here take precedence over the order's start and end
        dates. When only one date is known, the job is treated as a single
        day and a warning is added to the plan. When neither is known the
        order is rejected; no date range is invented.

        Args:
            order: Order being completed
            total_revenue: Revenue to allocate
            total_cost: Cost to allocate
            start: Optional start date override
            end: Optional end date override

        Returns:
            AllocationPlan, or Rejected with an invalid_date_range error
        """
        start_day = parse_date(start if start is not None else order.order_details.start_date)
        end_day = parse_date(end if end is not None else order.order_details.end_date)
        warnings = []

        if start_day is None and end_day is None:
            self.stats.rejected += 1
            return Rejected(order=order, error=ValidationError(
                kind=INVALID_DATE_RANGE,
                message=f"Order {order.id} has no start or end date; enter the job dates before completing it",
            ))
        if start_day is None or end_day is None:
            known = start_day or end_day
            missing = 'start' if start_day is None else 'end'
            warning = f"Order {order.id} has no {missing} date; using {known.isoformat()} for both ends"
            self.logger.warning(warning)
            warnings.append(warning)
            start_day = end_day = known

        rows = build_default_allocation(start_day, end_day)
        if isinstance(rows, ValidationError):
            self.stats.rejected += 1
            return Rejected(order=order, error=rows)

        self.stats.orders_calculated += 1
        if self.debug:
            self.logger.debug(
                f"Order {order.id} allocation over {len(rows)} month(s): "
                + ', '.join(f"{row.month_key} {row.percentage:.1f}%" for row in rows)
            )
        return AllocationPlan(rows, total_revenue, total_cost, start_day, end_day, warnings)

    def prepare_completion(
        self,
        pending: RequiresAllocation,
        start: Any = None,
        end: Any = None
    ) -> Union[AllocationPlan, Rejected]:
        """Build the plan for a completion handed over by the status gate."""
        return self.prepare(pending.order, pending.total_revenue, pending.total_cost, start, end)

    def commit(
        self,
        order: Order,
        allocations: Sequence[MonthlyAllocation],
        total_revenue: float,
        total_cost: float,
        done_status: Union[InvoiceStatusDefinition, str, None] = None,
        start_date: Any = None,
        end_date: Any = None,
        applied_at: Optional[datetime] = None
    ) -> CommitResult:
        """Apply an allocation and the completion status together.

        The returned order carries both the allocation record and the done
        status; on rejection the input order is returned untouched.

        Args:
            order: Order being completed
            allocations: Monthly rows; only month, year and percentage are read
            total_revenue: Revenue being allocated
            total_cost: Cost being allocated
            done_status: Target status (definition or code), 'done' by default
            start_date: Start of the date range used
            end_date: End of the date range used
            applied_at: Commit timestamp, now by default

        Returns:
            Committed or Rejected with an allocation_sum error
        """
        if isinstance(done_status, InvoiceStatusDefinition):
            if done_status.end_state_type is not EndStateType.DONE:
                raise ValueError(f"Status {done_status.value} is not a completion status")
            status_code = done_status.value
        else:
            status_code = done_status or DEFAULT_DONE_STATUS

        error = check_allocation_sum(allocations)
        if error is not None:
            self.stats.rejected += 1
            self.logger.info(f"Order {order.id} allocation refused: {error.message}")
            return Rejected(order=order, error=error)

        applied_at = applied_at or utc_now()
        rows = []
        for row in allocations:
            committed_row = MonthlyAllocation(
                month=row.month,
                year=row.year,
                percentage=to_number_or_default(row.percentage),
                days=row.days
            )
            committed_row.recompute(total_revenue, total_cost)
            rows.append(committed_row)

        start_day = parse_date(start_date)
        end_day = parse_date(end_date)
        record = AllocationRecord(
            allocations=rows,
            applied_at=applied_at,
            original_revenue=total_revenue,
            original_cost=total_cost,
            original_profit=total_revenue - total_cost,
            start_date=start_day,
            end_date=end_day,
        )

        order_details = order.order_details
        if start_day and end_day:
            order_details = replace(
                order_details,
                start_date=to_iso(start_day),
                end_date=to_iso(end_day),
                extra={**order_details.extra, 'lastUpdated': to_iso(applied_at)},
            )

        completed = order.with_updates(
            invoice_status=status_code,
            allocation=record.to_document(),
            order_details=order_details,
        )
        self.stats.committed += 1
        self.logger.info(
            f"Order {order.id} completed as {status_code} with {len(rows)} monthly allocation(s)"
        )
        return Committed(order=completed, allocation=record)

    def commit_plan(
        self,
        order: Order,
        plan: AllocationPlan,
        done_status: Union[InvoiceStatusDefinition, str, None] = None,
        applied_at: Optional[datetime] = None
    ) -> CommitResult:
        """Commit an edited plan."""
        return self.commit(
            order,
            plan.rows,
            plan.total_revenue,
            plan.total_cost,
            done_status=done_status,
            start_date=plan.start_date,
            end_date=plan.end_date,
            applied_at=applied_at,
        )


def commit_allocation(
    order: Order,
    allocations: Sequence[MonthlyAllocation],
    total_revenue: float,
    total_cost: float,
    done_status: Union[InvoiceStatusDefinition, str, None] = None,
    start_date: Any = None,
    end_date: Any = None,
    applied_at: Optional[datetime] = None
) -> CommitResult:
    """Validate and apply a monthly allocation to an order."""
    return RevenueAllocationEngine().commit(
        order,
        allocations,
        total_revenue,
        total_cost,
        done_status=done_status,
        start_date=start_date,
        end_date=end_date,
        applied_at=applied_at,
    )


def normalize_allocation(order: Order, total_revenue: Optional[float] = None, total_cost: Optional[float] = None) -> Optional[AllocationRecord]:
    """Read an order's stored allocation, including older record layouts."""
    if not order.allocation:
        return None
    return AllocationRecord.from_document(order.allocation, total_revenue, total_cost)
