"""Monthly revenue allocation records."""

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from ..utils.dates import parse_date, to_iso
from ..utils.numbers import to_number_or_default

logger = logging.getLogger(__name__)

ALLOCATION_METHOD_MANUAL = 'manual'

# Records written by this package store calendar months (1-12). Older records
# carry 0-based months in ``month`` and sometimes only a ``monthKey``.
MONTH_INDEX_BASE = 1


def month_key(year: int, month: int) -> str:
    """Format a period key such as ``2025-03``."""
    return f"{year}-{month:02d}"


@dataclass
class MonthlyAllocation:
    """Share of an order's revenue and cost booked in one calendar month."""

    month: int
    year: int
    percentage: float
    revenue: float = 0.0
    cost: float = 0.0
    profit: float = 0.0
    days: Optional[int] = None

    @property
    def month_key(self) -> str:
        return month_key(self.year, self.month)

    @property
    def label(self) -> str:
        return f"{calendar.month_name[self.month]} {self.year}"

    def recompute(self, total_revenue: float, total_cost: float) -> None:
        """Recalculate revenue, cost and profit from the percentage."""
        self.revenue = total_revenue * self.percentage / 100
        self.cost = total_cost * self.percentage / 100
        self.profit = self.revenue - self.cost

    def to_document(self, calculated_at: Optional[datetime] = None) -> Dict[str, Any]:
        document = {
            'month': self.month,
            'year': self.year,
            'percentage': self.percentage,
            'revenue': self.revenue,
            'cost': self.cost,
            'profit': self.profit,
            'monthKey': self.month_key,
        }
        if calculated_at is not None:
            document['calculatedAt'] = to_iso(calculated_at)
        return document


@dataclass
class AllocationRecord:
    """The allocation stored on an order when it is completed."""

    allocations: List[MonthlyAllocation] = field(default_factory=list)
    applied_at: Optional[datetime] = None
    method: str = ALLOCATION_METHOD_MANUAL
    original_revenue: float = 0.0
    original_cost: float = 0.0
    original_profit: float = 0.0
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @property
    def total_percentage(self) -> float:
        return sum(row.percentage for row in self.allocations)

    def to_document(self) -> Dict[str, Any]:
        """Serialize for the order document's ``allocation`` field."""
        return {
            'method': self.method,
            'monthIndexBase': MONTH_INDEX_BASE,
            'allocations': [row.to_document(self.applied_at) for row in self.allocations],
            'appliedAt': to_iso(self.applied_at),
            'originalRevenue': self.original_revenue,
            'originalCost': self.original_cost,
            'originalProfit': self.original_profit,
            'dateRange': {
                'startDate': to_iso(self.start_date),
                'endDate': to_iso(self.end_date),
            },
        }

    @classmethod
    def from_document(
        cls,
        document: Dict[str, Any],
        total_revenue: Optional[float] = None,
        total_cost: Optional[float] = None
    ) -> Optional['AllocationRecord']:
        """Read a stored allocation, including older record layouts.

        Rows whose month cannot be determined are dropped with a warning.
        Missing revenue, cost or profit are derived from the percentage and
        the order totals (``total_revenue``/``total_cost`` take precedence
        over the stored originals).

        Args:
            document: Stored allocation mapping
            total_revenue: Current order revenue, if known
            total_cost: Current order cost, if known

        Returns:
            The allocation record, or None if ``document`` is empty
        """
        if not document:
            return None

        revenue_total = total_revenue if total_revenue else to_number_or_default(document.get('originalRevenue'))
        cost_total = total_cost if total_cost else to_number_or_default(document.get('originalCost'))
        current_base = document.get('monthIndexBase') == MONTH_INDEX_BASE

        rows = []
        for item in document.get('allocations') or []:
            period = _extract_month_year(item, current_base)
            if period is None:
                logger.warning(f"Could not extract month/year from allocation item: {item}")
                continue
            month, year = period
            percentage = to_number_or_default(item.get('percentage'))
            revenue = item['revenue'] if 'revenue' in item else revenue_total * percentage / 100
            cost = item['cost'] if 'cost' in item else cost_total * percentage / 100
            revenue = to_number_or_default(revenue)
            cost = to_number_or_default(cost)
            profit = to_number_or_default(item['profit']) if 'profit' in item else revenue - cost
            rows.append(MonthlyAllocation(
                month=month,
                year=year,
                percentage=percentage,
                revenue=revenue,
                cost=cost,
                profit=profit
            ))

        date_range = document.get('dateRange') or {}
        applied_at = document.get('appliedAt')
        if isinstance(applied_at, str):
            try:
                applied_at = datetime.fromisoformat(applied_at.replace('Z', '+00:00'))
            except ValueError:
                applied_at = None
        elif not isinstance(applied_at, datetime):
            applied_day = parse_date(applied_at)
            applied_at = datetime(applied_day.year, applied_day.month, applied_day.day) if applied_day else None

        original_revenue = to_number_or_default(document.get('originalRevenue'), revenue_total)
        original_cost = to_number_or_default(document.get('originalCost'), cost_total)
        return cls(
            allocations=rows,
            applied_at=applied_at,
            method=document.get('method') or ALLOCATION_METHOD_MANUAL,
            original_revenue=original_revenue,
            original_cost=original_cost,
            original_profit=to_number_or_default(
                document.get('originalProfit'), original_revenue - original_cost
            ),
            start_date=parse_date(date_range.get('startDate')),
            end_date=parse_date(date_range.get('endDate')),
        )


def _extract_month_year(item: Dict[str, Any], current_base: bool) -> Optional[tuple]:
    """Return (month, year) with a 1-based month, or None."""
    if item.get('month') is not None and item.get('year') is not None:
        month = to_number_or_default(item.get('month'), -1)
        year = to_number_or_default(item.get('year'), -1)
        if month != int(month) or year != int(year):
            return None
        month, year = int(month), int(year)
        if not current_base and 0 <= month <= 11:
            month += 1
        if 1 <= month <= 12 and year > 0:
            return month, year
        return None

    key = item.get('monthKey')
    if isinstance(key, str) and '-' in key:
        year_part, month_part = key.split('-')[:2]
        try:
            year, month = int(year_part), int(month_part)
        except ValueError:
            return None
        if month == 0:
            month = 1
        if 1 <= month <= 12 and year > 0:
            return month, year
    return None
