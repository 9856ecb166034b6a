"""Tests for monthly revenue allocation."""

from datetime import date, datetime, timezone

import pytest

from ..calculations.allocation import (
    AllocationPlan,
    AllocationStatus,
    RevenueAllocationEngine,
    build_default_allocation,
    check_allocation_sum,
    commit_allocation,
    normalize_allocation,
)
from ..calculations.results import (
    Committed,
    Rejected,
    RequiresAllocation,
    ALLOCATION_SUM,
    ValidationError,
    INVALID_DATE_RANGE,
)
from ..models import MonthlyAllocation, AllocationRecord, Order

APPLIED_AT = datetime(2025, 4, 11, 12, 0, tzinfo=timezone.utc)


def _rows(*percentages):
    return [MonthlyAllocation(month=i + 1, year=2025, percentage=p) for i, p in enumerate(percentages)]


class TestDefaultAllocation:
    """Tests for the day-weighted default split."""

    def test_two_month_span(self):
        """March 20 to April 10 is 12 days in March and 10 in April."""
        rows = build_default_allocation('2025-03-20', '2025-04-10', 2200, 1100)

        assert [(row.year, row.month, row.days) for row in rows] == [(2025, 3, 12), (2025, 4, 10)]
        assert rows[0].percentage == pytest.approx(12 / 22 * 100)
        assert rows[1].percentage == pytest.approx(10 / 22 * 100)
        assert sum(row.percentage for row in rows) == pytest.approx(100)
        assert rows[0].revenue == pytest.approx(1200)
        assert rows[1].cost == pytest.approx(500)
        assert rows[1].profit == pytest.approx(500)

    def test_same_month_is_single_full_row(self):
        rows = build_default_allocation(date(2025, 6, 3), date(2025, 6, 28))

        assert len(rows) == 1
        assert rows[0].percentage == 100
        assert rows[0].month_key == '2025-06'

    def test_single_day(self):
        rows = build_default_allocation('2025-06-03', '2025-06-03')
        assert len(rows) == 1
        assert rows[0].days == 1

    def test_span_across_year_end(self):
        rows = build_default_allocation('2024-12-30', '2025-02-02')

        assert [row.month_key for row in rows] == ['2024-12', '2025-01', '2025-02']
        assert [row.days for row in rows] == [2, 31, 2]

    def test_leap_february(self):
        rows = build_default_allocation('2024-02-01', '2024-03-01')
        assert [row.days for row in rows] == [29, 1]

    def test_start_after_end(self):
        error = build_default_allocation('2025-04-10', '2025-03-20')
        assert isinstance(error, ValidationError)
        assert error.kind == INVALID_DATE_RANGE
        assert error.message == 'Start date cannot be after end date'

    @pytest.mark.parametrize('start, end', [
        (None, '2025-03-20'),
        ('2025-03-20', None),
        (None, None),
        ('not a date', '2025-03-20'),
    ])
    def test_missing_date(self, start, end):
        error = build_default_allocation(start, end)
        assert isinstance(error, ValidationError)
        assert error.kind == INVALID_DATE_RANGE


class TestAllocationSum:
    """Tests for the 100% rule."""

    def test_balanced_within_tolerance(self):
        assert check_allocation_sum(_rows(54.545, 45.46)) is None

    def test_over(self):
        error = check_allocation_sum(_rows(60, 50))

        assert error.kind == ALLOCATION_SUM
        assert error.direction == 'over'
        assert error.total_percentage == 110
        assert error.message == "Total exceeds 100% by 10.0%"

    def test_under(self):
        error = check_allocation_sum(_rows(60, 30))

        assert error.direction == 'under'
        assert error.message == "10.0% remaining to reach 100%"

    def test_just_outside_tolerance(self):
        assert check_allocation_sum(_rows(50, 49.98)) is not None


class TestAllocationPlan:
    """Tests for editing a plan before commit."""

    def test_edit_recomputes_amounts(self):
        plan = AllocationPlan(build_default_allocation('2025-03-20', '2025-04-10'), 1000, 400)
        plan.set_percentage(0, '70')
        plan.set_percentage(1, 30)

        assert plan.status is AllocationStatus.BALANCED
        assert plan.rows[0].revenue == pytest.approx(700)
        assert plan.rows[1].cost == pytest.approx(120)
        assert plan.total_profit == pytest.approx(600)

    def test_non_numeric_percentage_counts_as_zero(self):
        plan = AllocationPlan(_rows(50, 50), 100, 0)
        plan.set_percentage(1, 'abc')

        assert plan.total_percentage == 50
        assert plan.remaining == 50
        assert plan.status is AllocationStatus.UNDER

    def test_override_adds_month(self):
        plan = AllocationPlan(_rows(100), 100, 0)
        plan.override(2025, 1, 80)
        plan.override(2025, 5, 20)

        assert [row.month for row in plan.rows] == [1, 5]
        assert plan.status is AllocationStatus.BALANCED


class TestEngine:
    """Tests for preparing and committing allocations."""

    def _pending(self, order, statuses, revenue=276.0, cost=138.0):
        return RequiresAllocation(order=order, status=statuses['done'], total_revenue=revenue, total_cost=cost)

    def test_prepare_uses_order_dates(self, make_order, statuses):
        plan = RevenueAllocationEngine().prepare_completion(self._pending(make_order(), statuses))

        assert isinstance(plan, AllocationPlan)
        assert [row.month for row in plan.rows] == [3, 4]
        assert plan.total_revenue == 276.0
        assert plan.warnings == []

    def test_prepare_with_one_date_warns(self, make_order, statuses):
        order = make_order(orderDetails={'endDate': '2025-04-10'})
        plan = RevenueAllocationEngine().prepare_completion(self._pending(order, statuses))

        assert len(plan.rows) == 1
        assert plan.rows[0].month == 4
        assert len(plan.warnings) == 1

    def test_prepare_without_dates_is_rejected(self, make_order, statuses):
        order = make_order(orderDetails={})
        result = RevenueAllocationEngine().prepare_completion(self._pending(order, statuses))

        assert isinstance(result, Rejected)
        assert result.error.kind == INVALID_DATE_RANGE

    def test_prepare_with_reversed_dates_is_rejected(self, make_order, statuses):
        result = RevenueAllocationEngine().prepare(make_order(), 276, 138, '2025-05-01', '2025-04-01')

        assert isinstance(result, Rejected)
        assert result.error.message == "Start date cannot be after end date"

    def test_commit_applies_status_and_allocation(self, make_order, statuses):
        order = make_order()
        engine = RevenueAllocationEngine()
        plan = engine.prepare(order, 276.0, 138.0)
        result = engine.commit_plan(order, plan, statuses['done'], applied_at=APPLIED_AT)

        assert isinstance(result, Committed)
        assert result.order.invoice_status == 'done'
        assert order.invoice_status == 'in_progress'

        stored = result.order.allocation
        assert stored['method'] == 'manual'
        assert stored['monthIndexBase'] == 1
        assert stored['appliedAt'] == APPLIED_AT.isoformat()
        assert stored['originalProfit'] == pytest.approx(138)
        assert stored['dateRange'] == {'startDate': '2025-03-20', 'endDate': '2025-04-10'}
        assert [row['monthKey'] for row in stored['allocations']] == ['2025-03', '2025-04']
        assert all(row['calculatedAt'] == APPLIED_AT.isoformat() for row in stored['allocations'])
        assert result.order.order_details.extra['lastUpdated'] == APPLIED_AT.isoformat()

    def test_commit_refuses_unbalanced(self, make_order, statuses):
        order = make_order()
        result = commit_allocation(order, _rows(60, 30), 276.0, 138.0, statuses['done'])

        assert isinstance(result, Rejected)
        assert result.error.kind == ALLOCATION_SUM
        assert result.order is order
        assert result.order.allocation is None

    def test_commit_with_non_done_status(self, make_order, statuses):
        with pytest.raises(ValueError):
            commit_allocation(make_order(), _rows(100), 1, 0, statuses['cancelled'])

    def test_commit_defaults_to_done_code(self, make_order):
        result = commit_allocation(make_order(), _rows(100), 10.0, 4.0, applied_at=APPLIED_AT)
        assert result.order.invoice_status == 'done'


class TestNormalization:
    """Tests for reading stored allocation records."""

    def test_round_trip_current_layout(self, make_order, statuses):
        committed = commit_allocation(
            make_order(), build_default_allocation('2025-03-20', '2025-04-10'),
            276.0, 138.0, statuses['done'], '2025-03-20', '2025-04-10', APPLIED_AT
        )
        record = normalize_allocation(committed.order)

        assert [(row.year, row.month) for row in record.allocations] == [(2025, 3), (2025, 4)]
        assert record.total_percentage == pytest.approx(100)
        assert record.start_date == date(2025, 3, 20)
        assert record.applied_at == APPLIED_AT

    def test_legacy_zero_based_months(self):
        record = AllocationRecord.from_document({
            'allocations': [
                {'month': 2, 'year': 2025, 'percentage': 60},
                {'month': 3, 'year': 2025, 'percentage': 40},
            ],
            'originalRevenue': 1000,
            'originalCost': 500,
        })

        assert [row.month for row in record.allocations] == [3, 4]
        assert record.allocations[0].revenue == 600
        assert record.allocations[1].cost == 200
        assert record.original_profit == 500

    def test_legacy_month_key_only(self):
        record = AllocationRecord.from_document(
            {'allocations': [{'monthKey': '2024-11', 'percentage': 100}]},
            total_revenue=300, total_cost=100
        )

        assert (record.allocations[0].year, record.allocations[0].month) == (2024, 11)
        assert record.allocations[0].profit == 200

    def test_legacy_month_key_zero(self):
        record = AllocationRecord.from_document({'allocations': [{'monthKey': '2024-00', 'percentage': 100}]})
        assert record.allocations[0].month == 1

    def test_unreadable_rows_dropped(self):
        record = AllocationRecord.from_document({
            'allocations': [{'percentage': 50}, {'month': 'x', 'year': 2025, 'percentage': 50}]
        })
        assert record.allocations == []

    def test_missing_allocation(self):
        assert normalize_allocation(Order(id='x')) is None
