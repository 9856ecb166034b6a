"""Profit and loss by month, quarter and year.

Each completed order contributes its revenue (invoice grand total) and cost
(internal grand total). Orders with a committed allocation are booked across
the allocated months; the rest are booked in the month the job ended.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from ..calculations.allocation import normalize_allocation
from ..calculations.totals import InvoiceTotalsCalculator
from ..calculations.tax_rates import TaxRateTable
from ..models import Order, InvoiceStatusDefinition, EndStateType
from ..utils.dates import parse_date

logger = logging.getLogger(__name__)

PERIODS = ('monthly', 'quarterly', 'yearly')

LEDGER_COLUMNS = ['order_id', 'year', 'month', 'percentage', 'revenue', 'cost', 'profit']
SUMMARY_COLUMNS = ['period', 'revenue', 'costs', 'profit', 'order_count', 'profit_margin']


def select_completed(orders: Iterable[Order], definitions: Iterable[InvoiceStatusDefinition]) -> List[Order]:
    """Keep orders whose status is a 'done' end state."""
    done_codes = {d.value for d in definitions if d.end_state_type is EndStateType.DONE}
    return [order for order in orders if order.invoice_status in done_codes]


def _booking_date(order: Order):
    """Date a single-month order is booked on."""
    for value in (
        order.order_details.end_date,
        order.order_details.start_date,
        order.extra.get('statusUpdatedAt'),
        order.extra.get('createdAt'),
    ):
        booked = parse_date(value)
        if booked is not None:
            return booked
    return None


def build_ledger(
    orders: Iterable[Order],
    tax_rates: Optional[TaxRateTable] = None,
    debug: bool = False
) -> pd.DataFrame:
    """One row per order and booked month.

    Args:
        orders: Orders to include (normally only completed ones)
        tax_rates: Material company tax rates for the internal cost
        debug: Enable debug logging

    Returns:
        DataFrame with LEDGER_COLUMNS
    """
    calculator = InvoiceTotalsCalculator(tax_rates, debug)
    rows: List[Dict[str, Any]] = []
    skipped = 0

    for order in orders:
        totals = calculator.calculate(order)
        revenue, cost = totals.grand_total, totals.jl_grand_total
        record = normalize_allocation(order, revenue, cost)

        if record and record.allocations:
            for row in record.allocations:
                share = row.percentage / 100
                rows.append({
                    'order_id': order.id,
                    'year': row.year,
                    'month': row.month,
                    'percentage': row.percentage,
                    'revenue': revenue * share,
                    'cost': cost * share,
                    'profit': (revenue - cost) * share,
                })
            continue

        booked = _booking_date(order)
        if booked is None:
            logger.warning(f"Order {order.id} has no dates; left out of the P&L")
            skipped += 1
            continue
        rows.append({
            'order_id': order.id,
            'year': booked.year,
            'month': booked.month,
            'percentage': 100.0,
            'revenue': revenue,
            'cost': cost,
            'profit': revenue - cost,
        })

    if skipped:
        logger.info(f"Skipped {skipped} order(s) without dates")
    return pd.DataFrame(rows, columns=LEDGER_COLUMNS)


def _period_keys(ledger: pd.DataFrame, period: str) -> pd.Series:
    years = ledger['year'].astype(int).astype(str)
    months = ledger['month'].astype(int)
    if period == 'monthly':
        return years + '-' + months.map(lambda m: f"{m:02d}")
    if period == 'quarterly':
        return years + '-Q' + ((months - 1) // 3 + 1).astype(str)
    if period == 'yearly':
        return years
    raise ValueError(f"period must be one of: {', '.join(PERIODS)}")


def summarize_periods(ledger: pd.DataFrame, period: str = 'monthly') -> pd.DataFrame:
    """Aggregate the ledger into periods.

    ``order_count`` counts distinct orders with a share in the period.

    Returns:
        DataFrame with SUMMARY_COLUMNS sorted by period
    """
    if ledger.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    frame = ledger.assign(period=_period_keys(ledger, period))
    summary = frame.groupby('period', sort=True).agg(
        revenue=('revenue', 'sum'),
        costs=('cost', 'sum'),
        profit=('profit', 'sum'),
        order_count=('order_id', 'nunique'),
    ).reset_index()
    summary['profit_margin'] = summary.apply(
        lambda row: row['profit'] / row['revenue'] * 100 if row['revenue'] > 0 else 0.0,
        axis=1
    )
    return summary[SUMMARY_COLUMNS]


def calculate_ytd(ledger: pd.DataFrame, year: int) -> Dict[str, float]:
    """Year-to-date totals for a year."""
    year_rows = ledger[ledger['year'] == year] if not ledger.empty else ledger
    revenue = float(year_rows['revenue'].sum()) if not year_rows.empty else 0.0
    costs = float(year_rows['cost'].sum()) if not year_rows.empty else 0.0
    profit = float(year_rows['profit'].sum()) if not year_rows.empty else 0.0
    return {
        'revenue': revenue,
        'costs': costs,
        'profit': profit,
        'order_count': int(year_rows['order_id'].nunique()) if not year_rows.empty else 0,
        'profit_margin': profit / revenue * 100 if revenue > 0 else 0.0,
    }


def _change(current: float, previous: float, relative_to_abs: bool) -> Dict[str, float]:
    base = abs(previous) if relative_to_abs else previous
    if relative_to_abs:
        percentage = (current - previous) / base * 100 if previous != 0 else 0.0
    else:
        percentage = (current - previous) / base * 100 if previous > 0 else 0.0
    return {'change': current - previous, 'percentage': percentage}


def calculate_trends(summary: pd.DataFrame, period_key: str) -> Optional[Dict[str, Dict[str, float]]]:
    """Compare a period with the one before it in the summary.

    Returns:
        Changes in revenue, profit and margin, or None for the first period
        or an unknown period key
    """
    periods = list(summary['period'])
    if period_key not in periods:
        return None
    index = periods.index(period_key)
    if index == 0:
        return None

    current = summary.iloc[index]
    previous = summary.iloc[index - 1]
    return {
        'revenue': _change(current['revenue'], previous['revenue'], False),
        'profit': _change(current['profit'], previous['profit'], True),
        'margin': _change(current['profit_margin'], previous['profit_margin'], True),
    }
