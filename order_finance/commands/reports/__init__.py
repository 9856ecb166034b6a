"""
Report commands for the order-finance CLI.
"""

import json
from pathlib import Path
from typing import Optional

import click

from ...cli.base import BaseCommand, command_error_handler
from ...cli.config import Config
from ...db.repository import OrderRepository
from ...reports.profit_loss import (
    build_ledger,
    calculate_trends,
    calculate_ytd,
    select_completed,
    summarize_periods,
)


class ProfitLossCommand(BaseCommand):
    """Command to print profit and loss for completed orders."""

    def __init__(
        self,
        config: Config,
        period: str = 'monthly',
        year: Optional[int] = None,
        output_file: Optional[Path] = None
    ):
        """Initialize the command.

        Args:
            config: Application configuration
            period: monthly, quarterly or yearly
            year: Only show periods of this year, plus its year-to-date totals
            output_file: Optional path to save the summary (.csv or .json)
        """
        super().__init__(config)
        self.period = period
        self.year = year
        self.output_file = output_file

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        with self.session_manager as session:
            definitions, tax_rates = self.load_reference_data(session)
            orders = [stored.order for stored in OrderRepository(session).list_orders()]

        completed = select_completed(orders, definitions)
        self.logger.info(f"{len(completed)} of {len(orders)} order(s) are completed")

        ledger = build_ledger(completed, tax_rates, self.debug)
        summary = summarize_periods(ledger, self.period)
        if self.year is not None and not summary.empty:
            summary = summary[summary['period'].str.startswith(str(self.year))].reset_index(drop=True)

        if self.output_file:
            if self.output_file.suffix.lower() == '.json':
                summary.to_json(self.output_file, orient='records', indent=2)
            else:
                summary.to_csv(self.output_file, index=False)
            self.logger.info(f"Saved report to {self.output_file}")

        if self.config.output_format == 'json':
            payload = {'period': self.period, 'rows': json.loads(summary.to_json(orient='records'))}
            if self.year is not None:
                payload['ytd'] = calculate_ytd(ledger, self.year)
            click.echo(json.dumps(payload, indent=2))
            return
        if self.config.output_format == 'csv':
            click.echo(summary.to_csv(index=False), nl=False)
            return

        if summary.empty:
            click.echo("No completed orders in range")
            return

        click.echo(summary.to_string(index=False, float_format=lambda value: f"{value:,.2f}"))

        latest = summary['period'].iloc[-1]
        trends = calculate_trends(summary, latest)
        if trends:
            click.echo("")
            click.echo(
                f"{latest} vs previous: revenue {trends['revenue']['percentage']:+.1f}%, "
                f"profit {trends['profit']['percentage']:+.1f}%"
            )

        if self.year is not None:
            ytd = calculate_ytd(ledger, self.year)
            click.echo("")
            click.echo(
                f"{self.year} YTD: revenue ${ytd['revenue']:,.2f}, costs ${ytd['costs']:,.2f}, "
                f"profit ${ytd['profit']:,.2f} ({ytd['profit_margin']:.1f}%), "
                f"{ytd['order_count']} order(s)"
            )


__all__ = ['ProfitLossCommand']
