"""Shared plumbing for commands that act on a single stored order."""

import re
from typing import Iterable, Optional, Tuple

import click
from sqlalchemy.orm import Session

from ...cli.base import BaseCommand
from ...cli.config import Config
from ...calculations.allocation import AllocationPlan, RevenueAllocationEngine
from ...calculations.results import Rejected, RequiresAllocation
from ...db.repository import OrderRepository

OVERRIDE_PATTERN = re.compile(r'^\s*(\d{4})-(\d{1,2})\s*=\s*(.+?)\s*$')


def parse_override(value: str) -> Tuple[int, int, str]:
    """Parse a ``YYYY-MM=PCT`` allocation override.

    Returns:
        (year, month, percentage text)

    Raises:
        click.BadParameter: If the value is not in the expected form
    """
    match = OVERRIDE_PATTERN.match(value or '')
    if not match:
        raise click.BadParameter(f"Expected YYYY-MM=PERCENT, got {value!r}")
    year, month, percentage = int(match.group(1)), int(match.group(2)), match.group(3)
    if not 1 <= month <= 12:
        raise click.BadParameter(f"Invalid month in {value!r}")
    return year, month, percentage.rstrip('%')


class OrderCommand(BaseCommand):
    """Base class for commands working on one order."""

    def __init__(self, config: Config, order_id: str):
        super().__init__(config)
        self.order_id = order_id

    def report_rejection(self, rejected: Rejected) -> None:
        """Show a rejection and keep it for the error summary."""
        self.error_tracker.add_rejection(self.order_id, rejected.error)
        click.secho(rejected.error.message, fg='red')

    def echo_plan(self, plan: AllocationPlan) -> None:
        click.echo("")
        click.echo(f"{'Month':<16}{'Percent':>10}{'Revenue':>14}{'Cost':>14}{'Profit':>14}")
        for row in plan.rows:
            click.echo(
                f"{row.label:<16}{row.percentage:>9.2f}%"
                f"{row.revenue:>14.2f}{row.cost:>14.2f}{row.profit:>14.2f}"
            )
        click.echo(
            f"{'Total':<16}{plan.total_percentage:>9.2f}%"
            f"{plan.total_revenue:>14.2f}{plan.total_cost:>14.2f}{plan.total_profit:>14.2f}"
        )

    def complete(
        self,
        session: Session,
        expected_version: int,
        pending: RequiresAllocation,
        start: Optional[str] = None,
        end: Optional[str] = None,
        overrides: Iterable[Tuple[int, int, str]] = (),
        dry_run: bool = False
    ) -> bool:
        """Allocate and complete an order the status gate handed over.

        Returns:
            bool: True if the completion was written
        """
        engine = RevenueAllocationEngine(self.debug)
        plan = engine.prepare_completion(pending, start, end)
        if isinstance(plan, Rejected):
            self.report_rejection(plan)
            return False

        for year, month, percentage in overrides:
            plan.override(year, month, percentage)

        for warning in plan.warnings:
            click.secho(f"Warning: {warning}", fg='yellow')
        self.echo_plan(plan)

        if dry_run:
            click.echo("\nDry run: allocation not saved")
            return False

        result = engine.commit_plan(pending.order, plan, pending.status)
        if isinstance(result, Rejected):
            self.report_rejection(result)
            return False

        stored = OrderRepository(session).complete_order(self.order_id, expected_version, result)
        if self.debug:
            self.logger.debug(f"Allocation stats: {engine.get_stats()}")
        click.secho(
            f"\nOrder {self.order_id} completed as {pending.status.value} (version {stored.version})",
            fg='green'
        )
        return True
