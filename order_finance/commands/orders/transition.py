"""Change an order's invoice status, completing it with an allocation when required."""

from typing import Iterable, Optional, Tuple

import click

from ...cli.base import command_error_handler
from ...cli.config import Config
from ...calculations.payments import mark_fully_paid, refund_to_zero
from ...calculations.results import (
    Accepted,
    Rejected,
    RequiresAllocation,
    PAYMENT_SHORTFALL,
    PAYMENT_PRESENT_ON_CANCEL,
)
from ...calculations.status_gate import StatusTransitionGate
from ...db.repository import OrderRepository
from ...models import resolve_status, default_done_status
from .base import OrderCommand


class TransitionStatusCommand(OrderCommand):
    """Command to move an order to another invoice status."""

    def __init__(
        self,
        config: Config,
        order_id: str,
        status: str,
        fix_payment: bool = False,
        start: Optional[str] = None,
        end: Optional[str] = None
    ):
        """Initialize the command.

        Args:
            config: Application configuration
            order_id: Order to move
            status: Target status code
            fix_payment: On a payment rejection, record the balance as paid
                (completion) or refund everything received (cancellation)
                and retry
            start: Job start date used for the allocation on completion
            end: Job end date used for the allocation on completion
        """
        super().__init__(config, order_id)
        self.status = status
        self.fix_payment = fix_payment
        self.start = start
        self.end = end

    def _remediate(self, rejected: Rejected, tax_rates):
        if rejected.error.kind == PAYMENT_SHORTFALL:
            click.secho(f"Recording ${rejected.error.shortfall:,.2f} as paid", fg='yellow')
            return mark_fully_paid(rejected.order, tax_rates)
        if rejected.error.kind == PAYMENT_PRESENT_ON_CANCEL:
            click.secho(f"Recording refund of ${rejected.error.current_amount:,.2f}", fg='yellow')
            return refund_to_zero(rejected.order)
        return None

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        with self.session_manager as session:
            definitions, tax_rates = self.load_reference_data(session)
            target = resolve_status(self.status, definitions)
            orders = OrderRepository(session)
            stored = orders.get(self.order_id)

            gate = StatusTransitionGate(tax_rates, self.debug)
            result = gate.request_transition(stored.order, target)

            if isinstance(result, Rejected) and self.fix_payment:
                remediated = self._remediate(result, tax_rates)
                if remediated is not None:
                    result = gate.request_transition(remediated, target)

            if isinstance(result, Accepted):
                saved = orders.save_order(result.order, stored.version)
                click.secho(
                    f"Order {self.order_id} moved to {target.value} (version {saved.version})",
                    fg='green'
                )
            elif isinstance(result, RequiresAllocation):
                self.complete(session, stored.version, result, self.start, self.end)
            else:
                self.report_rejection(result)

        if self.error_tracker.has_errors:
            self.error_tracker.log_summary(self.logger)
            raise click.Abort()


class AllocateOrderCommand(OrderCommand):
    """Command to preview or commit the monthly allocation of a completed job."""

    def __init__(
        self,
        config: Config,
        order_id: str,
        start: Optional[str] = None,
        end: Optional[str] = None,
        overrides: Iterable[Tuple[int, int, str]] = (),
        dry_run: bool = False,
        status: Optional[str] = None
    ):
        super().__init__(config, order_id)
        self.start = start
        self.end = end
        self.overrides = list(overrides)
        self.dry_run = dry_run
        self.status = status

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        with self.session_manager as session:
            definitions, tax_rates = self.load_reference_data(session)
            if self.status:
                target = resolve_status(self.status, definitions)
            else:
                target = default_done_status(definitions)
                if target is None:
                    raise ValueError("No completion status is defined; import invoice statuses first")

            stored = OrderRepository(session).get(self.order_id)
            result = StatusTransitionGate(tax_rates, self.debug).request_transition(stored.order, target)

            if isinstance(result, RequiresAllocation):
                self.complete(
                    session,
                    stored.version,
                    result,
                    self.start,
                    self.end,
                    self.overrides,
                    self.dry_run
                )
            elif isinstance(result, Rejected):
                self.report_rejection(result)
            else:
                raise ValueError(f"Status {target.value} is not a completion status")

        if self.error_tracker.has_errors:
            self.error_tracker.log_summary(self.logger)
            raise click.Abort()
