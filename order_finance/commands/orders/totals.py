"""Show the invoice totals of a stored order."""

import json
from typing import Optional

import click
import pandas as pd

from ...cli.base import command_error_handler
from ...cli.config import Config
from ...calculations.breakdown import CostBreakdownCalculator
from ...calculations.totals import InvoiceTotalsCalculator
from ...db.repository import OrderRepository
from .base import OrderCommand


class ShowTotalsCommand(OrderCommand):
    """Command to print an order's totals and cost breakdown."""

    def __init__(self, config: Config, order_id: str, output_format: Optional[str] = None):
        super().__init__(config, order_id)
        self.output_format = output_format or config.output_format

    @command_error_handler
    def execute(self) -> None:
        """Execute the command."""
        with self.session_manager as session:
            _, tax_rates = self.load_reference_data(session)
            order = OrderRepository(session).get(self.order_id).order

        totals = InvoiceTotalsCalculator(tax_rates, self.debug).calculate(order)
        breakdown = CostBreakdownCalculator(tax_rates, self.debug).calculate(order)

        if self.output_format == 'json':
            click.echo(json.dumps({
                'orderId': order.id,
                'invoiceStatus': order.invoice_status,
                'breakdown': breakdown.to_dict(),
                **totals.to_dict(),
                'profit': totals.profit,
            }, indent=2))
            return

        if self.output_format == 'csv':
            row = {'orderId': order.id, 'invoiceStatus': order.invoice_status}
            row.update(breakdown.to_dict())
            row.update(totals.to_dict())
            row['profit'] = totals.profit
            click.echo(pd.DataFrame([row]).to_csv(index=False), nl=False)
            return

        click.echo(f"Order {order.id} ({totals.kind.value}, status: {order.invoice_status or '-'})")
        click.echo(f"  Material:          ${breakdown.material:,.2f}")
        click.echo(f"  Labour:            ${breakdown.labour:,.2f}")
        click.echo(f"  Foam:              ${breakdown.foam:,.2f}")
        click.echo(f"  Painting:          ${breakdown.painting:,.2f}")
        click.echo(f"  Items subtotal:    ${totals.items_subtotal:,.2f}")
        click.echo(f"  Tax:               ${totals.tax_amount:,.2f}")
        click.echo(f"  Pickup/delivery:   ${totals.pickup_delivery_cost:,.2f}")
        if totals.credit_card_fee:
            click.echo(f"  Credit card fee:   ${totals.credit_card_fee:,.2f}")
        click.echo(f"  Grand total:       ${totals.grand_total:,.2f}")
        click.echo(f"  Amount paid:       ${totals.amount_paid:,.2f}")
        click.echo(f"  Balance due:       ${totals.balance_due:,.2f}")
        click.echo(f"  Internal cost:     ${totals.jl_grand_total:,.2f}")
        click.echo(f"  Profit:            ${totals.profit:,.2f}")
