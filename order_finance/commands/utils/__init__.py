"""
Utility commands for the order-finance CLI.
Connectivity and store diagnostics.
"""

import click
from sqlalchemy import func, select, text

from ...cli.base import BaseCommand, command_error_handler
from ...db.models import OrderDocument, InvoiceStatus, MaterialCompany


class TestConnectionCommand(BaseCommand):
    """Check that the order store is reachable and report what it holds."""

    @command_error_handler
    def execute(self) -> None:
        self.logger.info("Testing database connection...")

        with self.session_manager as session:
            session.execute(text("SELECT 1")).scalar()
            counts = {
                label: session.scalar(select(func.count()).select_from(model))
                for label, model in (
                    ('order(s)', OrderDocument),
                    ('status definition(s)', InvoiceStatus),
                    ('material company(ies)', MaterialCompany),
                )
            }

        click.secho("Connected to the order store", fg='green')
        click.echo(', '.join(f"{count} {label}" for label, count in counts.items()))


__all__ = ['TestConnectionCommand']
