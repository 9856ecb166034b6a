"""
Core CLI implementation for the order-finance package.
"""

import click
from pathlib import Path

from .config import Config
from .logging import setup_logging, get_logger
from ..commands.utils import TestConnectionCommand
from ..commands.orders import (
    ImportOrdersCommand,
    ShowTotalsCommand,
    TransitionStatusCommand,
    AllocateOrderCommand,
    parse_override
)
from ..commands.reports import ProfitLossCommand
from ..reports.profit_loss import PERIODS


@click.group()
@click.option('--debug', is_flag=True, help='Enable detailed debug output')
@click.pass_context
def cli(ctx, debug: bool):
    """Order totals, status changes and revenue allocation"""
    # Store debug flag in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    # Initialize config and store in context
    try:
        config = Config.from_env()
        config.validate()
        ctx.obj['config'] = config
    except Exception as e:
        setup_logging(debug=debug)
        click.echo(f"Error initializing configuration: {str(e)}", err=True)
        ctx.exit(1)

    setup_logging(debug=debug, level=config.log_level)

    logger = get_logger('cli')
    if debug:
        logger.debug("Debug mode enabled")
        logger.debug(f"Using database: {config.database_url}")


def _run(command) -> None:
    try:
        command.execute()
    except click.Abort:
        raise
    except Exception as e:
        click.secho(f"Error: {str(e)}", fg='red')
        raise click.Abort()


@cli.command()
@click.pass_context
def test_connection(ctx):
    """Test database connectivity"""
    _run(TestConnectionCommand(ctx.obj['config']))


@cli.command('import-orders')
@click.argument('file', type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path))
@click.option('--statuses', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='JSON list of invoice statuses')
@click.option('--companies', type=click.Path(exists=True, dir_okay=False, path_type=Path), help='JSON list of material companies')
@click.pass_context
def import_orders(ctx, file: Path, statuses: Path | None, companies: Path | None):
    """Import order documents from a JSON backup."""
    _run(ImportOrdersCommand(ctx.obj['config'], file, statuses, companies))


@cli.command()
@click.argument('order_id')
@click.option('--format', 'output_format', type=click.Choice(['text', 'json', 'csv']), help='Output format')
@click.pass_context
def totals(ctx, order_id: str, output_format: str | None):
    """Show invoice totals for an order."""
    _run(ShowTotalsCommand(ctx.obj['config'], order_id, output_format))


@cli.command()
@click.argument('order_id')
@click.argument('status')
@click.option('--fix-payment', is_flag=True, help='Record the balance as paid, or refund payments, when the change is refused for payment')
@click.option('--start', help='Job start date used for the allocation on completion')
@click.option('--end', help='Job end date used for the allocation on completion')
@click.pass_context
def transition(ctx, order_id: str, status: str, fix_payment: bool, start: str | None, end: str | None):
    """Move an order to another invoice status."""
    _run(TransitionStatusCommand(ctx.obj['config'], order_id, status, fix_payment, start, end))


@cli.command()
@click.argument('order_id')
@click.option('--start', help='Job start date, defaults to the order start date')
@click.option('--end', help='Job end date, defaults to the order end date')
@click.option('--set', 'overrides', multiple=True, help='Override a month as YYYY-MM=PERCENT')
@click.option('--status', help='Completion status code, defaults to the first done status')
@click.option('--dry-run', is_flag=True, help='Show the allocation without saving it')
@click.pass_context
def allocate(ctx, order_id: str, start: str | None, end: str | None, overrides, status: str | None, dry_run: bool):
    """Allocate an order's revenue across months and complete it."""
    parsed = [parse_override(value) for value in overrides]
    _run(AllocateOrderCommand(ctx.obj['config'], order_id, start, end, parsed, dry_run, status))


@cli.command('pl-report')
@click.option('--period', type=click.Choice(list(PERIODS)), default='monthly', help='Reporting period')
@click.option('--year', type=int, help='Only show this year, with year-to-date totals')
@click.option('--output', type=click.Path(file_okay=True, dir_okay=False, path_type=Path), help='Save the summary to a .csv or .json file')
@click.pass_context
def pl_report(ctx, period: str, year: int | None, output: Path | None):
    """Profit and loss for completed orders."""
    _run(ProfitLossCommand(ctx.obj['config'], period, year, output))
