"""
Base command infrastructure for the order-finance CLI.

Commands open one session per run through ``session_manager``, load the
status definitions and material tax rates they need from it, and report
failures through ``command_error_handler``.
"""

import click
import logging
import time
from abc import ABC, abstractmethod
from functools import wraps
from pathlib import Path
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from .config import Config
from ..calculations.error_tracker import ErrorTracker
from ..calculations.tax_rates import TaxRateTable
from ..db.repository import ReferenceDataRepository
from ..db.session import SessionManager
from ..models import InvoiceStatusDefinition


class BaseCommand(ABC):
    """Base class for all CLI commands."""

    def __init__(self, config: Config):
        self.config = config
        self.logger = logging.getLogger(f"order_finance.commands.{self.__class__.__name__}")
        self.error_tracker = ErrorTracker()
        self._session_manager: Optional[SessionManager] = None

        ctx = click.get_current_context(silent=True)
        self.debug = bool(ctx and ctx.obj and ctx.obj.get('debug'))

    @property
    def session_manager(self) -> SessionManager:
        """Session manager for the configured store; tables are created on first use."""
        if self._session_manager is None:
            self._session_manager = SessionManager(self.config.database_url)
            self._session_manager.create_tables()
        return self._session_manager

    def load_reference_data(self, session: Session) -> Tuple[List[InvoiceStatusDefinition], TaxRateTable]:
        """Read status definitions and material tax rates for one command run."""
        reference = ReferenceDataRepository(session)
        definitions = reference.status_definitions()
        tax_rates = reference.material_tax_rates(self.config.material_tax_fallback)
        if self.debug:
            self.logger.debug(
                f"Loaded {len(definitions)} status definition(s) and "
                f"{len(tax_rates)} tax rate(s)"
            )
        return definitions, tax_rates

    @abstractmethod
    def execute(self) -> None:
        """Run the command."""

    def validate(self) -> bool:
        return self.config.validate()


class FileInputCommand(BaseCommand):
    """Base class for commands that read an input file."""

    def __init__(self, config: Config, input_file: Path, output_file: Optional[Path] = None):
        super().__init__(config)
        self.input_file = input_file
        self.output_file = output_file

    def validate(self) -> bool:
        """Check the configuration and that the input file is a readable file."""
        if not super().validate():
            return False

        if not self.input_file.is_file():
            self.logger.error(f"Input file not found: {self.input_file}")
            return False

        return True


def command_error_handler(f):
    """Turn unexpected failures into a red message and ``click.Abort``.

    Rejections a command has already reported raise ``click.Abort`` themselves
    and pass through untouched.
    """
    @wraps(f)
    def wrapper(self, *args, **kwargs):
        start = time.time()
        try:
            result = f(self, *args, **kwargs)
            if self.debug:
                self.logger.debug(f"{f.__qualname__} completed in {time.time() - start:.3f}s")
            return result

        except click.Abort:
            raise
        except Exception as e:
            self.error_tracker.add_error(
                'COMMAND_EXECUTION_ERROR',
                f"Command failed: {str(e)}",
                {'command': self.__class__.__name__, 'error_type': type(e).__name__}
            )
            click.secho(f"Error: {str(e)}", fg='red')
            if self.debug:
                self.logger.debug(f"{f.__qualname__} failed", exc_info=True)
            raise click.Abort()
    return wrapper
