"""Import order documents and reference data from JSON backups.

The orders file holds either a list of order documents, an object with an
``orders`` list, or an object mapping order id to document. The optional
statuses file is a list of invoice status documents and the companies file a
list of ``{"name": ..., "taxRate": ...}`` objects with rates in percent.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import click

from ...cli.base import FileInputCommand, command_error_handler
from ...cli.config import Config
from ...db.repository import OrderRepository, ReferenceDataRepository
from ...models import Order, InvoiceStatusDefinition


def _read_json(path: Path) -> Any:
    with open(path, encoding='utf-8') as f:
        return json.load(f)


def order_documents(data: Any) -> List[Dict[str, Any]]:
    """Normalize the accepted backup layouts to a list of documents."""
    if isinstance(data, dict) and isinstance(data.get('orders'), list):
        data = data['orders']
    if isinstance(data, list):
        return [document for document in data if isinstance(document, dict)]
    if isinstance(data, dict):
        documents = []
        for order_id, document in data.items():
            if isinstance(document, dict):
                documents.append({'id': order_id, **document})
        return documents
    raise ValueError("Orders file must contain a list or an object of order documents")


class ImportOrdersCommand(FileInputCommand):
    """Command to load orders, statuses and material companies."""

    def __init__(
        self,
        config: Config,
        input_file: Path,
        statuses_file: Optional[Path] = None,
        companies_file: Optional[Path] = None
    ):
        super().__init__(config, input_file)
        self.statuses_file = statuses_file
        self.companies_file = companies_file

    @command_error_handler
    def execute(self) -> None:
        """Execute the import."""
        if not self.validate():
            raise click.Abort()

        documents = order_documents(_read_json(self.input_file))
        self.logger.info(f"Found {len(documents)} order document(s) in {self.input_file}")

        with self.session_manager as session:
            reference = ReferenceDataRepository(session)

            if self.statuses_file:
                statuses = _read_json(self.statuses_file)
                for document in statuses:
                    reference.upsert_status(InvoiceStatusDefinition.from_document(document))
                self.logger.info(f"Imported {len(statuses)} invoice status(es)")

            if self.companies_file:
                companies = _read_json(self.companies_file)
                for company in companies:
                    reference.upsert_material_company(company['name'], company.get('taxRate'))
                self.logger.info(f"Imported {len(companies)} material company record(s)")

            orders = OrderRepository(session)
            for document in documents:
                stored = orders.upsert(Order.from_document(document))
                if self.debug:
                    self.logger.debug(f"Order {stored.order.id} stored at version {stored.version}")

        click.secho(f"Imported {len(documents)} order(s)", fg='green')
