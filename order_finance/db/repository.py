"""Reading and writing orders and reference data.

Order writes are guarded by the document's ``version``: the caller passes
the version it read, and the write only succeeds if nobody else wrote in the
meantime. Completion (allocation plus done status) goes through the same
guarded write as a single document update.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..calculations.results import Committed
from ..calculations.tax_rates import build_tax_rate_table, TaxRateTable
from ..constants import DEFAULT_MATERIAL_TAX_RATE
from ..exceptions import ConcurrentUpdateError, OrderNotFoundError
from ..models import Order, InvoiceStatusDefinition
from ..utils import generate_uuid, to_number_or_default, utc_now
from .models import OrderDocument, InvoiceStatus, MaterialCompany

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredOrder:
    """An order together with the version it was read at."""
    order: Order
    version: int


class OrderRepository:
    """Order documents in the database."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, order_id: str) -> StoredOrder:
        """Load an order.

        Raises:
            OrderNotFoundError: If the order does not exist
        """
        row = self.session.get(OrderDocument, order_id)
        if row is None:
            raise OrderNotFoundError(order_id)
        return StoredOrder(Order.from_document(row.document, order_id=row.id), row.version)

    def list_orders(self, statuses: Optional[Iterable[str]] = None) -> List[StoredOrder]:
        """Load all orders, optionally limited to some status codes."""
        query = select(OrderDocument).order_by(OrderDocument.createdAt, OrderDocument.id)
        if statuses is not None:
            query = query.where(OrderDocument.invoiceStatus.in_(list(statuses)))
        return [
            StoredOrder(Order.from_document(row.document, order_id=row.id), row.version)
            for row in self.session.scalars(query)
        ]

    def upsert(self, order: Order) -> StoredOrder:
        """Insert an order, or replace it unconditionally if it exists.

        Used for imports; interactive edits go through ``save_order``.
        """
        if not order.id:
            order = order.with_updates(id=generate_uuid())
        row = self.session.get(OrderDocument, order.id)
        if row is None:
            row = OrderDocument(
                id=order.id,
                invoiceStatus=order.invoice_status,
                document=order.to_document(),
                version=1
            )
            self.session.add(row)
            logger.debug(f"Inserted order {order.id}")
        else:
            row.document = order.to_document()
            row.invoiceStatus = order.invoice_status
            row.version = row.version + 1
            row.modifiedAt = utc_now()
            logger.debug(f"Replaced order {order.id}, now version {row.version}")
        self.session.flush()
        return StoredOrder(order, row.version)

    def save_order(self, order: Order, expected_version: int) -> StoredOrder:
        """Write an order if it is still at ``expected_version``.

        Raises:
            ConcurrentUpdateError: If the stored version has moved on
        """
        result = self.session.execute(
            update(OrderDocument)
            .where(OrderDocument.id == order.id, OrderDocument.version == expected_version)
            .values(
                document=order.to_document(),
                invoiceStatus=order.invoice_status,
                version=expected_version + 1,
                modifiedAt=utc_now()
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            if self.session.get(OrderDocument, order.id) is None:
                raise OrderNotFoundError(order.id)
            raise ConcurrentUpdateError(order.id, expected_version)
        self.session.expire_all()
        logger.debug(f"Saved order {order.id} at version {expected_version + 1}")
        return StoredOrder(order, expected_version + 1)

    def complete_order(self, order_id: str, expected_version: int, committed: Committed) -> StoredOrder:
        """Store a committed allocation and its done status in one write.

        Args:
            order_id: Order being completed
            expected_version: Version the order was read at before validation
            committed: Result of the allocation commit

        Raises:
            ConcurrentUpdateError: If the order changed since it was read
        """
        if committed.order.id != order_id:
            raise ValueError(f"Committed order {committed.order.id} does not match {order_id}")
        stored = self.save_order(committed.order, expected_version)
        logger.info(
            f"Order {order_id} completed with "
            f"{len(committed.allocation.allocations)} allocation row(s)"
        )
        return stored


class ReferenceDataRepository:
    """Invoice statuses and material companies."""

    def __init__(self, session: Session):
        self.session = session

    def status_definitions(self) -> List[InvoiceStatusDefinition]:
        """All status definitions in display order."""
        rows = self.session.scalars(
            select(InvoiceStatus).order_by(InvoiceStatus.sortOrder, InvoiceStatus.value)
        )
        return [
            InvoiceStatusDefinition(
                value=row.value,
                label=row.label or row.value,
                color=row.color or '#757575',
                is_end_state=row.isEndState,
                end_state_type=row.endStateType,
                sort_order=row.sortOrder or 0,
            )
            for row in rows
        ]

    def upsert_status(self, definition: InvoiceStatusDefinition) -> None:
        row = self.session.get(InvoiceStatus, definition.value)
        if row is None:
            row = InvoiceStatus(value=definition.value)
            self.session.add(row)
        row.label = definition.label or definition.value
        row.color = definition.color
        row.isEndState = definition.is_end_state
        row.endStateType = definition.end_state_type.value if definition.end_state_type else None
        row.sortOrder = int(definition.sort_order or 0)
        self.session.flush()

    def upsert_material_company(self, name: str, tax_rate) -> None:
        """Insert or update a material company; ``tax_rate`` is in percent."""
        row = self.session.scalars(
            select(MaterialCompany).where(MaterialCompany.name == name)
        ).first()
        if row is None:
            row = MaterialCompany(id=generate_uuid(), name=name)
            self.session.add(row)
        row.taxRate = to_number_or_default(tax_rate, None)
        self.session.flush()

    def material_tax_rates(self, default_rate: float = DEFAULT_MATERIAL_TAX_RATE) -> TaxRateTable:
        """Company name to decimal tax rate table."""
        rows = self.session.scalars(select(MaterialCompany).order_by(MaterialCompany.createdAt))
        return build_tax_rate_table(((row.name, row.taxRate) for row in rows), default_rate)
