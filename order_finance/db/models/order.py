"""Order document table."""

from sqlalchemy import Column, String, DateTime, Integer, JSON
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base


class OrderDocument(Base):
    """An order stored as a document.

    ``invoiceStatus`` is copied out of the document for filtering, and
    ``version`` is bumped on every write for optimistic concurrency.
    """

    __tablename__ = 'Order'

    id = Column(String, primary_key=True)
    invoiceStatus = Column(String, index=True)
    document = Column(JSON().with_variant(JSONB, 'postgresql'), nullable=False)
    version = Column(Integer, nullable=False, default=1)
    createdAt = Column(DateTime, nullable=False, server_default=func.now())
    modifiedAt = Column(DateTime(timezone=True))

    def __repr__(self):
        """Return string representation."""
        return f'<OrderDocument(id="{self.id}", status="{self.invoiceStatus}", version={self.version})>'
