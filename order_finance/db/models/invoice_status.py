"""Invoice status reference table."""

from sqlalchemy import Column, String, Boolean, Integer

from .base import Base


class InvoiceStatus(Base):
    """A configurable invoice status."""

    __tablename__ = 'InvoiceStatus'

    value = Column(String, primary_key=True)
    label = Column(String, nullable=False)
    color = Column(String)
    isEndState = Column(Boolean, nullable=False, default=False)
    endStateType = Column(String)
    sortOrder = Column(Integer, nullable=False, default=0)

    def __repr__(self):
        """Return string representation."""
        return f'<InvoiceStatus(value="{self.value}", endStateType="{self.endStateType}")>'
