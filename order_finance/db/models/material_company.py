"""Material company reference table."""

from sqlalchemy import Column, String, DateTime, Numeric
from sqlalchemy.sql import func

from .base import Base


class MaterialCompany(Base):
    """A fabric supplier and the tax rate (in percent) it charges."""

    __tablename__ = 'MaterialCompany'

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False, unique=True)
    taxRate = Column(Numeric)
    createdAt = Column(DateTime, nullable=False, server_default=func.now())

    def __repr__(self):
        """Return string representation."""
        return f'<MaterialCompany(name="{self.name}", taxRate={self.taxRate})>'
