"""Database session management.

A ``SessionManager`` is used as a context manager: the block's work is
committed on a clean exit and rolled back on an exception, so a completion
(allocation plus done status) is written entirely or not at all.
"""
import logging
from typing import Optional
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .models import Base

logger = logging.getLogger(__name__)


class SessionManager:
    """Opens sessions against the order store."""

    def __init__(self, database_url: Optional[str] = None, engine: Optional[Engine] = None):
        if engine is None:
            if not database_url:
                raise ValueError("A database URL or engine is required")
            engine = create_engine(database_url)
        self.engine = engine
        self.SessionLocal = sessionmaker(autoflush=False, bind=self.engine)
        self.session: Optional[Session] = None

    def create_tables(self) -> None:
        """Create the order, status and material company tables if missing."""
        Base.metadata.create_all(self.engine)

    def get_session(self) -> Session:
        return self.SessionLocal()

    def __enter__(self) -> Session:
        self.session = self.get_session()
        return self.session

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.session.commit()
            else:
                logger.debug(f"Rolling back after {exc_type.__name__}: {exc_val}")
                self.session.rollback()
        finally:
            self.session.close()
            self.session = None
