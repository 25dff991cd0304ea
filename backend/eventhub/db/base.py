"""
Declarative base and shared column mixins.
"""

from sqlalchemy import Column, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """Creation timestamp filled in by the database. Rows are never updated."""

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
