"""
SQLAlchemy declarative base.

All models inherit from this Base class so that SQLAlchemy (and Alembic)
can track them together through ``Base.metadata``.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
