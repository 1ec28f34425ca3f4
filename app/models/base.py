from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime
from datetime import datetime

Base = declarative_base()


def utcnow() -> datetime:
    """Naive UTC timestamp, the format every timestamp column stores."""
    return datetime.utcnow()


class TimestampMixin:
    """Mixin for timestamp columns"""
    __abstract__ = True
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime, default=utcnow, nullable=False)

__all__ = ["Base", "TimestampMixin", "utcnow"]
