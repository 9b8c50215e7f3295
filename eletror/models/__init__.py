"""SQLAlchemy ORM models."""

from eletror.models.base import Base
from eletror.models.kv_entry import KeyValueEntry

__all__ = ["Base", "KeyValueEntry"]
