"""ORM model for the key-value entries backing the persisted collections."""

from sqlalchemy import Column, DateTime, String, Text, func

from eletror.models.base import Base


class KeyValueEntry(Base):
    """
    One stored collection or record.

    key: collection key (e.g. 'eletror_items'); value: JSON text.
    """

    __tablename__ = "kv_entries"

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
