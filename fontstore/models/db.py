"""
SQLAlchemy ORM models for persistent storage.

The only server-side state is the client-scoped key-value storage that
backs each visitor's cart.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text, UniqueConstraint, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class StorageSlotDB(Base):
    """
    One key-value slot owned by a browsing client.

    A client (identified by cookie) may hold several keys; each key holds a
    single serialized blob.
    """

    __tablename__ = "storage_slots"
    __table_args__ = (UniqueConstraint("client_id", "key", name="uq_client_key"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    client_id: Mapped[str] = mapped_column(String(64), index=True)
    key: Mapped[str] = mapped_column(String(255))
    value: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), index=True
    )

    def __repr__(self) -> str:
        return f"<StorageSlotDB(client_id={self.client_id}, key={self.key})>"
