"""
Event model.

Key design decisions:
- Exactly one owner per event; `owner_id` is set from the authenticated
  user on create and never taken from the request body
- Index on `owner_id` for the owner-scoped listing and the cascade delete
- Index on `date` for ordering listings
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index

from app.db.base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    location = Column(String(255), nullable=False)

    __table_args__ = (
        Index("ix_events_owner_id", "owner_id"),
        Index("ix_events_date", "date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, owner={self.owner_id})>"
