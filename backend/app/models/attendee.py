"""
Attendee model: one user's registration to one event.

Key design decisions:
- Unique constraint on (event_id, user_id) rejects duplicate registration
  even when two requests race past the existence check
- Rows are removed explicitly with their event or either user, inside the
  same transaction as the parent delete
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint

from app.db.base import Base


class Attendee(Base):
    __tablename__ = "attendees"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_attendee_event_user"),
    )

    def __repr__(self) -> str:
        return f"<Attendee(id={self.id}, event={self.event_id}, user={self.user_id})>"
