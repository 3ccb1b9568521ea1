# backend/lesson_booking/models/learner.py
"""Learner model: a student profile owned by a parent account."""

from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.sql import func
import ulid

from ..database import Base


class Learner(Base):
    """Student profile owned by a parent account.

    Free-trial status is not stored here; it is derived from lesson history.
    """

    __tablename__ = "learners"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    parent_id = Column(String(26), nullable=False)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_learners_parent", "parent_id"),)

    def __repr__(self) -> str:
        return f"<Learner {self.id}: {self.name} parent={self.parent_id}>"
