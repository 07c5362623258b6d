"""CheckIn model."""
import uuid
from datetime import datetime, timezone as tz
from sqlalchemy import Column, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship

from app.db.base import Base


class CheckIn(Base):
    """One admission through the door. Written by the check-in engine only."""
    __tablename__ = "checkins"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    invite_id = Column(Uuid, ForeignKey("invites.id", ondelete="CASCADE"), nullable=False)

    # Relationships
    invite = relationship("Invite", back_populates="checkins")

    __table_args__ = (Index("idx_checkins_invite", "invite_id"),)
