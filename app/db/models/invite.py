"""Invite model."""
import uuid
from datetime import datetime, timezone as tz
from typing import Optional
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship

from app.db.base import Base
from app.core.constants import GENERAL_INVITE_LABEL


class Invite(Base):
    __tablename__ = "invites"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))

    # Who
    contact_id = Column(Uuid, ForeignKey("contacts.id", ondelete="SET NULL"), nullable=True)
    contact_name = Column(String(200), nullable=True)  # Snapshot label, kept when the contact goes away

    # What
    event_id = Column(Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False)

    # How many times the code may be used, None = unlimited
    max_checkins = Column(Integer, nullable=True)

    # Relationships
    contact = relationship("Contact", back_populates="invites")
    event = relationship("Event", back_populates="invites")
    checkins = relationship(
        "CheckIn",
        back_populates="invite",
        cascade="all, delete-orphan",
        order_by="CheckIn.created",
    )

    __table_args__ = (
        Index("idx_invites_event", "event_id"),
        Index("idx_invites_contact", "contact_id"),
    )

    @property
    def qr_token(self) -> str:
        """Payload printed into the QR code: the canonical id string."""
        return str(self.id)

    @property
    def display_name(self) -> str:
        if self.contact is not None:
            return self.contact.name
        if self.contact_name:
            return self.contact_name
        return GENERAL_INVITE_LABEL

    @property
    def checkin_count(self) -> int:
        return len(self.checkins)

    @property
    def has_reached_limit(self) -> bool:
        return self.max_checkins is not None and self.checkin_count >= self.max_checkins

    @property
    def last_checkin_at(self) -> Optional[datetime]:
        if not self.checkins:
            return None
        return self.checkins[-1].created
