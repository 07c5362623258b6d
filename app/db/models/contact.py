"""Contact model."""
import uuid
from datetime import datetime, timezone as tz
from sqlalchemy import Column, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from app.db.base import Base


class Contact(Base):
    __tablename__ = "contacts"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    name = Column(String(200), nullable=False)
    phone = Column(String(50), nullable=True)
    email = Column(String(254), nullable=True)

    # Invites outlive their contact: deletion nullifies Invite.contact_id
    # after the name has been copied into Invite.contact_name
    invites = relationship("Invite", back_populates="contact")
