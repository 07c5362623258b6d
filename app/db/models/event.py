"""Event model."""
import uuid
from datetime import datetime, timezone as tz
from sqlalchemy import Column, String, DateTime, Float, LargeBinary, ForeignKey, Uuid, Index
from sqlalchemy.orm import column_property, deferred, relationship

from app.db.base import Base
from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE


class Event(Base):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )

    # What
    title = Column(String(200), nullable=False)
    subtitle = Column(String(500), nullable=False, default="")
    # When
    date = Column(DateTime(timezone=True), nullable=False)
    expiration_date = Column(DateTime(timezone=True), nullable=True)
    # Where
    address = Column(String(500), nullable=True)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    # Invitation card
    image_data = deferred(Column(LargeBinary, nullable=True))
    qr_position_x = Column(Float, nullable=False, default=DEFAULT_QR_POSITION_X)
    qr_position_y = Column(Float, nullable=False, default=DEFAULT_QR_POSITION_Y)
    qr_size = Column(Float, nullable=False, default=DEFAULT_QR_SIZE)
    template_id = Column(Uuid, ForeignKey("templates.id", ondelete="SET NULL"), nullable=True)

    # Relationships
    template = relationship("Template", back_populates="events")
    invites = relationship(
        "Invite",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Invite.created",
    )

    __table_args__ = (Index("idx_events_date", "date"),)


# Checked in SQL so listing events never loads the deferred image bytes
Event.has_image = column_property(Event.__table__.c.image_data.isnot(None))
