"""Template model."""
import uuid
from datetime import datetime, timezone as tz
from sqlalchemy import Column, String, DateTime, Float, LargeBinary, Uuid
from sqlalchemy.orm import relationship, deferred

from app.db.base import Base
from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE


class Template(Base):
    """Reusable invitation background with its own QR placement."""
    __tablename__ = "templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    created = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(tz.utc))
    updated = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(tz.utc),
        onupdate=lambda: datetime.now(tz.utc),
    )
    name = Column(String(200), nullable=False)
    image_data = deferred(Column(LargeBinary, nullable=False))

    # QR code placement
    qr_position_x = Column(Float, nullable=False, default=DEFAULT_QR_POSITION_X)
    qr_position_y = Column(Float, nullable=False, default=DEFAULT_QR_POSITION_Y)
    qr_size = Column(Float, nullable=False, default=DEFAULT_QR_SIZE)

    # Relationships
    events = relationship("Event", back_populates="template")
