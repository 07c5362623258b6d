"""Event business logic."""
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models import CheckIn, Event, Invite, Template
from app.core.config import settings
from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE
from app.core.sanitization import (
    MAX_ADDRESS_LENGTH,
    MAX_SUBTITLE_LENGTH,
    sanitize_name,
    sanitize_optional,
    sanitize_text,
)
from app.core.utils import to_utc
from app.services.card import decode_image

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class EventStats:
    total_invites: int
    checked_in: int      # invites with at least one check-in
    remaining: int       # invites never checked in
    total_checkins: int  # every recorded admission, repeats included


def validate_placement(position_x: float, position_y: float, size: float) -> None:
    """
    Raises:
        ValueError: If a position is outside [0, 1] or size outside (0, 1]
    """
    if not 0.0 <= position_x <= 1.0 or not 0.0 <= position_y <= 1.0:
        raise ValueError("QR position must be between 0 and 1")
    if not 0.0 < size <= 1.0:
        raise ValueError("QR size must be greater than 0 and at most 1")


def validate_image_bytes(data: bytes) -> None:
    """
    Raises:
        ValueError: If the image is too large or cannot be decoded
    """
    if len(data) > settings.MAX_IMAGE_BYTES:
        raise ValueError(f"Image exceeds maximum size of {settings.MAX_IMAGE_BYTES} bytes")
    if decode_image(data) is None:
        raise ValueError("Image could not be decoded")


def create_event(
    db: Session,
    title: str,
    date: datetime,
    subtitle: str = "",
    expiration_date: Optional[datetime] = None,
    address: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    qr_position_x: float = DEFAULT_QR_POSITION_X,
    qr_position_y: float = DEFAULT_QR_POSITION_Y,
    qr_size: float = DEFAULT_QR_SIZE,
    template_id: Optional[uuid.UUID] = None,
) -> Event:
    """Create a new event."""
    date_utc = to_utc(date)
    expiration_utc = to_utc(expiration_date) if expiration_date else None
    if expiration_utc is not None and expiration_utc < date_utc:
        raise ValueError("Expiration date must not be before the event date")

    validate_placement(qr_position_x, qr_position_y, qr_size)

    if template_id is not None and not db.query(Template.id).filter(Template.id == template_id).first():
        raise ValueError("Template not found")

    event = Event(
        title=sanitize_name(title, field="Title"),
        subtitle=sanitize_text(subtitle or "", max_length=MAX_SUBTITLE_LENGTH),
        date=date_utc,
        expiration_date=expiration_utc,
        address=sanitize_optional(address, MAX_ADDRESS_LENGTH),
        latitude=latitude,
        longitude=longitude,
        qr_position_x=qr_position_x,
        qr_position_y=qr_position_y,
        qr_size=qr_size,
        template_id=template_id,
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    logger.info("event_created", event_id=str(event.id))
    return event


def get_event(db: Session, event_id: uuid.UUID) -> Optional[Event]:
    return db.query(Event).filter(Event.id == event_id).first()


def get_events(db: Session) -> List[Event]:
    """All events, soonest first."""
    return db.query(Event).order_by(Event.date, Event.created).all()


def update_event(db: Session, event_id: uuid.UUID, **changes) -> Event:
    """
    Update event fields present in ``changes``.

    Raises:
        ValueError: If the event or referenced template does not exist, or a value is invalid
    """
    event = get_event(db, event_id)
    if not event:
        raise ValueError("Event not found")

    try:
        _apply_event_changes(db, event, changes)
    except ValueError:
        db.rollback()
        raise

    db.commit()
    db.refresh(event)
    return event


def _apply_event_changes(db: Session, event: Event, changes: dict) -> None:
    if "title" in changes:
        event.title = sanitize_name(changes["title"], field="Title")
    if "subtitle" in changes:
        event.subtitle = sanitize_text(changes["subtitle"] or "", max_length=MAX_SUBTITLE_LENGTH)
    if changes.get("date") is not None:
        event.date = to_utc(changes["date"])
    if "expiration_date" in changes:
        event.expiration_date = to_utc(changes["expiration_date"]) if changes["expiration_date"] else None
    if "address" in changes:
        event.address = sanitize_optional(changes["address"], MAX_ADDRESS_LENGTH)
    if "latitude" in changes:
        event.latitude = changes["latitude"]
    if "longitude" in changes:
        event.longitude = changes["longitude"]
    if "template_id" in changes:
        template_id = changes["template_id"]
        if template_id is not None and not db.query(Template.id).filter(Template.id == template_id).first():
            raise ValueError("Template not found")
        event.template_id = template_id

    if event.expiration_date is not None and to_utc(event.expiration_date) < to_utc(event.date):
        raise ValueError("Expiration date must not be before the event date")

    placement = (
        changes.get("qr_position_x", event.qr_position_x),
        changes.get("qr_position_y", event.qr_position_y),
        changes.get("qr_size", event.qr_size),
    )
    validate_placement(*placement)
    event.qr_position_x, event.qr_position_y, event.qr_size = placement


def set_event_image(db: Session, event_id: uuid.UUID, image_data: Optional[bytes]) -> Event:
    """
    Set or clear the event's card background.

    Raises:
        ValueError: If the event does not exist or the image is unusable
    """
    event = get_event(db, event_id)
    if not event:
        raise ValueError("Event not found")

    if image_data is not None:
        validate_image_bytes(image_data)

    event.image_data = image_data
    db.commit()
    db.refresh(event)
    logger.info("event_image_updated", event_id=str(event_id), cleared=image_data is None)
    return event


def delete_event(db: Session, event_id: uuid.UUID) -> bool:
    """Delete an event together with its invites and their check-ins."""
    event = get_event(db, event_id)
    if not event:
        return False

    db.delete(event)
    db.commit()
    logger.info("event_deleted", event_id=str(event_id))
    return True


def get_event_stats(db: Session, event_id: uuid.UUID) -> EventStats:
    """
    Attendance figures for an event.

    Raises:
        ValueError: If the event does not exist
    """
    if not db.query(Event.id).filter(Event.id == event_id).first():
        raise ValueError("Event not found")

    total_invites = db.query(func.count(Invite.id)).filter(Invite.event_id == event_id).scalar()
    checked_in = (
        db.query(func.count(func.distinct(CheckIn.invite_id)))
        .join(Invite, CheckIn.invite_id == Invite.id)
        .filter(Invite.event_id == event_id)
        .scalar()
    )
    total_checkins = (
        db.query(func.count(CheckIn.id))
        .join(Invite, CheckIn.invite_id == Invite.id)
        .filter(Invite.event_id == event_id)
        .scalar()
    )

    return EventStats(
        total_invites=total_invites,
        checked_in=checked_in,
        remaining=total_invites - checked_in,
        total_checkins=total_checkins,
    )
