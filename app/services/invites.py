"""Invite business logic."""
import uuid
from typing import Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from app.db.models import Contact, Event, Invite
from app.core.constants import GENERAL_INVITE_LABEL, MAX_BLANK_INVITES, MAX_CHECKINS_LIMIT
from app.core.sanitization import MAX_NAME_LENGTH, sanitize_optional

logger = structlog.get_logger(__name__)


def _validate_max_checkins(max_checkins: Optional[int]) -> None:
    if max_checkins is not None and not 1 <= max_checkins <= MAX_CHECKINS_LIMIT:
        raise ValueError(f"Maximum check-ins must be between 1 and {MAX_CHECKINS_LIMIT}")


def _get_event_or_raise(db: Session, event_id: uuid.UUID) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise ValueError("Event not found")
    return event


def create_contact_invites(
    db: Session,
    event_id: uuid.UUID,
    contact_ids: Iterable[uuid.UUID],
    max_checkins: Optional[int] = None,
) -> List[Invite]:
    """
    Invite contacts to an event.

    Contacts that already hold an invite for the event are skipped, so the
    call is safe to repeat. Each new invite stores the contact's name as its
    fallback label.

    Raises:
        ValueError: If the event or any contact does not exist
    """
    _validate_max_checkins(max_checkins)
    event = _get_event_or_raise(db, event_id)

    wanted = list(dict.fromkeys(contact_ids))
    contacts = db.query(Contact).filter(Contact.id.in_(wanted)).all() if wanted else []
    found = {contact.id: contact for contact in contacts}
    missing = [cid for cid in wanted if cid not in found]
    if missing:
        raise ValueError(f"Contact not found: {missing[0]}")

    already_invited = {invite.contact_id for invite in event.invites if invite.contact_id is not None}

    created = []
    for contact_id in wanted:
        if contact_id in already_invited:
            continue
        contact = found[contact_id]
        invite = Invite(contact=contact, contact_name=contact.name, max_checkins=max_checkins)
        event.invites.append(invite)
        created.append(invite)

    db.commit()
    for invite in created:
        db.refresh(invite)

    logger.info(
        "contact_invites_created",
        event_id=str(event_id),
        created=len(created),
        skipped=len(wanted) - len(created),
    )
    return created


def create_blank_invites(
    db: Session,
    event_id: uuid.UUID,
    quantity: int,
    max_checkins: Optional[int] = 1,
) -> List[Invite]:
    """
    Create general-admission invites that are not tied to a contact.

    They are labelled "General Invite #n", numbering on from the event's
    current invite count.

    Raises:
        ValueError: If the event does not exist or quantity/limit are out of range
    """
    if not 1 <= quantity <= MAX_BLANK_INVITES:
        raise ValueError(f"Quantity must be between 1 and {MAX_BLANK_INVITES}")
    _validate_max_checkins(max_checkins)
    event = _get_event_or_raise(db, event_id)

    offset = len(event.invites)
    created = []
    for i in range(1, quantity + 1):
        invite = Invite(
            contact=None,
            contact_name=f"{GENERAL_INVITE_LABEL} #{offset + i}",
            max_checkins=max_checkins,
        )
        event.invites.append(invite)
        created.append(invite)

    db.commit()
    for invite in created:
        db.refresh(invite)

    logger.info("blank_invites_created", event_id=str(event_id), created=quantity, max_checkins=max_checkins)
    return created


def get_invite(db: Session, invite_id: uuid.UUID) -> Optional[Invite]:
    return db.query(Invite).filter(Invite.id == invite_id).first()


def get_event_invites(db: Session, event_id: uuid.UUID) -> List[Invite]:
    """
    Raises:
        ValueError: If the event does not exist
    """
    _get_event_or_raise(db, event_id)
    return db.query(Invite).filter(Invite.event_id == event_id).order_by(Invite.created).all()


def update_invite(db: Session, invite_id: uuid.UUID, **changes) -> Invite:
    """
    Change an invite's check-in limit or stored label.

    Lowering the limit below the number of recorded check-ins is allowed;
    the invite simply stops admitting.

    Raises:
        ValueError: If the invite does not exist or the limit is out of range
    """
    invite = get_invite(db, invite_id)
    if not invite:
        raise ValueError("Invite not found")

    if "max_checkins" in changes:
        _validate_max_checkins(changes["max_checkins"])
        invite.max_checkins = changes["max_checkins"]
    if "contact_name" in changes:
        invite.contact_name = sanitize_optional(changes["contact_name"], MAX_NAME_LENGTH)

    db.commit()
    db.refresh(invite)
    return invite


def delete_invite(db: Session, invite_id: uuid.UUID) -> bool:
    """Delete an invite and its check-ins. Its QR code stops resolving."""
    invite = get_invite(db, invite_id)
    if not invite:
        return False

    db.delete(invite)
    db.commit()
    logger.info("invite_deleted", invite_id=str(invite_id))
    return True
