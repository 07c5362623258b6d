"""Contact business logic."""
import csv
import io
import uuid
from dataclasses import dataclass, field
from typing import List, Optional

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from app.db.models import Contact
from app.core.sanitization import (
    MAX_EMAIL_LENGTH,
    MAX_PHONE_LENGTH,
    sanitize_name,
    sanitize_optional,
)

logger = structlog.get_logger(__name__)


@dataclass
class ContactImportResult:
    created: List[Contact] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)  # "row N: reason"


def create_contact(db: Session, name: str, phone: Optional[str] = None, email: Optional[str] = None) -> Contact:
    """Create a contact."""
    contact = Contact(
        name=sanitize_name(name),
        phone=sanitize_optional(phone, MAX_PHONE_LENGTH),
        email=sanitize_optional(email, MAX_EMAIL_LENGTH),
    )
    db.add(contact)
    db.commit()
    db.refresh(contact)
    return contact


def get_contact(db: Session, contact_id: uuid.UUID) -> Optional[Contact]:
    return db.query(Contact).filter(Contact.id == contact_id).first()


def get_contacts(db: Session, search: Optional[str] = None) -> List[Contact]:
    """List contacts by name, optionally filtered on name, email or phone (case-insensitive)."""
    query = db.query(Contact)
    if search:
        pattern = f"%{search.strip()}%"
        query = query.filter(
            or_(
                Contact.name.ilike(pattern),
                Contact.email.ilike(pattern),
                Contact.phone.ilike(pattern),
            )
        )
    return query.order_by(Contact.name, Contact.created).all()


def update_contact(db: Session, contact_id: uuid.UUID, **changes) -> Contact:
    """
    Update contact fields.

    Only keys present in ``changes`` are touched; passing ``phone=None``
    clears the phone number.

    Raises:
        ValueError: If the contact does not exist or a field is invalid
    """
    contact = get_contact(db, contact_id)
    if not contact:
        raise ValueError("Contact not found")

    if "name" in changes:
        contact.name = sanitize_name(changes["name"])
    if "phone" in changes:
        contact.phone = sanitize_optional(changes["phone"], MAX_PHONE_LENGTH)
    if "email" in changes:
        contact.email = sanitize_optional(changes["email"], MAX_EMAIL_LENGTH)

    db.commit()
    db.refresh(contact)
    return contact


def delete_contact(db: Session, contact_id: uuid.UUID) -> bool:
    """
    Delete a contact, keeping its invites.

    Each invite gets the contact's current name as its stored label and is
    detached, all in one transaction, so check-in history and printed cards
    stay valid and readable.
    """
    contact = get_contact(db, contact_id)
    if not contact:
        return False

    detached = 0
    for invite in list(contact.invites):
        invite.contact_name = contact.name
        invite.contact = None
        detached += 1

    db.delete(contact)
    db.commit()
    logger.info("contact_deleted", contact_id=str(contact_id), invites_detached=detached)
    return True


def import_contacts_csv(db: Session, content: str) -> ContactImportResult:
    """
    Import contacts from CSV text with a ``name,phone,email`` header.

    Column names are matched case-insensitively; phone and email columns are
    optional. Rows without a usable name are skipped and reported. All
    accepted rows are committed together.

    Raises:
        ValueError: If the header has no name column
    """
    reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
    if not reader.fieldnames:
        raise ValueError("CSV is empty")

    columns = {name.strip().lower(): name for name in reader.fieldnames if name}
    if "name" not in columns:
        raise ValueError("CSV must have a 'name' column")

    result = ContactImportResult()
    # Row 1 is the header
    for row_number, row in enumerate(reader, start=2):
        raw_name = row.get(columns["name"]) or ""
        try:
            contact = Contact(
                name=sanitize_name(raw_name),
                phone=sanitize_optional(row.get(columns["phone"]) if "phone" in columns else None, MAX_PHONE_LENGTH),
                email=sanitize_optional(row.get(columns["email"]) if "email" in columns else None, MAX_EMAIL_LENGTH),
            )
        except ValueError as e:
            result.skipped.append(f"row {row_number}: {e}")
            continue
        db.add(contact)
        result.created.append(contact)

    db.commit()
    for contact in result.created:
        db.refresh(contact)

    logger.info("contacts_imported", created=len(result.created), skipped=len(result.skipped))
    return result
