"""Contact endpoints."""
import logging
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from sqlalchemy.orm import Session

from app.api.deps import get_db, verify_admin_token
from app.schemas import (
    ContactCreate,
    ContactUpdate,
    ContactResponse,
    ContactImportResponse,
    SuccessResponse,
)
from app.services.contacts import (
    create_contact,
    delete_contact,
    get_contact,
    get_contacts,
    import_contacts_csv,
    update_contact,
)

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])

MAX_CSV_BYTES = 2 * 1024 * 1024


@router.get("", response_model=List[ContactResponse])
def list_contacts_endpoint(search: Optional[str] = None, db: Session = Depends(get_db)):
    """List contacts, optionally filtered by a search string over name, email and phone."""
    return get_contacts(db, search)


@router.post("", response_model=ContactResponse, status_code=201)
def create_contact_endpoint(contact: ContactCreate, db: Session = Depends(get_db)):
    try:
        return create_contact(db, contact.name, contact.phone, contact.email)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/import", response_model=ContactImportResponse)
async def import_contacts_endpoint(file: UploadFile = File(...), db: Session = Depends(get_db)):
    """
    Import contacts from a CSV file.

    The file needs a header row with a ``name`` column; ``phone`` and
    ``email`` columns are optional. Rows without a name are skipped and
    listed in ``skipped``.

    Example:
        Request:
            POST /api/v1/contacts/import  (multipart/form-data, field "file")
            name,phone,email
            Ada Lovelace,+44 20 7946 0000,ada@example.com
            ,,nobody@example.com

        Response (200):
            {
                "created": [{"id": "...", "name": "Ada Lovelace", ...}],
                "skipped": ["row 3: Name cannot be empty"]
            }
    """
    raw = await file.read(MAX_CSV_BYTES + 1)
    if len(raw) > MAX_CSV_BYTES:
        raise HTTPException(status_code=413, detail="CSV file is too large")

    try:
        content = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV must be UTF-8 encoded")

    try:
        result = import_contacts_csv(db, content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ContactImportResponse(
        created=[ContactResponse.model_validate(c) for c in result.created],
        skipped=result.skipped,
    )


@router.get("/{contact_id}", response_model=ContactResponse)
def get_contact_endpoint(contact_id: UUID, db: Session = Depends(get_db)):
    contact = get_contact(db, contact_id)
    if not contact:
        raise HTTPException(status_code=404, detail="Contact not found")
    return contact


@router.patch("/{contact_id}", response_model=ContactResponse)
def update_contact_endpoint(contact_id: UUID, changes: ContactUpdate, db: Session = Depends(get_db)):
    try:
        return update_contact(db, contact_id, **changes.model_dump(exclude_unset=True))
    except ValueError as e:
        status = 404 if str(e) == "Contact not found" else 400
        raise HTTPException(status_code=status, detail=str(e))


@router.delete("/{contact_id}", response_model=SuccessResponse)
def delete_contact_endpoint(contact_id: UUID, db: Session = Depends(get_db)):
    """
    Delete a contact.

    Invites already issued to the contact are kept: they remember the
    contact's name and their QR codes keep working.
    """
    if not delete_contact(db, contact_id):
        raise HTTPException(status_code=404, detail="Contact not found")
    logger.info(f"Contact deleted: contact_id={contact_id}")
    return SuccessResponse(success=True)
