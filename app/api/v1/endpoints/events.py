"""Event endpoints."""
import asyncio
import logging
import threading
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, File, HTTPException, Request, Response, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.api.deps import get_db, verify_admin_token
from app.core.config import settings
from app.core.rate_limit import limiter, RATE_LIMITS
from app.core.utils import safe_filename
from app.schemas import (
    EventCreate,
    EventUpdate,
    EventResponse,
    EventStatsResponse,
    ContactInvitesCreate,
    BlankInvitesCreate,
    InviteResponse,
    ExportRequest,
    SuccessResponse,
)
from app.services.events import (
    create_event,
    delete_event,
    get_event,
    get_event_stats,
    get_events,
    set_event_image,
    update_event,
)
from app.services.invites import create_blank_invites, create_contact_invites, get_event_invites
from app.services.export import ExportCancelled, export_invitations

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])

# Fields an update may explicitly set to null
NULLABLE_EVENT_FIELDS = {"expiration_date", "address", "latitude", "longitude", "template_id"}


def _raise_for(e: ValueError) -> None:
    status = 404 if str(e).endswith("not found") else 400
    raise HTTPException(status_code=status, detail=str(e))


@router.get("", response_model=List[EventResponse])
def list_events_endpoint(db: Session = Depends(get_db)):
    """All events, soonest first."""
    return get_events(db)


@router.post("", response_model=EventResponse, status_code=201)
def create_event_endpoint(event: EventCreate, db: Session = Depends(get_db)):
    """
    Create an event.

    QR placement fields are normalized to the card background: positions in
    [0, 1] mark the centre of the code, ``qr_size`` in (0, 1] is its edge as
    a fraction of the shorter image side.

    Example:
        Request:
            POST /api/v1/events
            {
                "title": "Spring Gala",
                "date": "2026-04-18T19:00:00Z",
                "qr_position_x": 0.5,
                "qr_position_y": 0.8,
                "qr_size": 0.25
            }
    """
    try:
        return create_event(db, **event.model_dump())
    except ValueError as e:
        _raise_for(e)


@router.get("/{event_id}", response_model=EventResponse)
def get_event_endpoint(event_id: UUID, db: Session = Depends(get_db)):
    event = get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.patch("/{event_id}", response_model=EventResponse)
def update_event_endpoint(event_id: UUID, changes: EventUpdate, db: Session = Depends(get_db)):
    values = {
        key: value
        for key, value in changes.model_dump(exclude_unset=True).items()
        if value is not None or key in NULLABLE_EVENT_FIELDS
    }
    try:
        return update_event(db, event_id, **values)
    except ValueError as e:
        _raise_for(e)


@router.delete("/{event_id}", response_model=SuccessResponse)
def delete_event_endpoint(event_id: UUID, db: Session = Depends(get_db)):
    """Delete an event with all of its invites and check-ins."""
    if not delete_event(db, event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"Event deleted: event_id={event_id}")
    return SuccessResponse(success=True)


@router.put("/{event_id}/image", response_model=EventResponse)
async def set_event_image_endpoint(event_id: UUID, file: UploadFile = File(...), db: Session = Depends(get_db)):
    """Upload the background image used for this event's invitation cards."""
    data = await file.read(settings.MAX_IMAGE_BYTES + 1)
    try:
        return await run_in_threadpool(set_event_image, db, event_id, data)
    except ValueError as e:
        _raise_for(e)


@router.delete("/{event_id}/image", response_model=EventResponse)
def clear_event_image_endpoint(event_id: UUID, db: Session = Depends(get_db)):
    try:
        return set_event_image(db, event_id, None)
    except ValueError as e:
        _raise_for(e)


@router.get("/{event_id}/stats", response_model=EventStatsResponse)
def event_stats_endpoint(event_id: UUID, db: Session = Depends(get_db)):
    """Invites issued, invites used at least once, invites never used, and total admissions."""
    try:
        stats = get_event_stats(db, event_id)
    except ValueError as e:
        _raise_for(e)
    return EventStatsResponse(**stats.__dict__)


@router.get("/{event_id}/invites", response_model=List[InviteResponse])
def list_event_invites_endpoint(event_id: UUID, db: Session = Depends(get_db)):
    try:
        return get_event_invites(db, event_id)
    except ValueError as e:
        _raise_for(e)


@router.post("/{event_id}/invites", response_model=List[InviteResponse], status_code=201)
def create_contact_invites_endpoint(event_id: UUID, request: ContactInvitesCreate, db: Session = Depends(get_db)):
    """
    Invite contacts to the event.

    Contacts that already hold an invite for this event are skipped; only
    newly created invites are returned.
    """
    try:
        return create_contact_invites(db, event_id, request.contact_ids, request.max_checkins)
    except ValueError as e:
        _raise_for(e)


@router.post("/{event_id}/invites/blank", response_model=List[InviteResponse], status_code=201)
def create_blank_invites_endpoint(event_id: UUID, request: BlankInvitesCreate, db: Session = Depends(get_db)):
    """Create general-admission invites not tied to any contact. ``max_checkins: null`` means unlimited."""
    try:
        return create_blank_invites(db, event_id, request.quantity, request.max_checkins)
    except ValueError as e:
        _raise_for(e)


@router.post("/{event_id}/export")
@limiter.limit(RATE_LIMITS["export"])
async def export_event_invites_endpoint(
    request: Request,
    event_id: UUID,
    export_request: ExportRequest,
    db: Session = Depends(get_db),
):
    """
    Download invitation cards as a ZIP of JPEGs.

    Each card carries the guest name and event title in its image metadata.
    Cards that cannot be rendered are left out and counted in the
    ``X-Export-Failed`` response header. If the client goes away the export
    is abandoned.
    """
    event = get_event(db, event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")

    invites = get_event_invites(db, event_id)
    if export_request.invite_ids is not None:
        wanted = set(export_request.invite_ids)
        invites = [invite for invite in invites if invite.id in wanted]
    if not invites:
        raise HTTPException(status_code=400, detail="No invites to export")

    cancel_event = threading.Event()
    try:
        result = await run_in_threadpool(export_invitations, invites, cancel_event)
    except asyncio.CancelledError:
        cancel_event.set()
        raise
    except ExportCancelled as e:
        raise HTTPException(status_code=499, detail=str(e))

    if result.exported == 0:
        raise HTTPException(status_code=422, detail="Invitation cards unavailable")

    # Header values must be latin-1; keep the ASCII part of the title
    title = safe_filename(event.title, fallback="event").encode("ascii", "ignore").decode().replace('"', "")
    filename = f"{title or 'event'}-invitations.zip"
    return Response(
        content=result.archive,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Export-Count": str(result.exported),
            "X-Export-Failed": str(len(result.failed)),
        },
    )
