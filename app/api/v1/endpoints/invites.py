"""Invite endpoints."""
import logging
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.api.deps import get_db, verify_admin_token
from app.core.rate_limit import limiter, RATE_LIMITS
from app.schemas import InviteUpdate, InviteResponse, SuccessResponse
from app.services.card import render_invitation_card_bytes
from app.services.invites import delete_invite, get_invite, update_invite

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])

CARD_MEDIA_TYPES = {"jpeg": "image/jpeg", "png": "image/png"}


@router.get("/{invite_id}", response_model=InviteResponse)
def get_invite_endpoint(invite_id: UUID, db: Session = Depends(get_db)):
    invite = get_invite(db, invite_id)
    if not invite:
        raise HTTPException(status_code=404, detail="Invite not found")
    return invite


@router.patch("/{invite_id}", response_model=InviteResponse)
def update_invite_endpoint(invite_id: UUID, changes: InviteUpdate, db: Session = Depends(get_db)):
    """Change the check-in limit (``null`` = unlimited) or the stored label."""
    try:
        return update_invite(db, invite_id, **changes.model_dump(exclude_unset=True))
    except ValueError as e:
        status = 404 if str(e) == "Invite not found" else 400
        raise HTTPException(status_code=status, detail=str(e))


@router.delete("/{invite_id}", response_model=SuccessResponse)
def delete_invite_endpoint(invite_id: UUID, db: Session = Depends(get_db)):
    """Delete an invite and its check-ins. Its printed QR code will scan as unknown."""
    if not delete_invite(db, invite_id):
        raise HTTPException(status_code=404, detail="Invite not found")
    return SuccessResponse(success=True)


@router.get("/{invite_id}/card")
@limiter.limit(RATE_LIMITS["card"])
async def invite_card_endpoint(
    request: Request,
    invite_id: UUID,
    format: str = "jpeg",
    db: Session = Depends(get_db),
):
    """
    Render the invite's invitation card.

    The card is the event background (or its template) with the invite's QR
    code placed on it, or the bare QR code when the event has no background.
    Guest name and event title are embedded as image metadata.

    Raises:
        HTTPException: 404 if the invite does not exist
        HTTPException: 422 if the background cannot be decoded
    """
    media_type = CARD_MEDIA_TYPES.get(format.lower())
    if media_type is None:
        raise HTTPException(status_code=400, detail="Format must be 'jpeg' or 'png'")

    invite = get_invite(db, invite_id)
    if not invite:
        raise HTTPException(status_code=404, detail="Invite not found")

    data = await run_in_threadpool(render_invitation_card_bytes, invite, format.upper())
    if data is None:
        raise HTTPException(status_code=422, detail="Invitation card unavailable")

    return Response(content=data, media_type=media_type)
