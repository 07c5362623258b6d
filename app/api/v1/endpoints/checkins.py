"""Check-in endpoints.

Door devices either post each decoded code to ``/checkins`` directly, or open
a scan session and post codes to it. A session accepts one code, then holds
the outcome until the device acknowledges it, so a code lingering in front of
the camera is not counted twice.
"""
import logging
from datetime import timedelta
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, verify_admin_token
from app.core.rate_limit import limiter, RATE_LIMITS
from app.core.utils import utcnow
from app.schemas import (
    ScanRequest,
    ScanSubmit,
    ScanSessionCreate,
    CheckinOutcomeResponse,
    ScanSessionResponse,
    SuccessResponse,
)
from app.services.checkin import CheckinStatus, resolve
from app.services.events import get_event
from app.services.scanner import ScannerBusy, scan_sessions

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(verify_admin_token)])

# Sessions left open by devices that never closed them
SESSION_MAX_AGE = timedelta(hours=24)


@router.post("/checkins", response_model=CheckinOutcomeResponse)
@limiter.limit(RATE_LIMITS["scan"])
def checkin_endpoint(request: Request, response: Response, scan: ScanRequest, db: Session = Depends(get_db)):
    """
    Resolve one scanned code.

    Every outcome is a 200 with a ``status`` the device displays:
    ``first_check_in``, ``repeat``, ``limit_reached``, ``not_found`` or
    ``malformed``. Only a database failure is an error (503, status
    ``persistence_failure``), so a device never reports an admission that
    was not saved.

    Example:
        Request:
            POST /api/v1/checkins
            {
                "code": "7f0c1b9e-3c5d-4a43-9a2e-1d2f5c6b7a80",
                "event_id": "5b1e..."
            }

        Response (200):
            {
                "status": "repeat",
                "admitted": true,
                "display_name": "Ada Lovelace",
                "prior_count": 1,
                "checkin_count": 2,
                "max_checkins": 3,
                "previous_checkin_at": "2026-04-18T19:12:03Z",
                ...
            }
    """
    outcome = resolve(db, scan.code, event_id=scan.event_id)
    if outcome.status is CheckinStatus.PERSISTENCE_FAILURE:
        response.status_code = 503
    return CheckinOutcomeResponse.from_outcome(outcome)


@router.post("/scan-sessions", response_model=ScanSessionResponse, status_code=201)
def open_scan_session_endpoint(request: ScanSessionCreate, db: Session = Depends(get_db)):
    """Open a scan session, optionally bound to one event (codes of other events scan as unknown)."""
    if request.event_id is not None and not get_event(db, request.event_id):
        raise HTTPException(status_code=404, detail="Event not found")

    dropped = scan_sessions.close_idle(utcnow() - SESSION_MAX_AGE)
    if dropped:
        logger.info(f"Dropped {dropped} stale scan sessions")

    session = scan_sessions.open(request.event_id)
    return ScanSessionResponse.from_session(session)


@router.get("/scan-sessions/{session_id}", response_model=ScanSessionResponse)
def get_scan_session_endpoint(session_id: UUID):
    session = scan_sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Scan session not found")
    return ScanSessionResponse.from_session(session)


@router.post("/scan-sessions/{session_id}/scans", response_model=ScanSessionResponse)
@limiter.limit(RATE_LIMITS["scan"])
def submit_scan_endpoint(
    request: Request,
    session_id: UUID,
    scan: ScanSubmit,
    db: Session = Depends(get_db),
):
    """
    Submit a decoded code to a session.

    Raises:
        HTTPException: 404 if the session does not exist
        HTTPException: 409 if the session is still showing the previous outcome
    """
    session = scan_sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Scan session not found")

    try:
        session.submit(db, scan.code)
    except ScannerBusy as e:
        raise HTTPException(status_code=409, detail=str(e))

    return ScanSessionResponse.from_session(session)


@router.post("/scan-sessions/{session_id}/acknowledge", response_model=ScanSessionResponse)
def acknowledge_scan_endpoint(session_id: UUID):
    """Dismiss the displayed outcome; the session accepts the next code."""
    session = scan_sessions.get(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Scan session not found")

    try:
        session.acknowledge()
    except ScannerBusy as e:
        raise HTTPException(status_code=409, detail=str(e))

    return ScanSessionResponse.from_session(session)


@router.delete("/scan-sessions/{session_id}", response_model=SuccessResponse)
def close_scan_session_endpoint(session_id: UUID):
    if not scan_sessions.close(session_id):
        raise HTTPException(status_code=404, detail="Scan session not found")
    return SuccessResponse(success=True)
