"""Check-in schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel

from app.services.checkin import CheckinOutcome, CheckinStatus
from app.services.scanner import ScanSession, ScanState


class ScanRequest(BaseModel):
    # Length and format are checked by the engine so every scan gets an outcome
    code: str
    event_id: Optional[UUID] = None


class ScanSubmit(BaseModel):
    code: str


class ScanSessionCreate(BaseModel):
    event_id: Optional[UUID] = None


class CheckinOutcomeResponse(BaseModel):
    status: CheckinStatus
    admitted: bool
    invite_id: Optional[UUID] = None
    event_id: Optional[UUID] = None
    display_name: Optional[str] = None
    event_title: Optional[str] = None
    prior_count: int = 0
    checkin_count: Optional[int] = None
    max_checkins: Optional[int] = None
    previous_checkin_at: Optional[datetime] = None
    reason: Optional[str] = None

    @classmethod
    def from_outcome(cls, outcome: CheckinOutcome) -> "CheckinOutcomeResponse":
        response = cls(
            status=outcome.status,
            admitted=outcome.admitted,
            prior_count=outcome.prior_count,
            previous_checkin_at=outcome.previous_checkin_at,
            reason=outcome.reason,
        )
        summary = outcome.summary
        if summary is not None:
            response.invite_id = summary.id
            response.event_id = summary.event_id
            response.display_name = summary.display_name
            response.event_title = summary.event_title
            response.max_checkins = summary.max_checkins
            response.checkin_count = summary.checkin_count
        return response


class ScanSessionResponse(BaseModel):
    id: UUID
    event_id: Optional[UUID] = None
    state: ScanState
    scans: int
    outcome: Optional[CheckinOutcomeResponse] = None

    @classmethod
    def from_session(cls, session: ScanSession) -> "ScanSessionResponse":
        return cls(
            id=session.id,
            event_id=session.event_id,
            state=session.state,
            scans=session.scans,
            outcome=CheckinOutcomeResponse.from_outcome(session.outcome) if session.outcome else None,
        )
