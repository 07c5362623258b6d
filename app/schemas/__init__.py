"""Pydantic schemas for request/response validation."""
from app.schemas.auth import AdminLoginRequest
from app.schemas.contact import ContactCreate, ContactUpdate, ContactResponse, ContactImportResponse
from app.schemas.event import EventCreate, EventUpdate, EventResponse, EventStatsResponse, QRPlacement
from app.schemas.template import TemplateUpdate, TemplateResponse
from app.schemas.invite import (
    ContactInvitesCreate,
    BlankInvitesCreate,
    InviteUpdate,
    InviteResponse,
    ExportRequest,
)
from app.schemas.checkin import (
    ScanRequest,
    ScanSubmit,
    ScanSessionCreate,
    CheckinOutcomeResponse,
    ScanSessionResponse,
)
from app.schemas.common import SuccessResponse

__all__ = [
    "AdminLoginRequest",
    "ContactCreate",
    "ContactUpdate",
    "ContactResponse",
    "ContactImportResponse",
    "EventCreate",
    "EventUpdate",
    "EventResponse",
    "EventStatsResponse",
    "QRPlacement",
    "TemplateUpdate",
    "TemplateResponse",
    "ContactInvitesCreate",
    "BlankInvitesCreate",
    "InviteUpdate",
    "InviteResponse",
    "ExportRequest",
    "ScanRequest",
    "ScanSubmit",
    "ScanSessionCreate",
    "CheckinOutcomeResponse",
    "ScanSessionResponse",
    "SuccessResponse",
]
