"""Invite schemas."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_BLANK_INVITES, MAX_CHECKINS_LIMIT


class ContactInvitesCreate(BaseModel):
    contact_ids: List[UUID] = Field(..., min_length=1)
    max_checkins: Optional[int] = Field(None, ge=1, le=MAX_CHECKINS_LIMIT)


class BlankInvitesCreate(BaseModel):
    quantity: int = Field(1, ge=1, le=MAX_BLANK_INVITES)
    max_checkins: Optional[int] = Field(1, ge=1, le=MAX_CHECKINS_LIMIT)  # null = unlimited


class InviteUpdate(BaseModel):
    max_checkins: Optional[int] = Field(None, ge=1, le=MAX_CHECKINS_LIMIT)
    contact_name: Optional[str] = Field(None, max_length=200)


class InviteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created: datetime
    event_id: UUID
    contact_id: Optional[UUID] = None
    contact_name: Optional[str] = None
    display_name: str
    qr_token: str
    max_checkins: Optional[int] = None
    checkin_count: int
    has_reached_limit: bool
    last_checkin_at: Optional[datetime] = None


class ExportRequest(BaseModel):
    invite_ids: Optional[List[UUID]] = None  # None = every invite of the event
