"""Event schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE
from app.core.sanitization import sanitize_name
from app.core.utils import to_utc


class QRPlacement(BaseModel):
    """Normalized QR placement: centre position in [0, 1], edge size in (0, 1]."""
    qr_position_x: float = Field(DEFAULT_QR_POSITION_X, ge=0.0, le=1.0)
    qr_position_y: float = Field(DEFAULT_QR_POSITION_Y, ge=0.0, le=1.0)
    qr_size: float = Field(DEFAULT_QR_SIZE, gt=0.0, le=1.0)


class EventCreate(QRPlacement):
    title: str = Field(..., min_length=1, max_length=200)
    subtitle: str = Field("", max_length=500)
    date: datetime
    expiration_date: Optional[datetime] = None
    address: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(None, ge=-180.0, le=180.0)
    template_id: Optional[UUID] = None

    @field_validator('title')
    @classmethod
    def sanitize_title_field(cls, v: str) -> str:
        """Sanitize and validate event title."""
        return sanitize_name(v, field="Title")

    @model_validator(mode='after')
    def check_expiration(self):
        if self.expiration_date is not None and to_utc(self.expiration_date) < to_utc(self.date):
            raise ValueError("Expiration date must not be before the event date")
        return self


class EventUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    subtitle: Optional[str] = Field(None, max_length=500)
    date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    address: Optional[str] = Field(None, max_length=500)
    latitude: Optional[float] = Field(None, ge=-90.0, le=90.0)
    longitude: Optional[float] = Field(None, ge=-180.0, le=180.0)
    template_id: Optional[UUID] = None
    qr_position_x: Optional[float] = Field(None, ge=0.0, le=1.0)
    qr_position_y: Optional[float] = Field(None, ge=0.0, le=1.0)
    qr_size: Optional[float] = Field(None, gt=0.0, le=1.0)


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created: datetime
    updated: datetime
    title: str
    subtitle: str
    date: datetime
    expiration_date: Optional[datetime] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    qr_position_x: float
    qr_position_y: float
    qr_size: float
    template_id: Optional[UUID] = None
    has_image: bool = False


class EventStatsResponse(BaseModel):
    total_invites: int
    checked_in: int
    remaining: int
    total_checkins: int
