"""Template schemas."""
from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field


class TemplateUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    qr_position_x: Optional[float] = Field(None, ge=0.0, le=1.0)
    qr_position_y: Optional[float] = Field(None, ge=0.0, le=1.0)
    qr_size: Optional[float] = Field(None, gt=0.0, le=1.0)


class TemplateResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created: datetime
    updated: datetime
    name: str
    qr_position_x: float
    qr_position_y: float
    qr_size: float
