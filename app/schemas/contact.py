"""Contact schemas."""
from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.sanitization import sanitize_name


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=254)

    @field_validator('name')
    @classmethod
    def sanitize_name_field(cls, v: str) -> str:
        """Sanitize and validate contact name."""
        return sanitize_name(v)


class ContactUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=254)


class ContactResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    created: datetime
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None


class ContactImportResponse(BaseModel):
    created: List[ContactResponse]
    skipped: List[str]
