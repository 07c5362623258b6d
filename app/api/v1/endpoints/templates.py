"""Template endpoints."""
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from app.api.deps import get_db, verify_admin_token
from app.core.config import settings
from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE
from app.schemas import TemplateUpdate, TemplateResponse, SuccessResponse
from app.services.templates import (
    create_template,
    delete_template,
    get_template,
    get_templates,
    update_template,
)

router = APIRouter(dependencies=[Depends(verify_admin_token)])


@router.get("", response_model=List[TemplateResponse])
def list_templates_endpoint(db: Session = Depends(get_db)):
    return get_templates(db)


@router.post("", response_model=TemplateResponse, status_code=201)
async def create_template_endpoint(
    name: str = Form(..., min_length=1, max_length=200),
    qr_position_x: float = Form(DEFAULT_QR_POSITION_X),
    qr_position_y: float = Form(DEFAULT_QR_POSITION_Y),
    qr_size: float = Form(DEFAULT_QR_SIZE),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
):
    """Create a reusable card background from an uploaded image (multipart form)."""
    data = await file.read(settings.MAX_IMAGE_BYTES + 1)
    try:
        return await run_in_threadpool(
            create_template, db, name, data, qr_position_x, qr_position_y, qr_size
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{template_id}", response_model=TemplateResponse)
def get_template_endpoint(template_id: UUID, db: Session = Depends(get_db)):
    template = get_template(db, template_id)
    if not template:
        raise HTTPException(status_code=404, detail="Template not found")
    return template


@router.patch("/{template_id}", response_model=TemplateResponse)
def update_template_endpoint(template_id: UUID, changes: TemplateUpdate, db: Session = Depends(get_db)):
    values = {k: v for k, v in changes.model_dump(exclude_unset=True).items() if v is not None}
    try:
        return update_template(db, template_id, **values)
    except ValueError as e:
        status = 404 if str(e) == "Template not found" else 400
        raise HTTPException(status_code=status, detail=str(e))


@router.delete("/{template_id}", response_model=SuccessResponse)
def delete_template_endpoint(template_id: UUID, db: Session = Depends(get_db)):
    """Delete a template. Events that used it fall back to their own image or the bare code."""
    if not delete_template(db, template_id):
        raise HTTPException(status_code=404, detail="Template not found")
    return SuccessResponse(success=True)
