"""Template business logic."""
import uuid
from typing import List, Optional

from sqlalchemy.orm import Session

from app.db.models import Template
from app.core.constants import DEFAULT_QR_POSITION_X, DEFAULT_QR_POSITION_Y, DEFAULT_QR_SIZE
from app.core.sanitization import sanitize_name
from app.services.events import validate_image_bytes, validate_placement


def create_template(
    db: Session,
    name: str,
    image_data: bytes,
    qr_position_x: float = DEFAULT_QR_POSITION_X,
    qr_position_y: float = DEFAULT_QR_POSITION_Y,
    qr_size: float = DEFAULT_QR_SIZE,
) -> Template:
    """Create a template from an uploaded background image."""
    validate_placement(qr_position_x, qr_position_y, qr_size)
    validate_image_bytes(image_data)

    template = Template(
        name=sanitize_name(name),
        image_data=image_data,
        qr_position_x=qr_position_x,
        qr_position_y=qr_position_y,
        qr_size=qr_size,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return template


def get_template(db: Session, template_id: uuid.UUID) -> Optional[Template]:
    return db.query(Template).filter(Template.id == template_id).first()


def get_templates(db: Session) -> List[Template]:
    return db.query(Template).order_by(Template.name, Template.created).all()


def update_template(db: Session, template_id: uuid.UUID, **changes) -> Template:
    """
    Rename a template or move its QR placement.

    Raises:
        ValueError: If the template does not exist or a value is invalid
    """
    template = get_template(db, template_id)
    if not template:
        raise ValueError("Template not found")

    placement = (
        changes.get("qr_position_x", template.qr_position_x),
        changes.get("qr_position_y", template.qr_position_y),
        changes.get("qr_size", template.qr_size),
    )
    validate_placement(*placement)

    if "name" in changes:
        template.name = sanitize_name(changes["name"])
    template.qr_position_x, template.qr_position_y, template.qr_size = placement

    db.commit()
    db.refresh(template)
    return template


def delete_template(db: Session, template_id: uuid.UUID) -> bool:
    """Delete a template. Events using it keep existing without one."""
    template = get_template(db, template_id)
    if not template:
        return False

    db.delete(template)
    db.commit()
    return True
