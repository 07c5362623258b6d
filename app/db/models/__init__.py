"""Database models."""
from app.db.models.contact import Contact
from app.db.models.template import Template
from app.db.models.event import Event
from app.db.models.invite import Invite
from app.db.models.checkin import CheckIn

__all__ = ["Contact", "Template", "Event", "Invite", "CheckIn"]
