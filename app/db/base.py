"""Database base class and model imports."""
from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Import all models here for Alembic to detect them
from app.db.models.contact import Contact  # noqa: F401, E402
from app.db.models.template import Template  # noqa: F401, E402
from app.db.models.event import Event  # noqa: F401, E402
from app.db.models.invite import Invite  # noqa: F401, E402
from app.db.models.checkin import CheckIn  # noqa: F401, E402
