"""Shared API dependencies."""
from app.db import get_db
from app.core.security import verify_admin_token

__all__ = ["get_db", "verify_admin_token"]
