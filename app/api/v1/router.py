"""Main API router for v1."""
from fastapi import APIRouter

from app.api.v1.endpoints import auth, contacts, events, invites, templates, checkins

api_router = APIRouter(prefix="/api/v1")

# Include all endpoint routers
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(contacts.router, prefix="/contacts", tags=["Contacts"])
api_router.include_router(events.router, prefix="/events", tags=["Events"])
api_router.include_router(invites.router, prefix="/invites", tags=["Invites"])
api_router.include_router(templates.router, prefix="/templates", tags=["Templates"])
api_router.include_router(checkins.router, tags=["Check-in"])
