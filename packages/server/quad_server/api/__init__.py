"""
API Router

Every endpoint is served under /api.
"""

from fastapi import APIRouter

from . import admin, auth, events, official, organizations

router = APIRouter()

router.include_router(auth.router, tags=["Authentication"])
router.include_router(organizations.router, tags=["Organizations"])
router.include_router(events.router, tags=["Events"])
router.include_router(official.router, prefix="/official", tags=["Official Status"])
router.include_router(admin.router, prefix="/admin", tags=["Staff Review"])
