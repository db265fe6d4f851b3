"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, entries, health

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(entries.router, prefix="/entries", tags=["entries"])
