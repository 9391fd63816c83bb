"""API v1 routers"""

from fastapi import APIRouter

from slidetrack.api.routers import decks_router, viewer_router

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(viewer_router)
v1_router.include_router(decks_router)
