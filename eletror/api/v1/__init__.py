"""API v1 routes."""

from fastapi import APIRouter

from eletror.api.v1 import auth, contacts, health, items, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(items.router, prefix="/items", tags=["items"])
router.include_router(contacts.router, prefix="/contacts", tags=["contacts"])
