"""Pydantic domain records and request/response schemas."""

from eletror.schemas.auth import (
    AuthState,
    Credentials,
    MessageResponse,
    PendingUsersResponse,
    PublicUser,
    Role,
    User,
)
from eletror.schemas.contacts import Contact, ContactType
from eletror.schemas.health import HealthResponse
from eletror.schemas.inventory import (
    ALL_CATEGORIES,
    Category,
    ImageUploadResponse,
    InventoryItem,
    InventorySummary,
)

__all__ = [
    "ALL_CATEGORIES",
    "AuthState",
    "Category",
    "Contact",
    "ContactType",
    "Credentials",
    "HealthResponse",
    "ImageUploadResponse",
    "InventoryItem",
    "InventorySummary",
    "MessageResponse",
    "PendingUsersResponse",
    "PublicUser",
    "Role",
    "User",
]
