"""Admin endpoints for pending registrations: list, approve, reject."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from eletror.api.v1.auth import get_storage, require_admin
from eletror.schemas.auth import PendingUsersResponse, User
from eletror.services.storage import StorageService

router = APIRouter()


@router.get("/pending", response_model=PendingUsersResponse)
async def list_pending(
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> PendingUsersResponse:
    """Usernames awaiting approval, oldest first."""
    return PendingUsersResponse(usernames=await storage.get_pending_users())


@router.post("/pending/{username}/approve", status_code=status.HTTP_204_NO_CONTENT)
async def approve(
    username: str,
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> None:
    """Move a pending registration into the active users. Unknown usernames are ignored."""
    await storage.approve_user(username)


@router.delete("/pending/{username}", status_code=status.HTTP_204_NO_CONTENT)
async def reject(
    username: str,
    _admin: Annotated[User, Depends(require_admin)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> None:
    """Drop a pending registration. Unknown usernames are ignored."""
    await storage.delete_user(username)
