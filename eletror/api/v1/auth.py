"""Login, registration and session endpoints plus auth dependencies (get_current_user, require_admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from eletror.schemas.auth import Credentials, MessageResponse, PublicUser, User
from eletror.services.storage import (
    InvalidCredentialsError,
    MissingCredentialsError,
    PendingApprovalError,
    StorageService,
    UserAlreadyExistsError,
)

router = APIRouter()


def get_storage(request: Request) -> StorageService:
    """Dependency: the process-wide storage service built at startup."""
    return request.app.state.storage


async def get_current_user(
    storage: Annotated[StorageService, Depends(get_storage)],
) -> User:
    """Dependency: require a persisted session and return its user. Raises 401 otherwise."""
    user = await storage.get_current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return user


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require the signed-in user to have role 'admin'. Raises 403 for others."""
    if current_user.role != "admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/login", response_model=PublicUser)
async def login(
    body: Credentials,
    storage: Annotated[StorageService, Depends(get_storage)],
) -> PublicUser:
    """Authenticate with username and password and persist the session."""
    try:
        user = await storage.login(body.username, body.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=e.message) from e
    return user.public()


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(storage: Annotated[StorageService, Depends(get_storage)]) -> None:
    await storage.logout()


@router.post("/register", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def register(
    body: Credentials,
    storage: Annotated[StorageService, Depends(get_storage)],
) -> MessageResponse:
    """
    Request an account. The username is held as pending until an admin approves it.
    """
    try:
        await storage.register(body.username, body.password)
    except MissingCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    except (UserAlreadyExistsError, PendingApprovalError) as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return MessageResponse(message="Conta criada! Aguarde a aprovação do administrador.")


@router.get("/me", response_model=PublicUser)
def me(current_user: Annotated[User, Depends(get_current_user)]) -> PublicUser:
    return current_user.public()
