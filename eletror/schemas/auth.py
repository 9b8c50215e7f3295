"""Schemas for users, sessions and the auth endpoints."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["admin", "user"]


class User(BaseModel):
    """Stored user record. Passwords are kept as given; there is no hashing."""

    username: str = Field(..., min_length=1, max_length=255)
    role: Role = "user"
    password: str = ""

    def public(self) -> "PublicUser":
        return PublicUser(username=self.username, role=self.role)


class PublicUser(BaseModel):
    """User as exposed to clients (no password)."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    role: Role


class AuthState(BaseModel):
    """Whether a user is signed in, and who."""

    is_authenticated: bool = False
    user: User | None = None

    @property
    def is_admin(self) -> bool:
        return self.is_authenticated and self.user is not None and self.user.role == "admin"


class Credentials(BaseModel):
    """Username and password for login and registration."""

    username: str = Field(..., min_length=1, max_length=255, description="Username")
    password: str = Field(..., min_length=1, max_length=128, description="Password")


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class PendingUsersResponse(BaseModel):
    """Usernames awaiting admin approval, in registration order."""

    usernames: list[str]
