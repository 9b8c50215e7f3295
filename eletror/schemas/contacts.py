"""Pydantic schemas for business contacts (clients and suppliers)."""

from typing import Literal

from pydantic import BaseModel, Field

ContactType = Literal["client", "supplier"]


class Contact(BaseModel):
    """A client or supplier. nif is the Portuguese tax id, kept as free text."""

    id: str = Field(default="", description="Identifier; empty for a new contact.")
    type: ContactType
    name: str = Field(..., min_length=1)
    nif: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
