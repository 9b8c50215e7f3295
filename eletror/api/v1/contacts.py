"""Contact endpoints: list clients/suppliers with search, upsert, delete."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from eletror.api.v1.auth import get_current_user, get_storage
from eletror.schemas.auth import User
from eletror.schemas.contacts import Contact, ContactType
from eletror.services.filters import filter_contacts
from eletror.services.storage import StorageService

router = APIRouter()


@router.get("", response_model=list[Contact])
async def list_contacts(
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
    q: Annotated[str, Query(max_length=255, description="Matches name, NIF or email")] = "",
    contact_type: Annotated[ContactType | None, Query(alias="type", description="client or supplier")] = None,
) -> list[Contact]:
    return filter_contacts(await storage.get_contacts(), q, contact_type)


@router.post("", response_model=Contact, status_code=status.HTTP_201_CREATED)
async def create_contact(
    body: Contact,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> Contact:
    return await storage.save_contact(body.model_copy(update={"id": ""}))


@router.put("/{contact_id}", response_model=Contact)
async def update_contact(
    contact_id: str,
    body: Contact,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> Contact:
    contacts = await storage.get_contacts()
    if not any(c.id == contact_id for c in contacts):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Contact not found")
    return await storage.save_contact(body.model_copy(update={"id": contact_id}))


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: str,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> None:
    """Delete a contact; unknown ids are a no-op."""
    await storage.delete_contact(contact_id)
