"""Inventory item endpoints: list with search/category filter, upsert, delete, image upload."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from eletror.api.v1.auth import get_current_user, get_storage
from eletror.schemas.auth import User
from eletror.schemas.inventory import (
    ALL_CATEGORIES,
    Category,
    ImageUploadResponse,
    InventoryItem,
    InventorySummary,
)
from eletror.services.dialogs import MAX_IMAGE_BYTES, DialogValidationError, encode_image
from eletror.services.filters import filter_items, inventory_summary
from eletror.services.storage import StorageService

router = APIRouter()

CATEGORY_VALUES = frozenset(c.value for c in Category)


@router.get("", response_model=list[InventoryItem])
async def list_items(
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
    q: Annotated[str, Query(max_length=255, description="Matches name or description")] = "",
    category: Annotated[str, Query(description="Category name, or 'Todos' for all")] = ALL_CATEGORIES,
) -> list[InventoryItem]:
    if category != ALL_CATEGORIES and category not in CATEGORY_VALUES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"category must be '{ALL_CATEGORIES}' or one of {sorted(CATEGORY_VALUES)}",
        )
    return filter_items(await storage.get_items(), q, category)


@router.get("/summary", response_model=InventorySummary)
async def get_summary(
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> InventorySummary:
    """Item count, units in stock and stock value for the dashboard."""
    return inventory_summary(await storage.get_items())


@router.post("", response_model=InventoryItem, status_code=status.HTTP_201_CREATED)
async def create_item(
    body: InventoryItem,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> InventoryItem:
    """Create an item. Any id in the body is ignored; a new one is assigned."""
    return await storage.save_item(body.model_copy(update={"id": ""}))


@router.put("/{item_id}", response_model=InventoryItem)
async def update_item(
    item_id: str,
    body: InventoryItem,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> InventoryItem:
    items = await storage.get_items()
    if not any(i.id == item_id for i in items):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found")
    return await storage.save_item(body.model_copy(update={"id": item_id}))


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: str,
    _user: Annotated[User, Depends(get_current_user)],
    storage: Annotated[StorageService, Depends(get_storage)],
) -> None:
    """Delete an item; unknown ids are a no-op."""
    await storage.delete_item(item_id)


@router.post("/image", response_model=ImageUploadResponse)
async def upload_image(
    file: UploadFile,
    _user: Annotated[User, Depends(get_current_user)],
) -> ImageUploadResponse:
    """Encode an uploaded image as a data: URL for the item's image field. Nothing is stored."""
    data = await file.read(MAX_IMAGE_BYTES + 1)
    try:
        image = encode_image(data, file.content_type or "")
    except DialogValidationError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message) from e
    return ImageUploadResponse(image=image)
