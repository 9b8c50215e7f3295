"""Pydantic schemas for inventory items and their categories."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# Filter value meaning "any category".
ALL_CATEGORIES = "Todos"


class Category(str, Enum):
    """Product families stocked by the shop."""

    ALTERNADORES = "Alternadores"
    MOTORES_ARRANQUE = "Motores de Arranque"
    BATERIAS = "Baterias"
    ILUMINACAO = "Iluminação"
    CABLAGEM = "Cablagem"
    DIVERSOS = "Diversos"


class InventoryItem(BaseModel):
    """
    One stocked product.

    id is empty until the storage service assigns one; updated_at is epoch
    milliseconds and is serialized as updatedAt.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default="", description="Identifier; empty for a new item.")
    name: str = Field(..., min_length=1, description="Product name.")
    description: str = Field(default="", description="Free-text description.")
    category: Category = Field(default=Category.DIVERSOS)
    quantity: int = Field(default=0, ge=0, description="Units in stock.")
    price: float = Field(default=0.0, ge=0, description="Unit price in euros.")
    image: str = Field(
        default="",
        description="Image URL or inline data: URL.",
    )
    updated_at: int = Field(
        default=0,
        alias="updatedAt",
        description="Last save time, epoch milliseconds.",
    )


class InventorySummary(BaseModel):
    """Dashboard totals for a set of items."""

    item_count: int = Field(..., ge=0)
    total_units: int = Field(..., ge=0)
    total_value: float = Field(..., ge=0, description="Sum of quantity * price.")


class ImageUploadResponse(BaseModel):
    """An uploaded image encoded as a data: URL, ready for InventoryItem.image."""

    image: str
