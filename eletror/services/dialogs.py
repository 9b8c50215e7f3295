"""Item and contact editors: a draft bound to a form, handed to a callback on submit.

Dialogs never persist anything; the caller's on_submit decides what happens
with the finished record.
"""

import base64
import inspect
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from eletror.schemas.contacts import Contact, ContactType
from eletror.schemas.inventory import Category, InventoryItem
from eletror.services.storage import now_ms

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5 MB


class DialogValidationError(Exception):
    """Raised when a draft is missing required fields or has invalid values."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


def encode_image(data: bytes, content_type: str) -> str:
    """Embed raw image bytes as a base64 data: URL."""
    if not content_type or not content_type.startswith("image/"):
        raise DialogValidationError("O ficheiro tem de ser uma imagem.")
    if len(data) > MAX_IMAGE_BYTES:
        raise DialogValidationError("A imagem excede o tamanho máximo de 5 MB.")
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


async def _deliver(callback: Callable[[Any], Any] | None, record: Any) -> Any:
    if callback is None:
        return None
    result = callback(record)
    if inspect.isawaitable(result):
        result = await result
    return result


def _first_error(exc: ValidationError) -> str:
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ()))
    return f"{field}: {err.get('msg', 'invalid value')}" if field else err.get("msg", "invalid value")


class ItemDialog:
    """Create/edit form for inventory items."""

    def __init__(self, on_submit: Callable[[InventoryItem], Any] | None = None) -> None:
        self.on_submit = on_submit
        self.is_open = False
        self.initial: InventoryItem | None = None
        self.draft: dict[str, Any] = self._blank()

    @staticmethod
    def _blank() -> dict[str, Any]:
        return {
            "name": "",
            "description": "",
            "category": Category.DIVERSOS,
            "quantity": 1,
            "price": 0.0,
            "image": "",
        }

    def open(self, initial: InventoryItem | None = None) -> None:
        """Show the dialog with a fresh draft: a copy of initial, or blank defaults."""
        self.initial = initial
        self.draft = initial.model_dump() if initial is not None else self._blank()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def update(self, **fields: Any) -> None:
        self.draft.update(fields)

    def attach_image(self, data: bytes, content_type: str) -> None:
        self.draft["image"] = encode_image(data, content_type)

    def build(self) -> InventoryItem:
        """Validate the draft and package it as a full item (id kept when editing)."""
        if not str(self.draft.get("name") or "").strip():
            raise DialogValidationError("O nome é obrigatório.")
        values = {
            **self.draft,
            "id": self.initial.id if self.initial is not None else "",
            "updated_at": now_ms(),
        }
        try:
            return InventoryItem.model_validate(values)
        except ValidationError as e:
            raise DialogValidationError(_first_error(e), cause=e) from e

    async def submit(self) -> InventoryItem:
        """Hand the built item to on_submit (awaited when async) and close.

        Returns the callback's item when it gives one back (e.g. the saved record),
        otherwise the built item. The dialog stays open if the callback raises.
        """
        item = self.build()
        result = await _deliver(self.on_submit, item)
        self.close()
        return result if isinstance(result, InventoryItem) else item


class ContactDialog:
    """Create/edit form for clients and suppliers."""

    def __init__(
        self,
        on_submit: Callable[[Contact], Any] | None = None,
        default_type: ContactType = "client",
    ) -> None:
        self.on_submit = on_submit
        self.default_type: ContactType = default_type
        self.is_open = False
        self.initial: Contact | None = None
        self.draft: dict[str, Any] = self._blank()

    def _blank(self) -> dict[str, Any]:
        return {
            "name": "",
            "nif": "",
            "email": "",
            "phone": "",
            "address": "",
            "type": self.default_type,
        }

    def open(self, initial: Contact | None = None, default_type: ContactType | None = None) -> None:
        if default_type is not None:
            self.default_type = default_type
        self.initial = initial
        self.draft = initial.model_dump() if initial is not None else self._blank()
        self.is_open = True

    def close(self) -> None:
        self.is_open = False

    def update(self, **fields: Any) -> None:
        self.draft.update(fields)

    def build(self) -> Contact:
        if not str(self.draft.get("name") or "").strip():
            raise DialogValidationError("O nome é obrigatório.")
        values = {**self.draft, "id": self.initial.id if self.initial is not None else ""}
        try:
            return Contact.model_validate(values)
        except ValidationError as e:
            raise DialogValidationError(_first_error(e), cause=e) from e

    async def submit(self) -> Contact:
        contact = self.build()
        result = await _deliver(self.on_submit, contact)
        self.close()
        return result if isinstance(result, Contact) else contact
