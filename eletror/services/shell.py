"""Application shell: in-memory view state on top of the storage service.

The shell owns what the screen shows (auth, current view, loaded collections,
filters, open dialogs) and turns user actions into storage calls, merging the
results back into local state.
"""

import asyncio
import logging
from collections.abc import Callable
from typing import Literal, Protocol, TypeVar

from eletror.core.config import get_settings
from eletror.schemas.auth import AuthState
from eletror.schemas.contacts import Contact, ContactType
from eletror.schemas.inventory import ALL_CATEGORIES, Category, InventoryItem, InventorySummary
from eletror.services.dialogs import ContactDialog, ItemDialog
from eletror.services.filters import filter_contacts, filter_items, inventory_summary
from eletror.services.poller import PendingUsersPoller
from eletror.services.storage import MissingCredentialsError, StorageError, StorageService

logger = logging.getLogger(__name__)

ViewType = Literal["dashboard", "clients", "suppliers", "users"]
AuthMode = Literal["login", "register"]


class _HasId(Protocol):
    id: str


RecordT = TypeVar("RecordT", bound=_HasId)

VIEW_CONTACT_TYPES: dict[str, ContactType] = {"clients": "client", "suppliers": "supplier"}

REGISTERED_MESSAGE = "Conta criada! Aguarde a aprovação do administrador."
CONFIRM_DELETE_ITEM = "Tem a certeza que deseja apagar este artigo?"
CONFIRM_DELETE_CONTACT = "Tem a certeza que deseja apagar este contacto?"


class AppShell:
    """Screen state and action handlers for one signed-in session."""

    def __init__(
        self,
        storage: StorageService,
        *,
        confirm: Callable[[str], bool],
        poll_interval: float | None = None,
    ) -> None:
        self.storage = storage
        self.confirm = confirm

        self.auth = AuthState()
        self.auth_mode: AuthMode = "login"
        self.auth_error = ""
        self.auth_success = ""

        self.current_view: ViewType = "dashboard"
        self.items: list[InventoryItem] = []
        self.contacts: list[Contact] = []
        self.pending_users: list[str] = []
        self.is_loading = True
        self.search_query = ""
        self.selected_category: Category | str = ALL_CATEGORIES

        self.item_dialog = ItemDialog(on_submit=self.save_item)
        self.contact_dialog = ContactDialog(on_submit=self.save_contact)
        self.poller = PendingUsersPoller(
            fetch=storage.get_pending_users,
            on_update=self._set_pending_users,
            interval=poll_interval or get_settings().PENDING_USERS_POLL_INTERVAL_SEC,
        )

    # -------------------------------------- session --------------------------------------
    async def check_auth(self) -> None:
        """Restore a persisted session and load data if one exists."""
        user = await self.storage.get_current_user()
        if user is None:
            self.is_loading = False
            return
        self.auth = AuthState(is_authenticated=True, user=user)
        await self.load_data()
        await self._sync_polling()

    async def load_data(self) -> None:
        """Fetch items and contacts concurrently; both complete before state updates."""
        self.is_loading = True
        try:
            self.items, self.contacts = await asyncio.gather(
                self.storage.get_items(),
                self.storage.get_contacts(),
            )
        finally:
            self.is_loading = False

    async def submit_auth(self, username: str, password: str) -> bool:
        """Login or register depending on auth_mode. Failures land in auth_error."""
        self.auth_error = ""
        self.auth_success = ""
        try:
            if not username.strip() or not password:
                raise MissingCredentialsError()
            if self.auth_mode == "login":
                user = await self.storage.login(username, password)
                self.auth = AuthState(is_authenticated=True, user=user)
                await self.load_data()
                await self._sync_polling()
            else:
                await self.storage.register(username, password)
                self.auth_success = REGISTERED_MESSAGE
                self.auth_mode = "login"
        except StorageError as e:
            self.auth_error = e.message
            return False
        return True

    async def logout(self) -> None:
        await self.storage.logout()
        self.auth = AuthState()
        self.items = []
        self.contacts = []
        self.pending_users = []
        self.current_view = "dashboard"
        await self._sync_polling()

    async def _sync_polling(self) -> None:
        if self.auth.is_admin:
            self.poller.start()
        else:
            await self.poller.stop()

    def _set_pending_users(self, usernames: list[str]) -> None:
        if self.auth.is_admin:
            self.pending_users = usernames

    # -------------------------------------- views and filters --------------------------------------
    def set_view(self, view: ViewType) -> None:
        if view == "users" and not self.auth.is_admin:
            raise PermissionError("Only admins can manage users")
        self.current_view = view
        self.search_query = ""

    @property
    def filtered_items(self) -> list[InventoryItem]:
        return filter_items(self.items, self.search_query, self.selected_category)

    @property
    def contacts_for_view(self) -> list[Contact]:
        contact_type = VIEW_CONTACT_TYPES.get(self.current_view)
        if contact_type is None:
            return []
        return filter_contacts(self.contacts, self.search_query, contact_type)

    @property
    def summary(self) -> InventorySummary:
        return inventory_summary(self.items)

    # -------------------------------------- items --------------------------------------
    async def save_item(self, item: InventoryItem) -> InventoryItem:
        saved = await self.storage.save_item(item)
        self.items = _merge(self.items, saved)
        return saved

    async def delete_item(self, item_id: str) -> bool:
        if not self.confirm(CONFIRM_DELETE_ITEM):
            return False
        previous = self.items
        self.items = [i for i in previous if i.id != item_id]
        try:
            await self.storage.delete_item(item_id)
        except Exception:
            logger.exception("Deleting item %s failed; restoring local list", item_id)
            self.items = previous
            raise
        return True

    def open_item_dialog(self, item: InventoryItem | None = None) -> None:
        self.item_dialog.open(item)

    async def submit_item_dialog(self) -> InventoryItem:
        return await self.item_dialog.submit()

    # -------------------------------------- contacts --------------------------------------
    async def save_contact(self, contact: Contact) -> Contact:
        saved = await self.storage.save_contact(contact)
        self.contacts = _merge(self.contacts, saved)
        return saved

    async def delete_contact(self, contact_id: str) -> bool:
        if not self.confirm(CONFIRM_DELETE_CONTACT):
            return False
        previous = self.contacts
        self.contacts = [c for c in previous if c.id != contact_id]
        try:
            await self.storage.delete_contact(contact_id)
        except Exception:
            logger.exception("Deleting contact %s failed; restoring local list", contact_id)
            self.contacts = previous
            raise
        return True

    def open_contact_dialog(self, contact: Contact | None = None) -> None:
        default_type = VIEW_CONTACT_TYPES.get(self.current_view, "client")
        self.contact_dialog.open(contact, default_type=default_type)

    async def submit_contact_dialog(self) -> Contact:
        return await self.contact_dialog.submit()

    # -------------------------------------- registrations --------------------------------------
    async def approve_user(self, username: str) -> None:
        await self.storage.approve_user(username)
        self.pending_users = [u for u in self.pending_users if u != username]

    async def reject_user(self, username: str) -> bool:
        if not self.confirm(f"Rejeitar utilizador {username}?"):
            return False
        await self.storage.delete_user(username)
        self.pending_users = [u for u in self.pending_users if u != username]
        return True


def _merge(records: list[RecordT], saved: RecordT) -> list[RecordT]:
    """Replace the record with saved.id, or append saved if none matches."""
    merged = list(records)
    for index, record in enumerate(merged):
        if record.id == saved.id:
            merged[index] = saved
            return merged
    merged.append(saved)
    return merged
