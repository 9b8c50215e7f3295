"""Persistence service: JSON collections in a key-value store, with seeding and simulated latency.

Every public operation is async and sleeps a fixed delay (when enabled) so callers
behave as if talking to a remote backend. Each write replaces a whole collection;
concurrent writers are last-write-wins.
"""

import asyncio
import json
import logging
import secrets
import string
import time
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from eletror.core.kv_store import KeyValueStore
from eletror.schemas.auth import User
from eletror.schemas.contacts import Contact
from eletror.schemas.inventory import InventoryItem
from eletror.services.seed import seed_contacts, seed_items

if TYPE_CHECKING:
    from eletror.core.config import Settings

logger = logging.getLogger(__name__)

USERS_KEY = "eletror_users"
PENDING_USERS_KEY = "eletror_pending_users"
ITEMS_KEY = "eletror_items"
CONTACTS_KEY = "eletror_contacts"
CURRENT_USER_KEY = "eletror_current_user"

# Simulated round-trip per operation, in seconds.
LATENCY_LOGIN = 0.5
LATENCY_LOGOUT = 0.2
LATENCY_REGISTER = 0.5
LATENCY_USER_ADMIN = 0.3
LATENCY_READ = 0.4
LATENCY_SAVE = 0.4
LATENCY_DELETE = 0.3

ID_ALPHABET = string.ascii_lowercase + string.digits
ID_LENGTH = 9


class StorageError(Exception):
    """Raised for user-facing validation failures (bad credentials, duplicate usernames)."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidCredentialsError(StorageError):
    def __init__(self, message: str = "Credenciais inválidas.") -> None:
        super().__init__(message)


class UserAlreadyExistsError(StorageError):
    def __init__(self, message: str = "Utilizador já existe.") -> None:
        super().__init__(message)


class PendingApprovalError(StorageError):
    def __init__(self, message: str = "Utilizador aguarda aprovação.") -> None:
        super().__init__(message)


class MissingCredentialsError(StorageError):
    def __init__(self, message: str = "Indique o utilizador e a palavra-passe.") -> None:
        super().__init__(message)


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def random_id() -> str:
    """Short random base-36 identifier."""
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


class StorageService:
    """Reads and writes the users, pending users, items, contacts and session entries."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        admin_username: str = "admin",
        admin_password: str = "paulo",
        reset_admin_password: bool = True,
        simulate_latency: bool = True,
        clock: Callable[[], int] = now_ms,
        id_factory: Callable[[], str] = random_id,
    ) -> None:
        self.store = store
        self.admin_username = admin_username
        self.admin_password = admin_password
        self.reset_admin_password = reset_admin_password
        self.simulate_latency = simulate_latency
        self.clock = clock
        self.id_factory = id_factory

    @classmethod
    def from_settings(cls, store: KeyValueStore, settings: "Settings") -> "StorageService":
        return cls(
            store,
            admin_username=settings.ADMIN_USERNAME,
            admin_password=settings.ADMIN_PASSWORD.get_secret_value(),
            reset_admin_password=settings.ADMIN_PASSWORD_RESET_ON_LOAD,
            simulate_latency=settings.STORAGE_SIMULATE_LATENCY,
        )

    # -------------------------------------- helpers --------------------------------------
    async def _delay(self, seconds: float) -> None:
        if self.simulate_latency:
            await asyncio.sleep(seconds)

    def _read(self, key: str) -> Any:
        raw = self.store.get(key)
        if not raw:
            return None
        return json.loads(raw)

    def _write(self, key: str, value: Any) -> None:
        self.store.set(key, json.dumps(value, ensure_ascii=False))

    def _write_users(self, key: str, users: list[User]) -> None:
        self._write(key, [u.model_dump(mode="json") for u in users])

    def _write_items(self, items: list[InventoryItem]) -> None:
        self._write(ITEMS_KEY, [i.model_dump(mode="json", by_alias=True) for i in items])

    def _write_contacts(self, contacts: list[Contact]) -> None:
        self._write(CONTACTS_KEY, [c.model_dump(mode="json") for c in contacts])

    def _new_id(self, taken: set[str]) -> str:
        new_id = self.id_factory()
        while not new_id or new_id in taken:
            new_id = self.id_factory()
        return new_id

    def _load_users(self) -> list[User]:
        """Users list, seeding the admin on first run and repairing its password."""
        data = self._read(USERS_KEY)
        if data is None:
            users = [User(username=self.admin_username, password=self.admin_password, role="admin")]
            self._write_users(USERS_KEY, users)
            logger.info("Seeded users with admin account %r", self.admin_username)
            return users
        users = [User.model_validate(u) for u in data]
        if self.reset_admin_password:
            admin = next((u for u in users if u.username == self.admin_username), None)
            if admin is not None and admin.password != self.admin_password:
                admin.password = self.admin_password
                self._write_users(USERS_KEY, users)
                logger.warning("Admin password differed from the configured default; reset it")
        return users

    def _load_pending(self) -> list[User]:
        return [User.model_validate(u) for u in self._read(PENDING_USERS_KEY) or []]

    def _load_items(self) -> list[InventoryItem]:
        data = self._read(ITEMS_KEY)
        if data is None:
            items = seed_items(self.clock())
            self._write_items(items)
            logger.info("Seeded %s inventory items", len(items))
            return items
        return [InventoryItem.model_validate(i) for i in data]

    def _load_contacts(self) -> list[Contact]:
        data = self._read(CONTACTS_KEY)
        if data is None:
            contacts = seed_contacts()
            self._write_contacts(contacts)
            logger.info("Seeded %s contacts", len(contacts))
            return contacts
        return [Contact.model_validate(c) for c in data]

    # -------------------------------------- auth --------------------------------------
    async def login(self, username: str, password: str) -> User:
        await self._delay(LATENCY_LOGIN)
        users = self._load_users()
        user = next(
            (u for u in users if u.username == username and u.password == password),
            None,
        )
        if user is None:
            logger.info("Login failed for username=%r", username)
            raise InvalidCredentialsError()
        self._write(CURRENT_USER_KEY, user.model_dump(mode="json"))
        logger.info("Login: username=%r role=%s", user.username, user.role)
        return user

    async def logout(self) -> None:
        await self._delay(LATENCY_LOGOUT)
        self.store.delete(CURRENT_USER_KEY)

    async def register(self, username: str, password: str) -> None:
        await self._delay(LATENCY_REGISTER)
        if not username.strip() or not password:
            raise MissingCredentialsError()
        if any(u.username == username for u in self._load_users()):
            raise UserAlreadyExistsError()
        pending = self._load_pending()
        if any(u.username == username for u in pending):
            raise PendingApprovalError()
        pending.append(User(username=username, password=password, role="user"))
        self._write_users(PENDING_USERS_KEY, pending)
        logger.info("Registration pending approval: username=%r", username)

    async def get_current_user(self) -> User | None:
        data = self._read(CURRENT_USER_KEY)
        return User.model_validate(data) if data else None

    # -------------------------------------- user admin --------------------------------------
    async def get_pending_users(self) -> list[str]:
        await self._delay(LATENCY_USER_ADMIN)
        return [u.username for u in self._load_pending()]

    async def approve_user(self, username: str) -> None:
        await self._delay(LATENCY_USER_ADMIN)
        pending = self._load_pending()
        index = next((i for i, u in enumerate(pending) if u.username == username), None)
        if index is None:
            return
        approved = pending.pop(index)
        users = self._load_users()
        users.append(approved)
        self._write_users(USERS_KEY, users)
        self._write_users(PENDING_USERS_KEY, pending)
        logger.info("Approved user %r", username)

    async def delete_user(self, username: str) -> None:
        """Reject a pending registration. Active users are never removed."""
        await self._delay(LATENCY_USER_ADMIN)
        pending = self._load_pending()
        remaining = [u for u in pending if u.username != username]
        if len(remaining) == len(pending):
            return
        self._write_users(PENDING_USERS_KEY, remaining)
        logger.info("Rejected pending user %r", username)

    # -------------------------------------- items --------------------------------------
    async def get_items(self) -> list[InventoryItem]:
        await self._delay(LATENCY_READ)
        return self._load_items()

    async def save_item(self, item: InventoryItem) -> InventoryItem:
        """Upsert by id. New items get a fresh id; every save refreshes updated_at."""
        await self._delay(LATENCY_SAVE)
        items = self._load_items()
        now = self.clock()
        index = next((i for i, existing in enumerate(items) if item.id and existing.id == item.id), None)
        if index is not None:
            saved = item.model_copy(update={"updated_at": now})
            items[index] = saved
        else:
            new_id = self._new_id({existing.id for existing in items})
            saved = item.model_copy(update={"id": new_id, "updated_at": now})
            items.append(saved)
        self._write_items(items)
        logger.debug("Saved item id=%s name=%r", saved.id, saved.name)
        return saved

    async def delete_item(self, item_id: str) -> None:
        await self._delay(LATENCY_DELETE)
        items = self._load_items()
        self._write_items([i for i in items if i.id != item_id])

    # -------------------------------------- contacts --------------------------------------
    async def get_contacts(self) -> list[Contact]:
        await self._delay(LATENCY_READ)
        return self._load_contacts()

    async def save_contact(self, contact: Contact) -> Contact:
        """Upsert by id; new contacts get a fresh id."""
        await self._delay(LATENCY_SAVE)
        contacts = self._load_contacts()
        index = next(
            (i for i, existing in enumerate(contacts) if contact.id and existing.id == contact.id),
            None,
        )
        if index is not None:
            saved = contact.model_copy()
            contacts[index] = saved
        else:
            new_id = self._new_id({existing.id for existing in contacts})
            saved = contact.model_copy(update={"id": new_id})
            contacts.append(saved)
        self._write_contacts(contacts)
        logger.debug("Saved contact id=%s type=%s", saved.id, saved.type)
        return saved

    async def delete_contact(self, contact_id: str) -> None:
        await self._delay(LATENCY_DELETE)
        contacts = self._load_contacts()
        self._write_contacts([c for c in contacts if c.id != contact_id])
