"""Unit tests for eletror.services.storage: auth flows, seeding, upserts, deletes and admin repair."""

import json
import unittest
from unittest.mock import AsyncMock, patch

from eletror.core.kv_store import InMemoryKeyValueStore
from eletror.schemas.contacts import Contact
from eletror.schemas.inventory import Category, InventoryItem
from eletror.services.storage import (
    CONTACTS_KEY,
    CURRENT_USER_KEY,
    ITEMS_KEY,
    LATENCY_LOGIN,
    PENDING_USERS_KEY,
    USERS_KEY,
    InvalidCredentialsError,
    MissingCredentialsError,
    PendingApprovalError,
    StorageService,
    UserAlreadyExistsError,
)

SEED_TIME = 1_700_000_000_000
SAVE_TIME = 1_700_000_500_000


class _Clock:
    """Settable clock returning epoch milliseconds."""

    def __init__(self, now: int = SEED_TIME) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


def _service(store: InMemoryKeyValueStore | None = None, **kwargs: object) -> StorageService:
    """Storage service over an in-memory store, without simulated latency."""
    kwargs.setdefault("simulate_latency", False)
    return StorageService(store if store is not None else InMemoryKeyValueStore(), **kwargs)


def _new_item(name: str = "Bomba de Água", **kwargs: object) -> InventoryItem:
    defaults = {
        "description": "Bomba elétrica 12V",
        "category": Category.DIVERSOS,
        "quantity": 4,
        "price": 45.0,
    }
    defaults.update(kwargs)
    return InventoryItem(name=name, **defaults)


class TestSeeding(unittest.IsolatedAsyncioTestCase):
    """Getters on an empty store write and return the built-in dataset."""

    async def test_items_seeded_and_persisted(self) -> None:
        store = InMemoryKeyValueStore()
        service = _service(store, clock=_Clock())
        items = await service.get_items()
        self.assertEqual(len(items), 3)
        self.assertEqual([i.id for i in items], ["1", "2", "3"])
        self.assertTrue(all(i.updated_at == SEED_TIME for i in items))
        self.assertEqual(len(json.loads(store.get(ITEMS_KEY))), 3)

    async def test_contacts_seeded_and_persisted(self) -> None:
        store = InMemoryKeyValueStore()
        contacts = await _service(store).get_contacts()
        self.assertEqual({c.type for c in contacts}, {"client", "supplier"})
        self.assertIsNotNone(store.get(CONTACTS_KEY))

    async def test_users_seeded_with_admin(self) -> None:
        store = InMemoryKeyValueStore()
        user = await _service(store).login("admin", "paulo")
        self.assertEqual(user.role, "admin")
        users = json.loads(store.get(USERS_KEY))
        self.assertEqual(users, [{"username": "admin", "role": "admin", "password": "paulo"}])

    async def test_items_serialized_with_camel_case_timestamp(self) -> None:
        store = InMemoryKeyValueStore()
        await _service(store).get_items()
        stored = json.loads(store.get(ITEMS_KEY))
        self.assertIn("updatedAt", stored[0])
        self.assertEqual(stored[0]["category"], "Alternadores")

    async def test_existing_collection_is_not_reseeded(self) -> None:
        store = InMemoryKeyValueStore({ITEMS_KEY: "[]"})
        self.assertEqual(await _service(store).get_items(), [])


class TestAuth(unittest.IsolatedAsyncioTestCase):
    async def test_login_persists_session(self) -> None:
        service = _service()
        await service.login("admin", "paulo")
        current = await service.get_current_user()
        self.assertIsNotNone(current)
        self.assertEqual(current.username, "admin")

    async def test_wrong_password_fails_and_leaves_session(self) -> None:
        store = InMemoryKeyValueStore()
        service = _service(store)
        with self.assertRaises(InvalidCredentialsError) as ctx:
            await service.login("admin", "nope")
        self.assertEqual(ctx.exception.message, "Credenciais inválidas.")
        self.assertIsNone(store.get(CURRENT_USER_KEY))

    async def test_failed_login_keeps_previous_session(self) -> None:
        service = _service()
        await service.login("admin", "paulo")
        with self.assertRaises(InvalidCredentialsError):
            await service.login("ghost", "paulo")
        self.assertEqual((await service.get_current_user()).username, "admin")

    async def test_username_match_is_case_sensitive(self) -> None:
        with self.assertRaises(InvalidCredentialsError):
            await _service().login("Admin", "paulo")

    async def test_logout_clears_session(self) -> None:
        service = _service()
        await service.login("admin", "paulo")
        await service.logout()
        self.assertIsNone(await service.get_current_user())

    async def test_register_approve_login(self) -> None:
        service = _service()
        await service.register("joao", "pass123")
        self.assertEqual(await service.get_pending_users(), ["joao"])

        with self.assertRaises(InvalidCredentialsError):
            await service.login("joao", "pass123")

        await service.approve_user("joao")
        self.assertNotIn("joao", await service.get_pending_users())
        user = await service.login("joao", "pass123")
        self.assertEqual(user.role, "user")

    async def test_register_pending_twice_fails(self) -> None:
        service = _service()
        await service.register("joao", "pass123")
        with self.assertRaises(PendingApprovalError):
            await service.register("joao", "other")
        self.assertEqual(await service.get_pending_users(), ["joao"])

    async def test_register_existing_user_fails(self) -> None:
        with self.assertRaises(UserAlreadyExistsError):
            await _service().register("admin", "whatever")

    async def test_register_blank_credentials_fails(self) -> None:
        service = _service()
        for username, password in (("", "x"), ("   ", "x"), ("joao", "")):
            with self.assertRaises(MissingCredentialsError):
                await service.register(username, password)
        self.assertEqual(await service.get_pending_users(), [])

    async def test_pending_users_keep_registration_order(self) -> None:
        service = _service()
        for name in ("b", "a", "c"):
            await service.register(name, "pw")
        self.assertEqual(await service.get_pending_users(), ["b", "a", "c"])

    async def test_reject_removes_pending(self) -> None:
        store = InMemoryKeyValueStore()
        service = _service(store)
        await service.register("joao", "pass123")
        await service.delete_user("joao")
        self.assertEqual(await service.get_pending_users(), [])
        with self.assertRaises(InvalidCredentialsError):
            await service.login("joao", "pass123")

    async def test_approve_and_reject_unknown_are_noops(self) -> None:
        store = InMemoryKeyValueStore()
        service = _service(store)
        await service.register("joao", "pass123")
        before = dict(store.data)
        await service.approve_user("maria")
        await service.delete_user("maria")
        self.assertEqual(store.data, before)

    async def test_approved_user_can_register_no_more(self) -> None:
        service = _service()
        await service.register("joao", "pass123")
        await service.approve_user("joao")
        with self.assertRaises(UserAlreadyExistsError):
            await service.register("joao", "x")


class TestAdminRepair(unittest.IsolatedAsyncioTestCase):
    """The stored admin password is put back to the configured default on every users load."""

    def _corrupted_store(self) -> InMemoryKeyValueStore:
        users = [{"username": "admin", "role": "admin", "password": "wrong"}]
        return InMemoryKeyValueStore({USERS_KEY: json.dumps(users)})

    async def test_corrupted_password_is_reset(self) -> None:
        store = self._corrupted_store()
        service = _service(store)
        user = await service.login("admin", "paulo")
        self.assertEqual(user.role, "admin")
        self.assertEqual(json.loads(store.get(USERS_KEY))[0]["password"], "paulo")

    async def test_reset_uses_configured_credentials(self) -> None:
        store = self._corrupted_store()
        service = _service(store, admin_password="segredo")
        await service.login("admin", "segredo")
        with self.assertRaises(InvalidCredentialsError):
            await service.login("admin", "wrong")

    async def test_reset_can_be_disabled(self) -> None:
        store = self._corrupted_store()
        service = _service(store, reset_admin_password=False)
        with self.assertRaises(InvalidCredentialsError):
            await service.login("admin", "paulo")
        await service.login("admin", "wrong")


class TestItems(unittest.IsolatedAsyncioTestCase):
    async def test_new_item_gets_id_and_save_time(self) -> None:
        clock = _Clock()
        service = _service(clock=clock)
        self.assertEqual(len(await service.get_items()), 3)

        clock.now = SAVE_TIME
        saved = await service.save_item(_new_item())
        items = await service.get_items()
        self.assertEqual(len(items), 4)
        self.assertNotEqual(saved.id, "")
        self.assertEqual(saved.updated_at, SAVE_TIME)
        self.assertEqual(items[-1], saved)

    async def test_new_ids_are_unique(self) -> None:
        service = _service()
        first = await service.save_item(_new_item("A"))
        second = await service.save_item(_new_item("B"))
        ids = [i.id for i in await service.get_items()]
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(len(ids), len(set(ids)))

    async def test_generated_id_skips_taken_ids(self) -> None:
        ids = iter(["1", "", "novo"])
        service = _service(id_factory=lambda: next(ids))
        saved = await service.save_item(_new_item())
        self.assertEqual(saved.id, "novo")

    async def test_update_preserves_id_and_refreshes_timestamp(self) -> None:
        clock = _Clock()
        service = _service(clock=clock)
        original = (await service.get_items())[0]

        clock.now = SAVE_TIME
        edited = original.model_copy(update={"quantity": 7, "name": "Alternador 12V"})
        saved = await service.save_item(edited)

        items = await service.get_items()
        self.assertEqual(len(items), 3)
        self.assertEqual(saved.id, original.id)
        self.assertEqual(saved.updated_at, SAVE_TIME)
        self.assertEqual(items[0].quantity, 7)
        self.assertEqual(items[0].name, "Alternador 12V")
        self.assertEqual(items[0].price, original.price)

    async def test_unknown_id_is_inserted_with_fresh_id(self) -> None:
        service = _service(id_factory=lambda: "gerado")
        saved = await service.save_item(_new_item(id="desconhecido"))
        self.assertEqual(saved.id, "gerado")
        self.assertEqual(len(await service.get_items()), 4)

    async def test_delete_item(self) -> None:
        service = _service()
        await service.delete_item("2")
        self.assertEqual([i.id for i in await service.get_items()], ["1", "3"])

    async def test_delete_unknown_item_preserves_collection(self) -> None:
        service = _service()
        before = await service.get_items()
        await service.delete_item("nao-existe")
        self.assertEqual(await service.get_items(), before)


class TestContacts(unittest.IsolatedAsyncioTestCase):
    async def test_save_new_contact(self) -> None:
        service = _service()
        saved = await service.save_contact(
            Contact(type="supplier", name="Elétrica Sul", nif="123", email="geral@sul.pt")
        )
        contacts = await service.get_contacts()
        self.assertEqual(len(contacts), 3)
        self.assertNotIn(saved.id, ("", "1", "2"))

    async def test_update_contact_in_place(self) -> None:
        service = _service()
        first = (await service.get_contacts())[0]
        saved = await service.save_contact(first.model_copy(update={"phone": "910000000"}))
        contacts = await service.get_contacts()
        self.assertEqual(len(contacts), 2)
        self.assertEqual(saved.id, first.id)
        self.assertEqual(contacts[0].phone, "910000000")

    async def test_delete_contact_and_unknown(self) -> None:
        service = _service()
        await service.delete_contact("missing")
        self.assertEqual(len(await service.get_contacts()), 2)
        await service.delete_contact("1")
        self.assertEqual([c.id for c in await service.get_contacts()], ["2"])


class TestSimulatedLatency(unittest.IsolatedAsyncioTestCase):
    async def test_login_sleeps_when_enabled(self) -> None:
        service = _service(simulate_latency=True)
        with patch("eletror.services.storage.asyncio.sleep", new=AsyncMock()) as sleep:
            await service.login("admin", "paulo")
        sleep.assert_awaited_once_with(LATENCY_LOGIN)

    async def test_no_sleep_when_disabled(self) -> None:
        service = _service(simulate_latency=False)
        with patch("eletror.services.storage.asyncio.sleep", new=AsyncMock()) as sleep:
            await service.get_items()
        sleep.assert_not_awaited()

    async def test_current_user_never_sleeps(self) -> None:
        service = _service(simulate_latency=True)
        with patch("eletror.services.storage.asyncio.sleep", new=AsyncMock()) as sleep:
            await service.get_current_user()
        sleep.assert_not_awaited()


class TestPendingStorageFormat(unittest.IsolatedAsyncioTestCase):
    async def test_pending_record_shape(self) -> None:
        store = InMemoryKeyValueStore()
        await _service(store).register("joao", "pass123")
        self.assertEqual(
            json.loads(store.get(PENDING_USERS_KEY)),
            [{"username": "joao", "role": "user", "password": "pass123"}],
        )


if __name__ == "__main__":
    unittest.main()
