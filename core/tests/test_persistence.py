from datetime import date

from django.core.management import call_command
from django.test import TestCase, override_settings

from core.entities import Schedule, ScheduleItem
from core.models import Role, StoredCollection
from core.services import directory, permissions, schedules
from core.services.persistence import (
    ACTIVE_USER_ID,
    ROLE_PERMISSIONS,
    SCHEDULES,
    SERVANTS,
    USERS,
    DatabaseGateway,
    MemoryGateway,
    get_gateway,
)
from core.services.store import EntityStore


class GatewayTests(TestCase):
    def test_missing_key_returns_default(self):
        gateway = DatabaseGateway()
        self.assertEqual(gateway.load(SERVANTS, ["default"]), ["default"])

    def test_save_then_load_round_trips(self):
        gateway = DatabaseGateway()
        gateway.save(SERVANTS, [{"id": 1, "name": "Ana"}])
        self.assertEqual(gateway.load(SERVANTS, []), [{"id": 1, "name": "Ana"}])
        self.assertEqual(StoredCollection.objects.filter(key=SERVANTS).count(), 1)

    def test_save_overwrites_previous_value(self):
        gateway = DatabaseGateway()
        gateway.save(ACTIVE_USER_ID, 1)
        gateway.save(ACTIVE_USER_ID, 2)
        self.assertEqual(gateway.load(ACTIVE_USER_ID, None), 2)
        self.assertEqual(StoredCollection.objects.filter(key=ACTIVE_USER_ID).count(), 1)

    def test_corrupt_value_is_discarded_and_default_returned(self):
        StoredCollection.objects.create(key=SERVANTS, value="{not json")
        gateway = DatabaseGateway()
        self.assertEqual(gateway.load(SERVANTS, []), [])
        self.assertFalse(StoredCollection.objects.filter(key=SERVANTS).exists())

    def test_deeply_nested_value_is_discarded(self):
        gateway = MemoryGateway({SERVANTS: "[" * 200000 + "]" * 200000})
        store = EntityStore.load(gateway)
        self.assertEqual(len(store.servants), 10)
        self.assertNotIn(SERVANTS, gateway.data)

    def test_parse_failure_is_treated_as_corruption(self):
        gateway = MemoryGateway({USERS: '[{"id": 1}]'})
        loaded = gateway.load(USERS, "fallback", parse=lambda data: [item["name"] for item in data])
        self.assertEqual(loaded, "fallback")
        self.assertNotIn(USERS, gateway.data)

    def test_blank_value_returns_default(self):
        gateway = MemoryGateway({SCHEDULES: "   "})
        self.assertEqual(gateway.load(SCHEDULES, []), [])

    @override_settings(ESCALAS_PERSISTENCE_BACKEND="memory")
    def test_memory_backend_is_shared(self):
        self.assertIs(get_gateway(), get_gateway())

    @override_settings(ESCALAS_PERSISTENCE_BACKEND="redis")
    def test_unknown_backend_is_rejected(self):
        with self.assertRaises(ValueError):
            get_gateway()


class StoreRestartTests(TestCase):
    def test_mutations_survive_a_reload(self):
        store = EntityStore.load(DatabaseGateway())
        servant = directory.add_servant(store, name="Novo Servo", phone="(11) 90000-0000", function_ids=[5])
        user = directory.add_user(store, name="Lider", email="lider2@email.com", role=Role.LEADER)
        permissions.set_current_user(store, user)
        permissions.update_role_permissions(store, Role.SERVANT, ["viewDashboard"])
        schedule = Schedule(
            date=date(2024, 7, 28),
            items=(ScheduleItem(id=7, function_id=5, servant_id=servant.id, shift_id=3),),
            notes="Culto",
            published=True,
        )
        schedules.upsert_schedule(store, schedule)

        reloaded = EntityStore.load(DatabaseGateway())
        self.assertEqual(reloaded.servants, store.servants)
        self.assertEqual(reloaded.users, store.users)
        self.assertEqual(reloaded.events, store.events)
        self.assertEqual(reloaded.schedules, store.schedules)
        self.assertEqual(reloaded.role_permissions, store.role_permissions)
        self.assertEqual(reloaded.current_user, user)
        self.assertEqual(schedules.get_schedule_by_date(reloaded, "2024-07-28"), schedule)

    def test_corrupt_collection_falls_back_to_seed(self):
        StoredCollection.objects.create(key=SERVANTS, value='[{"id": "abc"}]')
        store = EntityStore.load(DatabaseGateway())
        self.assertEqual(len(store.servants), 10)
        self.assertFalse(StoredCollection.objects.filter(key=SERVANTS).exists())

    def test_corrupt_role_permissions_fall_back_to_initial_mapping(self):
        StoredCollection.objects.create(key=ROLE_PERMISSIONS, value='{"Visitante": ["viewDashboard"]}')
        store = EntityStore.load(DatabaseGateway())
        self.assertIn("manageEscala", store.role_permissions[Role.LEADER])

    def test_unknown_active_user_falls_back_to_first_user(self):
        gateway = MemoryGateway({ACTIVE_USER_ID: "999"})
        store = EntityStore.load(gateway)
        self.assertEqual(store.current_user.id, 1)

    def test_empty_store_without_seed(self):
        store = EntityStore.load(MemoryGateway(), seed_defaults=False)
        self.assertEqual(store.servants, ())
        self.assertEqual(store.schedules, ())
        self.assertEqual(store.users, ())
        self.assertEqual(store.current_user.role, Role.ADMINISTRATOR)


class ResetCollectionsCommandTests(TestCase):
    def test_reset_discards_selected_keys(self):
        gateway = DatabaseGateway()
        gateway.save(SERVANTS, [])
        gateway.save(USERS, [])
        call_command("reset_collections", "--key", SERVANTS)
        self.assertFalse(StoredCollection.objects.filter(key=SERVANTS).exists())
        self.assertTrue(StoredCollection.objects.filter(key=USERS).exists())

    def test_reset_all(self):
        gateway = DatabaseGateway()
        gateway.save(SERVANTS, [])
        gateway.save(ACTIVE_USER_ID, 1)
        call_command("reset_collections")
        self.assertEqual(StoredCollection.objects.count(), 0)
