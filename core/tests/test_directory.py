from dataclasses import replace
from datetime import date

from django.test import TestCase, override_settings

from core.entities import Event, Schedule, ScheduleItem
from core.models import Role
from core.services import directory, schedules
from core.services.directory import DirectoryValidationError
from core.services.persistence import EVENTS, SERVANTS, USERS, MemoryGateway
from core.services.store import EntityStore


class ServantDirectoryTests(TestCase):
    def setUp(self):
        self.gateway = MemoryGateway()
        self.store = EntityStore.load(self.gateway)

    def test_add_assigns_fresh_id(self):
        existing = {servant.id for servant in self.store.servants}
        servant = directory.add_servant(self.store, name="Paulo", phone="(11) 90000-0000", function_ids=[1, 2])
        self.assertNotIn(servant.id, existing)
        self.assertEqual(servant.function_ids, frozenset({1, 2}))
        self.assertEqual(len(self.store.servants), len(existing) + 1)
        self.assertIn(SERVANTS, self.gateway.data)

    def test_consecutive_adds_get_distinct_ids(self):
        first = directory.add_servant(self.store, name="A")
        second = directory.add_servant(self.store, name="B")
        self.assertNotEqual(first.id, second.id)

    def test_placeholder_photo_derives_from_id(self):
        servant = directory.add_servant(self.store, name="Sem Foto")
        self.assertEqual(servant.photo_url, f"https://picsum.photos/seed/{servant.id}/100/100")

    @override_settings(ESCALAS_PLACEHOLDER_PHOTO_URL="/media/servos/{id}.png")
    def test_placeholder_photo_template_is_configurable(self):
        servant = directory.add_servant(self.store, name="Sem Foto")
        self.assertEqual(servant.photo_url, f"/media/servos/{servant.id}.png")

    def test_supplied_photo_is_kept(self):
        servant = directory.add_servant(self.store, name="Com Foto", photo_url="data:image/png;base64,AAAA")
        self.assertEqual(servant.photo_url, "data:image/png;base64,AAAA")

    def test_update_replaces_by_id(self):
        ana = self.store.get(SERVANTS, 1)
        updated = directory.update_servant(self.store, replace(ana, active=False))
        self.assertFalse(updated.active)
        self.assertFalse(self.store.get(SERVANTS, 1).active)

    def test_update_unknown_servant_is_ignored(self):
        before = self.store.servants
        ana = self.store.get(SERVANTS, 1)
        self.assertIsNone(directory.update_servant(self.store, replace(ana, id=999)))
        self.assertEqual(self.store.servants, before)

    def test_delete_unknown_id_is_noop(self):
        before = self.store.servants
        self.assertFalse(directory.delete_servant(self.store, 999))
        self.assertEqual(self.store.servants, before)
        self.assertNotIn(SERVANTS, self.gateway.data)

    def test_delete_keeps_schedule_items(self):
        schedules.upsert_schedule(
            self.store, Schedule(date=date(2024, 7, 28), items=(ScheduleItem(id=1, function_id=5, servant_id=1),))
        )
        self.assertTrue(directory.delete_servant(self.store, 1))
        self.assertIsNone(self.store.get(SERVANTS, 1))
        schedule = schedules.get_schedule_by_date(self.store, "2024-07-28")
        self.assertEqual(schedule.items[0].servant_id, 1)


class UserDirectoryTests(TestCase):
    def setUp(self):
        self.store = EntityStore.load(MemoryGateway())

    def test_add_user(self):
        user = directory.add_user(self.store, name="Nova", email="nova@email.com", role="Líder")
        self.assertEqual(user.role, Role.LEADER)
        self.assertNotIn(user.id, {1, 2, 3, 4})
        self.assertEqual(self.store.get(USERS, user.id), user)

    def test_updating_another_user_keeps_current_user(self):
        current = self.store.current_user
        pastor = next(user for user in self.store.users if user.role == Role.PASTOR)
        directory.update_user(self.store, replace(pastor, name="Maria"))
        self.assertEqual(self.store.current_user, current)

    def test_delete_user(self):
        self.assertTrue(directory.delete_user(self.store, 4))
        self.assertIsNone(self.store.get(USERS, 4))
        self.assertFalse(directory.delete_user(self.store, 4))


class EventDirectoryTests(TestCase):
    def setUp(self):
        self.gateway = MemoryGateway()
        self.store = EntityStore.load(self.gateway)

    def test_add_event_starts_without_overrides(self):
        event = directory.add_event(
            self.store, title="Retiro", start_date="2024-08-02", end_date="2024-08-04", location="Sitio"
        )
        self.assertEqual(event.schedules, {})
        self.assertEqual(event.start_date, date(2024, 8, 2))
        self.assertIn(event, self.store.events)

    def test_single_day_event_is_valid(self):
        event = directory.add_event(self.store, title="Vigilia", start_date=date(2024, 8, 2), end_date=date(2024, 8, 2))
        self.assertEqual(event.start_date, event.end_date)

    def test_end_before_start_is_rejected(self):
        before = self.store.events
        with self.assertRaises(DirectoryValidationError):
            directory.add_event(self.store, title="Invalido", start_date="2024-08-04", end_date="2024-08-02")
        self.assertEqual(self.store.events, before)
        self.assertNotIn(EVENTS, self.gateway.data)

    def test_unparseable_date_is_rejected(self):
        with self.assertRaises(DirectoryValidationError):
            directory.add_event(self.store, title="Invalido", start_date="amanha", end_date="2024-08-02")

    def test_update_with_end_before_start_is_rejected(self):
        event = self.store.events[0]
        with self.assertRaises(DirectoryValidationError):
            directory.update_event(self.store, replace(event, end_date=event.start_date.replace(year=2000)))
        self.assertEqual(self.store.events[0], event)

    def test_delete_event_does_not_touch_schedules(self):
        event = directory.add_event(self.store, title="Retiro", start_date="2024-08-02", end_date="2024-08-04")
        schedules.upsert_schedule(self.store, Schedule(date=date(2024, 8, 3)))
        before = self.store.schedules
        self.assertTrue(directory.delete_event(self.store, event.id))
        self.assertNotIn(event, self.store.events)
        self.assertEqual(self.store.schedules, before)

    def test_add_event_assigns_fresh_id(self):
        existing = {event.id for event in self.store.events}
        event = directory.add_event(self.store, title="Retiro", start_date="2024-08-02", end_date="2024-08-04")
        self.assertNotIn(event.id, existing)
        self.assertEqual(len(self.store.events), len(existing) + 1)

    def test_delete_unknown_event_is_noop(self):
        before = self.store.events
        self.assertFalse(directory.delete_event(self.store, 999))
        self.assertEqual(self.store.events, before)
        self.assertNotIn(EVENTS, self.gateway.data)

    def test_returned_event_overrides_are_read_only(self):
        directory.add_event(self.store, title="Retiro", start_date="2024-08-02", end_date="2024-08-04")
        snapshot = self.store.events[-1]
        with self.assertRaises(TypeError):
            snapshot.schedules[date(2024, 8, 3)] = Schedule(date=date(2024, 8, 3))
        self.assertEqual(self.store.events[-1].schedules, {})
        self.assertEqual(hash(snapshot), hash(self.store.events[-1]))

    def test_event_override_keys_are_dates(self):
        overrides = {"2024-08-03": Schedule(date="2024-08-03")}
        event = Event(id=1, title="Retiro", start_date="2024-08-02", end_date="2024-08-04", schedules=overrides)
        overrides.clear()
        self.assertEqual(list(event.schedules), [date(2024, 8, 3)])
        self.assertEqual(Event.from_dict(event.to_dict()), event)
