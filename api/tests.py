from django.test import TestCase
from rest_framework.test import APIClient

from core.services.persistence import DatabaseGateway
from core.services.store import EntityStore


class DirectoryApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_list_seed_servants(self):
        response = self.client.get("/api/servants/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 10)
        self.assertEqual(response.json()[0]["function_ids"], [5, 10])

    def test_create_update_and_delete_servant(self):
        response = self.client.post(
            "/api/servants/", {"name": "Paulo", "phone": "(11) 90000-0000", "function_ids": [1]}, format="json"
        )
        self.assertEqual(response.status_code, 201)
        servant = response.json()
        self.assertTrue(servant["photo_url"].endswith(f"/{servant['id']}/100/100"))

        response = self.client.put(
            f"/api/servants/{servant['id']}/",
            {"name": "Paulo", "phone": "(11) 90000-0000", "function_ids": [1, 2], "active": False},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["function_ids"], [1, 2])
        self.assertFalse(response.json()["active"])
        self.assertEqual(response.json()["photo_url"], servant["photo_url"])

        self.assertEqual(self.client.delete(f"/api/servants/{servant['id']}/").status_code, 204)
        self.assertEqual(self.client.get(f"/api/servants/{servant['id']}/").status_code, 404)

    def test_unknown_function_is_rejected(self):
        response = self.client.post("/api/servants/", {"name": "Paulo", "function_ids": [99]}, format="json")
        self.assertEqual(response.status_code, 400)

    def test_delete_missing_servant(self):
        self.assertEqual(self.client.delete("/api/servants/999/").status_code, 404)

    def test_event_with_end_before_start_is_rejected(self):
        response = self.client.post(
            "/api/events/",
            {"title": "Retiro", "start_date": "2024-08-04", "end_date": "2024-08-02", "location": "Sitio"},
            format="json",
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(len(self.client.get("/api/events/").json()), 1)

    def test_create_event(self):
        response = self.client.post(
            "/api/events/",
            {"title": "Retiro", "start_date": "2024-08-02", "end_date": "2024-08-04"},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["schedules"], {})


class ScheduleApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_put_upserts_by_date(self):
        payload = {"items": [{"function_id": 5, "servant_id": 1, "shift_id": 3}], "published": True}
        response = self.client.put("/api/schedules/2024-07-28/", payload, format="json")
        self.assertEqual(response.status_code, 200)
        item_id = response.json()["items"][0]["id"]
        self.assertTrue(item_id)

        payload = {"items": [{"id": item_id, "function_id": 6, "servant_id": 2, "shift_id": 3}], "notes": "Ceia"}
        self.client.put("/api/schedules/2024-07-28/", payload, format="json")

        response = self.client.get("/api/schedules/2024-07-28/")
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["notes"], "Ceia")
        self.assertFalse(data["published"])
        self.assertEqual(data["items"], [{"id": item_id, "function_id": 6, "servant_id": 2, "shift_id": 3}])

    def test_missing_date_is_404(self):
        self.assertEqual(self.client.get("/api/schedules/1999-01-03/").status_code, 404)

    def test_list_by_range(self):
        self.client.put("/api/schedules/2024-07-28/", {"items": []}, format="json")
        self.client.put("/api/schedules/2024-08-04/", {"items": []}, format="json")
        response = self.client.get("/api/schedules/", {"start": "2024-07-01", "end": "2024-07-31"})
        self.assertEqual([schedule["date"] for schedule in response.json()], ["2024-07-28"])


class PermissionApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_select_current_user(self):
        response = self.client.put("/api/current-user/", {"id": 4}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["user"]["role"], "Servo")
        self.assertNotIn("manageEscala", response.json()["permissions"])
        self.assertEqual(self.client.get("/api/current-user/").json()["user"]["id"], 4)

    def test_select_unknown_user(self):
        self.assertEqual(self.client.put("/api/current-user/", {"id": 999}, format="json").status_code, 404)

    def test_update_role_permissions(self):
        response = self.client.put("/api/permissions/Servo/", {"permissions": ["viewRelatorios"]}, format="json")
        self.assertEqual(response.status_code, 200)
        mapping = self.client.get("/api/permissions/").json()["role_permissions"]
        self.assertEqual(mapping["Servo"], ["viewRelatorios"])

    def test_administrator_permissions_are_fixed(self):
        response = self.client.put("/api/permissions/Administrador/", {"permissions": []}, format="json")
        self.assertEqual(response.status_code, 403)
        mapping = self.client.get("/api/permissions/").json()["role_permissions"]
        self.assertEqual(len(mapping["Administrador"]), 11)

    def test_unknown_role(self):
        response = self.client.put("/api/permissions/Visitante/", {"permissions": []}, format="json")
        self.assertEqual(response.status_code, 404)

    def test_writes_are_not_blocked_for_restricted_user(self):
        self.client.put("/api/current-user/", {"id": 4}, format="json")
        response = self.client.post("/api/servants/", {"name": "Paulo"}, format="json")
        self.assertEqual(response.status_code, 201)


class ReportApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        store = EntityStore.load(DatabaseGateway())
        self.servant_id = store.servants[0].id
        self.client.put(
            "/api/schedules/2024-07-28/",
            {"items": [{"function_id": 5, "servant_id": self.servant_id, "shift_id": 3},
                       {"function_id": 6, "servant_id": 0, "shift_id": 3}]},
            format="json",
        )

    def test_period_report(self):
        response = self.client.get("/api/reports/participation/", {"start": "2024-07-28", "end": "2024-07-28"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(
            response.json(),
            [
                {
                    "date": "2024-07-28",
                    "ministry": "Louvor",
                    "function": "Vocal",
                    "servant": "Ana Silva",
                    "servant_id": self.servant_id,
                }
            ],
        )

    def test_servant_report(self):
        response = self.client.get(
            "/api/reports/participation/",
            {"start": "2024-07-01", "end": "2024-07-31", "servant_id": self.servant_id},
        )
        self.assertEqual(response.json(), [{"date": "2024-07-28", "ministry": "Louvor", "function": "Vocal"}])

    def test_ministry_report(self):
        response = self.client.get(
            "/api/reports/participation/", {"start": "2024-07-01", "end": "2024-07-31", "by": "ministry"}
        )
        self.assertEqual(response.json(), [{"ministry": "Louvor", "servant": "Ana Silva", "participations": 1}])

    def test_servant_zero_returns_servant_report(self):
        response = self.client.get(
            "/api/reports/participation/", {"start": "2024-07-28", "end": "2024-07-28", "servant_id": 0}
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])

    def test_reminders(self):
        response = self.client.get("/api/reminders/", {"start": "2024-07-28", "end": "2024-07-28"})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual([entry["servant"]["id"] for entry in data], [self.servant_id])
        self.assertEqual(data[0]["duties"], [{"date": "2024-07-28", "function": "Vocal"}])

    def test_reminders_reject_inverted_range(self):
        response = self.client.get("/api/reminders/", {"start": "2024-07-31", "end": "2024-07-01"})
        self.assertEqual(response.status_code, 400)

    def test_missing_range_is_rejected(self):
        self.assertEqual(self.client.get("/api/reports/participation/").status_code, 400)


class ReferenceApiTests(TestCase):
    def test_reference_data(self):
        data = APIClient().get("/api/reference/").json()
        self.assertEqual(len(data["ministries"]), 4)
        self.assertEqual(data["ministries"][0]["function_ids"], [1, 2, 3, 4])
        self.assertEqual(len(data["functions"]), 13)
        self.assertEqual([shift["name"] for shift in data["shifts"]], ["Manhã", "Tarde", "Noite"])
