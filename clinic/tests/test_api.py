"""
Integration tests for the MedixOne JSON API.

Covers token and JWT login, the session description used by script
clients, the language endpoints and the dashboard and patient data.
"""
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient, APITestCase

from clinic.models import AuditEvent, User


class MedixOneAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(
            username="admin@medixone.com",
            email="admin@medixone.com",
            password="admin123",
            first_name="Admin",
            last_name="Usuario",
            role=User.Role.ADMIN,
        )
        self.client = APIClient()

    def login(self, email="admin@medixone.com", password="admin123"):
        return self.client.post(reverse("login_api"), {"email": email, "password": password}, format="json")

    def authorize(self):
        r = self.login()
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {r.data['jwt_access']}")
        return r

    def test_login_returns_token_jwt_and_user(self):
        r = self.login()
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.data["ok"])
        self.assertTrue(r.data["token"])
        self.assertIn("jwt_access", r.data)
        self.assertIn("jwt_refresh", r.data)
        self.assertEqual(r.data["user"]["role"], "ADMIN")
        self.assertEqual(r.data["user"]["firstName"], "Admin")

    def test_login_errors_are_translated(self):
        r = self.login(password="")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "missing_fields")

        r = self.client.post(reverse("login_api"), {"email": "admin@medixone.com", "password": "bad"},
                             format="json", HTTP_ACCEPT_LANGUAGE="en")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "invalid_credentials")
        self.assertEqual(r.data["error"]["message"], "Invalid credentials")

    def test_drf_token_authenticates(self):
        token = self.login().data["token"]
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token}")
        r = self.client.get(reverse("dashboard_api"))
        self.assertEqual(r.status_code, 200)

    def test_session_endpoint_describes_auth_state(self):
        r = self.client.get(reverse("session_api"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["status"], "anonymous")
        self.assertEqual(r.data["guard"], "UNAUTHENTICATED")

        self.authorize()
        r = self.client.get(reverse("session_api"))
        self.assertEqual(r.data["status"], "authenticated")
        self.assertEqual(r.data["guard"], "AUTHENTICATED")
        self.assertEqual(r.data["user"]["email"], "admin@medixone.com")

    def test_logout_blacklists_refresh_token(self):
        refresh = self.authorize().data["jwt_refresh"]
        r = self.client.post(reverse("logout_api"), {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["blacklisted"], 1)
        self.assertTrue(AuditEvent.objects.filter(action="logout", user=self.admin).exists())

        r = self.client.post(reverse("logout_api"), {"refresh": refresh}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "invalid_token")

    def test_logout_without_refresh_blacklists_everything(self):
        self.login()
        self.authorize()
        r = self.client.post(reverse("logout_api"), {}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["blacklisted"], 2)

    def test_language_get_put_toggle(self):
        r = self.client.get(reverse("language_api"))
        self.assertEqual(r.data["language"], "es")
        self.assertEqual([c["code"] for c in r.data["choices"]], ["es", "en"])

        r = self.client.put(reverse("language_api"), {"language": "en"}, format="json")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data["language"], "en")
        self.assertEqual(r["Content-Language"], "en")

        # the session remembers the choice
        r = self.client.post(reverse("language_toggle_api"))
        self.assertEqual(r.data["language"], "es")
        r = self.client.get(reverse("language_api"))
        self.assertEqual(r.data["language"], "es")

    def test_unknown_language_is_rejected(self):
        self.client.put(reverse("language_api"), {"language": "en"}, format="json")
        r = self.client.put(reverse("language_api"), {"language": "fr"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertEqual(r.data["error"]["code"], "invalid_language")
        self.assertEqual(self.client.get(reverse("language_api")).data["language"], "en")

    def test_authenticated_language_change_is_audited(self):
        self.authorize()
        self.client.post(reverse("language_toggle_api"))
        event = AuditEvent.objects.get(action="language_change")
        self.assertEqual(event.detail, {"from": "es", "to": "en"})

    def test_translations_follow_the_session_language(self):
        r = self.client.get(reverse("translations_api"))
        self.assertEqual(r.data["translations"]["navigation"]["patients"], "Pacientes")
        self.client.post(reverse("language_toggle_api"))
        r = self.client.get(reverse("translations_api"))
        self.assertEqual(r.data["language"], "en")
        self.assertEqual(r.data["translations"]["navigation"]["patients"], "Patients")

    def test_dashboard_requires_authentication(self):
        r = self.client.get(reverse("dashboard_api"))
        self.assertIn(r.status_code, (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN))
        self.assertFalse(r.data["ok"])

    def test_dashboard_data(self):
        self.authorize()
        data = self.client.get(reverse("dashboard_api")).data["data"]
        self.assertEqual(data["stats"]["totalPatients"], 1248)
        self.assertEqual(len(data["cards"]), 4)
        self.assertEqual(data["cards"][0]["trend"]["type"], "increase")
        self.assertEqual(len(data["quickActions"]), 4)
        self.assertEqual(data["navigation"][0]["name"], "Panel Principal")

    def test_today_appointments(self):
        self.authorize()
        r = self.client.get(reverse("today_appointments_api"))
        self.assertEqual(r.data["count"], 4)
        urgent = [a for a in r.data["data"] if a["urgent"]]
        self.assertEqual(len(urgent), 1)
        self.assertEqual(urgent[0]["status"], "IN_PROGRESS")

    def test_patient_create(self):
        self.authorize()
        payload = {
            "firstName": "Carlos",
            "lastName": "Ruiz",
            "email": "Carlos.Ruiz@Example.com",
            "phone": "+34611222333",
            "dateOfBirth": "1975-06-30",
            "gender": "MALE",
            "emergencyContact": {"name": "Lucía Ruiz", "relationship": "Esposa", "phone": "+34 611 000 111"},
        }
        r = self.client.post(reverse("patient_create_api"), payload, format="json")
        self.assertEqual(r.status_code, 201)
        patient = r.data["data"]
        self.assertTrue(patient["id"].startswith("pat-"))
        self.assertEqual(patient["email"], "carlos.ruiz@example.com")
        self.assertEqual(patient["fullName"], "Carlos Ruiz")
        self.assertEqual(patient["emergencyContact"]["phone"], "+34611000111")
        self.assertGreaterEqual(patient["age"], 50)

    def test_patient_create_validation(self):
        self.authorize()
        r = self.client.post(reverse("patient_create_api"),
                             {"firstName": " ", "lastName": "X", "phone": "12", "dateOfBirth": "1990-01-01",
                              "email": "not-an-email"}, format="json")
        self.assertEqual(r.status_code, 400)
        self.assertFalse(r.data["ok"])
        self.assertIn("firstName", r.data["error"]["message"])
        self.assertIn("email", r.data["error"]["message"])

    def test_healthz(self):
        r = self.client.get(reverse("healthz"))
        self.assertEqual(r.status_code, 200)
        self.assertTrue(r.json()["ok"])
