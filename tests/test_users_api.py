import asyncio
import time
import unittest
from unittest import mock

import httpx
from fastapi.routing import APIRoute
from fastapi.testclient import TestClient

from camper_api.database import SessionLocal
from camper_api.main import create_app
from camper_api.models.camper import Camper
from camper_api.models.city import City
from camper_api.models.user import User
from camper_api.schemas.user import REQUIRED_USER_FIELDS
from camper_api.services.token import decode_access_token
from camper_api.users import crud

from helpers import reset_database, user_payload


class UserApiTests(unittest.TestCase):
    def setUp(self):
        reset_database()
        self.client = TestClient(create_app())

    def _count(self, model):
        db = SessionLocal()
        try:
            return db.query(model).count()
        finally:
            db.close()

    def test_create_user_returns_token_and_camper_profile(self):
        response = self.client.post("/api/users", json=user_payload())
        self.assertEqual(response.status_code, 201)
        payload = response.json()

        self.assertIn("token", payload)
        user = payload["user"]
        self.assertNotIn("password", user)
        self.assertEqual(user["email"], "laura@example.com")
        self.assertEqual(user["role"], "camper")
        self.assertEqual(user["city_name"], "Bucaramanga")
        self.assertEqual(user["document_number"], "1098765432")
        self.assertEqual(user["camper"]["title"], "Nuevo Camper")
        self.assertEqual(user["camper"]["status"], "formacion")
        self.assertEqual(user["camper"]["full_name"], "Laura Gómez")
        self.assertIsNone(user["camper"]["image"])

        claims = decode_access_token(payload["token"])
        self.assertEqual(claims["id"], user["id"])
        self.assertEqual(claims["email"], "laura@example.com")
        self.assertEqual(claims["role"], "camper")

    def test_create_user_missing_field_is_named(self):
        for field in REQUIRED_USER_FIELDS:
            with self.subTest(field=field):
                body = user_payload()
                del body[field]
                response = self.client.post("/api/users", json=body)
                self.assertEqual(response.status_code, 400)
                self.assertIn(field, response.json()["detail"])

    def test_create_user_empty_field_is_rejected(self):
        response = self.client.post("/api/users", json=user_payload(city=""))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"], "El campo city es requerido")

    def test_create_user_invalid_date(self):
        for value in ("14/03/2001", "2001-02-30", "mañana"):
            with self.subTest(birth_date=value):
                response = self.client.post("/api/users", json=user_payload(birth_date=value))
                self.assertEqual(response.status_code, 400)
                self.assertIn("YYYY-MM-DD", response.json()["detail"])
        self.assertEqual(self._count(User), 0)

    def test_duplicate_email_leaves_no_partial_rows(self):
        first = self.client.post("/api/users", json=user_payload())
        self.assertEqual(first.status_code, 201)

        second = self.client.post(
            "/api/users",
            json=user_payload(first_name="Otra", document_number="555", city="Cúcuta"),
        )
        self.assertEqual(second.status_code, 400)
        self.assertEqual(second.json()["detail"], "El email ya está registrado")
        self.assertNotIn("token", second.json())

        self.assertEqual(self._count(User), 1)
        self.assertEqual(self._count(Camper), 1)
        self.assertEqual(self._count(City), 1)

    def test_login_returns_token_without_password(self):
        self.client.post("/api/users", json=user_payload())

        response = self.client.post(
            "/api/users/login",
            json={"email": "laura@example.com", "password": "s3cr3t-pass"},
        )
        self.assertEqual(response.status_code, 200)
        payload = response.json()
        self.assertEqual(payload["token_type"], "bearer")
        self.assertNotIn("password", payload["user"])
        self.assertEqual(decode_access_token(payload["token"])["role"], "camper")

    def test_login_wrong_password(self):
        self.client.post("/api/users", json=user_payload())

        response = self.client.post(
            "/api/users/login",
            json={"email": "laura@example.com", "password": "incorrecta"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertNotIn("token", response.json())

    def test_login_unknown_email(self):
        response = self.client.post(
            "/api/users/login",
            json={"email": "nadie@example.com", "password": "s3cr3t-pass"},
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Credenciales inválidas")
        self.assertNotIn("token", response.json())

    def test_logout(self):
        response = self.client.post("/api/users/logout")
        self.assertEqual(response.status_code, 200)
        self.assertIn("message", response.json())

    def test_get_all_never_returns_password(self):
        self.client.post("/api/users", json=user_payload())
        self.client.post("/api/users", json=user_payload(email="pedro@example.com", city="Cúcuta"))

        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 200)
        users = response.json()
        self.assertEqual([u["email"] for u in users], ["laura@example.com", "pedro@example.com"])
        for user in users:
            self.assertNotIn("password", user)
            self.assertIsNotNone(user["camper"])

    def test_get_by_id(self):
        created = self.client.post("/api/users", json=user_payload()).json()["user"]

        response = self.client.get(f"/api/users/{created['id']}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["email"], "laura@example.com")
        self.assertNotIn("password", response.json())

        self.assertEqual(self.client.get("/api/users/9999").status_code, 404)

    def test_update_is_not_implemented(self):
        created = self.client.post("/api/users", json=user_payload()).json()["user"]

        for method in ("put", "patch"):
            with self.subTest(method=method):
                response = getattr(self.client, method)(
                    f"/api/users/{created['id']}", json={"first_name": "Ana"}
                )
                self.assertEqual(response.status_code, 501)

    def test_delete_removes_user_and_camper(self):
        created = self.client.post("/api/users", json=user_payload()).json()["user"]
        self.client.post("/api/users", json=user_payload(email="pedro@example.com"))

        response = self.client.delete(f"/api/users/{created['id']}")
        self.assertEqual(response.status_code, 200)

        self.assertEqual(self._count(User), 1)
        self.assertEqual(self._count(Camper), 1)
        self.assertEqual(self.client.get(f"/api/users/{created['id']}").status_code, 404)

    def test_delete_unknown_user(self):
        response = self.client.delete("/api/users/9999")
        self.assertEqual(response.status_code, 404)


class ConcurrentRequestTests(unittest.TestCase):
    def test_api_handlers_are_sync_so_they_run_in_the_threadpool(self):
        for route in create_app().routes:
            if isinstance(route, APIRoute) and route.path.startswith("/api/"):
                with self.subTest(path=route.path, methods=sorted(route.methods)):
                    self.assertFalse(asyncio.iscoroutinefunction(route.endpoint))

    def test_slow_logins_do_not_block_each_other(self):
        def slow_lookup(db, email):
            time.sleep(0.3)
            return None

        app = create_app()

        async def run_logins():
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                started = time.perf_counter()
                responses = await asyncio.gather(*[
                    client.post("/api/users/login", json={"email": f"u{i}@example.com", "password": "x"})
                    for i in range(4)
                ])
                return time.perf_counter() - started, responses

        with mock.patch.object(crud, "find_by_email", side_effect=slow_lookup):
            elapsed, responses = asyncio.run(run_logins())

        self.assertEqual([r.status_code for r in responses], [401] * 4)
        # En serie serían 1.2s
        self.assertLess(elapsed, 0.9)


if __name__ == "__main__":
    unittest.main()
