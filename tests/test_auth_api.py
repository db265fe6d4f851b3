"""API tests for /auth: registration, login, refresh, profile, the auth gate and role checks."""

import unittest
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from app.core.security import create_access_token, decode_access_token, decode_refresh_token
from app.models import User
from app.schemas.auth import RegisterRequest, TokenClaims
from app.services.users import register_user
from tests.helpers import API, ApiTestCase, bearer


class TestRegister(ApiTestCase):
    def test_returns_summary_and_token_pair(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "A Person", "email": "A@X.com", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["message"], "User registered successfully")
        user = body["data"]["user"]
        self.assertEqual(user["email"], "a@x.com")
        self.assertEqual(user["role"], "user")
        self.assertTrue(user["isActive"])
        self.assertNotIn("password", user)
        self.assertNotIn("passwordHash", user)

    def test_single_letter_name_accepted(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "A", "email": "a@x.com", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        self.assertEqual(resp.json()["data"]["user"]["name"], "A")

    def test_tokens_carry_created_identity(self) -> None:
        data = self.register()
        expected = TokenClaims(id=data["user"]["id"], email="a@x.com", role="user")
        self.assertEqual(decode_access_token(data["accessToken"]), expected)
        self.assertEqual(decode_refresh_token(data["refreshToken"]), expected)

    def test_duplicate_email_conflicts(self) -> None:
        self.register(email="a@x.com")
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "Other", "email": "A@x.com", "password": "secret1"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["message"], "User with this email already exists")
        self.assertFalse(resp.json()["success"])

    def test_unique_email_backs_up_precheck(self) -> None:
        self.register(email="a@x.com")
        with patch("app.services.users._email_taken", return_value=False):
            resp = self.client.post(
                f"{API}/auth/register",
                json={"name": "Other", "email": "a@x.com", "password": "secret1"},
            )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["message"], "User with this email already exists")
        db = self.SessionLocal()
        try:
            self.assertEqual(db.query(User).count(), 1)
        finally:
            db.close()

    def test_validation_errors_name_fields(self) -> None:
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": "   ", "email": "not-an-email", "password": "123", "mobileNo": "12"},
        )
        self.assertEqual(resp.status_code, 400)
        body = resp.json()
        self.assertEqual(body["message"], "Validation failed")
        fields = {e["field"] for e in body["errors"]}
        self.assertTrue({"name", "email", "password", "mobileNo"} <= fields)

    def test_password_hash_is_stored(self) -> None:
        self.register(password="secret1")
        db = self.SessionLocal()
        try:
            user = db.query(User).one()
            self.assertNotEqual(user.password_hash, "secret1")
            self.assertTrue(user.password_hash.startswith("$2"))
        finally:
            db.close()


class TestLogin(ApiTestCase):
    def test_login_success(self) -> None:
        self.register()
        resp = self.client.post(
            f"{API}/auth/login", json={"email": "A@x.com", "password": "secret1"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["message"], "Login successful")
        self.assertIn("accessToken", resp.json()["data"])

    def test_wrong_password_and_unknown_email_look_the_same(self) -> None:
        self.register()
        wrong = self.client.post(
            f"{API}/auth/login", json={"email": "a@x.com", "password": "nope123"}
        )
        unknown = self.client.post(
            f"{API}/auth/login", json={"email": "b@x.com", "password": "secret1"}
        )
        for resp in (wrong, unknown):
            self.assertEqual(resp.status_code, 401)
            self.assertEqual(resp.json(), {"success": False, "message": "Invalid email or password"})


class TestRefreshToken(ApiTestCase):
    def test_exchanges_refresh_token(self) -> None:
        data = self.register()
        resp = self.client.post(
            f"{API}/auth/refresh-token", json={"refreshToken": data["refreshToken"]}
        )
        self.assertEqual(resp.status_code, 200)
        pair = resp.json()["data"]
        self.assertEqual(decode_access_token(pair["accessToken"]).id, data["user"]["id"])

    def test_missing_refresh_token(self) -> None:
        resp = self.client.post(f"{API}/auth/refresh-token", json={})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["errors"][0]["message"], "Refresh token is required")

    def test_access_token_is_not_a_refresh_token(self) -> None:
        data = self.register()
        resp = self.client.post(
            f"{API}/auth/refresh-token", json={"refreshToken": data["accessToken"]}
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid refresh token")


class TestAuthGate(ApiTestCase):
    """Missing, expired, malformed and stale tokens are rejected with distinct messages."""

    def test_missing_token(self) -> None:
        resp = self.client.get(f"{API}/auth/profile")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Access token required")

    def test_malformed_header(self) -> None:
        data = self.register()
        resp = self.client.get(
            f"{API}/auth/profile", headers={"Authorization": f"Token {data['accessToken']}"}
        )
        self.assertEqual(resp.json()["message"], "Access token required")

    def test_expired_token(self) -> None:
        data = self.register()
        claims = TokenClaims(id=data["user"]["id"], email="a@x.com", role="user")
        expired = create_access_token(claims, expires_delta=timedelta(seconds=-5))
        resp = self.client.get(f"{API}/auth/profile", headers=bearer(expired))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Access token expired")

    def test_invalid_token(self) -> None:
        resp = self.client.get(f"{API}/auth/profile", headers=bearer("abc.def.ghi"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "Invalid access token")

    def test_token_for_unknown_user(self) -> None:
        claims = TokenClaims(id="00000000-0000-0000-0000-000000000000", email="g@x.com", role="user")
        resp = self.client.get(
            f"{API}/auth/profile", headers=bearer(create_access_token(claims))
        )
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "User not found or inactive")


class TestProfile(ApiTestCase):
    def test_get_and_update_profile(self) -> None:
        headers = bearer(self.register(name="Alice")["accessToken"])
        resp = self.client.get(f"{API}/auth/profile", headers=headers)
        self.assertEqual(resp.json()["data"]["name"], "Alice")

        resp = self.client.put(
            f"{API}/auth/profile",
            json={"name": "  Alicia ", "mobileNo": "9876543210"},
            headers=headers,
        )
        self.assertEqual(resp.status_code, 200)
        data = resp.json()["data"]
        self.assertEqual(data["name"], "Alicia")
        self.assertEqual(data["mobileNo"], "9876543210")

    def test_logout_is_stateless(self) -> None:
        headers = self.headers_for()
        resp = self.client.post(f"{API}/auth/logout", headers=headers)
        self.assertEqual(resp.json(), {"success": True, "message": "Logged out successfully"})
        self.assertEqual(self.client.get(f"{API}/auth/profile", headers=headers).status_code, 200)


class TestRoles(ApiTestCase):
    """Admin-only routes and deactivation locking out live tokens."""

    def _admin_headers(self) -> dict[str, str]:
        db = self.SessionLocal()
        try:
            register_user(
                db,
                RegisterRequest(name="Admin", email="root@x.com", password="secret1"),
                role="admin",
            )
        finally:
            db.close()
        resp = self.client.post(
            f"{API}/auth/login", json={"email": "root@x.com", "password": "secret1"}
        )
        return bearer(resp.json()["data"]["accessToken"])

    def test_non_admin_forbidden(self) -> None:
        resp = self.client.get(f"{API}/auth/users", headers=self.headers_for())
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["message"], "Insufficient permissions")

    def test_admin_lists_users(self) -> None:
        self.register(email="u@x.com")
        resp = self.client.get(f"{API}/auth/users", headers=self._admin_headers())
        self.assertEqual(resp.status_code, 200)
        emails = [u["email"] for u in resp.json()["data"]]
        self.assertEqual(emails, ["u@x.com", "root@x.com"])

    def test_deactivated_user_token_rejected(self) -> None:
        data = self.register(email="u@x.com")
        user_headers = bearer(data["accessToken"])
        self.assertEqual(self.client.get(f"{API}/auth/profile", headers=user_headers).status_code, 200)

        resp = self.client.post(
            f"{API}/auth/users/{data['user']['id']}/deactivate", headers=self._admin_headers()
        )
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["data"]["isActive"])

        resp = self.client.get(f"{API}/auth/profile", headers=user_headers)
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["message"], "User not found or inactive")
        login = self.client.post(
            f"{API}/auth/login", json={"email": "u@x.com", "password": "secret1"}
        )
        self.assertEqual(login.status_code, 401)


class TestOptionalAuth(ApiTestCase):
    """The root route enriches its response with the caller when a valid token is sent."""

    def test_anonymous(self) -> None:
        resp = self.client.get("/")
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("user", resp.json()["data"])

    def test_authenticated(self) -> None:
        resp = self.client.get("/", headers=self.headers_for())
        self.assertEqual(resp.json()["data"]["user"]["email"], "a@x.com")

    def test_bad_token_is_ignored(self) -> None:
        resp = self.client.get("/", headers=bearer("garbage"))
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("user", resp.json()["data"])

    def test_lookup_failure_is_ignored(self) -> None:
        headers = self.headers_for()
        failure = OperationalError("SELECT", {}, Exception("connection refused"))
        with patch("app.services.users.get_active_user", side_effect=failure):
            resp = self.client.get("/", headers=headers)
        self.assertEqual(resp.status_code, 200)
        self.assertNotIn("user", resp.json()["data"])


if __name__ == "__main__":
    unittest.main()
