"""HTTP contract of /user: status codes, error codes, and the route guard."""

import unittest
from datetime import UTC, datetime, timedelta

from fastapi.testclient import TestClient

from app.core.security import TokenCodec
from tests.helpers import add_user, bearer, make_app, token_for


class AuthApiTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = make_app()
        self.client = TestClient(self.app)
        self.admin_id = add_user(self.app, "root@x.com", "Adm1n!", role="admin", name="Root")
        self.user_id = add_user(self.app, "ada@x.com", "Secret1!", name="Ada")
        self.codec: TokenCodec = self.app.state.token_codec

    def admin_headers(self) -> dict[str, str]:
        return bearer(token_for(self.app, self.admin_id, "admin"))

    def user_headers(self) -> dict[str, str]:
        return bearer(token_for(self.app, self.user_id, "user"))


class TestAuthenticateEndpoint(AuthApiTestCase):
    def test_admin_login(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "root@x.com", "password": "Adm1n!"})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(
            body["user"],
            {"id": self.admin_id, "name": "Root", "email": "root@x.com", "role": "admin"},
        )
        claims = self.codec.decode(body["token"])
        self.assertEqual(claims.role, "admin")
        self.assertEqual(claims.user_id, self.admin_id)

    def test_unknown_email_401(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "nobody@x.com", "password": "x"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidCredentials")
        self.assertEqual(resp.headers["www-authenticate"], "Bearer")

    def test_local_domain_admin_can_log_in(self) -> None:
        admin_id = add_user(self.app, "admin@localhost", "Adm1n!", role="admin")
        resp = self.client.post("/user/authenticate", json={"email": "admin@localhost", "password": "Adm1n!"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["id"], admin_id)

    def test_malformed_email_is_invalid_credentials(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "not-an-email", "password": "x"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidCredentials")

    def test_wrong_password_401(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "root@x.com", "password": "nope"})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "InvalidCredentials")

    def test_non_admin_403(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "ada@x.com", "password": "Secret1!"})
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "AccessDenied")

    def test_missing_fields_422(self) -> None:
        resp = self.client.post("/user/authenticate", json={"email": "root@x.com"})
        self.assertEqual(resp.status_code, 422)

    def test_policy_flag_off_allows_user_login(self) -> None:
        app = make_app(AUTH_ADMIN_ONLY_LOGIN=False)
        add_user(app, "ada@x.com", "Secret1!")
        resp = TestClient(app).post("/user/authenticate", json={"email": "ada@x.com", "password": "Secret1!"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["role"], "user")


class TestSignupEndpoint(AuthApiTestCase):
    def test_signup_creates_user_without_password_fields(self) -> None:
        resp = self.client.post(
            "/user/signup", json={"name": "Grace", "email": "grace@x.com", "password": "Hopper1!"}
        )
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["role"], "user")
        self.assertEqual(body["email"], "grace@x.com")
        self.assertNotIn("password", body)
        self.assertNotIn("password_hash", body)

    def test_duplicate_signup_400(self) -> None:
        payload = {"name": "Grace", "email": "grace@x.com", "password": "Hopper1!"}
        self.assertEqual(self.client.post("/user/signup", json=payload).status_code, 201)
        resp = self.client.post("/user/signup", json=payload)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "DuplicateEmail")
        count = self.client.get("/user/count", headers=self.admin_headers()).json()["count"]
        self.assertEqual(count, 3)

    def test_password_over_72_bytes_rejected(self) -> None:
        resp = self.client.post(
            "/user/signup", json={"name": "Grace", "email": "grace@x.com", "password": "a" * 73}
        )
        self.assertEqual(resp.status_code, 422)
        resp = self.client.post(
            "/user/signup", json={"name": "Grace", "email": "grace@x.com", "password": "a" * 72}
        )
        self.assertEqual(resp.status_code, 201)

    def test_blank_name_rejected_and_name_stripped(self) -> None:
        resp = self.client.post("/user/signup", json={"name": "   ", "email": "eve@x.com", "password": "pw"})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.post("/user/signup", json={"name": "  Eve ", "email": "eve@x.com", "password": " pw "})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["name"], "Eve")
        # Passwords keep their whitespace.
        app = make_app(AUTH_ADMIN_ONLY_LOGIN=False)
        client = TestClient(app)
        client.post("/user/signup", json={"name": "Eve", "email": "eve@x.com", "password": " pw "})
        ok = client.post("/user/authenticate", json={"email": "eve@x.com", "password": " pw "})
        self.assertEqual(ok.status_code, 200)

    def test_invalid_role_rejected(self) -> None:
        resp = self.client.post(
            "/user/signup",
            json={"name": "Eve", "email": "eve@x.com", "password": "pw", "role": "superuser"},
        )
        self.assertEqual(resp.status_code, 422)

    def test_invalid_email_rejected(self) -> None:
        resp = self.client.post("/user/signup", json={"name": "Eve", "email": "not-an-email", "password": "pw"})
        self.assertEqual(resp.status_code, 422)


class TestRouteGuard(AuthApiTestCase):
    """Server-side authorize: the only authority, independent of any client check."""

    def test_missing_token_401(self) -> None:
        resp = self.client.get("/user/me")
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "Unauthenticated")

    def test_non_bearer_scheme_401(self) -> None:
        resp = self.client.get("/user/me", headers={"Authorization": "Basic cm9vdDpBZG0xbiE="})
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "Unauthenticated")

    def test_tampered_token_401(self) -> None:
        token = token_for(self.app, self.user_id, "user")
        forged = TokenCodec("not-the-server-secret").issue(self.user_id, "admin")
        tampered = token.rsplit(".", 1)[0] + "." + forged.rsplit(".", 1)[1]
        resp = self.client.get("/user/me", headers=bearer(tampered))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "TokenInvalid")

    def test_expired_token_401(self) -> None:
        token = self.codec.issue(self.admin_id, "admin", now=datetime.now(UTC) - timedelta(hours=25))
        resp = self.client.get("/user/me", headers=bearer(token))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["code"], "TokenExpired")

    def test_me_returns_identity(self) -> None:
        resp = self.client.get("/user/me", headers=self.user_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"userId": self.user_id, "role": "user"})

    def test_non_admin_forbidden_on_admin_route(self) -> None:
        resp = self.client.get("/user/getall", headers=self.user_headers())
        self.assertEqual(resp.status_code, 403)
        self.assertEqual(resp.json()["code"], "Forbidden")

    def test_identity_comes_from_token_not_database(self) -> None:
        headers = self.admin_headers()
        self.client.delete(f"/user/delete/{self.admin_id}", headers=headers)
        # Stateless tokens: no revocation before expiry.
        self.assertEqual(self.client.get("/user/me", headers=headers).status_code, 200)


class TestUserManagement(AuthApiTestCase):
    def test_list_users_admin(self) -> None:
        resp = self.client.get("/user/getall", headers=self.admin_headers())
        self.assertEqual(resp.status_code, 200)
        emails = [u["email"] for u in resp.json()]
        self.assertEqual(emails, ["root@x.com", "ada@x.com"])
        self.assertTrue(all("password_hash" not in u for u in resp.json()))

    def test_get_by_id_and_404(self) -> None:
        resp = self.client.get(f"/user/getbyid/{self.user_id}", headers=self.admin_headers())
        self.assertEqual(resp.json()["name"], "Ada")
        resp = self.client.get("/user/getbyid/9999", headers=self.admin_headers())
        self.assertEqual(resp.status_code, 404)

    def test_promote_user_then_login(self) -> None:
        resp = self.client.put(
            f"/user/update/{self.user_id}", json={"role": "admin"}, headers=self.admin_headers()
        )
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["role"], "admin")
        login = self.client.post("/user/authenticate", json={"email": "ada@x.com", "password": "Secret1!"})
        self.assertEqual(login.status_code, 200)

    def test_password_change_is_hashed(self) -> None:
        self.client.put(
            f"/user/update/{self.admin_id}", json={"password": "N3w-pass"}, headers=self.admin_headers()
        )
        old = self.client.post("/user/authenticate", json={"email": "root@x.com", "password": "Adm1n!"})
        new = self.client.post("/user/authenticate", json={"email": "root@x.com", "password": "N3w-pass"})
        self.assertEqual(old.status_code, 401)
        self.assertEqual(new.status_code, 200)

    def test_update_rejects_blank_name_and_long_password(self) -> None:
        url = f"/user/update/{self.user_id}"
        self.assertEqual(self.client.put(url, json={"name": " "}, headers=self.admin_headers()).status_code, 422)
        resp = self.client.put(url, json={"password": "é" * 37}, headers=self.admin_headers())
        self.assertEqual(resp.status_code, 422)

    def test_update_to_taken_email_400(self) -> None:
        resp = self.client.put(
            f"/user/update/{self.user_id}", json={"email": "ROOT@x.com"}, headers=self.admin_headers()
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["code"], "DuplicateEmail")

    def test_update_requires_admin(self) -> None:
        resp = self.client.put(
            f"/user/update/{self.user_id}", json={"role": "admin"}, headers=self.user_headers()
        )
        self.assertEqual(resp.status_code, 403)

    def test_delete_user(self) -> None:
        resp = self.client.delete(f"/user/delete/{self.user_id}", headers=self.admin_headers())
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["email"], "ada@x.com")
        again = self.client.delete(f"/user/delete/{self.user_id}", headers=self.admin_headers())
        self.assertEqual(again.status_code, 404)

    def test_count_requires_token(self) -> None:
        self.assertEqual(self.client.get("/user/count").status_code, 401)
        resp = self.client.get("/user/count", headers=self.user_headers())
        self.assertEqual(resp.json(), {"count": 2})


class TestHealth(unittest.TestCase):
    def test_health_reports_database(self) -> None:
        resp = TestClient(make_app()).get("/health")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json(), {"status": "ok", "environment": "dev", "database": "connected"})

    def test_api_prefix(self) -> None:
        client = TestClient(make_app(API_PREFIX="/api"))
        self.assertEqual(client.get("/api/health").status_code, 200)
        self.assertEqual(client.get("/health").status_code, 404)


if __name__ == "__main__":
    unittest.main()
