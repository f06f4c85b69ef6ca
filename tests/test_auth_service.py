"""AuthService: authenticate/signup outcomes against a real (in-memory SQLite) session."""

import unittest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError

from app.core.errors import AccessDenied, DuplicateEmail, InvalidCredentials
from app.core.security import TokenCodec, verify_password
from app.models import User
from app.services.auth import AuthService, LoginPolicy
from tests.helpers import TEST_SECRET, add_user, make_app


class AuthServiceTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.app = make_app()
        self.db = self.app.state.session_factory()
        self.codec = TokenCodec(TEST_SECRET)
        self.service = AuthService(self.db, self.codec)

    def tearDown(self) -> None:
        self.db.close()


class TestAuthenticate(AuthServiceTestCase):
    def test_admin_gets_admin_token(self) -> None:
        user_id = add_user(self.app, "root@x.com", "Adm1n!", role="admin", name="Root")
        result = self.service.authenticate("root@x.com", "Adm1n!")
        claims = self.codec.decode(result.token)
        self.assertEqual(claims.role, "admin")
        self.assertEqual(claims.user_id, user_id)
        self.assertEqual(result.user.email, "root@x.com")
        self.assertEqual(result.user.name, "Root")
        self.assertNotIn("password", result.user.model_dump())

    def test_email_lookup_is_case_insensitive(self) -> None:
        add_user(self.app, "root@x.com", "Adm1n!", role="admin")
        result = self.service.authenticate("ROOT@X.com", "Adm1n!")
        self.assertEqual(self.codec.decode(result.token).role, "admin")

    def test_unknown_email_is_invalid_credentials_not_access_denied(self) -> None:
        with self.assertRaises(InvalidCredentials):
            self.service.authenticate("nobody@x.com", "whatever")

    def test_wrong_password_for_admin(self) -> None:
        add_user(self.app, "root@x.com", "Adm1n!", role="admin")
        with self.assertRaises(InvalidCredentials):
            self.service.authenticate("root@x.com", "wrong")

    def test_non_admin_denied_with_correct_password(self) -> None:
        add_user(self.app, "ada@x.com", "Secret1!")
        with self.assertRaises(AccessDenied):
            self.service.authenticate("ada@x.com", "Secret1!")

    def test_non_admin_denied_with_wrong_password(self) -> None:
        add_user(self.app, "ada@x.com", "Secret1!")
        with self.assertRaises(AccessDenied):
            self.service.authenticate("ada@x.com", "not-her-password")

    def test_open_policy_lets_users_log_in(self) -> None:
        add_user(self.app, "ada@x.com", "Secret1!")
        service = AuthService(self.db, self.codec, LoginPolicy(admin_only=False))
        result = service.authenticate("ada@x.com", "Secret1!")
        self.assertEqual(self.codec.decode(result.token).role, "user")
        with self.assertRaises(InvalidCredentials):
            service.authenticate("ada@x.com", "wrong")

    def test_empty_credentials(self) -> None:
        with self.assertRaises(InvalidCredentials):
            self.service.authenticate("", "x")
        with self.assertRaises(InvalidCredentials):
            self.service.authenticate("root@x.com", "")


class TestSignup(AuthServiceTestCase):
    def test_role_defaults_to_user_and_password_is_hashed(self) -> None:
        user = self.service.signup("Ada", "ada@x.com", "Secret1!")
        self.assertEqual(user.role, "user")
        self.assertNotEqual(user.password_hash, "Secret1!")
        self.assertTrue(verify_password("Secret1!", user.password_hash))

    def test_ada_scenario(self) -> None:
        self.service.signup("Ada", "ada@x.com", "Secret1!")
        with self.assertRaises(AccessDenied):
            self.service.authenticate("ada@x.com", "Secret1!")

    def test_second_signup_with_same_email_is_rejected(self) -> None:
        self.service.signup("Ada", "ada@x.com", "Secret1!")
        with self.assertRaises(DuplicateEmail):
            self.service.signup("Ada Again", "Ada@X.com", "Other1!")
        self.assertEqual(self.db.query(User).count(), 1)

    def test_explicit_admin_role(self) -> None:
        user = self.service.signup("Root", "root@x.com", "Adm1n!", role="admin")
        self.assertEqual(user.role, "admin")
        result = self.service.authenticate("root@x.com", "Adm1n!")
        self.assertEqual(result.user.id, user.id)


class TestSignupRace(unittest.TestCase):
    """A unique-index violation at commit time is reported as DuplicateEmail."""

    def test_integrity_error_becomes_duplicate_email(self) -> None:
        db = MagicMock()
        db.query.return_value.filter.return_value.first.return_value = None
        db.commit.side_effect = IntegrityError("INSERT", {}, Exception("unique"))
        service = AuthService(db, TokenCodec(TEST_SECRET))
        with self.assertRaises(DuplicateEmail):
            service.signup("Ada", "ada@x.com", "Secret1!")
        db.rollback.assert_called_once()
        db.refresh.assert_not_called()


if __name__ == "__main__":
    unittest.main()
