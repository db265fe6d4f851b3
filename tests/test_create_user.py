"""Tests for the create_user management command."""

import unittest
from unittest.mock import patch

from app.core.config import get_settings
from app.models import User
from app.scripts.create_user import main
from tests.helpers import make_sqlite_sessionmaker


class TestCreateUserCommand(unittest.TestCase):
    def setUp(self) -> None:
        self.engine, self.SessionLocal = make_sqlite_sessionmaker()
        for target in (
            patch("app.core.database.SessionLocal", self.SessionLocal),
            patch.object(get_settings(), "BCRYPT_ROUNDS", 4),
        ):
            target.start()
            self.addCleanup(target.stop)

    def tearDown(self) -> None:
        self.engine.dispose()

    def _users(self) -> list[User]:
        db = self.SessionLocal()
        try:
            return db.query(User).all()
        finally:
            db.close()

    def test_creates_admin(self) -> None:
        self.assertEqual(main(["Root@X.com", "secret1", "Site Admin", "admin"]), 0)
        (user,) = self._users()
        self.assertEqual(user.email, "root@x.com")
        self.assertEqual(user.role, "admin")
        self.assertTrue(user.is_active)

    def test_duplicate_email_fails(self) -> None:
        self.assertEqual(main(["a@x.com", "secret1", "First"]), 0)
        self.assertEqual(main(["a@x.com", "secret1", "Second"]), 1)
        self.assertEqual(len(self._users()), 1)

    def test_invalid_input_fails(self) -> None:
        self.assertEqual(main(["not-an-email", "123", "A"]), 1)
        self.assertEqual(self._users(), [])

    def test_unknown_role_rejected(self) -> None:
        with self.assertRaises(SystemExit):
            main(["a@x.com", "secret1", "Someone", "owner"])


if __name__ == "__main__":
    unittest.main()
