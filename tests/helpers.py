"""Shared test setup: the FastAPI app wired to an in-memory SQLite database."""

import unittest
from collections.abc import Generator
from typing import Any
from unittest.mock import patch

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_settings
from app.core.database import get_db
from app.main import app
from app.models import Base

API = "/api/v1"
DEFAULT_PASSWORD = "secret1"


def make_sqlite_sessionmaker() -> tuple[Any, sessionmaker]:
    """Fresh in-memory database shared by every session of one test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine, sessionmaker(bind=engine, autocommit=False, autoflush=False)


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


class ApiTestCase(unittest.TestCase):
    """TestClient against the real app with get_db overridden and cheap bcrypt rounds."""

    def setUp(self) -> None:
        self.engine, self.SessionLocal = make_sqlite_sessionmaker()

        def override_get_db() -> Generator[Session, None, None]:
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        rounds = patch.object(get_settings(), "BCRYPT_ROUNDS", 4)
        rounds.start()
        self.addCleanup(rounds.stop)
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        self.engine.dispose()

    def register(
        self,
        email: str = "a@x.com",
        name: str = "A",
        password: str = DEFAULT_PASSWORD,
        **extra: Any,
    ) -> dict[str, Any]:
        """Register and return the response data (user, accessToken, refreshToken)."""
        resp = self.client.post(
            f"{API}/auth/register",
            json={"name": name, "email": email, "password": password, **extra},
        )
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]

    def headers_for(self, email: str = "a@x.com") -> dict[str, str]:
        return bearer(self.register(email=email)["accessToken"])

    def create_entry(self, headers: dict[str, str], **fields: Any) -> dict[str, Any]:
        body = {"srNo": "1", "vehicleNo": "mh01ab1234", "nameDetails": "T"}
        body.update(fields)
        resp = self.client.post(f"{API}/entries", json=body, headers=headers)
        self.assertEqual(resp.status_code, 201, resp.text)
        return resp.json()["data"]
