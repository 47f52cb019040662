"""Shared fixtures: an in-memory stand-in for the Postgres-backed Database."""
from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import Any, AsyncIterator
from uuid import UUID, uuid4

import pytest
from fastapi.testclient import TestClient

from auth import security
from core.errors import StorageError
from core.settings import Settings
from detections.ingest import DETECTION_COLUMNS, FIELDS_PER_RECORD
from main import create_app

TEST_SECRET = "test-secret-for-unit-tests-only-0123456789"
ALICE_ID = "5b7d8f0e-2a40-4c51-9d7e-0c1a2b3c4d5e"
EVENT_ID = UUID("11111111-2222-4333-8444-555555555555")


class FakeConnection:
    def __init__(self, db: "FakeDatabase") -> None:
        self.db = db
        self.staged: list[dict[str, Any]] = []

    async def execute(self, sql: str, *args: Any) -> str:
        self.db.calls.append(("execute", sql, args))
        if self.db.fail_writes:
            raise StorageError()
        if "INSERT INTO detections" in sql:
            for i in range(0, len(args), FIELDS_PER_RECORD):
                row = dict(zip(DETECTION_COLUMNS, args[i:i + FIELDS_PER_RECORD]))
                row["blustick_id"] = self.db.next_id()
                self.staged.append(row)
            if self.db.insert_status is not None:
                return self.db.insert_status
            return f"INSERT 0 {len(self.staged)}"
        return "OK"


class FakeDatabase:
    """Implements the Database surface used by the repositories."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, tuple]] = []
        self.profiles: dict[str, dict[str, Any]] = {}
        self.events: list[dict[str, Any]] = []
        self.detections: list[dict[str, Any]] = []
        self.devices: list[dict[str, Any]] = []
        self.observations: list[dict[str, Any]] = []
        self.questionnaire_responses: list[dict[str, Any]] = []
        self.fail_writes = False
        self.insert_status: str | None = None
        self._id = 0

    def next_id(self) -> int:
        self._id += 1
        return self._id

    async def connect(self) -> None:
        return None

    async def close(self) -> None:
        return None

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[FakeConnection]:
        conn = FakeConnection(self)
        yield conn
        # Only reached when the block did not raise: commit.
        self.detections.extend(conn.staged)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(("fetch_all", sql, args))
        if "FROM detections" in sql:
            rows = self.detections
            if "WHERE event_id = $1" in sql:
                rows = [r for r in rows if r["event_id"] == args[0]]
            rows = sorted(rows, key=lambda r: r["detected_at"], reverse=True)
            return [dict(r) for r in rows[: args[-1]]]
        if "FROM events" in sql:
            rows = sorted(self.events, key=lambda r: r["created_at"], reverse=True)
            return rows[: args[0]]
        if "FROM devices" in sql:
            return sorted(self.devices, key=lambda r: r["last_seen"], reverse=True)
        if "FROM observations" in sql:
            rows = sorted(self.observations, key=lambda r: r["created_at"], reverse=True)
            return rows[: args[0]]
        if "FROM questionnaire_responses" in sql:
            rows = sorted(self.questionnaire_responses, key=lambda r: r["ts"], reverse=True)
            return rows[: args[0]]
        raise AssertionError(f"unexpected query: {sql}")

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append(("fetch_one", sql, args))
        if "FROM profiles" in sql:
            profile = self.profiles.get(args[0])
            return dict(profile) if profile else None
        if self.fail_writes:
            raise StorageError()
        now = datetime.now(timezone.utc)
        if "INSERT INTO observations" in sql:
            row = {
                "id": uuid4(),
                "user_id": None,
                "full_name": args[0],
                "observation_details": args[1],
                "created_at": now,
            }
            self.observations.append(row)
            return dict(row)
        if "INSERT INTO questionnaire_responses" in sql:
            row = {"id": uuid4(), "event_id": args[0], "respondent": args[1]}
            row.update({f"q{i}": answer for i, answer in enumerate(args[2:], start=1)})
            row["ts"] = now
            self.questionnaire_responses.append(row)
            return dict(row)
        raise AssertionError(f"unexpected query: {sql}")

    async def execute(self, sql: str, *args: Any) -> str:
        self.calls.append(("execute", sql, args))
        if self.fail_writes:
            raise StorageError()
        if "UPDATE profiles" in sql:
            for profile in self.profiles.values():
                if profile["id"] == args[0]:
                    profile["password_hash"] = args[1]
                    return "UPDATE 1"
            return "UPDATE 0"
        raise AssertionError(f"unexpected statement: {sql}")


@pytest.fixture
def settings() -> Settings:
    return Settings(jwt_secret=TEST_SECRET)


@pytest.fixture
def fake_db() -> FakeDatabase:
    db = FakeDatabase()
    db.profiles["alice"] = {"id": ALICE_ID, "username": "alice", "password_hash": "1111"}
    return db


@pytest.fixture
def tokens(settings: Settings) -> security.TokenService:
    return security.TokenService.from_settings(settings)


@pytest.fixture
def client(settings: Settings, fake_db: FakeDatabase, tokens: security.TokenService) -> TestClient:
    app = create_app(settings, database=fake_db, tokens=tokens)
    return TestClient(app)


@pytest.fixture
def auth_headers(tokens: security.TokenService) -> dict[str, str]:
    token = tokens.issue(subject=ALICE_ID, username="alice")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def expired_headers(tokens: security.TokenService) -> dict[str, str]:
    issued_at = int((datetime.now(timezone.utc) - timedelta(days=8)).timestamp())
    token = tokens.issue(subject=ALICE_ID, username="alice", issued_at=issued_at)
    return {"Authorization": f"Bearer {token}"}
