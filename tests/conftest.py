"""Pytest configuration and fixtures."""

import copy
import os
import time
from types import SimpleNamespace

import pytest

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SECRET_KEY", "test-secret-key")
os.environ.setdefault("HF_TOKEN", "test-hf-token")

from cortex.config import Settings  # noqa: E402
from cortex.database import get_db  # noqa: E402
from cortex.main import app  # noqa: E402
from cortex.rate_limit import limiter  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

VALID_TOKEN = "valid-test-token"
TEST_USER_ID = "usr_TEST_ONLY_000000"


# =============================================================================
# In-memory Supabase fake
# =============================================================================


class MockExecuteResult:
    """Mock Supabase execute() result."""

    def __init__(self, data: list | None = None):
        self.data = data or []


class MockQueryBuilder:
    """Chainable query builder over a FakeSupabase's tables."""

    def __init__(self, client: "FakeSupabase", table: str):
        self._client = client
        self._table = table
        self._op = "select"
        self._fields = "*"
        self._filters: list[tuple[str, object]] = []
        self._limit: int | None = None
        self._payload = None
        self._on_conflict = "id"

    def select(self, fields: str = "*", count: str | None = None) -> "MockQueryBuilder":
        self._fields = fields
        return self

    def eq(self, field: str, value) -> "MockQueryBuilder":
        self._filters.append((field, value))
        return self

    def limit(self, n: int) -> "MockQueryBuilder":
        self._limit = n
        return self

    def insert(self, rows) -> "MockQueryBuilder":
        self._op = "insert"
        self._payload = rows
        return self

    def upsert(self, row, on_conflict: str = "id") -> "MockQueryBuilder":
        self._op = "upsert"
        self._payload = row
        self._on_conflict = on_conflict
        return self

    def execute(self) -> MockExecuteResult:
        self._client.calls.append((self._table, self._op))
        if self._client.delay:
            time.sleep(self._client.delay)
        failure = self._client.failures.get((self._table, self._op))
        if failure is not None:
            raise failure

        rows = self._client.tables.setdefault(self._table, [])
        if self._op == "select":
            return MockExecuteResult(self._select(rows))
        if self._op == "insert":
            new_rows = self._payload if isinstance(self._payload, list) else [self._payload]
            stored = [copy.deepcopy(r) for r in new_rows]
            rows.extend(stored)
            return MockExecuteResult(copy.deepcopy(stored))
        return MockExecuteResult([self._upsert(rows)])

    def _select(self, rows: list[dict]) -> list[dict]:
        matched = [r for r in rows if all(r.get(f) == v for f, v in self._filters)]
        if self._limit is not None:
            matched = matched[: self._limit]
        if self._fields.strip() == "*":
            return copy.deepcopy(matched)
        fields = [f.strip() for f in self._fields.split(",")]
        return [{f: r.get(f) for f in fields} for r in matched]

    def _upsert(self, rows: list[dict]) -> dict:
        key = self._payload.get(self._on_conflict)
        for existing in rows:
            if key is not None and existing.get(self._on_conflict) == key:
                existing.update(copy.deepcopy(self._payload))
                return copy.deepcopy(existing)
        rows.append(copy.deepcopy(self._payload))
        return copy.deepcopy(self._payload)


class FakeAuth:
    """Stands in for ``client.auth``: one valid token, everything else rejected."""

    def __init__(self, user_id: str = TEST_USER_ID):
        self.user_id = user_id

    def get_user(self, jwt: str):
        if jwt != VALID_TOKEN:
            raise Exception("invalid JWT: unable to parse or verify signature")
        return SimpleNamespace(user=SimpleNamespace(id=self.user_id, email="me@example.com"))


class FakeSupabase:
    """Minimal in-memory Supabase client.

    ``failures`` maps ``(table, op)`` to an exception raised on execute.
    """

    def __init__(self, tables: dict[str, list[dict]] | None = None):
        self.tables: dict[str, list[dict]] = copy.deepcopy(tables or {})
        self.failures: dict[tuple[str, str], Exception] = {}
        self.calls: list[tuple[str, str]] = []
        self.delay: float = 0.0
        self.auth = FakeAuth()

    def table(self, name: str) -> MockQueryBuilder:
        return MockQueryBuilder(self, name)

    def rows(self, table: str) -> list[dict]:
        return self.tables.get(table, [])

    def writes(self, table: str | None = None) -> list[tuple[str, str]]:
        return [
            c for c in self.calls
            if c[1] in ("insert", "upsert") and (table is None or c[0] == table)
        ]


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def fake_db():
    return FakeSupabase()


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_secret_key="test-secret-key",
        hf_token="test-hf-token",
        youtube_api_key="test-youtube-key",
        store_timeout_seconds=1.0,
    )


@pytest.fixture
def client(fake_db):
    """Test client wired to the in-memory store."""
    app.dependency_overrides[get_db] = lambda: fake_db
    limiter.enabled = False
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        limiter.enabled = True


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {VALID_TOKEN}"}
