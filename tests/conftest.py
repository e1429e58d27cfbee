# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Replaces the Supabase client with a recording fake query builder
# - Replaces the Redis hand-off buffer with an in-memory fake
# - Provides a TestClient signed in as any user
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

OWNER_ID = "11111111-1111-4111-8111-111111111111"
TRANSPORTER_ID = "22222222-2222-4222-8222-222222222222"
OTHER_TRANSPORTER_ID = "33333333-3333-4333-8333-333333333333"
ADMIN_ID = "99999999-9999-4999-8999-999999999999"
REQUEST_ID = "aaaaaaaa-aaaa-4aaa-8aaa-aaaaaaaaaaaa"
BID_ID = "bbbbbbbb-bbbb-4bbb-8bbb-bbbbbbbbbbbb"
OTHER_BID_ID = "cccccccc-cccc-4ccc-8ccc-cccccccccccc"
PET_ID = "dddddddd-dddd-4ddd-8ddd-dddddddddddd"

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("ADMIN_USER_IDS", ADMIN_ID)
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from uuid import UUID

import pytest
from fastapi.testclient import TestClient

from lib.handoff import HandoffBuffer
from lib.supabase_client import SupabaseClient


# =============================================================================
# Fake Supabase
# =============================================================================

WRITE_ACTIONS = ("insert", "update", "delete", "upsert")


class FakeResponse:
    def __init__(self, data=None):
        self.data = data


class FakeQuery:
    """
    Records a PostgREST builder chain.

    Every builder method (select, insert, eq, order, ...) is recorded and
    returns the same query, so any chain the services build works.
    """

    def __init__(self, client: "FakeSupabase", table: str):
        self.client = client
        self.table = table
        self.ops: list[tuple[str, tuple, dict]] = []

    def __getattr__(self, name):
        if name.startswith("__"):
            raise AttributeError(name)

        def method(*args, **kwargs):
            self.ops.append((name, args, kwargs))
            return self
        return method

    @property
    def action(self) -> str | None:
        for name, _, _ in self.ops:
            if name in WRITE_ACTIONS or name == "select":
                return name
        return None

    @property
    def payload(self):
        for name, args, _ in self.ops:
            if name in WRITE_ACTIONS:
                return args[0] if args else None
        return None

    def filters(self, op: str = "eq") -> dict:
        return {args[0]: args[1] for name, args, _ in self.ops if name == op}

    def execute(self) -> FakeResponse:
        self.client.executed.append(self)
        return self.client.respond(self)


class FakeSupabase:
    """
    In-memory stand-in for the Supabase client.

    - rows: (table, id) -> row, served to `.single()` lookups (missing rows
      raise PostgREST's PGRST116, like the real client)
    - queue(): scripted results (data or an exception) for other queries,
      consumed in order per (table, action)
    """

    def __init__(self):
        self.rows: dict[tuple[str, str], dict] = {}
        self.responses: dict[tuple[str, str], list] = {}
        self.executed: list[FakeQuery] = []
        self.storage = FakeStorage()

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)

    def add_row(self, table: str, row: dict) -> dict:
        self.rows[(table, str(row["id"]))] = row
        return row

    def queue(self, table: str, action: str, result) -> None:
        self.responses.setdefault((table, action), []).append(result)

    def respond(self, query: FakeQuery) -> FakeResponse:
        queued = self.responses.get((query.table, query.action))
        if queued:
            result = queued.pop(0)
            if isinstance(result, Exception):
                raise result
            return FakeResponse(result)

        if any(name == "single" for name, _, _ in query.ops):
            row = self.rows.get((query.table, str(query.filters().get("id"))))
            if row is None:
                raise Exception("{'code': 'PGRST116', 'message': 'JSON object requested, multiple (or no) rows returned'}")
            return FakeResponse(row)

        if query.action == "insert":
            payload = query.payload
            return FakeResponse(payload if isinstance(payload, list) else [payload])

        return FakeResponse([])

    def calls(self, table: str | None = None, action: str | None = None) -> list[FakeQuery]:
        return [
            q for q in self.executed
            if (table is None or q.table == table) and (action is None or q.action == action)
        ]

    def writes(self) -> list[FakeQuery]:
        return [q for q in self.executed if q.action in WRITE_ACTIONS]


class FakeBucket:
    def __init__(self, storage: "FakeStorage", name: str):
        self.storage = storage
        self.name = name

    def upload(self, path, file, file_options=None):
        if self.storage.fail_with:
            raise self.storage.fail_with
        self.storage.files[(self.name, path)] = (file, file_options or {})
        return {"Key": f"{self.name}/{path}"}

    def list(self, path):
        prefix = f"{path}/"
        return [
            {"name": p[len(prefix):]}
            for (bucket, p) in self.storage.files
            if bucket == self.name and p.startswith(prefix)
        ]


class FakeStorage:
    def __init__(self):
        self.files: dict[tuple[str, str], tuple[bytes, dict]] = {}
        self.fail_with: Exception | None = None

    def from_(self, bucket: str) -> FakeBucket:
        return FakeBucket(self, bucket)

    def list_buckets(self):
        return [{"name": "transporter-documents"}]


# =============================================================================
# Fake Redis
# =============================================================================

class FakePipeline:
    def __init__(self, redis: "FakeRedis"):
        self.redis = redis
        self.commands: list[tuple[str, str]] = []

    def get(self, key):
        self.commands.append(("get", key))
        return self

    def delete(self, key):
        self.commands.append(("delete", key))
        return self

    def execute(self):
        results = [getattr(self.redis, name)(key) for name, key in self.commands]
        self.commands = []
        return results


class FakeRedis:
    """The handful of redis-py calls HandoffBuffer makes, kept in a dict."""

    def __init__(self):
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def setex(self, key, ttl, value):
        self.store[key] = value
        self.ttls[key] = ttl
        return True

    def get(self, key):
        return self.store.get(key)

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                self.ttls.pop(key, None)
                removed += 1
        return removed

    def exists(self, *keys):
        return sum(1 for key in keys if key in self.store)

    def ping(self):
        return True

    def pipeline(self):
        return FakePipeline(self)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def fake_supabase(monkeypatch):
    """Every test talks to a fresh fake Supabase client."""
    fake = FakeSupabase()
    monkeypatch.setattr(SupabaseClient, "_instance", fake)
    return fake


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch):
    """Every test gets an empty in-memory hand-off buffer."""
    fake = FakeRedis()
    monkeypatch.setattr(HandoffBuffer, "_instance", fake)
    return fake


@pytest.fixture
def owner_profile(fake_supabase):
    """A pet owner with a profile."""
    return fake_supabase.add_row("profiles", {
        "id": OWNER_ID,
        "user_type": "pet_owner",
        "first_name": "Maya",
        "last_name": "Lopez",
        "phone": "512-555-0182",
    })


@pytest.fixture
def transporter_profile(fake_supabase):
    """A transporter with a profile, not approved yet."""
    profile = fake_supabase.add_row("profiles", {
        "id": TRANSPORTER_ID,
        "user_type": "transporter",
        "first_name": "Dana",
        "last_name": "Whitfield",
        "company_name": "Paws on Wheels",
    })
    fake_supabase.add_row("transporter_profiles", {"id": TRANSPORTER_ID, "is_approved": False})
    return profile


@pytest.fixture
def approved_transporter(fake_supabase, transporter_profile):
    """A transporter an admin has approved."""
    fake_supabase.add_row("transporter_profiles", {"id": TRANSPORTER_ID, "is_approved": True})
    return transporter_profile


@pytest.fixture
def active_request(fake_supabase, owner_profile):
    """An open transport request posted by the owner."""
    return fake_supabase.add_row("transport_requests", {
        "id": REQUEST_ID,
        "user_id": OWNER_ID,
        "origin_location": "Austin, TX",
        "destination_location": "Denver, CO",
        "pickup_date": "2026-11-03",
        "delivery_date": "2026-11-05",
        "pet_type": "dog",
        "pet_size": "medium",
        "budget": 650,
        "status": "active",
    })


@pytest.fixture
def pending_bid(fake_supabase, active_request):
    """A pending bid by the transporter on the owner's request."""
    return fake_supabase.add_row("bids", {
        "id": BID_ID,
        "request_id": REQUEST_ID,
        "transporter_id": TRANSPORTER_ID,
        "price": 540.0,
        "pickup_date": "2026-11-03",
        "delivery_date": "2026-11-05",
        "status": "pending",
    })


@pytest.fixture
def client_as():
    """
    TestClient factory signed in as the given user id.

    Usage:
        client = client_as(OWNER_ID)
        client.get("/api/v1/pets")
    """
    from app.auth import AuthUser, get_current_user
    from app.main import app

    def make(user_id: str, email: str = "user@example.com") -> TestClient:
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=UUID(user_id), email=email)
        return TestClient(app)

    yield make
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    """TestClient with no auth override."""
    from app.main import app

    app.dependency_overrides.clear()
    return TestClient(app)
