"""Test configuration and fixtures.

``FakeSupabase`` is an in-memory stand-in for the hosted query client.  It
implements the builder calls the repositories use (``select``, ``insert``,
``update``, ``upsert``, ``delete``, ``eq``, ``is_``, ``in_``, ``order``,
``limit``, ``execute``), ``rpc`` and an ``auth`` namespace, plus failure
injection per table and per-table read counters.
"""

import os
import tempfile
import threading
import time
import uuid
from collections import Counter
from datetime import datetime, timedelta, timezone
from pathlib import Path
from types import SimpleNamespace

os.environ.setdefault(
    "LOG_FILE", str(Path(tempfile.gettempdir()) / "house_notes_test.log")
)

import pytest

from house_notes.auth import SessionManager
from house_notes.config import AppConfig
from house_notes.database import DatabaseManager
from house_notes.logger import StructuredLogger
from house_notes.models.user import User
from house_notes.schema import initialize_schema
from house_notes.services import create_services

OWNER_ID = "user-owner"
STRANGER_ID = "user-stranger"


class FakeAPIError(Exception):
    """Mimics a PostgREST error carrying a ``code``."""

    def __init__(self, message, code=None):
        super().__init__(message)
        self.message = message
        self.code = code


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, store, table):
        self._store = store
        self._table = table
        self._op = "select"
        self._columns = "*"
        self._payload = None
        self._on_conflict = None
        self._filters = []
        self._order = None
        self._limit = None

    # -- operations --------------------------------------------------------

    def select(self, columns="*"):
        self._op = "select"
        self._columns = columns
        return self

    def insert(self, rows):
        self._op = "insert"
        self._payload = rows
        return self

    def update(self, patch):
        self._op = "update"
        self._payload = patch
        return self

    def upsert(self, row, on_conflict=None):
        self._op = "upsert"
        self._payload = row
        self._on_conflict = on_conflict
        return self

    def delete(self):
        self._op = "delete"
        return self

    # -- filters -----------------------------------------------------------

    def eq(self, column, value):
        self._filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        assert value == "null"
        self._filters.append(lambda row: row.get(column) is None)
        return self

    def in_(self, column, values):
        allowed = list(values)
        self._filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column, desc=False):
        self._order = (column, desc)
        return self

    def limit(self, count):
        self._limit = count
        return self

    def execute(self):
        return self._store._execute(self)

    def _matches(self, row):
        return all(check(row) for check in self._filters)


class FakeRpc:
    def __init__(self, store, name, params):
        self._store = store
        self._name = name
        self._params = params

    def execute(self):
        return self._store._execute_rpc(self._name, self._params)


class FakeAuth:
    def __init__(self):
        self.users = {}
        self.fail_with = None
        self.sign_out_calls = 0
        self.reset_requests = []
        self.password_updates = []
        self.refresh_calls = []
        self.valid_refresh_tokens = {"refresh-token"}

    def add_user(self, email, password, user_id=None, full_name=None):
        self.users[email] = {
            "id": user_id or str(uuid.uuid4()),
            "password": password,
            "full_name": full_name,
        }
        return self.users[email]["id"]

    def _raise_if_failing(self):
        if self.fail_with is not None:
            raise self.fail_with

    def sign_in_with_password(self, credentials):
        self._raise_if_failing()
        user = self.users.get(credentials["email"])
        if user is None or user["password"] != credentials["password"]:
            raise FakeAPIError("Invalid login credentials", code="invalid_credentials")
        return SimpleNamespace(
            user=SimpleNamespace(
                id=user["id"],
                email=credentials["email"],
                user_metadata={"full_name": user["full_name"]},
            ),
            session=SimpleNamespace(
                access_token="access-token",
                refresh_token="refresh-token",
                expires_at=int(time.time()) + 3600,
            ),
        )

    def sign_up(self, credentials):
        self._raise_if_failing()
        if credentials["email"] in self.users:
            raise FakeAPIError("User already registered", code="user_already_exists")
        user_id = self.add_user(credentials["email"], credentials["password"])
        return SimpleNamespace(
            user=SimpleNamespace(id=user_id, email=credentials["email"]),
            session=None,
        )

    def refresh_session(self, refresh_token=None):
        self._raise_if_failing()
        self.refresh_calls.append(refresh_token)
        if refresh_token not in self.valid_refresh_tokens:
            raise FakeAPIError("Invalid Refresh Token: Not Found", code="refresh_token_not_found")
        return SimpleNamespace(
            user=None,
            session=SimpleNamespace(
                access_token="access-token-2",
                refresh_token="refresh-token-2",
                expires_at=int(time.time()) + 3600,
            ),
        )

    def sign_out(self):
        self.sign_out_calls += 1

    def reset_password_for_email(self, email, options=None):
        self._raise_if_failing()
        self.reset_requests.append(email)

    def update_user(self, attributes):
        self._raise_if_failing()
        self.password_updates.append(attributes["password"])
        return SimpleNamespace(user=None)


class FakeSupabase:
    """In-memory hosted store.  Thread-safe; rows are plain dicts."""

    def __init__(self):
        self.tables = {}
        self.reads = Counter()
        self.rpc_calls = []
        self.auth = FakeAuth()
        self._failures = {}
        self._lock = threading.RLock()
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    # -- test helpers ------------------------------------------------------

    def fail(self, name, exc=None, ops=None):
        """Make every request against table or RPC *name* raise."""
        self._failures[name] = (exc or ConnectionError("network down"), ops)

    def heal(self, name):
        self._failures.pop(name, None)

    def seed(self, table, **values):
        with self._lock:
            row = self._new_row(values)
            self.tables.setdefault(table, []).append(row)
            return dict(row)

    def rows(self, table):
        with self._lock:
            return [dict(row) for row in self.tables.get(table, [])]

    def row(self, table, row_id):
        for row in self.rows(table):
            if row["id"] == row_id:
                return row
        return None

    # -- client surface ----------------------------------------------------

    def table(self, name):
        return FakeQuery(self, name)

    def rpc(self, name, params):
        return FakeRpc(self, name, params)

    # -- internals ---------------------------------------------------------

    def _tick(self):
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def _new_row(self, values):
        row = {"id": str(uuid.uuid4()), "deleted_at": None}
        row.update(values)
        row.setdefault("created_at", self._tick())
        return row

    def _check_failure(self, name, op):
        failure = self._failures.get(name)
        if failure is None:
            return
        exc, ops = failure
        if ops is None or op in ops:
            raise exc

    def _execute(self, query):
        with self._lock:
            self._check_failure(query._table, query._op)
            rows = self.tables.setdefault(query._table, [])

            if query._op == "select":
                self.reads[query._table] += 1
                found = [row for row in rows if query._matches(row)]
                if query._order is not None:
                    column, desc = query._order
                    found.sort(
                        key=lambda r: (r.get(column) is None, r.get(column) or ""),
                        reverse=desc,
                    )
                if query._limit is not None:
                    found = found[: query._limit]
                return FakeResponse([self._project(row, query._columns) for row in found])

            if query._op == "insert":
                payload = query._payload
                batch = payload if isinstance(payload, list) else [payload]
                created = [self._new_row(dict(item)) for item in batch]
                rows.extend(created)
                return FakeResponse([dict(row) for row in created])

            if query._op == "update":
                updated = []
                for row in rows:
                    if query._matches(row):
                        row.update(query._payload)
                        row["updated_at"] = self._tick()
                        updated.append(dict(row))
                return FakeResponse(updated)

            if query._op == "upsert":
                key = query._on_conflict or "id"
                payload = dict(query._payload)
                for row in rows:
                    if row.get(key) == payload.get(key):
                        row.update(payload)
                        row["updated_at"] = self._tick()
                        return FakeResponse([dict(row)])
                row = self._new_row(payload)
                rows.append(row)
                return FakeResponse([dict(row)])

            if query._op == "delete":
                removed = [row for row in rows if query._matches(row)]
                self.tables[query._table] = [r for r in rows if not query._matches(r)]
                return FakeResponse(removed)

            raise AssertionError(f"unsupported op {query._op}")

    def _execute_rpc(self, name, params):
        with self._lock:
            self._check_failure(name, "rpc")
            self.rpc_calls.append((name, dict(params)))
            if name == "permanent_delete_room":
                self._remove("rooms", lambda r: r["id"] == params["room_id"])
            elif name == "permanent_delete_appliance":
                appliance_id = params["appliance_id"]
                for child in ("appliance_repairs", "appliance_attachments"):
                    self._remove(child, lambda r: r.get("appliance_id") == appliance_id)
                self._remove("interior_appliances", lambda r: r["id"] == appliance_id)
            return FakeResponse(None)

    def _remove(self, table, predicate):
        self.tables[table] = [r for r in self.tables.get(table, []) if not predicate(r)]

    @staticmethod
    def _project(row, columns):
        if columns == "*":
            return dict(row)
        wanted = [c.strip() for c in columns.split(",")]
        return {c: row.get(c) for c in wanted}


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def fake_supabase():
    return FakeSupabase()


@pytest.fixture
def logger(tmp_path):
    return StructuredLogger(
        name=f"test.{uuid.uuid4().hex}", log_file=str(tmp_path / "test.log")
    )


@pytest.fixture
def config():
    return AppConfig(
        _env_file=None,
        SUPABASE_URL="",
        SUPABASE_ANON_KEY="",
        ATTACHMENT_MAX_FILES=3,
        ATTACHMENT_MAX_SIZE_MB=1,
    )


@pytest.fixture
def db(tmp_path, fake_supabase, logger):
    manager = DatabaseManager(
        supabase_url="",
        supabase_key="",
        sqlite_path=tmp_path / "local.db",
        logger=logger,
        client=fake_supabase,
    )
    initialize_schema(manager.sqlite, logger)
    yield manager
    manager.close()


@pytest.fixture
def session():
    manager = SessionManager()
    manager.start(User(id=OWNER_ID, email="owner@example.com"))
    return manager


@pytest.fixture
def services(db, config, session):
    return create_services(db=db, config=config, session=session)


@pytest.fixture
def house(fake_supabase):
    """An active house owned by ``OWNER_ID``."""
    return fake_supabase.seed(
        "houses",
        user_id=OWNER_ID,
        year_bought=2015,
        price_paid="300000",
        country="United States",
        country_other=None,
    )
