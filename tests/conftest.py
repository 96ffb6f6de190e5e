"""
Shared test fixtures.

The Supabase client is replaced by an in-memory store that understands
the subset of the query builder the services use.
"""

import os
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Settings are read at import time
os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_KEY", "test-anon-key")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-unit-tests-0123456789")

import copy
from contextlib import ExitStack
from datetime import datetime
from typing import Any, Generator, Optional
from unittest.mock import patch
from uuid import uuid4

import pytest

from tests.factories import auth_headers, seed_currencies, seed_projects, ORG_ID
from models.auth import CurrentUser

# ===================
# IN-MEMORY SUPABASE
# ===================

# Foreign keys the mock can embed: relation name → (table, local column)
RELATIONS = {
    "projects": ("projects", "project_id"),
    "currencies": ("currencies", "currency_id"),
}

# Unique constraints per table
UNIQUE_KEYS = {
    "units": ("sku", "project_id"),
}


class MockSupabaseResponse:
    """Mock Supabase query response."""

    def __init__(self, data: list = None, count: int = None):
        self.data = data or []
        self.count = count if count is not None else len(self.data)


class MockSupabaseQuery:
    """
    Chainable query against one in-memory table.

    Filters (eq, in_) apply to select, update and delete. Filters on
    "relation.column" read through RELATIONS, like PostgREST embedded
    filters on an !inner join.
    """

    def __init__(self, client: "MockSupabaseClient", table: str):
        self._client = client
        self._table = table
        self._operation = "select"
        self._columns = "*"
        self._payload: Any = None
        self._filters: list = []
        self._order: list[tuple[str, bool]] = []
        self._limit: Optional[int] = None

    # Operations

    def select(self, columns: str = "*", count: Optional[str] = None):
        self._operation = "select"
        self._columns = columns
        return self

    def insert(self, data):
        self._operation = "insert"
        self._payload = data
        return self

    def update(self, data: dict):
        self._operation = "update"
        self._payload = data
        return self

    def delete(self):
        self._operation = "delete"
        return self

    # Modifiers

    def eq(self, column: str, value):
        self._filters.append((column, lambda v: v == value))
        return self

    def in_(self, column: str, values):
        allowed = list(values)
        self._filters.append((column, lambda v: v in allowed))
        return self

    def order(self, column: str, desc: bool = False):
        self._order.append((column, desc))
        return self

    def limit(self, count: int):
        self._limit = count
        return self

    # Execution

    def _value(self, row: dict, column: str):
        if "." in column:
            relation, field = column.split(".", 1)
            related = self._client.related(relation, row)
            return related.get(field) if related else None
        return row.get(column)

    def _matches(self, row: dict) -> bool:
        return all(test(self._value(row, column)) for column, test in self._filters)

    def _embed(self, row: dict) -> dict:
        result = copy.deepcopy(row)
        for relation in RELATIONS:
            if relation in self._columns:
                result[relation] = copy.deepcopy(self._client.related(relation, row))
        return result

    def execute(self) -> MockSupabaseResponse:
        self._client.check_failure(self._table, self._operation)
        rows = self._client.rows(self._table)

        if self._operation == "insert":
            return MockSupabaseResponse(self._client.insert_rows(self._table, self._payload))

        matching = [row for row in rows if self._matches(row)]

        if self._operation == "update":
            now = datetime.utcnow().isoformat() + "Z"
            for row in matching:
                row.update(copy.deepcopy(self._payload))
                row["updated_at"] = now
            return MockSupabaseResponse([copy.deepcopy(r) for r in matching])

        if self._operation == "delete":
            ids = {id(r) for r in matching}
            rows[:] = [r for r in rows if id(r) not in ids]
            return MockSupabaseResponse(matching)

        for column, desc in reversed(self._order):
            matching.sort(
                key=lambda r: (r.get(column) is None, r.get(column) or ""),
                reverse=desc
            )
        if self._limit is not None:
            matching = matching[:self._limit]

        return MockSupabaseResponse([self._embed(r) for r in matching])


class MockSupabaseTable:
    """Entry point for queries on one table."""

    def __init__(self, client: "MockSupabaseClient", name: str):
        self._client = client
        self._name = name

    def _query(self) -> MockSupabaseQuery:
        return MockSupabaseQuery(self._client, self._name)

    def select(self, *args, **kwargs):
        return self._query().select(*args, **kwargs)

    def insert(self, data):
        return self._query().insert(data)

    def update(self, data):
        return self._query().update(data)

    def delete(self):
        return self._query().delete()


class MockSupabaseClient:
    """Mock Supabase client backed by dict rows."""

    def __init__(self):
        self._tables: dict[str, list[dict]] = {}
        self._failures: set[tuple[str, str]] = set()

    def set_table_data(self, table_name: str, data: list):
        """Replace the rows of a table."""
        self._tables[table_name] = [dict(row) for row in data]

    def rows(self, table_name: str) -> list[dict]:
        """Live rows of a table (mutations are visible to queries)."""
        return self._tables.setdefault(table_name, [])

    def related(self, relation: str, row: dict) -> Optional[dict]:
        table, column = RELATIONS[relation]
        key = row.get(column)
        for candidate in self.rows(table):
            if candidate.get("id") == key:
                return candidate
        return None

    def fail_on(self, table_name: str, operation: str):
        """Make every `operation` on the table raise."""
        self._failures.add((table_name, operation))

    def check_failure(self, table_name: str, operation: str):
        if (table_name, operation) in self._failures:
            raise Exception(f"simulated {operation} failure on {table_name}")

    def insert_rows(self, table_name: str, data) -> list[dict]:
        items = [data] if isinstance(data, dict) else list(data)
        rows = self.rows(table_name)
        unique = UNIQUE_KEYS.get(table_name)
        now = datetime.utcnow().isoformat() + "Z"

        inserted = []
        for item in items:
            row = copy.deepcopy(item)
            if unique and any(all(r.get(k) == row.get(k) for k in unique) for r in rows):
                raise Exception(
                    'duplicate key value violates unique constraint '
                    f'"{table_name}_{"_".join(unique)}_key" (code 23505)'
                )
            row.setdefault("id", str(uuid4()))
            row.setdefault("created_at", now)
            row.setdefault("updated_at", now)
            rows.append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    def table(self, name: str) -> MockSupabaseTable:
        return MockSupabaseTable(self, name)


# Modules that bind get_supabase_client at import time
PATCHED_MODULES = (
    "config.database",
    "services.unit_service",
    "services.project_service",
    "services.currency_service",
    "services.audit_service",
)

# Module-level service singletons
SINGLETONS = (
    ("services.unit_service", "_unit_service"),
    ("services.project_service", "_project_service"),
    ("services.currency_service", "_currency_service"),
    ("services.audit_service", "_audit_service"),
    ("services.unit_import_service", "_import_service"),
    ("services.unit_export_service", "_export_service"),
    ("services.bulk_operations_service", "_bulk_service"),
)


# ===================
# FIXTURES
# ===================

@pytest.fixture
def mock_supabase() -> MockSupabaseClient:
    """
    Mock Supabase client seeded with currencies and projects.

    Usage:
        def test_something(mock_db, mock_supabase):
            mock_supabase.set_table_data("units", [...])
    """
    client = MockSupabaseClient()
    client.set_table_data("currencies", seed_currencies())
    client.set_table_data("projects", seed_projects())
    client.set_table_data("units", [])
    client.set_table_data("audit_logs", [])
    return client


@pytest.fixture
def mock_db(mock_supabase) -> Generator:
    """Patch the database client with the mock in every service module."""
    with ExitStack() as stack:
        for module in PATCHED_MODULES:
            stack.enter_context(
                patch(f"{module}.get_supabase_client", return_value=mock_supabase)
            )
        yield mock_supabase


@pytest.fixture(autouse=True)
def reset_singletons(monkeypatch):
    """Each test builds its services against its own mock."""
    for module, name in SINGLETONS:
        monkeypatch.setattr(f"{module}.{name}", None)


@pytest.fixture
def current_user():
    """Admin of ORG_ID."""
    return CurrentUser(
        id="user-1",
        email="admin@example.com",
        role="ADMIN",
        organization_id=ORG_ID,
    )


@pytest.fixture
def admin_headers() -> dict:
    return auth_headers("ADMIN")


@pytest.fixture
def client(mock_db):
    """FastAPI TestClient over the mocked database."""
    from fastapi.testclient import TestClient
    from main import app
    return TestClient(app)
