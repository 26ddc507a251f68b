"""
pytest configuration and fixtures.
"""

import copy
import itertools
from typing import Any, Dict, Generator, List, Mapping, Optional, Sequence

import pytest
from fastapi.testclient import TestClient

from funcgame.api.deps import get_bcrypt_rounds, get_store
from funcgame.errors import BackendUnavailable
from funcgame.main import app
from funcgame.store import Filter, QueryResult


def _matches(row: Mapping[str, Any], f: Filter) -> bool:
    value = row.get(f.column)
    if f.op == "eq":
        return value is not None and str(value) == str(f.value)
    if f.op == "ilike":
        needle = str(f.value).strip("%").lower()
        return value is not None and needle in str(value).lower()
    if value is None:
        return False
    if f.op == "gte":
        return float(value) >= float(f.value)
    if f.op == "lte":
        return float(value) <= float(f.value)
    raise AssertionError(f"unexpected op {f.op}")


class InMemoryStore:
    """Stand-in for SupabaseStore that evaluates filters over dict rows."""

    def __init__(self) -> None:
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.calls: List[tuple] = []
        self.fail_with: Optional[str] = None
        self._ids = itertools.count(1)

    def seed(self, table: str, *rows: Dict[str, Any]) -> List[Dict[str, Any]]:
        out = []
        for r in rows:
            row = dict(r)
            row.setdefault("id", next(self._ids))
            self.tables.setdefault(table, []).append(row)
            out.append(row)
        return out

    def _check(self, table: str, op: str) -> None:
        self.calls.append((op, table))
        if self.fail_with is not None:
            raise BackendUnavailable(self.fail_with, table=table, operation=op)

    def _filter(self, table: str, filters: Sequence[Filter], any_of: Sequence[Filter]) -> List[Dict[str, Any]]:
        rows = self.tables.get(table, [])
        rows = [r for r in rows if all(_matches(r, f) for f in filters)]
        if any_of:
            rows = [r for r in rows if any(_matches(r, f) for f in any_of)]
        return rows

    async def select(self, table, *, columns="*", filters=(), any_of=(), start=None, end=None, limit=None, count=False):
        self._check(table, "select")
        rows = self._filter(table, filters, any_of)
        total = len(rows) if count else None
        if start is not None and end is not None:
            rows = rows[start:end + 1]
        if limit is not None:
            rows = rows[:limit]
        return QueryResult(rows=copy.deepcopy(rows), count=total)

    async def count(self, table, *, filters=(), any_of=()):
        self._check(table, "count")
        return len(self._filter(table, filters, any_of))

    async def insert(self, table, rows):
        self._check(table, "insert")
        return QueryResult(rows=copy.deepcopy(self.seed(table, *rows)))

    async def update(self, table, patch, *, filters):
        self._check(table, "update")
        matched = self._filter(table, filters, ())
        for r in matched:
            r.update(patch)
        return QueryResult(rows=copy.deepcopy(matched))

    async def delete(self, table, *, filters):
        self._check(table, "delete")
        matched = self._filter(table, filters, ())
        self.tables[table] = [r for r in self.tables.get(table, []) if r not in matched]
        return QueryResult(rows=copy.deepcopy(matched))

    async def aclose(self):
        self.calls.append(("aclose", None))


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def client(store: InMemoryStore) -> Generator[TestClient, None, None]:
    """Test client wired to the in-memory store; startup hooks are not run."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_bcrypt_rounds] = lambda: 4
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
