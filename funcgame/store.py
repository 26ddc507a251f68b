# store.py
# Developer note:
# - Supabase (PostgREST) is the single source of truth for every table this server touches.
# - One SupabaseStore is opened at startup and shared read-only by all requests.
# - Handlers never build PostgREST queries themselves; they describe filters with `Filter`.
"""
SupabaseStore: thin async gateway over the hosted relational store.

Each public method is exactly one round trip. Errors returned by PostgREST and
transport failures are raised as BackendUnavailable carrying the raw message;
"not found" is never decided here.

Python:
  from funcgame.store import open_store, eq
  store = await open_store(settings)
  result = await store.select("users", filters=[eq("id", "42")])
  rows = result.rows
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, acreate_client

from funcgame.config import Settings
from funcgame.errors import BackendUnavailable

logger = logging.getLogger(__name__)

_FILTER_OPS = frozenset({"eq", "gte", "lte", "ilike"})


# ----------------------------
# Query description
# ----------------------------

@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in _FILTER_OPS:
            raise ValueError(f"unsupported filter op: {self.op!r}")

    def render(self) -> str:
        """PostgREST logic-tree form, used inside `or=(...)`."""
        return f"{self.column}.{self.op}.{self.value}"


def eq(column: str, value: Any) -> Filter:
    return Filter(column, "eq", value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, "gte", value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, "lte", value)


def contains_ci(column: str, text: str) -> Filter:
    """Case-insensitive substring match."""
    return Filter(column, "ilike", f"%{text}%")


@dataclass
class QueryResult:
    rows: List[Dict[str, Any]] = field(default_factory=list)
    count: Optional[int] = None

    def first(self) -> Optional[Dict[str, Any]]:
        return self.rows[0] if self.rows else None


def _apply_filters(query: Any, filters: Sequence[Filter], any_of: Sequence[Filter]) -> Any:
    for f in filters:
        query = getattr(query, f.op)(f.column, f.value)
    if any_of:
        query = query.or_(",".join(f.render() for f in any_of))
    return query


# ----------------------------
# Gateway
# ----------------------------

class SupabaseStore:
    def __init__(self, client: AsyncClient) -> None:
        self._client: Optional[AsyncClient] = client

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise BackendUnavailable("storage client is closed")
        return self._client

    async def _execute(self, table: str, operation: str, query: Any) -> QueryResult:
        try:
            resp = await query.execute()
        except APIError as exc:
            message = exc.message or str(exc)
            logger.warning("Supabase error (%s %s): %s", operation, table, message)
            raise BackendUnavailable(message, table=table, operation=operation) from exc
        except httpx.HTTPError as exc:
            logger.warning("Supabase transport error (%s %s): %s", operation, table, exc, exc_info=True)
            raise BackendUnavailable(str(exc), table=table, operation=operation) from exc

        data = resp.data
        if data is None:
            rows: List[Dict[str, Any]] = []
        elif isinstance(data, list):
            rows = list(data)
        else:
            rows = [data]
        return QueryResult(rows=rows, count=resp.count)

    async def select(
        self,
        table: str,
        *,
        columns: str = "*",
        filters: Sequence[Filter] = (),
        any_of: Sequence[Filter] = (),
        start: Optional[int] = None,
        end: Optional[int] = None,
        limit: Optional[int] = None,
        count: bool = False,
    ) -> QueryResult:
        """Select rows. `start`/`end` are an inclusive row range; `count` asks for an exact total."""
        query = self.client.table(table).select(columns, count="exact" if count else None)
        query = _apply_filters(query, filters, any_of)
        if start is not None and end is not None:
            query = query.range(start, end)
        if limit is not None:
            query = query.limit(limit)
        return await self._execute(table, "select", query)

    async def count(self, table: str, *, filters: Sequence[Filter] = (), any_of: Sequence[Filter] = ()) -> int:
        query = self.client.table(table).select("*", count="exact", head=True)
        query = _apply_filters(query, filters, any_of)
        result = await self._execute(table, "count", query)
        return int(result.count or 0)

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> QueryResult:
        query = self.client.table(table).insert([dict(r) for r in rows])
        return await self._execute(table, "insert", query)

    async def update(self, table: str, patch: Mapping[str, Any], *, filters: Sequence[Filter]) -> QueryResult:
        if not filters:
            raise ValueError("update requires at least one filter")
        query = self.client.table(table).update(dict(patch))
        query = _apply_filters(query, filters, ())
        return await self._execute(table, "update", query)

    async def delete(self, table: str, *, filters: Sequence[Filter]) -> QueryResult:
        if not filters:
            raise ValueError("delete requires at least one filter")
        query = self.client.table(table).delete()
        query = _apply_filters(query, filters, ())
        return await self._execute(table, "delete", query)

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        await client.postgrest.aclose()
        logger.info("Supabase client closed")


async def open_store(settings: Settings) -> SupabaseStore:
    client = await acreate_client(settings.supabase_url, settings.supabase_key)
    logger.info("Supabase client ready: %s", settings.supabase_url)
    return SupabaseStore(client)
