from __future__ import annotations

from typing import Tuple

from fastapi import Query, Request

from funcgame.config import DEFAULT_BCRYPT_ROUNDS
from funcgame.errors import BackendUnavailable
from funcgame.services.common import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, page_bounds
from funcgame.store import SupabaseStore


def get_store(request: Request) -> SupabaseStore:
    """Shared store handle opened by the startup hook."""
    store = getattr(request.app.state, "store", None)
    if store is None:
        raise BackendUnavailable("storage client is not initialized")
    return store


def get_page_bounds(
    page: int = Query(DEFAULT_PAGE),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize"),
) -> Tuple[int, int]:
    return page_bounds(page, page_size)


def get_bcrypt_rounds(request: Request) -> int:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return DEFAULT_BCRYPT_ROUNDS
    return settings.bcrypt_rounds
